from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.cinema.domain.entity.movie_entity import Movie


class IMovieRepo(ABC):
    @abstractmethod
    async def find_by_id(self, *, movie_id: int) -> Optional[Movie]:
        pass

    @abstractmethod
    async def find_by_title(self, *, title: str) -> Optional[Movie]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Movie]:
        pass

    @abstractmethod
    async def create(self, *, movie: Movie) -> Movie:
        """Persist a new movie and return it with its store-assigned id"""
        pass

    @abstractmethod
    async def update(self, *, title: str, movie: Movie) -> Optional[Movie]:
        """Replace the movie currently stored under `title` (the title itself may change)"""
        pass

    @abstractmethod
    async def delete(self, *, title: str) -> Optional[Movie]:
        pass
