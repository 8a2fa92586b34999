from typing import Any, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface import IMovieRepo
from src.service.cinema.domain.entity.movie_entity import Movie


class MovieCatalog:
    """Movie administration; movies are addressed by their unique title"""

    def __init__(self, *, movie_repo: IMovieRepo) -> None:
        self.movie_repo = movie_repo

    @classmethod
    @inject
    def depends(
        cls,
        movie_repo: IMovieRepo = Depends(Provide[Container.movie_repo]),
    ) -> Self:
        return cls(movie_repo=movie_repo)

    @Logger.io
    async def list_movies(self) -> List[Movie]:
        return await self.movie_repo.list_all()

    @Logger.io
    async def add_movie(
        self,
        *,
        title: str,
        genre: str,
        duration: int,
        rating: float,
        release_year: int,
    ) -> Movie:
        movie = Movie.create(
            title=title,
            genre=genre,
            duration=duration,
            rating=rating,
            release_year=release_year,
        )

        if await self.movie_repo.find_by_title(title=movie.title) is not None:
            Logger.base.warning(f'⚠️  [CATALOG] Movie "{movie.title}" already exists')
            raise ConflictError(f'Movie "{movie.title}" already exists')

        created = await self.movie_repo.create(movie=movie)
        Logger.base.info(f'🎞️  [CATALOG] Movie "{created.title}" added with ID {created.id}')
        return created

    @Logger.io
    async def update_movie(self, *, title: str, changes: dict[str, Any]) -> Movie:
        existing = await self.movie_repo.find_by_title(title=title)
        if existing is None:
            raise NotFoundError(f'Movie "{title}" not found')

        updated = existing.apply_changes(**changes)
        if updated.title != existing.title:
            if await self.movie_repo.find_by_title(title=updated.title) is not None:
                raise ConflictError(f'Movie with title "{updated.title}" already exists')

        saved = await self.movie_repo.update(title=title, movie=updated)
        if saved is None:
            raise NotFoundError(f'Movie "{title}" not found')

        Logger.base.info(f'🛠️  [CATALOG] Movie "{title}" updated')
        return saved

    @Logger.io
    async def delete_movie(self, *, title: str) -> Movie:
        deleted = await self.movie_repo.delete(title=title)
        if deleted is None:
            raise NotFoundError(f'Movie "{title}" not found')

        Logger.base.info(f'🗑️  [CATALOG] Movie "{title}" deleted')
        return deleted
