from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface import IMovieRepo
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.driven_adapter.model.movie_model import MovieModel


class MovieRepoImpl(IMovieRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _model_to_entity(model: MovieModel) -> Movie:
        return Movie(
            id=model.id,
            title=model.title,
            genre=model.genre,
            duration=model.duration,
            rating=model.rating,
            release_year=model.release_year,
        )

    @Logger.io
    async def find_by_id(self, *, movie_id: int) -> Optional[Movie]:
        async with self.session_factory() as session:
            model = await session.get(MovieModel, movie_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_by_title(self, *, title: str) -> Optional[Movie]:
        async with self.session_factory() as session:
            result = await session.execute(select(MovieModel).where(MovieModel.title == title))
            model = result.scalar_one_or_none()
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def list_all(self) -> List[Movie]:
        async with self.session_factory() as session:
            result = await session.execute(select(MovieModel).order_by(MovieModel.id))
            return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def create(self, *, movie: Movie) -> Movie:
        async with self.session_factory() as session:
            model = MovieModel(
                title=movie.title,
                genre=movie.genre,
                duration=movie.duration,
                rating=movie.rating,
                release_year=movie.release_year,
            )
            session.add(model)
            try:
                await session.commit()
            except IntegrityError as e:
                # Unique title lost to a concurrent insert
                raise ConflictError(f'Movie "{movie.title}" already exists') from e
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def update(self, *, title: str, movie: Movie) -> Optional[Movie]:
        async with self.session_factory() as session:
            result = await session.execute(select(MovieModel).where(MovieModel.title == title))
            model = result.scalar_one_or_none()
            if model is None:
                return None

            model.title = movie.title
            model.genre = movie.genre
            model.duration = movie.duration
            model.rating = movie.rating
            model.release_year = movie.release_year
            try:
                await session.commit()
            except IntegrityError as e:
                raise ConflictError(f'Movie with title "{movie.title}" already exists') from e
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def delete(self, *, title: str) -> Optional[Movie]:
        async with self.session_factory() as session:
            result = await session.execute(select(MovieModel).where(MovieModel.title == title))
            model = result.scalar_one_or_none()
            if model is None:
                return None

            deleted = self._model_to_entity(model)
            await session.delete(model)
            await session.commit()
            return deleted
