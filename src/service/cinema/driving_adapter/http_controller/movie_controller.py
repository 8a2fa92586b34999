from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.movie_catalog import MovieCatalog
from src.service.cinema.driving_adapter.http_controller.schema.movie_schema import (
    MovieCreateRequest,
    MovieResponse,
    MovieUpdateRequest,
)


router = APIRouter()


@router.get('/all')
@Logger.io
async def list_movies(
    catalog: MovieCatalog = Depends(MovieCatalog.depends),
) -> List[MovieResponse]:
    movies = await catalog.list_movies()
    return [MovieResponse.from_entity(movie) for movie in movies]


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def add_movie(
    request: MovieCreateRequest,
    catalog: MovieCatalog = Depends(MovieCatalog.depends),
) -> MovieResponse:
    movie = await catalog.add_movie(
        title=request.title,
        genre=request.genre,
        duration=request.duration,
        rating=request.rating,
        release_year=request.release_year,
    )
    return MovieResponse.from_entity(movie)


@router.post('/update/{movie_title}')
@Logger.io
async def update_movie(
    movie_title: str,
    request: MovieUpdateRequest,
    catalog: MovieCatalog = Depends(MovieCatalog.depends),
) -> MovieResponse:
    movie = await catalog.update_movie(
        title=movie_title, changes=request.model_dump(exclude_unset=True)
    )
    return MovieResponse.from_entity(movie)


@router.delete('/{movie_title}', status_code=status.HTTP_200_OK)
@Logger.io
async def delete_movie(
    movie_title: str,
    catalog: MovieCatalog = Depends(MovieCatalog.depends),
) -> MovieResponse:
    movie = await catalog.delete_movie(title=movie_title)
    return MovieResponse.from_entity(movie)
