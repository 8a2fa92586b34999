from typing import Annotated, Optional

from pydantic import ConfigDict, Field, StringConstraints

from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.driving_adapter.http_controller.schema.camel_model import CamelModel


NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class MovieCreateRequest(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'title': 'Inception',
                'genre': 'Action',
                'duration': 148,
                'rating': 8.8,
                'releaseYear': 2010,
            }
        }
    )

    title: NonBlankStr
    genre: NonBlankStr
    duration: int = Field(ge=1)
    rating: float = Field(ge=0, le=10)
    release_year: int = Field(ge=1900)  # Upper bound (current year) checked by the domain


class MovieUpdateRequest(CamelModel):
    model_config = ConfigDict(
        extra='forbid',
        json_schema_extra={'example': {'rating': 9.0}},
    )

    title: Optional[NonBlankStr] = None
    genre: Optional[NonBlankStr] = None
    duration: Optional[int] = Field(default=None, ge=1)
    rating: Optional[float] = Field(default=None, ge=0, le=10)
    release_year: Optional[int] = Field(default=None, ge=1900)


class MovieResponse(CamelModel):
    id: int
    title: str
    genre: str
    duration: int
    rating: float
    release_year: int

    @classmethod
    def from_entity(cls, movie: Movie) -> 'MovieResponse':
        return cls(
            id=movie.id or 0,
            title=movie.title,
            genre=movie.genre,
            duration=movie.duration,
            rating=movie.rating,
            release_year=movie.release_year,
        )
