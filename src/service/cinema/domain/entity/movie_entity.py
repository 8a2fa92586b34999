from datetime import datetime, timezone
from typing import Any, Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger


MIN_RELEASE_YEAR = 1900
MAX_RATING = 10


def _current_year() -> int:
    return datetime.now(timezone.utc).year


@attrs.define
class Movie:
    title: str
    genre: str
    duration: int
    rating: float
    release_year: int
    id: Optional[int] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        title: str,
        genre: str,
        duration: int,
        rating: float,
        release_year: int,
    ) -> 'Movie':
        movie = cls(
            title=title.strip(),
            genre=genre.strip(),
            duration=duration,
            rating=rating,
            release_year=release_year,
        )
        movie.validate()
        return movie

    @Logger.io
    def apply_changes(self, **changes: Any) -> 'Movie':
        """Return a copy with the given fields replaced (None means unchanged)"""
        changes = {key: value for key, value in changes.items() if value is not None}
        for key in ('title', 'genre'):
            if key in changes:
                changes[key] = changes[key].strip()
        updated = attrs.evolve(self, **changes)
        updated.validate()
        return updated

    def validate(self) -> None:
        if not self.title:
            raise DomainError('Title cannot be empty or just spaces')
        if not self.genre:
            raise DomainError('Genre cannot be empty or just spaces')
        if self.duration < 1:
            raise DomainError('Duration must be at least 1 minute')
        if not 0 <= self.rating <= MAX_RATING:
            raise DomainError(f'Rating must be between 0 and {MAX_RATING}')
        if self.release_year < MIN_RELEASE_YEAR:
            raise DomainError(f'Release year cannot be earlier than {MIN_RELEASE_YEAR}')
        current_year = _current_year()
        if self.release_year > current_year:
            raise DomainError(f'Release year cannot be greater than {current_year}')
