"""
In-memory Persistence Gateway

Three repositories sharing one lock and one set of tables. Each repository
call runs entirely under the lock, so the seat compare-and-swap and the
showtime overlap check-then-write are atomic across threads and asyncio tasks.
"""

import itertools
import threading
from typing import Dict, List, Optional

import attrs
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface import IBookingRepo, IMovieRepo, IShowtimeRepo
from src.service.cinema.domain.entity.booking_entity import Booking
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.domain.entity.showtime_entity import Showtime, overlap_conflict
from src.service.cinema.domain.value_object import SeatInventory, TimeWindow


class _Tables:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.movies: Dict[int, Movie] = {}
        self.showtimes: Dict[int, Showtime] = {}
        self.bookings: Dict[str, Booking] = {}
        self.movie_ids = itertools.count(1)
        self.showtime_ids = itertools.count(1)


class InMemoryMovieRepo(IMovieRepo):
    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def find_by_id(self, *, movie_id: int) -> Optional[Movie]:
        with self._tables.lock:
            return self._tables.movies.get(movie_id)

    async def find_by_title(self, *, title: str) -> Optional[Movie]:
        with self._tables.lock:
            return self._find_by_title(title)

    async def list_all(self) -> List[Movie]:
        with self._tables.lock:
            return list(self._tables.movies.values())

    @Logger.io
    async def create(self, *, movie: Movie) -> Movie:
        with self._tables.lock:
            created = attrs.evolve(movie, id=next(self._tables.movie_ids))
            self._tables.movies[created.id] = created  # type: ignore[index]
            return created

    @Logger.io
    async def update(self, *, title: str, movie: Movie) -> Optional[Movie]:
        with self._tables.lock:
            existing = self._find_by_title(title)
            if existing is None:
                return None
            updated = attrs.evolve(movie, id=existing.id)
            self._tables.movies[existing.id] = updated  # type: ignore[index]
            return updated

    @Logger.io
    async def delete(self, *, title: str) -> Optional[Movie]:
        with self._tables.lock:
            existing = self._find_by_title(title)
            if existing is None:
                return None
            return self._tables.movies.pop(existing.id)  # type: ignore[arg-type]

    def _find_by_title(self, title: str) -> Optional[Movie]:
        return next((m for m in self._tables.movies.values() if m.title == title), None)


class InMemoryShowtimeRepo(IShowtimeRepo):
    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def find_by_id(self, *, showtime_id: int) -> Optional[Showtime]:
        with self._tables.lock:
            return self._tables.showtimes.get(showtime_id)

    async def find_overlapping(
        self, *, theater: str, window: TimeWindow, exclude_id: Optional[int] = None
    ) -> Optional[Showtime]:
        with self._tables.lock:
            return self._find_overlapping(theater, window, exclude_id)

    async def list_all(self) -> List[Showtime]:
        with self._tables.lock:
            return list(self._tables.showtimes.values())

    @Logger.io
    async def create(self, *, showtime: Showtime) -> Showtime:
        with self._tables.lock:
            if conflict := self._find_overlapping(showtime.theater, showtime.window, None):
                raise overlap_conflict(showtime, conflict)
            created = attrs.evolve(showtime, id=next(self._tables.showtime_ids))
            self._tables.showtimes[created.id] = created  # type: ignore[index]
            return created

    @Logger.io
    async def update(self, *, showtime: Showtime) -> Optional[Showtime]:
        with self._tables.lock:
            stored = self._tables.showtimes.get(showtime.id)  # type: ignore[arg-type]
            if stored is None:
                return None
            if conflict := self._find_overlapping(showtime.theater, showtime.window, stored.id):
                raise overlap_conflict(showtime, conflict)
            updated = attrs.evolve(showtime, seats=stored.seats)
            self._tables.showtimes[stored.id] = updated  # type: ignore[index]
            return updated

    @Logger.io
    async def delete(self, *, showtime_id: int) -> Optional[Showtime]:
        with self._tables.lock:
            return self._tables.showtimes.pop(showtime_id, None)

    @Logger.io
    async def update_seats(
        self, *, showtime_id: int, expected: SeatInventory, new: SeatInventory
    ) -> bool:
        with self._tables.lock:
            stored = self._tables.showtimes.get(showtime_id)
            if stored is None or stored.seats != expected:
                return False
            self._tables.showtimes[showtime_id] = stored.with_seats(new)
            return True

    def _find_overlapping(
        self, theater: str, window: TimeWindow, exclude_id: Optional[int]
    ) -> Optional[Showtime]:
        return next(
            (
                showtime
                for showtime in self._tables.showtimes.values()
                if showtime.theater == theater
                and showtime.id != exclude_id
                and showtime.window.overlaps(window)
            ),
            None,
        )


class InMemoryBookingRepo(IBookingRepo):
    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        with self._tables.lock:
            self._tables.bookings[str(booking.id)] = booking
            return booking

    async def find_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        with self._tables.lock:
            return self._tables.bookings.get(str(booking_id))

    async def list_by_showtime(self, *, showtime_id: int) -> List[Booking]:
        with self._tables.lock:
            return [b for b in self._tables.bookings.values() if b.showtime_id == showtime_id]


class InMemoryCinemaStore:
    def __init__(self) -> None:
        tables = _Tables()
        self.movie_repo = InMemoryMovieRepo(tables)
        self.showtime_repo = InMemoryShowtimeRepo(tables)
        self.booking_repo = InMemoryBookingRepo(tables)
