"""
SQLAlchemy repositories against a file-backed SQLite database (aiosqlite)

Covers the mapping between rows and entities, the overlap query and guard,
and the conditional seat write.
"""

import asyncio
from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from pathlib import Path

import pytest
import uuid_utils

from src.platform.database.orm_db_setting import Database
from src.platform.exception.exceptions import ConflictError
from src.service.cinema.domain.entity.booking_entity import Booking
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.domain.entity.showtime_entity import Showtime
from src.service.cinema.domain.value_object import SeatInventory, TimeWindow
from src.service.cinema.driven_adapter.repo.booking_repo_impl import BookingRepoImpl
from src.service.cinema.driven_adapter.repo.movie_repo_impl import MovieRepoImpl
from src.service.cinema.driven_adapter.repo.showtime_repo_impl import ShowtimeRepoImpl


def _at(hour: int) -> datetime:
    return datetime(2025, 4, 1, hour, 0, tzinfo=timezone.utc)


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "cinema.db"}')
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def movie_repo(database: Database) -> MovieRepoImpl:
    return MovieRepoImpl(session_factory=database.session)


@pytest.fixture
def showtime_repo(database: Database) -> ShowtimeRepoImpl:
    return ShowtimeRepoImpl(session_factory=database.session)


@pytest.fixture
def booking_repo(database: Database) -> BookingRepoImpl:
    return BookingRepoImpl(session_factory=database.session)


@pytest.fixture
async def movie(movie_repo: MovieRepoImpl) -> Movie:
    return await movie_repo.create(
        movie=Movie.create(
            title='Inception', genre='Sci-Fi', duration=148, rating=8.8, release_year=2010
        )
    )


@pytest.fixture
async def showtime(showtime_repo: ShowtimeRepoImpl, movie: Movie) -> Showtime:
    return await showtime_repo.create(
        showtime=Showtime.create(
            movie_id=movie.id or 0,
            theater='Cinema 1',
            start_time=_at(18),
            end_time=_at(20),
            price=45.5,
            seat_capacity=10,
        )
    )


class TestMovieRepoImpl:
    @pytest.mark.asyncio
    async def test_create_and_find(self, movie_repo: MovieRepoImpl, movie: Movie) -> None:
        assert movie.id is not None
        assert await movie_repo.find_by_id(movie_id=movie.id) == movie
        assert await movie_repo.find_by_title(title='Inception') == movie
        assert await movie_repo.list_all() == [movie]

    @pytest.mark.asyncio
    async def test_duplicate_title_is_conflict(
        self, movie_repo: MovieRepoImpl, movie: Movie
    ) -> None:
        with pytest.raises(ConflictError):
            await movie_repo.create(
                movie=Movie.create(
                    title='Inception', genre='Drama', duration=90, rating=5, release_year=2001
                )
            )

    @pytest.mark.asyncio
    async def test_update_and_delete_by_title(
        self, movie_repo: MovieRepoImpl, movie: Movie
    ) -> None:
        updated = await movie_repo.update(title='Inception', movie=movie.apply_changes(rating=9.0))
        assert updated is not None
        assert updated.rating == 9.0

        deleted = await movie_repo.delete(title='Inception')
        assert deleted is not None
        assert await movie_repo.find_by_title(title='Inception') is None
        assert await movie_repo.delete(title='Inception') is None


class TestShowtimeRepoImpl:
    @pytest.mark.asyncio
    async def test_round_trip_keeps_utc_and_seats(
        self, showtime_repo: ShowtimeRepoImpl, showtime: Showtime
    ) -> None:
        stored = await showtime_repo.find_by_id(showtime_id=showtime.id or 0)

        assert stored is not None
        assert stored.start_time == _at(18)
        assert stored.end_time == _at(20)
        assert stored.seats == SeatInventory.empty(10)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ('start', 'end', 'overlaps'),
        [(19, 21, True), (17, 19, True), (20, 22, False), (16, 18, False)],
    )
    async def test_find_overlapping(
        self,
        showtime_repo: ShowtimeRepoImpl,
        showtime: Showtime,
        start: int,
        end: int,
        overlaps: bool,
    ) -> None:
        found = await showtime_repo.find_overlapping(
            theater='Cinema 1', window=TimeWindow(start=_at(start), end=_at(end))
        )

        assert (found is not None) is overlaps

    @pytest.mark.asyncio
    async def test_find_overlapping_other_theater_and_self_excluded(
        self, showtime_repo: ShowtimeRepoImpl, showtime: Showtime
    ) -> None:
        window = TimeWindow(start=_at(18), end=_at(20))

        assert await showtime_repo.find_overlapping(theater='Cinema 2', window=window) is None
        assert (
            await showtime_repo.find_overlapping(
                theater='Cinema 1', window=window, exclude_id=showtime.id
            )
            is None
        )

    @pytest.mark.asyncio
    async def test_update_seats_is_conditional(
        self, showtime_repo: ShowtimeRepoImpl, showtime: Showtime
    ) -> None:
        # Arrange
        before = showtime.seats
        showtime_id = showtime.id or 0

        # Act
        first = await showtime_repo.update_seats(
            showtime_id=showtime_id, expected=before, new=before.reserve(4)
        )
        second = await showtime_repo.update_seats(
            showtime_id=showtime_id, expected=before, new=before.reserve(5)
        )

        # Assert - the stale writer did not overwrite seat 4
        assert first is True
        assert second is False
        stored = await showtime_repo.find_by_id(showtime_id=showtime_id)
        assert stored is not None
        assert stored.seats.reserved == frozenset({4})

    @pytest.mark.asyncio
    async def test_update_does_not_touch_seats(
        self, showtime_repo: ShowtimeRepoImpl, showtime: Showtime
    ) -> None:
        showtime_id = showtime.id or 0
        await showtime_repo.update_seats(
            showtime_id=showtime_id, expected=showtime.seats, new=showtime.seats.reserve(1)
        )

        updated = await showtime_repo.update(showtime=showtime.reschedule(price=60.0))

        assert updated is not None
        assert updated.price == 60.0
        assert updated.seats.reserved == frozenset({1})

    @pytest.mark.asyncio
    async def test_delete(self, showtime_repo: ShowtimeRepoImpl, showtime: Showtime) -> None:
        assert await showtime_repo.delete(showtime_id=showtime.id or 0) is not None
        assert await showtime_repo.find_by_id(showtime_id=showtime.id or 0) is None
        assert await showtime_repo.delete(showtime_id=showtime.id or 0) is None

    @pytest.mark.asyncio
    async def test_create_overlapping_is_conflict(
        self, showtime_repo: ShowtimeRepoImpl, showtime: Showtime
    ) -> None:
        with pytest.raises(ConflictError, match=f'overlaps with showtime {showtime.id}'):
            await showtime_repo.create(
                showtime=Showtime.create(
                    movie_id=showtime.movie_id,
                    theater='Cinema 1',
                    start_time=_at(19),
                    end_time=_at(21),
                    price=30.0,
                    seat_capacity=10,
                )
            )

    @pytest.mark.asyncio
    async def test_update_into_overlap_is_conflict(
        self, showtime_repo: ShowtimeRepoImpl, showtime: Showtime
    ) -> None:
        # Arrange
        later = await showtime_repo.create(
            showtime=Showtime.create(
                movie_id=showtime.movie_id,
                theater='Cinema 1',
                start_time=_at(20),
                end_time=_at(22),
                price=30.0,
                seat_capacity=10,
            )
        )

        # Act / Assert
        with pytest.raises(ConflictError):
            await showtime_repo.update(showtime=later.reschedule(start_time=_at(19)))
        stored = await showtime_repo.find_by_id(showtime_id=later.id or 0)
        assert stored is not None
        assert stored.start_time == _at(20)

    @pytest.mark.asyncio
    async def test_concurrent_overlapping_creates__one_conflict(
        self, showtime_repo: ShowtimeRepoImpl, movie: Movie
    ) -> None:
        # Act
        results = await asyncio.gather(
            *(
                showtime_repo.create(
                    showtime=Showtime.create(
                        movie_id=movie.id or 0,
                        theater='Cinema 2',
                        start_time=_at(hour),
                        end_time=_at(hour + 2),
                        price=30.0,
                        seat_capacity=10,
                    )
                )
                for hour in (18, 19)
            ),
            return_exceptions=True,
        )

        # Assert
        assert len([r for r in results if isinstance(r, ConflictError)]) == 1
        assert len([r for r in results if isinstance(r, Showtime)]) == 1
        stored = [s for s in await showtime_repo.list_all() if s.theater == 'Cinema 2']
        assert len(stored) == 1


class TestBookingRepoImpl:
    @pytest.mark.asyncio
    async def test_create_and_find(
        self, booking_repo: BookingRepoImpl, showtime: Showtime
    ) -> None:
        # Arrange
        booking = Booking.create(
            id=uuid_utils.uuid7(),
            user_id='84438967-f68f-4fa0-b620-0f08217e76af',
            showtime_id=showtime.id or 0,
            seat_number=5,
        )

        # Act
        await booking_repo.create(booking=booking)
        found = await booking_repo.find_by_id(booking_id=booking.id)

        # Assert
        assert found is not None
        assert found.id == booking.id
        assert found.seat_number == 5
        listed = await booking_repo.list_by_showtime(showtime_id=showtime.id or 0)
        assert [b.id for b in listed] == [booking.id]

    @pytest.mark.asyncio
    async def test_find_missing(self, booking_repo: BookingRepoImpl) -> None:
        assert await booking_repo.find_by_id(booking_id=uuid_utils.uuid7()) is None
