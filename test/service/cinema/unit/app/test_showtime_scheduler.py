"""
Unit tests for ShowtimeScheduler

Repositories are AsyncMocks; the scheduler owns the validation order:
entity validation, movie existence, theater overlap, then the write.
"""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, Mock

import attrs
from prometheus_client import REGISTRY
import pytest

from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.service.cinema.app.showtime_scheduler import ShowtimeScheduler
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.domain.entity.showtime_entity import Showtime
from src.service.cinema.domain.value_object import SeatInventory


START = datetime(2025, 4, 1, 18, 0, tzinfo=timezone.utc)
END = datetime(2025, 4, 1, 20, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_showtime_repo() -> Mock:
    repo = AsyncMock()
    repo.find_overlapping.return_value = None
    repo.create.side_effect = lambda *, showtime: attrs.evolve(showtime, id=1)
    repo.update.side_effect = lambda *, showtime: showtime
    return repo


@pytest.fixture
def mock_movie_repo() -> Mock:
    repo = AsyncMock()
    repo.find_by_id.return_value = Movie(
        id=1, title='Inception', genre='Sci-Fi', duration=148, rating=8.8, release_year=2010
    )
    return repo


@pytest.fixture
def scheduler(mock_showtime_repo: Mock, mock_movie_repo: Mock) -> ShowtimeScheduler:
    return ShowtimeScheduler(
        showtime_repo=mock_showtime_repo,
        movie_repo=mock_movie_repo,
        seats_per_showtime=100,
    )


@pytest.fixture
def valid_showtime_params() -> dict[str, Any]:
    return {
        'theater': 'Cinema 1',
        'movie_id': 1,
        'start_time': START,
        'end_time': END,
        'price': 45.5,
    }


@pytest.fixture
def existing_showtime() -> Showtime:
    return Showtime(
        id=7,
        movie_id=1,
        theater='Cinema 1',
        start_time=START,
        end_time=END,
        price=45.5,
        seats=SeatInventory.empty(100).reserve(5),
    )


@pytest.mark.unit
class TestCreateShowtime:
    @pytest.mark.asyncio
    async def test_create_success__all_seats_free(
        self,
        scheduler: ShowtimeScheduler,
        mock_showtime_repo: Mock,
        valid_showtime_params: dict[str, Any],
    ) -> None:
        # Act
        showtime = await scheduler.create(**valid_showtime_params)

        # Assert
        assert showtime.id == 1
        assert showtime.seats == SeatInventory.empty(100)
        mock_showtime_repo.find_overlapping.assert_awaited_once()
        assert mock_showtime_repo.find_overlapping.await_args.kwargs['exclude_id'] is None
        mock_showtime_repo.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_fail__overlap(
        self,
        scheduler: ShowtimeScheduler,
        mock_showtime_repo: Mock,
        valid_showtime_params: dict[str, Any],
        existing_showtime: Showtime,
    ) -> None:
        # Arrange
        mock_showtime_repo.find_overlapping.return_value = existing_showtime

        # Act & Assert
        with pytest.raises(ConflictError, match='overlaps with showtime 7'):
            await scheduler.create(**valid_showtime_params)
        mock_showtime_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_fail__unknown_movie(
        self,
        scheduler: ShowtimeScheduler,
        mock_movie_repo: Mock,
        mock_showtime_repo: Mock,
        valid_showtime_params: dict[str, Any],
    ) -> None:
        # Arrange
        mock_movie_repo.find_by_id.return_value = None

        # Act & Assert
        with pytest.raises(NotFoundError, match='Movie with ID 1 not found'):
            await scheduler.create(**valid_showtime_params)
        mock_showtime_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_fail__inverted_interval_checked_before_store(
        self,
        scheduler: ShowtimeScheduler,
        mock_showtime_repo: Mock,
        valid_showtime_params: dict[str, Any],
    ) -> None:
        # Arrange
        valid_showtime_params['end_time'] = START

        # Act & Assert
        with pytest.raises(DomainError):
            await scheduler.create(**valid_showtime_params)
        mock_showtime_repo.find_overlapping.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_fail__store_rejects_concurrent_overlap(
        self,
        scheduler: ShowtimeScheduler,
        mock_showtime_repo: Mock,
        valid_showtime_params: dict[str, Any],
    ) -> None:
        # Arrange - the up-front query passed, but another writer got the slot first
        mock_showtime_repo.create.side_effect = ConflictError(
            'Showtime overlaps with showtime 9 in theater "Cinema 1"'
        )
        before = REGISTRY.get_sample_value('showtime_overlap_conflicts_total') or 0.0

        # Act & Assert
        with pytest.raises(ConflictError, match='overlaps with showtime 9'):
            await scheduler.create(**valid_showtime_params)
        assert REGISTRY.get_sample_value('showtime_overlap_conflicts_total') == before + 1


@pytest.mark.unit
class TestUpdateShowtime:
    @pytest.mark.asyncio
    async def test_update_excludes_itself_from_overlap_check(
        self,
        scheduler: ShowtimeScheduler,
        mock_showtime_repo: Mock,
        existing_showtime: Showtime,
    ) -> None:
        # Arrange
        mock_showtime_repo.find_by_id.return_value = existing_showtime

        # Act
        updated = await scheduler.update(showtime_id=7, changes={'price': 60.0})

        # Assert
        assert updated.price == 60.0
        assert mock_showtime_repo.find_overlapping.await_args.kwargs['exclude_id'] == 7
        # Seats are carried over untouched
        assert updated.seats == existing_showtime.seats

    @pytest.mark.asyncio
    async def test_update_fail__unknown_showtime(
        self, scheduler: ShowtimeScheduler, mock_showtime_repo: Mock
    ) -> None:
        mock_showtime_repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError, match='Showtime with ID 99 not found'):
            await scheduler.update(showtime_id=99, changes={'price': 60.0})

    @pytest.mark.asyncio
    async def test_update_fail__seat_changes_rejected(
        self,
        scheduler: ShowtimeScheduler,
        mock_showtime_repo: Mock,
        existing_showtime: Showtime,
    ) -> None:
        mock_showtime_repo.find_by_id.return_value = existing_showtime

        with pytest.raises(DomainError, match='Seats cannot be modified'):
            await scheduler.update(showtime_id=7, changes={'seats_available': '0' * 100})
        mock_showtime_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_checks_new_movie(
        self,
        scheduler: ShowtimeScheduler,
        mock_showtime_repo: Mock,
        mock_movie_repo: Mock,
        existing_showtime: Showtime,
    ) -> None:
        mock_showtime_repo.find_by_id.return_value = existing_showtime
        mock_movie_repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError, match='Movie with ID 2 not found'):
            await scheduler.update(showtime_id=7, changes={'movie_id': 2})


@pytest.mark.unit
class TestReadAndDeleteShowtime:
    @pytest.mark.asyncio
    async def test_get_by_id_fail__not_found(
        self, scheduler: ShowtimeScheduler, mock_showtime_repo: Mock
    ) -> None:
        mock_showtime_repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await scheduler.get_by_id(showtime_id=3)

    @pytest.mark.asyncio
    async def test_delete_fail__not_found(
        self, scheduler: ShowtimeScheduler, mock_showtime_repo: Mock
    ) -> None:
        mock_showtime_repo.delete.return_value = None

        with pytest.raises(NotFoundError):
            await scheduler.delete(showtime_id=3)
