from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.cinema_metrics import cinema_metrics
from src.service.cinema.app.interface import IMovieRepo, IShowtimeRepo
from src.service.cinema.domain.entity.showtime_entity import Showtime, overlap_conflict


class ShowtimeScheduler:
    """
    Validates and stores showtimes.

    Invariant: two showtimes in the same theater never have intersecting
    [start, end) intervals. Every create/update runs the overlap check up
    front for a fast answer; the repository repeats it in the same
    transaction as the write, under a per-theater lock.
    """

    def __init__(
        self,
        *,
        showtime_repo: IShowtimeRepo,
        movie_repo: IMovieRepo,
        seats_per_showtime: int,
    ) -> None:
        self.showtime_repo = showtime_repo
        self.movie_repo = movie_repo
        self.seats_per_showtime = seats_per_showtime
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        showtime_repo: IShowtimeRepo = Depends(Provide[Container.showtime_repo]),
        movie_repo: IMovieRepo = Depends(Provide[Container.movie_repo]),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            showtime_repo=showtime_repo,
            movie_repo=movie_repo,
            seats_per_showtime=config.SEATS_PER_SHOWTIME,
        )

    @Logger.io
    async def create(
        self,
        *,
        theater: str,
        movie_id: int,
        start_time: datetime,
        end_time: datetime,
        price: float,
    ) -> Showtime:
        """
        Create a showtime with every seat free

        Raises:
            NotFoundError: movie does not exist
            ConflictError: interval overlaps another showtime in the theater
            DomainError: empty/inverted interval or non-positive price
        """
        with self.tracer.start_as_current_span(
            'use_case.create_showtime', attributes={'showtime.theater': theater}
        ):
            showtime = Showtime.create(
                movie_id=movie_id,
                theater=theater,
                start_time=start_time,
                end_time=end_time,
                price=price,
                seat_capacity=self.seats_per_showtime,
            )
            await self._ensure_movie_exists(movie_id=showtime.movie_id)
            await self._ensure_no_overlap(showtime=showtime, exclude_id=None)

            with self._counting_conflicts():
                created = await self.showtime_repo.create(showtime=showtime)
            Logger.base.info(
                f'🎬 [SCHEDULER] Showtime {created.id} scheduled in {created.theater} '
                f'{created.start_time.isoformat()} → {created.end_time.isoformat()}'
            )
            return created

    @Logger.io
    async def update(self, *, showtime_id: int, changes: dict[str, Any]) -> Showtime:
        """
        Apply a partial update

        The merged theater/start/end is checked for overlap against every other
        showtime (the record itself is excluded). Seats cannot be changed here.
        """
        with self.tracer.start_as_current_span(
            'use_case.update_showtime', attributes={'showtime.id': showtime_id}
        ):
            current = await self.get_by_id(showtime_id=showtime_id)
            updated = current.reschedule(**changes)

            if changes.get('movie_id') is not None:
                await self._ensure_movie_exists(movie_id=updated.movie_id)
            await self._ensure_no_overlap(showtime=updated, exclude_id=showtime_id)

            with self._counting_conflicts():
                saved = await self.showtime_repo.update(showtime=updated)
            if saved is None:
                # Deleted between the read and the write
                raise NotFoundError(f'Showtime with ID {showtime_id} not found')

            Logger.base.info(f'🛠️  [SCHEDULER] Showtime {showtime_id} updated')
            return saved

    @Logger.io
    async def delete(self, *, showtime_id: int) -> Showtime:
        deleted = await self.showtime_repo.delete(showtime_id=showtime_id)
        if deleted is None:
            raise NotFoundError(f'Showtime with ID {showtime_id} not found')

        Logger.base.info(f'🗑️  [SCHEDULER] Showtime {showtime_id} deleted')
        return deleted

    @Logger.io
    async def get_by_id(self, *, showtime_id: int) -> Showtime:
        showtime = await self.showtime_repo.find_by_id(showtime_id=showtime_id)
        if showtime is None:
            raise NotFoundError(f'Showtime with ID {showtime_id} not found')
        return showtime

    @Logger.io
    async def get_all(self) -> List[Showtime]:
        return await self.showtime_repo.list_all()

    async def _ensure_movie_exists(self, *, movie_id: int) -> None:
        if await self.movie_repo.find_by_id(movie_id=movie_id) is None:
            raise NotFoundError(f'Movie with ID {movie_id} not found')

    async def _ensure_no_overlap(self, *, showtime: Showtime, exclude_id: int | None) -> None:
        conflict = await self.showtime_repo.find_overlapping(
            theater=showtime.theater,
            window=showtime.window,
            exclude_id=exclude_id,
        )
        if conflict is not None:
            cinema_metrics.showtime_conflicts.inc()
            Logger.base.warning(
                f'⚠️  [SCHEDULER] {showtime.theater} overlap with showtime {conflict.id}'
            )
            raise overlap_conflict(showtime, conflict)

    @contextmanager
    def _counting_conflicts(self) -> Iterator[None]:
        # The store re-checks overlap atomically; a concurrent writer may win in between
        try:
            yield
        except ConflictError:
            cinema_metrics.showtime_conflicts.inc()
            raise
