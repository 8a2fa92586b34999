"""
Showtime Repository Implementation (SQLAlchemy)

Seats are stored as a flag string in `showtime.seats_available`. The seat
write is a conditional UPDATE keyed on the previously read flags, so the
database row itself arbitrates concurrent reservations: of two writers
that read the same flags, only the first UPDATE matches.

Creates and updates run the overlap query and the write in one transaction
while holding a per-theater lock. On PostgreSQL that is a transaction-scoped
advisory lock (`pg_advisory_xact_lock(hashtext(theater))`), which serializes
writers across processes. Other dialects (SQLite for tests and local runs)
fall back to an in-process asyncio lock per theater.
"""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface import IShowtimeRepo
from src.service.cinema.domain.entity.showtime_entity import Showtime, overlap_conflict
from src.service.cinema.domain.value_object import SeatInventory, TimeWindow
from src.service.cinema.driven_adapter.model.showtime_model import ShowtimeModel


class ShowtimeRepoImpl(IShowtimeRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory
        self._theater_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @staticmethod
    def _model_to_entity(model: ShowtimeModel) -> Showtime:
        return Showtime(
            id=model.id,
            movie_id=model.movie_id,
            theater=model.theater,
            start_time=model.start_time,
            end_time=model.end_time,
            price=model.price,
            seats=SeatInventory.from_flags(model.seats_available),
        )

    @asynccontextmanager
    async def _theater_guard(self, session: AsyncSession, theater: str) -> AsyncIterator[None]:
        if session.bind.dialect.name == 'postgresql':  # type: ignore[union-attr]
            # Released when the session's transaction commits or rolls back
            await session.execute(select(func.pg_advisory_xact_lock(func.hashtext(theater))))
            yield
        else:
            async with self._theater_locks[theater]:
                yield

    @staticmethod
    async def _first_overlapping(
        session: AsyncSession, *, theater: str, window: TimeWindow, exclude_id: Optional[int]
    ) -> Optional[ShowtimeModel]:
        stmt = select(ShowtimeModel).where(
            ShowtimeModel.theater == theater,
            ShowtimeModel.start_time < window.end,
            ShowtimeModel.end_time > window.start,
        )
        if exclude_id is not None:
            stmt = stmt.where(ShowtimeModel.id != exclude_id)
        stmt = stmt.order_by(ShowtimeModel.start_time).limit(1)

        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @Logger.io
    async def find_by_id(self, *, showtime_id: int) -> Optional[Showtime]:
        async with self.session_factory() as session:
            model = await session.get(ShowtimeModel, showtime_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_overlapping(
        self, *, theater: str, window: TimeWindow, exclude_id: Optional[int] = None
    ) -> Optional[Showtime]:
        async with self.session_factory() as session:
            model = await self._first_overlapping(
                session, theater=theater, window=window, exclude_id=exclude_id
            )
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def list_all(self) -> List[Showtime]:
        async with self.session_factory() as session:
            result = await session.execute(select(ShowtimeModel).order_by(ShowtimeModel.id))
            return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def create(self, *, showtime: Showtime) -> Showtime:
        async with self.session_factory() as session:
            async with self._theater_guard(session, showtime.theater):
                conflict = await self._first_overlapping(
                    session, theater=showtime.theater, window=showtime.window, exclude_id=None
                )
                if conflict is not None:
                    raise overlap_conflict(showtime, self._model_to_entity(conflict))

                model = ShowtimeModel(
                    movie_id=showtime.movie_id,
                    theater=showtime.theater,
                    start_time=showtime.start_time,
                    end_time=showtime.end_time,
                    price=showtime.price,
                    seats_available=showtime.seats.to_flags(),
                )
                session.add(model)
                await session.commit()
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def update(self, *, showtime: Showtime) -> Optional[Showtime]:
        async with self.session_factory() as session:
            async with self._theater_guard(session, showtime.theater):
                model = await session.get(ShowtimeModel, showtime.id)
                if model is None:
                    return None

                conflict = await self._first_overlapping(
                    session,
                    theater=showtime.theater,
                    window=showtime.window,
                    exclude_id=model.id,
                )
                if conflict is not None:
                    raise overlap_conflict(showtime, self._model_to_entity(conflict))

                model.movie_id = showtime.movie_id
                model.theater = showtime.theater
                model.start_time = showtime.start_time
                model.end_time = showtime.end_time
                model.price = showtime.price
                await session.commit()
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def delete(self, *, showtime_id: int) -> Optional[Showtime]:
        async with self.session_factory() as session:
            model = await session.get(ShowtimeModel, showtime_id)
            if model is None:
                return None

            deleted = self._model_to_entity(model)
            await session.delete(model)
            await session.commit()
            return deleted

    @Logger.io
    async def update_seats(
        self, *, showtime_id: int, expected: SeatInventory, new: SeatInventory
    ) -> bool:
        stmt = (
            update(ShowtimeModel)
            .where(
                ShowtimeModel.id == showtime_id,
                ShowtimeModel.seats_available == expected.to_flags(),
            )
            .values(seats_available=new.to_flags())
            .execution_options(synchronize_session=False)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount == 1  # type: ignore[attr-defined]
