from typing import AsyncContextManager, Callable, List, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface import IBookingRepo
from src.service.cinema.domain.entity.booking_entity import Booking
from src.service.cinema.driven_adapter.model.booking_model import BookingModel


class BookingRepoImpl(IBookingRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _model_to_entity(model: BookingModel) -> Booking:
        return Booking(
            id=UUID(str(model.id)),
            user_id=model.user_id,
            showtime_id=model.showtime_id,
            seat_number=model.seat_number,
            created_at=model.created_at,
        )

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        async with self.session_factory() as session:
            model = BookingModel(
                # SQLAlchemy's Uuid type expects the stdlib class
                id=uuid.UUID(str(booking.id)),
                user_id=booking.user_id,
                showtime_id=booking.showtime_id,
                seat_number=booking.seat_number,
            )
            if booking.created_at is not None:
                model.created_at = booking.created_at
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def find_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        async with self.session_factory() as session:
            model = await session.get(BookingModel, uuid.UUID(str(booking_id)))
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def list_by_showtime(self, *, showtime_id: int) -> List[Booking]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingModel)
                .where(BookingModel.showtime_id == showtime_id)
                .order_by(BookingModel.created_at)
            )
            return [self._model_to_entity(model) for model in result.scalars()]
