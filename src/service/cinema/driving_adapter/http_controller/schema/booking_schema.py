from datetime import datetime
from typing import Annotated, Optional

from pydantic import ConfigDict, Field, StringConstraints

from src.platform.types import UtilsUUID7
from src.service.cinema.domain.entity.booking_entity import Booking
from src.service.cinema.driving_adapter.http_controller.schema.camel_model import CamelModel


class BookingCreateRequest(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'showtimeId': 1,
                'seatNumber': 5,
                'userId': '3fa85f64-5717-4562-b3fc-2c963f66afa6',
            }
        }
    )

    showtime_id: int = Field(ge=1)
    seat_number: int = Field(ge=1)
    user_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=36)]


class BookingCreatedResponse(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={'example': {'bookingId': '01936d8f-5e73-7c4e-a9c5-123456789abc'}}
    )

    booking_id: UtilsUUID7


class BookingResponse(CamelModel):
    id: UtilsUUID7
    user_id: str
    showtime_id: int
    seat_number: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            user_id=booking.user_id,
            showtime_id=booking.showtime_id,
            seat_number=booking.seat_number,
            created_at=booking.created_at,
        )
