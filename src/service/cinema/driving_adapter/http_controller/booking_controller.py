from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.cinema.app.seat_reservation_ledger import SeatReservationLedger
from src.service.cinema.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreatedResponse,
    BookingCreateRequest,
    BookingResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    ledger: SeatReservationLedger = Depends(SeatReservationLedger.depends),
) -> BookingCreatedResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('showtime_id', request.showtime_id)
        span.set_attribute('seat_number', request.seat_number)

        booking_id = await ledger.create_booking(
            showtime_id=request.showtime_id,
            seat_number=request.seat_number,
            user_id=request.user_id,
        )
        span.set_attribute('booking.id', str(booking_id))
        return BookingCreatedResponse(booking_id=booking_id)


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: UtilsUUID7,
    ledger: SeatReservationLedger = Depends(SeatReservationLedger.depends),
) -> BookingResponse:
    booking = await ledger.get_booking(booking_id=booking_id)
    return BookingResponse.from_entity(booking)
