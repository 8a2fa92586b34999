from typing import List

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.seat_reservation_ledger import SeatReservationLedger
from src.service.cinema.app.showtime_scheduler import ShowtimeScheduler
from src.service.cinema.driving_adapter.http_controller.schema.showtime_schema import (
    SeatAvailabilityResponse,
    ShowtimeCreateRequest,
    ShowtimeResponse,
    ShowtimeUpdateRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get('')
@Logger.io
async def list_showtimes(
    scheduler: ShowtimeScheduler = Depends(ShowtimeScheduler.depends),
) -> List[ShowtimeResponse]:
    showtimes = await scheduler.get_all()
    return [ShowtimeResponse.from_entity(showtime) for showtime in showtimes]


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_showtime(
    request: ShowtimeCreateRequest,
    scheduler: ShowtimeScheduler = Depends(ShowtimeScheduler.depends),
) -> ShowtimeResponse:
    with tracer.start_as_current_span('controller.create_showtime') as span:
        span.set_attribute('movie_id', request.movie_id)
        span.set_attribute('theater', request.theater)

        showtime = await scheduler.create(
            theater=request.theater,
            movie_id=request.movie_id,
            start_time=request.start_time,
            end_time=request.end_time,
            price=request.price,
        )
        return ShowtimeResponse.from_entity(showtime)


@router.get('/{showtime_id}')
@Logger.io
async def get_showtime(
    showtime_id: int,
    scheduler: ShowtimeScheduler = Depends(ShowtimeScheduler.depends),
) -> ShowtimeResponse:
    showtime = await scheduler.get_by_id(showtime_id=showtime_id)
    return ShowtimeResponse.from_entity(showtime)


@router.get('/{showtime_id}/seats/{seat_number}')
@Logger.io
async def get_seat_availability(
    showtime_id: int,
    seat_number: int,
    ledger: SeatReservationLedger = Depends(SeatReservationLedger.depends),
) -> SeatAvailabilityResponse:
    available = await ledger.is_seat_available(showtime_id=showtime_id, seat_number=seat_number)
    return SeatAvailabilityResponse(
        showtime_id=showtime_id, seat_number=seat_number, available=available
    )


@router.post('/update/{showtime_id}')
@Logger.io
async def update_showtime(
    showtime_id: int,
    request: ShowtimeUpdateRequest,
    scheduler: ShowtimeScheduler = Depends(ShowtimeScheduler.depends),
) -> ShowtimeResponse:
    showtime = await scheduler.update(
        showtime_id=showtime_id, changes=request.model_dump(exclude_unset=True)
    )
    return ShowtimeResponse.from_entity(showtime)


@router.delete('/{showtime_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def delete_showtime(
    showtime_id: int,
    scheduler: ShowtimeScheduler = Depends(ShowtimeScheduler.depends),
) -> ShowtimeResponse:
    showtime = await scheduler.delete(showtime_id=showtime_id)
    return ShowtimeResponse.from_entity(showtime)
