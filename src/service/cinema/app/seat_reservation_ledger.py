from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils
from uuid_utils import UUID

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    NotFoundError,
    ReservationFailedError,
    SeatUnavailableError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.cinema_metrics import cinema_metrics
from src.service.cinema.app.interface import IBookingRepo, IShowtimeRepo
from src.service.cinema.app.showtime_scheduler import ShowtimeScheduler
from src.service.cinema.domain.entity.booking_entity import Booking


class SeatReservationLedger:
    """
    Seat occupancy and booking creation

    The showtime's seat inventory is the single source of truth. It is mutated
    only by `reserve_seat`, and only through the repository's conditional write
    (`update_seats`), so two concurrent reservations of one seat cannot both
    succeed.

    Booking flow:
        Pending → SeatChecked → SeatReserved → BookingPersisted
    Any failing step raises and no booking row is written.
    """

    def __init__(
        self,
        *,
        showtime_scheduler: ShowtimeScheduler,
        showtime_repo: IShowtimeRepo,
        booking_repo: IBookingRepo,
        max_attempts: int = 5,
    ) -> None:
        self.showtime_scheduler = showtime_scheduler
        self.showtime_repo = showtime_repo
        self.booking_repo = booking_repo
        self.max_attempts = max_attempts
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        showtime_scheduler: ShowtimeScheduler = Depends(ShowtimeScheduler.depends),
        showtime_repo: IShowtimeRepo = Depends(Provide[Container.showtime_repo]),
        booking_repo: IBookingRepo = Depends(Provide[Container.booking_repo]),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            showtime_scheduler=showtime_scheduler,
            showtime_repo=showtime_repo,
            booking_repo=booking_repo,
            max_attempts=config.SEAT_RESERVATION_MAX_ATTEMPTS,
        )

    @Logger.io
    async def is_seat_available(self, *, showtime_id: int, seat_number: int) -> bool:
        """False (never an error) for unknown showtimes and out-of-range seats"""
        showtime = await self.showtime_repo.find_by_id(showtime_id=showtime_id)
        if showtime is None:
            return False
        return showtime.seats.is_free(seat_number)

    @Logger.io
    async def reserve_seat(self, *, showtime_id: int, seat_number: int) -> bool:
        """
        Atomically reserve one seat

        Read-check-write against a fresh copy of the inventory, committed with a
        compare-and-swap. A lost swap means some seat of this showtime changed
        in between: re-read and retry. The retry re-checks vacancy, so if the
        winner took this very seat the answer is False.

        Returns:
            True only for the caller whose write landed; False when the
            showtime is unknown, the seat is out of range or taken, or every
            attempt lost to concurrent writers
        """
        for attempt in range(1, self.max_attempts + 1):
            showtime = await self.showtime_repo.find_by_id(showtime_id=showtime_id)
            if showtime is None or not showtime.seats.is_free(seat_number):
                return False

            reserved = showtime.seats.reserve(seat_number)
            if await self.showtime_repo.update_seats(
                showtime_id=showtime_id, expected=showtime.seats, new=reserved
            ):
                return True

            cinema_metrics.seat_write_conflicts.inc()
            Logger.base.info(
                f'🔁 [LEDGER] Seat write conflict on showtime {showtime_id} '
                f'(attempt {attempt}/{self.max_attempts})'
            )

        Logger.base.warning(
            f'⚠️  [LEDGER] Gave up reserving seat {seat_number} of showtime {showtime_id} '
            f'after {self.max_attempts} attempts'
        )
        return False

    @Logger.io
    async def create_booking(self, *, showtime_id: int, seat_number: int, user_id: str) -> UUID:
        """
        Book one seat for a user

        Returns:
            The new booking's UUID7

        Raises:
            NotFoundError: showtime does not exist
            SeatUnavailableError: seat is taken or out of range
            ReservationFailedError: seat looked free but a concurrent
                reservation won the write
        """
        booking_id = uuid_utils.uuid7()

        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={
                'booking.id': str(booking_id),
                'showtime.id': showtime_id,
                'seat.number': seat_number,
            },
        ):
            # Pending: validate the request before touching any state
            booking = Booking.create(
                id=booking_id,
                user_id=user_id,
                showtime_id=showtime_id,
                seat_number=seat_number,
            )

            try:
                await self.showtime_scheduler.get_by_id(showtime_id=showtime_id)
            except NotFoundError:
                cinema_metrics.booking_requests.labels(result='showtime_not_found').inc()
                raise

            # SeatChecked
            if not await self.is_seat_available(showtime_id=showtime_id, seat_number=seat_number):
                cinema_metrics.booking_requests.labels(result='seat_unavailable').inc()
                raise SeatUnavailableError(
                    f'Seat {seat_number} is not available for showtime {showtime_id}'
                )

            # SeatReserved
            if not await self.reserve_seat(showtime_id=showtime_id, seat_number=seat_number):
                cinema_metrics.booking_requests.labels(result='reservation_failed').inc()
                raise ReservationFailedError(
                    f'Failed to reserve seat {seat_number} for showtime {showtime_id}'
                )

            # BookingPersisted
            await self.booking_repo.create(booking=booking)
            cinema_metrics.booking_requests.labels(result='created').inc()

            Logger.base.info(
                f'🎟️  [LEDGER] Booking {booking_id}: user {user_id} '
                f'seat {seat_number} showtime {showtime_id}'
            )
            return booking.id

    @Logger.io
    async def get_booking(self, *, booking_id: UUID) -> Booking:
        booking = await self.booking_repo.find_by_id(booking_id=booking_id)
        if booking is None:
            raise NotFoundError(f'Booking {booking_id} not found')
        return booking
