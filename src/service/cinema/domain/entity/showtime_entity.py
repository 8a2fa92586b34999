from datetime import datetime
from typing import Any, Optional

import attrs

from src.platform.exception.exceptions import ConflictError, DomainError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.domain.value_object import SeatInventory, TimeWindow, to_utc


# Fields an update may touch; seats change only through reservation
RESCHEDULABLE_FIELDS = frozenset({'movie_id', 'theater', 'start_time', 'end_time', 'price'})


@attrs.define
class Showtime:
    movie_id: int
    theater: str
    start_time: datetime = attrs.field(converter=to_utc)
    end_time: datetime = attrs.field(converter=to_utc)
    price: float
    seats: SeatInventory
    id: Optional[int] = None

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(start=self.start_time, end=self.end_time)

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        movie_id: int,
        theater: str,
        start_time: datetime,
        end_time: datetime,
        price: float,
        seat_capacity: int,
    ) -> 'Showtime':
        showtime = cls(
            movie_id=movie_id,
            theater=theater.strip(),
            start_time=start_time,
            end_time=end_time,
            price=price,
            seats=SeatInventory.empty(seat_capacity),
        )
        showtime.validate()
        return showtime

    @Logger.io
    def reschedule(self, **changes: Any) -> 'Showtime':
        """
        Apply a partial update and re-validate.

        Raises:
            DomainError: on attempts to set seats or unknown fields, or when the
                merged showtime is invalid (empty interval, non-positive price)
        """
        unknown = set(changes) - RESCHEDULABLE_FIELDS
        if unknown:
            if any(field.startswith('seat') for field in unknown):
                raise DomainError('Seats cannot be modified directly; book a seat instead')
            raise DomainError(f'Unknown showtime fields: {sorted(unknown)}')

        changes = {key: value for key, value in changes.items() if value is not None}
        if 'theater' in changes:
            changes['theater'] = changes['theater'].strip()
        updated = attrs.evolve(self, **changes)
        updated.validate()
        return updated

    def with_seats(self, seats: SeatInventory) -> 'Showtime':
        return attrs.evolve(self, seats=seats)

    def validate(self) -> None:
        if not self.theater:
            raise DomainError('Theater cannot be empty')
        if self.price <= 0:
            raise DomainError('Price must be positive')
        if self.end_time <= self.start_time:
            raise DomainError('endTime must be later than startTime')


def overlap_conflict(showtime: Showtime, existing: Showtime) -> ConflictError:
    return ConflictError(
        f'Showtime overlaps with showtime {existing.id} in theater "{showtime.theater}"'
    )
