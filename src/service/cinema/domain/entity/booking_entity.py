from datetime import datetime, timezone
from typing import Optional

import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger


@attrs.define
class Booking:
    """Log entry of a reserved seat; the showtime's seat inventory is authoritative."""

    id: UUID
    user_id: str
    showtime_id: int
    seat_number: int
    created_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        user_id: str,
        showtime_id: int,
        seat_number: int,
    ) -> 'Booking':
        if seat_number < 1:
            raise DomainError('seatNumber must be at least 1')
        if not user_id:
            raise DomainError('userId is required')

        return cls(
            id=id,
            user_id=user_id,
            showtime_id=showtime_id,
            seat_number=seat_number,
            created_at=datetime.now(timezone.utc),
        )
