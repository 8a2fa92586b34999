from datetime import datetime, timezone

import attrs

from src.platform.exception.exceptions import DomainError


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@attrs.frozen
class TimeWindow:
    """Half-open screening interval [start, end)."""

    start: datetime = attrs.field(converter=to_utc)
    end: datetime = attrs.field(converter=to_utc)

    def __attrs_post_init__(self) -> None:
        if self.end <= self.start:
            raise DomainError('endTime must be later than startTime')

    def overlaps(self, other: 'TimeWindow') -> bool:
        # Back-to-back screenings (one ends exactly when the next starts) do not overlap
        return self.start < other.end and self.end > other.start
