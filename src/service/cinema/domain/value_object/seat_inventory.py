"""
Seat inventory of a single showtime.

Seat numbers are 1-based everywhere outside this module. The stored form is a
flag string where position `n - 1` holds seat `n` ('0' free, '1' reserved).
"""

from typing import Self

import attrs

from src.platform.exception.exceptions import DomainError, SeatUnavailableError


FREE_FLAG = '0'
RESERVED_FLAG = '1'


def _validate_capacity(instance: 'SeatInventory', attribute: attrs.Attribute, value: int) -> None:
    if value < 1:
        raise DomainError('Seat capacity must be at least 1')


@attrs.frozen
class SeatInventory:
    capacity: int = attrs.field(validator=_validate_capacity)
    reserved: frozenset[int] = attrs.field(factory=frozenset, converter=frozenset)

    def __attrs_post_init__(self) -> None:
        invalid = [seat for seat in self.reserved if not self.in_range(seat)]
        if invalid:
            raise DomainError(f'Reserved seats out of range 1-{self.capacity}: {sorted(invalid)}')

    @classmethod
    def empty(cls, capacity: int) -> Self:
        return cls(capacity=capacity)

    @classmethod
    def from_flags(cls, flags: str) -> Self:
        if any(flag not in (FREE_FLAG, RESERVED_FLAG) for flag in flags):
            raise ValueError(f'Malformed seat flags: {flags!r}')
        return cls(
            capacity=len(flags),
            reserved=frozenset(
                index + 1 for index, flag in enumerate(flags) if flag == RESERVED_FLAG
            ),
        )

    def to_flags(self) -> str:
        return ''.join(
            RESERVED_FLAG if seat in self.reserved else FREE_FLAG
            for seat in range(1, self.capacity + 1)
        )

    def in_range(self, seat_number: int) -> bool:
        return 1 <= seat_number <= self.capacity

    def is_free(self, seat_number: int) -> bool:
        """False for reserved seats and for seat numbers outside the inventory."""
        return self.in_range(seat_number) and seat_number not in self.reserved

    def reserve(self, seat_number: int) -> Self:
        if not self.in_range(seat_number):
            raise SeatUnavailableError(
                f'Seat {seat_number} is out of range 1-{self.capacity}'
            )
        if seat_number in self.reserved:
            raise SeatUnavailableError(f'Seat {seat_number} is already reserved')
        return attrs.evolve(self, reserved=self.reserved | {seat_number})

    @property
    def free_count(self) -> int:
        return self.capacity - len(self.reserved)
