import pytest

from src.platform.exception.exceptions import DomainError, SeatUnavailableError
from src.service.cinema.domain.value_object import SeatInventory


@pytest.mark.unit
class TestSeatInventory:
    def test_empty_inventory_has_every_seat_free(self) -> None:
        seats = SeatInventory.empty(5)

        assert seats.free_count == 5
        assert all(seats.is_free(n) for n in range(1, 6))
        assert seats.to_flags() == '00000'

    def test_reserve_returns_new_inventory(self) -> None:
        seats = SeatInventory.empty(5)

        reserved = seats.reserve(3)

        assert reserved.is_free(3) is False
        assert reserved.to_flags() == '00100'
        # Original is untouched
        assert seats.is_free(3) is True

    def test_reserve_taken_seat_raises(self) -> None:
        seats = SeatInventory.empty(5).reserve(2)

        with pytest.raises(SeatUnavailableError, match='already reserved'):
            seats.reserve(2)

    @pytest.mark.parametrize('seat_number', [0, -1, 6])
    def test_out_of_range_seat_is_never_free(self, seat_number: int) -> None:
        seats = SeatInventory.empty(5)

        assert seats.is_free(seat_number) is False
        with pytest.raises(SeatUnavailableError, match='out of range'):
            seats.reserve(seat_number)

    def test_flags_preserve_reserved_positions(self) -> None:
        seats = SeatInventory.from_flags('1001')

        assert seats.capacity == 4
        assert seats.reserved == frozenset({1, 4})
        assert seats.to_flags() == '1001'

    def test_malformed_flags_rejected(self) -> None:
        with pytest.raises(ValueError, match='Malformed'):
            SeatInventory.from_flags('01x0')

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(DomainError):
            SeatInventory.empty(0)

    def test_reserved_seats_must_be_in_range(self) -> None:
        with pytest.raises(DomainError, match='out of range'):
            SeatInventory(capacity=3, reserved={4})

    def test_equality_is_by_value(self) -> None:
        assert SeatInventory.empty(3).reserve(1) == SeatInventory.from_flags('100')
