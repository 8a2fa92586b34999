from src.service.cinema.domain.value_object.seat_inventory import SeatInventory
from src.service.cinema.domain.value_object.time_window import TimeWindow, to_utc


__all__ = ['SeatInventory', 'TimeWindow', 'to_utc']
