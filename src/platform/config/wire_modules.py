"""
Wire Modules Configuration

Modules whose `depends` classmethods use `Provide[...]` markers.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.cinema.app import movie_catalog, seat_reservation_ledger, showtime_scheduler


WIRE_MODULES: list[ModuleType] = [
    movie_catalog,
    showtime_scheduler,
    seat_reservation_ledger,
]
