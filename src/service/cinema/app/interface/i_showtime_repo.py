"""
Showtime Repository Interface

Seat state is written only through `update_seats`, a conditional write
(compare-and-swap on the stored inventory). `create` stores the initial
inventory; `update` never touches seats.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.cinema.domain.entity.showtime_entity import Showtime
from src.service.cinema.domain.value_object import SeatInventory, TimeWindow


class IShowtimeRepo(ABC):
    @abstractmethod
    async def find_by_id(self, *, showtime_id: int) -> Optional[Showtime]:
        pass

    @abstractmethod
    async def find_overlapping(
        self, *, theater: str, window: TimeWindow, exclude_id: Optional[int] = None
    ) -> Optional[Showtime]:
        """
        First showtime in `theater` whose interval intersects `window`

        Args:
            theater: Theater name
            window: Candidate interval [start, end)
            exclude_id: Showtime to ignore (the one being updated)

        Returns:
            A conflicting showtime, or None
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Showtime]:
        pass

    @abstractmethod
    async def create(self, *, showtime: Showtime) -> Showtime:
        """
        Insert the showtime unless it overlaps another one in its theater

        The overlap check and the insert are atomic with respect to other
        creates and updates in the same theater.

        Raises:
            ConflictError: the interval intersects an existing showtime
        """
        pass

    @abstractmethod
    async def update(self, *, showtime: Showtime) -> Optional[Showtime]:
        """
        Persist schedule fields (movie, theater, times, price); seats are left as stored

        Like `create`, the overlap check (excluding the showtime itself) and
        the write are atomic per theater.

        Raises:
            ConflictError: the new interval intersects another showtime
        """
        pass

    @abstractmethod
    async def delete(self, *, showtime_id: int) -> Optional[Showtime]:
        pass

    @abstractmethod
    async def update_seats(
        self, *, showtime_id: int, expected: SeatInventory, new: SeatInventory
    ) -> bool:
        """
        Write `new` only if the stored inventory still equals `expected`

        Returns:
            True if the write landed, False if the showtime is gone or its
            seats changed since `expected` was read
        """
        pass
