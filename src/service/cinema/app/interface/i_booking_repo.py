from abc import ABC, abstractmethod
from typing import List, Optional

from uuid_utils import UUID

from src.service.cinema.domain.entity.booking_entity import Booking


class IBookingRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def find_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_by_showtime(self, *, showtime_id: int) -> List[Booking]:
        pass
