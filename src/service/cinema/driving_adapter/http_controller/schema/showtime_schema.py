from datetime import datetime
from typing import Annotated, Optional, Self

from pydantic import ConfigDict, Field, StringConstraints, model_validator

from src.service.cinema.domain.entity.showtime_entity import Showtime
from src.service.cinema.domain.value_object import to_utc
from src.service.cinema.driving_adapter.http_controller.schema.camel_model import CamelModel


class ShowtimeCreateRequest(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'movieId': 1,
                'theater': 'Cinema 1',
                'startTime': '2025-04-01T18:00:00Z',
                'endTime': '2025-04-01T20:00:00Z',
                'price': 45.5,
            }
        }
    )

    movie_id: int = Field(ge=1)
    theater: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    start_time: datetime
    end_time: datetime
    price: float = Field(gt=0)

    @model_validator(mode='after')
    def end_after_start(self) -> Self:
        if to_utc(self.end_time) <= to_utc(self.start_time):
            raise ValueError('endTime must be later than startTime')
        return self


class ShowtimeUpdateRequest(CamelModel):
    # extra='forbid' also rejects seatsAvailable: seats change only by booking
    model_config = ConfigDict(
        extra='forbid',
        json_schema_extra={'example': {'price': 50.0}},
    )

    movie_id: Optional[int] = Field(default=None, ge=1)
    theater: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    price: Optional[float] = Field(default=None, gt=0)

    @model_validator(mode='after')
    def end_after_start(self) -> Self:
        if self.start_time is None or self.end_time is None:
            return self
        if to_utc(self.end_time) <= to_utc(self.start_time):
            raise ValueError('endTime must be later than startTime')
        return self


class ShowtimeResponse(CamelModel):
    """Showtime without its seat inventory"""

    id: int
    movie_id: int
    theater: str
    start_time: datetime
    end_time: datetime
    price: float

    @classmethod
    def from_entity(cls, showtime: Showtime) -> 'ShowtimeResponse':
        return cls(
            id=showtime.id or 0,
            movie_id=showtime.movie_id,
            theater=showtime.theater,
            start_time=showtime.start_time,
            end_time=showtime.end_time,
            price=showtime.price,
        )


class SeatAvailabilityResponse(CamelModel):
    showtime_id: int
    seat_number: int
    available: bool
