from src.service.cinema.driven_adapter.model.booking_model import BookingModel
from src.service.cinema.driven_adapter.model.movie_model import MovieModel
from src.service.cinema.driven_adapter.model.showtime_model import ShowtimeModel


__all__ = ['BookingModel', 'MovieModel', 'ShowtimeModel']
