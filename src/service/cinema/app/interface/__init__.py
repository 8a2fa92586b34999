from src.service.cinema.app.interface.i_booking_repo import IBookingRepo
from src.service.cinema.app.interface.i_movie_repo import IMovieRepo
from src.service.cinema.app.interface.i_showtime_repo import IShowtimeRepo


__all__ = ['IBookingRepo', 'IMovieRepo', 'IShowtimeRepo']
