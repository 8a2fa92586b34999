from prometheus_client import Counter


class CinemaMetrics:
    """
    Booking and seat reservation metrics

    Exposed at /metrics (Prometheus text format)
    """

    def __init__(self) -> None:
        self.booking_requests = Counter(
            'booking_requests_total',
            'Booking requests by outcome',
            ['result'],  # created / showtime_not_found / seat_unavailable / reservation_failed
        )

        self.seat_write_conflicts = Counter(
            'seat_write_conflicts_total',
            'Conditional seat writes that lost to a concurrent writer',
        )

        self.showtime_conflicts = Counter(
            'showtime_overlap_conflicts_total',
            'Showtime create/update attempts rejected for overlapping another showtime',
        )


cinema_metrics = CinemaMetrics()
