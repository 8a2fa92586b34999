from datetime import datetime

from sqlalchemy import DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class ShowtimeModel(Base):
    __tablename__ = 'showtime'
    __table_args__ = (Index('ix_showtime_theater_start_end', 'theater', 'start_time', 'end_time'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    movie_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    theater: Mapped[str] = mapped_column(String(255), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    # One flag per seat: '0' free, '1' reserved (seat n at index n-1)
    seats_available: Mapped[str] = mapped_column(Text, nullable=False)
