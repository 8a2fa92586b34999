from datetime import datetime
import uuid

from sqlalchemy import DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class BookingModel(Base):
    __tablename__ = 'booking'

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    showtime_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
