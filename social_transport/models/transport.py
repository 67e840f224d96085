from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Index, String
from sqlmodel import Field, SQLModel

from social_transport.utils.ids import generate_id
from social_transport.utils.timeutil import utc_now


class Transport(SQLModel, table=True):
    """One concrete scheduled occurrence.

    ``date`` is stored as ``YYYY-MM-DD`` and the times as ``HH:MM`` so that
    lexical order equals chronological order. Occurrences generated by one
    recurring submission carry the same recurrence fields but are not linked
    to each other.
    """

    __table_args__ = (Index("ix_transport_date_start_time", "date", "start_time"),)

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=50)
    date: str = Field(max_length=10)
    start_time: str = Field(max_length=8)
    end_time: Optional[str] = Field(default=None, max_length=8)
    user_id: str = Field(
        sa_column=Column(String(50), ForeignKey("person.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    driver_id: str = Field(
        sa_column=Column(String(50), ForeignKey("driver.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    destination_id: str = Field(
        sa_column=Column(String(50), ForeignKey("destination.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    is_recurring: bool = Field(default=False)
    recurring_type: Optional[str] = Field(default=None, max_length=20)
    recurring_end_date: Optional[str] = Field(default=None, max_length=10)
    notes: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
