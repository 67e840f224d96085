"""Ride recipients, drivers and destinations."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, DateTime, Numeric
from sqlmodel import Field, SQLModel

from social_transport.utils.ids import generate_id
from social_transport.utils.timeutil import utc_now


class Person(SQLModel, table=True):
    """A ride recipient (exposed as ``/users`` over HTTP)."""

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=50)
    name: str = Field(max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
    province: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)


class Driver(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True, max_length=50)
    name: str = Field(max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    license_number: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)


class Destination(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True, max_length=50)
    name: str = Field(max_length=255)
    address: str = Field(max_length=500)
    # reimbursement per trip, two decimal places
    cost: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    notes: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)
