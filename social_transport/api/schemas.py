from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Two-decimal currency, sent over JSON as a number
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(Decimal(v).quantize(Decimal("0.01"))), return_type=float, when_used="json"),
]


class CamelModel(BaseModel):
    """JSON uses camelCase keys; Python attributes stay snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


# ========== Auth ==========


class RegisterRequest(CamelModel):
    username: str
    email: EmailStr
    full_name: str
    password: str


class RegisterResponse(CamelModel):
    message: str
    request_id: str


class LoginRequest(CamelModel):
    username: str
    password: str


class AccountResponse(CamelModel):
    """Public projection of an account (never the password hash)."""

    id: str
    username: str
    email: str
    full_name: str
    role: str
    is_approved: bool
    created_at: datetime


class LoginResponse(CamelModel):
    token: str
    user: AccountResponse


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str


class AccessRequestResponse(CamelModel):
    id: str
    username: str
    email: str
    full_name: str
    status: str
    requested_at: datetime


class ApproveResponse(CamelModel):
    message: str
    user: AccountResponse


class UpdateRoleRequest(CamelModel):
    role: str


class UpdateRoleResponse(CamelModel):
    message: str
    user: AccountResponse


# ========== Registry ==========


class PersonPayload(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
    province: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=1000)


class PersonResponse(PersonPayload):
    id: str
    name: str
    created_at: datetime


class DriverPayload(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    license_number: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=1000)


class DriverResponse(DriverPayload):
    id: str
    name: str
    created_at: datetime


class DestinationPayload(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=500)
    cost: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = Field(default=None, max_length=1000)


class DestinationResponse(CamelModel):
    id: str
    name: str
    address: str
    cost: Money
    notes: Optional[str] = None
    created_at: datetime


# ========== Transports ==========


class TransportPayload(CamelModel):
    date: str
    start_time: str
    end_time: Optional[str] = None
    user_id: str
    driver_id: str
    destination_id: str
    is_recurring: Optional[bool] = False
    recurring_type: Optional[Literal["daily", "weekly", "monthly"]] = None
    recurring_end_date: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class TransportResponse(CamelModel):
    id: str
    date: str
    start_time: str
    end_time: Optional[str] = None
    user_id: str
    driver_id: str
    destination_id: str
    is_recurring: bool
    recurring_type: Optional[str] = None
    recurring_end_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


# ========== Reports ==========


class PersonReportLine(CamelModel):
    transport_id: str
    date: str
    start_time: str
    destination_name: str
    driver_name: str
    cost: Money


class PersonReport(CamelModel):
    person_id: str
    person_name: str
    total_cost: Money
    transports: List[PersonReportLine]


class DriverReportLine(CamelModel):
    transport_id: str
    date: str
    start_time: str
    person_name: str
    destination_name: str
    cost: Money


class DriverReport(CamelModel):
    driver_id: str
    driver_name: str
    total_trips: int
    transports: List[DriverReportLine]


class DestinationReport(CamelModel):
    destination_id: str
    destination_name: str
    unit_cost: Money
    total_trips: int
    total_revenue: Money


class ReportSummary(CamelModel):
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    total_transports: int
    distinct_users: int
    distinct_drivers: int
    total_cost: Money


class DashboardResponse(CamelModel):
    date: str
    users: int
    drivers: int
    destinations: int
    transports: int
    transports_today: int


class DataExportResponse(CamelModel):
    exported_at: datetime
    users: List[PersonResponse]
    drivers: List[DriverResponse]
    destinations: List[DestinationResponse]
    transports: List[TransportResponse]


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
