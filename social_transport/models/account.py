from datetime import datetime

from sqlalchemy import DateTime, Index, func
from sqlmodel import Field, SQLModel

from social_transport.utils.ids import generate_id
from social_transport.utils.timeutil import utc_now

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLES = (ROLE_ADMIN, ROLE_USER)

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
REQUEST_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)


class Account(SQLModel, table=True):
    """An approved, authenticatable identity."""

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=50)
    # unique case-insensitively, see the lower() indexes below
    username: str = Field(index=True, max_length=100)
    email: str = Field(index=True, max_length=255)
    full_name: str = Field(max_length=255)
    password_hash: str = Field(max_length=255)
    role: str = Field(default=ROLE_USER, index=True, description="admin or user")
    is_approved: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class AccessRequest(SQLModel, table=True):
    """A registration awaiting an admin decision.

    Requests are never deleted; approved and rejected rows stay as an audit
    trail. Only ``status`` changes after creation.
    """

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=50)
    username: str = Field(index=True, max_length=100)
    email: str = Field(index=True, max_length=255)
    full_name: str = Field(max_length=255)
    password_hash: str = Field(max_length=255)
    status: str = Field(default=STATUS_PENDING, index=True)
    requested_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    @property
    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING


Index("ux_account_username_lower", func.lower(Account.username), unique=True)
Index("ux_account_email_lower", func.lower(Account.email), unique=True)
