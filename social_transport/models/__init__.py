"""Database models and the store handle"""

from social_transport.models.account import AccessRequest, Account
from social_transport.models.registry import Destination, Driver, Person
from social_transport.models.transport import Transport
from social_transport.models.db import Database

__all__ = [
    # Store
    "Database",
    # Models
    "Account",
    "AccessRequest",
    "Person",
    "Driver",
    "Destination",
    "Transport",
]
