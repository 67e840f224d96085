from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from social_transport.config import Settings
from social_transport.models.db import Database
from social_transport.models.registry import Destination, Driver, Person
from social_transport.services.access_request_service import AccessRequestService
from social_transport.services.auth_service import AuthService
from social_transport.services.registry_service import RegistryService
from social_transport.services.report_service import ReportService
from social_transport.services.token_issuer import TokenIssuer
from social_transport.services.transport_service import TransportService
from social_transport.storage.exports import ReportExporter
from social_transport.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Services:
    """Every service, sharing one store handle."""

    settings: Settings
    db: Database
    tokens: TokenIssuer
    auth: AuthService
    access_requests: AccessRequestService
    persons: RegistryService[Person]
    drivers: RegistryService[Driver]
    destinations: RegistryService[Destination]
    transports: TransportService
    reports: ReportService
    exporter: ReportExporter

    @classmethod
    def build(cls, settings: Settings, db: Optional[Database] = None) -> "Services":
        db = db or Database(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            echo=settings.db_echo,
        )
        tokens = TokenIssuer(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(hours=settings.token_ttl_hours),
        )
        persons = RegistryService(db, Person, "user")
        drivers = RegistryService(db, Driver, "driver")
        destinations = RegistryService(
            db,
            Destination,
            "destination",
            required=("name", "address", "cost"),
            non_negative=("cost",),
        )
        transports = TransportService(db)
        return cls(
            settings=settings,
            db=db,
            tokens=tokens,
            auth=AuthService(db, tokens),
            access_requests=AccessRequestService(db),
            persons=persons,
            drivers=drivers,
            destinations=destinations,
            transports=transports,
            reports=ReportService(transports, persons, drivers, destinations),
            exporter=ReportExporter(),
        )

    def bootstrap(self) -> None:
        """Create tables and the default admin account."""
        if self.settings.uses_default_secret:
            logger.warning("SOCIAL_TRANSPORT_JWT_SECRET is not set, using the development signing key")
        self.db.create_all()
        self.auth.ensure_default_admin(
            username=self.settings.admin_username,
            email=self.settings.admin_email,
            password=self.settings.admin_password,
            full_name=self.settings.admin_full_name,
        )

    def close(self) -> None:
        self.db.dispose()
