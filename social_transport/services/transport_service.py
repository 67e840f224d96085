from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from social_transport.errors import NotFoundError, PartialFailureError, ValidationError
from social_transport.models.db import Database
from social_transport.models.registry import Destination, Driver, Person
from social_transport.models.transport import Transport
from social_transport.services.recurrence import (
    RECURRING_TYPES,
    expand_dates,
    format_date,
    normalize_time,
    parse_date,
)
from social_transport.utils.logging_config import get_logger

logger = get_logger(__name__)


class TransportService:
    """Transport occurrences: listing, recurring creation and single-row edits."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def list(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        user_id: Optional[str] = None,
        driver_id: Optional[str] = None,
        destination_id: Optional[str] = None,
    ) -> List[Transport]:
        """Occurrences ordered by date then start time, latest first.

        ``date_from`` and ``date_to`` are inclusive bounds.
        """
        statement = select(Transport)
        if date_from:
            statement = statement.where(Transport.date >= format_date(parse_date(date_from, "dateFrom")))
        if date_to:
            statement = statement.where(Transport.date <= format_date(parse_date(date_to, "dateTo")))
        if user_id:
            statement = statement.where(Transport.user_id == user_id)
        if driver_id:
            statement = statement.where(Transport.driver_id == driver_id)
        if destination_id:
            statement = statement.where(Transport.destination_id == destination_id)
        statement = statement.order_by(Transport.date.desc(), Transport.start_time.desc())
        with self._db.session() as session:
            return list(session.exec(statement).all())

    def get(self, transport_id: str) -> Transport:
        with self._db.session() as session:
            transport = session.get(Transport, transport_id)
            if not transport:
                raise NotFoundError("transport not found")
            return transport

    def create(
        self,
        *,
        date: str,
        start_time: str,
        user_id: str,
        driver_id: str,
        destination_id: str,
        end_time: Optional[str] = None,
        notes: Optional[str] = None,
        is_recurring: Optional[bool] = False,
        recurring_type: Optional[str] = None,
        recurring_end_date: Optional[str] = None,
    ) -> List[Transport]:
        """Create one occurrence, or a whole recurring series.

        Everything is validated before the first insert. The occurrences are
        then inserted one by one in date order inside a single transaction.

        Returns:
            the created occurrences in insertion order

        Raises:
            ValidationError: malformed time or date, missing recurrence
                fields, or an unknown person, driver or destination
            PartialFailureError: the store failed part way; nothing is kept
        """
        start_time = normalize_time(start_time)
        end_time = normalize_time(end_time) if end_time else None
        first_date = parse_date(date)

        if is_recurring:
            if not recurring_type or not recurring_end_date:
                raise ValidationError("recurringType and recurringEndDate are required for recurring transports")
            end_date = parse_date(recurring_end_date, "recurringEndDate")
            dates = expand_dates(first_date, recurring_type, end_date)
            recurring_end_date = format_date(end_date)
        else:
            dates = [first_date]
            recurring_type = None
            recurring_end_date = None

        created: List[Transport] = []
        created_ids: List[str] = []
        with self._db.session() as session:
            self._check_references(session, user_id, driver_id, destination_id)
            try:
                for occurrence in dates:
                    transport = Transport(
                        date=format_date(occurrence),
                        start_time=start_time,
                        end_time=end_time,
                        user_id=user_id,
                        driver_id=driver_id,
                        destination_id=destination_id,
                        is_recurring=bool(is_recurring),
                        recurring_type=recurring_type,
                        recurring_end_date=recurring_end_date,
                        notes=notes or None,
                    )
                    session.add(transport)
                    session.flush()
                    created.append(transport)
                    created_ids.append(transport.id)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(
                    f"Transport creation failed after {len(created_ids)} of {len(dates)} occurrences: {e}",
                    exc_info=True,
                )
                raise PartialFailureError(
                    f"failed to create transport {len(created_ids) + 1} of {len(dates)}; no transports were saved",
                    created_ids=created_ids,
                    cause=e,
                    rolled_back=True,
                ) from e

        if is_recurring:
            logger.info(
                f"Recurring transport created: {len(created)} {recurring_type} occurrences "
                f"from {created[0].date} to {created[-1].date}"
            )
        else:
            logger.info(f"Transport created: id={created[0].id}, date={created[0].date}")
        return created

    def update(
        self,
        transport_id: str,
        *,
        date: str,
        start_time: str,
        user_id: str,
        driver_id: str,
        destination_id: str,
        end_time: Optional[str] = None,
        notes: Optional[str] = None,
        is_recurring: Optional[bool] = False,
        recurring_type: Optional[str] = None,
        recurring_end_date: Optional[str] = None,
    ) -> Transport:
        """Replace the fields of one occurrence; sibling occurrences are untouched."""
        start_time = normalize_time(start_time)
        end_time = normalize_time(end_time) if end_time else None
        date = format_date(parse_date(date))
        if is_recurring:
            if not recurring_type or not recurring_end_date:
                raise ValidationError("recurringType and recurringEndDate are required for recurring transports")
            if recurring_type not in RECURRING_TYPES:
                raise ValidationError(f"invalid recurringType '{recurring_type}'")
            recurring_end_date = format_date(parse_date(recurring_end_date, "recurringEndDate"))
        else:
            recurring_type = None
            recurring_end_date = None

        with self._db.transaction() as session:
            transport = session.get(Transport, transport_id)
            if not transport:
                raise NotFoundError("transport not found")
            self._check_references(session, user_id, driver_id, destination_id)
            transport.date = date
            transport.start_time = start_time
            transport.end_time = end_time
            transport.user_id = user_id
            transport.driver_id = driver_id
            transport.destination_id = destination_id
            transport.is_recurring = bool(is_recurring)
            transport.recurring_type = recurring_type or None
            transport.recurring_end_date = recurring_end_date or None
            transport.notes = notes or None
            session.add(transport)
            session.flush()
            session.refresh(transport)
        logger.info(f"Transport updated: id={transport_id}")
        return transport

    def delete(self, transport_id: str) -> None:
        with self._db.transaction() as session:
            transport = session.get(Transport, transport_id)
            if not transport:
                raise NotFoundError("transport not found")
            session.delete(transport)
        logger.info(f"Transport deleted: id={transport_id}")

    @staticmethod
    def _check_references(session: Session, user_id: str, driver_id: str, destination_id: str) -> None:
        if not session.get(Person, user_id):
            raise ValidationError(f"user not found: {user_id}")
        if not session.get(Driver, driver_id):
            raise ValidationError(f"driver not found: {driver_id}")
        if not session.get(Destination, destination_id):
            raise ValidationError(f"destination not found: {destination_id}")
