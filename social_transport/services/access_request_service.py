from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import func, or_, select

from social_transport.errors import ConflictError, NotFoundError, ValidationError
from social_transport.models.account import (
    REQUEST_STATUSES,
    ROLE_USER,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    AccessRequest,
    Account,
)
from social_transport.models.db import Database
from social_transport.services.passwords import hash_password, validate_password
from social_transport.utils.logging_config import get_logger

logger = get_logger(__name__)


class AccessRequestService:
    """Registration requests and their approval by an admin.

    State machine::

        pending --approve--> approved   (creates the Account)
        pending --reject---> rejected
        rejected --reject--> rejected   (no-op)
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def submit_registration(self, username: str, email: str, full_name: str, password: str) -> AccessRequest:
        """Store a pending request; no usable account is created yet.

        Raises:
            ValidationError: a field is empty or the password is too short
            ConflictError: username or email already used by an account or
                by any request, whatever its status
        """
        username = (username or "").strip()
        email = (email or "").strip()
        full_name = (full_name or "").strip()
        if not username or not email or not full_name or not password:
            raise ValidationError("all fields are required")
        validate_password(password)

        with self._db.transaction() as session:
            if self._identity_taken(session, username, email):
                raise ConflictError("username or email already exists")

            request = AccessRequest(
                username=username,
                email=email,
                full_name=full_name,
                password_hash=hash_password(password),
            )
            session.add(request)
            session.flush()
            session.refresh(request)

        logger.info(f"Access request submitted: id={request.id}, username={username}")
        return request

    def list_requests(self, status: Optional[str] = None) -> List[AccessRequest]:
        """All requests, newest first, optionally filtered by status."""
        if status is not None and status not in REQUEST_STATUSES:
            raise ValidationError(f"invalid status '{status}'")
        statement = select(AccessRequest)
        if status is not None:
            statement = statement.where(AccessRequest.status == status)
        statement = statement.order_by(AccessRequest.requested_at.desc())
        with self._db.session() as session:
            return list(session.exec(statement).all())

    def get_request(self, request_id: str) -> AccessRequest:
        with self._db.session() as session:
            request = session.get(AccessRequest, request_id)
            if not request:
                raise NotFoundError("request not found")
            return request

    def approve(self, request_id: str) -> Account:
        """Promote a pending request into an approved ``user`` account.

        The account insert and the status change commit together or not at
        all.

        Raises:
            NotFoundError: no pending request with this id
            ConflictError: the username or email got taken in the meantime
        """
        try:
            with self._db.transaction() as session:
                request = session.exec(
                    select(AccessRequest).where(
                        AccessRequest.id == request_id,
                        AccessRequest.status == STATUS_PENDING,
                    )
                ).first()
                if not request:
                    raise NotFoundError("request not found or already processed")

                account = Account(
                    username=request.username,
                    email=request.email,
                    full_name=request.full_name,
                    password_hash=request.password_hash,
                    role=ROLE_USER,
                    is_approved=True,
                )
                session.add(account)
                request.status = STATUS_APPROVED
                session.add(request)
                session.flush()
                session.refresh(account)
        except IntegrityError as e:
            logger.warning(f"Approval of request {request_id} hit a uniqueness violation: {e.orig}")
            raise ConflictError("username or email already exists")

        logger.info(f"Access request approved: id={request_id}, account={account.id}")
        return account

    def reject(self, request_id: str) -> AccessRequest:
        """Mark a request rejected.

        Rejecting an already rejected request is a no-op. An approved
        request cannot be rejected afterwards: its account already exists
        and has to be removed through account deletion instead.
        """
        with self._db.transaction() as session:
            request = session.get(AccessRequest, request_id)
            if not request:
                raise NotFoundError("request not found")
            if request.status == STATUS_APPROVED:
                raise ValidationError("request already approved")
            if request.is_pending:
                request.status = STATUS_REJECTED
                session.add(request)
                session.flush()
                session.refresh(request)
                logger.info(f"Access request rejected: id={request_id}")
        return request

    @staticmethod
    def _identity_taken(session, username: str, email: str) -> bool:
        account = session.exec(
            select(Account.id).where(
                or_(func.lower(Account.username) == username.lower(), func.lower(Account.email) == email.lower())
            )
        ).first()
        if account is not None:
            return True
        request = session.exec(
            select(AccessRequest.id).where(
                or_(
                    func.lower(AccessRequest.username) == username.lower(),
                    func.lower(AccessRequest.email) == email.lower(),
                )
            )
        ).first()
        return request is not None
