from __future__ import annotations

from typing import List, Tuple

from sqlmodel import func, select

from social_transport.errors import AuthError, ForbiddenError, NotFoundError, ValidationError
from social_transport.models.account import ROLE_ADMIN, ROLES, Account
from social_transport.models.db import Database
from social_transport.services.passwords import hash_password, validate_password, verify_password
from social_transport.services.token_issuer import TokenIssuer
from social_transport.utils.logging_config import get_logger

logger = get_logger(__name__)

LOGIN_FAILED_MESSAGE = "invalid credentials or not approved"


class AuthService:
    """Login, token verification and account administration."""

    def __init__(self, db: Database, tokens: TokenIssuer) -> None:
        self._db = db
        self._tokens = tokens

    def login(self, username: str, password: str) -> Tuple[str, Account]:
        """Check credentials of an approved account and issue a token.

        Raises:
            AuthError: unknown username, unapproved account or wrong password
        """
        if not username or not password:
            raise ValidationError("username and password are required")
        with self._db.session() as session:
            account = session.exec(
                select(Account).where(
                    func.lower(Account.username) == username.lower(),
                    Account.is_approved == True,  # noqa: E712
                )
            ).first()
        if not account or not verify_password(password, account.password_hash):
            logger.info(f"Login failed for username={username}")
            raise AuthError(LOGIN_FAILED_MESSAGE)

        token = self._tokens.issue(account.id)
        logger.info(f"Login succeeded: account={account.id}, username={username}")
        return token, account

    def verify(self, token: str) -> Account:
        """Resolve a bearer token to its live, approved account.

        Deleting or un-approving an account therefore takes effect on the
        next call, even though its tokens have not expired.
        """
        payload = self._tokens.decode(token)
        with self._db.session() as session:
            account = session.get(Account, payload.account_id)
        if not account or not account.is_approved:
            raise AuthError("invalid token or account not approved")
        return account

    def require_admin(self, account: Account) -> None:
        if not account.is_admin:
            raise ForbiddenError("admin access required")

    def change_password(self, account_id: str, current_password: str, new_password: str) -> None:
        """Replace the stored hash. Tokens already issued stay valid until expiry."""
        if not current_password or not new_password:
            raise ValidationError("current password and new password are required")
        validate_password(new_password, field="new password")

        with self._db.transaction() as session:
            account = session.get(Account, account_id)
            if not account:
                raise NotFoundError("user not found")
            if not verify_password(current_password, account.password_hash):
                raise ValidationError("current password is incorrect")
            if new_password == current_password:
                raise ValidationError("new password must be different from current password")
            account.password_hash = hash_password(new_password)
            session.add(account)
        logger.info(f"Password changed: account={account_id}")

    def list_accounts(self) -> List[Account]:
        """Approved accounts, newest first."""
        with self._db.session() as session:
            statement = (
                select(Account)
                .where(Account.is_approved == True)  # noqa: E712
                .order_by(Account.created_at.desc())
            )
            return list(session.exec(statement).all())

    def update_role(self, target_id: str, new_role: str, acting_account_id: str) -> Account:
        if new_role not in ROLES:
            raise ValidationError("invalid role")
        if target_id == acting_account_id:
            raise ValidationError("cannot modify your own role")

        with self._db.transaction() as session:
            account = session.get(Account, target_id)
            if not account:
                raise NotFoundError("user not found")
            account.role = new_role
            session.add(account)
            session.flush()
            session.refresh(account)
        logger.info(f"Role updated: account={target_id}, role={new_role}, by={acting_account_id}")
        return account

    def delete_account(self, target_id: str, acting_account_id: str) -> None:
        if target_id == acting_account_id:
            raise ValidationError("cannot delete your own account")

        with self._db.transaction() as session:
            account = session.get(Account, target_id)
            if not account:
                raise NotFoundError("user not found")
            session.delete(account)
        logger.info(f"Account deleted: account={target_id}, by={acting_account_id}")

    def ensure_default_admin(
        self,
        username: str = "admin",
        email: str = "admin@trasportosociale.it",
        password: str = "admin123",
        full_name: str = "Amministratore",
    ) -> None:
        """Create a bootstrap admin when no admin account exists."""
        with self._db.transaction() as session:
            admin_exists = session.exec(
                select(Account.id).where(Account.role == ROLE_ADMIN)
            ).first()
            if admin_exists:
                return

            taken = session.exec(
                select(Account.id).where(
                    (func.lower(Account.username) == username.lower()) | (func.lower(Account.email) == email.lower())
                )
            ).first()
            if taken:
                logger.warning(f"No admin account exists and username/email of the default admin is taken: {username}")
                return

            session.add(
                Account(
                    username=username,
                    email=email,
                    full_name=full_name,
                    password_hash=hash_password(password),
                    role=ROLE_ADMIN,
                    is_approved=True,
                )
            )
        logger.info(f"Default admin user created: {username}")
