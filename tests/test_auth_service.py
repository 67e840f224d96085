from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sqlmodel import select

from conftest import TEST_SECRET, make_account
from social_transport.errors import AuthError, ForbiddenError, NotFoundError, ValidationError
from social_transport.models.account import Account
from social_transport.services.token_issuer import TokenIssuer


def _admin(services):
    with services.db.session() as session:
        return session.exec(select(Account).where(Account.username == "admin")).one()


def test_login_issues_token_that_verifies_to_same_account(services):
    account = make_account(services, "marco")

    token, logged_in = services.auth.login("marco", "secret123")

    assert logged_in.id == account.id
    assert services.auth.verify(token).id == account.id


def test_token_carries_24_hour_expiry(services):
    make_account(services, "marco")
    token, _ = services.auth.login("marco", "secret123")

    payload = services.tokens.decode(token)
    assert payload.expires_at - payload.issued_at == timedelta(hours=24)


def test_login_with_wrong_password(services):
    make_account(services, "marco")
    with pytest.raises(AuthError) as exc:
        services.auth.login("marco", "wrong-password")
    assert exc.value.message == "invalid credentials or not approved"


def test_login_with_unknown_username(services):
    with pytest.raises(AuthError):
        services.auth.login("nobody", "secret123")


def test_login_of_unapproved_account(services):
    account = make_account(services, "marco")
    with services.db.transaction() as session:
        stored = session.get(Account, account.id)
        stored.is_approved = False
        session.add(stored)

    with pytest.raises(AuthError):
        services.auth.login("marco", "secret123")


def test_verify_rejects_garbage_and_foreign_tokens(services):
    account = make_account(services, "marco")
    foreign = TokenIssuer("another-signing-key-that-is-long-enough-0123456789").issue(account.id)

    with pytest.raises(AuthError):
        services.auth.verify("not-a-token")
    with pytest.raises(AuthError):
        services.auth.verify(foreign)


def test_verify_rejects_expired_token(services):
    account = make_account(services, "marco")
    past = datetime.now(timezone.utc) - timedelta(hours=25)
    expired = TokenIssuer(TEST_SECRET, clock=lambda: past).issue(account.id)

    with pytest.raises(AuthError) as exc:
        services.auth.verify(expired)
    assert exc.value.message == "token expired"


def test_verify_rejects_token_without_type_claim(services):
    account = make_account(services, "marco")
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": account.id, "iat": int(now.timestamp()), "exp": int((now + timedelta(hours=1)).timestamp())},
        TEST_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(AuthError):
        services.auth.verify(token)


def test_deleted_account_token_stops_working(services):
    account = make_account(services, "marco")
    token, _ = services.auth.login("marco", "secret123")

    services.auth.delete_account(account.id, acting_account_id=_admin(services).id)

    with pytest.raises(AuthError):
        services.auth.verify(token)


def test_unapproved_account_token_stops_working(services):
    account = make_account(services, "marco")
    token, _ = services.auth.login("marco", "secret123")
    with services.db.transaction() as session:
        stored = session.get(Account, account.id)
        stored.is_approved = False
        session.add(stored)

    with pytest.raises(AuthError):
        services.auth.verify(token)


def test_require_admin(services):
    user = make_account(services, "marco")
    services.auth.require_admin(_admin(services))
    with pytest.raises(ForbiddenError):
        services.auth.require_admin(user)


def test_change_password(services):
    account = make_account(services, "marco")
    old_token, _ = services.auth.login("marco", "secret123")

    services.auth.change_password(account.id, "secret123", "newsecret456")

    with pytest.raises(AuthError):
        services.auth.login("marco", "secret123")
    services.auth.login("marco", "newsecret456")
    # tokens issued before the change stay valid until they expire
    assert services.auth.verify(old_token).id == account.id


@pytest.mark.parametrize(
    "current, new",
    [
        ("secret123", "short"),
        ("secret123", "secret123"),
        ("wrong-password", "newsecret456"),
        ("", "newsecret456"),
    ],
)
def test_change_password_validation(services, current, new):
    account = make_account(services, "marco")
    with pytest.raises(ValidationError):
        services.auth.change_password(account.id, current, new)
    services.auth.login("marco", "secret123")


def test_admin_cannot_change_own_role_even_as_sole_admin(services):
    admin = _admin(services)
    for role in ("user", "admin"):
        with pytest.raises(ValidationError):
            services.auth.update_role(admin.id, role, acting_account_id=admin.id)
    assert _admin(services).role == "admin"


def test_admin_cannot_delete_self(services):
    admin = _admin(services)
    with pytest.raises(ValidationError):
        services.auth.delete_account(admin.id, acting_account_id=admin.id)
    assert _admin(services) is not None


def test_self_protection_holds_for_every_admin(services):
    second = make_account(services, "laura")
    services.auth.update_role(second.id, "admin", acting_account_id=_admin(services).id)

    for admin in (_admin(services), second):
        with pytest.raises(ValidationError):
            services.auth.update_role(admin.id, "user", acting_account_id=admin.id)
        with pytest.raises(ValidationError):
            services.auth.delete_account(admin.id, acting_account_id=admin.id)


def test_update_role(services):
    user = make_account(services, "marco")
    admin = _admin(services)

    promoted = services.auth.update_role(user.id, "admin", acting_account_id=admin.id)
    assert promoted.role == "admin"

    with pytest.raises(ValidationError):
        services.auth.update_role(user.id, "superuser", acting_account_id=admin.id)
    with pytest.raises(NotFoundError):
        services.auth.update_role("missing", "user", acting_account_id=admin.id)


def test_delete_unknown_account(services):
    with pytest.raises(NotFoundError):
        services.auth.delete_account("missing", acting_account_id=_admin(services).id)


def test_list_accounts_only_approved_newest_first(services):
    first = make_account(services, "first")
    second = make_account(services, "second")
    services.access_requests.submit_registration("pending", "pending@example.com", "Pending", "secret123")

    usernames = [a.username for a in services.auth.list_accounts()]
    assert usernames == ["second", "first", "admin"]
    assert first.id != second.id


def test_default_admin_is_created_once(services, settings):
    services.auth.ensure_default_admin(username=settings.admin_username, email=settings.admin_email)
    services.auth.ensure_default_admin(username=settings.admin_username, email=settings.admin_email)

    with services.db.session() as session:
        admins = session.exec(select(Account).where(Account.role == "admin")).all()
    assert [a.username for a in admins] == ["admin"]
    assert admins[0].is_approved is True


def test_login_username_is_case_insensitive(services):
    account = make_account(services, "marco")
    _, logged_in = services.auth.login("Marco", "secret123")
    assert logged_in.id == account.id
    services.auth.login("ADMIN", "admin123")


def test_wrong_current_password_reported_before_sameness(services):
    account = make_account(services, "marco")
    with pytest.raises(ValidationError) as exc:
        services.auth.change_password(account.id, "newsecret456", "newsecret456")
    assert exc.value.message == "current password is incorrect"


def test_unchanged_password_is_refused(services):
    account = make_account(services, "marco")
    with pytest.raises(ValidationError) as exc:
        services.auth.change_password(account.id, "secret123", "secret123")
    assert exc.value.message == "new password must be different from current password"
