from typing import Optional

from fastapi import Depends, Header, Request

from social_transport.container import Services
from social_transport.errors import AuthError
from social_transport.models.account import Account


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_token(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> str:
    if not authorization:
        raise AuthError("access token required")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("invalid token")
    return token.strip()


def get_current_account(
    token: str = Depends(get_token),
    services: Services = Depends(get_services),
) -> Account:
    """Approved account bound to the bearer token (dependency injection)."""
    return services.auth.verify(token)


def get_admin_account(
    current_account: Account = Depends(get_current_account),
    services: Services = Depends(get_services),
) -> Account:
    """Current account, which must have the admin role."""
    services.auth.require_admin(current_account)
    return current_account
