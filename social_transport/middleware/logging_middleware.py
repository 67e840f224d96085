"""
HTTP request logging.

Each request produces a ``[REQUEST]`` and a ``[RESPONSE]`` line in the
application log and one line in the access log. JSON bodies of write
requests are logged at DEBUG with credentials masked.
"""
import json
import logging
import time
from typing import Any, Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from social_transport.utils.logging_config import ACCESS_LOGGER_NAME, get_logger

logger = get_logger(__name__)

MASK = "***MASKED***"
SENSITIVE_FIELDS = {"password", "currentpassword", "newpassword", "current_password", "new_password", "token"}
BODY_METHODS = {"POST", "PUT", "PATCH"}


def mask_sensitive(data: Any) -> Any:
    """Copy of ``data`` with password and token values replaced."""
    if isinstance(data, dict):
        return {
            key: MASK if key.lower() in SENSITIVE_FIELDS else mask_sensitive(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item) for item in data]
    return data


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, access_logger_name: Optional[str] = None):
        super().__init__(app)
        self.access_logger = get_logger(access_logger_name or ACCESS_LOGGER_NAME)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        client = request.client.host if request.client else "unknown"
        route = f"{request.method} {request.url.path}"

        logger.info(f"[REQUEST] {route} | Client: {client}")
        if request.method in BODY_METHODS:
            await self._log_body(request, route)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"[RESPONSE] {route} | Status: 500 (Exception) | "
                         f"Duration: {time.perf_counter() - started:.3f}s | Error: {e}")
            raise

        line = f"{client} | {route} | Status: {response.status_code} | Duration: {time.perf_counter() - started:.3f}s"
        logger.info(f"[RESPONSE] {line}")
        self.access_logger.info(line)
        return response

    async def _log_body(self, request: Request, route: str) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        raw = await request.body()
        if not raw:
            return
        try:
            body = json.dumps(mask_sensitive(json.loads(raw)), ensure_ascii=False)
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = f"<binary data: {len(raw)} bytes>"
        logger.debug(f"[REQUEST BODY] {route} | Body: {body}")
