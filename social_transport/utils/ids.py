import secrets

ID_BYTES = 9


def generate_id() -> str:
    """Short opaque identifier (12 URL-safe characters)."""
    return secrets.token_urlsafe(ID_BYTES)
