"""Runtime settings, read from ``SOCIAL_TRANSPORT_*`` environment variables."""
import os
from pathlib import Path
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field

from social_transport.utils.logging_config import LOG_DIR

ENV_PREFIX = "SOCIAL_TRANSPORT_"

# Database file lives in the project root unless overridden
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "database.db"
DEFAULT_JWT_SECRET = "change-me-in-production-social-transport-signing-key"


class Settings(BaseModel):
    database_url: str = f"sqlite:///{DEFAULT_DB_PATH}"
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=5, ge=0)
    db_echo: bool = False

    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = Field(default=24, gt=0)

    admin_username: str = "admin"
    admin_email: str = "admin@trasportosociale.it"
    admin_password: str = "admin123"
    admin_full_name: str = "Amministratore"

    log_dir: Path = LOG_DIR
    log_level: str = "INFO"
    log_to_file: bool = True

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the environment, keeping defaults for unset keys."""
        env = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = env.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None:
                continue
            if name == "cors_origins":
                values[name] = [origin.strip() for origin in raw.split(",") if origin.strip()]
            else:
                values[name] = raw
        # shorter alias for the database URL
        if "database_url" not in values and env.get(f"{ENV_PREFIX}DB_URL"):
            values["database_url"] = env[f"{ENV_PREFIX}DB_URL"]
        return cls(**values)
