from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import event
from sqlmodel import SQLModel, Session, create_engine

# ensure models registered
from social_transport.models import account  # noqa: F401
from social_transport.models import registry  # noqa: F401
from social_transport.models import transport  # noqa: F401
from social_transport.utils.logging_config import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite only enforces ON DELETE CASCADE with this pragma, per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and hands out sessions.

    Built once by the process entry point and passed to every service.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 5,
        echo: bool = False,
    ) -> None:
        self.url = url
        self.is_sqlite = url.startswith("sqlite")
        if self.is_sqlite:
            self.engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
            )
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_engine(
                url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
            )

    def create_all(self) -> None:
        """Create every table that does not exist yet."""
        SQLModel.metadata.create_all(self.engine)
        logger.info(f"Database schema ready: {self.engine.url.render_as_string(hide_password=True)}")

    def session(self) -> Session:
        """Plain session for reads and single-step writes."""
        return Session(self.engine, expire_on_commit=False)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Scoped transaction: commits on success, rolls back on any error."""
        session = self.session()
        try:
            yield session
            session.commit()
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()
