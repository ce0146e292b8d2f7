"""Database engine and session management.

A :class:`Database` owns the SQLAlchemy engine (and with it the connection
pool) for the lifetime of the process. The application builds one in
``create_app`` and hands it to request handlers through ``app.state``.

Example:
    >>> from schedule_platform.database import Database
    >>> db = Database("sqlite:///schedule.db")
    >>> db.create_all()
    >>> with db.session() as session:
    ...     ...
    >>> db.dispose()
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from schedule_platform.logging import logger

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine, connection pool and session factory.

    Args:
        url: SQLAlchemy database URL
        pool_size: Maximum number of pooled connections (ignored for SQLite)
        echo: Log emitted SQL
    """

    def __init__(self, url: str, pool_size: int = 10, echo: bool = False):
        self.url = url

        if url.startswith("sqlite"):
            self.engine: Engine = create_engine(
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
                max_overflow=0,
                pool_pre_ping=True,
            )

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        """Create every table that does not exist yet."""
        from schedule_platform import models  # noqa: F401  (registers the tables)

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready at {}", self.engine.url.render_as_string(hide_password=True))

    def check_connection(self) -> bool:
        """Open and release one pooled connection."""
        try:
            with self.engine.connect():
                pass
        except Exception as e:
            logger.error("Database connection failed: {}", e)
            return False
        logger.info("Database connection established")
        return True

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()
