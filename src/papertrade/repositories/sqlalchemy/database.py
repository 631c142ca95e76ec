"""Database connection and session management."""

from typing import Any, Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from papertrade.config.settings import Settings

Base = declarative_base()


class Database:
    """
    Explicitly constructed store handle.

    Owns the engine and session factory. The owner calls open() before use
    and close() when done; nothing here is cached at module level.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        self._url = url
        self._echo = echo
        self._engine_kwargs = engine_kwargs
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle for the configured database URL."""
        return cls(settings.get_database_url())

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> "Database":
        """Create the engine and session factory and ensure tables exist."""
        if self._engine is not None:
            return self

        kwargs = dict(self._engine_kwargs)
        if self._url.startswith("sqlite"):
            connect_args = kwargs.setdefault("connect_args", {})
            connect_args.setdefault("check_same_thread", False)  # SQLite-specific

        self._engine = create_engine(self._url, echo=self._echo, **kwargs)
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self._engine,
        )
        self.create_all()
        return self

    def create_all(self) -> None:
        """Create tables for all ORM models."""
        from papertrade.repositories.sqlalchemy import orm_models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        """Return a new session; the caller closes it."""
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
