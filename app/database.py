"""Database connection and session management."""
import logging

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def _set_statement_timeout(dbapi_connection, connection_record):
    """Cap query time on PostgreSQL connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("SET statement_timeout = '30s'")
    cursor.close()


class Database:
    """Engine and session factory for one database.

    Built explicitly and handed to the application, which calls
    ``connect()`` on startup and ``close()`` on shutdown.
    """

    def __init__(self, url: str):
        self.url = make_url(url)

        if self.url.get_backend_name() == "sqlite":
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if self.url.database in (None, "", ":memory:"):
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {
                "pool_pre_ping": True,
                "pool_size": 5,
                "max_overflow": 10,
            }

        self.engine = create_engine(self.url, **engine_kwargs)

        if self.url.get_backend_name() == "postgresql":
            event.listen(self.engine, "connect", _set_statement_timeout)

        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def connect(self) -> None:
        """Check the database is reachable and create missing tables."""
        # Register models on Base.metadata
        import app.models  # noqa: F401

        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Connected to database {self.url.render_as_string()}")

    def close(self) -> None:
        """Release every pooled connection."""
        self.engine.dispose()
        logger.info("Database connections closed")

    def session(self) -> Session:
        return self.session_factory()


def get_db(request: Request):
    """Dependency for getting database sessions."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
