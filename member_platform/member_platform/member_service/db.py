"""
Database handle and session management for the Member Service
"""
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Generator
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Owns the engine and session factory for one store.

    Created and disposed by the application lifespan and handed to request
    handlers through ``get_db``.
    """

    def __init__(self, url: str, pool_size: int = 5, max_overflow: int = 10, echo: bool = False):
        self.url = url
        if url.startswith("sqlite"):
            options = {"connect_args": {"check_same_thread": False}}
            if url == "sqlite://" or ":memory:" in url:
                # one shared connection, otherwise each thread sees an empty database
                options["poolclass"] = StaticPool
        else:
            options = {"pool_size": pool_size, "max_overflow": max_overflow}
        self.engine = create_engine(url, echo=echo, **options)
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False)

    def init(self) -> None:
        """
        Create all tables.
        Should be called on application startup.
        """
        # Import models to ensure they are registered with Base
        from .models import User  # noqa: F401

        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")

    def session(self) -> Session:
        return self.SessionLocal()

    def check_connection(self) -> bool:
        """
        Check if database connection is working.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection check failed: {e}")
            return False


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
