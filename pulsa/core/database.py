from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi import Request
from typing import Iterator
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False, **engine_kwargs) -> Engine:
    """
    Creates an engine for the given URL.
    SQLite connections get foreign keys switched on so cascades behave like PostgreSQL.
    """
    if database_url.startswith("sqlite"):
        engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise each checkout sees an empty database
            engine_kwargs.setdefault("poolclass", StaticPool)

    engine = create_engine(database_url, echo=echo, **engine_kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    logger.debug(f"Database engine created for dialect '{engine.dialect.name}'")
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency to get a database session.
    The session factory belongs to the application handling the request,
    and the session is always closed after the request.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def dialect_insert(db: Session, model):
    """
    Returns an INSERT construct supporting ON CONFLICT for the session's dialect,
    or None when the dialect has no such construct (callers fall back to a SAVEPOINT).
    """
    dialect_name = db.get_bind().dialect.name
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        return None
    return insert(model)


def create_db_and_tables(engine: Engine) -> None:
    # Models must be imported so they are registered on Base.metadata
    from pulsa import models # noqa: F401
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    from pulsa.core.config import settings
    print("Creating database tables based on models...")
    # Schema in production is managed with Alembic; this is for initial local setup.
    create_db_and_tables(build_engine(settings.DATABASE_URL))
    print("Database tables created (if they didn't exist).")
