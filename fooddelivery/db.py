import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, DBAPIError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from fooddelivery.exceptions import ConnectivityError
from fooddelivery.settings import DATABASE_URL

log = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(url: str = DATABASE_URL) -> Engine:
    # SQLite connections are shared with the TestClient / uvicorn worker threads
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, echo=False, connect_args=connect_args)


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection(db: Session, url: str = "") -> None:
    """Round-trip a trivial query; raise ConnectivityError if the store is unreachable."""
    try:
        db.execute(text("SELECT 1"))
    except DBAPIError as e:
        raise ConnectivityError(url or str(db.get_bind().url), str(e.orig or e)) from e


@contextmanager
def session_scope(url: str | None = None):
    """
    Scoped data-store handle for batch jobs.

    Opens a dedicated engine + session, checks the store is reachable before
    handing it out, and always closes the session and disposes the engine,
    whether the caller succeeds or raises.
    """
    url = url or DATABASE_URL
    try:
        eng = make_engine(url)
    except (ArgumentError, ImportError) as e:
        # unparseable URL, unknown dialect or missing driver
        raise ConnectivityError(url, str(e)) from e
    db = sessionmaker(bind=eng, autoflush=False, autocommit=False, future=True)()
    try:
        check_connection(db, url)
        log.info("connected to %s", eng.url.render_as_string(hide_password=True))
        yield db
    finally:
        db.close()
        eng.dispose()
        log.info("data store connection released")
