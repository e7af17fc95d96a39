from typing import Any

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import create_engine

from topichub.db.store import EntityStore


def _serialize_sqlite_writes(engine: Engine) -> None:
    """Start every SQLite transaction with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, so two sessions that both
    read before writing can deadlock on lock promotion. Taking the write
    lock up front makes concurrent writers queue on the busy timeout
    instead.
    """

    @event.listens_for(engine, "connect")
    def _disable_implicit_begin(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(connection):
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(
    database_url: str, *, echo: bool = False, **engine_kwargs: Any
) -> Engine:
    connect_args: dict[str, object] = {}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        # Required for SQLite when used with FastAPI across threads.
        connect_args = {"check_same_thread": False, "timeout": 30}

    engine = create_engine(
        database_url, echo=echo, connect_args=connect_args, **engine_kwargs
    )
    if is_sqlite:
        _serialize_sqlite_writes(engine)
    return engine


def build_store(database_url: str, *, echo: bool = False) -> EntityStore:
    """Create the store used for the lifetime of the application."""
    return EntityStore(build_engine(database_url, echo=echo))


def get_store(request: Request) -> EntityStore:
    """Return the store attached to the app at startup."""
    return request.app.state.store
