"""Database engine and helpers.

The engine is built once per application by `create_app` and kept on
`app.state.engine`; request handlers receive a `Session` through the
`get_session` dependency instead of importing a module-level handle.
Tests pass their own in-memory engine to `create_app`.
"""

import logging

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from . import models  # noqa: F401  registers the tables on SQLModel.metadata

logger = logging.getLogger("exercise_tracker.db")


def make_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for `url`.

    SQLite connections are shared across FastAPI's worker threads, so
    `check_same_thread` is disabled for them.
    """
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=echo, connect_args=connect_args)


def create_db_and_tables(engine: Engine):
    """Create the `user` and `exercise` tables if they are missing."""
    SQLModel.metadata.create_all(engine)
    logger.debug("tables ready on %s", engine.url.render_as_string(hide_password=True))


def get_session(request: Request):
    """Yield a database `Session` for FastAPI dependency injection.

    The session is opened from the engine attached to the running
    application and closed when the request scope finishes.
    """
    with Session(request.app.state.engine) as session:
        yield session
