from typing import Any
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


def _register_sqlite_functions(dbapi_connection: Any, _connection_record: Any) -> None:
    # SQLite lower()/LIKE only fold ASCII letters
    dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)


def build_engine(database_url: str) -> Engine:
    """
    Engine for the catalog store (SQLite).
    In-memory SQLite gets a single shared connection so every thread
    sees the same database. Every connection gets a Unicode-aware
    `casefold()` SQL function.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        raise ValueError(f"Unsupported catalog database: {url.get_backend_name()}")

    kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)
    event.listen(engine, "connect", _register_sqlite_functions)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    # Objects leave the session fully loaded and detached
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
