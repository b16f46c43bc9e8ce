from __future__ import annotations

from contextlib import contextmanager
from collections.abc import Iterator

from flask import Flask, current_app, g
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

ENGINE_KEY = "sqlalchemy_engine"
SESSIONMAKER_KEY = "sqlalchemy_sessionmaker"


def _engine_options(database_url: str) -> dict[str, object]:
    options: dict[str, object] = {"pool_pre_ping": True}
    if database_url.startswith("postgres"):
        # sqlite uses its own single-file pool; these only apply to Postgres
        options.update(pool_recycle=1800, pool_size=5, max_overflow=10, pool_timeout=30)
    return options


def init_db(app: Flask) -> None:
    """Create the customers engine and session factory and park them in app.extensions."""
    database_url = app.config["DATABASE_URL"]
    engine = create_engine(database_url, **_engine_options(database_url))

    if app.config.get("ENV") != "production":
        @event.listens_for(engine, "checkout")
        def _log_checkout(dbapi_connection, connection_record, connection_proxy):  # type: ignore[no-redef]
            app.logger.debug("DB connection checkout from pool")

    app.extensions[ENGINE_KEY] = engine
    app.extensions[SESSIONMAKER_KEY] = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def db_session() -> Session:
    """Session for the current request; created on first use, closed on teardown."""
    s: Session | None = g.get("db_session")
    if s is None:
        s = current_app.extensions[SESSIONMAKER_KEY]()
        g.db_session = s
    return s


def teardown_db_session(exc: BaseException | None) -> None:
    s: Session | None = g.pop("db_session", None)
    if s is None:
        return
    # handlers commit explicitly; anything still pending here is abandoned
    if exc is not None:
        s.rollback()
    s.close()


@contextmanager
def session_scope(app: Flask) -> Iterator[Session]:
    """Session outside a request (scripts, tests). Commits on success."""
    s: Session = app.extensions[SESSIONMAKER_KEY]()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()
