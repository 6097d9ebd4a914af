import logging

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from .models import Base

logger = logging.getLogger(__name__)


def make_engine(url: str, echo: bool = False) -> Engine:
    """Create the process-wide engine for ``url``.

    SQLite connections are shared across the server's worker threads, and an
    in-memory database keeps a single connection so every session sees the
    same tables.
    """
    parsed = make_url(url)
    kwargs: dict = {"echo": echo}
    if parsed.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(parsed, **kwargs)
    logger.info("Using store %s", parsed.render_as_string(hide_password=True))
    return engine


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
