from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from pantry.config import settings
from pantry.logging import get_logger

logger = get_logger(__name__)


def build_engine(dsn: str | None = None):
    """Create an engine; in-memory SQLite shares one connection across threads."""
    dsn = dsn or settings.database_dsn
    if dsn.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if dsn in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(dsn, **kwargs)
    return create_engine(dsn, pool_pre_ping=True)


engine = build_engine()


def create_db_and_tables(bind=None) -> None:
    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    logger.info("db.tables_ready url=%s", bind.url.render_as_string(hide_password=True))


def get_session(bind=None) -> Session:
    return Session(bind or engine)
