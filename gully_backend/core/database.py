from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from gully_backend.core.config import DATABASE_URL, SQL_ECHO


def build_engine(url: str = DATABASE_URL, echo: bool = SQL_ECHO):
    """Create an engine. In-memory SQLite shares one connection across threads."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


# --- Engine ---
engine = build_engine()


# --- Initialize DB tables ---
def init_db(bind=None):
    """Create tables if they don't exist."""
    # Import models so every table is registered on the metadata
    from gully_backend import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


# --- DB session (used in routes) ---
def get_session():
    with Session(engine) as session:
        yield session
