# storefront/database.py
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from storefront.core.config import get_settings

settings = get_settings()

# The Supabase pooler (session mode) caps clients per project, so each
# process holds a single pre-pinged connection over SSL. SQLite URLs are
# for local runs and tests: one shared in-memory connection.


def with_ssl(url: str) -> str:
    """Append sslmode=require unless the URL already picks a mode."""
    if "sslmode=" in url:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}sslmode=require"


def build_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        with_ssl(url),
        echo=False,  # True to log SQL
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    """Create missing tables at startup (existing ones are left as they are)."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Request-scoped session dependency.

    Services decide when to commit; anything left uncommitted is rolled
    back when the session closes.
    """
    with Session(engine) as session:
        yield session
