from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from tempest.core.config import settings


def create_engine(database_url: str) -> AsyncEngine:
    """
    Create an asynchronous engine for the observation store.

    File-backed SQLite databases get a longer lock timeout, so an API
    request reading the store does not make the listener's insert fail.
    """
    connect_args = {}
    if make_url(database_url).get_backend_name() == "sqlite":
        connect_args["timeout"] = 30

    return create_async_engine(
        database_url,
        pool_pre_ping=True,  # Validates connections before using them
        connect_args=connect_args,
    )


def session_factory(engine: AsyncEngine) -> sessionmaker:
    # Inserted rows stay readable after the commit that stored them.
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# Engine and sessions for the configured `DATABASE_URL`.
engine: AsyncEngine = create_engine(settings.database_url)
AsyncSessionLocal = session_factory(engine)


async def get_db() -> AsyncSession:
    """
    FastAPI dependency that provides an asynchronous database session.

    One session per request, closed when the request finishes.
    """
    async with AsyncSessionLocal() as session:
        yield session
