from pathlib import Path
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine

from tempest.core.db import engine as default_engine
from tempest.models import Base


def ensure_sqlite_directory(database_url: str) -> None:
    """
    Create the parent directory of a file-backed SQLite database.

    Other backends and in-memory SQLite URLs are left untouched.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    if not url.database or url.database == ":memory:":
        return
    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


async def init_db(engine: Optional[AsyncEngine] = None) -> None:
    """
    Initialize the database schema.

    This function creates all database tables defined in the SQLAlchemy
    ORM models if they do not already exist.

    Notes:
    - This uses `Base.metadata.create_all`, which is enough for the single
      append-only `observation` table.
    - The default engine is the one configured through `DATABASE_URL`.
    """
    engine = engine or default_engine
    ensure_sqlite_directory(engine.url.render_as_string(hide_password=False))

    async with engine.begin() as conn:
        # Run the synchronous SQLAlchemy `create_all` operation
        # inside an asynchronous context.
        await conn.run_sync(Base.metadata.create_all)
