from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Models inheriting from this class are registered in the shared
    metadata and created by `init_db`.
    """
    pass
