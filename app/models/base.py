"""SQLAlchemy declarative Base shared by the users and pollutions tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models; Alembic autogenerate reads its metadata."""

    pass
