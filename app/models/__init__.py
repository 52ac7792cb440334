"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.pollution import Pollution
from app.models.user import User

__all__ = ["Base", "Pollution", "User"]
