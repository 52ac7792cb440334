"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, String, Text

from app.core.ids import new_user_id
from app.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'
    refresh_token: the single live refresh token; replaced on login/refresh, cleared on logout.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_user_id)
    login = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    nom = Column(String(255), nullable=False)
    prenom = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, default=ROLE_USER)
    refresh_token = Column(Text, nullable=True, index=True)
