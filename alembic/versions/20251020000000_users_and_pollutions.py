"""Create users and pollutions tables.

Revision ID: 20251020000000
Revises:
Create Date: 2025-10-20

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20251020000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("login", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("nom", sa.String(length=255), nullable=False),
        sa.Column("prenom", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="user"),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_login"), "users", ["login"], unique=True)
    op.create_index(op.f("ix_users_refresh_token"), "users", ["refresh_token"], unique=False)

    op.create_table(
        "pollutions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("titre", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type_pollution", sa.String(length=64), nullable=False),
        sa.Column("lieu", sa.String(length=300), nullable=False),
        sa.Column("date_observation", sa.Date(), nullable=False),
        sa.Column("decouvreur_nom", sa.String(length=100), nullable=True),
        sa.Column("decouvreur_prenom", sa.String(length=100), nullable=True),
        sa.Column("utilisateur_id", sa.String(length=36), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["utilisateur_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_pollutions_type_pollution"), "pollutions", ["type_pollution"], unique=False
    )
    op.create_index(
        op.f("ix_pollutions_utilisateur_id"), "pollutions", ["utilisateur_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_pollutions_utilisateur_id"), table_name="pollutions")
    op.drop_index(op.f("ix_pollutions_type_pollution"), table_name="pollutions")
    op.drop_table("pollutions")
    op.drop_index(op.f("ix_users_refresh_token"), table_name="users")
    op.drop_index(op.f("ix_users_login"), table_name="users")
    op.drop_table("users")
