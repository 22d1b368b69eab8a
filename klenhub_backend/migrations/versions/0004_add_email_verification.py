"""add email verification fields to users and create tokens

Checks for each column and table first, so databases that already got these
changes by hand upgrade cleanly.

Revision ID: 0004_add_email_verification
Revises: 0003_add_delivery_details
Create Date: 2025-03-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from klenhub_backend.core.logger import get_component_logger


revision: str = "0004_add_email_verification"
down_revision: Union[str, None] = "0003_add_delivery_details"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

logger = get_component_logger("migrations")


def _user_columns() -> set[str]:
    inspector = sa.inspect(op.get_bind())
    return {column["name"] for column in inspector.get_columns("users")}


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def upgrade() -> None:
    columns = _user_columns()
    missing = []

    if "is_email_verified" not in columns:
        logger.info("adding is_email_verified column to users")
        missing.append(
            sa.Column(
                "is_email_verified",
                sa.Boolean(),
                nullable=False,
                server_default=sa.false(),
            )
        )
    else:
        logger.info("is_email_verified column already exists in users")

    if "last_login" not in columns:
        logger.info("adding last_login column to users")
        missing.append(sa.Column("last_login", sa.DateTime(timezone=True), nullable=True))
    else:
        logger.info("last_login column already exists in users")

    if missing:
        with op.batch_alter_table("users") as batch_op:
            for column in missing:
                batch_op.add_column(column)

    if not _has_table("tokens"):
        logger.info("creating tokens table")
        op.create_table(
            "tokens",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column(
                "user_id",
                sa.String(36),
                sa.ForeignKey("users.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("token", sa.String(255), nullable=False),
            sa.Column(
                "type",
                sa.Enum("password_reset", "email_verification", name="token_type"),
                nullable=False,
            ),
            sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        )
    else:
        logger.info("tokens table already exists")


def downgrade() -> None:
    if _has_table("tokens"):
        op.drop_table("tokens")
        if op.get_bind().dialect.name == "postgresql":
            sa.Enum(name="token_type").drop(op.get_bind(), checkfirst=True)

    columns = _user_columns()
    with op.batch_alter_table("users") as batch_op:
        if "last_login" in columns:
            batch_op.drop_column("last_login")
        if "is_email_verified" in columns:
            batch_op.drop_column("is_email_verified")
