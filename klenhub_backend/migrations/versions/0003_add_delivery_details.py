"""add delivery details to orders

Revision ID: 0003_add_delivery_details
Revises: 0002_update_products
Create Date: 2025-03-04

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from klenhub_backend.core.logger import get_component_logger


revision: str = "0003_add_delivery_details"
down_revision: Union[str, None] = "0002_update_products"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

logger = get_component_logger("migrations")

DELIVERY_COLUMNS = (
    ("recipient_name", sa.String(255)),
    ("phone_number", sa.String(20)),
    ("address_line1", sa.String(255)),
    ("address_line2", sa.String(255)),
    ("city", sa.String(100)),
    ("province", sa.String(100)),
    ("postal_code", sa.String(20)),
    ("delivery_instructions", sa.Text()),
)


def upgrade() -> None:
    logger.info("adding delivery details columns to orders")
    with op.batch_alter_table("orders") as batch_op:
        for name, type_ in DELIVERY_COLUMNS:
            batch_op.add_column(sa.Column(name, type_, nullable=True))
            logger.info("added orders.%s", name)


def downgrade() -> None:
    with op.batch_alter_table("orders") as batch_op:
        for name, _ in reversed(DELIVERY_COLUMNS):
            batch_op.drop_column(name)
    logger.info("removed delivery details columns from orders")
