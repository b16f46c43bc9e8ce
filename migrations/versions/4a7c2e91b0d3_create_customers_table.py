"""create customers table

Revision ID: 4a7c2e91b0d3
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "4a7c2e91b0d3"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    existing_tables = set(insp.get_table_names())

    def _has_index(table: str, name: str) -> bool:
        try:
            return any(ix.get("name") == name for ix in insp.get_indexes(table))
        except Exception:
            return False

    if "customers" not in existing_tables:
        op.create_table(
            "customers",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("firstname", sa.String(length=255), nullable=False),
            sa.Column("lastname", sa.String(length=255), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("mobile", sa.String(length=13), nullable=False),
            sa.Column("address", sa.Text(), nullable=True),
            sa.Column("gender", sa.String(length=16), nullable=False),
            sa.Column("hobbies", sa.Text(), nullable=False, server_default="[]"),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=False),
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=False),
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
            sa.UniqueConstraint("email", name="uq_customers_email"),
            sa.CheckConstraint("gender IN ('male', 'female')", name="ck_customers_gender"),
        )
        existing_tables.add("customers")

    if "customers" in existing_tables:
        insp = inspect(op.get_bind())
        if not _has_index("customers", "idx_customers_updated_at"):
            op.create_index("idx_customers_updated_at", "customers", ["updated_at"])


def downgrade() -> None:
    op.drop_index("idx_customers_updated_at", table_name="customers")
    op.drop_table("customers")
