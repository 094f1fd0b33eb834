"""Create invoices table

Revision ID: 001
Revises: None
Create Date: 2026-01-15 00:00:00.000000+00:00

What:  Creates the `invoices` table used by the invoice pages.
How:   Text primary key (server-generated UUID string), integer cents,
       status CHECK constraint, and an index on date for the list view.

Rollback: downgrade() drops the table entirely (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the invoices table with its constraint and index."""
    op.create_table(
        "invoices",

        sa.Column(
            "id",
            sa.String(64),
            server_default=sa.text("gen_random_uuid()::text"),
            nullable=False,
            comment="Unique invoice identifier",
        ),

        sa.Column(
            "customer_id",
            sa.String(64),
            nullable=False,
            comment="Customer the invoice is billed to",
        ),

        # Integer cents (form amount × 100)
        sa.Column(
            "amount",
            sa.Integer(),
            nullable=False,
            comment="Invoice amount in cents",
        ),

        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            comment="Payment state: pending, paid",
        ),

        sa.Column(
            "date",
            sa.Date(),
            nullable=False,
            server_default=sa.text("CURRENT_DATE"),
            comment="Creation date (UTC)",
        ),

        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'paid')",
            name="ck_invoices_status",
        ),
    )

    op.create_index("idx_invoices_date", "invoices", ["date"])


def downgrade() -> None:
    """
    Drop the invoices table entirely.

    WARNING: This is destructive — all invoice data will be permanently lost.
    """
    op.drop_index("idx_invoices_date", table_name="invoices")
    op.drop_table("invoices")
