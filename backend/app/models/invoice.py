"""
Invoice Manager Backend — Invoice SQLAlchemy Model
====================================================

What:  ORM model representing the `invoices` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by InvoiceService for CRUD statements and by Alembic for schema management.

Table Design:
    - id: String primary key (a UUID4 string), generated on insert, never changes
    - customer_id: Identifier of the customer record the invoice belongs to
    - amount: Integer cents (the form amount × 100)
    - status: 'pending' | 'paid', enforced by a CHECK constraint
    - date: Calendar date the invoice was created (UTC), never changes

    Identifiers are plain strings. Ids that arrive from a route or a form are
    compared as text, so an id that matches no row (e.g. "x1") is simply a
    statement that affects nothing, on every backend.
"""

import uuid
import datetime

from sqlalchemy import CheckConstraint, Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

INVOICE_STATUSES = ("pending", "paid")
ID_LENGTH = 64


def _new_invoice_id() -> str:
    return str(uuid.uuid4())


class Invoice(Base):
    """
    Represents a single invoice.

    Lifecycle:
        1. Inserted by create_invoice (date set to the creation day)
        2. customer_id / amount / status rewritten by update_invoice
        3. Removed by delete_invoice

    Query Patterns:
        - List view: SELECT ... ORDER BY date DESC  → idx_invoices_date
        - Edit form: SELECT ... WHERE id = :id      → primary key
    """

    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        primary_key=True,
        default=_new_invoice_id,
        comment="Unique invoice identifier",
    )

    customer_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        nullable=False,
        comment="Customer the invoice is billed to",
    )

    # Integer cents; floats never reach the table
    amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Invoice amount in cents",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Payment state: pending, paid",
    )

    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        comment="Creation date (UTC)",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'paid')",
            name="ck_invoices_status",
        ),
        Index("idx_invoices_date", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, status='{self.status}', "
            f"amount={self.amount}, date='{self.date}')>"
        )
