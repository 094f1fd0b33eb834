"""
Invoice Manager Backend — Invoice Service (Mutation Handlers)
===============================================================

What:  Create, update and delete handlers for the invoice form, plus the
       list/detail reads that back the invoice pages.
How:   Each mutation validates the submitted form, runs one parameterized
       statement against `invoices`, commits, revalidates the cached list
       view and (for create/update) signals a redirect to it.
Who:   Called by app/routes/invoices.py; tests call it directly with a
       session and their own collaborators.

Mutation Flow:
    ┌──────────┐    ┌────────────┐    ┌───────────────┐    ┌──────────────┐
    │  Form    │───▶│  Validate  │───▶│  INSERT /     │───▶│  Revalidate  │
    │  (Route) │    │  & Coerce  │    │  UPDATE /     │    │  + Redirect  │
    └──────────┘    └────────────┘    │  DELETE       │    └──────────────┘
                          │           └───────────────┘
                          ▼                   │
                    field errors        "Database Error: ..."
                    (returned)          (returned, logged)

Error Handling:
    Validation failures and storage failures are returned as
    InvoiceFormState, never raised. Only the database statement and its
    commit sit inside try/except; the redirect signal raised afterwards
    always propagates to the framework.

Collaborators:
    The path cache and the redirect callable are constructor arguments,
    defaulting to the process-wide cache and app.navigation.redirect.
"""

import datetime
import logging
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import DatabaseError, NotFoundError
from app.models.invoice import Invoice
from app.navigation import redirect
from app.schemas.invoice import (
    InvoiceForm,
    InvoiceFormState,
    InvoiceListResponse,
    InvoiceResponse,
    flatten_field_errors,
)
from app.services.cache_service import PathCache, path_cache

logger = logging.getLogger(__name__)

DATABASE_ERROR_PREFIX = "Database Error"

CREATE_INVALID_MESSAGE = "Missing fields. Failed to create invoice."
UPDATE_INVALID_MESSAGE = "Missing Fields. Failed to Update Invoice."
CREATE_FAILED_MESSAGE = f"{DATABASE_ERROR_PREFIX}: Failed to Create Invoice."
UPDATE_FAILED_MESSAGE = f"{DATABASE_ERROR_PREFIX}: Failed to Update Invoice."
DELETE_FAILED_MESSAGE = f"{DATABASE_ERROR_PREFIX}: Failed to Delete Invoice."
DELETED_MESSAGE = "Deleted Invoice."


def utc_today() -> datetime.date:
    """Creation date stamped on new invoices (UTC calendar day)."""
    return datetime.datetime.now(datetime.timezone.utc).date()


class InvoiceService:
    """
    Business logic for the invoice pages.

    Responsibilities:
        - create_invoice(): validate → INSERT → revalidate → redirect
        - update_invoice(): validate → UPDATE by id → revalidate → redirect
        - delete_invoice(): DELETE by id → revalidate → confirmation message
        - list_invoices(): cached list view
        - get_invoice(): single invoice for the edit form

    Each call receives its own session and keeps no state between calls.
    """

    def __init__(
        self,
        cache: PathCache = path_cache,
        redirect_to: Callable[[str], Any] = redirect,
        invoices_path: Optional[str] = None,
    ):
        self.cache = cache
        self.redirect_to = redirect_to
        self.invoices_path = invoices_path or settings.invoices_path

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_invoice(
        self,
        db: AsyncSession,
        prev_state: Optional[InvoiceFormState],
        form_data: Mapping[str, Any],
    ) -> InvoiceFormState:
        """
        Validate the form and insert a new invoice.

        Args:
            db: Async database session
            prev_state: Form state from the previous submission (threaded
                through by the page, not consulted here)
            form_data: Raw form fields (customerId, amount, status)

        Returns:
            InvoiceFormState with field errors or a database error message.
            On success the redirect signal is raised instead of returning.
        """
        try:
            form = InvoiceForm.from_form(form_data)
        except ValidationError as e:
            errors = flatten_field_errors(e)
            logger.info("Create invoice rejected: invalid fields %s", sorted(errors))
            return InvoiceFormState(errors=errors, message=CREATE_INVALID_MESSAGE)

        amount_in_cents = form.amount_in_cents
        invoice_date = utc_today()

        try:
            result = await db.execute(
                insert(Invoice)
                .values(
                    customer_id=form.customer_id,
                    amount=amount_in_cents,
                    status=form.status,
                    date=invoice_date,
                )
                .returning(Invoice.id)
            )
            invoice_id = result.scalar_one()
            await db.commit()
        except Exception as e:
            await self._rollback(db)
            logger.error(
                "Database error creating invoice: %s",
                str(e),
                exc_info=True,
                extra={"customer_id": form.customer_id},
            )
            return InvoiceFormState(message=CREATE_FAILED_MESSAGE)

        logger.info(
            "Invoice %s created: customer=%s amount=%d status=%s",
            invoice_id, form.customer_id, amount_in_cents, form.status,
        )
        return self._revalidate_and_redirect()

    async def update_invoice(
        self,
        db: AsyncSession,
        invoice_id: str,
        prev_state: Optional[InvoiceFormState],
        form_data: Mapping[str, Any],
    ) -> InvoiceFormState:
        """
        Validate the form and rewrite customer, amount and status of one invoice.

        The id comes from the route, never from the form body. `date` is
        left untouched. An id that matches no row updates nothing and still
        counts as success.
        """
        try:
            form = InvoiceForm.from_form(form_data)
        except ValidationError as e:
            errors = flatten_field_errors(e)
            logger.info(
                "Update of invoice %s rejected: invalid fields %s",
                invoice_id, sorted(errors),
            )
            return InvoiceFormState(errors=errors, message=UPDATE_INVALID_MESSAGE)

        amount_in_cents = form.amount_in_cents

        try:
            result = await db.execute(
                update(Invoice)
                .where(Invoice.id == invoice_id)
                .values(
                    customer_id=form.customer_id,
                    amount=amount_in_cents,
                    status=form.status,
                )
                .execution_options(synchronize_session=False)
            )
            await db.commit()
        except Exception as e:
            await self._rollback(db)
            logger.error(
                "Database error updating invoice %s: %s",
                invoice_id,
                str(e),
                exc_info=True,
                extra={"invoice_id": invoice_id},
            )
            return InvoiceFormState(message=UPDATE_FAILED_MESSAGE)

        if result.rowcount == 0:
            logger.info("Update matched no invoice with id %s", invoice_id)
        else:
            logger.info(
                "Invoice %s updated: customer=%s amount=%d status=%s",
                invoice_id, form.customer_id, amount_in_cents, form.status,
            )
        return self._revalidate_and_redirect()

    async def delete_invoice(self, db: AsyncSession, invoice_id: str) -> InvoiceFormState:
        """
        Delete one invoice and revalidate the list view.

        Deleting an id that no longer exists is not an error. The caller
        stays on the current page, so there is no redirect.
        """
        try:
            result = await db.execute(
                delete(Invoice)
                .where(Invoice.id == invoice_id)
                .execution_options(synchronize_session=False)
            )
            await db.commit()
        except Exception as e:
            await self._rollback(db)
            logger.error(
                "Database error deleting invoice %s: %s",
                invoice_id,
                str(e),
                exc_info=True,
                extra={"invoice_id": invoice_id},
            )
            return InvoiceFormState(message=DELETE_FAILED_MESSAGE)

        logger.info("Invoice %s deleted (%s row(s))", invoice_id, result.rowcount)
        self.cache.revalidate_path(self.invoices_path)
        return InvoiceFormState(message=DELETED_MESSAGE)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_invoices(self, db: AsyncSession) -> InvoiceListResponse:
        """
        Return the invoice list view, from the path cache when it is fresh.

        Query:
            SELECT * FROM invoices ORDER BY date DESC, id
            → idx_invoices_date

        Raises:
            DatabaseError: Query execution failed (→ 500)
        """
        cached = self.cache.get(self.invoices_path)
        if cached is not None:
            return cached
        generation = self.cache.generation(self.invoices_path)

        try:
            result = await db.execute(
                select(Invoice).order_by(Invoice.date.desc(), Invoice.id)
            )
            invoices = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing invoices: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve invoices. Please try again.",
                context={"error_type": type(e).__name__},
            )

        response = InvoiceListResponse(
            invoices=[InvoiceResponse.model_validate(invoice) for invoice in invoices],
            total_count=len(invoices),
        )
        self.cache.set_if_current(self.invoices_path, generation, response)
        return response

    async def get_invoice(self, db: AsyncSession, invoice_id: str) -> InvoiceResponse:
        """
        Fetch one invoice, e.g. to pre-fill the edit form.

        Raises:
            NotFoundError: No invoice with this id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(select(Invoice).where(Invoice.id == invoice_id))
            invoice = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching invoice %s: %s", invoice_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the invoice. Please try again.",
                context={"invoice_id": invoice_id},
            )

        if invoice is None:
            raise NotFoundError(resource="invoice", resource_id=invoice_id)

        return InvoiceResponse.model_validate(invoice)

    # ── Helpers ───────────────────────────────────────────────────────────

    def _revalidate_and_redirect(self) -> InvoiceFormState:
        self.cache.revalidate_path(self.invoices_path)
        self.redirect_to(self.invoices_path)
        # Reached only when the injected redirect does not raise
        return InvoiceFormState()

    @staticmethod
    async def _rollback(db: AsyncSession) -> None:
        try:
            await db.rollback()
        except Exception:
            logger.warning("Rollback after database error failed", exc_info=True)


# ── Singleton Instance ────────────────────────────────────────────────────
invoice_service = InvoiceService()
