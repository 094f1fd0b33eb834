"""
Invoice Manager Backend — Invoice Route Handlers
==================================================

What:  HTTP entry points of the invoice pages: list, fetch one, and the
       create / edit / delete form submissions.
How:   Reads the submitted form, delegates to InvoiceService, and turns the
       returned form state into a JSON response. Successful create/edit
       calls end in RedirectSignal, answered with 303 by the handler in main.py.
Who:   Called by the invoice list page, the create form and the edit form.

Status Codes (form submissions):
    303 See Other       create/edit succeeded → Location: /dashboard/invoices
    200 OK              delete succeeded → {"message": "Deleted Invoice."}
    400 Bad Request     field errors → {"errors": {...}, "message": "..."}
    500 Server Error    storage failure → {"message": "Database Error: ..."}
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.invoice import (
    ErrorResponse,
    InvoiceFormState,
    InvoiceListResponse,
    InvoiceResponse,
)
from app.services.invoice_service import DATABASE_ERROR_PREFIX, invoice_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.invoices_path, tags=["Invoices"])

_FORM_RESPONSES = {
    303: {"description": "Saved; redirect to the invoice list"},
    400: {"description": "Field validation failed", "model": InvoiceFormState},
    500: {"description": "Database error", "model": InvoiceFormState},
}


def form_state_response(state: InvoiceFormState) -> JSONResponse:
    """Map a handler's form state to an HTTP response."""
    if state.errors:
        status_code = 400
    elif state.message and state.message.startswith(DATABASE_ERROR_PREFIX):
        status_code = 500
    else:
        status_code = 200
    return JSONResponse(status_code=status_code, content=state.to_response())


@router.get(
    "",
    response_model=InvoiceListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List invoices",
)
async def list_invoices(
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceListResponse:
    """Invoice list view; served from the path cache until a mutation revalidates it."""
    return await invoice_service.list_invoices(db)


@router.post(
    "",
    status_code=303,
    responses=_FORM_RESPONSES,
    summary="Create an invoice from the submitted form",
)
async def create_invoice(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    form = await request.form()
    state = await invoice_service.create_invoice(db, InvoiceFormState(), form)
    return form_state_response(state)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        404: {"description": "Invoice not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single invoice",
)
async def get_invoice(
    invoice_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceResponse:
    return await invoice_service.get_invoice(db, invoice_id)


@router.post(
    "/{invoice_id}/edit",
    status_code=303,
    responses=_FORM_RESPONSES,
    summary="Update an invoice from the submitted form",
)
async def update_invoice(
    invoice_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    """
    Update customer, amount and status of an invoice.

    The id is taken from the URL; an `id` field in the form body is ignored.
    """
    form = await request.form()
    state = await invoice_service.update_invoice(db, invoice_id, InvoiceFormState(), form)
    return form_state_response(state)


@router.post(
    "/{invoice_id}/delete",
    responses={
        200: {"description": "Invoice deleted", "model": InvoiceFormState},
        500: {"description": "Database error", "model": InvoiceFormState},
    },
    summary="Delete an invoice (form button)",
)
async def delete_invoice_form(
    invoice_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    state = await invoice_service.delete_invoice(db, invoice_id)
    return form_state_response(state)


@router.delete(
    "/{invoice_id}",
    responses={
        200: {"description": "Invoice deleted", "model": InvoiceFormState},
        500: {"description": "Database error", "model": InvoiceFormState},
    },
    summary="Delete an invoice",
)
async def delete_invoice(
    invoice_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    state = await invoice_service.delete_invoice(db, invoice_id)
    return form_state_response(state)
