"""
Invoice Manager Backend — Custom Exception Hierarchy
======================================================

What:  Application-specific exceptions for the read paths and global handlers.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    InvoiceManagerError (base)
    ├── NotFoundError   → 404 Not Found
    └── DatabaseError   → 500 Internal Server Error

Mutation handlers do not raise for bad input or storage failures: field
errors and "Database Error: ..." messages are returned to the caller as
form state (see app/services/invoice_service.py). The redirect signal in
app/navigation.py is not part of this hierarchy, so the catch-all
InvoiceManagerError handler never turns a redirect into a 500.
"""

from typing import Any, Dict, Optional


class InvoiceManagerError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(InvoiceManagerError):
    """
    Raised when a requested resource does not exist.

    When:    GET /dashboard/invoices/{id} with an unknown id.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "invoice",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.resource = resource
        self.resource_id = resource_id
        label = resource.capitalize()
        message = f"{label} '{resource_id}' not found" if resource_id else f"{label} not found"
        super().__init__(
            message=message,
            context={**(context or {}), "resource": resource, "resource_id": resource_id},
        )


class DatabaseError(InvoiceManagerError):
    """
    Raised when a read against the database fails unexpectedly.

    When:    Connection lost mid-query, invalid id literal for the column type, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver details
    are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
