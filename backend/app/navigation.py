"""
Invoice Manager Backend — Redirect Signal
===========================================

What:  `redirect(path)` ends the current handler and sends the client to `path`.
How:   Raises RedirectSignal. A FastAPI exception handler registered in
       main.py turns it into a 303 See Other response.
Who:   InvoiceService calls redirect() after a successful create/update.

RedirectSignal derives from Exception, not from InvoiceManagerError, and
handlers only wrap their database statement in try/except, so the signal
always reaches the framework.
"""

from typing import NoReturn


class RedirectSignal(Exception):
    """Control-flow signal carrying the redirect target."""

    def __init__(self, path: str, status_code: int = 303):
        self.path = path
        self.status_code = status_code
        super().__init__(path)


def redirect(path: str) -> NoReturn:
    """Leave the current handler and redirect the client to `path`."""
    raise RedirectSignal(path)
