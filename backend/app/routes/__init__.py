# Routes package init
"""
Invoice Manager Backend — API Routes Package
==============================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - invoices.py: GET    /dashboard/invoices               (list, cached)
                   POST   /dashboard/invoices               (create form)
                   GET    /dashboard/invoices/{id}          (single invoice)
                   POST   /dashboard/invoices/{id}/edit     (update form)
                   POST   /dashboard/invoices/{id}/delete   (delete button)
                   DELETE /dashboard/invoices/{id}          (delete)
    - health.py:   GET    /health                           (service health check)

Routes read the request and shape the response; validation, persistence
and revalidation live in app/services/invoice_service.py.
"""
