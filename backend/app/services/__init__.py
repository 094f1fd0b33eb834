# Services package init
"""
Invoice Manager Backend — Services Layer
==========================================

What:  Business logic between routes (HTTP) and database (persistence).

Service Inventory:
    - InvoiceService: create / update / delete handlers and the list/detail reads
    - PathCache: cached views keyed by path, revalidated after mutations
"""
