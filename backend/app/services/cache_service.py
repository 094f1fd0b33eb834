"""
Invoice Manager Backend — Path Cache
======================================

What:  In-process cache of rendered views keyed by logical path.
How:   A plain dict from path to payload. Mutations call revalidate_path()
       so the next read of that view refetches from the database.
Who:   GET /dashboard/invoices reads and fills it; InvoiceService
       revalidates it after every successful mutation.

Scope:
    One cache per worker process. With several workers, each keeps its own
    copy and a mutation only revalidates the worker that served it.
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class PathCache:
    """
    Cache of view payloads keyed by path.

    Paths are normalized without a trailing slash, so "/dashboard/invoices"
    and "/dashboard/invoices/" are the same entry.

    Every revalidation bumps the path's generation. A reader takes the
    generation before querying and stores its result with set_if_current(),
    so a mutation committed while the query was in flight discards that
    result instead of caching a stale view.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}
        self._generations: Dict[str, int] = {}

    @staticmethod
    def _key(path: str) -> str:
        return path.rstrip("/") or "/"

    def get(self, path: str) -> Optional[Any]:
        return self._entries.get(self._key(path))

    def set(self, path: str, value: Any) -> None:
        self._entries[self._key(path)] = value

    def generation(self, path: str) -> int:
        return self._generations.get(self._key(path), 0)

    def set_if_current(self, path: str, generation: int, value: Any) -> bool:
        """Store `value` only if `path` was not revalidated since `generation`."""
        key = self._key(path)
        if self._generations.get(key, 0) != generation:
            logger.debug("Discarded view of %s read before a revalidation", path)
            return False
        self._entries[key] = value
        return True

    def revalidate_path(self, path: str) -> None:
        """Drop the cached view at `path`; the next read refetches it."""
        key = self._key(path)
        # Bumped even with nothing cached: a reader may be mid-query
        self._generations[key] = self._generations.get(key, 0) + 1
        if self._entries.pop(key, None) is not None:
            logger.debug("Revalidated cached view %s", path)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: str) -> bool:
        return self._key(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


# ── Singleton Instance ────────────────────────────────────────────────────
path_cache = PathCache()
