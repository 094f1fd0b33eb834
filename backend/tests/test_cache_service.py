"""
Invoice Manager Backend — Path Cache Tests
============================================

What:  Unit tests for PathCache get/set/revalidate semantics.
"""

from app.services.cache_service import PathCache


class TestPathCache:

    def test_set_then_get(self):
        cache = PathCache()
        cache.set("/dashboard/invoices", ["a"])

        assert cache.get("/dashboard/invoices") == ["a"]
        assert "/dashboard/invoices" in cache

    def test_trailing_slash_is_the_same_entry(self):
        cache = PathCache()
        cache.set("/dashboard/invoices/", 1)

        assert cache.get("/dashboard/invoices") == 1
        assert len(cache) == 1

    def test_revalidate_drops_only_that_path(self):
        cache = PathCache()
        cache.set("/dashboard/invoices", 1)
        cache.set("/dashboard/customers", 2)

        cache.revalidate_path("/dashboard/invoices")

        assert cache.get("/dashboard/invoices") is None
        assert cache.get("/dashboard/customers") == 2

    def test_revalidate_unknown_path_is_a_noop(self):
        cache = PathCache()

        cache.revalidate_path("/nowhere")

        assert len(cache) == 0

    def test_clear(self):
        cache = PathCache()
        cache.set("/a", 1)
        cache.set("/b", 2)

        cache.clear()

        assert len(cache) == 0

    def test_set_if_current_stores_when_not_revalidated(self):
        cache = PathCache()
        generation = cache.generation("/dashboard/invoices")

        assert cache.set_if_current("/dashboard/invoices", generation, ["fresh"])
        assert cache.get("/dashboard/invoices") == ["fresh"]

    def test_read_started_before_revalidation_is_discarded(self):
        cache = PathCache()
        generation = cache.generation("/dashboard/invoices")

        # A mutation lands while the reader is still querying
        cache.revalidate_path("/dashboard/invoices/")

        assert not cache.set_if_current("/dashboard/invoices", generation, ["stale"])
        assert "/dashboard/invoices" not in cache

    def test_revalidation_of_another_path_does_not_discard(self):
        cache = PathCache()
        generation = cache.generation("/dashboard/invoices")

        cache.revalidate_path("/dashboard/customers")

        assert cache.set_if_current("/dashboard/invoices", generation, 1)
