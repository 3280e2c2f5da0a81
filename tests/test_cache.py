"""
Unit tests for the expiring cache.

Cache contract:
- get() returns the value only while elapsed < ttl
- a stale entry is removed as a side effect of get()
- set() always overwrites with a fresh timestamp
"""

import unittest

from rtuschedule.cache import MISSING, ExpiringCache, cache_key


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestExpiringCache(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.cache = ExpiringCache(ttl=60, clock=self.clock)

    def test_fresh_entry_is_returned(self) -> None:
        self.cache.set("a", [1, 2])
        self.clock.advance(59.9)
        self.assertEqual(self.cache.get("a"), [1, 2])

    def test_entry_expires_exactly_at_ttl(self) -> None:
        self.cache.set("a", "x")
        self.clock.advance(60)
        self.assertIsNone(self.cache.get("a"))

    def test_stale_entry_is_evicted_on_read(self) -> None:
        self.cache.set("a", "old")
        self.cache.set("b", "other")
        self.clock.advance(120)
        self.assertIsNone(self.cache.get("a"))
        # only "b" is still occupying a slot
        self.assertEqual(len(self.cache), 1)

        self.cache.set("a", "new")
        self.assertEqual(self.cache.get("a"), "new")

    def test_set_overwrites_and_refreshes_timestamp(self) -> None:
        self.cache.set("a", 1)
        self.clock.advance(50)
        self.cache.set("a", 2)
        self.clock.advance(50)
        self.assertEqual(self.cache.get("a"), 2)

    def test_missing_sentinel_distinguishes_cached_false(self) -> None:
        self.assertIs(self.cache.get("flag", MISSING), MISSING)
        self.cache.set("flag", False)
        self.assertIs(self.cache.get("flag", MISSING), False)

    def test_clear(self) -> None:
        self.cache.set("a", 1)
        self.cache.set("b", 2)
        self.cache.clear()
        self.assertEqual(len(self.cache), 0)
        self.assertIsNone(self.cache.get("a"))

    def test_clear_expired_only_drops_stale_entries(self) -> None:
        self.cache.set("old", 1)
        self.clock.advance(30)
        self.cache.set("new", 2)
        self.clock.advance(40)

        removed = self.cache.clear_expired()

        self.assertEqual(removed, 1)
        self.assertEqual(len(self.cache), 1)
        self.assertEqual(self.cache.get("new"), 2)

    def test_ttl_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            ExpiringCache(ttl=0)


class TestCacheKey(unittest.TestCase):
    def test_same_parameters_same_key(self) -> None:
        self.assertEqual(cache_key("events", 1, 2024, 5), cache_key("events", 1, 2024, 5))

    def test_operation_and_parameters_are_part_of_key(self) -> None:
        self.assertEqual(cache_key("events", 1, 2024, 5), "events:1:2024:5")
        self.assertNotEqual(cache_key("subjects", 1), cache_key("published", 1))
        self.assertNotEqual(cache_key("courses", 1, 2), cache_key("courses", 2, 1))


if __name__ == "__main__":
    unittest.main()
