import unittest
from datetime import timedelta
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from pymongo.errors import ServerSelectionTimeoutError

from fight_schedule.models import EventPayload, FightEvent, Source
from fight_schedule.services.cache import EventCache
from fight_schedule.services.storage import InMemoryKeyValueStore
from helpers import FakeClock, UnreachableStore, raw_event


class TestEventCache(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.store = InMemoryKeyValueStore()
        self.cache = EventCache(self.store, ttl=timedelta(hours=6), key="test_cache", clock=self.clock)
        self.payload = EventPayload(
            events=[FightEvent.from_dict(raw_event("UFC 316", "2025-06-08T02:00:00Z"))],
            sources=[Source("UFC", "https://ufc.com/event/ufc-316")],
        )

    def test_read_empty_store_returns_none(self):
        self.assertIsNone(self.cache.read())

    def test_write_then_read_within_ttl(self):
        written = self.cache.write(self.payload)
        self.clock.advance(hours=5, minutes=59)

        record = self.cache.read()
        self.assertEqual(record.to_dict(), written.to_dict())
        self.assertEqual(record.payload.to_dict(), self.payload.to_dict())
        self.assertTrue(self.cache.is_fresh(record))

    def test_read_after_ttl_still_returns_payload_but_stale(self):
        self.cache.write(self.payload)
        self.clock.advance(hours=6)

        record = self.cache.read()
        self.assertEqual(record.payload.to_dict(), self.payload.to_dict())
        self.assertFalse(self.cache.is_fresh(record))

    def test_write_stamps_epoch_millis_under_fixed_key(self):
        self.cache.write(self.payload)
        stored = self.store.get("test_cache")
        self.assertEqual(stored["timestamp"], int(self.clock.now.timestamp() * 1000))
        self.assertEqual(set(stored), {"data", "timestamp"})
        self.assertEqual(set(stored["data"]), {"events", "sources"})

    def test_write_replaces_previous_record(self):
        self.cache.write(self.payload)
        self.clock.advance(hours=1)
        self.cache.write(EventPayload())

        record = self.cache.read()
        self.assertEqual(record.payload.events, [])
        self.assertEqual(record.written_at, self.clock.now)

    def test_different_key_does_not_see_old_record(self):
        self.cache.write(self.payload)
        other = EventCache(self.store, ttl=timedelta(hours=6), key="test_cache_v3", clock=self.clock)
        self.assertIsNone(other.read())

    def test_unreadable_record_is_treated_as_absent(self):
        self.store.set("test_cache", {"data": {"events": "garbage"}, "timestamp": "never"})
        with self.assertLogs("fight_schedule.services.cache", level="WARNING"):
            self.assertIsNone(self.cache.read())

    def test_record_stamped_in_the_future_is_stale(self):
        record = self.cache.write(self.payload)
        self.clock.advance(days=-30)

        self.assertLess(self.cache.age(record), timedelta(0))
        self.assertFalse(self.cache.is_fresh(record))

    def test_unreachable_store_reads_as_absent(self):
        cache = EventCache(UnreachableStore(), ttl=timedelta(hours=6), key="test_cache", clock=self.clock)
        with self.assertLogs("fight_schedule.services.cache", level="ERROR"):
            self.assertIsNone(cache.read())

    def test_mongo_errors_read_as_absent(self):
        cache = EventCache(
            UnreachableStore(ServerSelectionTimeoutError("no servers")),
            ttl=timedelta(hours=6), key="test_cache", clock=self.clock,
        )
        with self.assertLogs("fight_schedule.services.cache", level="ERROR"):
            self.assertIsNone(cache.read())

    def test_read_does_not_mutate_store(self):
        self.cache.write(self.payload)
        before = self.store.get("test_cache")
        self.cache.read()
        self.cache.read()
        self.assertEqual(self.store.get("test_cache"), before)


if __name__ == '__main__':
    unittest.main()
