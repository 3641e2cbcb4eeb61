import unittest
from unittest.mock import MagicMock
from datetime import timedelta
import os
import sys
import threading

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fight_schedule.errors import CollaboratorError, DataUnavailable, ParseFailure
from fight_schedule.models import EventPayload, FightEvent, Promotion, Source
from fight_schedule.services.cache import EventCache
from fight_schedule.services.orchestrator import (
    FetchOrchestrator,
    normalize_events,
    normalize_sources,
)
from fight_schedule.services.storage import InMemoryKeyValueStore
from helpers import FakeClock, UnreachableStore, raw_event


class TestNormalizeSources(unittest.TestCase):

    def test_dedupes_by_uri_preserving_first_seen_order(self):
        citations = [
            {"title": "UFC", "url": "https://ufc.com"},
            "https://sherdog.com",
            {"title": "UFC again", "url": "https://ufc.com"},
            {"title": "", "uri": "https://tapology.com"},
            {"title": "no link"},
            42,
        ]
        self.assertEqual(
            normalize_sources(citations),
            [
                Source("UFC", "https://ufc.com"),
                Source("https://sherdog.com", "https://sherdog.com"),
                Source("https://tapology.com", "https://tapology.com"),
            ],
        )

    def test_none_yields_empty_list(self):
        self.assertEqual(normalize_sources(None), [])


class TestNormalizeEvents(unittest.TestCase):

    def test_invalid_records_are_dropped(self):
        raws = [
            raw_event("UFC 316", "2025-06-08T02:00:00Z"),
            raw_event("Glory 100", "2025-06-08T02:00:00Z", promotion="Glory"),
            {"eventName": "half a record"},
            "not even a dict",
        ]
        with self.assertLogs("fight_schedule.services.orchestrator", level="WARNING") as logs:
            events = normalize_events(raws)
        self.assertEqual([e.event_name for e in events], ["UFC 316"])
        self.assertEqual(len(logs.records), 3)


class TestFetchOrchestrator(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.store = InMemoryKeyValueStore()
        self.cache = EventCache(self.store, ttl=timedelta(hours=6), key="test_cache", clock=self.clock)
        self.fetcher = MagicMock(return_value={
            "events": [raw_event("PFL 5", "2025-06-20T19:00:00Z", promotion="PFL")],
            "citations": [
                {"title": "PFL", "url": "https://pflmma.com"},
                {"title": "PFL dup", "url": "https://pflmma.com"},
            ],
        })
        self.orchestrator = FetchOrchestrator(self.cache, fetcher=self.fetcher, deadline_seconds=5)
        self.old_payload = EventPayload(
            events=[FightEvent.from_dict(raw_event("UFC 316", "2025-06-08T02:00:00Z"))],
            sources=[Source("UFC", "https://ufc.com")],
        )

    def test_fresh_cache_short_circuits_external_call(self):
        self.cache.write(self.old_payload)
        self.clock.advance(hours=1)

        result = self.orchestrator.fetch_events()

        self.fetcher.assert_not_called()
        self.assertFalse(result.degraded)
        self.assertEqual(result.payload.to_dict(), self.old_payload.to_dict())

    def test_empty_cache_fetches_and_writes_through(self):
        result = self.orchestrator.fetch_events()

        self.fetcher.assert_called_once()
        self.assertFalse(result.degraded)
        self.assertEqual([e.promotion for e in result.events], [Promotion.PFL])
        self.assertEqual(result.sources, [Source("PFL", "https://pflmma.com")])
        self.assertEqual(self.cache.read().payload.to_dict(), result.payload.to_dict())
        self.assertEqual(result.cached_at, self.clock.now)

    def test_stale_cache_is_refreshed_on_success(self):
        self.cache.write(self.old_payload)
        self.clock.advance(hours=7)

        result = self.orchestrator.fetch_events()

        self.fetcher.assert_called_once()
        self.assertEqual(result.events[0].event_name, "PFL 5")
        record = self.cache.read()
        self.assertEqual(record.written_at, self.clock.now)
        self.assertTrue(self.cache.is_fresh(record))

    def test_failure_with_stale_cache_returns_degraded_payload(self):
        written = self.cache.write(self.old_payload)
        self.clock.advance(days=3)
        self.fetcher.side_effect = CollaboratorError("Perplexity API error: 503")

        with self.assertLogs("fight_schedule.services.orchestrator", level="WARNING"):
            result = self.orchestrator.fetch_events()

        self.assertTrue(result.degraded)
        self.assertEqual(result.payload.to_dict(), self.old_payload.to_dict())
        self.assertEqual(result.cached_at, written.written_at)
        # the stale record is left untouched
        self.assertEqual(self.cache.read().timestamp, written.timestamp)

    def test_failure_without_cache_raises_data_unavailable(self):
        cause = CollaboratorError("Perplexity request failed: timeout")
        self.fetcher.side_effect = cause

        with self.assertRaises(DataUnavailable) as ctx:
            self.orchestrator.fetch_events()

        self.assertIs(ctx.exception.__cause__, cause)
        self.assertIsNone(self.cache.read())

    def test_malformed_fetch_result_falls_back_to_cache(self):
        self.cache.write(self.old_payload)
        self.clock.advance(hours=8)
        self.fetcher.side_effect = ParseFailure("Could not locate JSON in model response")

        result = self.orchestrator.fetch_events()

        self.assertTrue(result.degraded)
        self.assertEqual(result.events[0].event_name, "UFC 316")

    def test_non_mapping_fetch_result_is_a_failure(self):
        self.fetcher.return_value = ["not", "a", "mapping"]
        with self.assertRaises(DataUnavailable) as ctx:
            self.orchestrator.fetch_events()
        self.assertIsInstance(ctx.exception.__cause__, ParseFailure)

    def test_store_outage_still_returns_live_payload(self):
        orchestrator = FetchOrchestrator(
            EventCache(UnreachableStore(), key="test_cache", clock=self.clock),
            fetcher=self.fetcher,
        )

        with self.assertLogs("fight_schedule.services.orchestrator", level="ERROR"):
            result = orchestrator.fetch_events()

        self.fetcher.assert_called_once()
        self.assertFalse(result.degraded)
        self.assertIsNone(result.cached_at)
        self.assertEqual([e.event_name for e in result.events], ["PFL 5"])

    def test_store_outage_and_failed_fetch_raise_data_unavailable(self):
        self.fetcher.side_effect = CollaboratorError("Perplexity API error: 503")
        orchestrator = FetchOrchestrator(
            EventCache(UnreachableStore(), key="test_cache", clock=self.clock),
            fetcher=self.fetcher,
        )

        with self.assertRaises(DataUnavailable):
            orchestrator.fetch_events()

    def test_concurrent_calls_share_one_external_fetch(self):
        started = threading.Event()
        release = threading.Event()
        payload = self.fetcher.return_value

        def slow_fetch():
            started.set()
            release.wait(5)
            return payload

        self.fetcher.side_effect = slow_fetch
        results = []
        leader = threading.Thread(target=lambda: results.append(self.orchestrator.fetch_events()))
        leader.start()
        self.assertTrue(started.wait(5))

        follower = threading.Thread(target=lambda: results.append(self.orchestrator.fetch_events()))
        follower.start()
        release.set()
        leader.join(5)
        follower.join(5)

        self.assertEqual(self.fetcher.call_count, 1)
        self.assertEqual(len(results), 2)
        self.assertEqual(results[0].payload.to_dict(), results[1].payload.to_dict())

    def test_follower_past_deadline_gets_data_unavailable(self):
        started = threading.Event()
        release = threading.Event()
        payload = self.fetcher.return_value

        def slow_fetch():
            started.set()
            release.wait(5)
            return payload

        self.fetcher.side_effect = slow_fetch
        orchestrator = FetchOrchestrator(self.cache, fetcher=self.fetcher, deadline_seconds=0.05)
        leader = threading.Thread(target=orchestrator.fetch_events)
        leader.start()
        self.assertTrue(started.wait(5))

        try:
            with self.assertRaises(DataUnavailable):
                orchestrator.fetch_events()
        finally:
            release.set()
            leader.join(5)

        self.assertEqual(self.fetcher.call_count, 1)
        self.assertIsNotNone(self.cache.read())


if __name__ == '__main__':
    unittest.main()
