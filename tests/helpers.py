"""Shared fixtures for the test-suite."""

from datetime import datetime, timedelta, timezone


class FakeClock:
    """Callable clock whose current time is set by the test."""

    def __init__(self, now=None):
        self.now = now or datetime(2025, 5, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def raw_event(name, date, promotion="UFC"):
    return {
        "promotion": promotion,
        "eventName": name,
        "date": date,
        "venue": "Arena",
        "location": "City",
        "fightCard": [
            {
                "fighter1": "Red Corner",
                "fighter2": "Blue Corner",
                "weightClass": "Lightweight",
                "isMainEvent": True,
                "isCoMainEvent": False,
            }
        ],
    }


class UnreachableStore:
    """Key-value store whose backend is down."""

    def __init__(self, error=None):
        self.error = error or ConnectionError("mongo down")

    def get(self, key):
        raise self.error

    def set(self, key, value):
        raise self.error
