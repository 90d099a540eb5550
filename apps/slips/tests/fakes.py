"""Test doubles for the slip store."""

import threading
import time
from datetime import datetime, timedelta, timezone as dt_timezone

from apps.slips.exceptions import PersistenceError


class FakeClock:
    """Returns 09:30 UTC on 19 Oct 2026, one minute later on every call."""

    def __init__(self, start=None, step=timedelta(minutes=1)):
        self.current = start or datetime(2026, 10, 19, 9, 30, tzinfo=dt_timezone.utc)
        self.step = step
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            moment = self.current
            self.current += self.step
            return moment


class InMemorySlipRepository:
    """Repository keeping slips in a list; can be told to fail or to stall."""

    def __init__(self, slips=None, shared=False):
        self.saved = list(slips or [])
        self.shared = shared
        self.load_calls = 0
        self.save_calls = 0
        self.fail_saves = False
        self.save_delay = 0

    def load(self):
        self.load_calls += 1
        return list(self.saved)

    def save(self, slips):
        self.save_calls += 1
        if self.save_delay:
            time.sleep(self.save_delay)
        if self.fail_saves:
            raise PersistenceError("disk full")
        self.saved = list(slips)

    def insert(self, slip, slips):
        self.save(slips)

    def mark_complete(self, slip, slips):
        self.save(slips)
