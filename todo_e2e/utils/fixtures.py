# utils/fixtures.py
import itertools
import random
import threading
import time

from todo_e2e.models.scenario import Identity

DEFAULT_NAME = 'Test User'
DEFAULT_PASSWORD = 'Test123!'
EMAIL_DOMAIN = 'example.com'


class FixtureGenerator:
    """Hands out collision-free test data for one process.

    Uniqueness comes from the counter; the clock and the random digits keep
    separate runs against the same database apart.
    """

    def __init__(self, clock=None, rng=None):
        self._clock = clock or time.time
        self._rng = rng or random.Random()
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def _suffix(self):
        with self._lock:
            seq = next(self._counter)
        return int(self._clock() * 1000), seq

    def new_identity(self, name=DEFAULT_NAME, password=DEFAULT_PASSWORD) -> Identity:
        millis, seq = self._suffix()
        email = f"testuser_{millis}_{seq}{self._rng.randint(0, 999):03d}@{EMAIL_DOMAIN}"
        return Identity(name=name, email=email, password=password)

    def new_todo_title(self) -> str:
        millis, seq = self._suffix()
        return f"Test Todo {millis}-{seq}"


_default = FixtureGenerator()


def new_identity() -> Identity:
    return _default.new_identity()


def new_todo_title() -> str:
    return _default.new_todo_title()
