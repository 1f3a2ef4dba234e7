"""Deterministic stand-in for a generator session.

Each scripted event is either a list of ``(status, rapidity)`` pairs or
``None`` for a failed event advance. Events are replayed cyclically.
"""

from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass
class FakeEntity:
    status_code: int
    y: float

    def status(self) -> int:
        return self.status_code

    def rapidity(self) -> float:
        return self.y


class FakeSession:
    def __init__(self, events=None, init_ok: bool = True, masses=None):
        self.events = list(events) if events is not None else [[]]
        self.init_ok = init_ok
        self.masses = masses or {}
        self.options = None
        self.initialised = False
        self.advances = 0
        self.resets = 0
        self.seeded: list[tuple] = []
        self.stats_printed = False
        self._current: list[FakeEntity] = []

    def configure(self, options) -> None:
        self.options = frozenset(options)

    def init_session(self) -> bool:
        self.initialised = self.init_ok
        return self.init_ok

    def reset_event(self) -> None:
        self.resets += 1
        self.seeded = []
        self._current = []

    def append_initial_entity(self, pid, status, col, acol, px, py, pz, e, m) -> None:
        self.seeded.append((pid, status, col, acol, px, py, pz, e, m))

    def advance_event(self) -> bool:
        script = self.events[self.advances % len(self.events)]
        self.advances += 1
        if script is None:
            self._current = []
            return False
        self._current = [FakeEntity(s, y) for s, y in script]
        return True

    def entities(self):
        return iter(self._current)

    def rest_mass(self, pid: int) -> float:
        return self.masses.get(abs(pid), 0.0)

    def print_statistics(self) -> None:
        self.stats_printed = True


class FakeFactory:
    """Session factory recording every session it builds, keyed by setting label."""

    def __init__(self, events_by_label=None, default_events=None, init_ok=True):
        self.events_by_label = events_by_label or {}
        self.default_events = default_events if default_events is not None else [[(83, 0.5)]]
        self.init_ok = init_ok
        self.sessions: dict[str, FakeSession] = {}
        self.calls: list[str] = []

    def __call__(self, setting) -> FakeSession:
        self.calls.append(setting.label)
        events = self.events_by_label.get(setting.label, self.default_events)
        ok = self.init_ok(setting) if callable(self.init_ok) else self.init_ok
        session = FakeSession(events, init_ok=ok)
        self.sessions[setting.label] = session
        return session


class FlakySession(FakeSession):
    """Session whose advance raises ``error`` on the given 1-based trial numbers."""

    def __init__(self, events=None, fail_on=(), error=None, **kwargs):
        super().__init__(events, **kwargs)
        self.fail_on = set(fail_on)
        self.error = error if error is not None else RuntimeError("generator hiccup")

    def advance_event(self) -> bool:
        if self.advances + 1 in self.fail_on:
            self.advances += 1
            self._current = []
            raise self.error
        return super().advance_event()


class SlowSession(FakeSession):
    """Session that sleeps in init and on every advance."""

    def __init__(self, events=None, init_delay_s=0.0, event_delay_s=0.0, **kwargs):
        super().__init__(events, **kwargs)
        self.init_delay_s = init_delay_s
        self.event_delay_s = event_delay_s

    def init_session(self) -> bool:
        time.sleep(self.init_delay_s)
        return super().init_session()

    def advance_event(self) -> bool:
        time.sleep(self.event_delay_s)
        return super().advance_event()
