"""Boundary to the external event generator.

The sweep only talks to a `GeneratorSession`; `PythiaSession` is the
production implementation on top of the PYTHIA 8 Python bindings
(``pythia8mc`` on PyPI). Tests drive the same interface with a deterministic
fake.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Protocol

from stringsweep.errors import InitError, TrialFailure

logger = logging.getLogger("stringsweep.generator")


class GeneratorOption(Enum):
    """Fixed configuration switches understood by generator sessions."""

    DISABLE_HARD_PROCESS = "ProcessLevel:all = off"
    DISABLE_HADRON_DECAY = "HadronLevel:Decay = off"
    DISABLE_PT_SMEARING = "StringPT:sigma = 0"
    QUIET_EVENT_LOG = "Next:numberCount = 100000"


DEFAULT_OPTIONS = frozenset(GeneratorOption)


class Entity(Protocol):
    def status(self) -> int: ...

    def rapidity(self) -> float: ...


class GeneratorSession(Protocol):
    def configure(self, options: Iterable[GeneratorOption]) -> None: ...

    def init_session(self) -> bool: ...

    def reset_event(self) -> None: ...

    def append_initial_entity(
        self,
        pid: int,
        status: int,
        col: int,
        acol: int,
        px: float,
        py: float,
        pz: float,
        e: float,
        m: float,
    ) -> None: ...

    def advance_event(self) -> bool: ...

    def entities(self) -> Iterable[Entity]: ...

    def rest_mass(self, pid: int) -> float: ...

    def print_statistics(self) -> None: ...


class _PythiaParticle:
    __slots__ = ("_particle",)

    def __init__(self, particle):
        self._particle = particle

    def status(self) -> int:
        return self._particle.status()

    def rapidity(self) -> float:
        return self._particle.y()


class PythiaSession:
    """`GeneratorSession` backed by one ``pythia8mc.Pythia`` instance.

    Args:
        seed: When given, PYTHIA's random stream is seeded with it so the
            session is reproducible.
        print_banner: Forwarded to the PYTHIA constructor.
    """

    def __init__(self, seed: int | None = None, print_banner: bool = False):
        try:
            import pythia8mc
        except ImportError as e:
            raise InitError(
                "PYTHIA 8 Python bindings are not installed (pip install pythia8mc)"
            ) from e
        self._pythia = pythia8mc.Pythia("", print_banner)
        self._seed = seed

    def configure(self, options: Iterable[GeneratorOption]) -> None:
        # sorted so that the settings are applied in a stable order
        for option in sorted(options, key=lambda o: o.name):
            self._read(option.value)
        if self._seed is not None:
            self._read("Random:setSeed = on")
            self._read(f"Random:seed = {int(self._seed)}")

    def _read(self, line: str) -> None:
        if not self._pythia.readString(line):
            raise InitError(f"PYTHIA rejected setting '{line}'")
        logger.debug("PYTHIA setting: %s", line)

    def init_session(self) -> bool:
        return bool(self._pythia.init())

    def reset_event(self) -> None:
        self._pythia.event.reset()

    def append_initial_entity(self, pid, status, col, acol, px, py, pz, e, m) -> None:
        self._pythia.event.append(pid, status, col, acol, px, py, pz, e, m)

    def advance_event(self) -> bool:
        try:
            return bool(self._pythia.next())
        except Exception as e:
            raise TrialFailure(f"PYTHIA event generation raised: {e}") from e

    def entities(self):
        event = self._pythia.event
        for i in range(event.size()):
            yield _PythiaParticle(event[i])

    def rest_mass(self, pid: int) -> float:
        return float(self._pythia.particleData.m0(pid))

    def print_statistics(self) -> None:
        # written by PYTHIA itself to the process stdout
        self._pythia.stat()


def pythia_session_factory(seed: int | None = None):
    """Return a factory building one fresh `PythiaSession` per sweep point."""

    def factory(setting) -> PythiaSession:
        logger.info(
            "Initialising PYTHIA for q-qbar hadronisation, string mass = %s", setting.label
        )
        return PythiaSession(seed=seed)

    return factory
