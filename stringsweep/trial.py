"""Single-trial execution: seed the q-qbar string, advance one event, read rapidities."""

from __future__ import annotations

import logging
import math
from typing import Callable

from stringsweep.errors import TrialFailure
from stringsweep.generator import GeneratorSession
from stringsweep.models import TrialOutcome

logger = logging.getLogger("stringsweep.trial")

# status code given to the incoming string endpoints
STRING_ENDPOINT_STATUS = 23
STRING_COLOUR_TAG = 101


def is_primary_hadron(status: int) -> bool:
    """Primary hadrons from string fragmentation carry status codes 81..89."""
    return 80 < status < 90


def seed_string(
    session: GeneratorSession,
    quark_id: int,
    string_mass: float,
    massless: bool = True,
) -> None:
    """Reset the event record and insert a back-to-back quark / antiquark pair.

    Each endpoint carries half the string mass as energy along the z axis; the
    colour tag connects the quark to the antiquark so they form one string.
    """
    session.reset_event()
    mass = 0.0 if massless else session.rest_mass(quark_id)
    energy = string_mass / 2
    momentum = math.sqrt(max(energy * energy - mass * mass, 0.0))
    session.append_initial_entity(
        quark_id, STRING_ENDPOINT_STATUS, STRING_COLOUR_TAG, 0, 0.0, 0.0, momentum, energy, mass
    )
    session.append_initial_entity(
        -quark_id, STRING_ENDPOINT_STATUS, 0, STRING_COLOUR_TAG, 0.0, 0.0, -momentum, energy, mass
    )


def run_trial(
    session: GeneratorSession,
    predicate: Callable[[int], bool] = is_primary_hadron,
) -> TrialOutcome:
    """Advance the generator by one event and extract selected rapidities.

    A failed advance (``False``, `TrialFailure` or any other exception raised
    by the session while generating) yields `TrialOutcome.failure()`; nothing
    is read from the event record then.
    """
    try:
        ok = session.advance_event()
    except TrialFailure as e:
        logger.debug("Event generation failed: %s", e)
        ok = False
    except Exception as e:
        logger.debug("Event generation raised %s: %s", type(e).__name__, e, exc_info=True)
        ok = False
    if not ok:
        return TrialOutcome.failure()
    return TrialOutcome.success(
        entity.rapidity() for entity in session.entities() if predicate(entity.status())
    )


class TrialRunner:
    """Runs seeded trials for one string configuration."""

    def __init__(
        self,
        quark_id: int,
        string_mass: float,
        massless: bool = True,
        predicate: Callable[[int], bool] = is_primary_hadron,
    ):
        self.quark_id = quark_id
        self.string_mass = string_mass
        self.massless = massless
        self.predicate = predicate

    def run(self, session: GeneratorSession) -> TrialOutcome:
        seed_string(session, self.quark_id, self.string_mass, self.massless)
        return run_trial(session, self.predicate)
