from __future__ import annotations

import math

import pytest
from fakes import FakeSession

from stringsweep.errors import TrialFailure
from stringsweep.generator import PythiaSession
from stringsweep.trial import TrialRunner, is_primary_hadron, run_trial, seed_string


@pytest.mark.parametrize(
    "status, expected",
    [(80, False), (81, True), (85, True), (89, True), (90, False), (-83, False), (23, False)],
)
def test_is_primary_hadron(status: int, expected: bool) -> None:
    assert is_primary_hadron(status) is expected


def test_seed_string_massless_back_to_back() -> None:
    session = FakeSession()
    seed_string(session, quark_id=1, string_mass=20.0, massless=True)
    assert session.resets == 1
    quark, antiquark = session.seeded
    assert quark == (1, 23, 101, 0, 0.0, 0.0, 10.0, 10.0, 0.0)
    assert antiquark == (-1, 23, 0, 101, 0.0, 0.0, -10.0, 10.0, 0.0)


def test_seed_string_massive_quark_uses_rest_mass() -> None:
    session = FakeSession(masses={4: 1.5})
    seed_string(session, quark_id=4, string_mass=5.0, massless=False)
    quark, antiquark = session.seeded
    pz, e, m = quark[6:]
    assert m == 1.5
    assert e == 2.5
    assert pz == pytest.approx(math.sqrt(2.5**2 - 1.5**2))
    assert antiquark[6] == pytest.approx(-pz)


def test_seed_string_below_threshold_has_zero_momentum() -> None:
    session = FakeSession(masses={5: 4.8})
    seed_string(session, quark_id=5, string_mass=5.0, massless=False)
    assert session.seeded[0][6] == 0.0
    assert session.seeded[1][6] == 0.0


def test_seed_string_resets_previous_record() -> None:
    session = FakeSession()
    seed_string(session, 2, 10.0)
    seed_string(session, 2, 10.0)
    assert session.resets == 2
    assert len(session.seeded) == 2


def test_run_trial_selects_primary_hadrons() -> None:
    session = FakeSession(events=[[(23, 9.0), (83, -1.25), (84, 0.5), (91, 3.0), (86, 2.0)]])
    outcome = run_trial(session)
    assert not outcome.failed
    assert outcome.values == (-1.25, 0.5, 2.0)


def test_run_trial_success_without_matches_is_empty() -> None:
    session = FakeSession(events=[[(23, 1.0), (-23, -1.0)]])
    outcome = run_trial(session)
    assert not outcome.failed
    assert outcome.values == ()


def test_run_trial_failure_reads_nothing() -> None:
    session = FakeSession(events=[None])
    outcome = run_trial(session)
    assert outcome.failed
    assert outcome.values == ()
    assert session.advances == 1


def test_run_trial_failure_raised_by_session() -> None:
    class RaisingSession(FakeSession):
        def advance_event(self) -> bool:
            raise TrialFailure("boom")

        def entities(self):  # pragma: no cover
            raise AssertionError("entities must not be read after a failed advance")

    outcome = run_trial(RaisingSession())
    assert outcome.failed


def test_run_trial_unexpected_session_error_is_a_failed_trial() -> None:
    class BrokenSession(FakeSession):
        def advance_event(self) -> bool:
            raise RuntimeError("generator hiccup")

    outcome = run_trial(BrokenSession())
    assert outcome.failed
    assert outcome.values == ()


def test_pythia_session_wraps_binding_errors_as_trial_failure() -> None:
    class BrokenPythia:
        def next(self):
            raise RuntimeError("generator hiccup")

    session = PythiaSession.__new__(PythiaSession)
    session._pythia = BrokenPythia()
    with pytest.raises(TrialFailure, match="generator hiccup") as excinfo:
        session.advance_event()
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_run_trial_custom_predicate() -> None:
    session = FakeSession(events=[[(83, 1.0), (91, 2.0)]])
    outcome = run_trial(session, predicate=lambda status: status > 90)
    assert outcome.values == (2.0,)


def test_trial_runner_seeds_then_runs() -> None:
    session = FakeSession(events=[[(82, 0.1)], None])
    runner = TrialRunner(quark_id=3, string_mass=100.0, massless=True)
    first = runner.run(session)
    second = runner.run(session)
    assert first.values == (0.1,)
    assert second.failed
    assert session.resets == 2
    assert session.seeded[0][0] == 3 and session.seeded[1][0] == -3
    assert session.seeded[0][7] == 50.0
