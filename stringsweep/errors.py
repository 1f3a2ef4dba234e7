"""Exception hierarchy for string sweeps.

ConfigError  -- invalid histogram geometry, duplicate label or bad config.
InitError    -- generator session could not be set up (aborts the sweep).
TrialFailure -- a single event could not be generated (recovered locally).
SweepStateError -- a setting was driven through an illegal state transition.
SweepAborted -- a running setting was stopped because the sweep is aborting.
"""


class StringSweepError(Exception):
    """Base class for all errors raised by the package."""


class ConfigError(StringSweepError, ValueError):
    pass


class InitError(StringSweepError, RuntimeError):
    pass


class TrialFailure(StringSweepError):
    pass


class SweepStateError(StringSweepError, RuntimeError):
    """Illegal lifecycle transition, e.g. a setting run twice."""


class SweepAborted(StringSweepError):
    """Raised inside a running setting once another setting failed to initialise."""
