"""
Per-skill validation commands (`skillkeeper validate`).

Skills that ship a validations.yaml run its commands from their Stop hook.
"""

from skillkeeper.validation.runner import (
    MODE_ALL,
    MODE_ON_STOP,
    MODES,
    OutcomeStatus,
    SkillNotFoundError,
    ValidationOutcome,
    ValidationRun,
    ValidationRunner,
)

__all__ = [
    "MODES",
    "MODE_ALL",
    "MODE_ON_STOP",
    "OutcomeStatus",
    "SkillNotFoundError",
    "ValidationOutcome",
    "ValidationRun",
    "ValidationRunner",
]
