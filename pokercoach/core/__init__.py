"""
Core Module - Shared domain models and tag vocabulary.

Components:
- leaks: Closed leak tag vocabulary and canonicalization (LeakTag, enforce)
- models: Scheduler dataclasses (SkillSnapshot, MistakeHistory, QueueItem)
- errors: Caller-facing exceptions

All scheduling and persistence modules import from pokercoach.core rather
than handling raw tag strings themselves.
"""

from pokercoach.core.errors import (
    InputValidationError,
    PokerCoachError,
    QueueItemNotFoundError,
)
from pokercoach.core.leaks import LeakTag, canonicalize, enforce, enforce_or_default
from pokercoach.core.models import (
    Difficulty,
    DrillType,
    MistakeHistory,
    QueueItem,
    QueueStatus,
    SkillSnapshot,
)

__all__ = [
    # Leaks
    "LeakTag",
    "canonicalize",
    "enforce",
    "enforce_or_default",
    # Models
    "Difficulty",
    "DrillType",
    "MistakeHistory",
    "QueueItem",
    "QueueStatus",
    "SkillSnapshot",
    # Errors
    "PokerCoachError",
    "InputValidationError",
    "QueueItemNotFoundError",
]
