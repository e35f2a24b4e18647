# SQLAlchemy models
from .base import Base, UTCDateTime
from .training import DrillQueueItem, SkillRating, TrainingEvent

__all__ = [
    # Base
    "Base",
    "UTCDateTime",
    # Training
    "DrillQueueItem",
    "SkillRating",
    "TrainingEvent",
]
