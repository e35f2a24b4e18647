"""
Persistence: SQLAlchemy models, session management and repositories.
"""

from pokercoach.db.database import get_engine, get_session_factory, init_db, session_scope
from pokercoach.db.repositories import (
    DrillQueueRepository,
    SkillRatingRepository,
    TrainingEventRepository,
)

__all__ = [
    "get_engine",
    "get_session_factory",
    "init_db",
    "session_scope",
    "DrillQueueRepository",
    "SkillRatingRepository",
    "TrainingEventRepository",
]
