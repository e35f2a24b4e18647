"""
Request and response models for the training service.

Request models validate caller input with Pydantic; validation failures
are re-raised as InputValidationError by the service.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from pokercoach.scheduling.spaced_repetition import ALL_ANSWERS, normalize_answer


class MistakeReason(str, Enum):
    """Why an answer was wrong, as reported by the grader."""

    RANGE = "range"
    SIZING = "sizing"
    POSITION = "position"
    BOARD = "board"
    STACK = "stack"
    UNKNOWN = "unknown"


class SubmitAnswerRequest(BaseModel):
    """An answered drill."""

    drill_queue_id: UUID
    scenario: dict[str, Any] = Field(..., min_length=1)
    user_action: str
    mistake_reason: MistakeReason | None = None

    @field_validator("user_action")
    @classmethod
    def validate_user_action(cls, value: str) -> str:
        answer = normalize_answer(value)
        if answer not in ALL_ANSWERS:
            raise ValueError(f"user_action must be one of {', '.join(sorted(ALL_ANSWERS))}")
        return answer


@dataclass
class SubmitResult:
    """Outcome of an answered drill."""

    correct: bool
    next_due_at: datetime
    repetition: int
    correct_answer: str
    explanation: str = ""
    attempt_id: UUID | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "correct": self.correct,
            "next_due_at": self.next_due_at.isoformat(),
            "repetition": self.repetition,
            "correct_answer": self.correct_answer,
            "explanation": self.explanation,
        }
