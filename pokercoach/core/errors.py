"""Exceptions surfaced to the request handlers calling the scheduler."""

from __future__ import annotations


class PokerCoachError(Exception):
    """Base class for scheduler errors reported to the caller."""


class InputValidationError(PokerCoachError):
    """Malformed caller input. Not retried, not defaulted."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or [message]


class QueueItemNotFoundError(PokerCoachError):
    """The queue item does not exist or belongs to another user."""

    def __init__(self, item_id: object):
        super().__init__(f"drill queue item {item_id} not found or access denied")
        self.item_id = item_id
