"""
Weekly Focus Priority Scorer.

Ranks a learner's leak tags by practice need and selects the week's
primary and secondary focus tags.

Need score components:
- base: lower rating means higher need
- recent accuracy deficit: 7-day error rate, or a flat value when the
  sample is too small to trust
- recency bonus: never practiced or idle for more than two weeks
- low volume bonus: very few attempts this week

Selection is deterministic. Ties keep the first-seen row.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from loguru import logger

from pokercoach.core.leaks import LeakTag, enforce_or_default
from pokercoach.core.models import SkillSnapshot


@dataclass
class FocusScoringConfig:
    """Weights and thresholds for the need score."""

    min_attempts_for_accuracy: int = 5
    low_sample_deficit: float = 0.15
    never_practiced_bonus: float = 0.25
    stale_bonus: float = 0.20
    stale_after_days: int = 14
    low_volume_attempts: int = 3
    low_volume_bonus: float = 0.10


@dataclass(frozen=True)
class NeedScore:
    """Need score for one tag with its components."""

    tag: str
    base: float
    accuracy_deficit: float
    recency_bonus: float
    low_volume_bonus: float

    @property
    def total(self) -> float:
        return self.base + self.accuracy_deficit + self.recency_bonus + self.low_volume_bonus


@dataclass(frozen=True)
class WeeklyFocus:
    """The week's primary and secondary focus tags."""

    primary: LeakTag
    secondary: LeakTag

    def to_dict(self) -> dict[str, str]:
        return {"primary": self.primary.value, "secondary": self.secondary.value}


def score_need(
    tag: str,
    snapshot: SkillSnapshot,
    now: datetime | None = None,
    config: FocusScoringConfig | None = None,
) -> NeedScore:
    """Compute the need score for a single tag."""
    config = config or FocusScoringConfig()
    now = now or datetime.now(UTC)

    base = (100 - snapshot.rating) / 100

    if snapshot.attempts_7d >= config.min_attempts_for_accuracy:
        deficit = 1 - snapshot.correct_7d / snapshot.attempts_7d
    else:
        deficit = config.low_sample_deficit

    if snapshot.last_practice_at is None:
        recency = config.never_practiced_bonus
    elif snapshot.last_practice_at < now - timedelta(days=config.stale_after_days):
        recency = config.stale_bonus
    else:
        recency = 0.0

    low_volume = config.low_volume_bonus if snapshot.attempts_7d < config.low_volume_attempts else 0.0

    return NeedScore(
        tag=tag,
        base=base,
        accuracy_deficit=deficit,
        recency_bonus=recency,
        low_volume_bonus=low_volume,
    )


def rank_focus_candidates(
    snapshots: Sequence[tuple[str, SkillSnapshot]],
    now: datetime | None = None,
    config: FocusScoringConfig | None = None,
) -> list[NeedScore]:
    """
    Score every row and sort by need, highest first.

    The sort is stable, so equal scores keep their input order.
    """
    now = now or datetime.now(UTC)
    scores = [score_need(tag, snapshot, now, config) for tag, snapshot in snapshots]
    return sorted(scores, key=lambda s: s.total, reverse=True)


def select_weekly_focus(
    snapshots: Sequence[tuple[str, SkillSnapshot]],
    now: datetime | None = None,
    config: FocusScoringConfig | None = None,
) -> WeeklyFocus:
    """
    Select primary and secondary focus tags.

    Args:
        snapshots: (raw tag, snapshot) rows as read from the rating store
        now: Reference time (defaults to current UTC time)
        config: Scoring weights

    Returns:
        WeeklyFocus; both tags are FUNDAMENTALS when there is no data
    """
    if not snapshots:
        return WeeklyFocus(primary=LeakTag.FUNDAMENTALS, secondary=LeakTag.FUNDAMENTALS)

    ranked = rank_focus_candidates(snapshots, now, config)
    primary = enforce_or_default(ranked[0].tag)

    secondary = LeakTag.FUNDAMENTALS
    for candidate in ranked[1:]:
        tag = enforce_or_default(candidate.tag)
        if tag != primary:
            secondary = tag
            break

    logger.debug(
        f"Weekly focus: primary={primary.value} ({ranked[0].total:.3f}), "
        f"secondary={secondary.value}, candidates={len(ranked)}"
    )

    return WeeklyFocus(primary=primary, secondary=secondary)
