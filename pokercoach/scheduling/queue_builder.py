"""
Drill Queue Builder.

Composes the focus scorer, focus mix inference and difficulty classifier
into a concrete batch of queue items for a learner with no pending work.

Batch layout (default 10 items):
- Focus slots (70%): primary tag, all raise_sizing slots then all
  action_decision slots, split by the focus mix
- Other slots (30%): secondary tag, alternating action_decision /
  raise_sizing starting with action_decision
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from loguru import logger

from pokercoach.core.leaks import LeakTag, enforce_or_default
from pokercoach.core.models import (
    DrillType,
    MistakeHistory,
    QueueItem,
    QueueStatus,
    SkillSnapshot,
)
from pokercoach.scheduling.difficulty import classify_snapshot
from pokercoach.scheduling.focus import FocusScoringConfig, WeeklyFocus, select_weekly_focus
from pokercoach.scheduling.focus_mix import (
    FocusMix,
    FocusMixConfig,
    infer_focus_mix,
    round_half_up,
)


@dataclass
class QueueConfig:
    """Batch composition settings."""

    batch_size: int = 10
    focus_share: float = 0.7

    @property
    def focus_slots(self) -> int:
        return min(self.batch_size, round_half_up(self.batch_size * self.focus_share))

    @property
    def other_slots(self) -> int:
        return self.batch_size - self.focus_slots


@dataclass
class QueueBatch:
    """A prepared batch of queue items plus its summary."""

    items: list[QueueItem] = field(default_factory=list)
    focus: WeeklyFocus | None = None
    focus_mix: FocusMix | None = None
    focus_count: int = 0
    other_count: int = 0

    @property
    def created_count(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def summary(self) -> dict[str, object]:
        """Summary suitable for returning to a caller or logging."""
        return {
            "focus_tag": self.focus.primary.value if self.focus else None,
            "secondary_tag": self.focus.secondary.value if self.focus else None,
            "created_count": self.created_count,
            "breakdown": {"focus": self.focus_count, "other": self.other_count},
            "focus_mix": self.focus_mix.to_dict() if self.focus_mix else None,
        }


def batch_key_for(now: datetime) -> str:
    """Idempotency key for a batch: the UTC creation date."""
    return now.astimezone(UTC).strftime("%Y-%m-%d")


def other_slot_drill_type(index: int) -> DrillType:
    return DrillType.ACTION_DECISION if index % 2 == 0 else DrillType.RAISE_SIZING


class QueueBuilder:
    """
    Builds drill queue batches.

    Pure with respect to storage: callers pass in the pending flag, the
    rating snapshots and the focus tag's mistake history, and persist the
    returned items themselves.
    """

    def __init__(
        self,
        config: QueueConfig | None = None,
        focus_config: FocusScoringConfig | None = None,
        mix_config: FocusMixConfig | None = None,
    ):
        self.config = config or QueueConfig()
        self.focus_config = focus_config
        self.mix_config = mix_config

    def select_focus(
        self,
        snapshots: Sequence[tuple[str, SkillSnapshot]],
        now: datetime | None = None,
    ) -> WeeklyFocus:
        return select_weekly_focus(snapshots, now, self.focus_config)

    def build_batch(
        self,
        user_id: str,
        has_pending_items: bool,
        snapshots: Sequence[tuple[str, SkillSnapshot]],
        history: MistakeHistory | None = None,
        now: datetime | None = None,
        focus: WeeklyFocus | None = None,
    ) -> QueueBatch:
        """
        Build a batch of queue items.

        Args:
            user_id: Owning user
            has_pending_items: Whether the user has any DUE/SCHEDULED item
            snapshots: (raw tag, snapshot) rows for the user
            history: Mistake history for the primary focus tag
            now: Creation time (defaults to current UTC time)
            focus: Precomputed weekly focus (computed from snapshots if None)

        Returns:
            QueueBatch; empty when the user already has pending items
        """
        if has_pending_items:
            logger.debug(f"User {user_id} has pending drills, skipping batch build")
            return QueueBatch()

        now = now or datetime.now(UTC)
        focus = focus or self.select_focus(snapshots, now)
        focus_slots = self.config.focus_slots
        other_slots = self.config.other_slots
        mix = infer_focus_mix(history, focus_slots, self.mix_config)

        snapshot_by_tag = self._snapshots_by_tag(snapshots)
        batch_key = batch_key_for(now)

        drill_types = [DrillType.RAISE_SIZING] * mix.sizing_count + [
            DrillType.ACTION_DECISION
        ] * mix.decision_count
        slots: list[tuple[LeakTag, DrillType]] = [(focus.primary, t) for t in drill_types]
        slots.extend((focus.secondary, other_slot_drill_type(i)) for i in range(other_slots))

        items = [
            QueueItem(
                user_id=user_id,
                leak_tag=tag,
                drill_type=drill_type,
                due_at=now,
                status=QueueStatus.DUE,
                repetition=0,
                last_score=None,
                difficulty=classify_snapshot(snapshot_by_tag.get(tag), now),
                batch_key=batch_key,
                slot_index=index,
            )
            for index, (tag, drill_type) in enumerate(slots)
        ]

        batch = QueueBatch(
            items=items,
            focus=focus,
            focus_mix=mix,
            focus_count=focus_slots,
            other_count=other_slots,
        )

        logger.info(
            f"Batch built for {user_id}: focus={focus.primary.value} x{focus_slots} "
            f"({mix.mode.value}: {mix.sizing_count} sizing + {mix.decision_count} decision), "
            f"other={focus.secondary.value} x{other_slots}"
        )
        return batch

    @staticmethod
    def _snapshots_by_tag(
        snapshots: Sequence[tuple[str, SkillSnapshot]],
    ) -> dict[LeakTag, SkillSnapshot]:
        """First snapshot seen per enforced tag."""
        by_tag: dict[LeakTag, SkillSnapshot] = {}
        for raw_tag, snapshot in snapshots:
            by_tag.setdefault(enforce_or_default(raw_tag), snapshot)
        return by_tag
