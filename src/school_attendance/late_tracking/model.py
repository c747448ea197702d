from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QuarterLateTracking:
    student_id: int
    quarter_id: int
    total_late_minutes: int
    notification_sent: bool


@dataclass(frozen=True)
class LateTally:
    """Outcome of one accumulator update.

    ``crossed_threshold`` is True only for the update that first takes the
    quarter total to the threshold or beyond.
    """

    total_minutes: int
    crossed_threshold: bool
    notification_sent: bool


@dataclass(frozen=True)
class LateMinutesUpdate:
    """A validated accumulator update, applied in the same transaction as the time-in write."""

    student_id: int
    quarter_id: int
    minutes: int
    threshold: int
