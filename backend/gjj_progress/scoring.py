"""Competency scoring: practice counters to points, points to levels."""

from __future__ import annotations

from typing import Optional

from .models import CompetencyLevel, PointThresholds, VariationProgress

VIDEO_POINTS = 0.5
TRAINING_POINTS = 2.0
DRILL_POINTS = 1.0


def score(progress: Optional[VariationProgress]) -> float:
    """Weighted points for a variation; an untouched variation scores 0."""
    if progress is None:
        return 0.0
    return (
        progress.video_count * VIDEO_POINTS
        + progress.training_count * TRAINING_POINTS
        + progress.drill_count * DRILL_POINTS
    )


def level_from_score(value: float, thresholds: PointThresholds) -> CompetencyLevel:
    # thresholds.level1 is intentionally not consulted: any positive score reaches Level1.
    if value <= 0:
        return CompetencyLevel.NONE
    if value < thresholds.level2:
        return CompetencyLevel.LEVEL1
    if value < thresholds.level3:
        return CompetencyLevel.LEVEL2
    if value < thresholds.level4:
        return CompetencyLevel.LEVEL3
    return CompetencyLevel.LEVEL4


def level_for(progress: Optional[VariationProgress], thresholds: PointThresholds) -> CompetencyLevel:
    return level_from_score(score(progress), thresholds)


def next_threshold(level: CompetencyLevel, thresholds: PointThresholds) -> float:
    """Breakpoint the learner is currently working toward."""
    if level == CompetencyLevel.NONE:
        return thresholds.level1
    if level == CompetencyLevel.LEVEL1:
        return thresholds.level2
    if level == CompetencyLevel.LEVEL2:
        return thresholds.level3
    return thresholds.level4


def progress_percent(value: float, thresholds: PointThresholds) -> float:
    """Percentage (0-100) of the way to the next level; 100 once at Level4."""
    level = level_from_score(value, thresholds)
    if level == CompetencyLevel.LEVEL4:
        return 100.0
    target = next_threshold(level, thresholds)
    if target <= 0:
        return 0.0
    return min(100.0, max(0.0, value / target * 100))


__all__ = [
    "DRILL_POINTS",
    "TRAINING_POINTS",
    "VIDEO_POINTS",
    "level_for",
    "level_from_score",
    "next_threshold",
    "progress_percent",
    "score",
]
