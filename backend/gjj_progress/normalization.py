"""Persistence-boundary conversion and repair of stored progress payloads."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from .models import LessonProgress, PointThresholds, StudentProfile, VariationProgress

logger = logging.getLogger(__name__)

_COUNTER_KEYS = (
    ("videoCount", "video_count"),
    ("trainingCount", "training_count"),
    ("drillCount", "drill_count"),
)
_PROFILE_DEFAULTS: Dict[str, Any] = {
    "progress": dict,
    "drillStatus": dict,
    "customConnections": dict,
    "plannedCombos": list,
}


class ProgressRow(BaseModel):
    """Flat per-variation counters as stored in the progress table."""

    user_id: Optional[str] = None
    technique_id: str
    variation_id: str
    video_count: int = Field(default=0, ge=0)
    training_count: int = Field(default=0, ge=0)
    drill_count: int = Field(default=0, ge=0)
    is_planned: bool = False
    notes: Optional[str] = None
    last_practiced: Optional[str] = None


def _iso_to_millis(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unparseable last_practiced value: %s", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def progress_from_rows(rows: Iterable[ProgressRow | Mapping[str, Any]]) -> Dict[str, LessonProgress]:
    """Group flat progress rows into the per-technique progress mapping."""
    progress: Dict[str, LessonProgress] = {}
    for entry in rows:
        row = entry if isinstance(entry, ProgressRow) else ProgressRow.model_validate(entry)
        lesson = progress.setdefault(row.technique_id, LessonProgress(technique_id=row.technique_id))
        lesson.variations[row.variation_id] = VariationProgress(
            id=row.variation_id,
            video_count=row.video_count,
            training_count=row.training_count,
            drill_count=row.drill_count,
            is_planned=row.is_planned,
            notes=row.notes or None,
            last_practiced=_iso_to_millis(row.last_practiced),
            history=[],
        )
    return progress


def fill_variation_defaults(raw: Mapping[str, Any], variation_id: str) -> Tuple[Dict[str, Any], List[str]]:
    """Fill absent or null counters and history; return the payload and the clamped counter keys."""
    repaired = dict(raw)
    repaired.setdefault("id", variation_id)
    clamped: List[str] = []
    for camel, snake in _COUNTER_KEYS:
        key = snake if snake in repaired and camel not in repaired else camel
        value = repaired.get(key)
        if value is None:
            repaired[key] = 0
        elif value < 0:
            clamped.append(key)
            repaired[key] = 0
    if repaired.get("history") is None:
        repaired["history"] = []
    return repaired, clamped


def _repair_variation(profile_id: str, technique_id: str, variation_id: str, raw: Mapping[str, Any]) -> Dict[str, Any]:
    repaired, clamped = fill_variation_defaults(raw, variation_id)
    for key in clamped:
        logger.warning(
            "Clamping negative %s for %s/%s/%s",
            key,
            profile_id,
            technique_id,
            variation_id,
        )
    return repaired


def _repair_lesson(profile_id: str, technique_id: str, raw: Mapping[str, Any]) -> Dict[str, Any]:
    repaired = dict(raw)
    repaired.setdefault("techniqueId", technique_id)
    variations = repaired.get("variations")
    if not isinstance(variations, Mapping):
        logger.warning("Lesson %s of profile %s had no variations map", technique_id, profile_id)
        variations = {}
    kept: Dict[str, Any] = {}
    for variation_id, payload in variations.items():
        if not isinstance(payload, Mapping):
            logger.warning("Dropping malformed variation %s/%s of profile %s", technique_id, variation_id, profile_id)
            continue
        kept[variation_id] = _repair_variation(profile_id, technique_id, variation_id, payload)
    repaired["variations"] = kept
    return repaired


def normalize_profile(payload: Mapping[str, Any]) -> StudentProfile:
    """Migrate a saved profile payload so it satisfies the model invariants.

    Older saves may lack newer collections, per-variation history, or
    counters; each repair is logged before validation.
    """
    data = dict(payload)
    profile_id = str(data.get("id", "<unknown>"))
    for key, factory in _PROFILE_DEFAULTS.items():
        if data.get(key) is None:
            logger.warning("Profile %s missing %s; using empty default", profile_id, key)
            data[key] = factory()
    progress: Dict[str, Any] = {}
    for technique_id, lesson in data["progress"].items():
        if not isinstance(lesson, Mapping):
            logger.warning("Dropping malformed lesson %s of profile %s", technique_id, profile_id)
            continue
        progress[technique_id] = _repair_lesson(profile_id, technique_id, lesson)
    data["progress"] = progress
    return StudentProfile.model_validate(data)


def check_thresholds(thresholds: PointThresholds) -> bool:
    """Report whether breakpoints are strictly ascending; nothing is rewritten."""
    values: List[float] = [thresholds.level1, thresholds.level2, thresholds.level3, thresholds.level4]
    ascending = all(lower < upper for lower, upper in zip(values, values[1:]))
    if not ascending:
        logger.warning("Point thresholds are not strictly ascending: %s", values)
    return ascending


__all__ = ["ProgressRow", "check_thresholds", "fill_variation_defaults", "normalize_profile", "progress_from_rows"]
