"""Practice logging as pure profile transitions.

Every operation returns a new ``StudentProfile``; the snapshot passed in is
left untouched. Timestamps are epoch milliseconds supplied by the caller or
read from the clock at call time.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Literal, Optional

from pydantic import BaseModel

from .curriculum import Curriculum
from .models import (
    DrillStatus,
    LessonProgress,
    PlannedCombo,
    PracticeSession,
    StudentProfile,
    Technique,
    TechniqueReference,
    Variation,
    VariationProgress,
)
from .progress_store import get_variation_progress

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]
DrillKind = Literal["reflex", "sim"]

_COUNTER_FIELDS = {
    "video": "video_count",
    "training": "training_count",
}


def now_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def generate_id() -> str:
    return uuid.uuid4().hex[:9]


def drill_status_key(kind: DrillKind, technique_id: str) -> str:
    return f"{kind}-{technique_id}"


def last_drilled(profile: StudentProfile, key: str) -> Optional[int]:
    status = profile.drill_status.get(key)
    if status is None or not status.history:
        return None
    return status.history[0]


def _variation_slot(profile: StudentProfile, technique_id: str, variation_id: str) -> VariationProgress:
    """Return the mutable record inside ``profile``, creating lesson and variation lazily."""
    lesson = profile.progress.get(technique_id)
    if lesson is None:
        lesson = LessonProgress(technique_id=technique_id)
        profile.progress[technique_id] = lesson
    record = lesson.variations.get(variation_id)
    if record is None:
        record = VariationProgress(id=variation_id)
        lesson.variations[variation_id] = record
    return record


def update_variation(
    profile: StudentProfile,
    technique_id: str,
    variation_id: str,
    **updates: Any,
) -> StudentProfile:
    updated = profile.model_copy(deep=True)
    current = _variation_slot(updated, technique_id, variation_id)
    merged = VariationProgress.model_validate({**current.model_dump(), **updates})
    updated.progress[technique_id].variations[variation_id] = merged
    return updated


def adjust_count(
    profile: StudentProfile,
    technique_id: str,
    variation_id: str,
    kind: str,
    change: int,
    now: Optional[int] = None,
) -> StudentProfile:
    """Increment or decrement the video/training counter of one variation.

    Counters never drop below zero. An increment logs a history entry (and,
    for training, the practice date); a decrement removes the newest history
    entry of the same kind.
    """
    field = _COUNTER_FIELDS.get(kind)
    if field is None:
        raise ValueError(f"Counter adjustments support video or training, not {kind!r}")
    timestamp = now if now is not None else now_millis()

    updated = profile.model_copy(deep=True)
    record = _variation_slot(updated, technique_id, variation_id)
    setattr(record, field, max(0, getattr(record, field) + change))

    if change > 0:
        record.history.insert(0, PracticeSession(date=timestamp, type=kind))  # type: ignore[arg-type]
        if kind == "training":
            record.last_practiced = timestamp
    elif change < 0:
        for index, session in enumerate(record.history):
            if session.type == kind:
                del record.history[index]
                break
    return updated


def record_drill(
    profile: StudentProfile,
    targets: Iterable[TechniqueReference],
    now: Optional[int] = None,
    drill_key: Optional[str] = None,
) -> StudentProfile:
    """Credit one drill repetition to each target and optionally stamp a drill status."""
    timestamp = now if now is not None else now_millis()
    updated = profile.model_copy(deep=True)
    credited = 0
    for target in targets:
        record = _variation_slot(updated, target.technique_id, target.variation_id)
        record.drill_count += 1
        record.last_practiced = timestamp
        record.history.insert(0, PracticeSession(date=timestamp, type="drill"))
        credited += 1
    if drill_key:
        status = updated.drill_status.get(drill_key) or DrillStatus(id=drill_key)
        status.history.insert(0, timestamp)
        updated.drill_status[drill_key] = status
    logger.debug("Recorded drill %s on %d variations", drill_key or "<adhoc>", credited)
    return updated


def record_reflex_drill(profile: StudentProfile, technique: Technique, now: Optional[int] = None) -> StudentProfile:
    targets = [
        TechniqueReference(technique_id=technique.id, variation_id=variation.id)
        for variation in technique.variations
    ]
    return record_drill(profile, targets, now=now, drill_key=drill_status_key("reflex", technique.id))


def reset_lesson(profile: StudentProfile, technique_id: str) -> StudentProfile:
    updated = profile.model_copy(deep=True)
    updated.progress.pop(technique_id, None)
    return updated


def set_planned(profile: StudentProfile, technique_id: str, variation_id: str, planned: bool) -> StudentProfile:
    return update_variation(profile, technique_id, variation_id, is_planned=planned)


def set_notes(profile: StudentProfile, technique_id: str, variation_id: str, notes: Optional[str]) -> StudentProfile:
    return update_variation(profile, technique_id, variation_id, notes=notes or None)


class PlannedVariation(BaseModel):
    technique: Technique
    variation: Variation
    progress: VariationProgress


def planned_variations(profile: StudentProfile, curriculum: Curriculum) -> List[PlannedVariation]:
    items: List[PlannedVariation] = []
    for technique, variation in curriculum.iter_variations():
        record = get_variation_progress(profile.progress, technique.id, variation.id)
        if record is not None and record.is_planned:
            items.append(PlannedVariation(technique=technique, variation=variation, progress=record))
    return items


def add_planned_combo(
    profile: StudentProfile,
    focus_id: str,
    *,
    source_id: Optional[str] = None,
    destination_id: Optional[str] = None,
    now: Optional[int] = None,
    id_factory: IdFactory = generate_id,
) -> StudentProfile:
    combo = PlannedCombo(
        id=f"combo-{id_factory()}",
        source_id=source_id,
        technique_id=focus_id,
        destination_id=destination_id,
        created=now if now is not None else now_millis(),
    )
    updated = profile.model_copy(deep=True)
    updated.planned_combos.append(combo)
    return updated


def remove_planned_combo(profile: StudentProfile, combo_id: str) -> StudentProfile:
    updated = profile.model_copy(deep=True)
    updated.planned_combos = [combo for combo in updated.planned_combos if combo.id != combo_id]
    return updated


__all__ = [
    "DrillKind",
    "IdFactory",
    "PlannedVariation",
    "add_planned_combo",
    "adjust_count",
    "drill_status_key",
    "generate_id",
    "last_drilled",
    "now_millis",
    "planned_variations",
    "record_drill",
    "record_reflex_drill",
    "remove_planned_combo",
    "reset_lesson",
    "set_notes",
    "set_planned",
    "update_variation",
]
