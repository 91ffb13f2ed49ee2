"""Total lookups into a student's sparse progress mapping."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from .models import VariationProgress
from .normalization import fill_variation_defaults

logger = logging.getLogger(__name__)

ProgressStore = Mapping[str, Any]


def _variations_of(lesson: Any) -> Optional[Mapping[str, Any]]:
    if isinstance(lesson, Mapping):
        variations = lesson.get("variations")
    else:
        variations = getattr(lesson, "variations", None)
    if not isinstance(variations, Mapping):
        return None
    return variations


def get_variation_progress(
    store: Optional[ProgressStore],
    technique_id: str,
    variation_id: str,
) -> Optional[VariationProgress]:
    """Return the variation's record, or None for any missing level of the mapping.

    ``store`` maps technique ids to ``LessonProgress`` models or to raw lesson
    payloads. Raw variation payloads get null or absent counters and history
    filled in before validation; a payload that still fails validation reads
    as missing.
    """
    if not store:
        return None
    lesson = store.get(technique_id)
    if lesson is None:
        return None
    variations = _variations_of(lesson)
    if variations is None:
        return None
    entry = variations.get(variation_id)
    if entry is None or isinstance(entry, VariationProgress):
        return entry
    if not isinstance(entry, Mapping):
        logger.debug("Ignoring non-mapping progress for %s/%s", technique_id, variation_id)
        return None
    payload, _ = fill_variation_defaults(entry, variation_id)
    try:
        return VariationProgress.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Unreadable progress for %s/%s: %s", technique_id, variation_id, exc)
        return None


__all__ = ["ProgressStore", "get_variation_progress"]
