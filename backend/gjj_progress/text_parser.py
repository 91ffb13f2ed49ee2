"""Resolve free-text drill and simulation scripts into variation targets.

Scripts reference lessons as ``(L<number>)``. Which variations of a lesson are
meant is decided with deliberately loose rules:

* "all variations" / "all stages" anywhere in the text selects every variation;
* otherwise any variation whose name occurs anywhere in the text (not only near
  the lesson reference) is selected;
* a lesson with no matching variation name falls back to its first variation.

Downstream readiness figures depend on these exact rules, so they must not be
narrowed to the clause around each reference.
"""

from __future__ import annotations

import logging
import re
from typing import List, Set

from .curriculum import Curriculum
from .models import Technique, TechniqueReference

logger = logging.getLogger(__name__)

LESSON_REFERENCE = re.compile(r"\(L([0-9]+)\)")
ALL_VARIATION_PHRASES = ("all variations", "all stages")


def lesson_numbers_in(text: str) -> List[int]:
    return [int(match.group(1)) for match in LESSON_REFERENCE.finditer(text)]


def _variations_for(technique: Technique, lowered: str, select_all: bool) -> List[TechniqueReference]:
    if select_all:
        return [
            TechniqueReference(technique_id=technique.id, variation_id=variation.id)
            for variation in technique.variations
        ]
    matched = [
        TechniqueReference(technique_id=technique.id, variation_id=variation.id)
        for variation in technique.variations
        if variation.name.lower() in lowered
    ]
    if not matched and technique.variations:
        matched.append(TechniqueReference(technique_id=technique.id, variation_id=technique.variations[0].id))
    return matched


def get_targets_from_text(text: str, curriculum: Curriculum) -> List[TechniqueReference]:
    """Return the de-duplicated targets referenced by ``text``, first occurrence first."""
    if not text:
        return []
    lowered = text.lower()
    select_all = any(phrase in lowered for phrase in ALL_VARIATION_PHRASES)

    targets: List[TechniqueReference] = []
    seen: Set[TechniqueReference] = set()
    for lesson_number in lesson_numbers_in(text):
        technique = curriculum.by_lesson_number(lesson_number)
        if technique is None:
            logger.debug("Skipping unknown lesson reference L%d", lesson_number)
            continue
        for target in _variations_for(technique, lowered, select_all):
            if target in seen:
                continue
            seen.add(target)
            targets.append(target)
    return targets


__all__ = ["ALL_VARIATION_PHRASES", "LESSON_REFERENCE", "get_targets_from_text", "lesson_numbers_in"]
