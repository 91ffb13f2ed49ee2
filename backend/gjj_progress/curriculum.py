"""Read-only curriculum catalog and dataset loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from .models import Technique, Variation

logger = logging.getLogger(__name__)

_TECHNIQUE_LIST = TypeAdapter(List[Technique])


class CurriculumError(RuntimeError):
    """Raised when a curriculum dataset cannot be read or validated."""


class Curriculum:
    """Ordered technique list with id and lesson-number indexes."""

    def __init__(self, techniques: Iterable[Technique]) -> None:
        self._techniques: Tuple[Technique, ...] = tuple(techniques)
        self._by_id: Dict[str, Technique] = {}
        self._by_lesson: Dict[int, Technique] = {}
        for technique in self._techniques:
            self._by_id.setdefault(technique.id, technique)
            self._by_lesson.setdefault(technique.lesson_number, technique)

    def __iter__(self) -> Iterator[Technique]:
        return iter(self._techniques)

    def __len__(self) -> int:
        return len(self._techniques)

    @property
    def techniques(self) -> Tuple[Technique, ...]:
        return self._techniques

    def get(self, technique_id: str) -> Optional[Technique]:
        return self._by_id.get(technique_id)

    def by_lesson_number(self, lesson_number: int) -> Optional[Technique]:
        return self._by_lesson.get(lesson_number)

    def by_drill(self, drill_number: int) -> List[Technique]:
        return [technique for technique in self._techniques if technique.drill_number == drill_number]

    def iter_variations(self) -> Iterator[Tuple[Technique, Variation]]:
        for technique in self._techniques:
            for variation in technique.variations:
                yield technique, variation

    def with_fight_simulations(self) -> List[Technique]:
        return [technique for technique in self._techniques if technique.fight_sim_steps]


def load_curriculum(path: Path | str) -> Curriculum:
    """Load a JSON array of technique records (camelCase keys)."""
    source = Path(path)
    try:
        with source.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise CurriculumError(f"Could not read curriculum from {source}: {exc}") from exc
    try:
        techniques = _TECHNIQUE_LIST.validate_python(raw)
    except ValidationError as exc:
        raise CurriculumError(f"Invalid curriculum dataset {source}: {exc}") from exc
    logger.info("Loaded %d techniques from %s", len(techniques), source)
    return Curriculum(techniques)


__all__ = ["Curriculum", "CurriculumError", "load_curriculum"]
