"""Curriculum and student progress models."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PracticeKind = Literal["video", "training", "drill"]
Category = Literal["Mount", "Guard", "Side Mount", "Standing"]


class CompetencyLevel(IntEnum):
    NONE = 0
    LEVEL1 = 1
    LEVEL2 = 2
    LEVEL3 = 3
    LEVEL4 = 4


class _CamelModel(BaseModel):
    """Accepts the persisted camelCase payloads as well as snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Variation(_CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class Technique(_CamelModel):
    """Single lesson of the curriculum, immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    id: str
    lesson_number: int
    name: str
    category: Category
    drill_number: int = Field(ge=1, le=4)
    variations: List[Variation] = Field(default_factory=list)
    reflex_drill: Optional[str] = None
    fight_sim_steps: Optional[List[str]] = None
    parents: Optional[List[str]] = None
    children: Optional[List[str]] = None


class TechniqueReference(_CamelModel):
    """One (technique, variation) target resolved from curriculum text."""

    model_config = ConfigDict(frozen=True)

    technique_id: str
    variation_id: str


class PracticeSession(_CamelModel):
    date: int
    type: PracticeKind


class VariationProgress(_CamelModel):
    """Practice counters for one technique variation.

    ``history`` is ordered newest-first; ``last_practiced`` and session dates
    are epoch milliseconds.
    """

    id: Optional[str] = None
    video_count: int = Field(default=0, ge=0)
    training_count: int = Field(default=0, ge=0)
    drill_count: int = Field(default=0, ge=0)
    is_planned: Optional[bool] = None
    notes: Optional[str] = None
    last_practiced: Optional[int] = None
    history: List[PracticeSession] = Field(default_factory=list)


class LessonProgress(_CamelModel):
    technique_id: str
    variations: Dict[str, VariationProgress] = Field(default_factory=dict)


class PointThresholds(_CamelModel):
    level1: float
    level2: float
    level3: float
    level4: float


class AppSettings(_CamelModel):
    level1_name: str = "Découverte"
    level2_name: str = "Consolidation"
    level3_name: str = "Réflexe"
    level4_name: str = "Maîtrise"
    thresholds: PointThresholds = Field(
        default_factory=lambda: PointThresholds(level1=0.5, level2=2.5, level3=7, level4=12.5)
    )

    def label(self, level: CompetencyLevel) -> str:
        labels = {
            CompetencyLevel.LEVEL1: self.level1_name,
            CompetencyLevel.LEVEL2: self.level2_name,
            CompetencyLevel.LEVEL3: self.level3_name,
            CompetencyLevel.LEVEL4: self.level4_name,
        }
        return labels.get(CompetencyLevel(level), "")


class ConnectionOverride(_CamelModel):
    parents: List[str] = Field(default_factory=list)
    children: List[str] = Field(default_factory=list)


class DrillStatus(_CamelModel):
    """Timestamps (newest-first) of reflex drill or simulation sessions."""

    id: str
    history: List[int] = Field(default_factory=list)


class PlannedCombo(_CamelModel):
    id: str
    source_id: Optional[str] = None
    technique_id: str
    destination_id: Optional[str] = None
    created: int


class StudentProfile(_CamelModel):
    id: str
    name: str
    progress: Dict[str, LessonProgress] = Field(default_factory=dict)
    drill_status: Dict[str, DrillStatus] = Field(default_factory=dict)
    custom_connections: Dict[str, ConnectionOverride] = Field(default_factory=dict)
    planned_combos: List[PlannedCombo] = Field(default_factory=list)


__all__ = [
    "AppSettings",
    "Category",
    "CompetencyLevel",
    "ConnectionOverride",
    "DrillStatus",
    "LessonProgress",
    "PlannedCombo",
    "PointThresholds",
    "PracticeKind",
    "PracticeSession",
    "StudentProfile",
    "Technique",
    "TechniqueReference",
    "Variation",
    "VariationProgress",
]
