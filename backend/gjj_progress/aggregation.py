"""Read-only readiness and recommendation signals over the curriculum.

Every function here recomputes from the snapshot it is given; nothing is
cached between calls.
"""

from __future__ import annotations

import random
import re
from typing import Callable, Dict, Iterable, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from .curriculum import Curriculum
from .models import AppSettings, CompetencyLevel, PointThresholds, Technique, TechniqueReference, Variation
from .progress_store import ProgressStore, get_variation_progress
from .scoring import level_from_score, score
from .text_parser import get_targets_from_text


REFLEX_LINE_BREAK = re.compile(r"(?=\bIn combination with\b)|(?=\bAnd\s+[A-Z])")

SegmentMode = Literal["kids", "teens", "adults"]


class DrillGroupStats(BaseModel):
    counts: Dict[CompetencyLevel, int] = Field(
        default_factory=lambda: {level: 0 for level in CompetencyLevel}
    )
    total: int = 0

    def percent(self, level: CompetencyLevel) -> float:
        if self.total <= 0:
            return 0.0
        return self.counts.get(level, 0) / self.total * 100


class SimulationReadiness(BaseModel):
    technique: Technique
    targets: List[TechniqueReference] = Field(default_factory=list)
    total: int = 0
    mastered: int = 0
    unknown_count: int = 0
    avg_competency: float = 0.0

    @property
    def mastered_percent(self) -> float:
        return self.mastered / self.total * 100 if self.total else 0.0


class ReflexDrillLine(BaseModel):
    text: str
    targets: List[TechniqueReference] = Field(default_factory=list)
    refers_to_technique: bool = False
    min_level: Optional[CompetencyLevel] = None


class SimulationStep(BaseModel):
    text: str
    targets: List[TechniqueReference] = Field(default_factory=list)
    min_level: CompetencyLevel = CompetencyLevel.NONE
    references_focus: bool = False


class SimulationSegment(BaseModel):
    id: str
    title: str
    steps: List[str]
    focus_technique_id: str


class LevelledVariation(BaseModel):
    technique: Technique
    variation: Variation
    score: float


def target_level(
    store: Optional[ProgressStore],
    target: TechniqueReference,
    thresholds: PointThresholds,
) -> CompetencyLevel:
    record = get_variation_progress(store, target.technique_id, target.variation_id)
    return level_from_score(score(record), thresholds)


def _variation_level(
    store: Optional[ProgressStore],
    technique: Technique,
    variation: Variation,
    thresholds: PointThresholds,
) -> CompetencyLevel:
    record = get_variation_progress(store, technique.id, variation.id)
    return level_from_score(score(record), thresholds)


def lesson_average_level(
    technique: Technique,
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
) -> CompetencyLevel:
    """Mean variation level, rounded half up as the lesson badge shows it."""
    if not technique.variations:
        return CompetencyLevel.NONE
    total = sum(_variation_level(store, technique, variation, thresholds) for variation in technique.variations)
    mean = total / len(technique.variations)
    return CompetencyLevel(int(mean + 0.5))


def is_fully_mastered(
    technique: Technique,
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
) -> bool:
    return all(
        _variation_level(store, technique, variation, thresholds) >= CompetencyLevel.LEVEL4
        for variation in technique.variations
    )


def drill_group_stats(
    techniques: Iterable[Technique],
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
) -> DrillGroupStats:
    stats = DrillGroupStats()
    for technique in techniques:
        for variation in technique.variations:
            stats.counts[_variation_level(store, technique, variation, thresholds)] += 1
            stats.total += 1
    return stats


def drill_summary(stats: DrillGroupStats, labels: AppSettings) -> str:
    """Short breakdown such as "2 Maîtrise, 1 Réflexe", or "Not started"."""
    if stats.counts.get(CompetencyLevel.NONE, 0) == stats.total:
        return "Not started"
    parts = [
        f"{stats.counts[level]} {labels.label(level)}"
        for level in (
            CompetencyLevel.LEVEL4,
            CompetencyLevel.LEVEL3,
            CompetencyLevel.LEVEL2,
            CompetencyLevel.LEVEL1,
        )
        if stats.counts.get(level, 0) > 0
    ]
    return ", ".join(parts)


def simulation_targets(technique: Technique, curriculum: Curriculum) -> List[TechniqueReference]:
    """Union of the targets of every fight-sim step, in first-seen order."""
    targets: List[TechniqueReference] = []
    seen = set()
    for step in technique.fight_sim_steps or []:
        for target in get_targets_from_text(step, curriculum):
            if target not in seen:
                seen.add(target)
                targets.append(target)
    return targets


def simulation_readiness(
    technique: Technique,
    curriculum: Curriculum,
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
) -> SimulationReadiness:
    targets = simulation_targets(technique, curriculum)
    levels = [target_level(store, target, thresholds) for target in targets]
    total = len(targets)
    return SimulationReadiness(
        technique=technique,
        targets=targets,
        total=total,
        mastered=sum(1 for level in levels if level >= CompetencyLevel.LEVEL4),
        unknown_count=sum(1 for level in levels if level == CompetencyLevel.NONE),
        avg_competency=sum(int(level) for level in levels) / total if total else 0.0,
    )


def sort_simulations(simulations: Iterable[SimulationReadiness]) -> List[SimulationReadiness]:
    """Fewest unknown targets first, then lowest average competency."""
    return sorted(simulations, key=lambda sim: (sim.unknown_count, sim.avg_competency))


def simulations_for_technique(
    focus_id: str,
    curriculum: Curriculum,
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
) -> List[SimulationReadiness]:
    """Simulations whose steps involve ``focus_id``; the first entry is the recommendation."""
    related = [
        technique
        for technique in curriculum.with_fight_simulations()
        if any(
            target.technique_id == focus_id
            for step in technique.fight_sim_steps or []
            for target in get_targets_from_text(step, curriculum)
        )
    ]
    return sort_simulations(simulation_readiness(technique, curriculum, store, thresholds) for technique in related)


def all_simulations(
    curriculum: Curriculum,
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
    filter_text: Optional[str] = None,
) -> List[SimulationReadiness]:
    """Every simulation, fully-known ones first, then by lesson number."""
    simulations = [
        simulation_readiness(technique, curriculum, store, thresholds)
        for technique in curriculum.with_fight_simulations()
    ]
    if filter_text:
        query = filter_text.lower()
        simulations = [
            sim
            for sim in simulations
            if query in str(sim.technique.lesson_number) or query in sim.technique.name.lower()
        ]
    return sorted(simulations, key=lambda sim: (sim.unknown_count > 0, sim.technique.lesson_number))


def split_reflex_drill(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [part.strip() for part in REFLEX_LINE_BREAK.split(text) if part.strip()]


def reflex_drill_lines(
    technique: Technique,
    curriculum: Curriculum,
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
) -> List[ReflexDrillLine]:
    lines: List[ReflexDrillLine] = []
    for text in split_reflex_drill(technique.reflex_drill):
        targets = get_targets_from_text(text, curriculum)
        refers = any(target.technique_id == technique.id for target in targets)
        min_level: Optional[CompetencyLevel] = None
        if not refers and targets:
            min_level = min(target_level(store, target, thresholds) for target in targets)
        lines.append(ReflexDrillLine(text=text, targets=targets, refers_to_technique=refers, min_level=min_level))
    return lines


def simulation_steps(
    technique: Technique,
    curriculum: Curriculum,
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
    focus_id: Optional[str] = None,
) -> List[SimulationStep]:
    steps: List[SimulationStep] = []
    for text in technique.fight_sim_steps or []:
        targets = get_targets_from_text(text, curriculum)
        min_level = (
            min(target_level(store, target, thresholds) for target in targets) if targets else CompetencyLevel.NONE
        )
        steps.append(
            SimulationStep(
                text=text,
                targets=targets,
                min_level=min_level,
                references_focus=focus_id is not None and any(t.technique_id == focus_id for t in targets),
            )
        )
    return steps


def step_is_focus(step: str, technique: Technique) -> bool:
    return f"(L{technique.lesson_number})" in step


def _windows(technique: Technique, steps: Sequence[str], size: int, name: str, short_title: str) -> List[SimulationSegment]:
    if len(steps) < size:
        return [
            SimulationSegment(
                id=f"{technique.id}-{name}-1",
                title=short_title,
                steps=list(steps),
                focus_technique_id=technique.id,
            )
        ]
    label = "Trio" if name == "trio" else "Duo"
    return [
        SimulationSegment(
            id=f"{technique.id}-{name}-{index}",
            title=f"{label} {index + 1} ({index + 1}-{index + size})",
            steps=list(steps[index : index + size]),
            focus_technique_id=technique.id,
        )
        for index in range(len(steps) - size + 1)
    ]


def simulation_segments(technique: Technique, mode: SegmentMode) -> List[SimulationSegment]:
    """Cut a simulation into age-appropriate chunks: full run, trios or duos."""
    steps = technique.fight_sim_steps or []
    if not steps:
        return []
    if mode == "adults":
        return [
            SimulationSegment(
                id=f"{technique.id}-full",
                title="Full Sequence",
                steps=list(steps),
                focus_technique_id=technique.id,
            )
        ]
    if mode == "teens":
        return _windows(technique, steps, 3, "trio", "Short Sequence")
    if mode == "kids":
        return _windows(technique, steps, 2, "duo", "Single Sequence")
    raise ValueError(f"Unknown segment mode: {mode!r}")


def variations_at_level(
    curriculum: Curriculum,
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
    level: CompetencyLevel,
) -> List[LevelledVariation]:
    items: List[LevelledVariation] = []
    for technique, variation in curriculum.iter_variations():
        value = score(get_variation_progress(store, technique.id, variation.id))
        if level_from_score(value, thresholds) == level:
            items.append(LevelledVariation(technique=technique, variation=variation, score=value))
    return items


def suggest_variation(
    curriculum: Curriculum,
    store: Optional[ProgressStore],
    thresholds: PointThresholds,
    level: CompetencyLevel,
    chooser: Callable[[Sequence[LevelledVariation]], LevelledVariation] = random.choice,
) -> Optional[LevelledVariation]:
    candidates = variations_at_level(curriculum, store, thresholds, level)
    if not candidates:
        return None
    return chooser(candidates)


__all__ = [
    "DrillGroupStats",
    "LevelledVariation",
    "ReflexDrillLine",
    "SegmentMode",
    "SimulationReadiness",
    "SimulationSegment",
    "SimulationStep",
    "all_simulations",
    "drill_group_stats",
    "drill_summary",
    "is_fully_mastered",
    "lesson_average_level",
    "reflex_drill_lines",
    "simulation_readiness",
    "simulation_segments",
    "simulation_steps",
    "simulation_targets",
    "simulations_for_technique",
    "sort_simulations",
    "split_reflex_drill",
    "step_is_focus",
    "suggest_variation",
    "target_level",
    "variations_at_level",
]
