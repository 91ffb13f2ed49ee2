"""Competency scoring and curriculum graph engine for the GJJ progress tracker."""

from .aggregation import (
    all_simulations,
    drill_group_stats,
    drill_summary,
    lesson_average_level,
    reflex_drill_lines,
    simulation_readiness,
    simulations_for_technique,
)
from .connections import get_connections
from .curriculum import Curriculum, CurriculumError, load_curriculum
from .models import CompetencyLevel, PointThresholds, StudentProfile, Technique, TechniqueReference
from .progress_store import get_variation_progress
from .scoring import level_from_score, score
from .text_parser import get_targets_from_text

__all__ = [
    "CompetencyLevel",
    "Curriculum",
    "CurriculumError",
    "PointThresholds",
    "StudentProfile",
    "Technique",
    "TechniqueReference",
    "all_simulations",
    "drill_group_stats",
    "drill_summary",
    "get_connections",
    "get_targets_from_text",
    "get_variation_progress",
    "lesson_average_level",
    "level_from_score",
    "load_curriculum",
    "reflex_drill_lines",
    "score",
    "simulation_readiness",
    "simulations_for_technique",
]
