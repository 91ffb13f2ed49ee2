"""Prerequisite/follow-up graph with per-student overrides."""

from __future__ import annotations

import logging
from typing import Literal

from .curriculum import Curriculum
from .models import ConnectionOverride, StudentProfile

logger = logging.getLogger(__name__)

ConnectionSide = Literal["parents", "children"]
ConnectionAction = Literal["add", "remove"]


def get_connections(technique_id: str, profile: StudentProfile, curriculum: Curriculum) -> ConnectionOverride:
    """Return the student's override verbatim, else the curriculum's default edges."""
    override = profile.custom_connections.get(technique_id)
    if override is not None:
        return override
    technique = curriculum.get(technique_id)
    if technique is None:
        return ConnectionOverride()
    return ConnectionOverride(
        parents=list(technique.parents or []),
        children=list(technique.children or []),
    )


def edit_connection(
    profile: StudentProfile,
    technique_id: str,
    side: ConnectionSide,
    target_id: str,
    action: ConnectionAction,
) -> StudentProfile:
    """Add or remove one edge on the student's override for ``technique_id``.

    Editing starts from the existing override, or from an empty one; the
    curriculum default is not copied in.
    """
    if side not in ("parents", "children"):
        raise ValueError(f"Unknown connection side: {side!r}")
    if action not in ("add", "remove"):
        raise ValueError(f"Unknown connection action: {action!r}")

    current = profile.custom_connections.get(technique_id) or ConnectionOverride()
    parents = list(current.parents)
    children = list(current.children)
    edges = parents if side == "parents" else children
    if action == "add":
        edges.append(target_id)
    else:
        edges[:] = [edge for edge in edges if edge != target_id]

    updated = profile.model_copy(deep=True)
    updated.custom_connections[technique_id] = ConnectionOverride(parents=parents, children=children)
    logger.debug("Connection %s %s %s -> %s", action, side, technique_id, target_id)
    return updated


def clear_connection(profile: StudentProfile, technique_id: str) -> StudentProfile:
    updated = profile.model_copy(deep=True)
    updated.custom_connections.pop(technique_id, None)
    return updated


__all__ = ["ConnectionAction", "ConnectionSide", "clear_connection", "edit_connection", "get_connections"]
