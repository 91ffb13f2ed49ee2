from __future__ import annotations

from typing import Any, Dict, List

import pytest

from gjj_progress.curriculum import Curriculum
from gjj_progress.models import PointThresholds, Technique

MOUNT_LESSONS: List[Dict[str, Any]] = [
    {
        "id": "m-l1",
        "lessonNumber": 1,
        "name": "Trap & Roll Escape",
        "category": "Mount",
        "drillNumber": 1,
        "variations": [
            {"id": "v1", "name": "Standard Variation"},
            {"id": "v2", "name": "Punch Block Variation"},
            {"id": "v3", "name": "Headlock Variation"},
            {"id": "v4", "name": "Open Guard Pass"},
        ],
        "reflexDrill": "Practice all variations of the Trap and Roll Escape – Mount (L1)",
        "fightSimSteps": [
            "Trap and Roll Escape – Mount – Headlock Variation (L1)",
            "Positional Control – Mount – Low Swim (L3)",
            "Americana Armlock – Mount – Neck-hug Variation (L2)",
        ],
        "parents": [],
        "children": ["g-l36", "m-l3"],
    },
    {
        "id": "m-l2",
        "lessonNumber": 2,
        "name": "Americana Armlock",
        "category": "Mount",
        "drillNumber": 1,
        "variations": [
            {"id": "v1", "name": "Basic Application"},
            {"id": "v2", "name": "Standard Variation"},
            {"id": "v3", "name": "Neck-Hug Variation"},
        ],
        "reflexDrill": (
            "Practice all variations of the Trap and Roll Escape – Mount (L1) "
            "In combination with all variations of the Americana Armlock – Mount (L2)"
        ),
        "fightSimSteps": [
            "Trap and Roll Escape – Mount – Punch Block Variation (L1)",
            "Positional Control – Mount – High Swim (L3)",
            "Take the Back – Mount – Remount Technique (L4)",
            "Americana Armlock – Mount – Standard Variation (L2)",
        ],
        "parents": ["m-l3"],
        "children": [],
    },
    {
        "id": "m-l3",
        "lessonNumber": 3,
        "name": "Positional Control",
        "category": "Mount",
        "drillNumber": 1,
        "variations": [
            {"id": "v1", "name": "Hips and Hands"},
            {"id": "v2", "name": "Anchor and Base"},
            {"id": "v3", "name": "Low Swim"},
            {"id": "v4", "name": "High Swim"},
        ],
        "reflexDrill": (
            "Practice all variations of Positional Control – Mount (L3) "
            "In combination with all variations of the Americana Armlock – Mount (L2)"
        ),
        "fightSimSteps": [
            "Trap and Roll Escape – Mount – Headlock Variation (L1)",
            "Positional Control – Mount – Low Swim (L3)",
            "Americana Armlock – Mount – Neck-hug Variation (L2)",
        ],
        "parents": ["m-l1"],
        "children": ["m-l2", "m-l4"],
    },
    {
        "id": "m-l4",
        "lessonNumber": 4,
        "name": "Take the Back",
        "category": "Mount",
        "drillNumber": 1,
        "variations": [
            {"id": "v1", "name": "Take the Back"},
            {"id": "v2", "name": "Remount Technique"},
        ],
        "reflexDrill": (
            "Practice all variations of Positional Control – Mount (L3) "
            "In combination with all variations of Take the Back – Mount (L4)"
        ),
        "fightSimSteps": [
            "Trap and Roll Escape – Mount – Punch Block Variation (L1)",
            "Positional Control – Mount – High Swim (L3)",
            "Take the Back – Mount – Remount Technique (L4)",
            "Americana Armlock – Mount – Standard Variation (L2)",
        ],
        "parents": ["m-l3"],
        "children": ["m-l5"],
    },
    {
        "id": "m-l5",
        "lessonNumber": 5,
        "name": "Rear Naked Choke",
        "category": "Mount",
        "drillNumber": 1,
        "variations": [
            {"id": "v1", "name": "Basic Application"},
            {"id": "v2", "name": "Strong Side Variation"},
            {"id": "v3", "name": "Weak Side Variation"},
        ],
        "reflexDrill": (
            "Practice all variations of Take the Back – Mount (L4) "
            "In combination with all variations of the Rear Naked Choke – Back Mount (L5)"
        ),
        "fightSimSteps": [
            "Trap and Roll Escape – Mount – Standard Variation (L1)",
            "Positional Control – Mount – High Swim (L3)",
            "Take the Back – Mount (L4)",
            "Rear Naked Choke – Back Mount – Weak Side Variation (L5)",
        ],
        "parents": ["m-l4"],
        "children": [],
    },
    {
        "id": "g-l6",
        "lessonNumber": 6,
        "name": "Guard Get-Up",
        "category": "Guard",
        "drillNumber": 2,
        "variations": [
            {"id": "v1", "name": "Technical Stand-Up"},
        ],
    },
]


@pytest.fixture
def curriculum() -> Curriculum:
    return Curriculum(Technique.model_validate(entry) for entry in MOUNT_LESSONS)


@pytest.fixture
def thresholds() -> PointThresholds:
    return PointThresholds(level1=0.5, level2=3, level3=6, level4=9)


@pytest.fixture
def lesson_payloads() -> List[Dict[str, Any]]:
    return [dict(entry) for entry in MOUNT_LESSONS]
