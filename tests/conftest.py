from __future__ import annotations

import pytest


def build_questions(sections: list[str], *, correct_index: int = 1) -> list[dict]:
    """Deterministic question set; ids start at 1, one question per entry."""

    return [
        {
            "id": idx,
            "section": section,
            "text": f"{section} question #{idx}",
            "options": ["A", "B", "C", "D"],
            "correctIndex": correct_index,
        }
        for idx, section in enumerate(sections, start=1)
    ]


@pytest.fixture
def four_questions() -> list[dict]:
    return build_questions(["A", "A", "B", "B"])


@pytest.fixture
def placement_profile() -> dict:
    return {"targetExam": "Placements", "learningStyle": "interactive"}
