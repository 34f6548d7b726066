from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Sequence

from . import config
from .schemas import AnswerIn, QuestionIn, as_number
from .types import AttemptResult, Pace, ReadinessBand, SectionBreakdown

log = logging.getLogger(__name__)


READINESS_BANDS: tuple[ReadinessBand, ...] = (
    ReadinessBand(85, "High", "You are ready for Digital/Prime shortlisting rounds. Focus on consistency."),
    ReadinessBand(70, "Medium", "You are close. Improve weaker sections and maintain timed practice."),
    ReadinessBand(0, "Developing", "Build fundamentals first, then attempt timed mixed section sets."),
)


def _pct(part: float, whole: float) -> int:
    # half-up, so 12.5 -> 13 rather than banker's 12
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def _answer_key(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_answer_map(answers: Any) -> Dict[str, Any]:
    """Map question id (as string) to the selected option index.

    ``answers`` is either a mapping ``{questionId: selectedIndex}`` or a list
    of ``{questionId, selectedIndex}`` records. Records without an id are
    skipped; id ``0`` is kept.
    """

    if not answers:
        return {}
    if isinstance(answers, Mapping):
        return {_answer_key(k): v for k, v in answers.items()}
    if not isinstance(answers, (list, tuple)):
        return {}

    out: Dict[str, Any] = {}
    for raw in answers:
        if raw is None:
            continue
        ans = AnswerIn.coerce(raw)
        if ans.question_id is None or ans.question_id == "":
            continue
        out[_answer_key(ans.question_id)] = ans.selected_index
    return out


def _questions(questions: Any) -> List[QuestionIn]:
    if not isinstance(questions, (list, tuple)):
        return []
    return [QuestionIn.coerce(q) for q in questions if q is not None]


def _selected(answer_map: Mapping[str, Any], question: QuestionIn) -> Any:
    return answer_map.get(_answer_key(question.id))


def _is_correct(selected: Any, question: QuestionIn) -> bool:
    if isinstance(selected, bool) or isinstance(question.correct_index, bool):
        return selected is question.correct_index
    return selected == question.correct_index


def calculate_section_breakdown(questions: Any, answers: Any) -> List[SectionBreakdown]:
    answer_map = to_answer_map(answers)
    sections: Dict[str, SectionBreakdown] = {}

    for q in _questions(questions):
        ref = sections.get(q.section)
        if ref is None:
            ref = sections[q.section] = SectionBreakdown(section=q.section)
        ref.total += 1

        selected = _selected(answer_map, q)
        if selected is not None:
            ref.attempted += 1
            if _is_correct(selected, q):
                ref.correct += 1

    for ref in sections.values():
        ref.accuracy = _pct(ref.correct, ref.attempted)
        ref.coverage_accuracy = _pct(ref.correct, ref.total)
    return list(sections.values())


def build_focus_areas(section_breakdown: Iterable[SectionBreakdown], limit: int = config.FOCUS_AREAS_MAX) -> List[str]:
    """Weakest sections by coverage accuracy; ties keep encounter order."""

    indexed = [(idx, s) for idx, s in enumerate(section_breakdown) if s.total > 0]
    indexed.sort(key=lambda pair: (pair[1].coverage_accuracy, pair[0]))
    return [s.section for _, s in indexed[:limit]]


def get_readiness_band(score_percent: Any, bands: Sequence[ReadinessBand] = READINESS_BANDS) -> ReadinessBand:
    score = as_number(score_percent, 0.0)
    ordered = sorted(bands, key=lambda b: b.min_score, reverse=True)
    for entry in ordered:
        if score >= entry.min_score:
            return entry
    return ordered[-1]


def classify_pace(time_taken_sec: float, total_questions: int) -> Pace:
    expected = total_questions * config.SECONDS_PER_QUESTION
    ratio = time_taken_sec / expected if expected > 0 else 1.0
    if ratio <= config.PACE_FAST_MAX:
        return "Fast"
    if ratio <= config.PACE_BALANCED_MAX:
        return "Balanced"
    return "Slow"


def reward_xp(score_percent: Any) -> int:
    if as_number(score_percent, 0.0) >= config.XP_REWARD_THRESHOLD:
        return config.XP_REWARD_HIGH
    return config.XP_REWARD_BASE


def evaluate_attempt(questions: Any, answers: Any = None, time_taken_sec: Any = 0) -> AttemptResult:
    qs = _questions(questions)
    answer_map = to_answer_map(answers)
    total = len(qs)

    attempted = correct = 0
    for q in qs:
        selected = _selected(answer_map, q)
        if selected is None:
            continue
        attempted += 1
        if _is_correct(selected, q):
            correct += 1

    score = _pct(correct, total)
    breakdown = calculate_section_breakdown(qs, answer_map)
    focus = build_focus_areas(breakdown)
    taken = max(0.0, as_number(time_taken_sec, 0.0))
    pace = classify_pace(taken, total)
    readiness = get_readiness_band(score)

    log.debug("attempt graded: %d/%d correct (%d attempted) score=%d pace=%s band=%s",
              correct, total, attempted, score, pace, readiness.band)
    return AttemptResult(
        total_questions=total,
        attempted_questions=attempted,
        correct_answers=correct,
        incorrect_answers=max(0, attempted - correct),
        score_percent=score,
        pace=pace,
        time_taken_sec=taken,
        section_breakdown=breakdown,
        focus_areas=focus,
        readiness_band=readiness.band,
        recommendation=readiness.message,
    )


__all__ = [
    "READINESS_BANDS",
    "to_answer_map",
    "calculate_section_breakdown",
    "build_focus_areas",
    "get_readiness_band",
    "classify_pace",
    "reward_xp",
    "evaluate_attempt",
]
