from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from . import config
from .schemas import AnalyticsIn, PlacementAttemptIn, UserProfileIn, as_mapping, as_number
from .types import PersonalizationSnapshot, PlacementSummary, WeakTopic

log = logging.getLogger(__name__)


TOOL_KEYS: tuple[str, ...] = (
    "tutor",
    "summaries",
    "quizzes",
    "gpa",
    "project",
    "curriculum",
    "placement",
    "kt",
    "paper",
    "viva",
    "study-plan",
    "math",
)

SCORE_RULES_BY_TARGET: Dict[str, Dict[str, float]] = {
    "Placements": {"placement": 5, "math": 4, "quizzes": 2, "tutor": 2},
    "GATE": {"paper": 4, "tutor": 3, "quizzes": 2, "study-plan": 2},
    "Semester Exams": {"curriculum": 4, "summaries": 3, "study-plan": 3, "tutor": 2},
}

SCORE_RULES_BY_STYLE: Dict[str, Dict[str, float]] = {
    "visual": {"summaries": 2, "curriculum": 2, "project": 1},
    "text": {"summaries": 3, "paper": 2, "tutor": 1},
    "interactive": {"quizzes": 3, "project": 2, "placement": 1},
}


def _blank_score_map() -> Dict[str, float]:
    return {key: 0.0 for key in TOOL_KEYS}


def to_plain_usage(source: Any) -> Dict[str, float]:
    """Collapse every accepted usage shape into ``{tool: count}``.

    Accepts a mapping, a list of ``(key, count)`` pairs, or any object
    :func:`as_mapping` understands. Counts are coerced to finite,
    non-negative floats; later pairs overwrite earlier ones.
    """

    if source is None:
        return {}
    if isinstance(source, (list, tuple)):
        raw: Dict[Any, Any] = {}
        for entry in source:
            if isinstance(entry, (list, tuple)) and len(entry) == 2:
                raw[entry[0]] = entry[1]
    elif isinstance(source, Mapping):
        raw = dict(source)
    else:
        raw = as_mapping(source)

    out: Dict[str, float] = {}
    for key, count in raw.items():
        out[str(key)] = max(0.0, as_number(count, 0.0))
    return out


def get_most_used_tool(source: Any) -> Optional[str]:
    usage = to_plain_usage(source)
    best: Optional[str] = None
    best_count = 0.0
    for tool, count in usage.items():
        if count > best_count:
            best, best_count = tool, count
    return best


def sanitize_tool_list(value: Any, limit: int = config.QUICK_ACCESS_MAX) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    out: List[str] = []
    for item in value:
        if isinstance(item, str) and item in TOOL_KEYS and item not in out:
            out.append(item)
    return out[:limit]


def _apply_score_rule(score_map: Dict[str, float], rule: Optional[Mapping[str, Any]]) -> None:
    for tool, weight in (rule or {}).items():
        if tool in score_map:
            score_map[tool] += as_number(weight, 0.0)


def weak_topic_count(analytics: Any) -> int:
    snap = AnalyticsIn.coerce(analytics)
    return sum(1 for t in snap.topic_mastery if t.accuracy < config.WEAK_TOPIC_THRESHOLD)


def weak_topics(analytics: Any, limit: int = config.WEAK_TOPICS_MAX) -> List[WeakTopic]:
    snap = AnalyticsIn.coerce(analytics)
    weak = [t for t in snap.topic_mastery if t.accuracy < config.WEAK_TOPIC_THRESHOLD]
    weak.sort(key=lambda t: t.accuracy)
    return [WeakTopic(topic=t.topic, accuracy=t.accuracy) for t in weak[:limit]]


def _latest_attempt(placement_attempts: Any) -> Optional[PlacementAttemptIn]:
    # index 0 is the most recent; a missing head means no usable attempt
    if not isinstance(placement_attempts, (list, tuple)) or not placement_attempts:
        return None
    head = placement_attempts[0]
    return None if head is None else PlacementAttemptIn.coerce(head)


def placement_risk(placement_attempts: Any) -> int:
    """0 (on track), 1 (borderline) or 2 (at risk) from the latest attempt."""

    latest = _latest_attempt(placement_attempts)
    if latest is None:
        return 0
    accuracy = latest.effective_accuracy
    if accuracy >= config.RISK_LOW_MIN:
        return 0
    if accuracy >= config.RISK_MEDIUM_MIN:
        return 1
    return 2


def score_tools(
    user_profile: Any = None,
    analytics: Any = None,
    usage_counts: Any = None,
    placement_attempts: Any = None,
) -> Dict[str, float]:
    """Full score map in tool-key order; :func:`recommend_tools` ranks it."""

    profile = UserProfileIn.coerce(user_profile)
    score_map = _blank_score_map()

    _apply_score_rule(score_map, SCORE_RULES_BY_TARGET.get(profile.target_exam or ""))
    _apply_score_rule(score_map, SCORE_RULES_BY_STYLE.get((profile.learning_style or "").lower()))

    weak = weak_topic_count(analytics)
    if weak > 0:
        bonus = 1 + min(config.WEAK_TOPIC_BONUS_CAP, weak)
        score_map["tutor"] += bonus
        score_map["quizzes"] += bonus
        score_map["study-plan"] += 1

    risk = placement_risk(placement_attempts)
    if risk > 0:
        score_map["placement"] += risk * 2
        score_map["math"] += risk

    for tool, count in to_plain_usage(usage_counts).items():
        if tool not in score_map:
            continue
        score_map[tool] += min(config.USAGE_CAP, count * config.USAGE_WEIGHT)

    log.debug("tool scores target=%s style=%s weak=%d risk=%d -> %s",
              profile.target_exam, profile.learning_style, weak, risk, score_map)
    return score_map


def recommend_tools(
    user_profile: Any = None,
    analytics: Any = None,
    usage_counts: Any = None,
    placement_attempts: Any = None,
    limit: int = config.RECOMMEND_TOP_N,
) -> List[str]:
    score_map = score_tools(user_profile, analytics, usage_counts, placement_attempts)
    order = {key: idx for idx, key in enumerate(TOOL_KEYS)}
    ranked = sorted(score_map.items(), key=lambda kv: (-kv[1], order[kv[0]]))
    return [tool for tool, _ in ranked[:limit]]


def _latest_placement(latest: Optional[PlacementAttemptIn]) -> Optional[PlacementSummary]:
    if latest is None:
        return None
    return PlacementSummary(
        simulator_slug=latest.simulator_slug,
        accuracy=latest.accuracy,
        readiness_band=latest.readiness_band,
        focus_areas=list(latest.focus_areas),
        attempted_at=latest.created_at,
    )


def build_snapshot(
    user_profile: Any = None,
    analytics: Any = None,
    usage_counts: Any = None,
    placement_attempts: Any = None,
) -> PersonalizationSnapshot:
    usage = to_plain_usage(usage_counts)
    return PersonalizationSnapshot(
        recommended_tools=recommend_tools(user_profile, analytics, usage, placement_attempts),
        most_used_tool=get_most_used_tool(usage),
        weak_topics=weak_topics(analytics),
        latest_placement=_latest_placement(_latest_attempt(placement_attempts)),
        usage_counts=usage,
    )


__all__ = [
    "TOOL_KEYS",
    "SCORE_RULES_BY_TARGET",
    "SCORE_RULES_BY_STYLE",
    "to_plain_usage",
    "get_most_used_tool",
    "sanitize_tool_list",
    "weak_topic_count",
    "weak_topics",
    "placement_risk",
    "score_tools",
    "recommend_tools",
    "build_snapshot",
]
