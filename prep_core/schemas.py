"""Input models for the scoring functions.

Callers hand us whatever their request body or database row looks like:
camelCase or snake_case keys, plain dicts, dataclasses, ORM-ish objects,
strings where numbers belong. Each model soaks that up in ``mode="before"``
validators so the scoring code only ever sees clean values. ``coerce`` never
raises; a payload that still fails validation degrades to the empty model.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

log = logging.getLogger(__name__)


def as_number(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Coerce ``value`` to a finite float, returning ``default`` otherwise."""

    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        txt = value.strip()
        if not txt:
            return default
        try:
            num = float(txt)
        except ValueError:
            return default
    else:
        return default
    return num if math.isfinite(num) else default


def as_mapping(obj: Any) -> dict:
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    for attr in ("to_dict", "toObject"):
        fn = getattr(obj, attr, None)
        if callable(fn):
            out = fn()
            if isinstance(out, Mapping):
                return dict(out)
    if hasattr(obj, "__dict__"):
        return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
    return {}


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


class LooseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @classmethod
    def coerce(cls, raw: Any):
        if isinstance(raw, cls):
            return raw
        try:
            return cls.model_validate(as_mapping(raw))
        except ValidationError as exc:
            log.debug("%s: malformed input dropped (%d errors)", cls.__name__, exc.error_count())
            return cls()


class UserProfileIn(LooseModel):
    target_exam: Optional[str] = None
    learning_style: Optional[str] = None

    @field_validator("target_exam", "learning_style", mode="before")
    @classmethod
    def _only_str(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class TopicIn(LooseModel):
    topic: Optional[str] = None
    accuracy: float = 0.0

    @field_validator("topic", mode="before")
    @classmethod
    def _topic(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("accuracy", mode="before")
    @classmethod
    def _accuracy(cls, v: Any) -> float:
        return as_number(v, 0.0)


class AnalyticsIn(LooseModel):
    topic_mastery: List[TopicIn] = Field(default_factory=list)

    @field_validator("topic_mastery", mode="before")
    @classmethod
    def _topics(cls, v: Any) -> list:
        return [as_mapping(t) for t in _as_list(v) if t is not None]


class PlacementAttemptIn(LooseModel):
    accuracy: Optional[float] = None
    score_percent: Optional[float] = None
    simulator_slug: Optional[str] = None
    readiness_band: Optional[str] = None
    focus_areas: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None

    @field_validator("accuracy", "score_percent", mode="before")
    @classmethod
    def _num(cls, v: Any) -> Optional[float]:
        return as_number(v, None)

    @field_validator("simulator_slug", "readiness_band", mode="before")
    @classmethod
    def _opt_str(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("focus_areas", mode="before")
    @classmethod
    def _areas(cls, v: Any) -> list:
        return [str(x) for x in _as_list(v) if x is not None]

    @field_validator("created_at", mode="before")
    @classmethod
    def _ts(cls, v: Any) -> Optional[str]:
        if isinstance(v, (datetime, date)):
            return v.isoformat()
        return None if v is None else str(v)

    @property
    def effective_accuracy(self) -> float:
        # a zero accuracy falls through to scorePercent
        return self.accuracy or self.score_percent or 0.0


class QuestionIn(LooseModel):
    id: Any = None
    section: str = "General"
    correct_index: Any = None
    text: Optional[str] = None
    options: List[Any] = Field(default_factory=list)

    @field_validator("section", mode="before")
    @classmethod
    def _section(cls, v: Any) -> str:
        return str(v) if v else "General"

    @field_validator("text", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("options", mode="before")
    @classmethod
    def _options(cls, v: Any) -> list:
        return _as_list(v)


class AnswerIn(LooseModel):
    question_id: Any = None
    selected_index: Any = None


class ScheduleItemIn(LooseModel):
    subject: Optional[str] = None
    date: Any = None
    time: Optional[str] = None
    status: Optional[str] = None
    source: Optional[str] = None

    @field_validator("subject", "time", "status", "source", mode="before")
    @classmethod
    def _opt_str(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)


__all__ = [
    "as_number",
    "as_mapping",
    "LooseModel",
    "UserProfileIn",
    "TopicIn",
    "AnalyticsIn",
    "PlacementAttemptIn",
    "QuestionIn",
    "AnswerIn",
    "ScheduleItemIn",
]
