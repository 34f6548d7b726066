from __future__ import annotations
import json, importlib.resources as ir
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional
from .placement import evaluate_attempt, reward_xp
from .schemas import QuestionIn
from .types import SimulatorAttempt


class SimulatorNotFound(LookupError):
    pass


class SimulatorUnavailable(LookupError):
    pass


@dataclass(frozen=True)
class Simulator:
    slug: str
    name: str
    description: str = ""
    duration_min: int = 0
    sections: tuple[str, ...] = ()
    questions: tuple[QuestionIn, ...] = field(default=(), repr=False)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def href(self) -> str:
        return f"/placement/{self.slug}"


@lru_cache(maxsize=1)
def load_simulators() -> tuple[Simulator, ...]:
    data = ir.files(__package__).joinpath("data/simulators.json").read_text(encoding="utf-8")
    raw = json.loads(data)
    questions: Dict[str, Any] = raw.get("questions") or {}
    out: List[Simulator] = []
    for entry in raw.get("simulators") or []:
        slug = entry["slug"]
        out.append(Simulator(
            slug=slug,
            name=entry.get("name", slug),
            description=entry.get("description", ""),
            duration_min=int(entry.get("durationMin", 0)),
            sections=tuple(entry.get("sections") or ()),
            questions=tuple(QuestionIn.coerce(q) for q in questions.get(slug) or ()),
        ))
    return tuple(out)


def get_simulator(slug: str) -> Optional[Simulator]:
    return next((s for s in load_simulators() if s.slug == slug), None)


def _require(slug: str) -> Simulator:
    sim = get_simulator(slug)
    if sim is None:
        raise SimulatorNotFound(f"Simulator not found: {slug}")
    return sim


def list_simulators() -> List[Dict[str, Any]]:
    return [
        {
            "slug": s.slug,
            "name": s.name,
            "description": s.description,
            "durationMin": s.duration_min,
            "sections": list(s.sections),
            "questionCount": s.question_count,
            "href": s.href,
        }
        for s in load_simulators()
    ]


def client_questions(slug: str) -> List[Dict[str, Any]]:
    """Questions without their answer key, safe to send to a browser."""
    sim = _require(slug)
    return [
        {"id": q.id, "section": q.section, "text": q.text, "options": list(q.options)}
        for q in sim.questions
    ]


def submit_attempt(slug: str, answers: Any, time_taken_sec: Any = 0) -> SimulatorAttempt:
    sim = _require(slug)
    if not sim.questions:
        raise SimulatorUnavailable(f"Question set unavailable for simulator: {slug}")
    res = evaluate_attempt(list(sim.questions), answers, time_taken_sec)
    return SimulatorAttempt(
        **vars(res),
        simulator_slug=sim.slug,
        simulator_name=sim.name,
        reward_xp=reward_xp(res.score_percent),
    )


__all__ = [
    "Simulator",
    "SimulatorNotFound",
    "SimulatorUnavailable",
    "load_simulators",
    "get_simulator",
    "list_simulators",
    "client_questions",
    "submit_attempt",
]
