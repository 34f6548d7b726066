from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Optional, Literal
Pace = Literal["Fast","Balanced","Slow"]
@dataclass(frozen=True)
class ReadinessBand:
    min_score: float; band: str; message: str
@dataclass
class SectionBreakdown:
    section: str
    total: int = 0
    correct: int = 0
    attempted: int = 0
    accuracy: int = 0
    coverage_accuracy: int = 0
@dataclass
class AttemptResult:
    total_questions: int
    attempted_questions: int
    correct_answers: int
    incorrect_answers: int
    score_percent: int
    pace: Pace
    time_taken_sec: float
    section_breakdown: List[SectionBreakdown] = field(default_factory=list)
    focus_areas: List[str] = field(default_factory=list)
    readiness_band: str = "Developing"
    recommendation: str = ""
@dataclass
class SimulatorAttempt(AttemptResult):
    simulator_slug: str = ""
    simulator_name: str = ""
    reward_xp: int = 0
@dataclass
class ResultWindow:
    start_date: datetime
    end_date: datetime
    start_date_label: str
    end_date_label: str
    confidence_percent: int
    based_on_delays: List[float] = field(default_factory=list)
@dataclass
class WeakTopic:
    topic: Optional[str]; accuracy: float
@dataclass
class PlacementSummary:
    simulator_slug: Optional[str]
    accuracy: Optional[float]
    readiness_band: Optional[str]
    focus_areas: List[str] = field(default_factory=list)
    attempted_at: Optional[str] = None
@dataclass
class PersonalizationSnapshot:
    recommended_tools: List[str]
    most_used_tool: Optional[str]
    weak_topics: List[WeakTopic] = field(default_factory=list)
    latest_placement: Optional[PlacementSummary] = None
    usage_counts: Dict[str, float] = field(default_factory=dict)
@dataclass
class ScheduleItem:
    subject: Optional[str]
    date: Optional[datetime]
    date_label: Optional[str]
    time: Optional[str] = None
    status: Optional[str] = None
    source: Optional[str] = None
    days_remaining: Optional[int] = None
