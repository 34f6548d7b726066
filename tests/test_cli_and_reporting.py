from __future__ import annotations

import importlib
import io
import json

from prep_core import cli
from prep_core import config
from prep_core.placement import evaluate_attempt
from prep_core.reporting import to_wire, write_json
from prep_core.schemas import AnalyticsIn, PlacementAttemptIn, UserProfileIn, as_number

from conftest import build_questions


def _run(argv, stdin_text: str = "") -> tuple[int, dict | None]:
    out = io.StringIO()
    code = cli.main(argv, stdin=io.StringIO(stdin_text), stdout=out)
    text = out.getvalue()
    return code, (json.loads(text) if text.strip() else None)


def test_attempt_result_wire_shape(four_questions):
    wire = to_wire(evaluate_attempt(four_questions, {"1": 1}, 10))
    assert set(wire) == {
        "totalQuestions",
        "attemptedQuestions",
        "correctAnswers",
        "incorrectAnswers",
        "scorePercent",
        "pace",
        "timeTakenSec",
        "sectionBreakdown",
        "focusAreas",
        "readinessBand",
        "recommendation",
    }
    assert wire["sectionBreakdown"][0] == {
        "section": "A",
        "total": 2,
        "correct": 1,
        "attempted": 1,
        "accuracy": 100,
        "coverageAccuracy": 50,
    }


def test_write_json_creates_folders(tmp_path, four_questions):
    path = write_json(evaluate_attempt(four_questions, {}, 0), str(tmp_path / "nested" / "r.json"))
    data = json.loads((tmp_path / "nested" / "r.json").read_text(encoding="utf-8"))
    assert path.endswith("r.json")
    assert data["totalQuestions"] == 4


def test_cli_recommend_from_stdin():
    payload = {
        "userProfile": {"targetExam": "Placements", "learningStyle": "interactive"},
        "usageCounts": {"placement": 3},
        "analytics": {"topicMastery": [{"topic": "Probability", "accuracy": 52}]},
    }
    code, body = _run(["recommend", "-"], json.dumps(payload))
    assert code == 0
    assert body["recommendedTools"][:2] == ["quizzes", "placement"]
    assert body["mostUsedTool"] == "placement"
    assert body["weakTopics"] == [{"topic": "Probability", "accuracy": 52.0}]
    assert body["usageCounts"] == {"placement": 3.0}


def test_cli_evaluate_from_file(tmp_path):
    payload = {"questions": build_questions(["A", "B"]), "answers": {"1": 1}, "timeTakenSec": 90}
    src = tmp_path / "attempt.json"
    src.write_text(json.dumps(payload), encoding="utf-8")
    code, body = _run(["evaluate", str(src)])
    assert code == 0
    assert body["scorePercent"] == 50
    assert body["focusAreas"] == ["B", "A"]


def test_cli_simulator_commands():
    code, body = _run(["simulators"])
    assert code == 0 and len(body["simulators"]) == 2

    code, body = _run(["questions", "capgemini"])
    assert code == 0 and len(body["questions"]) == 6

    code, body = _run(["submit", "tcs-nqt", "-"], json.dumps({"answers": {"1": 2}, "timeTakenSec": 100}))
    assert code == 0
    assert body["simulatorSlug"] == "tcs-nqt"
    assert body["correctAnswers"] == 1
    assert body["rewardXp"] == 30


def test_cli_errors(capsys, tmp_path):
    assert _run(["questions", "missing"])[0] == 2
    assert "Simulator not found" in capsys.readouterr().err

    assert _run(["evaluate", str(tmp_path / "missing.json")])[0] == 2
    assert _run(["evaluate", "-"], "{not json")[0] == 2

    code, body = _run(["window", "not-a-date"])
    assert code == 1 and body is None


def test_cli_window_and_days(monkeypatch):
    monkeypatch.delenv("RESULT_DELAYS_DAYS", raising=False)
    code, body = _run(["window", "2025-06-01", "--delays", "28,34,41"])
    assert code == 0
    assert body["startDateLabel"] == "2025-06-29"
    assert body["confidencePercent"] == 84
    assert body["basedOnDelays"] == [28, 34, 41]

    monkeypatch.setenv("RESULT_DELAYS_DAYS", "25,31,37,42")
    code, body = _run(["window", "2025-06-01"])
    assert body["confidencePercent"] == 79

    code, body = _run(["days", "2025-06-03", "--now", "2025-06-01"])
    assert body == {"daysRemaining": 2}


def test_cli_schedule_forecasts_next_exam():
    payload = {"schedule": [{"subject": "Maths", "date": "2025-06-01"}, {"subject": "Physics", "date": "2025-06-15"}]}
    code, body = _run(["schedule", "-", "--now", "2025-06-10"], json.dumps(payload))
    assert code == 0
    assert [row["daysRemaining"] for row in body["schedule"]] == [-9, 5]
    assert body["nextExam"]["dateLabel"] == "2025-06-15"
    assert body["forecast"]["startDateLabel"] == "2025-07-10"

    code, body = _run(["schedule", "-"], "[]")
    assert code == 0
    assert body == {"schedule": [], "nextExam": None, "forecast": None}


def test_schema_coercion_never_raises():
    assert as_number("12.5") == 12.5
    assert as_number(True) == 1.0
    assert as_number([], None) is None
    assert UserProfileIn.coerce("nonsense").target_exam is None
    assert AnalyticsIn.coerce({"topicMastery": [None, {"accuracy": "bad"}]}).topic_mastery[0].accuracy == 0.0
    assert PlacementAttemptIn.coerce({"scorePercent": "71"}).effective_accuracy == 71.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("RECOMMEND_TOP_N", "3")
    monkeypatch.setenv("PACE_FAST_MAX", "oops")
    reloaded = importlib.reload(config)
    try:
        assert reloaded.RECOMMEND_TOP_N == 3
        assert reloaded.PACE_FAST_MAX == 0.85
        monkeypatch.setenv("RECOMMEND_TOP_N", "8")
        assert importlib.reload(config).RECOMMEND_TOP_N == 5
    finally:
        monkeypatch.delenv("RECOMMEND_TOP_N")
        monkeypatch.delenv("PACE_FAST_MAX")
        importlib.reload(config)


def test_load_config_reads_file_and_env(tmp_path, monkeypatch):
    (tmp_path / "config.json").write_text(json.dumps({"LOG_LEVEL": "INFO"}), encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RESULT_DELAYS_DAYS", "20, 30")
    cfg = config.load_config()
    assert cfg["LOG_LEVEL"] == "INFO"
    assert cfg["RESULT_DELAYS_DAYS"] == ["20", "30"]
