from __future__ import annotations

import pytest

import prep_core.simulators as simulators
from prep_core.audit_simulators import audit_simulators, main as audit_main, write_summary
from prep_core.schemas import QuestionIn
from prep_core.simulators import (
    Simulator,
    SimulatorNotFound,
    SimulatorUnavailable,
    client_questions,
    get_simulator,
    list_simulators,
    submit_attempt,
)


def test_bank_loads_both_simulators():
    listed = {s["slug"]: s for s in list_simulators()}
    assert set(listed) == {"tcs-nqt", "capgemini"}
    assert listed["tcs-nqt"]["questionCount"] == 6
    assert listed["capgemini"]["href"] == "/placement/capgemini"
    assert listed["tcs-nqt"]["sections"] == ["Numerical", "Verbal", "Reasoning"]


def test_client_questions_hide_answer_key():
    qs = client_questions("tcs-nqt")
    assert len(qs) == 6
    assert all("correctIndex" not in q and "correct_index" not in q for q in qs)
    assert qs[0]["options"][2] == "90 km/h"


def test_unknown_simulator_raises_lookup_error():
    assert get_simulator("nope") is None
    with pytest.raises(SimulatorNotFound):
        client_questions("nope")
    with pytest.raises(LookupError):
        submit_attempt("nope", {})


def test_perfect_tcs_attempt():
    key = {str(q.id): q.correct_index for q in get_simulator("tcs-nqt").questions}
    res = submit_attempt("tcs-nqt", key, 6 * 60)

    assert res.score_percent == 100
    assert res.readiness_band == "High"
    assert res.reward_xp == 60
    assert res.pace == "Fast"
    assert res.simulator_name == "TCS NQT 2025 Simulator"
    assert [s.section for s in res.section_breakdown] == ["Numerical", "Verbal", "Reasoning"]


def test_partial_capgemini_attempt_from_answer_records():
    answers = [
        {"questionId": 1, "selectedIndex": 1},
        {"questionId": 2, "selectedIndex": 2},
        {"questionId": 5, "selectedIndex": 0},
    ]
    res = submit_attempt("capgemini", answers, 700)

    assert res.correct_answers == 2
    assert res.attempted_questions == 3
    assert res.score_percent == 33
    assert res.focus_areas == ["Logical", "Technical", "Quant"]
    assert res.reward_xp == 30
    assert res.pace == "Slow"


def test_empty_question_set_is_unavailable(monkeypatch):
    empty = Simulator(slug="empty", name="Empty", sections=("Quant",))
    monkeypatch.setattr(simulators, "load_simulators", lambda: (empty,))
    with pytest.raises(SimulatorUnavailable):
        submit_attempt("empty", {})


def test_shipped_bank_passes_audit(capsys, tmp_path):
    summary = audit_simulators(simulators.load_simulators())
    assert summary["warnings"] == []
    assert summary["totals"]["questions"] == 12

    assert audit_main([str(tmp_path / "out" / "audit.json")]) == 0
    assert "tcs-nqt" in capsys.readouterr().out
    assert (tmp_path / "out" / "audit.json").exists()


def test_audit_flags_bad_keys_sections_and_duplicates(tmp_path):
    bad = Simulator(
        slug="bad",
        name="Bad",
        sections=("Quant", "Verbal"),
        questions=(
            QuestionIn.coerce({"id": 1, "section": "Quant", "options": ["a", "b"], "correctIndex": 2}),
            QuestionIn.coerce({"id": 1, "section": "Logic", "options": ["a", "b"], "correctIndex": 0}),
        ),
    )
    summary = audit_simulators([bad])
    joined = "\n".join(summary["warnings"])

    assert "correctIndex 2 outside 2 options" in joined
    assert "undeclared section 'Logic'" in joined
    assert "2 questions with id 1" in joined
    assert "section Verbal has 0" in joined
    assert summary["totals"]["bad_keys"] == 1

    out = tmp_path / "audit.json"
    text = write_summary(summary, out)
    assert out.read_text(encoding="utf-8").strip() == text
