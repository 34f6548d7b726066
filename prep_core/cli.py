"""Command line access to the scoring functions.

Every subcommand reads a JSON payload (file path or ``-`` for stdin) shaped
like the request bodies the web layer receives, and prints the wire JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Optional, Sequence, TextIO

from .config import load_config, setup_logging
from .personalization import build_snapshot
from .placement import evaluate_attempt
from .reporting import dumps
from .simulators import SimulatorNotFound, SimulatorUnavailable, client_questions, list_simulators, submit_attempt
from .university import compute_days_remaining, next_exam, next_exam_forecast, normalize_schedule, predict_window

log = logging.getLogger(__name__)


def _read_payload(src: str, stdin: TextIO) -> Any:
    if src == "-":
        text = stdin.read()
    else:
        with open(src, "r", encoding="utf-8") as f:
            text = f.read()
    return json.loads(text) if text.strip() else {}


def _get(payload: Any, *keys: str) -> Any:
    if not isinstance(payload, dict):
        return None
    for k in keys:
        if k in payload:
            return payload[k]
    return None


def _cmd_recommend(args, payload) -> Any:
    return build_snapshot(
        _get(payload, "userProfile", "user_profile"),
        _get(payload, "analytics"),
        _get(payload, "usageCounts", "usage_counts", "toolUsageCounters"),
        _get(payload, "placementAttempts", "placement_attempts"),
    )


def _cmd_evaluate(args, payload) -> Any:
    return evaluate_attempt(
        _get(payload, "questions"),
        _get(payload, "answers"),
        _get(payload, "timeTakenSec", "time_taken_sec") or 0,
    )


def _cmd_submit(args, payload) -> Any:
    return submit_attempt(
        args.slug,
        _get(payload, "answers") or {},
        _get(payload, "timeTakenSec", "time_taken_sec") or 0,
    )


def _cmd_schedule(args, payload) -> Any:
    items = payload if isinstance(payload, list) else _get(payload, "schedule", "examSchedule")
    schedule = normalize_schedule(items, args.now)
    exam = next_exam(schedule)
    return {"schedule": schedule, "nextExam": exam, "forecast": next_exam_forecast(items, args.now)}


def _delays_arg(raw: Optional[str], cfg: dict) -> Any:
    if raw:
        return [d.strip() for d in raw.split(",") if d.strip()]
    return cfg.get("RESULT_DELAYS_DAYS")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="prep-core", description="Score personalization, placement and result-window payloads.")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING (default from LOG_LEVEL)")
    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser("recommend", help="rank study tools for a user snapshot")
    r.add_argument("payload", help="JSON file or - for stdin")

    e = sub.add_parser("evaluate", help="grade a placement attempt")
    e.add_argument("payload", help="JSON file or - for stdin")

    sub.add_parser("simulators", help="list placement simulators")

    q = sub.add_parser("questions", help="client-safe question set for a simulator")
    q.add_argument("slug")

    s = sub.add_parser("submit", help="grade answers against a simulator's question set")
    s.add_argument("slug")
    s.add_argument("payload", help="JSON file or - for stdin")

    w = sub.add_parser("window", help="predict the result declaration window")
    w.add_argument("exam_date")
    w.add_argument("--delays", default=None, help="comma separated historical delays in days")

    sc = sub.add_parser("schedule", help="normalise an exam schedule and forecast the next result")
    sc.add_argument("payload", help="JSON file or - for stdin")
    sc.add_argument("--now", default=None)

    d = sub.add_parser("days", help="days remaining until a date")
    d.add_argument("target")
    d.add_argument("--now", default=None)
    return p


def main(argv: Optional[Sequence[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    args = build_parser().parse_args(argv)
    cfg = load_config()
    setup_logging(args.log_level or cfg.get("LOG_LEVEL"))
    log.debug("running %s", args.command)

    try:
        if args.command == "recommend":
            out = _cmd_recommend(args, _read_payload(args.payload, stdin))
        elif args.command == "evaluate":
            out = _cmd_evaluate(args, _read_payload(args.payload, stdin))
        elif args.command == "simulators":
            out = {"simulators": list_simulators()}
        elif args.command == "questions":
            out = {"questions": client_questions(args.slug)}
        elif args.command == "submit":
            out = _cmd_submit(args, _read_payload(args.payload, stdin))
        elif args.command == "window":
            out = predict_window(args.exam_date, _delays_arg(args.delays, cfg))
            if out is None:
                print(f"error: cannot parse exam date {args.exam_date!r}", file=sys.stderr)
                return 1
        elif args.command == "schedule":
            out = _cmd_schedule(args, _read_payload(args.payload, stdin))
        else:
            out = {"daysRemaining": compute_days_remaining(args.target, args.now)}
    except (SimulatorNotFound, SimulatorUnavailable) as exc:
        print(f"error: {exc.args[0]}", file=sys.stderr)
        return 2
    except (OSError, json.JSONDecodeError) as exc:
        print(f"error: cannot read payload: {exc}", file=sys.stderr)
        return 2

    stdout.write(dumps(out) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
