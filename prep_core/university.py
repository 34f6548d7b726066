from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional

from . import config
from .schemas import ScheduleItemIn, as_number
from .types import ResultWindow, ScheduleItem

log = logging.getLogger(__name__)

DAY = timedelta(days=1)


def parse_date(value: Any) -> Optional[datetime]:
    """Best-effort conversion to an aware UTC datetime.

    Accepts datetimes, dates, ISO-8601 strings and epoch milliseconds.
    Naive values are read as UTC. Returns ``None`` for anything else.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        txt = value.strip()
        if not txt:
            return None
        if txt.endswith(("Z", "z")):
            txt = txt[:-1] + "+00:00"
        try:
            return parse_date(datetime.fromisoformat(txt))
        except ValueError:
            return None
    return None


def format_timestamp(value: datetime) -> str:
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def format_date_iso(value: Any) -> Optional[str]:
    parsed = parse_date(value)
    return parsed.date().isoformat() if parsed else None


def compute_days_remaining(target_date: Any, now: Any = None) -> Optional[int]:
    target = parse_date(target_date)
    current = parse_date(now) if now is not None else datetime.now(timezone.utc)
    if target is None or current is None:
        return None
    return math.ceil((target - current) / DAY)


def _clean_delays(historical: Any) -> List[float]:
    if not isinstance(historical, (list, tuple)):
        return []
    out: List[float] = []
    for raw in historical:
        delay = as_number(raw, None)
        if delay is not None and delay > 0:
            out.append(int(delay) if delay.is_integer() else delay)
    return out


def confidence_for_spread(delays: Iterable[float]) -> int:
    vals = list(delays)
    spread = max(1.0, max(vals) - min(vals))
    raw = math.floor(100 - spread * config.CONFIDENCE_SPREAD_PENALTY + 0.5)
    return int(max(config.CONFIDENCE_FLOOR, min(config.CONFIDENCE_CEIL, raw)))


def predict_window(exam_date: Any, historical_delays_days: Any = None) -> Optional[ResultWindow]:
    """Estimate when results for ``exam_date`` will be declared.

    Returns ``None`` when the exam date cannot be parsed or the window falls
    outside the representable calendar; callers must treat that as "no
    estimate" rather than a zero date.
    """

    exam = parse_date(exam_date)
    if exam is None:
        log.debug("result window skipped: unparsable exam date %r", exam_date)
        return None

    delays = _clean_delays(historical_delays_days) or list(config.DEFAULT_DECLARATION_DELAYS_DAYS)
    try:
        start = exam + timedelta(days=min(delays))
        end = exam + timedelta(days=max(delays))
    except (OverflowError, ValueError):
        log.debug("result window skipped: %s + %s days is out of range", exam_date, max(delays))
        return None

    return ResultWindow(
        start_date=start,
        end_date=end,
        start_date_label=start.date().isoformat(),
        end_date_label=end.date().isoformat(),
        confidence_percent=confidence_for_spread(delays),
        based_on_delays=delays,
    )


def normalize_schedule(items: Any, now: Any = None) -> List[ScheduleItem]:
    """Schedule rows with a parsed date, date label and days remaining.

    Rows whose date cannot be parsed are kept with ``None`` in those fields.
    """

    if not isinstance(items, (list, tuple)):
        return []
    out: List[ScheduleItem] = []
    for raw in items:
        row = ScheduleItemIn.coerce(raw)
        when = parse_date(row.date)
        out.append(ScheduleItem(
            subject=row.subject,
            date=when,
            date_label=when.date().isoformat() if when else None,
            time=row.time,
            status=row.status,
            source=row.source,
            days_remaining=compute_days_remaining(when, now) if when else None,
        ))
    return out


def next_exam(schedule: List[ScheduleItem]) -> Optional[ScheduleItem]:
    # first upcoming exam, else the first row
    for item in schedule:
        if item.days_remaining is not None and item.days_remaining >= 0:
            return item
    return schedule[0] if schedule else None


def next_exam_forecast(items: Any, now: Any = None) -> Optional[ResultWindow]:
    exam = next_exam(normalize_schedule(items, now))
    if exam is None:
        return None
    return predict_window(exam.date, list(config.NEXT_EXAM_FORECAST_DELAYS_DAYS))


__all__ = [
    "parse_date",
    "format_timestamp",
    "format_date_iso",
    "compute_days_remaining",
    "confidence_for_spread",
    "predict_window",
    "normalize_schedule",
    "next_exam",
    "next_exam_forecast",
]
