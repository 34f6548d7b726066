from __future__ import annotations
import os, json, pathlib, logging


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# personalization
WEAK_TOPIC_THRESHOLD: float = 65.0
WEAK_TOPIC_BONUS_CAP: int = 2
RECOMMEND_TOP_N: int = 5
USAGE_WEIGHT: float = 0.2
USAGE_CAP: float = 4.0
RISK_LOW_MIN: float = 75.0
RISK_MEDIUM_MIN: float = 60.0
QUICK_ACCESS_MAX: int = 8
WEAK_TOPICS_MAX: int = 3

# placement
SECONDS_PER_QUESTION: int = 90
FOCUS_AREAS_MAX: int = 3
PACE_FAST_MAX: float = 0.85
PACE_BALANCED_MAX: float = 1.15
XP_REWARD_THRESHOLD: float = 75.0
XP_REWARD_HIGH: int = 60
XP_REWARD_BASE: int = 30
SIM_MIN_PER_SECTION: int = 1

# result window
DEFAULT_DECLARATION_DELAYS_DAYS: tuple[int, ...] = (28, 34, 41)
NEXT_EXAM_FORECAST_DELAYS_DAYS: tuple[int, ...] = (25, 31, 37, 42)
CONFIDENCE_FLOOR: int = 55
CONFIDENCE_CEIL: int = 95
CONFIDENCE_SPREAD_PENALTY: float = 1.25

LOG_LEVEL: str = "WARNING"
DEBUG_TRACE: bool = False

# // env overrides for staging/ops; defaults match production scoring.
WEAK_TOPIC_THRESHOLD = _env_float("WEAK_TOPIC_THRESHOLD", WEAK_TOPIC_THRESHOLD)
RECOMMEND_TOP_N = max(1, min(5, _env_int("RECOMMEND_TOP_N", RECOMMEND_TOP_N)))
USAGE_WEIGHT = _env_float("USAGE_WEIGHT", USAGE_WEIGHT)
USAGE_CAP = _env_float("USAGE_CAP", USAGE_CAP)
SECONDS_PER_QUESTION = _env_int("SECONDS_PER_QUESTION", SECONDS_PER_QUESTION)
FOCUS_AREAS_MAX = _env_int("FOCUS_AREAS_MAX", FOCUS_AREAS_MAX)
PACE_FAST_MAX = _env_float("PACE_FAST_MAX", PACE_FAST_MAX)
PACE_BALANCED_MAX = _env_float("PACE_BALANCED_MAX", PACE_BALANCED_MAX)
XP_REWARD_THRESHOLD = _env_float("XP_REWARD_THRESHOLD", XP_REWARD_THRESHOLD)
XP_REWARD_HIGH = _env_int("XP_REWARD_HIGH", XP_REWARD_HIGH)
XP_REWARD_BASE = _env_int("XP_REWARD_BASE", XP_REWARD_BASE)
SIM_MIN_PER_SECTION = _env_int("SIM_MIN_PER_SECTION", SIM_MIN_PER_SECTION)
CONFIDENCE_FLOOR = _env_int("CONFIDENCE_FLOOR", CONFIDENCE_FLOOR)
CONFIDENCE_CEIL = _env_int("CONFIDENCE_CEIL", CONFIDENCE_CEIL)
CONFIDENCE_SPREAD_PENALTY = _env_float("CONFIDENCE_SPREAD_PENALTY", CONFIDENCE_SPREAD_PENALTY)
LOG_LEVEL = (os.getenv("LOG_LEVEL") or LOG_LEVEL).strip().upper()
DEBUG_TRACE = _env_bool("DEBUG_TRACE", DEBUG_TRACE)


def setup_logging(level: str | None = None) -> None:
    lvl = (level or ("DEBUG" if DEBUG_TRACE else LOG_LEVEL)).upper()
    logging.basicConfig(level=getattr(logging, lvl, logging.WARNING), format="[%(levelname)s] %(message)s")


def load_config(path: str = "config.json") -> dict:
    """Merge an optional JSON config file with environment overrides.

    Only used by the command line tools; the scoring functions read the
    module-level constants above.
    """
    cfg: dict = {}
    p = pathlib.Path(path)
    if p.exists():
        try:
            cfg = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            cfg = {}
    if not isinstance(cfg, dict):
        cfg = {}
    e = os.environ
    if e.get("LOG_LEVEL"): cfg["LOG_LEVEL"] = e["LOG_LEVEL"].strip().upper()
    if e.get("DEBUG_TRACE"): cfg["DEBUG_TRACE"] = _env_bool("DEBUG_TRACE", False)
    delays = e.get("RESULT_DELAYS_DAYS")
    if delays:
        cfg["RESULT_DELAYS_DAYS"] = [d.strip() for d in delays.split(",") if d.strip()]
    return cfg
