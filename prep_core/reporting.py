# prep_core/reporting.py
from __future__ import annotations
import dataclasses, json
from datetime import date, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from .university import format_timestamp


# -------- utils: make any result JSON-safe, camelCase keys ----------
def to_wire(x: Any) -> Any:
    if x is None or isinstance(x, (bool, int, float, str)):
        return x
    if isinstance(x, datetime):
        return format_timestamp(x)
    if isinstance(x, date):
        return x.isoformat()
    if isinstance(x, BaseModel):
        return to_wire(x.model_dump(by_alias=True))
    if dataclasses.is_dataclass(x) and not isinstance(x, type):
        # shallow: nested values go through to_wire so datetimes survive
        return {to_camel(f.name): to_wire(getattr(x, f.name)) for f in dataclasses.fields(x)}
    if isinstance(x, dict):
        return {str(k): to_wire(v) for k, v in x.items()}
    if isinstance(x, (list, tuple, set)):
        return [to_wire(v) for v in x]
    return str(x)


def dumps(x: Any, indent: int | None = 2) -> str:
    return json.dumps(to_wire(x), ensure_ascii=False, indent=indent)


def write_json(result: Any, out_path: str) -> str:
    """Write the wire form of ``result`` to ``out_path``; returns the path."""
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(dumps(result), encoding="utf-8")
    return str(out)


__all__ = ["to_wire", "dumps", "write_json"]
