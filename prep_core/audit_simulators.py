from __future__ import annotations

import json
import sys
from collections import Counter
from pathlib import Path
from typing import Iterable

from . import config
from .simulators import Simulator, load_simulators


def _valid_key(q, n_options: int) -> bool:
    idx = q.correct_index
    return isinstance(idx, int) and not isinstance(idx, bool) and 0 <= idx < n_options


def audit_simulators(simulators: Iterable[Simulator]) -> dict[str, object]:
    coverage: dict[str, dict[str, int]] = {}
    totals = {"simulators": 0, "questions": 0, "bad_keys": 0, "duplicate_ids": 0}
    warnings: list[str] = []

    for sim in simulators:
        totals["simulators"] += 1
        per_section: dict[str, int] = {name: 0 for name in sim.sections}
        ids = Counter(str(q.id) for q in sim.questions)

        for q in sim.questions:
            totals["questions"] += 1
            if q.section not in per_section:
                warnings.append(f"{sim.slug} question {q.id} uses undeclared section {q.section!r}")
            per_section[q.section] = per_section.get(q.section, 0) + 1
            if not _valid_key(q, len(q.options)):
                totals["bad_keys"] += 1
                warnings.append(
                    f"{sim.slug} question {q.id} has correctIndex {q.correct_index!r} outside {len(q.options)} options"
                )

        for qid, n in ids.items():
            if n > 1:
                totals["duplicate_ids"] += 1
                warnings.append(f"{sim.slug} has {n} questions with id {qid}")

        for section in sim.sections:
            have = per_section.get(section, 0)
            if have < config.SIM_MIN_PER_SECTION:
                warnings.append(f"{sim.slug} section {section} has {have} (<{config.SIM_MIN_PER_SECTION})")

        coverage[sim.slug] = per_section

    return {"coverage": coverage, "warnings": warnings, "totals": totals}


def print_report(summary: dict[str, object]) -> None:
    coverage: dict[str, dict[str, int]] = summary["coverage"]  # type: ignore[assignment]
    print("=== Simulator Coverage ===")
    for slug in sorted(coverage):
        print(f"\nSimulator: {slug}")
        for section, n in coverage[slug].items():
            print(f"  {section:<12} {n:3d}")

    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")

    print("\nTotals:", summary["totals"])


def write_summary(summary: dict[str, object], path: Path) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def main(argv: list[str] | None = None) -> int:
    summary = audit_simulators(load_simulators())
    print_report(summary)
    if argv:
        write_summary(summary, Path(argv[0]))
    return 2 if summary["warnings"] else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
