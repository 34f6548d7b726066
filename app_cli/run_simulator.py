from __future__ import annotations
import os, sys, datetime, time
from prep_core.reporting import write_json
from prep_core.simulators import get_simulator, list_simulators, submit_attempt
def ask(prompt: str, options) -> int | None:
    print(prompt)
    for i,opt in enumerate(options): print(f"  [{i}] {opt}")
    while True:
        v = input("Your choice (index, blank to skip): ").strip()
        if v == "": return None
        if v.isdigit() and int(v) < len(options): return int(v)
        print("Enter a listed index.")
def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    slug = argv[0] if argv else "tcs-nqt"
    sim = get_simulator(slug)
    if sim is None:
        print(f"Unknown simulator {slug!r}. Available: {', '.join(s['slug'] for s in list_simulators())}")
        return 2
    print(f"{sim.name} ({sim.question_count} questions, {sim.duration_min} min)")
    answers = {}; t0 = time.perf_counter()
    for q in sim.questions:
        picked = ask(f"\n[{q.section}] {q.text}", q.options)
        if picked is not None: answers[str(q.id)] = picked
    res = submit_attempt(slug, answers, time.perf_counter() - t0)
    print(f"\nScore {res.score_percent}% | {res.pace} | readiness {res.readiness_band} (+{res.reward_xp} XP)")
    for s in res.section_breakdown:
        print(f"  {s.section:<12} {s.correct}/{s.total}  accuracy {s.accuracy}%  coverage {s.coverage_accuracy}%")
    if res.focus_areas: print("Focus next on: " + ", ".join(res.focus_areas))
    print(res.recommendation)
    os.makedirs("reports", exist_ok=True)
    ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    path = write_json(res, os.path.join("reports", f"attempt_{slug}_{ts}.json"))
    print(f"Done. Result saved to: {path}")
    return 0
if __name__ == "__main__": raise SystemExit(main())
