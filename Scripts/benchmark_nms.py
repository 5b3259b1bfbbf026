from __future__ import annotations

import argparse
import statistics
import time
from dataclasses import dataclass
from typing import List

import numpy as np

from detect_kit import Box, Candidate, suppress


@dataclass(frozen=True)
class TimingSummary:
    n: int
    mean_ms: float
    p50_ms: float
    p90_ms: float
    p95_ms: float


def _percentile(sorted_values: List[float], q: float) -> float:
    if not sorted_values:
        raise ValueError("No values provided.")
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    # Linear interpolation between closest ranks.
    pos = (q / 100.0) * (len(sorted_values) - 1)
    lo = int(np.floor(pos))
    hi = int(np.ceil(pos))
    t = pos - lo
    return float(sorted_values[lo] * (1.0 - t) + sorted_values[hi] * t)


def _summarize_ms(values_s: List[float]) -> TimingSummary:
    ms_sorted = sorted(v * 1000.0 for v in values_s)
    return TimingSummary(
        n=len(ms_sorted),
        mean_ms=float(statistics.fmean(ms_sorted)),
        p50_ms=_percentile(ms_sorted, 50.0),
        p90_ms=_percentile(ms_sorted, 90.0),
        p95_ms=_percentile(ms_sorted, 95.0),
    )


def _format_summary(label: str, s: TimingSummary) -> str:
    return (
        f"{label}: n={s.n} mean={s.mean_ms:.3f}ms p50={s.p50_ms:.3f}ms "
        f"p90={s.p90_ms:.3f}ms p95={s.p95_ms:.3f}ms"
    )


def _synthetic_candidates(n: int, n_classes: int, size: int, seed: int) -> List[Candidate]:
    rng = np.random.default_rng(seed)
    lt = rng.uniform(0, size, size=(n, 2))
    wh = rng.uniform(5, size / 8, size=(n, 2))
    scores = rng.uniform(0.5, 1.0, size=n)
    class_ids = rng.integers(0, n_classes, size=n)
    return [
        Candidate(class_id=int(c), confidence=float(s), box=Box(float(x0), float(y0), float(w), float(h)))
        for (x0, y0), (w, h), s, c in zip(lt, wh, scores, class_ids)
    ]


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Benchmark overlap suppression on synthetic candidates (joint vs per-class)."
    )
    parser.add_argument("--boxes", type=int, default=1000, help="Number of synthetic candidates.")
    parser.add_argument("--classes", type=int, default=5, help="Number of synthetic classes.")
    parser.add_argument("--size", type=int, default=416, help="Synthetic image size in pixels.")
    parser.add_argument("--score", type=float, default=0.5, help="Score floor re-checked by the suppressor.")
    parser.add_argument("--iou", type=float, default=0.4, help="IoU threshold for NMS.")
    parser.add_argument("--warmup", type=int, default=5, help="Runs executed but not recorded.")
    parser.add_argument("--repeats", type=int, default=50, help="Recorded runs.")
    parser.add_argument("--seed", type=int, default=0, help="RNG seed for the synthetic boxes.")
    args = parser.parse_args()

    if args.boxes < 1:
        raise ValueError("--boxes must be >= 1")
    if args.classes < 1:
        raise ValueError("--classes must be >= 1")
    if args.warmup < 0:
        raise ValueError("--warmup must be >= 0")
    if args.repeats < 1:
        raise ValueError("--repeats must be >= 1")

    candidates = _synthetic_candidates(int(args.boxes), int(args.classes), int(args.size), int(args.seed))

    t_joint: List[float] = []
    t_per_class: List[float] = []
    kept_joint = kept_per_class = 0
    for run in range(int(args.warmup) + int(args.repeats)):
        t0 = time.perf_counter()
        kept_joint = len(suppress(candidates, args.score, args.iou))
        t1 = time.perf_counter()
        kept_per_class = len(suppress(candidates, args.score, args.iou, per_class_suppression=True))
        t2 = time.perf_counter()
        if run < int(args.warmup):
            continue
        t_joint.append(t1 - t0)
        t_per_class.append(t2 - t1)

    print(_format_summary("suppress_joint", _summarize_ms(t_joint)))
    print(_format_summary("suppress_per_class", _summarize_ms(t_per_class)))
    print(f"candidates={len(candidates)} kept_joint={kept_joint} kept_per_class={kept_per_class}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
