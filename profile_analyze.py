#!/usr/bin/env python3
"""Profile the accent pipeline to identify performance bottlenecks."""

import cProfile
import io
import pstats
import sys
import time

# Import the pipeline
from analyze import DEFAULT_LEVELS, DEFAULT_SPACING, build_ladders, assign_roles
from audit import evaluate
from ladder import _build_ladder, resolve_spacing
from optimize import find_nearest_passing_base

SAMPLE_COLORS = ['#6D94A2', '#A98B46', '#CCCCCC', '#E4572E', '#1B998B']


def profile_color(base_hex: str, spacing: float, levels: int, verbose: bool = True):
    """Time each pipeline stage for one base color, starting from a cold cache."""

    if verbose:
        print(f"\n{'='*60}")
        print(f"Profiling: {base_hex}")
        print(f"{'='*60}")

    _build_ladder.cache_clear()
    timings = {}

    # Stage 1: Ladders
    start = time.perf_counter()
    ladders = build_ladders(base_hex, spacing, levels)
    timings['ladders'] = time.perf_counter() - start

    # Stage 2: Roles
    start = time.perf_counter()
    assign_roles(ladders)
    timings['roles'] = time.perf_counter() - start

    # Stage 3: Audit
    start = time.perf_counter()
    audit = evaluate(base_hex, spacing, levels)
    timings['audit'] = time.perf_counter() - start

    # Stage 3b: Optimize
    start = time.perf_counter()
    result = find_nearest_passing_base(base_hex, spacing, levels)
    timings['optimize'] = time.perf_counter() - start

    total = sum(timings.values())
    timings['total'] = total

    if verbose:
        print(f"  Audit pass rate: {audit.pass_rate}")
        print(f"  Optimizer: {result.candidates_evaluated:,} candidates, "
              f"{result.rings_evaluated} ring(s), met target: {result.met_target}")
        print(f"\nStage timings:")
        for stage, t in timings.items():
            pct = (t / total * 100) if stage != 'total' and total > 0 else 100
            print(f"  {stage:20s}: {t:6.3f}s ({pct:5.1f}%)")

    return timings, result


def detailed_profile(base_hex: str, spacing: float, levels: int):
    """Run detailed cProfile on find_nearest_passing_base (the main compute stage)."""

    print(f"\n{'='*60}")
    print(f"Detailed profile of find_nearest_passing_base()")
    print(f"{'='*60}")

    _build_ladder.cache_clear()

    profiler = cProfile.Profile()
    profiler.enable()
    result = find_nearest_passing_base(base_hex, spacing, levels)
    profiler.disable()

    # Format output
    stream = io.StringIO()
    stats = pstats.Stats(profiler, stream=stream)
    stats.sort_stats('cumulative')
    stats.print_stats(30)  # Top 30 functions

    print(stream.getvalue())

    return result


def main():
    colors = sys.argv[1:] or SAMPLE_COLORS
    spacing = resolve_spacing(DEFAULT_SPACING)

    print(f"Profiling {len(colors)} colors")

    # Quick timing for all colors
    all_timings = []
    for color in colors:
        timings, result = profile_color(color, spacing, DEFAULT_LEVELS)
        all_timings.append((color, timings, result.candidates_evaluated))

    # Summary
    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    print(f"{'Color':<12} {'Candidates':>12} {'Optimize':>10} {'Total':>8}")
    print("-" * 60)
    for color, timings, candidates in all_timings:
        print(f"{color:<12} {candidates:>12,} {timings['optimize']:>9.3f}s {timings['total']:>7.3f}s")

    # Detailed profile on first color
    detailed_profile(colors[0], spacing, DEFAULT_LEVELS)


if __name__ == "__main__":
    main()
