#!/usr/bin/env python3
"""Batch analyze base accents and generate HTML reports."""

import argparse
import sys
import time
from pathlib import Path

from analyze import DEFAULT_LEVELS, DEFAULT_SPACING, render_html, run_pipeline
from ladder import resolve_spacing
from oklch import normalize_hex
from optimize import OptimizerOptions


def read_colors(path: Path) -> list[str]:
    """Read one hex per line, skipping blanks and '//' or ';' comment lines."""
    colors = []
    for line in path.read_text().splitlines():
        entry = line.strip()
        if not entry or entry.startswith(('//', ';')):
            continue
        colors.append(entry.split()[0])
    return colors


def main():
    parser = argparse.ArgumentParser(
        description='Batch analyze base accents and generate HTML reports.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Text file with one base hex per line'
    )
    parser.add_argument(
        '--output', '-o',
        required=True,
        help='Directory for HTML output files'
    )
    parser.add_argument(
        '--spacing', '-s',
        default=DEFAULT_SPACING,
        help='Step spacing preset or number (default extra)'
    )
    parser.add_argument(
        '--levels', '-n',
        type=int,
        default=DEFAULT_LEVELS,
        help='Ladder length, 3-10 (default 5)'
    )
    parser.add_argument(
        '--no-optimize',
        action='store_true',
        help='Skip the nearest-passing-base search for failing accents'
    )

    args = parser.parse_args()

    input_path = Path(args.input)
    output_dir = Path(args.output)

    # Validate input file
    if not input_path.is_file():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        sys.exit(2)

    try:
        spacing = resolve_spacing(args.spacing)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    # Create output directory if needed
    output_dir.mkdir(parents=True, exist_ok=True)

    # Find colors
    colors = read_colors(input_path)
    if not colors:
        print(f"No colors found in {input_path}", file=sys.stderr)
        sys.exit(2)

    total = len(colors)
    succeeded = 0
    failed = []
    optimize = not args.no_optimize

    batch_start = time.perf_counter()

    for i, color in enumerate(colors, 1):
        try:
            color_start = time.perf_counter()
            analysis = run_pipeline(color, spacing, args.levels, optimize=optimize,
                                    options=OptimizerOptions())
            html = render_html(analysis)
            color_elapsed = time.perf_counter() - color_start

            output_file = output_dir / f"{normalize_hex(color).lstrip('#').lower()}-accent.html"
            if output_file.exists():
                print(f"  Warning: Overwriting {output_file.name}", file=sys.stderr)
            output_file.write_text(html)

            verdict = "pass" if analysis.passes else "fail"
            if analysis.optimization is not None:
                verdict += f" → {analysis.optimization.hex}"
            print(f"[{i}/{total}] {analysis.base_hex} → {verdict} ({color_elapsed:.2f}s)")
            succeeded += 1

        except (ValueError, OSError) as e:
            error_msg = f"{type(e).__name__}: {e}"
            print(f"[{i}/{total}] {color} → ERROR: {error_msg}", file=sys.stderr)
            failed.append((color, error_msg))

    batch_elapsed = time.perf_counter() - batch_start

    # Summary
    print()
    print(f"Completed: {succeeded}/{total} succeeded in {batch_elapsed:.2f}s")
    if succeeded > 0:
        print(f"Average: {batch_elapsed / succeeded:.2f}s per color")
    if failed:
        print(f"Failed ({len(failed)}):")
        for name, error in failed:
            print(f"  - {name}: {error}")
        sys.exit(1)


if __name__ == '__main__':
    main()
