#!/usr/bin/env python3
"""
Unified accent analysis pipeline.

Builds tint/shade ladders from a base accent and audits them for contrast,
producing prose and HTML reports.
Four stages: Ladders → Roles → Audit (→ Optimize) → Render
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from audit import DEFAULT_SURFACES, AuditResult, Surfaces, audit_theme, evaluate, resolve_mode
from ladder import THEMES, ladder, resolve_spacing
from oklch import hex_to_oklch, normalize_hex, oklch_css
from optimize import OptimizationResult, OptimizerOptions, find_nearest_passing_base
from roles import RoleKeys, compute_role_keys


# =============================================================================
# Constants
# =============================================================================

DEFAULT_BASE_HEX = '#6D94A2'
DEFAULT_SPACING = 'extra'  # φ
DEFAULT_LEVELS = 5
TARGET_PASS_RATE = 0.95


# =============================================================================
# Stages 1-3: Ladders, Roles, Audit
# =============================================================================

@dataclass
class AccentAnalysis:
    """Everything derived from one base accent."""
    base_hex: str
    spacing_scale: float
    level_count: int
    mode: str
    target_pass_rate: float
    ladders: dict  # theme -> tuple of LadderStep
    roles: dict  # theme -> RoleKeys
    audit: AuditResult  # Accent checks for mode
    theme_audits: dict = field(default_factory=dict)  # theme -> full AuditResult
    optimization: Optional[OptimizationResult] = None

    @property
    def passes(self) -> bool:
        return self.audit.meets(self.target_pass_rate)


def build_ladders(base_hex: str, spacing_scale: float, level_count: int) -> dict:
    """Stage 1: Generate the ladder for each theme."""
    return {theme: ladder(base_hex, spacing_scale, level_count, theme) for theme in THEMES}


def assign_roles(ladders: dict) -> dict:
    """Stage 2: Map roles onto each theme's ladder."""
    return {theme: compute_role_keys(steps) for theme, steps in ladders.items()}


def run_pipeline(base_hex: str, spacing_scale: float = resolve_spacing(DEFAULT_SPACING),
                 level_count: int = DEFAULT_LEVELS,
                 surfaces: Surfaces = DEFAULT_SURFACES, mode: str = 'combined',
                 optimize: bool = False, options: Optional[OptimizerOptions] = None) -> AccentAnalysis:
    """
    Run the analysis pipeline for one base accent.

    The optimizer only runs when optimize is set and the audit misses target.

    Raises:
        ValueError: If base_hex is malformed or mode is unknown
    """
    base = normalize_hex(base_hex)
    if base is None:
        raise ValueError(f"Invalid hex color: {base_hex!r}")
    mode = resolve_mode(mode)
    options = options or OptimizerOptions()

    # Stage 1: Ladders
    ladders = build_ladders(base, spacing_scale, level_count)

    # Stage 2: Roles
    roles = assign_roles(ladders)

    # Stage 3: Audit
    audit = evaluate(base, spacing_scale, level_count, surfaces, mode)
    theme_audits = {
        theme: audit_theme(base, spacing_scale, level_count, theme, surfaces)
        for theme in THEMES
    }

    analysis = AccentAnalysis(
        base_hex=base,
        spacing_scale=spacing_scale,
        level_count=len(ladders['light']),
        mode=mode,
        target_pass_rate=options.target_pass_rate,
        ladders=ladders,
        roles=roles,
        audit=audit,
        theme_audits=theme_audits,
    )

    # Stage 3b: Optimize
    if optimize and not analysis.passes:
        analysis.optimization = find_nearest_passing_base(
            base, spacing_scale, level_count, surfaces, options, mode=mode
        )

    return analysis


# =============================================================================
# Stage 4: Render
# =============================================================================

def format_pass_rate(pass_rate: Optional[float]) -> str:
    """Percent string; 'n/a' when nothing was checked."""
    return "n/a" if pass_rate is None else f"{pass_rate * 100:.0f}%"


def describe_roles(roles: RoleKeys) -> str:
    return ", ".join(f"{name.replace('_', '-')}={key}" for name, key in roles.as_dict().items())


def render(analysis: AccentAnalysis) -> str:
    """Stage 4: Render an analysis as prose."""
    lines = []
    ok = hex_to_oklch(analysis.base_hex)

    # Header
    lines.append(f"ACCENT: {analysis.base_hex}")
    lines.append(f"OKLCH: L={ok.L:.3f} C={ok.C:.3f} H={ok.H:.1f}")
    lines.append(f"Spacing: {analysis.spacing_scale:.3f} | Levels: {analysis.level_count} | "
                 f"Mode: {analysis.mode}")
    lines.append("")

    # Ladders
    for theme in THEMES:
        lines.append(f"{theme.upper()} LADDER:")
        for step in analysis.ladders[theme]:
            level = f"{step.level:+d}" if step.level else " 0"
            lines.append(f"  {level}  {step.label:<8} {step.hex}  on {step.on}  {oklch_css(step.hex)}")
        lines.append(f"  Roles: {describe_roles(analysis.roles[theme])}")
        lines.append("")

    # Audit
    audit = analysis.audit
    status = "PASS" if analysis.passes else "FAIL"
    lines.append(f"AUDIT ({status}):")
    lines.append(f"  Pass rate: {format_pass_rate(audit.pass_rate)} of {audit.total} checks "
                 f"(target {analysis.target_pass_rate * 100:.0f}%) | "
                 f"Penalty: {audit.penalty:.2f} | Mandatory failures: {audit.mandatory_failures}")
    for check in audit.checks:
        mark = "ok " if check.passed else "FAIL"
        flags = " [mandatory]" if check.mandatory else ""
        lines.append(f"  {mark} {check.theme:<5} {check.use:<28} {check.fg} on {check.bg}: "
                     f"{check.ratio:.2f}:1 (needs {check.target:.1f}){flags}")
    lines.append("")

    # Full theme tables, failures only
    for theme, result in analysis.theme_audits.items():
        failures = result.failures
        lines.append(f"{theme.upper()} THEME: {format_pass_rate(result.pass_rate)} of "
                     f"{result.total} checks pass")
        for check in failures:
            exempt = " (exempt)" if check.exempt else ""
            lines.append(f"  - {check.use}: {check.ratio:.2f}:1 ({check.grade}){exempt}")
        lines.append("")

    # Optimization
    opt = analysis.optimization
    if opt is not None:
        best = opt.best
        verdict = "meets target" if opt.met_target else "improved but not fully passing"
        lines.append(f"SUGGESTED BASE: {best.hex} ({verdict})")
        lines.append(f"  OKLCH: L={best.L:.3f} C={best.C:.3f} H={best.H:.1f} | "
                     f"Distance: {best.distance:.4f}")
        lines.append(f"  Pass rate: {format_pass_rate(best.pass_rate)} | Penalty: {best.penalty:.2f} "
                     f"(was {opt.original.penalty:.2f}) | Mandatory failures: {best.mandatory_failures}")
        lines.append(f"  Searched {opt.candidates_evaluated} candidates over "
                     f"{opt.rings_evaluated} ring(s)")

    return "\n".join(lines).rstrip()


def render_html(analysis: AccentAnalysis) -> str:
    """Stage 4b: Render an analysis as HTML."""
    from html import escape

    safe_hex = escape(analysis.base_hex)

    # CSS styles
    css = """
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body {
            font-family: system-ui, -apple-system, sans-serif;
            background: #f5f5f5;
            color: #333;
            line-height: 1.5;
            padding: 2rem;
            max-width: 900px;
            margin: 0 auto;
        }
        h1 { font-size: 1.5rem; margin-bottom: 0.5rem; }
        h2 { font-size: 1.2rem; margin: 2rem 0 1rem; border-bottom: 1px solid #ddd; padding-bottom: 0.5rem; }
        .meta { color: #666; font-size: 0.9rem; margin-bottom: 1rem; }
        .ladder {
            display: flex;
            border-radius: 8px;
            overflow: hidden;
            box-shadow: 0 2px 8px rgba(0,0,0,0.1);
            margin: 1rem 0;
            padding: 1rem;
            gap: 0.5rem;
        }
        .ladder.light { background: #F7F9FC; }
        .ladder.dark { background: #0C1116; }
        .ladder .swatch {
            flex: 1;
            height: 90px;
            border-radius: 6px;
            display: flex;
            flex-direction: column;
            align-items: center;
            justify-content: space-between;
            padding: 0.5rem;
            font-size: 0.7rem;
            font-weight: 500;
        }
        .ladder .swatch .sample { font-size: 1.3rem; font-weight: 700; }
        .roles { font-family: monospace; color: #555; font-size: 0.8rem; }
        table { width: 100%; border-collapse: collapse; background: #fff; font-size: 0.85rem; }
        th, td { text-align: left; padding: 0.4rem 0.6rem; border-bottom: 1px solid #eee; }
        td.pair { font-family: monospace; }
        .chip {
            display: inline-block;
            width: 14px;
            height: 14px;
            border-radius: 3px;
            vertical-align: middle;
            margin-right: 0.25rem;
            border: 1px solid rgba(0,0,0,0.15);
        }
        .contrast-badge {
            display: inline-block;
            padding: 0.15rem 0.4rem;
            border-radius: 4px;
            font-size: 0.75rem;
            font-weight: 600;
        }
        .badge-aaa { background: #22c55e; color: #fff; }
        .badge-aa { background: #3b82f6; color: #fff; }
        .badge-aa-large, .badge-pass { background: #f59e0b; color: #fff; }
        .badge-fail { background: #ef4444; color: #fff; }
        .suggestion {
            background: #fff;
            border-radius: 8px;
            padding: 1rem;
            box-shadow: 0 1px 3px rgba(0,0,0,0.08);
            display: grid;
            grid-template-columns: 60px 60px 1fr;
            gap: 1rem;
            align-items: center;
        }
        .suggestion .swatch { width: 60px; height: 60px; border-radius: 6px; }
        .suggestion .info { font-size: 0.85rem; }
    """

    def badge(check):
        cls = {
            'AAA': 'badge-aaa',
            'AA': 'badge-aa',
            'AA-large': 'badge-aa-large',
            'pass': 'badge-pass',
        }.get(check.grade, 'badge-fail')
        return f'<span class="contrast-badge {cls}">{escape(check.grade)}</span>'

    def checks_table(checks):
        rows = ['<table>',
                '<tr><th>Use</th><th>Pair</th><th>Ratio</th><th>Needs</th><th>Grade</th><th>Policy</th></tr>']
        for c in checks:
            policy = 'mandatory' if c.mandatory else ('exempt' if c.exempt else '')
            rows.append(
                f'<tr><td>{escape(c.use)} ({c.theme})</td>'
                f'<td class="pair"><span class="chip" style="background:{c.fg}"></span>{c.fg} on '
                f'<span class="chip" style="background:{c.bg}"></span>{c.bg}</td>'
                f'<td>{c.ratio:.2f}:1</td><td>{c.target:.1f}</td><td>{badge(c)}</td><td>{policy}</td></tr>'
            )
        rows.append('</table>')
        return rows

    # Build HTML
    lines = [
        '<!DOCTYPE html>',
        '<html lang="en">',
        '<head>',
        '  <meta charset="UTF-8">',
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f'  <title>Accent: {safe_hex}</title>',
        f'  <style>{css}</style>',
        '</head>',
        '<body>',
    ]

    # Header
    audit = analysis.audit
    lines.append(f'<h1>{safe_hex} {"passes" if analysis.passes else "needs work"}</h1>')
    lines.append(f'<p class="meta">{escape(oklch_css(analysis.base_hex, 3))} · spacing '
                 f'{analysis.spacing_scale:.3f} · {analysis.level_count} levels · {analysis.mode}</p>')
    lines.append(f'<p class="meta">Accent pass rate: {format_pass_rate(audit.pass_rate)} of '
                 f'{audit.total} checks (target ≥ {analysis.target_pass_rate * 100:.0f}%) · '
                 f'penalty {audit.penalty:.2f} · {audit.mandatory_failures} mandatory failure(s)</p>')

    # Ladders
    lines.append('<h2>Ladders</h2>')
    for theme in THEMES:
        lines.append(f'<div class="ladder {theme}">')
        for step in analysis.ladders[theme]:
            lines.append(f'  <div class="swatch" style="background:{step.hex}; color:{step.on}">'
                         f'<span>{step.label}</span><span class="sample">Aa</span><span>{step.hex}</span></div>')
        lines.append('</div>')
        lines.append(f'<p class="roles">{theme}: {escape(describe_roles(analysis.roles[theme]))}</p>')

    # Accent checks
    lines.append('<h2>Accent Checks</h2>')
    lines.extend(checks_table(audit.checks))

    # Full theme tables
    for theme, result in analysis.theme_audits.items():
        lines.append(f'<h2>{theme.capitalize()} Theme ({format_pass_rate(result.pass_rate)})</h2>')
        lines.extend(checks_table(result.checks))

    # Suggestion
    opt = analysis.optimization
    if opt is not None:
        best = opt.best
        verdict = 'Meets target' if opt.met_target else 'Improved but not fully passing'
        lines.append('<h2>Suggested Base</h2>')
        lines.append('<div class="suggestion">')
        lines.append(f'  <div class="swatch" style="background:{safe_hex}"></div>')
        lines.append(f'  <div class="swatch" style="background:{best.hex}"></div>')
        lines.append('  <div class="info">')
        lines.append(f'    <strong>{best.hex}</strong> · {verdict}<br>')
        lines.append(f'    {escape(oklch_css(best.hex, 3))} · distance {best.distance:.4f}<br>')
        lines.append(f'    Pass rate {format_pass_rate(best.pass_rate)} · penalty {best.penalty:.2f} '
                     f'(was {opt.original.penalty:.2f})')
        lines.append('  </div>')
        lines.append('</div>')

    lines.append('</body>')
    lines.append('</html>')

    return '\n'.join(lines)


# =============================================================================
# Main Pipeline
# =============================================================================

def analyze_color(base_hex: str, spacing_scale: float = resolve_spacing(DEFAULT_SPACING),
                  level_count: int = DEFAULT_LEVELS, **kwargs) -> tuple[str, str]:
    """Run the full pipeline on a base accent.

    Returns:
        Tuple of (prose_output, html_output)
    """
    analysis = run_pipeline(base_hex, spacing_scale, level_count, **kwargs)
    return render(analysis), render_html(analysis)


# =============================================================================
# CLI
# =============================================================================

if __name__ == '__main__':
    import argparse
    import sys
    from pathlib import Path

    def hex_arg(value):
        normalized = normalize_hex(value)
        if normalized is None:
            raise argparse.ArgumentTypeError(f"invalid hex color: {value!r}")
        return normalized

    def spacing_arg(value):
        try:
            return resolve_spacing(value)
        except ValueError as e:
            raise argparse.ArgumentTypeError(str(e))

    parser = argparse.ArgumentParser(
        description='Build accent ladders from a base color and audit their contrast.'
    )
    parser.add_argument(
        '--base', '-b',
        type=hex_arg,
        default=DEFAULT_BASE_HEX,
        help=f'Base accent hex (default {DEFAULT_BASE_HEX})'
    )
    parser.add_argument(
        '--spacing', '-s',
        type=spacing_arg,
        default=resolve_spacing(DEFAULT_SPACING),
        help='Step spacing: gentle, soft, standard, bold, extra, or a number (default extra)'
    )
    parser.add_argument(
        '--levels', '-n',
        type=int,
        default=DEFAULT_LEVELS,
        help='Ladder length, 3-10 (default 5)'
    )
    parser.add_argument(
        '--mode',
        choices=['combined', 'light-only', 'dark-only'],
        default='combined',
        help='Which themes the accent audit covers'
    )
    parser.add_argument(
        '--target',
        type=float,
        default=TARGET_PASS_RATE,
        help='Target pass rate, 0-1 (default 0.95)'
    )
    parser.add_argument(
        '--optimize',
        action='store_true',
        help='Search for the nearest passing base when the audit fails'
    )
    parser.add_argument(
        '--strategy',
        choices=['L-first', 'LC'],
        default='L-first',
        help='Optimizer ring order (default L-first)'
    )
    parser.add_argument(
        '--allow-hue-drift',
        action='store_true',
        help='Let the optimizer move the hue'
    )
    parser.add_argument(
        '--output', '-o',
        nargs='?',
        const=True,
        default=None,
        help='Write HTML report. Optionally specify path, otherwise auto-names from the hex.'
    )
    parser.add_argument(
        '--swatches',
        nargs='?',
        const=True,
        default=None,
        help='Write PNG swatch sheet. Optionally specify path.'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log optimizer progress'
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    stem = args.base.lstrip('#').lower()

    options = OptimizerOptions(
        target_pass_rate=args.target,
        strategy=args.strategy,
        allow_hue_drift=args.allow_hue_drift,
    )

    # Run analysis
    try:
        analysis = run_pipeline(args.base, args.spacing, args.levels, mode=args.mode,
                                optimize=args.optimize, options=options)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Always print prose to terminal
    print(render(analysis))

    # Write HTML if requested
    if args.output:
        if args.output is True:
            output_path = Path(f"{stem}-accent.html")
        else:
            output_path = Path(args.output)

        try:
            output_path.write_text(render_html(analysis))
            print(f"\nWrote: {output_path}")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            sys.exit(1)

    if args.swatches:
        from swatches import visualize_ladders

        swatch_path = Path(f"{stem}-ladders.png") if args.swatches is True else Path(args.swatches)
        try:
            visualize_ladders(analysis.ladders, str(swatch_path))
        except OSError as e:
            print(f"Error writing swatches: {e}", file=sys.stderr)
            sys.exit(1)
