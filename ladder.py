"""
Tint/shade ladder generation in OKLCH.

A ladder is an ordered run of levels around a base color: negative levels are
tints, positive levels are shades, level 0 is the base itself. Each non-zero
level sits at a normalized position x in [-2, 2] so the ladder spans the same
perceptual range whatever its length. Light and dark themes use different
curves: dark-mode steps get brighter and richer rather than darker.
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

import numpy as np

from contrast import solve_on_color
from oklch import OKLCH, hex_to_oklch, normalize_hex, oklch_to_hex_array


# =============================================================================
# Constants
# =============================================================================

PHI = (1 + math.sqrt(5)) / 2
SQRT_PHI = math.sqrt(PHI)

MIN_LEVELS = 3
MAX_LEVELS = 10

FALLBACK_OKLCH = OKLCH(L=0.64, C=0.20, H=260.0)  # Used when the base hex is malformed

CHROMA_MULT_MIN = 0.02
CHROMA_MULT_MAX = 1.80

THEMES = ('light', 'dark')

# Golden-ratio step spacing presets, weakest to strongest
SPACING_PRESETS = {
    'gentle': 1 / PHI ** 2,  # 0.382
    'soft': 1 / PHI,  # 0.618
    'standard': 1.0,
    'bold': SQRT_PHI,  # 1.272
    'extra': PHI,  # 1.618
}

# Curves as (x, y) knots, interpolated linearly and clamped at the ends.
# Light: chroma exponent on PHI. Tints lose chroma faster than shades gain it.
LIGHT_CHROMA_EXPONENT = ((-2, -2.0), (-1, -1.0), (0, 0.0), (1, 0.5), (2, 1.0))

# Dark: lightness offset. Tints lift a little, deep shades dip slightly.
DARK_LIGHTNESS_OFFSET = ((-2, 0.16), (-1, 0.10), (0, 0.05), (1, 0.00), (2, -0.04))

# Dark: chroma multiplier. Tints desaturate, shades get richer.
DARK_CHROMA_MULTIPLIER = ((-2, 1 / PHI), (-1, 1 / SQRT_PHI), (0, 1.10), (1, 1.30), (2, 1.50))


@dataclass(frozen=True)
class LadderStep:
    """One rung of a ladder."""
    key: str  # 'n2', 'n1', '0', '1', ...
    label: str  # 'tint-2', 'base', 'shade-1', ...
    level: int  # Signed, 0 = base
    hex: str
    on: str  # Foreground solved for 4.5:1 against hex


# =============================================================================
# Spacing
# =============================================================================

def resolve_spacing(value: Union[str, float]) -> float:
    """
    Resolve a preset name ('gentle' .. 'extra') or numeric string/float to a
    spacing scale.

    Raises:
        ValueError: If value is neither a known preset nor a number
    """
    if isinstance(value, str):
        name = value.strip().lower()
        if name in SPACING_PRESETS:
            return SPACING_PRESETS[name]
        try:
            return float(name)
        except ValueError:
            raise ValueError(
                f"Unknown spacing {value!r}; expected one of "
                f"{', '.join(SPACING_PRESETS)} or a number"
            )
    return float(value)


def next_stronger_spacing(scale: float) -> float:
    """Return the next preset above scale, or 'bold' if scale is not a preset."""
    values = list(SPACING_PRESETS.values())
    for i, v in enumerate(values):
        if abs(v - scale) < 1e-9:
            return values[min(len(values) - 1, i + 1)]
    return SPACING_PRESETS['bold']


def scale_around_1(mult: float, scale: float) -> float:
    """Stretch a multiplier's distance from 1 by scale, within guardrails."""
    m = 1 + (mult - 1) * scale
    return max(CHROMA_MULT_MIN, min(CHROMA_MULT_MAX, m))


def interp_table(x: float, table: tuple) -> float:
    """Piecewise-linear lookup over (x, y) knots, clamped at the ends."""
    xs, ys = zip(*table)
    return float(np.interp(x, xs, ys))


# =============================================================================
# Levels
# =============================================================================

def clamp_level_count(level_count: int) -> int:
    # NaN maps to the shortest ladder, infinities to the nearer bound
    if not math.isfinite(level_count):
        return MAX_LEVELS if level_count > 0 else MIN_LEVELS
    return max(MIN_LEVELS, min(MAX_LEVELS, int(level_count)))


def level_specs(level_count: int) -> list[tuple]:
    """
    Lay out the levels for a ladder of level_count steps.

    Returns:
        List of (level, key, label) from most negative to most positive.
        floor((N-1)/2) levels are negative, the rest positive.
    """
    n = clamp_level_count(level_count)
    n_neg = (n - 1) // 2
    n_pos = n - 1 - n_neg

    specs = []
    for level in range(-n_neg, n_pos + 1):
        if level < 0:
            specs.append((level, f"n{-level}", f"tint-{-level}"))
        elif level == 0:
            specs.append((level, "0", "base"))
        else:
            specs.append((level, str(level), f"shade-{level}"))
    return specs


def level_position(level: int, n_neg: int, n_pos: int) -> float:
    """Normalized position in [-2, 2] for a level."""
    if level < 0:
        return -2.0 * (-level / n_neg) if n_neg else 0.0
    if level > 0:
        return 2.0 * (level / n_pos) if n_pos else 0.0
    return 0.0


def light_offsets(x: float, scale: float) -> tuple:
    """(dL, chroma multiplier) for a light-theme step at position x."""
    dL = -0.05 * x * scale
    exponent = interp_table(x, LIGHT_CHROMA_EXPONENT)
    return dL, scale_around_1(PHI ** exponent, scale)


def dark_offsets(x: float, scale: float) -> tuple:
    """(dL, chroma multiplier) for a dark-theme step at position x."""
    dL = interp_table(x, DARK_LIGHTNESS_OFFSET) * scale
    mult = interp_table(x, DARK_CHROMA_MULTIPLIER)
    return dL, scale_around_1(mult, scale)


# =============================================================================
# Ladder
# =============================================================================

@lru_cache(maxsize=4096)
def _build_ladder(base_hex: str, scale: float, level_count: int, theme: str) -> tuple:
    ok = hex_to_oklch(base_hex) or FALLBACK_OKLCH
    specs = level_specs(level_count)
    n_neg = sum(1 for level, _, _ in specs if level < 0)
    n_pos = sum(1 for level, _, _ in specs if level > 0)
    offsets = light_offsets if theme == 'light' else dark_offsets

    rows = []
    for level, _, _ in specs:
        if level == 0:
            rows.append([ok.L, ok.C, ok.H])
            continue
        dL, mult = offsets(level_position(level, n_neg, n_pos), scale)
        L = min(1.0, max(0.0, ok.L + dL))
        C = max(0.0, ok.C * mult)
        rows.append([L, C, ok.H])

    hexes = oklch_to_hex_array(np.array(rows))
    return tuple(
        LadderStep(key=key, label=label, level=level, hex=hex_val, on=solve_on_color(hex_val))
        for (level, key, label), hex_val in zip(specs, hexes)
    )


def ladder(base_hex: str, spacing_scale: float, level_count: int,
           theme: str = 'light') -> tuple:
    """
    Generate the ladder for a base color.

    Args:
        base_hex: Base color; malformed hex falls back to FALLBACK_OKLCH
        spacing_scale: Step spacing (> 0); negative values clamp to 0
        level_count: Number of steps, clamped to 3-10
        theme: 'light' or 'dark'

    Returns:
        Tuple of LadderStep ordered from most negative level to most positive.

    Raises:
        ValueError: If theme is unknown
    """
    if theme not in THEMES:
        raise ValueError(f"Unknown theme {theme!r}; expected 'light' or 'dark'")
    base = normalize_hex(base_hex) or str(base_hex)
    return _build_ladder(base, max(0.0, float(spacing_scale)), clamp_level_count(level_count), theme)


def ladder_light(base_hex: str, spacing_scale: float, level_count: int) -> tuple:
    return ladder(base_hex, spacing_scale, level_count, 'light')


def ladder_dark(base_hex: str, spacing_scale: float, level_count: int) -> tuple:
    return ladder(base_hex, spacing_scale, level_count, 'dark')


def step_by_key(steps: tuple, key: str):
    """Find a step by key, or None."""
    for step in steps:
        if step.key == key:
            return step
    return None
