"""
Search OKLCH space for the base accent nearest to the original that passes
the accessibility audit.

The search widens in rings around the original color. Each ring runs a coarse
(dL, dC) grid per candidate hue, then refines around the best grid point.
Every point is scored by regenerating both ladders and re-running the audit.
Penalty rather than pass rate drives selection: pass rate only moves when a
check flips, so it gives the search nothing to follow in between.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Optional

import numpy as np

from audit import DEFAULT_SURFACES, AuditResult, Surfaces, evaluate, resolve_mode
from ladder import FALLBACK_OKLCH
from oklch import delta_hue, hex_to_oklch, normalize_hex, oklch_to_hex, wrap_hue

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

STRATEGIES = ('L-first', 'LC')
GRID_EPSILON = 1e-9  # Include the far edge of a float grid


@dataclass
class OptimizerOptions:
    """Search configuration. Distance weights and ring budgets are tuned defaults."""
    target_pass_rate: float = 0.95
    max_dl: float = 0.45
    max_dc: float = 0.30
    coarse_step: float = 0.02
    refine_step: float = 0.01
    allow_hue_drift: bool = False
    hue_span_deg: float = 12.0
    hue_step_deg: float = 2.0
    k_l: float = 1.0
    k_c: float = 1.0
    k_h: float = 0.6
    max_hue_drift_deg: Optional[float] = None
    min_chroma_ratio: float = 0.7
    min_chroma_abs: float = 0.06
    strategy: str = 'L-first'
    mode: str = 'combined'


@dataclass(frozen=True)
class Ring:
    """Perturbation budget for one search ring."""
    dl: float
    dc: float
    hue_span: float


@dataclass(frozen=True)
class OptimizationCandidate:
    hex: str
    L: float
    C: float
    H: float
    distance: float
    audit: AuditResult

    @property
    def pass_rate(self) -> Optional[float]:
        return self.audit.pass_rate

    @property
    def penalty(self) -> float:
        return self.audit.penalty

    @property
    def mandatory_failures(self) -> int:
        return self.audit.mandatory_failures

    def rank(self) -> tuple:
        """Sort key: fewer mandatory failures, lower penalty, closer."""
        return (self.audit.mandatory_failures, self.audit.penalty, self.distance)


@dataclass
class OptimizationResult:
    best: OptimizationCandidate
    met_target: bool
    original: OptimizationCandidate
    rings_evaluated: int = 0
    candidates_evaluated: int = 0
    ring_history: list = field(default_factory=list)  # Best candidate after each ring

    @property
    def hex(self) -> str:
        return self.best.hex

    @property
    def distance(self) -> float:
        return self.best.distance


# =============================================================================
# Search Geometry
# =============================================================================

def build_rings(options: OptimizerOptions) -> list[Ring]:
    """
    Ring budgets for a strategy, each capped by max_dl/max_dc.

    'L-first' tries lightness-only moves before touching chroma, which keeps
    the brand color recognizable. 'LC' moves both from the start.

    Raises:
        ValueError: If the strategy is unknown
    """
    dl, dc = options.max_dl, options.max_dc

    def hue(span):
        if not options.allow_hue_drift:
            return 0.0
        return options.hue_span_deg if span is None else min(options.hue_span_deg, span)

    if options.strategy == 'L-first':
        return [
            Ring(min(dl, 0.06), 0.0, 0.0),
            Ring(min(dl, 0.10), 0.0, 0.0),
            Ring(min(dl, 0.14), min(dc, 0.04), 0.0),
            Ring(min(dl, 0.20), min(dc, 0.08), hue(4)),
            Ring(min(dl, 0.28), min(dc, 0.12), hue(8)),
            Ring(dl, dc, hue(None)),
        ]
    if options.strategy == 'LC':
        return [
            Ring(min(dl, 0.08), min(dc, 0.06), 0.0),
            Ring(min(dl, 0.12), min(dc, 0.08), hue(4)),
            Ring(min(dl, 0.18), min(dc, 0.12), hue(8)),
            Ring(min(dl, 0.30), min(dc, 0.20), hue(12)),
            Ring(dl, dc, hue(None)),
        ]
    raise ValueError(f"Unknown strategy {options.strategy!r}; expected one of {', '.join(STRATEGIES)}")


def grid(span: float, step: float) -> np.ndarray:
    """Symmetric offsets -span..+span at step; just [0] when span is 0."""
    if span <= 0 or step <= 0:
        return np.array([0.0])
    return np.arange(-span, span + GRID_EPSILON, step)


def hue_fan(center: float, span: float, step: float) -> list[float]:
    """Hues center-span..center+span at step, wrapped to [0, 360)."""
    if span <= 0 or step <= 0:
        return [wrap_hue(center)]
    count = int(math.floor(2 * span / step + GRID_EPSILON)) + 1
    return [wrap_hue(center - span + i * step) for i in range(count)]


def chroma_floor(original_chroma: float, options: OptimizerOptions) -> float:
    # Achromatic bases have no meaningful hue: hex_to_oklch reports whatever
    # atan2 makes of rounding noise, and the floor then tints candidates with
    # that hue (#CCCCCC comes back olive).
    return max(options.min_chroma_abs, original_chroma * options.min_chroma_ratio)


# =============================================================================
# Search
# =============================================================================

def adjust_lightness(hex_str: str, dl: float) -> str:
    """Shift a color's OKLCH lightness by dl, keeping chroma and hue."""
    ok = hex_to_oklch(hex_str) or FALLBACK_OKLCH
    return oklch_to_hex(min(1.0, max(0.0, ok.L + dl)), ok.C, ok.H)


def find_nearest_passing_base(base_hex: str, spacing_scale: float, level_count: int,
                              surfaces: Surfaces = DEFAULT_SURFACES,
                              options: Optional[OptimizerOptions] = None,
                              **overrides) -> OptimizationResult:
    """
    Find the base color nearest to base_hex whose ladders pass the audit.

    Args:
        base_hex: Original base accent
        spacing_scale: Ladder step spacing
        level_count: Ladder length (3-10)
        surfaces: Theme surfaces to audit against
        options: Search configuration (defaults to OptimizerOptions())
        **overrides: Individual OptimizerOptions fields

    Returns:
        OptimizationResult. met_target is False when no candidate reached the
        target; best is then the most improved candidate found.

    Raises:
        ValueError: If the strategy or audit mode is unknown
    """
    options = replace(options or OptimizerOptions(), **overrides)
    mode = resolve_mode(options.mode)
    rings = build_rings(options)

    origin = hex_to_oklch(base_hex) or FALLBACK_OKLCH
    start_hex = normalize_hex(base_hex) or oklch_to_hex(origin.L, origin.C, origin.H)
    min_c = chroma_floor(origin.C, options)

    original = OptimizationCandidate(
        hex=start_hex, L=origin.L, C=origin.C, H=wrap_hue(origin.H), distance=0.0,
        audit=evaluate(start_hex, spacing_scale, level_count, surfaces, mode),
    )

    if original.audit.meets(options.target_pass_rate):
        return OptimizationResult(best=original, met_target=True, original=original)

    def distance(L, C, H):
        dl = L - origin.L
        dc = C - origin.C
        dh = delta_hue(H, origin.H) / 180.0
        return math.sqrt((options.k_l * dl) ** 2 + (options.k_c * dc) ** 2 + (options.k_h * dh) ** 2)

    evaluated = 0

    def score(L, C, H):
        nonlocal evaluated
        C = max(min_c, C)
        if options.max_hue_drift_deg is not None and delta_hue(H, origin.H) > options.max_hue_drift_deg:
            return None
        hex_val = oklch_to_hex(L, C, H)
        evaluated += 1
        return OptimizationCandidate(
            hex=hex_val, L=L, C=C, H=wrap_hue(H), distance=distance(L, C, H),
            audit=evaluate(hex_val, spacing_scale, level_count, surfaces, mode),
        )

    def better(a, b):
        if a is None:
            return b
        if b is None:
            return a
        return a if a.rank() < b.rank() else b

    best = original
    history = []

    for index, ring in enumerate(rings, 1):
        for H in hue_fan(origin.H, ring.hue_span, options.hue_step_deg):
            hue_best = None

            for dl in grid(ring.dl, options.coarse_step):
                for dc in grid(ring.dc, options.coarse_step):
                    L = min(1.0, max(0.0, origin.L + dl))
                    C = max(0.0, origin.C + dc)
                    hue_best = better(score(L, C, H), hue_best)

            center = hue_best or best
            for dl in grid(options.coarse_step, options.refine_step):
                for dc in grid(options.coarse_step, options.refine_step):
                    L = min(1.0, max(0.0, center.L + dl))
                    C = max(0.0, center.C + dc)
                    hue_best = better(score(L, C, H), hue_best)

            best = better(hue_best, best)

        history.append(best)
        logger.debug("ring %d/%d (dL=%.2f dC=%.2f hue=%.0f): best %s penalty=%.3f "
                     "mandatory=%d dist=%.4f", index, len(rings), ring.dl, ring.dc,
                     ring.hue_span, best.hex, best.penalty, best.mandatory_failures,
                     best.distance)

        if best.audit.meets(options.target_pass_rate):
            break

    return OptimizationResult(
        best=best,
        met_target=best.audit.meets(options.target_pass_rate),
        original=original,
        rings_evaluated=len(history),
        candidates_evaluated=evaluated,
        ring_history=history,
    )
