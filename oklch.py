"""
sRGB <-> OKLCH conversion with chroma-reduction gamut mapping.

Hex strings are the interchange format: parsing is lenient (optional '#',
any case, surrounding whitespace) and formatting is canonical ('#RRGGBB',
uppercase).
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

import numpy as np


# =============================================================================
# Constants
# =============================================================================

HEX_RE = re.compile(r'^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$', re.IGNORECASE)

GAMUT_ITERATIONS = 22  # Chroma bisection steps, ~C/4M precision
GAMUT_EPSILON = 1e-9  # Float slack on the [0, 1] linear channel bounds

# Linear sRGB -> LMS cone response
RGB_TO_LMS = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
])

# Cube-rooted LMS -> OKLab
LMS_TO_OKLAB = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
])

# OKLab -> cube-rooted LMS
OKLAB_TO_LMS = np.array([
    [1.0, 0.3963377774, 0.2158037573],
    [1.0, -0.1055613458, -0.0638541728],
    [1.0, -0.0894841775, -1.2914855480],
])

# LMS -> linear sRGB
LMS_TO_RGB = np.array([
    [4.0767416621, -3.3077115913, 0.2309699292],
    [-1.2684380046, 2.6097574011, -0.3413193965],
    [-0.0041960863, -0.7034186147, 1.7076147010],
])


@dataclass(frozen=True)
class OKLCH:
    """A color in OKLCH: lightness 0-1, chroma >= 0, hue in degrees."""
    L: float
    C: float
    H: float


# =============================================================================
# Hex Utilities
# =============================================================================

def hex_to_rgb(hex_str: str) -> Optional[tuple]:
    """Parse a 6-digit hex string into an (r, g, b) tuple of 0-255 ints."""
    if not isinstance(hex_str, str):
        return None
    m = HEX_RE.match(hex_str.strip())
    if not m:
        return None
    return tuple(int(part, 16) for part in m.groups())


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format 0-255 channels as canonical '#RRGGBB'."""
    r, g, b = (max(0, min(255, int(v))) for v in (r, g, b))
    return f"#{r:02X}{g:02X}{b:02X}"


def is_valid_hex(hex_str: str) -> bool:
    return hex_to_rgb(hex_str) is not None


def normalize_hex(hex_str: str) -> Optional[str]:
    """Canonicalize a hex string, or None if it is malformed."""
    rgb = hex_to_rgb(hex_str)
    if rgb is None:
        return None
    return rgb_to_hex(*rgb)


# =============================================================================
# Hue Utilities
# =============================================================================

def wrap_hue(hue: float) -> float:
    """Wrap a hue angle into [0, 360)."""
    return hue % 360.0


def delta_hue(hue1: float, hue2: float) -> float:
    """Shortest circular distance between two hues (0-180)."""
    diff = abs(wrap_hue(hue1) - wrap_hue(hue2))
    return min(diff, 360.0 - diff)


# =============================================================================
# Color Conversion
# =============================================================================

def srgb_to_linear(c: np.ndarray) -> np.ndarray:
    """Decode sRGB gamma (0-1 in, 0-1 out)."""
    return np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)


def linear_to_srgb(c: np.ndarray) -> np.ndarray:
    """Encode sRGB gamma (0-1 in, 0-1 out)."""
    c = np.clip(c, 0.0, None)
    return np.where(c <= 0.0031308, 12.92 * c, 1.055 * np.power(c, 1 / 2.4) - 0.055)


def rgb_to_oklab(rgb: np.ndarray) -> np.ndarray:
    """Convert an (n, 3) RGB array (0-255) to OKLab."""
    rgb = np.atleast_2d(np.asarray(rgb, dtype=np.float64))
    linear = srgb_to_linear(rgb / 255.0)
    lms = linear @ RGB_TO_LMS.T
    return np.cbrt(lms) @ LMS_TO_OKLAB.T


def oklab_to_linear_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert an (n, 3) OKLab array to linear sRGB (unclipped)."""
    lab = np.atleast_2d(np.asarray(lab, dtype=np.float64))
    lms = (lab @ OKLAB_TO_LMS.T) ** 3
    return lms @ LMS_TO_RGB.T


def _lch_to_linear_rgb(L: np.ndarray, C: np.ndarray, h_rad: np.ndarray) -> np.ndarray:
    lab = np.column_stack([L, C * np.cos(h_rad), C * np.sin(h_rad)])
    return oklab_to_linear_rgb(lab)


def _in_gamut(linear: np.ndarray) -> np.ndarray:
    return np.all((linear >= -GAMUT_EPSILON) & (linear <= 1.0 + GAMUT_EPSILON), axis=1)


def oklch_to_rgb(lch: np.ndarray) -> np.ndarray:
    """
    Convert an (n, 3) OKLCH array to RGB (0-255 ints), gamut-mapping each row.

    Rows whose linear RGB leaves [0, 1] have their chroma bisected toward 0
    with L and H held fixed. The achromatic color is always representable,
    so each row starts from that fallback and keeps the last in-gamut
    midpoint.
    """
    lch = np.atleast_2d(np.asarray(lch, dtype=np.float64))
    L = np.clip(lch[:, 0], 0.0, 1.0)
    C = np.clip(lch[:, 1], 0.0, None)
    h_rad = np.radians(np.mod(lch[:, 2], 360.0))

    linear = _lch_to_linear_rgb(L, C, h_rad)
    out = ~_in_gamut(linear)

    if out.any():
        Lo, ho = L[out], h_rad[out]
        lo = np.zeros_like(Lo)
        hi = C[out]
        best = _lch_to_linear_rgb(Lo, lo, ho)

        for _ in range(GAMUT_ITERATIONS):
            mid = (lo + hi) / 2
            trial = _lch_to_linear_rgb(Lo, mid, ho)
            ok = _in_gamut(trial)
            lo = np.where(ok, mid, lo)
            hi = np.where(ok, hi, mid)
            best[ok] = trial[ok]

        linear[out] = best

    encoded = np.clip(linear_to_srgb(linear), 0.0, 1.0)
    # Round half-up, not half-to-even
    return np.floor(encoded * 255 + 0.5).astype(np.int64)


def oklch_to_hex_array(lch: np.ndarray) -> list[str]:
    """Convert an (n, 3) OKLCH array to a list of hex strings."""
    return [rgb_to_hex(*row) for row in oklch_to_rgb(lch)]


def hex_to_oklch(hex_str: str) -> Optional[OKLCH]:
    """Convert a hex string to OKLCH, or None if the hex is malformed."""
    rgb = hex_to_rgb(hex_str)
    if rgb is None:
        return None

    L, a, b = rgb_to_oklab(np.array(rgb))[0]
    C = math.sqrt(a * a + b * b)
    H = math.degrees(math.atan2(b, a)) % 360.0
    return OKLCH(L=float(L), C=float(C), H=float(H))


def oklch_to_hex(L: float, C: float, H: float) -> str:
    """Convert OKLCH to a gamut-mapped hex string. Always succeeds."""
    return oklch_to_hex_array(np.array([[L, C, H]]))[0]


def oklch_css(hex_str: str, decimals: int = 2) -> str:
    """Format a hex color as a CSS oklch() string."""
    ok = hex_to_oklch(hex_str)
    if ok is None:
        return hex_str
    hue_decimals = max(0, decimals - 1)
    return f"oklch({ok.L:.{decimals}f} {ok.C:.{decimals}f} {ok.H:.{hue_decimals}f})"
