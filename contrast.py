"""
WCAG 2.x contrast: relative luminance, contrast ratio, grading, and
foreground solving against a background.
"""

from oklch import hex_to_oklch, hex_to_rgb, oklch_to_hex


# =============================================================================
# Constants
# =============================================================================

TARGET_TEXT_CR = 4.5  # AA normal text
TARGET_UI_CR = 3.0  # AA non-text UI (focus rings, borders, icons)
TARGET_AAA_CR = 7.0

WHITE = '#FFFFFF'
BLACK = '#000000'

ON_COLOR_STEP = 0.01  # OKLCH lightness per walk step
ON_COLOR_MAX_STEPS = 32
FG_SEARCH_ITERATIONS = 24


# =============================================================================
# Luminance & Ratio
# =============================================================================

def _channel(v: int) -> float:
    c = v / 255.0
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(hex_str: str) -> float:
    """
    WCAG relative luminance of a hex color (0 = black, 1 = white).

    Raises:
        ValueError: If hex_str is not a 6-digit hex color
    """
    rgb = hex_to_rgb(hex_str)
    if rgb is None:
        raise ValueError(f"Invalid hex color: {hex_str!r}")
    r, g, b = rgb
    return 0.2126 * _channel(r) + 0.7152 * _channel(g) + 0.0722 * _channel(b)


def contrast_ratio(hex1: str, hex2: str) -> float:
    """WCAG contrast ratio (1-21). Symmetric in argument order."""
    l1 = relative_luminance(hex1)
    l2 = relative_luminance(hex2)
    lighter = max(l1, l2)
    darker = min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def text_grade(ratio: float) -> str:
    """Grade a ratio for text use: 'AAA', 'AA', 'AA-large' or 'fail'."""
    if ratio >= TARGET_AAA_CR:
        return "AAA"
    elif ratio >= TARGET_TEXT_CR:
        return "AA"
    elif ratio >= TARGET_UI_CR:
        return "AA-large"
    return "fail"


def ui_grade(ratio: float) -> str:
    """Grade a ratio for non-text UI: 'pass' at 3:1, else 'fail'."""
    return "pass" if ratio >= TARGET_UI_CR else "fail"


# =============================================================================
# Foreground Solving
# =============================================================================

def best_on(bg_hex: str, light: str = WHITE, dark: str = BLACK) -> str:
    """Pick whichever of light/dark contrasts more with bg. Ties go to light."""
    if contrast_ratio(bg_hex, light) >= contrast_ratio(bg_hex, dark):
        return light
    return dark


def solve_on_color(bg_hex: str, target: float = TARGET_TEXT_CR,
                   light: str = WHITE, dark: str = BLACK) -> str:
    """
    Find a foreground for bg_hex that reaches target contrast.

    Starts from the better of light/dark. If that falls short, walks its
    OKLCH lightness away from the background in 0.01 steps and returns the
    first value that reaches target, or the best one seen. With pure
    black/white inks the start is already the extreme.
    """
    on = best_on(bg_hex, light, dark)
    best_ratio = contrast_ratio(bg_hex, on)
    if best_ratio >= target:
        return on

    toward_black = contrast_ratio(bg_hex, dark) > contrast_ratio(bg_hex, light)
    step = -ON_COLOR_STEP if toward_black else ON_COLOR_STEP
    ok = hex_to_oklch(on)
    L = ok.L
    best = on

    for _ in range(ON_COLOR_MAX_STEPS):
        L = min(1.0, max(0.0, L + step))
        trial = oklch_to_hex(L, ok.C, ok.H)
        ratio = contrast_ratio(bg_hex, trial)
        if ratio >= target:
            return trial
        if ratio > best_ratio:
            best, best_ratio = trial, ratio

    return best


def nearest_accessible_fg(bg_hex: str, fg_hex: str, target: float = TARGET_TEXT_CR) -> str:
    """
    Return the lightness variant of fg_hex nearest to it that reaches target
    contrast against bg_hex, keeping chroma and hue.

    Bisects lightness separately above and below the foreground. Falls back
    to black or white when neither direction can reach target.
    """
    if contrast_ratio(bg_hex, fg_hex) >= target:
        return fg_hex

    fg = hex_to_oklch(fg_hex)

    def search(upward: bool):
        lo, hi = (fg.L, 1.0) if upward else (0.0, fg.L)
        found = None
        for _ in range(FG_SEARCH_ITERATIONS):
            mid = (lo + hi) / 2
            trial = oklch_to_hex(mid, fg.C, fg.H)
            if contrast_ratio(bg_hex, trial) >= target:
                found = (abs(mid - fg.L), trial)
                # Tighten toward the original lightness
                if upward:
                    hi = mid
                else:
                    lo = mid
            elif upward:
                lo = mid
            else:
                hi = mid
        return found

    options = []
    if fg.L < 1:
        options.append(search(upward=True))
    if fg.L > 0:
        options.append(search(upward=False))
    options = [o for o in options if o is not None]
    if options:
        return min(options)[1]

    if contrast_ratio(bg_hex, BLACK) >= contrast_ratio(bg_hex, WHITE):
        return BLACK
    return WHITE
