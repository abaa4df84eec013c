"""
Accessibility audit of an accent ladder against theme surfaces.

Two catalogs are provided:
  - accent checks (evaluate): link text and focus ring per theme, the checks
    that moving the base accent can influence. This is what the optimizer
    scores.
  - full theme table (audit_theme): the accent checks plus neutral text,
    CTA states, border and per-step tile labels.

Both are scored by the same policy: exempt uses are left out of the pass
rate, mandatory uses weigh 3x in the penalty and are counted as mandatory
failures whatever the overall pass rate.
"""

from dataclasses import dataclass, field
from typing import Optional

from contrast import TARGET_TEXT_CR, TARGET_UI_CR, contrast_ratio, text_grade, ui_grade
from ladder import ladder, step_by_key
from roles import compute_role_keys


# =============================================================================
# Constants
# =============================================================================

# WCAG exempts disabled/inactive controls
EXEMPT_USES = frozenset({
    'CTA disabled',
})

# Checks that must never fail, even when the pass rate is high
MANDATORY_USES = frozenset({
    'Link on bg',
    'Link on surface',
    'Link (strong) on bg',
    'Link (strong) on surface',
    'Focus ring vs bg (light)',
    'Focus ring vs bg (dark)',
})

MANDATORY_WEIGHT = 3.0
DEFAULT_WEIGHT = 1.0

MODE_ALIASES = {
    'combined': 'combined',
    'light-only': 'light-only',
    'light': 'light-only',
    'dark-only': 'dark-only',
    'dark': 'dark-only',
}


@dataclass(frozen=True)
class ThemeSurfaces:
    """Neutral tokens of one theme."""
    bg: str
    surface: str
    elevated: Optional[str] = None
    border: Optional[str] = None
    text: Optional[str] = None
    muted: Optional[str] = None


@dataclass(frozen=True)
class Surfaces:
    light: ThemeSurfaces
    dark: ThemeSurfaces

    def for_theme(self, theme: str) -> ThemeSurfaces:
        return self.light if theme == 'light' else self.dark


DEFAULT_SURFACES = Surfaces(
    light=ThemeSurfaces(bg='#F7F9FC', surface='#FFFFFF', elevated='#F3F6FA',
                        border='#D6DEE6', text='#0A0B0D', muted='#5B6672'),
    dark=ThemeSurfaces(bg='#0C1116', surface='#0F141A', elevated='#121920',
                       border='#22303C', text='#E7EBF0', muted='#9AA7B0'),
)


@dataclass(frozen=True)
class Check:
    """One foreground/background pair scored against a target ratio."""
    use: str
    theme: str
    fg: str
    bg: str
    target: float
    ratio: float
    passed: bool
    mandatory: bool
    exempt: bool
    grade: str


@dataclass(frozen=True)
class AuditResult:
    checks: tuple = field(default_factory=tuple)
    pass_count: int = 0
    total: int = 0  # Non-exempt checks
    pass_rate: Optional[float] = None  # None when total is 0
    penalty: float = 0.0
    mandatory_failures: int = 0

    @property
    def failures(self) -> list:
        return [c for c in self.checks if not c.passed]

    def meets(self, target_pass_rate: float) -> bool:
        """Pass rate reaches target and no mandatory check fails."""
        return (self.pass_rate or 0.0) >= target_pass_rate and self.mandatory_failures == 0


# =============================================================================
# Scoring
# =============================================================================

def resolve_mode(mode: str) -> str:
    """
    Normalize an audit mode.

    Raises:
        ValueError: If mode is unknown
    """
    try:
        return MODE_ALIASES[mode]
    except KeyError:
        raise ValueError(f"Unknown audit mode {mode!r}; expected combined, light-only or dark-only")


def make_check(use: str, theme: str, fg: str, bg: str, target: float) -> Check:
    ratio = contrast_ratio(fg, bg)
    grade = ui_grade(ratio) if target <= TARGET_UI_CR else text_grade(ratio)
    return Check(
        use=use,
        theme=theme,
        fg=fg,
        bg=bg,
        target=target,
        ratio=ratio,
        passed=ratio >= target,
        mandatory=use in MANDATORY_USES,
        exempt=use in EXEMPT_USES,
        grade=grade,
    )


def score_checks(checks: list) -> AuditResult:
    """Apply the pass-rate/penalty policy to a list of checks."""
    considered = [c for c in checks if not c.exempt]
    total = len(considered)
    pass_count = sum(1 for c in considered if c.passed)
    pass_rate = pass_count / total if total > 0 else None

    mandatory_failures = sum(1 for c in checks if c.mandatory and not c.passed)
    penalty = sum(
        (MANDATORY_WEIGHT if c.mandatory else DEFAULT_WEIGHT) * max(0.0, c.target - c.ratio)
        for c in checks
    )

    return AuditResult(
        checks=tuple(checks),
        pass_count=pass_count,
        total=total,
        pass_rate=pass_rate,
        penalty=penalty,
        mandatory_failures=mandatory_failures,
    )


# =============================================================================
# Accent Catalog
# =============================================================================

def _link_roles(theme: str, roles) -> tuple:
    """(regular, strong) link keys. Light text prefers shades, dark text tints."""
    if theme == 'light':
        return roles.shade_1, roles.shade_2
    return roles.tint_1, roles.tint_2


def accent_checks(base_hex: str, spacing_scale: float, level_count: int,
                  surfaces: Surfaces = DEFAULT_SURFACES, mode: str = 'combined') -> list:
    """Build the link/focus checks the base accent can influence."""
    mode = resolve_mode(mode)
    themes = []
    if mode != 'dark-only':
        themes.append('light')
    if mode != 'light-only':
        themes.append('dark')

    checks = []
    for theme in themes:
        steps = ladder(base_hex, spacing_scale, level_count, theme)
        roles = compute_role_keys(steps)
        tokens = surfaces.for_theme(theme)

        link_key, strong_key = _link_roles(theme, roles)
        link = step_by_key(steps, link_key).hex
        strong = step_by_key(steps, strong_key).hex
        ring = step_by_key(steps, roles.default).hex

        checks.extend([
            make_check('Link on bg', theme, link, tokens.bg, TARGET_TEXT_CR),
            make_check('Link on surface', theme, link, tokens.surface, TARGET_TEXT_CR),
            make_check('Link (strong) on bg', theme, strong, tokens.bg, TARGET_TEXT_CR),
            make_check('Link (strong) on surface', theme, strong, tokens.surface, TARGET_TEXT_CR),
            make_check(f'Focus ring vs bg ({theme})', theme, ring, tokens.bg, TARGET_UI_CR),
        ])

    return checks


def evaluate(base_hex: str, spacing_scale: float, level_count: int,
             surfaces: Surfaces = DEFAULT_SURFACES, mode: str = 'combined') -> AuditResult:
    """
    Audit the accent checks for a base color.

    Args:
        base_hex: Base accent color
        spacing_scale: Ladder step spacing
        level_count: Ladder length (3-10)
        surfaces: Theme surfaces to test against
        mode: 'combined', 'light-only' or 'dark-only'

    Returns:
        AuditResult with policy-weighted pass rate and penalty.
    """
    return score_checks(accent_checks(base_hex, spacing_scale, level_count, surfaces, mode))


# =============================================================================
# Full Theme Table
# =============================================================================

def audit_theme(base_hex: str, spacing_scale: float, level_count: int, theme: str,
                surfaces: Surfaces = DEFAULT_SURFACES) -> AuditResult:
    """
    Audit every pairing a theme renders: neutral text, accent links, CTA
    states, non-text UI and the label on each ladder tile.

    Neutral rows are skipped when the theme's surfaces omit the token.
    """
    steps = ladder(base_hex, spacing_scale, level_count, theme)
    roles = compute_role_keys(steps)
    tokens = surfaces.for_theme(theme)
    checks = []

    if tokens.text:
        for use, bg in (('Body on bg', tokens.bg), ('Body on surface', tokens.surface),
                        ('Body on elevated', tokens.elevated)):
            if bg:
                checks.append(make_check(use, theme, tokens.text, bg, TARGET_TEXT_CR))
    if tokens.muted:
        for use, bg in (('Muted on bg', tokens.bg), ('Muted on surface', tokens.surface)):
            checks.append(make_check(use, theme, tokens.muted, bg, TARGET_TEXT_CR))

    checks.extend(c for c in accent_checks(base_hex, spacing_scale, level_count, surfaces,
                                           f'{theme}-only')
                  if not c.use.startswith('Focus ring'))

    for use, key in (('CTA default', roles.default), ('CTA hover', roles.hover),
                     ('CTA disabled', roles.disabled)):
        step = step_by_key(steps, key)
        checks.append(make_check(use, theme, step.on, step.hex, TARGET_TEXT_CR))

    if tokens.border:
        checks.append(make_check('Border vs bg', theme, tokens.border, tokens.bg, TARGET_UI_CR))
    ring = step_by_key(steps, roles.default).hex
    checks.append(make_check(f'Focus ring vs bg ({theme})', theme, ring, tokens.bg, TARGET_UI_CR))

    for step in steps:
        checks.append(make_check(f'Tile label on {step.label}', theme, step.on, step.hex,
                                 TARGET_TEXT_CR))

    return score_checks(checks)
