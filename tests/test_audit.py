"""Tests for audit: accent catalog, full theme table and scoring policy."""
import pytest

from audit import (
    DEFAULT_SURFACES, EXEMPT_USES, MANDATORY_USES, Surfaces, ThemeSurfaces,
    audit_theme, evaluate, make_check, resolve_mode, score_checks,
)
from ladder import PHI, ladder, step_by_key
from roles import compute_role_keys


BASE = '#6D94A2'


class TestScoring:

    def test_empty_has_no_pass_rate(self):
        result = score_checks([])
        assert result.pass_rate is None
        assert result.total == 0
        assert result.penalty == 0.0

    def test_exempt_left_out_of_denominator(self):
        checks = [
            make_check('CTA disabled', 'light', '#FFFFFF', '#FFFFFF', 4.5),
            make_check('Body on bg', 'light', '#000000', '#FFFFFF', 4.5),
        ]
        result = score_checks(checks)
        assert checks[0].exempt
        assert result.total == 1
        assert result.pass_rate == 1.0
        # Exempt checks still add to the penalty
        assert result.penalty == pytest.approx(3.5)

    def test_mandatory_weighs_triple(self):
        checks = [
            make_check('Link on bg', 'light', '#FFFFFF', '#FFFFFF', 4.5),
            make_check('Body on bg', 'light', '#FFFFFF', '#FFFFFF', 4.5),
        ]
        result = score_checks(checks)
        assert result.mandatory_failures == 1
        assert result.penalty == pytest.approx(3 * 3.5 + 3.5)
        assert result.pass_rate == 0.0

    def test_mandatory_failure_blocks_target(self):
        checks = [make_check('Link on bg', 'light', '#FFFFFF', '#FFFFFF', 4.5)]
        checks += [make_check(f'Body {i}', 'light', '#000000', '#FFFFFF', 4.5) for i in range(40)]
        result = score_checks(checks)
        assert result.pass_rate > 0.95
        assert not result.meets(0.95)

    def test_ui_target_uses_ui_grade(self):
        check = make_check('Focus ring vs bg (light)', 'light', '#767676', '#FFFFFF', 3.0)
        assert check.grade == 'pass'
        assert check.mandatory

    def test_policy_sets(self):
        assert 'CTA disabled' in EXEMPT_USES
        assert not EXEMPT_USES & MANDATORY_USES


class TestModes:

    @pytest.mark.parametrize('alias,mode', [
        ('combined', 'combined'), ('light', 'light-only'), ('light-only', 'light-only'),
        ('dark', 'dark-only'), ('dark-only', 'dark-only'),
    ])
    def test_aliases(self, alias, mode):
        assert resolve_mode(alias) == mode

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            resolve_mode('sepia')

    def test_combined_covers_both_themes(self):
        result = evaluate(BASE, PHI, 5)
        assert len(result.checks) == 10
        assert {c.theme for c in result.checks} == {'light', 'dark'}
        assert all(c.mandatory for c in result.checks)

    def test_single_theme(self):
        light = evaluate(BASE, PHI, 5, mode='light-only')
        dark = evaluate(BASE, PHI, 5, mode='dark')
        assert {c.theme for c in light.checks} == {'light'}
        assert {c.theme for c in dark.checks} == {'dark'}
        assert len(light.checks) == len(dark.checks) == 5


class TestAccentCatalog:

    def test_light_links_use_shades(self):
        steps = ladder(BASE, PHI, 5, 'light')
        roles = compute_role_keys(steps)
        result = evaluate(BASE, PHI, 5, mode='light-only')
        by_use = {c.use: c for c in result.checks}
        assert by_use['Link on bg'].fg == step_by_key(steps, roles.shade_1).hex
        assert by_use['Link (strong) on bg'].fg == step_by_key(steps, roles.shade_2).hex
        assert by_use['Link on bg'].bg == DEFAULT_SURFACES.light.bg
        assert by_use['Link on surface'].bg == DEFAULT_SURFACES.light.surface

    def test_dark_links_use_tints(self):
        steps = ladder(BASE, PHI, 5, 'dark')
        roles = compute_role_keys(steps)
        result = evaluate(BASE, PHI, 5, mode='dark-only')
        by_use = {c.use: c for c in result.checks}
        assert by_use['Link on bg'].fg == step_by_key(steps, roles.tint_1).hex
        assert by_use['Link (strong) on surface'].fg == step_by_key(steps, roles.tint_2).hex

    def test_focus_ring_is_default_role_at_ui_target(self):
        result = evaluate(BASE, PHI, 5, mode='light-only')
        ring = [c for c in result.checks if c.use == 'Focus ring vs bg (light)']
        assert len(ring) == 1
        assert ring[0].target == 3.0
        assert ring[0].fg == step_by_key(ladder(BASE, PHI, 5, 'light'), '1').hex

    def test_dark_accent_passes_light_surfaces(self):
        result = evaluate('#202830', PHI, 5, mode='light-only')
        assert result.pass_rate == 1.0
        assert result.mandatory_failures == 0
        assert result.penalty == 0.0
        assert result.meets(0.95)

    def test_light_gray_fails_light_surfaces(self):
        result = evaluate('#CCCCCC', PHI, 5, mode='light-only')
        assert result.mandatory_failures > 0
        assert result.penalty > 0

    def test_custom_surfaces(self):
        black_bg = Surfaces(light=ThemeSurfaces(bg='#000000', surface='#000000'),
                            dark=DEFAULT_SURFACES.dark)
        on_white = evaluate('#202830', PHI, 5, mode='light-only')
        on_black = evaluate('#202830', PHI, 5, surfaces=black_bg, mode='light-only')
        assert on_black.penalty > on_white.penalty


class TestThemeTable:

    def test_full_light_table(self):
        result = audit_theme(BASE, PHI, 5, 'light')
        uses = [c.use for c in result.checks]
        for use in ('Body on bg', 'Body on surface', 'Body on elevated', 'Muted on bg',
                    'Muted on surface', 'Link on bg', 'CTA default', 'CTA hover', 'CTA disabled',
                    'Border vs bg', 'Focus ring vs bg (light)'):
            assert use in uses
        assert sum(1 for u in uses if u.startswith('Tile label on ')) == 5
        assert result.total == len(result.checks) - 1

    def test_tile_labels_pass(self):
        for theme in ('light', 'dark'):
            result = audit_theme(BASE, PHI, 5, theme)
            tiles = [c for c in result.checks if c.use.startswith('Tile label')]
            assert all(c.passed for c in tiles)

    def test_cta_pairs_on_color_with_step(self):
        steps = ladder(BASE, PHI, 5, 'dark')
        result = audit_theme(BASE, PHI, 5, 'dark')
        cta = next(c for c in result.checks if c.use == 'CTA default')
        default = step_by_key(steps, '1')
        assert (cta.fg, cta.bg) == (default.on, default.hex)

    def test_bare_surfaces_skip_neutral_rows(self):
        bare = Surfaces(light=ThemeSurfaces(bg='#FFFFFF', surface='#FFFFFF'),
                        dark=ThemeSurfaces(bg='#000000', surface='#000000'))
        result = audit_theme(BASE, PHI, 5, 'light', bare)
        uses = {c.use for c in result.checks}
        assert not any(u.startswith(('Body', 'Muted', 'Border')) for u in uses)
        assert 'Focus ring vs bg (light)' in uses
