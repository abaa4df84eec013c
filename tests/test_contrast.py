"""Tests for contrast: WCAG ratios and foreground solving."""
import pytest

from contrast import (
    BLACK, WHITE, best_on, contrast_ratio, nearest_accessible_fg,
    relative_luminance, solve_on_color, text_grade, ui_grade,
)


class TestRatio:

    def test_black_on_white_is_21(self):
        assert contrast_ratio('#000000', '#FFFFFF') == pytest.approx(21.0)

    def test_same_color_is_1(self):
        assert contrast_ratio('#6D94A2', '#6D94A2') == pytest.approx(1.0)

    def test_symmetric(self):
        assert contrast_ratio('#6D94A2', '#F7F9FC') == contrast_ratio('#F7F9FC', '#6D94A2')

    def test_known_gray(self):
        # #777777 famously sits just under AA on white
        assert contrast_ratio('#777777', '#FFFFFF') == pytest.approx(4.48, abs=0.01)

    def test_luminance_bounds(self):
        assert relative_luminance('#000000') == 0.0
        assert relative_luminance('#FFFFFF') == pytest.approx(1.0)

    def test_invalid_hex_raises(self):
        with pytest.raises(ValueError):
            relative_luminance('#12345')
        with pytest.raises(ValueError):
            contrast_ratio('nope', '#FFFFFF')


class TestGrades:

    @pytest.mark.parametrize('ratio,grade', [
        (21.0, 'AAA'), (7.0, 'AAA'), (6.99, 'AA'), (4.5, 'AA'),
        (4.49, 'AA-large'), (3.0, 'AA-large'), (2.99, 'fail'),
    ])
    def test_text_grade(self, ratio, grade):
        assert text_grade(ratio) == grade

    def test_ui_grade(self):
        assert ui_grade(3.0) == 'pass'
        assert ui_grade(2.99) == 'fail'


class TestOnColor:

    def test_best_on_picks_extreme(self):
        assert best_on('#0C1116') == WHITE
        assert best_on('#F7F9FC') == BLACK

    @pytest.mark.parametrize('bg', ['#6D94A2', '#777777', '#808080', '#E4572E', '#1B998B', '#FFFF00'])
    def test_pure_inks_always_reach_aa(self, bg):
        on = solve_on_color(bg)
        assert on in (WHITE, BLACK)
        assert contrast_ratio(bg, on) >= 4.5

    def test_walks_lightness_when_inks_fall_short(self):
        # Neither the near-black ink nor white reaches 4.5 on mid gray
        bg = '#787878'
        dark_ink = '#0A0B0D'
        assert contrast_ratio(bg, dark_ink) < 4.5
        assert contrast_ratio(bg, WHITE) < 4.5

        on = solve_on_color(bg, light=WHITE, dark=dark_ink)
        assert on != dark_ink
        assert contrast_ratio(bg, on) >= 4.5

    def test_unreachable_target_returns_best_seen(self):
        on = solve_on_color('#787878', target=30.0)
        assert contrast_ratio('#787878', on) == pytest.approx(
            max(contrast_ratio('#787878', WHITE), contrast_ratio('#787878', BLACK)))


class TestNearestAccessibleFg:

    def test_passing_fg_unchanged(self):
        assert nearest_accessible_fg('#FFFFFF', '#000000') == '#000000'

    def test_failing_fg_moves_until_it_passes(self):
        fixed = nearest_accessible_fg('#FFFFFF', '#6D94A2')
        assert fixed != '#6D94A2'
        assert contrast_ratio('#FFFFFF', fixed) >= 4.5

    def test_dark_background_lightens(self):
        from oklch import hex_to_oklch
        fixed = nearest_accessible_fg('#0C1116', '#2F4A6B')
        assert contrast_ratio('#0C1116', fixed) >= 4.5
        assert hex_to_oklch(fixed).L > hex_to_oklch('#2F4A6B').L
