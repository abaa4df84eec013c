"""Tests for optimize: search geometry and nearest passing base."""
import pytest

from ladder import PHI
from oklch import delta_hue, hex_to_oklch
from optimize import (
    OptimizerOptions, adjust_lightness, build_rings, chroma_floor,
    find_nearest_passing_base, grid, hue_fan,
)


# Light-only keeps the search to one ladder per candidate
LIGHT_ONLY = dict(mode='light-only')


@pytest.fixture(scope='module')
def gray_result():
    return find_nearest_passing_base('#CCCCCC', PHI, 5, **LIGHT_ONLY)


class TestGeometry:

    def test_grid(self):
        values = grid(0.06, 0.02)
        assert len(values) == 7
        assert values[0] == pytest.approx(-0.06)
        assert values[-1] == pytest.approx(0.06)

    def test_grid_zero_span(self):
        assert list(grid(0.0, 0.02)) == [0.0]

    def test_hue_fan_wraps(self):
        assert hue_fan(2, 4, 2) == pytest.approx([358, 0, 2, 4, 6])

    def test_hue_fan_single(self):
        assert hue_fan(370, 0, 2) == [10]

    def test_l_first_rings(self):
        rings = build_rings(OptimizerOptions())
        assert len(rings) == 6
        assert rings[0].dl == 0.06 and rings[0].dc == 0.0
        assert rings[1].dl == 0.10 and rings[1].dc == 0.0
        assert rings[-1].dl == 0.45 and rings[-1].dc == 0.30
        assert all(r.hue_span == 0.0 for r in rings)

    def test_lc_rings(self):
        rings = build_rings(OptimizerOptions(strategy='LC'))
        assert len(rings) == 5
        assert all(r.dc > 0 for r in rings)

    def test_hue_drift_capped(self):
        rings = build_rings(OptimizerOptions(allow_hue_drift=True, hue_span_deg=6))
        assert max(r.hue_span for r in rings) == 6
        assert rings[0].hue_span == 0.0

    def test_budget_caps(self):
        rings = build_rings(OptimizerOptions(max_dl=0.05, max_dc=0.02))
        assert all(r.dl <= 0.05 and r.dc <= 0.02 for r in rings)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            build_rings(OptimizerOptions(strategy='random'))

    def test_chroma_floor(self):
        options = OptimizerOptions()
        assert chroma_floor(0.2, options) == pytest.approx(0.14)
        assert chroma_floor(0.02, options) == 0.06

    def test_adjust_lightness(self):
        assert hex_to_oklch(adjust_lightness('#808080', 0.1)).L > hex_to_oklch('#808080').L
        assert adjust_lightness('#FFFFFF', 0.5) == '#FFFFFF'


class TestFindNearestPassingBase:

    def test_passing_input_returned_unchanged(self):
        result = find_nearest_passing_base('202830', PHI, 5, **LIGHT_ONLY)
        assert result.hex == '#202830'
        assert result.distance == 0.0
        assert result.met_target
        assert result.rings_evaluated == 0
        assert result.candidates_evaluated == 0
        assert result.best is result.original

    def test_light_gray_moves_darker(self, gray_result):
        assert gray_result.best.L < gray_result.original.L
        assert gray_result.distance > 0
        assert gray_result.best.penalty < gray_result.original.penalty

    def test_never_worse_than_input(self, gray_result):
        assert gray_result.best.rank() <= gray_result.original.rank()
        ranks = [c.rank() for c in gray_result.ring_history]
        assert ranks == sorted(ranks, reverse=True)

    def test_chroma_floor_respected(self, gray_result):
        assert gray_result.best.C >= 0.06 - 1e-9

    def test_every_candidate_floored_by_ratio(self, monkeypatch):
        import optimize

        seen = []
        real = optimize.oklch_to_hex

        def recording(L, C, H):
            seen.append(C)
            return real(L, C, H)

        monkeypatch.setattr(optimize, 'oklch_to_hex', recording)

        # Saturated yellow fails on light surfaces; 0.7*C0 sits above 0.06
        base = '#F2C14E'
        options = OptimizerOptions(max_dl=0.2, max_dc=0.3, mode='light-only')
        floor = chroma_floor(hex_to_oklch(base).C, options)
        assert floor > options.min_chroma_abs

        result = find_nearest_passing_base(base, PHI, 5, options=options)

        assert seen
        assert len(seen) == result.candidates_evaluated
        assert min(seen) >= floor - 1e-9

    def test_met_target_matches_audit(self, gray_result):
        best = gray_result.best
        assert gray_result.met_target == best.audit.meets(0.95)
        if not gray_result.met_target:
            assert gray_result.rings_evaluated == 6
        assert gray_result.candidates_evaluated > 0

    def test_stops_after_passing_ring(self, gray_result):
        if gray_result.met_target:
            history = gray_result.ring_history
            assert history[-1].audit.meets(0.95)
            assert not any(c.audit.meets(0.95) for c in history[:-1])

    def test_hue_locked_by_default(self, gray_result):
        origin = hex_to_oklch('#CCCCCC')
        assert delta_hue(gray_result.best.H, origin.H) < 1e-6

    def test_lc_strategy(self):
        result = find_nearest_passing_base('#CCCCCC', PHI, 5, strategy='LC',
                                           max_dl=0.2, max_dc=0.1, **LIGHT_ONLY)
        assert result.rings_evaluated <= 5
        assert result.best.penalty < result.original.penalty

    def test_max_hue_drift_discards(self):
        options = OptimizerOptions(allow_hue_drift=True, max_hue_drift_deg=2.0,
                                   max_dl=0.2, max_dc=0.1, mode='light-only')
        result = find_nearest_passing_base('#6D94A2', 1.0, 5, options=options)
        origin = hex_to_oklch('#6D94A2')
        for candidate in result.ring_history:
            assert delta_hue(candidate.H, origin.H) <= 2.0 + 1e-6

    def test_overrides_do_not_mutate_options(self):
        options = OptimizerOptions()
        find_nearest_passing_base('#202830', PHI, 5, options=options, mode='light-only')
        assert options.mode == 'combined'

    def test_bad_mode_raises(self):
        with pytest.raises(ValueError):
            find_nearest_passing_base('#6D94A2', PHI, 5, mode='sepia')
