import numpy as np
import pytest

from map_generator import color_maps
from map_generator import config as DEFAULTS


class TestCoverageToColor:

    def test_uncovered_pixel_is_transparent(self):
        assert color_maps.coverage_to_color(0, 8, True) == (0, 0, 0, 0)

    @pytest.mark.parametrize("log_tone", [True, False])
    def test_single_coverage_is_base_color(self, log_tone):
        assert color_maps.coverage_to_color(1, 8, log_tone) == DEFAULTS.COLOR_BASE

    @pytest.mark.parametrize("log_tone", [True, False])
    def test_coverage_past_cap_is_saturated(self, log_tone):
        assert color_maps.coverage_to_color(9, 8, log_tone) == DEFAULTS.COLOR_SATURATED
        assert color_maps.coverage_to_color(500, 8, log_tone) == DEFAULTS.COLOR_SATURATED

    def test_coverage_at_cap_is_near_saturated(self):
        r, g, b, a = color_maps.coverage_to_color(8, 8, False)
        sr, sg, sb, sa = DEFAULTS.COLOR_SATURATED
        assert max(abs(r - sr), abs(g - sg), abs(b - sb)) <= 15
        assert a == sa

    def test_linear_gradient_midpoint(self):
        base = (0, 0, 0, 255)
        saturated = (200, 100, 50, 255)
        # ratio (3 - 1) / 4 = 0.5
        assert color_maps.coverage_to_color(3, 4, False, base, saturated) == (100, 50, 25, 255)

    def test_log_gradient_is_ahead_of_linear(self):
        log_ratio = color_maps.coverage_ratio(2, 8, True)
        linear_ratio = color_maps.coverage_ratio(2, 8, False)
        assert log_ratio == pytest.approx(np.log(2) / np.log(9))
        assert linear_ratio == pytest.approx(1 / 8)
        assert log_ratio > linear_ratio

    def test_brown_cap_is_clamped_to_one(self):
        assert color_maps.coverage_ratio(2, 0, False) == color_maps.coverage_ratio(2, 1, False) == 1.0


class TestBlendColor:

    def test_rounds_half_up(self):
        assert color_maps.blend_color((0, 0, 0, 255), (255, 255, 255, 255), 0.5) == (128, 128, 128, 255)

    def test_fully_transparent_blend_becomes_opaque(self):
        assert color_maps.blend_color((10, 10, 10, 0), (20, 20, 20, 0), 0.5) == (15, 15, 15, 255)

    def test_alpha_is_interpolated(self):
        assert color_maps.blend_color((0, 0, 0, 100), (0, 0, 0, 200), 0.25)[3] == 125


class TestCoverageLut:

    @pytest.mark.parametrize("log_tone", [True, False])
    def test_lut_matches_scalar_mapping(self, log_tone):
        lut = color_maps.create_coverage_lut(20, 6, log_tone)
        assert lut.shape == (21, 4)
        assert lut.dtype == np.uint8
        for c in range(21):
            assert tuple(int(v) for v in lut[c]) == color_maps.coverage_to_color(c, 6, log_tone)

    def test_color_array_lookup(self):
        lut = color_maps.create_coverage_lut(3, 2, False)
        coverage = np.array([[0, 1], [2, 3]])
        colors = color_maps.get_coverage_color_array(coverage, lut)
        assert colors.shape == (2, 2, 4)
        assert tuple(colors[0, 1]) == DEFAULTS.COLOR_BASE


class TestRenderCoverage:

    def test_background_alpha_and_covered_pixels(self):
        coverage = np.array([[0, 1, 0], [0, 2, 9]], dtype=np.int32)
        raster = color_maps.render_coverage(coverage, 8, True, 40)
        assert raster.shape == (2, 3, 4)
        assert tuple(raster[0, 0]) == (0, 0, 0, 40)
        assert tuple(raster[0, 1]) == DEFAULTS.COLOR_BASE
        assert tuple(raster[1, 2]) == DEFAULTS.COLOR_SATURATED

    def test_background_alpha_is_clamped(self):
        raster = color_maps.render_coverage(np.zeros((2, 2), dtype=np.int32), 8, True, 300)
        assert (raster[..., 3] == 255).all()
        raster = color_maps.render_coverage(np.zeros((2, 2), dtype=np.int32), 8, True, -4)
        assert (raster == 0).all()
