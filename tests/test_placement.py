import itertools

import numpy as np
import pytest

from map_generator import config as DEFAULTS
from map_generator.placement import PlacementGenerator, build_ring_boundaries

from conftest import SequenceRng

ALL_MODES = list(DEFAULTS.SUPPORTED_MODES)


class TestRingBoundaries:

    @pytest.mark.parametrize(
        "rings, start, end",
        list(itertools.product([1, 2, 4, 10, 0, -3], [0.0, 0.1, 0.5, 0.95, 1.0], [0.0, 0.2, 0.8, 1.0])),
    )
    def test_boundaries_are_valid(self, rings, start, end):
        bounds = build_ring_boundaries(rings, start, end)
        assert len(bounds) == max(1, rings) + 1
        assert bounds[0] == 0.0
        assert all(0.0 <= b <= 1.0 for b in bounds)
        assert all(a <= b for a, b in zip(bounds, bounds[1:]))
        assert bounds[-1] > 0.0

    def test_single_ring_spans_to_end(self):
        assert build_ring_boundaries(1, 0.1, 0.8) == [0.0, 0.8]

    def test_interior_boundaries_are_linear(self):
        assert build_ring_boundaries(3, 0.2, 0.8) == pytest.approx([0.0, 0.2, 0.5, 0.8])

    def test_collapsed_range_at_the_edge_moves_start_down(self):
        assert build_ring_boundaries(2, 1.0, 1.0) == pytest.approx([0.0, 0.9, 1.0])

    def test_inverted_range_moves_end_up(self):
        assert build_ring_boundaries(2, 0.5, 0.2) == pytest.approx([0.0, 0.5, 0.6])


class TestPlacementBounds:

    @pytest.mark.parametrize("mode", ALL_MODES + ["unknown"])
    def test_tiles_always_land_inside_the_canvas(self, mode):
        rng = np.random.default_rng(7)
        gen = PlacementGenerator(37, 23, mode, rng, islands=5)
        for tw, th in [(1, 1), (2, 1), (1, 2), (5, 5), (36, 1), (1, 22)]:
            for _ in range(50):
                x, y = gen.place(tw, th)
                assert 0 <= x <= 37 - tw
                assert 0 <= y <= 23 - th
                gen.record_placement(x, y, tw, th)

    @pytest.mark.parametrize("mode", ALL_MODES)
    def test_tile_that_does_not_fit_goes_to_origin(self, mode):
        gen = PlacementGenerator(10, 10, mode, np.random.default_rng(1))
        assert gen.place(10, 2) == (0, 0)
        assert gen.place(2, 12) == (0, 0)

    def test_random_placement_with_zero_span(self):
        gen = PlacementGenerator(10, 10, DEFAULTS.MODE_CENTROID, SequenceRng(integers=[5]))
        assert gen.random_placement(10, 3) == (0, 5)


class TestRingStrategy:

    def test_innermost_ring_with_zero_radius_lands_on_center(self):
        rng = SequenceRng(randoms=[0.1, 0.0, 0.0])
        gen = PlacementGenerator(10, 10, DEFAULTS.MODE_RING, rng)
        assert gen.place(2, 2) == (4, 4)

    def test_draw_above_ladder_falls_back_to_uniform(self):
        rng = SequenceRng(randoms=[0.9], integers=[3, 7])
        gen = PlacementGenerator(10, 10, DEFAULTS.MODE_RING, rng)
        assert gen.place(2, 2) == (3, 7)

    def test_ring_mode_concentrates_tiles_near_center(self):
        gen = PlacementGenerator(200, 200, DEFAULTS.MODE_RING, np.random.default_rng(3))
        distances = []
        for _ in range(2000):
            x, y = gen.place(1, 1)
            distances.append(np.hypot(x - 100, y - 100))
        # 40% of tiles fall in the innermost ring (radius 0.1 * 100 = 10)
        inner_share = np.mean(np.array(distances) <= 11)
        assert inner_share > 0.3

    def test_degenerate_ring_is_redrawn(self):
        # ring_start=0 collapses the innermost ring to [0, 0]
        rng = SequenceRng(randoms=[0.1, 0.5, 0.0, 0.0])
        gen = PlacementGenerator(20, 20, DEFAULTS.MODE_RING, rng, rings=3, ring_start=0.0)
        assert gen.ring_boundaries == pytest.approx([0.0, 0.0, 0.4, 0.8])
        assert gen.place(2, 2) == (9, 9)

    def test_repeated_degenerate_rings_fall_back_to_uniform(self):
        rng = SequenceRng(randoms=[0.1] * DEFAULTS.RING_MAX_ATTEMPTS + [0.5], integers=[3, 7])
        gen = PlacementGenerator(20, 20, DEFAULTS.MODE_RING, rng, rings=3, ring_start=0.0)
        assert gen.place(2, 2) == (3, 7)
        assert rng._randoms == [0.5]


class TestCentroidStrategy:

    def test_first_tile_goes_to_center(self):
        gen = PlacementGenerator(10, 10, DEFAULTS.MODE_CENTROID, np.random.default_rng(0))
        assert gen.center_of_mass() is None
        assert gen.place(2, 2) == (4, 4)

    def test_mirror_candidate_rebalances(self):
        gen = PlacementGenerator(10, 10, DEFAULTS.MODE_CENTROID, np.random.default_rng(0))
        gen.record_placement(0, 0, 2, 2)
        assert gen.center_of_mass() == (1.0, 1.0)
        assert gen.place(2, 2) == (8, 8)

    def test_distance_after_placement_does_not_mutate(self):
        gen = PlacementGenerator(10, 10, DEFAULTS.MODE_CENTROID, np.random.default_rng(0))
        gen.record_placement(0, 0, 2, 2)
        before = (gen.total_area, gen.sum_x, gen.sum_y)
        assert gen.distance_after_placement(8, 8, 2, 2, 5.0, 5.0) == 0.0
        assert (gen.total_area, gen.sum_x, gen.sum_y) == before

    def test_zero_area_is_not_recorded(self):
        gen = PlacementGenerator(10, 10, DEFAULTS.MODE_CENTROID, np.random.default_rng(0))
        gen.record_placement(3, 3, 0, 2)
        assert gen.center_of_mass() is None

    def test_centroid_stays_near_center(self):
        gen = PlacementGenerator(100, 60, DEFAULTS.MODE_CENTROID, np.random.default_rng(11))
        for _ in range(300):
            x, y = gen.place(3, 2)
            gen.record_placement(x, y, 3, 2)
        cx, cy = gen.center_of_mass()
        assert abs(cx - 50) < 1.0
        assert abs(cy - 30) < 1.0

    def test_search_stops_at_first_good_candidate(self):
        # the mirror of (0.5, 0.5) is clamped to (16, 16) and overshoots
        rng = SequenceRng(integers=[9, 9, 1, 1])
        gen = PlacementGenerator(20, 20, DEFAULTS.MODE_CENTROID, rng)
        gen.record_placement(0, 0, 1, 1)
        assert gen.place(4, 4) == (9, 9)
        assert rng._integers == [1, 1]

    def test_unknown_mode_uses_centroid_balancing(self):
        gen = PlacementGenerator(10, 10, "spiral", np.random.default_rng(0))
        assert gen.place(2, 2) == (4, 4)


class TestIslandStrategy:

    def test_centers_are_generated_inside_margin(self):
        gen = PlacementGenerator(100, 80, DEFAULTS.MODE_ISLANDS, np.random.default_rng(5), islands=12)
        assert len(gen.island_centers) == 12
        for x, y in gen.island_centers:
            assert 8 <= x < 92
            assert 8 <= y < 72

    def test_zero_islands_means_three(self):
        gen = PlacementGenerator(100, 100, DEFAULTS.MODE_ISLANDS, np.random.default_rng(5), islands=0)
        assert len(gen.island_centers) == 3

    def test_tile_lands_around_chosen_center(self):
        rng = SequenceRng(integers=[30, 40, 0], randoms=[0.0, 0.0])
        gen = PlacementGenerator(100, 100, DEFAULTS.MODE_ISLANDS, rng, islands=1)
        assert gen.island_centers == [(40, 50)]
        assert gen.place(2, 2) == (39, 49)

    def test_no_centers_falls_back_to_uniform(self):
        rng = SequenceRng(integers=[0, 0, 6, 9])
        gen = PlacementGenerator(20, 20, DEFAULTS.MODE_ISLANDS, rng, islands=1)
        gen.island_centers = []
        assert gen.place(2, 2) == (6, 9)


class TestContinentStrategy:

    def test_centers(self):
        gen = PlacementGenerator(100, 60, DEFAULTS.MODE_CONTINENTS, np.random.default_rng(0))
        assert gen.continent_centers == [(25, 30), (75, 30)]

    def test_sample_at_center(self):
        rng = SequenceRng(integers=[1], normals=[0.0, 0.0])
        gen = PlacementGenerator(100, 100, DEFAULTS.MODE_CONTINENTS, rng)
        assert gen.place(2, 2) == (75, 50)

    def test_out_of_bounds_samples_fall_back(self):
        rng = SequenceRng(integers=[0, 2, 3], normals=[10.0] * 12)
        gen = PlacementGenerator(100, 100, DEFAULTS.MODE_CONTINENTS, rng)
        assert gen.place(2, 2) == (2, 3)

    def test_two_lobes(self):
        gen = PlacementGenerator(200, 100, DEFAULTS.MODE_CONTINENTS, np.random.default_rng(9))
        xs = np.array([gen.place(1, 1)[0] for _ in range(1000)])
        assert np.mean(xs < 100) == pytest.approx(0.5, abs=0.1)
        # the middle strip between the lobes stays sparse
        assert np.mean(np.abs(xs - 100) < 5) < 0.05
