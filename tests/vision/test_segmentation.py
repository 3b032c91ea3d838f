"""
Tests for color segmentation
"""

import numpy as np
import pytest

from core.buffer import PixelBuffer
from vision.segmentation import (
    apply_segmentation,
    grow_segments,
    merge_small_segments,
    ordered_adjacency,
    resolve_merges,
    segment_image,
)


def gray_row(values):
    """1-pixel-high buffer of gray pixels"""
    array = np.zeros((1, len(values), 4), dtype=np.uint8)
    array[0, :, :3] = np.asarray(values, dtype=np.uint8)[:, np.newaxis]
    array[..., 3] = 255
    return PixelBuffer.from_array(array)


class TestGrowth:
    """Test the flood-fill growth pass"""

    def test_distance_is_measured_to_seed(self):
        """Test that growth compares with the seed color, not the neighbor"""
        colors = [(v, v, v) for v in (0, 10, 20, 30, 40)]
        segment_map, counts, means = grow_segments(colors, 5, 1, tolerance=20)

        assert segment_map == [0, 0, 1, 1, 2]
        assert counts == [2, 2, 1]
        assert means[2] == (40, 40, 40)

    def test_mean_rounds_half_up(self):
        colors = [(0, 0, 0), (1, 1, 1)]
        _, _, means = grow_segments(colors, 2, 1, tolerance=5)
        assert means == [(1, 1, 1)]

    def test_four_connected(self):
        """Test that diagonal pixels do not connect"""
        colors = [(0, 0, 0), (255, 255, 255), (255, 255, 255), (0, 0, 0)]
        segment_map, counts, _ = grow_segments(colors, 2, 2, tolerance=10)

        assert segment_map == [0, 1, 2, 3]
        assert counts == [1, 1, 1, 1]


class TestAdjacency:
    """Test neighbor discovery order"""

    def test_order(self):
        segment_map = np.array([[0, 1], [2, 3]])
        adjacency = ordered_adjacency(segment_map, [0, 3])

        assert adjacency[0] == [1, 2]
        assert adjacency[3] == [2, 1]

    def test_no_duplicates(self):
        segment_map = np.array([[0, 0, 1], [0, 0, 1]])
        assert ordered_adjacency(segment_map, [1]) == {1: [0]}


class TestMerge:
    """Test the small-segment merge pass"""

    def test_nearest_neighbor_wins(self):
        segment_map = np.array([[0, 0, 1, 2, 2]])
        means = [(0, 0, 0), (100, 100, 100), (110, 110, 110)]

        assert merge_small_segments(segment_map, [2, 1, 2], means, min_size=2) == [0, 2, 2]

    def test_tie_keeps_first_found(self):
        segment_map = np.array([[0, 0, 1, 2, 2]])
        means = [(90, 90, 90), (100, 100, 100), (110, 110, 110)]

        assert merge_small_segments(segment_map, [2, 1, 2], means, min_size=2) == [0, 0, 2]

    def test_nothing_undersized(self):
        segment_map = np.array([[0, 1]])
        assert merge_small_segments(segment_map, [1, 1], [(0, 0, 0)] * 2, min_size=1) == [0, 1]


class TestResolve:
    """Test redirection resolution"""

    def test_chains_are_followed(self):
        assert resolve_merges([1, 2, 2]) == [2, 2, 2]

    def test_identity(self):
        assert resolve_merges([0, 1, 2]) == [0, 1, 2]

    def test_cycle_resolves_to_smallest(self):
        assert resolve_merges([1, 0, 1]) == [0, 0, 0]


class TestSegmentImage:
    """Test the full segmentation"""

    def test_two_blocks(self, two_block_buffer):
        result = segment_image(two_block_buffer, tolerance=20, min_size=1)

        assert result.segment_count == 2
        assert result.region_count == 2
        assert result.pixel_counts == {0: 8, 1: 8}
        assert result.labels.reshape(4, 4)[:, :2].tolist() == [[0, 0]] * 4

    def test_two_blocks_rainbow(self, two_block_buffer):
        result = apply_segmentation(two_block_buffer, tolerance=10, min_size=1)

        assert result.pixel(0, 0) == (230, 46, 46, 255)
        assert result.pixel(3, 3) == (46, 230, 230, 255)

    def test_large_tolerance_gives_one_segment(self, two_block_buffer):
        result = segment_image(two_block_buffer, tolerance=1000, min_size=1)

        assert result.region_count == 1
        assert result.pixel_counts == {0: 16}

    def test_min_size_above_pixel_count(self, two_block_buffer):
        """Test that everything merges when no segment is large enough"""
        result = segment_image(two_block_buffer, tolerance=20, min_size=100)

        assert result.region_count == 1
        assert sum(result.pixel_counts.values()) == 16

    def test_pixel_counts_sum(self, random_buffer):
        result = segment_image(random_buffer, tolerance=60, min_size=5)

        assert sum(result.pixel_counts.values()) == random_buffer.pixel_count
        assert set(np.unique(result.labels).tolist()) == set(result.representatives)

    def test_merged_regions_meet_min_size(self):
        buffer = gray_row([0, 0, 0, 150, 200, 200, 200])
        result = segment_image(buffer, tolerance=10, min_size=2)

        assert result.segment_count == 3
        assert result.region_count == 2
        assert sorted(result.pixel_counts.values()) == [3, 5]

    def test_empty_buffer(self):
        buffer = PixelBuffer.from_bytes(0, 0, b"")

        assert segment_image(buffer, 20, 100).region_count == 0
        assert apply_segmentation(buffer, 20, 100) == buffer


class TestApplySegmentation:
    """Test recoloring"""

    def test_alpha_preserved(self, gradient_buffer):
        result = apply_segmentation(gradient_buffer, tolerance=30, min_size=3)
        assert np.array_equal(result.to_array()[..., 3], gradient_buffer.to_array()[..., 3])

    def test_regions_share_a_color(self, two_block_buffer):
        result = apply_segmentation(two_block_buffer, 20, 1, color_scheme="grayscale")
        rgb = result.to_array()[..., :3]

        assert np.all(rgb[:, :2] == 255)
        assert np.all(rgb[:, 2:] == 145)

    @pytest.mark.parametrize("scheme", ["pastel", "highContrast", "preserveBrightness"])
    def test_schemes_are_reproducible_with_rng(self, random_buffer, scheme):
        first = apply_segmentation(
            random_buffer, 50, 4, scheme, rng=np.random.default_rng(11)
        )
        second = apply_segmentation(
            random_buffer, 50, 4, scheme, rng=np.random.default_rng(11)
        )
        assert first == second
