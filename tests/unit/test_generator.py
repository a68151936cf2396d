"""Unit tests for distance field generation and MSDF error correction."""

import numpy as np
import pytest

from glyphfield.config import ColoringConfig, FieldMode, GenerationConfig
from glyphfield.core import (
    FieldGenerator,
    auto_frame,
    edge_coloring_simple,
    generate_msdf,
    generate_msdf_legacy,
    generate_pseudo_sdf,
    generate_pseudo_sdf_legacy,
    generate_sdf,
    generate_sdf_legacy,
    msdf_error_correction,
    pixel_clash,
    resolve_overlap,
)
from glyphfield.domain import Bitmap, Contour, LinearSegment, Shape
from glyphfield.geometry import Vector2

SINGLE_CHANNEL_GENERATORS = [
    generate_sdf,
    generate_pseudo_sdf,
    generate_sdf_legacy,
    generate_pseudo_sdf_legacy,
]


def _median_field(bitmap: Bitmap) -> np.ndarray:
    if bitmap.channels == 1:
        return bitmap.to_array()
    return np.median(bitmap.data, axis=2)


@pytest.fixture
def overlapping_squares(make_square) -> Shape:
    """Two counter-clockwise squares sharing the strip 1 <= x <= 2."""
    return Shape(contours=[make_square(0, 0, 2, 2), make_square(1, 0, 3, 2)])


@pytest.fixture
def square_with_hole(make_square) -> Shape:
    """Square with a clockwise hole around its center."""
    return Shape(contours=[make_square(0, 0, 4, 4), make_square(1, 1, 3, 3, clockwise=True)])


class TestSingleChannelFields:
    """Tests for the SDF and pseudo-SDF generators."""

    def test_square_fills_bitmap(self, unit_square):
        """Test the unit square scaled over an 8x8 bitmap."""
        output = Bitmap(8, 8)

        generate_sdf(output, unit_square, 1.0, Vector2(8, 8), Vector2(0, 0))

        assert (output.to_array() > 0.5).all()
        assert output[0, 3] == pytest.approx(0.5625)
        assert output[3, 3] == pytest.approx(0.9375)

    @pytest.mark.parametrize("generate", SINGLE_CHANNEL_GENERATORS)
    def test_inside_outside_transition(self, unit_square, generate):
        """Test that values cross 0.5 exactly at the square's sides."""
        output = Bitmap(8, 8)

        generate(output, unit_square, 1.0, Vector2(4, 4), Vector2(0.5, 0.5))

        row = output.to_array()[3]
        assert (row[[0, 1, 6, 7]] < 0.5).all()
        assert (row[2:6] > 0.5).all()

    def test_clockwise_square_is_inside_out(self, make_square):
        """Test that reversing the contour negates the field."""
        shape = Shape(contours=[make_square(clockwise=True)])
        output = Bitmap(4, 4)

        generate_sdf(output, shape, 1.0, Vector2(4, 4), Vector2(0, 0))

        assert (output.to_array() < 0.5).all()

    def test_overlapping_contours(self, overlapping_squares):
        """Test that a point inside one square is not cut by the other."""
        output = Bitmap(1, 1)
        legacy = Bitmap(1, 1)
        translate = Vector2(-0.4, -0.5)

        generate_sdf(output, overlapping_squares, 1.0, Vector2(1, 1), translate)
        generate_sdf_legacy(legacy, overlapping_squares, 1.0, Vector2(1, 1), translate)

        # Pixel center sits at (0.9, 1.0): 0.9 inside the first square
        assert output[0, 0] == pytest.approx(1.4, abs=1e-6)
        assert legacy[0, 0] == pytest.approx(0.4, abs=1e-6)

    @pytest.mark.parametrize("generate", [generate_sdf, generate_pseudo_sdf])
    def test_hole_is_outside(self, square_with_hole, generate):
        """Test that the center of a clockwise hole is outside."""
        output = Bitmap(1, 1)

        generate(output, square_with_hole, 4.0, Vector2(1, 1), Vector2(-1.5, -1.5))

        assert output[0, 0] == pytest.approx(0.25)

    def test_row_bands_match_full_run(self, unit_square):
        """Test that generating row bands separately gives the same bitmap."""
        full = Bitmap(8, 8)
        banded = Bitmap(8, 8)
        args = (unit_square, 0.5, Vector2(5, 5), Vector2(0.3, 0.2))

        generate_pseudo_sdf(full, *args)
        generate_pseudo_sdf(banded, *args, rows=range(0, 3))
        generate_pseudo_sdf(banded, *args, rows=range(3, 8))

        assert np.array_equal(full.data, banded.data)

    def test_inverse_y_axis_flips_rows(self, make_square):
        """Test that a top-down shape produces vertically flipped output."""
        normal = Bitmap(6, 6)
        flipped = Bitmap(6, 6)
        shape = Shape(contours=[make_square(0, 0, 1, 0.5)])
        inverted = Shape(contours=[make_square(0, 0, 1, 0.5)], inverse_y_axis=True)

        generate_sdf(normal, shape, 1.0, Vector2(6, 6), Vector2(0, 0))
        generate_sdf(flipped, inverted, 1.0, Vector2(6, 6), Vector2(0, 0))

        assert np.array_equal(flipped.data, np.flipud(normal.data))

    def test_wrong_channel_count_rejected(self, unit_square):
        """Test that a three-channel bitmap is refused."""
        with pytest.raises(ValueError, match="1-channel"):
            generate_sdf(Bitmap(2, 2, channels=3), unit_square, 1.0, Vector2(1, 1), Vector2())


class TestMultiChannelFields:
    """Tests for the MSDF generators."""

    @pytest.mark.parametrize("generate", [generate_msdf, generate_msdf_legacy])
    def test_median_transition(self, unit_square, generate):
        """Test that the channel median crosses 0.5 at the square's sides."""
        edge_coloring_simple(unit_square, 3.0)
        output = Bitmap(8, 8, channels=3)

        generate(output, unit_square, 1.0, Vector2(4, 4), Vector2(0.5, 0.5))

        row = _median_field(output)[3]
        assert (row[[0, 1, 6, 7]] < 0.5).all()
        assert (row[2:6] > 0.5).all()

    def test_channels_differ_near_corner(self, unit_square):
        """Test that edge colors produce distinct channel values."""
        edge_coloring_simple(unit_square, 3.0)
        output = Bitmap(8, 8, channels=3)

        generate_msdf(output, unit_square, 1.0, Vector2(4, 4), Vector2(0.5, 0.5), 0.0)

        # Pixel center (-0.125, 0.125) sits diagonally off the bottom-left corner
        corner = output[1, 2]
        assert len(set(corner.tolist())) > 1

    def test_overlapping_contours(self, overlapping_squares):
        """Test overlap resolution on the channel median."""
        edge_coloring_simple(overlapping_squares, 3.0)
        output = Bitmap(1, 1, channels=3)

        generate_msdf(output, overlapping_squares, 1.0, Vector2(1, 1), Vector2(-0.4, -0.5))

        assert np.median(output[0, 0]) > 0.5

    def test_row_bands_match_full_run(self, unit_square):
        """Test banded generation against a full run without correction."""
        edge_coloring_simple(unit_square, 3.0)
        full = Bitmap(6, 6, channels=3)
        banded = Bitmap(6, 6, channels=3)
        args = (unit_square, 1.0, Vector2(4, 4), Vector2(0.25, 0.25))

        generate_msdf(full, *args, edge_threshold=0.0)
        generate_msdf(banded, *args, rows=range(0, 2))
        generate_msdf(banded, *args, rows=range(2, 6))

        assert np.array_equal(full.data, banded.data)

    def test_wrong_channel_count_rejected(self, unit_square):
        """Test that a single-channel bitmap is refused."""
        with pytest.raises(ValueError, match="3-channel"):
            generate_msdf(Bitmap(2, 2), unit_square, 1.0, Vector2(1, 1), Vector2())


class TestResolveOverlap:
    """Tests for resolve_overlap."""

    def test_positive_side_keeps_closest_extreme(self):
        """Test that the nearest positive contour distance is used."""
        distance, chosen = resolve_overlap([1, 1], [0.9, -0.1], 0.9, 1e240, 0.9, 1e240)
        assert distance == 0.9
        assert chosen == -1

    def test_positive_side_from_open_start(self):
        """Test that an open search start selects the contour itself."""
        distance, chosen = resolve_overlap([1, 1], [0.9, -0.1], 0.9, 1e240, -1e240, 1e240)
        assert distance == 0.9
        assert chosen == 0

    def test_negative_side(self):
        """Test the decision for a point inside a hole."""
        distance, chosen = resolve_overlap([1, -1], [2.0, -1.0], 2.0, -1.0, -1e240, 1e240)
        assert distance == -1.0
        assert chosen == 1

    def test_conflicting_closer_contour_wins(self):
        """Test that a closer contour of the other winding overrides."""
        distance, chosen = resolve_overlap([-1, 1], [-0.5, -0.2], -1e240, -0.5, -1e240, -0.5)
        assert distance == -0.2
        assert chosen == 1


class TestErrorCorrection:
    """Tests for MSDF clash detection and correction."""

    @pytest.fixture
    def clashing_pair(self) -> Bitmap:
        bitmap = Bitmap(2, 1, channels=3)
        bitmap[0, 0] = (0.8, 0.2, 0.9)
        bitmap[1, 0] = (0.2, 0.8, 0.9)
        return bitmap

    def test_pixel_clash(self, clashing_pair):
        """Test the threshold of a two-channel flip."""
        a, b = clashing_pair[0, 0], clashing_pair[1, 0]
        assert pixel_clash(a, b, 0.5)
        assert not pixel_clash(a, b, 0.7)

    def test_opposite_sides_do_not_clash(self):
        """Test that pixels on different sides of the edge are left alone."""
        a = np.array([0.8, 0.2, 0.9], dtype=np.float32)
        b = np.array([0.2, 0.8, 0.1], dtype=np.float32)
        assert not pixel_clash(a, b, 0.1)

    def test_single_channel_flip_is_no_clash(self):
        """Test that a change of one channel is not a clash."""
        a = np.array([0.8, 0.2, 0.9], dtype=np.float32)
        b = np.array([0.8, 0.8, 0.9], dtype=np.float32)
        assert not pixel_clash(a, b, 0.1)

    def test_correction_replaces_with_median(self, clashing_pair):
        """Test that both clashing pixels are replaced by their medians."""
        corrected = msdf_error_correction(clashing_pair, Vector2(0.5, 0.5))

        assert corrected == 2
        assert clashing_pair[0, 0].tolist() == pytest.approx([0.8, 0.8, 0.8])
        assert clashing_pair[1, 0].tolist() == pytest.approx([0.8, 0.8, 0.8])

    def test_vertical_threshold(self):
        """Test that vertical neighbors use the y threshold."""
        bitmap = Bitmap(1, 2, channels=3)
        bitmap[0, 0] = (0.8, 0.2, 0.9)
        bitmap[0, 1] = (0.2, 0.8, 0.9)

        assert msdf_error_correction(bitmap, Vector2(0.1, 0.7)) == 0
        assert msdf_error_correction(bitmap, Vector2(0.7, 0.1)) == 2

    def test_idempotent(self, clashing_pair):
        """Test that a corrected bitmap has no clashes left."""
        msdf_error_correction(clashing_pair, Vector2(0.5, 0.5))
        snapshot = clashing_pair.data.copy()

        assert msdf_error_correction(clashing_pair, Vector2(0.5, 0.5)) == 0
        assert np.array_equal(snapshot, clashing_pair.data)

    def test_idempotent_on_generated_field(self):
        """Test that correcting a generated field twice changes nothing the second time."""
        corners = [(0, 0), (3, 0), (3, 1), (1, 1), (1, 3), (0, 3)]
        points = [Vector2(x, y) for x, y in corners]
        contour = Contour()
        for i, point in enumerate(points):
            contour.add_edge(LinearSegment(point, points[(i + 1) % len(points)]))
        shape = Shape(contours=[contour])
        edge_coloring_simple(shape, 3.0, seed=7)

        bitmap = Bitmap(16, 16, channels=3)
        scale = Vector2(4, 4)
        generate_msdf(bitmap, shape, 0.5, scale, Vector2(0.5, 0.5), edge_threshold=0)
        threshold = 1.00000001 / (scale * 0.5)

        msdf_error_correction(bitmap, threshold)
        snapshot = bitmap.data.copy()

        assert msdf_error_correction(bitmap, threshold) == 0
        assert np.array_equal(snapshot, bitmap.data)


class TestAutoFrame:
    """Tests for auto_frame."""

    def test_square_bounds(self):
        """Test a unit box in an 8x8 bitmap with a 2 pixel range."""
        scale, translate = auto_frame((0, 0, 1, 1), 8, 8, 2.0)
        assert scale == Vector2(6, 6)
        assert translate.to_tuple() == pytest.approx((1 / 6, 1 / 6))

    def test_wide_bounds_centered_vertically(self):
        """Test that the shorter axis is centered."""
        scale, translate = auto_frame((0, 0, 2, 1), 10, 10, 2.0)
        assert scale == Vector2(4, 4)
        assert translate.to_tuple() == pytest.approx((0.25, 0.75))

    def test_tall_bounds_centered_horizontally(self):
        """Test centering along x for a tall shape."""
        scale, translate = auto_frame((0, 0, 1, 2), 10, 10, 2.0)
        assert scale == Vector2(4, 4)
        assert translate.to_tuple() == pytest.approx((0.75, 0.25))

    def test_empty_bounds(self):
        """Test the identity frame for an empty shape."""
        inf = float("inf")
        assert auto_frame((inf, inf, -inf, -inf), 8, 8, 2.0) == (Vector2(1, 1), Vector2(0, 0))

    def test_bitmap_smaller_than_range(self):
        """Test the identity frame when the margin leaves no room."""
        assert auto_frame((0, 0, 1, 1), 2, 2, 4.0) == (Vector2(1, 1), Vector2(0, 0))


class TestFieldGenerator:
    """Tests for FieldGenerator."""

    @pytest.mark.parametrize("mode", list(FieldMode))
    @pytest.mark.parametrize("legacy", [False, True])
    def test_generate_modes(self, unit_square, mode, legacy):
        """Test every mode fills a framed bitmap with an inside center."""
        config = GenerationConfig(mode=mode, width=16, height=16, range=4.0, legacy=legacy)

        bitmap = FieldGenerator(config).generate(unit_square)

        assert bitmap.channels == mode.channels
        field = _median_field(bitmap)
        assert field[8, 8] > 0.5
        assert field[0, 0] < 0.5

    def test_msdf_colors_shape(self, unit_square):
        """Test that MSDF generation assigns edge colors."""
        FieldGenerator(GenerationConfig(width=8, height=8), ColoringConfig(seed=1)).generate(
            unit_square
        )
        assert unit_square[0][0].color != unit_square[0][1].color

    def test_explicit_frame(self, unit_square):
        """Test that scale and translate are used without auto framing."""
        config = GenerationConfig(
            mode=FieldMode.SDF,
            width=8,
            height=8,
            range=8.0,
            scale=(8.0, 8.0),
            translate=(0.0, 0.0),
            auto_frame=False,
        )

        bitmap = FieldGenerator(config).generate(unit_square)

        assert bitmap[0, 3] == pytest.approx(0.5625)
