"""
Unit tests for hydrostab/stability/transforms.py

Tests section polygon construction, rotation, clipping and shoelace
properties on simple boxes.
"""

import pytest
import math
import numpy as np

from hydrostab.stability.transforms import (
    section_polygons,
    rotate,
    clip_below,
    polygon_properties,
    z_extent,
)


def box(half_breadth=1.0, depth=2.0, n_waterlines=3):
    zs = np.linspace(0.0, depth, n_waterlines)
    return section_polygons(zs, np.full((1, n_waterlines), half_breadth))


class TestSectionPolygons:

    def test_shape(self):
        zs = np.linspace(0.0, 2.0, 3)
        polys = section_polygons(zs, np.ones((4, 3)))
        assert polys.shape == (4, 6, 2)

    def test_counter_clockwise(self):
        area, _, _ = polygon_properties(box())
        assert area[0] > 0


class TestPolygonProperties:

    def test_box_area_and_centroid(self):
        area, cy, cz = polygon_properties(box(half_breadth=1.0, depth=2.0))
        assert area[0] == pytest.approx(4.0)
        assert cy[0] == pytest.approx(0.0, abs=1e-12)
        assert cz[0] == pytest.approx(1.0)

    def test_degenerate_section(self):
        area, cy, cz = polygon_properties(box(half_breadth=0.0))
        assert area[0] == 0.0
        assert cy[0] == 0.0
        assert cz[0] == 0.0


class TestClip:

    def test_clip_halfway(self):
        area, cy, cz = polygon_properties(clip_below(box(), 0.5))
        assert area[0] == pytest.approx(1.0)
        assert cy[0] == pytest.approx(0.0, abs=1e-12)
        assert cz[0] == pytest.approx(0.25)

    def test_clip_above_everything(self):
        area, _, _ = polygon_properties(clip_below(box(), 5.0))
        assert area[0] == pytest.approx(4.0)

    def test_clip_below_everything(self):
        area, _, _ = polygon_properties(clip_below(box(), -1.0))
        assert area[0] == pytest.approx(0.0, abs=1e-12)

    def test_output_size(self):
        polys = box()
        assert clip_below(polys, 1.0).shape == (1, 12, 2)

    def test_heeled_wedge(self):
        """Box 2 x 2 heeled 45° about the keel and cut at the keel height."""
        rotated = rotate(box(half_breadth=1.0, depth=2.0), math.radians(45.0))
        area, cy, _ = polygon_properties(clip_below(rotated, 0.0))
        # Triangle z <= y under the keel line, legs along the keel and starboard side
        assert area[0] == pytest.approx(0.5, rel=1e-9)
        assert cy[0] > 0


class TestRotate:

    def test_quarter_turn(self):
        polys = np.array([[[1.0, 0.0], [0.0, 1.0]]])
        rotated = rotate(polys, math.pi / 2)
        assert list(rotated[0, 0]) == pytest.approx([0.0, -1.0], abs=1e-12)
        assert list(rotated[0, 1]) == pytest.approx([1.0, 0.0], abs=1e-12)

    def test_area_preserved(self):
        area, _, _ = polygon_properties(rotate(box(), math.radians(33.0)))
        assert area[0] == pytest.approx(4.0)

    def test_starboard_goes_down(self):
        rotated = rotate(box(), math.radians(10.0))
        lo, hi = z_extent(rotated)
        assert lo < 0.0
        assert hi < 2.0 + 1.0
