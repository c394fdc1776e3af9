"""
Unit tests for hydrostab/core/validation.py and hydrostab/core/geometry.py

Tests geometry structure checks, loadcase checks and draft range checks.
"""

import pytest
import numpy as np

from hydrostab.core.geometry import HullGeometry, Station, Waterline, Offset, Loadcase
from hydrostab.core.templates import rectangular_barge
from hydrostab.core.validation import (
    prepare_grid,
    validate_geometry,
    validate_loadcase,
    validate_draft,
)
from hydrostab.errors import (
    ErrorCode,
    GeometryValidationError,
    LoadcaseValidationError,
    DraftRangeError,
    ValidationError,
)


def _box(xs=(0.0, 5.0, 10.0), zs=(0.0, 1.0, 2.0), half=2.0):
    return HullGeometry.from_grid(xs, zs, [[half] * len(zs) for _ in xs])


class TestGeometryValidation:
    """Test validate_geometry / prepare_grid."""

    def test_valid_box_has_no_errors(self):
        assert validate_geometry(_box()) == []

    def test_too_few_stations(self):
        errors = validate_geometry(_box(xs=(0.0, 5.0)))
        assert any(e.code is ErrorCode.VAL_TOO_FEW_POINTS for e in errors)

    def test_stations_not_increasing(self):
        errors = validate_geometry(_box(xs=(0.0, 5.0, 5.0)))
        assert any(e.code is ErrorCode.VAL_NOT_INCREASING for e in errors)

    def test_waterlines_not_increasing(self):
        errors = validate_geometry(_box(zs=(0.0, 2.0, 1.0)))
        assert any(e.code is ErrorCode.VAL_NOT_INCREASING and e.field == "waterlines" for e in errors)

    def test_negative_waterline(self):
        errors = validate_geometry(_box(zs=(-1.0, 0.0, 1.0)))
        assert any(e.code is ErrorCode.VAL_NEGATIVE_VALUE for e in errors)

    def test_negative_half_breadth_reports_location(self):
        geometry = HullGeometry.from_grid(
            [0.0, 1.0, 2.0], [0.0, 1.0, 2.0],
            [[1.0, 1.0, 1.0], [1.0, -0.5, 1.0], [1.0, 1.0, 1.0]],
        )
        errors = validate_geometry(geometry)
        assert len(errors) == 1
        assert errors[0].row == 1
        assert errors[0].column == 1

    def test_incomplete_grid(self):
        geometry = _box()
        partial = HullGeometry(
            stations=geometry.stations,
            waterlines=geometry.waterlines,
            offsets=geometry.offsets[:-1],
        )
        errors = validate_geometry(partial)
        assert any(e.code is ErrorCode.VAL_GRID_INCOMPLETE for e in errors)

    def test_duplicate_station_index(self):
        geometry = HullGeometry(
            stations=[Station(0, 0.0), Station(1, 1.0), Station(1, 2.0)],
            waterlines=[Waterline(0, 0.0), Waterline(1, 1.0), Waterline(2, 2.0)],
            offsets=[],
        )
        errors = validate_geometry(geometry)
        assert any(e.code is ErrorCode.VAL_DUPLICATE_INDEX for e in errors)

    def test_missing_station_index(self):
        geometry = HullGeometry(
            stations=[Station(0, 0.0), Station(1, 1.0), Station(3, 2.0)],
            waterlines=[Waterline(0, 0.0), Waterline(1, 1.0), Waterline(2, 2.0)],
            offsets=[],
        )
        errors = validate_geometry(geometry)
        assert any(e.code is ErrorCode.VAL_GRID_INCOMPLETE and e.field == "stations" for e in errors)

    def test_offset_to_unknown_station(self):
        geometry = _box()
        bad = HullGeometry(
            stations=geometry.stations,
            waterlines=geometry.waterlines,
            offsets=geometry.offsets + (Offset(9, 0, 1.0),),
        )
        errors = validate_geometry(bad)
        assert any(e.row == 9 for e in errors)

    def test_all_issues_reported_together(self):
        geometry = HullGeometry.from_grid(
            [0.0, 0.0, 1.0], [0.0, 1.0, 2.0],
            [[1.0, -1.0, 1.0], [1.0, 1.0, 1.0], [float("nan"), 1.0, 1.0]],
        )
        with pytest.raises(GeometryValidationError) as exc_info:
            prepare_grid(geometry)
        assert len(exc_info.value.errors) == 3

    def test_prepare_grid_orders_by_index(self):
        geometry = HullGeometry(
            stations=[Station(2, 10.0), Station(0, 0.0), Station(1, 5.0)],
            waterlines=[Waterline(1, 1.0), Waterline(0, 0.0), Waterline(2, 2.0)],
            offsets=[Offset(i, j, float(i)) for i in range(3) for j in range(3)],
        )
        grid = prepare_grid(geometry)
        assert list(grid.xs) == [0.0, 5.0, 10.0]
        assert list(grid.zs) == [0.0, 1.0, 2.0]
        assert list(grid.half_breadths[:, 0]) == [0.0, 1.0, 2.0]

    def test_grid_is_read_only(self):
        grid = prepare_grid(_box())
        with pytest.raises(ValueError):
            grid.half_breadths[0, 0] = 99.0

    def test_principal_dimensions_derived(self):
        grid = prepare_grid(_box(half=3.0))
        assert grid.lpp == pytest.approx(10.0)
        assert grid.beam == pytest.approx(6.0)


class TestGridSampling:
    """Test HullGrid interpolation helpers."""

    def test_half_breadth_between_waterlines(self):
        geometry = HullGeometry.from_grid(
            [0.0, 1.0, 2.0], [0.0, 1.0, 2.0],
            [[0.0, 2.0, 4.0]] * 3,
        )
        grid = prepare_grid(geometry)
        assert np.allclose(grid.waterline_half_breadths(1.5), 3.0)

    def test_bracket_between_waterlines(self):
        grid = prepare_grid(rectangular_barge())
        k, s = grid.waterline_bracket(4.5)
        assert k == 4
        assert s == pytest.approx(0.5)

    def test_bracket_on_waterline(self):
        grid = prepare_grid(rectangular_barge())
        assert grid.waterline_bracket(5.0) == (5, 0.0)
        assert grid.waterline_bracket(5.0 - 1e-12) == (5, 0.0)

    def test_bracket_top_of_table(self):
        grid = prepare_grid(rectangular_barge())
        assert grid.waterline_bracket(10.0) == (10, 0.0)


class TestLoadcaseValidation:
    """Test validate_loadcase."""

    def test_default_loadcase_valid(self):
        validate_loadcase(Loadcase())

    def test_non_positive_density(self):
        with pytest.raises(LoadcaseValidationError):
            validate_loadcase(Loadcase(rho=0.0))

    def test_kg_required(self):
        with pytest.raises(LoadcaseValidationError) as exc_info:
            validate_loadcase(Loadcase(), require_kg=True)
        assert exc_info.value.errors[0].field == "kg"

    def test_bad_flooding_angle(self):
        with pytest.raises(LoadcaseValidationError):
            validate_loadcase(Loadcase(flooding_angle_deg=0.0))

    def test_lcg_defaults_to_midship(self):
        grid = prepare_grid(rectangular_barge(length=80.0))
        assert Loadcase().lcg_or_midship(grid) == pytest.approx(40.0)


class TestDraftValidation:
    """Test validate_draft: z_min < draft <= z_max."""

    def setup_method(self):
        self.grid = prepare_grid(rectangular_barge(depth=10.0))

    def test_draft_in_range(self):
        assert validate_draft(self.grid, 5.0) == 5.0

    def test_draft_at_top_waterline(self):
        assert validate_draft(self.grid, 10.0) == 10.0

    def test_draft_at_keel_rejected(self):
        with pytest.raises(DraftRangeError):
            validate_draft(self.grid, 0.0)

    def test_draft_above_top_rejected(self):
        with pytest.raises(DraftRangeError):
            validate_draft(self.grid, 10.5)

    def test_missing_draft_rejected(self):
        with pytest.raises(DraftRangeError):
            validate_draft(self.grid, None)

    def test_draft_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            validate_draft(self.grid, -1.0)
