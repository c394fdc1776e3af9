"""
hydrostab Input Validation

Structural checks run before any numeric work. Each validator collects
every issue it finds and raises once, with one EngineError per issue.

Geometry rules:
- At least MIN_STATIONS stations and MIN_WATERLINES waterlines
- Station and waterline indices unique and contiguous
- Station x and waterline z finite and strictly increasing by index
- Waterline z non-negative (measured up from the baseline)
- Offsets form a complete grid, reference existing indices, and are
  finite and non-negative
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple
import math
import logging

import numpy as np

from .constants import MIN_STATIONS, MIN_WATERLINES, DRAFT_TOL_M
from .geometry import HullGeometry, HullGrid, Loadcase
from ..errors import (
    EngineError,
    ErrorCode,
    create_validation_error,
    create_bounds_error,
    GeometryValidationError,
    LoadcaseValidationError,
    DraftRangeError,
)

logger = logging.getLogger(__name__)

SOURCE = "core.validation"


# =============================================================================
# GEOMETRY
# =============================================================================

def _check_axis(items, attr: str, label: str, minimum: int, errors: List[EngineError]) -> None:
    if len(items) < minimum:
        errors.append(create_validation_error(
            f"at least {minimum} {label}s required, got {len(items)}",
            SOURCE, field=f"{label}s", actual=len(items), expected=minimum,
            code=ErrorCode.VAL_TOO_FEW_POINTS,
        ))

    indices = [item.index for item in items]
    if len(set(indices)) != len(indices):
        dupes = sorted({i for i in indices if indices.count(i) > 1})
        errors.append(create_validation_error(
            f"duplicate {label} indices {dupes}",
            SOURCE, field=f"{label}s", actual=dupes,
            code=ErrorCode.VAL_DUPLICATE_INDEX,
        ))
    elif indices:
        expected = set(range(min(indices), max(indices) + 1))
        missing = sorted(expected - set(indices))
        if missing:
            errors.append(create_validation_error(
                f"missing {label} indices {missing}",
                SOURCE, field=f"{label}s", actual=missing,
                code=ErrorCode.VAL_GRID_INCOMPLETE,
            ))

    ordered = sorted(items, key=lambda item: item.index)
    values = [getattr(item, attr) for item in ordered]
    for item, value in zip(ordered, values):
        if not math.isfinite(value):
            errors.append(create_validation_error(
                f"{label} {item.index} {attr} is not finite",
                SOURCE, field=f"{label}s", actual=value,
                code=ErrorCode.VAL_NOT_FINITE,
            ))
    for prev, cur in zip(ordered, ordered[1:]):
        a, b = getattr(prev, attr), getattr(cur, attr)
        if math.isfinite(a) and math.isfinite(b) and not b > a:
            errors.append(create_validation_error(
                f"{label} {attr} must be strictly increasing: "
                f"{label} {cur.index} ({b}) follows {label} {prev.index} ({a})",
                SOURCE, field=f"{label}s", actual=b, expected=f"> {a}",
                code=ErrorCode.VAL_NOT_INCREASING,
            ))


def validate_geometry(geometry: HullGeometry) -> List[EngineError]:
    """Return every structural problem found in the geometry (empty when valid)."""
    errors: List[EngineError] = []

    _check_axis(geometry.stations, "x", "station", MIN_STATIONS, errors)
    _check_axis(geometry.waterlines, "z", "waterline", MIN_WATERLINES, errors)

    for wl in geometry.waterlines:
        if math.isfinite(wl.z) and wl.z < 0:
            errors.append(create_validation_error(
                f"waterline {wl.index} z must be non-negative",
                SOURCE, field="waterlines", actual=wl.z, expected=">= 0",
                code=ErrorCode.VAL_NEGATIVE_VALUE,
            ))

    station_ids = {s.index for s in geometry.stations}
    waterline_ids = {w.index for w in geometry.waterlines}
    seen: Dict[Tuple[int, int], int] = {}

    for o in geometry.offsets:
        key = (o.station_index, o.waterline_index)
        if o.station_index not in station_ids or o.waterline_index not in waterline_ids:
            errors.append(create_validation_error(
                "offset references an unknown station or waterline",
                SOURCE, field="offsets", row=o.station_index, column=o.waterline_index,
                code=ErrorCode.VAL_GRID_INCOMPLETE,
            ))
            continue
        if key in seen:
            errors.append(create_validation_error(
                "duplicate offset",
                SOURCE, field="offsets", row=o.station_index, column=o.waterline_index,
                code=ErrorCode.VAL_DUPLICATE_INDEX,
            ))
            continue
        seen[key] = 1
        if not math.isfinite(o.half_breadth):
            errors.append(create_validation_error(
                "half-breadth is not finite",
                SOURCE, field="offsets", row=o.station_index, column=o.waterline_index,
                actual=o.half_breadth, code=ErrorCode.VAL_NOT_FINITE,
            ))
        elif o.half_breadth < 0:
            errors.append(create_validation_error(
                "half-breadth must be non-negative",
                SOURCE, field="offsets", row=o.station_index, column=o.waterline_index,
                actual=o.half_breadth, expected=">= 0", code=ErrorCode.VAL_NEGATIVE_VALUE,
            ))

    missing = len(station_ids) * len(waterline_ids) - len(seen)
    if missing > 0:
        errors.append(create_validation_error(
            f"offset grid incomplete: {missing} station/waterline pairs have no half-breadth",
            SOURCE, field="offsets", actual=len(seen),
            expected=len(station_ids) * len(waterline_ids),
            code=ErrorCode.VAL_GRID_INCOMPLETE,
        ))

    for label, value in (("lpp", geometry.lpp), ("beam", geometry.beam)):
        if value is not None and not (math.isfinite(value) and value > 0):
            errors.append(create_validation_error(
                f"{label} must be positive when given",
                SOURCE, field=label, actual=value, expected="> 0",
            ))

    return errors


def prepare_grid(geometry: HullGeometry) -> HullGrid:
    """
    Validate geometry and return its read-only array form.

    Raises:
        GeometryValidationError: listing every problem found
    """
    errors = validate_geometry(geometry)
    if errors:
        logger.debug(f"Geometry '{geometry.name}' rejected with {len(errors)} issue(s)")
        raise GeometryValidationError(errors)

    stations = sorted(geometry.stations, key=lambda s: s.index)
    waterlines = sorted(geometry.waterlines, key=lambda w: w.index)
    s_pos = {s.index: i for i, s in enumerate(stations)}
    w_pos = {w.index: j for j, w in enumerate(waterlines)}

    xs = np.array([s.x for s in stations], dtype=float)
    zs = np.array([w.z for w in waterlines], dtype=float)
    ys = np.zeros((len(xs), len(zs)), dtype=float)
    for o in geometry.offsets:
        ys[s_pos[o.station_index], w_pos[o.waterline_index]] = o.half_breadth

    for arr in (xs, zs, ys):
        arr.flags.writeable = False

    lpp = geometry.lpp if geometry.lpp is not None else float(xs[-1] - xs[0])
    beam = geometry.beam if geometry.beam is not None else float(2.0 * ys.max())

    return HullGrid(
        xs=xs,
        zs=zs,
        half_breadths=ys,
        lpp=lpp,
        beam=beam,
        design_draft=geometry.design_draft,
        name=geometry.name,
    )


# =============================================================================
# LOADCASE
# =============================================================================

def validate_loadcase(loadcase: Loadcase, require_kg: bool = False) -> None:
    """
    Check loadcase values.

    Raises:
        LoadcaseValidationError: listing every problem found
    """
    errors: List[EngineError] = []

    if not (math.isfinite(loadcase.rho) and loadcase.rho > 0):
        errors.append(create_validation_error(
            "water density must be positive",
            SOURCE, field="rho", actual=loadcase.rho, expected="> 0",
        ))

    for label in ("kg", "lcg", "tcg"):
        value = getattr(loadcase, label)
        if value is not None and not math.isfinite(value):
            errors.append(create_validation_error(
                f"{label} must be finite",
                SOURCE, field=label, actual=value, code=ErrorCode.VAL_NOT_FINITE,
            ))

    if require_kg and loadcase.kg is None:
        errors.append(create_validation_error(
            "KG is required for GM and GZ calculations",
            SOURCE, field="kg", code=ErrorCode.VAL_MISSING_FIELD,
        ))

    flood = loadcase.flooding_angle_deg
    if flood is not None and not (math.isfinite(flood) and 0 < flood <= 180):
        errors.append(create_validation_error(
            "flooding angle must be in (0, 180] degrees",
            SOURCE, field="flooding_angle_deg", actual=flood, expected="(0, 180]",
        ))

    if errors:
        raise LoadcaseValidationError(errors)


# =============================================================================
# DRAFTS
# =============================================================================

def validate_draft(grid: HullGrid, draft: Optional[float], field: str = "draft") -> float:
    """
    Check that z_min < draft <= z_max.

    Returns:
        The draft as a float

    Raises:
        DraftRangeError
    """
    if draft is None:
        raise DraftRangeError([create_validation_error(
            "draft is required (no design draft on the geometry)",
            SOURCE, field=field, code=ErrorCode.VAL_MISSING_FIELD,
        )])
    draft = float(draft)
    if not math.isfinite(draft) or draft <= grid.z_min + DRAFT_TOL_M or draft > grid.z_max + DRAFT_TOL_M:
        raise DraftRangeError([create_bounds_error(
            f"draft {draft} outside waterline range ({grid.z_min}, {grid.z_max}]",
            SOURCE, field=field, actual=draft, min_val=grid.z_min, max_val=grid.z_max,
        )])
    return min(draft, grid.z_max)


def validate_draft_range(grid: HullGrid, min_draft: float, max_draft: float, points: int) -> None:
    """Check a draft sweep: max > min, points >= 2, both ends inside the hull."""
    errors: List[EngineError] = []
    if points < 2:
        errors.append(create_validation_error(
            "at least 2 draft points required",
            SOURCE, field="points", actual=points, expected=">= 2",
            code=ErrorCode.VAL_TOO_FEW_POINTS,
        ))
    if not max_draft > min_draft:
        errors.append(create_validation_error(
            "max draft must be greater than min draft",
            SOURCE, field="max_draft", actual=max_draft, expected=f"> {min_draft}",
        ))
    if errors:
        raise DraftRangeError(errors)
    validate_draft(grid, min_draft, field="min_draft")
    validate_draft(grid, max_draft, field="max_draft")
