"""
hydrostab Stability Calculators

Righting-arm (GZ) curves for a hull and loadcase at an upright draft.

Implements:
- Wall-sided formula: GZ = (GMt + ½·BMt·tan²φ)·sin φ - TCG·cos φ
- Full immersion/emersion: every section polygon is rotated, clipped at
  the heeled waterline that keeps the upright displaced volume, and
  integrated for the center of buoyancy. GZ = Y_B - Y_G with
  Y_G = TCG·cos φ + KG·sin φ.

The waterline height for each heel is found with Brent's method.
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
import math
import time
import logging

import numpy as np
from scipy.optimize import brentq

from ..core.geometry import HullGeometry, HullGrid, Loadcase
from ..core.validation import prepare_grid, validate_loadcase, validate_draft
from ..errors import ValidationError, create_validation_error
from ..physics.hydrostatics import HydrostaticCalculator, HydroResult
from ..physics.integration import NumericalIntegrator
from .constants import (
    StabilityMethod,
    MethodDescriptor,
    WALL_SIDED_VALID_DEG,
    FULL_IMMERSION_VALID_DEG,
    METHOD_AGREEMENT_MAX_DEG,
    METHOD_AGREEMENT_RTOL,
    METHOD_AGREEMENT_ATOL_M,
    get_available_methods,
)
from .results import StabilityPoint, StabilityCurve, MethodAgreement
from .gz_analysis import find_max_gz, find_vanishing_angle
from .transforms import section_polygons, rotate, clip_below, polygon_properties, z_extent

logger = logging.getLogger(__name__)

SOURCE = "stability.calculators"

# Wall-sided tan²φ is unbounded at 90°
WALL_SIDED_LIMIT_DEG = 90.0

# Brent tolerance on the heeled waterline height (m)
WATERLINE_XTOL_M = 1e-10


def heel_angles(angle_min: float, angle_max: float, angle_step: float) -> List[float]:
    """Angles from angle_min in angle_step increments, including angle_max when on the grid."""
    count = int(math.floor((angle_max - angle_min) / angle_step + 1e-9))
    return [angle_min + i * angle_step for i in range(count + 1)]


def wall_sided_gz(gmt: float, bmt: float, heel_deg: float, tcg: float = 0.0) -> float:
    """Wall-sided GZ at one heel angle."""
    phi = math.radians(heel_deg)
    return (gmt + 0.5 * bmt * math.tan(phi) ** 2) * math.sin(phi) - tcg * math.cos(phi)


class _HeeledHull:
    """
    Section polygons of one hull, ready for repeated heel/clip evaluation.

    The target volume is the upright volume at the draft measured with the
    same polygons, so the curve starts from the same displacement the
    polygon integration sees.
    """

    def __init__(self, grid: HullGrid, integrator: NumericalIntegrator, draft: float):
        self.grid = grid
        self.integrator = integrator
        self.polys = section_polygons(grid.zs, grid.half_breadths)
        self.target_volume = self.immersed(self.polys, draft)[0]

    def immersed(self, rotated: np.ndarray, level: float) -> Tuple[float, np.ndarray, np.ndarray]:
        """Volume below a waterline plus per-station areas and centroid Y."""
        area, cy, _ = polygon_properties(clip_below(rotated, level))
        volume = self.integrator.integrate(self.grid.xs, area)
        return volume, area, cy

    def center_of_buoyancy_y(self, heel_deg: float) -> Tuple[float, float]:
        """
        Transverse center of buoyancy in the heeled frame.

        Returns:
            (Y_B, waterline height) for the equal-volume waterline
        """
        if self.target_volume <= 0:
            return 0.0, 0.0

        rotated = rotate(self.polys, math.radians(heel_deg))
        lo, hi = z_extent(rotated)

        def residual(level: float) -> float:
            return self.immersed(rotated, level)[0] - self.target_volume

        if residual(hi) <= 0:
            level = hi
        else:
            level = brentq(residual, lo, hi, xtol=WATERLINE_XTOL_M)

        volume, area, cy = self.immersed(rotated, level)
        y_b = self.integrator.integrate(self.grid.xs, area * cy) / volume
        return y_b, level


class StabilityCalculator:
    """
    Generates GZ curves by the wall-sided or full-immersion method.

    KG is required. The draft defaults to the geometry's design draft.
    """

    def __init__(
        self,
        hydrostatics: Optional[HydrostaticCalculator] = None,
        agreement_rtol: float = METHOD_AGREEMENT_RTOL,
        agreement_atol_m: float = METHOD_AGREEMENT_ATOL_M,
    ):
        self.hydrostatics = hydrostatics or HydrostaticCalculator()
        self.agreement_rtol = agreement_rtol
        self.agreement_atol_m = agreement_atol_m

    @property
    def integrator(self) -> NumericalIntegrator:
        return self.hydrostatics.integrator

    def get_available_methods(self) -> Tuple[MethodDescriptor, ...]:
        return get_available_methods()

    # -------------------------------------------------------------------------
    # GZ curve
    # -------------------------------------------------------------------------

    def compute_gz_curve(
        self,
        geometry: HullGeometry,
        loadcase: Loadcase,
        angle_min: float = 0.0,
        angle_max: float = 90.0,
        angle_step: float = 1.0,
        method: StabilityMethod = StabilityMethod.FULL_IMMERSION,
        draft: Optional[float] = None,
    ) -> StabilityCurve:
        """
        GZ curve over a range of heel angles.

        Args:
            angle_min, angle_max, angle_step: Heel sweep in degrees
            method: StabilityMethod (or its string value)
            draft: Upright draft; defaults to geometry.design_draft

        Raises:
            ValidationError: Invalid geometry, loadcase, draft or angle range
        """
        start = time.perf_counter()
        method = self._resolve_method(method)

        grid = prepare_grid(geometry)
        validate_loadcase(loadcase, require_kg=True)
        draft = validate_draft(grid, draft if draft is not None else geometry.design_draft)
        self._validate_angles(angle_min, angle_max, angle_step, method)

        upright = self.hydrostatics.compute_for_grid(grid, loadcase, draft)
        angles = heel_angles(angle_min, angle_max, angle_step)

        if method is StabilityMethod.WALL_SIDED:
            points = self._wall_sided_points(upright, loadcase, angles)
        else:
            points = self._full_immersion_points(grid, upright, loadcase, angles)

        curve = self._build_curve(
            method, points, upright, loadcase, int((time.perf_counter() - start) * 1000)
        )
        logger.info(
            f"GZ curve '{grid.name}' ({method.value}): {len(points)} points, "
            f"max GZ {curve.max_gz_m:.3f} m at {curve.angle_at_max_gz_deg:.1f}°"
        )
        return curve

    def compare_methods(
        self,
        geometry: HullGeometry,
        loadcase: Loadcase,
        max_angle: float = METHOD_AGREEMENT_MAX_DEG,
        angle_step: float = 1.0,
        draft: Optional[float] = None,
    ) -> MethodAgreement:
        """
        Compare wall-sided and full-immersion GZ from 0° to max_angle.

        Agreement holds when |GZ_ws - GZ_full| <= rtol·|GZ_full| + atol at
        every angle.
        """
        kwargs = dict(angle_min=0.0, angle_max=max_angle, angle_step=angle_step, draft=draft)
        ws = self.compute_gz_curve(geometry, loadcase, method=StabilityMethod.WALL_SIDED, **kwargs)
        full = self.compute_gz_curve(geometry, loadcase, method=StabilityMethod.FULL_IMMERSION, **kwargs)

        worst, worst_angle, within = 0.0, 0.0, True
        for a, b in zip(ws.points, full.points):
            deviation = abs(a.gz_m - b.gz_m)
            if deviation > self.agreement_rtol * abs(b.gz_m) + self.agreement_atol_m:
                within = False
            if deviation > worst:
                worst, worst_angle = deviation, a.heel_deg

        if not within:
            logger.warning(
                f"GZ methods disagree below {max_angle}°: max deviation {worst:.4f} m at {worst_angle}°"
            )

        return MethodAgreement(
            max_angle_deg=max_angle,
            max_deviation_m=worst,
            angle_of_max_deviation_deg=worst_angle,
            within_tolerance=within,
            rtol=self.agreement_rtol,
            atol_m=self.agreement_atol_m,
            wall_sided=ws,
            full_immersion=full,
        )

    # -------------------------------------------------------------------------
    # Methods
    # -------------------------------------------------------------------------

    def _wall_sided_points(
        self, upright: HydroResult, loadcase: Loadcase, angles: Sequence[float]
    ) -> List[StabilityPoint]:
        gmt = upright.gmt_m if upright.gmt_m is not None else 0.0
        bmt = upright.bmt_m if upright.bmt_m is not None else 0.0
        tcg = loadcase.tcg_or_centerline

        points = []
        for heel in angles:
            gz = wall_sided_gz(gmt, bmt, heel, tcg)
            points.append(StabilityPoint(
                heel_deg=heel,
                gz_m=gz,
                kn_m=gz + loadcase.kg * math.sin(math.radians(heel)),
            ))
        return points

    def _full_immersion_points(
        self, grid: HullGrid, upright: HydroResult, loadcase: Loadcase, angles: Sequence[float]
    ) -> List[StabilityPoint]:
        hull = _HeeledHull(grid, self.integrator, upright.draft_m)
        kg = loadcase.kg
        tcg = loadcase.tcg_or_centerline

        points = []
        for heel in angles:
            phi = math.radians(heel)
            y_b, level = hull.center_of_buoyancy_y(heel)
            y_g = tcg * math.cos(phi) + kg * math.sin(phi)
            points.append(StabilityPoint(
                heel_deg=heel,
                gz_m=y_b - y_g,
                kn_m=y_b - tcg * math.cos(phi),
            ))
            logger.debug(f"Heel {heel:.2f}°: waterline Z={level:.5f} m, Y_B={y_b:.5f} m")
        return points

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _resolve_method(self, method) -> StabilityMethod:
        try:
            return StabilityMethod(method)
        except ValueError:
            valid = [m.value for m in StabilityMethod]
            raise ValidationError([create_validation_error(
                f"unknown stability method {method!r}; expected one of {valid}",
                SOURCE, field="method", actual=method, expected=valid,
            )]) from None

    def _validate_angles(
        self, angle_min: float, angle_max: float, angle_step: float, method: StabilityMethod
    ) -> None:
        errors = []
        if not angle_step > 0:
            errors.append(create_validation_error(
                "angle step must be positive", SOURCE,
                field="angle_step", actual=angle_step, expected="> 0",
            ))
        if not angle_min < angle_max:
            errors.append(create_validation_error(
                "angle_min must be less than angle_max", SOURCE,
                field="angle_min", actual=angle_min, expected=f"< {angle_max}",
            ))
        if angle_min < 0 or angle_max > FULL_IMMERSION_VALID_DEG:
            errors.append(create_validation_error(
                f"heel angles must lie in [0, {FULL_IMMERSION_VALID_DEG:g}] degrees", SOURCE,
                field="angle_max", actual=(angle_min, angle_max),
            ))
        if method is StabilityMethod.WALL_SIDED and angle_max >= WALL_SIDED_LIMIT_DEG:
            errors.append(create_validation_error(
                f"wall-sided formula is undefined at {WALL_SIDED_LIMIT_DEG:g}° and beyond", SOURCE,
                field="angle_max", actual=angle_max, expected=f"< {WALL_SIDED_LIMIT_DEG:g}",
            ))
        if errors:
            raise ValidationError(errors)

    def _build_curve(
        self,
        method: StabilityMethod,
        points: List[StabilityPoint],
        upright: HydroResult,
        loadcase: Loadcase,
        elapsed_ms: int,
    ) -> StabilityCurve:
        warnings: List[str] = list(upright.warnings)

        if method is StabilityMethod.WALL_SIDED and points[-1].heel_deg > WALL_SIDED_VALID_DEG:
            warnings.append(
                f"Wall-sided formula used to {points[-1].heel_deg:g}°, "
                f"beyond its recommended {WALL_SIDED_VALID_DEG:g}°"
            )

        gz_max, angle_max = find_max_gz(points)

        return StabilityCurve(
            method=method,
            points=tuple(points),
            draft_m=upright.draft_m,
            displacement_kg=upright.displacement_kg,
            kg_m=loadcase.kg,
            initial_gmt_m=upright.gmt_m,
            bmt_m=upright.bmt_m,
            max_gz_m=gz_max,
            angle_at_max_gz_deg=angle_max,
            angle_of_vanishing_stability_deg=find_vanishing_angle(points),
            warnings=tuple(warnings),
            calculation_time_ms=elapsed_ms,
        )
