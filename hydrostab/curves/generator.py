"""
hydrostab Curves Generator

Plot-ready series derived from the hydrostatic and stability
calculators:
- Hydrostatic curves against draft (displacement, KB, LCB, GMt, Awp, ...)
- Bonjean curves (sectional area against waterline height per station)
- GZ and KN series from a stability curve
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np

from ..core.geometry import HullGeometry, Loadcase
from ..core.validation import prepare_grid, validate_loadcase, validate_draft_range
from ..errors import ErrorCode, DraftRangeError, ValidationError, create_validation_error
from ..physics.hydrostatics import HydrostaticCalculator, HydroResult
from ..stability.calculators import StabilityCalculator
from ..stability.constants import StabilityMethod
from ..stability.criteria import StabilityCriteriaChecker
from ..stability.results import StabilityCurve, CriteriaAssessment

logger = logging.getLogger(__name__)

SOURCE = "curves.generator"

DEFAULT_CURVE_POINTS = 100


class CurveType(str, Enum):
    """Hydrostatic quantity plotted against draft."""
    DISPLACEMENT = "displacement"
    KB = "kb"
    LCB = "lcb"
    GMT = "gmt"
    AWP = "awp"
    BMT = "bmt"
    LCF = "lcf"
    CB = "cb"
    TPC = "tpc"


# y-axis label and extractor for each curve type
_CURVE_SPECS: Dict[CurveType, Tuple[str, Callable[[HydroResult], Optional[float]]]] = {
    CurveType.DISPLACEMENT: ("Displacement (kg)", lambda r: r.displacement_kg),
    CurveType.KB: ("KB (m)", lambda r: r.kb_m),
    CurveType.LCB: ("LCB (m)", lambda r: r.lcb_m),
    CurveType.GMT: ("GMt (m)", lambda r: r.gmt_m),
    CurveType.AWP: ("Waterplane Area (m²)", lambda r: r.waterplane_area_m2),
    CurveType.BMT: ("BMt (m)", lambda r: r.bmt_m),
    CurveType.LCF: ("LCF (m)", lambda r: r.lcf_m),
    CurveType.CB: ("Block Coefficient", lambda r: r.cb),
    CurveType.TPC: ("TPC (kg/cm)", lambda r: r.tpc_kg_cm),
}

DRAFT_LABEL = "Draft (m)"


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class CurvePoint:
    x: float
    y: float


@dataclass(frozen=True)
class CurveData:
    """One named series."""
    curve_type: str
    x_label: str
    y_label: str
    points: Tuple[CurvePoint, ...]

    @property
    def xs(self) -> List[float]:
        return [p.x for p in self.points]

    @property
    def ys(self) -> List[float]:
        return [p.y for p in self.points]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "curve_type": self.curve_type,
            "x_label": self.x_label,
            "y_label": self.y_label,
            "points": [[p.x, p.y] for p in self.points],
        }


@dataclass(frozen=True)
class BonjeanCurve:
    """Immersed sectional area of one station against waterline height."""
    station_index: int
    station_x: float
    points: Tuple[CurvePoint, ...]  # x = waterline z (m), y = area (m²)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "station_index": self.station_index,
            "station_x": self.station_x,
            "points": [[p.x, p.y] for p in self.points],
        }


@dataclass(frozen=True)
class StabilityCurveSet:
    """A GZ curve with its plot series and criteria verdict."""
    curve: StabilityCurve
    series: Dict[str, CurveData] = field(default_factory=dict)
    assessment: Optional[CriteriaAssessment] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "curve": self.curve.to_dict(),
            "series": {name: data.to_dict() for name, data in self.series.items()},
            "assessment": self.assessment.to_dict() if self.assessment else None,
        }


# =============================================================================
# GENERATOR
# =============================================================================

class CurvesGenerator:
    """Builds plot series from hydrostatic tables and GZ curves."""

    def __init__(
        self,
        hydrostatics: Optional[HydrostaticCalculator] = None,
        stability: Optional[StabilityCalculator] = None,
        criteria: Optional[StabilityCriteriaChecker] = None,
        default_points: int = DEFAULT_CURVE_POINTS,
    ):
        self.hydrostatics = hydrostatics or HydrostaticCalculator()
        self.stability = stability or StabilityCalculator(self.hydrostatics)
        self.criteria = criteria or StabilityCriteriaChecker()
        self.default_points = default_points

    # -------------------------------------------------------------------------
    # Draft sweeps
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_draft_range(min_draft: float, max_draft: float, points: int) -> List[float]:
        """Evenly spaced drafts including both ends."""
        errors = []
        if points < 2:
            errors.append(create_validation_error(
                "at least 2 draft points required", SOURCE,
                field="points", actual=points, expected=">= 2",
                code=ErrorCode.VAL_TOO_FEW_POINTS,
            ))
        if not max_draft > min_draft:
            errors.append(create_validation_error(
                "max draft must be greater than min draft", SOURCE,
                field="max_draft", actual=max_draft, expected=f"> {min_draft}",
            ))
        if errors:
            raise DraftRangeError(errors)
        return np.linspace(min_draft, max_draft, points).tolist()

    def generate_curve(
        self,
        geometry: HullGeometry,
        loadcase: Loadcase,
        curve_type,
        min_draft: float,
        max_draft: float,
        points: Optional[int] = None,
    ) -> CurveData:
        """Single hydrostatic curve against draft."""
        return self.generate_multiple_curves(
            geometry, loadcase, [curve_type], min_draft, max_draft, points
        )[CurveType(curve_type).value]

    def generate_multiple_curves(
        self,
        geometry: HullGeometry,
        loadcase: Loadcase,
        curve_types: Sequence,
        min_draft: float,
        max_draft: float,
        points: Optional[int] = None,
    ) -> Dict[str, CurveData]:
        """
        Several hydrostatic curves from one hydrostatic table.

        Returns:
            Mapping of curve type value to CurveData, in request order.
            Points whose value is undefined at a draft are omitted.
        """
        points = self.default_points if points is None else points
        types = [self._resolve_type(t) for t in curve_types]

        grid = prepare_grid(geometry)
        validate_loadcase(loadcase, require_kg=CurveType.GMT in types)
        validate_draft_range(grid, min_draft, max_draft, points)

        drafts = self.generate_draft_range(min_draft, max_draft, points)
        table = [self.hydrostatics.compute_for_grid(grid, loadcase, d) for d in drafts]

        curves: Dict[str, CurveData] = {}
        for curve_type in types:
            y_label, extract = _CURVE_SPECS[curve_type]
            series = []
            for result in table:
                value = extract(result)
                if value is not None:
                    series.append(CurvePoint(result.draft_m, value))
            curves[curve_type.value] = CurveData(
                curve_type=curve_type.value,
                x_label=DRAFT_LABEL,
                y_label=y_label,
                points=tuple(series),
            )

        logger.info(
            f"Generated {len(curves)} hydrostatic curve(s) for '{grid.name}' "
            f"over {points} drafts [{min_draft}, {max_draft}] m"
        )
        return curves

    # -------------------------------------------------------------------------
    # Bonjean curves
    # -------------------------------------------------------------------------

    def generate_bonjean_curves(self, geometry: HullGeometry) -> List[BonjeanCurve]:
        """Sectional area up to each waterline, for every station."""
        grid = prepare_grid(geometry)
        integ = self.hydrostatics.integrator

        curves = []
        for i in range(grid.n_stations):
            series = [CurvePoint(float(grid.zs[0]), 0.0)]
            for k in range(1, grid.n_waterlines):
                area = 2.0 * integ.integrate(grid.zs[: k + 1], grid.half_breadths[i, : k + 1])
                series.append(CurvePoint(float(grid.zs[k]), area))
            curves.append(BonjeanCurve(
                station_index=i,
                station_x=float(grid.xs[i]),
                points=tuple(series),
            ))

        logger.debug(f"Generated Bonjean curves for {len(curves)} stations of '{grid.name}'")
        return curves

    # -------------------------------------------------------------------------
    # Stability curves
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_gz_series(curve: StabilityCurve) -> Dict[str, CurveData]:
        """GZ and KN series against heel angle."""
        heel_label = "Heel Angle (deg)"
        gz = CurveData(
            curve_type="gz",
            x_label=heel_label,
            y_label="GZ (m)",
            points=tuple(CurvePoint(p.heel_deg, p.gz_m) for p in curve.points),
        )
        kn = CurveData(
            curve_type="kn",
            x_label=heel_label,
            y_label="KN (m)",
            points=tuple(CurvePoint(p.heel_deg, p.kn_m) for p in curve.points if p.kn_m is not None),
        )
        return {"gz": gz, "kn": kn}

    def generate_stability_curves(
        self,
        geometry: HullGeometry,
        loadcase: Loadcase,
        angle_min: float = 0.0,
        angle_max: float = 90.0,
        angle_step: float = 1.0,
        method=StabilityMethod.FULL_IMMERSION,
        draft: Optional[float] = None,
        check_criteria: bool = True,
    ) -> StabilityCurveSet:
        """GZ curve, its plot series and (optionally) the criteria assessment."""
        curve = self.stability.compute_gz_curve(
            geometry, loadcase, angle_min, angle_max, angle_step, method, draft
        )
        assessment = self.criteria.check_criteria(curve, loadcase) if check_criteria else None
        return StabilityCurveSet(
            curve=curve,
            series=self.generate_gz_series(curve),
            assessment=assessment,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _resolve_type(curve_type) -> CurveType:
        try:
            return CurveType(curve_type)
        except ValueError:
            valid = [t.value for t in CurveType]
            raise ValidationError([create_validation_error(
                f"unknown curve type {curve_type!r}; expected one of {valid}",
                SOURCE, field="curve_type", actual=curve_type, expected=valid,
            )]) from None
