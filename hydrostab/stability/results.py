"""
hydrostab Stability Results

Result dataclasses for GZ curves, criteria assessment and method
comparison.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import math

from .constants import StabilityMethod


def _round(value: Optional[float], digits: int) -> Optional[float]:
    return None if value is None else round(value, digits)


# =============================================================================
# GZ CURVE
# =============================================================================

@dataclass(frozen=True)
class StabilityPoint:
    """A single point on the GZ curve."""
    heel_deg: float  # Heel angle (degrees)
    gz_m: float  # Righting arm (meters)
    kn_m: Optional[float] = None  # Cross curve value GZ + KG·sin φ (meters)

    @property
    def heel_rad(self) -> float:
        return math.radians(self.heel_deg)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "heel_deg": round(self.heel_deg, 3),
            "heel_rad": round(self.heel_rad, 5),
            "gz_m": round(self.gz_m, 5),
            "kn_m": _round(self.kn_m, 5),
        }


@dataclass(frozen=True)
class StabilityCurve:
    """
    GZ curve for one loadcase at one draft.

    points is ordered by heel angle and never empty.
    """
    method: StabilityMethod
    points: Tuple[StabilityPoint, ...]

    # Floating condition
    draft_m: float
    displacement_kg: float
    kg_m: float
    initial_gmt_m: Optional[float]
    bmt_m: Optional[float]

    # Characteristic values
    max_gz_m: float
    angle_at_max_gz_deg: float
    angle_of_vanishing_stability_deg: Optional[float]  # None when GZ never returns to zero

    warnings: Tuple[str, ...] = ()
    calculation_time_ms: int = field(default=0, compare=False)

    @property
    def angles_deg(self) -> List[float]:
        return [p.heel_deg for p in self.points]

    @property
    def gz_values_m(self) -> List[float]:
        return [p.gz_m for p in self.points]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "points": [p.to_dict() for p in self.points],
            "draft_m": round(self.draft_m, 4),
            "displacement_kg": round(self.displacement_kg, 1),
            "kg_m": round(self.kg_m, 4),
            "initial_gmt_m": _round(self.initial_gmt_m, 4),
            "bmt_m": _round(self.bmt_m, 4),
            "max_gz_m": round(self.max_gz_m, 4),
            "angle_at_max_gz_deg": round(self.angle_at_max_gz_deg, 2),
            "angle_of_vanishing_stability_deg": _round(self.angle_of_vanishing_stability_deg, 2),
            "warnings": list(self.warnings),
            "calculation_time_ms": self.calculation_time_ms,
        }


# =============================================================================
# CRITERIA
# =============================================================================

class ImoCriterion(str, Enum):
    """The six A.749(18) general intact criteria, in check order."""
    AREA_0_30 = "area_0_30"
    AREA_0_40 = "area_0_40"
    AREA_30_40 = "area_30_40"
    ANGLE_MAX_GZ = "angle_max_gz"
    INITIAL_GM = "initial_gm"
    GZ_AT_30 = "gz_at_30"


@dataclass(frozen=True)
class CriterionResult:
    """Outcome of a single criterion."""
    criterion: ImoCriterion
    name: str
    unit: str
    required: float
    actual: Optional[float]
    passed: bool
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "criterion": self.criterion.value,
            "name": self.name,
            "unit": self.unit,
            "required": self.required,
            "actual": _round(self.actual, 4),
            "passed": self.passed,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class CriteriaAssessment:
    """All six criteria and the overall verdict."""
    standard: str
    criteria: Tuple[CriterionResult, ...]
    all_passed: bool
    summary: str

    @property
    def passed_count(self) -> int:
        return sum(1 for c in self.criteria if c.passed)

    @property
    def failed(self) -> List[CriterionResult]:
        return [c for c in self.criteria if not c.passed]

    def get(self, criterion: ImoCriterion) -> CriterionResult:
        criterion = ImoCriterion(criterion)
        for result in self.criteria:
            if result.criterion is criterion:
                return result
        raise KeyError(criterion)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "standard": self.standard,
            "criteria": [c.to_dict() for c in self.criteria],
            "all_passed": self.all_passed,
            "passed_count": self.passed_count,
            "summary": self.summary,
        }


# =============================================================================
# METHOD COMPARISON
# =============================================================================

@dataclass(frozen=True)
class MethodAgreement:
    """Deviation between wall-sided and full-immersion GZ over a small-angle range."""
    max_angle_deg: float
    max_deviation_m: float
    angle_of_max_deviation_deg: float
    within_tolerance: bool
    rtol: float
    atol_m: float
    wall_sided: StabilityCurve
    full_immersion: StabilityCurve

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_angle_deg": self.max_angle_deg,
            "max_deviation_m": round(self.max_deviation_m, 6),
            "angle_of_max_deviation_deg": self.angle_of_max_deviation_deg,
            "within_tolerance": self.within_tolerance,
            "rtol": self.rtol,
            "atol_m": self.atol_m,
        }
