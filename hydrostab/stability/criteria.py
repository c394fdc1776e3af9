"""
hydrostab Stability Criteria

IMO A.749(18) general intact stability criteria evaluated on a GZ curve:

1. Area 0°-30°                        >= 0.055 m·rad
2. Area 0°-40° (or θf if less)        >= 0.090 m·rad
3. Area 30°-40° (or θf if less)       >= 0.030 m·rad
4. Angle of maximum GZ                >= 25°
5. Initial GMt                        >= 0.15 m
6. GZ at 30°                          >= 0.20 m

θf is the loadcase flooding angle. The overall verdict is the AND of
all six.
"""

from __future__ import annotations
from typing import List, Optional
import logging

from ..core.geometry import Loadcase
from ..core.validation import validate_loadcase
from .constants import IMOIntactCriteria, IMO_A749
from .results import StabilityCurve, CriterionResult, CriteriaAssessment, ImoCriterion
from .gz_analysis import area_under_curve, interpolate_gz, find_max_gz, covers

logger = logging.getLogger(__name__)


class StabilityCriteriaChecker:
    """
    Checks a GZ curve against intact stability criteria.

    Args:
        criteria: Threshold set, defaults to IMO A.749(18)
    """

    def __init__(self, criteria: IMOIntactCriteria = IMO_A749):
        self.criteria = criteria

    def check_criteria(self, curve: StabilityCurve, loadcase: Loadcase) -> CriteriaAssessment:
        """Evaluate all six criteria. An unstable curve is a valid input."""
        validate_loadcase(loadcase)
        c = self.criteria
        points = curve.points

        upper = c.area_upper_deg
        flood_note = ""
        if loadcase.flooding_angle_deg is not None and loadcase.flooding_angle_deg < upper:
            upper = loadcase.flooding_angle_deg
            flood_note = f"limited by flooding angle {upper:g}°"

        results: List[CriterionResult] = []

        # 1. Area 0-30
        results.append(self._minimum(
            ImoCriterion.AREA_0_30, "Area under GZ curve 0°-30°", "m·rad",
            c.area_0_30_min_m_rad, area_under_curve(points, 0.0, c.area_lower_deg),
            self._coverage_note(curve, c.area_lower_deg),
        ))

        # 2. Area 0-40 (or θf)
        results.append(self._minimum(
            ImoCriterion.AREA_0_40, f"Area under GZ curve 0°-{upper:g}°", "m·rad",
            c.area_0_40_min_m_rad, area_under_curve(points, 0.0, upper),
            self._join(flood_note, self._coverage_note(curve, upper)),
        ))

        # 3. Area 30-40 (or θf)
        if upper > c.area_lower_deg:
            area_30_40 = area_under_curve(points, c.area_lower_deg, upper)
            note = self._join(flood_note, self._coverage_note(curve, upper))
        else:
            area_30_40 = 0.0
            note = self._join(flood_note, f"no range between {c.area_lower_deg:g}° and {upper:g}°")
        results.append(self._minimum(
            ImoCriterion.AREA_30_40, f"Area under GZ curve {c.area_lower_deg:g}°-{upper:g}°", "m·rad",
            c.area_30_40_min_m_rad, area_30_40, note,
        ))

        # 4. Angle of maximum GZ
        _, angle_max = find_max_gz(points)
        results.append(self._minimum(
            ImoCriterion.ANGLE_MAX_GZ, "Angle of maximum GZ", "deg",
            c.angle_gz_max_min_deg, angle_max, "",
        ))

        # 5. Initial GMt
        results.append(self._minimum(
            ImoCriterion.INITIAL_GM, "Initial metacentric height GMt", "m",
            c.gm_min_m, curve.initial_gmt_m,
            "" if curve.initial_gmt_m is not None else "GMt unavailable",
        ))

        # 6. GZ at 30
        results.append(self._minimum(
            ImoCriterion.GZ_AT_30, f"GZ at {c.area_lower_deg:g}°", "m",
            c.gz_30_min_m, interpolate_gz(points, c.area_lower_deg),
            self._coverage_note(curve, c.area_lower_deg),
        ))

        all_passed = all(r.passed for r in results)
        passed = sum(1 for r in results if r.passed)
        if all_passed:
            summary = f"{c.standard}: all {len(results)} criteria passed"
        else:
            failed = ", ".join(r.criterion.value for r in results if not r.passed)
            summary = f"{c.standard}: {passed}/{len(results)} criteria passed; failed: {failed}"

        logger.info(f"Stability criteria check for '{loadcase.name}': {summary}")

        return CriteriaAssessment(
            standard=c.standard,
            criteria=tuple(results),
            all_passed=all_passed,
            summary=summary,
        )

    @staticmethod
    def _minimum(
        criterion: ImoCriterion,
        name: str,
        unit: str,
        required: float,
        actual: Optional[float],
        notes: str,
    ) -> CriterionResult:
        return CriterionResult(
            criterion=criterion,
            name=name,
            unit=unit,
            required=required,
            actual=actual,
            passed=actual is not None and actual >= required,
            notes=notes,
        )

    @staticmethod
    def _coverage_note(curve: StabilityCurve, angle_deg: float) -> str:
        if covers(curve.points, angle_deg):
            return ""
        return f"curve sampled only to {curve.points[-1].heel_deg:g}°"

    @staticmethod
    def _join(*notes: str) -> str:
        return "; ".join(n for n in notes if n)
