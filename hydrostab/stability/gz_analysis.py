"""
hydrostab GZ Curve Analysis

Read-only helpers over a sequence of StabilityPoint ordered by heel:
interpolation, maximum, vanishing angle and area under the curve.
"""

from __future__ import annotations
from typing import Optional, Sequence, Tuple
import math

from .results import StabilityPoint


def interpolate_gz(curve: Sequence[StabilityPoint], target_deg: float) -> float:
    """
    GZ at an angle by linear interpolation.

    Outside the sampled range the nearest end value is returned.
    """
    if not curve:
        return 0.0

    if target_deg <= curve[0].heel_deg:
        return curve[0].gz_m
    if target_deg >= curve[-1].heel_deg:
        return curve[-1].gz_m

    for below, above in zip(curve, curve[1:]):
        if below.heel_deg <= target_deg <= above.heel_deg:
            span = above.heel_deg - below.heel_deg
            if span <= 0:
                return below.gz_m
            t = (target_deg - below.heel_deg) / span
            return below.gz_m + t * (above.gz_m - below.gz_m)

    return curve[-1].gz_m


def find_max_gz(curve: Sequence[StabilityPoint]) -> Tuple[float, float]:
    """Maximum GZ and its angle; the first sample wins a tie."""
    if not curve:
        return 0.0, 0.0

    max_point = curve[0]
    for p in curve[1:]:
        if p.gz_m > max_point.gz_m:
            max_point = p
    return max_point.gz_m, max_point.heel_deg


def find_vanishing_angle(curve: Sequence[StabilityPoint]) -> Optional[float]:
    """
    Angle where GZ returns to zero after being positive.

    Returns None when GZ never crosses back within the sampled range.
    """
    found_positive = False
    for i, p in enumerate(curve):
        if p.gz_m > 0:
            found_positive = True
        elif found_positive and p.gz_m <= 0:
            # Interpolate to find exact crossing
            prev = curve[i - 1]
            if prev.gz_m != p.gz_m:
                t = prev.gz_m / (prev.gz_m - p.gz_m)
                return prev.heel_deg + t * (p.heel_deg - prev.heel_deg)
            return p.heel_deg
    return None


def area_under_curve(curve: Sequence[StabilityPoint], start_deg: float, end_deg: float) -> float:
    """
    Area under the GZ curve between two angles, in meter-radians.

    Trapezoidal over the curve's own samples, with interpolated points at
    limits that fall between samples. Limits beyond the sampled range are
    cut back to it; the area is signed.
    """
    if not curve:
        return 0.0

    start_deg = max(start_deg, curve[0].heel_deg)
    end_deg = min(end_deg, curve[-1].heel_deg)
    if end_deg <= start_deg:
        return 0.0

    angles = [start_deg]
    values = [interpolate_gz(curve, start_deg)]
    for p in curve:
        if start_deg < p.heel_deg < end_deg:
            angles.append(p.heel_deg)
            values.append(p.gz_m)
    angles.append(end_deg)
    values.append(interpolate_gz(curve, end_deg))

    area = 0.0
    for i in range(1, len(angles)):
        d_rad = math.radians(angles[i] - angles[i - 1])
        area += 0.5 * (values[i] + values[i - 1]) * d_rad
    return area


def covers(curve: Sequence[StabilityPoint], angle_deg: float) -> bool:
    """True when angle_deg lies inside the sampled range."""
    return bool(curve) and curve[0].heel_deg <= angle_deg <= curve[-1].heel_deg
