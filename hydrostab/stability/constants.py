"""
hydrostab Stability Constants

IMO intact stability thresholds and the fixed set of GZ calculation
methods.

References:
- IMO Resolution A.749(18), Code on Intact Stability, 3.1.2 (general
  criteria for cargo and passenger ships)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple


# =============================================================================
# IMO A.749(18) GENERAL INTACT CRITERIA
# =============================================================================

@dataclass(frozen=True)
class IMOIntactCriteria:
    """
    IMO A.749(18) general intact stability criteria.

    Areas are in meter-radians. Criteria on 40° use the flooding angle
    instead when the loadcase floods below 40°.
    """
    standard: str = "IMO A.749(18)"

    # Area under GZ curve criteria (meter-radians)
    area_0_30_min_m_rad: float = 0.055  # Area from 0° to 30°
    area_0_40_min_m_rad: float = 0.090  # Area from 0° to 40° (or θf)
    area_30_40_min_m_rad: float = 0.030  # Area from 30° to 40° (or θf)

    # GZ curve criteria
    angle_gz_max_min_deg: float = 25.0  # Minimum angle of maximum GZ (degrees)
    gz_30_min_m: float = 0.20  # Minimum GZ at 30° heel (meters)

    # Metacentric height
    gm_min_m: float = 0.15  # Minimum initial GMt (meters)

    # Angles bounding the area criteria
    area_lower_deg: float = 30.0
    area_upper_deg: float = 40.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "standard": self.standard,
            "area_0_30_min_m_rad": self.area_0_30_min_m_rad,
            "area_0_40_min_m_rad": self.area_0_40_min_m_rad,
            "area_30_40_min_m_rad": self.area_30_40_min_m_rad,
            "angle_gz_max_min_deg": self.angle_gz_max_min_deg,
            "gz_30_min_m": self.gz_30_min_m,
            "gm_min_m": self.gm_min_m,
        }


# Singleton instance
IMO_A749 = IMOIntactCriteria()


# =============================================================================
# GZ METHODS
# =============================================================================

class StabilityMethod(str, Enum):
    """GZ calculation method."""
    WALL_SIDED = "wall_sided"
    FULL_IMMERSION = "full_immersion"


@dataclass(frozen=True)
class MethodDescriptor:
    """Static description of a GZ method."""
    method: StabilityMethod
    name: str
    description: str
    max_recommended_angle_deg: float
    speed: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "name": self.name,
            "description": self.description,
            "max_recommended_angle_deg": self.max_recommended_angle_deg,
            "speed": self.speed,
        }


# Wall-sided formula is reliable while the sides near the waterline stay vertical
WALL_SIDED_VALID_DEG = 20.0
FULL_IMMERSION_VALID_DEG = 180.0

METHOD_DESCRIPTORS: Tuple[MethodDescriptor, ...] = (
    MethodDescriptor(
        method=StabilityMethod.WALL_SIDED,
        name="Wall-Sided Formula",
        description=(
            "GZ = (GMt + ½·BMt·tan²φ)·sin φ from upright hydrostatics. "
            "Exact for vertical sides; use at small heel angles."
        ),
        max_recommended_angle_deg=WALL_SIDED_VALID_DEG,
        speed="fast",
    ),
    MethodDescriptor(
        method=StabilityMethod.FULL_IMMERSION,
        name="Full Immersion/Emersion",
        description=(
            "Rotates every section, clips it at an equal-volume heeled "
            "waterline and integrates the immersed centroid. Valid to 180°."
        ),
        max_recommended_angle_deg=FULL_IMMERSION_VALID_DEG,
        speed="moderate",
    ),
)


def get_available_methods() -> Tuple[MethodDescriptor, ...]:
    """All supported GZ methods."""
    return METHOD_DESCRIPTORS


def get_method_descriptor(method: StabilityMethod) -> MethodDescriptor:
    method = StabilityMethod(method)
    for descriptor in METHOD_DESCRIPTORS:
        if descriptor.method is method:
            return descriptor
    raise KeyError(method)


# =============================================================================
# METHOD AGREEMENT
# =============================================================================

# Wall-sided and full-immersion GZ must agree below this heel
METHOD_AGREEMENT_MAX_DEG = 15.0
METHOD_AGREEMENT_RTOL = 0.02
METHOD_AGREEMENT_ATOL_M = 0.005
