"""
stability/ - GZ curves and intact stability criteria.
"""

from .constants import (
    IMOIntactCriteria,
    IMO_A749,
    StabilityMethod,
    MethodDescriptor,
    get_available_methods,
    get_method_descriptor,
)
from .results import (
    StabilityPoint,
    StabilityCurve,
    ImoCriterion,
    CriterionResult,
    CriteriaAssessment,
    MethodAgreement,
)
from .gz_analysis import (
    interpolate_gz,
    find_max_gz,
    find_vanishing_angle,
    area_under_curve,
)
from .calculators import (
    StabilityCalculator,
    heel_angles,
    wall_sided_gz,
)
from .criteria import StabilityCriteriaChecker

__all__ = [
    # Constants
    "IMOIntactCriteria",
    "IMO_A749",
    "StabilityMethod",
    "MethodDescriptor",
    "get_available_methods",
    "get_method_descriptor",
    # Results
    "StabilityPoint",
    "StabilityCurve",
    "ImoCriterion",
    "CriterionResult",
    "CriteriaAssessment",
    "MethodAgreement",
    # Analysis
    "interpolate_gz",
    "find_max_gz",
    "find_vanishing_angle",
    "area_under_curve",
    # Calculators
    "StabilityCalculator",
    "heel_angles",
    "wall_sided_gz",
    "StabilityCriteriaChecker",
]
