"""
physics/ - Numerical integration, hydrostatics and trim.
"""

from .integration import (
    IntegrationRule,
    IntegrationResult,
    NumericalIntegrator,
    select_rule,
    integrate_with_rule,
    integrate,
    first_moment,
    second_moment,
)
from .hydrostatics import (
    HydroResult,
    TrimmedHydrostatics,
    HydrostaticCalculator,
)
from .trim import (
    TrimSolution,
    TrimSolver,
)

__all__ = [
    # Integration
    "IntegrationRule",
    "IntegrationResult",
    "NumericalIntegrator",
    "select_rule",
    "integrate_with_rule",
    "integrate",
    "first_moment",
    "second_moment",
    # Hydrostatics
    "HydroResult",
    "TrimmedHydrostatics",
    "HydrostaticCalculator",
    # Trim
    "TrimSolution",
    "TrimSolver",
]
