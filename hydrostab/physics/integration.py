"""
hydrostab Numerical Integration

Definite integrals of sampled data, used for every area, volume and
moment in the engine.

Rule selection (select_rule):
- Uniform spacing, odd point count  -> Simpson's 1/3 rule
- Uniform spacing, even point count -> Simpson on all but the last
  interval, trapezoid on the last
- Irregular spacing                 -> trapezoidal rule

Spacing is uniform when every interval matches the first to within a
relative tolerance.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple
import logging

import numpy as np

from ..core.constants import SPACING_RTOL
from ..errors import ErrorCode, IntegrationInputError, create_validation_error

logger = logging.getLogger(__name__)

SOURCE = "physics.integration"


class IntegrationRule(str, Enum):
    """Quadrature rule applied to a sample set."""
    SIMPSON = "simpson"
    COMPOSITE_SIMPSON = "composite_simpson"
    TRAPEZOIDAL = "trapezoidal"


@dataclass(frozen=True)
class IntegrationResult:
    """Integral value tagged with the rule that produced it."""
    value: float
    rule: IntegrationRule
    points: int


# =============================================================================
# RULE KERNELS
# =============================================================================

def _simpson(x: np.ndarray, y: np.ndarray) -> float:
    """Simpson's 1/3 rule; assumes uniform spacing and an odd count."""
    h = (x[-1] - x[0]) / (len(x) - 1)
    total = y[0] + y[-1] + 4.0 * y[1:-1:2].sum() + 2.0 * y[2:-1:2].sum()
    return float(h / 3.0 * total)


def _trapezoidal(x: np.ndarray, y: np.ndarray) -> float:
    return float(np.sum(0.5 * (y[1:] + y[:-1]) * np.diff(x)))


def _composite_simpson(x: np.ndarray, y: np.ndarray) -> float:
    return _simpson(x[:-1], y[:-1]) + _trapezoidal(x[-2:], y[-2:])


_KERNELS = {
    IntegrationRule.SIMPSON: _simpson,
    IntegrationRule.COMPOSITE_SIMPSON: _composite_simpson,
    IntegrationRule.TRAPEZOIDAL: _trapezoidal,
}


# =============================================================================
# INTEGRATOR
# =============================================================================

class NumericalIntegrator:
    """
    Integrates y(x) samples with automatic rule selection.

    Args:
        spacing_rtol: Relative tolerance for treating spacing as uniform
    """

    def __init__(self, spacing_rtol: float = SPACING_RTOL):
        self.spacing_rtol = spacing_rtol

    def _prepare(self, x: Sequence[float], y: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
        xa = np.asarray(x, dtype=float).ravel()
        ya = np.asarray(y, dtype=float).ravel()

        if len(xa) != len(ya):
            raise IntegrationInputError([create_validation_error(
                f"x and y must have equal length ({len(xa)} != {len(ya)})",
                SOURCE, field="y", actual=len(ya), expected=len(xa),
            )])
        if len(xa) < 2:
            raise IntegrationInputError([create_validation_error(
                "at least 2 points required",
                SOURCE, field="x", actual=len(xa), expected=">= 2",
                code=ErrorCode.VAL_TOO_FEW_POINTS,
            )])
        if not (np.all(np.isfinite(xa)) and np.all(np.isfinite(ya))):
            raise IntegrationInputError([create_validation_error(
                "samples must be finite",
                SOURCE, field="x", code=ErrorCode.VAL_NOT_FINITE,
            )])
        if np.any(np.diff(xa) <= 0):
            raise IntegrationInputError([create_validation_error(
                "x must be strictly increasing",
                SOURCE, field="x", code=ErrorCode.VAL_NOT_INCREASING,
            )])
        return xa, ya

    def is_uniform(self, x: Sequence[float]) -> bool:
        """True when every interval matches the first within spacing_rtol."""
        dx = np.diff(np.asarray(x, dtype=float))
        if len(dx) == 0:
            return False
        return bool(np.all(np.abs(dx - dx[0]) <= self.spacing_rtol * abs(dx[0])))

    def select_rule(self, x: Sequence[float]) -> IntegrationRule:
        """Choose the quadrature rule for a set of abscissae."""
        n = len(x)
        if n >= 3 and self.is_uniform(x):
            return IntegrationRule.SIMPSON if n % 2 == 1 else IntegrationRule.COMPOSITE_SIMPSON
        return IntegrationRule.TRAPEZOIDAL

    def integrate_with_rule(
        self,
        x: Sequence[float],
        y: Sequence[float],
        rule: Optional[IntegrationRule] = None,
    ) -> IntegrationResult:
        """
        Integrate y over x.

        Args:
            x: Strictly increasing abscissae
            y: Ordinates, same length as x
            rule: Force a rule instead of selecting one

        Raises:
            IntegrationInputError: Bad samples, or a forced rule whose
                preconditions the samples do not meet
        """
        xa, ya = self._prepare(x, y)
        n = len(xa)

        if rule is None:
            rule = self.select_rule(xa)
        else:
            rule = IntegrationRule(rule)
            if rule is not IntegrationRule.TRAPEZOIDAL:
                problems = []
                if n < 3:
                    problems.append(f"{rule.value} needs at least 3 points, got {n}")
                elif not self.is_uniform(xa):
                    problems.append(f"{rule.value} needs uniform spacing")
                elif rule is IntegrationRule.SIMPSON and n % 2 == 0:
                    problems.append(f"simpson needs an odd number of points, got {n}")
                if problems:
                    raise IntegrationInputError([create_validation_error(
                        problems[0], SOURCE, field="rule", actual=rule.value,
                    )])

        value = _KERNELS[rule](xa, ya)
        return IntegrationResult(value=value, rule=rule, points=n)

    def integrate(self, x: Sequence[float], y: Sequence[float]) -> float:
        """∫ y dx"""
        return self.integrate_with_rule(x, y).value

    def first_moment(self, x: Sequence[float], y: Sequence[float]) -> float:
        """∫ x·y dx"""
        xa, ya = self._prepare(x, y)
        return self.integrate_with_rule(xa, xa * ya).value

    def second_moment(self, x: Sequence[float], y: Sequence[float]) -> float:
        """∫ x²·y dx"""
        xa, ya = self._prepare(x, y)
        return self.integrate_with_rule(xa, xa * xa * ya).value


# Module-level convenience API on a default integrator
_default = NumericalIntegrator()


def select_rule(x: Sequence[float]) -> IntegrationRule:
    return _default.select_rule(x)


def integrate_with_rule(
    x: Sequence[float], y: Sequence[float], rule: Optional[IntegrationRule] = None
) -> IntegrationResult:
    return _default.integrate_with_rule(x, y, rule)


def integrate(x: Sequence[float], y: Sequence[float]) -> float:
    return _default.integrate(x, y)


def first_moment(x: Sequence[float], y: Sequence[float]) -> float:
    return _default.first_moment(x, y)


def second_moment(x: Sequence[float], y: Sequence[float]) -> float:
    return _default.second_moment(x, y)
