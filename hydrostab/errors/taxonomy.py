"""
errors/taxonomy.py - Error classification system

Structured error records attached to every exception the engine raises.
Validation collects all issues it finds into a list of EngineError records
before raising, so callers can report every problem at once.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories."""
    # Validation errors (1xxx)
    VALIDATION = "validation"

    # Bounds errors (3xxx)
    BOUNDS = "bounds"

    # Numerical errors (4xxx)
    NUMERICAL = "numerical"

    # Configuration errors (6xxx)
    CONFIGURATION = "configuration"


class ErrorCode(Enum):
    """Specific error codes."""

    # Validation (1xxx)
    VAL_FAILED = 1001
    VAL_MISSING_FIELD = 1003
    VAL_GRID_INCOMPLETE = 1010
    VAL_DUPLICATE_INDEX = 1011
    VAL_NOT_INCREASING = 1012
    VAL_NEGATIVE_VALUE = 1013
    VAL_NOT_FINITE = 1014
    VAL_TOO_FEW_POINTS = 1015

    # Bounds (3xxx)
    BND_MINIMUM = 3002
    BND_MAXIMUM = 3003

    # Numerical (4xxx)
    NUM_DEGENERATE = 4004

    # System (6xxx)
    SYS_CONFIG = 6001


@dataclass
class EngineError:
    """Structured error representation."""

    code: ErrorCode = ErrorCode.VAL_FAILED
    category: ErrorCategory = ErrorCategory.VALIDATION
    severity: ErrorSeverity = ErrorSeverity.ERROR

    message: str = ""

    # Context
    source: str = ""  # Module/validator that raised
    field: Optional[str] = None  # Input field the error refers to
    row: Optional[int] = None  # Station index, where applicable
    column: Optional[int] = None  # Waterline index, where applicable

    # Values
    actual_value: Any = None
    expected_value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "source": self.source,
            "field": self.field,
            "row": self.row,
            "column": self.column,
            "actual_value": self.actual_value,
            "expected_value": self.expected_value,
        }

    def __str__(self) -> str:
        location = ""
        if self.row is not None or self.column is not None:
            location = f" (station={self.row}, waterline={self.column})"
        prefix = f"{self.field}: " if self.field else ""
        return f"{prefix}{self.message}{location}"


def create_validation_error(
    message: str,
    source: str,
    field: str = None,
    actual: Any = None,
    expected: Any = None,
    code: ErrorCode = ErrorCode.VAL_FAILED,
    row: int = None,
    column: int = None,
) -> EngineError:
    """Factory for validation errors."""
    return EngineError(
        code=code,
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.ERROR,
        message=message,
        source=source,
        field=field,
        row=row,
        column=column,
        actual_value=actual,
        expected_value=expected,
    )


def create_bounds_error(
    message: str,
    source: str,
    field: str,
    actual: Any,
    min_val: Any = None,
    max_val: Any = None,
) -> EngineError:
    """Factory for bounds errors."""
    code = ErrorCode.BND_MINIMUM if min_val is not None and actual <= min_val else ErrorCode.BND_MAXIMUM

    return EngineError(
        code=code,
        category=ErrorCategory.BOUNDS,
        severity=ErrorSeverity.ERROR,
        message=message,
        source=source,
        field=field,
        actual_value=actual,
        expected_value=f"({min_val}, {max_val}]",
    )


def create_numerical_warning(
    message: str,
    source: str,
    field: str = None,
    code: ErrorCode = ErrorCode.NUM_DEGENERATE,
) -> EngineError:
    """Factory for non-fatal numerical issues (degenerate ratios, non-convergence)."""
    return EngineError(
        code=code,
        category=ErrorCategory.NUMERICAL,
        severity=ErrorSeverity.WARNING,
        message=message,
        source=source,
        field=field,
    )


def create_config_error(message: str, source: str, field: str = None, actual: Any = None) -> EngineError:
    """Factory for configuration errors."""
    return EngineError(
        code=ErrorCode.SYS_CONFIG,
        category=ErrorCategory.CONFIGURATION,
        severity=ErrorSeverity.ERROR,
        message=message,
        source=source,
        field=field,
        actual_value=actual,
    )


def summarize(errors: List[EngineError]) -> str:
    """One-line human readable summary of a list of errors."""
    if not errors:
        return "no errors"
    if len(errors) == 1:
        return str(errors[0])
    return f"{len(errors)} errors: " + "; ".join(str(e) for e in errors)
