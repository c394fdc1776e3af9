"""
errors/ - Error taxonomy and exception hierarchy.
"""

from .taxonomy import (
    ErrorSeverity,
    ErrorCategory,
    ErrorCode,
    EngineError,
    create_validation_error,
    create_bounds_error,
    create_numerical_warning,
    create_config_error,
    summarize,
)

from .exceptions import (
    HydrostabError,
    ValidationError,
    IntegrationInputError,
    GeometryValidationError,
    LoadcaseValidationError,
    DraftRangeError,
    ConfigurationError,
)

__all__ = [
    # Taxonomy
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorCode",
    "EngineError",
    "create_validation_error",
    "create_bounds_error",
    "create_numerical_warning",
    "create_config_error",
    "summarize",
    # Exceptions
    "HydrostabError",
    "ValidationError",
    "IntegrationInputError",
    "GeometryValidationError",
    "LoadcaseValidationError",
    "DraftRangeError",
    "ConfigurationError",
]
