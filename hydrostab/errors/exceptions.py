"""
errors/exceptions.py - Exception hierarchy

All exceptions carry the structured EngineError records that caused them.
Validation exceptions also derive from ValueError so callers that only
know the standard library can still catch them.
"""

from __future__ import annotations
from typing import List, Optional

from .taxonomy import EngineError, summarize


class HydrostabError(Exception):
    """Base class for every error raised by the engine."""

    def __init__(self, errors: List[EngineError], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message or summarize(self.errors))

    def to_dict(self):
        return {
            "type": type(self).__name__,
            "message": str(self),
            "errors": [e.to_dict() for e in self.errors],
        }


class ValidationError(HydrostabError, ValueError):
    """Inputs rejected before any numeric work."""


class IntegrationInputError(ValidationError):
    """Sample arrays unusable by the numerical integrator."""


class GeometryValidationError(ValidationError):
    """Hull geometry failed structural validation."""


class LoadcaseValidationError(ValidationError):
    """Loadcase values are missing or out of range."""


class DraftRangeError(ValidationError):
    """A draft (or draft range) lies outside the hull's waterline range."""


class ConfigurationError(HydrostabError):
    """Engine configuration could not be loaded or is inconsistent."""
