"""
curves/ - Plot-ready hydrostatic, Bonjean and stability series.
"""

from .generator import (
    CurveType,
    CurvePoint,
    CurveData,
    BonjeanCurve,
    StabilityCurveSet,
    CurvesGenerator,
)

__all__ = [
    "CurveType",
    "CurvePoint",
    "CurveData",
    "BonjeanCurve",
    "StabilityCurveSet",
    "CurvesGenerator",
]
