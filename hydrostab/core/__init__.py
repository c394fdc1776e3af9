"""
core/ - Hull data model, validation and hull templates.

Every calculator consumes a validated HullGrid built from a HullGeometry
and a Loadcase.
"""

from .constants import (
    SEAWATER_DENSITY_KG_M3,
    FRESHWATER_DENSITY_KG_M3,
    GRAVITY_M_S2,
)
from .geometry import (
    Station,
    Waterline,
    Offset,
    HullGeometry,
    HullGrid,
    Loadcase,
)
from .validation import (
    validate_geometry,
    validate_loadcase,
    validate_draft,
    prepare_grid,
)
from .templates import (
    rectangular_barge,
    wigley_hull,
)

__all__ = [
    # Constants
    "SEAWATER_DENSITY_KG_M3",
    "FRESHWATER_DENSITY_KG_M3",
    "GRAVITY_M_S2",
    # Geometry
    "Station",
    "Waterline",
    "Offset",
    "HullGeometry",
    "HullGrid",
    "Loadcase",
    # Validation
    "validate_geometry",
    "validate_loadcase",
    "validate_draft",
    "prepare_grid",
    # Templates
    "rectangular_barge",
    "wigley_hull",
]
