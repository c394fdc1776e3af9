"""
hydrostab Hull Data Model

Offset-table hull definition and load condition.

Coordinates (SI, meters):
- x: longitudinal, station positions
- z: vertical, measured up from the baseline
- y: half-breadth, measured out from the centerline (starboard half)

The hull is symmetric about the centerline, so only the starboard
half-breadths are stored.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from .constants import SEAWATER_DENSITY_KG_M3, DRAFT_TOL_M


# =============================================================================
# OFFSET TABLE
# =============================================================================

@dataclass(frozen=True)
class Station:
    """Transverse section position along the hull."""
    index: int
    x: float  # Longitudinal position (m)


@dataclass(frozen=True)
class Waterline:
    """Horizontal plane at a height above the baseline."""
    index: int
    z: float  # Height above baseline (m)


@dataclass(frozen=True)
class Offset:
    """Half-breadth at one station/waterline intersection."""
    station_index: int
    waterline_index: int
    half_breadth: float  # Distance from centerline (m)


@dataclass(frozen=True)
class HullGeometry:
    """
    Discretized hull surface.

    The offset table must be a dense grid: one Offset for every
    (station, waterline) pair. Use validation.prepare_grid() to check it
    and obtain the array form used by the calculators.
    """
    stations: Tuple[Station, ...]
    waterlines: Tuple[Waterline, ...]
    offsets: Tuple[Offset, ...]

    # Principal dimensions; derived from the offsets when omitted
    lpp: Optional[float] = None  # Length between perpendiculars (m)
    beam: Optional[float] = None  # Moulded beam (m)
    design_draft: Optional[float] = None  # (m)

    name: str = "hull"

    def __post_init__(self):
        # Accept lists from callers but store immutable tuples
        object.__setattr__(self, "stations", tuple(self.stations))
        object.__setattr__(self, "waterlines", tuple(self.waterlines))
        object.__setattr__(self, "offsets", tuple(self.offsets))

    @classmethod
    def from_grid(
        cls,
        xs: Sequence[float],
        zs: Sequence[float],
        half_breadths: Sequence[Sequence[float]],
        lpp: Optional[float] = None,
        beam: Optional[float] = None,
        design_draft: Optional[float] = None,
        name: str = "hull",
    ) -> "HullGeometry":
        """
        Build geometry from plain arrays.

        Args:
            xs: Station positions, one per row of half_breadths
            zs: Waterline heights, one per column of half_breadths
            half_breadths: Rows = stations, columns = waterlines
        """
        stations = tuple(Station(i, float(x)) for i, x in enumerate(xs))
        waterlines = tuple(Waterline(j, float(z)) for j, z in enumerate(zs))
        offsets = tuple(
            Offset(i, j, float(y))
            for i, row in enumerate(half_breadths)
            for j, y in enumerate(row)
        )
        return cls(
            stations=stations,
            waterlines=waterlines,
            offsets=offsets,
            lpp=lpp,
            beam=beam,
            design_draft=design_draft,
            name=name,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "lpp": self.lpp,
            "beam": self.beam,
            "design_draft": self.design_draft,
            "stations": [{"index": s.index, "x": s.x} for s in self.stations],
            "waterlines": [{"index": w.index, "z": w.z} for w in self.waterlines],
            "offsets": [
                [o.station_index, o.waterline_index, o.half_breadth]
                for o in self.offsets
            ],
        }


# =============================================================================
# VALIDATED GRID
# =============================================================================

@dataclass(frozen=True, eq=False)
class HullGrid:
    """
    Validated, read-only array form of a HullGeometry.

    half_breadths has shape (n_stations, n_waterlines) ordered by
    station index then waterline index.
    """
    xs: np.ndarray
    zs: np.ndarray
    half_breadths: np.ndarray
    lpp: float
    beam: float
    design_draft: Optional[float] = None
    name: str = "hull"

    @property
    def n_stations(self) -> int:
        return len(self.xs)

    @property
    def n_waterlines(self) -> int:
        return len(self.zs)

    @property
    def z_min(self) -> float:
        return float(self.zs[0])

    @property
    def z_max(self) -> float:
        return float(self.zs[-1])

    @property
    def x_min(self) -> float:
        return float(self.xs[0])

    @property
    def x_max(self) -> float:
        return float(self.xs[-1])

    @property
    def midship_x(self) -> float:
        return 0.5 * (self.x_min + self.x_max)

    @property
    def midship_index(self) -> int:
        """Station nearest mid-length (lower index on a tie)."""
        return int(np.argmin(np.abs(self.xs - self.midship_x)))

    def waterline_half_breadths(self, z: float) -> np.ndarray:
        """Half-breadth of every station at height z, linear between waterlines."""
        zs = self.zs
        k = int(np.searchsorted(zs, z, side="left"))
        if k < len(zs) and abs(zs[k] - z) <= DRAFT_TOL_M:
            return self.half_breadths[:, k].copy()
        if k == 0:
            return self.half_breadths[:, 0].copy()
        if k >= len(zs):
            return self.half_breadths[:, -1].copy()
        t = (z - zs[k - 1]) / (zs[k] - zs[k - 1])
        return self.half_breadths[:, k - 1] + t * (self.half_breadths[:, k] - self.half_breadths[:, k - 1])

    def waterline_bracket(self, z: float) -> Tuple[int, float]:
        """
        Locate a height in the waterline table.

        Returns (k, s): k is the highest waterline at or below z and s is
        the fraction of the way from waterline k to waterline k + 1. s is
        0 when z lies on a waterline or at the top of the table.
        """
        zs = self.zs
        k = int(np.searchsorted(zs, z + DRAFT_TOL_M, side="right")) - 1
        k = min(max(k, 0), len(zs) - 1)
        if k == len(zs) - 1:
            return k, 0.0
        s = (z - zs[k]) / (zs[k + 1] - zs[k])
        return k, min(max(s, 0.0), 1.0)


# =============================================================================
# LOAD CONDITION
# =============================================================================

@dataclass(frozen=True)
class Loadcase:
    """
    Load condition applied to a hull.

    KG is only required for GM and GZ results. LCG defaults to midship
    and TCG to the centerline.
    """
    rho: float = SEAWATER_DENSITY_KG_M3  # Water density (kg/m³)
    kg: Optional[float] = None  # Vertical center of gravity above baseline (m)
    lcg: Optional[float] = None  # Longitudinal center of gravity (m)
    tcg: Optional[float] = None  # Transverse center of gravity, + starboard (m)
    flooding_angle_deg: Optional[float] = None  # Downflooding angle (deg)
    name: str = "loadcase"

    @property
    def tcg_or_centerline(self) -> float:
        return self.tcg if self.tcg is not None else 0.0

    def lcg_or_midship(self, grid: HullGrid) -> float:
        return self.lcg if self.lcg is not None else grid.midship_x

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "rho": self.rho,
            "kg": self.kg,
            "lcg": self.lcg,
            "tcg": self.tcg,
            "flooding_angle_deg": self.flooding_angle_deg,
        }
