"""
hydrostab Hull Templates

Parametric offset tables with known analytic hydrostatics. Used as
benchmarks for the calculators and as seed geometry.

- Rectangular barge: V = L*B*T, KB = T/2, BMt = B²/(12T), Cb = 1
- Wigley hull: y = (B/2)(1 - ξ²)(1 - ζ²) below the design waterline,
  with ξ = 2x/L - 1 and ζ = (T - z)/T, and vertical topsides above it.
  Cb = 4/9.
"""

from __future__ import annotations
from typing import Optional

import numpy as np

from .geometry import HullGeometry


def rectangular_barge(
    length: float = 100.0,
    beam: float = 20.0,
    depth: float = 10.0,
    n_stations: int = 21,
    n_waterlines: int = 11,
    design_draft: Optional[float] = None,
    name: str = "rectangular_barge",
) -> HullGeometry:
    """
    Box-shaped hull, constant half-breadth B/2 everywhere.

    Stations are evenly spaced from 0 to length and waterlines from 0 to
    depth. design_draft defaults to half the depth.
    """
    xs = np.linspace(0.0, length, n_stations)
    zs = np.linspace(0.0, depth, n_waterlines)
    ys = np.full((n_stations, n_waterlines), beam / 2.0)

    return HullGeometry.from_grid(
        xs.tolist(),
        zs.tolist(),
        ys.tolist(),
        lpp=length,
        beam=beam,
        design_draft=design_draft if design_draft is not None else depth / 2.0,
        name=name,
    )


def wigley_hull(
    length: float = 100.0,
    beam: float = 10.0,
    draft: float = 6.25,
    depth: float = 10.0,
    n_stations: int = 21,
    n_waterlines: int = 17,
    name: str = "wigley",
) -> HullGeometry:
    """
    Classic Wigley parabolic hull.

    The defaults place a waterline exactly on the design draft
    (0.625 m spacing) so upright sections are sampled on a uniform grid.
    """
    xs = np.linspace(0.0, length, n_stations)
    zs = np.linspace(0.0, depth, n_waterlines)

    xi = 2.0 * xs / length - 1.0
    zeta = np.clip((draft - zs) / draft, 0.0, 1.0)

    # Outer product: longitudinal shape x vertical shape
    ys = (beam / 2.0) * np.outer(1.0 - xi ** 2, 1.0 - zeta ** 2)
    ys = np.maximum(ys, 0.0)

    return HullGeometry.from_grid(
        xs.tolist(),
        zs.tolist(),
        ys.tolist(),
        lpp=length,
        beam=beam,
        design_draft=draft,
        name=name,
    )
