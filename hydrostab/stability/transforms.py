"""
hydrostab Section Transforms

Geometry operations on transverse section polygons for large-angle
stability: build, rotate, clip and measure.

Polygons are arrays of shape (..., N, 2) holding (Y, Z) vertices, so a
whole hull (one polygon per station) is processed in one call. All
sections of a hull share the same vertex count.

Heel convention: positive heel immerses the starboard side (+y).
    Y =  y·cos φ + z·sin φ
    Z = -y·sin φ + z·cos φ
"""

from __future__ import annotations
from typing import Tuple

import numpy as np

from ..core.constants import DEGENERATE_EPS


def section_polygons(zs: np.ndarray, half_breadths: np.ndarray) -> np.ndarray:
    """
    Closed section outlines for every station.

    Starboard offsets run keel to deck, then port offsets run deck to
    keel, giving a counter-clockwise ring in the (y, z) plane.

    Args:
        zs: Waterline heights, shape (W,)
        half_breadths: Shape (S, W)

    Returns:
        Array of shape (S, 2W, 2)
    """
    ys = np.atleast_2d(half_breadths)
    n_sections = ys.shape[0]
    z_row = np.broadcast_to(zs, ys.shape)

    starboard = np.stack([ys, z_row], axis=-1)
    port = np.stack([-ys[:, ::-1], z_row[:, ::-1]], axis=-1)
    polys = np.concatenate([starboard, port], axis=1)
    return polys.reshape(n_sections, -1, 2)


def rotate(polys: np.ndarray, heel_rad: float) -> np.ndarray:
    """Rotate polygons into the heeled frame about the keel point."""
    c, s = np.cos(heel_rad), np.sin(heel_rad)
    y = polys[..., 0]
    z = polys[..., 1]
    return np.stack([y * c + z * s, -y * s + z * c], axis=-1)


def clip_below(polys: np.ndarray, level: float) -> np.ndarray:
    """
    Sutherland-Hodgman clip of polygons to the half-plane Z <= level.

    Output has a fixed size of 2N vertices per polygon: every edge emits
    its entry intersection (or a repeat of its end vertex) followed by its
    end vertex, with vertices above the level projected onto the clip line.
    Projected runs are collinear with the clip line, so the ring encloses
    exactly the clipped region and its area and moments are unchanged.
    """
    y = polys[..., 0]
    z = polys[..., 1]
    y_prev = np.roll(y, 1, axis=-1)
    z_prev = np.roll(z, 1, axis=-1)

    inside = z <= level
    crossing = inside != (z_prev <= level)

    dz = z - z_prev
    safe_dz = np.where(crossing, dz, 1.0)
    t = np.where(crossing, (level - z_prev) / safe_dz, 0.0)
    y_cross = y_prev + t * (y - y_prev)

    z_kept = np.minimum(z, level)
    first = np.stack([np.where(crossing, y_cross, y), np.where(crossing, level, z_kept)], axis=-1)
    second = np.stack([y, z_kept], axis=-1)

    out = np.stack([first, second], axis=-2)
    return out.reshape(*polys.shape[:-2], 2 * polys.shape[-2], 2)


def polygon_properties(polys: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Area and centroid of each polygon by the shoelace formula.

    Returns:
        (area, centroid_y, centroid_z), each of shape polys.shape[:-2].
        Centroids of zero-area polygons are reported as 0.
    """
    y = polys[..., 0]
    z = polys[..., 1]
    y_next = np.roll(y, -1, axis=-1)
    z_next = np.roll(z, -1, axis=-1)

    cross = y * z_next - y_next * z
    area = 0.5 * cross.sum(axis=-1)
    moment_y = ((y + y_next) * cross).sum(axis=-1) / 6.0
    moment_z = ((z + z_next) * cross).sum(axis=-1) / 6.0

    degenerate = np.abs(area) <= DEGENERATE_EPS
    safe_area = np.where(degenerate, 1.0, area)
    cy = np.where(degenerate, 0.0, moment_y / safe_area)
    cz = np.where(degenerate, 0.0, moment_z / safe_area)
    return np.where(degenerate, 0.0, area), cy, cz


def z_extent(polys: np.ndarray) -> Tuple[float, float]:
    """Lowest and highest Z over all polygons."""
    z = polys[..., 1]
    return float(z.min()), float(z.max())
