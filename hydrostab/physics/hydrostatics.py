"""
hydrostab Hydrostatics Calculator

Upright and trimmed hydrostatics from an offset table.

Per station, half-breadths are integrated over z with the selected rule up
to the last waterline below the draft, plus the partial strip to the
draft, giving the sectional area A(x) = 2∫y dz and its vertical
centroid. Sectional properties are then integrated along x:

    V    = ∫A dx                    displacement = ρ·V
    KB   = ∫z_c·A dx / V            LCB = ∫x·A dx / V,  TCB = 0
    Awp  = 2∫y_wl dx                LCF = 2∫x·y_wl dx / Awp
    I_T  = (2/3)∫y_wl³ dx           I_L = 2∫x²·y_wl dx - Awp·LCF²
    BMt  = I_T / V                  BMl = I_L / V

Form coefficients use the section nearest mid-length as the midship
section. Quantities with a zero denominator are reported as None.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple
import time
import logging

import numpy as np

from ..core.constants import DEGENERATE_EPS, CM_PER_M
from ..core.geometry import HullGeometry, HullGrid, Loadcase
from ..core.validation import prepare_grid, validate_loadcase, validate_draft
from .integration import NumericalIntegrator

logger = logging.getLogger(__name__)


def _ratio(num: float, den: float) -> Optional[float]:
    if abs(den) <= DEGENERATE_EPS:
        return None
    return num / den


def _round(value: Optional[float], digits: int) -> Optional[float]:
    return None if value is None else round(value, digits)


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class HydroResult:
    """Hydrostatic properties at one upright draft."""

    draft_m: float

    # Displacement
    volume_m3: float
    displacement_kg: float

    # Centers of buoyancy
    kb_m: Optional[float]
    lcb_m: Optional[float]
    tcb_m: Optional[float]

    # Metacentric properties
    bmt_m: Optional[float]
    bml_m: Optional[float]
    kmt_m: Optional[float]
    kml_m: Optional[float]
    gmt_m: Optional[float]  # None without KG
    gml_m: Optional[float]  # None without KG

    # Waterplane
    waterplane_area_m2: float
    lcf_m: Optional[float]
    iwp_t_m4: float  # Transverse, about the centerline
    iwp_l_m4: Optional[float]  # Longitudinal, about LCF

    # Form coefficients
    midship_area_m2: float
    cb: Optional[float]
    cp: Optional[float]
    cm: Optional[float]
    cwp: Optional[float]

    # Trim/immersion
    tpc_kg_cm: float  # Mass per cm immersion
    mtc_kg_m_cm: Optional[float]  # Moment to change trim 1 cm

    warnings: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with engineering precision."""
        return {
            "draft_m": round(self.draft_m, 4),
            "volume_m3": round(self.volume_m3, 3),
            "displacement_kg": round(self.displacement_kg, 1),
            "kb_m": _round(self.kb_m, 4),
            "lcb_m": _round(self.lcb_m, 4),
            "tcb_m": _round(self.tcb_m, 4),
            "bmt_m": _round(self.bmt_m, 4),
            "bml_m": _round(self.bml_m, 3),
            "kmt_m": _round(self.kmt_m, 4),
            "kml_m": _round(self.kml_m, 3),
            "gmt_m": _round(self.gmt_m, 4),
            "gml_m": _round(self.gml_m, 3),
            "waterplane_area_m2": round(self.waterplane_area_m2, 3),
            "lcf_m": _round(self.lcf_m, 4),
            "iwp_t_m4": round(self.iwp_t_m4, 3),
            "iwp_l_m4": _round(self.iwp_l_m4, 3),
            "midship_area_m2": round(self.midship_area_m2, 3),
            "cb": _round(self.cb, 4),
            "cp": _round(self.cp, 4),
            "cm": _round(self.cm, 4),
            "cwp": _round(self.cwp, 4),
            "tpc_kg_cm": round(self.tpc_kg_cm, 2),
            "mtc_kg_m_cm": _round(self.mtc_kg_m_cm, 2),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class TrimmedHydrostatics:
    """
    Hydrostatics for a waterline inclined longitudinally.

    The local draft varies linearly from draft_aft_m at the aftmost
    station to draft_fwd_m at the foremost station.
    """
    draft_aft_m: float
    draft_fwd_m: float
    volume_m3: float
    displacement_kg: float
    lcb_m: Optional[float]
    kb_m: Optional[float]
    waterplane_area_m2: float
    lcf_m: Optional[float]

    @property
    def mean_draft_m(self) -> float:
        return 0.5 * (self.draft_aft_m + self.draft_fwd_m)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "draft_aft_m": round(self.draft_aft_m, 4),
            "draft_fwd_m": round(self.draft_fwd_m, 4),
            "volume_m3": round(self.volume_m3, 3),
            "displacement_kg": round(self.displacement_kg, 1),
            "lcb_m": _round(self.lcb_m, 4),
            "kb_m": _round(self.kb_m, 4),
            "waterplane_area_m2": round(self.waterplane_area_m2, 3),
            "lcf_m": _round(self.lcf_m, 4),
        }


# =============================================================================
# CALCULATOR
# =============================================================================

class HydrostaticCalculator:
    """
    Computes hydrostatic properties from an offset table.

    All public methods validate geometry, loadcase and draft before any
    integration. Methods ending in _for_grid take an already validated
    HullGrid and skip that step.
    """

    def __init__(self, integrator: Optional[NumericalIntegrator] = None):
        self.integrator = integrator or NumericalIntegrator()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def compute_at(self, geometry: HullGeometry, loadcase: Loadcase, draft: float) -> HydroResult:
        """
        Hydrostatics at a single upright draft.

        Raises:
            GeometryValidationError, LoadcaseValidationError, DraftRangeError
        """
        grid = prepare_grid(geometry)
        validate_loadcase(loadcase)
        draft = validate_draft(grid, draft)
        return self.compute_for_grid(grid, loadcase, draft)

    def compute_table(
        self, geometry: HullGeometry, loadcase: Loadcase, drafts: Sequence[float]
    ) -> List[HydroResult]:
        """
        Hydrostatics at each draft, in input order.

        Every draft is validated before the first one is computed.
        """
        start = time.perf_counter()

        grid = prepare_grid(geometry)
        validate_loadcase(loadcase)
        checked = [validate_draft(grid, d) for d in drafts]

        results = [self.compute_for_grid(grid, loadcase, d) for d in checked]

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.info(f"Hydrostatic table for '{grid.name}': {len(results)} drafts in {elapsed_ms} ms")
        return results

    def compute_at_trim(
        self,
        geometry: HullGeometry,
        loadcase: Loadcase,
        draft_aft: float,
        draft_fwd: float,
    ) -> TrimmedHydrostatics:
        """Hydrostatics for a linearly varying draft between aft and forward stations."""
        grid = prepare_grid(geometry)
        validate_loadcase(loadcase)
        draft_aft = validate_draft(grid, draft_aft, field="draft_aft")
        draft_fwd = validate_draft(grid, draft_fwd, field="draft_fwd")
        return self.trimmed_for_grid(grid, loadcase, draft_aft, draft_fwd)

    def sectional_areas(self, geometry: HullGeometry, draft: float) -> List[float]:
        """Immersed area of every station at an upright draft (m²)."""
        grid = prepare_grid(geometry)
        draft = validate_draft(grid, draft)
        areas, _ = self._section_properties(grid, draft)
        return [float(a) for a in areas]

    # -------------------------------------------------------------------------
    # Grid-level computation
    # -------------------------------------------------------------------------

    def _tabulated(self, zs: np.ndarray, y: np.ndarray, k: int) -> Tuple[float, float]:
        """∫y dz and ∫z·y dz from the keel to waterline k with the selected rule."""
        if k == 0:
            return 0.0, 0.0
        return (
            self.integrator.integrate(zs[:k + 1], y[:k + 1]),
            self.integrator.first_moment(zs[:k + 1], y[:k + 1]),
        )

    def _half_section(self, zs: np.ndarray, y: np.ndarray, k: int, s: float) -> Tuple[float, float]:
        """
        Half-section area and vertical moment up to zs[k] + s·(zs[k+1] - zs[k]).

        Whole waterline intervals use the selected rule. The partial strip
        above waterline k is a trapezoid with y linear in z, plus the
        fraction s of the rule's correction over that interval, so the
        result meets the tabulated value at waterline k + 1 and varies
        continuously with draft.
        """
        area, moment = self._tabulated(zs, y, k)
        if s <= 0.0:
            return area, moment

        z0, z1 = zs[k], zs[k + 1]
        y0, y1 = y[k], y[k + 1]
        dz = s * (z1 - z0)
        zd = z0 + dz
        yd = y0 + s * (y1 - y0)

        area_next, moment_next = self._tabulated(zs, y, k + 1)
        area_corr = area_next - area - 0.5 * (z1 - z0) * (y0 + y1)
        moment_corr = moment_next - moment - 0.5 * (z1 - z0) * (z0 * y0 + z1 * y1)

        area += 0.5 * dz * (y0 + yd) + s * area_corr
        moment += 0.5 * dz * (z0 * y0 + zd * yd) + s * moment_corr
        return area, moment

    def _section_properties(self, grid: HullGrid, draft: float) -> Tuple[np.ndarray, np.ndarray]:
        """Sectional areas and their vertical moments ∫z·A about the baseline."""
        k, s = grid.waterline_bracket(draft)
        areas = np.empty(grid.n_stations)
        z_moments = np.empty(grid.n_stations)
        for i in range(grid.n_stations):
            half_area, half_moment = self._half_section(grid.zs, grid.half_breadths[i], k, s)
            areas[i] = 2.0 * half_area
            z_moments[i] = 2.0 * half_moment
        return areas, z_moments

    def compute_for_grid(self, grid: HullGrid, loadcase: Loadcase, draft: float) -> HydroResult:
        """Upright hydrostatics on a validated grid."""
        integ = self.integrator
        xs = grid.xs
        warnings: List[str] = []

        # Volume and centers of buoyancy
        areas, z_moments = self._section_properties(grid, draft)
        volume = integ.integrate(xs, areas)
        if volume <= DEGENERATE_EPS:
            volume = max(volume, 0.0)
            warnings.append(f"Zero displaced volume at draft {draft:.3f} m")
        displacement = loadcase.rho * volume

        kb = _ratio(integ.integrate(xs, z_moments), volume)
        lcb = _ratio(integ.first_moment(xs, areas), volume)
        tcb = 0.0 if kb is not None else None

        # Waterplane
        y_wl = grid.waterline_half_breadths(draft)
        awp = 2.0 * integ.integrate(xs, y_wl)
        lcf = _ratio(2.0 * integ.first_moment(xs, y_wl), awp)
        it = (2.0 / 3.0) * integ.integrate(xs, y_wl ** 3)
        il = None
        if lcf is not None:
            il = 2.0 * integ.second_moment(xs, y_wl) - awp * lcf ** 2
        else:
            warnings.append(f"Zero waterplane area at draft {draft:.3f} m")

        # Metacentric radii and heights
        bmt = _ratio(it, volume)
        bml = _ratio(il, volume) if il is not None else None
        kmt = kb + bmt if kb is not None and bmt is not None else None
        kml = kb + bml if kb is not None and bml is not None else None

        gmt = gml = None
        if loadcase.kg is not None:
            gmt = kmt - loadcase.kg if kmt is not None else None
            gml = kml - loadcase.kg if kml is not None else None
            if gmt is not None and gmt < 0:
                warnings.append(f"Negative GMt ({gmt:.3f} m): upright condition is unstable")

        # Form coefficients
        am = float(areas[grid.midship_index])
        cb = _ratio(volume, grid.lpp * grid.beam * draft)
        cp = _ratio(volume, am * grid.lpp)
        cm = _ratio(am, grid.beam * draft)
        cwp = _ratio(awp, grid.lpp * grid.beam)

        # Immersion and trim
        tpc = loadcase.rho * awp / CM_PER_M
        lever = gml if gml is not None else bml
        mtc = _ratio(displacement * lever, CM_PER_M * grid.lpp) if lever is not None else None

        logger.debug(
            f"Hydrostatics '{grid.name}' T={draft:.4f} m: V={volume:.3f} m³ "
            f"KB={kb} BMt={bmt} Awp={awp:.3f} m²"
        )

        return HydroResult(
            draft_m=draft,
            volume_m3=volume,
            displacement_kg=displacement,
            kb_m=kb,
            lcb_m=lcb,
            tcb_m=tcb,
            bmt_m=bmt,
            bml_m=bml,
            kmt_m=kmt,
            kml_m=kml,
            gmt_m=gmt,
            gml_m=gml,
            waterplane_area_m2=awp,
            lcf_m=lcf,
            iwp_t_m4=it,
            iwp_l_m4=il,
            midship_area_m2=am,
            cb=cb,
            cp=cp,
            cm=cm,
            cwp=cwp,
            tpc_kg_cm=tpc,
            mtc_kg_m_cm=mtc,
            warnings=tuple(warnings),
        )

    def local_drafts(self, grid: HullGrid, draft_aft: float, draft_fwd: float) -> np.ndarray:
        """Draft at every station for a straight inclined waterline."""
        t = (grid.xs - grid.x_min) / (grid.x_max - grid.x_min)
        return draft_aft + (draft_fwd - draft_aft) * t

    def trimmed_for_grid(
        self, grid: HullGrid, loadcase: Loadcase, draft_aft: float, draft_fwd: float
    ) -> TrimmedHydrostatics:
        """Trimmed hydrostatics on a validated grid."""
        integ = self.integrator
        xs = grid.xs
        drafts = self.local_drafts(grid, draft_aft, draft_fwd)

        areas = np.zeros(grid.n_stations)
        z_moments = np.zeros(grid.n_stations)
        y_wl = np.zeros(grid.n_stations)
        for i, local in enumerate(drafts):
            if local <= grid.z_min:
                continue
            local = min(local, grid.z_max)
            k, s = grid.waterline_bracket(local)
            half_area, half_moment = self._half_section(grid.zs, grid.half_breadths[i], k, s)
            areas[i] = 2.0 * half_area
            z_moments[i] = 2.0 * half_moment
            y_k = grid.half_breadths[i, k]
            y_wl[i] = y_k if s <= 0.0 else y_k + s * (grid.half_breadths[i, k + 1] - y_k)

        volume = max(integ.integrate(xs, areas), 0.0)
        awp = 2.0 * integ.integrate(xs, y_wl)

        return TrimmedHydrostatics(
            draft_aft_m=draft_aft,
            draft_fwd_m=draft_fwd,
            volume_m3=volume,
            displacement_kg=loadcase.rho * volume,
            lcb_m=_ratio(integ.first_moment(xs, areas), volume),
            kb_m=_ratio(integ.integrate(xs, z_moments), volume),
            waterplane_area_m2=awp,
            lcf_m=_ratio(2.0 * integ.first_moment(xs, y_wl), awp),
        )
