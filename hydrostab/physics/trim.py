"""
hydrostab Trim Solver

Finds the forward and aft drafts at which a hull floats in equilibrium
for a target displacement and longitudinal center of gravity.

Newton-Raphson on (T_fwd, T_aft) with residuals

    R1 = Δ(T_fwd, T_aft) - Δ_target                 (kg)
    R2 = Δ(T_fwd, T_aft) · (LCB - LCG)              (kg·m)

The Jacobian is built by forward finite differences. Drafts are clamped
to the waterline range after each step. Iteration stops once both
residuals are inside their tolerances. converged reports the displacement
tolerance alone; in_equilibrium additionally requires |LCB - LCG| within
the lever tolerance. The solver never raises on non-convergence: it
returns the best iterate with converged=False.

Conventions: x increases forward, so the aft draft applies at the
smallest station x. Trim is positive by the stern.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import math
import time
import logging

import numpy as np

from ..core.geometry import HullGeometry, HullGrid, Loadcase
from ..core.validation import prepare_grid, validate_loadcase, validate_draft
from ..errors import ValidationError, create_validation_error
from .hydrostatics import HydrostaticCalculator, TrimmedHydrostatics

logger = logging.getLogger(__name__)

SOURCE = "physics.trim"

# Default solver settings
DEFAULT_MAX_ITERATIONS = 20
DEFAULT_TOLERANCE_KG = 100.0
DEFAULT_LEVER_TOLERANCE_M = 1e-3
DEFAULT_PERTURBATION_M = 0.01

# Keeps clamped drafts strictly above the lowest waterline
_DRAFT_FLOOR_M = 1e-6


@dataclass(frozen=True)
class TrimSolution:
    """Equilibrium floating position for a target displacement."""

    target_displacement_kg: float

    # Floating position
    draft_fwd_m: float
    draft_aft_m: float
    mean_draft_m: float
    trim_m: float  # T_aft - T_fwd, + by the stern
    trim_angle_deg: float

    # Equilibrium check
    displacement_kg: float
    displacement_error_kg: float
    lcb_m: Optional[float]
    lcg_m: float
    lever_m: float  # LCB - LCG

    # Trim properties at the mean draft
    lcf_m: Optional[float]
    mtc_kg_m_cm: Optional[float]

    # Solver state
    converged: bool  # |displacement error| < tolerance
    in_equilibrium: bool  # converged and |LCB - LCG| < lever tolerance
    iterations: int
    cancelled: bool = False
    warnings: Tuple[str, ...] = ()
    calculation_time_ms: int = field(default=0, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_displacement_kg": round(self.target_displacement_kg, 1),
            "draft_fwd_m": round(self.draft_fwd_m, 4),
            "draft_aft_m": round(self.draft_aft_m, 4),
            "mean_draft_m": round(self.mean_draft_m, 4),
            "trim_m": round(self.trim_m, 4),
            "trim_angle_deg": round(self.trim_angle_deg, 4),
            "displacement_kg": round(self.displacement_kg, 1),
            "displacement_error_kg": round(self.displacement_error_kg, 1),
            "lcb_m": None if self.lcb_m is None else round(self.lcb_m, 4),
            "lcg_m": round(self.lcg_m, 4),
            "lever_m": round(self.lever_m, 6),
            "lcf_m": None if self.lcf_m is None else round(self.lcf_m, 4),
            "mtc_kg_m_cm": None if self.mtc_kg_m_cm is None else round(self.mtc_kg_m_cm, 2),
            "converged": self.converged,
            "in_equilibrium": self.in_equilibrium,
            "iterations": self.iterations,
            "cancelled": self.cancelled,
            "warnings": list(self.warnings),
            "calculation_time_ms": self.calculation_time_ms,
        }


@dataclass(frozen=True)
class _Iterate:
    draft_fwd: float
    draft_aft: float
    hydro: TrimmedHydrostatics
    error_kg: float
    lever_m: float
    moment: float

    def rank(self, tolerance: float, lever_tolerance: float) -> Tuple[bool, float]:
        """Sort key: iterates inside the displacement tolerance first, then the smaller normalised residual."""
        residual = abs(self.error_kg) / tolerance + abs(self.lever_m) / lever_tolerance
        return abs(self.error_kg) >= tolerance, residual


class TrimSolver:
    """
    Newton-Raphson equilibrium trim solver.

    Args:
        hydrostatics: Calculator used for trimmed hydrostatics
        max_iterations: Default iteration cap
        tolerance: Default displacement tolerance (kg)
        lever_tolerance: Allowed |LCB - LCG| for in_equilibrium (m)
        perturbation: Finite-difference step for the Jacobian (m)
    """

    def __init__(
        self,
        hydrostatics: Optional[HydrostaticCalculator] = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tolerance: float = DEFAULT_TOLERANCE_KG,
        lever_tolerance: float = DEFAULT_LEVER_TOLERANCE_M,
        perturbation: float = DEFAULT_PERTURBATION_M,
    ):
        self.hydrostatics = hydrostatics or HydrostaticCalculator()
        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.lever_tolerance = lever_tolerance
        self.perturbation = perturbation

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def solve_trim(
        self,
        geometry: HullGeometry,
        loadcase: Loadcase,
        target_displacement: float,
        initial_draft_fwd: float,
        initial_draft_aft: float,
        max_iterations: Optional[int] = None,
        tolerance: Optional[float] = None,
        cancel_event=None,
    ) -> TrimSolution:
        """
        Solve for equilibrium drafts.

        Args:
            target_displacement: Required displacement (kg)
            initial_draft_fwd: Starting forward draft (m)
            initial_draft_aft: Starting aft draft (m)
            max_iterations: Iteration cap (defaults to the solver's)
            tolerance: Displacement tolerance in kg (defaults to the solver's)
            cancel_event: Object with is_set(), e.g. threading.Event; checked
                between iterations

        Raises:
            ValidationError: Invalid inputs. Non-convergence never raises.
        """
        start = time.perf_counter()

        max_iterations = self.max_iterations if max_iterations is None else max_iterations
        tolerance = self.tolerance if tolerance is None else tolerance

        grid = prepare_grid(geometry)
        validate_loadcase(loadcase)
        tf = validate_draft(grid, initial_draft_fwd, field="initial_draft_fwd")
        ta = validate_draft(grid, initial_draft_aft, field="initial_draft_aft")
        self._validate_settings(target_displacement, max_iterations, tolerance)

        lcg = loadcase.lcg_or_midship(grid)

        best: Optional[_Iterate] = None
        current: Optional[_Iterate] = None
        iterations = 0
        cancelled = False
        warnings: List[str] = []

        for iteration in range(1, max_iterations + 1):
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                logger.warning(f"Trim solve cancelled after {iterations} iteration(s)")
                break

            iterations = iteration
            current = self._evaluate(grid, loadcase, target_displacement, lcg, tf, ta)
            if best is None or current.rank(tolerance, self.lever_tolerance) < best.rank(
                tolerance, self.lever_tolerance
            ):
                best = current

            logger.debug(
                f"Trim iteration {iteration}: Tf={tf:.5f} Ta={ta:.5f} "
                f"dW={current.error_kg:.2f} kg lever={current.lever_m:.6f} m"
            )

            if abs(current.error_kg) < tolerance and abs(current.lever_m) < self.lever_tolerance:
                best = current
                break

            step = self._newton_step(grid, loadcase, target_displacement, lcg, current, warnings)
            if step is None:
                break

            tf, ta = self._clamp(grid, tf + step[0]), self._clamp(grid, ta + step[1])

        if best is None:
            # Cancelled before the first iteration: report the starting point
            best = self._evaluate(grid, loadcase, target_displacement, lcg, tf, ta)

        converged = abs(best.error_kg) < tolerance
        in_equilibrium = converged and abs(best.lever_m) < self.lever_tolerance

        if not cancelled:
            if not converged:
                message = (
                    f"Trim solver did not converge in {iterations} iteration(s): "
                    f"displacement error {best.error_kg:.1f} kg, lever {best.lever_m:.4f} m"
                )
                warnings.append(message)
                logger.warning(message)
            elif not in_equilibrium:
                message = (
                    f"Displacement converged but LCB - LCG = {best.lever_m:.4f} m exceeds "
                    f"{self.lever_tolerance} m: hull is not in trim equilibrium"
                )
                warnings.append(message)
                logger.warning(message)

        solution = self._build_solution(
            grid, loadcase, target_displacement, lcg, best, converged, in_equilibrium,
            iterations, cancelled, warnings, int((time.perf_counter() - start) * 1000),
        )
        logger.info(
            f"Trim solve '{grid.name}': converged={converged} in_equilibrium={in_equilibrium} "
            f"iterations={iterations} Tf={solution.draft_fwd_m:.4f} m Ta={solution.draft_aft_m:.4f} m"
        )
        return solution

    def is_displacement_achievable(
        self, geometry: HullGeometry, loadcase: Loadcase, target_displacement: float
    ) -> bool:
        """True when the target lies between zero and the displacement at the top waterline."""
        grid = prepare_grid(geometry)
        validate_loadcase(loadcase)
        max_disp = self.hydrostatics.compute_for_grid(grid, loadcase, grid.z_max).displacement_kg
        return 0.0 < target_displacement <= max_disp

    # -------------------------------------------------------------------------
    # Newton iteration
    # -------------------------------------------------------------------------

    def _validate_settings(self, target: float, max_iterations: int, tolerance: float) -> None:
        errors = []
        if not (math.isfinite(target) and target > 0):
            errors.append(create_validation_error(
                "target displacement must be positive", SOURCE,
                field="target_displacement", actual=target, expected="> 0",
            ))
        if max_iterations < 1:
            errors.append(create_validation_error(
                "max_iterations must be at least 1", SOURCE,
                field="max_iterations", actual=max_iterations, expected=">= 1",
            ))
        if not tolerance > 0:
            errors.append(create_validation_error(
                "tolerance must be positive", SOURCE,
                field="tolerance", actual=tolerance, expected="> 0",
            ))
        if errors:
            raise ValidationError(errors)

    def _evaluate(
        self, grid: HullGrid, loadcase: Loadcase, target: float, lcg: float, tf: float, ta: float
    ) -> _Iterate:
        hydro = self.hydrostatics.trimmed_for_grid(grid, loadcase, ta, tf)
        lever = (hydro.lcb_m - lcg) if hydro.lcb_m is not None else 0.0
        return _Iterate(
            draft_fwd=tf,
            draft_aft=ta,
            hydro=hydro,
            error_kg=hydro.displacement_kg - target,
            lever_m=lever,
            moment=hydro.displacement_kg * lever,
        )

    def _clamp(self, grid: HullGrid, draft: float) -> float:
        return min(max(draft, grid.z_min + _DRAFT_FLOOR_M), grid.z_max)

    def _newton_step(
        self,
        grid: HullGrid,
        loadcase: Loadcase,
        target: float,
        lcg: float,
        current: _Iterate,
        warnings: List[str],
    ) -> Optional[np.ndarray]:
        """Solve J·step = -R; falls back to parallel sinkage when J is singular."""
        tf, ta = current.draft_fwd, current.draft_aft
        residual = np.array([current.error_kg, current.moment])

        jacobian = np.empty((2, 2))
        for col, (dtf, dta) in enumerate(((1.0, 0.0), (0.0, 1.0))):
            base = tf if col == 0 else ta
            delta = self.perturbation if base + self.perturbation <= grid.z_max else -self.perturbation
            probe = self._evaluate(
                grid, loadcase, target, lcg, tf + dtf * delta, ta + dta * delta
            )
            jacobian[0, col] = (probe.error_kg - current.error_kg) / delta
            jacobian[1, col] = (probe.moment - current.moment) / delta

        try:
            step = np.linalg.solve(jacobian, -residual)
        except np.linalg.LinAlgError:
            step = None

        if step is None or not np.all(np.isfinite(step)):
            sinkage_rate = jacobian[0, 0] + jacobian[0, 1]
            if abs(sinkage_rate) <= 0.0:
                warnings.append("Trim Jacobian singular and displacement insensitive to draft")
                logger.warning("Trim Jacobian singular; stopping iteration")
                return None
            logger.debug("Trim Jacobian singular; using parallel sinkage step")
            sink = -current.error_kg / sinkage_rate
            step = np.array([sink, sink])

        # Limit the step to half the waterline range
        limit = 0.5 * (grid.z_max - grid.z_min)
        return np.clip(step, -limit, limit)

    def _build_solution(
        self,
        grid: HullGrid,
        loadcase: Loadcase,
        target: float,
        lcg: float,
        best: _Iterate,
        converged: bool,
        in_equilibrium: bool,
        iterations: int,
        cancelled: bool,
        warnings: List[str],
        elapsed_ms: int,
    ) -> TrimSolution:
        tf, ta = best.draft_fwd, best.draft_aft
        mean = 0.5 * (tf + ta)
        upright = self.hydrostatics.compute_for_grid(grid, loadcase, mean)

        return TrimSolution(
            target_displacement_kg=target,
            draft_fwd_m=tf,
            draft_aft_m=ta,
            mean_draft_m=mean,
            trim_m=ta - tf,
            trim_angle_deg=math.degrees(math.atan((ta - tf) / grid.lpp)),
            displacement_kg=best.hydro.displacement_kg,
            displacement_error_kg=best.error_kg,
            lcb_m=best.hydro.lcb_m,
            lcg_m=lcg,
            lever_m=best.lever_m,
            lcf_m=upright.lcf_m,
            mtc_kg_m_cm=upright.mtc_kg_m_cm,
            converged=converged,
            in_equilibrium=in_equilibrium,
            iterations=iterations,
            cancelled=cancelled,
            warnings=tuple(warnings),
            calculation_time_ms=elapsed_ms,
        )
