"""
bootstrap/app.py - Engine facade

Wires every calculator to one EngineConfig so callers do not have to
thread settings through each constructor.
"""

from __future__ import annotations
from typing import List, Optional, Sequence
import logging

from .config import EngineConfig
from ..core.geometry import HullGeometry, Loadcase
from ..curves.generator import CurvesGenerator, StabilityCurveSet
from ..physics.hydrostatics import HydrostaticCalculator, HydroResult
from ..physics.integration import NumericalIntegrator
from ..physics.trim import TrimSolver, TrimSolution
from ..stability.calculators import StabilityCalculator
from ..stability.criteria import StabilityCriteriaChecker
from ..stability.results import StabilityCurve, CriteriaAssessment, MethodAgreement

logger = logging.getLogger(__name__)


class Engine:
    """
    Configured set of calculators.

    The components are exposed as attributes (integrator, hydrostatics,
    stability, criteria, trim, curves); the methods below are shortcuts
    that apply the configured defaults.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

        self.integrator = NumericalIntegrator(spacing_rtol=self.config.integration.spacing_rtol)
        self.hydrostatics = HydrostaticCalculator(self.integrator)
        self.stability = StabilityCalculator(
            self.hydrostatics,
            agreement_rtol=self.config.stability.agreement_rtol,
            agreement_atol_m=self.config.stability.agreement_atol_m,
        )
        self.criteria = StabilityCriteriaChecker()
        self.trim = TrimSolver(
            self.hydrostatics,
            max_iterations=self.config.trim.max_iterations,
            tolerance=self.config.trim.tolerance_kg,
            lever_tolerance=self.config.trim.lever_tolerance_m,
            perturbation=self.config.trim.perturbation_m,
        )
        self.curves = CurvesGenerator(
            self.hydrostatics,
            self.stability,
            self.criteria,
            default_points=self.config.curves.default_points,
        )
        logger.debug(f"Engine built with config {self.config.to_dict()}")

    def loadcase(self, **kwargs) -> Loadcase:
        """Loadcase using the configured default water density."""
        kwargs.setdefault("rho", self.config.hydrostatics.default_rho)
        return Loadcase(**kwargs)

    def compute_at(self, geometry: HullGeometry, loadcase: Loadcase, draft: float) -> HydroResult:
        return self.hydrostatics.compute_at(geometry, loadcase, draft)

    def compute_table(
        self, geometry: HullGeometry, loadcase: Loadcase, drafts: Sequence[float]
    ) -> List[HydroResult]:
        return self.hydrostatics.compute_table(geometry, loadcase, drafts)

    def compute_gz_curve(
        self,
        geometry: HullGeometry,
        loadcase: Loadcase,
        angle_min: Optional[float] = None,
        angle_max: Optional[float] = None,
        angle_step: Optional[float] = None,
        method=None,
        draft: Optional[float] = None,
    ) -> StabilityCurve:
        s = self.config.stability
        return self.stability.compute_gz_curve(
            geometry,
            loadcase,
            s.angle_min_deg if angle_min is None else angle_min,
            s.angle_max_deg if angle_max is None else angle_max,
            s.angle_step_deg if angle_step is None else angle_step,
            s.default_method if method is None else method,
            draft,
        )

    def check_criteria(self, curve: StabilityCurve, loadcase: Loadcase) -> CriteriaAssessment:
        return self.criteria.check_criteria(curve, loadcase)

    def compare_methods(
        self, geometry: HullGeometry, loadcase: Loadcase, draft: Optional[float] = None
    ) -> MethodAgreement:
        """Wall-sided against full-immersion GZ up to the configured agreement angle."""
        s = self.config.stability
        return self.stability.compare_methods(
            geometry,
            loadcase,
            max_angle=s.agreement_max_deg,
            angle_step=s.angle_step_deg,
            draft=draft,
        )

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
        """Per-call max_iterations and tolerance override the configured trim settings."""
        return self.trim.solve_trim(
            geometry,
            loadcase,
            target_displacement,
            initial_draft_fwd,
            initial_draft_aft,
            max_iterations=max_iterations,
            tolerance=tolerance,
            cancel_event=cancel_event,
        )

    def stability_report(
        self, geometry: HullGeometry, loadcase: Loadcase, draft: Optional[float] = None
    ) -> StabilityCurveSet:
        """GZ curve with the configured sweep plus its criteria assessment."""
        s = self.config.stability
        return self.curves.generate_stability_curves(
            geometry,
            loadcase,
            s.angle_min_deg,
            s.angle_max_deg,
            s.angle_step_deg,
            s.default_method,
            draft,
        )
