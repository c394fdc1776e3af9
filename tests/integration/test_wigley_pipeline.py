"""
Integration tests for the Wigley hull.

Parabolic sections and waterlines: Cb = 4/9, KB = 5T/8. Checks that
hydrostatics, the two GZ methods and the trim solver are consistent with
each other on a hull with flare.
"""

import pytest
import math

from hydrostab.core import Loadcase, wigley_hull
from hydrostab.physics import HydrostaticCalculator, TrimSolver
from hydrostab.stability import (
    StabilityCalculator,
    StabilityCriteriaChecker,
    ImoCriterion,
)
from hydrostab.curves import CurvesGenerator


L, B, T, D = 100.0, 10.0, 6.25, 10.0
KG = 4.0


class TestWigleyPipeline:

    def setup_method(self):
        self.geometry = wigley_hull(length=L, beam=B, draft=T, depth=D)
        self.loadcase = Loadcase(rho=1025.0, kg=KG, name="wigley")
        self.hydro = HydrostaticCalculator()
        self.stability = StabilityCalculator(self.hydro)

    def test_design_draft_hydrostatics(self):
        result = self.hydro.compute_at(self.geometry, self.loadcase, T)
        assert result.volume_m3 == pytest.approx(4.0 / 9.0 * L * B * T, rel=1e-6)
        assert result.kb_m == pytest.approx(5.0 * T / 8.0, rel=1e-6)
        assert result.gmt_m == pytest.approx(1.277, abs=0.01)

    def test_initial_gz_slope_is_gm(self):
        upright = self.hydro.compute_at(self.geometry, self.loadcase, T)
        curve = self.stability.compute_gz_curve(self.geometry, self.loadcase, 0.0, 2.0, 1.0)
        slope = curve.points[1].gz_m / math.sin(math.radians(1.0))
        assert slope == pytest.approx(upright.gmt_m, rel=0.02)

    def test_curve_shape(self):
        curve = self.stability.compute_gz_curve(self.geometry, self.loadcase, 0.0, 60.0, 2.0)
        assert all(p.gz_m > 0 for p in curve.points[1:])
        assert 0.0 < curve.angle_at_max_gz_deg <= 60.0
        assert curve.max_gz_m > curve.points[1].gz_m

    def test_methods_agree_at_small_angles(self):
        agreement = self.stability.compare_methods(self.geometry, self.loadcase, max_angle=15.0)
        assert agreement.within_tolerance
        assert agreement.max_angle_deg == 15.0

    def test_criteria_report_all_six(self):
        curve = self.stability.compute_gz_curve(self.geometry, self.loadcase, 0.0, 60.0, 1.0)
        assessment = StabilityCriteriaChecker().check_criteria(curve, self.loadcase)
        assert len(assessment.criteria) == 6
        assert assessment.get(ImoCriterion.INITIAL_GM).passed

    def test_trim_level(self):
        upright = self.hydro.compute_at(self.geometry, self.loadcase, 5.0)
        solution = TrimSolver(self.hydro).solve_trim(
            self.geometry, self.loadcase, upright.displacement_kg, T, T,
        )
        assert solution.converged
        assert solution.mean_draft_m == pytest.approx(5.0, abs=1e-3)
        assert solution.trim_m == pytest.approx(0.0, abs=1e-3)

    def test_bonjean_midship(self):
        curves = CurvesGenerator(self.hydro).generate_bonjean_curves(self.geometry)
        midship = curves[10]
        at_design = [p for p in midship.points if p.x == pytest.approx(T)][0]
        assert at_design.y == pytest.approx(2.0 / 3.0 * B * T, rel=1e-6)
