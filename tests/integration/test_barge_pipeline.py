"""
Integration tests for the box barge.

Runs the full flow (hydrostatic table, GZ curve, criteria, trim and
curves) on a 100 x 20 x 10 m barge at 5 m draft, where every quantity
has a closed form.
"""

import pytest
import math

from hydrostab.core import Loadcase, rectangular_barge
from hydrostab.physics import HydrostaticCalculator, TrimSolver
from hydrostab.stability import (
    StabilityCalculator,
    StabilityCriteriaChecker,
    StabilityMethod,
    wall_sided_gz,
)
from hydrostab.curves import CurvesGenerator, CurveType
from hydrostab.bootstrap import Engine


L, B, D, T = 100.0, 20.0, 10.0, 5.0
KG = 2.5
RHO = 1025.0


class TestBargePipeline:
    """End to end on the box barge."""

    def setup_method(self):
        self.geometry = rectangular_barge(length=L, beam=B, depth=D, design_draft=T)
        self.loadcase = Loadcase(rho=RHO, kg=KG, name="barge")
        self.hydro = HydrostaticCalculator()
        self.stability = StabilityCalculator(self.hydro)

    def test_hydrostatic_table(self):
        drafts = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0]
        table = self.hydro.compute_table(self.geometry, self.loadcase, drafts)

        for draft, result in zip(drafts, table):
            assert result.displacement_kg == pytest.approx(RHO * L * B * draft, rel=1e-9)
            assert result.kb_m == pytest.approx(draft / 2, abs=1e-9)
            assert result.bmt_m == pytest.approx(B ** 2 / (12 * draft), rel=1e-9)
            assert result.cb == pytest.approx(1.0, abs=1e-9)

    def test_gz_curve_to_ninety(self):
        curve = self.stability.compute_gz_curve(self.geometry, self.loadcase, 0.0, 90.0, 5.0)
        gmt = T / 2 + B ** 2 / (12 * T) - KG
        bmt = B ** 2 / (12 * T)

        # Wall-sided holds until the deck edge immerses at 26.57°
        for point in curve.points:
            if point.heel_deg <= 25.0:
                assert point.gz_m == pytest.approx(wall_sided_gz(gmt, bmt, point.heel_deg), abs=1e-6)

        # On its side the barge floats on a 10 m wide face: Y_B = D/2
        assert curve.points[-1].heel_deg == 90.0
        assert curve.points[-1].kn_m == pytest.approx(D / 2, abs=1e-6)
        assert curve.points[-1].gz_m == pytest.approx(D / 2 - KG, abs=1e-6)

    def test_beyond_deck_edge_wall_sided_overestimates(self):
        full = self.stability.compute_gz_curve(self.geometry, self.loadcase, 40.0, 60.0, 10.0)
        gmt = T / 2 + B ** 2 / (12 * T) - KG
        bmt = B ** 2 / (12 * T)
        for point in full.points:
            assert point.gz_m < wall_sided_gz(gmt, bmt, point.heel_deg)

    def test_criteria_pass(self):
        curve = self.stability.compute_gz_curve(self.geometry, self.loadcase, 0.0, 60.0, 1.0)
        assessment = StabilityCriteriaChecker().check_criteria(curve, self.loadcase)
        assert assessment.all_passed
        assert assessment.passed_count == 6

    def test_methods_agree(self):
        agreement = self.stability.compare_methods(self.geometry, self.loadcase)
        assert agreement.within_tolerance

    def test_trim_round_trip(self):
        """Displacement at 3 m draft, solved from 5 m, lands back on 3 m."""
        upright = self.hydro.compute_at(self.geometry, self.loadcase, 3.0)
        solution = TrimSolver(self.hydro).solve_trim(
            self.geometry, self.loadcase, upright.displacement_kg, T, T,
        )
        assert solution.converged
        assert solution.draft_fwd_m == pytest.approx(3.0, abs=1e-4)
        assert solution.draft_aft_m == pytest.approx(3.0, abs=1e-4)

    def test_curves(self):
        generator = CurvesGenerator(self.hydro, self.stability)
        curves = generator.generate_multiple_curves(
            self.geometry, self.loadcase,
            [CurveType.DISPLACEMENT, CurveType.GMT, CurveType.TPC], 1.0, 9.0, 17,
        )
        displacement = curves["displacement"].ys
        assert displacement == sorted(displacement)
        assert curves["tpc"].ys == pytest.approx([RHO * L * B / 100] * 17)
        # GMt = T/2 + B²/(12T) - KG has its minimum at T = sqrt(B²/6)
        gmt = curves["gmt"]
        t_min = gmt.xs[gmt.ys.index(min(gmt.ys))]
        assert t_min == pytest.approx(math.sqrt(B ** 2 / 6), abs=0.5)


class TestBargeThroughEngine:
    """Same barge through the configured facade."""

    def test_stability_report(self):
        engine = Engine()
        geometry = rectangular_barge()
        report = engine.stability_report(geometry, engine.loadcase(kg=KG))

        assert report.curve.method is StabilityMethod.FULL_IMMERSION
        assert len(report.curve.points) == 91
        assert report.assessment.all_passed
        assert report.to_dict()["assessment"]["passed_count"] == 6
