"""
hydrostab Test Configuration and Fixtures

Benchmark hulls with closed-form hydrostatics:
- Box barge 100 x 20 x 10 m, design draft 5 m
- Wigley hull 100 x 10 m, draft 6.25 m, depth 10 m
"""

import pytest

from hydrostab.core.geometry import Loadcase
from hydrostab.core.templates import rectangular_barge, wigley_hull
from hydrostab.physics.hydrostatics import HydrostaticCalculator
from hydrostab.stability.calculators import StabilityCalculator


BARGE_L = 100.0
BARGE_B = 20.0
BARGE_D = 10.0
BARGE_T = 5.0

WIGLEY_L = 100.0
WIGLEY_B = 10.0
WIGLEY_T = 6.25
WIGLEY_D = 10.0


@pytest.fixture
def barge():
    """Box barge with waterlines every metre and stations every 5 m."""
    return rectangular_barge(
        length=BARGE_L, beam=BARGE_B, depth=BARGE_D,
        n_stations=21, n_waterlines=11, design_draft=BARGE_T,
    )


@pytest.fixture
def wigley():
    """Wigley hull with a waterline on the design draft."""
    return wigley_hull(
        length=WIGLEY_L, beam=WIGLEY_B, draft=WIGLEY_T, depth=WIGLEY_D,
        n_stations=21, n_waterlines=17,
    )


@pytest.fixture
def seawater():
    """Loadcase without KG."""
    return Loadcase(rho=1025.0, name="seawater")


@pytest.fixture
def barge_loadcase():
    """KG at the barge's KB: GMt = BMt = B²/(12T)."""
    return Loadcase(rho=1025.0, kg=2.5, name="barge_stable")


@pytest.fixture
def wigley_loadcase():
    """KG giving GMt close to BMt for the Wigley hull."""
    return Loadcase(rho=1025.0, kg=4.0, name="wigley_stable")


@pytest.fixture
def hydro():
    return HydrostaticCalculator()


@pytest.fixture
def stability():
    return StabilityCalculator()
