"""
hydrostab Physical Constants

Constants shared by the hydrostatics, stability and trim calculators.
"""

# ==================== Physical Constants ====================

# Water properties
SEAWATER_DENSITY_KG_M3 = 1025.0  # kg/m³ at 15°C, 35 ppt salinity
FRESHWATER_DENSITY_KG_M3 = 1000.0  # kg/m³ at 15°C

# Gravitational acceleration
GRAVITY_M_S2 = 9.81  # m/s²

# ==================== Grid Limits ====================

MIN_STATIONS = 3
MIN_WATERLINES = 3

# Relative tolerance used to decide that a sample spacing is uniform
SPACING_RTOL = 1e-6

# Values below this are treated as zero when used as a denominator
DEGENERATE_EPS = 1e-12

# Draft comparisons against waterline heights (m)
DRAFT_TOL_M = 1e-9

# ==================== Unit Conversions ====================

CM_PER_M = 100.0
