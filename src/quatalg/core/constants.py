"""
===============================================================================
QUATALG - Constants
===============================================================================
Component layout and numeric constants shared across the package.
===============================================================================
"""

import numpy as np


# =============================================================================
# COMPONENT LAYOUT
# =============================================================================
COMPONENT_NAMES = ('w', 'x', 'y', 'z')
N_COMPONENTS = 4

# Axis symbols accepted by the unit constructor, mapped to component index
AXIS_INDEX = {name: i for i, name in enumerate(COMPONENT_NAMES)}

# =============================================================================
# RANDOM GENERATION
# =============================================================================
# Each component of a standard quaternionic normal deviate has variance 1/4,
# so the whole quaternion has mean squared norm 1.
COMPONENT_STD = 0.5

# Floating types the random generators can produce
RANDOM_DTYPES = (np.float16, np.float32, np.float64, np.longdouble)
