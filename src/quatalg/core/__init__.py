"""
===============================================================================
QUATALG - Core Module
===============================================================================
Scalar abstraction and the quaternion value type.

Submodules:
    scalars    -- supported component types, promotion, elementary functions
    quaternion -- Quaternion value type, norms, named units
    constants  -- component layout and sampling constants
    errors     -- exception hierarchy
===============================================================================
"""
