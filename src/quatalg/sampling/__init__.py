"""
===============================================================================
QUATALG - Sampling Module
===============================================================================
Random generation with an explicitly injected random source.

Submodules:
    random -- randn (N(0, 1/4) components) and randn_rotor (uniform rotors)
===============================================================================
"""

from .random import randn, randn_rotor

__all__ = ['randn', 'randn_rotor']
