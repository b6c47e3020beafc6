"""
Coordinate Transformation Module

This module provides the rotation axis, the local cylindrical basis at
cell centres, and the decomposition of Cartesian velocity into radial,
tangential and axial components.

Main functions:
- pick_seed_direction: Reference direction for an axis-aligned frame
- compute_cylindrical_basis: Radial and tangential unit vectors per point
- project_to_cylindrical: Decompose U into (u_r, u_theta, u_z)
"""

from .axis import (
    RotationAxis,
    pick_seed_direction,
)
from .coordinates import (
    compute_cylindrical_basis,
)
from .velocity import (
    project_to_cylindrical,
    decompose_velocity_vector,
)

__all__ = [
    # Axis
    'RotationAxis',
    'pick_seed_direction',
    # Basis
    'compute_cylindrical_basis',
    # Velocity decomposition
    'project_to_cylindrical',
    'decompose_velocity_vector',
]
