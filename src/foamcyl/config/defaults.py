"""
Default names and constants

Central registry for the file names, record paths and numerical constants
used across foamcyl. Nothing here is read from disk.
"""

from typing import FrozenSet, Tuple

# Mesh-motion dictionary in constant/
DYNAMIC_MESH_DICT: str = "dynamicMeshDict"

# Locations of the rigid-rotation record, tried in order. The first one
# present must hold both axis and origin.
ROTATION_RECORD_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("solidBodyMotionFvMeshCoeffs", "rotatingMotionCoeffs"),
    ("solidBodyCoeffs", "rotatingMotionCoeffs"),
)

# Top-level motion function that marks a top-level rotation record
MOTION_FUNCTION_KEY: str = "solidBodyMotionFunction"
ROTATING_MOTION: str = "rotatingMotion"

# Field names
VELOCITY_FIELD: str = "U"
CYLINDRICAL_VELOCITY_FIELD: str = "Ucyl"
RADIAL_FIELD: str = "cRad"
TANGENTIAL_FIELD: str = "cTheta"

# Constraint patch types; a field on such a patch must carry the patch type.
# Coupled ones also store face values.
COUPLED_PATCH_TYPES: FrozenSet[str] = frozenset({
    "cyclic",
    "cyclicAMI",
    "cyclicACMI",
    "cyclicSlip",
    "nonConformalCyclic",
    "processor",
    "processorCyclic",
})
CONSTRAINT_PATCH_TYPES: FrozenSet[str] = COUPLED_PATCH_TYPES | {
    "empty",
    "wedge",
    "symmetryPlane",
    "symmetry",
}

# Centres closer than this to the axis have no radial direction. The
# relative part is a fraction of the distance from the origin.
ON_AXIS_TOLERANCE: float = 1e-30
ON_AXIS_RELATIVE_TOLERANCE: float = 1e-14

# OpenFOAM dimension sets: [kg m s K mol A cd]
VELOCITY_DIMENSIONS: Tuple[float, ...] = (0, 1, -1, 0, 0, 0, 0)
DIMENSIONLESS: Tuple[float, ...] = (0, 0, 0, 0, 0, 0, 0)

# Significant digits for written field values
WRITE_PRECISION: int = 12
