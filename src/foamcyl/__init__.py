"""
foamcyl - Cylindrical velocity components for OpenFOAM cases

A Python package that re-expresses cell-centred Cartesian velocity fields
of a rotating-machinery CFD case in cylindrical components (radial,
tangential, axial) about the case's rotation axis.

Main modules:
- config: Rotation axis from constant/dynamicMeshDict, default names
- transform: Local cylindrical basis and velocity decomposition
- foam: OpenFOAM ASCII parsing, polyMesh geometry, field I/O, time selection
- convert: Per-time-step pipeline writing Ucyl (and cRad, cTheta)
- cli: The convertToCylindrical command

Typical workflow:
1. Read the rotation axis and origin from dynamicMeshDict
2. Select time directories
3. For each time: read the mesh, build the basis at cell centres
4. Project U onto the basis and write Ucyl
"""

__version__ = "0.1.0"

# Import main functions for convenient access
from .errors import (
    FoamCylError,
    ConfigMissingError,
    ConfigShapeError,
    ConfigValueError,
    FoamFormatError,
    MeshError,
    FieldMissingError,
    FieldShapeError,
    StepError,
)

from .transform import (
    RotationAxis,
    pick_seed_direction,
    compute_cylindrical_basis,
    project_to_cylindrical,
)

from .foam import (
    FoamCase,
    TimeSelection,
    select_times,
    read_mesh,
    read_vol_vector_field,
)

from .config import (
    read_rotation_axis,
)

from .logging_config import setup_logging

from .convert import (
    StepStatus,
    StepResult,
    convert_time_step,
    convert_case,
)

__all__ = [
    # Errors
    'FoamCylError',
    'ConfigMissingError',
    'ConfigShapeError',
    'ConfigValueError',
    'FoamFormatError',
    'MeshError',
    'FieldMissingError',
    'FieldShapeError',
    'StepError',

    # Coordinate transformation
    'RotationAxis',
    'pick_seed_direction',
    'compute_cylindrical_basis',
    'project_to_cylindrical',

    # Case I/O
    'FoamCase',
    'TimeSelection',
    'select_times',
    'read_mesh',
    'read_vol_vector_field',

    # Configuration
    'read_rotation_axis',

    # Logging
    'setup_logging',

    # Pipeline
    'StepStatus',
    'StepResult',
    'convert_time_step',
    'convert_case',
]
