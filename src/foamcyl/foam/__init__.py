"""
OpenFOAM Case I/O Module

This module reads and writes the parts of an OpenFOAM case that the
conversion needs: ASCII dictionaries, the polyMesh, and volVectorFields.

Main functions:
- read_foam_file / parse_foam: Parse OpenFOAM ASCII files
- read_mesh: Read polyMesh and compute cell and boundary face centres
- read_vol_vector_field / write_vol_vector_field: Field input and output
- select_times: Pick time directories like OpenFOAM's timeSelector
"""

from .case import (
    CONSTANT,
    FoamCase,
)
from .parser import (
    FoamFile,
    parse_foam,
    read_foam_file,
)
from .mesh import (
    FvMesh,
    Patch,
    read_mesh,
)
from .fields import (
    PatchField,
    VolVectorField,
    read_vol_vector_field,
    write_vol_vector_field,
)
from .time_selector import (
    TimeSelection,
    parse_time_ranges,
    select_times,
)

__all__ = [
    # Case layout
    'CONSTANT',
    'FoamCase',
    # Parsing
    'FoamFile',
    'parse_foam',
    'read_foam_file',
    # Mesh
    'FvMesh',
    'Patch',
    'read_mesh',
    # Fields
    'PatchField',
    'VolVectorField',
    'read_vol_vector_field',
    'write_vol_vector_field',
    # Time selection
    'TimeSelection',
    'parse_time_ranges',
    'select_times',
]
