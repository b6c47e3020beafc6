"""
volVectorField input and output

A cell-centred vector field consists of

- its physical dimensions, a 7-entry set in OpenFOAM order
  [mass length time temperature moles current luminous-intensity]
- internal values, one vector per cell
- one patch field per boundary patch: a type and (for most types) a value
  per face

Internal and patch values are held as DataArrays with dims
('cell', 'component') and ('face', 'component').
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
import xarray as xr

from ..config.defaults import VELOCITY_DIMENSIONS
from ..errors import FieldMissingError, FieldShapeError, FoamFormatError
from ..utils.vectors import vector_array
from .case import FoamCase
from .mesh import FvMesh, Patch
from .parser import read_foam_file
from .writer import FOOTER, format_dimensions, write_header, write_vector_list

logger = logging.getLogger(__name__)


@dataclass
class PatchField:
    """Boundary condition type and face values of one patch (None where the type stores none)."""
    type: str
    value: Optional[xr.DataArray] = None


@dataclass
class VolVectorField:
    """A cell-centred vector field with its boundary patches."""
    name: str
    internal: xr.DataArray
    dimensions: Tuple[float, ...] = VELOCITY_DIMENSIONS
    boundary: Dict[str, PatchField] = field(default_factory=dict)

    def patch_values(self, patch: Patch) -> xr.DataArray:
        """
        Face values of a patch.

        Uses the patch's own ``value`` when one was read, otherwise the
        values of the cells next to the patch (zero-gradient extrapolation).
        """
        patch_field = self.boundary.get(patch.name)
        if patch_field is not None and patch_field.value is not None:
            return patch_field.value
        owner_values = self.internal.values[patch.face_cells]
        return vector_array(owner_values, dim='face')


def _expand_values(value: Any, size: int, where: str) -> np.ndarray:
    """Turn a parsed ``uniform``/``nonuniform`` entry into an (size, 3) array."""
    items = value if isinstance(value, list) else [value]
    if not items or not isinstance(items[0], str) or items[0] not in ('uniform', 'nonuniform'):
        raise FoamFormatError(f"{where}: expected 'uniform' or 'nonuniform' value")

    data = np.asarray(items[-1], dtype=float)
    if items[0] == 'uniform':
        if data.shape != (3,):
            raise FieldShapeError(f"{where}: uniform value is not a vector")
        return np.tile(data, (size, 1))

    if data.size == 0 and size == 0:
        return np.zeros((0, 3))
    if data.ndim != 2 or data.shape[1] != 3:
        raise FieldShapeError(f"{where}: nonuniform value is not a vector list")
    if data.shape[0] != size:
        raise FieldShapeError(f"{where}: {data.shape[0]} values for {size} entries")
    return data


def read_vol_vector_field(
    case: FoamCase,
    name: str,
    time_name: str,
    mesh: FvMesh
) -> VolVectorField:
    """
    Read a volVectorField of a time on a mesh.

    Parameters
    ----------
    case : FoamCase
        Case to read from
    name : str
        Field name, e.g. 'U'
    time_name : str
        Time directory name
    mesh : FvMesh
        Mesh the field lives on; sizes are checked against it

    Returns
    -------
    VolVectorField
        Field values and boundary patches

    Raises
    ------
    FieldMissingError
        If the field file does not exist
    FieldShapeError
        If values do not match the mesh
    FoamFormatError
        If the file cannot be parsed
    """
    path = case.field_file(name, time_name)
    if path is None:
        raise FieldMissingError(f"Field '{name}' not found for time {time_name}")

    entries = read_foam_file(path).entries
    if 'internalField' not in entries:
        raise FoamFormatError(f"{path}: no internalField entry")

    internal = _expand_values(entries['internalField'], mesh.n_cells, f"{path} internalField")
    dimensions = entries.get('dimensions', VELOCITY_DIMENSIONS)

    boundary = {}
    for patch_name, patch_entries in (entries.get('boundaryField') or {}).items():
        if not isinstance(patch_entries, dict):
            continue
        patch = mesh.patches.get(patch_name)
        value = None
        if patch is not None and 'value' in patch_entries:
            value = vector_array(
                _expand_values(patch_entries['value'], patch.n_faces, f"{path} {patch_name}"),
                dim='face',
            )
        boundary[patch_name] = PatchField(type=str(patch_entries.get('type', 'calculated')), value=value)

    return VolVectorField(
        name=name,
        internal=vector_array(internal, dim='cell'),
        dimensions=tuple(dimensions),
        boundary=boundary,
    )


def write_vol_vector_field(
    path: Union[str, Path],
    vol_field: VolVectorField,
    location: Optional[str] = None
) -> Path:
    """
    Write a volVectorField in ASCII format.

    Parameters
    ----------
    path : str or Path
        Output file; parent directories are created
    vol_field : VolVectorField
        Field to write; each patch is written with its own type and, if it
        has one, its value
    location : str, optional
        Time name recorded in the header

    Returns
    -------
    Path
        The written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as stream:
        write_header(stream, 'volVectorField', vol_field.name, location)
        stream.write(f"dimensions      {format_dimensions(vol_field.dimensions)};\n\n")
        stream.write("internalField   ")
        write_vector_list(stream, vol_field.internal.values)
        stream.write(";\n\n")
        stream.write("boundaryField\n{\n")
        for patch_name, patch_field in vol_field.boundary.items():
            stream.write(f"    {patch_name}\n    {{\n")
            stream.write(f"        type            {patch_field.type};\n")
            if patch_field.value is not None:
                stream.write("        value           ")
                write_vector_list(stream, patch_field.value.values)
                stream.write(";\n")
            stream.write("    }\n")
        stream.write("}\n\n\n")
        stream.write(FOOTER)
    logger.debug(f"Wrote {path}")
    return path


__all__ = [
    'PatchField',
    'VolVectorField',
    'read_vol_vector_field',
    'write_vol_vector_field',
]
