"""
Per-time-step conversion pipeline

For every selected time the pipeline

1. re-reads the mesh (cell positions may move between times)
2. builds the cylindrical basis at cell centres and boundary face centres
3. optionally writes the basis as cRad and cTheta
4. reads U if the time has it, projects it and writes Ucyl

A time without U is skipped with a warning; anything else that goes wrong
is raised as StepError naming the time and field.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import numpy.typing as npt
import xarray as xr

from .config.defaults import (
    CONSTRAINT_PATCH_TYPES,
    COUPLED_PATCH_TYPES,
    CYLINDRICAL_VELOCITY_FIELD,
    DIMENSIONLESS,
    ON_AXIS_TOLERANCE,
    RADIAL_FIELD,
    TANGENTIAL_FIELD,
    VELOCITY_FIELD,
)
from .errors import FieldMissingError, FieldShapeError, FoamFormatError, MeshError, StepError
from .foam.case import FoamCase
from .foam.fields import PatchField, VolVectorField, read_vol_vector_field, write_vol_vector_field
from .foam.mesh import FvMesh, Patch, read_mesh
from .transform.axis import RotationAxis
from .transform.coordinates import compute_cylindrical_basis
from .transform.velocity import project_to_cylindrical

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    """Terminal state of one time step."""
    WRITTEN = 'written'
    SKIPPED = 'skipped'


@dataclass
class StepResult:
    """Outcome of converting one time step."""
    time_name: str
    status: StepStatus
    n_cells: int
    n_on_axis: int
    written: List[Path] = field(default_factory=list)
    n_faces_on_axis: int = 0


@dataclass
class MeshBasis:
    """Cylindrical basis at cell centres and at non-empty patch face centres."""
    cells: xr.Dataset
    patches: Dict[str, xr.Dataset] = field(default_factory=dict)


def build_mesh_basis(
    mesh: FvMesh,
    axis: RotationAxis,
    seed: Optional[npt.ArrayLike] = None,
    tolerance: float = ON_AXIS_TOLERANCE
) -> MeshBasis:
    """Compute the basis for every cell and every non-empty boundary patch."""
    cells = compute_cylindrical_basis(mesh.cell_centres, axis, tolerance=tolerance, seed=seed)
    patches = {
        name: compute_cylindrical_basis(patch.face_centres, axis, tolerance=tolerance, seed=seed)
        for name, patch in mesh.patches.items()
        if patch.type != 'empty'
    }
    return MeshBasis(cells=cells, patches=patches)


def output_patch_field(patch: Patch, values: Optional[xr.DataArray]) -> PatchField:
    """
    Patch entry of a derived field on ``patch``.

    Constraint patches keep their own type, with face values only for the
    coupled ones; every other patch is written as 'calculated'.
    """
    if patch.type in COUPLED_PATCH_TYPES:
        return PatchField(type=patch.type, value=values)
    if patch.type in CONSTRAINT_PATCH_TYPES or values is None:
        return PatchField(type=patch.type)
    return PatchField(type='calculated', value=values)


def basis_fields(mesh: FvMesh, basis: MeshBasis) -> Tuple[VolVectorField, VolVectorField]:
    """Package the basis as the dimensionless cRad and cTheta fields."""
    result = []
    for name, variable in ((RADIAL_FIELD, 'radial'), (TANGENTIAL_FIELD, 'tangential')):
        boundary = {}
        for patch_name, patch in mesh.patches.items():
            patch_basis = basis.patches.get(patch_name)
            values = None if patch_basis is None else patch_basis[variable]
            boundary[patch_name] = output_patch_field(patch, values)
        result.append(VolVectorField(
            name=name,
            internal=basis.cells[variable],
            dimensions=DIMENSIONLESS,
            boundary=boundary,
        ))
    return result[0], result[1]


def cylindrical_velocity_field(
    velocity: VolVectorField,
    mesh: FvMesh,
    basis: MeshBasis,
    axis: RotationAxis,
    name: str = CYLINDRICAL_VELOCITY_FIELD
) -> VolVectorField:
    """
    Project a Cartesian velocity field, boundary patches included.

    Patch values come from the velocity's own patch values where it has
    them, otherwise from the adjacent cells.
    """
    internal = project_to_cylindrical(
        velocity.internal.assign_attrs(dimensions=velocity.dimensions), basis.cells, axis
    )

    boundary = {}
    for patch_name, patch in mesh.patches.items():
        patch_basis = basis.patches.get(patch_name)
        values = None
        if patch_basis is not None:
            values = project_to_cylindrical(velocity.patch_values(patch), patch_basis, axis)
        boundary[patch_name] = output_patch_field(patch, values)

    return VolVectorField(
        name=name,
        internal=internal,
        dimensions=tuple(internal.attrs['dimensions']),
        boundary=boundary,
    )


def _write(case: FoamCase, time_name: str, vol_field: VolVectorField) -> Path:
    path = case.time_dir(time_name) / vol_field.name
    try:
        return write_vol_vector_field(path, vol_field, location=time_name)
    except OSError as exc:
        raise StepError(time_name, f"cannot write {path}: {exc}", field=vol_field.name) from exc


def convert_time_step(
    case: FoamCase,
    time_name: str,
    axis: RotationAxis,
    save_unit_vectors: bool = False,
    seed: Optional[npt.ArrayLike] = None,
    tolerance: float = ON_AXIS_TOLERANCE
) -> StepResult:
    """
    Convert the velocity of one time step to cylindrical components.

    Parameters
    ----------
    case : FoamCase
        Case to process
    time_name : str
        Time directory name
    axis : RotationAxis
        Rotation axis
    save_unit_vectors : bool, optional
        Also write cRad and cTheta. Default: False
    seed : array-like, optional
        Seed direction, recorded with the basis
    tolerance : float, optional
        On-axis distance threshold. Default: ON_AXIS_TOLERANCE

    Returns
    -------
    StepResult
        WRITTEN if Ucyl was written, SKIPPED if the time has no U

    Raises
    ------
    StepError
        If the mesh or U cannot be read, or an output cannot be written
    """
    logger.info(f"Time = {time_name}")

    try:
        mesh = read_mesh(case, time_name)
    except (MeshError, FoamFormatError, OSError) as exc:
        raise StepError(time_name, f"cannot read mesh: {exc}") from exc

    logger.info("    Creating cylindrical system (r, theta, z)")
    basis = build_mesh_basis(mesh, axis, seed=seed, tolerance=tolerance)
    n_on_axis = basis.cells.attrs['n_on_axis']
    n_faces_on_axis = sum(p.attrs['n_on_axis'] for p in basis.patches.values())
    if n_on_axis or n_faces_on_axis:
        logger.warning(
            f"    {n_on_axis} cell centre(s) and {n_faces_on_axis} boundary face centre(s) "
            "on the rotation axis; radial and tangential components set to zero there"
        )

    written = []
    if save_unit_vectors:
        logger.info(f"    Saving unit vectors {RADIAL_FIELD} and {TANGENTIAL_FIELD}")
        for vol_field in basis_fields(mesh, basis):
            written.append(_write(case, time_name, vol_field))

    if not case.has_field(VELOCITY_FIELD, time_name):
        logger.warning(f"    No existing {VELOCITY_FIELD} field for time {time_name}, skipping")
        return StepResult(
            time_name, StepStatus.SKIPPED, mesh.n_cells, n_on_axis, written, n_faces_on_axis
        )

    logger.info(f"    Reading {VELOCITY_FIELD}")
    try:
        velocity = read_vol_vector_field(case, VELOCITY_FIELD, time_name, mesh)
    except (FieldMissingError, FieldShapeError, FoamFormatError, OSError) as exc:
        raise StepError(time_name, str(exc), field=VELOCITY_FIELD) from exc

    logger.info(f"    Converting {VELOCITY_FIELD}")
    ucyl = cylindrical_velocity_field(velocity, mesh, basis, axis)
    written.append(_write(case, time_name, ucyl))

    return StepResult(time_name, StepStatus.WRITTEN, mesh.n_cells, n_on_axis, written, n_faces_on_axis)


def convert_case(
    case: FoamCase,
    times: Iterable[str],
    axis: RotationAxis,
    save_unit_vectors: bool = False,
    seed: Optional[npt.ArrayLike] = None
) -> List[StepResult]:
    """
    Convert every selected time step, in order.

    Stops at the first StepError; earlier steps keep their output.

    Examples
    --------
    >>> from foamcyl import FoamCase, read_rotation_axis, select_times, convert_case
    >>>
    >>> case = FoamCase('/path/to/case')
    >>> axis = read_rotation_axis(case)
    >>> results = convert_case(case, select_times(case), axis, save_unit_vectors=True)
    >>> [r.status.value for r in results]
    ['skipped', 'written', 'written']
    """
    results = [
        convert_time_step(case, time_name, axis, save_unit_vectors=save_unit_vectors, seed=seed)
        for time_name in times
    ]
    n_written = sum(r.status is StepStatus.WRITTEN for r in results)
    logger.info(f"Converted {n_written} of {len(results)} time step(s)")
    return results


__all__ = [
    'StepStatus',
    'StepResult',
    'MeshBasis',
    'build_mesh_basis',
    'output_patch_field',
    'basis_fields',
    'cylindrical_velocity_field',
    'convert_time_step',
    'convert_case',
]
