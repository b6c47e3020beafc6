"""
polyMesh reader and cell-centre geometry

Reads ``points``, ``faces``, ``owner``, ``neighbour`` and ``boundary`` and
computes face centres/area vectors and cell centres the same way OpenFOAM's
primitiveMesh does:

- face centre: area-weighted centroid of the triangles formed by each edge
  and the average of the face's points
- cell centre: volume-weighted centroid of the pyramids formed by each face
  and an estimated cell centre (the average of its face centres)

All loops run over faces grouped by vertex count, so the work is vectorised
even for polyhedral meshes.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np
import numpy.typing as npt
import xarray as xr

from ..errors import MeshError
from ..utils.vectors import vector_array
from .case import FoamCase
from .parser import read_foam_file

logger = logging.getLogger(__name__)

VSMALL = 1.0e-300

MESH_FILES = ('points', 'faces', 'owner', 'neighbour', 'boundary')


@dataclass
class Patch:
    """One boundary patch and the centres of its faces."""
    name: str
    type: str
    start_face: int
    n_faces: int
    face_centres: xr.DataArray
    face_cells: npt.NDArray[np.int64]


@dataclass
class FvMesh:
    """
    Mesh geometry needed for cell-centred fields at one time.

    Attributes
    ----------
    time_name : str
        Time the mesh was read for
    cell_centres : xarray.DataArray
        Dims ('cell', 'component')
    patches : dict of Patch
        Boundary patches in file order
    """
    time_name: str
    cell_centres: xr.DataArray
    patches: Dict[str, Patch] = field(default_factory=dict)

    @property
    def n_cells(self) -> int:
        return self.cell_centres.sizes['cell']


def face_centres_and_areas(
    points: npt.NDArray[np.floating],
    faces: Sequence[npt.NDArray[np.integer]]
) -> Tuple[npt.NDArray[np.floating], npt.NDArray[np.floating]]:
    """
    Compute face centres and area vectors.

    Parameters
    ----------
    points : numpy.ndarray
        Point coordinates, shape (n_points, 3)
    faces : sequence of numpy.ndarray
        Point labels of each face, ordered so the right-hand normal points
        out of the owner cell

    Returns
    -------
    centres : numpy.ndarray
        Face centres, shape (n_faces, 3)
    areas : numpy.ndarray
        Face area vectors, shape (n_faces, 3)
    """
    n_faces = len(faces)
    centres = np.zeros((n_faces, 3))
    areas = np.zeros((n_faces, 3))
    if n_faces == 0:
        return centres, areas

    sizes = np.fromiter((len(f) for f in faces), dtype=np.int64, count=n_faces)
    if sizes.min() < 3:
        raise MeshError(f"Face {int(np.argmin(sizes))} has fewer than 3 points")

    for size in np.unique(sizes):
        index = np.nonzero(sizes == size)[0]
        labels = np.array([faces[i] for i in index], dtype=np.int64)
        pts = points[labels]

        if size == 3:
            centres[index] = pts.mean(axis=1)
            areas[index] = 0.5 * np.cross(pts[:, 1] - pts[:, 0], pts[:, 2] - pts[:, 0])
            continue

        estimate = pts.mean(axis=1)
        sum_n = np.zeros((len(index), 3))
        sum_a = np.zeros(len(index))
        sum_ac = np.zeros((len(index), 3))
        for j in range(size):
            a = pts[:, j]
            b = pts[:, (j + 1) % size]
            n = np.cross(b - a, estimate - a)
            mag = np.linalg.norm(n, axis=1)
            sum_n += n
            sum_a += mag
            sum_ac += mag[:, np.newaxis] * (a + b + estimate)

        flat = sum_a < VSMALL
        safe_a = np.where(flat, 1.0, 3.0 * sum_a)
        centres[index] = np.where(flat[:, np.newaxis], estimate, sum_ac / safe_a[:, np.newaxis])
        areas[index] = 0.5 * sum_n

    return centres, areas


def cell_centres(
    face_centres: npt.NDArray[np.floating],
    face_areas: npt.NDArray[np.floating],
    owner: npt.NDArray[np.integer],
    neighbour: npt.NDArray[np.integer],
    n_cells: int
) -> npt.NDArray[np.floating]:
    """
    Compute cell centres from face geometry and connectivity.

    Parameters
    ----------
    face_centres, face_areas : numpy.ndarray
        Output of face_centres_and_areas(), shape (n_faces, 3)
    owner : numpy.ndarray
        Owner cell of every face, shape (n_faces,)
    neighbour : numpy.ndarray
        Neighbour cell of every internal face, shape (n_internal_faces,)
    n_cells : int
        Number of cells

    Returns
    -------
    numpy.ndarray
        Cell centres, shape (n_cells, 3)
    """
    n_internal = len(neighbour)
    internal_centres = face_centres[:n_internal]
    internal_areas = face_areas[:n_internal]

    # Estimated centre: average of the cell's face centres
    estimate = np.zeros((n_cells, 3))
    n_cell_faces = np.zeros(n_cells)
    np.add.at(estimate, owner, face_centres)
    np.add.at(n_cell_faces, owner, 1.0)
    np.add.at(estimate, neighbour, internal_centres)
    np.add.at(n_cell_faces, neighbour, 1.0)
    if np.any(n_cell_faces == 0):
        raise MeshError(f"Cell {int(np.argmin(n_cell_faces))} has no faces")
    estimate /= n_cell_faces[:, np.newaxis]

    weighted = np.zeros((n_cells, 3))
    volume = np.zeros(n_cells)

    # Pyramids on the owner side
    own_vol = np.maximum(np.einsum('ij,ij->i', face_areas, face_centres - estimate[owner]), VSMALL)
    own_centre = 0.75 * face_centres + 0.25 * estimate[owner]
    np.add.at(weighted, owner, own_vol[:, np.newaxis] * own_centre)
    np.add.at(volume, owner, own_vol)

    # Pyramids on the neighbour side
    nei_vol = np.maximum(
        np.einsum('ij,ij->i', internal_areas, estimate[neighbour] - internal_centres), VSMALL
    )
    nei_centre = 0.75 * internal_centres + 0.25 * estimate[neighbour]
    np.add.at(weighted, neighbour, nei_vol[:, np.newaxis] * nei_centre)
    np.add.at(volume, neighbour, nei_vol)

    return np.where(
        (np.abs(volume) > VSMALL)[:, np.newaxis],
        weighted / np.where(volume == 0, 1.0, volume)[:, np.newaxis],
        estimate,
    )


def _read_faces(path) -> List[npt.NDArray[np.int64]]:
    foam_file = read_foam_file(path)
    if foam_file.header.get('class') == 'faceCompactList':
        if len(foam_file.lists) != 2:
            raise MeshError(f"{path}: faceCompactList needs offsets and labels")
        offsets, labels = (np.asarray(a, dtype=np.int64) for a in foam_file.lists)
        return np.split(labels, offsets[1:-1])
    faces = foam_file.content
    if isinstance(faces, np.ndarray):
        # Every face has the same size and no size prefix was written
        return list(faces.astype(np.int64))
    return faces


def _read_labels(path) -> npt.NDArray[np.int64]:
    labels = read_foam_file(path).content
    return np.asarray(labels, dtype=np.int64).ravel()


def read_boundary(path) -> List[Tuple[str, dict]]:
    """Read a polyMesh ``boundary`` file into (name, entries) pairs."""
    content = read_foam_file(path).content
    if isinstance(content, np.ndarray) and content.size == 0:
        return []
    if len(content) % 2:
        raise MeshError(f"{path}: expected name/dictionary pairs")
    pairs = []
    for name, entries in zip(content[0::2], content[1::2]):
        if not isinstance(entries, dict):
            raise MeshError(f"{path}: patch {name!r} has no dictionary")
        for key in ('type', 'nFaces', 'startFace'):
            if key not in entries:
                raise MeshError(f"{path}: patch {name!r} lacks '{key}'")
        pairs.append((str(name), entries))
    return pairs


def read_mesh(case: FoamCase, time_name: str) -> FvMesh:
    """
    Read the mesh valid at a time and compute its cell centres.

    Each polyMesh file is taken from the newest time directory at or before
    ``time_name`` that contains it, falling back to ``constant/polyMesh``,
    so moving meshes are picked up at every step.

    Parameters
    ----------
    case : FoamCase
        Case to read from
    time_name : str
        Time directory name, or 'constant'

    Returns
    -------
    FvMesh
        Cell centres and boundary patch face centres

    Raises
    ------
    MeshError
        If a polyMesh file is missing or connectivity is inconsistent
    FoamFormatError
        If a polyMesh file cannot be parsed
    """
    paths = {}
    for name in MESH_FILES:
        path = case.find_mesh_file(name, time_name)
        if path is None:
            raise MeshError(f"polyMesh file '{name}' not found for time {time_name} in {case.root}")
        paths[name] = path

    points = np.asarray(read_foam_file(paths['points']).content, dtype=float).reshape(-1, 3)
    faces = _read_faces(paths['faces'])
    owner = _read_labels(paths['owner'])
    neighbour = _read_labels(paths['neighbour'])

    n_faces = len(faces)
    if len(owner) != n_faces:
        raise MeshError(f"owner has {len(owner)} entries for {n_faces} faces")
    if len(neighbour) > n_faces:
        raise MeshError(f"neighbour has {len(neighbour)} entries for {n_faces} faces")
    if n_faces and max(int(f.max()) for f in faces) >= len(points):
        raise MeshError("faces reference points beyond the points list")

    n_cells = int(max(owner.max(initial=-1), neighbour.max(initial=-1))) + 1
    if n_cells == 0:
        raise MeshError(f"Mesh for time {time_name} has no cells")

    f_centres, f_areas = face_centres_and_areas(points, faces)
    centres = cell_centres(f_centres, f_areas, owner, neighbour, n_cells)

    patches = {}
    for name, entries in read_boundary(paths['boundary']):
        start = int(entries['startFace'])
        size = int(entries['nFaces'])
        if start + size > n_faces:
            raise MeshError(f"Patch {name!r} extends beyond the face list")
        patches[name] = Patch(
            name=name,
            type=str(entries['type']),
            start_face=start,
            n_faces=size,
            face_centres=vector_array(f_centres[start:start + size], dim='face'),
            face_cells=owner[start:start + size],
        )

    logger.debug(f"Read mesh for time {time_name}: {n_cells} cells, {len(patches)} patches")
    return FvMesh(
        time_name=time_name,
        cell_centres=vector_array(centres, dim='cell'),
        patches=patches,
    )


__all__ = [
    'Patch',
    'FvMesh',
    'face_centres_and_areas',
    'cell_centres',
    'read_boundary',
    'read_mesh',
]
