"""
Rotation axis from the mesh-motion dictionary

Reads ``constant/dynamicMeshDict`` and extracts the ``axis`` and ``origin``
of the solid-body rotation. Older cases nest them under
``solidBodyMotionFvMeshCoeffs/rotatingMotionCoeffs``; newer ones use
``solidBodyCoeffs/rotatingMotionCoeffs``, or put them at the top level next
to ``solidBodyMotionFunction rotatingMotion``. The first record present is
used and must be complete: a partial record never falls back to a later one.
"""

import logging
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple

import numpy as np

from ..errors import ConfigMissingError, ConfigShapeError, ConfigValueError, FoamFormatError
from ..foam.case import FoamCase
from ..foam.parser import read_foam_file
from ..foam.writer import format_vector
from ..transform.axis import RotationAxis
from .defaults import (
    DYNAMIC_MESH_DICT,
    MOTION_FUNCTION_KEY,
    ROTATING_MOTION,
    ROTATION_RECORD_PATHS,
)

logger = logging.getLogger(__name__)


def _lookup(entries: Dict[str, Any], path: Sequence[str]) -> Optional[Dict[str, Any]]:
    record: Any = entries
    for key in path:
        if not isinstance(record, dict) or not isinstance(record.get(key), dict):
            return None
        record = record[key]
    return record


def _vector(record: Dict[str, Any], key: str, where: str) -> np.ndarray:
    try:
        value = np.asarray(record[key], dtype=float)
    except (TypeError, ValueError) as exc:
        raise ConfigShapeError(f"{where}: '{key}' is not a vector: {record[key]!r}") from exc
    if value.shape != (3,):
        raise ConfigShapeError(f"{where}: '{key}' must have 3 components, got {record[key]!r}")
    return value


def _candidates(
    entries: Dict[str, Any],
    paths: Sequence[Tuple[str, ...]]
) -> Iterator[Tuple[Tuple[str, ...], Dict[str, Any]]]:
    for path in paths:
        record = _lookup(entries, path)
        if record is not None:
            yield tuple(path), record
    # motionSolver solidBody keeps the coefficients inline or in <function>Coeffs
    if entries.get(MOTION_FUNCTION_KEY) == ROTATING_MOTION:
        coeffs_path = (f"{ROTATING_MOTION}Coeffs",)
        coeffs = _lookup(entries, coeffs_path)
        if coeffs is not None:
            yield coeffs_path, coeffs
        else:
            yield (), entries


def find_rotation_record(
    entries: Dict[str, Any],
    paths: Sequence[Tuple[str, ...]] = ROTATION_RECORD_PATHS
) -> Tuple[Tuple[str, ...], Dict[str, Any]]:
    """
    Find the rigid-rotation record and check it holds 'axis' and 'origin'.

    The first of ``paths`` that exists is used. A top-level record is only
    accepted when the dictionary declares ``solidBodyMotionFunction
    rotatingMotion``.

    Parameters
    ----------
    entries : dict
        Parsed dictionary content
    paths : sequence of tuple of str, optional
        Candidate sub-dictionary paths. Default: ROTATION_RECORD_PATHS

    Returns
    -------
    path : tuple of str
        Path of the record found, empty for the top level
    record : dict
        The record

    Raises
    ------
    ConfigShapeError
        If no record exists, or the one found lacks 'axis' or 'origin'
    """
    for path, record in _candidates(entries, paths):
        for key in ('axis', 'origin'):
            if key not in record:
                where = "/".join(path) or "<top level>"
                raise ConfigShapeError(f"{where}: missing '{key}'")
        return path, record

    tried = ["/".join(p) for p in paths]
    tried.append(f"<top level> with {MOTION_FUNCTION_KEY} {ROTATING_MOTION}")
    raise ConfigShapeError(f"No rotation record found; tried {', '.join(tried)}")


def read_rotation_axis(case: FoamCase, dict_name: str = DYNAMIC_MESH_DICT) -> RotationAxis:
    """
    Read the rotation axis and origin of a case.

    Parameters
    ----------
    case : FoamCase
        Case whose constant/ directory holds the dictionary
    dict_name : str, optional
        Dictionary file name. Default: 'dynamicMeshDict'

    Returns
    -------
    RotationAxis
        Normalised axis and origin

    Raises
    ------
    ConfigMissingError
        If the dictionary does not exist
    ConfigShapeError
        If the rotation record or its fields are missing or malformed
    ConfigValueError
        If the axis is the zero vector

    Examples
    --------
    >>> from foamcyl.foam import FoamCase
    >>> from foamcyl.config import read_rotation_axis
    >>>
    >>> axis = read_rotation_axis(FoamCase('/path/to/case'))
    >>> axis.axis, axis.origin
    (array([0., 0., 1.]), array([0., 0., 0.]))
    """
    path = case.dictionary_file(dict_name)
    if path is None:
        raise ConfigMissingError(f"{case.constant_dir / dict_name} not found")

    logger.info("Reading dynamic mesh properties")
    try:
        entries = read_foam_file(path).entries
    except FoamFormatError as exc:
        raise ConfigShapeError(str(exc)) from exc

    try:
        record_path, record = find_rotation_record(entries)
    except ConfigShapeError as exc:
        raise ConfigShapeError(f"{path}: {exc}") from exc
    where = f"{path} {'/'.join(record_path) or '<top level>'}"
    axis = _vector(record, 'axis', where)
    origin = _vector(record, 'origin', where)

    try:
        rotation = RotationAxis.from_vectors(axis, origin)
    except ConfigValueError as exc:
        raise ConfigValueError(f"{where}: {exc}") from exc
    logger.info(f"    axis {format_vector(rotation.axis)}, origin {format_vector(rotation.origin)}")
    return rotation


__all__ = [
    'find_rotation_record',
    'read_rotation_axis',
]
