"""
Rotation axis and seed direction

The cylindrical frame is defined by an oriented line: a unit direction ``a``
through an origin ``o``. Both come from the case's mesh-motion dictionary and
stay fixed for the whole run.
"""

from dataclasses import dataclass
import numpy as np
import numpy.typing as npt
import xarray as xr

from ..errors import ConfigValueError
from ..utils.vectors import vector_array

GLOBAL_X = np.array([1.0, 0.0, 0.0])
GLOBAL_Y = np.array([0.0, 1.0, 0.0])
GLOBAL_Z = np.array([0.0, 0.0, 1.0])


@dataclass(frozen=True, eq=False)
class RotationAxis:
    """
    Oriented rotation axis.

    Use from_vectors() to build one from raw input; it normalises the
    direction and rejects a zero vector.

    Attributes
    ----------
    axis : numpy.ndarray
        Unit direction, shape (3,)
    origin : numpy.ndarray
        A point on the axis, shape (3,)
    """
    axis: npt.NDArray[np.floating]
    origin: npt.NDArray[np.floating]

    @classmethod
    def from_vectors(cls, axis: npt.ArrayLike, origin: npt.ArrayLike) -> 'RotationAxis':
        """
        Build an axis, normalising the direction.

        Raises
        ------
        ConfigValueError
            If the direction is the zero vector or not finite
        ValueError
            If either input is not a 3-vector
        """
        axis = np.asarray(axis, dtype=float)
        origin = np.asarray(origin, dtype=float)
        if axis.shape != (3,) or origin.shape != (3,):
            raise ValueError(
                f"axis and origin must be 3-vectors, got shapes {axis.shape} and {origin.shape}"
            )
        norm = np.linalg.norm(axis)
        if not np.isfinite(norm) or norm == 0.0:
            raise ConfigValueError(f"Rotation axis {tuple(axis)} has zero or invalid length")

        axis = axis / norm
        axis.flags.writeable = False
        origin = origin.copy()
        origin.flags.writeable = False
        return cls(axis=axis, origin=origin)

    def axis_array(self) -> xr.DataArray:
        """The unit direction as a DataArray over 'component'."""
        return vector_array(self.axis, dim=None)

    def origin_array(self) -> xr.DataArray:
        """The origin as a DataArray over 'component'."""
        return vector_array(self.origin, dim=None)


def pick_seed_direction(axis: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Choose a reference direction for the tangential basis.

    Axis-aligned axes get the next global basis vector, giving a
    right-handed (axis, seed) pair; any other axis is returned unchanged.

    Parameters
    ----------
    axis : array-like
        Unit axis direction

    Returns
    -------
    numpy.ndarray
        +Y for a +X axis, +Z for +Y, +X for +Z, otherwise a copy of the axis

    Examples
    --------
    >>> pick_seed_direction([0.0, 0.0, 1.0])
    array([1., 0., 0.])
    >>> pick_seed_direction([1.0, 1.0, 0.0])
    array([1., 1., 0.])

    Notes
    -----
    The basis builder derives the tangential direction as ``a x radial``
    and never reads the seed; for a general axis the returned seed is
    parallel to the axis.
    """
    axis = np.asarray(axis, dtype=float)
    if np.array_equal(axis, GLOBAL_X):
        return GLOBAL_Y.copy()
    if np.array_equal(axis, GLOBAL_Y):
        return GLOBAL_Z.copy()
    if np.array_equal(axis, GLOBAL_Z):
        return GLOBAL_X.copy()
    return axis.copy()


__all__ = [
    'RotationAxis',
    'pick_seed_direction',
]
