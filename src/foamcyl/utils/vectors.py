"""
Vector helpers

This module wraps numpy arrays of 3-vectors as xarray DataArrays with a
labelled ``component`` dimension, and provides the magnitude and
normalisation used throughout the transform code.
"""

from typing import Union
import numpy as np
import numpy.typing as npt
import xarray as xr

COMPONENTS = ['x', 'y', 'z']


def vector_array(
    values: npt.ArrayLike,
    dim: str = 'cell',
    components=COMPONENTS
) -> xr.DataArray:
    """
    Wrap an (n, 3) array as a DataArray with dims (dim, 'component').

    Parameters
    ----------
    values : array-like
        Vectors, shape (n, 3); a single 3-vector is accepted for dim=None
    dim : str, optional
        Name of the point dimension. Use None for a single vector.
        Default: 'cell'
    components : list of str, optional
        Labels of the component coordinate. Default: ['x', 'y', 'z']

    Returns
    -------
    xarray.DataArray
        Float array with a 'component' coordinate

    Examples
    --------
    >>> from foamcyl.utils import vector_array
    >>> c = vector_array([[1.0, 0.0, 0.0], [0.0, 2.0, 0.0]])
    >>> c.dims
    ('cell', 'component')
    """
    values = np.asarray(values, dtype=float)
    if dim is None:
        if values.shape != (3,):
            raise ValueError(f"Expected a single 3-vector, got shape {values.shape}")
        return xr.DataArray(values, dims=('component',), coords={'component': list(components)})

    values = values.reshape(-1, 3)
    return xr.DataArray(
        values,
        dims=(dim, 'component'),
        coords={'component': list(components)},
    )


def magnitude(vectors: xr.DataArray) -> xr.DataArray:
    """Euclidean norm over the 'component' dimension."""
    return np.sqrt((vectors ** 2).sum('component'))


def safe_normalize(
    vectors: xr.DataArray,
    degenerate: Union[xr.DataArray, bool]
) -> xr.DataArray:
    """
    Divide vectors by their magnitude, returning zero where ``degenerate``.

    No division by zero takes place, so no NaN or RuntimeWarning is produced
    for degenerate entries.
    """
    mag = magnitude(vectors)
    return xr.where(degenerate, 0.0, vectors / xr.where(degenerate, 1.0, mag))


__all__ = [
    'COMPONENTS',
    'vector_array',
    'magnitude',
    'safe_normalize',
]
