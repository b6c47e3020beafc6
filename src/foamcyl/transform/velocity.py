"""
Velocity decomposition into radial, tangential and axial components

This module projects Cartesian velocity vectors onto the local cylindrical
basis built by compute_cylindrical_basis().

Component definitions:
- u_r (radial): U . e_r, positive = away from the axis
- u_theta (tangential): U . e_theta, positive = counterclockwise when
  looking down the axis (right-hand rule about a)
- u_z (axial): U . a, positive = along the axis direction

u_theta is a signed velocity component, not an angle. On the axis u_r and
u_theta are zero and u_z is still U . a.
"""

from typing import Tuple
import numpy as np
import numpy.typing as npt
import xarray as xr

from ..config.defaults import VELOCITY_DIMENSIONS
from .axis import RotationAxis

CYLINDRICAL_COMPONENTS = ['r', 'theta', 'z']


def project_to_cylindrical(
    velocity: xr.DataArray,
    basis: xr.Dataset,
    axis: RotationAxis
) -> xr.DataArray:
    """
    Compute cylindrical velocity components from Cartesian vectors.

    Parameters
    ----------
    velocity : xarray.DataArray
        Cartesian vectors with a 'component' dimension of length 3 and the
        same point dimension as the basis, e.g. ('cell', 'component')
    basis : xarray.Dataset
        Output of compute_cylindrical_basis() for the same points
    axis : RotationAxis
        Rotation axis used to build the basis

    Returns
    -------
    xarray.DataArray
        Same dims as ``velocity``; the 'component' coordinate is
        ['r', 'theta', 'z']. The 'dimensions' attribute is copied from the
        input (velocity dimensions if the input has none).

    Raises
    ------
    ValueError
        If the basis lacks 'radial'/'tangential' or sizes do not match

    Examples
    --------
    >>> from foamcyl.transform import (
    ...     RotationAxis, compute_cylindrical_basis, project_to_cylindrical)
    >>> from foamcyl.utils import vector_array
    >>>
    >>> axis = RotationAxis.from_vectors([0, 0, 1], [0, 0, 0])
    >>> basis = compute_cylindrical_basis(vector_array([[0.0, 1.0, 0.0]]), axis)
    >>> u = vector_array([[1.0, 0.0, 0.0]])
    >>> project_to_cylindrical(u, basis, axis).values
    array([[ 0., -1.,  0.]])

    Notes
    -----
    - Ucyl = (U . e_r, U . e_theta, U . a) point by point
    - The magnitude is preserved wherever the point is off the axis
    """
    if 'radial' not in basis or 'tangential' not in basis:
        raise ValueError(
            "basis must have 'radial' and 'tangential' variables. "
            "Use compute_cylindrical_basis() first."
        )
    if 'component' not in velocity.dims or velocity.sizes['component'] != 3:
        raise ValueError("velocity must have a 'component' dimension of length 3.")

    radial = basis['radial']
    for dim in radial.dims:
        if dim in velocity.dims and velocity.sizes[dim] != radial.sizes[dim]:
            raise ValueError(
                f"velocity has {velocity.sizes[dim]} entries along '{dim}', "
                f"basis has {radial.sizes[dim]}"
            )

    # Drop component labels so the dot products align by position
    u = velocity.drop_vars('component', errors='ignore')
    e_r = radial.drop_vars('component', errors='ignore')
    e_theta = basis['tangential'].drop_vars('component', errors='ignore')
    a = xr.DataArray(axis.axis, dims=('component',))

    u_r = (u * e_r).sum('component')
    u_theta = (u * e_theta).sum('component')
    u_z = (u * a).sum('component')

    ucyl = xr.concat([u_r, u_theta, u_z], dim='component')
    ucyl = ucyl.assign_coords(component=CYLINDRICAL_COMPONENTS).transpose(*velocity.dims)

    ucyl.attrs = {
        'long_name': 'cylindrical velocity',
        'description': 'Components (radial, tangential, axial) about the rotation axis',
        'dimensions': tuple(velocity.attrs.get('dimensions', VELOCITY_DIMENSIONS)),
        'axis': axis.axis.tolist(),
        'origin': axis.origin.tolist(),
    }
    return ucyl


def decompose_velocity_vector(
    u: npt.NDArray[np.floating],
    radial: npt.NDArray[np.floating],
    tangential: npt.NDArray[np.floating],
    axis: npt.NDArray[np.floating]
) -> Tuple[npt.NDArray[np.floating], npt.NDArray[np.floating], npt.NDArray[np.floating]]:
    """
    Decompose velocity vectors into radial, tangential and axial components.

    This is a lower-level function that operates on numpy arrays.
    For xarray data, use project_to_cylindrical() instead.

    Parameters
    ----------
    u : numpy.ndarray
        Cartesian vectors, shape (..., 3)
    radial, tangential : numpy.ndarray
        Unit basis vectors, shape (..., 3)
    axis : numpy.ndarray
        Unit axis, shape (3,)

    Returns
    -------
    u_r, u_theta, u_z : numpy.ndarray
        Components, shape (...)

    Examples
    --------
    >>> import numpy as np
    >>> u_r, u_theta, u_z = decompose_velocity_vector(
    ...     np.array([1.0, 2.0, 3.0]),
    ...     np.array([1.0, 0.0, 0.0]),
    ...     np.array([0.0, 1.0, 0.0]),
    ...     np.array([0.0, 0.0, 1.0]))
    >>> float(u_r), float(u_theta), float(u_z)
    (1.0, 2.0, 3.0)
    """
    u = np.asarray(u, dtype=float)
    u_r = np.einsum('...i,...i->...', u, radial)
    u_theta = np.einsum('...i,...i->...', u, tangential)
    u_z = u @ np.asarray(axis, dtype=float)
    return u_r, u_theta, u_z


__all__ = [
    'CYLINDRICAL_COMPONENTS',
    'project_to_cylindrical',
    'decompose_velocity_vector',
]
