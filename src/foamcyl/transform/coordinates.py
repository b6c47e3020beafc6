"""
Local cylindrical basis at cell centres

This module builds the cylindrical frame (radial, tangential, axial) at
every point of a set of positions, typically the cell centres of a mesh,
about an arbitrary rotation axis.

Basis definitions, for a point c with p = c - origin:
- axial part:   (p . a) a
- radial:       e_r = perp / |perp|, where perp = p - (p . a) a
- tangential:   e_theta = (a x e_r) / |a x e_r|
- axial:        a itself

(e_r, e_theta, a) is a right-handed orthonormal triple. Points on the axis
(|perp| within the absolute tolerance, or within a small fraction of |p|)
have no radial direction; both vectors are set to zero there and flagged
in 'on_axis'.
"""

from typing import Optional
import numpy as np
import numpy.typing as npt
import xarray as xr

from ..config.defaults import ON_AXIS_RELATIVE_TOLERANCE, ON_AXIS_TOLERANCE
from ..utils.vectors import magnitude, safe_normalize
from .axis import RotationAxis


def compute_cylindrical_basis(
    centres: xr.DataArray,
    axis: RotationAxis,
    tolerance: float = ON_AXIS_TOLERANCE,
    seed: Optional[npt.ArrayLike] = None,
    relative_tolerance: float = ON_AXIS_RELATIVE_TOLERANCE
) -> xr.Dataset:
    """
    Compute radial and tangential unit vectors at each position.

    Parameters
    ----------
    centres : xarray.DataArray
        Positions with a 'component' dimension of length 3, e.g. cell
        centres with dims ('cell', 'component')
    axis : RotationAxis
        Rotation axis (unit direction and origin)
    tolerance : float, optional
        Distance from the axis at or below which a point is treated as on
        the axis. Default: ON_AXIS_TOLERANCE (1e-30)
    seed : array-like, optional
        Seed direction from pick_seed_direction(), recorded in the
        attributes only
    relative_tolerance : float, optional
        Additional threshold as a fraction of the distance from the origin,
        so a point exactly on the axis is caught after rounding.
        Default: ON_AXIS_RELATIVE_TOLERANCE (1e-14)

    Returns
    -------
    basis : xarray.Dataset
        Dataset with variables:
        - radial (..., component) : unit radial vector, zero on the axis
        - tangential (..., component) : unit tangential vector, zero on the axis
        - on_axis (...) : True where the point lies on the axis
        - radius (...) : distance from the axis

    Raises
    ------
    ValueError
        If centres has no 'component' dimension of length 3

    Examples
    --------
    >>> from foamcyl.transform import RotationAxis, compute_cylindrical_basis
    >>> from foamcyl.utils import vector_array
    >>>
    >>> axis = RotationAxis.from_vectors([0, 0, 1], [0, 0, 0])
    >>> centres = vector_array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    >>> basis = compute_cylindrical_basis(centres, axis)
    >>> basis['tangential'].values
    array([[ 0.,  1.,  0.],
           [-1.,  0.,  0.]])

    Notes
    -----
    - Fully vectorized: no Python loop over points
    - The origin only translates positions; the axis passes through it
    - Degenerate points never produce NaN
    """
    if 'component' not in centres.dims or centres.sizes['component'] != 3:
        raise ValueError("centres must have a 'component' dimension of length 3.")

    a = axis.axis_array()
    o = axis.origin_array()

    # Position relative to the origin, split into axial and perpendicular parts
    p = centres - o
    axial = (p * a).sum('component') * a
    perp = p - axial

    radius = magnitude(perp)
    threshold = np.maximum(tolerance, relative_tolerance * magnitude(p))
    on_axis = radius <= threshold

    radial = safe_normalize(perp, on_axis)
    tangential = safe_normalize(xr.cross(a, radial, dim='component'), on_axis)

    # Keep the input's dimension order
    radial = radial.transpose(*centres.dims)
    tangential = tangential.transpose(*centres.dims)

    basis = xr.Dataset({
        'radial': radial,
        'tangential': tangential,
        'on_axis': on_axis,
        'radius': radius,
    })

    basis['radial'].attrs = {
        'long_name': 'radial unit vector',
        'description': 'Direction away from the axis, perpendicular to it',
        'note': 'Zero vector on the axis',
    }
    basis['tangential'].attrs = {
        'long_name': 'tangential unit vector',
        'description': 'axis x radial',
        'note': 'Zero vector on the axis',
    }
    basis['on_axis'].attrs = {
        'long_name': 'point lies on the rotation axis',
        'tolerance': tolerance,
        'relative_tolerance': relative_tolerance,
    }
    basis['radius'].attrs = {
        'long_name': 'distance from the rotation axis',
    }

    basis.attrs.update({
        'axis': axis.axis.tolist(),
        'origin': axis.origin.tolist(),
        'n_on_axis': int(on_axis.sum()),
    })
    if seed is not None:
        basis.attrs['seed_direction'] = np.asarray(seed, dtype=float).tolist()

    return basis


__all__ = [
    'compute_cylindrical_basis',
]
