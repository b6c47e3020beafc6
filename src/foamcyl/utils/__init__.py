"""
Utility Functions Module

Helpers for 3-vector DataArrays.

Main functions:
- vector_array: Wrap an (n, 3) array with a labelled 'component' dimension
- magnitude: Vector length over 'component'
- safe_normalize: Unit vectors, zero where flagged degenerate
"""

from .vectors import (
    COMPONENTS,
    vector_array,
    magnitude,
    safe_normalize,
)

__all__ = [
    'COMPONENTS',
    'vector_array',
    'magnitude',
    'safe_normalize',
]
