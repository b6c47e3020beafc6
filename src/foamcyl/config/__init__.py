"""
Configuration Module

Default names and constants, and the reader for the rotation axis stored in
the case's mesh-motion dictionary.

Main functions:
- read_rotation_axis: Read axis and origin from constant/dynamicMeshDict
- find_rotation_record: Locate the rotation record inside a parsed dictionary
"""

from . import defaults
from .dynamic_mesh import (
    find_rotation_record,
    read_rotation_axis,
)

__all__ = [
    'defaults',
    'find_rotation_record',
    'read_rotation_axis',
]
