"""
Exception hierarchy

Every error raised on purpose by foamcyl derives from FoamCylError, so the
command-line front end can turn any of them into a non-zero exit code with a
single ``except`` clause.
"""

from typing import Optional


class FoamCylError(Exception):
    """Base class for all foamcyl errors."""


class ConfigError(FoamCylError):
    """The mesh-motion configuration could not be used."""


class ConfigMissingError(ConfigError):
    """The mesh-motion dictionary does not exist."""


class ConfigShapeError(ConfigError):
    """The dictionary lacks the expected record, or a field has the wrong shape."""


class ConfigValueError(ConfigError, ValueError):
    """A field is present and well-formed but its value is unusable."""


class FoamFormatError(FoamCylError):
    """An OpenFOAM file could not be parsed."""


class MeshError(FoamCylError):
    """polyMesh data is missing or inconsistent."""


class FieldMissingError(FoamCylError):
    """A requested field file does not exist for a time step."""


class FieldShapeError(FoamCylError):
    """A field's values do not match the mesh it is read on."""


class StepError(FoamCylError):
    """
    A fatal failure while processing one time step.

    Parameters
    ----------
    time_name : str
        Time directory being processed
    message : str
        Description of the failure
    field : str, optional
        Name of the field being read or written, if any
    """

    def __init__(self, time_name: str, message: str, field: Optional[str] = None):
        self.time_name = time_name
        self.field = field
        where = f"time {time_name}"
        if field is not None:
            where += f", field {field}"
        super().__init__(f"{where}: {message}")


__all__ = [
    'FoamCylError',
    'ConfigError',
    'ConfigMissingError',
    'ConfigShapeError',
    'ConfigValueError',
    'FoamFormatError',
    'MeshError',
    'FieldMissingError',
    'FieldShapeError',
    'StepError',
]
