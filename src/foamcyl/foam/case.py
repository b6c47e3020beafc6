"""
OpenFOAM case directory layout

A case is a root directory holding ``constant/`` (mesh, dictionaries) and one
directory per written time. A mesh region adds one more level below both:
``constant/<region>/`` and ``<time>/<region>/``.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

CONSTANT = "constant"


def is_time_name(name: str) -> bool:
    """Return True if a directory name is a time value, e.g. '0', '0.25', '1e-3'."""
    try:
        float(name)
    except ValueError:
        return False
    return True


def _with_gz(path: Path) -> Optional[Path]:
    if path.is_file():
        return path
    compressed = path.with_name(path.name + ".gz")
    if compressed.is_file():
        return compressed
    return None


class FoamCase:
    """
    Paths inside one OpenFOAM case.

    Parameters
    ----------
    root : str or Path
        Case directory
    region : str, optional
        Mesh region name; None for the default region

    Examples
    --------
    >>> case = FoamCase('/path/to/case')
    >>> case.times()
    ['0', '0.1', '0.2']
    >>> case.field_file('U', '0.1')
    PosixPath('/path/to/case/0.1/U')
    """

    def __init__(self, root: Union[str, Path], region: Optional[str] = None):
        self.root = Path(root)
        self.region = region

    def __repr__(self) -> str:
        return f"FoamCase({str(self.root)!r}, region={self.region!r})"

    def _region_dir(self, base: Path) -> Path:
        return base / self.region if self.region else base

    @property
    def constant_dir(self) -> Path:
        return self._region_dir(self.root / CONSTANT)

    def time_dir(self, time_name: str) -> Path:
        """Directory holding the fields of a time (``constant`` included)."""
        return self._region_dir(self.root / time_name)

    def times(self) -> List[str]:
        """Names of all time directories, sorted by time value."""
        if not self.root.is_dir():
            return []
        names = [p.name for p in self.root.iterdir() if p.is_dir() and is_time_name(p.name)]
        return sorted(names, key=float)

    def dictionary_file(self, name: str) -> Optional[Path]:
        """Path to a dictionary in ``constant/``, or None if it does not exist."""
        return _with_gz(self.constant_dir / name)

    def field_file(self, name: str, time_name: str) -> Optional[Path]:
        """Path to a field file of a time, or None if it does not exist."""
        return _with_gz(self.time_dir(time_name) / name)

    def has_field(self, name: str, time_name: str) -> bool:
        return self.field_file(name, time_name) is not None

    def find_mesh_file(self, name: str, time_name: str) -> Optional[Path]:
        """
        Locate a polyMesh file valid at ``time_name``.

        The newest ``<time>/polyMesh/<name>`` at or before the time wins;
        ``constant/polyMesh/<name>`` is the fallback.
        """
        if time_name != CONSTANT:
            current = float(time_name)
            for candidate in reversed(self.times()):
                if float(candidate) > current:
                    continue
                found = _with_gz(self.time_dir(candidate) / "polyMesh" / name)
                if found is not None:
                    logger.debug(f"Using {found} for time {time_name}")
                    return found
        return _with_gz(self.constant_dir / "polyMesh" / name)


__all__ = [
    'CONSTANT',
    'FoamCase',
    'is_time_name',
]
