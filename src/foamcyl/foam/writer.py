"""
OpenFOAM ASCII output

Formatting helpers for the pieces of a field file: the ``FoamFile`` banner
and header, dimension sets, vectors and vector lists.
"""

from typing import Iterable, Optional, TextIO

import numpy as np
import numpy.typing as npt

from ..config.defaults import WRITE_PRECISION

BANNER = """\
/*--------------------------------*- C++ -*----------------------------------*\\
  =========                 |
  \\\\      /  F ield         | foamcyl: cylindrical field conversion
   \\\\    /   O peration     |
    \\\\  /    A nd           |
     \\\\/     M anipulation  |
\\*---------------------------------------------------------------------------*/
"""

SEPARATOR = "// * * * * * * * * * * * * * * * * * * * * * * * * * * * * * * * * * * * * * //\n"
FOOTER = "// ************************************************************************* //\n"


def format_number(value: float, precision: int = WRITE_PRECISION) -> str:
    """Format a scalar the way OpenFOAM's ``%g`` style writer does."""
    text = f"{float(value):.{precision}g}"
    return "0" if text == "-0" else text


def format_vector(vector: npt.ArrayLike, precision: int = WRITE_PRECISION) -> str:
    """
    Format a 3-vector as ``(x y z)``.

    Examples
    --------
    >>> format_vector([1.0, -0.0, 2.5])
    '(1 0 2.5)'
    """
    return "(" + " ".join(format_number(v, precision) for v in np.ravel(vector)) + ")"


def format_dimensions(dimensions: Iterable[float]) -> str:
    """Format a dimension set as ``[0 1 -1 0 0 0 0]``."""
    return "[" + " ".join(format_number(d) for d in dimensions) + "]"


def write_header(
    stream: TextIO,
    class_name: str,
    object_name: str,
    location: Optional[str] = None
) -> None:
    """
    Write the banner and ``FoamFile`` header of an ASCII file.

    Parameters
    ----------
    stream : text file
        Destination
    class_name : str
        OpenFOAM class, e.g. 'volVectorField'
    object_name : str
        Object (file) name
    location : str, optional
        Time directory name recorded in the header
    """
    stream.write(BANNER)
    stream.write("FoamFile\n{\n")
    stream.write("    version     2.0;\n")
    stream.write("    format      ascii;\n")
    stream.write(f"    class       {class_name};\n")
    if location is not None:
        stream.write(f'    location    "{location}";\n')
    stream.write(f"    object      {object_name};\n")
    stream.write("}\n")
    stream.write(SEPARATOR)
    stream.write("\n")


def write_vector_list(
    stream: TextIO,
    values: npt.NDArray[np.floating],
    precision: int = WRITE_PRECISION
) -> None:
    """
    Write ``nonuniform List<vector>`` data (without keyword or ';').

    Parameters
    ----------
    stream : text file
        Destination
    values : numpy.ndarray
        Array of shape (n, 3)
    precision : int, optional
        Significant digits. Default: WRITE_PRECISION
    """
    values = np.asarray(values, dtype=float).reshape(-1, 3)
    stream.write(f"nonuniform List<vector> \n{len(values)}\n(\n")
    for vector in values:
        stream.write(format_vector(vector, precision))
        stream.write("\n")
    stream.write(")\n")


__all__ = [
    'format_number',
    'format_vector',
    'format_dimensions',
    'write_header',
    'write_vector_list',
]
