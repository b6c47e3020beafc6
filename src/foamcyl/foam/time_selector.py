"""
Time-directory selection

Mirrors OpenFOAM's ``timeSelector`` options:

- ``-time '0.1,0.5:1,2:'``: explicit times and inclusive ranges; a range
  bound may be omitted (``:0.5``, ``2:``)
- ``-latestTime``: the last time directory
- ``-noZero``: drop the ``0`` directory
- ``-constant``: also process ``constant``

With no option every time directory is selected. If the selection ends up
empty, ``constant`` is used instead.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .case import CONSTANT, FoamCase

logger = logging.getLogger(__name__)

# Relative tolerance when matching a requested time against a directory name
TIME_TOLERANCE = 1e-9

TimeRange = Tuple[float, float]


@dataclass(frozen=True)
class TimeSelection:
    """Options controlling which time directories are processed."""
    times: Optional[str] = None
    latest_time: bool = False
    no_zero: bool = False
    constant: bool = False


def parse_time_ranges(text: str) -> List[TimeRange]:
    """
    Parse a ``-time`` argument into inclusive (low, high) ranges.

    Parameters
    ----------
    text : str
        Comma- or whitespace-separated items, each a time or a range ``a:b``

    Returns
    -------
    list of tuple
        Inclusive ranges; a single time t becomes (t, t)

    Raises
    ------
    ValueError
        If an item is not a number or a range

    Examples
    --------
    >>> parse_time_ranges('0.1, 0.5:1, 2:')
    [(0.1, 0.1), (0.5, 1.0), (2.0, inf)]
    """
    ranges = []
    for item in text.replace(',', ' ').split():
        if ':' in item:
            low, _, high = item.partition(':')
            ranges.append((
                float(low) if low else -math.inf,
                float(high) if high else math.inf,
            ))
        else:
            value = float(item)
            ranges.append((value, value))
    if not ranges:
        raise ValueError(f"No times given in {text!r}")
    return ranges


def _in_ranges(value: float, ranges: List[TimeRange]) -> bool:
    for low, high in ranges:
        tol = TIME_TOLERANCE * max(1.0, abs(value))
        if low - tol <= value <= high + tol:
            return True
    return False


def select_times(case: FoamCase, selection: TimeSelection = TimeSelection()) -> List[str]:
    """
    Select time directories of a case.

    Parameters
    ----------
    case : FoamCase
        Case to scan
    selection : TimeSelection, optional
        Selection options. Default: all times

    Returns
    -------
    list of str
        Selected time names in increasing time order, ``constant`` first
        when requested (or when nothing else was selected)
    """
    available = case.times()
    if selection.no_zero:
        available = [t for t in available if float(t) != 0.0]

    if selection.times is None and not selection.latest_time:
        selected = list(available)
    else:
        chosen = set()
        if selection.times is not None:
            ranges = parse_time_ranges(selection.times)
            chosen.update(t for t in available if _in_ranges(float(t), ranges))
        if selection.latest_time and available:
            chosen.add(available[-1])
        selected = [t for t in available if t in chosen]

    if selection.constant:
        selected.insert(0, CONSTANT)

    if not selected:
        logger.warning("No time specified or available, selecting 'constant'")
        selected = [CONSTANT]

    return selected


__all__ = [
    'TimeSelection',
    'parse_time_ranges',
    'select_times',
]
