"""
Command-line front end

Usage (run from a case directory, or pass ``-case``)::

    convertToCylindrical [-case DIR] [-region NAME] [-time RANGES]
                         [-latestTime] [-noZero] [-constant] [-unitVectors]
                         [-dict NAME] [-logFile PATH] [-debug]

Options follow OpenFOAM's single-dash spelling. The rotation axis and
origin are read from ``constant/dynamicMeshDict``; the velocity field must
be named U.
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .config.defaults import DYNAMIC_MESH_DICT
from .config.dynamic_mesh import read_rotation_axis
from .convert import convert_case
from .errors import FoamCylError
from .foam.case import FoamCase
from .foam.time_selector import TimeSelection, select_times
from .foam.writer import format_vector
from .logging_config import setup_logging
from .transform.axis import pick_seed_direction

logger = logging.getLogger(__name__)


class ExactOptionParser(argparse.ArgumentParser):
    """
    Argument parser that accepts only complete option names.

    ``allow_abbrev=False`` does not stop argparse before Python 3.12 from
    matching single-dash prefixes such as ``-latest``, so every option token
    is checked against the registered names first.
    """

    def parse_known_args(self, args=None, namespace=None):
        self._reject_partial_options(sys.argv[1:] if args is None else args)
        return super().parse_known_args(args, namespace)

    def _reject_partial_options(self, args: Sequence[str]) -> None:
        takes_value = False
        for token in args:
            if takes_value:
                takes_value = False
                continue
            if token == '--':
                break
            if not token.startswith('-') or token == '-':
                continue
            name = token.split('=', 1)[0]
            action = self._option_string_actions.get(name)
            if action is None:
                self.error(f"unrecognized arguments: {token}")
            takes_value = action.nargs is None and '=' not in token


def build_parser() -> argparse.ArgumentParser:
    parser = ExactOptionParser(
        prog='convertToCylindrical',
        description=(
            "Convert the velocity field U of each selected time to cylindrical "
            "components (r, theta, z) about the rotation axis in dynamicMeshDict, "
            "writing Ucyl."
        ),
        allow_abbrev=False,
    )
    parser.add_argument('-case', default='.', metavar='DIR',
                        help="case directory (default: current directory)")
    parser.add_argument('-region', default=None, metavar='NAME',
                        help="mesh region")
    parser.add_argument('-time', default=None, metavar='RANGES',
                        help="comma-separated times and ranges, e.g. '0.1,0.5:1,2:'")
    parser.add_argument('-latestTime', action='store_true',
                        help="select the latest time")
    parser.add_argument('-noZero', action='store_true',
                        help="exclude the 0 directory")
    parser.add_argument('-constant', action='store_true',
                        help="include the constant directory")
    parser.add_argument('-unitVectors', action='store_true',
                        help="save unit vectors of the cylindrical system (cRad, cTheta)")
    parser.add_argument('-dict', default=DYNAMIC_MESH_DICT, metavar='NAME',
                        help=f"mesh-motion dictionary in constant/ (default: {DYNAMIC_MESH_DICT})")
    parser.add_argument('-logFile', default=None, metavar='PATH',
                        help="also write the log to this file")
    parser.add_argument('-debug', action='store_true',
                        help="verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the conversion; returns the process exit code.

    0 on success (times without U included), 1 on a fatal error.
    """
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.logFile)

    case = FoamCase(args.case, region=args.region)
    selection = TimeSelection(
        times=args.time,
        latest_time=args.latestTime,
        no_zero=args.noZero,
        constant=args.constant,
    )

    try:
        axis = read_rotation_axis(case, dict_name=args.dict)
        seed = pick_seed_direction(axis.axis)
        logger.debug(f"Seed direction {format_vector(seed)}")
        times = select_times(case, selection)
        convert_case(case, times, axis, save_unit_vectors=args.unitVectors, seed=seed)
    except (FoamCylError, ValueError, OSError) as exc:
        # ValueError: malformed -time argument
        logger.error(str(exc))
        return 1

    logger.info("End")
    return 0


__all__ = [
    'ExactOptionParser',
    'build_parser',
    'main',
]
