"""Command-line options for computing the IDW raster of one demand year."""

from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass

import numpy as np

from costidw.pipeline import ScenarioConfig

VERSION = "1"

_WHITESPACE = " \t\n\v\f\r"
_INTEGER = re.compile(r"[+-]?\d+")
_REAL = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_FLOAT_MAX = float(np.finfo(np.float32).max)


def _leading_int(text: str) -> int:
    """Parse the leading integer of ``text``; trailing characters are ignored."""
    match = _INTEGER.match(text.lstrip(_WHITESPACE))
    if match is None:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    value = int(match.group())
    if not _INT_MIN <= value <= _INT_MAX:
        raise argparse.ArgumentTypeError(f"integer out of range: {text!r}")
    return value


def _leading_float(text: str) -> float:
    """Parse the leading number of ``text`` as a single-precision value."""
    match = _REAL.match(text.lstrip(_WHITESPACE))
    if match is None:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}")
    value = float(match.group())
    if value == value and abs(value) != float("inf") and abs(value) > _FLOAT_MAX:
        raise argparse.ArgumentTypeError(f"number out of range: {text!r}")
    return float(np.float32(value))


class _Parser(argparse.ArgumentParser):
    """Argument parser that reports errors and exits with status zero."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(0, f"error: {message}\n")


@dataclass
class Options:
    """Input files of both scenarios and the settings of the run."""

    friction_walking: str
    locs_walking: str
    demand_walking: str
    friction_vehicle: str
    locs_vehicle: str
    demand_vehicle: str
    relative: bool = True
    threads: int = 0
    hours: int = 12
    exponent: float = 1.005
    year: int = 1

    @property
    def config(self) -> ScenarioConfig:
        """Settings shared by both scenario runs."""
        return ScenarioConfig(
            relative=self.relative,
            threads=self.threads,
            hours=self.hours,
            exponent=self.exponent,
        )

    @property
    def scenarios(self):
        """``(name, friction, demand, locs)`` for each scenario, walking first."""
        return [
            ("walking", self.friction_walking, self.demand_walking, self.locs_walking),
            ("vehicle", self.friction_vehicle, self.demand_vehicle, self.locs_vehicle),
        ]


def build_parser() -> argparse.ArgumentParser:
    """Parser for the options of a run; every option is required."""
    parser = _Parser(
        description="Cost-distance inverse-distance weighting of biomass demand.",
    )
    parser.add_argument("--version", action="version", version=VERSION)
    paths = (
        ("-1", "--frictionWalking", "friction_walking",
         "Absolute path to friction.tif for walking scenario"),
        ("-2", "--locsWalking", "locs_walking",
         "Absolute path to locs.tif for walking scenario"),
        ("-3", "--demmandWalking", "demand_walking",
         "Absolute path to demmand.csv for walking scenario"),
        ("-4", "--frictionVehicle", "friction_vehicle",
         "Absolute path to friction.tif for vehicle scenario"),
        ("-5", "--locsVehicle", "locs_vehicle",
         "Absolute path to locs.tif for vehicle scenario"),
        ("-6", "--demmandVehicle", "demand_vehicle",
         "Absolute path to demmand.csv for vehicle scenario"),
    )
    for short, long, dest, help_text in paths:
        parser.add_argument(short, long, dest=dest, required=True, help=help_text)
    parser.add_argument("-r", "--relative", dest="relative", type=_leading_int,
                        required=True, help="1 to friction relative, 0 otherwise")
    parser.add_argument("-p", "--processors", dest="threads", type=_leading_int,
                        required=True, help="Number of processors -p <int>")
    parser.add_argument("-t", "--timeLimit", dest="hours", type=_leading_int,
                        required=True,
                        help="Time limit for Cost Distance exploration (hours) -t <int>")
    parser.add_argument("-e", "--exponent", dest="exponent", type=_leading_float,
                        required=True, help="IDW exponent -e <float>")
    parser.add_argument("-y", "--year", dest="year", type=_leading_int,
                        required=True, help="number of specific year to run -y <int>")
    return parser


def parse_options(argv=None) -> Options:
    """Parse command-line arguments (without the program name) into :class:`Options`."""
    namespace = build_parser().parse_args(argv)
    values = vars(namespace)
    values["relative"] = values["relative"] == 1
    return Options(**values)