"""Command line for IDW rasters of both travel scenarios, every few years."""

from __future__ import annotations

import argparse

from costidw.options import VERSION, Options, _leading_float, _leading_int, _Parser
from costidw.pipeline import run_scenario
from costidw.raster import load_demand
from costidw.years import ALL_YEARS, stepped_years

_OUTPUT_DIR = "."

_PATH_OPTIONS = (
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


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        description="Cost-distance inverse-distance weighting of biomass demand.",
    )
    parser.add_argument("--version", action="version", version=VERSION)
    for short, long, dest, help_text in _PATH_OPTIONS:
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
    parser.add_argument("-y", "--skippingYears", dest="year", type=_leading_int,
                        required=True,
                        help="Number of skipping years -1 to run all years -y <int>")
    parser.add_argument("-s", "--startingYear", dest="starting_year", type=_leading_int,
                        required=True,
                        help="Starting year from which the algorithm will calculate the IDW -s <int>")
    parser.add_argument("-f", "--finalYear", dest="final_year", type=_leading_int,
                        required=True,
                        help="Final year up to which the algorithm will calculate the IDW -f <int>")
    return parser


def _parse(argv) -> Options:
    values = vars(_build_parser().parse_args(argv))
    # The starting and final years are accepted but do not restrict the run.
    values.pop("starting_year")
    values.pop("final_year")
    values["relative"] = values["relative"] == 1
    return Options(**values)


def run(options: Options):
    """Run the walking and then the vehicle scenario in the working directory.

    ``options.year`` is the step between processed year columns;
    -1 processes every year. Returns the written paths per scenario.
    """
    step = options.year
    config = options.config
    written = {}
    for scenario, friction, demand, locs in options.scenarios:
        columns = len(load_demand(demand))
        years = stepped_years(columns, ALL_YEARS if step == ALL_YEARS else step)
        written[scenario] = run_scenario(
            friction, demand, locs, scenario, years, config, _OUTPUT_DIR
        )
    return written


def main(argv=None) -> int:
    """Parse the command line and run both scenarios."""
    run(_parse(argv))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())