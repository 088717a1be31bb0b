"""Demand-weighted cost-distance IDW surfaces for one travel scenario."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from costidw.geotiff import read_geotiff, write_geotiff
from costidw.methods import Position, cost_distance, reset_matrix
from costidw.raster import load_demand, read_localities

OUTPUT_PREFIX = "IDW_"
_RULE = "-" * 58


@dataclass
class ScenarioConfig:
    """Settings shared by every scenario run."""

    relative: bool = True
    threads: int = 0
    hours: int = 12
    exponent: float = 1.005

    @property
    def time_limit(self) -> float:
        """Cost limit of the exploration, in seconds."""
        return float(np.float32(self.hours * 3600))


def required_biomass(demand, year):
    """Map locality identifiers to the demand of ``year`` in tons.

    The first column of ``demand`` holds the identifiers; column ``year``
    holds the demand in kilograms. When an identifier repeats, its first
    row is kept.
    """
    if not demand:
        raise ValueError("the demand table is empty")
    if not 0 <= year < len(demand):
        raise IndexError(f"year {year} is not a column of the demand table")
    ids = demand[0][1]
    values = demand[year][1]
    if len(values) < len(ids):
        raise ValueError(f"column {year} has fewer values than there are localities")
    requirements = {}
    for ident, value in zip(ids, values):
        requirements.setdefault(int(ident), float(np.float32(value) / np.float32(1000)))
    return requirements


def accumulate_idw(friction, localities, requirements, scale, null_value, config):
    """Sum the inverse-distance weighted demand of every locality over the grid.

    Localities are taken in ascending identifier order; only those with a
    positive requirement and a known cell contribute. Cells with negative
    friction receive ``null_value`` once any locality has been processed.
    """
    grid = np.asarray(friction, dtype=np.float32)
    if grid.ndim != 2:
        raise ValueError("friction must be a two-dimensional grid")
    idw = reset_matrix(grid.shape[0], grid.shape[1], 0)

    active = [
        (ident, requirements[ident])
        for ident in sorted(requirements)
        if requirements[ident] > 0 and ident in localities
    ]
    if not active:
        return idw

    def explore(item):
        place = localities[item[0]]
        return cost_distance(
            grid,
            Position(place.row, place.col),
            scale=scale,
            time_limit=config.time_limit,
            relative=config.relative,
        )

    workers = config.threads if config.threads > 0 else None
    with ThreadPoolExecutor(max_workers=workers) as pool:
        surfaces = pool.map(explore, active)
        null_cells = grid < 0.0
        open_cells = ~null_cells
        exponent = np.float32(config.exponent)
        for (_, biomass), cost in zip(active, surfaces):
            with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
                weight = np.float32(biomass) / np.power(cost[open_cells], exponent)
                idw[open_cells] = idw[open_cells] + weight.astype(np.float32)
            idw[null_cells] = null_value
    return idw


def output_name(column_name, year):
    """Name of the output raster for a demand column and year index."""
    if len(column_name) < 5:
        raise ValueError(f"column name {column_name!r} is too short to hold a year")
    label = column_name[5:9]
    number = str(year) if year > 9 else "0" + str(year)
    return OUTPUT_PREFIX + label + number


def run_scenario(friction_path, demand_path, locs_path, scenario, years, config, output_dir="."):
    """Compute and write the IDW raster of each year for one scenario.

    Returns the paths of the written files, in the order of ``years``.
    """
    print(_RULE)
    print(f"Running parallel CD and IDW for {scenario} scenario")
    started = time.perf_counter()

    friction = read_geotiff(friction_path)
    null_value = friction.null_value
    locs = read_geotiff(locs_path)
    if friction.data.shape != locs.data.shape:
        raise ValueError(
            f"friction grid {friction.data.shape} and locality grid "
            f"{locs.data.shape} differ in size"
        )
    demand = load_demand(demand_path)
    localities, count = read_localities(locs.data, null_value)
    print(f"Total number of localities {count}")

    target = Path(output_dir)
    written = []
    for year in years:
        print(f"\nProcessing year {year} ... ")
        print(f"Started at: {time.ctime()}")
        year_start = time.perf_counter()

        requirements = required_biomass(demand, year)
        idw = accumulate_idw(friction.data, localities, requirements, locs.scale, null_value, config)
        path = target / (output_name(demand[year][0], year) + ".tif")
        write_geotiff(path, idw, locs.geotransform, locs.projection, null_value)
        written.append(path)

        hours = (time.perf_counter() - year_start) / 3600
        print(f"Year {year} finished!")
        print(f"Total elapsed time for year: {year} was: {hours} hours")
        print(f"Estimated remaining time: {hours * ((len(demand) - 1) - year)} hours")

    print(f"Global time: {(time.perf_counter() - started) / 3600:f} hours ")
    print(f"{scenario} scenario sucessfully finished ")
    print(_RULE)
    return written