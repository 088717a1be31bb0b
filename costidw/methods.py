"""Accumulated cost-distance and inverse-distance weighting on raster grids."""

from __future__ import annotations

import heapq
import math
from dataclasses import dataclass, field

import numpy as np

FLOAT_MAX = float(np.finfo(np.float32).max)
"""Cost given to cells that the exploration never reaches."""

_SQRT2 = math.sqrt(2.0)

# (row offset, column offset, diagonal) in the order neighbours are explored.
_MOVES = (
    (0, 1, False),
    (1, 1, True),
    (1, 0, False),
    (1, -1, True),
    (0, -1, False),
    (-1, -1, True),
    (-1, 0, False),
    (-1, 1, True),
)


@dataclass(order=True)
class Position:
    """A cell waiting in the exploration queue.

    Positions order by accumulated cost first and by insertion key second,
    so the cheapest, earliest queued cell comes out of a heap first.
    """

    row: int = field(compare=False)
    col: int = field(compare=False)
    cost: float = 0.0
    key: int = 0


def reset_matrix(rows, cols, value):
    """Return a ``rows`` x ``cols`` float32 grid filled with ``value``."""
    return np.full((rows, cols), value, dtype=np.float32)


def idw_update(requirement, cost_dist, idw, exponent, cell_null):
    """Add ``requirement / cost ** exponent`` to ``idw`` in place.

    Cells whose cost is zero or negative are set to ``cell_null``.
    The updated grid is returned.
    """
    cost = np.asarray(cost_dist, dtype=np.float32)
    if cost.shape != idw.shape:
        raise ValueError(
            f"cost grid shape {cost.shape} does not match IDW grid shape {idw.shape}"
        )
    blocked = cost <= 0
    open_cells = ~blocked
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        contribution = requirement / np.power(cost[open_cells].astype(np.float64), exponent)
        idw[open_cells] = (idw[open_cells].astype(np.float64) + contribution).astype(idw.dtype)
    idw[blocked] = cell_null
    return idw


def cost_distance(friction, start, scale=1.0, time_limit=None, relative=False):
    """Accumulated travel cost from ``start`` over a friction grid.

    Movement goes to the eight neighbours; diagonal steps cost ``sqrt(2)``
    times the friction of the cell entered. Cells with friction not greater
    than zero cannot be entered. With ``relative`` the friction is multiplied
    by ``scale``. With a ``time_limit`` the exploration stops once a cell whose
    cost exceeds the limit has been expanded. Unreached cells hold
    :data:`FLOAT_MAX`.
    """
    grid = np.asarray(friction, dtype=np.float32)
    if grid.ndim != 2:
        raise ValueError("friction must be a two-dimensional grid")
    rows, cols = grid.shape

    origin = start if isinstance(start, Position) else Position(*start)
    if not (0 <= origin.row < rows and 0 <= origin.col < cols):
        raise ValueError(f"start cell ({origin.row}, {origin.col}) lies outside the grid")
    origin = Position(origin.row, origin.col, float(np.float32(origin.cost)), origin.key)

    scale32 = np.float32(scale)
    limit = math.inf if time_limit is None else float(time_limit)
    result = np.full((rows, cols), FLOAT_MAX, dtype=np.float32)

    queue = [origin]
    key = 1
    current = 0.0
    while current <= limit and queue:
        cell = heapq.heappop(queue)
        current = cell.cost
        cell_cost = np.float32(cell.cost)
        for d_row, d_col, diagonal in _MOVES:
            row, col = cell.row + d_row, cell.col + d_col
            if not (0 <= row < rows and 0 <= col < cols):
                continue
            weight = grid[row, col]
            if not weight > 0.0:
                continue
            if relative:
                weight = np.float32(weight * scale32)
            if diagonal:
                cost = np.float32(float(cell_cost) + _SQRT2 * float(weight))
            else:
                cost = np.float32(cell_cost + weight)
            if result[row, col] > cost:
                result[row, col] = cost
                heapq.heappush(queue, Position(row, col, float(cost), key))
                key += 1
    return result