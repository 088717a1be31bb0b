"""Locality grids, text output and demand tables."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from pathlib import Path

import numpy as np

_FLOAT_MAX = float(np.finfo(np.float32).max)
_WHITESPACE = " \t\n\v\f\r"
_NUMBER = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Locality:
    """Grid cell of a locality, with its identifier."""

    row: int
    col: int
    num_local: int = 0


def format_raster(matrix) -> str:
    """Render a grid as text, one line per row."""
    lines = ["Printing matrix \n"]
    for row in np.asarray(matrix):
        lines.append("".join(f" {float(value):f} " for value in row) + "\n")
    return "".join(lines)


def print_raster(matrix) -> None:
    """Print a grid to standard output."""
    print(format_raster(matrix), end="")


def count_communities(matrix, cell_null) -> int:
    """Count cells whose value differs from ``cell_null``."""
    return int(np.count_nonzero(np.asarray(matrix) != cell_null))


def read_localities(matrix, cell_null):
    """Map locality identifiers to their cells.

    Returns the mapping and the number of non-null cells. A cell is keyed by
    its value truncated to an integer; when several cells carry the same
    identifier the last one in row order wins. NaN cells are counted but
    have no identifier to be keyed by.
    """
    grid = np.asarray(matrix)
    localities = {}
    rows, cols = np.nonzero(grid != cell_null)
    for row, col in zip(rows.tolist(), cols.tolist()):
        value = float(grid[row, col])
        if math.isnan(value):
            continue
        ident = int(value)
        localities[ident] = Locality(row, col, ident)
    return localities, len(rows)


def count_lines(path) -> int:
    """Number of lines in a text file; zero when it cannot be opened."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return sum(1 for _ in handle)
    except OSError:
        return 0


def read_file(path) -> str:
    """Return the whole content of a text file."""
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


def _fields(line):
    """Split a line on commas; a comma right after a separator is skipped."""
    position = 0
    while position < len(line):
        end = line.find(",", position)
        if end < 0:
            yield line[position:]
            return
        yield line[position:end]
        position = end + 1
        if line[position:position + 1] == ",":
            position += 1


def _to_float(text):
    """Parse the leading number of ``text`` as a single-precision value."""
    match = _NUMBER.match(text.lstrip(_WHITESPACE))
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    value = float(match.group())
    if math.isfinite(value) and abs(value) > _FLOAT_MAX:
        raise ValueError(f"number out of range: {text!r}")
    return float(np.float32(value))


def load_demand(path):
    """Read a demand table as a list of ``(column name, values)`` pairs.

    Double quotes are removed from the header names and from the values of
    the first column.
    """
    with open(path, encoding="utf-8", newline="") as handle:
        lines = [line.rstrip("\r") for line in handle.read().split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    if not lines:
        return []

    columns = [(name.replace('"', ""), []) for name in lines[0].split(",")]
    if lines[0].endswith(","):
        columns.pop()
    if lines[0] == "":
        columns = []

    for number, line in enumerate(lines[1:], start=2):
        for index, value in enumerate(_fields(line)):
            if index >= len(columns):
                raise ValueError(f"line {number} has more fields than the header")
            if index == 0:
                value = value.replace('"', "")
            try:
                columns[index][1].append(_to_float(value))
            except ValueError as exc:
                raise ValueError(f"line {number}: {exc}") from exc
    return columns