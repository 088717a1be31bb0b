"""Choosing which demand columns (years) a scenario run processes."""

from __future__ import annotations

ALL_YEARS = -1
"""Step value that selects every year."""


def stepped_years(count, step=ALL_YEARS):
    """Year indices from 1 up to ``count - 1`` taken every ``step`` columns.

    ``count`` is the number of columns in the demand table; column 0 holds
    the locality identifiers. A ``step`` of :data:`ALL_YEARS` selects every
    year.
    """
    if count < 0:
        raise ValueError(f"column count must not be negative, got {count}")
    if step == ALL_YEARS:
        step = 1
    if step <= 0:
        raise ValueError(f"year step must be positive or {ALL_YEARS}, got {step}")
    return list(range(1, count, step))


def specific_year(count, year):
    """The single year index ``year``, checked against a table of ``count`` columns."""
    if count < 0:
        raise ValueError(f"column count must not be negative, got {count}")
    if not 1 <= year < count:
        raise IndexError(f"year {year} is not a year column of a {count}-column table")
    return [year]