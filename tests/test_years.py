import pytest

from costidw.years import ALL_YEARS, specific_year, stepped_years


def test_all_years_selects_every_year_column():
    assert stepped_years(5, ALL_YEARS) == [1, 2, 3, 4]


def test_default_step_matches_all_years():
    assert stepped_years(7) == stepped_years(7, -1)


def test_step_one_equals_all_years():
    assert stepped_years(9, 1) == stepped_years(9, ALL_YEARS)


@pytest.mark.parametrize("count", [2, 5, 10, 41])
@pytest.mark.parametrize("step", [1, 2, 3, 5, 10])
def test_stepped_years_invariants(count, step):
    years = stepped_years(count, step)
    assert years[0] == 1
    assert all(1 <= year <= count - 1 for year in years)
    assert all(b - a == step for a, b in zip(years, years[1:]))
    assert years[-1] + step > count - 1


def test_step_larger_than_table_gives_first_year_only():
    assert stepped_years(4, 10) == [1]


@pytest.mark.parametrize("count", [0, 1])
def test_table_without_year_columns_gives_no_years(count):
    assert stepped_years(count, 1) == []


@pytest.mark.parametrize("step", [0, -2, -5])
def test_invalid_step_is_rejected(step):
    with pytest.raises(ValueError):
        stepped_years(5, step)


def test_negative_count_is_rejected():
    with pytest.raises(ValueError):
        stepped_years(-1, 1)


@pytest.mark.parametrize("year", [1, 3, 4])
def test_specific_year_in_range(year):
    assert specific_year(5, year) == [year]


@pytest.mark.parametrize("year", [0, 5, 6, -1])
def test_specific_year_out_of_range(year):
    with pytest.raises(IndexError):
        specific_year(5, year)


def test_specific_year_negative_count_is_rejected():
    with pytest.raises(ValueError):
        specific_year(-3, 1)


def test_specific_year_is_among_stepped_years():
    for year in specific_year(8, 6):
        assert year in stepped_years(8, ALL_YEARS)