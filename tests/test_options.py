import pytest

from costidw.options import build_parser, parse_options


def _argv(**overrides):
    values = {
        "-1": "fw.tif",
        "-2": "lw.tif",
        "-3": "dw.csv",
        "-4": "fv.tif",
        "-5": "lv.tif",
        "-6": "dv.csv",
        "-r": "1",
        "-p": "4",
        "-t": "6",
        "-e": "1.005",
        "-y": "3",
    }
    values.update(overrides)
    argv = []
    for flag, value in values.items():
        if value is not None:
            argv += [flag, value]
    return argv


def test_paths_are_assigned_to_scenarios():
    options = parse_options(_argv())
    assert options.friction_walking == "fw.tif"
    assert options.locs_walking == "lw.tif"
    assert options.demand_walking == "dw.csv"
    assert options.friction_vehicle == "fv.tif"
    assert options.locs_vehicle == "lv.tif"
    assert options.demand_vehicle == "dv.csv"


def test_numeric_settings():
    options = parse_options(_argv())
    assert options.relative is True
    assert options.threads == 4
    assert options.hours == 6
    assert options.exponent == pytest.approx(1.005, rel=1e-6)
    assert options.year == 3


def test_relative_only_when_one():
    assert parse_options(_argv(**{"-r": "0"})).relative is False
    assert parse_options(_argv(**{"-r": "2"})).relative is False


def test_integer_takes_leading_digits():
    options = parse_options(_argv(**{"-t": "12h", "-p": " 8"}))
    assert options.hours == 12
    assert options.threads == 8


def test_long_option_names():
    argv = [
        "--frictionWalking", "a.tif", "--locsWalking", "b.tif",
        "--demmandWalking", "c.csv", "--frictionVehicle", "d.tif",
        "--locsVehicle", "e.tif", "--demmandVehicle", "f.csv",
        "--relative", "0", "--processors", "2", "--timeLimit", "5",
        "--exponent", "2", "--year", "7",
    ]
    options = parse_options(argv)
    assert options.friction_vehicle == "d.tif"
    assert options.demand_vehicle == "f.csv"
    assert options.year == 7
    assert options.exponent == 2.0
    assert options.relative is False


def test_missing_required_option_exits_with_zero():
    with pytest.raises(SystemExit) as excinfo:
        parse_options(_argv(**{"-y": None}))
    assert excinfo.value.code == 0


def test_non_numeric_value_exits():
    with pytest.raises(SystemExit) as excinfo:
        parse_options(_argv(**{"-p": "many"}))
    assert excinfo.value.code == 0


def test_out_of_range_integer_exits():
    with pytest.raises(SystemExit):
        parse_options(_argv(**{"-t": "99999999999"}))


def test_config_carries_settings():
    config = parse_options(_argv(**{"-r": "0"})).config
    assert config.relative is False
    assert config.threads == 4
    assert config.hours == 6
    assert config.time_limit == 6 * 3600.0


def test_scenarios_walking_first():
    scenarios = parse_options(_argv()).scenarios
    assert [name for name, *_ in scenarios] == ["walking", "vehicle"]
    assert scenarios[0][1:] == ("fw.tif", "dw.csv", "lw.tif")
    assert scenarios[1][1:] == ("fv.tif", "dv.csv", "lv.tif")


def test_build_parser_parses_namespace():
    namespace = build_parser().parse_args(_argv())
    assert namespace.friction_walking == "fw.tif"
    assert namespace.relative == 1
    assert namespace.year == 3


def test_version_exits():
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--version"])
    assert excinfo.value.code == 0