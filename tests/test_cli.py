# Project: rainfall-insights
# Owner: GreenUnicorn
"""Tests for cli.py — argument parsing and command output, using a local CSV."""

import pytest

from rainfall_insights.cli import build_parser, main

CSV_TEXT = (
    "date,tavg,prcp\n"
    "2001-01-01,10.0,20.0\n"
    "2001-07-01,18.0,0.0\n"
    "2002-01-01,9.0,40.0\n"
    "2002-07-01,19.0,1.0\n"
    "2003-01-01,11.0,200.0\n"
)


@pytest.fixture
def config_path(tmp_path):
    data = tmp_path / "weather.csv"
    data.write_text(CSV_TEXT)
    config = tmp_path / "config.toml"
    config.write_text(
        f'[data]\nsource = "{data.as_posix()}"\ncity = "Testville"\n\n'
        f'[log]\npath = "{(tmp_path / "test.log").as_posix()}"\n'
    )
    return config


def test_subcommand_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_year_flags_parsed():
    args = build_parser().parse_args(["extremes", "--start-year", "2000", "--end-year", "2010"])
    assert args.start_year == 2000
    assert args.end_year == 2010


def test_summary(config_path, capsys):
    main(["--config", str(config_path), "summary"])
    out = capsys.readouterr().out
    assert "Testville — 3-year rainfall analysis (2001–2003)" in out
    assert "Average monthly rainfall" in out


def test_extremes_with_range(config_path, capsys):
    main(["--config", str(config_path), "extremes", "--start-year", "2001", "--end-year", "2002"])
    out = capsys.readouterr().out
    assert "relative to the selected years" in out
    assert "2003" not in out.split("\n", 2)[-1]


def test_correlations(config_path, capsys):
    main(["--config", str(config_path), "correlations"])
    out = capsys.readouterr().out
    assert "Rainfall (mm) × Temperature (°C)" in out
    assert "estimated" in out


def test_export(config_path, tmp_path, capsys):
    output = tmp_path / "out" / "export.csv"
    main(["--config", str(config_path), "export", "-o", str(output)])
    assert "Wrote 5 records" in capsys.readouterr().out
    assert output.read_text().startswith('"date","tavg"')


def test_missing_config_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(tmp_path / "missing.toml"), "summary"])
    assert exc.value.code == 1
    assert "[error]" in capsys.readouterr().out


def test_unreadable_source_exits(tmp_path, capsys):
    config = tmp_path / "config.toml"
    config.write_text(
        f'[data]\nsource = "{(tmp_path / "gone.csv").as_posix()}"\n\n'
        f'[log]\npath = "{(tmp_path / "test.log").as_posix()}"\n'
    )
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(config), "summary"])
    assert exc.value.code == 1
    assert "Could not load weather data" in capsys.readouterr().out
