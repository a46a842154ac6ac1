import os
os.environ.setdefault("EPHEMERIS_BACKEND", "moseph")
os.environ.setdefault("CHART_PROVIDER_LAYERS", "swisseph,synthetic")

import json

import cli


def test_cli_prints_flattened_record(capsys):
    status = cli.main(["1995-10-08", "19:56", "Miami, FL, USA"])
    assert status == 0
    record = json.loads(capsys.readouterr().out)
    assert record["sun"].startswith("Libra")
    assert record["meta"]["houseSystem"] == "P"
    assert len(record["houses"]) == 12


def test_cli_house_system_and_extended_aspects(capsys):
    status = cli.main(["1995-10-08", "19:56", "Miami", "--house-system", "E", "--extended-aspects"])
    assert status == 0
    record = json.loads(capsys.readouterr().out)
    assert record["meta"]["houseSystemName"] == "Equal"


def test_cli_reports_errors(capsys):
    status = cli.main(["1995-10-08", "19:56", "Nonexistent Place XYZ"])
    assert status == 1
    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "location_not_found"
