"""Command-line interface tests."""

from __future__ import annotations

import csv
import io
import json
import logging

import pytest
from typer.testing import CliRunner

from larder.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    monkeypatch.setenv("LARDER_LOG_LEVEL", "WARNING")
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.fixture()
def snapshot_path(tmp_path):
    payload = {
        "ingredients": [
            {"id": "flour", "name": "all-purpose flour", "category": "Pantry"},
            {"id": "milk", "name": "whole milk", "category": "Dairy & Eggs"},
            {"id": "chicken", "name": "chicken thigh", "category": "Meat & Seafood"},
            {"id": "lime", "name": "lime", "category": "Produce"},
        ],
        "recipes": [
            {
                "id": "pancakes",
                "title": "Pancakes",
                "base_servings": 4,
                "requirements": [
                    {"ingredient_id": "flour", "qty": "2", "unit": "cups"},
                    {"ingredient_id": "milk", "qty": "1.5", "unit": "cup"},
                ],
            },
            {
                "id": "lime-chicken",
                "title": "Lime Chicken",
                "base_servings": 4,
                "requirements": [
                    {"ingredient_id": "chicken", "qty": "3", "unit": "lb"},
                    {"ingredient_id": "lime", "qty": "1", "unit": "item", "optional": True},
                ],
            },
        ],
        "pantry": [
            {"ingredient_id": "flour", "qty": "500", "unit": "ml"},
            {"ingredient_id": "chicken", "qty": "1", "unit": "lb", "best_before": "2026-10-20"},
        ],
        "assignments": [
            {"recipe_id": "pancakes", "servings": "8", "date": "2026-10-19"},
            {"recipe_id": "lime-chicken", "servings": "4", "date": "2026-10-20", "meal_type": "lunch"},
        ],
        "grocery_list": [
            {"label": "dish soap", "origin": "manual", "category": "Household", "checked": True},
        ],
        "grocery_list_version": 3,
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_coverage_command_ranks_recipes(snapshot_path):
    result = runner.invoke(app, ["coverage", str(snapshot_path), "--date", "2026-10-19"])

    assert result.exit_code == 0, result.output
    rows = json.loads(result.stdout)
    assert [row["recipe_id"] for row in rows] == ["pancakes", "lime-chicken"]
    assert rows[0]["coverage"] == 57
    assert rows[1]["coverage"] == 33
    assert rows[1]["expiration_boosted"] is True
    assert rows[1]["ranking_score"] == 43.0
    assert rows[0]["missing_required"] == ["whole milk: 1.5 cup short"]


def test_aggregate_command(snapshot_path):
    result = runner.invoke(app, ["aggregate", str(snapshot_path), "--pretty"])

    assert result.exit_code == 0, result.output
    rows = {row["ingredient_id"]: row for row in json.loads(result.stdout)}
    assert rows["flour"]["required"] == ["4 cup"]
    assert rows["lime"]["optional"] == ["1 item"]


def test_grocery_command_json(snapshot_path):
    result = runner.invoke(app, ["grocery", str(snapshot_path)])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["version"] == 4
    labels = [item["label"] for item in payload["items"]]
    assert labels == ["all-purpose flour", "whole milk", "chicken thigh", "dish soap"]
    assert payload["items"][0]["quantity"] == "1.89"
    assert payload["items"][2]["quantity"] == "2"
    assert payload["state"]["items"][-1]["checked"] is True


def test_grocery_command_csv_groups_by_category(snapshot_path):
    result = runner.invoke(
        app, ["grocery", str(snapshot_path), "--format", "csv", "--include-optional"]
    )

    assert result.exit_code == 0, result.output
    rows = list(csv.DictReader(io.StringIO(result.stdout)))
    assert [row["category"] for row in rows] == [
        "Produce",
        "Meat & Seafood",
        "Dairy & Eggs",
        "Pantry",
        "Household",
    ]


def test_grocery_command_rejects_unknown_format(snapshot_path):
    result = runner.invoke(app, ["grocery", str(snapshot_path), "--format", "xml"])

    assert result.exit_code == 2


def test_integrity_error_exits_non_zero(snapshot_path):
    payload = json.loads(snapshot_path.read_text(encoding="utf-8"))
    payload["assignments"].append({"recipe_id": "tacos", "servings": "2"})
    snapshot_path.write_text(json.dumps(payload), encoding="utf-8")

    result = runner.invoke(app, ["aggregate", str(snapshot_path)])

    assert result.exit_code == 1
    assert "tacos" in result.output
