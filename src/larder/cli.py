"""Command-line interface for Larder."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Optional

import typer

from larder.config import get_settings
from larder.engine import DataIntegrityError, build_engine
from larder.export import (
    aggregate_rows,
    coverage_rows,
    grocery_rows,
    render_grocery_csv,
    render_json,
)
from larder.logging_utils import configure_logging
from larder.models.snapshot import KitchenSnapshot

app = typer.Typer(help="Larder ingredient reconciliation commands.")


def _load_snapshot(snapshot_path: str) -> KitchenSnapshot:
    with open(snapshot_path, "r", encoding="utf-8") as fh:
        payload = json.load(fh)
    return KitchenSnapshot.model_validate(payload)


def _parse_date(value: Optional[str]) -> date:
    if not value:
        return date.today()
    return datetime.strptime(value, "%Y-%m-%d").date()


def _abort(exc: DataIntegrityError) -> None:
    typer.secho(f"Data integrity error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def setup() -> None:
    """Configure logging from settings before any command runs."""

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)


@app.command()
def coverage(
    snapshot_path: str,
    on: Optional[str] = typer.Option(None, "--date", help="Evaluation date (YYYY-MM-DD)."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Rank every recipe in the snapshot by how well the pantry covers it.
    """
    snapshot = _load_snapshot(snapshot_path)
    settings = get_settings()
    engine = build_engine(snapshot.catalog(), settings)
    try:
        results = engine.rank_recipes(snapshot.recipes, snapshot.pantry_snapshot(), _parse_date(on))
    except DataIntegrityError as exc:
        _abort(exc)
    typer.echo(render_json(coverage_rows(results, settings.display_precision), pretty))


@app.command()
def aggregate(
    snapshot_path: str,
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Total the meal plan's ingredient requirements.
    """
    snapshot = _load_snapshot(snapshot_path)
    settings = get_settings()
    engine = build_engine(snapshot.catalog(), settings)
    try:
        result = engine.aggregate_meal_plan(snapshot.assignments, snapshot.recipes)
    except DataIntegrityError as exc:
        _abort(exc)
    typer.echo(render_json(aggregate_rows(result, settings.display_precision), pretty))


@app.command()
def grocery(
    snapshot_path: str,
    reset: bool = typer.Option(False, "--reset", help="Clear checked flags on generated items."),
    include_optional: bool = typer.Option(
        False,
        "--include-optional",
        help="Also list optional ingredients the pantry lacks.",
    ),
    fmt: str = typer.Option("json", "--format", help="Output format (json or csv)."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Regenerate the grocery list for the snapshot's meal plan.
    """
    snapshot = _load_snapshot(snapshot_path)
    settings = get_settings()
    engine = build_engine(snapshot.catalog(), settings)
    try:
        aggregate_result = engine.aggregate_meal_plan(snapshot.assignments, snapshot.recipes)
        grocery_list = engine.reconcile_grocery_list(
            snapshot.previous_list(),
            aggregate_result,
            snapshot.pantry_snapshot(),
            reset=reset,
            include_optional=include_optional,
        )
    except DataIntegrityError as exc:
        _abort(exc)

    if fmt.lower() == "csv":
        ordered = [
            item
            for items in engine.categorizer.group(grocery_list.items).values()
            for item in items
        ]
        typer.echo(render_grocery_csv(ordered, settings.display_precision), nl=False)
        return
    if fmt.lower() != "json":
        typer.secho(f"Unsupported format: {fmt}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    payload = {
        "version": grocery_list.version,
        "items": grocery_rows(grocery_list.items, settings.display_precision),
        "state": grocery_list.model_dump(mode="json"),
    }
    typer.echo(render_json(payload, pretty))


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the ``larder`` console script."""
    app(prog_name="larder", args=argv)


if __name__ == "__main__":
    main()
