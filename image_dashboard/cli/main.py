"""
CLI interface for Image Dashboard.

Provides command-line access to presets, pricing and usage statistics.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from image_dashboard.config.loader import DashboardConfig, load_dashboard_config
from image_dashboard.config.logging import setup_logging
from image_dashboard.core.export import rows_to_csv
from image_dashboard.core.pricing import (
    DEFAULT_UNIT_PRICE,
    calculate_cost,
    format_currency,
    get_pricing_for_model,
)
from image_dashboard.storage.errors import DashboardError
from image_dashboard.storage.presets import PresetStore, validate_preset_fields
from image_dashboard.storage.usage import UsageLedger

app = typer.Typer()
presets_app = typer.Typer(help="Manage prompt presets.")
usage_app = typer.Typer(help="Inspect usage and spend.")
app.add_typer(presets_app, name="presets")
app.add_typer(usage_app, name="usage")

console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/] {escape(message)}")
    sys.exit(EXIT_CODE_FAIL)


def _config(ctx: typer.Context) -> DashboardConfig:
    return ctx.obj or DashboardConfig()


def _preset_store(ctx: typer.Context) -> PresetStore:
    return PresetStore(_config(ctx).storage.presets_path)


def _ledger(ctx: typer.Context) -> UsageLedger:
    return UsageLedger(_config(ctx).storage.usage_path)


def _window_start(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    _check_timestamp(value, "--start")
    return value


def _window_end(value: Optional[str]) -> Optional[str]:
    """Widen a date-only bound to cover the whole day."""
    if value is None:
        return None
    _check_timestamp(value, "--end")
    if len(value) == 10:
        return f"{value}T23:59:59.999"
    return value


def _check_timestamp(value: str, option: str) -> None:
    try:
        datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"{option} must be an ISO-8601 date or timestamp, got {value!r}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="IMAGE_DASHBOARD_CONFIG",
        help="Path to a YAML configuration file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug diagnostics"
    )
):
    """Image Dashboard CLI."""
    setup_logging(verbose)

    if config is not None:
        try:
            ctx.obj = load_dashboard_config(str(config))
        except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
            _fail(f"Invalid configuration: {e}")
    else:
        ctx.obj = DashboardConfig()

    if ctx.invoked_subcommand is None:
        console.print("Image Dashboard - Use --help to see available commands")


@app.command()
def init(ctx: typer.Context):
    """Create the data files and seed the default presets."""
    try:
        store = _preset_store(ctx)
        _ledger(ctx).file.ensure_exists()
        if _config(ctx).presets.seed_defaults:
            inserted = store.seed_defaults_if_empty()
            console.print(f"[green]✓[/] Seeded {inserted} default presets")
    except DashboardError as e:
        _fail(f"Error initializing data files: {e}")
    console.print("[green]✓[/] Data files initialized successfully")


@app.command()
def pricing(model: str = typer.Argument(..., help="Model name")):
    """Show the pricing table for a model."""
    table_data = get_pricing_for_model(model)
    if not table_data:
        console.print(
            f"[yellow]No pricing table for {model}.[/] "
            f"Estimates use {format_currency(float(DEFAULT_UNIT_PRICE))} per image."
        )
        return

    table = Table(title=f"Pricing: {model}")
    table.add_column("Size / Quality")
    table.add_column("Quality")
    table.add_column("Per image", justify="right")
    for key, value in table_data.items():
        if isinstance(value, dict):
            for quality, price in value.items():
                table.add_row(key, quality, format_currency(price))
        else:
            table.add_row(key, "", format_currency(value))
    console.print(table)


@app.command()
def estimate(
    model: str = typer.Argument(..., help="Model name"),
    size: Optional[str] = typer.Option(None, "--size", "-s", help="Image size, e.g. 1024x1024"),
    quality: Optional[str] = typer.Option(None, "--quality", "-q", help="Quality tier"),
    n: int = typer.Option(1, "--count", "-n", help="Number of images")
):
    """Estimate the cost of an image request."""
    console.print(format_currency(calculate_cost(model, size, quality, n)))


@presets_app.command("list")
def list_presets(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(None, "--category", help="Only this category")
):
    """List presets."""
    try:
        store = _preset_store(ctx)
        presets = store.list_by_category(category) if category else store.list_all()
    except DashboardError as e:
        _fail(str(e))

    if not presets:
        console.print("[dim]No presets found.[/]")
        return

    table = Table(title="Presets")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Model")
    table.add_column("Uses", justify="right")
    for preset in presets:
        table.add_row(preset.id, preset.name, preset.category, preset.model, str(preset.usage_count))
    console.print(table)


@presets_app.command("categories")
def list_categories(ctx: typer.Context):
    """List preset categories."""
    try:
        categories = _preset_store(ctx).list_categories()
    except DashboardError as e:
        _fail(str(e))
    for category in categories:
        console.print(category)


@presets_app.command("add")
def add_preset(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", help="Preset name"),
    model: str = typer.Option(..., "--model", help="Image model"),
    prompt: str = typer.Option(..., "--prompt", help="Prompt template"),
    category: Optional[str] = typer.Option(None, "--category", help="Category (default: General)"),
    size: Optional[str] = typer.Option(None, "--size"),
    quality: Optional[str] = typer.Option(None, "--quality"),
    style: Optional[str] = typer.Option(None, "--style"),
    notes: Optional[str] = typer.Option(None, "--notes")
):
    """Save a new preset."""
    data = {
        "name": name,
        "model": model,
        "prompt": prompt,
        "category": category,
        "size": size,
        "quality": quality,
        "style": style,
        "notes": notes,
    }
    try:
        validate_preset_fields(data)
        preset = _preset_store(ctx).create(data)
    except DashboardError as e:
        _fail(str(e))
    console.print(f"[green]✓[/] Saved preset {preset.name} ({preset.category}) as {preset.id}")


@presets_app.command("update")
def update_preset(
    ctx: typer.Context,
    preset_id: str = typer.Argument(..., help="Preset ID"),
    name: Optional[str] = typer.Option(None, "--name"),
    model: Optional[str] = typer.Option(None, "--model"),
    prompt: Optional[str] = typer.Option(None, "--prompt"),
    category: Optional[str] = typer.Option(None, "--category"),
    size: Optional[str] = typer.Option(None, "--size"),
    quality: Optional[str] = typer.Option(None, "--quality"),
    style: Optional[str] = typer.Option(None, "--style"),
    notes: Optional[str] = typer.Option(None, "--notes")
):
    """Update fields of an existing preset."""
    updates = {
        key: value for key, value in {
            "name": name,
            "model": model,
            "prompt": prompt,
            "category": category,
            "size": size,
            "quality": quality,
            "style": style,
            "notes": notes,
        }.items()
        if value is not None
    }
    if not updates:
        _fail("Nothing to update")

    try:
        preset = _preset_store(ctx).update(preset_id, updates)
    except DashboardError as e:
        _fail(str(e))
    console.print(f"[green]✓[/] Updated preset {preset.name} ({preset.category})")


@presets_app.command("delete")
def delete_preset(
    ctx: typer.Context,
    preset_id: str = typer.Argument(..., help="Preset ID")
):
    """Delete a preset."""
    try:
        _preset_store(ctx).delete(preset_id)
    except DashboardError as e:
        _fail(str(e))
    console.print("[green]✓[/] Preset deleted")


@presets_app.command("use")
def use_preset(
    ctx: typer.Context,
    preset_id: str = typer.Argument(..., help="Preset ID")
):
    """Increment the usage count of a preset."""
    try:
        _preset_store(ctx).increment_usage(preset_id)
    except DashboardError as e:
        _fail(str(e))
    console.print("[green]✓[/] Usage count incremented")


@usage_app.command("stats")
def usage_stats(
    ctx: typer.Context,
    start: Optional[str] = typer.Option(None, "--start", help="Earliest date or timestamp"),
    end: Optional[str] = typer.Option(None, "--end", help="Latest date or timestamp")
):
    """Show overall and per-model usage statistics."""
    ledger = _ledger(ctx)
    stats = ledger.stats(_window_start(start), _window_end(end))

    console.print("\n[bold]Usage Statistics[/bold]")
    console.print("-" * 40)
    console.print(f"Requests: {stats.total_images}")
    console.print(f"Images generated: {stats.total_generated}")
    console.print(f"Total cost: {format_currency(stats.total_cost)}")
    console.print(f"Average cost/request: {format_currency(stats.avg_cost)}")

    by_model = ledger.stats_by_model()
    if by_model:
        table = Table(title="By model")
        table.add_column("Model")
        table.add_column("Requests", justify="right")
        table.add_column("Images", justify="right")
        table.add_column("Total", justify="right")
        table.add_column("Average", justify="right")
        for row in by_model:
            table.add_row(
                row.model or "unknown",
                str(row.count),
                str(row.images_generated),
                format_currency(row.total_cost),
                format_currency(row.avg_cost)
            )
        console.print(table)


@usage_app.command("session")
def usage_session(ctx: typer.Context):
    """Show today's usage."""
    session = _ledger(ctx).session_stats()
    console.print("\n[bold]Today[/bold]")
    console.print(f"Requests: {session.total_requests}")
    console.print(f"Images generated: {session.images_generated}")
    console.print(f"Total cost: {format_currency(session.total_cost)}")


@usage_app.command("recent")
def usage_recent(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Number of entries")
):
    """Show the most recent usage entries."""
    limit = limit or _config(ctx).usage.recent_limit
    records = _ledger(ctx).recent(limit)
    if not records:
        console.print("[dim]No usage recorded yet.[/]")
        return

    table = Table(title="Recent usage")
    table.add_column("Time")
    table.add_column("Operation")
    table.add_column("Model")
    table.add_column("Images", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Result")
    for record in records:
        table.add_row(
            record.timestamp,
            record.operation or "",
            record.model or "",
            str(record.n),
            format_currency(record.cost),
            "[green]ok[/]" if record.success else f"[red]{escape(record.error_message or 'failed')}[/]"
        )
    console.print(table)


@usage_app.command("export")
def usage_export(
    ctx: typer.Context,
    start: Optional[str] = typer.Option(None, "--start", help="Earliest date or timestamp"),
    end: Optional[str] = typer.Option(None, "--end", help="Latest date or timestamp"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum rows"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write CSV to this file")
):
    """Export usage data as CSV."""
    limit = limit or _config(ctx).usage.export_limit
    rows = _ledger(ctx).export_rows(_window_start(start), _window_end(end), limit)
    if not rows:
        _fail("No data to export")

    csv_text = rows_to_csv(rows)
    if output is None:
        typer.echo(csv_text, nl=False)
        return

    output.write_text(csv_text, encoding="utf-8")
    console.print(f"[green]✓[/] Exported {len(rows)} rows to {output}")


if __name__ == "__main__":
    app()
