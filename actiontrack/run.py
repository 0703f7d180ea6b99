"""Command-line runner — import a nonconformity workbook and print its statistics."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from actiontrack.config import TrackerConfig, get_env_config, load_tracker_config
from actiontrack.domains import nonconformity
from actiontrack.domains.nonconformity import (
    FieldMapping,
    ImportSession,
    NonConformityStore,
    ParseError,
    SchemaValidationError,
    load_field_mapping,
    records_to_frame,
)
from actiontrack.domains.nonconformity.metrics import summarize
from actiontrack.utils.io import write_output
from actiontrack.utils.types import LabelCount

console = Console()

VIEW_TITLES = {
    "status_totals": "Records by status",
    "status_distribution": "Open vs closed",
    "open_timeliness": "Open tasks by target date",
    "category_distribution": "Categories",
    "weekly_distribution": "Weekly intake",
    "closed_timeliness": "Closed tasks vs target date",
    "department_resolution": "Resolution days by department",
    "team_leader_resolution": "Resolution days by team leader",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_mapping(mapping_file: str | None, pairs: list[str]) -> FieldMapping:
    """Merge a saved YAML mapping with ``field=Column`` pairs from the command line."""
    base = load_field_mapping(mapping_file) if mapping_file else FieldMapping()
    values = dict(vars(base))
    for pair in pairs:
        match pair.split("=", 1):
            case [field_name, column] if field_name.strip():
                values[field_name.strip()] = column
            case _:
                raise ValueError(f"Expected field=Column, got: {pair}")
    return FieldMapping.from_dict(values)


def parse_today(value: str | None) -> datetime:
    if not value:
        return datetime.now()
    return datetime.fromisoformat(value)


def render_columns(session: ImportSession) -> None:
    table = Table(title=f"Importable columns ({len(session.grid.rows)} data rows)")
    table.add_column("#", justify="right")
    table.add_column("Column")
    for pos, name in enumerate(session.columns, start=1):
        table.add_row(str(pos), name)
    console.print(table)


def render_view(name: str, rows: list) -> None:
    table = Table(title=VIEW_TITLES.get(name, name))
    match rows:
        case []:
            console.print(f"[yellow]{VIEW_TITLES.get(name, name)}: no data[/yellow]")
            return
        case [LabelCount(), *_]:
            table.add_column("Label")
            table.add_column("Count", justify="right")
            for row in rows:
                label = f"[{row.color}]{row.label}[/]" if row.color else row.label
                table.add_row(label, str(row.value))
        case _:
            table.add_column("Group")
            table.add_column("Min", justify="right")
            table.add_column("Average", justify="right")
            table.add_column("Max", justify="right")
            for row in rows:
                table.add_row(row.group, str(row.min), str(row.average), str(row.max))
    console.print(table)


def run_import(args: argparse.Namespace, config: TrackerConfig) -> int:
    path = Path(args.file)
    if path.suffix.lower() not in config.imports.accepted_extensions:
        console.print(f"[red]Unsupported file type: {path.suffix or '<none>'}[/red]")
        return 1

    try:
        session = ImportSession.from_bytes(path.read_bytes(), path.name)
    except ParseError as exc:
        console.print(f"[red]{exc}[/red]")
        return 1

    if args.columns:
        render_columns(session)
        return 0

    mapping = build_mapping(args.mapping, args.map or [])
    if not session.can_import(mapping):
        render_columns(session)
        console.print("[red]Map a column to 'description' before importing.[/red]")
        return 1

    now = parse_today(args.today)
    store = NonConformityStore(strict=config.strict_validation)
    try:
        result = session.commit(
            store, mapping, now=now,
            skip_duplicates=args.skip_duplicates or config.imports.skip_duplicates,
        )
    except SchemaValidationError as exc:
        for error in exc.errors:
            console.print(f"[red]{error}[/red]")
        return 1

    console.print(
        f"[bold]Imported {result.imported} of {result.total_rows} rows[/bold] "
        f"({result.dropped} without description, {result.duplicates} duplicates)"
    )

    if args.validate:
        outcome = nonconformity.validate(store.get_snapshot())
        status = "[green]✓ valid[/green]" if outcome["valid"] else "[red]✗ invalid[/red]"
        console.print(f"Schema: {status}")
        for error in outcome["errors"]:
            console.print(f"  [red]{error}[/red]")
        if not outcome["valid"]:
            return 1

    analytics = config.analytics
    views = summarize(
        store.get_snapshot(), now,
        palette=analytics.palette,
        unspecified=analytics.unspecified_label,
        weekly_limit=analytics.weekly_bucket_limit,
    )
    for name, rows in views.items():
        render_view(name, rows)

    if args.output:
        frame = records_to_frame(store.get_snapshot())
        write_output(frame.drop(columns=["created_ts", "target_ts", "closed_ts"]), args.output, args.format)

    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Import nonconformities from Excel and report statistics")
    parser.add_argument("file", help="Workbook to import (.xlsx, .xls, .xlsm)")
    parser.add_argument("--columns", action="store_true", help="List importable columns and exit")
    parser.add_argument("--mapping", type=str, help="YAML file with field: column pairs")
    parser.add_argument("--map", action="append", metavar="FIELD=COLUMN", help="Map one field (repeatable)")
    parser.add_argument("--today", type=str, help="Reference date for timeliness (YYYY-MM-DD)")
    parser.add_argument("--env", type=str, default="production", help="Configuration environment")
    parser.add_argument("--skip-duplicates", action="store_true", help="Skip rows already imported")
    parser.add_argument("--validate", action="store_true", help="Validate imported records against the schema")
    parser.add_argument("--output", type=str, help="Export normalized records to this path")
    parser.add_argument(
        "--format", type=str, default="csv",
        choices=["csv", "json", "excel", "parquet"], help="Export format",
    )
    args = parser.parse_args(argv)

    try:
        config = load_tracker_config(args.env, get_env_config())
        configure_logging(config.log_level)
        code = run_import(args, config)
    except (ValueError, OSError) as exc:
        console.print(f"[red]{exc}[/red]")
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
