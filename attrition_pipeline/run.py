"""Main pipeline runner: validate uploads, score attendance, rank attrition risk."""

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from attrition_pipeline.config import PipelineConfig, get_env_config, load_pipeline_config
from attrition_pipeline.domains import attendance, attrition
from attrition_pipeline.domains.attrition import InMemoryReportStore
from attrition_pipeline.domains.attrition.export import render_report_table, write_report
from attrition_pipeline.errors import IngestError
from attrition_pipeline.validation import build_validation_report

console = Console()

logger = logging.getLogger("attrition_pipeline")

DEFAULT_ORGANIZATION = "default"


def load_config() -> dict:
    config_path = Path(__file__).parent.parent / "pipeline.yaml"
    if config_path.exists():
        import yaml
        with open(config_path) as f:
            return yaml.safe_load(f) or {}

    # Fall back to pyproject.toml metadata
    return get_env_config()


def resolve_config(env: str | None) -> PipelineConfig:
    overrides = load_config()
    env = env or os.environ.get("ATTRITION_PIPELINE_ENV") or overrides.get("env", "development")
    return load_pipeline_config(env)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def validate_file(path: Path, config: PipelineConfig) -> int:
    buffer = path.read_bytes()
    match attendance.validate(buffer, path.name, config.ingest):
        case {"status": "ok", "rows": rows}:
            console.print(f"[green]✓ {path.name}: {rows} valid rows[/green]")
            return 0
        case {"status": "partial", "rows": rows, "rejected": rejected}:
            result = attendance.parse(
                buffer, path.name, config.ingest.max_upload_bytes, config.ingest.allowed_extensions,
            )
            console.print(build_validation_report(path.name, result, "table"))
            console.print(f"[yellow]{path.name}: {rows} valid rows, {rejected} rejected[/yellow]")
            return 1
        case {"status": "error", "message": msg}:
            console.print(f"[red]✗ {path.name}: {msg}[/red]")
            return 1
        case _:
            console.print("[red]Unknown validation result[/red]")
            return 1


def score_file(args: argparse.Namespace, config: PipelineConfig) -> int:
    store = InMemoryReportStore()
    path: Path = args.file
    organization = args.org

    try:
        upload = attendance.run(store, organization, path.read_bytes(), path.name, config.ingest)
    except IngestError as exc:
        console.print(f"[red]✗ {path.name}: {exc}[/red]")
        return 1

    console.print(f"[bold]Loaded {upload['processed']} attendance records from {path.name}[/bold]")
    if "errors" in upload:
        console.print(f"[yellow]{len(upload['errors'])} validation issues (run --validate for details)[/yellow]")

    match attrition.validate(store, organization):
        case {"status": "skipped", "reason": reason}:
            console.print(f"[yellow]Skipping report: {reason}[/yellow]")
            return 1
        case {"status": "ok"}:
            pass

    months = args.months or config.report.default_months
    report_id, report = attrition.run(
        store, organization, months, as_of=args.as_of, max_workers=config.report.max_workers,
    )
    console.print(render_report_table(report))
    history = attrition.report_history(store, organization, limit=config.report.history_limit)
    console.print(f"Saved report {report_id} ({len(history)} on record for {organization})")

    summary = report.summary
    console.print(
        f"High: [red]{summary.high}[/red]  Moderate: [yellow]{summary.moderate}[/yellow]  "
        f"Low: [green]{summary.low}[/green]  Insufficient data: {summary.insufficient_data}"
    )

    threshold = args.threshold if args.threshold is not None else config.report.high_risk_threshold
    flagged = attrition.high_risk(report, threshold)
    console.print(f"{len(flagged)} employees at or above {threshold}")

    if args.export is not None:
        output_dir = Path(args.export) if args.export else config.export.output_dir
        write_report(report, output_dir, args.format or config.export.format)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Run the attendance attrition pipeline")
    parser.add_argument("--validate", type=Path, metavar="FILE", help="Only validate an upload, don't score")
    parser.add_argument("--file", type=Path, help="Attendance upload (csv, xlsx, xls) to score")
    parser.add_argument("--org", default=DEFAULT_ORGANIZATION, help="Organization identifier")
    parser.add_argument("--months", type=int, help="Lookback window in months")
    parser.add_argument("--as-of", type=date.fromisoformat, help="Window end date (YYYY-MM-DD)")
    parser.add_argument("--threshold", type=float, help="High-risk score threshold")
    parser.add_argument(
        "--export", nargs="?", const="", metavar="DIR",
        help="Write the report into DIR (defaults to the configured output directory)",
    )
    parser.add_argument("--format", choices=["csv", "json", "excel"], help="Export format")
    parser.add_argument("--env", type=str, help="Configuration environment")
    args = parser.parse_args()

    config = resolve_config(args.env)
    setup_logging(config.log_level)

    if args.validate:
        sys.exit(validate_file(args.validate, config))
    elif args.file:
        sys.exit(score_file(args, config))
    else:
        parser.print_help()
        sys.exit(2)


if __name__ == "__main__":
    main()
