"""Pipeline configuration and environment setup."""

from typing import TypeAlias
import tomllib
from dataclasses import dataclass
from pathlib import Path

ConfigDict: TypeAlias = dict[str, str | int | bool | list[str]]


@dataclass(frozen=True)
class IngestConfig:
    max_upload_bytes: int
    allowed_extensions: tuple[str, ...]


@dataclass(frozen=True)
class ReportConfig:
    default_months: int
    max_workers: int
    history_limit: int
    high_risk_threshold: float


@dataclass(frozen=True)
class ExportConfig:
    output_dir: Path
    format: str


@dataclass(frozen=True)
class PipelineConfig:
    env: str
    ingest: IngestConfig
    report: ReportConfig
    export: ExportConfig
    log_level: str


def load_pipeline_config(env: str = "production") -> PipelineConfig:
    match env:
        case "production":
            report = ReportConfig(default_months=3, max_workers=8, history_limit=10, high_risk_threshold=70)
            export = ExportConfig(output_dir=Path("/data/attrition/output"), format="excel")
            log_level = "INFO"
        case "staging":
            report = ReportConfig(default_months=3, max_workers=4, history_limit=10, high_risk_threshold=70)
            export = ExportConfig(output_dir=Path("/data/attrition/staging"), format="excel")
            log_level = "INFO"
        case "development":
            report = ReportConfig(default_months=3, max_workers=2, history_limit=10, high_risk_threshold=70)
            export = ExportConfig(output_dir=Path("output"), format="csv")
            log_level = "DEBUG"
        case "testing":
            report = ReportConfig(default_months=3, max_workers=1, history_limit=5, high_risk_threshold=70)
            export = ExportConfig(output_dir=Path("output/test"), format="json")
            log_level = "WARNING"
        case other:
            raise ValueError(f"Unknown environment: {other}")

    return PipelineConfig(
        env=env,
        ingest=IngestConfig(
            max_upload_bytes=10 * 1024 * 1024,
            allowed_extensions=("csv", "xlsx", "xls"),
        ),
        report=report,
        export=export,
        log_level=log_level,
    )


def get_env_config() -> ConfigDict:
    """Read pipeline config from pyproject.toml."""
    pyproject = Path(__file__).parent.parent / "pyproject.toml"
    if not pyproject.exists():
        return {}
    with open(pyproject, "rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("attrition_pipeline", {})
