"""File I/O utilities for reading uploads and writing pipeline outputs."""

from typing import TypeAlias
import math
from datetime import date, datetime
from io import BytesIO
from pathlib import Path

import pandas as pd
from rich.console import Console

from attrition_pipeline.errors import EmptyFile, FileReadError

FilePath: TypeAlias = str | Path

console = Console()

CSV_ENCODINGS = ("utf-8-sig", "latin-1")


def _cell_to_text(value: object) -> str:
    """Render a spreadsheet cell the way it would appear in a CSV export."""
    match value:
        case str():
            return value.strip()
        case _ if value is None or value is pd.NaT:
            return ""
        case float() if math.isnan(value):
            return ""
        case float() if value.is_integer():
            return str(int(value))
        case pd.Timestamp() | datetime() if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
            return value.strftime("%Y-%m-%d")
        case pd.Timestamp() | datetime():
            return value.isoformat()
        case date():
            return value.isoformat()
        case _:
            return str(value).strip()


def _drop_blank_rows(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return df
    blank = (df == "").all(axis=1)
    return df[~blank].reset_index(drop=True)


def read_csv_bytes(buffer: bytes) -> pd.DataFrame:
    """Parse a CSV buffer into a frame of trimmed strings."""
    for encoding in CSV_ENCODINGS:
        try:
            df = pd.read_csv(
                BytesIO(buffer),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                encoding=encoding,
            )
            break
        except UnicodeDecodeError:
            continue
        except pd.errors.EmptyDataError as exc:
            raise EmptyFile() from exc
        except pd.errors.ParserError as exc:
            raise FileReadError("CSV", str(exc)) from exc
    else:
        raise FileReadError("CSV", "could not decode file")

    df = df.map(_cell_to_text)
    return _drop_blank_rows(df)


def read_excel_bytes(buffer: bytes, extension: str) -> pd.DataFrame:
    """Parse the first sheet of a workbook into a frame of strings."""
    match extension:
        case "xlsx":
            engine = "openpyxl"
        case "xls":
            engine = "xlrd"
        case ext:
            raise ValueError(f"Unsupported Excel format: {ext}")

    try:
        df = pd.read_excel(BytesIO(buffer), sheet_name=0, engine=engine, dtype=object)
    except Exception as exc:
        raise FileReadError("Excel", str(exc)) from exc

    df = df.map(_cell_to_text)
    return _drop_blank_rows(df)


def write_output(df: pd.DataFrame, path: FilePath, fmt: str = "csv") -> Path:
    """Write a DataFrame to the specified format and return the final path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    match fmt:
        case "csv":
            path = path.with_suffix(".csv")
            df.to_csv(path, index=False)
        case "excel":
            path = path.with_suffix(".xlsx")
            df.to_excel(path, index=False, engine="openpyxl")
        case "json":
            path = path.with_suffix(".json")
            df.to_json(path, orient="records", indent=2, date_format="iso")
        case other:
            raise ValueError(f"Unsupported output format: {other}")

    console.print(f"  Wrote {len(df)} rows to {path}")
    return path
