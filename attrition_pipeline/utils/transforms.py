"""Common data transformation utilities."""

from typing import TypeAlias
import pandas as pd

ColumnMapping: TypeAlias = dict[str, str]


def normalize_columns(df: pd.DataFrame, mapping: ColumnMapping | None = None) -> pd.DataFrame:
    """Normalize column names to snake_case and apply optional mapping."""
    df.columns = [str(col).strip().lower().replace(" ", "_").replace("-", "_") for col in df.columns]

    if mapping:
        df = df.rename(columns=mapping)

    return df


def chunk_rates(flags: list[bool], size: int) -> list[float]:
    """Split a flag sequence into consecutive chunks and return each chunk's hit rate.

    The final partial chunk is kept as-is.
    """
    rates = []
    for start in range(0, len(flags), size):
        chunk = flags[start:start + size]
        rates.append(sum(chunk) / len(chunk))
    return rates
