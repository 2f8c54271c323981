"""Data validation utilities using pandera."""

import pandera as pa
import pandas as pd
from pandera import DataFrameSchema


class SchemaViolation(ValueError):
    """A frame that should already be clean failed its schema."""

    def __init__(self, schema_name: str, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"{schema_name} schema failed: {'; '.join(errors)}")


def validate_dataframe(df: pd.DataFrame, schema: DataFrameSchema, name: str = "dataframe") -> pd.DataFrame:
    """Validate and coerce a DataFrame, raising with every failure case listed."""
    try:
        return schema.validate(df, lazy=True)
    except pa.errors.SchemaErrors as e:
        errors = []
        for _, row in e.failure_cases.iterrows():
            match row.to_dict():
                case {"column": col, "check": check, "failure_case": val}:
                    errors.append(f"Column '{col}' failed check '{check}': {val}")
                case failure:
                    errors.append(f"Validation failure: {failure}")
        raise SchemaViolation(name, errors) from e
