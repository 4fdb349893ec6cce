"""Conversion between pandas DataFrames and engine tables."""

from typing import Any, Mapping, Optional, Sequence
import pandas as pd

from sheet_matcher.core.dataset import Dataset, Table


def _to_text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ''
    return str(value).strip()


def frame_to_table(df: pd.DataFrame) -> Table:
    """
    Turn a DataFrame into a header row followed by string data rows.

    Every cell is stringified and trimmed; missing values become ''.
    """
    header = [_to_text(column) for column in df.columns]
    rows = [
        [_to_text(value) for value in record]
        for record in df.itertuples(index=False, name=None)
    ]
    return [header] + rows


def dataset_from_frames(
    name: Optional[str],
    frames: Mapping[str, pd.DataFrame]
) -> Dataset:
    """
    Build a Dataset from one DataFrame per sheet.

    Args:
        name: Source name shown in errors and output headers
        frames: Sheet name to DataFrame, in workbook order

    Returns:
        Dataset: Workbook ready for the engine
    """
    return Dataset(
        name=name,
        sheets={sheet: frame_to_table(df) for sheet, df in frames.items()}
    )


def table_to_frame(table: Sequence[Sequence[str]]) -> pd.DataFrame:
    """Turn an engine output table back into a DataFrame."""
    if not table:
        return pd.DataFrame()
    width = max(len(row) for row in table)
    header = list(table[0]) + [
        f"Column {index + 1}" for index in range(len(table[0]), width)
    ]
    rows = [list(row) + [''] * (width - len(row)) for row in table[1:]]
    return pd.DataFrame(rows, columns=header, dtype=str)
