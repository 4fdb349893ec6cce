"""In-memory workbook model and selection validation."""

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from sheet_matcher.core.errors import (
    ColumnOutOfRangeError,
    ConfigurationError,
    EmptySheetError
)

Row = Sequence[str]
Table = List[List[str]]


@dataclass(frozen=True)
class Dataset:
    """
    A decoded workbook: a source name plus its sheets in workbook order.

    Each sheet is a list of rows where row 0 is the header and every cell is
    an already trimmed string. The engine only ever reads from it.
    """
    name: Optional[str]
    sheets: Mapping[str, Sequence[Row]] = field(default_factory=dict)

    @property
    def sheet_names(self) -> List[str]:
        return list(self.sheets.keys())

    def sheet(self, sheet_name: Optional[str], source: Optional[str] = None) -> Sequence[Row]:
        """
        Return the rows of a sheet.

        Raises:
            ConfigurationError: If no sheet is selected or it does not exist
        """
        source = source or self.name
        if not sheet_name:
            raise ConfigurationError("No sheet selected", source=source)
        if sheet_name not in self.sheets:
            raise ConfigurationError(
                f"Sheet {sheet_name!r} not found", source=source, sheet=sheet_name
            )
        return self.sheets[sheet_name]


def cell(row: Row, index: int) -> str:
    """Read a cell, treating cells past the end of a short row as empty."""
    if index < len(row):
        value = row[index]
        return '' if value is None else value
    return ''


def max_width(rows: Iterable[Row]) -> int:
    """Width of the widest row in a sheet."""
    return max((len(row) for row in rows), default=0)


def split_sheet(
    rows: Sequence[Row],
    source: Optional[str],
    sheet_name: str
) -> Tuple[Row, Sequence[Row]]:
    """
    Split a sheet into header and data rows.

    Raises:
        EmptySheetError: If the sheet has no header or no data rows
    """
    if not rows:
        raise EmptySheetError(
            f"Sheet {sheet_name!r} is empty", source=source, sheet=sheet_name
        )
    if len(rows) < 2:
        raise EmptySheetError(
            f"Sheet {sheet_name!r} has a header but no data rows",
            source=source,
            sheet=sheet_name
        )
    return rows[0], rows[1:]


def check_column(
    column: Optional[int],
    width: int,
    source: Optional[str],
    sheet_name: str,
    role: str = 'key'
) -> int:
    """
    Validate a selected column index against a sheet width.

    Raises:
        ConfigurationError: If no column is selected
        ColumnOutOfRangeError: If the index does not fall inside the header
    """
    if column is None:
        raise ConfigurationError(
            f"No {role} column selected", source=source, sheet=sheet_name
        )
    if isinstance(column, bool) or not isinstance(column, int):
        raise ConfigurationError(
            f"Invalid {role} column {column!r}",
            source=source,
            sheet=sheet_name,
            column=column
        )
    if column < 0 or column >= width:
        raise ColumnOutOfRangeError(
            f"Invalid {role} column {column}: header has {width} column(s)",
            source=source,
            sheet=sheet_name,
            column=column,
            width=width
        )
    return column


def pad_row(row: Row, width: int) -> List[str]:
    """Copy a row to exactly ``width`` cells, filling short rows with ''."""
    return [cell(row, index) for index in range(width)]


def source_label(dataset: Dataset, position: int) -> str:
    """Display name for a secondary dataset, falling back to its position."""
    if dataset.name:
        return dataset.name
    return f"Data Source {chr(ord('B') + position)}"
