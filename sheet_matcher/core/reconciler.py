"""Side-by-side comparison of two sheets keyed on one column each."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple
import time

from sheet_matcher.config.models import MatchMode, PrimarySelection, SecondarySelection
from sheet_matcher.core import configure_logger
from sheet_matcher.core.dataset import Dataset, Table, cell, check_column, split_sheet
from sheet_matcher.core.errors import ConfigurationError
from sheet_matcher.core.lookup import LookupTableBuilder
from sheet_matcher.core.matcher import NO_MATCH, ExactMatcher

STATUS_HEADER = 'Match_Status'
STATUS_MATCH = 'Exact Match'
STATUS_DIFFERENT = 'Differences Found'
STATUS_MISSING = 'Missing in File B'


@dataclass
class ReconcileStats:
    total: int = 0
    matched: int = 0
    differences: int = 0
    missing: int = 0


@dataclass
class ReconcileResult:
    """Comparison table with the (row, column) cells that need attention."""
    table: Table
    highlights: Set[Tuple[int, int]] = field(default_factory=set)
    stats: ReconcileStats = field(default_factory=ReconcileStats)


class SheetReconciler:
    """
    Compares the shared columns of two sheets row by row.

    Rows are paired through a lookup table over the other sheet's key
    column, so the first row for a repeated key is the one compared.
    Values are compared exactly.
    """

    def __init__(self, mode: MatchMode = MatchMode.EXACT):
        self.mode = self._check_mode(mode)
        self.builder = LookupTableBuilder()
        self.logger = configure_logger(__name__)

    @staticmethod
    def _check_mode(mode: MatchMode) -> MatchMode:
        mode = MatchMode(mode)
        if mode is MatchMode.FUZZY:
            raise ConfigurationError("Sheet comparison supports exact or normalized keys only")
        return mode

    @staticmethod
    def common_columns(
        base_header: Sequence[str],
        other_header: Sequence[str],
        key_column: Optional[int] = None
    ) -> List[str]:
        """Headers present in both sheets, excluding the base key column."""
        key_name = base_header[key_column] if key_column is not None else None
        return [
            name for name in base_header
            if name in other_header and name != key_name
        ]

    def reconcile(
        self,
        base: Dataset,
        base_selection: PrimarySelection,
        other: Dataset,
        other_selection: PrimarySelection,
        compare_columns: Sequence[str],
        mode: Optional[MatchMode] = None
    ) -> ReconcileResult:
        """
        Compare the selected columns of two sheets.

        Args:
            base: Dataset every output row comes from
            base_selection: Sheet and key column of the base dataset
            other: Dataset compared against
            other_selection: Sheet and key column of the other dataset
            compare_columns: Header names present in both sheets
            mode: Key matching mode, defaults to the reconciler's

        Returns:
            ReconcileResult: Comparison table, highlighted cells and counts

        Raises:
            ConfigurationError: If a sheet, key column or compare column is unusable
        """
        start_time = time.time()
        mode = self.mode if mode is None else self._check_mode(mode)
        base_source = base.name or 'File A'
        other_source = other.name or 'File B'

        base_rows = base.sheet(base_selection.sheet, source=base_source)
        base_header, base_data = split_sheet(base_rows, base_source, base_selection.sheet)
        key_column = check_column(
            base_selection.column, len(base_header), base_source, base_selection.sheet
        )
        other_rows = other.sheet(other_selection.sheet, source=other_source)
        other_header, _ = split_sheet(other_rows, other_source, other_selection.sheet)
        check_column(
            other_selection.column, len(other_header), other_source, other_selection.sheet
        )

        if not compare_columns:
            raise ConfigurationError(
                "Select at least one column to compare",
                source=base_source,
                sheet=base_selection.sheet
            )
        base_indices = []
        other_indices = []
        for name in compare_columns:
            for header, indices, source, sheet in (
                (base_header, base_indices, base_source, base_selection.sheet),
                (other_header, other_indices, other_source, other_selection.sheet)
            ):
                if name not in header:
                    raise ConfigurationError(
                        "Compare column not found", source=source, sheet=sheet, column=name
                    )
                indices.append(list(header).index(name))

        table = self.builder.build(
            other,
            SecondarySelection(other_selection.sheet, other_selection.column, other_indices),
            mode,
            source=other_source
        )
        matcher = ExactMatcher(mode)

        header = [base_header[key_column]] + list(compare_columns) + [STATUS_HEADER]
        status_column = len(header) - 1
        output: Table = [header]
        highlights: Set[Tuple[int, int]] = set()
        stats = ReconcileStats()

        for row in base_data:
            key = cell(row, key_column)
            if not key:
                continue

            row_index = len(output) - 1
            base_values = [cell(row, index) for index in base_indices]
            other_values = matcher.match(key, table)

            if other_values is NO_MATCH:
                stats.missing += 1
                output.append([key] + base_values + [STATUS_MISSING])
                highlights.add((row_index, status_column))
                continue

            compared = [key]
            has_difference = False
            for offset, (value, other_value) in enumerate(zip(base_values, other_values)):
                if value == other_value:
                    compared.append(value)
                else:
                    has_difference = True
                    compared.append(f"{value} (B: {other_value})")
                    # Column 0 holds the key.
                    highlights.add((row_index, offset + 1))

            if has_difference:
                stats.differences += 1
                compared.append(STATUS_DIFFERENT)
                highlights.add((row_index, status_column))
            else:
                stats.matched += 1
                compared.append(STATUS_MATCH)
            output.append(compared)

        stats.total = len(output) - 1
        self.logger.info(
            f"Compared {stats.total} rows: {stats.matched} identical, "
            f"{stats.differences} with differences, {stats.missing} missing "
            f"in {time.time() - start_time:.2f} seconds"
        )
        return ReconcileResult(table=output, highlights=highlights, stats=stats)
