"""Multi-source lookup merge of secondary datasets into a primary one."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import threading
import time

from sheet_matcher.config.models import (
    MatchMode,
    MergeSettings,
    PrimarySelection,
    SecondarySelection
)
from sheet_matcher.core import configure_logger
from sheet_matcher.core.dataset import (
    Dataset,
    Table,
    cell,
    check_column,
    max_width,
    pad_row,
    source_label,
    split_sheet
)
from sheet_matcher.core.errors import NoMatchesWarning, OperationCancelledError
from sheet_matcher.core.lookup import LookupTable, LookupTableBuilder
from sheet_matcher.core.matcher import NO_MATCH, create_matcher

Secondary = Tuple[Dataset, SecondarySelection]


@dataclass
class MergeStats:
    """Summary counts of a merge run."""
    total: int = 0
    matched: int = 0
    unmatched: int = 0
    matches_per_source: Dict[str, int] = field(default_factory=dict)


@dataclass
class MergeResult:
    """Augmented table plus its statistics and non-fatal warnings."""
    table: Table
    stats: MergeStats
    warnings: List[NoMatchesWarning] = field(default_factory=list)

    @property
    def header(self) -> List[str]:
        return self.table[0]

    @property
    def rows(self) -> Table:
        return self.table[1:]


def column_label(source: str, header: str) -> str:
    """Output header for a column brought over from a secondary source."""
    return f"{source} - {header}"


class RecordMerger:
    """
    Merges any number of secondary lookups into a primary dataset.

    Each secondary gets its own lookup table; every primary row is matched
    against each table independently, and misses are filled with the
    configured no-match value so the output always has one row per input row.
    """

    def __init__(
        self,
        settings: Optional[MergeSettings] = None,
        builder: Optional[LookupTableBuilder] = None
    ):
        """
        Initialize the merger.

        Args:
            settings: Match mode, tolerance and worker configuration
            builder: Lookup table builder, mainly for tests
        """
        self.settings = settings or MergeSettings()
        self.builder = builder or LookupTableBuilder()
        self.logger = configure_logger(__name__)

    def _validate(
        self,
        primary: Dataset,
        primary_selection: PrimarySelection,
        secondaries: Sequence[Secondary]
    ):
        """Validate every selection before any matching starts."""
        primary_source = primary.name or 'File A'
        rows = primary.sheet(primary_selection.sheet, source=primary_source)
        header, data = split_sheet(rows, primary_source, primary_selection.sheet)
        check_column(
            primary_selection.column,
            len(header),
            primary_source,
            primary_selection.sheet,
            role='lookup'
        )

        labels = []
        for position, (dataset, selection) in enumerate(secondaries):
            label = source_label(dataset, position)
            if label in labels:
                label = f"{label} ({position + 1})"
            self.builder.validate(dataset, selection, source=label)
            labels.append(label)

        return rows, data, labels

    def _build_tables(
        self,
        secondaries: Sequence[Secondary],
        labels: List[str]
    ) -> List[LookupTable]:
        """Build one lookup table per secondary, in parallel when configured."""
        mode = self.settings.mode
        if self.settings.max_workers > 1 and len(secondaries) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
                futures = [
                    executor.submit(self.builder.build, dataset, selection, mode, label)
                    for (dataset, selection), label in zip(secondaries, labels)
                ]
                return [future.result() for future in futures]

        return [
            self.builder.build(dataset, selection, mode, label)
            for (dataset, selection), label in zip(secondaries, labels)
        ]

    def merge(
        self,
        primary: Dataset,
        primary_selection: PrimarySelection,
        secondaries: Sequence[Secondary],
        cancel_event: Optional[threading.Event] = None
    ) -> MergeResult:
        """
        Augment the primary sheet with values looked up in each secondary.

        Args:
            primary: Primary dataset
            primary_selection: Sheet and key column of the primary dataset
            secondaries: Secondary datasets with their lookup selections
            cancel_event: Optional event checked between rows

        Returns:
            MergeResult: Output table, statistics and warnings

        Raises:
            ConfigurationError: If any selection is invalid; nothing is merged
            OperationCancelledError: If the cancel event gets set
        """
        start_time = time.time()

        rows, data, labels = self._validate(primary, primary_selection, secondaries)
        tables = self._build_tables(secondaries, labels)
        matcher = create_matcher(self.settings)
        no_match = self.settings.no_match_value

        width = max_width(rows)
        header = pad_row(rows[0], width)
        for label, table in zip(labels, tables):
            header.extend(column_label(label, name) for name in table.headers)

        stats = MergeStats(
            total=len(data),
            matches_per_source={label: 0 for label in labels}
        )
        output: Table = [header]

        for row in data:
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError(
                    "Merge cancelled",
                    source=primary.name,
                    sheet=primary_selection.sheet
                )

            value = cell(row, primary_selection.column)
            merged = pad_row(row, width)
            any_match = False

            for label, table in zip(labels, tables):
                found = matcher.match(value, table)
                if found is NO_MATCH:
                    merged.extend([no_match] * table.width)
                else:
                    merged.extend(found)
                    stats.matches_per_source[label] += 1
                    any_match = True

            if any_match:
                stats.matched += 1
            else:
                stats.unmatched += 1
            output.append(merged)

        warnings = []
        for (dataset, selection), label in zip(secondaries, labels):
            if stats.matches_per_source[label] == 0:
                warning = NoMatchesWarning(
                    "No rows matched; check the column selection or try a "
                    "more lenient match mode",
                    source=label,
                    sheet=selection.sheet,
                    column=selection.lookup_column
                )
                self.logger.warning(str(warning))
                warnings.append(warning)

        self.logger.info(
            f"Merged {stats.total} rows against {len(tables)} source(s): "
            f"{stats.matched} matched, {stats.unmatched} unmatched "
            f"in {time.time() - start_time:.2f} seconds"
        )

        return MergeResult(table=output, stats=stats, warnings=warnings)


def merge(
    primary: Dataset,
    primary_selection: PrimarySelection,
    secondaries: Sequence[Secondary],
    mode: MatchMode = MatchMode.NORMALIZED,
    tolerance: int = 1
) -> MergeResult:
    """Merge with default settings for the given mode and tolerance."""
    settings = MergeSettings(mode=mode, tolerance=tolerance)
    return RecordMerger(settings).merge(primary, primary_selection, secondaries)
