"""Duplicate detection within a single sheet."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set
import threading
import time

from sheet_matcher.config.models import (
    DuplicateSelection,
    GroupingSettings,
    KeepPolicy,
    MatchMode
)
from sheet_matcher.core import configure_logger
from sheet_matcher.core.dataset import (
    Dataset,
    Row,
    Table,
    cell,
    check_column,
    max_width,
    split_sheet
)
from sheet_matcher.core.distance import within_tolerance
from sheet_matcher.core.errors import (
    ConfigurationError,
    NoMatchesWarning,
    OperationCancelledError
)
from sheet_matcher.core.normalizer import KEY_DELIMITER, key_for

DUPLICATE_FLAG_HEADER = 'Is_Duplicate'
ORIGINAL_ROW_HEADER = 'Original_Row'
GROUP_ID_HEADER = 'Group_ID'


@dataclass
class DuplicateGroup:
    """Rows sharing one canonical key, in original row order."""
    representative_key: str
    members: List[int] = field(default_factory=list)
    kept_index: Optional[int] = None

    @property
    def duplicates(self) -> List[int]:
        return [index for index in self.members if index != self.kept_index]

    @property
    def has_duplicates(self) -> bool:
        return len(self.members) > 1


@dataclass
class GroupingStats:
    """Summary counts of a grouping run."""
    original: int = 0
    unique: int = 0
    removed: int = 0
    groups: int = 0


@dataclass
class GroupingResult:
    """
    Every view derived from one grouping pass.

    Row indices in ``groups`` and ``duplicate_indices`` are 0-based positions
    among the data rows (the header is not counted).
    """
    header: List[str]
    groups: List[DuplicateGroup]
    duplicate_indices: Set[int]
    original: Table
    unique: Table
    removed: Table
    flagged: Table
    grouped: Table
    stats: GroupingStats
    warnings: List[NoMatchesWarning] = field(default_factory=list)


class DuplicateGrouper:
    """
    Partitions the rows of a sheet into duplicate groups.

    Exact and normalized modes group rows with identical keys. Fuzzy mode
    clusters greedily: each row joins the first existing group whose
    representative lies within the tolerance, otherwise it starts a new
    group. That makes fuzzy membership depend on row order.
    """

    def __init__(self, settings: Optional[GroupingSettings] = None):
        self.settings = settings or GroupingSettings()
        self.logger = configure_logger(__name__)

    def key_columns(
        self,
        dataset: Dataset,
        selection: DuplicateSelection
    ) -> List[int]:
        """
        Resolve the key columns of a selection.

        Whole-row selections use every column up to the widest row.

        Raises:
            ConfigurationError: If no column is selected
            EmptySheetError: If the sheet has no data rows
            ColumnOutOfRangeError: If a column lies beyond the header
        """
        rows = dataset.sheet(selection.sheet)
        header, _ = split_sheet(rows, dataset.name, selection.sheet)

        if selection.whole_row:
            return list(range(max_width(rows)))
        if not selection.columns:
            raise ConfigurationError(
                "Select at least one column to check for duplicates",
                source=dataset.name,
                sheet=selection.sheet
            )
        return [
            check_column(column, len(header), dataset.name, selection.sheet)
            for column in selection.columns
        ]

    def row_key(self, row: Row, columns: Sequence[int]) -> str:
        """
        Canonical key of a row over the key columns.

        Returns '' when every selected cell is empty, so such rows never
        group with each other.
        """
        parts = [key_for(cell(row, column), self.settings.mode) for column in columns]
        if not any(parts):
            return ''
        return KEY_DELIMITER.join(parts)

    def _cluster(
        self,
        keys: List[str],
        cancel_event: Optional[threading.Event],
        dataset: Dataset,
        sheet: str
    ) -> List[DuplicateGroup]:
        fuzzy = self.settings.mode is MatchMode.FUZZY
        tolerance = self.settings.tolerance
        groups: List[DuplicateGroup] = []
        by_key: Dict[str, DuplicateGroup] = {}

        for index, key in enumerate(keys):
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError(
                    "Duplicate search cancelled", source=dataset.name, sheet=sheet
                )
            if not key:
                continue

            if fuzzy:
                target = next(
                    (group for group in groups
                     if within_tolerance(key, group.representative_key, tolerance)),
                    None
                )
            else:
                target = by_key.get(key)

            if target is None:
                target = DuplicateGroup(representative_key=key)
                groups.append(target)
                by_key[key] = target
            target.members.append(index)

        keep_last = self.settings.keep is KeepPolicy.LAST
        for group in groups:
            group.kept_index = group.members[-1] if keep_last else group.members[0]
        return groups

    def group(
        self,
        dataset: Dataset,
        selection: DuplicateSelection,
        cancel_event: Optional[threading.Event] = None
    ) -> GroupingResult:
        """
        Find duplicate rows in a sheet and build every review view.

        Args:
            dataset: Dataset holding the sheet
            selection: Sheet and key columns, or the whole row
            cancel_event: Optional event checked between rows

        Returns:
            GroupingResult: Groups, views and statistics
        """
        start_time = time.time()

        columns = self.key_columns(dataset, selection)
        rows = dataset.sheet(selection.sheet)
        header = list(rows[0])
        data = rows[1:]

        keys = [self.row_key(row, columns) for row in data]
        groups = self._cluster(keys, cancel_event, dataset, selection.sheet)

        duplicate_indices: Set[int] = set()
        for group in groups:
            duplicate_indices.update(group.duplicates)

        unique: Table = [list(header)]
        removed: Table = [list(header)]
        flagged: Table = [header + [DUPLICATE_FLAG_HEADER]]
        for index, row in enumerate(data):
            is_duplicate = index in duplicate_indices
            (removed if is_duplicate else unique).append(list(row))
            flagged.append(list(row) + ['TRUE' if is_duplicate else 'FALSE'])

        grouped: Table = [[ORIGINAL_ROW_HEADER, GROUP_ID_HEADER] + header]
        group_number = 0
        for group in groups:
            if not group.has_duplicates:
                continue
            group_number += 1
            for index in group.members:
                # Spreadsheet row number: 1-based and counting the header row.
                grouped.append([str(index + 2), f"Group {group_number}"] + list(data[index]))

        stats = GroupingStats(
            original=len(data),
            unique=len(unique) - 1,
            removed=len(removed) - 1,
            groups=group_number
        )

        warnings = []
        if not duplicate_indices:
            warning = NoMatchesWarning(
                "No duplicates found",
                source=dataset.name,
                sheet=selection.sheet
            )
            self.logger.warning(str(warning))
            warnings.append(warning)

        self.logger.info(
            f"Checked {stats.original} rows: {stats.unique} unique, "
            f"{stats.removed} duplicates in {stats.groups} group(s) "
            f"in {time.time() - start_time:.2f} seconds"
        )

        return GroupingResult(
            header=header,
            groups=groups,
            duplicate_indices=duplicate_indices,
            original=[list(header)] + [list(row) for row in data],
            unique=unique,
            removed=removed,
            flagged=flagged,
            grouped=grouped,
            stats=stats,
            warnings=warnings
        )


def find_duplicates(
    dataset: Dataset,
    selection: DuplicateSelection,
    mode: MatchMode = MatchMode.NORMALIZED,
    tolerance: int = 1,
    keep: KeepPolicy = KeepPolicy.FIRST
) -> GroupingResult:
    """Group duplicates with default settings for the given options."""
    settings = GroupingSettings(mode=mode, tolerance=tolerance, keep=keep)
    return DuplicateGrouper(settings).group(dataset, selection)
