"""Lookup tables built from secondary datasets."""

from collections.abc import Mapping
from typing import Dict, Iterator, Optional, Tuple
import logging

from sheet_matcher.config.models import MatchMode, SecondarySelection
from sheet_matcher.core.dataset import Dataset, cell, check_column, split_sheet
from sheet_matcher.core.errors import ConfigurationError
from sheet_matcher.core.normalizer import key_for

logger = logging.getLogger(__name__)


class LookupTable(Mapping):
    """
    Read-only mapping of canonical key to a tuple of return values.

    Iteration follows insertion order, which is the order in which each key
    first appeared in the secondary sheet.
    """

    def __init__(
        self,
        entries: Dict[str, Tuple[str, ...]],
        headers: Tuple[str, ...] = (),
        source: Optional[str] = None,
        sheet: Optional[str] = None
    ):
        self._entries = dict(entries)
        self._positions = {key: position for position, key in enumerate(self._entries)}
        self.headers = tuple(headers)
        self.source = source
        self.sheet = sheet

    def __getitem__(self, key: str) -> Tuple[str, ...]:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def width(self) -> int:
        """Number of return values held per key."""
        return len(self.headers)

    def position(self, key: str) -> int:
        """Insertion position of a key."""
        return self._positions[key]

    def __repr__(self) -> str:
        return f"LookupTable(source={self.source!r}, sheet={self.sheet!r}, size={len(self)})"


class LookupTableBuilder:
    """Builds one lookup table per secondary dataset."""

    def validate(
        self,
        dataset: Dataset,
        selection: SecondarySelection,
        source: Optional[str] = None
    ) -> None:
        """
        Check a secondary selection without building anything.

        Raises:
            ConfigurationError: If the sheet or a column is missing
            EmptySheetError: If the sheet has no data rows
            ColumnOutOfRangeError: If a column lies beyond the header
        """
        self._resolve(dataset, selection, source)

    def _resolve(
        self,
        dataset: Dataset,
        selection: SecondarySelection,
        source: Optional[str]
    ):
        source = source or dataset.name
        rows = dataset.sheet(selection.sheet, source=source)
        header, data = split_sheet(rows, source, selection.sheet)
        width = len(header)

        check_column(selection.lookup_column, width, source, selection.sheet, role='lookup')
        if not selection.return_columns:
            raise ConfigurationError(
                "No return columns selected", source=source, sheet=selection.sheet
            )
        for column in selection.return_columns:
            check_column(column, width, source, selection.sheet, role='return')

        return source, header, data

    def build(
        self,
        dataset: Dataset,
        selection: SecondarySelection,
        mode: MatchMode = MatchMode.NORMALIZED,
        source: Optional[str] = None
    ) -> LookupTable:
        """
        Build the canonical-key table for a secondary sheet.

        Rows whose lookup value has no key are skipped, and when several rows
        share a key the first one wins.

        Args:
            dataset: Secondary dataset
            selection: Lookup and return columns
            mode: Match mode; fuzzy tables are keyed on normalized values
            source: Display name used in errors and output headers

        Returns:
            LookupTable: Immutable table of return values
        """
        source, header, data = self._resolve(dataset, selection, source)
        mode = MatchMode(mode)

        entries: Dict[str, Tuple[str, ...]] = {}
        duplicates = 0
        for row in data:
            key = key_for(cell(row, selection.lookup_column), mode)
            if not key:
                continue
            if key in entries:
                duplicates += 1
                continue
            entries[key] = tuple(cell(row, column) for column in selection.return_columns)

        if duplicates:
            logger.debug(
                f"{source}/{selection.sheet}: ignored {duplicates} rows "
                f"with an already seen lookup key"
            )

        return LookupTable(
            entries,
            headers=tuple(header[column] for column in selection.return_columns),
            source=source,
            sheet=selection.sheet
        )
