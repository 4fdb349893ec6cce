"""Configuration models for the sheet matching engine."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
from enum import Enum

from sheet_matcher.config.rules import ReturnColumnRules
from sheet_matcher.core.errors import ConfigurationError


class NormalizationMode(str, Enum):
    """How a raw cell value is turned into a canonical key."""
    EXACT = "exact"
    NORMALIZED = "normalized"


class MatchMode(str, Enum):
    """Strictness used when matching rows across or within datasets."""
    EXACT = "exact"
    NORMALIZED = "normalized"
    FUZZY = "fuzzy"

    @property
    def normalization_mode(self) -> NormalizationMode:
        """Fuzzy comparison always runs on normalized keys."""
        if self is MatchMode.EXACT:
            return NormalizationMode.EXACT
        return NormalizationMode.NORMALIZED


class KeepPolicy(str, Enum):
    """Which member of a duplicate group survives."""
    FIRST = "first"
    LAST = "last"


@dataclass(frozen=True)
class PrimarySelection:
    """Single key column on the primary (left) side of a merge."""
    sheet: str
    column: Optional[int]


@dataclass(frozen=True)
class SecondarySelection:
    """Lookup column plus the ordered return columns of a secondary dataset."""
    sheet: str
    lookup_column: Optional[int]
    return_columns: Tuple[int, ...] = ()

    def __post_init__(self):
        """Freeze return columns into a tuple."""
        object.__setattr__(self, 'return_columns', tuple(self.return_columns))

    @classmethod
    def from_rules(
        cls,
        sheet: str,
        lookup_column: int,
        header: Sequence[str],
        primary_header: Sequence[str],
        rules: ReturnColumnRules
    ) -> 'SecondarySelection':
        """
        Build a selection whose return columns are picked by header rules.

        Args:
            sheet: Name of the secondary sheet
            lookup_column: Index of the lookup column in the secondary sheet
            header: Header row of the secondary sheet
            primary_header: Header row of the primary sheet
            rules: Rules deciding which secondary columns to bring over

        Returns:
            SecondarySelection: Selection with the matching return columns
        """
        return cls(sheet, lookup_column, rules.select(header, lookup_column, primary_header))


@dataclass(frozen=True)
class DuplicateSelection:
    """Key columns used to detect duplicate rows."""
    sheet: str
    columns: Tuple[int, ...] = ()
    whole_row: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'columns', tuple(self.columns))


def _validate_tolerance(tolerance: int) -> None:
    if isinstance(tolerance, bool) or not isinstance(tolerance, int) or tolerance < 0:
        raise ConfigurationError(
            f"Fuzzy tolerance must be a non-negative integer, got {tolerance!r}"
        )


@dataclass(frozen=True)
class MergeSettings:
    """Settings for merging secondary lookups into a primary dataset."""
    mode: MatchMode = MatchMode.NORMALIZED
    tolerance: int = 1
    use_index: bool = False
    max_workers: int = 1
    no_match_value: str = 'N/A'

    def __post_init__(self):
        """Coerce the mode and validate numeric settings."""
        object.__setattr__(self, 'mode', MatchMode(self.mode))
        _validate_tolerance(self.tolerance)
        if self.max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be at least 1, got {self.max_workers!r}"
            )


@dataclass(frozen=True)
class GroupingSettings:
    """Settings for duplicate detection."""
    mode: MatchMode = MatchMode.NORMALIZED
    tolerance: int = 1
    keep: KeepPolicy = KeepPolicy.FIRST

    def __post_init__(self):
        object.__setattr__(self, 'mode', MatchMode(self.mode))
        object.__setattr__(self, 'keep', KeepPolicy(self.keep))
        _validate_tolerance(self.tolerance)
