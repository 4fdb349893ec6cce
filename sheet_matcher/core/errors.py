"""Error taxonomy for the matching engine."""

from typing import Any, Optional


def _describe(source: Optional[str], sheet: Optional[str], column: Any) -> str:
    parts = []
    if source:
        parts.append(f"source={source!r}")
    if sheet:
        parts.append(f"sheet={sheet!r}")
    if column is not None:
        parts.append(f"column={column!r}")
    return ', '.join(parts)


class MatcherError(Exception):
    """Base class for all engine errors."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        sheet: Optional[str] = None,
        column: Any = None
    ):
        self.source = source
        self.sheet = sheet
        self.column = column
        context = _describe(source, sheet, column)
        super().__init__(f"{message} ({context})" if context else message)


class ConfigurationError(MatcherError, ValueError):
    """A sheet or column is missing, unselected or otherwise unusable."""


class EmptySheetError(ConfigurationError):
    """The selected sheet has no header row or no data rows."""


class ColumnOutOfRangeError(ConfigurationError, IndexError):
    """A column index lies beyond the observed header width."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        sheet: Optional[str] = None,
        column: Any = None,
        width: Optional[int] = None
    ):
        self.width = width
        super().__init__(message, source=source, sheet=sheet, column=column)


class OperationCancelledError(MatcherError):
    """A running merge or grouping pass observed its cancel event."""


class NoMatchesWarning(UserWarning):
    """
    Non-fatal: an operation finished without a single positive match.

    Instances are attached to result objects rather than raised.
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        sheet: Optional[str] = None,
        column: Any = None
    ):
        self.source = source
        self.sheet = sheet
        self.column = column
        context = _describe(source, sheet, column)
        super().__init__(f"{message} ({context})" if context else message)
