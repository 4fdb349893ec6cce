"""Rules that pick which secondary columns a merge brings over."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple
import regex as re


def header_key(name: str) -> str:
    """Compare headers the way users read them: trimmed and case-insensitive."""
    return ' '.join(str(name).split()).casefold()


class ColumnRule(ABC):
    """Decides whether a secondary header belongs in the merge output."""

    @abstractmethod
    def selects(self, header: str, primary_header: Sequence[str]) -> bool:
        """
        Args:
            header: Header of the column in the secondary sheet
            primary_header: Header row of the primary sheet

        Returns:
            bool: Whether the column should be returned
        """


class NewColumnsRule(ColumnRule):
    """Columns the primary sheet does not have yet."""

    def selects(self, header: str, primary_header: Sequence[str]) -> bool:
        return header_key(header) not in {header_key(name) for name in primary_header}


class NamedColumnsRule(ColumnRule):
    """Columns picked by header name."""

    def __init__(self, names: Iterable[str]):
        self.names = frozenset(header_key(name) for name in names)

    def selects(self, header: str, primary_header: Sequence[str]) -> bool:
        return header_key(header) in self.names


class PatternRule(ColumnRule):
    """Columns whose whole header matches a regular expression."""

    def __init__(self, pattern: str, ignore_case: bool = False):
        self.pattern = re.compile(pattern, re.IGNORECASE if ignore_case else 0)

    def selects(self, header: str, primary_header: Sequence[str]) -> bool:
        return self.pattern.fullmatch(' '.join(str(header).split())) is not None


@dataclass(frozen=True)
class ReturnColumnRules:
    """
    Resolves return-column indices from a secondary header row.

    A column is returned when any include rule selects it and its header is
    not excluded. The lookup column and unnamed columns are never returned.
    """
    include: Sequence[ColumnRule]
    exclude: Sequence[str] = ()

    def select(
        self,
        header: Sequence[str],
        lookup_column: int,
        primary_header: Sequence[str] = ()
    ) -> Tuple[int, ...]:
        """
        Pick return columns from a secondary header.

        Args:
            header: Header row of the secondary sheet
            lookup_column: Index of the secondary lookup column
            primary_header: Header row of the primary sheet

        Returns:
            Tuple[int, ...]: Selected column indices in sheet order
        """
        excluded = {header_key(name) for name in self.exclude}
        primary = list(primary_header)
        return tuple(
            index for index, name in enumerate(header)
            if index != lookup_column
            and header_key(name)
            and header_key(name) not in excluded
            and any(rule.selects(name, primary) for rule in self.include)
        )
