"""Exact, normalized and fuzzy matching against lookup tables."""

from typing import Dict, Optional, Tuple
import threading

from sheet_matcher.config.models import MatchMode, MergeSettings
from sheet_matcher.core.distance import edit_distance
from sheet_matcher.core.index import BKTree
from sheet_matcher.core.lookup import LookupTable
from sheet_matcher.core.normalizer import key_for


# Returned by every matcher when no entry qualifies.
NO_MATCH = None

MatchResult = Optional[Tuple[str, ...]]


class ExactMatcher:
    """Direct canonical-key lookup for exact and normalized modes."""

    def __init__(self, mode: MatchMode = MatchMode.NORMALIZED):
        self.mode = MatchMode(mode)

    def match(
        self,
        raw_value: str,
        table: LookupTable,
        mode: Optional[MatchMode] = None
    ) -> MatchResult:
        key = key_for(raw_value, self.mode if mode is None else mode)
        if not key:
            return NO_MATCH
        return table.get(key, NO_MATCH)


class FuzzyMatcher:
    """
    Nearest-key search by Levenshtein distance.

    The reference strategy scans the table in insertion order, keeps the
    first key with the smallest distance and stops at the first exact hit.
    With ``use_index`` a BK-tree per table answers the same question and
    returns the same key, tie-breaks included.
    """

    def __init__(self, tolerance: int = 1, use_index: bool = False):
        self.tolerance = tolerance
        self.use_index = use_index
        self._indexes: Dict[int, Tuple[LookupTable, BKTree]] = {}
        self._lock = threading.Lock()

    def _index_for(self, table: LookupTable) -> BKTree:
        with self._lock:
            cached = self._indexes.get(id(table))
            if cached is None or cached[0] is not table:
                cached = (table, BKTree(table.keys()))
                self._indexes[id(table)] = cached
            return cached[1]

    def nearest(
        self,
        key: str,
        table: LookupTable,
        tolerance: Optional[int] = None
    ) -> Optional[Tuple[str, int]]:
        """
        Find the accepted table key closest to a canonical key.

        Args:
            key: Normalized query key
            table: Lookup table keyed on normalized values
            tolerance: Maximum accepted distance, defaults to the matcher's

        Returns:
            Optional[Tuple[str, int]]: Matched key and its distance
        """
        tolerance = self.tolerance if tolerance is None else tolerance
        if not key or not table:
            return None

        if self.use_index:
            return self._index_for(table).nearest(key, tolerance)

        best_key = None
        best_distance = None
        for candidate in table:
            distance = edit_distance(key, candidate)
            if best_distance is None or distance < best_distance:
                best_distance = distance
                best_key = candidate
            if best_distance == 0:
                break

        if best_key is not None and best_distance <= tolerance:
            return best_key, best_distance
        return None

    def match(
        self,
        raw_value: str,
        table: LookupTable,
        tolerance: Optional[int] = None
    ) -> MatchResult:
        key = key_for(raw_value, MatchMode.FUZZY)
        found = self.nearest(key, table, tolerance)
        if found is None:
            return NO_MATCH
        return table[found[0]]


def create_matcher(settings: MergeSettings):
    """Pick the matcher implementation for the configured mode."""
    if settings.mode is MatchMode.FUZZY:
        return FuzzyMatcher(settings.tolerance, use_index=settings.use_index)
    return ExactMatcher(settings.mode)
