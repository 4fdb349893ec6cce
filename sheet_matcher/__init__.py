"""
Sheet Matcher
=============

Merge, deduplicate and reconcile tabular data extracted from spreadsheets,
matching rows across datasets with exact, normalized or fuzzy keys.

Key Features:
- Canonical keys that fold case, accents, punctuation and numeric formatting
- VLOOKUP-style merges of any number of secondary sources into a primary sheet
- Fuzzy matching by Levenshtein distance with deterministic tie-breaks
- Duplicate grouping with first/last keep policies and review views
- Cell-level comparison of two sheets sharing a key column
"""

from sheet_matcher.core.normalizer import normalize
from sheet_matcher.core.dataset import Dataset
from sheet_matcher.core.lookup import LookupTable, LookupTableBuilder
from sheet_matcher.core.matcher import NO_MATCH, ExactMatcher, FuzzyMatcher
from sheet_matcher.core.merger import MergeResult, RecordMerger, merge
from sheet_matcher.core.grouper import DuplicateGrouper, GroupingResult, find_duplicates
from sheet_matcher.core.reconciler import ReconcileResult, SheetReconciler
from sheet_matcher.core.worker import MatchingWorker
from sheet_matcher.core.errors import (
    ColumnOutOfRangeError,
    ConfigurationError,
    EmptySheetError,
    MatcherError,
    NoMatchesWarning,
    OperationCancelledError
)

from sheet_matcher.config.models import (
    DuplicateSelection,
    GroupingSettings,
    KeepPolicy,
    MatchMode,
    MergeSettings,
    NormalizationMode,
    PrimarySelection,
    SecondarySelection
)
from sheet_matcher.config.rules import (
    ColumnRule,
    NamedColumnsRule,
    NewColumnsRule,
    PatternRule,
    ReturnColumnRules
)

__version__ = "1.0.0"
