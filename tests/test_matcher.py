import pytest

from sheet_matcher.config.models import MatchMode, MergeSettings
from sheet_matcher.core.index import BKTree
from sheet_matcher.core.lookup import LookupTable
from sheet_matcher.core.matcher import (
    NO_MATCH,
    ExactMatcher,
    FuzzyMatcher,
    create_matcher,
)


def _table(*keys: str) -> LookupTable:
    return LookupTable({key: (f"value-{key}",) for key in keys}, headers=("value",))


def test_exact_matcher_is_case_sensitive() -> None:
    table = _table("Alice")

    assert ExactMatcher(MatchMode.EXACT).match("  Alice ", table) == ("value-Alice",)
    assert ExactMatcher(MatchMode.EXACT).match("alice", table) is NO_MATCH


def test_normalized_matcher_folds_query() -> None:
    table = _table("cafe", "7")

    matcher = ExactMatcher(MatchMode.NORMALIZED)

    assert matcher.match("Café!", table) == ("value-cafe",)
    assert matcher.match("007", table) == ("value-7",)
    assert matcher.match("", table) is NO_MATCH


def test_exact_matcher_accepts_mode_per_call() -> None:
    table = _table("cafe")

    assert ExactMatcher(MatchMode.EXACT).match("CAFE", table, MatchMode.NORMALIZED) == ("value-cafe",)


def test_fuzzy_picks_closest_key() -> None:
    table = _table("cat", "dog")

    matcher = FuzzyMatcher(tolerance=1)

    assert matcher.match("cot", table) == ("value-cat",)
    assert matcher.nearest("cot", table) == ("cat", 1)
    assert matcher.match("zzz", table) is NO_MATCH


def test_fuzzy_tolerance_is_inclusive() -> None:
    table = _table("cat")

    assert FuzzyMatcher(tolerance=1).match("cats", table) == ("value-cat",)
    assert FuzzyMatcher(tolerance=0).match("cats", table) is NO_MATCH
    assert FuzzyMatcher(tolerance=0).match("CAT", table) == ("value-cat",)


def test_fuzzy_ties_go_to_earliest_key() -> None:
    assert FuzzyMatcher(tolerance=1).nearest("hat", _table("bat", "cat")) == ("bat", 1)
    assert FuzzyMatcher(tolerance=1).nearest("hat", _table("cat", "bat")) == ("cat", 1)


def test_fuzzy_exact_hit_beats_earlier_near_hits() -> None:
    table = _table("cab", "cat", "car")

    assert FuzzyMatcher(tolerance=2).nearest("car", table) == ("car", 0)


def test_fuzzy_blank_query_and_empty_table() -> None:
    assert FuzzyMatcher(tolerance=5).match("  ", _table("a")) is NO_MATCH
    assert FuzzyMatcher(tolerance=5).match("a", LookupTable({})) is NO_MATCH


def test_fuzzy_per_call_tolerance_overrides_default() -> None:
    table = _table("kitten")

    assert FuzzyMatcher(tolerance=0).match("sitting", table, tolerance=3) == ("value-kitten",)


KEYS = ["cat", "bat", "rat", "cart", "carts", "dog", "dig", "dug", "apple", "apply", "ample", "maple"]
QUERIES = ["cat", "hat", "ca", "crt", "dxg", "appel", "mple", "zzzz", "c", "dogs", "aple", "b"]


@pytest.mark.parametrize("tolerance", [0, 1, 2, 3])
def test_index_agrees_with_linear_scan(tolerance: int) -> None:
    for ordering in (KEYS, list(reversed(KEYS))):
        table = _table(*ordering)
        linear = FuzzyMatcher(tolerance=tolerance)
        indexed = FuzzyMatcher(tolerance=tolerance, use_index=True)

        for query in QUERIES:
            assert indexed.nearest(query, table) == linear.nearest(query, table), query


def test_bk_tree_search_reports_distance_and_position() -> None:
    tree = BKTree(["cat", "bat", "dog"])

    assert tree.search("hat", 1) == [(1, 0, "cat"), (1, 1, "bat")]
    assert tree.nearest("dog", 0) == ("dog", 0)
    assert tree.nearest("zzz", 1) is None
    assert len(tree) == 3


def test_create_matcher_follows_mode() -> None:
    assert isinstance(create_matcher(MergeSettings(mode=MatchMode.FUZZY)), FuzzyMatcher)
    assert isinstance(create_matcher(MergeSettings(mode=MatchMode.EXACT)), ExactMatcher)
    assert isinstance(create_matcher(MergeSettings(mode="normalized")), ExactMatcher)
