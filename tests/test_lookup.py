import pytest

from sheet_matcher.config.models import MatchMode, SecondarySelection
from sheet_matcher.core.dataset import Dataset
from sheet_matcher.core.errors import (
    ColumnOutOfRangeError,
    ConfigurationError,
    EmptySheetError,
)
from sheet_matcher.core.lookup import LookupTable, LookupTableBuilder


def _dataset(rows) -> Dataset:
    return Dataset(name="lookup.xlsx", sheets={"S": rows})


def test_first_occurrence_wins() -> None:
    dataset = _dataset([["key", "value"], ["k", "v1"], ["k", "v2"]])

    table = LookupTableBuilder().build(dataset, SecondarySelection("S", 0, [1]))

    assert table["k"] == ("v1",)
    assert len(table) == 1


def test_first_occurrence_wins_after_normalization() -> None:
    dataset = _dataset([["key", "value"], ["Café", "first"], ["cafe", "second"]])

    normalized = LookupTableBuilder().build(
        dataset, SecondarySelection("S", 0, [1]), MatchMode.NORMALIZED
    )
    exact = LookupTableBuilder().build(
        dataset, SecondarySelection("S", 0, [1]), MatchMode.EXACT
    )

    assert dict(normalized) == {"cafe": ("first",)}
    assert dict(exact) == {"Café": ("first",), "cafe": ("second",)}


def test_fuzzy_tables_are_keyed_on_normalized_values() -> None:
    dataset = _dataset([["key", "value"], ["Hello World", "x"]])

    table = LookupTableBuilder().build(dataset, SecondarySelection("S", 0, [1]), MatchMode.FUZZY)

    assert list(table) == ["helloworld"]


def test_blank_keys_never_enter_the_table() -> None:
    dataset = _dataset([["key", "value"], ["", "a"], ["   ", "b"], ["?!", "c"], ["k", "d"]])

    table = LookupTableBuilder().build(dataset, SecondarySelection("S", 0, [1]))

    assert list(table) == ["k"]


def test_return_values_follow_selection_order() -> None:
    dataset = _dataset([["id", "name", "email"], ["1", "Ann", "ann@example.com"]])

    table = LookupTableBuilder().build(dataset, SecondarySelection("S", 0, [2, 1]))

    assert table["1"] == ("ann@example.com", "Ann")
    assert table.headers == ("email", "name")
    assert table.width == 2


def test_short_rows_read_missing_cells_as_empty() -> None:
    dataset = _dataset([["id", "name", "email"], ["1", "Ann"]])

    table = LookupTableBuilder().build(dataset, SecondarySelection("S", 0, [1, 2]))

    assert table["1"] == ("Ann", "")


def test_insertion_order_is_first_seen_order() -> None:
    dataset = _dataset([["key", "v"], ["zeta", "1"], ["alpha", "2"], ["zeta", "3"], ["mid", "4"]])

    table = LookupTableBuilder().build(dataset, SecondarySelection("S", 0, [1]))

    assert list(table) == ["zeta", "alpha", "mid"]
    assert table.position("mid") == 2


def test_return_column_out_of_range() -> None:
    dataset = _dataset([["a", "b", "c"], ["1", "2", "3"]])

    with pytest.raises(ColumnOutOfRangeError) as excinfo:
        LookupTableBuilder().build(dataset, SecondarySelection("S", 0, [1, 5]))

    assert excinfo.value.column == 5
    assert excinfo.value.width == 3
    assert excinfo.value.source == "lookup.xlsx"
    assert excinfo.value.sheet == "S"


def test_lookup_column_out_of_range() -> None:
    dataset = _dataset([["a", "b", "c"], ["1", "2", "3"]])

    with pytest.raises(ColumnOutOfRangeError):
        LookupTableBuilder().build(dataset, SecondarySelection("S", 3, [1]))


@pytest.mark.parametrize("rows", [[], [["a", "b"]]])
def test_empty_sheets_are_rejected(rows) -> None:
    with pytest.raises(EmptySheetError):
        LookupTableBuilder().build(_dataset(rows), SecondarySelection("S", 0, [1]))


def test_missing_sheet_and_unselected_columns() -> None:
    dataset = _dataset([["a", "b"], ["1", "2"]])
    builder = LookupTableBuilder()

    with pytest.raises(ConfigurationError):
        builder.build(dataset, SecondarySelection("Other", 0, [1]))
    with pytest.raises(ConfigurationError):
        builder.build(dataset, SecondarySelection("S", None, [1]))
    with pytest.raises(ConfigurationError):
        builder.build(dataset, SecondarySelection("S", 0, []))


def test_lookup_table_is_read_only() -> None:
    table = LookupTable({"k": ("v",)})

    with pytest.raises(TypeError):
        table["other"] = ("x",)
