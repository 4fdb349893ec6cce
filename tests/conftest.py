import pytest

from sheet_matcher.core.dataset import Dataset


@pytest.fixture
def primary() -> Dataset:
    return Dataset(
        name="a.xlsx",
        sheets={
            "Main": [
                ["Name", "City"],
                ["Alice", "Paris"],
                ["Bob", "Rome"],
                ["Carol", "Oslo"],
            ]
        },
    )


@pytest.fixture
def ages() -> Dataset:
    return Dataset(
        name="b.xlsx",
        sheets={
            "People": [
                ["name", "Age"],
                ["alice", "30"],
                ["Bob", "40"],
            ]
        },
    )


@pytest.fixture
def contacts() -> Dataset:
    return Dataset(
        name="c.xlsx",
        sheets={
            "Contacts": [
                ["Person", "Email", "Phone"],
                ["ALICE", "a@example.com", "111"],
                ["Dave", "d@example.com", "222"],
            ]
        },
    )
