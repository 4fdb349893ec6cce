from sheet_matcher.config.models import SecondarySelection
from sheet_matcher.config.rules import (
    NamedColumnsRule,
    NewColumnsRule,
    PatternRule,
    ReturnColumnRules,
)

HEADER = ["id", "name", "email", "url_home", "internal_id"]
PRIMARY_HEADER = ["id", "name"]


def test_new_columns_rule_with_exclusions() -> None:
    rules = ReturnColumnRules(include=[NewColumnsRule()], exclude=["internal_id"])

    selection = SecondarySelection.from_rules("S", 0, HEADER, PRIMARY_HEADER, rules)

    assert selection == SecondarySelection("S", 0, (2, 3))


def test_new_columns_ignore_case_and_spacing_of_primary_headers() -> None:
    rules = ReturnColumnRules(include=[NewColumnsRule()])

    assert rules.select(["ID", " Name ", "Email"], 0, ["id", "name"]) == (2,)


def test_pattern_rule_selects_matching_headers() -> None:
    rules = ReturnColumnRules(include=[PatternRule(r"url_.*")])

    selection = SecondarySelection.from_rules("S", 0, HEADER, PRIMARY_HEADER, rules)

    assert selection.return_columns == (3,)


def test_pattern_rule_matches_the_whole_header() -> None:
    assert PatternRule(r"email", ignore_case=True).selects("EMAIL", [])
    assert not PatternRule(r"email").selects("EMAIL", [])
    assert not PatternRule(r"email").selects("email_2", [])


def test_named_columns_rule() -> None:
    rules = ReturnColumnRules(include=[NamedColumnsRule(["Email", "URL_HOME"])])

    assert rules.select(HEADER, 0) == (2, 3)


def test_lookup_and_unnamed_columns_are_never_returned() -> None:
    rules = ReturnColumnRules(include=[PatternRule(r".*")])

    selection = SecondarySelection.from_rules("S", 1, HEADER + ["  "], [], rules)

    assert 1 not in selection.return_columns
    assert selection.return_columns == (0, 2, 3, 4)
