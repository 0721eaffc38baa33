import pytest

from fantasycricket.config import CONTEST_STATUSES, PLAYER_CATEGORIES, get_rules, iter_rules


def test_get_rules_defaults_to_classic():
    rules = get_rules()
    assert rules.name == "CLASSIC"
    assert rules.credit_cap == 1000
    assert rules.captain_multiplier == 2.0
    assert rules.vice_captain_multiplier == 1.5


def test_get_rules_is_case_insensitive():
    assert get_rules(" low_budget ").credit_cap == 800


def test_get_rules_missing_raises():
    with pytest.raises(KeyError):
        get_rules("T10")


def test_every_format_shares_categories_and_statuses():
    for rules in iter_rules():
        assert rules.categories == PLAYER_CATEGORIES
        assert rules.contest_statuses == CONTEST_STATUSES
