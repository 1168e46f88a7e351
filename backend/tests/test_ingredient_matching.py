"""Tests for pantry/recipe ingredient matching."""

from cookout.services.planning.ingredient_matching import find_first_match, matches, normalize


def test_normalize():
    assert normalize("  Olive Oil ") == "olive oil"
    assert normalize("") == ""
    assert normalize("   ") == ""
    assert normalize(None) == ""


def test_matches_exact_and_case_insensitive():
    assert matches("Eggs", "eggs")
    assert matches(" milk", "MILK ")


def test_matches_substring_both_directions():
    assert matches("Shredded Cheddar Cheese", "cheddar")
    assert matches("flour", "all-purpose flour")


def test_matches_short_pantry_entry_over_matches():
    assert matches("Garlic salt", "salt")
    assert matches("Salted butter", "salt")


def test_matches_empty_inputs_are_false():
    assert not matches("Salt", "")
    assert not matches("", "salt")
    assert not matches("  ", "  ")
    assert not matches(None, "salt")


def test_matches_unrelated():
    assert not matches("basil", "oregano")


def test_find_first_match_uses_iteration_order():
    pantry = ["sharp cheddar", "cheddar", "milk"]
    assert find_first_match("cheddar", pantry) == "sharp cheddar"
    assert find_first_match("cheddar", list(reversed(pantry))) == "cheddar"


def test_find_first_match_none():
    assert find_first_match("saffron", ["salt", "pepper"]) is None
    assert find_first_match("saffron", []) is None
    assert find_first_match("saffron", None) is None
    assert find_first_match("", ["salt"]) is None


def test_find_first_match_non_iterable_pantry():
    assert find_first_match("salt", 5) is None
    assert find_first_match("salt", [None, 3, "sea salt"]) == "sea salt"
