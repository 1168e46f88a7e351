"""
Lightweight ingredient matching between recipe slots and pantry contents.

Normalization is case/whitespace only; a match is exact equality or a
substring in either direction. Short pantry entries ("salt") therefore match
many recipe ingredients; over-matching is preferred to sending people shopping.
"""

from collections.abc import Iterable as IterableABC
from typing import Iterable, Optional


def normalize(name: Optional[str]) -> str:
    if not isinstance(name, str):
        return ""
    return name.strip().lower()


def matches(recipe_ingredient: Optional[str], pantry_ingredient: Optional[str]) -> bool:
    recipe_norm = normalize(recipe_ingredient)
    pantry_norm = normalize(pantry_ingredient)
    if not recipe_norm or not pantry_norm:
        return False
    if recipe_norm == pantry_norm:
        return True
    return recipe_norm in pantry_norm or pantry_norm in recipe_norm


def find_first_match(
    recipe_ingredient: Optional[str], pantry_ingredients: Optional[Iterable[str]]
) -> Optional[str]:
    """
    Return the first pantry entry (in iteration order) matching the recipe ingredient.
    Only used for explanation text, but callers pass an ordered collection so it is reproducible.
    """
    if not isinstance(pantry_ingredients, IterableABC):
        return None
    for pantry_ingredient in pantry_ingredients:
        if matches(recipe_ingredient, pantry_ingredient):
            return pantry_ingredient
    return None
