# src/cookbook/domain/search.py
import locale
import unicodedata
from typing import Iterable, Sequence

from src.cookbook.domain.models import Recipe


def collation_key(text: str) -> str:
    """Accent- and case-insensitive sort key, collated with the active locale."""
    t = unicodedata.normalize("NFKD", text)
    t = "".join(ch for ch in t if not unicodedata.combining(ch))
    return locale.strxfrm(t.casefold())


def sort_by_title(recipes: Iterable[Recipe]) -> list[Recipe]:
    return sorted(recipes, key=lambda recipe: (collation_key(recipe.title), recipe.title))


def search_recipes(recipes: Sequence[Recipe], query: str) -> list[Recipe]:
    """
    Sort all recipes by title, then keep those whose title contains query
    (case-insensitive). Only titles are matched.
    """
    ordered = sort_by_title(recipes)
    if not query:
        return ordered
    needle = query.casefold()
    return [recipe for recipe in ordered if needle in recipe.title.casefold()]


def top_labels(recipes: Sequence[Recipe], limit: int = 5) -> list[str]:
    """Distinct labels in order of first appearance, at most `limit`."""
    seen: dict[str, None] = {}
    for recipe in recipes:
        for label in recipe.labels:
            seen.setdefault(label, None)
    return list(seen)[:limit]


def filter_by_label(recipes: Sequence[Recipe], label: str) -> list[Recipe]:
    return [recipe for recipe in recipes if label in recipe.labels]
