# src/cookbook/domain/book.py
"""
Book presentation of the recipe collection: page 0 is the table of contents,
page N is the N-th recipe in title order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from src.cookbook.domain.errors import PageOutOfRangeError
from src.cookbook.domain.models import Recipe
from src.cookbook.domain.search import search_recipes

CONTENTS_PAGE = 0


@dataclass
class ContentsEntry:
    recipe_id: str
    title: str
    description: str
    image_url: str
    page: int


@dataclass
class BookPage:
    number: int
    total_pages: int
    contents: list[ContentsEntry] = field(default_factory=list)
    recipe: Optional[Recipe] = None

    @property
    def is_contents(self) -> bool:
        return self.number == CONTENTS_PAGE

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages - 1


class RecipeBook:
    def __init__(self, recipes: Sequence[Recipe], query: str = ""):
        self.recipes = search_recipes(recipes, query)
        self.query = query

    @property
    def total_pages(self) -> int:
        return len(self.recipes) + 1

    def contents(self) -> list[ContentsEntry]:
        return [
            ContentsEntry(
                recipe_id=recipe.id,
                title=recipe.title,
                description=recipe.description,
                image_url=recipe.image_url,
                page=index + 1,
            )
            for index, recipe in enumerate(self.recipes)
        ]

    def page(self, number: int) -> BookPage:
        if number < 0 or number >= self.total_pages:
            raise PageOutOfRangeError(number, self.total_pages)
        if number == CONTENTS_PAGE:
            return BookPage(number=number, total_pages=self.total_pages, contents=self.contents())
        return BookPage(number=number, total_pages=self.total_pages, recipe=self.recipes[number - 1])

    def page_for(self, recipe_id: str) -> Optional[int]:
        for index, recipe in enumerate(self.recipes):
            if recipe.id == recipe_id:
                return index + 1
        return None
