# src/cookbook/domain/models.py
"""
Domain models for the recipe book.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4


def new_id() -> str:
    return str(uuid4())


@dataclass
class Ingredient:
    """A single ingredient line. Amount is free text ("2", "a pinch")."""
    name: str
    amount: str
    unit: str = ""
    id: str = field(default_factory=new_id)


@dataclass
class Step:
    """One instruction of a recipe; position is its index in the sequence."""
    description: str
    id: str = field(default_factory=new_id)
    position: int = 0


@dataclass
class Recipe:
    """
    The recipe aggregate, assembled from the recipe row and its
    ingredient, step and label rows.
    """
    id: str
    title: str
    description: str
    image_url: str
    prep_time: int
    cook_time: int
    servings: int
    owner_id: str

    ingredients: list[Ingredient] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def total_time(self) -> int:
        return self.prep_time + self.cook_time


@dataclass
class RecipeFormData:
    """
    Recipe as authored in the form: everything but id, owner and timestamps.

    Ingredient and step ids here are client-side bookkeeping only.
    """
    title: str
    description: str = ""
    image_url: str = ""
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 0
    ingredients: list[Ingredient] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> RecipeFormData:
        """Populate a form from an existing recipe (edit page)."""
        return cls(
            title=recipe.title,
            description=recipe.description,
            image_url=recipe.image_url,
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            servings=recipe.servings,
            ingredients=[Ingredient(name=i.name, amount=i.amount, unit=i.unit, id=i.id) for i in recipe.ingredients],
            steps=[Step(description=s.description, id=s.id) for s in recipe.steps],
            labels=list(recipe.labels),
        )

    def add_ingredient(self, ingredient: Optional[Ingredient] = None, index: Optional[int] = None) -> Ingredient:
        item = ingredient or Ingredient(name="", amount="")
        if index is None:
            self.ingredients.append(item)
        else:
            self.ingredients.insert(index, item)
        return item

    def remove_ingredient(self, index: int) -> Ingredient:
        return self.ingredients.pop(index)

    def add_step(self, step: Optional[Step] = None, index: Optional[int] = None) -> Step:
        item = step or Step(description="")
        if index is None:
            self.steps.append(item)
        else:
            self.steps.insert(index, item)
        return item

    def remove_step(self, index: int) -> Step:
        return self.steps.pop(index)

    def move_step(self, source: int, target: int) -> None:
        step = self.steps.pop(source)
        self.steps.insert(target, step)

    def add_label(self, name: str) -> bool:
        """Add a label; blank and duplicate names are ignored."""
        label = name.strip()
        if not label or label in self.labels:
            return False
        self.labels.append(label)
        return True

    def remove_label(self, name: str) -> None:
        self.labels = [label for label in self.labels if label != name]


@dataclass
class User:
    """Minimal user identity handed out by the session layer."""
    id: str
    email: str
    name: Optional[str] = None
