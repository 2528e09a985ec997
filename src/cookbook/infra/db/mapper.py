# src/cookbook/infra/db/mapper.py
"""
Conversion between the four flat row-sets and the nested Recipe aggregate.
Pure functions: nothing here talks to the store.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from src.cookbook.domain.models import Ingredient, Recipe, RecipeFormData, Step, new_id
from src.cookbook.infra.db.records import IngredientRecord, LabelRecord, RecipeRecord, StepRecord

Row = Mapping[str, Any]


@dataclass
class RecipeRows:
    recipe: RecipeRecord
    ingredients: list[IngredientRecord] = field(default_factory=list)
    steps: list[StepRecord] = field(default_factory=list)
    labels: list[LabelRecord] = field(default_factory=list)


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _safe_int(value: object, default: int = 0) -> int:
    return int(value) if value else default


def _safe_str(value: object) -> str:
    return str(value) if value is not None else ""


def to_aggregate(
    recipe_row: Optional[Row],
    ingredient_rows: Sequence[Row],
    step_rows: Sequence[Row],
    label_rows: Sequence[Row],
) -> Optional[Recipe]:
    """
    Assemble a Recipe from its rows.

    Children are joined on recipe_id; steps are ordered by order_number.
    Returns None when no recipe row is given.
    """
    if recipe_row is None:
        return None

    recipe_id = str(recipe_row["id"])

    def owned(rows: Sequence[Row]) -> list[Row]:
        return [row for row in rows if str(row.get("recipe_id")) == recipe_id]

    ingredients = [
        Ingredient(
            id=str(row["id"]),
            name=_safe_str(row.get("name")),
            amount=_safe_str(row.get("amount")),
            unit=_safe_str(row.get("unit")),
        )
        for row in owned(ingredient_rows)
    ]

    ordered_steps = sorted(owned(step_rows), key=lambda row: _safe_int(row.get("order_number")))
    steps = [
        Step(
            id=str(row["id"]),
            description=_safe_str(row.get("description")),
            position=_safe_int(row.get("order_number")),
        )
        for row in ordered_steps
    ]

    labels = [_safe_str(row.get("name")) for row in owned(label_rows)]

    return Recipe(
        id=recipe_id,
        title=_safe_str(recipe_row.get("title")),
        description=_safe_str(recipe_row.get("description")),
        image_url=_safe_str(recipe_row.get("image_url")),
        prep_time=_safe_int(recipe_row.get("prep_time")),
        cook_time=_safe_int(recipe_row.get("cook_time")),
        servings=_safe_int(recipe_row.get("servings")),
        owner_id=_safe_str(recipe_row.get("user_id")),
        ingredients=ingredients,
        steps=steps,
        labels=labels,
        created_at=_parse_datetime(recipe_row.get("created_at")),
        updated_at=_parse_datetime(recipe_row.get("updated_at")),
    )


def to_rows(
    recipe_id: str,
    form: RecipeFormData,
    owner_id: Optional[str] = None,
) -> RecipeRows:
    """
    Decompose form data into the rows written for one recipe.

    Step order_number is the step's index in the form. Every child row gets
    a fresh id; ids carried by the form are client bookkeeping only.
    """
    recipe = RecipeRecord(
        id=recipe_id,
        title=form.title,
        description=form.description,
        image_url=form.image_url,
        prep_time=form.prep_time,
        cook_time=form.cook_time,
        servings=form.servings,
        user_id=owner_id,
    )

    ingredients = [
        IngredientRecord(
            id=new_id(),
            recipe_id=recipe_id,
            name=item.name,
            amount=item.amount,
            unit=item.unit,
        )
        for item in form.ingredients
    ]

    steps = [
        StepRecord(
            id=new_id(),
            recipe_id=recipe_id,
            description=step.description,
            order_number=index,
        )
        for index, step in enumerate(form.steps)
    ]

    labels = [LabelRecord(id=new_id(), recipe_id=recipe_id, name=label) for label in dict.fromkeys(form.labels)]

    return RecipeRows(recipe=recipe, ingredients=ingredients, steps=steps, labels=labels)
