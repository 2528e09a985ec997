# src/cookbook/infra/db/records.py
from typing import Optional

from pydantic import BaseModel

RECIPES_TABLE = "recipes"
INGREDIENTS_TABLE = "ingredients"
STEPS_TABLE = "steps"
LABELS_TABLE = "labels"

CHILD_TABLES = (INGREDIENTS_TABLE, STEPS_TABLE, LABELS_TABLE)


class RecipeRecord(BaseModel):
    id: str
    title: str
    description: str = ""
    image_url: str = ""
    prep_time: int
    cook_time: int
    servings: int
    user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def scalar_patch(self, updated_at: str) -> dict:
        """Columns an update may touch; id, user_id and created_at are left alone."""
        return {
            "title": self.title,
            "description": self.description,
            "image_url": self.image_url,
            "prep_time": self.prep_time,
            "cook_time": self.cook_time,
            "servings": self.servings,
            "updated_at": updated_at,
        }


class IngredientRecord(BaseModel):
    id: str
    recipe_id: str
    name: str
    amount: str
    unit: str = ""


class StepRecord(BaseModel):
    id: str
    recipe_id: str
    description: str
    order_number: int


class LabelRecord(BaseModel):
    id: str
    recipe_id: str
    name: str
