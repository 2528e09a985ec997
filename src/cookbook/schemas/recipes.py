# src/cookbook/schemas/recipes.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.cookbook.domain.book import BookPage
from src.cookbook.domain.models import Ingredient, Recipe, RecipeFormData, Step


class IngredientIn(BaseModel):
    name: str = Field(..., min_length=1, description="Ingredient name is required")
    amount: str = Field(..., min_length=1, description="Amount is required")
    unit: str = ""


class StepIn(BaseModel):
    description: str = Field(..., min_length=3)


class RecipeIn(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    imageUrl: str = ""
    prepTime: int = Field(..., ge=1, description="Preparation time in minutes")
    cookTime: int = Field(..., ge=1, description="Cooking time in minutes")
    servings: int = Field(..., ge=1)
    ingredients: list[IngredientIn] = Field(..., min_length=1)
    steps: list[StepIn] = Field(..., min_length=1)
    labels: list[str] = Field(default_factory=list)

    @field_validator("imageUrl")
    @classmethod
    def _image_url_empty_or_http(cls, value: str) -> str:
        value = value.strip()
        if value and not value.startswith(("http://", "https://")):
            raise ValueError("Must be a valid URL")
        return value

    def to_form(self) -> RecipeFormData:
        form = RecipeFormData(
            title=self.title,
            description=self.description,
            image_url=self.imageUrl,
            prep_time=self.prepTime,
            cook_time=self.cookTime,
            servings=self.servings,
        )
        for item in self.ingredients:
            form.add_ingredient(Ingredient(name=item.name, amount=item.amount, unit=item.unit))
        for item in self.steps:
            form.add_step(Step(description=item.description))
        for label in self.labels:
            form.add_label(label)
        return form


class IngredientResponse(BaseModel):
    id: str
    name: str
    amount: str
    unit: str = ""


class StepResponse(BaseModel):
    id: str
    description: str
    position: int


class RecipeResponse(BaseModel):
    id: str
    title: str
    description: str
    imageUrl: str = ""
    prepTime: int
    cookTime: int
    servings: int
    ingredients: list[IngredientResponse] = Field(default_factory=list)
    steps: list[StepResponse] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    userId: str

    @classmethod
    def from_domain(cls, recipe: Recipe) -> RecipeResponse:
        return cls(
            id=recipe.id,
            title=recipe.title,
            description=recipe.description,
            imageUrl=recipe.image_url,
            prepTime=recipe.prep_time,
            cookTime=recipe.cook_time,
            servings=recipe.servings,
            ingredients=[
                IngredientResponse(id=i.id, name=i.name, amount=i.amount, unit=i.unit)
                for i in recipe.ingredients
            ],
            steps=[
                StepResponse(id=s.id, description=s.description, position=s.position)
                for s in recipe.steps
            ],
            labels=list(recipe.labels),
            createdAt=recipe.created_at,
            updatedAt=recipe.updated_at,
            userId=recipe.owner_id,
        )


class ImageUploadResponse(BaseModel):
    url: str


class ContentsEntryResponse(BaseModel):
    recipeId: str
    title: str
    description: str
    imageUrl: str = ""
    page: int


class BookPageResponse(BaseModel):
    page: int
    totalPages: int
    hasPrevious: bool
    hasNext: bool
    contents: Optional[list[ContentsEntryResponse]] = None
    recipe: Optional[RecipeResponse] = None

    @classmethod
    def from_domain(cls, page: BookPage) -> BookPageResponse:
        contents = None
        if page.is_contents:
            contents = [
                ContentsEntryResponse(
                    recipeId=entry.recipe_id,
                    title=entry.title,
                    description=entry.description,
                    imageUrl=entry.image_url,
                    page=entry.page,
                )
                for entry in page.contents
            ]
        return cls(
            page=page.number,
            totalPages=page.total_pages,
            hasPrevious=page.has_previous,
            hasNext=page.has_next,
            contents=contents,
            recipe=RecipeResponse.from_domain(page.recipe) if page.recipe else None,
        )
