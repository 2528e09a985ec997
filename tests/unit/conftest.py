from __future__ import annotations

import copy
import os
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

import pytest

from src.cookbook.domain.errors import ImageUploadError, StoreError
from src.cookbook.domain.models import Ingredient, RecipeFormData, Step
from src.cookbook.infra.db.base import RelationalStore, Row
from src.cookbook.infra.db.records import CHILD_TABLES, RECIPES_TABLE
from src.cookbook.infra.storage.base import ObjectStore
from src.cookbook.services.recipe_service import RecipeService

# src.cookbook.main builds its app at import time
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")


class InMemoryRelationalStore(RelationalStore):
    """Relational store stub with ON DELETE CASCADE from recipes to child tables."""

    def __init__(self) -> None:
        self.tables: dict[str, list[Row]] = {RECIPES_TABLE: [], **{t: [] for t in CHILD_TABLES}}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[tuple[str, str]] = set()

    def _check(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        if (operation, table) in self.fail_on:
            raise StoreError(f"{operation} {table}", "Simulated failure")

    @staticmethod
    def _matches(row: Row, filters: Optional[dict[str, Any]]) -> bool:
        return all(row.get(column) == value for column, value in (filters or {}).items())

    def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[Row]:
        self._check("select", table)
        rows = [copy.deepcopy(row) for row in self.tables[table] if self._matches(row, filters)]
        if order_by:
            rows.sort(key=lambda row: row.get(order_by), reverse=descending)
        return rows

    def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        self._check("insert", table)
        stored = []
        for row in rows:
            record = copy.deepcopy(dict(row))
            if table == RECIPES_TABLE:
                now = datetime.now(timezone.utc).isoformat()
                record.setdefault("created_at", now)
                record.setdefault("updated_at", now)
            self.tables[table].append(record)
            stored.append(copy.deepcopy(record))
        return stored

    def update(self, table: str, filters: dict[str, Any], patch: Row) -> list[Row]:
        self._check("update", table)
        updated = []
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(patch)
                updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table: str, filters: dict[str, Any]) -> list[Row]:
        self._check("delete", table)
        deleted = [row for row in self.tables[table] if self._matches(row, filters)]
        self.tables[table] = [row for row in self.tables[table] if not self._matches(row, filters)]
        if table == RECIPES_TABLE:
            removed_ids = {row["id"] for row in deleted}
            for child in CHILD_TABLES:
                self.tables[child] = [row for row in self.tables[child] if row["recipe_id"] not in removed_ids]
        return deleted


class ObjectStoreStub(ObjectStore):
    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.uploads: list[tuple[str, str, Optional[str], bool]] = []
        self.should_fail = False

    def upload(
        self,
        bucket: str,
        object_key: str,
        data: bytes,
        content_type: Optional[str] = None,
        overwrite: bool = False,
    ) -> str:
        self.uploads.append((bucket, object_key, content_type, overwrite))
        if self.should_fail:
            raise ImageUploadError(object_key, "Simulated upload failure")
        if (bucket, object_key) in self.objects and not overwrite:
            raise ImageUploadError(object_key, "Object already exists")
        self.objects[(bucket, object_key)] = data
        return object_key

    def public_url(self, bucket: str, path: str) -> str:
        return f"https://cdn.test/storage/v1/object/public/{bucket}/{path}"


def make_form(
    title: str = "Spicy Tofu",
    ingredients: Optional[list[tuple[str, str, str]]] = None,
    steps: Optional[list[str]] = None,
    labels: Optional[list[str]] = None,
) -> RecipeFormData:
    form = RecipeFormData(
        title=title,
        description="Crispy tofu tossed in a chili garlic sauce.",
        image_url="",
        prep_time=10,
        cook_time=20,
        servings=2,
    )
    for name, amount, unit in ingredients or [("Tofu", "400", "g"), ("Chili oil", "2", "tbsp")]:
        form.add_ingredient(Ingredient(name=name, amount=amount, unit=unit))
    for description in steps or ["Press the tofu", "Fry until golden", "Toss in sauce"]:
        form.add_step(Step(description=description))
    for label in labels if labels is not None else ["Vegan", "Spicy"]:
        form.add_label(label)
    return form


@pytest.fixture
def store() -> InMemoryRelationalStore:
    return InMemoryRelationalStore()


@pytest.fixture
def images() -> ObjectStoreStub:
    return ObjectStoreStub()


@pytest.fixture
def service(store: InMemoryRelationalStore, images: ObjectStoreStub) -> RecipeService:
    return RecipeService(store=store, images=images, bucket="recipe-images")


@pytest.fixture
def form_factory():
    return make_form
