# src/cookbook/services/recipe_service.py
"""
Recipe persistence service.
The only component that talks to the relational and object stores on behalf
of the Recipe aggregate.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from starlette.concurrency import run_in_threadpool

from src.cookbook.domain.errors import PartialWriteError, RecipeNotFoundError, StoreError
from src.cookbook.domain.models import Recipe, RecipeFormData, new_id
from src.cookbook.infra.db.base import RelationalStore, Row
from src.cookbook.infra.db.mapper import RecipeRows, to_aggregate, to_rows
from src.cookbook.infra.db.records import (
    CHILD_TABLES,
    INGREDIENTS_TABLE,
    LABELS_TABLE,
    RECIPES_TABLE,
    STEPS_TABLE,
)
from src.cookbook.infra.storage.base import ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_BUCKET = "recipe-images"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class RecipeService:
    """
    Create/read/update/delete/list for recipes plus image upload.

    Responsibilities:
    - Keep the ingredients, steps and labels tables equal to the last write
    - Stamp the owner on creation and never change it
    - Surface every store failure to the caller; no retries, no rollback

    Store calls are blocking and run in a worker thread, one at a time.
    """

    def __init__(
        self,
        store: RelationalStore,
        images: ObjectStore,
        bucket: str = DEFAULT_IMAGE_BUCKET,
    ):
        self._store = store
        self._images = images
        self.bucket = bucket

    async def list_recipes(self) -> list[Recipe]:
        """
        All recipes, newest first.

        A failure loading any recipe's children fails the whole call.
        """
        rows = await run_in_threadpool(
            self._store.select, RECIPES_TABLE, None, "created_at", True
        )
        recipes: list[Recipe] = []
        for row in rows:
            recipes.append(await self._assemble(row))
        return recipes

    async def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """Return the recipe, or None when no row has this id."""
        rows = await run_in_threadpool(self._store.select, RECIPES_TABLE, {"id": recipe_id})
        if not rows:
            return None
        return await self._assemble(rows[0])

    async def create_recipe(self, form: RecipeFormData, owner_id: str) -> Recipe:
        """
        Insert the recipe row, then its ingredients, steps and labels, then re-read.

        Raises:
            StoreError: The recipe row could not be written (nothing stored)
            PartialWriteError: A child insert failed after the recipe row was stored
        """
        recipe_id = new_id()
        rows = to_rows(recipe_id, form, owner_id)
        now = _now_utc().isoformat()
        rows.recipe.created_at = now
        rows.recipe.updated_at = now

        await run_in_threadpool(
            self._store.insert, RECIPES_TABLE, [rows.recipe.model_dump(exclude_none=True)]
        )
        completed = ["insert recipes"]

        await self._insert_children(rows, "create", completed)

        recipe = await self._reread(recipe_id, "create")
        logger.info(
            "Created recipe: id=%s, owner=%s, ingredients=%d, steps=%d, labels=%d",
            recipe_id,
            owner_id,
            len(rows.ingredients),
            len(rows.steps),
            len(rows.labels),
        )
        return recipe

    async def update_recipe(self, recipe_id: str, form: RecipeFormData) -> Recipe:
        """
        Rewrite scalar fields, replace every child row, then re-read.

        id, owner and created_at are never touched.

        Raises:
            RecipeNotFoundError: No recipe with this id
            StoreError: The recipe row update failed (nothing changed)
            PartialWriteError: A later step failed; old and new data may be mixed
        """
        rows = to_rows(recipe_id, form)
        patch = rows.recipe.scalar_patch(updated_at=_now_utc().isoformat())

        updated = await run_in_threadpool(
            self._store.update, RECIPES_TABLE, {"id": recipe_id}, patch
        )
        if not updated:
            raise RecipeNotFoundError(recipe_id, "update")
        completed = ["update recipes"]

        for table in CHILD_TABLES:
            try:
                await run_in_threadpool(self._store.delete, table, {"recipe_id": recipe_id})
            except StoreError as error:
                raise PartialWriteError(recipe_id, "update", list(completed), error.reason) from error
            completed.append(f"delete {table}")

        await self._insert_children(rows, "update", completed)

        recipe = await self._reread(recipe_id, "update")
        logger.info("Updated recipe: id=%s", recipe_id)
        return recipe

    async def delete_recipe(self, recipe_id: str) -> None:
        """
        Delete the recipe row. Child rows go with it through the store's
        cascade; uploaded images stay in the bucket.
        """
        deleted = await run_in_threadpool(self._store.delete, RECIPES_TABLE, {"id": recipe_id})
        if not deleted:
            raise RecipeNotFoundError(recipe_id, "delete")
        logger.info("Deleted recipe: id=%s", recipe_id)

    async def upload_image(
        self,
        data: bytes,
        filename: str,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Store an image under a fresh "{uuid}-{filename}" key and return its public URL.
        The upload never overwrites an existing object.
        """
        object_key = self._images.generate_object_key(filename)
        path = await run_in_threadpool(
            self._images.upload, self.bucket, object_key, data, content_type, False
        )
        url = self._images.public_url(self.bucket, path)
        logger.info("Uploaded recipe image: key=%s", path)
        return url

    async def _assemble(self, recipe_row: Row) -> Recipe:
        recipe_id = str(recipe_row["id"])
        ingredient_rows = await run_in_threadpool(
            self._store.select, INGREDIENTS_TABLE, {"recipe_id": recipe_id}
        )
        step_rows = await run_in_threadpool(
            self._store.select, STEPS_TABLE, {"recipe_id": recipe_id}, "order_number"
        )
        label_rows = await run_in_threadpool(
            self._store.select, LABELS_TABLE, {"recipe_id": recipe_id}
        )
        return to_aggregate(recipe_row, ingredient_rows, step_rows, label_rows)

    async def _insert_children(self, rows: RecipeRows, operation: str, completed: list[str]) -> None:
        recipe_id = rows.recipe.id
        batches = (
            (INGREDIENTS_TABLE, rows.ingredients),
            (STEPS_TABLE, rows.steps),
            (LABELS_TABLE, rows.labels),
        )
        for table, records in batches:
            if not records:
                continue
            payload = [record.model_dump() for record in records]
            try:
                await run_in_threadpool(self._store.insert, table, payload)
            except StoreError as error:
                logger.error(
                    "Partial write: recipe=%s, operation=%s, failed=insert %s, completed=%s",
                    recipe_id,
                    operation,
                    table,
                    completed,
                )
                raise PartialWriteError(recipe_id, operation, list(completed), error.reason) from error
            completed.append(f"insert {table}")

    async def _reread(self, recipe_id: str, operation: str) -> Recipe:
        recipe = await self.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id, operation)
        return recipe
