from __future__ import annotations

from datetime import datetime, timezone

from src.cookbook.domain.models import Ingredient, RecipeFormData, Step
from src.cookbook.infra.db.mapper import to_aggregate, to_rows


def _recipe_row(recipe_id: str = "r-1") -> dict:
    return {
        "id": recipe_id,
        "title": "Cold Soba",
        "description": "Chilled buckwheat noodles.",
        "image_url": "",
        "prep_time": 5,
        "cook_time": 8,
        "servings": 2,
        "user_id": "user-1",
        "created_at": "2024-05-01T12:00:00Z",
        "updated_at": "2024-05-02T12:00:00+00:00",
    }


class TestToAggregate:
    def test_none_recipe_row_returns_none(self) -> None:
        assert to_aggregate(None, [], [], []) is None

    def test_assembles_nested_recipe(self) -> None:
        recipe = to_aggregate(
            _recipe_row(),
            [{"id": "i-1", "recipe_id": "r-1", "name": "Soba", "amount": "200", "unit": "g"}],
            [{"id": "s-1", "recipe_id": "r-1", "description": "Boil", "order_number": 0}],
            [{"id": "l-1", "recipe_id": "r-1", "name": "Japanese"}],
        )

        assert recipe.id == "r-1"
        assert recipe.owner_id == "user-1"
        assert recipe.ingredients[0] == Ingredient(id="i-1", name="Soba", amount="200", unit="g")
        assert recipe.steps[0].description == "Boil"
        assert recipe.labels == ["Japanese"]
        assert recipe.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert recipe.total_time == 13

    def test_steps_sorted_by_order_number(self) -> None:
        steps = [
            {"id": "s-3", "recipe_id": "r-1", "description": "Serve", "order_number": 2},
            {"id": "s-1", "recipe_id": "r-1", "description": "Boil", "order_number": 0},
            {"id": "s-2", "recipe_id": "r-1", "description": "Rinse", "order_number": 1},
        ]

        recipe = to_aggregate(_recipe_row(), [], steps, [])

        assert [s.description for s in recipe.steps] == ["Boil", "Rinse", "Serve"]
        assert [s.position for s in recipe.steps] == [0, 1, 2]

    def test_ignores_rows_of_other_recipes(self) -> None:
        recipe = to_aggregate(
            _recipe_row(),
            [
                {"id": "i-1", "recipe_id": "r-1", "name": "Soba", "amount": "1", "unit": ""},
                {"id": "i-2", "recipe_id": "r-2", "name": "Rice", "amount": "1", "unit": ""},
            ],
            [],
            [{"id": "l-9", "recipe_id": "r-2", "name": "Other"}],
        )

        assert [i.name for i in recipe.ingredients] == ["Soba"]
        assert recipe.labels == []

    def test_ingredient_order_is_not_changed(self) -> None:
        rows = [
            {"id": "i-2", "recipe_id": "r-1", "name": "Scallion", "amount": "1", "unit": ""},
            {"id": "i-1", "recipe_id": "r-1", "name": "Dashi", "amount": "1", "unit": "cup"},
        ]

        recipe = to_aggregate(_recipe_row(), rows, [], [])

        assert [i.name for i in recipe.ingredients] == ["Scallion", "Dashi"]


def _form() -> RecipeFormData:
    return RecipeFormData(
        title="Cold Soba",
        description="Chilled buckwheat noodles.",
        prep_time=5,
        cook_time=8,
        servings=2,
        ingredients=[Ingredient(name="Soba", amount="200", unit="g", id="client-i")],
        steps=[Step(description="Boil", id="client-s"), Step(description="Rinse")],
        labels=["Japanese", "Quick"],
    )


class TestToRows:
    def test_stamps_recipe_id_on_every_child(self) -> None:
        rows = to_rows("r-1", _form(), owner_id="user-1")

        assert rows.recipe.id == "r-1"
        assert rows.recipe.user_id == "user-1"
        assert all(r.recipe_id == "r-1" for r in rows.ingredients)
        assert all(r.recipe_id == "r-1" for r in rows.steps)
        assert all(r.recipe_id == "r-1" for r in rows.labels)

    def test_step_order_number_is_index(self) -> None:
        rows = to_rows("r-1", _form())

        assert [(s.description, s.order_number) for s in rows.steps] == [("Boil", 0), ("Rinse", 1)]

    def test_form_ids_are_never_written(self) -> None:
        rows = to_rows("r-1", _form())

        assert rows.ingredients[0].id != "client-i"
        assert rows.steps[0].id != "client-s"

    def test_same_form_twice_gets_distinct_ids(self) -> None:
        first = to_rows("r-1", _form())
        second = to_rows("r-2", _form())

        assert first.ingredients[0].id != second.ingredients[0].id
        assert first.steps[0].id != second.steps[0].id

    def test_label_ids_are_always_fresh_and_unique(self) -> None:
        rows = to_rows("r-1", _form())

        assert [label.name for label in rows.labels] == ["Japanese", "Quick"]
        assert len({label.id for label in rows.labels}) == 2

    def test_duplicate_labels_written_once(self) -> None:
        form = _form()
        form.labels = ["Quick", "Quick", "Japanese"]

        rows = to_rows("r-1", form)

        assert [label.name for label in rows.labels] == ["Quick", "Japanese"]

    def test_scalar_patch_leaves_identity_columns_out(self) -> None:
        rows = to_rows("r-1", _form(), owner_id="user-1")

        patch = rows.recipe.scalar_patch(updated_at="2024-06-01T00:00:00+00:00")

        assert "id" not in patch
        assert "user_id" not in patch
        assert "created_at" not in patch
        assert patch["updated_at"] == "2024-06-01T00:00:00+00:00"
        assert patch["title"] == "Cold Soba"
