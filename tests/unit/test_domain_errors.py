from __future__ import annotations

from src.cookbook.domain.errors import (
    AuthError,
    ConfigurationError,
    ImageUploadError,
    InvalidCredentialsError,
    PageOutOfRangeError,
    PartialWriteError,
    RecipeBookError,
    RecipeNotFoundError,
    StoreError,
    UserAlreadyExistsError,
)


class TestStoreError:
    def test_includes_operation_and_reason(self) -> None:
        error = StoreError("insert steps", "Connection refused")
        assert "insert steps" in str(error)
        assert "Connection refused" in str(error)
        assert error.operation == "insert steps"
        assert error.reason == "Connection refused"


class TestRecipeNotFoundError:
    def test_includes_recipe_id(self) -> None:
        error = RecipeNotFoundError("abc-123", "update")
        assert "abc-123" in str(error)
        assert error.recipe_id == "abc-123"
        assert error.operation == "update"


class TestPartialWriteError:
    def test_includes_recipe_and_completed_steps(self) -> None:
        error = PartialWriteError("abc-123", "create", ["insert recipes"], "timeout")
        assert "abc-123" in str(error)
        assert "insert recipes" in str(error)
        assert error.recipe_id == "abc-123"
        assert error.completed == ["insert recipes"]
        assert error.operation == "create"


class TestImageUploadError:
    def test_includes_key(self) -> None:
        error = ImageUploadError("uuid-photo.jpg", "Object already exists")
        assert "uuid-photo.jpg" in str(error)
        assert error.key == "uuid-photo.jpg"
        assert error.operation == "upload_image"


class TestPageOutOfRangeError:
    def test_includes_page_info(self) -> None:
        error = PageOutOfRangeError(7, 3)
        assert "7" in str(error)
        assert error.total_pages == 3


class TestAuthErrors:
    def test_default_invalid_credentials_message(self) -> None:
        assert str(InvalidCredentialsError()) == "Invalid email or password"

    def test_user_exists_includes_email(self) -> None:
        error = UserAlreadyExistsError("cook@example.com")
        assert "cook@example.com" in str(error)


class TestConfigurationError:
    def test_includes_all_errors(self) -> None:
        errors = ["SUPABASE_URL is required", "R2_PUBLIC_URL is required"]
        error = ConfigurationError(errors)
        assert "SUPABASE_URL is required" in str(error)
        assert error.errors == errors


class TestExceptionHierarchy:
    def test_store_errors(self) -> None:
        assert issubclass(StoreError, RecipeBookError)
        assert issubclass(RecipeNotFoundError, StoreError)
        assert issubclass(PartialWriteError, StoreError)
        assert issubclass(ImageUploadError, StoreError)

    def test_other_errors(self) -> None:
        assert issubclass(AuthError, RecipeBookError)
        assert issubclass(UserAlreadyExistsError, AuthError)
        assert issubclass(InvalidCredentialsError, AuthError)
        assert issubclass(PageOutOfRangeError, RecipeBookError)
        assert issubclass(ConfigurationError, RecipeBookError)
