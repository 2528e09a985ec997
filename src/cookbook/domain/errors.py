from __future__ import annotations


class RecipeBookError(Exception):
    pass


class StoreError(RecipeBookError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Store error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class RecipeNotFoundError(StoreError):
    def __init__(self, recipe_id: str, operation: str = "lookup"):
        super().__init__(operation, f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class PartialWriteError(StoreError):
    """
    A store failure after part of a multi-row create/update already committed.
    The aggregate is left inconsistent; nothing is rolled back.
    """

    def __init__(self, recipe_id: str, operation: str, completed: list[str], reason: str):
        super().__init__(operation, f"{reason} (recipe {recipe_id} partially written after: {', '.join(completed)})")
        self.recipe_id = recipe_id
        self.completed = completed


class ImageUploadError(StoreError):
    def __init__(self, key: str, reason: str = "Upload failed"):
        super().__init__("upload_image", f"{reason}: {key}")
        self.key = key


class PageOutOfRangeError(RecipeBookError):
    def __init__(self, page: int, total_pages: int):
        super().__init__(f"Page {page} out of range (book has {total_pages} pages)")
        self.page = page
        self.total_pages = total_pages


class AuthError(RecipeBookError):
    pass


class UserAlreadyExistsError(AuthError):
    def __init__(self, email: str):
        super().__init__(f"User with this email already exists: {email}")
        self.email = email


class InvalidCredentialsError(AuthError):
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class ConfigurationError(RecipeBookError):
    def __init__(self, errors: list[str]):
        super().__init__(f"Configuration errors: {', '.join(errors)}")
        self.errors = errors
