# src/cookbook/routers/recipes.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status

from src.cookbook.deps import CurrentUser, get_current_user, get_recipe_service, get_session
from src.cookbook.domain.book import RecipeBook
from src.cookbook.domain.errors import (
    ImageUploadError,
    PageOutOfRangeError,
    PartialWriteError,
    RecipeNotFoundError,
    StoreError,
)
from src.cookbook.domain.search import filter_by_label, search_recipes, top_labels
from src.cookbook.schemas.recipes import (
    BookPageResponse,
    ImageUploadResponse,
    RecipeIn,
    RecipeResponse,
)
from src.cookbook.services.recipe_service import RecipeService
from src.cookbook.services.session import SessionProvider

log = logging.getLogger("recipes")
router = APIRouter(prefix="/recipes", tags=["recipes"])

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
}

# Max image size (10MB)
MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024


def _store_failure(exc: StoreError, action: str) -> HTTPException:
    if isinstance(exc, RecipeNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    if isinstance(exc, PartialWriteError):
        log.error("recipes.%s_partial recipe=%s completed=%s", action, exc.recipe_id, exc.completed)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Recipe {exc.recipe_id} was only partially saved: {exc.reason}",
        )
    log.error("recipes.%s_fail error=%s", action, exc)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to {action} recipe")


@router.get("", response_model=list[RecipeResponse])
async def list_recipes(
    label: Optional[str] = Query(default=None, min_length=1),
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> list[RecipeResponse]:
    try:
        recipes = await service.list_recipes()
    except StoreError as exc:
        raise _store_failure(exc, "list") from exc
    if label:
        recipes = filter_by_label(recipes, label)
    return [RecipeResponse.from_domain(recipe) for recipe in recipes]


@router.get("/labels", response_model=list[str])
async def list_labels(
    limit: int = Query(default=5, ge=1, le=50),
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> list[str]:
    try:
        recipes = await service.list_recipes()
    except StoreError as exc:
        raise _store_failure(exc, "list") from exc
    return top_labels(recipes, limit=limit)


@router.get("/search", response_model=list[RecipeResponse])
async def search(
    q: str = Query(default=""),
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> list[RecipeResponse]:
    try:
        recipes = await service.list_recipes()
    except StoreError as exc:
        raise _store_failure(exc, "list") from exc
    return [RecipeResponse.from_domain(recipe) for recipe in search_recipes(recipes, q)]


@router.get("/book", response_model=BookPageResponse)
async def book_page(
    page: int = Query(default=0, ge=0),
    q: str = Query(default=""),
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> BookPageResponse:
    try:
        recipes = await service.list_recipes()
    except StoreError as exc:
        raise _store_failure(exc, "list") from exc
    try:
        current = RecipeBook(recipes, query=q).page(page)
    except PageOutOfRangeError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return BookPageResponse.from_domain(current)


@router.post("/images", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> ImageUploadResponse:
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Content type '{file.content_type}' not allowed. Allowed types: {', '.join(sorted(ALLOWED_IMAGE_TYPES))}",
        )

    data = await file.read()
    if len(data) > MAX_IMAGE_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size: {MAX_IMAGE_SIZE_BYTES // (1024*1024)}MB",
        )

    try:
        url = await service.upload_image(data, file.filename or "image", file.content_type)
    except ImageUploadError as exc:
        log.error("recipes.image_fail user=%s key=%s error=%s", user.id, exc.key, exc.reason)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to upload image",
        ) from exc
    return ImageUploadResponse(url=url)


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    try:
        recipe = await service.get_recipe(recipe_id)
    except StoreError as exc:
        raise _store_failure(exc, "load") from exc
    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return RecipeResponse.from_domain(recipe)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    body: RecipeIn,
    session: SessionProvider = Depends(get_session),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    owner_id = session.current_user_id()
    if owner_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    try:
        recipe = await service.create_recipe(body.to_form(), owner_id)
    except StoreError as exc:
        raise _store_failure(exc, "create") from exc
    log.info("recipes.created recipe=%s owner=%s", recipe.id, owner_id)
    return RecipeResponse.from_domain(recipe)


@router.put("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    body: RecipeIn,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    try:
        recipe = await service.update_recipe(recipe_id, body.to_form())
    except StoreError as exc:
        raise _store_failure(exc, "update") from exc
    return RecipeResponse.from_domain(recipe)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> Response:
    try:
        await service.delete_recipe(recipe_id)
    except StoreError as exc:
        raise _store_failure(exc, "delete") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
