"""
API Endpoints du catalogue: articles, recettes et categories.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from restopos.core.dependencies import get_menu_service
from restopos.schemas.menu import (
    AvailabilityUpdate,
    MenuCategoryCreate,
    MenuCategoryResponse,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    RecalculateResponse,
    RecipeUpdate,
)
from restopos.services.menu import MenuCatalogService

router = APIRouter(prefix="/menu", tags=["Menu"])


# =============================================================================
# Articles
# =============================================================================

@router.get("/items", response_model=List[MenuItemResponse], summary="Lister les articles")
def list_menu_items(
    category_id: Optional[int] = Query(None),
    available_only: bool = Query(False),
    service: MenuCatalogService = Depends(get_menu_service),
):
    return service.list_menu_items(category_id=category_id, available_only=available_only)


@router.post(
    "/items",
    response_model=MenuItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Creer un article",
)
def create_menu_item(
    data: MenuItemCreate,
    service: MenuCatalogService = Depends(get_menu_service),
):
    payload = data.model_dump()
    return service.create_menu_item(**payload)


@router.post("/items/recalculate-costs", response_model=RecalculateResponse, summary="Recalculer les couts recette")
def recalculate_costs(service: MenuCatalogService = Depends(get_menu_service)):
    return RecalculateResponse(updated=service.recalculate_costs())


@router.get("/items/{menu_item_id}", response_model=MenuItemResponse)
def get_menu_item(
    menu_item_id: int,
    service: MenuCatalogService = Depends(get_menu_service),
):
    return service.get_menu_item(menu_item_id)


@router.patch("/items/{menu_item_id}", response_model=MenuItemResponse, summary="Modifier un article")
def update_menu_item(
    menu_item_id: int,
    data: MenuItemUpdate,
    service: MenuCatalogService = Depends(get_menu_service),
):
    return service.update_menu_item(menu_item_id, data.model_dump(exclude_unset=True))


@router.put("/items/{menu_item_id}/recipe", response_model=MenuItemResponse, summary="Remplacer la recette")
def set_recipe(
    menu_item_id: int,
    data: RecipeUpdate,
    service: MenuCatalogService = Depends(get_menu_service),
):
    return service.set_recipe(menu_item_id, [line.model_dump() for line in data.recipe])


@router.put("/items/{menu_item_id}/availability", response_model=MenuItemResponse)
def set_availability(
    menu_item_id: int,
    data: AvailabilityUpdate,
    service: MenuCatalogService = Depends(get_menu_service),
):
    return service.set_availability(menu_item_id, data.is_available)


@router.delete("/items/{menu_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    menu_item_id: int,
    service: MenuCatalogService = Depends(get_menu_service),
):
    service.delete_menu_item(menu_item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Categories
# =============================================================================

@router.get("/categories", response_model=List[MenuCategoryResponse])
def list_menu_categories(service: MenuCatalogService = Depends(get_menu_service)):
    return service.list_categories()


@router.post("/categories", response_model=MenuCategoryResponse, status_code=status.HTTP_201_CREATED)
def create_menu_category(
    data: MenuCategoryCreate,
    service: MenuCatalogService = Depends(get_menu_service),
):
    return service.create_category(**data.model_dump())


@router.patch("/categories/{category_id}", response_model=MenuCategoryResponse)
def update_menu_category(
    category_id: int,
    data: MenuCategoryUpdate,
    service: MenuCatalogService = Depends(get_menu_service),
):
    return service.update_category(category_id, data.model_dump(exclude_unset=True))


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_category(
    category_id: int,
    service: MenuCatalogService = Depends(get_menu_service),
):
    service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
