"""
API Endpoints ingredients et categories d'ingredients.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from restopos.core.dependencies import get_ingredient_service
from restopos.schemas.ingredient import (
    IngredientCategoryCreate,
    IngredientCategoryResponse,
    IngredientCreate,
    IngredientResponse,
    IngredientUpdate,
)
from restopos.services.ingredient import IngredientService

router = APIRouter(tags=["Ingredients"])


@router.get("/ingredients", response_model=List[IngredientResponse], summary="Lister les ingredients")
def list_ingredients(
    category_id: Optional[int] = Query(None),
    q: Optional[str] = Query(None, description="Recherche par nom"),
    service: IngredientService = Depends(get_ingredient_service),
):
    if q:
        return service.search_ingredients(q)
    return service.list_ingredients(category_id=category_id)


@router.post(
    "/ingredients",
    response_model=IngredientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Creer un ingredient",
)
def create_ingredient(
    data: IngredientCreate,
    service: IngredientService = Depends(get_ingredient_service),
):
    return service.create_ingredient(**data.model_dump())


@router.get("/ingredients/{ingredient_id}", response_model=IngredientResponse, summary="Detail d'un ingredient")
def get_ingredient(
    ingredient_id: int,
    service: IngredientService = Depends(get_ingredient_service),
):
    return service.get_ingredient(ingredient_id)


@router.patch("/ingredients/{ingredient_id}", response_model=IngredientResponse, summary="Modifier un ingredient")
def update_ingredient(
    ingredient_id: int,
    data: IngredientUpdate,
    service: IngredientService = Depends(get_ingredient_service),
):
    return service.update_ingredient(ingredient_id, data.model_dump(exclude_unset=True))


@router.delete(
    "/ingredients/{ingredient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Supprimer un ingredient",
)
def delete_ingredient(
    ingredient_id: int,
    service: IngredientService = Depends(get_ingredient_service),
):
    service.delete_ingredient(ingredient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/ingredient-categories", response_model=List[IngredientCategoryResponse])
def list_ingredient_categories(service: IngredientService = Depends(get_ingredient_service)):
    return service.list_categories()


@router.post(
    "/ingredient-categories",
    response_model=IngredientCategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_ingredient_category(
    data: IngredientCategoryCreate,
    service: IngredientService = Depends(get_ingredient_service),
):
    return service.create_category(data.name)


@router.delete("/ingredient-categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient_category(
    category_id: int,
    service: IngredientService = Depends(get_ingredient_service),
):
    service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
