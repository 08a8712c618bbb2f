"""
Router principal API v1 pour restopos

Endpoints disponibles:
- /ingredients, /ingredient-categories: Ingredients
- /stock: Achats, transferts, retraits, ventes directes, alertes
- /menu: Articles, recettes, categories
- /tables, /waiters: Salle
- /orders: Commandes
- /reports: Rapports par journee commerciale
- /expenses: Depenses journalieres
"""
from fastapi import APIRouter

from restopos.api.v1.endpoints import (
    ingredients,
    stock,
    menu,
    tables,
    orders,
    reports,
    expenses,
)


api_router = APIRouter()

api_router.include_router(ingredients.router)
api_router.include_router(stock.router)
api_router.include_router(menu.router)
api_router.include_router(tables.router)
api_router.include_router(orders.router)
api_router.include_router(reports.router)
api_router.include_router(expenses.router)
