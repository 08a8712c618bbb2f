"""
Exceptions metier pour restopos.

Ces exceptions sont levees par les services et automatiquement
converties en responses HTTP par le exception handler.

Usage:
    from restopos.core.exceptions import InsufficientStock
    raise InsufficientStock(ingredient_id=3, requested=..., available=..., location="store")

Le exception handler convertira en:
    HTTP 409: {"error": "INSUFFICIENT_STOCK", "message": "...", "details": {...}}
"""
from decimal import Decimal
from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Exception de base pour l'application.

    Toutes les exceptions metier heritent de cette classe.
    Fournit status_code HTTP et error_code pour le client.
    """
    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.__class__.message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise l'exception pour la response JSON"""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Resource Exceptions (404)
# =============================================================================

class NotFound(AppException):
    """Resource non trouvee"""
    status_code = 404
    error_code = "NOT_FOUND"
    message = "Resource not found"

    resource: str = "Resource"

    def __init__(self, resource_id: Any = None, resource: Optional[str] = None):
        resource = resource or self.__class__.resource
        self.resource_id = resource_id
        message = f"{resource} {resource_id} not found" if resource_id is not None else f"{resource} not found"
        details = {"id": resource_id} if resource_id is not None else None
        super().__init__(message=message, details=details)


class IngredientNotFound(NotFound):
    error_code = "INGREDIENT_NOT_FOUND"
    resource = "Ingredient"


class CategoryNotFound(NotFound):
    error_code = "CATEGORY_NOT_FOUND"
    resource = "Category"


class MenuItemNotFound(NotFound):
    error_code = "MENU_ITEM_NOT_FOUND"
    resource = "Menu item"


class OrderNotFound(NotFound):
    error_code = "ORDER_NOT_FOUND"
    resource = "Order"


class TableNotFound(NotFound):
    error_code = "TABLE_NOT_FOUND"
    resource = "Table"


class WaiterNotFound(NotFound):
    error_code = "WAITER_NOT_FOUND"
    resource = "Waiter"


class ExpenseNotFound(NotFound):
    error_code = "EXPENSE_NOT_FOUND"
    resource = "Expense"


# =============================================================================
# Validation Exceptions (422)
# =============================================================================

class InvalidInput(AppException):
    """Donnees d'entree invalides"""
    status_code = 422
    error_code = "INVALID_INPUT"
    message = "Invalid input"


class InvalidQuantity(InvalidInput):
    """Quantite nulle ou negative"""
    error_code = "INVALID_QUANTITY"
    message = "Quantity must be positive"


class InvalidDiscount(InvalidInput):
    """Remise negative, mal formee ou superieure au montant de la commande"""
    error_code = "INVALID_DISCOUNT"
    message = "Invalid discount"


class EmptyCart(InvalidInput):
    """Panier vide"""
    error_code = "EMPTY_CART"
    message = "Cart is empty"


# =============================================================================
# Stock / State Exceptions (409)
# =============================================================================

class InsufficientStock(AppException):
    """Stock insuffisant a l'emplacement demande"""
    status_code = 409
    error_code = "INSUFFICIENT_STOCK"
    message = "Insufficient stock"

    def __init__(
        self,
        ingredient_id: int,
        requested: Decimal,
        available: Decimal,
        location: str,
    ):
        self.ingredient_id = ingredient_id
        self.requested = requested
        self.available = available
        self.location = location
        super().__init__(
            message=(
                f"Insufficient {location} stock for ingredient {ingredient_id}: "
                f"requested {requested}, available {available}"
            ),
            details={
                "ingredient_id": ingredient_id,
                "requested": str(requested),
                "available": str(available),
                "location": location,
            },
        )


class InconsistentState(AppException):
    """Conflit de modification concurrente detecte a l'ecriture"""
    status_code = 409
    error_code = "INCONSISTENT_STATE"
    message = "Concurrent modification detected, retry the operation"


class Conflict(AppException):
    """Operation en conflit avec l'etat courant"""
    status_code = 409
    error_code = "CONFLICT"
    message = "Operation conflicts with current state"


class IngredientNameExists(Conflict):
    error_code = "INGREDIENT_NAME_EXISTS"

    def __init__(self, name: str):
        self.name = name
        super().__init__(message=f"Ingredient '{name}' already exists")


class IngredientInUse(Conflict):
    """Ingredient reference par au moins une recette"""
    error_code = "INGREDIENT_IN_USE"

    def __init__(self, ingredient_id: int, menu_item_ids: list):
        self.ingredient_id = ingredient_id
        self.menu_item_ids = menu_item_ids
        super().__init__(
            message=f"Ingredient {ingredient_id} is used by {len(menu_item_ids)} recipe(s)",
            details={"ingredient_id": ingredient_id, "menu_item_ids": menu_item_ids},
        )


class IngredientHasHistory(Conflict):
    """Ingredient present dans le journal de stock (achats, ventes...)"""
    error_code = "INGREDIENT_HAS_HISTORY"

    def __init__(self, ingredient_id: int, records: int):
        self.ingredient_id = ingredient_id
        self.records = records
        super().__init__(
            message=f"Ingredient {ingredient_id} has {records} stock ledger record(s) and cannot be deleted",
            details={"ingredient_id": ingredient_id, "records": records},
        )


class CategoryInUse(Conflict):
    error_code = "CATEGORY_IN_USE"


class TableOccupied(Conflict):
    error_code = "TABLE_OCCUPIED"

    def __init__(self, table_id: int, current_order_id: Optional[int]):
        self.table_id = table_id
        self.current_order_id = current_order_id
        super().__init__(
            message=f"Table {table_id} is occupied by order {current_order_id}",
            details={"table_id": table_id, "current_order_id": current_order_id},
        )


class InvalidOrderTransition(Conflict):
    """Transition interdite par la machine a etats des commandes"""
    error_code = "INVALID_ORDER_TRANSITION"

    def __init__(self, order_id: int, current_status: str, action: str):
        self.order_id = order_id
        self.current_status = current_status
        self.action = action
        super().__init__(
            message=f"Cannot {action} order {order_id} in status '{current_status}'",
            details={"order_id": order_id, "status": current_status, "action": action},
        )
