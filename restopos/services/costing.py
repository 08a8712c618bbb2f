"""
Calcul du cout des recettes et des marges.

Fonctions pures: aucune lecture en base, les ingredients sont fournis
par l'appelant.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Mapping, Protocol

logger = logging.getLogger(__name__)

COST_QUANT = Decimal("0.0001")
PERCENT_QUANT = Decimal("0.01")


class RecipeLineLike(Protocol):
    ingredient_id: int
    quantity: Decimal


class CostedIngredient(Protocol):
    cost_per_unit: Decimal


@dataclass(frozen=True)
class RecipeCost:
    """
    Cout d'une recette.

    Attributes:
        total: Somme cost_per_unit * quantite des ingredients resolus
        unresolved_ingredient_ids: Ingredients introuvables (comptes pour 0)
    """
    total: Decimal
    unresolved_ingredient_ids: List[int] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.unresolved_ingredient_ids


def recipe_cost(
    recipe: Iterable[RecipeLineLike],
    ingredients_by_id: Mapping[int, CostedIngredient],
) -> RecipeCost:
    """
    Calcule le cout d'une recette au cout moyen pondere courant.

    Args:
        recipe: Lignes {ingredient_id, quantity}
        ingredients_by_id: Ingredients connus, indexes par ID

    Returns:
        RecipeCost avec les ingredients non resolus listes
    """
    total = Decimal("0")
    unresolved: List[int] = []
    for line in recipe:
        ingredient = ingredients_by_id.get(line.ingredient_id)
        if ingredient is None:
            unresolved.append(line.ingredient_id)
            continue
        total += Decimal(ingredient.cost_per_unit) * Decimal(line.quantity)

    if unresolved:
        logger.warning(
            "Ingredients introuvables dans le calcul de recette",
            extra={"ingredient_ids": unresolved},
        )
    return RecipeCost(total=total.quantize(COST_QUANT, rounding=ROUND_HALF_UP), unresolved_ingredient_ids=unresolved)


def profit_margin(price: Decimal, cost: Decimal) -> Decimal:
    """Marge en % du prix: (prix - cout) / prix * 100, 0 si prix <= 0."""
    price = Decimal(price)
    if price <= 0:
        return Decimal("0.00")
    margin = (price - Decimal(cost)) / price * 100
    return margin.quantize(PERCENT_QUANT, rounding=ROUND_HALF_UP)
