"""
Conversion et arrondis des valeurs decimales.

Quantites a 3 decimales, couts unitaires a 4, montants a 2.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from restopos.core.exceptions import InvalidInput, InvalidQuantity

QTY_QUANT = Decimal("0.001")
COST_QUANT = Decimal("0.0001")
MONEY_QUANT = Decimal("0.01")


def to_decimal(value: Any, field: str = "value") -> Decimal:
    """
    Convertit une valeur en Decimal (les floats passent par str).

    Raises:
        InvalidInput: Valeur non numerique ou non finie
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise InvalidInput(f"{field} is not a number: {value!r}") from exc
    if not result.is_finite():
        raise InvalidInput(f"{field} must be finite")
    return result


def positive_quantity(value: Any, field: str = "quantity") -> Decimal:
    """Quantite strictement positive, arrondie a 3 decimales."""
    quantity = to_decimal(value, field)
    if quantity <= 0:
        raise InvalidQuantity(f"{field} must be positive, got {quantity}")
    return quantize_qty(quantity)


def quantize_qty(value: Decimal) -> Decimal:
    return value.quantize(QTY_QUANT, rounding=ROUND_HALF_UP)


def quantize_cost(value: Decimal) -> Decimal:
    return value.quantize(COST_QUANT, rounding=ROUND_HALF_UP)


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)
