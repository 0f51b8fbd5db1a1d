"""Stock mutation rules for products.

Status moves automatically in two cases only: any quantity at or below
zero marks the product ``out_of_stock``, and a product that was
``out_of_stock`` goes back to ``active`` once it has stock again. A
``draft`` or ``inactive`` product is never reactivated here.
"""
from dataclasses import dataclass

from app.shopadmin.core.error_catalog import AppError, ErrorCatalog

STOCK_SET = "set"
STOCK_ADD = "add"
STOCK_SUBTRACT = "subtract"
STOCK_OPERATIONS = (STOCK_SET, STOCK_ADD, STOCK_SUBTRACT)

STATUS_ACTIVE = "active"
STATUS_OUT_OF_STOCK = "out_of_stock"


@dataclass(frozen=True)
class StockChange:
    quantity: int
    status: str


def apply_stock_operation(current_quantity: int, current_status: str, operation: str, quantity: int) -> StockChange:
    if operation == STOCK_SET:
        new_quantity = quantity
    elif operation == STOCK_ADD:
        new_quantity = current_quantity + quantity
    elif operation == STOCK_SUBTRACT:
        new_quantity = max(0, current_quantity - quantity)
    else:
        raise AppError(
            ErrorCatalog.INVALID_STOCK_OPERATION,
            details={"operation": operation, "allowed": list(STOCK_OPERATIONS)},
        )
    return StockChange(quantity=new_quantity, status=resolve_stock_status(current_status, new_quantity))


def resolve_stock_status(current_status: str, quantity: int) -> str:
    if quantity <= 0:
        return STATUS_OUT_OF_STOCK
    if current_status == STATUS_OUT_OF_STOCK:
        return STATUS_ACTIVE
    return current_status
