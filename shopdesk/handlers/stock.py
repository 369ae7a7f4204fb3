from typing import Optional

from shopdesk.handlers.common import ScopeQuery, optional_scope
from shopdesk.rpc import operation
from shopdesk.schemas.inventory import (
    InventoryItemRead,
    PhysicalCountCreate,
    StockMovementCreate,
    StockMovementQuery,
    StockMovementRead,
)
from shopdesk.services import export_service, stock_service


class MovementExportQuery(ScopeQuery):
    inventory_id: Optional[int] = None


def _adjustment_payload(result) -> dict:
    return {
        "movement": StockMovementRead.model_validate(result.movement).to_payload(),
        "item": InventoryItemRead.model_validate(result.item).to_payload(),
    }


@operation("stock-movement:get-all")
def get_all(ctx, payload):
    query = StockMovementQuery.model_validate(payload)
    movements, total, pages = stock_service.list_movements(
        ctx.db,
        query.inventory_id,
        start=query.start_date,
        end=query.end_date,
        product_id=query.product_id,
        page=query.page,
        limit=query.limit,
    )
    return {
        "movements": [StockMovementRead.model_validate(row).to_payload() for row in movements],
        "pages": pages,
        "total": total,
    }


@operation("stock-movement:create")
def create(ctx, payload):
    data = StockMovementCreate.model_validate(payload)
    result = stock_service.adjust_stock(
        ctx.db,
        data.inventory_id,
        data.quantity,
        reason=data.reason,
        performed_by_id=data.performed_by_id if data.performed_by_id is not None else ctx.user_id,
        movement_type=data.movement_type,
        cost_per_unit=data.cost_per_unit,
    )
    return _adjustment_payload(result)


@operation("stock-movement:create-adjustment")
def create_adjustment(ctx, payload):
    data = PhysicalCountCreate.model_validate(payload)
    result = stock_service.record_physical_count(
        ctx.db,
        data.inventory_id,
        data.physical_count,
        system_count=data.system_count,
        product_id=data.product_id,
        reason=data.reason,
        performed_by_id=data.performed_by_id if data.performed_by_id is not None else ctx.user_id,
    )
    return _adjustment_payload(result)


@operation("stock-movement:export")
def export(ctx, payload):
    query = MovementExportQuery.model_validate(payload)
    path = export_service.export_movements(
        ctx.db,
        shop_ids=optional_scope(ctx.db, payload),
        inventory_id=query.inventory_id,
    )
    return {"path": str(path)}
