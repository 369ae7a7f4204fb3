from shopdesk.handlers.common import optional_scope, split_update
from shopdesk.rpc import operation, unwrap
from shopdesk.schemas.common import IdPayload
from shopdesk.schemas.inventory import InventoryByShopQuery, InventoryCreate
from shopdesk.services import export_service, inventory_service


@operation("inventory:create")
def create(ctx, payload):
    data = InventoryCreate.model_validate(unwrap(payload, "data"))
    if data.performed_by_id is None:
        data.performed_by_id = ctx.user_id
    item = inventory_service.create_item(ctx.db, data)
    return {"item": inventory_service.read_item(ctx.db, item).to_payload()}


@operation("inventory:get")
def get(ctx, payload):
    query = IdPayload.model_validate(payload)
    item = inventory_service.get_item(ctx.db, query.id)
    return {"item": inventory_service.read_item(ctx.db, item).to_payload()}


@operation("inventory:update")
def update(ctx, payload):
    item_id, changes = split_update(payload)
    query = IdPayload.model_validate({"id": item_id})
    item = inventory_service.update_item(ctx.db, query.id, changes)
    return {"item": inventory_service.read_item(ctx.db, item).to_payload()}


@operation("inventory:get-by-shop")
def get_by_shop(ctx, payload):
    query = InventoryByShopQuery.model_validate(payload)
    is_admin = query.is_admin or (ctx.auth is not None and ctx.auth.is_admin)
    items, pagination = inventory_service.list_by_shop(
        ctx.db,
        shop_id=query.shop_id,
        is_admin=is_admin,
        page=query.pagination.page,
        limit=query.pagination.limit,
    )
    return {"data": {"items": [item.to_payload() for item in items], "pagination": pagination}}


@operation("inventory:delete")
def delete(ctx, payload):
    query = IdPayload.model_validate(payload)
    inventory_service.delete_item(ctx.db, query.id)
    return {"message": "Inventory item deleted"}


@operation("inventory:export")
def export(ctx, payload):
    path = export_service.export_inventory(ctx.db, shop_ids=optional_scope(ctx.db, payload))
    return {"path": str(path)}
