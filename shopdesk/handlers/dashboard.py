from shopdesk.rpc import operation
from shopdesk.schemas.dashboard import DashboardQuery
from shopdesk.services import dashboard_service


def _scope(ctx, payload):
    query = DashboardQuery.model_validate(payload)
    shop_ids = dashboard_service.resolve_scope(ctx.db, business_id=query.business_id, shop_id=query.shop_id)
    return query, shop_ids


@operation("dashboard:inventory:get")
def inventory(ctx, payload):
    query, shop_ids = _scope(ctx, payload)
    data = dashboard_service.inventory_dashboard(
        ctx.db, shop_ids, view=query.view, start=query.start, end=query.end
    )
    return {"data": data}


@operation("dashboard:inventory:trends")
def inventory_trends(ctx, payload):
    query, shop_ids = _scope(ctx, payload)
    points = dashboard_service.inventory_trends(
        ctx.db, shop_ids, view=query.view, start=query.start, end=query.end
    )
    return {"data": [point.to_payload() for point in points]}


@operation("dashboard:sales:get")
def sales(ctx, payload):
    query, shop_ids = _scope(ctx, payload)
    data = dashboard_service.sales_dashboard(
        ctx.db, shop_ids, view=query.view, start=query.start, end=query.end
    )
    return {"data": data}


@operation("dashboard:finance:get")
def finance(ctx, payload):
    query, shop_ids = _scope(ctx, payload)
    data = dashboard_service.finance_dashboard(
        ctx.db, shop_ids, view=query.view, start=query.start, end=query.end
    )
    return {"data": data}


@operation("dashboard:categories:top")
def top_categories(ctx, payload):
    query, shop_ids = _scope(ctx, payload)
    records = dashboard_service.top_categories(
        ctx.db, shop_ids, view=query.view, start=query.start, end=query.end, limit=query.limit
    )
    return {"data": [record.to_payload() for record in records]}


@operation("dashboard:products:top")
def top_products(ctx, payload):
    query, shop_ids = _scope(ctx, payload)
    records = dashboard_service.top_products(ctx.db, shop_ids, limit=query.limit)
    return {"data": [record.to_payload() for record in records]}


@operation("dashboard:suppliers:top")
def top_suppliers(ctx, payload):
    query, shop_ids = _scope(ctx, payload)
    records = dashboard_service.top_suppliers(ctx.db, shop_ids, limit=query.limit)
    return {"data": [record.to_payload() for record in records]}
