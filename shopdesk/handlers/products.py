from shopdesk.handlers.common import split_update
from shopdesk.rpc import operation, unwrap
from shopdesk.schemas.common import BusinessScopedQuery, IdPayload
from shopdesk.schemas.product import (
    CategoryCreate,
    CategoryRead,
    ProductCreate,
    ProductQuery,
    ProductRead,
    ProductsByCategoryQuery,
    ProductUpdate,
    SupplierCreate,
    SupplierRead,
)
from shopdesk.services import product_service


def _product(product) -> dict:
    return ProductRead.model_validate(product).to_payload()


@operation("inventory:product:create")
def create_product(ctx, payload):
    data = ProductCreate.model_validate(unwrap(payload, "data"))
    if data.performed_by_id is None:
        data.performed_by_id = ctx.user_id
    product = product_service.create_product(ctx.db, data)
    return {"product": _product(product), "message": "Product created successfully"}


@operation("inventory:product:get-all")
def get_all_products(ctx, payload):
    query = ProductQuery.model_validate(payload)
    products = product_service.list_products(ctx.db, shop_id=query.shop_id, shop_ids=query.shop_ids)
    return {"products": [_product(product) for product in products]}


@operation("inventory:product:get")
def get_product(ctx, payload):
    query = IdPayload.model_validate(payload)
    return {"product": _product(product_service.get_product(ctx.db, query.id))}


@operation("inventory:product:update")
def update_product(ctx, payload):
    product_id, changes = split_update(payload)
    query = IdPayload.model_validate({"id": product_id})
    product = product_service.update_product(ctx.db, query.id, ProductUpdate.model_validate(changes))
    return {"product": _product(product), "message": "Product updated successfully"}


@operation("inventory:product:delete")
def delete_product(ctx, payload):
    query = IdPayload.model_validate(payload)
    product_service.delete_product(ctx.db, query.id)
    return {"message": "Product deleted successfully"}


@operation("inventory:product:get-by-category")
def get_by_category(ctx, payload):
    query = ProductsByCategoryQuery.model_validate(payload)
    products = product_service.products_by_category(ctx.db, query.category_id, query.shop_id)
    return {"products": [_product(product) for product in products]}


@operation("inventory:category:create")
def create_category(ctx, payload):
    data = CategoryCreate.model_validate(unwrap(payload, "data"))
    category = product_service.create_category(ctx.db, data)
    return {"category": CategoryRead.model_validate(category).to_payload()}


@operation("inventory:category:get-all")
def get_all_categories(ctx, payload):
    query = BusinessScopedQuery.model_validate(payload)
    categories = product_service.list_categories(ctx.db, query.business_id)
    return {"categories": [CategoryRead.model_validate(category).to_payload() for category in categories]}


@operation("inventory:supplier:create")
def create_supplier(ctx, payload):
    data = SupplierCreate.model_validate(unwrap(payload, "data"))
    supplier = product_service.create_supplier(ctx.db, data)
    return {"supplier": SupplierRead.model_validate(supplier).to_payload()}


@operation("inventory:supplier:get-all")
def get_all_suppliers(ctx, payload):
    query = BusinessScopedQuery.model_validate(payload)
    suppliers = product_service.list_suppliers(ctx.db, query.business_id)
    return {"suppliers": [SupplierRead.model_validate(supplier).to_payload() for supplier in suppliers]}
