import logging
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from shopdesk.core.errors import Conflict, NotFound, ScopeRequired, ValidationError
from shopdesk.core.money import to_decimal
from shopdesk.database.transaction import atomic
from shopdesk.models.business import Business
from shopdesk.models.category import Category
from shopdesk.models.inventory import InventoryItem
from shopdesk.models.product import Product
from shopdesk.models.shop import Shop
from shopdesk.models.supplier import Supplier
from shopdesk.schemas.product import CategoryCreate, ProductCreate, ProductUpdate, SupplierCreate
from shopdesk.services.inventory_service import build_item

logger = logging.getLogger(__name__)


def _with_relations(stmt):
    return stmt.options(selectinload(Product.category), selectinload(Product.suppliers))


def get_product(db: Session, product_id: int) -> Product:
    product = db.execute(_with_relations(select(Product)).where(Product.id == product_id)).scalars().first()
    if product is None:
        raise NotFound("Product {} not found".format(product_id))
    return product


def _ensure_unique_sku(db: Session, shop_id: int, sku: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(Product.id).where(Product.shop_id == shop_id, func.lower(Product.sku) == sku.strip().lower())
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    if db.execute(stmt).first() is not None:
        raise Conflict("SKU {} already exists in shop {}".format(sku, shop_id))


def _load_suppliers(db: Session, supplier_ids) -> List[Supplier]:
    if not supplier_ids:
        return []
    suppliers = db.execute(select(Supplier).where(Supplier.id.in_(supplier_ids))).scalars().all()
    missing = set(supplier_ids) - {supplier.id for supplier in suppliers}
    if missing:
        raise NotFound("Supplier(s) not found: {}".format(", ".join(str(value) for value in sorted(missing))))
    return list(suppliers)


def _check_category(db: Session, category_id: Optional[int]) -> None:
    if category_id is not None and db.get(Category, category_id) is None:
        raise NotFound("Category {} not found".format(category_id))


def create_product(db: Session, payload: ProductCreate) -> Product:
    """Create a product; a quantity also opens its inventory item with an Added movement."""
    shop = db.get(Shop, payload.shop_id)
    if shop is None:
        raise NotFound("Shop {} not found".format(payload.shop_id))
    if shop.business_id != payload.business_id:
        raise ValidationError("Shop {} does not belong to business {}".format(shop.id, payload.business_id))
    _check_category(db, payload.category_id)
    _ensure_unique_sku(db, payload.shop_id, payload.sku)
    suppliers = _load_suppliers(db, payload.suppliers)

    product = Product(
        business_id=payload.business_id,
        shop_id=payload.shop_id,
        category_id=payload.category_id,
        name=payload.name.strip(),
        sku=payload.sku.strip(),
        description=payload.description,
        unit_type=payload.unit_type,
        featured_image=payload.featured_image,
        selling_price=to_decimal(payload.selling_price),
        purchase_price=to_decimal(payload.purchase_price),
        suppliers=suppliers,
    )
    if payload.reorder_point is not None:
        product.reorder_point = payload.reorder_point

    try:
        with atomic(db):
            db.add(product)
            db.flush()
            if payload.quantity is not None:
                build_item(
                    db,
                    shop_id=payload.shop_id,
                    product=product,
                    quantity=payload.quantity,
                    supplier_id=suppliers[0].id if suppliers else None,
                    performed_by_id=payload.performed_by_id,
                )
    except IntegrityError as exc:
        raise Conflict("SKU {} already exists in shop {}".format(payload.sku, payload.shop_id)) from exc

    logger.info("Created product %s (%s).", product.id, product.sku)
    return get_product(db, product.id)


def list_products(db: Session, *, shop_id: Optional[int] = None, shop_ids=None) -> List[Product]:
    if shop_ids:
        condition = Product.shop_id.in_(shop_ids)
    elif shop_id is not None:
        condition = Product.shop_id == shop_id
    else:
        raise ScopeRequired("No valid shop identifier provided")
    return list(
        db.execute(
            _with_relations(select(Product))
            .where(condition)
            .order_by(Product.created_at.desc(), Product.id.desc())
        )
        .scalars()
        .all()
    )


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> Product:
    product = get_product(db, product_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("sku"):
        _ensure_unique_sku(db, product.shop_id, changes["sku"], exclude_id=product.id)
    if "category_id" in changes:
        _check_category(db, changes["category_id"])
    supplier_ids = changes.pop("suppliers", None)
    suppliers = _load_suppliers(db, supplier_ids) if supplier_ids is not None else None

    with atomic(db):
        for name, value in changes.items():
            if value is None and name != "category_id":
                continue
            if name in ("selling_price", "purchase_price"):
                value = to_decimal(value)
            setattr(product, name, value)
        if suppliers is not None:
            product.suppliers = suppliers
    return get_product(db, product_id)


def delete_product(db: Session, product_id: int) -> None:
    """Delete a product with its inventory items; stock movements stay in the ledger."""
    product = get_product(db, product_id)
    with atomic(db):
        db.execute(delete(InventoryItem).where(InventoryItem.product_id == product.id))
        db.delete(product)
    logger.info("Deleted product %s.", product_id)


def products_by_category(db: Session, category_id: int, shop_id: int) -> List[Product]:
    return list(
        db.execute(
            _with_relations(select(Product))
            .where(Product.category_id == category_id, Product.shop_id == shop_id)
            .order_by(Product.created_at.desc(), Product.id.desc())
        )
        .scalars()
        .all()
    )


def _require_business(db: Session, business_id: int) -> None:
    if db.get(Business, business_id) is None:
        raise NotFound("Business {} not found".format(business_id))


def create_category(db: Session, payload: CategoryCreate) -> Category:
    _require_business(db, payload.business_id)
    name = payload.name.strip()
    exists = db.execute(
        select(Category.id).where(
            Category.business_id == payload.business_id,
            func.lower(Category.name) == name.lower(),
        )
    ).first()
    if exists is not None:
        raise Conflict("Category '{}' already exists".format(name))
    category = Category(business_id=payload.business_id, name=name, description=payload.description)
    with atomic(db):
        db.add(category)
    return category


def list_categories(db: Session, business_id: int) -> List[Category]:
    return list(
        db.execute(select(Category).where(Category.business_id == business_id).order_by(Category.name))
        .scalars()
        .all()
    )


def create_supplier(db: Session, payload: SupplierCreate) -> Supplier:
    _require_business(db, payload.business_id)
    name = payload.name.strip()
    exists = db.execute(
        select(Supplier.id).where(
            Supplier.business_id == payload.business_id,
            func.lower(Supplier.name) == name.lower(),
        )
    ).first()
    if exists is not None:
        raise Conflict("Supplier '{}' already exists".format(name))
    supplier = Supplier(
        business_id=payload.business_id,
        name=name,
        contact_email=payload.contact_email,
        phone=payload.phone,
    )
    with atomic(db):
        db.add(supplier)
    return supplier


def list_suppliers(db: Session, business_id: int) -> List[Supplier]:
    return list(
        db.execute(select(Supplier).where(Supplier.business_id == business_id).order_by(Supplier.name))
        .scalars()
        .all()
    )
