from decimal import Decimal

from sqlalchemy.orm import sessionmaker

from shopdesk.core.stock_rules import refresh_derived_fields
from shopdesk.database.base import Base
from shopdesk.database.engine import build_engine
from shopdesk.models import (
    Business,
    Category,
    InventoryItem,
    Product,
    Shop,
    Supplier,
    User,
    import_all_models,
)


def make_engine(url="sqlite:///:memory:"):
    import_all_models()
    engine = build_engine(url)
    Base.metadata.create_all(bind=engine)
    return engine


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def seed_shop(db, *, shop_name="Main", email="owner@example.com"):
    owner = User(email=email, username=email.split("@")[0], password_hash="x", role="shop_owner")
    db.add(owner)
    db.flush()
    business = Business(owner_id=owner.id, full_business_name="Test Traders")
    db.add(business)
    db.flush()
    shop = Shop(business_id=business.id, name=shop_name)
    db.add(shop)
    db.commit()
    return owner, business, shop


def add_product(db, shop, *, name="Rice 5kg", sku="RIC-5", category=None, selling_price="4000", purchase_price="3000", reorder_point=10):
    product = Product(
        business_id=shop.business_id,
        shop_id=shop.id,
        category_id=category.id if category is not None else None,
        name=name,
        sku=sku,
        selling_price=Decimal(selling_price),
        purchase_price=Decimal(purchase_price),
        reorder_point=reorder_point,
    )
    db.add(product)
    db.commit()
    return product


def add_item(db, shop, product, *, quantity=0, unit_cost="100", selling_price="150", reorder_point=10, supplier=None):
    item = InventoryItem(
        shop_id=shop.id,
        product_id=product.id,
        supplier_id=supplier.id if supplier is not None else None,
        quantity=quantity,
        unit_cost=Decimal(unit_cost),
        selling_price=Decimal(selling_price),
        reorder_point=reorder_point,
    )
    refresh_derived_fields(item)
    db.add(item)
    db.commit()
    return item


def add_category(db, business, name):
    category = Category(business_id=business.id, name=name)
    db.add(category)
    db.commit()
    return category


def add_supplier(db, business, name):
    supplier = Supplier(business_id=business.id, name=name)
    db.add(supplier)
    db.commit()
    return supplier
