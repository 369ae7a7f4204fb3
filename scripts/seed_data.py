import argparse
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import delete, select

from shopdesk.core.dates import utcnow
from shopdesk.core.logging import setup_logging
from shopdesk.database import SessionLocal, init_db
from shopdesk.models import (
    Business,
    Category,
    Employee,
    Income,
    InventoryItem,
    Product,
    Sales,
    SecurityLog,
    Shop,
    StockMovement,
    Supplier,
    User,
    supplier_products,
)
from shopdesk.schemas.auth import BusinessSetup, RegisterRequest, SetupAccountRequest, ShopSetup
from shopdesk.schemas.product import CategoryCreate, ProductCreate, SupplierCreate
from shopdesk.services import auth_service, product_service, setup_service, stock_service


def parse_args():
    parser = argparse.ArgumentParser(description="Seed a demo business with stock and sales.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def _reset(db):
    for table in (
        supplier_products,
        StockMovement.__table__,
        InventoryItem.__table__,
        Product.__table__,
        Category.__table__,
        Supplier.__table__,
        Sales.__table__,
        Income.__table__,
        Employee.__table__,
        Shop.__table__,
        Business.__table__,
        SecurityLog.__table__,
        User.__table__,
    ):
        db.execute(delete(table))
    db.commit()


def main():
    setup_logging()
    args = parse_args()
    init_db()

    db = SessionLocal()
    try:
        if args.reset:
            _reset(db)

        has_user = db.execute(select(User.id).limit(1)).first()
        if has_user:
            print("Seed skipped: users already exist.")
            return

        owner = auth_service.register(
            db,
            RegisterRequest(email="owner@example.com", username="owner", password="changeme"),
        )
        business = setup_service.create_account(
            db,
            SetupAccountRequest(
                user_id=owner.id,
                business=BusinessSetup(full_business_name="Douala Market Goods", business_type="retail"),
                shops=[
                    ShopSetup(name="Akwa", city="Douala", country="Cameroon"),
                    ShopSetup(name="Bonapriso", city="Douala", country="Cameroon"),
                ],
            ),
        )
        first_shop = business.shops[0]

        drinks = product_service.create_category(db, CategoryCreate(business_id=business.id, name="Drinks"))
        grocery = product_service.create_category(db, CategoryCreate(business_id=business.id, name="Grocery"))
        supplier = product_service.create_supplier(
            db, SupplierCreate(business_id=business.id, name="Sabc Distribution")
        )

        catalogue = [
            ("Mineral Water 1.5L", "WAT-150", drinks.id, "350", "250", 120),
            ("Palm Oil 1L", "OIL-100", grocery.id, "1500", "1100", 40),
            ("Rice 5kg", "RIC-500", grocery.id, "4000", "3200", 8),
        ]
        for name, sku, category_id, selling, purchase, quantity in catalogue:
            product_service.create_product(
                db,
                ProductCreate(
                    business_id=business.id,
                    shop_id=first_shop.id,
                    name=name,
                    sku=sku,
                    category_id=category_id,
                    selling_price=Decimal(selling),
                    purchase_price=Decimal(purchase),
                    suppliers=[supplier.id],
                    quantity=quantity,
                    performed_by_id=owner.id,
                ),
            )

        water = db.execute(
            select(InventoryItem).join(Product).where(Product.sku == "WAT-150")
        ).scalars().first()
        stock_service.adjust_stock(db, water.id, -12, reason="Counter sales", performed_by_id=owner.id, movement_type="Sold")

        now = utcnow()
        db.add_all(
            [
                Sales(shop_id=first_shop.id, total=Decimal("4200"), net_amount=Decimal("4000"), created_at=now - timedelta(days=offset))
                for offset in range(5)
            ]
        )
        db.commit()
        print("Seed data created.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
