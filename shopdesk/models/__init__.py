import importlib

from shopdesk.models.business import Business
from shopdesk.models.category import Category
from shopdesk.models.employee import Employee
from shopdesk.models.income import Income
from shopdesk.models.inventory import InventoryItem
from shopdesk.models.ohada_code import OhadaCode
from shopdesk.models.product import Product
from shopdesk.models.sales import Sales
from shopdesk.models.security_log import SecurityLog
from shopdesk.models.shop import Shop
from shopdesk.models.stock_movement import StockMovement
from shopdesk.models.supplier import Supplier, supplier_products
from shopdesk.models.user import User


def import_all_models() -> None:
    for module_name in (
        "shopdesk.models.business",
        "shopdesk.models.category",
        "shopdesk.models.employee",
        "shopdesk.models.income",
        "shopdesk.models.inventory",
        "shopdesk.models.ohada_code",
        "shopdesk.models.product",
        "shopdesk.models.sales",
        "shopdesk.models.security_log",
        "shopdesk.models.shop",
        "shopdesk.models.stock_movement",
        "shopdesk.models.supplier",
        "shopdesk.models.user",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Business",
    "Category",
    "Employee",
    "Income",
    "InventoryItem",
    "OhadaCode",
    "Product",
    "Sales",
    "SecurityLog",
    "Shop",
    "StockMovement",
    "Supplier",
    "User",
    "import_all_models",
    "supplier_products",
]
