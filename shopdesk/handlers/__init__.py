from shopdesk.handlers import auth, dashboard, employees, finance, inventory, products, setup, stock

__all__ = [
    "auth",
    "dashboard",
    "employees",
    "finance",
    "inventory",
    "products",
    "setup",
    "stock",
]
