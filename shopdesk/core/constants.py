STOCK_STATUSES = ("out_of_stock", "low_stock", "medium_stock", "high_stock")

DIRECTION_INBOUND = "inbound"
DIRECTION_OUTBOUND = "outbound"
DIRECTIONS = (DIRECTION_INBOUND, DIRECTION_OUTBOUND)

MOVEMENT_ADDED = "Added"
MOVEMENT_SOLD = "Sold"
MOVEMENT_RETURNED = "Returned"
MOVEMENT_ADJUSTMENT = "Adjustment"
MOVEMENT_TYPES = (MOVEMENT_ADDED, MOVEMENT_SOLD, MOVEMENT_RETURNED, MOVEMENT_ADJUSTMENT)

# Movement types that only make sense in one direction.
MOVEMENT_DIRECTIONS = {
    MOVEMENT_ADDED: DIRECTION_INBOUND,
    MOVEMENT_RETURNED: DIRECTION_INBOUND,
    MOVEMENT_SOLD: DIRECTION_OUTBOUND,
}

ROLE_ADMIN = "admin"
ROLE_SHOP_OWNER = "shop_owner"
PRIVILEGED_ROLES = (ROLE_ADMIN, ROLE_SHOP_OWNER)

OHADA_TYPES = ("income", "expense")
OHADA_STANDARD = "Standard"
OHADA_CUSTOM = "Custom"

STANDARD_INCOME_CODES = (
    ("701", "Sales of Goods", "Sales of goods for resale"),
    ("704", "Rental Income", "Rental income"),
    ("706", "Services Revenue", "Revenue from services rendered"),
    ("707", "Other Operating Income", "Miscellaneous operating income"),
    ("709", "Discounts and Rebates", "Discounts and rebates on sales"),
    ("762", "Late Payment Interest", "Interest earned on delayed payments"),
    ("764", "Investment Income", "Investment income"),
    ("766", "Foreign Exchange Gains", "Foreign exchange gains"),
    ("775", "Subsidies and Grants", "Operating grants and gains from asset sales"),
)
