"""Spreadsheet exports of inventory, stock movements and incomes."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session

from shopdesk.config import get_settings
from shopdesk.core.dates import utcnow
from shopdesk.core.money import to_decimal
from shopdesk.services.finance_service import list_incomes
from shopdesk.services.inventory_service import items_for_export
from shopdesk.services.stock_service import movements_for_export

logger = logging.getLogger(__name__)

INVENTORY_COLUMNS = (
    "ID", "Shop", "Product", "SKU", "Quantity", "Unit Cost",
    "Selling Price", "Total Value", "Reorder Point", "Status",
)
MOVEMENT_COLUMNS = (
    "ID", "Date", "Inventory", "Product", "Direction", "Type", "Quantity",
    "Cost / Unit", "Total Cost", "System Count", "Physical Count", "Reason", "Performed By",
)
INCOME_COLUMNS = ("ID", "Date", "Description", "OHADA Code", "Payment Method", "Amount", "Shop")


def _export_path(prefix: str, directory: Optional[str] = None) -> Path:
    target_dir = Path(directory or get_settings().EXPORT_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)
    stamp = utcnow().strftime("%Y%m%d_%H%M%S_%f")
    return target_dir / "{}_{}.xlsx".format(prefix, stamp)


def _cell_value(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(microsecond=0)
    return value


def write_workbook(path: Path, title: str, columns: Sequence[str], rows) -> Path:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = title
    worksheet.append(list(columns))
    for cell in worksheet[1]:
        cell.font = Font(bold=True)
    count = 0
    for row in rows:
        worksheet.append([_cell_value(value) for value in row])
        count += 1
    for index, column in enumerate(columns, start=1):
        worksheet.column_dimensions[get_column_letter(index)].width = max(12, len(column) + 4)
    worksheet.freeze_panes = "A2"
    workbook.save(path)
    logger.info("Exported %d %s row(s) to %s.", count, title.lower(), path)
    return path


def export_inventory(db: Session, *, shop_ids=None, directory=None) -> Path:
    rows = (
        (
            item.id,
            item.shop_id,
            product.name,
            product.sku,
            item.quantity,
            float(to_decimal(item.unit_cost)),
            float(to_decimal(item.selling_price)),
            float(to_decimal(item.total_value)),
            item.reorder_point,
            item.status,
        )
        for item, product in items_for_export(db, shop_ids=shop_ids)
    )
    return write_workbook(_export_path("inventory", directory), "Inventory", INVENTORY_COLUMNS, rows)


def export_movements(db: Session, *, shop_ids=None, inventory_id=None, directory=None) -> Path:
    rows = (
        (
            movement.id,
            movement.date,
            movement.inventory_id,
            movement.product_id,
            movement.direction,
            movement.movement_type,
            movement.quantity,
            float(to_decimal(movement.cost_per_unit)),
            float(to_decimal(movement.total_cost)),
            movement.system_count,
            movement.physical_count,
            movement.reason,
            movement.performed_by_id,
        )
        for movement in movements_for_export(db, shop_ids=shop_ids, inventory_id=inventory_id)
    )
    return write_workbook(_export_path("stock_movements", directory), "Movements", MOVEMENT_COLUMNS, rows)


def export_incomes(db: Session, query, *, directory=None) -> Path:
    rows = (
        (
            income.id,
            income.date,
            income.description,
            income.ohada_code.code if income.ohada_code is not None else None,
            income.payment_method,
            float(to_decimal(income.amount)),
            income.shop_id,
        )
        for income in list_incomes(db, query)
    )
    return write_workbook(_export_path("incomes", directory), "Incomes", INCOME_COLUMNS, rows)
