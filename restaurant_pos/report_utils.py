# restaurant_pos/report_utils.py
"""
Aggregation and CSV helpers shared by the sales, reports and export routes.
"""
import calendar
import csv
import io
from collections import defaultdict
from datetime import datetime, date, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from fastapi.responses import Response

from restaurant_pos.models.models import ProductORM, SaleRecordORM, SupplierORM, PurchaseOrderORM

SALES_CSV_HEADER = ["Date", "Product", "Quantity", "Total Price"]
INVENTORY_CSV_HEADER = ["Product", "Quantity", "Purchase Price", "Selling Price", "Low Stock Threshold"]
PRODUCTS_CSV_HEADER = ["Name", "Quantity", "Purchase Price", "Selling Price", "Low Stock Threshold"]
SUPPLIERS_CSV_HEADER = ["Name", "Contact Info", "Address", "Notes"]
PURCHASE_ORDERS_CSV_HEADER = ["Date", "Product", "Supplier", "Quantity", "Purchase Price", "Total Cost"]


def short_date(moment: datetime) -> str:
    """US short date without zero padding, e.g. 3/5/26."""
    return f"{moment.month}/{moment.day}/{moment:%y}"


def months_ago(moment: datetime, months: int) -> datetime:
    """Shift `moment` back by whole calendar months, clamping the day to the target month's length."""
    month_index = moment.month - 1 - months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


class ReportTimeFrame(str, Enum):
    week = "week"
    month = "month"
    year = "year"

    def since(self, now: Optional[datetime] = None) -> datetime:
        now = now or datetime.now()
        if self is ReportTimeFrame.week:
            return now - timedelta(days=7)
        if self is ReportTimeFrame.month:
            return months_ago(now, 1)
        return months_ago(now, 12)


class HistoryTimeFrame(str, Enum):
    today = "today"
    week = "week"
    month = "month"
    all = "all"

    def since(self, now: Optional[datetime] = None) -> Optional[datetime]:
        now = now or datetime.now()
        if self is HistoryTimeFrame.today:
            return start_of_day(now)
        if self is HistoryTimeFrame.week:
            return now - timedelta(days=7)
        if self is HistoryTimeFrame.month:
            return months_ago(now, 1)
        return None


# -------------------- Sales aggregation --------------------

def filter_sales(
    sales: Iterable[SaleRecordORM],
    since: Optional[datetime] = None,
    search: Optional[str] = None
) -> List[SaleRecordORM]:
    """Keep sales on/after `since` whose product name contains `search` (case-insensitive)."""
    needle = (search or "").strip().lower()
    result = []
    for sale in sales:
        if since is not None and (sale.date or datetime.now()) < since:
            continue
        if needle and (sale.product is None or needle not in (sale.product.name or "").lower()):
            continue
        result.append(sale)
    return result


def total_sales(sales: Iterable[SaleRecordORM]) -> float:
    return sum(sale.total_price or 0.0 for sale in sales)


def daily_sales(sales: Iterable[SaleRecordORM]) -> List[Tuple[date, float]]:
    """Sum sale totals per calendar day, oldest day first."""
    grouped = defaultdict(float)
    for sale in sales:
        grouped[(sale.date or datetime.now()).date()] += sale.total_price or 0.0
    return sorted(grouped.items())


def average_daily_sales(sales: List[SaleRecordORM]) -> float:
    days = daily_sales(sales)
    if not days:
        return 0.0
    return total_sales(sales) / len(days)


# -------------------- CSV builders --------------------

def _to_csv(header: List[str], rows: Iterable[list]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return output.getvalue()


def sales_details_csv(sales: Iterable[SaleRecordORM]) -> str:
    return _to_csv(SALES_CSV_HEADER, (
        [
            short_date(sale.date or datetime.now()),
            sale.product.name if sale.product else "",
            sale.quantity,
            f"{sale.total_price:.2f}",
        ]
        for sale in sales
    ))


def _product_row(p: ProductORM) -> list:
    return [p.name or "", p.quantity, p.purchase_price, p.selling_price, p.low_stock_threshold]


def inventory_details_csv(products: Iterable[ProductORM]) -> str:
    return _to_csv(INVENTORY_CSV_HEADER, (_product_row(p) for p in products))


def products_csv(products: Iterable[ProductORM]) -> str:
    return _to_csv(PRODUCTS_CSV_HEADER, (_product_row(p) for p in products))


def suppliers_csv(suppliers: Iterable[SupplierORM]) -> str:
    return _to_csv(SUPPLIERS_CSV_HEADER, (
        [s.name or "", s.contact_info or "", s.address or "", s.notes or ""]
        for s in suppliers
    ))


def purchase_orders_csv(orders: Iterable[PurchaseOrderORM]) -> str:
    return _to_csv(PURCHASE_ORDERS_CSV_HEADER, (
        [
            short_date(o.date or datetime.now()),
            o.product.name if o.product else "",
            o.supplier_name,
            o.quantity,
            f"{o.purchase_price:.2f}",
            f"{o.total_cost:.2f}",
        ]
        for o in orders
    ))


def csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
