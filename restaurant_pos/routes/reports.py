# restaurant_pos/routes/reports.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import func
from restaurant_pos.database import get_db
from restaurant_pos.dependencies import require_roles
from restaurant_pos.models.models import SaleRecordORM, ProductORM, ROLE_MANAGER
from restaurant_pos.report_utils import (
    ReportTimeFrame,
    filter_sales,
    total_sales,
    daily_sales,
    average_daily_sales,
    sales_details_csv,
    inventory_details_csv,
    csv_response,
)
from restaurant_pos.schemas.schemas import SalesReport, InventoryReport

view_reports = require_roles(ROLE_MANAGER, message="You do not have permission to view reports.")

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[Depends(view_reports)]
)


def _sales_in(db: Session, timeframe: ReportTimeFrame):
    sales = db.query(SaleRecordORM).order_by(SaleRecordORM.date.asc()).all()
    return filter_sales(sales, since=timeframe.since())


def _products(db: Session):
    return db.query(ProductORM).order_by(ProductORM.name.asc()).all()


@router.get("/sales", response_model=SalesReport)
def sales_trend(timeframe: ReportTimeFrame = ReportTimeFrame.week, db: Session = Depends(get_db)):
    """
    Sales trend for the selected time frame
    - `daily_sales` is grouped per day, oldest first
    - `average_daily_sales` divides by the number of days that had sales
    """
    sales = _sales_in(db, timeframe)
    return {
        "timeframe": timeframe.value,
        "total_sales": total_sales(sales),
        "average_daily_sales": average_daily_sales(sales),
        "daily_sales": [{"date": day, "amount": amount} for day, amount in daily_sales(sales)]
    }


@router.get("/inventory", response_model=InventoryReport)
def inventory_status(db: Session = Depends(get_db)):
    """
    Stock level of every product and how many are low on stock
    """
    products = _products(db)
    return {
        "total_products": len(products),
        "low_stock_count": sum(1 for p in products if p.is_low_stock),
        "products": [
            {
                "name": p.name,
                "quantity": p.quantity,
                "low_stock_threshold": p.low_stock_threshold,
                "is_low_stock": p.is_low_stock
            } for p in products
        ]
    }


@router.get("/sales/export")
def export_sales_details(timeframe: ReportTimeFrame = ReportTimeFrame.week, db: Session = Depends(get_db)):
    return csv_response(sales_details_csv(_sales_in(db, timeframe)), "SalesDetails.csv")


@router.get("/inventory/export")
def export_inventory_details(db: Session = Depends(get_db)):
    return csv_response(inventory_details_csv(_products(db)), "InventoryDetails.csv")


@router.get("/total_sales_per_product")
def total_sales_per_product(db: Session = Depends(get_db)):
    """
    Returns total quantity sold and total revenue per product
    """
    results = (
        db.query(
            ProductORM.name,
            func.sum(SaleRecordORM.quantity).label("total_quantity"),
            func.sum(SaleRecordORM.total_price).label("total_revenue")
        )
        .join(SaleRecordORM, SaleRecordORM.product_id == ProductORM.product_id)
        .group_by(ProductORM.name)
        .order_by(ProductORM.name)
        .all()
    )
    return [
        {"product": r.name, "total_quantity": int(r.total_quantity), "total_revenue": round(float(r.total_revenue), 2)}
        for r in results
    ]


@router.get("/top_selling_products")
def top_selling_products(limit: int = Query(5, gt=0), db: Session = Depends(get_db)):
    """
    Retrieve the top-selling products by total quantity sold.
    Default limit: 5
    """
    results = (
        db.query(
            ProductORM.name.label("product"),
            func.sum(SaleRecordORM.quantity).label("total_quantity"),
            func.sum(SaleRecordORM.total_price).label("total_revenue")
        )
        .join(SaleRecordORM, ProductORM.product_id == SaleRecordORM.product_id)
        .group_by(ProductORM.name)
        .order_by(func.sum(SaleRecordORM.quantity).desc())
        .limit(limit)
        .all()
    )
    return [dict(r._mapping) for r in results]


@router.get("/stock_turnover_per_product")
def stock_turnover_per_product(db: Session = Depends(get_db)):
    """
    Returns turnover rate per product: units sold / (stock + units sold)
    """
    products = _products(db)
    results = []

    for product in products:
        total_sold = db.query(func.sum(SaleRecordORM.quantity))\
                       .filter(SaleRecordORM.product_id == product.product_id)\
                       .scalar() or 0
        on_hand = product.quantity + total_sold
        turnover_rate = total_sold / on_hand if on_hand > 0 else 0
        results.append({
            "product": product.name,
            "units_sold": int(total_sold),
            "stock": product.quantity,
            "turnover_rate": round(turnover_rate, 2)
        })

    return results


@router.get("/average_order_value")
def average_order_value(db: Session = Depends(get_db)):
    """
    Returns the average value of a recorded sale
    """
    total_orders = db.query(func.count(SaleRecordORM.sale_id)).scalar() or 0
    total_revenue = db.query(func.sum(SaleRecordORM.total_price)).scalar() or 0.0

    aov = round(total_revenue / total_orders, 2) if total_orders > 0 else 0

    return {"total_orders": total_orders, "total_revenue": round(total_revenue, 2), "average_order_value": aov}
