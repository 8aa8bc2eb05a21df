# restaurant_pos/routes/sales.py

import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from restaurant_pos.database import get_db, commit_or_500
from restaurant_pos.dependencies import require_roles
from restaurant_pos.models.models import SaleRecordORM, ProductORM, ROLE_MANAGER, ROLE_CASHIER
from restaurant_pos.notifications import NotificationManager, get_notification_manager
from restaurant_pos.report_utils import HistoryTimeFrame, filter_sales, total_sales
from restaurant_pos.schemas.schemas import SaleCreate, Sale, SalesHistory

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sales",
    tags=["sales"]
)

record_sales = require_roles(ROLE_MANAGER, ROLE_CASHIER, message="You do not have permission to record sales.")
view_history = require_roles(ROLE_MANAGER, ROLE_CASHIER, message="You do not have permission to view sales history.")
manage_sales = require_roles(ROLE_MANAGER, message="You do not have permission to delete sales.")


@router.post("/", response_model=Sale, status_code=201, dependencies=[Depends(record_sales)])
def create_sale(
    sale: SaleCreate,
    db: Session = Depends(get_db),
    notifier: NotificationManager = Depends(get_notification_manager)
):
    """
    Record a new sale.
    - Checks if product exists
    - Quantity must be positive and not exceed available stock
    - Calculates total_price automatically
    - Reduces product stock
    """
    product = db.query(ProductORM).filter(ProductORM.product_id == sale.product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    if sale.quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be greater than zero.")

    if product.quantity < sale.quantity:
        raise HTTPException(status_code=400, detail="Insufficient stock")

    db_sale = SaleRecordORM(
        product=product,
        quantity=sale.quantity,
        total_price=product.selling_price * sale.quantity,
        date=datetime.now()
    )

    product.quantity -= sale.quantity

    db.add(db_sale)
    commit_or_500(db, "record sale")
    db.refresh(db_sale)
    logger.info(f"💰 Sale recorded: {sale.quantity} x {product.name} = {db_sale.total_price:.2f}")

    notifier.check_low_stock_products([product])
    return db_sale


@router.get("/", response_model=SalesHistory, dependencies=[Depends(view_history)])
def get_sales_history(
    timeframe: HistoryTimeFrame = HistoryTimeFrame.all,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Sales newest first, filtered by time frame and product name.
    - `total_sales` sums the filtered sales
    """
    sales = db.query(SaleRecordORM).order_by(SaleRecordORM.date.desc()).all()
    filtered = filter_sales(sales, since=timeframe.since(), search=search)
    return {
        "timeframe": timeframe.value,
        "total_sales": total_sales(filtered),
        "sales": filtered
    }


@router.get("/{sale_id}", response_model=Sale, dependencies=[Depends(view_history)])
def get_sale(sale_id: int, db: Session = Depends(get_db)):
    """Retrieve a specific sale by ID"""
    sale = db.query(SaleRecordORM).filter(SaleRecordORM.sale_id == sale_id).first()
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")
    return sale


@router.delete("/{sale_id}", response_model=dict, dependencies=[Depends(manage_sales)])
def delete_sale(sale_id: int, db: Session = Depends(get_db)):
    """
    Delete a sale by ID.
    - Restores product stock when sale is deleted
    """
    sale = db.query(SaleRecordORM).filter(SaleRecordORM.sale_id == sale_id).first()
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")

    if sale.product:
        sale.product.quantity += sale.quantity  # restore stock

    db.delete(sale)
    commit_or_500(db, "delete sale")

    return {"message": f"Sale {sale_id} deleted successfully"}
