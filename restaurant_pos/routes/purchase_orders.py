# restaurant_pos/routes/purchase_orders.py
import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from restaurant_pos.database import get_db, commit_or_500
from restaurant_pos.dependencies import require_roles
from restaurant_pos.models.models import PurchaseOrderORM, ProductORM, SupplierORM, ROLE_MANAGER, ROLE_STAFF
from restaurant_pos.report_utils import purchase_orders_csv, csv_response
from restaurant_pos.schemas.schemas import PurchaseOrder, PurchaseOrderCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/purchase_orders", tags=["purchase orders"])

view_orders = require_roles(ROLE_MANAGER, ROLE_STAFF, message="You do not have permission to manage purchase orders.")
manager_only = require_roles(ROLE_MANAGER, message="Only managers can export or delete purchase orders.")


@router.get("/", response_model=List[PurchaseOrder], dependencies=[Depends(view_orders)])
def get_purchase_orders(
    supplier_id: Optional[int] = None,
    product_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """Purchase orders newest first, optionally for one supplier or product"""
    query = db.query(PurchaseOrderORM)
    if supplier_id is not None:
        query = query.filter(PurchaseOrderORM.supplier_id == supplier_id)
    if product_id is not None:
        query = query.filter(PurchaseOrderORM.product_id == product_id)
    return query.order_by(PurchaseOrderORM.date.desc()).all()


@router.get("/export", dependencies=[Depends(manager_only)])
def export_purchase_orders(db: Session = Depends(get_db)):
    orders = db.query(PurchaseOrderORM).order_by(PurchaseOrderORM.date.asc()).all()
    return csv_response(purchase_orders_csv(orders), "PurchaseOrders.csv")


@router.get("/{order_id}", response_model=PurchaseOrder, dependencies=[Depends(view_orders)])
def get_purchase_order(order_id: int, db: Session = Depends(get_db)):
    order = db.query(PurchaseOrderORM).filter(PurchaseOrderORM.order_id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Purchase order not found")
    return order


@router.post("/", response_model=PurchaseOrder, status_code=201, dependencies=[Depends(view_orders)])
def create_purchase_order(order: PurchaseOrderCreate, db: Session = Depends(get_db)):
    """
    Record goods bought from a supplier.
    - Increases product stock by the ordered quantity
    - Updates the product's purchase price
    """
    product = db.query(ProductORM).filter(ProductORM.product_id == order.product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    supplier = db.query(SupplierORM).filter(SupplierORM.supplier_id == order.supplier_id).first()
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")

    db_order = PurchaseOrderORM(
        product=product,
        supplier=supplier,
        quantity=order.quantity,
        purchase_price=order.purchase_price,
        date=order.date or datetime.now()
    )

    product.quantity += order.quantity
    product.purchase_price = order.purchase_price

    db.add(db_order)
    commit_or_500(db, "save purchase order")
    db.refresh(db_order)
    logger.info(f"📦 Purchase order: {order.quantity} x {product.name} from {supplier.name}")
    return db_order


@router.delete("/{order_id}", response_model=dict, dependencies=[Depends(manager_only)])
def delete_purchase_order(order_id: int, db: Session = Depends(get_db)):
    """
    Delete a purchase order by ID.
    - Removes the ordered quantity from product stock again
    - Rejected when that stock has already been sold
    """
    order = db.query(PurchaseOrderORM).filter(PurchaseOrderORM.order_id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Purchase order not found")

    if order.product:
        if order.product.quantity < order.quantity:
            raise HTTPException(status_code=400, detail="Insufficient stock to cancel purchase order")
        order.product.quantity -= order.quantity

    db.delete(order)
    commit_or_500(db, "delete purchase order")

    return {"message": f"Purchase order {order_id} deleted successfully"}
