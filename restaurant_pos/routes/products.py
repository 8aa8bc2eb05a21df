import logging
from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import List, Optional
from restaurant_pos.database import get_db, commit_or_500
from restaurant_pos.dependencies import require_roles
from restaurant_pos.models.models import ProductORM, SaleRecordORM, ROLE_MANAGER, ROLE_STAFF
from restaurant_pos.notifications import NotificationManager, get_notification_manager
from restaurant_pos.report_utils import products_csv, csv_response
from restaurant_pos.schemas.schemas import Product, ProductCreate, ProductUpdate, Sale

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

view_inventory = require_roles(ROLE_MANAGER, ROLE_STAFF, message="You do not have permission to view inventory.")
manage_inventory = require_roles(ROLE_MANAGER, message="You do not have permission to edit products.")


def get_product_or_404(db: Session, product_id: int) -> ProductORM:
    product = db.query(ProductORM).filter(ProductORM.product_id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/", response_model=List[Product], dependencies=[Depends(view_inventory)])
def get_products(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    notifier: NotificationManager = Depends(get_notification_manager)
):
    """
    Return all products sorted by name.
    - `search` filters by case-insensitive name match
    - Runs the low-stock check over the returned products
    """
    query = db.query(ProductORM)
    if search:
        query = query.filter(ProductORM.name.icontains(search.strip(), autoescape=True))
    products = query.order_by(ProductORM.name.asc()).all()
    notifier.check_low_stock_products(products)
    return products


@router.get("/low_stock", response_model=List[Product], dependencies=[Depends(view_inventory)])
def low_stock(db: Session = Depends(get_db)):
    """
    List products where quantity <= their own low-stock threshold
    """
    return (
        db.query(ProductORM)
        .filter(ProductORM.quantity <= ProductORM.low_stock_threshold)
        .order_by(ProductORM.name.asc())
        .all()
    )


@router.get("/export", dependencies=[Depends(manage_inventory)])
def export_products(db: Session = Depends(get_db)):
    products = db.query(ProductORM).order_by(ProductORM.name.asc()).all()
    return csv_response(products_csv(products), "Products.csv")


@router.get("/{product_id}", response_model=Product, dependencies=[Depends(view_inventory)])
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_product_or_404(db, product_id)


@router.get("/{product_id}/sales", response_model=List[Sale], dependencies=[Depends(view_inventory)])
def get_product_sales(product_id: int, db: Session = Depends(get_db)):
    """Sales history of a single product, newest first"""
    get_product_or_404(db, product_id)
    return (
        db.query(SaleRecordORM)
        .filter(SaleRecordORM.product_id == product_id)
        .order_by(SaleRecordORM.date.desc())
        .all()
    )


@router.post("/", response_model=Product, status_code=201, dependencies=[Depends(manage_inventory)])
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    notifier: NotificationManager = Depends(get_notification_manager)
):
    db_product = ProductORM(**product.model_dump())
    db.add(db_product)
    commit_or_500(db, "save product")
    db.refresh(db_product)
    logger.info(f"✅ Added product {db_product.name} (qty {db_product.quantity})")

    notifier.check_low_stock_products([db_product])
    return db_product


@router.put("/{product_id}", response_model=Product, dependencies=[Depends(manage_inventory)])
def update_product(
    product_id: int,
    changes: ProductUpdate,
    db: Session = Depends(get_db),
    notifier: NotificationManager = Depends(get_notification_manager)
):
    """
    Update a product.
    - Fields left out keep their current value
    """
    product = get_product_or_404(db, product_id)
    for field, value in changes.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(product, field, value)
    commit_or_500(db, "save product")
    db.refresh(product)

    notifier.check_low_stock_products([product])
    return product


@router.delete("/{product_id}", response_model=dict, dependencies=[Depends(manage_inventory)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    """
    Delete a product.
    - Its sales and purchase orders are kept with no product attached
    """
    product = get_product_or_404(db, product_id)
    name = product.name
    db.delete(product)
    commit_or_500(db, "delete product")
    logger.info(f"🗑️ Deleted product {name}")
    return {"message": f"Product {product_id} deleted successfully"}


@router.patch("/{product_id}/add_stock", response_model=Product, dependencies=[Depends(manage_inventory)])
def add_stock(
    product_id: int,
    quantity: int = Query(..., gt=0, description="Number of units to add"),
    db: Session = Depends(get_db)
):
    """
    Increment the stock of a product.
    - `quantity` must be greater than 0
    - Returns the updated product
    """
    product = get_product_or_404(db, product_id)
    product.quantity += quantity
    commit_or_500(db, "save product")
    db.refresh(product)
    return product


@router.patch("/{product_id}/reduce_stock", response_model=Product, dependencies=[Depends(manage_inventory)])
def reduce_stock(
    product_id: int,
    quantity: int = Query(..., gt=0, description="Number of units to reduce"),
    db: Session = Depends(get_db),
    notifier: NotificationManager = Depends(get_notification_manager)
):
    """
    Decrement the stock of a product.
    - `quantity` must be greater than 0
    - Prevents stock from going negative
    - Returns the updated product
    """
    product = get_product_or_404(db, product_id)
    if product.quantity < quantity:
        raise HTTPException(status_code=400, detail="Insufficient stock to reduce")

    product.quantity -= quantity
    commit_or_500(db, "save product")
    db.refresh(product)

    notifier.check_low_stock_products([product])
    return product


class StockUpdate(BaseModel):
    product_id: int
    quantity: int


@router.patch("/batch_update_stock", response_model=List[Product], dependencies=[Depends(manage_inventory)])
def batch_update_stock(
    updates: List[StockUpdate],
    db: Session = Depends(get_db),
    notifier: NotificationManager = Depends(get_notification_manager)
):
    """
    Update stock for multiple products at once.
    - Positive quantity increases stock
    - Negative quantity reduces stock (validated)
    - Unknown product ids are skipped
    - Runs the low-stock check over the updated products
    """
    updated_products = []

    for upd in updates:
        product = db.query(ProductORM).filter(ProductORM.product_id == upd.product_id).first()
        if not product:
            continue

        new_quantity = product.quantity + upd.quantity
        if new_quantity < 0:
            db.rollback()
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient stock for product_id {upd.product_id}"
            )

        product.quantity = new_quantity
        updated_products.append(product)

    commit_or_500(db, "save product")
    for p in updated_products:
        db.refresh(p)

    notifier.check_low_stock_products(updated_products)
    return updated_products
