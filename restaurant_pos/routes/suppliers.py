# restaurant_pos/routes/suppliers.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from restaurant_pos.database import get_db, commit_or_500
from restaurant_pos.dependencies import require_roles
from restaurant_pos.models.models import SupplierORM, ROLE_MANAGER, ROLE_STAFF
from restaurant_pos.report_utils import suppliers_csv, csv_response
from restaurant_pos.schemas.schemas import Supplier, SupplierCreate, SupplierUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/suppliers", tags=["suppliers"])

view_suppliers = require_roles(ROLE_MANAGER, ROLE_STAFF, message="You do not have permission to manage suppliers.")
manager_only = require_roles(ROLE_MANAGER, message="Only managers can export or delete suppliers.")


def get_supplier_or_404(db: Session, supplier_id: int) -> SupplierORM:
    supplier = db.query(SupplierORM).filter(SupplierORM.supplier_id == supplier_id).first()
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return supplier


@router.get("/", response_model=List[Supplier], dependencies=[Depends(view_suppliers)])
def get_suppliers(search: Optional[str] = None, db: Session = Depends(get_db)):
    """Return all suppliers sorted by name"""
    query = db.query(SupplierORM)
    if search:
        query = query.filter(SupplierORM.name.icontains(search.strip(), autoescape=True))
    return query.order_by(SupplierORM.name.asc()).all()


@router.get("/export", dependencies=[Depends(manager_only)])
def export_suppliers(db: Session = Depends(get_db)):
    suppliers = db.query(SupplierORM).order_by(SupplierORM.name.asc()).all()
    return csv_response(suppliers_csv(suppliers), "Suppliers.csv")


@router.get("/{supplier_id}", response_model=Supplier, dependencies=[Depends(view_suppliers)])
def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    return get_supplier_or_404(db, supplier_id)


@router.post("/", response_model=Supplier, status_code=201, dependencies=[Depends(view_suppliers)])
def create_supplier(supplier: SupplierCreate, db: Session = Depends(get_db)):
    db_supplier = SupplierORM(**supplier.model_dump())
    db.add(db_supplier)
    commit_or_500(db, "save supplier")
    db.refresh(db_supplier)
    logger.info(f"✅ Added supplier {db_supplier.name}")
    return db_supplier


@router.put("/{supplier_id}", response_model=Supplier, dependencies=[Depends(view_suppliers)])
def update_supplier(supplier_id: int, changes: SupplierUpdate, db: Session = Depends(get_db)):
    supplier = get_supplier_or_404(db, supplier_id)
    for field, value in changes.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(supplier, field, value)
    commit_or_500(db, "save supplier")
    db.refresh(supplier)
    return supplier


@router.delete("/{supplier_id}", response_model=dict, dependencies=[Depends(manager_only)])
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)):
    """
    Delete a supplier.
    - Its purchase orders are kept with no supplier attached
    """
    supplier = get_supplier_or_404(db, supplier_id)
    db.delete(supplier)
    commit_or_500(db, "delete supplier")
    return {"message": f"Supplier {supplier_id} deleted successfully"}
