# restaurant_pos/models/models.py
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, TIMESTAMP, ForeignKey, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from datetime import datetime
from config import DEFAULT_LOW_STOCK_THRESHOLD
from restaurant_pos.core import Base

ROLE_MANAGER = "Manager"
ROLE_STAFF = "Staff"
ROLE_CASHIER = "Cashier"
ROLES = (ROLE_MANAGER, ROLE_STAFF, ROLE_CASHIER)

UNKNOWN_PRODUCT = "Unknown Product"


class UserORM(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default=ROLE_STAFF)  # 'Manager', 'Staff', 'Cashier'
    dark_mode = Column(Boolean, default=False)
    created_at = Column(TIMESTAMP, server_default=func.now())


class ProductORM(Base):
    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    purchase_price = Column(Float, nullable=False, default=0.0)
    selling_price = Column(Float, nullable=False, default=0.0)
    low_stock_threshold = Column(Integer, nullable=False, default=DEFAULT_LOW_STOCK_THRESHOLD)
    created_at = Column(TIMESTAMP, server_default=func.now())

    # Ledger rows survive product deletion with product_id set to NULL
    sales = relationship("SaleRecordORM", back_populates="product")
    purchase_orders = relationship("PurchaseOrderORM", back_populates="product")

    @property
    def is_low_stock(self):
        return self.quantity <= self.low_stock_threshold


class SaleRecordORM(Base):
    __tablename__ = "sales"

    sale_id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False, default=0.0)
    date = Column(DateTime, default=datetime.now, index=True)

    product = relationship("ProductORM", back_populates="sales")

    @property
    def product_name(self):
        return self.product.name if self.product else UNKNOWN_PRODUCT


class SupplierORM(Base):
    __tablename__ = "suppliers"

    supplier_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False, index=True)
    contact_info = Column(String(255))
    address = Column(String(255))
    notes = Column(Text)
    created_at = Column(TIMESTAMP, server_default=func.now())

    purchase_orders = relationship("PurchaseOrderORM", back_populates="supplier")


class PurchaseOrderORM(Base):
    __tablename__ = "purchase_orders"

    order_id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="SET NULL"), nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.supplier_id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=False)
    purchase_price = Column(Float, nullable=False, default=0.0)
    date = Column(DateTime, default=datetime.now, index=True)

    product = relationship("ProductORM", back_populates="purchase_orders")
    supplier = relationship("SupplierORM", back_populates="purchase_orders")

    @property
    def product_name(self):
        return self.product.name if self.product else UNKNOWN_PRODUCT

    @property
    def supplier_name(self):
        return self.supplier.name if self.supplier else ""

    @property
    def total_cost(self):
        return self.purchase_price * self.quantity
