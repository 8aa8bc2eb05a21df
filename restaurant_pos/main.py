import logging
from fastapi import FastAPI
from restaurant_pos.routes import auth, products, sales, suppliers, purchase_orders, reports, users, settings
import uvicorn

from config import LOG_LEVEL, PORT, APP_VERSION
from restaurant_pos.database import init_db

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Restaurant Inventory API", version=APP_VERSION)


# -------------------- Initialize DB Tables --------------------
@app.on_event("startup")
def startup_event():
    init_db()  # creates tables and the initial manager/staff/cashier accounts
    logger.info("✅ Restaurant database initialized successfully.")


# -------------------- Include Routers --------------------
app.include_router(auth.router)
app.include_router(products.router)
app.include_router(sales.router)
app.include_router(suppliers.router)
app.include_router(purchase_orders.router)
app.include_router(reports.router)
app.include_router(settings.router)
app.include_router(users.router, prefix="/users", tags=["users"])


# -------------------- Root Endpoint --------------------
@app.get("/")
def root():
    return {"message": "Restaurant Inventory Backend Running!"}


def run():
    uvicorn.run("restaurant_pos.main:app", host="0.0.0.0", port=PORT, reload=False)


if __name__ == "__main__":
    run()
