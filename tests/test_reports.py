"""Manager report tests."""

from datetime import datetime, timedelta

import pytest

from restaurant_pos.models.models import SaleRecordORM


@pytest.fixture
def seeded_sales(db_session, make_product):
    rice = make_product(name="Rice", quantity=30, selling_price=2.0)
    beans = make_product(name="Beans", quantity=4, selling_price=5.0, low_stock_threshold=5)
    yesterday = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=1)
    db_session.add_all([
        SaleRecordORM(product_id=rice["product_id"], quantity=2, total_price=4.0, date=yesterday + timedelta(hours=11)),
        SaleRecordORM(product_id=rice["product_id"], quantity=3, total_price=6.0, date=yesterday + timedelta(hours=10)),
        SaleRecordORM(product_id=beans["product_id"], quantity=1, total_price=5.0, date=yesterday - timedelta(days=2)),
        SaleRecordORM(product_id=beans["product_id"], quantity=2, total_price=10.0, date=yesterday - timedelta(days=19)),
    ])
    db_session.commit()
    return rice, beans


def test_weekly_sales_trend(client, manager, seeded_sales):
    report = client.get("/reports/sales", headers=manager).json()
    assert report["timeframe"] == "week"
    assert report["total_sales"] == 15.0
    assert len(report["daily_sales"]) == 2
    assert report["average_daily_sales"] == 7.5
    days = [d["date"] for d in report["daily_sales"]]
    assert days == sorted(days)


def test_monthly_sales_trend(client, manager, seeded_sales):
    report = client.get("/reports/sales", params={"timeframe": "month"}, headers=manager).json()
    assert report["total_sales"] == 25.0


def test_empty_trend(client, manager):
    report = client.get("/reports/sales", params={"timeframe": "year"}, headers=manager).json()
    assert report == {"timeframe": "year", "total_sales": 0.0, "average_daily_sales": 0.0, "daily_sales": []}


def test_inventory_status(client, manager, seeded_sales):
    report = client.get("/reports/inventory", headers=manager).json()
    assert report["total_products"] == 2
    assert report["low_stock_count"] == 1
    assert [(p["name"], p["is_low_stock"]) for p in report["products"]] == [("Beans", True), ("Rice", False)]


def test_sales_export(client, manager, seeded_sales):
    response = client.get("/reports/sales/export", headers=manager)
    assert response.status_code == 200
    assert 'filename="SalesDetails.csv"' in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0] == "Date,Product,Quantity,Total Price"
    assert len(lines) == 4
    assert lines[-1].endswith(",Rice,2,4.00")


def test_inventory_export(client, manager, seeded_sales):
    response = client.get("/reports/inventory/export", headers=manager)
    assert 'filename="InventoryDetails.csv"' in response.headers["content-disposition"]
    assert response.text == (
        "Product,Quantity,Purchase Price,Selling Price,Low Stock Threshold\n"
        "Beans,4,1.5,5.0,5\n"
        "Rice,30,1.5,2.0,10\n"
    )


def test_per_product_aggregates(client, manager, seeded_sales):
    per_product = client.get("/reports/total_sales_per_product", headers=manager).json()
    assert per_product == [
        {"product": "Beans", "total_quantity": 3, "total_revenue": 15.0},
        {"product": "Rice", "total_quantity": 5, "total_revenue": 10.0},
    ]

    top = client.get("/reports/top_selling_products", params={"limit": 1}, headers=manager).json()
    assert [t["product"] for t in top] == ["Rice"]


def test_turnover_and_average_order_value(client, manager, seeded_sales):
    turnover = {t["product"]: t for t in client.get("/reports/stock_turnover_per_product", headers=manager).json()}
    assert turnover["Rice"]["units_sold"] == 5
    assert turnover["Rice"]["turnover_rate"] == round(5 / 35, 2)

    aov = client.get("/reports/average_order_value", headers=manager).json()
    assert aov == {"total_orders": 4, "total_revenue": 25.0, "average_order_value": 6.25}
