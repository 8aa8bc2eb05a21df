"""Inventory endpoint tests."""

from restaurant_pos.models.models import SaleRecordORM, ProductORM


def test_create_and_list_sorted(client, manager, make_product):
    make_product(name="Zucchini")
    make_product(name="apples")
    make_product(name="Basil")

    names = [p["name"] for p in client.get("/products/", headers=manager).json()]
    assert names == sorted(names, key=str)
    assert set(names) == {"Zucchini", "apples", "Basil"}


def test_search_is_case_insensitive(client, staff, make_product):
    make_product(name="Olive Oil")
    make_product(name="Rice")

    response = client.get("/products/", params={"search": "oil"}, headers=staff)
    assert [p["name"] for p in response.json()] == ["Olive Oil"]


def test_search_treats_wildcards_literally(client, staff, make_product):
    make_product(name="Rice")
    make_product(name="50% Cream")

    assert client.get("/products/", params={"search": "_"}, headers=staff).json() == []
    names = [p["name"] for p in client.get("/products/", params={"search": "50%"}, headers=staff).json()]
    assert names == ["50% Cream"]


def test_defaults_and_low_stock_flag(client, manager):
    response = client.post("/products/", headers=manager, json={"name": "  Salt  ", "quantity": 10})
    assert response.status_code == 201
    product = response.json()
    assert product["name"] == "Salt"
    assert product["low_stock_threshold"] == 10
    assert product["is_low_stock"] is True


def test_blank_name_and_negative_numbers_rejected(client, manager):
    assert client.post("/products/", headers=manager, json={"name": "   "}).status_code == 422
    assert client.post("/products/", headers=manager, json={"name": "Salt", "quantity": -1}).status_code == 422
    assert client.post("/products/", headers=manager, json={"name": "Salt", "selling_price": "abc"}).status_code == 422


def test_staff_cannot_edit(client, staff, make_product):
    product = make_product()
    assert client.post("/products/", headers=staff, json={"name": "Salt"}).status_code == 403
    assert client.put(f"/products/{product['product_id']}", headers=staff, json={"quantity": 1}).status_code == 403
    assert client.delete(f"/products/{product['product_id']}", headers=staff).status_code == 403


def test_update_keeps_unset_fields(client, manager, make_product):
    product = make_product(name="Tomatoes", quantity=50, selling_price=3.0)
    response = client.put(f"/products/{product['product_id']}", headers=manager, json={"selling_price": 3.5})
    assert response.status_code == 200
    body = response.json()
    assert body["selling_price"] == 3.5
    assert body["quantity"] == 50
    assert body["name"] == "Tomatoes"


def test_saving_low_stock_product_schedules_alert(client, manager, notifier, make_product):
    notifier.request_authorization()
    product = make_product(quantity=3, low_stock_threshold=5)
    assert notifier.pending_identifiers() == [f"low-stock-{product['product_id']}"]


def test_listing_runs_low_stock_check(client, staff, notifier, make_product):
    low = make_product(name="Eggs", quantity=2)
    make_product(name="Flour", quantity=80)
    notifier.request_authorization()

    client.get("/products/", headers=staff)
    assert notifier.pending_identifiers() == [f"low-stock-{low['product_id']}"]


def test_low_stock_endpoint_uses_each_threshold(client, staff, make_product):
    make_product(name="Eggs", quantity=5, low_stock_threshold=5)
    make_product(name="Flour", quantity=6, low_stock_threshold=5)
    make_product(name="Sugar", quantity=20, low_stock_threshold=25)

    names = [p["name"] for p in client.get("/products/low_stock", headers=staff).json()]
    assert names == ["Eggs", "Sugar"]


def test_add_and_reduce_stock(client, manager, make_product):
    product = make_product(quantity=5)
    pid = product["product_id"]

    assert client.patch(f"/products/{pid}/add_stock", params={"quantity": 5}, headers=manager).json()["quantity"] == 10
    assert client.patch(f"/products/{pid}/reduce_stock", params={"quantity": 4}, headers=manager).json()["quantity"] == 6

    response = client.patch(f"/products/{pid}/reduce_stock", params={"quantity": 7}, headers=manager)
    assert response.status_code == 400
    assert client.patch(f"/products/{pid}/add_stock", params={"quantity": 0}, headers=manager).status_code == 422


def test_batch_update_stock(client, manager, make_product):
    a = make_product(name="A", quantity=5)
    b = make_product(name="B", quantity=5)

    response = client.patch("/products/batch_update_stock", headers=manager, json=[
        {"product_id": a["product_id"], "quantity": 3},
        {"product_id": b["product_id"], "quantity": -2},
        {"product_id": 9999, "quantity": 1},
    ])
    assert response.status_code == 200
    assert {p["name"]: p["quantity"] for p in response.json()} == {"A": 8, "B": 3}

    response = client.patch("/products/batch_update_stock", headers=manager, json=[
        {"product_id": a["product_id"], "quantity": -100},
    ])
    assert response.status_code == 400
    assert client.get(f"/products/{a['product_id']}", headers=manager).json()["quantity"] == 8


def test_batch_reduction_into_low_stock_schedules_alert(client, manager, notifier, make_product):
    eggs = make_product(name="Eggs", quantity=20, low_stock_threshold=10)
    notifier.request_authorization()

    response = client.patch("/products/batch_update_stock", headers=manager, json=[
        {"product_id": eggs["product_id"], "quantity": -15},
    ])
    assert response.status_code == 200
    assert response.json()[0]["quantity"] == 5
    assert notifier.pending_identifiers() == [f"low-stock-{eggs['product_id']}"]


def test_delete_keeps_sales_history(client, manager, db_session, make_product):
    product = make_product(name="Bread", quantity=10, selling_price=2.0)
    client.post("/sales/", headers=manager, json={"product_id": product["product_id"], "quantity": 2})

    assert client.delete(f"/products/{product['product_id']}", headers=manager).status_code == 200
    assert client.get(f"/products/{product['product_id']}", headers=manager).status_code == 404

    history = client.get("/sales/", headers=manager).json()
    assert len(history["sales"]) == 1
    assert history["sales"][0]["product_id"] is None
    assert history["sales"][0]["product_name"] == "Unknown Product"

    assert db_session.query(ProductORM).count() == 0
    assert db_session.query(SaleRecordORM).count() == 1


def test_product_sales_history(client, manager, make_product):
    product = make_product(quantity=10, selling_price=4.0)
    pid = product["product_id"]
    client.post("/sales/", headers=manager, json={"product_id": pid, "quantity": 1})
    client.post("/sales/", headers=manager, json={"product_id": pid, "quantity": 2})

    sales = client.get(f"/products/{pid}/sales", headers=manager).json()
    assert sorted(s["total_price"] for s in sales) == [4.0, 8.0]
    assert client.get("/products/9999/sales", headers=manager).status_code == 404


def test_export_products_csv(client, manager, make_product):
    make_product(name="Rice", quantity=20, purchase_price=1.0, selling_price=2.5, low_stock_threshold=10)

    response = client.get("/products/export", headers=manager)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="Products.csv"' in response.headers["content-disposition"]
    assert response.text == (
        "Name,Quantity,Purchase Price,Selling Price,Low Stock Threshold\n"
        "Rice,20,1.0,2.5,10\n"
    )
