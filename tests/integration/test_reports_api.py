from __future__ import annotations

import io
from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from openpyxl import load_workbook

from gelato_ops.models import Product


def test_production_report_download(
    client: TestClient, auth_headers, db_session, client_factory, order_factory, make_item
) -> None:
    tub = Product(name="Pistachio 5L", product_type="5L Tub", gelato_type="Dairy", unit_weight=Decimal("3.5"))
    db_session.add(tub)
    db_session.commit()
    order_factory(
        client_factory("client-a", "Alpha Co"),
        date(2025, 3, 5),
        "10.00",
        items=(make_item("Pistachio 5L", 2, "5.00", product=tub),),
    )

    response = client.get("/api/reports/production", params={"delivery_date": "2025-03-05"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert response.headers["content-disposition"] == 'attachment; filename="Production_Analysis_5_Mar.xlsx"'
    sheet = load_workbook(io.BytesIO(response.content)).active
    assert sheet.max_row == 2
    assert sheet["B2"].value == "Alpha Co"
    assert sheet["G2"].value == 7


def test_production_report_without_orders(client: TestClient, auth_headers) -> None:
    response = client.get("/api/reports/production", params={"delivery_date": "2025-03-05"}, headers=auth_headers)

    assert response.status_code == 404


def test_production_report_requires_a_date(client: TestClient, auth_headers) -> None:
    assert client.get("/api/reports/production", headers=auth_headers).status_code == 422


def test_production_dates_index(client: TestClient, auth_headers, client_factory, order_factory) -> None:
    alpha = client_factory("client-a", "Alpha Co")
    order_factory(alpha, date(2025, 3, 5), "10.00")
    order_factory(alpha, date(2025, 3, 5), "12.00")
    order_factory(alpha, date(2025, 3, 7), "10.00")

    response = client.get("/api/reports/production/dates", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == [
        {"summary_id": "PROD-20250307", "delivery_date": "2025-03-07", "order_count": 1},
        {"summary_id": "PROD-20250305", "delivery_date": "2025-03-05", "order_count": 2},
    ]


def test_delivery_list_download(client: TestClient, auth_headers, client_factory, order_factory) -> None:
    order_factory(client_factory("client-a", "Alpha Co", delivery_address="Blk 5 Jurong"), date(2025, 3, 5), "10.00")

    response = client.get("/api/reports/delivery-list", params={"year": 2025}, headers=auth_headers)
    missing = client.get("/api/reports/delivery-list", params={"year": 2024}, headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="Delivery_Reports_2025.xlsx"'
    sheet = load_workbook(io.BytesIO(response.content))["Mar 5"]
    assert sheet["B5"].value == "Alpha Co"
    assert sheet["C5"].value == "Blk 5 Jurong"
    assert missing.status_code == 404


def test_product_analysis_download(
    client: TestClient, auth_headers, db_session, client_factory, order_factory, make_item
) -> None:
    tub = Product(
        name="Pistachio 5L", product_type="5L Tub", gelato_type="Dairy", price=Decimal("48.00"), cost=Decimal("20.00")
    )
    db_session.add(tub)
    db_session.commit()
    order_factory(
        client_factory("client-a", "Alpha Co"),
        date(2025, 3, 5),
        "96.00",
        items=(make_item("Pistachio 5L", 2, "48.00", product=tub),),
    )

    response = client.get("/api/reports/product-analysis", params={"year": 2025}, headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-disposition"] == (
        'attachment; filename="Product_Analysis_(by_Client)_2025.xlsx"'
    )
    assert load_workbook(io.BytesIO(response.content)).sheetnames == ["5 Mar", "Mar 2025"]


def test_yearly_reports_validate_year(client: TestClient, auth_headers) -> None:
    assert client.get("/api/reports/product-analysis", headers=auth_headers).status_code == 422
    assert client.get("/api/reports/delivery-list", params={"year": 99}, headers=auth_headers).status_code == 422
