# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from app.api import upload as upload_api
from app.api.deps import get_cost_repo, get_store
from app.core.mapping import (
    SHOPEE_INCOME_COLUMNS,
    SHOPEE_ORDER_COLUMNS,
    TIKTOK_ORDER_COLUMNS,
    TIKTOK_ORDER_DETAIL_COLUMNS,
    TIKTOK_REPORT_ROWS,
    TIKTOK_REPORT_VALUE_COLUMN
)
from app.main import app
from app.models.schema import CanonicalIncome, CanonicalOrder, Shop
from app.services.aggregator import ShopData
from app.services.cost_store import InMemoryCostPriceRepository
from app.services.upload_store import UploadStore


def _row(columns, width, values):

    row = [None] * width

    for key, value in values.items():
        row[columns[key]] = value

    return row


# ---------------- Row builders ----------------

@pytest.fixture
def shopee_order_row():
    return lambda **values: _row(SHOPEE_ORDER_COLUMNS, 63, values)


@pytest.fixture
def tiktok_order_row():
    return lambda **values: _row(TIKTOK_ORDER_COLUMNS, 54, values)


@pytest.fixture
def shopee_income_row():

    def build(**values):
        values.setdefault("row_no", 1)
        values.setdefault("row_type", "Order")
        return _row(SHOPEE_INCOME_COLUMNS, 34, values)

    return build


@pytest.fixture
def tiktok_detail_row():

    def build(**values):
        values.setdefault("type", "Order")
        return _row(TIKTOK_ORDER_DETAIL_COLUMNS, 44, values)

    return build


@pytest.fixture
def tiktok_reports_rows():

    def build(**values):

        rows = [[None] * (TIKTOK_REPORT_VALUE_COLUMN + 1) for _ in range(70)]

        rows[1][TIKTOK_REPORT_VALUE_COLUMN] = "2026/01/01-2026/01/31"

        for key, value in values.items():
            rows[TIKTOK_REPORT_ROWS[key]][TIKTOK_REPORT_VALUE_COLUMN] = value

        return rows

    return build


# ---------------- Canonical builders ----------------

@pytest.fixture
def make_shop():

    def build(shop_id="s1", platform="tiktok", name=None):
        return Shop(id=shop_id, name=name or shop_id, platform=platform, created_at="2026-01-01T00:00:00")

    return build


@pytest.fixture
def make_order():

    def build(order_id, sku="ABC123", status="completed", revenue=100000, quantity=1, platform="tiktok", **extra):
        return CanonicalOrder(
            order_id=order_id,
            platform=platform,
            status=status,
            sku=sku,
            revenue=revenue,
            quantity=quantity,
            product_name=extra.pop("product_name", f"Product {sku}"),
            **extra
        )

    return build


@pytest.fixture
def make_shop_data():

    def build(shop, orders, incomes=()):

        return ShopData(
            shop=shop,
            orders=list(orders),
            income_by_order={
                i.order_id: i for i in incomes
            }
        )

    return build


@pytest.fixture
def make_income():

    def build(order_id, settlement=90000, total_fees=10000, platform="tiktok"):
        return CanonicalIncome(order_id=order_id, platform=platform, settlement=settlement, total_fees=total_fees)

    return build


# ---------------- Workbooks ----------------

@pytest.fixture
def write_workbook(tmp_path):

    def write(filename, sheets):

        wb = Workbook()
        wb.remove(wb.active)

        for title, rows in sheets.items():

            ws = wb.create_sheet(title)

            for row in rows:
                ws.append(row)

        path = tmp_path / filename

        wb.save(path)

        return path

    return write


# ---------------- HTTP ----------------

@pytest.fixture
def store():
    return UploadStore()


@pytest.fixture
def costs():
    return InMemoryCostPriceRepository()


@pytest.fixture
def client(store, costs, tmp_path, monkeypatch):

    monkeypatch.setattr(upload_api, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr("app.services.excel_service.OUTPUT_DIR", str(tmp_path / "outputs"))

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_cost_repo] = lambda: costs

    try:
        yield TestClient(app)

    finally:
        app.dependency_overrides.clear()
