import datetime

import pytest

from app.models.schema import (
    AdGroup,
    AdsParseResult,
    AdsSummary,
    DailyIncome,
    IncomeParseResult,
    IncomeSummary,
    MonthlyUpload,
    UploadSummary
)
from app.services.report_service import build_revenue_report, list_ads_reports


def _upload(shop_id, data_type, month, raw, summary=None):
    return MonthlyUpload(
        id=f"{shop_id}-{data_type}-{month}",
        shop_id=shop_id,
        data_type=data_type,
        month=month,
        file_name=f"{data_type}.xlsx",
        raw_data=raw,
        summary=summary or UploadSummary(),
        uploaded_at="2026-02-01T00:00:00"
    )


@pytest.fixture
def revenue_uploads(make_income):

    shopee = IncomeParseResult(
        platform="shopee",
        summary=IncomeSummary(),
        orders=[],
        daily_income=[
            DailyIncome(day=datetime.date(2026, 1, 5), order_count=2, product_price=500000,
                        total_payment=445000, total_fees=50000, total_tax=5000, fixed_fee=35000),
        ]
    )

    t1 = make_income("T1", settlement=140000).model_copy(update={
        "revenue": 180000, "total_fees": 30000, "commission_fee": 20000,
        "vat_tax": 1000, "pit_tax": 500, "settled_date": datetime.date(2026, 1, 5)
    })

    t2 = make_income("T2", settlement=80000).model_copy(update={
        "revenue": 90000, "total_fees": 10000, "order_date": datetime.date(2026, 1, 7)
    })

    adjustment = make_income("T9", settlement=-20000).model_copy(update={
        "record_type": "Adjustment", "settled_date": datetime.date(2026, 1, 5)
    })

    tiktok = IncomeParseResult(platform="tiktok", summary=IncomeSummary(), orders=[t1, t2, adjustment])

    return [
        _upload("sp", "income", "2026-01", shopee.model_dump_json(),
                UploadSummary(total_orders=2, total_revenue=500000, total_settlement=445000)),
        _upload("tt", "income", "2026-01", tiktok.model_dump_json(),
                UploadSummary(total_orders=3, total_revenue=270000, total_settlement=200000)),
        _upload("tt", "orders", "2026-01", None),
    ]


def test_revenue_merges_platforms_by_day(make_shop, revenue_uploads):
    shops = [make_shop("sp", "shopee"), make_shop("tt", "tiktok")]

    report = build_revenue_report(shops, revenue_uploads)

    assert report["total_days"] == 2
    assert [d.day for d in report["daily_data"]] == [datetime.date(2026, 1, 5), datetime.date(2026, 1, 7)]

    first = report["daily_data"][0]

    assert first.order_count == 3
    assert first.product_price == 680000
    assert first.total_payment == 585000
    assert first.total_fees == 80000
    assert first.total_tax == 6500
    assert first.fixed_fee == 55000

    summary = report["monthly_summary"]

    assert summary.total_revenue == 770000
    assert summary.total_settlement == 645000
    assert summary.total_orders == 5
    assert summary.total_fees_and_tax == 96500

    assert {s["id"] for s in report["shops"]} == {"sp", "tt"}


def test_revenue_filters(make_shop, revenue_uploads):
    shops = [make_shop("sp", "shopee"), make_shop("tt", "tiktok")]

    report = build_revenue_report(shops, revenue_uploads, platform="tiktok")

    assert [s["id"] for s in report["shops"]] == ["tt"]
    assert [d.order_count for d in report["daily_data"]] == [1, 1]

    report = build_revenue_report(shops, revenue_uploads, shop_id="sp")

    assert report["total_days"] == 1
    assert report["monthly_summary"].total_orders == 2

    assert build_revenue_report(shops, revenue_uploads, shop_id="missing")["daily_data"] == []


def test_ads_reports_newest_first(make_shop):
    ads = AdsParseResult(
        creatives=[],
        campaigns=[AdGroup(key="c1"), AdGroup(key="c2")],
        products=[],
        summary=AdsSummary(total_creatives=7)
    )

    uploads = [
        _upload("tt", "ads", "2026-01", ads.model_dump_json(),
                UploadSummary(total_settlement=150000, total_orders=5, total_revenue=1200000)),
        _upload("tt", "ads", "2026-02", None),
        _upload("tt", "income", "2026-02", None),
        _upload("gone", "ads", "2026-03", None),
    ]

    reports = list_ads_reports([make_shop("tt", "tiktok")], uploads)

    assert [r.month for r in reports] == ["2026-02", "2026-01"]

    jan = reports[1]

    assert jan.total_cost == 150000
    assert jan.total_creatives == 7
    assert jan.total_campaigns == 2
    assert jan.file_name == "ads.xlsx"
    assert reports[0].total_creatives == 0
