# app/services/report_service.py

from typing import List

from app.core.logger import logger
from app.models.schema import (
    AdsParseResult,
    AdsUploadReport,
    DailyIncome,
    IncomeParseResult,
    RevenueSummary
)
from app.services.aggregator import load_blob


# ---------------- Daily revenue ----------------

def _bucket(buckets, day):

    if day not in buckets:
        buckets[day] = DailyIncome(day=day)

    return buckets[day]


def _add_shopee_days(buckets, parsed):

    for d in parsed.daily_income:

        b = _bucket(buckets, d.day)

        b.order_count += d.order_count
        b.product_price += d.product_price
        b.total_payment += d.total_payment
        b.total_fees += d.total_fees
        b.total_tax += d.total_tax
        b.fixed_fee += d.fixed_fee
        b.service_fee += d.service_fee
        b.payment_fee += d.payment_fee
        b.affiliate_fee += d.affiliate_fee
        b.refund += d.refund


def _add_tiktok_orders(buckets, parsed):

    for r in parsed.orders:

        if r.record_type != "Order":
            continue

        day = r.settled_date or r.order_date

        if day is None:
            continue

        b = _bucket(buckets, day)

        b.order_count += 1
        b.product_price += r.revenue
        b.total_payment += r.settlement
        b.total_fees += r.total_fees
        b.total_tax += r.vat_tax + r.pit_tax
        b.fixed_fee += r.commission_fee
        b.service_fee += r.transaction_fee
        b.affiliate_fee += r.affiliate_fee
        b.refund += r.refund


def build_revenue_report(shops, uploads, platform="all", shop_id=None):
    """
    Merge income uploads into one per-day series.

    Shopee contributes its pre-aggregated daily rows, TikTok its "Order"
    records bucketed by settlement date (creation date when unsettled).
    """

    selected = [
        s for s in shops
        if (not platform or platform == "all" or s.platform == platform)
        and (not shop_id or s.id == shop_id)
    ]

    platforms = {s.id: s.platform for s in selected}

    income = [u for u in uploads if u.shop_id in platforms and u.data_type == "income" and u.raw_data]

    buckets = {}

    for u in income:

        parsed = load_blob(IncomeParseResult, u)

        if parsed is None:
            continue

        if platforms[u.shop_id] == "shopee":
            _add_shopee_days(buckets, parsed)
        else:
            _add_tiktok_orders(buckets, parsed)


    daily = [buckets[d] for d in sorted(buckets)]

    summary = RevenueSummary(
        total_revenue=sum(u.summary.total_revenue for u in income),
        total_fees_and_tax=sum(abs(d.total_fees) + abs(d.total_tax) for d in daily),
        total_settlement=sum(u.summary.total_settlement for u in income),
        total_orders=sum(u.summary.total_orders for u in income)
    )

    logger.info(f"Revenue report: {len(selected)} shops, {len(daily)} days")

    return {
        "daily_data": daily,
        "shops": [{"id": s.id, "name": s.name, "platform": s.platform} for s in selected],
        "total_days": len(daily),
        "monthly_summary": summary
    }


# ---------------- Ads ----------------

def list_ads_reports(shops, uploads) -> List[AdsUploadReport]:

    platforms = {s.id: s.platform for s in shops}

    reports = []

    for u in uploads:

        if u.data_type != "ads" or u.shop_id not in platforms:
            continue

        parsed = load_blob(AdsParseResult, u)

        reports.append(AdsUploadReport(
            id=u.id,
            shop_id=u.shop_id,
            platform=platforms[u.shop_id],
            month=u.month,
            file_name=u.file_name,
            file_size=u.file_size,
            # ads uploads keep the spend in the settlement slot
            total_cost=u.summary.total_settlement,
            total_orders=u.summary.total_orders,
            total_revenue=u.summary.total_revenue,
            total_creatives=parsed.summary.total_creatives if parsed else 0,
            total_campaigns=len(parsed.campaigns) if parsed else 0,
            uploaded_at=u.uploaded_at
        ))

    return sorted(reports, key=lambda r: r.month, reverse=True)
