# app/services/aggregator.py

from typing import Dict, List

from pydantic import BaseModel, ValidationError

from app.core.logger import logger
from app.models.schema import (
    CanonicalIncome,
    CanonicalOrder,
    IncomeParseResult,
    MonthlyOrders,
    MonthlyRevenue,
    OrderParseResult,
    PlatformStats,
    Shop,
    ShopStats,
    SkuAggregate,
    SkuShopData,
    TrendPoint
)


class ShopData(BaseModel):
    shop: Shop
    orders: List[CanonicalOrder] = []
    income_by_order: Dict[str, CanonicalIncome] = {}


# ---------------- Stored blobs ----------------

def load_blob(model, upload):

    if not upload.raw_data:
        return None

    try:
        return model.model_validate_json(upload.raw_data)

    except ValidationError as e:

        logger.warning(
            f"Skipping unreadable {upload.data_type} blob "
            f"{upload.shop_id}/{upload.month}: {e.error_count()} errors"
        )

        return None


def load_shop_data(shop, uploads) -> ShopData:
    """Rebuild canonical records for one shop from its stored raw JSON."""

    data = ShopData(shop=shop)

    for upload in uploads:

        if upload.shop_id != shop.id or upload.data_type != "income":
            continue

        parsed = load_blob(IncomeParseResult, upload)

        if parsed is None:
            continue

        for rec in parsed.orders:
            if rec.order_id:
                data.income_by_order[rec.order_id] = rec


    for upload in uploads:

        if upload.shop_id != shop.id or upload.data_type != "orders":
            continue

        parsed = load_blob(OrderParseResult, upload)

        if parsed is not None:
            data.orders.extend(parsed.orders)

    return data


# ---------------- SKU aggregation ----------------

def aggregate_skus(shops) -> List[SkuAggregate]:
    """
    Join orders with income by order id and bucket them per SKU and shop.

    Revenue, settlement and fees accrue only for completed orders; cancelled
    orders only move the cancelled counter. An order without an income
    record still counts, it just adds no settlement or fees.
    """

    sku_map = {}

    for data in shops:

        shop = data.shop

        for o in data.orders:

            entry = sku_map.get(o.sku)

            if entry is None:
                entry = SkuAggregate(sku=o.sku, product_name=o.product_name)
                sku_map[o.sku] = entry

            bucket = next((b for b in entry.shops if b.shop_id == shop.id), None)

            if bucket is None:
                bucket = SkuShopData(shop_id=shop.id, shop_name=shop.name, platform=shop.platform)
                entry.shops.append(bucket)

            bucket.orders += 1

            if o.status == "completed":

                bucket.completed += 1
                bucket.qty += o.quantity
                bucket.revenue += o.revenue

                inc = data.income_by_order.get(o.order_id)

                if inc is not None:
                    bucket.settlement += inc.settlement
                    bucket.fees += abs(inc.total_fees)

            elif o.status == "cancelled":
                bucket.cancelled += 1


    results = [retotal(entry) for entry in sku_map.values()]

    results.sort(key=lambda s: s.total_revenue, reverse=True)

    return results


def retotal(entry: SkuAggregate) -> SkuAggregate:

    shops = entry.shops

    entry.total_orders = sum(s.orders for s in shops)
    entry.total_completed = sum(s.completed for s in shops)
    entry.total_cancelled = sum(s.cancelled for s in shops)
    entry.total_revenue = sum(s.revenue for s in shops)
    entry.total_settlement = sum(s.settlement for s in shops)
    entry.total_fees = sum(s.fees for s in shops)
    entry.total_qty = sum(s.qty for s in shops)

    entry.cancel_rate = (
        entry.total_cancelled / entry.total_orders * 100
        if entry.total_orders > 0 else 0.0
    )

    return entry


# ---------------- Shop / month rollups ----------------

def compute_real_fees(platform, upload) -> float:
    """Platform fees plus withheld taxes, recomputed from the income blob."""

    parsed = load_blob(IncomeParseResult, upload)

    if parsed is None:
        return 0.0

    if platform == "shopee":
        return sum(abs(d.total_fees) + abs(d.total_tax) for d in parsed.daily_income)

    # sum signed values, abs once
    records = [r for r in parsed.orders if r.record_type == "Order"]

    raw_fees = sum(r.reported_fees for r in records)
    raw_tax = sum(r.reported_tax for r in records)

    return abs(raw_fees) + abs(raw_tax)


def shop_stats(shop, uploads) -> ShopStats:

    income = [u for u in uploads if u.shop_id == shop.id and u.data_type == "income"]
    orders = [u for u in uploads if u.shop_id == shop.id and u.data_type == "orders"]

    monthly_revenue = [
        MonthlyRevenue(
            month=u.month,
            revenue=u.summary.total_revenue,
            settlement=u.summary.total_settlement,
            fees=compute_real_fees(shop.platform, u)
        )
        for u in income
    ]

    monthly_orders = [
        MonthlyOrders(
            month=u.month,
            orders=u.summary.total_orders,
            completed=u.summary.total_completed,
            cancelled=u.summary.total_cancelled
        )
        for u in orders
    ]

    return ShopStats(
        id=shop.id,
        name=shop.name,
        platform=shop.platform,
        revenue=sum(m.revenue for m in monthly_revenue),
        settlement=sum(m.settlement for m in monthly_revenue),
        fees=sum(m.fees for m in monthly_revenue),
        orders=sum(m.orders for m in monthly_orders),
        completed=sum(m.completed for m in monthly_orders),
        cancelled=sum(m.cancelled for m in monthly_orders),
        monthly_revenue=monthly_revenue,
        monthly_orders=monthly_orders
    )


def monthly_trend(shops, uploads) -> List[TrendPoint]:

    platforms = {s.id: s.platform for s in shops}

    points = {}

    for u in uploads:

        if u.shop_id not in platforms:
            continue

        p = points.setdefault(u.month, TrendPoint(month=u.month))

        if u.data_type == "income":
            p.revenue += u.summary.total_revenue
            p.fees += compute_real_fees(platforms[u.shop_id], u)

        elif u.data_type == "orders":
            p.orders += u.summary.total_orders

    return [points[m] for m in sorted(points)]


def platform_stats(shops, stats) -> Dict[str, PlatformStats]:

    result = {}

    for platform in ("shopee", "tiktok"):

        rows = [s for s in stats if s.platform == platform]

        result[platform] = PlatformStats(
            shops=sum(1 for s in shops if s.platform == platform),
            revenue=sum(s.revenue for s in rows),
            orders=sum(s.orders for s in rows)
        )

    return result


def build_dashboard(shops, uploads):

    logger.info(f"Aggregating dashboard for {len(shops)} shops / {len(uploads)} uploads")

    stats = [shop_stats(s, uploads) for s in shops]

    sku_stats = aggregate_skus([load_shop_data(s, uploads) for s in shops])

    return {
        "shop_stats": stats,
        "monthly_trend": monthly_trend(shops, uploads),
        "platform_stats": platform_stats(shops, stats),
        "total_shops": len(shops),
        "total_months": len({u.month for u in uploads}),
        "sku_stats": sku_stats
    }
