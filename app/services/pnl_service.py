# app/services/pnl_service.py

from app.core.logger import logger
from app.models.schema import PnlRow, PnlTotals
from app.services.aggregator import retotal


SORT_KEYS = ("revenue", "profit", "margin", "qty", "cancel_rate")

# ordering-only stand-ins for SKUs without a cost price
NO_MARGIN = -999.0
NO_PROFIT = float("-inf")


def abc_tier(cum_pct):

    # boundaries are inclusive: exactly 80.0% is still A
    if cum_pct <= 80:
        return "A"

    if cum_pct <= 95:
        return "B"

    return "C"


def classify(aggregates, costs):
    """
    Overlay unit costs on SKU aggregates and assign ABC tiers.

    Rows come back in revenue-descending order (stable on ties). Net profit
    and margin stay None for SKUs without a positive unit cost.
    """

    ranked = sorted(aggregates, key=lambda s: s.total_revenue, reverse=True)

    total_revenue = sum(s.total_revenue for s in ranked)

    rows = []
    cum_revenue = 0.0

    for agg in ranked:

        cum_revenue += agg.total_revenue
        cum_pct = cum_revenue / total_revenue * 100 if total_revenue > 0 else 0.0

        unit_cost = costs.get(agg.sku, 0) or 0
        total_cost = unit_cost * agg.total_qty

        net_profit = None
        margin = None
        per_unit = None

        if unit_cost > 0:

            net_profit = agg.total_settlement - total_cost
            margin = net_profit / agg.total_revenue * 100 if agg.total_revenue > 0 else 0.0
            per_unit = net_profit / agg.total_qty if agg.total_qty > 0 else 0.0

        rows.append(PnlRow(
            **agg.model_dump(),
            unit_cost=unit_cost,
            total_cost=total_cost,
            net_profit=net_profit,
            margin=margin,
            profit_per_unit=per_unit,
            fee_rate=agg.total_fees / agg.total_revenue * 100 if agg.total_revenue > 0 else 0.0,
            cum_pct=cum_pct,
            tier=abc_tier(cum_pct)
        ))

    return rows


def _sort_value(row, sort_by):

    if sort_by == "revenue":
        return row.total_revenue

    if sort_by == "profit":
        return NO_PROFIT if row.net_profit is None else row.net_profit

    if sort_by == "margin":

        if row.net_profit is None or row.total_revenue <= 0:
            return NO_MARGIN

        return row.margin

    if sort_by == "qty":
        return row.total_qty

    return row.cancel_rate


def sort_rows(rows, sort_by="revenue", direction="desc"):

    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {', '.join(SORT_KEYS)}")

    if direction not in ("asc", "desc"):
        raise ValueError("direction must be asc or desc")

    return sorted(rows, key=lambda r: _sort_value(r, sort_by), reverse=direction == "desc")


def pnl_totals(rows) -> PnlTotals:

    revenue = sum(r.total_revenue for r in rows)
    settlement = sum(r.total_settlement for r in rows)
    total_cost = sum(r.total_cost for r in rows)
    net_profit = settlement - total_cost

    return PnlTotals(
        revenue=revenue,
        settlement=settlement,
        fees=sum(r.total_fees for r in rows),
        qty=sum(r.total_qty for r in rows),
        total_cost=total_cost,
        net_profit=net_profit,
        cost_entered=sum(1 for r in rows if r.unit_cost > 0),
        margin=net_profit / revenue * 100 if revenue > 0 else 0.0
    )


def filter_platform(aggregates, platform):
    """Keep only one platform's shop buckets and re-total each SKU."""

    if not platform or platform == "all":
        return list(aggregates)

    result = []

    for agg in aggregates:

        shops = [s for s in agg.shops if s.platform == platform]

        if not shops:
            continue

        result.append(retotal(agg.model_copy(update={"shops": shops})))

    logger.info(f"Platform filter {platform}: {len(result)}/{len(aggregates)} SKUs")

    return result
