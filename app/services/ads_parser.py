from app.core.logger import logger
from app.core.mapping import ADS_ACTIVE_STATUS, TIKTOK_ADS_HEADERS, TIKTOK_ADS_NUMERIC
from app.models.schema import AdCreative, AdGroup, AdsParseResult, AdsSummary
from app.services.cells import parse_vn_number, report_progress, to_str
from app.services.errors import ParseError


def pick_ads_sheet(sheets):

    for name, rows in sheets.items():
        if name.lower() == "data":
            return rows

    if not sheets:
        raise ParseError("Không tìm thấy sheet trong file")

    return next(iter(sheets.values()))


def _ratio(num, den):
    return num / den if den > 0 else 0.0


def _group(key, items):

    cost = sum(c.cost for c in items)
    orders = sum(c.orders for c in items)
    revenue = sum(c.gross_revenue for c in items)

    return AdGroup(
        key=key,
        name=items[0].campaign_name,
        total_cost=cost,
        total_orders=orders,
        total_revenue=revenue,
        avg_roi=_ratio(revenue, cost),
        avg_cost_per_order=_ratio(cost, orders),
        creatives_count=len(items),
        active_count=sum(1 for c in items if c.status == ADS_ACTIVE_STATUS)
    )


def parse_tiktok_ads(rows, on_progress=None) -> AdsParseResult:

    report_progress(on_progress, 30, "Đang phân tích dữ liệu...")

    if not rows:
        raise ParseError("File không có dữ liệu quảng cáo")

    header = [to_str(h) for h in rows[0]]

    # column index -> creative field
    columns = {
        i: TIKTOK_ADS_HEADERS[h]
        for i, h in enumerate(header)
        if h in TIKTOK_ADS_HEADERS
    }

    if not columns:
        raise ParseError("Không nhận diện được cột trong báo cáo quảng cáo")


    creatives = []

    for r in rows[1:]:

        if not r or all(c is None or to_str(c) == "" for c in r):
            continue

        fields = {}

        for i, key in columns.items():

            value = r[i] if i < len(r) else None

            fields[key] = parse_vn_number(value) if key in TIKTOK_ADS_NUMERIC else to_str(value)

        creatives.append(AdCreative(**fields))


    report_progress(on_progress, 70, "Đang tính toán chiến dịch...")

    by_campaign = {}
    by_product = {}

    for c in creatives:
        by_campaign.setdefault(c.campaign_id or c.campaign_name, []).append(c)
        by_product.setdefault(c.product_id, []).append(c)

    campaigns = [_group(k, v) for k, v in by_campaign.items()]
    products = [_group(k, v) for k, v in by_product.items()]


    cost = sum(c.cost for c in creatives)
    orders = sum(c.orders for c in creatives)
    revenue = sum(c.gross_revenue for c in creatives)
    impressions = sum(c.impressions for c in creatives)
    clicks = sum(c.clicks for c in creatives)

    summary = AdsSummary(
        total_cost=cost,
        total_orders=orders,
        total_revenue=revenue,
        avg_roi=_ratio(revenue, cost),
        avg_ctr=_ratio(clicks, impressions),
        avg_conversion_rate=_ratio(orders, clicks),
        total_impressions=impressions,
        total_clicks=clicks,
        total_creatives=len(creatives),
        active_creatives=sum(1 for c in creatives if c.status == ADS_ACTIVE_STATUS)
    )

    logger.info(f"Parsed {len(creatives)} ad creatives in {len(campaigns)} campaigns")

    report_progress(on_progress, 100, "Hoàn tất!")

    return AdsParseResult(
        creatives=creatives,
        campaigns=campaigns,
        products=products,
        summary=summary
    )
