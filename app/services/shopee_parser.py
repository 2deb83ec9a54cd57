# app/services/shopee_parser.py

from app.core.logger import logger
from app.core.mapping import (
    SHOPEE_INCOME_COLUMNS,
    SHOPEE_INCOME_DATA_START,
    SHOPEE_ORDER_COLUMNS,
    SHOPEE_SUMMARY_LABELS,
    SHOPEE_SUMMARY_TEXT_LABELS
)
from app.models.schema import (
    Adjustment,
    CanonicalIncome,
    CanonicalOrder,
    DailyIncome,
    IncomeParseResult,
    IncomeSummary,
    OrderParseResult
)
from app.services.cells import (
    RowMapping,
    first_cell_empty,
    parse_date,
    parse_vn_number,
    report_progress,
    to_str
)
from app.services.classifier import classify_status, extract_sku, normalize_shopee_status
from app.services.errors import ParseError


ORDER_ROW = RowMapping(SHOPEE_ORDER_COLUMNS)
INCOME_ROW = RowMapping(SHOPEE_INCOME_COLUMNS)


# ---------------- Orders ----------------

def parse_shopee_order_row(r) -> CanonicalOrder:

    status = normalize_shopee_status(ORDER_ROW.text(r, "status"))

    qty = int(ORDER_ROW.number(r, "quantity"))

    fees = (
        abs(ORDER_ROW.number(r, "fixed_fee"))
        + abs(ORDER_ROW.number(r, "service_fee"))
        + abs(ORDER_ROW.number(r, "payment_fee"))
    )

    raw_sku = ORDER_ROW.text(r, "sku")

    return CanonicalOrder(
        order_id=ORDER_ROW.text(r, "order_id"),
        platform="shopee",
        status=classify_status("shopee", status),
        raw_status=status,
        sku=extract_sku("shopee", raw_sku),
        seller_sku=raw_sku,
        variation=ORDER_ROW.text(r, "variation"),
        product_name=ORDER_ROW.text(r, "product_name"),
        quantity=qty if qty >= 1 else 1,
        revenue=ORDER_ROW.number(r, "total_product_price"),
        original_price=ORDER_ROW.number(r, "original_price"),
        seller_discount=ORDER_ROW.number(r, "seller_discount"),
        platform_discount=ORDER_ROW.number(r, "platform_discount"),
        order_value=ORDER_ROW.number(r, "total_order_value"),
        seller_fees=fees,
        cancel_reason=ORDER_ROW.text(r, "cancel_reason"),
        cancel_return_type=ORDER_ROW.text(r, "return_status"),
        province=ORDER_ROW.text(r, "province"),
        order_date=ORDER_ROW.date(r, "order_date")
    )


def parse_shopee_orders(rows, on_progress=None) -> OrderParseResult:

    report_progress(on_progress, 30, "Đang đọc dữ liệu...")

    if len(rows) < 2:
        raise ParseError("File không có dữ liệu")

    orders = []

    for r in rows[1:]:

        if first_cell_empty(r):
            continue

        orders.append(parse_shopee_order_row(r))


    logger.info(f"Parsed {len(orders)} Shopee order rows")

    report_progress(on_progress, 100, "Hoàn tất!")

    return OrderParseResult(
        platform="shopee",
        orders=orders,
        total_rows=len(rows) - 1
    )


# ---------------- Income: Summary sheet ----------------

def find_summary_value(rows, label):
    """
    Find a labelled amount in the Summary sheet.

    The label may sit in any column; the amount is the rightmost numeric
    cell after it (main items keep it in column D, sub-items in column C).
    """

    for row in rows:

        if not row:
            continue

        for c, cell in enumerate(row):

            if cell is None or label not in str(cell):
                continue

            for v in range(len(row) - 1, c, -1):

                num = parse_vn_number(row[v])

                if num != 0 or to_str(row[v]) == "0":
                    return num

            return parse_vn_number(row[c + 1]) if c + 1 < len(row) else 0.0

    return 0.0


def find_summary_text(rows, label):

    for row in rows:

        if row and row[0] is not None and label in str(row[0]):
            return to_str(row[1]) if len(row) > 1 else ""

    return ""


def parse_summary_sheet(rows) -> IncomeSummary:

    values = {
        key: find_summary_value(rows, label)
        for key, label in SHOPEE_SUMMARY_LABELS.items()
    }

    texts = {
        key: find_summary_text(rows, label)
        for key, label in SHOPEE_SUMMARY_TEXT_LABELS.items()
    }

    period = ""

    if texts["period_from"] or texts["period_to"]:
        period = f"{texts['period_from']} - {texts['period_to']}"

    return IncomeSummary(
        total_revenue=values["total_revenue"],
        total_settlement=values["net_revenue"],
        total_fees=abs(values["total_fees"]),
        total_tax=abs(values["vat_tax"]) + abs(values["pit_tax"]),
        period=period,
        shop_name=texts["shop_name"],
        details=values
    )


# ---------------- Income: "Doanh thu" sheets ----------------

def parse_income_row(r) -> CanonicalIncome:

    fee_cells = [
        INCOME_ROW.number(r, key)
        for key in ("fixed_fee", "service_fee", "payment_fee", "affiliate_fee", "piship_fee")
    ]

    fixed, service, payment, affiliate, piship = (abs(v) for v in fee_cells)

    vat = INCOME_ROW.number(r, "vat_tax")
    pit = INCOME_ROW.number(r, "pit_tax")
    refund = INCOME_ROW.number(r, "refund")

    return CanonicalIncome(
        order_id=INCOME_ROW.text(r, "order_id"),
        platform="shopee",
        record_type="Order",
        settlement=INCOME_ROW.number(r, "total_paid"),
        revenue=INCOME_ROW.number(r, "product_price") + refund,
        total_fees=fixed + service + payment + affiliate + piship,
        fixed_fee=fixed,
        service_fee=service,
        payment_fee=payment,
        affiliate_fee=affiliate,
        processing_fee=piship,
        shipping_fee=abs(INCOME_ROW.number(r, "shipping_actual")),
        vat_tax=abs(vat),
        pit_tax=abs(pit),
        refund=refund,
        reported_fees=sum(fee_cells),
        reported_tax=vat + pit,
        order_date=INCOME_ROW.date(r, "order_date"),
        settled_date=INCOME_ROW.date(r, "payment_date")
    )


def parse_doanh_thu_sheet(rows):

    records = []

    for r in rows[SHOPEE_INCOME_DATA_START:]:

        if first_cell_empty(r):
            continue

        # "Sku" rows repeat the order per product line
        if INCOME_ROW.text(r, "row_type") != "Order":
            continue

        records.append(parse_income_row(r))

    return records


def aggregate_daily_income(records):

    by_day = {}

    for rec in records:

        day = rec.settled_date or rec.order_date

        if day is None:
            continue

        if day not in by_day:
            by_day[day] = DailyIncome(day=day)

        d = by_day[day]

        d.order_count += 1
        d.product_price += rec.revenue
        d.total_payment += rec.settlement
        d.total_fees += rec.total_fees
        d.total_tax += rec.vat_tax + rec.pit_tax
        d.fixed_fee += rec.fixed_fee
        d.service_fee += rec.service_fee
        d.payment_fee += rec.payment_fee
        d.affiliate_fee += rec.affiliate_fee
        d.refund += rec.refund

    return [by_day[k] for k in sorted(by_day)]


# ---------------- Income: Adjustment sheets ----------------

def parse_adjustment_sheet(rows):

    records = []
    started = False

    for r in rows:

        if not r:
            continue

        first = to_str(r[0])

        if "Mã giao dịch" in first:
            started = True
            continue

        if not started:
            continue

        if "Tổng cộng" in first:
            break

        if not isinstance(r[0], (int, float)) or isinstance(r[0], bool):
            continue

        records.append(Adjustment(
            day=parse_date(r[1]) if len(r) > 1 else None,
            type=to_str(r[2]) if len(r) > 2 else "",
            amount=parse_vn_number(r[4]) if len(r) > 4 else 0.0,
            related_order_id=to_str(r[5]) if len(r) > 5 else ""
        ))

    return records


# ---------------- Main ----------------

def parse_shopee_income(sheets, on_progress=None) -> IncomeParseResult:

    report_progress(on_progress, 30, "Đang đọc bảng tổng hợp...")

    if "Summary" not in sheets:
        raise ParseError('Không tìm thấy sheet "Summary" trong file Income')

    summary = parse_summary_sheet(sheets["Summary"])


    doanh_thu = [n for n in sheets if n.startswith("Doanh thu")]

    if not doanh_thu:
        raise ParseError('Không tìm thấy sheet "Doanh thu" trong file Income')

    orders = []

    for i, name in enumerate(doanh_thu):

        pct = 30 + round(i / len(doanh_thu) * 50)

        report_progress(on_progress, pct, f"Đang xử lý {name} ({i + 1}/{len(doanh_thu)})...")

        orders.extend(parse_doanh_thu_sheet(sheets[name]))


    report_progress(on_progress, 80, f"Đang tổng hợp {len(orders)} đơn hàng...")

    daily = aggregate_daily_income(orders)


    report_progress(on_progress, 90, "Đang xử lý điều chỉnh...")

    adjustments = []

    for name in sheets:
        if name.startswith("Adjustment"):
            adjustments.extend(parse_adjustment_sheet(sheets[name]))


    logger.info(
        f"Parsed Shopee income: {len(orders)} orders, "
        f"{len(daily)} days, {len(adjustments)} adjustments"
    )

    report_progress(on_progress, 100, "Hoàn tất!")

    return IncomeParseResult(
        platform="shopee",
        summary=summary,
        orders=orders,
        daily_income=daily,
        adjustments=adjustments
    )
