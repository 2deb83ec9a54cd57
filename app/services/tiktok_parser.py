# app/services/tiktok_parser.py

from app.core.logger import logger
from app.core.mapping import (
    TIKTOK_ORDER_COLUMNS,
    TIKTOK_ORDER_DATA_START,
    TIKTOK_ORDER_DETAIL_COLUMNS,
    TIKTOK_REPORT_ROWS,
    TIKTOK_REPORT_TEXT_ROWS,
    TIKTOK_REPORT_VALUE_COLUMN,
    TIKTOK_WITHDRAWAL_COLUMNS
)
from app.models.schema import (
    CanonicalIncome,
    CanonicalOrder,
    IncomeParseResult,
    IncomeSummary,
    OrderParseResult,
    Withdrawal
)
from app.services.cells import (
    RowMapping,
    first_cell_empty,
    parse_vn_number,
    report_progress,
    to_str
)
from app.services.classifier import classify_status, extract_sku
from app.services.errors import ParseError


ORDER_ROW = RowMapping(TIKTOK_ORDER_COLUMNS)
DETAIL_ROW = RowMapping(TIKTOK_ORDER_DETAIL_COLUMNS)
WITHDRAWAL_ROW = RowMapping(TIKTOK_WITHDRAWAL_COLUMNS)

ORDER_SHEET = "OrderSKUList"


# ---------------- Orders ----------------

def parse_tiktok_order_row(r) -> CanonicalOrder:

    status = ORDER_ROW.text(r, "status")
    substatus = ORDER_ROW.text(r, "substatus")
    seller_sku = ORDER_ROW.text(r, "seller_sku")

    qty = int(ORDER_ROW.number(r, "quantity"))

    return CanonicalOrder(
        order_id=ORDER_ROW.text(r, "order_id"),
        platform="tiktok",
        status=classify_status("tiktok", status, substatus),
        raw_status=status,
        substatus=substatus,
        sku=extract_sku("tiktok", seller_sku),
        seller_sku=seller_sku,
        variation=ORDER_ROW.text(r, "variation"),
        product_name=ORDER_ROW.text(r, "product_name"),
        quantity=qty if qty >= 1 else 1,
        revenue=ORDER_ROW.number(r, "subtotal_after_discount"),
        original_price=ORDER_ROW.number(r, "unit_original_price"),
        seller_discount=ORDER_ROW.number(r, "seller_discount"),
        platform_discount=ORDER_ROW.number(r, "platform_discount"),
        order_value=ORDER_ROW.number(r, "order_amount"),
        cancel_reason=ORDER_ROW.text(r, "cancel_reason"),
        cancel_by=ORDER_ROW.text(r, "cancel_by"),
        cancel_return_type=ORDER_ROW.text(r, "cancel_return_type"),
        province=ORDER_ROW.text(r, "province"),
        order_date=ORDER_ROW.date(r, "created_time")
    )


def pick_order_sheet(sheets):

    if ORDER_SHEET in sheets:
        return sheets[ORDER_SHEET]

    if not sheets:
        raise ParseError("Không tìm thấy sheet trong file")

    return next(iter(sheets.values()))


def parse_tiktok_orders(rows, on_progress=None) -> OrderParseResult:

    report_progress(on_progress, 30, "Đang đọc dữ liệu đơn hàng...")

    # row 0 = headers, row 1 = field descriptions
    if len(rows) <= TIKTOK_ORDER_DATA_START:
        raise ParseError("File không có dữ liệu đơn hàng")

    orders = []

    for r in rows[TIKTOK_ORDER_DATA_START:]:

        if first_cell_empty(r):
            continue

        orders.append(parse_tiktok_order_row(r))


    logger.info(f"Parsed {len(orders)} TikTok order rows")

    report_progress(on_progress, 100, "Hoàn tất!")

    return OrderParseResult(
        platform="tiktok",
        orders=orders,
        total_rows=len(rows) - TIKTOK_ORDER_DATA_START
    )


# ---------------- Income: "Reports" sheet ----------------

def _report_cell(rows, idx):

    if idx >= len(rows) or not rows[idx]:
        return None

    row = rows[idx]

    if TIKTOK_REPORT_VALUE_COLUMN >= len(row):
        return None

    return row[TIKTOK_REPORT_VALUE_COLUMN]


def parse_reports_sheet(rows) -> IncomeSummary:

    values = {
        key: parse_vn_number(_report_cell(rows, idx))
        for key, idx in TIKTOK_REPORT_ROWS.items()
    }

    return IncomeSummary(
        total_revenue=values["total_revenue"],
        total_settlement=values["total_settlement"],
        total_fees=abs(values["total_fees"]),
        total_tax=abs(values["vat_withheld"]) + abs(values["pit_withheld"]),
        period=to_str(_report_cell(rows, TIKTOK_REPORT_TEXT_ROWS["time_period"])),
        details=values
    )


# ---------------- Income: "Order details" sheet ----------------

def parse_detail_row(r) -> CanonicalIncome:

    affiliate = abs(DETAIL_ROW.number(r, "affiliate_commission")) + abs(DETAIL_ROW.number(r, "affiliate_shop_ads"))

    fees = DETAIL_ROW.number(r, "total_fees")
    vat = DETAIL_ROW.number(r, "vat_withheld")
    pit = DETAIL_ROW.number(r, "pit_withheld")

    return CanonicalIncome(
        order_id=DETAIL_ROW.text(r, "order_id"),
        platform="tiktok",
        record_type=DETAIL_ROW.text(r, "type") or "Order",
        settlement=DETAIL_ROW.number(r, "total_settlement"),
        revenue=DETAIL_ROW.number(r, "total_revenue"),
        total_fees=abs(fees),
        commission_fee=abs(DETAIL_ROW.number(r, "commission_fee")),
        affiliate_fee=affiliate,
        transaction_fee=abs(DETAIL_ROW.number(r, "transaction_fee")),
        processing_fee=abs(DETAIL_ROW.number(r, "order_processing_fee")),
        shipping_fee=abs(DETAIL_ROW.number(r, "seller_shipping_fee")),
        vat_tax=abs(vat),
        pit_tax=abs(pit),
        refund=DETAIL_ROW.number(r, "refund_after_discount"),
        reported_fees=fees,
        reported_tax=vat + pit,
        order_date=DETAIL_ROW.date(r, "created_time"),
        settled_date=DETAIL_ROW.date(r, "settled_time")
    )


def parse_order_details_sheet(rows):

    records = []

    for r in rows[1:]:

        if first_cell_empty(r):
            continue

        records.append(parse_detail_row(r))

    return records


def parse_withdrawal_sheet(rows):

    records = []

    for r in rows[1:]:

        if first_cell_empty(r):
            continue

        records.append(Withdrawal(
            type=WITHDRAWAL_ROW.text(r, "type"),
            reference_id=WITHDRAWAL_ROW.text(r, "reference_id"),
            request_time=WITHDRAWAL_ROW.text(r, "request_time"),
            amount=WITHDRAWAL_ROW.number(r, "amount"),
            status=WITHDRAWAL_ROW.text(r, "status")
        ))

    return records


# ---------------- Main ----------------

def parse_tiktok_income(sheets, on_progress=None) -> IncomeParseResult:

    report_progress(on_progress, 30, "Đang đọc báo cáo tổng hợp...")

    if "Reports" not in sheets:
        raise ParseError('Không tìm thấy sheet "Reports" trong file TikTok Income')

    summary = parse_reports_sheet(sheets["Reports"])


    report_progress(on_progress, 60, "Đang xử lý chi tiết đơn hàng...")

    orders = parse_order_details_sheet(sheets.get("Order details", []))


    report_progress(on_progress, 85, "Đang đọc lịch sử rút tiền...")

    withdrawals = parse_withdrawal_sheet(sheets.get("Withdrawal records", []))


    logger.info(f"Parsed TikTok income: {len(orders)} records, {len(withdrawals)} withdrawals")

    report_progress(on_progress, 100, "Hoàn tất!")

    return IncomeParseResult(
        platform="tiktok",
        summary=summary,
        orders=orders,
        withdrawals=withdrawals
    )
