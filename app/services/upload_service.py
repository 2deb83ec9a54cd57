from app.core.logger import logger
from app.models.schema import AdsParseResult, IncomeParseResult, OrderParseResult, UploadSummary
from app.services.ads_parser import parse_tiktok_ads, pick_ads_sheet
from app.services.errors import ParseError
from app.services.excel_service import read_workbook
from app.services.shopee_parser import parse_shopee_income, parse_shopee_orders
from app.services.tiktok_parser import parse_tiktok_income, parse_tiktok_orders, pick_order_sheet


# ---------------- Dispatch ----------------

def parse_sheets(platform, data_type, sheets, on_progress=None):

    if not sheets:
        raise ParseError("Không tìm thấy sheet trong file")

    if data_type == "income":

        if platform == "shopee":
            return parse_shopee_income(sheets, on_progress)

        return parse_tiktok_income(sheets, on_progress)


    if data_type == "orders":

        if platform == "shopee":
            return parse_shopee_orders(next(iter(sheets.values())), on_progress)

        return parse_tiktok_orders(pick_order_sheet(sheets), on_progress)


    if data_type == "ads":

        if platform != "tiktok":
            raise ParseError("Báo cáo quảng cáo chỉ hỗ trợ TikTok Shop")

        return parse_tiktok_ads(pick_ads_sheet(sheets), on_progress)


    raise ParseError(f"Loại dữ liệu không hỗ trợ: {data_type}")


def parse_upload(platform, data_type, path, on_progress=None):

    logger.info(f"Parsing {platform}/{data_type} upload: {path}")

    if on_progress is not None:
        on_progress(5, "Đang đọc file Excel...")

    sheets = read_workbook(path)

    return parse_sheets(platform, data_type, sheets, on_progress)


# ---------------- Summary ----------------

def compute_summary(data_type, platform, parsed) -> UploadSummary:
    """Scalar totals stored next to the raw JSON for quick display."""

    if isinstance(parsed, IncomeParseResult):

        return UploadSummary(
            total_orders=len(parsed.orders),
            total_revenue=parsed.summary.total_revenue,
            total_completed=len(parsed.orders),
            total_cancelled=0,
            total_settlement=parsed.summary.total_settlement,
            total_fees=abs(parsed.summary.total_fees)
        )


    if isinstance(parsed, OrderParseResult):

        orders = parsed.orders

        revenue = sum(
            o.order_value if platform == "shopee" else o.revenue
            for o in orders
        )

        return UploadSummary(
            total_orders=parsed.total_rows or len(orders),
            total_revenue=revenue,
            total_completed=sum(1 for o in orders if o.status == "completed"),
            total_cancelled=sum(1 for o in orders if o.status == "cancelled"),
            total_settlement=0,
            total_fees=sum(o.seller_fees for o in orders)
        )


    if isinstance(parsed, AdsParseResult):

        # settlement carries the ad spend for ads uploads
        return UploadSummary(
            total_orders=int(parsed.summary.total_orders),
            total_revenue=parsed.summary.total_revenue,
            total_settlement=parsed.summary.total_cost
        )


    logger.warning(f"No summary rule for {platform}/{data_type}")

    return UploadSummary()
