# app/core/mapping.py


# ---------------- STATUS VOCABULARY ----------------

TIKTOK_COMPLETED = {
    "Đã giao",
    "Hoàn tất",
    "Đã hoàn tất",
    "Đã vận chuyển"
}

SHOPEE_COMPLETED = {
    "Hoàn thành",
    "Đã nhận hàng"
}

CANCELLED_STATUS = "Đã hủy"

SHOPEE_BUYER_CONFIRMED_PREFIX = "Người mua xác nhận"
SHOPEE_BUYER_CONFIRMED = "Đã nhận hàng"


# ---------------- FILE DETECTION ----------------

FILE_TYPE_LABELS = {
    "income": "Báo cáo Thu nhập (Excel)",
    "orders": "Đơn hàng (Excel)",
    "products": "Sản phẩm (Excel)",
    "wallet": "Giao dịch Ví (Excel)"
}


FILENAME_HINTS = [
    ("income", ["income"]),
    ("wallet", ["balance_transaction", "wallet", "giao_dich", "bien_dong"]),
    ("orders", ["order.all", "order_all"]),
    ("products", ["productoverview", "product_overview"])
]


HEADER_HINTS = [
    ("orders", ["mã đơn hàng", "trạng thái đơn hàng"]),
    ("products", ["lượt truy cập sản phẩm", "lượt xem trang sản phẩm"]),
    ("wallet", ["loại giao dịch", "dòng tiền", "số dư ví"])
]


GENERIC_FILENAME_HINTS = [
    ("orders", ["order"]),
    ("products", ["product", "overview"])
]


# ---------------- SHOPEE ORDER (Order.all export) ----------------

# 0-indexed columns, header on row 0
SHOPEE_ORDER_COLUMNS = {
    "order_id": 0,
    "package_id": 1,
    "order_date": 2,
    "status": 3,
    "cancel_reason": 5,
    "return_status": 14,
    "sku": 15,
    "product_name": 16,
    "variant_sku": 20,
    "variation": 21,
    "original_price": 22,
    "seller_discount": 23,
    "platform_discount": 24,
    "total_discount": 25,
    "sale_price": 26,
    "quantity": 27,
    "return_quantity": 28,
    "total_product_price": 29,
    "total_order_value": 30,
    "completed_time": 47,
    "fixed_fee": 50,
    "service_fee": 51,
    "payment_fee": 52,
    "province": 57
}


# ---------------- SHOPEE INCOME ("Doanh thu" sheets) ----------------

SHOPEE_INCOME_DATA_START = 3

SHOPEE_INCOME_COLUMNS = {
    "row_no": 0,
    "row_type": 1,
    "order_id": 2,
    "order_date": 7,
    "payment_date": 8,
    "payment_method": 9,
    "order_type": 10,
    "total_paid": 12,
    "product_price": 13,
    "refund": 14,
    "shipping_buyer_paid": 15,
    "shipping_actual": 16,
    "shipping_subsidy": 17,
    "shipping_return": 18,
    "fixed_fee": 26,
    "service_fee": 27,
    "payment_fee": 28,
    "affiliate_fee": 29,
    "piship_fee": 30,
    "vat_tax": 32,
    "pit_tax": 33
}


# Summary sheet: canonical key -> label searched by substring
SHOPEE_SUMMARY_LABELS = {
    "total_revenue": "1. Tổng doanh thu",
    "product_total": "Tổng hàng hóa",
    "original_price": "Giá gốc",
    "seller_discount": "Số tiền bạn trợ giá",
    "refund_amount": "Số tiền hoàn lại",
    "total_costs": "2. Tổng chi phí",
    "shipping_buyer_paid": "Phí vận chuyển Người mua trả",
    "shipping_actual": "Phí vận chuyển thực tế",
    "fixed_fee": "Phí cố định",
    "service_fee": "Phí Dịch Vụ",
    "payment_fee": "Phí thanh toán",
    "affiliate_fee": "Phí hoa hồng Tiếp thị liên kết",
    "piship_fee": "Phí dịch vụ PiShip",
    "total_fees": "Phụ phí",
    "vat_tax": "Thuế GTGT",
    "pit_tax": "Thuế TNCN",
    "total_tax": "Thuế",
    "net_revenue": "3. Tổng số tiền"
}

SHOPEE_SUMMARY_TEXT_LABELS = {
    "shop_name": "Người Bán",
    "period_from": "Từ",
    "period_to": "Đến"
}


# ---------------- TIKTOK ORDER (Order SKU List export) ----------------

# header on row 0, field descriptions on row 1
TIKTOK_ORDER_DATA_START = 2

TIKTOK_ORDER_COLUMNS = {
    "order_id": 0,
    "status": 1,
    "substatus": 2,
    "cancel_return_type": 3,
    "sku_id": 5,
    "seller_sku": 6,
    "product_name": 7,
    "variation": 8,
    "quantity": 9,
    "return_quantity": 10,
    "unit_original_price": 11,
    "subtotal_before_discount": 12,
    "platform_discount": 13,
    "seller_discount": 14,
    "subtotal_after_discount": 15,
    "order_amount": 22,
    "created_time": 24,
    "cancel_by": 30,
    "cancel_reason": 31,
    "province": 42
}


# ---------------- TIKTOK INCOME ----------------

TIKTOK_ORDER_DETAIL_COLUMNS = {
    "order_id": 0,
    "type": 1,
    "created_time": 2,
    "settled_time": 3,
    "currency": 4,
    "total_settlement": 5,
    "total_revenue": 6,
    "subtotal_after_discount": 7,
    "refund_after_discount": 10,
    "total_fees": 13,
    "transaction_fee": 14,
    "commission_fee": 15,
    "seller_shipping_fee": 16,
    "affiliate_commission": 25,
    "affiliate_shop_ads": 28,
    "order_processing_fee": 39,
    "vat_withheld": 42,
    "pit_withheld": 43
}


# "Reports" sheet: values live in column F at fixed rows
TIKTOK_REPORT_VALUE_COLUMN = 5

TIKTOK_REPORT_TEXT_ROWS = {
    "time_period": 1,
    "timezone": 2,
    "currency": 3
}

TIKTOK_REPORT_ROWS = {
    "total_settlement": 5,
    "total_revenue": 6,
    "subtotal_after_discount": 7,
    "subtotal_before_discount": 8,
    "seller_discounts": 9,
    "refund_after_discount": 10,
    "total_fees": 13,
    "transaction_fee": 14,
    "commission_fee": 15,
    "seller_shipping_fee": 16,
    "affiliate_commission": 25,
    "affiliate_shop_ads": 28,
    "voucher_xtra_fee": 38,
    "order_processing_fee": 39,
    "flash_sale_fee": 41,
    "vat_withheld": 42,
    "pit_withheld": 43,
    "total_adjustments": 47
}


TIKTOK_WITHDRAWAL_COLUMNS = {
    "type": 0,
    "reference_id": 1,
    "request_time": 2,
    "amount": 3,
    "status": 4,
    "success_time": 5,
    "bank_account": 6
}


# ---------------- TIKTOK ADS (creative report) ----------------

TIKTOK_ADS_HEADERS = {
    "Tên chiến dịch": "campaign_name",
    "ID chiến dịch": "campaign_id",
    "ID sản phẩm": "product_id",
    "Loại nội dung sáng tạo": "creative_type",
    "Tiêu đề video": "video_title",
    "Trạng thái": "status",
    "Chi phí": "cost",
    "Số lượng đơn hàng SKU": "orders",
    "Chi phí cho mỗi đơn hàng": "cost_per_order",
    "Doanh thu gộp": "gross_revenue",
    "ROI": "roi",
    "Số lượt hiển thị quảng cáo sản phẩm": "impressions",
    "Số lượt nhấp vào quảng cáo sản phẩm": "clicks",
    "Tỷ lệ nhấp vào quảng cáo sản phẩm": "ctr",
    "Tỷ lệ chuyển đổi quảng cáo": "conversion_rate",
    "Đơn vị tiền tệ": "currency"
}

TIKTOK_ADS_NUMERIC = {
    "cost",
    "orders",
    "cost_per_order",
    "gross_revenue",
    "roi",
    "impressions",
    "clicks",
    "ctr",
    "conversion_rate"
}

ADS_ACTIVE_STATUS = "Đang phân phối"
