from datetime import date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


FileType = Literal["income", "orders", "products", "wallet"]
Platform = Literal["shopee", "tiktok"]
DataType = Literal["income", "orders", "ads"]
OrderStatus = Literal["completed", "cancelled", "other"]
AbcTier = Literal["A", "B", "C"]


# ---------------- Orders ----------------

class CanonicalOrder(BaseModel):
    order_id: str
    platform: Platform
    status: OrderStatus
    raw_status: str = ""
    substatus: str = ""
    sku: str = "N/A"
    seller_sku: str = ""
    variation: str = ""
    product_name: str = ""
    quantity: int = Field(default=1, ge=1)
    revenue: float = 0
    original_price: float = 0
    seller_discount: float = 0
    platform_discount: float = 0
    order_value: float = 0
    seller_fees: float = 0
    cancel_reason: str = ""
    cancel_by: str = ""
    cancel_return_type: str = ""
    province: str = ""
    order_date: Optional[date] = None


class OrderParseResult(BaseModel):
    platform: Platform
    orders: List[CanonicalOrder]
    total_rows: int


# ---------------- Income ----------------

class CanonicalIncome(BaseModel):
    order_id: str
    platform: Platform
    record_type: str = "Order"
    settlement: float = 0
    revenue: float = 0
    total_fees: float = 0
    commission_fee: float = 0
    affiliate_fee: float = 0
    transaction_fee: float = 0
    processing_fee: float = 0
    shipping_fee: float = 0
    fixed_fee: float = 0
    service_fee: float = 0
    payment_fee: float = 0
    vat_tax: float = 0
    pit_tax: float = 0
    refund: float = 0
    # signed as exported (expenses negative)
    reported_fees: float = 0
    reported_tax: float = 0
    order_date: Optional[date] = None
    settled_date: Optional[date] = None


class DailyIncome(BaseModel):
    day: date
    order_count: int = 0
    product_price: float = 0
    total_payment: float = 0
    total_fees: float = 0
    total_tax: float = 0
    fixed_fee: float = 0
    service_fee: float = 0
    payment_fee: float = 0
    affiliate_fee: float = 0
    refund: float = 0


class Adjustment(BaseModel):
    day: Optional[date] = None
    type: str = ""
    amount: float = 0
    related_order_id: str = ""


class Withdrawal(BaseModel):
    type: str = ""
    reference_id: str = ""
    request_time: str = ""
    amount: float = 0
    status: str = ""


class IncomeSummary(BaseModel):
    total_revenue: float = 0
    total_settlement: float = 0
    total_fees: float = 0
    total_tax: float = 0
    period: str = ""
    shop_name: str = ""
    details: Dict[str, float] = {}


class IncomeParseResult(BaseModel):
    platform: Platform
    summary: IncomeSummary
    orders: List[CanonicalIncome]
    daily_income: List[DailyIncome] = []
    adjustments: List[Adjustment] = []
    withdrawals: List[Withdrawal] = []


# ---------------- Ads ----------------

class AdCreative(BaseModel):
    campaign_name: str = ""
    campaign_id: str = ""
    product_id: str = ""
    creative_type: str = ""
    video_title: str = ""
    status: str = ""
    cost: float = 0
    orders: float = 0
    cost_per_order: float = 0
    gross_revenue: float = 0
    roi: float = 0
    impressions: float = 0
    clicks: float = 0
    ctr: float = 0
    conversion_rate: float = 0
    currency: str = ""


class AdGroup(BaseModel):
    key: str
    name: str = ""
    total_cost: float = 0
    total_orders: float = 0
    total_revenue: float = 0
    avg_roi: float = 0
    avg_cost_per_order: float = 0
    creatives_count: int = 0
    active_count: int = 0


class AdsSummary(BaseModel):
    total_cost: float = 0
    total_orders: float = 0
    total_revenue: float = 0
    avg_roi: float = 0
    avg_ctr: float = 0
    avg_conversion_rate: float = 0
    total_impressions: float = 0
    total_clicks: float = 0
    total_creatives: int = 0
    active_creatives: int = 0


class AdsParseResult(BaseModel):
    creatives: List[AdCreative]
    campaigns: List[AdGroup]
    products: List[AdGroup]
    summary: AdsSummary


# ---------------- Uploads ----------------

class UploadSummary(BaseModel):
    total_orders: int = 0
    total_revenue: float = 0
    total_completed: int = 0
    total_cancelled: int = 0
    total_settlement: float = 0
    total_fees: float = 0


class Shop(BaseModel):
    id: str
    name: str
    platform: Platform
    description: Optional[str] = None
    created_at: datetime


class ShopCreate(BaseModel):
    name: str
    platform: Platform
    description: Optional[str] = None


class ShopUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class MonthlyUpload(BaseModel):
    id: str
    shop_id: str
    data_type: DataType
    month: str
    file_name: str
    file_size: int = 0
    file_path: str = ""
    raw_data: Optional[str] = None
    summary: UploadSummary
    uploaded_at: datetime


# ---------------- SKU / P&L ----------------

class SkuShopData(BaseModel):
    shop_id: str
    shop_name: str
    platform: Platform
    orders: int = 0
    completed: int = 0
    cancelled: int = 0
    revenue: float = 0
    settlement: float = 0
    fees: float = 0
    qty: int = 0


class SkuAggregate(BaseModel):
    sku: str
    product_name: str = ""
    shops: List[SkuShopData] = []
    total_orders: int = 0
    total_completed: int = 0
    total_cancelled: int = 0
    total_revenue: float = 0
    total_settlement: float = 0
    total_fees: float = 0
    total_qty: int = 0
    cancel_rate: float = 0


class PnlRow(SkuAggregate):
    unit_cost: float = 0
    total_cost: float = 0
    net_profit: Optional[float] = None
    margin: Optional[float] = None
    profit_per_unit: Optional[float] = None
    fee_rate: float = 0
    cum_pct: float = 0
    tier: AbcTier = "C"


class PnlTotals(BaseModel):
    revenue: float = 0
    settlement: float = 0
    fees: float = 0
    qty: int = 0
    total_cost: float = 0
    net_profit: float = 0
    cost_entered: int = 0
    margin: float = 0


class CostEntry(BaseModel):
    sku: str
    cost: float


# ---------------- Dashboard ----------------

class MonthlyRevenue(BaseModel):
    month: str
    revenue: float = 0
    settlement: float = 0
    fees: float = 0


class MonthlyOrders(BaseModel):
    month: str
    orders: int = 0
    completed: int = 0
    cancelled: int = 0


class ShopStats(BaseModel):
    id: str
    name: str
    platform: Platform
    revenue: float = 0
    settlement: float = 0
    fees: float = 0
    orders: int = 0
    completed: int = 0
    cancelled: int = 0
    monthly_revenue: List[MonthlyRevenue] = []
    monthly_orders: List[MonthlyOrders] = []


class TrendPoint(BaseModel):
    month: str
    revenue: float = 0
    orders: int = 0
    fees: float = 0


class PlatformStats(BaseModel):
    shops: int = 0
    revenue: float = 0
    orders: int = 0


# ---------------- Reports ----------------

class RevenueSummary(BaseModel):
    total_revenue: float = 0
    total_fees_and_tax: float = 0
    total_settlement: float = 0
    total_orders: int = 0


class AdsUploadReport(BaseModel):
    id: str
    shop_id: str
    platform: Platform = "tiktok"
    month: str
    file_name: str
    file_size: int = 0
    total_cost: float = 0
    total_orders: int = 0
    total_revenue: float = 0
    total_creatives: int = 0
    total_campaigns: int = 0
    uploaded_at: datetime
