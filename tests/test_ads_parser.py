import pytest

from app.services.ads_parser import parse_tiktok_ads, pick_ads_sheet
from app.services.errors import ParseError


HEADER = [
    "Tên chiến dịch", "ID chiến dịch", "ID sản phẩm", "Loại nội dung sáng tạo",
    "Trạng thái", "Chi phí", "Số lượng đơn hàng SKU", "Doanh thu gộp",
    "Số lượt hiển thị quảng cáo sản phẩm", "Số lượt nhấp vào quảng cáo sản phẩm",
]


def test_ads_rollups():
    rows = [
        HEADER,
        ["Tết", "C1", "P1", "Video", "Đang phân phối", "100.000", 4, "1.000.000", 2000, 100],
        ["Tết", "C1", "P2", "Thẻ sản phẩm", "Không khả dụng", 50000, 1, 200000, 1000, 50],
        ["Sale", "C2", "P1", "Video", "Đang phân phối", "-", "N/A", 0, 0, 0],
        [None] * 10,
    ]

    result = parse_tiktok_ads(rows)

    assert result.summary.total_creatives == 3
    assert result.summary.active_creatives == 2
    assert result.summary.total_cost == 150000
    assert result.summary.total_revenue == 1200000
    assert result.summary.avg_roi == 8
    assert result.summary.avg_ctr == pytest.approx(150 / 3000)

    campaigns = {c.key: c for c in result.campaigns}
    assert campaigns["C1"].creatives_count == 2
    assert campaigns["C1"].active_count == 1
    assert campaigns["C2"].avg_roi == 0

    products = {p.key: p for p in result.products}
    assert products["P1"].total_orders == 4
    assert products["P1"].avg_cost_per_order == 25000


def test_ads_unknown_header():
    with pytest.raises(ParseError):
        parse_tiktok_ads([["foo", "bar"], [1, 2]])


def test_pick_ads_sheet():
    assert pick_ads_sheet({"Info": [["a"]], "Data": [["b"]]}) == [["b"]]
