import pytest

from app.services.classifier import classify_status, extract_sku, normalize_shopee_status


@pytest.mark.parametrize("status, substatus, expected", [
    ("Đã vận chuyển", "Đã giao", "completed"),
    ("Đã vận chuyển", "", "completed"),
    ("Hoàn tất", "", "completed"),
    ("Đã hủy", "Đã giao", "cancelled"),
    ("Đã hủy", "", "cancelled"),
    ("Chờ vận chuyển", "Chờ lấy hàng", "other"),
    ("Đã vận chuyển", "Đang giao", "other"),
])
def test_tiktok_status(status, substatus, expected):
    assert classify_status("tiktok", status, substatus) == expected


@pytest.mark.parametrize("status, expected", [
    ("Hoàn thành", "completed"),
    ("Đã nhận hàng", "completed"),
    ("Người mua xác nhận nhận hàng", "completed"),
    ("Đã hủy", "cancelled"),
    ("Đang giao", "other"),
    ("", "other"),
])
def test_shopee_status(status, expected):
    assert classify_status("shopee", status) == expected


def test_buyer_confirmed_is_normalized():
    assert normalize_shopee_status("Người mua xác nhận đã nhận được hàng") == "Đã nhận hàng"


def test_classification_is_idempotent():
    for platform, status, sub in [("tiktok", "Đã hủy", "Đã giao"), ("shopee", "Người mua xác nhận", "")]:
        first = classify_status(platform, status, sub)
        assert all(classify_status(platform, status, sub) == first for _ in range(3))


@pytest.mark.parametrize("raw, expected", [
    ("ABC123-RED", "ABC123"),
    ("abc123-red", "ABC123"),
    ("SP01XL", "SP01"),
    ("123-ABC", "123-ABC"),
    ("", "N/A"),
])
def test_tiktok_sku(raw, expected):
    assert extract_sku("tiktok", raw) == expected


def test_shopee_sku_is_verbatim():
    assert extract_sku("shopee", "abc123-red") == "abc123-red"
    assert extract_sku("shopee", "") == "N/A"
