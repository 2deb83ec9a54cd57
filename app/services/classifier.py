import re

from app.core.mapping import (
    CANCELLED_STATUS,
    SHOPEE_BUYER_CONFIRMED,
    SHOPEE_BUYER_CONFIRMED_PREFIX,
    SHOPEE_COMPLETED,
    TIKTOK_COMPLETED
)


TIKTOK_SKU = re.compile(r"^([A-Za-z]+\d+)")


# ---------------- Status ----------------

def normalize_shopee_status(status: str) -> str:

    status = (status or "").strip()

    if status.startswith(SHOPEE_BUYER_CONFIRMED_PREFIX):
        return SHOPEE_BUYER_CONFIRMED

    return status


def classify_status(platform: str, status: str, substatus: str = "") -> str:
    """
    Map a platform status string onto completed / cancelled / other.

    TikTok judges completion on the substatus (falling back to status) but
    cancellation on the top-level status only. A cancelled status always wins.
    """

    status = (status or "").strip()
    substatus = (substatus or "").strip()

    if platform == "tiktok":

        if status == CANCELLED_STATUS:
            return "cancelled"

        if (substatus or status) in TIKTOK_COMPLETED:
            return "completed"

        return "other"

    status = normalize_shopee_status(status)

    if status == CANCELLED_STATUS:
        return "cancelled"

    if status in SHOPEE_COMPLETED:
        return "completed"

    return "other"


# ---------------- SKU ----------------

def extract_sku(platform: str, raw_sku: str) -> str:

    raw_sku = (raw_sku or "").strip()

    if platform == "tiktok":

        m = TIKTOK_SKU.match(raw_sku)

        if m:
            return m.group(1).upper()

    return raw_sku or "N/A"
