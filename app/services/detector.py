# app/services/detector.py

import os

from app.core.config import ACCEPTED_EXTENSIONS, HEADER_SCAN_ROWS
from app.core.logger import logger
from app.core.mapping import (
    FILE_TYPE_LABELS,
    FILENAME_HINTS,
    GENERIC_FILENAME_HINTS,
    HEADER_HINTS
)
from app.services.errors import ParseError
from app.services.excel_service import read_workbook


def _match_hints(text, hints):

    for file_type, needles in hints:
        if any(n in text for n in needles):
            return file_type

    return None


def _header_text(row):
    return " ".join(str(c).lower() for c in (row or []) if c is not None)


def detect_file_type(filename, sheet_names, header_rows):
    """
    Classify an export as income / orders / products / wallet.

    Checks run in a fixed priority order and the first hit wins:
    sheet signature, filename, sheet names, header content, then a loose
    filename fallback. Returns None when nothing matches.
    """

    name = (filename or "").lower()
    sheets = [s.lower() for s in sheet_names]


    # 1. Income report: "Summary" + "Doanh thu" sheets
    if "summary" in sheets and "doanh thu" in sheets:
        return "income"


    # 2. Filename patterns
    hit = _match_hints(name, FILENAME_HINTS)

    if hit:
        return hit


    # 3. Sheet name fallback
    if any(s == "orders" or "đơn hàng" in s for s in sheets):
        return "orders"

    if any(s == "overview" or "sản phẩm" in s for s in sheets):
        return "products"

    if any("transaction" in s or "giao dịch" in s or "ví" in s for s in sheets):
        return "wallet"


    # 4. Header content fallback
    for row in header_rows[:HEADER_SCAN_ROWS]:

        hit = _match_hints(_header_text(row), HEADER_HINTS)

        if hit:
            return hit


    # 5. Generic filename fallback
    return _match_hints(name, GENERIC_FILENAME_HINTS)


def detect_workbook(path, filename=None):

    filename = filename or os.path.basename(path)

    if not filename.lower().endswith(ACCEPTED_EXTENSIONS):

        logger.info(f"Rejected extension: {filename}")

        return None

    try:
        sheets = read_workbook(path, max_rows=HEADER_SCAN_ROWS)

    except ParseError:
        return None

    if not sheets:
        return None

    first = next(iter(sheets.values()))

    detected = detect_file_type(filename, list(sheets.keys()), first)

    logger.info(f"Detected {filename} as {detected}")

    return detected


def file_type_label(file_type):
    return FILE_TYPE_LABELS.get(file_type, "Không xác định")
