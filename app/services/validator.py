# app/services/validator.py

import re

from app.core.config import ACCEPTED_EXTENSIONS
from app.core.logger import logger

DATA_TYPES = ("income", "orders", "ads")

MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def is_valid_month(month):
    return bool(month) and bool(MONTH_RE.match(month.strip()))


def validate_upload_form(file_name, data_type, month):
    """Raise ValueError with a user-facing message when the form is unusable."""

    if not file_name or not data_type or not month:
        raise ValueError("file, dataType, and month are required")

    if data_type not in DATA_TYPES:
        raise ValueError(f"dataType must be one of {', '.join(DATA_TYPES)}")

    if not is_valid_month(month):
        raise ValueError("month must look like YYYY-MM")

    if not file_name.lower().endswith(ACCEPTED_EXTENSIONS):
        raise ValueError("Chỉ hỗ trợ file .xlsx, .xls, .csv")

    logger.info(f"Upload form ok: {data_type} {month} {file_name}")

    return data_type, month.strip()


def validate_cost(cost):

    if cost is None:
        raise ValueError("cost is required")

    if cost != cost or cost < 0:
        raise ValueError("cost must be a non-negative number")

    return float(cost)
