# app/services/cells.py

import datetime
import math
import re


EMPTY_MARKERS = {"", "-", "N/A", "n/a", "NA", "--"}

# "1.234.567" style: dots are thousands separators
VN_THOUSANDS = re.compile(r"^-?\d{1,3}(\.\d{3})+$")

CURRENCY_MARKS = re.compile(r"[₫đĐ%\s ]")

EXCEL_EPOCH = datetime.datetime(1899, 12, 30)


DATE_PATTERNS = [
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})"), ("y", "m", "d")),
    (re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})"), ("y", "m", "d")),
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})"), ("d", "m", "y")),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})"), ("d", "m", "y"))
]


# ---------------- Numbers ----------------

def _finite(num):

    if math.isnan(num) or math.isinf(num):
        return 0.0

    return num


def parse_vn_number(value) -> float:
    """
    Parse a spreadsheet cell that may hold a Vietnamese-formatted number.

    "8.622.294" -> 8622294, "1.234,5" -> 1234.5, "-50.000đ" -> -50000.
    Anything unreadable ("-", "N/A", None, garbage) becomes 0.
    """

    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        return _finite(float(value))

    if not isinstance(value, str):
        return 0.0

    s = CURRENCY_MARKS.sub("", value.strip())

    if s in EMPTY_MARKERS:
        return 0.0

    if "," in s:
        # vi-VN: "." groups thousands, "," marks decimals
        s = s.replace(".", "").replace(",", ".", 1)

    elif VN_THOUSANDS.match(s):
        s = s.replace(".", "")

    try:
        return _finite(float(s))

    except ValueError:
        return 0.0


def to_str(value) -> str:

    if value is None:
        return ""

    if isinstance(value, float) and value.is_integer():
        return str(int(value))

    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()

    return str(value).strip()


# ---------------- Dates ----------------

def parse_date(value):

    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime.datetime):
        return value.date()

    if isinstance(value, datetime.date):
        return value

    if isinstance(value, (int, float)):
        # Excel serial day number
        if value <= 0 or math.isnan(value) or math.isinf(value):
            return None

        try:
            return (EXCEL_EPOCH + datetime.timedelta(days=float(value))).date()
        except OverflowError:
            return None

    s = str(value).strip()

    for pattern, order in DATE_PATTERNS:

        m = pattern.match(s)

        if not m:
            continue

        parts = dict(zip(order, (int(g) for g in m.groups())))

        try:
            return datetime.date(parts["y"], parts["m"], parts["d"])
        except ValueError:
            return None

    return None


# ---------------- Typed Row Mapping ----------------

class RowMapping:
    """Field name -> column index for one export layout.

    Lookups fail closed: a missing column or a short row reads as 0 / "".
    """

    def __init__(self, columns):
        self.columns = dict(columns)

    def cell(self, row, field):

        idx = self.columns.get(field)

        if idx is None or row is None or idx >= len(row):
            return None

        return row[idx]

    def number(self, row, field) -> float:
        return parse_vn_number(self.cell(row, field))

    def text(self, row, field) -> str:
        return to_str(self.cell(row, field))

    def date(self, row, field):
        return parse_date(self.cell(row, field))


def first_cell_empty(row) -> bool:

    if not row:
        return True

    v = row[0]

    return v is None or (isinstance(v, str) and not v.strip())


def report_progress(on_progress, percent, message):

    if on_progress is not None:
        on_progress(percent, message)
