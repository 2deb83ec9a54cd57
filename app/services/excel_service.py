import codecs
import csv
import io
import os
import zipfile

import xlrd
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.compdoc import CompDocError

from app.core.config import CSV_ENCODINGS, OUTPUT_DIR
from app.core.logger import logger
from app.services.errors import ParseError


# Anything a reader may raise on a damaged file. SyntaxError covers both
# xml.etree and lxml parse errors; ValueError covers UnicodeDecodeError.
READ_ERRORS = (
    InvalidFileException,
    zipfile.BadZipFile,
    xlrd.XLRDError,
    CompDocError,
    KeyError,
    IndexError,
    OSError,
    ValueError,
    SyntaxError
)


# ---------- Reading ----------

def _decode_csv(raw, name):

    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        encodings = ("utf-16",)
    else:
        encodings = CSV_ENCODINGS

    for encoding in encodings:

        try:
            return raw.decode(encoding)

        except UnicodeDecodeError:
            logger.info(f"{name} is not {encoding}")

    raise ParseError("Không đọc được file CSV")


def _read_csv(path, max_rows=None):

    with open(path, "rb") as f:
        text = _decode_csv(f.read(), os.path.basename(path))

    rows = []

    try:

        for i, row in enumerate(csv.reader(io.StringIO(text, newline=""))):

            if max_rows is not None and i >= max_rows:
                break

            rows.append(list(row))

    except csv.Error as e:
        raise ParseError("Không đọc được file CSV") from e

    return rows


def _read_xls(path, max_rows=None):

    book = xlrd.open_workbook(path, on_demand=True)

    sheets = {}

    try:

        for sheet in book.sheets():

            n = sheet.nrows if max_rows is None else min(sheet.nrows, max_rows)

            sheets[sheet.name] = [sheet.row_values(i) for i in range(n)]

    finally:
        book.release_resources()

    return sheets


def _read_xlsx(path, max_rows=None):

    wb = load_workbook(path, read_only=True, data_only=True)

    sheets = {}

    try:

        for ws in wb.worksheets:

            # Some marketplace exports declare a truncated dimension
            ws.reset_dimensions()

            rows = []

            for i, row in enumerate(ws.iter_rows(values_only=True)):

                if max_rows is not None and i >= max_rows:
                    break

                rows.append(list(row))

            sheets[ws.title] = rows

    finally:
        wb.close()

    return sheets


def read_workbook(path, max_rows=None):
    """
    Return {sheet name: [row, ...]} with each row a list of cell values,
    in workbook sheet order. A CSV file becomes a single sheet named after
    the file. Any reader failure surfaces as ParseError.
    """

    name = os.path.basename(path)
    ext = os.path.splitext(name)[1].lower()

    if ext == ".csv":
        return {os.path.splitext(name)[0]: _read_csv(path, max_rows)}


    reader = _read_xls if ext == ".xls" else _read_xlsx

    try:
        sheets = reader(path, max_rows)

    except READ_ERRORS as e:

        logger.warning(f"Cannot open workbook {path}: {e!r}")

        raise ParseError("Không đọc được file Excel") from e


    logger.info(f"Read {len(sheets)} sheets from {name}")

    return sheets


# ---------- P&L Export ----------

PNL_HEADERS = [
    "#",
    "SKU",
    "ABC",
    "Tên SP",
    "Nền tảng",
    "SL",
    "Doanh thu",
    "Thực nhận",
    "Phí sàn",
    "% Phí",
    "Giá vốn/sp",
    "Tổng giá vốn",
    "LN ròng",
    "Biên LN",
    "% Hủy"
]


def export_pnl_excel(rows, file_id):

    wb = Workbook()
    ws = wb.active

    ws.title = "P&L theo SKU"


    # ---------- Styles ----------

    header_font = Font(bold=True)
    header_fill = PatternFill("solid", fgColor="D9E1F2")
    center_align = Alignment(horizontal="center")

    loss_font = Font(color="DC2626")


    # ---------- Header ----------

    ws.append(PNL_HEADERS)

    for col in range(1, len(PNL_HEADERS) + 1):

        cell = ws.cell(row=1, column=col)

        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = center_align


    # ---------- Data Rows ----------

    for i, row in enumerate(rows, start=1):

        platforms = "+".join(dict.fromkeys(s.platform for s in row.shops))

        ws.append([
            i,
            row.sku,
            row.tier,
            row.product_name,
            platforms,
            row.total_qty,
            row.total_revenue,
            row.total_settlement,
            row.total_fees,
            round(row.fee_rate, 1),
            row.unit_cost,
            row.total_cost,
            "—" if row.net_profit is None else row.net_profit,
            "—" if row.margin is None else round(row.margin, 1),
            round(row.cancel_rate, 1)
        ])


        # Highlight loss-making SKUs
        if row.net_profit is not None and row.net_profit < 0:

            r = ws.max_row

            for c in range(1, len(PNL_HEADERS) + 1):

                ws.cell(row=r, column=c).font = loss_font


    # ---------- Freeze Header ----------

    ws.freeze_panes = "A2"


    # ---------- Auto Column Width ----------

    for col in ws.columns:

        max_length = 0
        col_letter = get_column_letter(col[0].column)

        for cell in col:

            if cell.value is not None:
                max_length = max(max_length, len(str(cell.value)))

        ws.column_dimensions[col_letter].width = max_length + 3


    # ---------- Save ----------

    os.makedirs(OUTPUT_DIR, exist_ok=True)

    path = f"{OUTPUT_DIR}/{file_id}.xlsx"

    wb.save(path)

    return path
