import zipfile

import pytest
import xlrd

from app.services.errors import ParseError
from app.services.excel_service import read_workbook


def _corrupt_xlsx(path):

    with zipfile.ZipFile(path, "w") as z:
        z.writestr("[Content_Types].xml", "<not-closed")

    return path


# ---------------- xlsx ----------------

def test_reads_sheets_in_order(write_workbook):
    path = write_workbook("orders.xlsx", {"A": [["h1", "h2"], [1, 2], [3, 4]], "B": [["x"]]})

    sheets = read_workbook(str(path))

    assert list(sheets) == ["A", "B"]
    assert sheets["A"][1] == [1, 2]

    assert read_workbook(str(path), max_rows=1)["A"] == [["h1", "h2"]]


def test_corrupt_xml_is_parse_error(tmp_path):
    path = _corrupt_xlsx(tmp_path / "broken.xlsx")

    with pytest.raises(ParseError):
        read_workbook(str(path))


def test_zip_without_workbook_is_parse_error(tmp_path):
    path = tmp_path / "empty.xlsx"

    with zipfile.ZipFile(path, "w") as z:
        z.writestr("hello.txt", "hi")

    with pytest.raises(ParseError):
        read_workbook(str(path))


# ---------------- csv ----------------

def test_csv_utf8_bom(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_bytes("Mã đơn hàng,SL\nA1,2\n".encode("utf-8-sig"))

    assert read_workbook(str(path)) == {"orders": [["Mã đơn hàng", "SL"], ["A1", "2"]]}


def test_csv_utf16(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_bytes("Mã đơn hàng\n1\n".encode("utf-16"))

    assert read_workbook(str(path))["orders"] == [["Mã đơn hàng"], ["1"]]


def test_csv_windows_1258(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_bytes("Đơn hàng\n1\n".encode("cp1258"))

    assert read_workbook(str(path))["orders"][0] == ["Đơn hàng"]


def test_csv_undecodable_is_parse_error(tmp_path):
    path = tmp_path / "orders.csv"
    # odd length after a UTF-16 BOM
    path.write_bytes(b"\xff\xfeA\x00B")

    with pytest.raises(ParseError):
        read_workbook(str(path))


# ---------------- xls ----------------

class FakeSheet:

    def __init__(self, name, rows):
        self.name = name
        self.rows = rows
        self.nrows = len(rows)

    def row_values(self, i):
        return self.rows[i]


class FakeBook:

    def __init__(self, sheets):
        self._sheets = sheets
        self.released = False

    def sheets(self):
        return self._sheets

    def release_resources(self):
        self.released = True


def test_xls_goes_through_xlrd(tmp_path, monkeypatch):
    book = FakeBook([FakeSheet("Sheet1", [["Mã đơn hàng", ""], ["A1", 46023.0], ["A2", 46024.0]])])

    opened = []

    def fake_open(path, on_demand=False):
        opened.append(path)
        return book

    monkeypatch.setattr(xlrd, "open_workbook", fake_open)

    path = tmp_path / "orders.xls"
    path.write_bytes(b"")

    sheets = read_workbook(str(path), max_rows=2)

    assert opened == [str(path)]
    assert sheets == {"Sheet1": [["Mã đơn hàng", ""], ["A1", 46023.0]]}
    assert book.released


def test_garbage_xls_is_parse_error(tmp_path):
    path = tmp_path / "orders.xls"
    path.write_bytes(b"definitely not a BIFF file")

    with pytest.raises(ParseError):
        read_workbook(str(path))
