import os
from dotenv import load_dotenv

load_dotenv()

UPLOAD_DIR = os.getenv("SHOPFIN_UPLOAD_DIR", "uploads")
OUTPUT_DIR = os.getenv("SHOPFIN_OUTPUT_DIR", "outputs")
DATA_DIR = os.getenv("SHOPFIN_DATA_DIR", "data")

LOG_LEVEL = os.getenv("SHOPFIN_LOG_LEVEL", "INFO")

MAX_SHOPS = int(os.getenv("SHOPFIN_MAX_SHOPS", "10"))

HEADER_SCAN_ROWS = 20

ACCEPTED_EXTENSIONS = (".xlsx", ".xls", ".csv")

# Tried in order for CSVs without a UTF-16 byte order mark
CSV_ENCODINGS = ("utf-8-sig", "cp1258")
