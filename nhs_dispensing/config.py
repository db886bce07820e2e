"""
NHS Dispensing EDA — Configuration: paths, constants, column schema.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths — override with NHS_DISPENSING_DATA_DIR env var for deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("NHS_DISPENSING_DATA_DIR", str(Path.home() / "NHS Dispensing")))
BASE_FOLDER = _data_dir
INBOX_FOLDER = _data_dir / "inbox"
REPORTS_FOLDER = _data_dir / "reports"

# Explicit source CSV; when unset the newest file in INBOX_FOLDER is used
SOURCE_PATH = os.environ.get("NHS_DISPENSING_SOURCE") or None

# ---------------------------------------------------------------------------
# Source file format
# ---------------------------------------------------------------------------
DELIMITER = os.environ.get("NHS_DISPENSING_DELIMITER", ",")
ENCODING = os.environ.get("NHS_DISPENSING_ENCODING", "utf-8")

# Filenames as published: dispensing_data_202509.csv
SOURCE_FILE_PATTERN = r"dispensing_data_(\d{6})"

# ---------------------------------------------------------------------------
# Column schema — every source column is loaded as text, cleaning types them
# ---------------------------------------------------------------------------
COLUMN_TYPES = {
    "year_month": "str",
    "icb_code": "str",
    "icb_name": "str",
    "hwb_code": "str",
    "hwb_name": "str",
    "lpc_code": "str",
    "lpc_name": "str",
    "pharmacy_account_type": "str",
    "contractor_code": "str",
    "contractor_name": "str",
    "address_1": "str",
    "address_2": "str",
    "address_3": "str",
    "address_4": "str",
    "postcode": "str",
    "content_group": "str",
    "content": "str",
    "value": "str",
}

# ---------------------------------------------------------------------------
# Cleaning policy
# ---------------------------------------------------------------------------
UNKNOWN_SENTINEL = "Unknown"
THOUSANDS_SEPARATOR = ","

# Malformed rows allowed before cleaning halts (0 = any bad row is fatal)
MALFORMED_ROW_TOLERANCE = int(os.environ.get("NHS_DISPENSING_TOLERANCE", "0"))

# What to do with a code/name pair that is only half present:
#   "raise"  = halt cleaning with InconsistencyError
#   "report" = keep the row untouched and return the issue
#   "fill"   = fill the missing half with UNKNOWN_SENTINEL and return the issue
PAIR_POLICY = os.environ.get("NHS_DISPENSING_PAIR_POLICY", "raise")

# ---------------------------------------------------------------------------
# Query catalog defaults
# ---------------------------------------------------------------------------
TOP_N = 10
APPLIANCE_ACCOUNT_TYPE = "Appliance"
BOOTS_CONTRACTOR_NAMES = ("BOOTS", "BOOTS THE CHEMIST", "YOUR LOCAL BOOTS PHARMACY")

# Thread pool size for run_catalog (1 = run queries sequentially)
QUERY_WORKERS = int(os.environ.get("NHS_DISPENSING_QUERY_WORKERS", "1"))
