"""
REPORT TYPES

Purpose:
- Define report output formats
- MIME type and file extension per format

Rules:
- No business logic
- No IO operations
- Only type definitions
"""

from typing import Literal

# ==================================================
# REPORT FORMAT TYPES
# ==================================================

REPORT_FORMAT_CSV: Literal["csv"] = "csv"
REPORT_FORMAT_JSON: Literal["json"] = "json"
REPORT_FORMAT_HTML: Literal["html"] = "html"

ALL_REPORT_FORMATS: list[str] = [
    REPORT_FORMAT_CSV,
    REPORT_FORMAT_JSON,
    REPORT_FORMAT_HTML,
]

# ==================================================
# MIME TYPES & FILE EXTENSIONS
# ==================================================

REPORT_MIME_TYPES: dict[str, str] = {
    REPORT_FORMAT_CSV: "text/csv",
    REPORT_FORMAT_JSON: "application/json",
    REPORT_FORMAT_HTML: "text/html",
}

REPORT_FILE_EXTENSIONS: dict[str, str] = {
    REPORT_FORMAT_CSV: "csv",
    REPORT_FORMAT_JSON: "json",
    REPORT_FORMAT_HTML: "html",
}


# ==================================================
# COLUMN ALIGNMENT TYPES
# ==================================================

ALIGN_RIGHT: Literal["right"] = "right"
