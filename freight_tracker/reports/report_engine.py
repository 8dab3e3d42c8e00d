"""
REPORT GENERATION ENGINE

Purpose:
- Render one tabular dataset into CSV, JSON and HTML
- Identical metadata (title, timestamp, row/column counts) across formats
- Attach MIME type and file extension per format

Rules:
- Synchronous, no side effects
- Never mutates the input rows
- Generation timestamp is fixed when the ReportSpec is built
- Unknown formats raise UnknownReportFormat
"""

import csv
import io
import json
import html
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from freight_tracker.reports.report_types import (
    ALL_REPORT_FORMATS,
    REPORT_FORMAT_CSV,
    REPORT_FORMAT_JSON,
    REPORT_FORMAT_HTML,
    REPORT_MIME_TYPES,
    REPORT_FILE_EXTENSIONS,
)

logger = logging.getLogger(__name__)


class ReportError(Exception):
    """Base class for report generation failures."""
    pass


class UnknownReportFormat(ReportError):
    """Raised when a report format is not supported."""

    def __init__(self, format: str):
        self.format = format
        super().__init__(f"Unknown report type: {format}")


# ==================================================
# REPORT SPEC
# ==================================================

@dataclass(frozen=True)
class ReportColumn:
    """Column definition: row key, display header, optional layout hints."""
    key: str
    header: str
    width: Optional[int] = None
    align: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ReportColumn':
        return cls(
            key=data["key"],
            header=data["header"],
            width=data.get("width"),
            align=data.get("align"),
        )


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'DateRange':
        return cls(start=_parse_date(data["start"]), end=_parse_date(data["end"]))


def _parse_date(value: Union[str, date]) -> date:
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class ReportSpec:
    """
    Everything needed to render a report.

    Attributes:
        title: Report title
        columns: Ordered column definitions
        rows: Row dataset (key -> value mappings), rendered as given
        subtitle: Optional subtitle ("" when absent)
        date_range: Optional reporting period
        generated_at: Generation time, fixed at construction
    """
    title: str
    columns: Sequence[ReportColumn]
    rows: Sequence[Mapping[str, Any]]
    subtitle: str = ""
    date_range: Optional[DateRange] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def headers(self) -> List[str]:
        return [col.header for col in self.columns]


def spec_from_request(request: Mapping[str, Any]) -> Tuple[ReportSpec, str]:
    """
    Build a ReportSpec from a report request payload.

    Args:
        request: {title, columns, rows, subtitle?, dateRange?, format}

    Returns:
        (ReportSpec, format)
    """
    date_range = request.get("dateRange")
    spec = ReportSpec(
        title=request["title"],
        subtitle=request.get("subtitle") or "",
        columns=[ReportColumn.from_dict(c) for c in request["columns"]],
        rows=request.get("rows") or [],
        date_range=DateRange.from_dict(date_range) if date_range else None,
    )
    return spec, request.get("format", REPORT_FORMAT_CSV)


# ==================================================
# SHARED FORMATTING
# ==================================================

def format_timestamp(moment: datetime) -> str:
    """Long US-style timestamp, e.g. 'March 4, 2025, 09:05:01 PM'."""
    return f"{moment.strftime('%B')} {moment.day}, {moment.year}, {moment.strftime('%I:%M:%S %p')}"


def _short_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def format_date_range(date_range: Optional[DateRange]) -> str:
    """'Date Range: M/D/YYYY - M/D/YYYY', or '' when there is no range."""
    if date_range is None:
        return ""
    return f"Date Range: {_short_date(date_range.start)} - {_short_date(date_range.end)}"


def _cell_text(value: Any) -> str:
    """String form of a cell for text encodings."""
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def report_metadata(spec: ReportSpec) -> Dict[str, Any]:
    """Format-independent metadata shared by every rendering."""
    return {
        "title": spec.title,
        "subtitle": spec.subtitle,
        "generatedAt": spec.generated_at.isoformat(),
        "rowCount": spec.row_count,
        "columnCount": spec.column_count,
        "columns": spec.headers,
    }


# ==================================================
# RENDERERS
# ==================================================

def _render_csv(spec: ReportSpec) -> str:
    """Every field quoted, embedded quotes doubled."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow([spec.title])
    writer.writerow([f"Generated: {format_timestamp(spec.generated_at)}"])
    if spec.date_range:
        writer.writerow([format_date_range(spec.date_range)])
    buffer.write("\n")

    writer.writerow(spec.headers)
    for row in spec.rows:
        writer.writerow([_cell_text(row.get(col.key)) for col in spec.columns])

    buffer.write("\n")
    writer.writerow([f"Total Rows: {spec.row_count}"])

    return buffer.getvalue().rstrip("\n")


def build_structured_report(spec: ReportSpec) -> Dict[str, Any]:
    """
    Structured report document.

    Rows are carried as-is in `data`; only serialization converts dates.
    """
    return {
        "metadata": {
            "title": spec.title,
            "subtitle": spec.subtitle,
            "generatedAt": format_timestamp(spec.generated_at),
            "dateRange": format_date_range(spec.date_range) if spec.date_range else None,
            "totalRows": spec.row_count,
            "totalColumns": spec.column_count,
        },
        "columns": [{"key": col.key, "header": col.header} for col in spec.columns],
        "data": list(spec.rows),
    }


def _render_json(spec: ReportSpec) -> str:
    return json.dumps(build_structured_report(spec), indent=2, ensure_ascii=False, default=_json_default)


HTML_STYLE = """
    body { font-family: Arial, sans-serif; margin: 20px; }
    h1 { color: #1e40af; }
    .meta { color: #666; margin-bottom: 20px; }
    table { border-collapse: collapse; width: 100%; }
    th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
    th { background-color: #1e40af; color: white; }
    tr:nth-child(even) { background-color: #f2f2f2; }
    .footer { margin-top: 20px; color: #666; font-size: 0.9em; }
"""


def _html_cell(value: Any) -> Optional[str]:
    # None stays None so na_rep renders an empty cell
    return None if value is None else _cell_text(value)


def _render_table(spec: ReportSpec) -> str:
    frame = pd.DataFrame(
        [[_html_cell(row.get(col.key)) for col in spec.columns] for row in spec.rows],
        columns=spec.headers,
        dtype=object,
    )
    return frame.to_html(index=False, na_rep="", escape=True, border=0, classes="report-table")


def _render_html(spec: ReportSpec) -> str:
    title = html.escape(spec.title)
    subtitle = f"<h2>{html.escape(spec.subtitle)}</h2>" if spec.subtitle else ""
    date_range = f"<p>{html.escape(format_date_range(spec.date_range))}</p>" if spec.date_range else ""

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <style>{HTML_STYLE}  </style>
</head>
<body>
  <h1>{title}</h1>
  {subtitle}
  <div class="meta">
    <p>Generated: {format_timestamp(spec.generated_at)}</p>
    {date_range}
  </div>
{_render_table(spec)}
  <div class="footer">
    <p>Total Rows: {spec.row_count}</p>
  </div>
</body>
</html>"""


_RENDERERS: Dict[str, Callable[[ReportSpec], str]] = {
    REPORT_FORMAT_CSV: _render_csv,
    REPORT_FORMAT_JSON: _render_json,
    REPORT_FORMAT_HTML: _render_html,
}


# ==================================================
# REPORT GENERATION
# ==================================================

@dataclass(frozen=True)
class RenderedReport:
    """A report rendered in one format, plus its shared metadata."""
    format: str
    title: str
    subtitle: str
    generated_at: str
    row_count: int
    column_count: int
    columns: List[str]
    body: str
    mime_type: str
    file_extension: str

    @property
    def filename_stem(self) -> str:
        return "".join(ch if ch.isalnum() else "_" for ch in self.title.lower()).strip("_") or "report"

    @property
    def filename(self) -> str:
        return f"{self.filename_stem}.{self.file_extension}"

    def metadata(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "generatedAt": self.generated_at,
            "rowCount": self.row_count,
            "columnCount": self.column_count,
            "columns": self.columns,
        }


def available_formats() -> List[str]:
    return list(ALL_REPORT_FORMATS)


def generate_report(spec: ReportSpec, format: str = REPORT_FORMAT_CSV) -> RenderedReport:
    """
    Render a report in the requested format.

    Args:
        spec: Report definition and rows
        format: "csv", "json" or "html" (case-insensitive)

    Returns:
        RenderedReport

    Raises:
        UnknownReportFormat: If the format is not supported
    """
    format_key = str(format).lower()
    renderer = _RENDERERS.get(format_key)
    if renderer is None:
        raise UnknownReportFormat(format)

    logger.debug(f"Rendering {format_key} report '{spec.title}' ({spec.row_count} rows)")
    meta = report_metadata(spec)

    return RenderedReport(
        format=format_key,
        title=meta["title"],
        subtitle=meta["subtitle"],
        generated_at=meta["generatedAt"],
        row_count=meta["rowCount"],
        column_count=meta["columnCount"],
        columns=meta["columns"],
        body=renderer(spec),
        mime_type=REPORT_MIME_TYPES[format_key],
        file_extension=REPORT_FILE_EXTENSIONS[format_key],
    )
