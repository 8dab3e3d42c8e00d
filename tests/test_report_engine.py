"""
Tests for CSV / JSON / HTML report rendering.
"""

import csv
import copy
import io
import json
from datetime import date, datetime, timezone

import pytest

from freight_tracker.reports.report_engine import (
    DateRange,
    ReportColumn,
    ReportSpec,
    UnknownReportFormat,
    available_formats,
    format_date_range,
    format_timestamp,
    generate_report,
    spec_from_request,
)

GENERATED = datetime(2025, 3, 4, 21, 5, 1, tzinfo=timezone.utc)

COLUMNS = [
    ReportColumn("tracking_number", "Tracking #"),
    ReportColumn("note", "Note"),
    ReportColumn("weight_kg", "Weight (kg)", align="right"),
]

ROWS = [
    {"tracking_number": "FT-001", "note": 'Fragile, "handle" with care', "weight_kg": 120.5},
    {"tracking_number": "FT-002", "note": None, "weight_kg": 0},
]


def make_spec(rows=ROWS, **kwargs):
    kwargs.setdefault("generated_at", GENERATED)
    return ReportSpec(title="Shipment Activity Report", columns=COLUMNS, rows=rows, **kwargs)


class TestFormatting:

    def test_format_timestamp(self):
        assert format_timestamp(GENERATED) == "March 4, 2025, 09:05:01 PM"

    def test_format_date_range(self):
        rng = DateRange(date(2025, 1, 5), date(2025, 2, 28))
        assert format_date_range(rng) == "Date Range: 1/5/2025 - 2/28/2025"
        assert format_date_range(None) == ""


class TestCsv:
    """CSV layout and quoting."""

    def test_layout(self):
        body = generate_report(make_spec(), "csv").body
        lines = body.split("\n")

        assert lines[0] == '"Shipment Activity Report"'
        assert lines[1] == '"Generated: March 4, 2025, 09:05:01 PM"'
        assert lines[2] == ""
        assert lines[3] == '"Tracking #","Note","Weight (kg)"'
        assert lines[-2] == ""
        assert lines[-1] == '"Total Rows: 2"'

    def test_quotes_are_doubled(self):
        """Values survive a round trip through a standard CSV reader."""
        body = generate_report(make_spec(), "csv").body
        assert '"Fragile, ""handle"" with care"' in body

        records = list(csv.reader(io.StringIO(body)))
        assert ["FT-001", 'Fragile, "handle" with care', "120.5"] in records
        assert ["FT-002", "", "0"] in records

    def test_date_range_line(self):
        spec = make_spec(date_range=DateRange(date(2025, 1, 1), date(2025, 1, 31)))
        lines = generate_report(spec, "csv").body.split("\n")
        assert lines[2] == '"Date Range: 1/1/2025 - 1/31/2025"'
        assert lines[3] == ""

    def test_empty_rows(self):
        body = generate_report(make_spec(rows=[]), "csv").body
        assert body.startswith('"Shipment Activity Report"')
        assert body.endswith('"Total Rows: 0"')
        assert '"Tracking #","Note","Weight (kg)"' in body


class TestJson:

    def test_structure(self):
        data = json.loads(generate_report(make_spec(subtitle="Q1"), "json").body)

        assert data["metadata"]["title"] == "Shipment Activity Report"
        assert data["metadata"]["subtitle"] == "Q1"
        assert data["metadata"]["generatedAt"] == "March 4, 2025, 09:05:01 PM"
        assert data["metadata"]["dateRange"] is None
        assert data["metadata"]["totalRows"] == 2
        assert data["metadata"]["totalColumns"] == 3
        assert data["columns"][0] == {"key": "tracking_number", "header": "Tracking #"}
        assert data["data"] == ROWS

    def test_empty_rows(self):
        data = json.loads(generate_report(make_spec(rows=[]), "json").body)
        assert data["data"] == []
        assert data["metadata"]["totalRows"] == 0

    def test_dates_serialized(self):
        rows = [{"tracking_number": "FT-9", "note": datetime(2025, 1, 2, 3, 4, tzinfo=timezone.utc)}]
        data = json.loads(generate_report(make_spec(rows=rows), "json").body)
        assert data["data"][0]["note"] == "2025-01-02T03:04:00+00:00"


class TestHtml:

    def test_document(self):
        body = generate_report(make_spec(subtitle="Q1"), "html").body

        assert body.startswith("<!DOCTYPE html>")
        assert "<title>Shipment Activity Report</title>" in body
        assert "<h2>Q1</h2>" in body
        assert "Generated: March 4, 2025, 09:05:01 PM" in body
        assert "Total Rows: 2" in body
        for header in ("Tracking #", "Note", "Weight (kg)"):
            assert f"<th>{header}</th>" in body

    def test_cells_escaped_and_missing_empty(self):
        rows = [{"tracking_number": "<b>FT</b>", "note": None, "weight_kg": 1}]
        body = generate_report(make_spec(rows=rows), "html").body

        assert "&lt;b&gt;FT&lt;/b&gt;" in body
        assert "<td></td>" in body
        assert "None" not in body

    def test_cells_keep_full_precision(self):
        """Table cells show the same text as the CSV encoding."""
        rows = [{"tracking_number": "FT-1", "note": 1.23456789, "weight_kg": 12345678.9}]
        spec = make_spec(rows=rows)
        body = generate_report(spec, "html").body

        assert "<td>1.23456789</td>" in body
        assert "<td>12345678.9</td>" in body
        assert '"1.23456789"' in generate_report(spec, "csv").body

    def test_title_escaped(self):
        spec = ReportSpec(title="A & B <Report>", columns=COLUMNS, rows=[], generated_at=GENERATED)
        body = generate_report(spec, "html").body
        assert "A &amp; B &lt;Report&gt;" in body
        assert "<h2>" not in body


class TestGenerateReport:

    @pytest.mark.parametrize("fmt,mime,ext", [
        ("csv", "text/csv", "csv"),
        ("json", "application/json", "json"),
        ("html", "text/html", "html"),
        ("HTML", "text/html", "html"),
    ])
    def test_mime_and_extension(self, fmt, mime, ext):
        report = generate_report(make_spec(), fmt)
        assert report.mime_type == mime
        assert report.file_extension == ext
        assert report.filename == f"shipment_activity_report.{ext}"

    def test_metadata_identical_across_formats(self):
        spec = make_spec()
        metadata = [generate_report(spec, fmt).metadata() for fmt in available_formats()]

        assert metadata[0] == metadata[1] == metadata[2]
        assert metadata[0]["rowCount"] == 2
        assert metadata[0]["columnCount"] == 3
        assert metadata[0]["generatedAt"] == GENERATED.isoformat()

    def test_rows_not_mutated(self):
        rows = copy.deepcopy(ROWS)
        spec = make_spec(rows=rows)
        for fmt in available_formats():
            generate_report(spec, fmt)
        assert rows == ROWS

    def test_unknown_format(self):
        with pytest.raises(UnknownReportFormat) as exc_info:
            generate_report(make_spec(), "pdf")
        assert exc_info.value.format == "pdf"

    def test_default_format_is_csv(self):
        assert generate_report(make_spec()).format == "csv"


class TestSpecFromRequest:

    def test_builds_spec(self):
        spec, fmt = spec_from_request({
            "title": "Custom",
            "columns": [{"key": "a", "header": "A"}, {"key": "b", "header": "B", "width": 10}],
            "rows": [{"a": 1, "b": 2}],
            "dateRange": {"start": "2025-01-01", "end": "2025-01-31T00:00:00Z"},
            "format": "json",
        })

        assert fmt == "json"
        assert spec.title == "Custom"
        assert spec.subtitle == ""
        assert spec.headers == ["A", "B"]
        assert spec.columns[1].width == 10
        assert format_date_range(spec.date_range) == "Date Range: 1/1/2025 - 1/31/2025"

    def test_defaults(self):
        spec, fmt = spec_from_request({"title": "T", "columns": []})
        assert fmt == "csv"
        assert spec.rows == []
        assert spec.date_range is None
