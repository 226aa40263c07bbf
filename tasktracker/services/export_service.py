# tasktracker/services/export_service.py
"""
Export formatter: renders a filtered task list as an .xlsx workbook or a PDF
report, one row per task
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from io import BytesIO
from typing import Iterable, List, Optional
from urllib.parse import quote
from xml.sax.saxutils import escape

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from tasktracker.errors import ValidationError
from tasktracker.services.task_filters import ALL_DEPARTMENTS

logger = logging.getLogger(__name__)

NO_DATE = "No date set"

HEADERS = [
    "ID", "Title", "Description", "Status", "Priority",
    "Due Date", "Employee", "Department", "Created At",
]

# Spreadsheet column widths, in characters
COLUMN_WIDTHS = [8, 30, 50, 14, 12, 14, 22, 22, 14]


class ExportFormat(str, Enum):
    SPREADSHEET = "spreadsheet"
    DOCUMENT = "document"


FORMAT_ALIASES = {
    "spreadsheet": ExportFormat.SPREADSHEET,
    "excel": ExportFormat.SPREADSHEET,
    "xlsx": ExportFormat.SPREADSHEET,
    "document": ExportFormat.DOCUMENT,
    "pdf": ExportFormat.DOCUMENT,
}

EXTENSIONS = {
    ExportFormat.SPREADSHEET: "xlsx",
    ExportFormat.DOCUMENT: "pdf",
}

CONTENT_TYPES = {
    ExportFormat.SPREADSHEET: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.DOCUMENT: "application/pdf",
}


@dataclass
class ExportArtifact:
    content: bytes
    filename: str
    content_type: str
    row_count: int


def parse_export_format(value: Optional[str]) -> ExportFormat:
    key = (value or ExportFormat.SPREADSHEET.value).strip().lower()
    if key not in FORMAT_ALIASES:
        raise ValidationError(
            f"Unsupported format: {value}. Supported formats: spreadsheet, document"
        )
    return FORMAT_ALIASES[key]


def format_date(value) -> str:
    if value is None:
        return NO_DATE
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def clean_text(value: Optional[str]) -> str:
    """Drop control characters that cannot be stored in a worksheet"""
    if not value:
        return ""
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def task_rows(tasks: Iterable) -> List[list]:
    rows = []
    for task in tasks:
        employee = task.employee
        rows.append([
            task.id,
            clean_text(task.title),
            clean_text(task.description),
            str(getattr(task.status, "value", task.status)),
            str(getattr(task.priority, "value", task.priority)),
            format_date(task.due_date),
            clean_text(employee.name) if employee else "",
            clean_text(employee.department) if employee else "",
            format_date(task.created_at),
        ])
    return rows


def build_filename(
    export_format: ExportFormat,
    department: Optional[str] = None,
    start_date: Optional[date] = None,
) -> str:
    """tasks-<department|all-departments>[-YYYYMMDD].<xlsx|pdf>"""
    if not department or department == ALL_DEPARTMENTS:
        department = "all-departments"
    date_part = f"-{start_date.strftime('%Y%m%d')}" if start_date else ""
    return f"tasks-{department}{date_part}.{EXTENSIONS[export_format]}"


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the UTF-8 name (RFC 6266)"""
    fallback = re.sub(r"[^A-Za-z0-9 ._-]", "_", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def render_spreadsheet(rows: List[list]) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Tasks"

    ws.append(HEADERS)

    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row in rows:
        ws.append(row)

    for i, width in enumerate(COLUMN_WIDTHS, 1):
        ws.column_dimensions[get_column_letter(i)].width = width

    for row in ws.iter_rows(min_row=2, max_row=ws.max_row, min_col=1, max_col=len(HEADERS)):
        for cell in row:
            cell.alignment = Alignment(horizontal="left", vertical="top", wrap_text=True)
            # Text starting with "=" would otherwise be stored as a formula
            if isinstance(cell.value, str):
                cell.data_type = "s"

    ws.freeze_panes = "A2"

    output = BytesIO()
    wb.save(output)
    return output.getvalue()


def _describe_scope(department: Optional[str], start_date: Optional[date], end_date: Optional[date]) -> str:
    scope = "All departments" if not department or department == ALL_DEPARTMENTS else department
    if start_date and end_date:
        scope += f" | {start_date.isoformat()} to {end_date.isoformat()}"
    elif start_date:
        scope += f" | from {start_date.isoformat()}"
    elif end_date:
        scope += f" | until {end_date.isoformat()}"
    return scope


def render_document(
    rows: List[list],
    department: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> bytes:
    output = BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=landscape(A4),
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
        title="Task Report",
    )
    styles = getSampleStyleSheet()
    cell_style = styles["BodyText"]
    cell_style.fontSize = 8
    cell_style.leading = 10

    # Paragraph parses markup, so user text is escaped
    data = [HEADERS]
    for row in rows:
        data.append([Paragraph(escape(str(value)), cell_style) for value in row])

    table = Table(
        data,
        repeatRows=1,
        colWidths=[12 * mm, 40 * mm, 70 * mm, 20 * mm, 18 * mm, 22 * mm, 28 * mm, 32 * mm, 22 * mm],
    )
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4472C4")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))

    story = [
        Paragraph("Task Report", styles["Title"]),
        Paragraph(escape(_describe_scope(department, start_date, end_date)), styles["Normal"]),
        Paragraph(f"{len(rows)} task(s)", styles["Normal"]),
        Spacer(1, 6 * mm),
        table,
    ]
    doc.build(story)
    return output.getvalue()


def export_tasks(
    tasks: Iterable,
    export_format: ExportFormat,
    department: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ExportArtifact:
    """Render ``tasks`` in ``export_format``. Department and dates only shape the filename and title."""
    rows = task_rows(tasks)

    if export_format == ExportFormat.SPREADSHEET:
        content = render_spreadsheet(rows)
    else:
        content = render_document(rows, department, start_date, end_date)

    artifact = ExportArtifact(
        content=content,
        filename=build_filename(export_format, department, start_date),
        content_type=CONTENT_TYPES[export_format],
        row_count=len(rows),
    )
    logger.info(f"Exported {artifact.row_count} task(s) as {artifact.filename}")
    return artifact
