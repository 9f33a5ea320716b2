"""
CSV and Excel export of filtered suggestions.

Both formats are produced in memory and returned as bytes.
"""

import csv
import io
from datetime import datetime
from typing import Any, List, Optional, Tuple

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from app.schemas.suggestion import SuggestionRead

CSV_MEDIA_TYPE = "text/csv"
EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, width) in column order
EXPORT_COLUMNS: List[Tuple[str, int]] = [
    ("Category", 20),
    ("Subcategory", 25),
    ("Suggestion", 40),
    ("Status", 15),
    ("Priority", 15),
    ("Reply", 30),
    ("Created Date", 20),
    ("Last Updated", 20),
]

# Spreadsheet apps evaluate cells starting with these as formulas (CWE-1236)
_FORMULA_PREFIXES = ("=", "+", "-", "@")


def _sanitize_csv_cell(value: Any) -> Any:
    if isinstance(value, str) and value.startswith(_FORMULA_PREFIXES):
        return "\t" + value
    return value


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _row(item: SuggestionRead) -> List[Any]:
    return [
        item.category or "",
        item.subcategory or "",
        item.suggestion_text,
        item.status.value,
        item.priority.value,
        item.reply or "",
        _format_date(item.created_at),
        _format_date(item.updated_at),
    ]


def to_csv(items: List[SuggestionRead]) -> bytes:
    """Render suggestions as UTF-8 CSV with formula-prefixed cells neutralized."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([header for header, _ in EXPORT_COLUMNS])
    for item in items:
        writer.writerow([_sanitize_csv_cell(value) for value in _row(item)])
    return buffer.getvalue().encode("utf-8")


def to_excel(items: List[SuggestionRead]) -> bytes:
    """Render suggestions as a single-sheet workbook with a styled header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Suggestions"

    header_font = Font(bold=True)
    header_fill = PatternFill(start_color="E0E0E0", end_color="E0E0E0", fill_type="solid")

    for index, (header, width) in enumerate(EXPORT_COLUMNS, start=1):
        cell = ws.cell(row=1, column=index, value=header)
        cell.font = header_font
        cell.fill = header_fill
        ws.column_dimensions[cell.column_letter].width = width

    for row_index, item in enumerate(items, start=2):
        for column_index, value in enumerate(_row(item), start=1):
            cell = ws.cell(row=row_index, column=column_index, value=value)
            # openpyxl turns "=..." strings into formulas; keep them as text
            if cell.data_type == "f":
                cell.data_type = "s"

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def export_suggestions(items: List[SuggestionRead], fmt: str) -> Tuple[bytes, str, str]:
    """
    Export in the requested format.

    Returns:
        (content, media type, filename)
    """
    if fmt == "excel":
        return to_excel(items), EXCEL_MEDIA_TYPE, "suggestions_export.xlsx"
    return to_csv(items), CSV_MEDIA_TYPE, "suggestions_export.csv"
