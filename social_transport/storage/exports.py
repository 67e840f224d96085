from __future__ import annotations

import csv
import io
from decimal import Decimal
from typing import Any, List

from openpyxl import Workbook
from openpyxl.styles import Font

MONEY_FORMAT = "#,##0.00"

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXPORT_FORMATS = ("csv", "xlsx")


class ReportExporter:
    """Renders report tables as CSV text or Excel workbooks in memory."""

    def to_csv(self, headers: List[str], rows: List[List[Any]]) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(headers)
        for row in rows:
            writer.writerow([self._csv_cell(value) for value in row])
        # BOM so spreadsheet apps detect UTF-8
        return ("\ufeff" + buffer.getvalue()).encode("utf-8")

    def to_xlsx(self, title: str, headers: List[str], rows: List[List[Any]]) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = title[:31]

        ws.append(headers)
        for cell in ws[1]:
            cell.font = Font(bold=True)

        for row in rows:
            ws.append([float(value) if isinstance(value, Decimal) else value for value in row])
            for cell, value in zip(ws[ws.max_row], row):
                if isinstance(value, Decimal):
                    cell.number_format = MONEY_FORMAT

        for idx, header in enumerate(headers, start=1):
            width = max([len(str(header))] + [len(str(r[idx - 1])) for r in rows])
            ws.column_dimensions[ws.cell(row=1, column=idx).column_letter].width = min(width + 2, 60)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def filename(kind: str, fmt: str) -> str:
        return f"report_{kind}.{fmt}"

    @staticmethod
    def _csv_cell(value: Any) -> Any:
        if isinstance(value, Decimal):
            return f"{value:.2f}"
        return value
