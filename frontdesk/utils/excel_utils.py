"""
Excel generation utilities for report exports
"""

import io
from typing import Any, Dict, List, Mapping, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)


class ExcelGenerator:
    """Builds styled single-table workbooks in memory"""

    def __init__(self):
        self.workbook: Optional[Workbook] = None
        self.default_styles = self._create_default_styles()

    def _create_default_styles(self) -> Dict[str, Dict[str, Any]]:
        """Create default cell styles"""
        return {
            'header': {
                'font': Font(bold=True, color='FFFFFF'),
                'fill': PatternFill(start_color='366092', end_color='366092', fill_type='solid'),
                'alignment': Alignment(horizontal='center', vertical='center'),
                'border': THIN_BORDER
            },
            'data': {
                'font': Font(size=10),
                'alignment': Alignment(horizontal='left', vertical='center'),
                'border': THIN_BORDER
            },
            'title': {
                'font': Font(bold=True, size=16, color='366092'),
                'alignment': Alignment(horizontal='center', vertical='center')
            },
            'subtitle': {
                'font': Font(bold=True, size=12),
                'alignment': Alignment(horizontal='left', vertical='center')
            },
            'number': {
                'number_format': '#,##0.00',
                'alignment': Alignment(horizontal='right', vertical='center')
            }
        }

    def create_workbook(self) -> Workbook:
        """Create a new Excel workbook"""
        self.workbook = Workbook()
        # Remove default sheet
        self.workbook.remove(self.workbook.active)
        return self.workbook

    def add_worksheet(self, name: str, headers: List[str], data: List[List[Any]],
                      title: Optional[str] = None,
                      summary: Optional[Mapping[str, Any]] = None) -> str:
        """
        Add a worksheet with an optional title row, summary block and
        a header-styled data table.
        """
        if not self.workbook:
            self.create_workbook()

        # Sheet names are limited to 31 characters
        ws = self.workbook.create_sheet(title=name[:31])
        width = max(len(headers), 2)
        row = 1

        if title:
            ws.merge_cells(f'A1:{get_column_letter(width)}1')
            ws['A1'].value = title
            self._apply_style(ws['A1'], self.default_styles['title'])
            row = 3

        if summary:
            for key, value in summary.items():
                label = ws.cell(row=row, column=1, value=str(key))
                self._apply_style(label, self.default_styles['subtitle'])
                ws.cell(row=row, column=2, value=self._cell_value(value))
                row += 1
            row += 1

        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            self._apply_style(cell, self.default_styles['header'])

        for row_data in data:
            row += 1
            for col, value in enumerate(row_data, 1):
                cell = ws.cell(row=row, column=col, value=self._cell_value(value))
                self._apply_style(cell, self.default_styles['data'])
                if isinstance(value, float):
                    self._apply_style(cell, self.default_styles['number'])

        self._auto_adjust_columns(ws)
        return ws.title

    @staticmethod
    def _cell_value(value: Any) -> Any:
        # openpyxl takes scalars and dates; nested values are flattened to text
        if isinstance(value, (dict, list)):
            return str(value)
        return value

    def _apply_style(self, cell, style_dict: Dict[str, Any]):
        """Apply style to a cell"""
        for attr, value in style_dict.items():
            setattr(cell, attr, value)

    def _auto_adjust_columns(self, worksheet):
        """Auto-adjust column widths"""
        for column_cells in worksheet.columns:
            length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column_cells)
            worksheet.column_dimensions[get_column_letter(column_cells[0].column)].width = min(length + 2, 50)

    def to_bytes(self) -> bytes:
        """Serialize the workbook to xlsx bytes"""
        if not self.workbook:
            raise ValueError("No workbook to save")
        buffer = io.BytesIO()
        self.workbook.save(buffer)
        return buffer.getvalue()
