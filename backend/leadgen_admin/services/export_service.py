"""Lead export to CSV, Excel and JSON."""

import csv
import io
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from pydantic.alias_generators import to_camel, to_snake

from leadgen_admin.errors import ValidationError
from leadgen_admin.models import Lead

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = ['csv', 'xlsx', 'json']

MEDIA_TYPES = {
    'csv': 'text/csv',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'json': 'application/json',
}

# Widest column, in characters
MAX_COLUMN_WIDTH = 50

# Available fields for export, in default column order
EXPORTABLE_FIELDS = {
    'first_name': 'First Name',
    'last_name': 'Last Name',
    'full_name': 'Full Name',
    'title': 'Title',
    'email': 'Email',
    'email_verified': 'Email Verified',
    'phone': 'Phone',
    'linkedin_url': 'LinkedIn URL',
    'company_name': 'Company Name',
    'company_website': 'Company Website',
    'company_industry': 'Industry',
    'company_size': 'Company Size',
    'company_location': 'Location',
    'source': 'Source',
    'status': 'Status',
    'score': 'Score',
    'tags': 'Tags',
    'notes': 'Notes',
    'created_at': 'Created At',
    'updated_at': 'Updated At',
}


def get_field_value(lead: Lead, field: str) -> Any:
    """Extract a field from a lead in a JSON-friendly form."""
    value = getattr(lead, field, None)
    if isinstance(value, datetime):
        return value.isoformat()
    if field == 'tags':
        return list(value or [])
    return value


def _csv_cell(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, list):
        return ', '.join(str(v) for v in value)
    return str(value)


class LeadExporter:
    """Renders leads in one of the supported export formats."""

    def __init__(self, export_format: str = 'csv', fields: Optional[List[str]] = None):
        export_format = (export_format or '').lower()
        if export_format not in ALLOWED_FORMATS:
            raise ValidationError(f"Invalid format. Allowed formats: {', '.join(ALLOWED_FORMATS)}")

        fields = [to_snake(f) for f in fields] if fields else list(EXPORTABLE_FIELDS)
        unknown = [f for f in fields if f not in EXPORTABLE_FIELDS]
        if unknown:
            raise ValidationError(f"Unknown export fields: {', '.join(unknown)}")

        self.format = export_format
        self.fields = fields

    @property
    def filename(self) -> str:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return f"leads_export_{timestamp}.{self.format}"

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES[self.format]

    def to_records(self, leads: List[Lead]) -> List[Dict[str, Any]]:
        """One camelCase-keyed dict per lead, for JSON output."""
        return [
            {to_camel(field): get_field_value(lead, field) for field in self.fields}
            for lead in leads
        ]

    def to_csv(self, leads: List[Lead]) -> str:
        """CSV with a header row of field labels."""
        output = io.StringIO()
        headers = [EXPORTABLE_FIELDS[field] for field in self.fields]

        writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL)
        writer.writerow(headers)

        for lead in leads:
            writer.writerow([_csv_cell(get_field_value(lead, field)) for field in self.fields])

        logger.info(f"Exported {len(leads)} leads to CSV ({len(self.fields)} fields)")
        return output.getvalue()

    def to_xlsx(self, leads: List[Lead]) -> bytes:
        """Single-sheet workbook with a styled, frozen header row."""
        wb = Workbook()
        ws = wb.active
        ws.title = "Leads"

        header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_alignment = Alignment(horizontal="left", vertical="center")

        for col_idx, field in enumerate(self.fields, start=1):
            cell = ws.cell(row=1, column=col_idx, value=EXPORTABLE_FIELDS[field])
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = header_alignment

        widths = [len(EXPORTABLE_FIELDS[field]) for field in self.fields]
        for row_idx, lead in enumerate(leads, start=2):
            for col_idx, field in enumerate(self.fields, start=1):
                value = _csv_cell(get_field_value(lead, field))
                ws.cell(row=row_idx, column=col_idx, value=value)
                widths[col_idx - 1] = max(widths[col_idx - 1], len(value))

        for col_idx, width in enumerate(widths, start=1):
            column_letter = ws.cell(row=1, column=col_idx).column_letter
            ws.column_dimensions[column_letter].width = min(width + 2, MAX_COLUMN_WIDTH)

        ws.freeze_panes = "A2"

        output = io.BytesIO()
        wb.save(output)
        logger.info(f"Exported {len(leads)} leads to Excel ({len(self.fields)} fields)")
        return output.getvalue()
