# tests/services/test_export_service.py
"""Lead export rendering."""

import csv
import io

import pytest
from datetime import datetime, timezone
from openpyxl import load_workbook

from leadgen_admin.errors import ValidationError
from leadgen_admin.services.export_service import (
    EXPORTABLE_FIELDS,
    LeadExporter,
    get_field_value,
)


@pytest.fixture
def lead(make_lead):
    lead = make_lead(
        id="lead-1",
        email_verified=True,
        tags=["vip", "q3"],
        notes='Said "call me", maybe',
    )
    lead.created_at = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    return lead


class TestExporterOptions:
    
    def test_defaults_to_every_field(self):
        exporter = LeadExporter()
        assert exporter.format == "csv"
        assert exporter.fields == list(EXPORTABLE_FIELDS)
    
    @pytest.mark.parametrize("export_format", ["xml", "pdf", ""])
    def test_rejects_format(self, export_format):
        with pytest.raises(ValidationError, match="Invalid format. Allowed formats: csv, xlsx, json"):
            LeadExporter(export_format)
    
    def test_format_is_case_insensitive(self):
        exporter = LeadExporter("JSON")
        assert exporter.format == "json"
        assert exporter.media_type == "application/json"
    
    def test_rejects_unknown_field(self):
        with pytest.raises(ValidationError, match="Unknown export fields: credentials"):
            LeadExporter("csv", ["email", "credentials"])
    
    def test_accepts_camel_case_fields(self):
        exporter = LeadExporter("csv", ["firstName", "companyName"])
        assert exporter.fields == ["first_name", "company_name"]
    
    def test_filename(self):
        assert LeadExporter("csv").filename.startswith("leads_export_")
        assert LeadExporter("json").filename.endswith(".json")


class TestRendering:
    
    def test_field_values(self, lead):
        assert get_field_value(lead, "full_name") == "Ada Lovelace"
        assert get_field_value(lead, "created_at") == "2024-05-01T12:30:00+00:00"
        assert get_field_value(lead, "tags") == ["vip", "q3"]
        assert get_field_value(lead, "phone") is None
    
    def test_records(self, lead):
        records = LeadExporter("json", ["email", "company_name", "tags"]).to_records([lead])
        
        assert records == [{
            "email": "ada@analytical.io",
            "companyName": "Analytical Engines",
            "tags": ["vip", "q3"],
        }]
    
    def test_csv(self, lead):
        exporter = LeadExporter("csv", ["full_name", "email_verified", "tags", "notes", "phone"])
        
        rows = list(csv.reader(io.StringIO(exporter.to_csv([lead]))))
        
        assert rows[0] == ["Full Name", "Email Verified", "Tags", "Notes", "Phone"]
        assert rows[1] == ["Ada Lovelace", "Yes", "vip, q3", 'Said "call me", maybe', ""]
    
    def test_csv_without_leads_has_header_only(self):
        output = LeadExporter("csv", ["email"]).to_csv([])
        assert output.strip() == "Email"


class TestExcel:
    
    def test_xlsx_is_accepted(self):
        exporter = LeadExporter("xlsx")
        assert exporter.filename.endswith(".xlsx")
        assert exporter.media_type == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    
    def test_workbook_contents(self, lead):
        content = LeadExporter("xlsx", ["full_name", "email_verified", "tags"]).to_xlsx([lead])
        
        ws = load_workbook(io.BytesIO(content)).active
        rows = [[cell.value for cell in row] for row in ws.iter_rows()]
        
        assert ws.title == "Leads"
        assert ws.freeze_panes == "A2"
        assert rows == [
            ["Full Name", "Email Verified", "Tags"],
            ["Ada Lovelace", "Yes", "vip, q3"],
        ]
        assert ws["A1"].font.bold is True
