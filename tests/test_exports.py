"""
Tests for CSV, Excel and vCard exports
"""

import io
from datetime import date, datetime

import pandas as pd

from sdgclub.models import Alumni, Member
from sdgclub.services.export_service import ExportService

def make_member(**overrides):
    values = dict(
        full_name="Ibrahim Musa Bello",
        matric_number="18/04ACC010",
        department="Accounting",
        level_of_study="500L",
        whatsapp_number="+2347012345678",
        expected_graduation_year=2026,
        created_at=datetime(2024, 9, 1),
    )
    values.update(overrides)
    return Member(**values)

def test_whatsapp_csv_has_no_header():
    csv = ExportService.whatsapp_csv([make_member(), make_member(whatsapp_number="+2348000000001")])
    assert csv == "+2347012345678\n+2348000000001\n"

def test_alumni_csv():
    alumni = [Alumni(full_name="Zainab Ali", matric_number="15/01ECO003", department="Economics", graduation_year=2019)]
    df = pd.read_csv(io.StringIO(ExportService.alumni_csv(alumni)))

    assert list(df.columns) == ExportService.ALUMNI_COLUMNS
    assert df.iloc[0]["Name"] == "Zainab Ali"
    assert int(df.iloc[0]["Graduation Year"]) == 2019

def test_members_csv():
    df = pd.read_csv(io.StringIO(ExportService.members_csv([make_member()])))
    assert df.iloc[0]["Matric Number"] == "18/04ACC010"
    assert df.iloc[0]["Registered"] == "2024-09-01"

def test_attendance_excel_orders_by_check_in():
    attendance = [
        {"full_name": "Late", "matric_number": None, "checked_in_at": datetime(2030, 1, 1, 10, 5)},
        {"full_name": "Early", "matric_number": "18/04ACC010", "checked_in_at": datetime(2030, 1, 1, 9, 0)},
    ]
    content = ExportService.attendance_excel("A very long event title that exceeds the sheet limit", attendance)

    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None)
    (name, df), = sheets.items()
    assert len(name) == 31
    assert list(df["Name"]) == ["Early", "Late"]

def test_member_vcards():
    vcf = ExportService.member_vcards([make_member()])

    assert vcf.startswith("BEGIN:VCARD")
    assert "N:Musa Bello;Ibrahim;;;" in vcf
    assert "TEL;TYPE=CELL:+2347012345678" in vcf
    assert "ORG:ASAC - Al-Hikmah University" in vcf

def test_dated_filename():
    assert ExportService.dated_filename("ahsac_alumni", "csv", today=date(2030, 6, 1)) == "ahsac_alumni_2030-06-01.csv"

def test_alumni_export_route(client, admin_headers, db_session):
    db_session.add(Alumni(full_name="Zainab Ali", matric_number="15/01ECO003", department="Economics"))
    db_session.commit()

    response = client.get("/admin/alumni/export.csv", headers=admin_headers)
    assert response.status_code == 200
    assert "ahsac_alumni_" in response.headers["content-disposition"]
    assert "Zainab Ali" in response.text

def test_attendance_excel_with_reserved_characters():
    attendance = [{"full_name": "Early", "matric_number": None, "checked_in_at": datetime(2030, 1, 1, 9, 0)}]
    content = ExportService.attendance_excel("SDG Summit: Goals 2030/31", attendance)

    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None)
    assert list(sheets) == ["SDG Summit Goals 2030 31"]

def test_sheet_title_fallback():
    assert ExportService.sheet_title("[?*]") == "Attendance"
    assert ExportService.sheet_title("") == "Attendance"

def test_attendance_export_route_with_colon_title(client, admin_headers, upcoming_event, db_session):
    upcoming_event.title = "SDG Summit: Goals 2030"
    db_session.commit()

    response = client.get(f"/admin/events/{upcoming_event.id}/attendance/export.xlsx", headers=admin_headers)
    assert response.status_code == 200
    assert response.content.startswith(b"PK")
