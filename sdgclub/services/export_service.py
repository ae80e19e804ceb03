"""
CSV, Excel and vCard exports for admin downloads
"""

import io
import re
from datetime import date
from typing import Dict, List

import pandas as pd

from sdgclub.models import Alumni, Member

class ExportService:
    """Service for serializing member data into downloadable files"""

    ALUMNI_COLUMNS = ["Name", "Matric Number", "Department", "Graduation Year", "WhatsApp"]
    ATTENDANCE_COLUMNS = ["#", "Name", "Matric Number", "Checked In At"]
    MEMBER_COLUMNS = [
        "Name", "Matric Number", "Faculty", "Department", "Level",
        "Expected Graduation", "WhatsApp", "Registered",
    ]

    INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")

    @staticmethod
    def sheet_title(title: str) -> str:
        """Excel-safe worksheet name, at most 31 characters"""
        cleaned = ExportService.INVALID_SHEET_CHARS.sub(" ", title or "")
        cleaned = " ".join(cleaned.split())[:31].strip()
        return cleaned or "Attendance"

    @staticmethod
    def _csv(df: pd.DataFrame, header: bool = True) -> str:
        return df.to_csv(index=False, header=header, lineterminator="\n")

    @staticmethod
    def alumni_csv(alumni: List[Alumni]) -> str:
        rows = [
            [a.full_name, a.matric_number, a.department, a.graduation_year or "", a.whatsapp_number or ""]
            for a in alumni
        ]
        df = pd.DataFrame(rows, columns=ExportService.ALUMNI_COLUMNS)
        return ExportService._csv(df)

    @staticmethod
    def whatsapp_csv(members: List[Member]) -> str:
        """One WhatsApp number per line, no header"""
        df = pd.DataFrame({"whatsapp": [m.whatsapp_number for m in members]})
        return ExportService._csv(df, header=False)

    @staticmethod
    def members_csv(members: List[Member]) -> str:
        rows = [
            [
                m.full_name,
                m.matric_number,
                m.faculty.name if m.faculty else "",
                m.department,
                m.level_of_study or "",
                m.expected_graduation_year or "",
                m.whatsapp_number,
                m.created_at.date().isoformat(),
            ]
            for m in members
        ]
        df = pd.DataFrame(rows, columns=ExportService.MEMBER_COLUMNS)
        return ExportService._csv(df)

    @staticmethod
    def attendance_excel(event_title: str, attendance: List[Dict]) -> bytes:
        """Attendance sheet as an Excel workbook, oldest check-in first"""
        ordered = sorted(attendance, key=lambda a: a["checked_in_at"])
        rows = [
            [i, a["full_name"] or "", a["matric_number"] or "", a["checked_in_at"].strftime("%Y-%m-%d %H:%M")]
            for i, a in enumerate(ordered, start=1)
        ]
        df = pd.DataFrame(rows, columns=ExportService.ATTENDANCE_COLUMNS)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=ExportService.sheet_title(event_title))

        return buffer.getvalue()

    @staticmethod
    def member_vcards(members: List[Member], organization: str = "Al-Hikmah University") -> str:
        cards = []
        for member in members:
            name_parts = member.full_name.split(" ")
            first_name = name_parts[0] if name_parts else ""
            last_name = " ".join(name_parts[1:])
            faculty = member.faculty.name if member.faculty else None
            note = "\\n".join([
                f"Matric: {member.matric_number}",
                f"Department: {member.department}",
                f"Faculty: {faculty or 'N/A'}",
                f"Level: {member.level_of_study or 'N/A'}",
                f"Expected Graduation: {member.expected_graduation_year or 'N/A'}",
            ])
            cards.append("\n".join([
                "BEGIN:VCARD",
                "VERSION:3.0",
                f"N:{last_name};{first_name};;;",
                f"FN:{member.full_name}",
                f"ORG:ASAC - {faculty or organization}",
                f"TITLE:{member.department}",
                f"TEL;TYPE=CELL:{member.whatsapp_number}",
                f"NOTE:{note}",
                "END:VCARD",
            ]))
        return "\n".join(cards)

    @staticmethod
    def dated_filename(prefix: str, extension: str, today: date = None) -> str:
        today = today or date.today()
        return f"{prefix}_{today.isoformat()}.{extension}"
