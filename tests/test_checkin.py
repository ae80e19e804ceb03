"""
Tests for QR payload handling and event check-in
"""

import asyncio
import json
import pytest
from starlette.websockets import WebSocketDisconnect

from sdgclub.api.ws import WebSocketManager
from sdgclub.core.config import settings
from sdgclub.models import Event, EventAttendance, Member
from sdgclub.schemas.event import RegistrationCreate
from sdgclub.services.checkin_service import CheckInService
from sdgclub.services.errors import AlreadyCheckedIn, InvalidQRCode, MemberNotFound, NotFoundError
from sdgclub.services.event_service import EventService
from sdgclub.services.qr_service import QRService

@pytest.fixture(autouse=True)
def unsigned_codes(monkeypatch):
    monkeypatch.setattr(settings, "QR_SIGNING_SECRET", None)

@pytest.fixture
def checkin_service():
    return CheckInService(WebSocketManager())

def payload_for(member_id, matric="20/03CSC012", **extra):
    return json.dumps({"type": "ahsac_member", "id": member_id, "matric": matric, **extra})

class TestPayloadParsing:
    """Test decoding of scanned QR text"""

    def test_member_payload_round_trip(self, member):
        parsed = QRService.parse_member_payload(QRService.member_payload(member))
        assert parsed == {"id": member.id, "matric": member.matric_number}

    @pytest.mark.parametrize("text", [
        "not json",
        "[1, 2, 3]",
        json.dumps({"type": "other", "id": "abc"}),
        json.dumps({"type": "ahsac_member"}),
    ])
    def test_invalid_payloads(self, text):
        with pytest.raises(InvalidQRCode) as exc:
            QRService.parse_member_payload(text)
        assert exc.value.message == "Invalid QR Code"

    def test_signed_payload(self, member):
        sig = QRService.sign(member.id, member.matric_number, "s3cret")
        text = payload_for(member.id, member.matric_number, sig=sig)

        assert QRService.parse_member_payload(text, secret="s3cret")["id"] == member.id
        with pytest.raises(InvalidQRCode):
            QRService.parse_member_payload(payload_for(member.id, member.matric_number), secret="s3cret")
        with pytest.raises(InvalidQRCode):
            QRService.parse_member_payload(text, secret="other")

    def test_member_qr_png(self, member):
        png = QRService.generate_member_qr(member)
        assert png.startswith(b"\x89PNG")

class TestCheckIn:
    """Test attendance recording"""

    def test_check_in_member(self, db_session, checkin_service, member, upcoming_event):
        result = asyncio.run(checkin_service.check_in_scan(db_session, upcoming_event.id, payload_for(member.id)))

        assert result["full_name"] == "Amina Yusuf"
        assert result["matric_number"] == "20/03CSC012"
        assert db_session.query(EventAttendance).count() == 1

    def test_second_scan_already_checked_in(self, db_session, checkin_service, member, upcoming_event):
        asyncio.run(checkin_service.check_in_member(db_session, upcoming_event.id, member.id))

        with pytest.raises(AlreadyCheckedIn) as exc:
            asyncio.run(checkin_service.check_in_scan(db_session, upcoming_event.id, payload_for(member.id)))

        assert "Amina Yusuf has already checked in" in exc.value.message
        assert db_session.query(EventAttendance).count() == 1

    def test_invalid_qr_writes_nothing(self, db_session, checkin_service, upcoming_event):
        with pytest.raises(InvalidQRCode):
            asyncio.run(checkin_service.check_in_scan(db_session, upcoming_event.id, "hello"))
        assert db_session.query(EventAttendance).count() == 0

    def test_unknown_member(self, db_session, checkin_service, upcoming_event):
        with pytest.raises(MemberNotFound):
            asyncio.run(checkin_service.check_in_scan(db_session, upcoming_event.id, payload_for("missing-id")))
        assert db_session.query(EventAttendance).count() == 0

    def test_unknown_event(self, db_session, checkin_service, member):
        with pytest.raises(NotFoundError):
            asyncio.run(checkin_service.check_in_member(db_session, "missing-event", member.id))

    def test_same_member_other_event(self, db_session, checkin_service, member, upcoming_event):
        asyncio.run(checkin_service.check_in_member(db_session, upcoming_event.id, member.id))

        second = Event(title="Clean-up", start_date=upcoming_event.start_date, is_published=True)
        db_session.add(second)
        db_session.commit()

        asyncio.run(checkin_service.check_in_member(db_session, second.id, member.id))
        assert db_session.query(EventAttendance).count() == 2

    def test_check_in_registrant(self, db_session, checkin_service, upcoming_event):
        registration = EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="Guest Visitor"))

        result = asyncio.run(checkin_service.check_in_registration(db_session, upcoming_event.id, registration.id))
        assert result["full_name"] == "Guest Visitor"
        assert result["matric_number"] is None

        with pytest.raises(AlreadyCheckedIn):
            asyncio.run(checkin_service.check_in_registration(db_session, upcoming_event.id, registration.id))

    def test_attendance_list(self, db_session, checkin_service, member, upcoming_event):
        asyncio.run(checkin_service.check_in_member(db_session, upcoming_event.id, member.id))

        attendance = CheckInService.attendance(db_session, upcoming_event.id)
        assert [a["member_id"] for a in attendance] == [member.id]

class TestManualSearch:
    """Test the manual lookup used when scanning fails"""

    def test_search_by_name_or_matric(self, db_session, member):
        assert [m.id for m in CheckInService.search_members(db_session, "amina")] == [member.id]
        assert [m.id for m in CheckInService.search_members(db_session, "csc012")] == [member.id]

    def test_empty_query(self, db_session, member):
        assert CheckInService.search_members(db_session, "  ") == []

    def test_limited_to_ten(self, db_session):
        for i in range(15):
            db_session.add(Member(
                full_name=f"Student {i:02d}",
                matric_number=f"21/01ABC{i:03d}",
                department="Biology",
                whatsapp_number="+2348000000000",
            ))
        db_session.commit()

        assert len(CheckInService.search_members(db_session, "Student")) == 10

class TestCheckInRoutes:
    """Test the admin check-in endpoints"""

    def test_scan_endpoint(self, client, admin_headers, member, upcoming_event):
        url = f"/admin/events/{upcoming_event.id}/checkin/scan"

        first = client.post(url, json={"payload": payload_for(member.id)}, headers=admin_headers)
        assert first.status_code == 200
        assert first.json()["data"]["full_name"] == "Amina Yusuf"

        second = client.post(url, json={"payload": payload_for(member.id)}, headers=admin_headers)
        assert second.status_code == 409
        assert second.json()["error_code"] == "ALREADY_CHECKED_IN"

    def test_scan_invalid(self, client, admin_headers, upcoming_event):
        response = client.post(
            f"/admin/events/{upcoming_event.id}/checkin/scan",
            json={"payload": "garbage"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid QR Code"

    def test_manual_requires_one_target(self, client, admin_headers, upcoming_event):
        response = client.post(
            f"/admin/events/{upcoming_event.id}/checkin/manual",
            json={},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_attendance_sheet_renders(self, client, admin_headers, member, upcoming_event):
        client.post(
            f"/admin/events/{upcoming_event.id}/checkin/manual",
            json={"member_id": member.id},
            headers=admin_headers,
        )

        response = client.get(f"/admin/events/{upcoming_event.id}/attendance/sheet", headers=admin_headers)
        assert response.status_code == 200
        assert "Amina Yusuf" in response.text
        assert "SDG Awareness Walk" in response.text

def test_live_feed_rejects_anonymous(client, upcoming_event):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(f"/ws/events/{upcoming_event.id}/checkins"):
            pass
    assert exc.value.code == 4003

def test_live_feed_welcomes_admin(client, admin_headers, upcoming_event):
    token = admin_headers["Authorization"].split()[1]
    with client.websocket_connect(f"/ws/events/{upcoming_event.id}/checkins?token={token}") as ws:
        welcome = ws.receive_json()
        assert welcome["type"] == "connection"
        assert welcome["event_id"] == upcoming_event.id

        ws.send_json({"type": "ping", "timestamp": 1})
        assert ws.receive_json() == {"type": "pong", "timestamp": 1}
