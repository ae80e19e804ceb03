"""
Event check-in service with real-time broadcasting
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sdgclub.api.ws import WebSocketManager
from sdgclub.models import EventAttendance, Member
from sdgclub.services.errors import AlreadyCheckedIn, MemberNotFound, NotFoundError
from sdgclub.services.qr_service import QRService
from sdgclub.services.repositories import (
    AttendanceRepo,
    EventRepo,
    MemberRepo,
    RegistrationRepo,
    is_unique_violation,
)

logger = logging.getLogger(__name__)


def attendance_to_dict(attendance: EventAttendance) -> Dict:
    if attendance.member is not None:
        full_name = attendance.member.full_name
        matric = attendance.member.matric_number
    elif attendance.registration is not None:
        full_name = attendance.registration.name
        matric = None
    else:
        full_name, matric = None, None
    return {
        "id": attendance.id,
        "event_id": attendance.event_id,
        "member_id": attendance.member_id,
        "registration_id": attendance.registration_id,
        "full_name": full_name,
        "matric_number": matric,
        "checked_in_at": attendance.checked_in_at,
        "checked_in_by": attendance.checked_in_by,
    }


class CheckInService:
    """Service for recording event attendance.

    Scan flow: decode payload -> look up member -> duplicate check ->
    insert attendance -> broadcast. Every failure raises a distinct
    ClubError so the scanner can keep running.
    """

    def __init__(self, websocket_manager: WebSocketManager):
        self.websocket_manager = websocket_manager

    @staticmethod
    def search_members(db: Session, text: str, limit: int = 10) -> List[Member]:
        if not text or not text.strip():
            return []
        return MemberRepo.find_candidates(db, text, limit=limit)

    async def check_in_scan(
        self,
        db: Session,
        event_id: str,
        payload_text: str,
        checked_in_by: Optional[str] = None,
    ) -> Dict:
        """Check in from decoded QR text"""
        payload = QRService.parse_member_payload(payload_text)
        return await self.check_in_member(db, event_id, payload["id"], checked_in_by=checked_in_by)

    async def check_in_member(
        self,
        db: Session,
        event_id: str,
        member_id: str,
        checked_in_by: Optional[str] = None,
    ) -> Dict:
        event = EventRepo.get(db, event_id)
        if not event:
            raise NotFoundError("Event not found")

        member = MemberRepo.get(db, member_id)
        if not member:
            raise MemberNotFound()

        if AttendanceRepo.find_member(db, event_id, member_id):
            raise AlreadyCheckedIn(f"{member.full_name} has already checked in to this event")

        attendance = EventAttendance(
            event_id=event_id,
            member_id=member.id,
            checked_in_by=checked_in_by,
        )
        self._insert(db, attendance, member.full_name)

        logger.info("Checked in %s (%s) to %s", member.full_name, member.matric_number, event.title)
        result = attendance_to_dict(attendance)
        await self.broadcast_checkin(event_id, result)
        return result

    async def check_in_registration(
        self,
        db: Session,
        event_id: str,
        registration_id: str,
        checked_in_by: Optional[str] = None,
    ) -> Dict:
        """Check in a registrant who is not a member"""
        registration = RegistrationRepo.get(db, registration_id)
        if not registration or registration.event_id != event_id:
            raise NotFoundError("Registration not found for this event")

        # a registrant linked to a member shares the member's attendance row
        if registration.member_id:
            return await self.check_in_member(db, event_id, registration.member_id, checked_in_by=checked_in_by)

        if AttendanceRepo.find_registration(db, event_id, registration_id):
            raise AlreadyCheckedIn(f"{registration.name} has already checked in to this event")

        attendance = EventAttendance(
            event_id=event_id,
            registration_id=registration.id,
            checked_in_by=checked_in_by,
        )
        self._insert(db, attendance, registration.name)

        logger.info("Checked in registrant %s to event %s", registration.name, event_id)
        result = attendance_to_dict(attendance)
        await self.broadcast_checkin(event_id, result)
        return result

    @staticmethod
    def _insert(db: Session, attendance: EventAttendance, display_name: str) -> None:
        db.add(attendance)
        try:
            db.commit()
        except IntegrityError as exc:
            # lost a race with a concurrent check-in of the same person
            db.rollback()
            if is_unique_violation(exc):
                raise AlreadyCheckedIn(f"{display_name} has already checked in to this event") from exc
            raise
        db.refresh(attendance)

    @staticmethod
    def attendance(db: Session, event_id: str) -> List[Dict]:
        if not EventRepo.get(db, event_id):
            raise NotFoundError("Event not found")
        return [attendance_to_dict(a) for a in AttendanceRepo.list_for_event(db, event_id)]

    async def broadcast_checkin(self, event_id: str, attendance: Dict):
        """Broadcast a check-in to admin screens following the event"""
        message = {
            "type": "checkin",
            "attendance": {
                **attendance,
                "checked_in_at": attendance["checked_in_at"].isoformat(),
            },
            "timestamp": datetime.utcnow().isoformat(),
        }

        await self.websocket_manager.broadcast_to_event(event_id, message)
