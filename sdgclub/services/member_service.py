"""
Member registration, profile and alumni graduation service
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from sdgclub.core.config import settings
from sdgclub.models import Alumni, Department, Faculty, Member, User
from sdgclub.schemas.member import MemberCreate, MemberSelfUpdate, MemberUpdate
from sdgclub.services.errors import (
    ClubError,
    DuplicateMatricNumber,
    InvalidRegistrationLink,
    NotFoundError,
    OperationFailed,
)
from sdgclub.services.repositories import (
    AlumniRepo,
    AttendanceRepo,
    LinkRepo,
    MemberRepo,
    RegistrationRepo,
    is_unique_violation,
)

logger = logging.getLogger(__name__)


def member_to_dict(member: Member) -> Dict:
    return {
        "id": member.id,
        "full_name": member.full_name,
        "matric_number": member.matric_number,
        "faculty_id": member.faculty_id,
        "faculty_name": member.faculty.name if member.faculty else None,
        "department_id": member.department_id,
        "department": member.department,
        "level_of_study": member.level_of_study,
        "whatsapp_number": member.whatsapp_number,
        "expected_graduation_year": member.expected_graduation_year,
        "user_id": member.user_id,
        "created_at": member.created_at,
    }


class MemberService:
    """Service for member records and their lifecycle"""

    @staticmethod
    def check_registration_link(db: Session, ref: Optional[str]) -> None:
        """Reject the public form when it was not opened from an active link.

        Links are only enforced when REGISTRATION_REQUIRES_LINK is on; a
        supplied ref is always validated so typos surface early.
        """
        if not ref:
            if settings.REGISTRATION_REQUIRES_LINK:
                raise InvalidRegistrationLink("Registration is only available through a registration link")
            return
        link = LinkRepo.get_by_slug(db, ref)
        if not link or not link.is_active:
            raise InvalidRegistrationLink()

    @staticmethod
    def _validate_academic_refs(db: Session, faculty_id: Optional[str], department_id: Optional[str]) -> None:
        if faculty_id and not db.get(Faculty, faculty_id):
            raise NotFoundError("Faculty not found")
        if department_id:
            department = db.get(Department, department_id)
            if not department:
                raise NotFoundError("Department not found")
            if faculty_id and department.faculty_id != faculty_id:
                raise ClubError("Department does not belong to the selected faculty")

    @staticmethod
    def register(db: Session, data: MemberCreate, ref: Optional[str] = None, user_id: Optional[str] = None) -> Member:
        MemberService.check_registration_link(db, ref)
        MemberService._validate_academic_refs(db, data.faculty_id, data.department_id)

        member = Member(**data.model_dump(), user_id=user_id)
        db.add(member)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if is_unique_violation(exc):
                raise DuplicateMatricNumber() from exc
            raise OperationFailed("Could not update this member. Please try again.") from exc
        db.refresh(member)
        logger.info("Registered member %s (%s)", member.full_name, member.matric_number)
        return member

    @staticmethod
    def get(db: Session, member_id: str) -> Member:
        member = MemberRepo.get(db, member_id)
        if not member:
            raise NotFoundError("Member not found")
        return member

    @staticmethod
    def update(db: Session, member_id: str, data: MemberUpdate | MemberSelfUpdate) -> Member:
        member = MemberService.get(db, member_id)
        changes = data.model_dump(exclude_unset=True)
        MemberService._validate_academic_refs(
            db,
            changes.get("faculty_id", member.faculty_id),
            changes.get("department_id", member.department_id),
        )
        for field, value in changes.items():
            setattr(member, field, value)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if is_unique_violation(exc):
                raise DuplicateMatricNumber() from exc
            raise
        db.refresh(member)
        return member

    @staticmethod
    def delete(db: Session, member_id: str) -> None:
        member = MemberService.get(db, member_id)
        db.delete(member)
        db.commit()
        logger.info("Deleted member %s", member_id)

    @staticmethod
    def profile_for_user(db: Session, user: User) -> Optional[Member]:
        """Find the member row for a logged-in account.

        Falls back to a full-name match for rows created before the account
        existed, and links the account to the row it finds.
        """
        member = MemberRepo.get_by_user(db, user.id)
        if member or not user.full_name:
            return member
        member = db.query(Member).filter(
            Member.full_name == user.full_name,
            Member.user_id.is_(None),
        ).first()
        if member:
            member.user_id = user.id
            db.commit()
            db.refresh(member)
            logger.info("Linked user %s to member %s", user.id, member.id)
        return member

    @staticmethod
    def history(db: Session, member: Member) -> Dict[str, List[Dict]]:
        registrations = [
            {
                "id": r.id,
                "event_id": r.event_id,
                "event_title": r.event.title,
                "start_date": r.event.start_date,
                "location": r.event.location,
                "registered_at": r.registered_at,
            }
            for r in RegistrationRepo.list_for_member(db, member.id)
        ]
        attendance = [
            {
                "id": a.id,
                "event_id": a.event_id,
                "event_title": a.event.title,
                "start_date": a.event.start_date,
                "checked_in_at": a.checked_in_at,
            }
            for a in AttendanceRepo.list_for_member(db, member.id)
        ]
        return {"registrations": registrations, "attendance": attendance}


class AlumniService:
    """Service for moving graduated members to the alumni table"""

    @staticmethod
    def graduating_members(db: Session, current_year: Optional[int] = None) -> List[Member]:
        year = current_year or datetime.utcnow().year
        return MemberRepo.graduating(db, year)

    @staticmethod
    def graduate(db: Session, member_id: str, current_year: Optional[int] = None) -> Alumni:
        """Copy a member into alumni and remove the member row.

        Both writes share one transaction: a failure on either side leaves
        the member untouched and no alumni row behind.
        """
        member = MemberService.get(db, member_id)
        alumnus = Alumni(
            full_name=member.full_name,
            matric_number=member.matric_number,
            faculty_id=member.faculty_id,
            department_id=member.department_id,
            department=member.department,
            whatsapp_number=member.whatsapp_number,
            graduation_year=member.expected_graduation_year or current_year or datetime.utcnow().year,
            user_id=member.user_id,
        )
        try:
            db.add(alumnus)
            db.delete(member)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to move member %s to alumni", member_id)
            raise OperationFailed("Could not move this member to alumni. Please try again.")
        db.refresh(alumnus)
        logger.info("Moved %s (%s) to alumni", alumnus.full_name, alumnus.matric_number)
        return alumnus

    @staticmethod
    def delete(db: Session, alumni_id: str) -> None:
        alumnus = AlumniRepo.get(db, alumni_id)
        if not alumnus:
            raise NotFoundError("Alumni record not found")
        db.delete(alumnus)
        db.commit()
