"""
Repository layer: the table-scoped queries the services and routers share.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from sdgclub.models import (
    Alumni,
    Event,
    EventAttendance,
    EventRegistration,
    Member,
    RegistrationLink,
)


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the integrity error came from a unique constraint."""
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "23505":
        return True
    text = str(orig or exc).lower()
    return "unique constraint" in text or "duplicate key" in text


def paginate(query: Query, page: int, per_page: int) -> Tuple[list, int]:
    total = query.count()
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return items, total


def pagination_meta(page: int, per_page: int, total: int) -> dict:
    return {
        "page": page,
        "per_page": per_page,
        "total": total,
        "pages": (total + per_page - 1) // per_page,
    }


# -------- Member repository --------

class MemberRepo:
    @staticmethod
    def get(db: Session, member_id: str) -> Optional[Member]:
        return db.query(Member).filter(Member.id == member_id).first()

    @staticmethod
    def get_by_matric(db: Session, matric_number: str) -> Optional[Member]:
        return db.query(Member).filter(func.upper(Member.matric_number) == matric_number.upper()).first()

    @staticmethod
    def get_by_user(db: Session, user_id: str) -> Optional[Member]:
        return db.query(Member).filter(Member.user_id == user_id).first()

    @staticmethod
    def search_query(db: Session, search: Optional[str] = None) -> Query:
        query = db.query(Member)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Member.full_name.ilike(pattern),
                Member.matric_number.ilike(pattern),
                Member.department.ilike(pattern),
            ))
        return query.order_by(Member.created_at.desc())

    @staticmethod
    def find_candidates(db: Session, text: str, limit: int = 10) -> List[Member]:
        """Name or matric substring match used by the manual check-in search"""
        pattern = f"%{text.strip()}%"
        return db.query(Member).filter(or_(
            Member.full_name.ilike(pattern),
            Member.matric_number.ilike(pattern),
        )).order_by(Member.full_name).limit(limit).all()

    @staticmethod
    def graduating(db: Session, year: int) -> List[Member]:
        return db.query(Member).filter(
            Member.expected_graduation_year.isnot(None),
            Member.expected_graduation_year <= year,
        ).order_by(Member.expected_graduation_year, Member.full_name).all()


class AlumniRepo:
    @staticmethod
    def get(db: Session, alumni_id: str) -> Optional[Alumni]:
        return db.query(Alumni).filter(Alumni.id == alumni_id).first()

    @staticmethod
    def search_query(db: Session, search: Optional[str] = None) -> Query:
        query = db.query(Alumni)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Alumni.full_name.ilike(pattern),
                Alumni.matric_number.ilike(pattern),
                Alumni.department.ilike(pattern),
            ))
        return query.order_by(Alumni.graduation_year.desc(), Alumni.full_name)


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def get_published(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id, Event.is_published.is_(True)).first()

    @staticmethod
    def list_published(db: Session, upcoming: Optional[bool] = None, now: Optional[datetime] = None) -> List[Event]:
        now = now or datetime.utcnow()
        query = db.query(Event).filter(Event.is_published.is_(True))
        if upcoming is True:
            return query.filter(Event.start_date >= now).order_by(Event.start_date).all()
        if upcoming is False:
            return query.filter(Event.start_date < now).order_by(Event.start_date.desc()).all()
        return query.order_by(Event.start_date.desc()).all()

    @staticmethod
    def recent(db: Session, limit: Optional[int] = 20) -> List[Event]:
        return db.query(Event).order_by(Event.start_date.desc()).limit(limit).all()


class RegistrationRepo:
    @staticmethod
    def get(db: Session, registration_id: str) -> Optional[EventRegistration]:
        return db.query(EventRegistration).filter(EventRegistration.id == registration_id).first()

    @staticmethod
    def count_for_event(db: Session, event_id: str) -> int:
        return db.query(EventRegistration).filter(EventRegistration.event_id == event_id).count()

    @staticmethod
    def list_for_event(db: Session, event_id: str) -> List[EventRegistration]:
        return db.query(EventRegistration).filter(
            EventRegistration.event_id == event_id
        ).order_by(EventRegistration.registered_at.desc()).all()

    @staticmethod
    def list_for_member(db: Session, member_id: str) -> List[EventRegistration]:
        return db.query(EventRegistration).filter(
            EventRegistration.member_id == member_id
        ).order_by(EventRegistration.registered_at.desc()).all()


class AttendanceRepo:
    @staticmethod
    def find_member(db: Session, event_id: str, member_id: str) -> Optional[EventAttendance]:
        return db.query(EventAttendance).filter(
            EventAttendance.event_id == event_id,
            EventAttendance.member_id == member_id,
        ).first()

    @staticmethod
    def find_registration(db: Session, event_id: str, registration_id: str) -> Optional[EventAttendance]:
        return db.query(EventAttendance).filter(
            EventAttendance.event_id == event_id,
            EventAttendance.registration_id == registration_id,
        ).first()

    @staticmethod
    def list_for_event(db: Session, event_id: str) -> List[EventAttendance]:
        return db.query(EventAttendance).filter(
            EventAttendance.event_id == event_id
        ).order_by(EventAttendance.checked_in_at.desc()).all()

    @staticmethod
    def list_for_member(db: Session, member_id: str) -> List[EventAttendance]:
        return db.query(EventAttendance).filter(
            EventAttendance.member_id == member_id
        ).order_by(EventAttendance.checked_in_at.desc()).all()


class LinkRepo:
    @staticmethod
    def get(db: Session, link_id: str) -> Optional[RegistrationLink]:
        return db.query(RegistrationLink).filter(RegistrationLink.id == link_id).first()

    @staticmethod
    def get_by_slug(db: Session, slug: str) -> Optional[RegistrationLink]:
        return db.query(RegistrationLink).filter(RegistrationLink.slug == slug.strip().lower()).first()
