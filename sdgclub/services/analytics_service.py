"""
Dashboard counters and membership analytics
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from sdgclub.models import Event, EventAttendance, EventRegistration, Faculty, Feedback, Member


def _month_start(year: int, month: int) -> datetime:
    # month may run below 1 when stepping back across a year boundary
    while month < 1:
        month += 12
        year -= 1
    return datetime(year, month, 1)


def _month_key(value: datetime) -> str:
    return value.strftime("%b %y")


def growth_rate(this_month: int, last_month: int) -> int:
    if last_month > 0:
        return round((this_month - last_month) / last_month * 100)
    return 100 if this_month > 0 else 0


def _sorted_counts(counter: Counter, key: str) -> List[Dict]:
    return [{key: name, "count": count} for name, count in sorted(counter.items(), key=lambda kv: (-kv[1], str(kv[0])))]


class AnalyticsService:
    """Aggregations over the member and event tables"""

    @staticmethod
    def dashboard(db: Session, now: Optional[datetime] = None) -> Dict:
        now = now or datetime.utcnow()
        recent = db.query(Member).order_by(Member.created_at.desc()).limit(5).all()
        return {
            "total_members": db.query(Member).count(),
            "total_faculties": db.query(Faculty).count(),
            "pending_feedback": db.query(Feedback).filter(Feedback.is_approved.is_(False)).count(),
            "recent_members": db.query(Member).filter(Member.created_at >= now - timedelta(days=7)).count(),
            "recent_registrations": [
                {
                    "id": m.id,
                    "full_name": m.full_name,
                    "matric_number": m.matric_number,
                    "faculty_name": m.faculty.name if m.faculty else None,
                    "created_at": m.created_at,
                }
                for m in recent
            ],
        }

    @staticmethod
    def membership(db: Session, now: Optional[datetime] = None) -> Dict:
        now = now or datetime.utcnow()
        members = db.query(Member).all()

        this_month_start = _month_start(now.year, now.month)
        last_month_start = _month_start(now.year, now.month - 1)
        this_month = sum(1 for m in members if m.created_at >= this_month_start)
        last_month = sum(1 for m in members if last_month_start <= m.created_at < this_month_start)

        faculties = Counter(m.faculty.name if m.faculty else "Unknown" for m in members)

        departments: Counter = Counter()
        department_faculty: Dict[str, str] = {}
        for m in members:
            name = m.department_ref.name if m.department_ref else (m.department or "Unknown")
            departments[name] += 1
            department_faculty.setdefault(name, m.faculty.name if m.faculty else "Unknown")

        monthly = {_month_key(_month_start(now.year, now.month - i)): 0 for i in range(11, -1, -1)}
        for m in members:
            key = _month_key(m.created_at)
            if key in monthly:
                monthly[key] += 1

        levels = Counter(m.level_of_study or "Not specified" for m in members)
        graduation_years = Counter(m.expected_graduation_year for m in members if m.expected_graduation_year)

        return {
            "stats": {
                "total": len(members),
                "this_month": this_month,
                "last_month": last_month,
                "growth_rate": growth_rate(this_month, last_month),
            },
            "faculty_distribution": _sorted_counts(faculties, "name"),
            "department_distribution": [
                {**row, "faculty": department_faculty[row["name"]]}
                for row in _sorted_counts(departments, "name")[:15]
            ],
            "monthly_registrations": [{"month": k, "count": v} for k, v in monthly.items()],
            "level_distribution": _sorted_counts(levels, "level"),
            "graduation_years": [
                {"year": year, "count": count} for year, count in sorted(graduation_years.items())
            ],
        }

    @staticmethod
    def events(db: Session) -> List[Dict]:
        """Registration and attendance totals per event, newest first"""
        registrations = dict(
            db.query(EventRegistration.event_id, func.count(EventRegistration.id))
            .group_by(EventRegistration.event_id)
            .all()
        )
        attendance = dict(
            db.query(EventAttendance.event_id, func.count(EventAttendance.id))
            .group_by(EventAttendance.event_id)
            .all()
        )
        return [
            {
                "id": e.id,
                "title": e.title,
                "start_date": e.start_date,
                "max_attendees": e.max_attendees,
                "registrations": registrations.get(e.id, 0),
                "attendance": attendance.get(e.id, 0),
            }
            for e in db.query(Event).order_by(Event.start_date.desc()).all()
        ]
