"""
Database models package
"""

from .user import AppRole, User, UserRole, AuthSession
from .academic import College, Faculty, Department
from .member import Member, Alumni
from .event import Event, EventRegistration, EventAttendance
from .feedback import Feedback
from .organization import OrganizationSettings, RegistrationLink, FoundingMember

__all__ = [
    "AppRole",
    "User",
    "UserRole",
    "AuthSession",
    "College",
    "Faculty",
    "Department",
    "Member",
    "Alumni",
    "Event",
    "EventRegistration",
    "EventAttendance",
    "Feedback",
    "OrganizationSettings",
    "RegistrationLink",
    "FoundingMember",
]
