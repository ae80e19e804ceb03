"""
Pydantic schemas package
"""

from .common import *
from .member import *
from .academic import *
from .event import *
from .feedback import *
from .organization import *
from .auth import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "MemberCreate",
    "MemberUpdate",
    "MemberSelfUpdate",
    "AlumniResponse",
    "CollegeCreate",
    "CollegeUpdate",
    "FacultyCreate",
    "FacultyUpdate",
    "FacultyReparent",
    "DepartmentCreate",
    "DepartmentUpdate",
    "EventCreate",
    "EventUpdate",
    "RegistrationCreate",
    "ScanRequest",
    "ManualCheckInRequest",
    "FeedbackCreate",
    "FeedbackResponse",
    "PublicFeedbackResponse",
    "ApprovalUpdate",
    "ContactMessage",
    "OrganizationSettingsUpdate",
    "OrganizationSettingsResponse",
    "RegistrationLinkCreate",
    "RegistrationLinkToggle",
    "RegistrationLinkResponse",
    "FoundingMemberCreate",
    "FoundingMemberUpdate",
    "FoundingMemberResponse",
    "SignUpRequest",
    "LoginRequest",
    "RoleChange",
]
