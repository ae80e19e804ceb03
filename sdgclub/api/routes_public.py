"""
Public API routes - no authentication required
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from sdgclub.core.db import get_db
from sdgclub.models import User
from sdgclub.schemas.event import RegistrationCreate
from sdgclub.schemas.feedback import ContactMessage, FeedbackCreate, PublicFeedbackResponse
from sdgclub.schemas.member import MemberCreate
from sdgclub.schemas.organization import FoundingMemberResponse, OrganizationSettingsResponse
from sdgclub.services.academic_service import AcademicService
from sdgclub.services.calendar_service import event_ics, ics_filename
from sdgclub.services.email_service import send_contact_email
from sdgclub.services.event_service import EventService, registration_to_dict
from sdgclub.services.member_service import MemberService, member_to_dict
from sdgclub.services.organization_service import FeedbackService, SettingsService, TeamService
from sdgclub.services.repositories import EventRepo, LinkRepo, MemberRepo
from sdgclub.utils.security import get_client_ip, get_optional_user, rate_limit_check
from sdgclub.utils.responses import error_response, file_response, rate_limit_error, success_response

router = APIRouter()

def _throttle(request: Request):
    if not rate_limit_check(get_client_ip(request)):
        rate_limit_error()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/settings")
async def get_organization_settings(db: Session = Depends(get_db)):
    """Mission, vision and about text for the public pages"""
    row = SettingsService.get(db)
    return success_response(
        message="Settings retrieved",
        data=OrganizationSettingsResponse.model_validate(row)
    )

@router.get("/academic-structure")
async def get_academic_structure(db: Session = Depends(get_db)):
    """College / faculty / department tree for registration form dropdowns"""
    return success_response(message="Academic structure retrieved", data=AcademicService.tree(db))

# -------- Events --------

@router.get("/events")
async def list_events(
    upcoming: Optional[bool] = Query(None),
    db: Session = Depends(get_db)
):
    """List published events, optionally only upcoming or only past ones"""
    return success_response(
        message="Events retrieved successfully",
        data=EventService.list_published(db, upcoming=upcoming)
    )

@router.get("/events/{event_id}")
async def get_event(event_id: str, db: Session = Depends(get_db)):
    """Published event with registration availability"""
    return success_response(
        message="Event retrieved successfully",
        data=EventService.published_detail(db, event_id)
    )

@router.get("/events/{event_id}/calendar.ics")
async def download_event_calendar(event_id: str, db: Session = Depends(get_db)):
    """Calendar invite for a published event"""
    event = EventRepo.get_published(db, event_id)
    if not event:
        return error_response(message="Event not found", error_code="NOT_FOUND", status_code=404)

    return file_response(
        content=event_ics(event),
        media_type="text/calendar; charset=utf-8",
        filename=ics_filename(event.title),
    )

@router.post("/events/{event_id}/registrations")
async def register_for_event(
    event_id: str,
    registration: RegistrationCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user)
):
    """Register a visitor for an event"""
    _throttle(request)

    member_id = None
    if user is not None:
        member = MemberRepo.get_by_user(db, user.id)
        member_id = member.id if member else None

    created = EventService.register(db, event_id, registration, member_id=member_id)
    return success_response(
        message="Registration Successful!",
        data=registration_to_dict(created),
        status_code=201
    )

# -------- Membership --------

@router.get("/register/links/{slug}")
async def check_registration_link(slug: str, db: Session = Depends(get_db)):
    """Tell the registration form whether its ref link is usable"""
    link = LinkRepo.get_by_slug(db, slug)
    return success_response(
        message="Registration link checked",
        data={"slug": slug.strip().lower(), "is_active": bool(link and link.is_active)}
    )

@router.post("/members")
async def register_member(
    member_data: MemberCreate,
    request: Request,
    ref: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user)
):
    """Member self-registration"""
    _throttle(request)

    member = MemberService.register(db, member_data, ref=ref, user_id=user.id if user else None)
    return success_response(
        message="Registration Successful! Welcome to ASAC.",
        data=member_to_dict(member),
        status_code=201
    )

# -------- Feedback & contact --------

@router.post("/feedback")
async def submit_feedback(
    feedback: FeedbackCreate,
    request: Request,
    db: Session = Depends(get_db)
):
    """Public feedback, testimonial or recommendation"""
    _throttle(request)
    FeedbackService.submit(db, feedback)
    return success_response(message="Thank you! Your feedback has been submitted.", status_code=201)

@router.get("/testimonials")
async def list_testimonials(
    type: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Approved feedback entries, newest first"""
    items = [PublicFeedbackResponse.model_validate(f) for f in FeedbackService.approved(db, type=type)]
    return success_response(message="Testimonials retrieved", data=items)

@router.get("/team")
async def list_team(db: Session = Depends(get_db)):
    """Founding members in display order"""
    team = [FoundingMemberResponse.model_validate(m) for m in TeamService.list(db)]
    return success_response(message="Team retrieved", data=team)

@router.post("/contact")
async def send_contact_message(message: ContactMessage, request: Request):
    """Forward a contact form message to the club inbox"""
    _throttle(request)
    send_contact_email(message)
    return success_response(message="Message sent! We'll get back to you soon.")
