"""
Admin API routes - requires the admin role
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sdgclub.core.db import get_db
from sdgclub.models import User
from sdgclub.schemas.auth import RoleChange
from sdgclub.schemas.feedback import ApprovalUpdate, FeedbackResponse
from sdgclub.schemas.member import AlumniResponse, MemberUpdate
from sdgclub.schemas.organization import (
    FoundingMemberCreate,
    FoundingMemberResponse,
    FoundingMemberUpdate,
    OrganizationSettingsResponse,
    OrganizationSettingsUpdate,
    RegistrationLinkCreate,
    RegistrationLinkResponse,
    RegistrationLinkToggle,
)
from sdgclub.services.analytics_service import AnalyticsService
from sdgclub.services.auth_service import AuthService, user_to_dict
from sdgclub.services.export_service import ExportService
from sdgclub.services.member_service import AlumniService, MemberService, member_to_dict
from sdgclub.services.organization_service import (
    FeedbackService,
    RegistrationLinkService,
    SettingsService,
    TeamService,
)
from sdgclub.services.qr_service import QRService
from sdgclub.services.repositories import AlumniRepo, MemberRepo, paginate, pagination_meta
from sdgclub.utils.security import require_admin
from sdgclub.utils.responses import file_response, success_response

router = APIRouter(dependencies=[Depends(require_admin)])

def _link_payload(link) -> RegistrationLinkResponse:
    data = RegistrationLinkResponse.model_validate(link)
    data.url = QRService.registration_url(link.slug)
    return data

# -------- Dashboard --------

@router.get("/dashboard")
async def get_dashboard(db: Session = Depends(get_db)):
    return success_response(message="Dashboard statistics", data=AnalyticsService.dashboard(db))

@router.get("/analytics")
async def get_analytics(db: Session = Depends(get_db)):
    return success_response(
        message="Analytics retrieved",
        data={**AnalyticsService.membership(db), "events": AnalyticsService.events(db)}
    )

# -------- Members --------

@router.get("/members")
async def list_members(
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """Search and list members"""
    members, total = paginate(MemberRepo.search_query(db, search), page, per_page)
    return success_response(
        message="Members retrieved successfully",
        data={
            "members": [member_to_dict(m) for m in members],
            "pagination": pagination_meta(page, per_page, total),
        }
    )

@router.get("/members/export/whatsapp.csv")
async def export_whatsapp_numbers(db: Session = Depends(get_db)):
    members = MemberRepo.search_query(db).all()
    return file_response(
        content=ExportService.whatsapp_csv(members),
        media_type="text/csv",
        filename="whatsapp_numbers.csv",
    )

@router.get("/members/export/members.csv")
async def export_members(search: Optional[str] = Query(None), db: Session = Depends(get_db)):
    members = MemberRepo.search_query(db, search).all()
    return file_response(
        content=ExportService.members_csv(members),
        media_type="text/csv",
        filename=ExportService.dated_filename("asac_members", "csv"),
    )

@router.get("/members/export/contacts.vcf")
async def export_member_vcards(search: Optional[str] = Query(None), db: Session = Depends(get_db)):
    members = MemberRepo.search_query(db, search).all()
    return file_response(
        content=ExportService.member_vcards(members),
        media_type="text/vcard",
        filename=ExportService.dated_filename("asac_members", "vcf"),
    )

@router.get("/members/{member_id}")
async def get_member(member_id: str, db: Session = Depends(get_db)):
    return success_response(message="Member retrieved", data=member_to_dict(MemberService.get(db, member_id)))

@router.patch("/members/{member_id}")
async def update_member(member_id: str, changes: MemberUpdate, db: Session = Depends(get_db)):
    member = MemberService.update(db, member_id, changes)
    return success_response(message="Member updated successfully", data=member_to_dict(member))

@router.delete("/members/{member_id}")
async def delete_member(member_id: str, db: Session = Depends(get_db)):
    MemberService.delete(db, member_id)
    return success_response(message="Member deleted successfully", data={"deleted_member_id": member_id})

@router.get("/members/{member_id}/qr.png")
async def get_member_qr_code(member_id: str, db: Session = Depends(get_db)):
    member = MemberService.get(db, member_id)
    return file_response(
        content=QRService.generate_member_qr(member),
        media_type="image/png",
        filename=f"ahsac_qr_{member.matric_number.replace('/', '_')}.png",
        inline=True,
    )

@router.post("/members/{member_id}/graduate")
async def graduate_member(member_id: str, db: Session = Depends(get_db)):
    """Move a member to the alumni list"""
    alumnus = AlumniService.graduate(db, member_id)
    return success_response(
        message=f"{alumnus.full_name} moved to alumni",
        data=AlumniResponse.model_validate(alumnus)
    )

# -------- Alumni --------

@router.get("/alumni/graduating")
async def list_graduating_members(
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Members whose expected graduation year is this year or earlier"""
    year = year or datetime.utcnow().year
    members = AlumniService.graduating_members(db, current_year=year)
    return success_response(
        message="Graduating members retrieved",
        data={"year": year, "members": [member_to_dict(m) for m in members]}
    )

@router.get("/alumni")
async def list_alumni(
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db)
):
    alumni, total = paginate(AlumniRepo.search_query(db, search), page, per_page)
    return success_response(
        message="Alumni retrieved successfully",
        data={
            "alumni": [AlumniResponse.model_validate(a) for a in alumni],
            "pagination": pagination_meta(page, per_page, total),
        }
    )

@router.get("/alumni/export.csv")
async def export_alumni(db: Session = Depends(get_db)):
    alumni = AlumniRepo.search_query(db).all()
    return file_response(
        content=ExportService.alumni_csv(alumni),
        media_type="text/csv",
        filename=ExportService.dated_filename("ahsac_alumni", "csv"),
    )

@router.delete("/alumni/{alumni_id}")
async def delete_alumni(alumni_id: str, db: Session = Depends(get_db)):
    AlumniService.delete(db, alumni_id)
    return success_response(message="Alumni record deleted")

# -------- Feedback --------

@router.get("/feedback")
async def list_feedback(
    is_approved: Optional[bool] = Query(None),
    db: Session = Depends(get_db)
):
    items = [FeedbackResponse.model_validate(f) for f in FeedbackService.list(db, is_approved=is_approved)]
    return success_response(message="Feedback retrieved", data=items)

@router.patch("/feedback/{feedback_id}")
async def moderate_feedback(feedback_id: str, update: ApprovalUpdate, db: Session = Depends(get_db)):
    feedback = FeedbackService.set_approved(db, feedback_id, update.is_approved)
    return success_response(
        message="Feedback approved" if feedback.is_approved else "Feedback unapproved",
        data=FeedbackResponse.model_validate(feedback)
    )

@router.delete("/feedback/{feedback_id}")
async def delete_feedback(feedback_id: str, db: Session = Depends(get_db)):
    FeedbackService.delete(db, feedback_id)
    return success_response(message="Feedback deleted successfully")

# -------- Registration links --------

@router.get("/registration-links")
async def list_registration_links(db: Session = Depends(get_db)):
    links = [_link_payload(link) for link in RegistrationLinkService.list(db)]
    return success_response(message="Registration links retrieved", data=links)

@router.post("/registration-links")
async def create_registration_link(
    data: RegistrationLinkCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    link = RegistrationLinkService.create(db, data.slug, created_by=admin.id)
    return success_response(
        message="Registration link created successfully",
        data=_link_payload(link),
        status_code=201
    )

@router.patch("/registration-links/{link_id}")
async def toggle_registration_link(link_id: str, data: RegistrationLinkToggle, db: Session = Depends(get_db)):
    link = RegistrationLinkService.set_active(db, link_id, data.is_active)
    return success_response(
        message="Link activated" if link.is_active else "Link deactivated",
        data=_link_payload(link)
    )

@router.delete("/registration-links/{link_id}")
async def delete_registration_link(link_id: str, db: Session = Depends(get_db)):
    RegistrationLinkService.delete(db, link_id)
    return success_response(message="Registration link deleted successfully")

@router.get("/registration-links/{link_id}/qr.png")
async def get_registration_link_qr(link_id: str, db: Session = Depends(get_db)):
    link = RegistrationLinkService.get(db, link_id)
    return file_response(
        content=QRService.generate_registration_qr(link.slug),
        media_type="image/png",
        filename=f"register_{link.slug}.png",
        inline=True,
    )

# -------- Founding team --------

@router.get("/team")
async def list_founding_members(db: Session = Depends(get_db)):
    team = [FoundingMemberResponse.model_validate(m) for m in TeamService.list(db)]
    return success_response(message="Founding members retrieved", data=team)

@router.post("/team")
async def add_founding_member(data: FoundingMemberCreate, db: Session = Depends(get_db)):
    founder = TeamService.create(db, data)
    return success_response(
        message="Founding member added successfully",
        data=FoundingMemberResponse.model_validate(founder),
        status_code=201
    )

@router.patch("/team/{member_id}")
async def update_founding_member(member_id: str, data: FoundingMemberUpdate, db: Session = Depends(get_db)):
    founder = TeamService.update(db, member_id, data)
    return success_response(
        message="Founding member updated successfully",
        data=FoundingMemberResponse.model_validate(founder)
    )

@router.delete("/team/{member_id}")
async def delete_founding_member(member_id: str, db: Session = Depends(get_db)):
    TeamService.delete(db, member_id)
    return success_response(message="Founding member deleted successfully", data={"deleted_id": member_id})

# -------- Settings & roles --------

@router.put("/settings")
async def update_settings(data: OrganizationSettingsUpdate, db: Session = Depends(get_db)):
    row = SettingsService.update(db, data)
    return success_response(message="Settings saved successfully", data=OrganizationSettingsResponse.model_validate(row))

@router.post("/users/{user_id}/roles")
async def grant_role(user_id: str, data: RoleChange, db: Session = Depends(get_db)):
    user = AuthService.grant_role(db, user_id, data.role)
    return success_response(message=f"Role {data.role} granted", data=user_to_dict(user))

@router.delete("/users/{user_id}/roles/{role}")
async def revoke_role(user_id: str, role: str, db: Session = Depends(get_db)):
    user = AuthService.revoke_role(db, user_id, RoleChange(role=role).role)
    return success_response(message=f"Role {role} revoked", data=user_to_dict(user))
