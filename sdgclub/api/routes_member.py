"""
Member self-service routes - requires a logged-in account
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sdgclub.core.db import get_db
from sdgclub.models import Member, User
from sdgclub.schemas.member import MemberSelfUpdate
from sdgclub.services.errors import NotFoundError
from sdgclub.services.member_service import MemberService, member_to_dict
from sdgclub.services.qr_service import QRService
from sdgclub.utils.security import get_current_user
from sdgclub.utils.responses import file_response, success_response

router = APIRouter()

def get_own_member(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Member:
    member = MemberService.profile_for_user(db, user)
    if member is None:
        raise NotFoundError("No member profile is linked to this account")
    return member

@router.get("/profile")
async def get_profile(member: Member = Depends(get_own_member)):
    return success_response(message="Profile retrieved", data=member_to_dict(member))

@router.patch("/profile")
async def update_profile(
    changes: MemberSelfUpdate,
    member: Member = Depends(get_own_member),
    db: Session = Depends(get_db)
):
    """Members may change their WhatsApp number and department"""
    updated = MemberService.update(db, member.id, changes)
    return success_response(message="Profile updated successfully", data=member_to_dict(updated))

@router.get("/history")
async def get_history(
    member: Member = Depends(get_own_member),
    db: Session = Depends(get_db)
):
    """Event registrations and attendance for the member dashboard"""
    return success_response(message="History retrieved", data=MemberService.history(db, member))

@router.get("/qr.png")
async def get_own_qr_code(member: Member = Depends(get_own_member)):
    """Check-in QR code to show at events"""
    return file_response(
        content=QRService.generate_member_qr(member),
        media_type="image/png",
        filename=f"ahsac_qr_{member.matric_number.replace('/', '_')}.png",
        inline=True,
    )
