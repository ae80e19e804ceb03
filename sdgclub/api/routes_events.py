"""
Admin event management and check-in desk routes
"""

from datetime import datetime
from pathlib import Path
from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from sdgclub.api.ws import websocket_manager
from sdgclub.core.config import settings
from sdgclub.core.db import get_db
from sdgclub.models import User
from sdgclub.schemas.event import EventCreate, EventUpdate, ManualCheckInRequest, ScanRequest
from sdgclub.services.checkin_service import CheckInService
from sdgclub.services.event_service import EventService, registration_to_dict
from sdgclub.services.export_service import ExportService
from sdgclub.services.member_service import member_to_dict
from sdgclub.services.qr_service import QRService
from sdgclub.services.repositories import EventRepo
from sdgclub.utils.security import require_admin
from sdgclub.utils.responses import error_response, file_response, success_response

router = APIRouter(dependencies=[Depends(require_admin)])

checkin_service = CheckInService(websocket_manager)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

# -------- Events --------

@router.get("")
async def list_events(db: Session = Depends(get_db)):
    """All events including unpublished drafts"""
    events = [EventService.detail(db, e) for e in EventRepo.recent(db, limit=None)]
    return success_response(message="Events retrieved successfully", data=events)

@router.post("")
async def create_event(
    event_data: EventCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    event = EventService.create(db, event_data, created_by=admin.id)
    return success_response(
        message="Event created successfully",
        data=EventService.detail(db, event),
        status_code=201
    )

@router.get("/{event_id}")
async def get_event(event_id: str, db: Session = Depends(get_db)):
    event = EventService.get(db, event_id)
    return success_response(message="Event retrieved successfully", data=EventService.detail(db, event))

@router.patch("/{event_id}")
async def update_event(event_id: str, changes: EventUpdate, db: Session = Depends(get_db)):
    event = EventService.update(db, event_id, changes)
    return success_response(message="Event updated successfully", data=EventService.detail(db, event))

@router.delete("/{event_id}")
async def delete_event(event_id: str, db: Session = Depends(get_db)):
    """Delete an event with its registrations and attendance"""
    EventService.delete(db, event_id)
    return success_response(message="Event deleted successfully", data={"deleted_event_id": event_id})

@router.get("/{event_id}/registrations")
async def list_registrations(event_id: str, db: Session = Depends(get_db)):
    registrations = [registration_to_dict(r) for r in EventService.registrations(db, event_id)]
    return success_response(
        message="Registrations retrieved successfully",
        data={"registrations": registrations, "total": len(registrations)}
    )

@router.delete("/{event_id}/registrations/{registration_id}")
async def delete_registration(event_id: str, registration_id: str, db: Session = Depends(get_db)):
    EventService.delete_registration(db, event_id, registration_id)
    return success_response(message="Registration removed")

# -------- Check-in desk --------

@router.get("/{event_id}/checkin/search")
async def search_members_for_checkin(
    event_id: str,
    q: str = Query(""),
    db: Session = Depends(get_db)
):
    """Manual lookup by name or matric number, at most 10 matches"""
    EventService.get(db, event_id)
    members = CheckInService.search_members(db, q)
    return success_response(
        message=f"Found {len(members)} member(s)",
        data=[member_to_dict(m) for m in members]
    )

@router.post("/{event_id}/checkin/scan")
async def check_in_scan(
    event_id: str,
    scan: ScanRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Check in from the text decoded by the camera scanner"""
    result = await checkin_service.check_in_scan(db, event_id, scan.payload, checked_in_by=admin.id)
    return success_response(message=f"{result['full_name']} checked in successfully", data=result)

@router.post("/{event_id}/checkin/upload")
async def check_in_from_image(
    event_id: str,
    file: UploadFile = File(...),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Check in from a photo of a member's QR code"""
    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(
            message="Image is too large",
            error_code="FILE_TOO_LARGE",
            status_code=413
        )

    payload_text = QRService.decode_image(file_content)
    result = await checkin_service.check_in_scan(db, event_id, payload_text, checked_in_by=admin.id)
    return success_response(message=f"{result['full_name']} checked in successfully", data=result)

@router.post("/{event_id}/checkin/manual")
async def check_in_manual(
    event_id: str,
    request: ManualCheckInRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Check in a member found by search, or a registrant from the list"""
    if request.member_id:
        result = await checkin_service.check_in_member(db, event_id, request.member_id, checked_in_by=admin.id)
    else:
        result = await checkin_service.check_in_registration(
            db, event_id, request.registration_id, checked_in_by=admin.id
        )
    return success_response(message=f"{result['full_name']} checked in successfully", data=result)

@router.get("/{event_id}/attendance")
async def list_attendance(event_id: str, db: Session = Depends(get_db)):
    attendance = CheckInService.attendance(db, event_id)
    return success_response(
        message="Attendance retrieved successfully",
        data={
            "attendance": attendance,
            "total": len(attendance),
            "live_viewers": websocket_manager.get_connection_count(event_id),
        }
    )

@router.get("/{event_id}/attendance/sheet")
async def printable_attendance_sheet(event_id: str, request: Request, db: Session = Depends(get_db)):
    """Printable attendance sheet"""
    event = EventService.get(db, event_id)
    attendance = sorted(CheckInService.attendance(db, event_id), key=lambda a: a["checked_in_at"])
    return templates.TemplateResponse(
        request,
        "attendance_sheet.html",
        {
            "organization": settings.ORGANIZATION_NAME,
            "event": event,
            "attendance": attendance,
            "generated_at": datetime.utcnow(),
        },
    )

@router.get("/{event_id}/attendance/export.xlsx")
async def export_attendance(event_id: str, db: Session = Depends(get_db)):
    event = EventService.get(db, event_id)
    content = ExportService.attendance_excel(event.title, CheckInService.attendance(db, event_id))
    return file_response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        filename=ExportService.dated_filename(f"attendance_{event.id[:8]}", "xlsx"),
    )
