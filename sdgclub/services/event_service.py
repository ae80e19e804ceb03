"""
Event management and registration service
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from sdgclub.models import Event, EventRegistration
from sdgclub.schemas.event import EventCreate, EventUpdate, RegistrationCreate
from sdgclub.services.errors import (
    AlreadyRegistered,
    ClubError,
    EventFull,
    NotFoundError,
    RegistrationClosed,
)
from sdgclub.services.repositories import EventRepo, RegistrationRepo, is_unique_violation

logger = logging.getLogger(__name__)

FULLY_BOOKED = "Fully Booked"
REGISTRATION_OPEN = "Registration Open"
PAST_EVENT = "Past Event"
NO_REGISTRATION = "No Registration Required"


def registration_key(name: str) -> str:
    """Normalized registrant name used for the per-event uniqueness check"""
    return " ".join(name.split()).lower()


def spots_left(max_attendees: Optional[int], registration_count: int) -> Optional[int]:
    if not max_attendees:
        return None
    return max_attendees - registration_count


def availability(event: Event, registration_count: int, now: Optional[datetime] = None) -> Dict:
    """Registration availability as shown on the event page"""
    now = now or datetime.utcnow()
    left = spots_left(event.max_attendees, registration_count)
    is_full = left is not None and left <= 0
    is_past = event.start_date < now

    if is_past:
        label = PAST_EVENT
    elif is_full:
        label = FULLY_BOOKED
    elif not event.registration_required:
        label = NO_REGISTRATION
    else:
        label = REGISTRATION_OPEN

    return {
        "registration_count": registration_count,
        "spots_left": max(left, 0) if left is not None else None,
        "is_full": is_full,
        "is_past": is_past,
        "status_label": label,
        "can_register": bool(event.registration_required) and not is_past and not is_full,
    }


def event_to_dict(event: Event) -> Dict:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "start_date": event.start_date,
        "end_date": event.end_date,
        "location": event.location,
        "max_attendees": event.max_attendees,
        "is_published": event.is_published,
        "registration_required": event.registration_required,
        "image_url": event.image_url,
        "created_at": event.created_at,
    }


def registration_to_dict(registration: EventRegistration) -> Dict:
    return {
        "id": registration.id,
        "event_id": registration.event_id,
        "member_id": registration.member_id,
        "name": registration.name,
        "email": registration.email,
        "whatsapp_number": registration.whatsapp_number,
        "registered_at": registration.registered_at,
    }


class EventService:
    """Service for events and their registrations"""

    @staticmethod
    def create(db: Session, data: EventCreate, created_by: Optional[str] = None) -> Event:
        event = Event(**data.model_dump(), created_by=created_by)
        db.add(event)
        db.commit()
        db.refresh(event)
        logger.info("Created event %s (%s)", event.title, event.id)
        return event

    @staticmethod
    def get(db: Session, event_id: str) -> Event:
        event = EventRepo.get(db, event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    @staticmethod
    def update(db: Session, event_id: str, data: EventUpdate) -> Event:
        event = EventService.get(db, event_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(event, field, value)
        if event.end_date is not None and event.end_date < event.start_date:
            db.rollback()
            raise ClubError("End date cannot be before start date")
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete(db: Session, event_id: str) -> None:
        event = EventService.get(db, event_id)
        db.delete(event)
        db.commit()
        logger.info("Deleted event %s", event_id)

    @staticmethod
    def published_detail(db: Session, event_id: str, now: Optional[datetime] = None) -> Dict:
        event = EventRepo.get_published(db, event_id)
        if not event:
            raise NotFoundError("Event not found")
        return EventService.detail(db, event, now=now)

    @staticmethod
    def detail(db: Session, event: Event, now: Optional[datetime] = None) -> Dict:
        count = RegistrationRepo.count_for_event(db, event.id)
        return {**event_to_dict(event), **availability(event, count, now=now)}

    @staticmethod
    def list_published(db: Session, upcoming: Optional[bool] = None, now: Optional[datetime] = None) -> List[Dict]:
        return [EventService.detail(db, e, now=now) for e in EventRepo.list_published(db, upcoming=upcoming, now=now)]

    @staticmethod
    def register(
        db: Session,
        event_id: str,
        data: RegistrationCreate,
        member_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> EventRegistration:
        """Register a visitor for a published event.

        The capacity count and the insert run in the same transaction and the
        (event, name) unique constraint rejects a second registration even
        when two requests pass the count at the same time.
        """
        event = EventRepo.get_published(db, event_id)
        if not event:
            raise NotFoundError("Event not found")

        now = now or datetime.utcnow()
        if event.start_date < now:
            raise RegistrationClosed("Registration is closed for past events")
        if not event.registration_required:
            raise RegistrationClosed("This event does not require registration")

        count = RegistrationRepo.count_for_event(db, event.id)
        if availability(event, count, now=now)["is_full"]:
            raise EventFull()

        registration = EventRegistration(
            event_id=event.id,
            member_id=member_id,
            name=data.name,
            name_key=registration_key(data.name),
            email=data.email,
            whatsapp_number=data.whatsapp_number,
        )
        db.add(registration)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if is_unique_violation(exc):
                raise AlreadyRegistered() from exc
            logger.exception("Registration for event %s failed", event_id)
            raise ClubError("Registration failed. Something went wrong, please try again.") from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Registration for event %s failed", event_id)
            raise ClubError("Registration failed. Something went wrong, please try again.") from exc

        db.refresh(registration)
        logger.info("Registered %s for event %s", registration.name, event.title)
        return registration

    @staticmethod
    def registrations(db: Session, event_id: str) -> List[EventRegistration]:
        EventService.get(db, event_id)
        return RegistrationRepo.list_for_event(db, event_id)

    @staticmethod
    def delete_registration(db: Session, event_id: str, registration_id: str) -> None:
        registration = RegistrationRepo.get(db, registration_id)
        if not registration or registration.event_id != event_id:
            raise NotFoundError("Registration not found")
        db.delete(registration)
        db.commit()
