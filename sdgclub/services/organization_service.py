"""
Organization settings, registration links, founding team and feedback moderation
"""

import logging
from typing import List, Optional

from sqlalchemy import nulls_last
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sdgclub.core.config import settings
from sdgclub.models import Feedback, FoundingMember, OrganizationSettings, RegistrationLink
from sdgclub.schemas.feedback import FeedbackCreate
from sdgclub.schemas.organization import FoundingMemberCreate, FoundingMemberUpdate, OrganizationSettingsUpdate
from sdgclub.services.errors import ConflictError, NotFoundError
from sdgclub.services.repositories import LinkRepo, is_unique_violation

logger = logging.getLogger(__name__)


class SettingsService:
    @staticmethod
    def get(db: Session) -> OrganizationSettings:
        """Return the singleton settings row, creating it on first use"""
        row = db.query(OrganizationSettings).first()
        if row is None:
            row = OrganizationSettings(name=settings.ORGANIZATION_NAME, aims=[], objectives=[])
            db.add(row)
            db.commit()
            db.refresh(row)
        return row

    @staticmethod
    def update(db: Session, data: OrganizationSettingsUpdate) -> OrganizationSettings:
        row = SettingsService.get(db)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        db.commit()
        db.refresh(row)
        logger.info("Organization settings updated")
        return row


class RegistrationLinkService:
    @staticmethod
    def list(db: Session) -> List[RegistrationLink]:
        return db.query(RegistrationLink).order_by(RegistrationLink.created_at.desc()).all()

    @staticmethod
    def create(db: Session, slug: str, created_by: Optional[str] = None) -> RegistrationLink:
        link = RegistrationLink(slug=slug, created_by=created_by)
        db.add(link)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if is_unique_violation(exc):
                err = ConflictError("A registration link with this slug already exists")
                err.error_code = "DUPLICATE_SLUG"
                raise err from exc
            raise
        db.refresh(link)
        return link

    @staticmethod
    def get(db: Session, link_id: str) -> RegistrationLink:
        link = LinkRepo.get(db, link_id)
        if not link:
            raise NotFoundError("Registration link not found")
        return link

    @staticmethod
    def set_active(db: Session, link_id: str, is_active: bool) -> RegistrationLink:
        link = RegistrationLinkService.get(db, link_id)
        link.is_active = is_active
        db.commit()
        db.refresh(link)
        return link

    @staticmethod
    def delete(db: Session, link_id: str) -> None:
        link = RegistrationLinkService.get(db, link_id)
        db.delete(link)
        db.commit()


class TeamService:
    """Founding members listed on the public team page"""

    @staticmethod
    def list(db: Session) -> List[FoundingMember]:
        return db.query(FoundingMember).order_by(
            nulls_last(FoundingMember.display_order.asc()), FoundingMember.name
        ).all()

    @staticmethod
    def get(db: Session, member_id: str) -> FoundingMember:
        founder = db.get(FoundingMember, member_id)
        if not founder:
            raise NotFoundError("Founding member not found")
        return founder

    @staticmethod
    def create(db: Session, data: FoundingMemberCreate) -> FoundingMember:
        founder = FoundingMember(**data.model_dump())
        db.add(founder)
        db.commit()
        db.refresh(founder)
        logger.info("Added founding member %s", founder.name)
        return founder

    @staticmethod
    def update(db: Session, member_id: str, data: FoundingMemberUpdate) -> FoundingMember:
        founder = TeamService.get(db, member_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(founder, field, value)
        db.commit()
        db.refresh(founder)
        return founder

    @staticmethod
    def delete(db: Session, member_id: str) -> None:
        founder = TeamService.get(db, member_id)
        db.delete(founder)
        db.commit()
        logger.info("Removed founding member %s", member_id)

class FeedbackService:
    @staticmethod
    def submit(db: Session, data: FeedbackCreate) -> Feedback:
        feedback = Feedback(
            name=data.name.strip(),
            email=str(data.email),
            type=data.type,
            message=data.message.strip(),
            is_approved=False,
        )
        db.add(feedback)
        db.commit()
        db.refresh(feedback)
        return feedback

    @staticmethod
    def approved(db: Session, type: Optional[str] = None) -> List[Feedback]:
        query = db.query(Feedback).filter(Feedback.is_approved.is_(True))
        if type:
            query = query.filter(Feedback.type == type)
        return query.order_by(Feedback.created_at.desc()).all()

    @staticmethod
    def list(db: Session, is_approved: Optional[bool] = None) -> List[Feedback]:
        query = db.query(Feedback)
        if is_approved is not None:
            query = query.filter(Feedback.is_approved.is_(is_approved))
        return query.order_by(Feedback.created_at.desc()).all()

    @staticmethod
    def set_approved(db: Session, feedback_id: str, approve: bool) -> Feedback:
        feedback = db.get(Feedback, feedback_id)
        if not feedback:
            raise NotFoundError("Feedback not found")
        feedback.is_approved = approve
        db.commit()
        db.refresh(feedback)
        return feedback

    @staticmethod
    def delete(db: Session, feedback_id: str) -> None:
        feedback = db.get(Feedback, feedback_id)
        if not feedback:
            raise NotFoundError("Feedback not found")
        db.delete(feedback)
        db.commit()
