"""
Account, session and role service
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from sdgclub.core.config import settings
from sdgclub.models import AppRole, AuthSession, User, UserRole
from sdgclub.schemas.auth import LoginRequest, SignUpRequest
from sdgclub.services.errors import AuthenticationFailed, ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "roles": user.role_names,
        "is_admin": user.is_admin,
    }


class AuthService:
    """Service for sign-up, login and role management"""

    @staticmethod
    def sign_up(db: Session, data: SignUpRequest) -> User:
        email = data.email.lower()
        if db.query(User).filter(User.email == email).first():
            raise ConflictError("This email is already registered. Please log in instead.")

        user = User(
            email=email,
            full_name=data.full_name.strip(),
            password_hash=generate_password_hash(data.password),
        )
        user.roles.append(UserRole(role=AppRole.USER))
        if email in {e.lower() for e in settings.BOOTSTRAP_ADMIN_EMAILS}:
            user.roles.append(UserRole(role=AppRole.ADMIN))

        db.add(user)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ConflictError("This email is already registered. Please log in instead.") from exc
        db.refresh(user)
        logger.info("Created account for %s", email)
        return user

    @staticmethod
    def login(db: Session, data: LoginRequest) -> AuthSession:
        user = db.query(User).filter(User.email == data.email.lower()).first()
        if not user or not check_password_hash(user.password_hash, data.password):
            logger.warning("Failed login for %s", data.email)
            raise AuthenticationFailed("Invalid email or password")
        return AuthService.create_session(db, user)

    @staticmethod
    def create_session(db: Session, user: User) -> AuthSession:
        session = AuthSession(
            token=secrets.token_urlsafe(32),
            user_id=user.id,
            expires_at=datetime.utcnow() + timedelta(hours=settings.SESSION_TTL_HOURS),
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def resolve_token(db: Session, token: Optional[str]) -> Optional[User]:
        """Return the user behind a bearer token, or None when it is unknown or expired"""
        if not token:
            return None
        session = db.query(AuthSession).filter(AuthSession.token == token).first()
        if not session:
            return None
        if session.expires_at <= datetime.utcnow():
            db.delete(session)
            db.commit()
            return None
        return session.user

    @staticmethod
    def logout(db: Session, token: str) -> None:
        db.query(AuthSession).filter(AuthSession.token == token).delete()
        db.commit()

    @staticmethod
    def grant_role(db: Session, user_id: str, role: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        app_role = AppRole(role)
        if not any(r.role == app_role for r in user.roles):
            user.roles.append(UserRole(role=app_role))
            db.commit()
            db.refresh(user)
            logger.info("Granted %s to %s", app_role.value, user.email)
        return user

    @staticmethod
    def revoke_role(db: Session, user_id: str, role: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        app_role = AppRole(role)
        for user_role in list(user.roles):
            if user_role.role == app_role:
                user.roles.remove(user_role)
        db.commit()
        db.refresh(user)
        return user
