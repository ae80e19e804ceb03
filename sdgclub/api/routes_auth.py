"""
Authentication routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sdgclub.core.db import get_db
from sdgclub.models import User
from sdgclub.schemas.auth import LoginRequest, SignUpRequest
from sdgclub.services.auth_service import AuthService, user_to_dict
from sdgclub.utils.security import get_bearer_token, get_current_user
from sdgclub.utils.responses import success_response

router = APIRouter()

def _session_payload(session) -> dict:
    return {
        "access_token": session.token,
        "token_type": "bearer",
        "expires_at": session.expires_at,
        "user": user_to_dict(session.user),
    }

@router.post("/signup")
async def sign_up(data: SignUpRequest, db: Session = Depends(get_db)):
    """Create an account and log it in"""
    user = AuthService.sign_up(db, data)
    session = AuthService.create_session(db, user)
    return success_response(
        message="Account created successfully",
        data=_session_payload(session),
        status_code=201
    )

@router.post("/login")
async def login(data: LoginRequest, db: Session = Depends(get_db)):
    session = AuthService.login(db, data)
    return success_response(message="Welcome back!", data=_session_payload(session))

@router.post("/logout")
async def logout(
    token: str = Depends(get_bearer_token),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    AuthService.logout(db, token)
    return success_response(message="Signed out")

@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return success_response(message="Current user", data=user_to_dict(user))
