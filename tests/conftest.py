"""
Shared fixtures: an in-memory database and an API client wired to it
"""

import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sdgclub.core.db import Base, get_db
from sdgclub.models import AppRole, Event, Member, User, UserRole
from sdgclub.services.auth_service import AuthService
from sdgclub.utils.security import rate_limiter

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def client(db_session):
    """API client whose requests share the test session"""
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    rate_limiter.clear()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

def make_user(db, email: str, roles=(AppRole.USER,), full_name: str = "Test User") -> User:
    user = User(email=email, full_name=full_name, password_hash="x")
    for role in roles:
        user.roles.append(UserRole(role=role))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def auth_header(db, user: User) -> dict:
    session = AuthService.create_session(db, user)
    return {"Authorization": f"Bearer {session.token}"}

@pytest.fixture
def admin_headers(db_session):
    admin = make_user(db_session, "admin@example.com", roles=(AppRole.USER, AppRole.ADMIN), full_name="Admin")
    return auth_header(db_session, admin)

@pytest.fixture
def user_headers(db_session):
    user = make_user(db_session, "member@example.com")
    return auth_header(db_session, user)

@pytest.fixture
def member(db_session):
    member = Member(
        full_name="Amina Yusuf",
        matric_number="20/03CSC012",
        department="Computer Science",
        level_of_study="300L",
        whatsapp_number="+2348012345678",
        expected_graduation_year=2025,
    )
    db_session.add(member)
    db_session.commit()
    db_session.refresh(member)
    return member

@pytest.fixture
def upcoming_event(db_session):
    event = Event(
        title="SDG Awareness Walk",
        description="Walk for the goals",
        start_date=datetime.utcnow() + timedelta(days=7),
        location="Main Gate",
        max_attendees=2,
        is_published=True,
        registration_required=True,
    )
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event
