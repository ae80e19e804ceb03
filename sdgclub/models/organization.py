"""
Organization settings, registration links and founding members
"""

from sqlalchemy import Column, String, Text, Boolean, Integer, JSON, ForeignKey

from sdgclub.core.db import Base
from sdgclub.models._mixins import id_column, created_at_column, updated_at_column

class OrganizationSettings(Base):
    __tablename__ = "organization_settings"

    id = id_column()
    name = Column(String(255), nullable=False)
    mission = Column(Text, nullable=True)
    vision = Column(Text, nullable=True)
    about = Column(Text, nullable=True)
    aims = Column(JSON, nullable=True)
    objectives = Column(JSON, nullable=True)
    sdg_info = Column(Text, nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)
    logo_url = Column(String(500), nullable=True)
    updated_at = updated_at_column()

class RegistrationLink(Base):
    __tablename__ = "registration_links"

    id = id_column()
    slug = Column(String(100), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = created_at_column()

class FoundingMember(Base):
    """Founding team shown on the public team page"""
    __tablename__ = "founding_members"

    id = id_column()
    name = Column(String(100), nullable=False)
    role = Column(String(100), nullable=False)
    bio = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    display_order = Column(Integer, nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()
