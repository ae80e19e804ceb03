"""
Member and Alumni models
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from sdgclub.core.db import Base
from sdgclub.models._mixins import id_column, created_at_column, updated_at_column

class Member(Base):
    __tablename__ = "members"

    id = id_column()
    full_name = Column(String(100), nullable=False, index=True)
    matric_number = Column(String(50), unique=True, nullable=False, index=True)
    faculty_id = Column(String(36), ForeignKey("faculties.id", ondelete="SET NULL"), nullable=True)
    department_id = Column(String(36), ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    department = Column(String(100), nullable=False)
    level_of_study = Column(String(10), nullable=True)  # 100L .. 600L
    whatsapp_number = Column(String(20), nullable=False)
    expected_graduation_year = Column(Integer, nullable=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    faculty = relationship("Faculty")
    department_ref = relationship("Department")

class Alumni(Base):
    __tablename__ = "alumni"

    id = id_column()
    full_name = Column(String(100), nullable=False)
    matric_number = Column(String(50), nullable=False, index=True)
    faculty_id = Column(String(36), ForeignKey("faculties.id", ondelete="SET NULL"), nullable=True)
    department_id = Column(String(36), ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    department = Column(String(100), nullable=False)
    whatsapp_number = Column(String(20), nullable=True)
    graduation_year = Column(Integer, nullable=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    faculty = relationship("Faculty")
