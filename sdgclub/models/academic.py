"""
Academic hierarchy models: College -> Faculty -> Department
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from sdgclub.core.db import Base
from sdgclub.models._mixins import id_column, created_at_column, updated_at_column

class College(Base):
    __tablename__ = "colleges"

    id = id_column()
    name = Column(String(255), nullable=False)
    display_order = Column(Integer, nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    faculties = relationship(
        "Faculty",
        back_populates="college",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

class Faculty(Base):
    __tablename__ = "faculties"

    id = id_column()
    # NULL means a standalone faculty
    college_id = Column(String(36), ForeignKey("colleges.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    display_order = Column(Integer, nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    college = relationship("College", back_populates="faculties")
    departments = relationship(
        "Department",
        back_populates="faculty",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

class Department(Base):
    __tablename__ = "departments"

    id = id_column()
    faculty_id = Column(String(36), ForeignKey("faculties.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    display_order = Column(Integer, nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    faculty = relationship("Faculty", back_populates="departments")
