"""
Academic hierarchy service (College -> Faculty -> Department)
"""

import logging
from typing import Dict, List, Optional, Type

from sqlalchemy import nulls_last
from sqlalchemy.orm import Session

from sdgclub.core.db import Base
from sdgclub.models import College, Department, Faculty
from sdgclub.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def _ordered(db: Session, model: Type[Base]):
    return db.query(model).order_by(nulls_last(model.display_order.asc()), model.name)


def _get(db: Session, model: Type[Base], item_id: Optional[str], label: str):
    item = db.get(model, item_id) if item_id else None
    if not item:
        raise NotFoundError(f"{label} not found")
    return item


def _apply(item, changes: Dict) -> None:
    for field, value in changes.items():
        setattr(item, field, value)


def _node(item, **extra) -> Dict:
    return {"id": item.id, "name": item.name, "display_order": item.display_order, **extra}


class AcademicService:
    """CRUD over colleges, faculties and departments.

    Deletes rely on the foreign keys: removing a college removes its
    faculties, removing a faculty removes its departments.
    """

    # -------- Colleges --------

    @staticmethod
    def list_colleges(db: Session) -> List[College]:
        return _ordered(db, College).all()

    @staticmethod
    def create_college(db: Session, name: str, display_order: Optional[int] = None) -> College:
        college = College(name=name.strip(), display_order=display_order)
        db.add(college)
        db.commit()
        db.refresh(college)
        return college

    @staticmethod
    def update_college(db: Session, college_id: str, changes: Dict) -> College:
        college = _get(db, College, college_id, "College")
        _apply(college, changes)
        db.commit()
        db.refresh(college)
        return college

    @staticmethod
    def delete_college(db: Session, college_id: str) -> None:
        college = _get(db, College, college_id, "College")
        db.delete(college)
        db.commit()
        logger.info("Deleted college %s and its faculties", college_id)

    # -------- Faculties --------

    @staticmethod
    def list_faculties(db: Session, college_id: Optional[str] = None, standalone: bool = False) -> List[Faculty]:
        query = _ordered(db, Faculty)
        if standalone:
            query = query.filter(Faculty.college_id.is_(None))
        elif college_id:
            query = query.filter(Faculty.college_id == college_id)
        return query.all()

    @staticmethod
    def create_faculty(db: Session, name: str, college_id: Optional[str] = None, display_order: Optional[int] = None) -> Faculty:
        if college_id:
            _get(db, College, college_id, "College")
        faculty = Faculty(name=name.strip(), college_id=college_id, display_order=display_order)
        db.add(faculty)
        db.commit()
        db.refresh(faculty)
        return faculty

    @staticmethod
    def update_faculty(db: Session, faculty_id: str, changes: Dict) -> Faculty:
        faculty = _get(db, Faculty, faculty_id, "Faculty")
        _apply(faculty, changes)
        db.commit()
        db.refresh(faculty)
        return faculty

    @staticmethod
    def reparent_faculty(db: Session, faculty_id: str, college_id: Optional[str]) -> Faculty:
        """Move a faculty under a college, or make it standalone with None"""
        faculty = _get(db, Faculty, faculty_id, "Faculty")
        if college_id:
            _get(db, College, college_id, "College")
        faculty.college_id = college_id
        db.commit()
        db.refresh(faculty)
        return faculty

    @staticmethod
    def delete_faculty(db: Session, faculty_id: str) -> None:
        faculty = _get(db, Faculty, faculty_id, "Faculty")
        db.delete(faculty)
        db.commit()
        logger.info("Deleted faculty %s and its departments", faculty_id)

    # -------- Departments --------

    @staticmethod
    def list_departments(db: Session, faculty_id: Optional[str] = None) -> List[Department]:
        query = _ordered(db, Department)
        if faculty_id:
            query = query.filter(Department.faculty_id == faculty_id)
        return query.all()

    @staticmethod
    def create_department(db: Session, name: str, faculty_id: str, display_order: Optional[int] = None) -> Department:
        _get(db, Faculty, faculty_id, "Faculty")
        department = Department(name=name.strip(), faculty_id=faculty_id, display_order=display_order)
        db.add(department)
        db.commit()
        db.refresh(department)
        return department

    @staticmethod
    def update_department(db: Session, department_id: str, changes: Dict) -> Department:
        department = _get(db, Department, department_id, "Department")
        if changes.get("faculty_id"):
            _get(db, Faculty, changes["faculty_id"], "Faculty")
        else:
            changes.pop("faculty_id", None)
        _apply(department, changes)
        db.commit()
        db.refresh(department)
        return department

    @staticmethod
    def delete_department(db: Session, department_id: str) -> None:
        department = _get(db, Department, department_id, "Department")
        db.delete(department)
        db.commit()

    # -------- Tree --------

    @staticmethod
    def tree(db: Session) -> Dict:
        """Whole hierarchy: colleges with nested faculties, plus standalone faculties"""
        departments: Dict[str, List[Dict]] = {}
        for dept in AcademicService.list_departments(db):
            departments.setdefault(dept.faculty_id, []).append(_node(dept, faculty_id=dept.faculty_id))

        faculties_by_college: Dict[Optional[str], List[Dict]] = {}
        for faculty in AcademicService.list_faculties(db):
            faculties_by_college.setdefault(faculty.college_id, []).append(
                _node(faculty, college_id=faculty.college_id, departments=departments.get(faculty.id, []))
            )

        return {
            "colleges": [
                _node(college, faculties=faculties_by_college.get(college.id, []))
                for college in AcademicService.list_colleges(db)
            ],
            "standalone_faculties": faculties_by_college.get(None, []),
        }
