"""
Admin routes for the College -> Faculty -> Department hierarchy
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sdgclub.core.db import get_db
from sdgclub.schemas.academic import (
    CollegeCreate,
    CollegeResponse,
    CollegeUpdate,
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
    FacultyCreate,
    FacultyReparent,
    FacultyResponse,
    FacultyUpdate,
)
from sdgclub.services.academic_service import AcademicService
from sdgclub.utils.security import require_admin
from sdgclub.utils.responses import success_response

router = APIRouter(dependencies=[Depends(require_admin)])

@router.get("/tree")
async def get_tree(db: Session = Depends(get_db)):
    return success_response(message="Academic structure retrieved", data=AcademicService.tree(db))

# -------- Colleges --------

@router.get("/colleges")
async def list_colleges(db: Session = Depends(get_db)):
    colleges = [CollegeResponse.model_validate(c) for c in AcademicService.list_colleges(db)]
    return success_response(message="Colleges retrieved", data=colleges)

@router.post("/colleges")
async def create_college(data: CollegeCreate, db: Session = Depends(get_db)):
    college = AcademicService.create_college(db, data.name, data.display_order)
    return success_response(message="College created", data=CollegeResponse.model_validate(college), status_code=201)

@router.patch("/colleges/{college_id}")
async def update_college(college_id: str, data: CollegeUpdate, db: Session = Depends(get_db)):
    college = AcademicService.update_college(db, college_id, data.model_dump(exclude_unset=True))
    return success_response(message="College updated", data=CollegeResponse.model_validate(college))

@router.delete("/colleges/{college_id}")
async def delete_college(college_id: str, db: Session = Depends(get_db)):
    """Deleting a college also deletes its faculties and their departments"""
    AcademicService.delete_college(db, college_id)
    return success_response(message="College deleted")

# -------- Faculties --------

@router.get("/faculties")
async def list_faculties(
    college_id: Optional[str] = Query(None),
    standalone: bool = Query(False),
    db: Session = Depends(get_db)
):
    faculties = AcademicService.list_faculties(db, college_id=college_id, standalone=standalone)
    return success_response(message="Faculties retrieved", data=[FacultyResponse.model_validate(f) for f in faculties])

@router.post("/faculties")
async def create_faculty(data: FacultyCreate, db: Session = Depends(get_db)):
    faculty = AcademicService.create_faculty(db, data.name, data.college_id, data.display_order)
    return success_response(message="Faculty created", data=FacultyResponse.model_validate(faculty), status_code=201)

@router.patch("/faculties/{faculty_id}")
async def update_faculty(faculty_id: str, data: FacultyUpdate, db: Session = Depends(get_db)):
    faculty = AcademicService.update_faculty(db, faculty_id, data.model_dump(exclude_unset=True))
    return success_response(message="Faculty updated", data=FacultyResponse.model_validate(faculty))

@router.put("/faculties/{faculty_id}/college")
async def reparent_faculty(faculty_id: str, data: FacultyReparent, db: Session = Depends(get_db)):
    """Move a faculty to another college or make it standalone"""
    faculty = AcademicService.reparent_faculty(db, faculty_id, data.college_id)
    return success_response(message="Faculty moved", data=FacultyResponse.model_validate(faculty))

@router.delete("/faculties/{faculty_id}")
async def delete_faculty(faculty_id: str, db: Session = Depends(get_db)):
    AcademicService.delete_faculty(db, faculty_id)
    return success_response(message="Faculty deleted")

# -------- Departments --------

@router.get("/departments")
async def list_departments(faculty_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    departments = AcademicService.list_departments(db, faculty_id=faculty_id)
    return success_response(
        message="Departments retrieved",
        data=[DepartmentResponse.model_validate(d) for d in departments]
    )

@router.post("/departments")
async def create_department(data: DepartmentCreate, db: Session = Depends(get_db)):
    department = AcademicService.create_department(db, data.name, data.faculty_id, data.display_order)
    return success_response(
        message="Department created",
        data=DepartmentResponse.model_validate(department),
        status_code=201
    )

@router.patch("/departments/{department_id}")
async def update_department(department_id: str, data: DepartmentUpdate, db: Session = Depends(get_db)):
    department = AcademicService.update_department(db, department_id, data.model_dump(exclude_unset=True))
    return success_response(message="Department updated", data=DepartmentResponse.model_validate(department))

@router.delete("/departments/{department_id}")
async def delete_department(department_id: str, db: Session = Depends(get_db)):
    AcademicService.delete_department(db, department_id)
    return success_response(message="Department deleted")
