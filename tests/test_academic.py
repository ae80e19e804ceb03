"""
Tests for the College -> Faculty -> Department hierarchy
"""

import pytest

from sdgclub.models import Department, Faculty, Member
from sdgclub.services.academic_service import AcademicService
from sdgclub.services.errors import NotFoundError

@pytest.fixture
def hierarchy(db_session):
    college = AcademicService.create_college(db_session, "College of Sciences", display_order=1)
    faculty = AcademicService.create_faculty(db_session, "Natural Sciences", college_id=college.id)
    AcademicService.create_department(db_session, "Chemistry", faculty.id, display_order=2)
    AcademicService.create_department(db_session, "Biology", faculty.id, display_order=1)
    standalone = AcademicService.create_faculty(db_session, "Law")
    return college, faculty, standalone

def test_tree_nests_and_orders(db_session, hierarchy):
    college, faculty, standalone = hierarchy
    tree = AcademicService.tree(db_session)

    assert [c["name"] for c in tree["colleges"]] == ["College of Sciences"]
    nested = tree["colleges"][0]["faculties"][0]
    assert nested["id"] == faculty.id
    assert [d["name"] for d in nested["departments"]] == ["Biology", "Chemistry"]
    assert [f["id"] for f in tree["standalone_faculties"]] == [standalone.id]

def test_null_display_order_sorts_last(db_session):
    AcademicService.create_college(db_session, "Alpha")
    AcademicService.create_college(db_session, "Zeta", display_order=1)

    assert [c.name for c in AcademicService.list_colleges(db_session)] == ["Zeta", "Alpha"]

def test_reparent_faculty(db_session, hierarchy):
    college, faculty, standalone = hierarchy

    AcademicService.reparent_faculty(db_session, standalone.id, college.id)
    assert {f.id for f in AcademicService.list_faculties(db_session, college_id=college.id)} == {faculty.id, standalone.id}

    AcademicService.reparent_faculty(db_session, faculty.id, None)
    assert [f.id for f in AcademicService.list_faculties(db_session, standalone=True)] == [faculty.id]

def test_reparent_to_missing_college(db_session, hierarchy):
    _, faculty, _ = hierarchy
    with pytest.raises(NotFoundError):
        AcademicService.reparent_faculty(db_session, faculty.id, "missing")

def test_delete_college_cascades(db_session, hierarchy):
    college, _, standalone = hierarchy

    AcademicService.delete_college(db_session, college.id)

    assert [f.id for f in db_session.query(Faculty).all()] == [standalone.id]
    assert db_session.query(Department).count() == 0

def test_delete_faculty_clears_member_reference(db_session, hierarchy):
    _, faculty, _ = hierarchy
    member = Member(
        full_name="Kemi Ola",
        matric_number="21/01CHM002",
        faculty_id=faculty.id,
        department="Chemistry",
        whatsapp_number="+2348011111111",
    )
    db_session.add(member)
    db_session.commit()

    AcademicService.delete_faculty(db_session, faculty.id)
    db_session.expire_all()

    assert db_session.get(Member, member.id).faculty_id is None

def test_department_requires_faculty(db_session):
    with pytest.raises(NotFoundError):
        AcademicService.create_department(db_session, "Physics", "missing")

def test_admin_routes(client, admin_headers):
    created = client.post("/admin/academic/colleges", json={"name": "College of Arts"}, headers=admin_headers)
    assert created.status_code == 201

    college_id = created.json()["data"]["id"]
    faculty = client.post(
        "/admin/academic/faculties",
        json={"name": "Humanities", "college_id": college_id},
        headers=admin_headers,
    ).json()["data"]

    moved = client.put(f"/admin/academic/faculties/{faculty['id']}/college", json={"college_id": None}, headers=admin_headers)
    assert moved.json()["data"]["college_id"] is None

    public_tree = client.get("/academic-structure").json()["data"]
    assert [f["name"] for f in public_tree["standalone_faculties"]] == ["Humanities"]

def test_names_cannot_be_cleared(client, admin_headers, db_session, hierarchy):
    college, faculty, standalone = hierarchy
    department = db_session.query(Department).filter_by(name="Biology").one()

    assert client.patch(f"/admin/academic/colleges/{college.id}", json={"name": None}, headers=admin_headers).status_code == 422
    assert client.patch(f"/admin/academic/faculties/{faculty.id}", json={"name": None}, headers=admin_headers).status_code == 422
    response = client.patch(
        f"/admin/academic/departments/{department.id}",
        json={"faculty_id": None},
        headers=admin_headers,
    )
    assert response.status_code == 422

    db_session.refresh(college)
    assert college.name == "College of Sciences"

def test_display_order_can_be_cleared(client, admin_headers, hierarchy):
    college, faculty, standalone = hierarchy
    response = client.patch(f"/admin/academic/colleges/{college.id}", json={"display_order": None}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["display_order"] is None
