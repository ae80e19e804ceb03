"""
Tests for settings, registration links, feedback moderation and analytics
"""

import pytest
from datetime import datetime

from sdgclub.core.config import settings
from sdgclub.models import Faculty, FoundingMember, Member
from sdgclub.schemas.organization import FoundingMemberCreate, FoundingMemberUpdate, RegistrationLinkCreate
from sdgclub.services.analytics_service import AnalyticsService, growth_rate
from sdgclub.services.errors import NotFoundError
from sdgclub.services.organization_service import TeamService

class TestRegistrationLinks:
    """Test shareable registration links"""

    def test_slug_normalized(self):
        assert RegistrationLinkCreate(slug="  Freshers-2030 ").slug == "freshers-2030"

    def test_slug_rejects_other_characters(self):
        with pytest.raises(ValueError):
            RegistrationLinkCreate(slug="fresh ers!")

    def test_create_toggle_and_check(self, client, admin_headers):
        created = client.post("/admin/registration-links", json={"slug": "week-one"}, headers=admin_headers)
        assert created.status_code == 201
        link = created.json()["data"]
        assert link["url"].endswith("/register?ref=week-one")

        duplicate = client.post("/admin/registration-links", json={"slug": "week-one"}, headers=admin_headers)
        assert duplicate.status_code == 409
        assert duplicate.json()["error_code"] == "DUPLICATE_SLUG"

        assert client.get("/register/links/week-one").json()["data"]["is_active"] is True
        client.patch(f"/admin/registration-links/{link['id']}", json={"is_active": False}, headers=admin_headers)
        assert client.get("/register/links/week-one").json()["data"]["is_active"] is False

    def test_link_qr_code(self, client, admin_headers):
        link = client.post("/admin/registration-links", json={"slug": "stand"}, headers=admin_headers).json()["data"]
        response = client.get(f"/admin/registration-links/{link['id']}/qr.png", headers=admin_headers)
        assert response.status_code == 200
        assert response.content.startswith(b"\x89PNG")

class TestFeedback:
    """Test feedback submission and moderation"""

    def test_only_approved_entries_are_public(self, client, admin_headers):
        submitted = client.post("/feedback", json={
            "name": "Halima",
            "email": "halima@example.com",
            "type": "testimonial",
            "message": "The club changed how I see climate action.",
        })
        assert submitted.status_code == 201
        assert client.get("/testimonials").json()["data"] == []

        pending = client.get("/admin/feedback?is_approved=false", headers=admin_headers).json()["data"]
        client.patch(f"/admin/feedback/{pending[0]['id']}", json={"is_approved": True}, headers=admin_headers)

        public = client.get("/testimonials?type=testimonial").json()["data"]
        assert [f["name"] for f in public] == ["Halima"]
        assert "email" not in public[0]

    def test_message_too_short(self, client):
        response = client.post("/feedback", json={"name": "Halima", "email": "h@example.com", "message": "short"})
        assert response.status_code == 422

class TestSettings:
    """Test the organization settings singleton"""

    def test_defaults_then_update(self, client, admin_headers):
        initial = client.get("/settings").json()["data"]
        assert initial["name"] == "ASAC SDG Advocacy Club"
        assert initial["aims"] == []

        updated = client.put(
            "/admin/settings",
            json={"mission": "Advance the SDGs on campus", "aims": ["Educate", " ", "Act"]},
            headers=admin_headers,
        ).json()["data"]
        assert updated["id"] == initial["id"]
        assert updated["aims"] == ["Educate", "Act"]

    def test_name_cannot_be_cleared(self, client, admin_headers):
        response = client.put("/admin/settings", json={"name": None}, headers=admin_headers)
        assert response.status_code == 422
        assert client.get("/settings").json()["data"]["name"] == "ASAC SDG Advocacy Club"

    def test_contact_without_smtp(self, client, monkeypatch):
        monkeypatch.setattr(settings, "SMTP_HOST", None)

        response = client.post("/contact", json={
            "name": "Visitor",
            "email": "visitor@example.com",
            "subject": "Partnership",
            "message": "We would like to partner on an SDG event.",
        })
        assert response.status_code == 503

class TestFoundingTeam:
    """Test the founding team listing"""

    def test_ordered_with_unset_positions_last(self, db_session):
        TeamService.create(db_session, FoundingMemberCreate(name="Yusuf Bello", role="Secretary"))
        TeamService.create(db_session, FoundingMemberCreate(name="Aisha Bello", role="Treasurer"))
        TeamService.create(db_session, FoundingMemberCreate(name="Musa Ade", role="President", display_order=1))

        assert [m.name for m in TeamService.list(db_session)] == ["Musa Ade", "Aisha Bello", "Yusuf Bello"]

    def test_update_and_delete(self, db_session):
        founder = TeamService.create(db_session, FoundingMemberCreate(name=" Musa Ade ", role="President"))
        assert founder.name == "Musa Ade"

        updated = TeamService.update(db_session, founder.id, FoundingMemberUpdate(bio="Started the club in 2019"))
        assert updated.bio == "Started the club in 2019"
        assert updated.role == "President"

        TeamService.delete(db_session, founder.id)
        assert db_session.query(FoundingMember).count() == 0
        with pytest.raises(NotFoundError):
            TeamService.delete(db_session, founder.id)

    def test_name_and_role_cannot_be_cleared(self):
        with pytest.raises(ValueError):
            FoundingMemberUpdate(role=None)

    def test_admin_manages_public_team(self, client, admin_headers):
        created = client.post(
            "/admin/team",
            json={"name": "Musa Ade", "role": "President", "display_order": 2},
            headers=admin_headers,
        )
        assert created.status_code == 201
        founder_id = created.json()["data"]["id"]

        client.post("/admin/team", json={"name": "Aisha Bello", "role": "Vice President", "display_order": 1}, headers=admin_headers)
        assert [m["name"] for m in client.get("/team").json()["data"]] == ["Aisha Bello", "Musa Ade"]

        patched = client.patch(f"/admin/team/{founder_id}", json={"role": "Patron"}, headers=admin_headers)
        assert patched.json()["data"]["role"] == "Patron"

        assert client.delete(f"/admin/team/{founder_id}", headers=admin_headers).status_code == 200
        assert [m["name"] for m in client.get("/team").json()["data"]] == ["Aisha Bello"]

    def test_team_management_requires_admin(self, client, user_headers):
        response = client.post("/admin/team", json={"name": "Musa Ade", "role": "President"}, headers=user_headers)
        assert response.status_code == 403

class TestAnalytics:
    """Test dashboard aggregations"""

    def test_growth_rate(self):
        assert growth_rate(15, 10) == 50
        assert growth_rate(3, 0) == 100
        assert growth_rate(0, 0) == 0

    def test_membership_breakdown(self, db_session):
        faculty = Faculty(name="Sciences")
        db_session.add(faculty)
        db_session.flush()
        db_session.add_all([
            Member(full_name="A One", matric_number="A1", department="Physics", faculty_id=faculty.id,
                   whatsapp_number="+2348000000001", level_of_study="100L", created_at=datetime(2030, 5, 3)),
            Member(full_name="B Two", matric_number="B2", department="Physics", faculty_id=faculty.id,
                   whatsapp_number="+2348000000002", created_at=datetime(2030, 4, 20)),
            Member(full_name="C Three", matric_number="C3", department="Law",
                   whatsapp_number="+2348000000003", expected_graduation_year=2031, created_at=datetime(2030, 5, 9)),
        ])
        db_session.commit()

        data = AnalyticsService.membership(db_session, now=datetime(2030, 5, 15))

        assert data["stats"] == {"total": 3, "this_month": 2, "last_month": 1, "growth_rate": 100}
        assert data["faculty_distribution"][0] == {"name": "Sciences", "count": 2}
        assert data["department_distribution"][0] == {"name": "Physics", "count": 2, "faculty": "Sciences"}
        assert data["monthly_registrations"][-1] == {"month": "May 30", "count": 2}
        assert len(data["monthly_registrations"]) == 12
        assert {"level": "Not specified", "count": 2} in data["level_distribution"]
        assert data["graduation_years"] == [{"year": 2031, "count": 1}]

    def test_dashboard_route(self, client, admin_headers, member):
        data = client.get("/admin/dashboard", headers=admin_headers).json()["data"]
        assert data["total_members"] == 1
        assert data["recent_registrations"][0]["full_name"] == "Amina Yusuf"
