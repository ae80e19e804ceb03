"""
Tests for event registration, capacity and availability
"""

import pytest
from datetime import datetime, timedelta

from conftest import auth_header, make_user
from sdgclub.models import Event, EventRegistration
from sdgclub.schemas.event import RegistrationCreate
from sdgclub.services.errors import AlreadyRegistered, EventFull, NotFoundError, RegistrationClosed
from sdgclub.services.event_service import EventService, availability, registration_key

class TestRegistration:
    """Test registration rules"""

    def test_register_success(self, db_session, upcoming_event):
        registration = EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="  Bola Ade "))

        assert registration.name == "Bola Ade"
        assert registration.name_key == "bola ade"
        assert db_session.query(EventRegistration).count() == 1

    def test_duplicate_name_rejected(self, db_session, upcoming_event):
        EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="Bola Ade"))

        with pytest.raises(AlreadyRegistered) as exc:
            EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="bola  ADE"))

        assert exc.value.error_code == "ALREADY_REGISTERED"
        assert db_session.query(EventRegistration).count() == 1

    def test_fully_booked(self, db_session, upcoming_event):
        EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="First"))
        EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="Second"))

        with pytest.raises(EventFull) as exc:
            EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="Third"))

        assert exc.value.message == "Fully Booked"
        assert db_session.query(EventRegistration).count() == 2

    def test_past_event_closed(self, db_session, upcoming_event):
        later = upcoming_event.start_date + timedelta(hours=1)
        with pytest.raises(RegistrationClosed):
            EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="Late"), now=later)

    def test_unpublished_event_hidden(self, db_session, upcoming_event):
        upcoming_event.is_published = False
        db_session.commit()

        with pytest.raises(NotFoundError):
            EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="Someone"))

    def test_registration_not_required(self, db_session, upcoming_event):
        upcoming_event.registration_required = False
        db_session.commit()

        with pytest.raises(RegistrationClosed):
            EventService.register(db_session, upcoming_event.id, RegistrationCreate(name="Someone"))

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            RegistrationCreate(name="   ")

    def test_blank_optional_fields_become_none(self):
        data = RegistrationCreate(name="Bola", email="", whatsapp_number="  ")
        assert data.email is None
        assert data.whatsapp_number is None

class TestAvailability:
    """Test the status shown on event pages"""

    def make_event(self, **overrides):
        values = dict(
            title="Talk",
            start_date=datetime(2030, 1, 10, 14, 0),
            max_attendees=10,
            registration_required=True,
            is_published=True,
        )
        values.update(overrides)
        return Event(**values)

    def test_open(self):
        info = availability(self.make_event(), 3, now=datetime(2030, 1, 1))
        assert info["spots_left"] == 7
        assert info["status_label"] == "Registration Open"
        assert info["can_register"] is True

    def test_full_when_count_reaches_capacity(self):
        info = availability(self.make_event(), 10, now=datetime(2030, 1, 1))
        assert info["is_full"] is True
        assert info["spots_left"] == 0
        assert info["status_label"] == "Fully Booked"
        assert info["can_register"] is False

    def test_spots_never_negative(self):
        info = availability(self.make_event(max_attendees=2), 5, now=datetime(2030, 1, 1))
        assert info["spots_left"] == 0

    def test_unlimited_capacity(self):
        info = availability(self.make_event(max_attendees=None), 500, now=datetime(2030, 1, 1))
        assert info["spots_left"] is None
        assert info["is_full"] is False

    def test_past_event(self):
        info = availability(self.make_event(), 0, now=datetime(2030, 2, 1))
        assert info["is_past"] is True
        assert info["status_label"] == "Past Event"
        assert info["can_register"] is False

    def test_no_registration_required(self):
        info = availability(self.make_event(registration_required=False), 0, now=datetime(2030, 1, 1))
        assert info["status_label"] == "No Registration Required"
        assert info["can_register"] is False

def test_registration_key_normalizes_whitespace_and_case():
    assert registration_key("  Bola   ADE ") == "bola ade"

class TestRegistrationRoutes:
    """Test the public registration endpoint"""

    def test_register_and_duplicate(self, client, upcoming_event):
        url = f"/events/{upcoming_event.id}/registrations"

        first = client.post(url, json={"name": "Chidi Okafor"})
        assert first.status_code == 201
        assert first.json()["message"] == "Registration Successful!"

        second = client.post(url, json={"name": "chidi okafor"})
        assert second.status_code == 409
        assert second.json()["error_code"] == "ALREADY_REGISTERED"

    def test_full_event_returns_fully_booked(self, client, upcoming_event):
        url = f"/events/{upcoming_event.id}/registrations"
        client.post(url, json={"name": "One"})
        client.post(url, json={"name": "Two"})

        response = client.post(url, json={"name": "Three"})
        assert response.status_code == 409
        assert response.json()["message"] == "Fully Booked"

        detail = client.get(f"/events/{upcoming_event.id}").json()["data"]
        assert detail["is_full"] is True
        assert detail["registration_count"] == 2

    def test_event_list_only_published(self, client, db_session, upcoming_event):
        db_session.add(Event(title="Draft", start_date=datetime.utcnow() + timedelta(days=3)))
        db_session.commit()

        titles = [e["title"] for e in client.get("/events").json()["data"]]
        assert titles == ["SDG Awareness Walk"]

    def test_registration_uses_linked_member_only(self, client, db_session, member, upcoming_event):
        namesake = make_user(db_session, "amina@example.com", full_name="Amina Yusuf")

        response = client.post(
            f"/events/{upcoming_event.id}/registrations",
            json={"name": "Amina Yusuf"},
            headers=auth_header(db_session, namesake),
        )
        assert response.status_code == 201
        assert response.json()["data"]["member_id"] is None

        db_session.refresh(member)
        assert member.user_id is None

    def test_registration_records_linked_member(self, client, db_session, member, upcoming_event):
        owner = make_user(db_session, "owner@example.com", full_name="Someone Else")
        member.user_id = owner.id
        db_session.commit()

        response = client.post(
            f"/events/{upcoming_event.id}/registrations",
            json={"name": "Amina Yusuf"},
            headers=auth_header(db_session, owner),
        )
        assert response.json()["data"]["member_id"] == member.id

class TestEventAdminRoutes:
    """Test the admin event editor"""

    @pytest.mark.parametrize("field", ["title", "start_date", "is_published", "registration_required"])
    def test_required_fields_cannot_be_cleared(self, client, admin_headers, db_session, upcoming_event, field):
        response = client.patch(f"/admin/events/{upcoming_event.id}", json={field: None}, headers=admin_headers)
        assert response.status_code == 422

        db_session.refresh(upcoming_event)
        assert upcoming_event.title == "SDG Awareness Walk"
        assert upcoming_event.start_date is not None

    def test_partial_update(self, client, admin_headers, upcoming_event):
        response = client.patch(
            f"/admin/events/{upcoming_event.id}",
            json={"location": None, "title": "SDG Awareness Walk 2"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["title"] == "SDG Awareness Walk 2"
        assert response.json()["data"]["location"] is None
