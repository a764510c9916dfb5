"""Tests for the project service and its client propagation rules."""

from datetime import datetime, timedelta

import pytest

from advisory_crm.core.errors import NotFoundError, ValidationError
from advisory_crm.models.client import Client
from advisory_crm.models.project import Project
from advisory_crm.schemas.project import ProjectFilters
from advisory_crm.services import projects as project_service
from advisory_crm.services.clients import create_client
from advisory_crm.services.team_members import create_team_member

from conftest import NOW


def _create(session, clock, **fields):
    payload = {"name": "Acme Deal"}
    payload.update(fields)
    return project_service.create_project(session, payload, clock())


class TestBucketStart:

    def test_today(self):
        assert project_service.bucket_start("today", NOW) == datetime(2024, 5, 15)

    def test_week_starts_on_sunday(self):
        assert project_service.bucket_start("week", NOW) == datetime(2024, 5, 12)
        sunday = datetime(2024, 5, 12, 9, 0)
        assert project_service.bucket_start("week", sunday) == datetime(2024, 5, 12)

    def test_month(self):
        assert project_service.bucket_start("month", NOW) == datetime(2024, 5, 1)

    def test_quarter(self):
        assert project_service.bucket_start("quarter", NOW) == datetime(2024, 4, 1)
        assert project_service.bucket_start("quarter", datetime(2024, 12, 31)) == datetime(2024, 10, 1)

    def test_unknown(self):
        assert project_service.bucket_start("decade", NOW) is None


class TestCreateProject:

    def test_direct_project_without_client_creates_one(self, session, clock, member):
        project = _create(session, clock, status="pending", lastContacted="2024-05-10")

        assert project.client_id is not None
        client = session.get(Client, project.client_id)
        assert client.name == "Acme Deal"
        assert client.status == "pending"
        assert client.last_contacted == datetime(2024, 5, 10)

    def test_omitted_type_counts_as_direct(self, session, clock, member):
        project = _create(session, clock)
        assert project.type == "direct"
        assert project.client_id is not None

    def test_affiliate_project_gets_no_client(self, session, clock, member):
        project = _create(session, clock, type="affiliate", affiliatePartner="kotak")
        assert project.client_id is None

    def test_existing_client_is_linked(self, session, clock, member):
        client = create_client(session, {"name": "Meridian"}, clock())
        project = _create(session, clock, clientId=client.id)
        assert project.client_id == client.id
        assert session.get(Client, client.id).name == "Meridian"

    def test_defaults_to_first_member_by_name(self, session, clock, member):
        create_team_member(
            session, {"name": "Zed Zimmer", "email": "zed@example.com", "role": "Analyst"}, clock()
        )
        project = _create(session, clock)
        assert project.assigned_to_id == member.id
        assert project.assigned_to.name == "Alex Morgan"

    def test_no_team_members(self, session, clock):
        with pytest.raises(ValidationError):
            _create(session, clock)

    def test_unknown_assignee(self, session, clock, member):
        with pytest.raises(ValidationError) as exc_info:
            _create(session, clock, assignedToId=999)
        assert "assignedToId" in exc_info.value.message

    def test_field_and_reference_errors_reported_together(self, session, clock, member):
        with pytest.raises(ValidationError) as exc_info:
            _create(session, clock, name="A", type="affiliate", assignedToId=999, clientId="404")
        errors = exc_info.value.errors
        assert len(errors) == 4
        assert any("Name must be at least 2 characters" in e for e in errors)
        assert any("Affiliate partner is required" in e for e in errors)
        assert any('Team member 999 does not exist at "assignedToId"' == e for e in errors)
        assert any('Client 404 does not exist at "clientId"' == e for e in errors)

    def test_type_rule_and_reference_errors_reported_together(self, session, clock, member):
        with pytest.raises(ValidationError) as exc_info:
            _create(session, clock, type="other", assignedToId=999)
        assert len(exc_info.value.errors) == 2

    def test_timestamps_round_trip(self, session, clock, member):
        project = _create(session, clock, lastContacted="2024-05-10T08:15:00Z")
        session.expire_all()

        stored = session.get(Project, project.id)
        assert stored.created_at == NOW
        assert stored.updated_at == NOW
        assert stored.last_contacted == datetime(2024, 5, 10, 8, 15)
        assert stored.created_at.tzinfo is None

    def test_last_contacted_moves_client_forward(self, session, clock, member):
        client = create_client(session, {"name": "Meridian", "lastContacted": "2024-05-01"}, clock())
        _create(session, clock, clientId=client.id, lastContacted="2024-05-10")
        assert session.get(Client, client.id).last_contacted == datetime(2024, 5, 10)


class TestUpdateProject:

    def test_missing_project(self, session, clock, member):
        with pytest.raises(NotFoundError):
            project_service.update_project(session, 42, {"status": "completed"}, clock())

    def test_only_sent_fields_change(self, session, clock, member):
        project = _create(session, clock, poc="Rajiv Mehta", phoneNumber="+91 98765 43210")
        updated = project_service.update_project(session, project.id, {"poc": "Neha Gupta"}, clock())
        assert updated.poc == "Neha Gupta"
        assert updated.phone_number == "+91 98765 43210"

    def test_updated_at_advances(self, session, clock, member):
        project = _create(session, clock)
        clock.now = NOW + timedelta(hours=1)
        updated = project_service.update_project(session, project.id, {"poc": "Neha Gupta"}, clock())
        assert updated.updated_at == NOW + timedelta(hours=1)
        assert updated.created_at == NOW

    def test_status_propagates_to_client(self, session, clock, member):
        project = _create(session, clock)
        project_service.update_project(session, project.id, {"status": "completed"}, clock())
        assert session.get(Client, project.client_id).status == "completed"

    def test_last_contacted_is_monotonic(self, session, clock, member):
        project = _create(session, clock, lastContacted="2024-05-10")

        project_service.update_project(session, project.id, {"lastContacted": "2024-05-01"}, clock())
        assert session.get(Client, project.client_id).last_contacted == datetime(2024, 5, 10)

        project_service.update_project(session, project.id, {"lastContacted": "2024-05-14T09:00:00Z"}, clock())
        assert session.get(Client, project.client_id).last_contacted == datetime(2024, 5, 14, 9, 0)

    def test_clearing_last_contacted_leaves_client(self, session, clock, member):
        project = _create(session, clock, lastContacted="2024-05-10")
        updated = project_service.update_project(session, project.id, {"lastContacted": None}, clock())
        assert updated.last_contacted is None
        assert session.get(Client, project.client_id).last_contacted == datetime(2024, 5, 10)

    def test_every_update_error_reported(self, session, clock, member):
        project = _create(session, clock)
        with pytest.raises(ValidationError) as exc_info:
            project_service.update_project(
                session, project.id, {"name": "A", "type": "affiliate", "assignedToId": 999}, clock()
            )
        errors = exc_info.value.errors
        assert len(errors) == 3
        assert any("Name must be at least 2 characters" in e for e in errors)
        assert any("Affiliate partner is required" in e for e in errors)
        assert any("Team member 999 does not exist" in e for e in errors)

    def test_switch_to_affiliate_needs_partner(self, session, clock, member):
        project = _create(session, clock)
        with pytest.raises(ValidationError):
            project_service.update_project(session, project.id, {"type": "affiliate"}, clock())

        updated = project_service.update_project(
            session, project.id, {"type": "affiliate", "affiliatePartner": "lgt"}, clock()
        )
        assert updated.type == "affiliate"
        assert updated.affiliate_partner == "lgt"


class TestListProjects:

    @pytest.fixture
    def projects(self, session, clock, member):
        other = create_team_member(
            session, {"name": "Sarah Johnson", "email": "sarah@example.com", "role": "Senior Advisor"}, clock()
        )
        return {
            "today": _create(session, clock, name="Today Deal", lastContacted="2024-05-15T08:00:00"),
            "sunday": _create(session, clock, name="Sunday Deal", lastContacted="2024-05-12",
                              status="pending", assignedToId=other.id),
            "april": _create(session, clock, name="April Deal", lastContacted="2024-04-02",
                             type="affiliate", affiliatePartner="kotak"),
            "never": _create(session, clock, name="Cold Deal", type="other", category="pr"),
        }

    def _names(self, session, clock, **filters):
        return {p.name for p in project_service.list_projects(session, ProjectFilters(**filters), clock())}

    def test_no_filters(self, session, clock, projects):
        assert len(project_service.list_projects(session, None, clock())) == 4

    def test_all_means_unfiltered(self, session, clock, projects):
        assert len(self._names(session, clock, status="all", type="all")) == 4

    def test_buckets(self, session, clock, projects):
        assert self._names(session, clock, last_contacted="today") == {"Today Deal"}
        assert self._names(session, clock, last_contacted="week") == {"Today Deal", "Sunday Deal"}
        assert self._names(session, clock, last_contacted="month") == {"Today Deal", "Sunday Deal"}
        assert self._names(session, clock, last_contacted="quarter") == {
            "Today Deal", "Sunday Deal", "April Deal",
        }

    def test_unknown_bucket_ignored(self, session, clock, projects):
        assert len(self._names(session, clock, last_contacted="decade")) == 4

    def test_filters_combine(self, session, clock, projects):
        assignee = projects["sunday"].assigned_to_id
        assert self._names(session, clock, status="pending", assigned_to_id=str(assignee)) == {"Sunday Deal"}
        assert self._names(session, clock, status="active", assigned_to_id=str(assignee)) == set()
        assert self._names(session, clock, type="direct", last_contacted="today") == {"Today Deal"}

    def test_non_numeric_assignee(self, session, clock, projects):
        with pytest.raises(ValidationError):
            project_service.list_projects(session, ProjectFilters(assigned_to_id="abc"), clock())

    def test_by_partner_and_category(self, session, projects):
        assert [p.name for p in project_service.list_projects_by_affiliate_partner(session, "kotak")] == ["April Deal"]
        assert project_service.list_projects_by_affiliate_partner(session, "lgt") == []
        assert [p.name for p in project_service.list_projects_by_category(session, "pr")] == ["Cold Deal"]

    def test_by_client(self, session, projects):
        client_id = projects["today"].client_id
        assert [p.name for p in project_service.list_projects_by_client(session, client_id)] == ["Today Deal"]

    def test_most_recently_updated_first(self, session, clock, projects):
        clock.now = NOW + timedelta(minutes=5)
        project_service.update_project(session, projects["april"].id, {"poc": "Vikram Shah"}, clock())
        listed = project_service.list_projects(session, None, clock())
        assert listed[0].name == "April Deal"


class TestDeleteProject:

    def test_client_survives(self, session, clock, member):
        project = _create(session, clock)
        project_service.delete_project(session, project.id)
        assert project_service.list_projects(session, None, clock()) == []
        assert session.get(Client, project.client_id) is not None

    def test_missing_is_noop(self, session):
        project_service.delete_project(session, 404)
