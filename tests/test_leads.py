"""Tests for lead intake and lead resolution across demo deletion."""

import csv
import io

import pytest

from src.api.services.demos import DemoService
from src.api.services.leads import (
    CSV_COLUMNS,
    LeadService,
    extract_demo_name_from_lead,
    get_best_demo_name_from_leads,
    leads_to_csv,
)
from src.api.services.mirror import MirrorService
from src.api.services.public_demos import PublicDemoService
from src.models.demo import DemoStatus
from src.models.lead import LeadSubmission
from src.store.codec import decode_fields
from src.utils.errors import ForbiddenError, NotFoundError, ValidationFailure
from tests.conftest import OTHER_OWNER, OWNER


@pytest.fixture
def published(user_client, lead_config):
    demos = DemoService(user_client, OWNER)
    demos.create_demo_metadata("d1", name="Acme CRM tour")
    demos.create_demo_step("d1", "s0", s3_key="k0", order=0)
    demos.update_demo_lead_config("d1", 0, lead_config)
    MirrorService(user_client, OWNER).set_demo_status("d1", DemoStatus.PUBLISHED)
    return "d1"


@pytest.fixture
def viewer(public_client):
    return LeadService(public_client)


@pytest.fixture
def owner_leads(user_client):
    return LeadService(user_client, OWNER)


def _submit(viewer, demo_id="d1", **fields):
    values = {"email": "jane@example.com", "name": "Jane", **fields}
    return viewer.create_lead_submission_public(demo_id, fields=values, source="player")


def _delete_demo(user_client, demo_id="d1"):
    MirrorService(user_client, OWNER).delete_public_demo_items(demo_id)
    DemoService(user_client, OWNER).delete_demo(demo_id)


class TestPublicIntake:
    def test_submission_snapshots_demo(self, viewer, published, stores):
        lead = _submit(viewer)

        assert lead.owner_id == OWNER
        assert lead.email == "jane@example.com"
        assert lead.item_sk.startswith("LEAD#")
        row = stores["lead_intake"].get({"demo_id": "d1", "item_sk": lead.item_sk})
        fields = decode_fields(row["fields"])
        assert fields["_demo_name"] == "Acme CRM tour"
        assert fields["_demo_id"] == "d1"
        assert row["owner_id"] == OWNER

    def test_unpublished_demo(self, viewer, user_client):
        DemoService(user_client, OWNER).create_demo_metadata("draft")
        with pytest.raises(NotFoundError):
            _submit(viewer, "draft")

    def test_required_fields(self, viewer, published, stores):
        with pytest.raises(ValidationFailure) as exc_info:
            viewer.create_lead_submission_public("d1", fields={"email": "jane@example.com", "name": "  "})

        assert exc_info.value.details == {"missing": ["name"]}
        assert stores["lead_intake"].all() == []

    def test_email_argument_satisfies_required_email(self, viewer, published):
        lead = viewer.create_lead_submission_public("d1", fields={"name": "Jane"}, email="jane@example.com")
        assert lead.email == "jane@example.com"


class TestOwnerReads:
    def test_owner_lists_leads(self, viewer, owner_leads, published):
        _submit(viewer)
        _submit(viewer, email="joe@example.com", name="Joe")

        leads = owner_leads.list_lead_submissions("d1")

        assert {lead.email for lead in leads} == {"jane@example.com", "joe@example.com"}

    def test_stranger_is_forbidden(self, viewer, user_client, published):
        _submit(viewer)
        with pytest.raises(ForbiddenError):
            LeadService(user_client, OTHER_OWNER).list_lead_submissions("d1")

    def test_signed_out(self, user_client):
        with pytest.raises(ForbiddenError) as exc_info:
            LeadService(user_client).list_all_my_leads()
        assert exc_info.value.status == 401


class TestSmartLeads:
    def test_live_demo(self, viewer, owner_leads, published):
        _submit(viewer)

        result = owner_leads.list_lead_submissions_smartly("d1")

        assert not result.is_demo_deleted
        assert result.demo_name == "Acme CRM tour"
        assert len(result.leads) == 1

    def test_deleted_demo_leads_are_recovered(self, viewer, owner_leads, user_client, published, stores):
        _submit(viewer)
        _submit(viewer, email="joe@example.com", name="Joe")
        _delete_demo(user_client)
        assert stores["app_data"].get({"pk": "DEMO#d1", "sk": "METADATA"}) is None

        result = owner_leads.list_lead_submissions_smartly("d1")

        assert result.is_demo_deleted
        assert result.demo_name == "Acme CRM tour"
        assert len(result.leads) == 2

    def test_stranger_gets_original_error(self, viewer, user_client, published):
        _submit(viewer)
        _delete_demo(user_client)

        with pytest.raises(ForbiddenError):
            LeadService(user_client, OTHER_OWNER).list_lead_submissions_smartly("d1")

    def test_failed_fallback_raises_original_error(self, viewer, user_client, published, stores):
        _submit(viewer)
        stores["lead_intake"].fail("list_page", RuntimeError("timeout"))

        with pytest.raises(ForbiddenError):
            LeadService(user_client, OTHER_OWNER).list_lead_submissions_smartly("d1")

    def test_other_errors_do_not_fall_back(self, owner_leads, published, stores):
        stores["lead_intake"].fail("list_page", RuntimeError("timeout"))
        with pytest.raises(RuntimeError):
            owner_leads.list_lead_submissions_smartly("d1")


class TestAggregates:
    @pytest.fixture
    def seeded(self, stores):
        rows = [
            ("d1", "2025-01-02T00:00:00.000Z", {"_demo_name": "Tour"}),
            ("d1", "2025-01-05T00:00:00.000Z", {}),
            ("gone", "2025-01-03T00:00:00.000Z", {"demoName": "Old tour"}),
        ]
        for demo_id, created_at, fields in rows:
            stores["lead_intake"].create(
                {
                    "demo_id": demo_id,
                    "item_sk": f"LEAD#{created_at}",
                    "owner_id": OWNER,
                    "fields": fields,
                    "created_at": created_at,
                }
            )
        stores["lead_intake"].create({"demo_id": "x", "item_sk": "LEAD#1", "owner_id": OTHER_OWNER})

    def test_all_my_leads_newest_first(self, owner_leads, seeded):
        leads = owner_leads.list_all_my_leads()
        assert [lead.created_at[:10] for lead in leads] == ["2025-01-05", "2025-01-03", "2025-01-02"]

    def test_demo_ids_with_leads(self, owner_leads, seeded):
        assert sorted(owner_leads.get_demo_ids_with_leads()) == ["d1", "gone"]

    def test_stats(self, owner_leads, seeded):
        stats = {s.demo_id: s for s in owner_leads.get_lead_stats_by_demo()}

        assert stats["d1"].lead_count == 2
        assert stats["d1"].demo_name == "Tour"
        assert stats["d1"].earliest_lead_date == "2025-01-02T00:00:00.000Z"
        assert stats["d1"].latest_lead_date == "2025-01-05T00:00:00.000Z"
        assert stats["gone"].demo_name == "Old tour"


class TestDemoNames:
    def _lead(self, **kwargs):
        return LeadSubmission(demo_id="1234567890abc", item_sk="LEAD#1", **kwargs)

    def test_snapshot_wins(self):
        lead = self._lead(fields={"_demo_name": "Snapshot", "demoName": "Field"})
        assert extract_demo_name_from_lead(lead) == "Snapshot"

    def test_form_field(self):
        assert extract_demo_name_from_lead(self._lead(fields={"product": "Widget"})) == "Widget"

    def test_page_url(self):
        lead = self._lead(page_url="https://example.com/acme-crm/demo")
        assert extract_demo_name_from_lead(lead) == "acme-crm"

    def test_short_url_segment_is_ignored(self):
        lead = self._lead(page_url="https://example.com/ab/demo")
        assert extract_demo_name_from_lead(lead) == "Demo 12345678"

    def test_best_name_skips_generic(self):
        leads = [self._lead(), self._lead(fields={"title": "Real name"})]
        assert get_best_demo_name_from_leads(leads) == "Real name"
        assert get_best_demo_name_from_leads([self._lead()]) == "Demo 12345678"
        assert get_best_demo_name_from_leads([]) == "Unknown Demo"


def test_leads_to_csv():
    lead = LeadSubmission(
        demo_id="d1",
        item_sk="LEAD#1",
        email="jane@example.com",
        fields={"name": "Jane", "message": "Hello, world"},
        step_index=2,
        created_at="2025-01-01T00:00:00.000Z",
    )

    rows = list(csv.reader(io.StringIO(leads_to_csv([lead]))))

    assert rows[0] == CSV_COLUMNS
    assert rows[1][:4] == ["2025-01-01T00:00:00.000Z", "jane@example.com", "Jane", ""]
    assert rows[1][5] == "Hello, world"
    assert rows[1][7] == "2"


def test_best_name_skips_generic_snapshot():
    leads = [
        LeadSubmission(demo_id="abc12345", item_sk="LEAD#1", fields={"_demo_name": "Demo abc12345"}),
        LeadSubmission(demo_id="abc12345", item_sk="LEAD#2", fields={"_demo_name": "Real Name"}),
    ]
    assert get_best_demo_name_from_leads(leads) == "Real Name"


def test_publish_submit_delete_scenario(user_client, public_client, stores):
    demos = DemoService(user_client, OWNER)
    demos.create_demo_metadata("x", name="Onboarding")
    demos.create_demo_step("x", "s0", s3_key="k0", order=0)
    demos.update_demo_lead_config("x", 1, None)
    MirrorService(user_client, OWNER).set_demo_status("x", DemoStatus.PUBLISHED)

    items = PublicDemoService(public_client).list_public_demo_items("x")
    assert items.metadata is not None
    assert len(items.steps) == 1

    LeadService(public_client).create_lead_submission_public("x", email="viewer@example.com", step_index=1)
    assert [row["owner_id"] for row in stores["lead_intake"].all()] == [OWNER]

    with pytest.raises(ForbiddenError) as exc_info:
        LeadService(user_client, OTHER_OWNER).list_lead_submissions("x")
    assert exc_info.value.status == 403

    _delete_demo(user_client, "x")
    owner = LeadService(user_client, OWNER)
    result = owner.list_lead_submissions_smartly("x")
    assert result.is_demo_deleted
    assert result.demo_name == "Onboarding"
    assert len(result.leads) == 1
    assert [lead.demo_id for lead in owner.list_all_my_leads()] == ["x"]
