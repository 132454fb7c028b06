"""Lead intake and lead resolution.

Leads are never deleted with their demo. While the demo exists its owner reads
them through the ownership check; once it is gone the same owner can still
recover them by filtering the intake on their own owner id.
"""

import csv
import io
import re
from typing import Any

from src.models.demo import LeadConfig
from src.models.lead import LeadStats, LeadSubmission, SmartLeadsResult
from src.store.base import DataClient
from src.store.codec import lead_from_row, lead_to_row, metadata_from_row
from src.store.keys import lead_sk, now_iso, private_key, public_key
from src.store.pagination import collect_all
from src.utils.errors import ForbiddenError, NotFoundError, ValidationFailure, not_signed_in
from src.utils.logger import get_logger

logger = get_logger("leads")

DEMO_NAME_FIELDS = ("demo_name", "demoName", "demo", "product", "title")
PAGE_URL_PATTERNS = (
    re.compile(r"/([^/]+)/demo", re.IGNORECASE),
    re.compile(r"demo/([^/]+)", re.IGNORECASE),
)
GENERIC_NAME_PREFIX = "Demo "

CSV_COLUMNS = [
    "createdAt",
    "email",
    "name",
    "phone",
    "position",
    "message",
    "custom",
    "stepIndex",
    "pageUrl",
    "source",
]


def extract_demo_name_from_lead(lead: LeadSubmission) -> str:
    """Best-effort demo name for a single lead.

    Tries the ``_demo_name`` snapshot, then common form fields, then the page
    URL, and finally a generic ``Demo <id prefix>`` label.
    """
    fields = lead.fields or {}
    if fields.get("_demo_name"):
        return str(fields["_demo_name"])

    for name in DEMO_NAME_FIELDS:
        value = fields.get(name)
        if isinstance(value, str) and value:
            return value

    if lead.page_url:
        for pattern in PAGE_URL_PATTERNS:
            match = pattern.search(lead.page_url)
            if match:
                if len(match.group(1)) > 3:
                    return match.group(1)
                break

    return f"{GENERIC_NAME_PREFIX}{(lead.demo_id or '')[:8] or 'Unknown'}"


def get_best_demo_name_from_leads(leads: list[LeadSubmission]) -> str:
    """Prefer the first lead whose name is not a generic ``Demo ...`` label."""
    if not leads:
        return "Unknown Demo"
    for lead in leads:
        name = extract_demo_name_from_lead(lead)
        if name and not name.startswith(GENERIC_NAME_PREFIX):
            return name
    return extract_demo_name_from_lead(leads[0])


def _newest_first(leads: list[LeadSubmission]) -> list[LeadSubmission]:
    return sorted(leads, key=lambda lead: lead.created_at or "", reverse=True)


def leads_to_csv(leads: list[LeadSubmission]) -> str:
    """Render leads as CSV for download."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for lead in leads:
        fields = lead.fields or {}
        writer.writerow(
            [
                lead.created_at or "",
                lead.email or fields.get("email", ""),
                fields.get("name", ""),
                fields.get("phone", ""),
                fields.get("position", ""),
                fields.get("message", ""),
                fields.get("custom", ""),
                "" if lead.step_index is None else lead.step_index,
                lead.page_url or "",
                lead.source or "",
            ]
        )
    return buffer.getvalue()


class LeadService:
    """Lead operations for one caller (anonymous for public submissions)."""

    def __init__(self, client: DataClient, owner_id: str | None = None):
        self.client = client
        self.owner_id = owner_id

    def _require_owner(self) -> str:
        if not self.owner_id:
            raise not_signed_in()
        return self.owner_id

    # ============== Public intake ==============

    def create_lead_submission_public(
        self,
        demo_id: str,
        fields: dict[str, Any] | None = None,
        email: str | None = None,
        page_url: str | None = None,
        step_index: int | None = None,
        source: str | None = None,
        user_agent: str | None = None,
        referrer: str | None = None,
    ) -> LeadSubmission:
        """Record a viewer's lead against a published demo.

        The owner and demo name are read from the public mirror and the name
        is snapshotted into the lead so it survives demo deletion.
        """
        public = self.client.public()
        row = public.public_mirror.get(public_key(demo_id))
        if row is None:
            raise NotFoundError(f"Demo {demo_id} not found or not published")
        metadata = metadata_from_row(row)

        fields = dict(fields or {})
        email = email or fields.get("email") or None
        self._validate_required(metadata.lead_config, {**fields, "email": email})

        if metadata.name:
            fields["_demo_name"] = metadata.name
        fields["_demo_id"] = demo_id

        lead = LeadSubmission(
            demo_id=demo_id,
            item_sk=lead_sk(),
            owner_id=metadata.owner_id,
            email=email,
            fields=fields,
            page_url=page_url,
            step_index=step_index,
            source=source,
            user_agent=user_agent,
            referrer=referrer,
            created_at=now_iso(),
        )
        public.lead_intake.create({k: v for k, v in lead_to_row(lead).items() if v is not None})
        logger.info("lead_submitted", demo_id=demo_id, owner_id=metadata.owner_id, email=email)
        return lead

    @staticmethod
    def _validate_required(lead_config: LeadConfig | None, values: dict[str, Any]) -> None:
        if lead_config is None:
            return
        missing = [
            key for key in lead_config.required_keys() if not str(values.get(key) or "").strip()
        ]
        if missing:
            raise ValidationFailure(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing": missing},
            )

    # ============== Owner reads ==============

    def _resolve_demo_owner(self, demo_id: str) -> str | None:
        try:
            row = self.client.app_data.get(private_key(demo_id))
            if row is not None:
                return row.get("owner_id")
        except Exception as e:
            logger.warning("private_owner_lookup_failed", demo_id=demo_id, error=str(e))

        row = self.client.public().public_mirror.get(public_key(demo_id))
        return row.get("owner_id") if row else None

    def list_lead_submissions(self, demo_id: str) -> list[LeadSubmission]:
        """Leads for a demo the caller owns, newest first."""
        owner_id = self._require_owner()
        demo_owner = self._resolve_demo_owner(demo_id)
        if demo_owner != owner_id:
            raise ForbiddenError("Forbidden: not the owner of this demo")

        rows = collect_all(self.client.lead_intake, {"demo_id": demo_id})
        return _newest_first([lead_from_row(row) for row in rows])

    def get_leads_for_deleted_demo(self, demo_id: str) -> list[LeadSubmission]:
        """Leads for a demo id that belong to the caller, whether or not the demo exists."""
        owner_id = self._require_owner()
        rows = collect_all(self.client.lead_intake, {"demo_id": demo_id, "owner_id": owner_id})
        return _newest_first([lead_from_row(row) for row in rows])

    def list_lead_submissions_smartly(self, demo_id: str) -> SmartLeadsResult:
        """Leads for a live demo, or for one the caller owned and deleted.

        Only an ownership failure triggers the deleted-demo lookup. If that
        lookup fails or finds nothing, the original error is raised.
        """
        try:
            leads = self.list_lead_submissions(demo_id)
            return SmartLeadsResult(
                leads=leads,
                is_demo_deleted=False,
                demo_name=get_best_demo_name_from_leads(leads),
            )
        except ForbiddenError as original:
            try:
                leads = self.get_leads_for_deleted_demo(demo_id)
            except Exception as e:
                logger.debug("deleted_demo_lookup_failed", demo_id=demo_id, error=str(e))
                raise original
            if not leads:
                raise original

        logger.info("leads_recovered_for_deleted_demo", demo_id=demo_id, count=len(leads))
        return SmartLeadsResult(
            leads=leads,
            is_demo_deleted=True,
            demo_name=get_best_demo_name_from_leads(leads),
        )

    def list_all_my_leads(self) -> list[LeadSubmission]:
        owner_id = self._require_owner()
        rows = collect_all(self.client.lead_intake, {"owner_id": owner_id})
        return _newest_first([lead_from_row(row) for row in rows])

    def get_demo_ids_with_leads(self) -> list[str]:
        """Distinct demo ids across the caller's leads, deleted demos included."""
        seen: dict[str, None] = {}
        for lead in self.list_all_my_leads():
            if lead.demo_id:
                seen.setdefault(lead.demo_id, None)
        return list(seen)

    def get_lead_stats_by_demo(self) -> list[LeadStats]:
        grouped: dict[str, list[LeadSubmission]] = {}
        for lead in self.list_all_my_leads():
            if lead.demo_id:
                grouped.setdefault(lead.demo_id, []).append(lead)

        stats = []
        for demo_id, leads in grouped.items():
            dates = sorted(lead.created_at for lead in leads if lead.created_at)
            stats.append(
                LeadStats(
                    demo_id=demo_id,
                    demo_name=get_best_demo_name_from_leads(leads),
                    lead_count=len(leads),
                    earliest_lead_date=dates[0] if dates else None,
                    latest_lead_date=dates[-1] if dates else None,
                )
            )
        return stats
