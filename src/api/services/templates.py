"""Lead form templates and per-owner settings."""

import uuid

from src.models.demo import LeadConfig
from src.models.lead import LeadTemplate, OwnerSettings
from src.store.base import DataClient
from src.store.codec import encode_json, settings_from_row, template_from_row
from src.store.keys import SETTINGS_SK, TEMPLATE_PREFIX, now_iso, owner_pk, template_sk
from src.store.pagination import collect_all
from src.utils.errors import ConditionalCheckFailed, not_signed_in
from src.utils.logger import get_logger

logger = get_logger("templates")


class TemplateService:
    """Stores an owner's saved lead forms and their global lead config."""

    def __init__(self, client: DataClient, owner_id: str | None):
        self.client = client
        self.owner_id = owner_id

    def _owner(self) -> str:
        if not self.owner_id:
            raise not_signed_in()
        return self.owner_id

    def list_lead_templates(self) -> list[LeadTemplate]:
        owner_id = self._owner()
        rows = collect_all(self.client.app_data, {"pk": owner_pk(owner_id)})
        templates = [
            template_from_row(row)
            for row in rows
            if str(row.get("sk", "")).startswith(TEMPLATE_PREFIX)
        ]
        templates.sort(key=lambda t: t.created_at or "", reverse=True)
        return templates

    def save_lead_template(self, name: str, lead_config: LeadConfig) -> LeadTemplate:
        owner_id = self._owner()
        template_id = str(uuid.uuid4())
        row = self.client.app_data.create(
            {
                "pk": owner_pk(owner_id),
                "sk": template_sk(template_id),
                "entity_type": "LEAD_TEMPLATE",
                "owner_id": owner_id,
                "template_id": template_id,
                "name": name,
                "lead_config": encode_json(lead_config),
                "created_at": now_iso(),
            }
        )
        logger.info("lead_template_saved", owner_id=owner_id, template_id=template_id)
        return template_from_row(row)

    def get_owner_settings(self) -> OwnerSettings:
        owner_id = self._owner()
        row = self.client.app_data.get({"pk": owner_pk(owner_id), "sk": SETTINGS_SK})
        if row is None:
            return OwnerSettings(owner_id=owner_id)
        return settings_from_row(row)

    def get_global_lead_config(self) -> LeadConfig | None:
        return self.get_owner_settings().lead_config

    def save_global_lead_config(self, lead_config: LeadConfig | None) -> OwnerSettings:
        """Create the owner's SETTINGS item, or update it when it exists."""
        owner_id = self._owner()
        key = {"pk": owner_pk(owner_id), "sk": SETTINGS_SK}
        changes = {"lead_config": encode_json(lead_config), "updated_at": now_iso()}
        try:
            row = self.client.app_data.create(
                {**key, "entity_type": "SETTINGS", "owner_id": owner_id, **changes}
            )
        except ConditionalCheckFailed:
            row = self.client.app_data.update(key, changes)
        logger.info("global_lead_config_saved", owner_id=owner_id)
        return settings_from_row(row)
