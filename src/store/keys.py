"""Item key conventions for the three stores."""

from datetime import datetime, timezone

METADATA_SK = "METADATA"
SETTINGS_SK = "SETTINGS"
STEP_PREFIX = "STEP#"
LEAD_PREFIX = "LEAD#"
TEMPLATE_PREFIX = "TEMPLATE#"

# Private and public tables share (pk, sk); lead intake is keyed by demo.
ITEM_KEY_FIELDS = ("pk", "sk")
LEAD_KEY_FIELDS = ("demo_id", "item_sk")


def now_iso() -> str:
    """UTC timestamp in the ``2025-01-01T00:00:00.000Z`` form used across items."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def demo_pk(demo_id: str) -> str:
    return f"DEMO#{demo_id}"


def public_pk(demo_id: str) -> str:
    return f"PUB#{demo_id}"


def owner_pk(owner_id: str) -> str:
    return f"OWNER#{owner_id}"


def step_sk(step_id: str) -> str:
    return f"{STEP_PREFIX}{step_id}"


def template_sk(template_id: str) -> str:
    return f"{TEMPLATE_PREFIX}{template_id}"


def lead_sk(timestamp: str | None = None) -> str:
    # Microsecond precision keeps two submissions in the same millisecond apart
    if timestamp is None:
        timestamp = datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")
    return f"{LEAD_PREFIX}{timestamp}"


def is_step_sk(sk: object) -> bool:
    return isinstance(sk, str) and sk.startswith(STEP_PREFIX)


def step_id_from_sk(sk: str) -> str:
    return sk[len(STEP_PREFIX):]


def private_key(demo_id: str, sk: str = METADATA_SK) -> dict[str, str]:
    return {"pk": demo_pk(demo_id), "sk": sk}


def public_key(demo_id: str, sk: str = METADATA_SK) -> dict[str, str]:
    return {"pk": public_pk(demo_id), "sk": sk}


def item_key(row: dict) -> dict[str, str]:
    """Key of an app_data/public_mirror row."""
    return {"pk": row["pk"], "sk": row["sk"]}
