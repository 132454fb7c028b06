"""Screenshot storage in a Supabase Storage bucket."""

from typing import Any

from supabase import Client

from config.settings import settings
from src.utils.errors import ValidationFailure
from src.utils.logger import get_logger

logger = get_logger("storage")

CONTENT_TYPE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}

# Key prefixes written by earlier storage layouts
KEY_ACCESS_PREFIXES = ("protected/", "private/")


def extension_for(content_type: str | None) -> str:
    return CONTENT_TYPE_EXTENSIONS.get((content_type or "").lower(), "png")


def object_path_from_key(raw: str) -> str:
    """Map a stored step key to its object path in the bucket.

    ``public/demos/...`` drops ``public/``; ``protected/<id>/...`` and
    ``private/<id>/...`` drop the access level and identity segment.
    """
    key = raw.lstrip("/")
    if key.startswith("public/"):
        return key[len("public/"):]
    for prefix in KEY_ACCESS_PREFIXES:
        if key.startswith(prefix):
            parts = key.split("/", 2)
            return parts[2] if len(parts) == 3 else ""
    return key


class StorageService:
    """Uploads step screenshots and hands out signed URLs for them."""

    def __init__(self, client: Client, bucket: str | None = None):
        self.client = client
        self.bucket = bucket or settings.storage_bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def upload_step_image(
        self,
        owner_id: str,
        demo_id: str,
        step_id: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        """Upload a step screenshot and return its stored key.

        The key is ``public/demos/{owner}/{demo}/{step}.{ext}``; the object
        itself lives at the same path without ``public/``.
        """
        if not data:
            raise ValidationFailure(f"Empty image for step {step_id}")
        path = f"demos/{owner_id}/{demo_id}/{step_id}.{extension_for(content_type)}"
        self._bucket().upload(
            path,
            data,
            {"content-type": content_type or "image/png", "upsert": "true"},
        )
        logger.info("step_image_uploaded", demo_id=demo_id, step_id=step_id, bytes=len(data))
        return f"public/{path}"

    def resolve_screenshot_url(self, raw: str | None) -> str | None:
        """Turn a stored key into a URL a browser can load.

        Full URLs pass through unchanged. Failures are logged and give None.
        """
        if not raw:
            return None
        if raw.startswith(("http://", "https://", "data:")):
            return raw
        path = object_path_from_key(raw)
        if not path:
            logger.warning("screenshot_key_invalid", key=raw)
            return None
        try:
            result: Any = self._bucket().create_signed_url(path, settings.signed_url_ttl_seconds)
        except Exception as e:
            logger.warning("screenshot_url_failed", key=raw, error=str(e))
            return None
        if isinstance(result, dict):
            return result.get("signedURL") or result.get("signedUrl")
        return None
