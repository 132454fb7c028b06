"""Tests for screenshot storage."""

from unittest.mock import MagicMock

import pytest

from src.api.services.storage import StorageService, object_path_from_key
from src.utils.errors import ValidationFailure


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("public/demos/o1/d1/s1.png", "demos/o1/d1/s1.png"),
        ("protected/us-east-1:abc/demos/d1/s1.png", "demos/d1/s1.png"),
        ("private/abc/s1.png", "s1.png"),
        ("/demos/o1/d1/s1.png", "demos/o1/d1/s1.png"),
        ("protected/only-identity", ""),
    ],
)
def test_object_path_from_key(raw, expected):
    assert object_path_from_key(raw) == expected


@pytest.fixture
def bucket():
    return MagicMock()


@pytest.fixture
def storage(bucket):
    client = MagicMock()
    client.storage.from_.return_value = bucket
    return StorageService(client, bucket="demo-assets")


def test_upload_returns_public_key(storage, bucket):
    key = storage.upload_step_image("o1", "d1", "s1", b"\x89PNG", "image/jpeg")

    assert key == "public/demos/o1/d1/s1.jpg"
    path, data, options = bucket.upload.call_args.args
    assert path == "demos/o1/d1/s1.jpg"
    assert data == b"\x89PNG"
    assert options["content-type"] == "image/jpeg"


def test_upload_rejects_empty_image(storage):
    with pytest.raises(ValidationFailure):
        storage.upload_step_image("o1", "d1", "s1", b"")


def test_resolve_signed_url(storage, bucket):
    bucket.create_signed_url.return_value = {"signedURL": "https://cdn.example.com/signed"}

    assert storage.resolve_screenshot_url("public/demos/o1/d1/s1.png") == "https://cdn.example.com/signed"
    assert bucket.create_signed_url.call_args.args[0] == "demos/o1/d1/s1.png"


def test_resolve_passes_urls_through(storage, bucket):
    assert storage.resolve_screenshot_url("https://example.com/a.png") == "https://example.com/a.png"
    assert storage.resolve_screenshot_url("data:image/png;base64,AAAA") == "data:image/png;base64,AAAA"
    assert storage.resolve_screenshot_url(None) is None
    bucket.create_signed_url.assert_not_called()


def test_resolve_failure_gives_none(storage, bucket):
    bucket.create_signed_url.side_effect = RuntimeError("object not found")
    assert storage.resolve_screenshot_url("public/demos/o1/d1/s1.png") is None
