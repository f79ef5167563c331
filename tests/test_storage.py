# tests/test_storage.py

"""
Tests for upload helpers and settings loading.
"""

import pytest

from core.config import Settings
from core.errors import UploadError
from core.storage import build_object_path, validate_image


def test_object_paths_are_unique_per_upload():
    first = build_object_path("tenant-1", "receipt.PNG")
    second = build_object_path("tenant-1", "receipt.PNG")

    assert first != second
    assert first.startswith("tenant-1/")
    assert first.endswith(".png")
    # <owner>/<32 hex chars>.<ext>
    assert len(first.split("/")[1].split(".")[0]) == 32


def test_object_path_sanitizes_owner():
    assert build_object_path("../evil", "x.jpg").startswith(".._evil/")


def test_validate_image_rules():
    validate_image("ok.jpg", b"data")

    with pytest.raises(UploadError):
        validate_image("ok.jpg", b"")
    with pytest.raises(UploadError):
        validate_image("notes.pdf", b"data")
    with pytest.raises(UploadError):
        validate_image("big.jpg", b"0" * 11, max_bytes=10)


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.test")
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "3")

    loaded = Settings()

    assert loaded.SUPABASE_URL == "https://project.supabase.test"
    assert loaded.LOGIN_RATE_LIMIT == 3
