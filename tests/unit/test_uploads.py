"""Unit tests for content-addressed media URLs."""

import hashlib

import pytest

from src.config import Settings
from src.shared.uploads import MediaStore


@pytest.fixture
def store():
    return MediaStore(Settings(upload_root="/uploads", max_upload_bytes=64))


class TestMediaStore:
    def test_selfie_url(self, store):
        digest = hashlib.md5(b"face").hexdigest()
        assert store.store(b"face", "selfie") == f"/uploads/selfies/{digest}.jpg"

    def test_video_url_ignores_filename(self, store):
        url = store.store(b"clip", "video", "clip.mov")
        assert url.startswith("/uploads/videos/")
        assert url.endswith(".mp4")

    def test_evidence_keeps_extension(self, store):
        assert store.store(b"scan", "evidence", "Report.PDF").endswith(".pdf")
        assert store.store(b"scan", "evidence").endswith(".jpg")

    def test_same_content_same_url(self, store):
        assert store.store(b"x", "evidence", "a.png") == store.store(b"x", "evidence", "b.png")

    def test_oversized_rejected(self, store):
        with pytest.raises(ValueError, match="exceeds"):
            store.store(b"x" * 65, "selfie")

    def test_unknown_kind_rejected(self, store):
        with pytest.raises(ValueError):
            store.store(b"x", "document")
