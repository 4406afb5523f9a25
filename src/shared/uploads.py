"""Content-addressed URLs for uploaded selfies, videos and audit evidence."""

import hashlib
from pathlib import PurePath

import structlog

from src.config import Settings, settings

logger = structlog.get_logger()

# kind -> (directory, extension used when the upload has no usable name)
MEDIA_KINDS: dict[str, tuple[str, str]] = {
    "selfie": ("selfies", ".jpg"),
    "video": ("videos", ".mp4"),
    "evidence": ("evidence", ".jpg"),
}


class MediaStore:
    """Maps upload bytes to a stable URL under ``upload_root``.

    Identical content always yields the same URL. The bytes themselves are
    handed to external object storage; only the URL is persisted here.
    """

    def __init__(self, config: Settings | None = None) -> None:
        self._settings = config or settings

    def store(self, content: bytes, kind: str, filename: str | None = None) -> str:
        if kind not in MEDIA_KINDS:
            raise ValueError(f"Unknown media kind: {kind}")
        if len(content) > self._settings.max_upload_bytes:
            raise ValueError(
                f"Upload exceeds {self._settings.max_upload_bytes} bytes ({len(content)} given)"
            )

        directory, default_ext = MEDIA_KINDS[kind]
        digest = hashlib.md5(content).hexdigest()  # noqa: S324
        ext = default_ext
        if kind == "evidence" and filename:
            ext = PurePath(filename).suffix.lower() or default_ext

        url = f"{self._settings.upload_root.rstrip('/')}/{directory}/{digest}{ext}"
        logger.debug("media_stored", kind=kind, size=len(content), url=url)
        return url
