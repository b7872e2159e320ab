"""Save image and file attachments of fetched messages to local disk.

Layout::

    <download_dir>/images/<ts with "_">_<file id>.<ext>
    <download_dir>/files/<ts with "_">_<file id>.<ext>
"""

from __future__ import annotations

import logging
from pathlib import Path

from slack_bridge.check.models import AttachmentKind, FileAttachment

logger = logging.getLogger(__name__)

_DEFAULT_EXTENSIONS = {"image": "png", "file": "file"}
_SUBDIRS = {"image": "images", "file": "files"}


def attachment_filename(attachment: FileAttachment, message_ts: str, kind: AttachmentKind) -> str:
    """Filesystem-safe, per-attachment unique name for a download."""
    name = attachment.name or ""
    ext = name.rsplit(".", 1)[-1] if "." in name else ""
    ext = ext or _DEFAULT_EXTENSIONS[kind]
    return f"{message_ts.replace('.', '_')}_{attachment.id}.{ext}"


class AttachmentDownloader:
    """Download attachments through the gateway; never raises.

    Args:
        gateway: Object providing ``async fetch_bytes(url) -> httpx.Response``.
        download_dir: Root directory for ``images/`` and ``files/``.
    """

    def __init__(self, gateway, download_dir: Path):
        self.gateway = gateway
        self.download_dir = download_dir

    def directory(self, kind: AttachmentKind) -> Path:
        return self.download_dir / _SUBDIRS[kind]

    async def download(
        self,
        attachment: FileAttachment,
        message_ts: str,
        kind: AttachmentKind,
    ) -> str | None:
        """Save one attachment and return its local path, or None on any failure."""
        url = attachment.download_url
        if not url:
            return None

        try:
            response = await self.gateway.fetch_bytes(url)
            if not response.is_success:
                logger.error(
                    f"Failed to download {kind}: {response.status_code} {response.reason_phrase}"
                )
                return None

            target_dir = self.directory(kind)
            target_dir.mkdir(parents=True, exist_ok=True)
            path = target_dir / attachment_filename(attachment, message_ts, kind)
            path.write_bytes(response.content)
            logger.debug(f"Saved {kind} {attachment.id} to {path}")
            return str(path)
        except Exception as e:
            logger.error(f"Error downloading {kind} {attachment.id}: {e}")
            return None
