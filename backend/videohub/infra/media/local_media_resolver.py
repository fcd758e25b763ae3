"""Filesystem media resolver used when no external media host is configured."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from videohub.services._shared.ports import MediaResolver

log = logging.getLogger(__name__)


@dataclass(slots=True)
class LocalMediaResolver(MediaResolver):
    """
    Move uploaded temp files under ``media_root`` and return their public URL.

    :param media_root: Directory served as static media.
    :param base_url: URL prefix mapped to ``media_root``.
    """

    media_root: str
    base_url: str = "/media"

    def resolve(self, local_path: str) -> str | None:
        """
        :param local_path: Temp file written by the upload handler.
        :returns: Public reference, or ``None`` when the file could not be stored.
        """
        if not local_path:
            return None
        source = Path(local_path)
        try:
            if not source.is_file():
                return None
            root = Path(self.media_root)
            root.mkdir(parents=True, exist_ok=True)
            name = f"{uuid4().hex}{source.suffix.lower()}"
            shutil.move(str(source), root / name)
            return f"{self.base_url.rstrip('/')}/{name}"
        except OSError:
            log.warning("Media upload failed for %s", source.name, exc_info=True)
            return None
        finally:
            # Temp file never outlives the request, success or not
            if source.exists():
                try:
                    os.remove(source)
                except OSError:
                    log.warning("Could not remove temp upload %s", source.name)

    def discard(self, ref: str) -> None:
        """
        Delete a file stored by :meth:`resolve`.

        References outside ``base_url`` (external URLs, placeholders) are left alone.
        """
        prefix = f"{self.base_url.rstrip('/')}/"
        if not ref or not ref.startswith(prefix):
            return
        name = ref[len(prefix):]
        if not name or name != Path(name).name:
            return
        target = Path(self.media_root) / name
        try:
            target.unlink(missing_ok=True)
        except OSError:
            log.warning("Could not remove stored media %s", name, exc_info=True)
