from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image

from atelier.domain.entities import ArtifactState
from atelier.domain.ports import ExportPort

LOGGER = logging.getLogger(__name__)

# Image types written as-is; anything else is re-encoded to match the ``.png`` name.
_PASSTHROUGH_IMAGE_TYPES = ("image/png", "image/jpeg", "image/jpg")


class ExportLocal(ExportPort):
    """Write exported artifacts into a download directory."""

    def __init__(self, root_dir: str = ".") -> None:
        self.root = Path(root_dir).expanduser()

    def deliver(self, filename: str, artifact: ArtifactState) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        target = self._free_path(self.root / Path(filename).name)
        data = self._encoded(artifact)
        target.write_bytes(data)
        LOGGER.info("Exported %s (%d bytes)", target, len(data))
        return str(target)

    @staticmethod
    def _encoded(artifact: ArtifactState) -> bytes:
        if artifact.is_video or artifact.mime_type in _PASSTHROUGH_IMAGE_TYPES:
            return artifact.payload
        LOGGER.debug("Re-encoding %s export as PNG", artifact.mime_type)
        with Image.open(io.BytesIO(artifact.payload)) as opened:
            opened.load()
            buf = io.BytesIO()
            opened.save(buf, format="PNG")
        return buf.getvalue()

    @staticmethod
    def _free_path(path: Path) -> Path:
        if not path.exists():
            return path
        counter = 1
        while True:
            candidate = path.with_name(f"{path.stem}-{counter}{path.suffix}")
            if not candidate.exists():
                return candidate
            counter += 1


__all__ = ["ExportLocal"]
