from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from atelier.domain.entities import ArtifactState
from atelier.domain.errors import NothingToExportError
from atelier.domain.naming import DEFAULT_PRODUCT_PREFIX, make_export_filename
from atelier.domain.ports import ExportPort, UseCaseError

LOGGER = logging.getLogger(__name__)


@dataclass
class ExportArtifact:
    """Hand the displayed artifact to the export port under the download naming rule.

    A generated video takes precedence over the current history entry, as in
    the main viewer.
    """

    export_port: ExportPort
    prefix: str = DEFAULT_PRODUCT_PREFIX
    clock: Callable[[], datetime] = datetime.now

    def __call__(
        self,
        current: Optional[ArtifactState],
        video: Optional[ArtifactState] = None,
    ) -> str:
        artifact = video if video is not None else current
        if artifact is None:
            raise NothingToExportError()
        filename = make_export_filename(self.prefix, artifact, self.clock())
        try:
            location = self.export_port.deliver(filename, artifact)
        except OSError as exc:
            raise UseCaseError("EXPORT_FAILED", str(exc))
        LOGGER.info("Exported %s to %s", filename, location)
        return location
