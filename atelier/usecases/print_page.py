from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from atelier.domain.naming import DEFAULT_PRODUCT_PREFIX, make_page_filename
from atelier.domain.page import PageComposition
from atelier.domain.ports import PrintPort, UseCaseError

LOGGER = logging.getLogger(__name__)


@dataclass
class PrintPage:
    """Send an assembled tech-pack page to the print facility."""

    print_port: PrintPort
    prefix: str = DEFAULT_PRODUCT_PREFIX
    clock: Callable[[], datetime] = datetime.now

    def __call__(self, composition: PageComposition) -> str:
        filename = make_page_filename(self.prefix, self.clock())
        try:
            location = self.print_port.print_page(composition, filename)
        except OSError as exc:
            raise UseCaseError("PRINT_FAILED", str(exc))
        LOGGER.info("Printed tech pack with %d item(s) to %s", len(composition.items), location)
        return location
