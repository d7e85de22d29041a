"""Stage that creates the empty DSN document skeleton."""

from __future__ import annotations

import logging

from ...dsn.model import (
    DsnDocument,
    DsnLibrary,
    DsnNetwork,
    DsnParser,
    DsnPlacement,
    DsnResolution,
    DsnStructure,
    DsnWiring,
)
from ..stage import ConverterStage

logger = logging.getLogger(__name__)

DSN_UNIT = "um"


class InitializeDsnStage(ConverterStage):
    """Create the document with parser info, resolution, unit and empty sections.

    Any document already on the context is replaced.
    """

    def _step(self) -> None:
        config = self.ctx.config
        self.ctx.document = DsnDocument(
            design_name=config.design_name,
            parser=DsnParser(host_cad=config.host_cad, host_version=config.host_version),
            resolution=DsnResolution(unit=DSN_UNIT, value=10),
            unit=DSN_UNIT,
            structure=DsnStructure(),
            placement=DsnPlacement(),
            library=DsnLibrary(),
            network=DsnNetwork(),
            wiring=DsnWiring(),
        )
        logger.debug("Initialized DSN document %r", config.design_name)
        self.finished = True
