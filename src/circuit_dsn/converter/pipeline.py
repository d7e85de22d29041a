"""Pipeline driver that runs the conversion stages in order."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..config import ConverterConfig
from ..dsn.model import DsnDocument
from ..errors import OrderingError
from ..records.models import CircuitRecord
from ..records.store import CircuitRecordStore
from .context import ConverterContext
from .stage import ConverterStage
from .stages import (
    AddLibraryStage,
    AddNetworkStage,
    AddPlacementStage,
    AddStructureStage,
    InitializeDsnStage,
)

logger = logging.getLogger(__name__)


class CircuitJsonToDsnConverter:
    """Convert circuit JSON records into a Specctra DSN document.

    Stages run strictly in order: initialize, structure, library, placement,
    network. Each :meth:`step` advances the current stage once; the driver
    is finished when every stage has finished.

    Example:
        >>> converter = CircuitJsonToDsnConverter(records)
        >>> converter.run_until_finished()
        >>> text = converter.get_output_string()
    """

    def __init__(
        self,
        circuit_json: Iterable[Mapping[str, Any] | CircuitRecord],
        *,
        config: ConverterConfig | None = None,
    ) -> None:
        config = config or ConverterConfig()
        self.ctx = ConverterContext(store=CircuitRecordStore(circuit_json), config=config)
        self.pipeline: list[ConverterStage] = [
            InitializeDsnStage(self.ctx),
            AddStructureStage(self.ctx),
            AddLibraryStage(self.ctx),
            AddPlacementStage(self.ctx),
            AddNetworkStage(self.ctx),
        ]
        self.current_stage_index = 0
        self.finished = False

    @property
    def current_stage(self) -> ConverterStage | None:
        if self.current_stage_index < len(self.pipeline):
            return self.pipeline[self.current_stage_index]
        return None

    def step(self) -> None:
        stage = self.current_stage
        if stage is None:
            self.finished = True
            return
        stage.step()
        if stage.finished:
            logger.debug("Stage %s finished after %d step(s)", stage.name, stage.iteration)
            self.current_stage_index += 1

    def run_until_finished(self) -> None:
        while not self.finished:
            self.step()
        document = self.ctx.document
        if document is not None:
            logger.info(
                "Converted %s: %d images, %d placed footprints, %d nets",
                document.design_name,
                len(document.library.images) if document.library else 0,
                len(document.placement.components) if document.placement else 0,
                len(document.network.nets) if document.network else 0,
            )

    def get_output(self) -> DsnDocument:
        """Return the document built so far.

        Raises:
            OrderingError: If the initialize stage has not run yet.
        """
        if self.ctx.document is None:
            raise OrderingError("DSN document has not been initialized; call step() first")
        return self.ctx.document

    def get_output_string(self) -> str:
        return self.get_output().to_string()
