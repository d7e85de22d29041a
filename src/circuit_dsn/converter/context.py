"""Shared state threaded through every conversion stage."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import ConverterConfig
from ..dsn.model import DsnDocument
from ..errors import OrderingError
from ..geometry.transform import AffineTransform, circuit_json_to_dsn_transform
from ..records.store import CircuitRecordStore


@dataclass
class ConverterContext:
    """Mutable conversion state shared by all stages of one driver.

    Attributes:
        store: Read-only circuit JSON records indexed by kind.
        document: DSN document under construction; ``None`` until the
            initialize stage runs.
        transform: Circuit JSON (mm) to DSN (um) coordinate transform.
        config: Converter settings (design name, host metadata, iteration cap).
        component_to_footprint_name: ``pcb_component_id`` to image id, filled
            by the library stage. Components without pads are absent.
        via_padstack_name: Via padstack declared by the structure stage and
            defined by the library stage.
    """

    store: CircuitRecordStore
    document: DsnDocument | None = None
    transform: AffineTransform | None = field(default_factory=circuit_json_to_dsn_transform)
    config: ConverterConfig = field(default_factory=ConverterConfig)
    component_to_footprint_name: dict[str, str] | None = None
    via_padstack_name: str | None = None

    def require_document(self, stage_name: str) -> DsnDocument:
        if self.document is None:
            raise OrderingError(f"{stage_name} requires an initialized DSN document")
        return self.document

    def require_transform(self, stage_name: str) -> AffineTransform:
        if self.transform is None:
            raise OrderingError(f"{stage_name} requires a coordinate transform")
        return self.transform
