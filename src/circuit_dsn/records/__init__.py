"""Circuit JSON records and the kind-indexed store the converter queries."""

from __future__ import annotations

from .models import (
    RECORD_ID_FIELDS,
    RECORD_MODELS,
    CircuitRecord,
    PcbBoard,
    PcbComponent,
    PcbPlatedHole,
    PcbPort,
    PcbSmtPad,
    Point,
    SourceComponent,
    SourceNet,
    SourcePort,
    SourceTrace,
)
from .store import CircuitRecordStore, RecordTable

__all__ = [
    "CircuitRecord",
    "CircuitRecordStore",
    "PcbBoard",
    "PcbComponent",
    "PcbPlatedHole",
    "PcbPort",
    "PcbSmtPad",
    "Point",
    "RECORD_ID_FIELDS",
    "RECORD_MODELS",
    "RecordTable",
    "SourceComponent",
    "SourceNet",
    "SourcePort",
    "SourceTrace",
]
