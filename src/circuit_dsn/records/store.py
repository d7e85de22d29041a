"""Read-only, kind-indexed view over a circuit JSON record list."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from ..errors import ConfigurationError
from .models import (
    RECORD_ID_FIELDS,
    RECORD_MODELS,
    CircuitRecord,
    PcbBoard,
    PcbComponent,
    PcbPlatedHole,
    PcbPort,
    PcbSmtPad,
    SourceComponent,
    SourceNet,
    SourcePort,
    SourceTrace,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=CircuitRecord)


class RecordTable(Generic[RecordT]):
    """Ordered records of one kind with an optional primary-key index."""

    def __init__(self, kind: str, records: list[RecordT], id_field: str | None) -> None:
        self.kind = kind
        self._records = tuple(records)
        self._by_id: dict[str, RecordT] = {}
        if id_field is not None:
            for record in self._records:
                record_id = getattr(record, id_field, None)
                # First record wins on duplicate ids, matching a linear find().
                if record_id is not None and record_id not in self._by_id:
                    self._by_id[record_id] = record

    def list(self) -> list[RecordT]:
        """All records of this kind in source order."""
        return list(self._records)

    def get(self, record_id: str | None) -> RecordT | None:
        if record_id is None:
            return None
        return self._by_id.get(record_id)

    def where(self, **fields: Any) -> list[RecordT]:
        """Records whose attributes equal every given value, in source order."""
        return [
            record
            for record in self._records
            if all(getattr(record, name, None) == value for name, value in fields.items())
        ]

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)


class CircuitRecordStore:
    """Circuit JSON records validated and grouped by ``type``.

    Known kinds are parsed into their pydantic models; anything else is kept
    as a generic :class:`CircuitRecord`. The store never changes after
    construction.

    Example:
        >>> store = CircuitRecordStore([{"type": "pcb_board", "width": 10, "height": 10}])
        >>> store.pcb_board.list()[0].width
        10.0
    """

    def __init__(self, circuit_json: Iterable[Mapping[str, Any] | CircuitRecord]) -> None:
        grouped: dict[str, list[CircuitRecord]] = {}
        for index, raw in enumerate(circuit_json):
            record = _parse_record(raw, index)
            grouped.setdefault(record.type, []).append(record)

        self._tables: dict[str, RecordTable[Any]] = {
            kind: RecordTable(kind, records, RECORD_ID_FIELDS.get(kind)) for kind, records in grouped.items()
        }
        logger.debug(
            "Record store built: %s",
            ", ".join(f"{kind}={len(table)}" for kind, table in sorted(self._tables.items())) or "empty",
        )

    def table(self, kind: str) -> RecordTable[Any]:
        """Table for ``kind``; an empty table when no record of that kind exists."""
        table = self._tables.get(kind)
        if table is None:
            table = RecordTable(kind, [], RECORD_ID_FIELDS.get(kind))
        return table

    def list(self, kind: str) -> list[Any]:
        return self.table(kind).list()

    def kinds(self) -> list[str]:
        return sorted(self._tables)

    @property
    def pcb_board(self) -> RecordTable[PcbBoard]:
        return self.table("pcb_board")

    @property
    def pcb_component(self) -> RecordTable[PcbComponent]:
        return self.table("pcb_component")

    @property
    def pcb_smtpad(self) -> RecordTable[PcbSmtPad]:
        return self.table("pcb_smtpad")

    @property
    def pcb_plated_hole(self) -> RecordTable[PcbPlatedHole]:
        return self.table("pcb_plated_hole")

    @property
    def pcb_port(self) -> RecordTable[PcbPort]:
        return self.table("pcb_port")

    @property
    def source_component(self) -> RecordTable[SourceComponent]:
        return self.table("source_component")

    @property
    def source_port(self) -> RecordTable[SourcePort]:
        return self.table("source_port")

    @property
    def source_net(self) -> RecordTable[SourceNet]:
        return self.table("source_net")

    @property
    def source_trace(self) -> RecordTable[SourceTrace]:
        return self.table("source_trace")


def _parse_record(raw: Mapping[str, Any] | CircuitRecord, index: int) -> CircuitRecord:
    if isinstance(raw, CircuitRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Circuit JSON element {index} must be an object, got {type(raw).__name__}")
    kind = raw.get("type")
    if not isinstance(kind, str) or not kind:
        raise ConfigurationError(f"Circuit JSON element {index} has no 'type'")
    model = RECORD_MODELS.get(kind, CircuitRecord)
    try:
        return model.model_validate(dict(raw))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid {kind} record at index {index}: {exc}") from exc
