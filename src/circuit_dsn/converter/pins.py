"""Pin number resolution shared by the library and network stages."""

from __future__ import annotations

import math

from ..records.models import SourcePort
from ..records.store import CircuitRecordStore

DEFAULT_PIN_NUMBER = "1"


def _is_numeric(hint: str) -> bool:
    # Blank hints count as numeric (zero), so they stop the search.
    if not hint.strip():
        return True
    try:
        value = float(hint)
    except ValueError:
        return False
    return not math.isnan(value)


def resolve_pin_number(source_port: SourcePort | None) -> str:
    """Pick the pin number for a source port.

    The first port hint that reads as a number wins, then the port name,
    then ``"1"``. A blank hint is taken as that first numeric hint but is
    not a usable pin number, so it falls through to the name.

    >>> resolve_pin_number(SourcePort(source_port_id="p", port_hints=["anode", "2"], name="A"))
    '2'
    >>> resolve_pin_number(SourcePort(source_port_id="p", port_hints=["", "2"], name="A"))
    'A'
    """
    if source_port is None:
        return DEFAULT_PIN_NUMBER
    hint = next((h for h in source_port.port_hints or [] if _is_numeric(h)), None)
    if hint:
        return hint
    if source_port.name:
        return source_port.name
    return DEFAULT_PIN_NUMBER


def pin_number_for_port(store: CircuitRecordStore, pcb_port_id: str | None) -> str:
    """Resolve the pin number of the source port behind a ``pcb_port``."""
    pcb_port = store.pcb_port.get(pcb_port_id)
    if pcb_port is None:
        return DEFAULT_PIN_NUMBER
    return resolve_pin_number(store.source_port.get(pcb_port.source_port_id))
