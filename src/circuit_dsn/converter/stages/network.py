"""Stage that reconstructs nets from traces and named source nets."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...dsn.model import DsnNet, DsnNetwork
from ...errors import OrderingError
from ...records.store import CircuitRecordStore
from ..pins import resolve_pin_number
from ..stage import ConverterStage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PadInfo:
    """Where a source port lands on the board."""

    pcb_component_id: str
    pin_number: str
    source_port_id: str

    @property
    def pin_ref(self) -> str:
        return f"{self.pcb_component_id}-{self.pin_number}"


def index_pads_by_source_port(store: CircuitRecordStore) -> dict[str, PadInfo]:
    """Map ``source_port_id`` to the component and pin it resolves to.

    SMT pads are indexed first, then plated holes; a later record for the
    same source port replaces an earlier one. Pads without a port, a source
    port, an owning source component or a placed PCB component are skipped.
    """
    source_to_pcb_component: dict[str, str] = {}
    for component in store.pcb_component:
        if component.source_component_id:
            source_to_pcb_component[component.source_component_id] = component.pcb_component_id

    pads_by_source_port: dict[str, PadInfo] = {}
    for pad in [*store.pcb_smtpad, *store.pcb_plated_hole]:
        if not pad.pcb_port_id:
            continue
        pcb_port = store.pcb_port.get(pad.pcb_port_id)
        if pcb_port is None:
            continue
        source_port = store.source_port.get(pcb_port.source_port_id)
        if source_port is None or not source_port.source_component_id:
            continue
        pcb_component_id = source_to_pcb_component.get(source_port.source_component_id)
        if pcb_component_id is None:
            continue
        pads_by_source_port[source_port.source_port_id] = PadInfo(
            pcb_component_id=pcb_component_id,
            pin_number=resolve_pin_number(source_port),
            source_port_id=source_port.source_port_id,
        )
    return pads_by_source_port


def build_net_map(store: CircuitRecordStore) -> dict[str, dict[str, None]]:
    """Build net name -> ordered set of pin references.

    Traces connecting two or more ports create ``Net-(<component>-Pad<pin>)``
    named after their first port when it resolves. Every source net then gets
    ``<name>_<source_net_id>`` holding the ports of all traces that reference
    it. Nets may be empty here; callers drop them.
    """
    pads_by_source_port = index_pads_by_source_port(store)
    net_map: dict[str, dict[str, None]] = {}

    def add_ports(net_name: str, port_ids: list[str]) -> None:
        pins = net_map.setdefault(net_name, {})
        for port_id in port_ids:
            pad_info = pads_by_source_port.get(port_id)
            if pad_info is not None:
                pins[pad_info.pin_ref] = None

    for trace in store.source_trace:
        ports = trace.connected_source_port_ids
        if len(ports) < 2 or not ports[0]:
            continue
        first_pad = pads_by_source_port.get(ports[0])
        if first_pad is None:
            continue
        add_ports(f"Net-({first_pad.pcb_component_id}-Pad{first_pad.pin_number})", ports)

    for source_net in store.source_net:
        net_name = f"{source_net.name}_{source_net.source_net_id}"
        net_map.setdefault(net_name, {})
        for trace in store.source_trace:
            if source_net.source_net_id in trace.connected_source_net_ids:
                add_ports(net_name, trace.connected_source_port_ids)

    return net_map


class AddNetworkStage(ConverterStage):
    """Write every non-empty net with its pin references."""

    def _step(self) -> None:
        document = self.ctx.require_document(self.name)
        if document.network is None:
            raise OrderingError(f"{self.name} requires an initialized network section")
        network: DsnNetwork = document.network

        net_map = build_net_map(self.ctx.store)
        network.nets = [DsnNet(net_name=name, pins=list(pins)) for name, pins in net_map.items() if pins]
        dropped = len(net_map) - len(network.nets)
        logger.debug("%s: wrote %d nets (%d empty dropped)", self.name, len(network.nets), dropped)
        self.finished = True
