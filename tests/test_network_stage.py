"""Tests for net reconstruction from traces and source nets."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from circuit_dsn.converter import AddNetworkStage, ConverterContext
from circuit_dsn.converter.stages import build_net_map
from circuit_dsn.dsn import DsnNet
from circuit_dsn.records import CircuitRecordStore


def _trace(trace_id: str, ports: list[str], nets: list[str] | None = None) -> dict[str, Any]:
    return {
        "type": "source_trace",
        "source_trace_id": trace_id,
        "connected_source_port_ids": ports,
        "connected_source_net_ids": nets or [],
    }


def _net(net_id: str, name: str) -> dict[str, Any]:
    return {"type": "source_net", "source_net_id": net_id, "name": name}


@pytest.fixture
def run_network(make_context: Callable[..., ConverterContext]) -> Callable[[list[dict[str, Any]]], list[DsnNet]]:
    def _run(records: list[dict[str, Any]]) -> list[DsnNet]:
        ctx = make_context(records)
        AddNetworkStage(ctx).run_until_finished()
        assert ctx.document is not None
        assert ctx.document.network is not None
        return ctx.document.network.nets

    return _run


@pytest.fixture
def resistors(make_resistor: Callable[..., list[dict[str, Any]]]) -> list[dict[str, Any]]:
    """Two resistors without any traces or nets."""
    return [*make_resistor(0, center_x=0.0), *make_resistor(1, center_x=-2.56)]


class TestAddNetworkStage:
    def test_two_resistor_circuit(
        self,
        two_resistor_circuit: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        nets = run_network(two_resistor_circuit)
        assert nets == [
            DsnNet("Net-(pcb_component_0-Pad1)", ["pcb_component_0-1", "pcb_component_1-1"]),
            DsnNet("GND_source_net_0", ["pcb_component_0-2"]),
        ]

    def test_empty_named_net_dropped(
        self,
        resistors: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        assert run_network([*resistors, _net("source_net_9", "VCC")]) == []

    def test_single_port_trace_creates_no_net(
        self,
        resistors: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        assert run_network([*resistors, _trace("t", ["source_port_0"])]) == []

    def test_trace_anchored_on_first_port_only(
        self,
        resistors: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        # First port does not resolve, so the trace contributes nothing.
        assert run_network([*resistors, _trace("t", ["unknown_port", "source_port_0", "source_port_2"])]) == []

    def test_unresolved_later_ports_skipped(
        self,
        resistors: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        nets = run_network([*resistors, _trace("t", ["source_port_1", "unknown_port"])])
        assert nets == [DsnNet("Net-(pcb_component_0-Pad2)", ["pcb_component_0-2"])]

    def test_traces_with_same_anchor_merge_and_dedupe(
        self,
        resistors: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        records = [
            *resistors,
            _trace("t1", ["source_port_0", "source_port_2"]),
            _trace("t2", ["source_port_0", "source_port_3", "source_port_2"]),
        ]
        nets = run_network(records)
        assert nets == [
            DsnNet("Net-(pcb_component_0-Pad1)", ["pcb_component_0-1", "pcb_component_1-1", "pcb_component_1-2"])
        ]

    def test_source_net_collects_all_referencing_traces(
        self,
        resistors: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        records = [
            *resistors,
            _net("source_net_0", "GND"),
            _trace("t1", ["source_port_1"], ["source_net_0"]),
            _trace("t2", ["source_port_3"], ["source_net_0"]),
            _trace("t3", ["source_port_0"], ["source_net_other"]),
        ]
        assert run_network(records) == [DsnNet("GND_source_net_0", ["pcb_component_0-2", "pcb_component_1-2"])]

    def test_same_name_different_ids_stay_separate(
        self,
        resistors: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        records = [
            *resistors,
            _net("n1", "GND"),
            _net("n2", "GND"),
            _trace("t1", ["source_port_1"], ["n1"]),
            _trace("t2", ["source_port_3"], ["n2"]),
        ]
        assert [net.net_name for net in run_network(records)] == ["GND_n1", "GND_n2"]

    def test_trace_nets_precede_named_nets(
        self,
        resistors: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        records = [
            *resistors,
            _net("n1", "GND"),
            _trace("t1", ["source_port_1"], ["n1"]),
            _trace("t2", ["source_port_0", "source_port_2"]),
        ]
        assert [net.net_name for net in run_network(records)] == ["Net-(pcb_component_0-Pad1)", "GND_n1"]

    def test_plated_holes_resolve_ports(
        self,
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        records = [
            {"type": "source_component", "source_component_id": "sc", "name": "J1"},
            {"type": "pcb_component", "pcb_component_id": "J1_pcb", "source_component_id": "sc"},
            {"type": "source_port", "source_port_id": "sp1", "source_component_id": "sc", "port_hints": ["1"]},
            {"type": "source_port", "source_port_id": "sp2", "source_component_id": "sc", "name": "SIG"},
            {"type": "pcb_port", "pcb_port_id": "pp1", "source_port_id": "sp1"},
            {"type": "pcb_port", "pcb_port_id": "pp2", "source_port_id": "sp2"},
            {"type": "pcb_plated_hole", "pcb_plated_hole_id": "h1", "pcb_component_id": "J1_pcb",
             "pcb_port_id": "pp1", "shape": "circle", "outer_diameter": 1.5},
            {"type": "pcb_plated_hole", "pcb_plated_hole_id": "h2", "pcb_component_id": "J1_pcb",
             "pcb_port_id": "pp2", "shape": "circle", "outer_diameter": 1.5},
            _trace("t", ["sp1", "sp2"]),
        ]  # fmt: skip
        assert run_network(records) == [DsnNet("Net-(J1_pcb-Pad1)", ["J1_pcb-1", "J1_pcb-SIG"])]

    def test_port_of_unplaced_component_ignored(
        self,
        resistors: list[dict[str, Any]],
        run_network: Callable[[list[dict[str, Any]]], list[DsnNet]],
    ) -> None:
        records = [
            *resistors,
            {"type": "source_component", "source_component_id": "ghost"},
            {"type": "source_port", "source_port_id": "ghost_port", "source_component_id": "ghost"},
            _trace("t", ["source_port_0", "ghost_port"]),
        ]
        assert run_network(records) == [DsnNet("Net-(pcb_component_0-Pad1)", ["pcb_component_0-1"])]

    def test_no_records(self, run_network: Callable[[list[dict[str, Any]]], list[DsnNet]]) -> None:
        assert run_network([]) == []


class TestBuildNetMap:
    def test_keeps_empty_nets(self, resistors: list[dict[str, Any]]) -> None:
        net_map = build_net_map(CircuitRecordStore([*resistors, _net("n", "VCC")]))
        assert net_map == {"VCC_n": {}}

    def test_pin_names_match_library_pins(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        net_map = build_net_map(CircuitRecordStore(two_resistor_circuit))
        pins = {pin for members in net_map.values() for pin in members}
        assert pins == {"pcb_component_0-1", "pcb_component_1-1", "pcb_component_0-2"}
