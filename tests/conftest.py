# SPDX-License-Identifier: MIT
"""Pytest configuration and shared fixtures for the test suite.

This module provides:
- A two-resistor circuit JSON fixture used across stage and pipeline tests
- Helpers to build a converter context and run stages in order
- Deterministic test environment setup
"""
from __future__ import annotations

import copy
import os
from collections.abc import Callable
from typing import Any

import pytest

from circuit_dsn.converter import ConverterContext
from circuit_dsn.converter.stages import InitializeDsnStage
from circuit_dsn.records import CircuitRecordStore

# ---------------------------------------------------------------------------
# Environment Setup
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest environment for determinism."""
    deterministic_env = {
        "LC_ALL": "C",
        "LANG": "C",
        "TZ": "UTC",
        "PYTHONHASHSEED": "0",
    }
    for key, value in deterministic_env.items():
        os.environ.setdefault(key, value)


# ---------------------------------------------------------------------------
# Circuit builders
# ---------------------------------------------------------------------------


def resistor_records(
    index: int,
    *,
    center_x: float,
    center_y: float = 0.0,
    layer: str = "top",
    rotation: float = 0.0,
) -> list[dict[str, Any]]:
    """Records for one 0402-style resistor with two rectangular pads.

    Ports are ``source_port_<2i>`` (pin 1) and ``source_port_<2i+1>`` (pin 2).
    """
    source_component_id = f"source_component_{index}"
    pcb_component_id = f"pcb_component_{index}"
    records: list[dict[str, Any]] = [
        {
            "type": "source_component",
            "source_component_id": source_component_id,
            "name": f"R{index + 1}",
            "ftype": "simple_resistor",
        },
        {
            "type": "pcb_component",
            "pcb_component_id": pcb_component_id,
            "source_component_id": source_component_id,
            "center": {"x": center_x, "y": center_y},
            "width": 1.56,
            "height": 0.64,
            "layer": layer,
            "rotation": rotation,
        },
    ]
    for pin, offset in ((1, -0.51), (2, 0.51)):
        port_index = index * 2 + pin - 1
        records.extend(
            [
                {
                    "type": "source_port",
                    "source_port_id": f"source_port_{port_index}",
                    "source_component_id": source_component_id,
                    "name": f"pin{pin}",
                    "port_hints": [f"pin{pin}", str(pin)],
                },
                {
                    "type": "pcb_port",
                    "pcb_port_id": f"pcb_port_{port_index}",
                    "source_port_id": f"source_port_{port_index}",
                    "pcb_component_id": pcb_component_id,
                    "x": center_x + offset,
                    "y": center_y,
                    "layers": [layer],
                },
                {
                    "type": "pcb_smtpad",
                    "pcb_smtpad_id": f"pcb_smtpad_{port_index}",
                    "pcb_component_id": pcb_component_id,
                    "pcb_port_id": f"pcb_port_{port_index}",
                    "shape": "rect",
                    "x": center_x + offset,
                    "y": center_y,
                    "width": 0.54,
                    "height": 0.64,
                    "layer": layer,
                },
            ]
        )
    return records


def two_resistor_records() -> list[dict[str, Any]]:
    """Two identical resistors on a 10 x 10 mm board.

    R1 pin 1 and R2 pin 1 share a direct trace; R1 pin 2 is on net GND via a
    trace; net VCC has no traces and must be dropped.
    """
    records: list[dict[str, Any]] = [
        {
            "type": "pcb_board",
            "pcb_board_id": "pcb_board_0",
            "width": 10,
            "height": 10,
            "center": {"x": 0, "y": 0},
            "num_layers": 2,
            "thickness": 1.4,
        }
    ]
    records.extend(resistor_records(0, center_x=0.0))
    records.extend(resistor_records(1, center_x=-2.56))
    records.extend(
        [
            {"type": "source_net", "source_net_id": "source_net_0", "name": "GND"},
            {"type": "source_net", "source_net_id": "source_net_1", "name": "VCC"},
            {
                "type": "source_trace",
                "source_trace_id": "source_trace_0",
                "connected_source_port_ids": ["source_port_0", "source_port_2"],
                "connected_source_net_ids": [],
            },
            {
                "type": "source_trace",
                "source_trace_id": "source_trace_1",
                "connected_source_port_ids": ["source_port_1"],
                "connected_source_net_ids": ["source_net_0"],
            },
        ]
    )
    return records


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def two_resistor_circuit() -> list[dict[str, Any]]:
    """Fresh copy of the two-resistor circuit for each test."""
    return copy.deepcopy(two_resistor_records())


@pytest.fixture
def make_context() -> Callable[..., ConverterContext]:
    """Factory building a context from records, optionally already initialized."""

    def _make(records: list[dict[str, Any]], *, initialize: bool = True) -> ConverterContext:
        ctx = ConverterContext(store=CircuitRecordStore(records))
        if initialize:
            InitializeDsnStage(ctx).run_until_finished()
        return ctx

    return _make


@pytest.fixture
def make_resistor() -> Callable[..., list[dict[str, Any]]]:
    """Factory for single-resistor record groups (see :func:`resistor_records`)."""
    return resistor_records
