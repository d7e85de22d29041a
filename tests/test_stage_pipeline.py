"""Tests for the stage base class and the pipeline driver."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from circuit_dsn.config import ConverterConfig
from circuit_dsn.converter import (
    AddLibraryStage,
    AddNetworkStage,
    AddPlacementStage,
    AddStructureStage,
    CircuitJsonToDsnConverter,
    ConverterContext,
    ConverterStage,
    InitializeDsnStage,
)
from circuit_dsn.errors import OrderingError, RunawayIterationError
from circuit_dsn.records import CircuitRecordStore


class NeverFinishes(ConverterStage):
    def _step(self) -> None:
        pass


class FinishesOnThirdStep(ConverterStage):
    def _step(self) -> None:
        if self.iteration == 3:
            self.finished = True


class TestConverterStage:
    def test_runaway_stage_raises(self) -> None:
        stage = NeverFinishes(ConverterContext(store=CircuitRecordStore([])), max_iterations=5)
        with pytest.raises(RunawayIterationError, match="NeverFinishes exceeded 5 iterations") as exc_info:
            stage.run_until_finished()
        assert exc_info.value.max_iterations == 5
        assert stage.iteration == 6

    def test_default_ceiling_from_config(self) -> None:
        ctx = ConverterContext(store=CircuitRecordStore([]), config=ConverterConfig(max_iterations=7))
        assert NeverFinishes(ctx).max_iterations == 7

    def test_default_ceiling_is_1000(self) -> None:
        stage = NeverFinishes(ConverterContext(store=CircuitRecordStore([])))
        with pytest.raises(RunawayIterationError):
            stage.run_until_finished()
        assert stage.iteration == 1001

    def test_multi_step_stage(self) -> None:
        stage = FinishesOnThirdStep(ConverterContext(store=CircuitRecordStore([])))
        stage.run_until_finished()
        assert stage.finished
        assert stage.iteration == 3

    def test_get_output_requires_document(self) -> None:
        stage = NeverFinishes(ConverterContext(store=CircuitRecordStore([])))
        with pytest.raises(OrderingError):
            stage.get_output()

    def test_initialize_stage_finishes_in_one_step(self) -> None:
        ctx = ConverterContext(store=CircuitRecordStore([]))
        stage = InitializeDsnStage(ctx)
        stage.step()
        assert stage.finished
        document = stage.get_output()
        assert document is ctx.document
        assert document.design_name == "circuit-design"
        assert document.unit == "um"
        assert document.resolution is not None
        assert (document.resolution.unit, document.resolution.value) == ("um", 10)
        for section in (
            document.structure,
            document.placement,
            document.library,
            document.network,
            document.wiring,
        ):
            assert section is not None

    def test_initialize_uses_config(self) -> None:
        config = ConverterConfig(design_name="my-board", host_cad="cad", host_version="9")
        ctx = ConverterContext(store=CircuitRecordStore([]), config=config)
        InitializeDsnStage(ctx).run_until_finished()
        assert ctx.document is not None
        assert ctx.document.design_name == "my-board"
        assert ctx.document.parser is not None
        assert (ctx.document.parser.host_cad, ctx.document.parser.host_version) == ("cad", "9")


class TestCircuitJsonToDsnConverter:
    def test_pipeline_order(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        converter = CircuitJsonToDsnConverter(two_resistor_circuit)
        assert [type(stage) for stage in converter.pipeline] == [
            InitializeDsnStage,
            AddStructureStage,
            AddLibraryStage,
            AddPlacementStage,
            AddNetworkStage,
        ]

    def test_stages_share_context(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        converter = CircuitJsonToDsnConverter(two_resistor_circuit)
        assert all(stage.ctx is converter.ctx for stage in converter.pipeline)

    def test_step_advances_one_stage(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        converter = CircuitJsonToDsnConverter(two_resistor_circuit)
        converter.step()
        assert converter.current_stage_index == 1
        assert converter.ctx.document is not None
        assert converter.ctx.document.structure is not None
        assert converter.ctx.document.structure.layers == []
        assert not converter.finished

    def test_finishes_after_extra_step(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        converter = CircuitJsonToDsnConverter(two_resistor_circuit)
        for _ in range(5):
            converter.step()
        assert converter.current_stage is None
        assert not converter.finished
        converter.step()
        assert converter.finished

    def test_run_until_finished(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        converter = CircuitJsonToDsnConverter(two_resistor_circuit)
        converter.run_until_finished()
        assert converter.finished
        assert all(stage.finished for stage in converter.pipeline)
        assert all(stage.iteration == 1 for stage in converter.pipeline)

    def test_get_output_before_step_raises(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        with pytest.raises(OrderingError):
            CircuitJsonToDsnConverter(two_resistor_circuit).get_output()

    def test_output_is_byte_identical_across_runs(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        outputs = []
        for _ in range(2):
            converter = CircuitJsonToDsnConverter(two_resistor_circuit)
            converter.run_until_finished()
            outputs.append(converter.get_output_string())
        assert outputs[0] == outputs[1]

    def test_config_design_name(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        converter = CircuitJsonToDsnConverter(two_resistor_circuit, config=ConverterConfig(design_name="demo"))
        converter.run_until_finished()
        assert converter.get_output_string().startswith("(pcb demo\n")

    def test_empty_circuit_converts(self) -> None:
        converter = CircuitJsonToDsnConverter([])
        converter.run_until_finished()
        document = converter.get_output()
        assert document.structure is not None
        assert [layer.layer_name for layer in document.structure.layers] == ["F.Cu", "B.Cu"]
        assert document.library is not None
        assert document.library.images == []
        assert document.network is not None
        assert document.network.nets == []

    def test_two_resistor_output(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        converter = CircuitJsonToDsnConverter(two_resistor_circuit)
        converter.run_until_finished()
        lines = converter.get_output_string().splitlines()

        assert "      (path pcb 0 -5000 -5000 5000 -5000 5000 5000 -5000 5000 -5000 -5000)" in lines
        assert "    (via Via[0-1]_600:300_um)" in lines
        assert "      (clearance 50 (type smd_smd))" in lines
        assert "    (component footprint_1560x640_0" in lines
        assert "      (place pcb_component_0 0 0 front 0)" in lines
        assert "      (place pcb_component_1 -2560 0 front 0)" in lines
        assert "      (pin p540x640 1 -510 0)" in lines
        assert "      (pin p540x640 2 510 0)" in lines
        assert '    (net "Net-(pcb_component_0-Pad1)"' in lines
        assert "      (pins pcb_component_0-1 pcb_component_1-1)" in lines
        assert "    (net GND_source_net_0" in lines
        assert not any("VCC" in line for line in lines)


class TestOrdering:
    def test_placement_before_library_raises(
        self,
        two_resistor_circuit: list[dict[str, Any]],
        make_context: Callable[..., ConverterContext],
    ) -> None:
        ctx = make_context(two_resistor_circuit)
        with pytest.raises(OrderingError, match="AddLibraryStage"):
            AddPlacementStage(ctx).run_until_finished()

    @pytest.mark.parametrize(
        "stage_cls",
        [AddStructureStage, AddLibraryStage, AddPlacementStage, AddNetworkStage],
    )
    def test_stage_without_document_raises(
        self,
        stage_cls: type[ConverterStage],
        make_context: Callable[..., ConverterContext],
    ) -> None:
        ctx = make_context([], initialize=False)
        with pytest.raises(OrderingError):
            stage_cls(ctx).run_until_finished()

    def test_structure_without_transform_raises(self, make_context: Callable[..., ConverterContext]) -> None:
        ctx = make_context([])
        ctx.transform = None
        with pytest.raises(OrderingError, match="transform"):
            AddStructureStage(ctx).run_until_finished()

    def test_structure_without_section_raises(self, make_context: Callable[..., ConverterContext]) -> None:
        ctx = make_context([])
        assert ctx.document is not None
        ctx.document.structure = None
        with pytest.raises(OrderingError, match="structure section"):
            AddStructureStage(ctx).run_until_finished()
