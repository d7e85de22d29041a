"""Pydantic models for the circuit JSON record kinds the converter reads.

Circuit JSON is a flat list of objects discriminated by ``type``. Only the
fields the conversion consumes are declared; everything else is kept as extra
data so records round-trip untouched.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _RecordBase(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)


class Point(_RecordBase):
    x: float = 0.0
    y: float = 0.0


def coerce_point(value: Any) -> Any:
    """Accept ``[x, y]`` pairs as well as ``{"x": .., "y": ..}`` mappings."""
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return {"x": value[0], "y": value[1]}
    return value


class CircuitRecord(_RecordBase):
    """Any circuit JSON element; unknown kinds are stored as this."""

    type: str


class PcbBoard(CircuitRecord):
    type: str = "pcb_board"
    pcb_board_id: str = ""
    width: float | None = None
    height: float | None = None
    center: Point | None = None
    num_layers: int | None = None
    thickness: float | None = None

    @field_validator("center", mode="before")
    @classmethod
    def coerce_center(cls, value: Any) -> Any:
        return coerce_point(value)


class PcbComponent(CircuitRecord):
    type: str = "pcb_component"
    pcb_component_id: str
    source_component_id: str | None = None
    center: Point | None = None
    width: float | None = None
    height: float | None = None
    rotation: float | None = None
    layer: str | None = None

    @field_validator("center", mode="before")
    @classmethod
    def coerce_center(cls, value: Any) -> Any:
        return coerce_point(value)


class PcbSmtPad(CircuitRecord):
    """Surface-mount pad. ``x``/``y`` are absent on polygon pads."""

    type: str = "pcb_smtpad"
    pcb_smtpad_id: str
    pcb_component_id: str | None = None
    pcb_port_id: str | None = None
    shape: str
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    radius: float | None = None
    points: list[Point] | None = None
    layer: str | None = None
    ccw_rotation: float | None = None

    @field_validator("points", mode="before")
    @classmethod
    def coerce_points(cls, value: Any) -> Any:
        if value is None:
            return value
        return [coerce_point(point) for point in value]

    def anchor(self) -> tuple[float, float]:
        """Pad reference position: its x/y, or the vertex mean for polygons.

        Raises:
            ValueError: If the pad has neither a position nor points.
        """
        if self.x is not None and self.y is not None:
            return self.x, self.y
        if self.points:
            count = len(self.points)
            return (
                sum(point.x for point in self.points) / count,
                sum(point.y for point in self.points) / count,
            )
        raise ValueError(f"{self.pcb_smtpad_id} has no x/y position or points")


class PcbPlatedHole(CircuitRecord):
    type: str = "pcb_plated_hole"
    pcb_plated_hole_id: str
    pcb_component_id: str | None = None
    pcb_port_id: str | None = None
    shape: str
    x: float = 0.0
    y: float = 0.0
    outer_diameter: float | None = None
    hole_diameter: float | None = None
    outer_width: float | None = None
    outer_height: float | None = None
    hole_width: float | None = None
    hole_height: float | None = None
    rect_pad_width: float | None = None
    rect_pad_height: float | None = None
    layers: list[str] = Field(default_factory=list)
    ccw_rotation: float | None = None

    def anchor(self) -> tuple[float, float]:
        return self.x, self.y


class PcbPort(CircuitRecord):
    type: str = "pcb_port"
    pcb_port_id: str
    source_port_id: str | None = None
    pcb_component_id: str | None = None
    x: float | None = None
    y: float | None = None
    layers: list[str] = Field(default_factory=list)


class SourceComponent(CircuitRecord):
    type: str = "source_component"
    source_component_id: str
    name: str | None = None
    ftype: str | None = None


class SourcePort(CircuitRecord):
    type: str = "source_port"
    source_port_id: str
    source_component_id: str | None = None
    name: str | None = None
    port_hints: list[str] | None = None
    pin_number: int | None = None

    @field_validator("port_hints", mode="before")
    @classmethod
    def stringify_hints(cls, value: Any) -> Any:
        if value is None:
            return value
        return [str(hint) for hint in value]


class SourceNet(CircuitRecord):
    type: str = "source_net"
    source_net_id: str
    name: str = ""


class SourceTrace(CircuitRecord):
    type: str = "source_trace"
    source_trace_id: str
    connected_source_port_ids: list[str] = Field(default_factory=list)
    connected_source_net_ids: list[str] = Field(default_factory=list)

    @field_validator("connected_source_port_ids", "connected_source_net_ids", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


RECORD_MODELS: dict[str, type[CircuitRecord]] = {
    "pcb_board": PcbBoard,
    "pcb_component": PcbComponent,
    "pcb_smtpad": PcbSmtPad,
    "pcb_plated_hole": PcbPlatedHole,
    "pcb_port": PcbPort,
    "source_component": SourceComponent,
    "source_port": SourcePort,
    "source_net": SourceNet,
    "source_trace": SourceTrace,
}

# Primary-key field per kind, used for id lookups.
RECORD_ID_FIELDS: dict[str, str] = {
    "pcb_board": "pcb_board_id",
    "pcb_component": "pcb_component_id",
    "pcb_smtpad": "pcb_smtpad_id",
    "pcb_plated_hole": "pcb_plated_hole_id",
    "pcb_port": "pcb_port_id",
    "source_component": "source_component_id",
    "source_port": "source_port_id",
    "source_net": "source_net_id",
    "source_trace": "source_trace_id",
}
