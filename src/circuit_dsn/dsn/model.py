"""Object model for Specctra DSN design documents.

Each node is a small dataclass that knows how to turn itself into an
S-expression list. Stages populate a :class:`DsnDocument` section by section
and the document renders itself on demand:

    (pcb <design_name>
      (parser ...)
      (resolution um 10)
      (unit um)
      (structure (layer ...) (boundary ...) (via ...) (rule ...))
      (placement (component <image> (place <ref> <x> <y> <side> <rot>)))
      (library (image <id> (pin ...)) (padstack <id> (shape ...)))
      (network (net <name> (pins <ref> ...)))
      (wiring)
    )

Coordinates are output units (micrometers); rounding to the document
resolution happens in the writer, not here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from . import sexpr
from .sexpr import SExprList, Symbol

Side = Literal["front", "back"]

DEFAULT_RESOLUTION_UNIT = "um"
DEFAULT_RESOLUTION_VALUE = 10


@dataclass
class DsnParser:
    """Parser descriptor telling the reader how strings are quoted."""

    host_cad: str
    host_version: str

    def to_sexpr(self) -> SExprList:
        return [
            "parser",
            ["string_quote", Symbol('"')],
            ["space_in_quoted_tokens", Symbol("on")],
            ["host_cad", self.host_cad],
            ["host_version", self.host_version],
        ]


@dataclass
class DsnResolution:
    unit: str = DEFAULT_RESOLUTION_UNIT
    value: int = DEFAULT_RESOLUTION_VALUE

    def to_sexpr(self) -> SExprList:
        return ["resolution", Symbol(self.unit), self.value]


# -----------------------------------------------------------------------------
# Structure
# -----------------------------------------------------------------------------


@dataclass
class DsnLayer:
    """Copper layer declaration: ``(layer <name> (type signal) (property (index n)))``."""

    layer_name: str
    index: int
    type: str = "signal"

    def to_sexpr(self) -> SExprList:
        return [
            "layer",
            self.layer_name,
            ["type", self.type],
            ["property", ["index", self.index]],
        ]


@dataclass
class DsnPath:
    """Polyline on a layer; ``coordinates`` is flat ``x0, y0, x1, y1, ...``."""

    layer: str
    width: float
    coordinates: list[float] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["path", self.layer, self.width, *self.coordinates]


@dataclass
class DsnBoundary:
    paths: list[DsnPath] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["boundary", *(path.to_sexpr() for path in self.paths)]


@dataclass
class DsnWidth:
    value: float

    def to_sexpr(self) -> SExprList:
        return ["width", self.value]


@dataclass
class DsnClearance:
    """Clearance directive, optionally scoped by a clearance class pair."""

    value: float
    type: str | None = None

    def to_sexpr(self) -> SExprList:
        node: SExprList = ["clearance", self.value]
        if self.type is not None:
            node.append(["type", self.type])
        return node


RuleChild = Union[DsnWidth, DsnClearance]


@dataclass
class DsnRule:
    children: list[RuleChild] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["rule", *(child.to_sexpr() for child in self.children)]


@dataclass
class DsnVia:
    padstack_ids: list[str] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["via", *self.padstack_ids]


@dataclass
class DsnStructure:
    layers: list[DsnLayer] = field(default_factory=list)
    boundary: DsnBoundary | None = None
    via: DsnVia | None = None
    rules: list[DsnRule] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        node: SExprList = ["structure"]
        node.extend(layer.to_sexpr() for layer in self.layers)
        if self.boundary is not None:
            node.append(self.boundary.to_sexpr())
        if self.via is not None:
            node.append(self.via.to_sexpr())
        node.extend(rule.to_sexpr() for rule in self.rules)
        return node


# -----------------------------------------------------------------------------
# Library
# -----------------------------------------------------------------------------


@dataclass
class DsnCircle:
    layer: str
    diameter: float

    def to_sexpr(self) -> SExprList:
        return ["circle", self.layer, self.diameter]


@dataclass
class DsnRect:
    layer: str
    x1: float
    y1: float
    x2: float
    y2: float

    def to_sexpr(self) -> SExprList:
        return ["rect", self.layer, self.x1, self.y1, self.x2, self.y2]


@dataclass
class DsnPolygon:
    layer: str
    aperture_width: float
    coordinates: list[float] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["polygon", self.layer, self.aperture_width, *self.coordinates]


ShapePrimitive = Union[DsnCircle, DsnRect, DsnPolygon]


@dataclass
class DsnShape:
    primitive: ShapePrimitive

    def to_sexpr(self) -> SExprList:
        return ["shape", self.primitive.to_sexpr()]


@dataclass
class DsnPadstack:
    """Reusable pad definition; ``attach`` is written as ``(attach on|off)`` when set."""

    padstack_id: str
    shapes: list[DsnShape] = field(default_factory=list)
    attach: bool | None = None

    def to_sexpr(self) -> SExprList:
        node: SExprList = ["padstack", self.padstack_id]
        node.extend(shape.to_sexpr() for shape in self.shapes)
        if self.attach is not None:
            node.append(["attach", Symbol("on" if self.attach else "off")])
        return node


@dataclass
class DsnPin:
    """Pin of an image, positioned relative to the image origin."""

    padstack_id: str
    pin_id: str
    x: float
    y: float
    rotation: float = 0

    def to_sexpr(self) -> SExprList:
        node: SExprList = ["pin", self.padstack_id]
        if self.rotation:
            node.append(["rotate", self.rotation])
        node.extend([self.pin_id, self.x, self.y])
        return node


@dataclass
class DsnImage:
    image_id: str
    pins: list[DsnPin] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["image", self.image_id, *(pin.to_sexpr() for pin in self.pins)]


@dataclass
class DsnLibrary:
    images: list[DsnImage] = field(default_factory=list)
    padstacks: list[DsnPadstack] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        node: SExprList = ["library"]
        node.extend(image.to_sexpr() for image in self.images)
        node.extend(padstack.to_sexpr() for padstack in self.padstacks)
        return node


# -----------------------------------------------------------------------------
# Placement
# -----------------------------------------------------------------------------


@dataclass
class DsnPlace:
    component_ref: str
    x: float
    y: float
    side: Side = "front"
    rotation: float = 0

    def to_sexpr(self) -> SExprList:
        return ["place", self.component_ref, self.x, self.y, Symbol(self.side), self.rotation]


@dataclass
class DsnComponent:
    """All placements of one image (footprint)."""

    image_id: str
    places: list[DsnPlace] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["component", self.image_id, *(place.to_sexpr() for place in self.places)]


@dataclass
class DsnPlacement:
    components: list[DsnComponent] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["placement", *(component.to_sexpr() for component in self.components)]


# -----------------------------------------------------------------------------
# Network / wiring
# -----------------------------------------------------------------------------


@dataclass
class DsnNet:
    net_name: str
    pins: list[str] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["net", self.net_name, ["pins", *self.pins]]


@dataclass
class DsnNetwork:
    nets: list[DsnNet] = field(default_factory=list)

    def to_sexpr(self) -> SExprList:
        return ["network", *(net.to_sexpr() for net in self.nets)]


@dataclass
class DsnWiring:
    """Pre-routed wires; always empty because the converter does not route."""

    def to_sexpr(self) -> SExprList:
        return ["wiring"]


# -----------------------------------------------------------------------------
# Document
# -----------------------------------------------------------------------------


@dataclass
class DsnDocument:
    """Root ``(pcb ...)`` node with independently settable sections."""

    design_name: str
    parser: DsnParser | None = None
    resolution: DsnResolution | None = None
    unit: str | None = None
    structure: DsnStructure | None = None
    placement: DsnPlacement | None = None
    library: DsnLibrary | None = None
    network: DsnNetwork | None = None
    wiring: DsnWiring | None = None

    def to_sexpr(self) -> SExprList:
        node: SExprList = ["pcb", self.design_name]
        if self.parser is not None:
            node.append(self.parser.to_sexpr())
        if self.resolution is not None:
            node.append(self.resolution.to_sexpr())
        if self.unit is not None:
            node.append(["unit", Symbol(self.unit)])
        for section in (self.structure, self.placement, self.library, self.network, self.wiring):
            if section is not None:
                node.append(section.to_sexpr())
        return node

    def to_string(self) -> str:
        """Render the document as DSN text (newline terminated)."""
        return sexpr.dump(self.to_sexpr()) + "\n"
