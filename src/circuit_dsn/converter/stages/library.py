"""Stage that builds footprint images and padstacks.

Components whose pads and holes match in shape, size and position relative
to the component center share one image. Matching is done on a footprint
signature: one ``<shape>:<size>@<relX>,<relY>`` entry per pad or hole, with
all lengths in micrometers snapped to a 0.1 um grid, sorted and joined with
``|``. Signatures ignore rotation, so rotated or mirrored copies of the same
footprint get their own images.

Padstacks are keyed by shape and size only and are shared across images:

    smt circle                    p<d>
    smt rect / rotated_rect       p<w>x<h>
    smt pill / rotated_pill       p<w>x<h>_pill      (written as a rect)
    smt polygon                   p_poly_<hash>
    hole circle                   p<d>_hole          (F.Cu and B.Cu)
    hole oval / pill              p<w>x<h>_hole      (F.Cu and B.Cu)
    hole circular_hole_with_rect_pad
                                  p<w>x<h>_recthole  (F.Cu and B.Cu)
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from ...dsn.model import DsnCircle, DsnImage, DsnLibrary, DsnPadstack, DsnPin, DsnPolygon, DsnRect, DsnShape
from ...errors import ConfigurationError, OrderingError
from ...geometry.transform import AffineTransform
from ...records.models import PcbComponent, PcbPlatedHole, PcbSmtPad
from ...units import format_quantity, mm_to_um, quantize_um
from ..pins import pin_number_for_port
from ..stage import ConverterStage

logger = logging.getLogger(__name__)

FRONT_COPPER = "F.Cu"
BACK_COPPER = "B.Cu"
THROUGH_LAYERS = (FRONT_COPPER, BACK_COPPER)

VIA_DIAMETER_UM = 600
POLYGON_HASH_LENGTH = 12

SMT_RECT_SHAPES = frozenset({"rect", "rotated_rect"})
SMT_PILL_SHAPES = frozenset({"pill", "rotated_pill"})
HOLE_OVAL_SHAPES = frozenset({"oval", "pill"})


@dataclass(frozen=True)
class PadGeometry:
    """Shape class and sizes of one pad or hole, independent of position."""

    padstack_id: str
    signature: str
    shapes: tuple[DsnShape, ...]


def _require(value: float | None, field_name: str, record_id: str) -> float:
    if value is None:
        raise ConfigurationError(f"{record_id} is missing required field '{field_name}'")
    return value


def _q(value_mm: float) -> str:
    return format_quantity(quantize_um(value_mm))


def _rect_shape(layer: str, width_um: int, height_um: int) -> DsnShape:
    return DsnShape(DsnRect(layer, -width_um / 2, -height_um / 2, width_um / 2, height_um / 2))


def pad_layer(pad: PcbSmtPad) -> str:
    return BACK_COPPER if pad.layer == "bottom" else FRONT_COPPER


def pad_position(pad: PcbSmtPad) -> tuple[float, float]:
    """Board position of a pad; polygons use their vertex mean.

    Raises:
        ConfigurationError: If a non-polygon pad has no ``x``/``y``.
    """
    if pad.shape == "polygon":
        return pad.anchor()
    return _require(pad.x, "x", pad.pcb_smtpad_id), _require(pad.y, "y", pad.pcb_smtpad_id)


def smt_pad_geometry(pad: PcbSmtPad, transform: AffineTransform) -> PadGeometry:
    """Padstack id, signature prefix and shapes for a surface-mount pad.

    Raises:
        ConfigurationError: On an unsupported shape or missing dimensions.
    """
    layer = pad_layer(pad)
    record_id = pad.pcb_smtpad_id

    if pad.shape == "circle":
        radius = _require(pad.radius, "radius", record_id)
        diameter = mm_to_um(radius * 2)
        return PadGeometry(
            padstack_id=f"p{diameter}",
            signature=f"c:{_q(radius * 2)}",
            shapes=(DsnShape(DsnCircle(layer, diameter)),),
        )

    if pad.shape in SMT_RECT_SHAPES or pad.shape in SMT_PILL_SHAPES:
        width = _require(pad.width, "width", record_id)
        height = _require(pad.height, "height", record_id)
        width_um, height_um = mm_to_um(width), mm_to_um(height)
        is_pill = pad.shape in SMT_PILL_SHAPES
        # Rounded corners are not modeled; pills become plain rectangles.
        return PadGeometry(
            padstack_id=f"p{width_um}x{height_um}" + ("_pill" if is_pill else ""),
            signature=f"{'p' if is_pill else 'r'}:{_q(width)}x{_q(height)}",
            shapes=(_rect_shape(layer, width_um, height_um),),
        )

    if pad.shape == "polygon":
        if not pad.points or len(pad.points) < 3:
            raise ConfigurationError(f"{record_id} polygon pad needs at least 3 points")
        anchor_x, anchor_y = pad.anchor()
        relative = [(point.x - anchor_x, point.y - anchor_y) for point in pad.points]
        outline = ";".join(f"{_q(x)},{_q(y)}" for x, y in relative)
        digest = hashlib.sha256(outline.encode("utf-8")).hexdigest()[:POLYGON_HASH_LENGTH]
        return PadGeometry(
            padstack_id=f"p_poly_{digest}",
            signature=f"g:{outline}",
            shapes=(DsnShape(DsnPolygon(layer, 0, transform.flat_coordinates(relative))),),
        )

    raise ConfigurationError(f"Unsupported SMT pad shape {pad.shape!r} on {record_id}")


def plated_hole_geometry(hole: PcbPlatedHole) -> PadGeometry:
    """Padstack id, signature prefix and shapes for a plated hole.

    Copper is replicated on the front and back layers.

    Raises:
        ConfigurationError: On an unsupported shape or missing dimensions.
    """
    record_id = hole.pcb_plated_hole_id

    if hole.shape == "circle":
        outer = _require(hole.outer_diameter, "outer_diameter", record_id)
        diameter = mm_to_um(outer)
        return PadGeometry(
            padstack_id=f"p{diameter}_hole",
            signature=f"hc:{_q(outer)}",
            shapes=tuple(DsnShape(DsnCircle(layer, diameter)) for layer in THROUGH_LAYERS),
        )

    if hole.shape in HOLE_OVAL_SHAPES:
        width = _require(hole.outer_width, "outer_width", record_id)
        height = _require(hole.outer_height, "outer_height", record_id)
        width_um, height_um = mm_to_um(width), mm_to_um(height)
        return PadGeometry(
            padstack_id=f"p{width_um}x{height_um}_hole",
            signature=f"ho:{_q(width)}x{_q(height)}",
            shapes=tuple(_rect_shape(layer, width_um, height_um) for layer in THROUGH_LAYERS),
        )

    if hole.shape == "circular_hole_with_rect_pad":
        width = _require(hole.rect_pad_width, "rect_pad_width", record_id)
        height = _require(hole.rect_pad_height, "rect_pad_height", record_id)
        width_um, height_um = mm_to_um(width), mm_to_um(height)
        return PadGeometry(
            padstack_id=f"p{width_um}x{height_um}_recthole",
            signature=f"hr:{_q(width)}x{_q(height)}",
            shapes=tuple(_rect_shape(layer, width_um, height_um) for layer in THROUGH_LAYERS),
        )

    raise ConfigurationError(f"Unsupported plated hole shape {hole.shape!r} on {record_id}")


def via_padstack(padstack_id: str) -> DsnPadstack:
    return DsnPadstack(
        padstack_id=padstack_id,
        shapes=[DsnShape(DsnCircle(layer, VIA_DIAMETER_UM)) for layer in THROUGH_LAYERS],
        attach=False,
    )


def footprint_signature(entries: list[str]) -> str:
    """Order-independent signature from ``<desc>@<relX>,<relY>`` entries."""
    return "|".join(sorted(entries))


def footprint_name(component: PcbComponent, pin_count: int, sequence: int) -> str:
    """``footprint_<w>x<h>_<seq>`` when the component has a size, else ``footprint_<n>pin_<seq>``."""
    width_um = mm_to_um(component.width or 0)
    height_um = mm_to_um(component.height or 0)
    if width_um > 0 and height_um > 0:
        return f"footprint_{width_um}x{height_um}_{sequence}"
    return f"footprint_{pin_count}pin_{sequence}"


class AddLibraryStage(ConverterStage):
    """Write one image per distinct footprint plus the shared padstacks.

    Populates ``ctx.component_to_footprint_name`` for the placement stage.
    """

    def _library(self) -> DsnLibrary:
        document = self.ctx.require_document(self.name)
        if document.library is None:
            raise OrderingError(f"{self.name} requires an initialized library section")
        return document.library

    def _step(self) -> None:
        library = self._library()
        transform = self.ctx.require_transform(self.name)
        store = self.ctx.store

        component_to_footprint: dict[str, str] = {}
        signature_to_image: dict[str, str] = {}
        images: list[DsnImage] = []
        padstacks: dict[str, DsnPadstack] = {}

        for component in store.pcb_component:
            component_id = component.pcb_component_id
            pads: list[PcbSmtPad] = store.pcb_smtpad.where(pcb_component_id=component_id)
            holes: list[PcbPlatedHole] = store.pcb_plated_hole.where(pcb_component_id=component_id)
            if not pads and not holes:
                continue

            center_x = component.center.x if component.center is not None else 0.0
            center_y = component.center.y if component.center is not None else 0.0

            features: list[tuple[PadGeometry, tuple[float, float], str | None, float]] = []
            for pad in pads:
                geometry = smt_pad_geometry(pad, transform)
                pad_x, pad_y = pad_position(pad)
                features.append(
                    (
                        geometry,
                        (pad_x - center_x, pad_y - center_y),
                        pad.pcb_port_id,
                        pad.ccw_rotation or 0,
                    )
                )
            for hole in holes:
                features.append(
                    (
                        plated_hole_geometry(hole),
                        (hole.x - center_x, hole.y - center_y),
                        hole.pcb_port_id,
                        hole.ccw_rotation or 0,
                    )
                )

            signature = footprint_signature(
                [f"{geometry.signature}@{_q(rel_x)},{_q(rel_y)}" for geometry, (rel_x, rel_y), _, _ in features]
            )
            existing = signature_to_image.get(signature)
            if existing is not None:
                component_to_footprint[component_id] = existing
                continue

            pins: list[DsnPin] = []
            for geometry, relative, pcb_port_id, rotation in features:
                if geometry.padstack_id not in padstacks:
                    padstacks[geometry.padstack_id] = DsnPadstack(geometry.padstack_id, list(geometry.shapes))
                x, y = transform.apply_to_point(relative)
                pins.append(
                    DsnPin(
                        padstack_id=geometry.padstack_id,
                        pin_id=pin_number_for_port(store, pcb_port_id),
                        x=x,
                        y=y,
                        rotation=rotation,
                    )
                )

            name = footprint_name(component, len(features), len(images))
            images.append(DsnImage(image_id=name, pins=pins))
            signature_to_image[signature] = name
            component_to_footprint[component_id] = name

        padstack_list = list(padstacks.values())
        via_name = self.ctx.via_padstack_name
        if via_name is not None and via_name not in padstacks:
            padstack_list.append(via_padstack(via_name))

        library.images = images
        library.padstacks = padstack_list
        self.ctx.component_to_footprint_name = component_to_footprint
        logger.debug(
            "%s: %d components -> %d images, %d padstacks",
            self.name,
            len(component_to_footprint),
            len(images),
            len(padstack_list),
        )
        self.finished = True
