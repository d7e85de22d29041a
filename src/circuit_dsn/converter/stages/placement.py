"""Stage that places every footprinted component on the board."""

from __future__ import annotations

import logging

from ...dsn.model import DsnComponent, DsnPlace, DsnPlacement, Side
from ...errors import OrderingError
from ...records.models import PcbComponent
from ..stage import ConverterStage

logger = logging.getLogger(__name__)


def component_side(component: PcbComponent) -> Side:
    return "back" if component.layer == "bottom" else "front"


class AddPlacementStage(ConverterStage):
    """Write one ``component`` entry per footprint listing all of its places.

    Footprints appear in the order their first component appears in the
    records. Components the library stage did not assign (no pads or holes)
    are left out.
    """

    def _placement(self) -> DsnPlacement:
        document = self.ctx.require_document(self.name)
        if document.placement is None:
            raise OrderingError(f"{self.name} requires an initialized placement section")
        return document.placement

    def _step(self) -> None:
        placement = self._placement()
        transform = self.ctx.require_transform(self.name)
        component_to_footprint = self.ctx.component_to_footprint_name
        if component_to_footprint is None:
            raise OrderingError(f"{self.name} requires component footprints; run AddLibraryStage first")

        footprint_to_places: dict[str, list[DsnPlace]] = {}
        for component in self.ctx.store.pcb_component:
            footprint = component_to_footprint.get(component.pcb_component_id)
            if footprint is None:
                continue
            center = component.center if component.center is not None else (0.0, 0.0)
            x, y = transform.apply_to_point(center)
            footprint_to_places.setdefault(footprint, []).append(
                DsnPlace(
                    component_ref=component.pcb_component_id,
                    x=x,
                    y=y,
                    side=component_side(component),
                    rotation=component.rotation or 0,
                )
            )

        placement.components = [
            DsnComponent(image_id=footprint, places=places) for footprint, places in footprint_to_places.items()
        ]
        logger.debug(
            "%s: placed %d components across %d footprints",
            self.name,
            sum(len(places) for places in footprint_to_places.values()),
            len(placement.components),
        )
        self.finished = True
