"""Stage that writes the complete structure section."""

from __future__ import annotations

import logging

from ...dsn.model import DsnClearance, DsnRule, DsnVia, DsnWidth
from .boundary import BoardBoundaryStage

logger = logging.getLogger(__name__)

VIA_PADSTACK_NAME = "Via[0-1]_600:300_um"

# Design rules in micrometers. Fixed for every board.
TRACE_WIDTH_UM = 200
CLEARANCE_UM = 200
CLEARANCE_TYPE_DEFAULT_SMD = "default_smd"
CLEARANCE_TYPE_SMD_SMD = "smd_smd"
CLEARANCE_SMD_SMD_UM = 50


def default_rule() -> DsnRule:
    return DsnRule(
        children=[
            DsnWidth(TRACE_WIDTH_UM),
            DsnClearance(CLEARANCE_UM),
            DsnClearance(CLEARANCE_UM, type=CLEARANCE_TYPE_DEFAULT_SMD),
            DsnClearance(CLEARANCE_SMD_SMD_UM, type=CLEARANCE_TYPE_SMD_SMD),
        ]
    )


class AddStructureStage(BoardBoundaryStage):
    """Write layers, board outline, via declaration and design rules.

    The via padstack name is also stored on the context so the library stage
    can define the matching padstack.
    """

    def _step(self) -> None:
        structure = self._structure()
        self._write_layers_and_boundary(structure)
        structure.via = DsnVia(padstack_ids=[VIA_PADSTACK_NAME])
        structure.rules = [default_rule()]
        self.ctx.via_padstack_name = VIA_PADSTACK_NAME
        logger.debug("%s: declared via %s and %d rule(s)", self.name, VIA_PADSTACK_NAME, len(structure.rules))
        self.finished = True
