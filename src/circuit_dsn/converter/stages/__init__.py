"""Conversion stages, in pipeline order."""

from __future__ import annotations

from .boundary import BoardBoundaryStage, board_boundary, generate_layers
from .initialize import InitializeDsnStage
from .library import AddLibraryStage, footprint_name, footprint_signature
from .network import AddNetworkStage, build_net_map
from .placement import AddPlacementStage
from .structure import VIA_PADSTACK_NAME, AddStructureStage

__all__ = [
    "AddLibraryStage",
    "AddNetworkStage",
    "AddPlacementStage",
    "AddStructureStage",
    "BoardBoundaryStage",
    "InitializeDsnStage",
    "VIA_PADSTACK_NAME",
    "board_boundary",
    "build_net_map",
    "footprint_name",
    "footprint_signature",
    "generate_layers",
]
