"""Staged circuit JSON to DSN conversion."""

from __future__ import annotations

from .context import ConverterContext
from .pins import resolve_pin_number
from .pipeline import CircuitJsonToDsnConverter
from .stage import MAX_ITERATIONS, ConverterStage
from .stages import (
    AddLibraryStage,
    AddNetworkStage,
    AddPlacementStage,
    AddStructureStage,
    BoardBoundaryStage,
    InitializeDsnStage,
)

__all__ = [
    "AddLibraryStage",
    "AddNetworkStage",
    "AddPlacementStage",
    "AddStructureStage",
    "BoardBoundaryStage",
    "CircuitJsonToDsnConverter",
    "ConverterContext",
    "ConverterStage",
    "InitializeDsnStage",
    "MAX_ITERATIONS",
    "resolve_pin_number",
]
