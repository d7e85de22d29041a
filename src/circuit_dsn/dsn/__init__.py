"""Specctra DSN document model and S-expression serialization."""

from __future__ import annotations

from . import sexpr
from .model import (
    DsnBoundary,
    DsnCircle,
    DsnClearance,
    DsnComponent,
    DsnDocument,
    DsnImage,
    DsnLayer,
    DsnLibrary,
    DsnNet,
    DsnNetwork,
    DsnPadstack,
    DsnParser,
    DsnPath,
    DsnPin,
    DsnPlace,
    DsnPlacement,
    DsnPolygon,
    DsnRect,
    DsnResolution,
    DsnRule,
    DsnShape,
    DsnStructure,
    DsnVia,
    DsnWidth,
    DsnWiring,
    Side,
)
from .sexpr import SExprParseError, Symbol, dump, parse

__all__ = [
    "DsnBoundary",
    "DsnCircle",
    "DsnClearance",
    "DsnComponent",
    "DsnDocument",
    "DsnImage",
    "DsnLayer",
    "DsnLibrary",
    "DsnNet",
    "DsnNetwork",
    "DsnPadstack",
    "DsnParser",
    "DsnPath",
    "DsnPin",
    "DsnPlace",
    "DsnPlacement",
    "DsnPolygon",
    "DsnRect",
    "DsnResolution",
    "DsnRule",
    "DsnShape",
    "DsnStructure",
    "DsnVia",
    "DsnWidth",
    "DsnWiring",
    "SExprParseError",
    "Side",
    "Symbol",
    "dump",
    "parse",
    "sexpr",
]
