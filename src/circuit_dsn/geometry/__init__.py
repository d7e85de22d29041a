"""Coordinate transforms."""

from __future__ import annotations

from .transform import (
    CIRCUIT_JSON_TO_DSN_SCALE,
    AffineTransform,
    Point,
    circuit_json_to_dsn_transform,
)

__all__ = [
    "AffineTransform",
    "CIRCUIT_JSON_TO_DSN_SCALE",
    "Point",
    "circuit_json_to_dsn_transform",
]
