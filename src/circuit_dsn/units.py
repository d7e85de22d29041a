"""Unit conversion and fixed-point quantization helpers.

Circuit JSON lengths are millimeters (floats). DSN output uses micrometers.
Anything that feeds a name or a signature is quantized through ``Decimal``
so that two floats that differ only by binary noise produce the same text.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

UM_PER_MM = 1000

# Footprint signatures compare geometry on a 0.1 um grid.
SIGNATURE_QUANTUM_UM = Decimal("0.1")


def _decimal_from_float(value: float, type_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"{type_name} does not accept boolean values.")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{type_name} must be finite, got {value!r}")
    try:
        # repr() keeps the shortest round-tripping form of the float.
        return Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value for {type_name}: {value!r}") from exc


def mm_to_um(value_mm: float) -> int:
    """Convert millimeters to whole micrometers, rounding half up.

    >>> mm_to_um(0.54)
    540
    >>> mm_to_um(1.2345)
    1235
    """
    um = _decimal_from_float(value_mm, "length") * UM_PER_MM
    return int(um.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def quantize_um(value_mm: float, quantum: Decimal = SIGNATURE_QUANTUM_UM) -> Decimal:
    """Convert millimeters to micrometers snapped to ``quantum``.

    Args:
        value_mm: Length in millimeters.
        quantum: Grid step in micrometers.

    Returns:
        Micrometer value as a Decimal with the quantum's exponent.
    """
    um = _decimal_from_float(value_mm, "length") * UM_PER_MM
    snapped = (um / quantum).quantize(Decimal(1), rounding=ROUND_HALF_UP) * quantum
    return snapped.quantize(quantum)


def format_quantity(value: Decimal) -> str:
    """Format a quantized value without trailing zeros (``-0`` becomes ``0``)."""
    text = format(value.normalize(), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in {"", "-0"} else text
