"""2D affine transforms between circuit JSON and DSN coordinate spaces.

A transform is a 3x3 homogeneous matrix

    | a  c  e |
    | b  d  f |
    | 0  0  1 |

so that ``x' = a*x + c*y + e`` and ``y' = b*x + d*y + f``. Instances are
immutable; composing returns a new transform.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

Point = tuple[float, float]

# Circuit JSON millimeters -> DSN micrometers
CIRCUIT_JSON_TO_DSN_SCALE = 1000


@dataclass(frozen=True, eq=False)
class AffineTransform:
    """Immutable 2D affine transform backed by a 3x3 float64 matrix."""

    matrix: NDArray[np.float64] = field(default_factory=lambda: np.eye(3, dtype=np.float64))

    def __post_init__(self) -> None:
        matrix = np.array(self.matrix, dtype=np.float64)
        if matrix.shape != (3, 3):
            raise ValueError(f"Affine matrix must be 3x3, got shape {matrix.shape}")
        if not np.array_equal(matrix[2], np.array([0.0, 0.0, 1.0])):
            raise ValueError("Affine matrix must have [0, 0, 1] as its last row")
        matrix.setflags(write=False)
        object.__setattr__(self, "matrix", matrix)

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def scale(cls, sx: float, sy: float | None = None) -> AffineTransform:
        """Uniform (or per-axis) scale about the origin."""
        sy = sx if sy is None else sy
        return cls(np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]]))

    @classmethod
    def translate(cls, tx: float, ty: float) -> AffineTransform:
        return cls(np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]]))

    def compose(self, other: AffineTransform) -> AffineTransform:
        """Return the transform that applies ``other`` first, then ``self``."""
        return AffineTransform(self.matrix @ other.matrix)

    def apply_to_point(self, point: Sequence[float] | Any) -> Point:
        """Map a point into the target space.

        Args:
            point: ``(x, y)`` pair or any object with ``x`` and ``y`` attributes.

        Returns:
            Transformed ``(x, y)`` as Python floats.
        """
        x, y = _coerce_point(point)
        m = self.matrix
        return (
            float(m[0, 0] * x + m[0, 1] * y + m[0, 2]),
            float(m[1, 0] * x + m[1, 1] * y + m[1, 2]),
        )

    def apply_to_points(self, points: Iterable[Sequence[float] | Any]) -> list[Point]:
        return [self.apply_to_point(point) for point in points]

    def flat_coordinates(self, points: Iterable[Sequence[float] | Any]) -> list[float]:
        """Transform points and flatten them to ``[x0, y0, x1, y1, ...]``."""
        coordinates: list[float] = []
        for x, y in self.apply_to_points(points):
            coordinates.extend((x, y))
        return coordinates


def _coerce_point(point: Sequence[float] | Any) -> Point:
    if hasattr(point, "x") and hasattr(point, "y"):
        return float(point.x), float(point.y)
    x, y = point
    return float(x), float(y)


def circuit_json_to_dsn_transform() -> AffineTransform:
    """Transform used by the converter: millimeters to micrometers."""
    return AffineTransform.scale(CIRCUIT_JSON_TO_DSN_SCALE)
