"""Exceptions raised by the circuit JSON to DSN conversion.

Every fault is fatal: stages never catch them, and the pipeline driver lets
them propagate to whoever called ``step()`` or ``run_until_finished()``.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base exception for conversion faults."""


class OrderingError(ConversionError):
    """A stage ran before the stage that provides its inputs.

    Raised when a required context field (document section, transform,
    component-to-footprint map) has not been populated yet.
    """


class ConfigurationError(ConversionError, ValueError):
    """The input records describe something the converter cannot express.

    Examples: fewer than two copper layers, an unsupported pad shape, or a
    record that does not validate against its schema.
    """


class RunawayIterationError(ConversionError, RuntimeError):
    """A stage exceeded its iteration ceiling without finishing."""

    def __init__(self, stage_name: str, max_iterations: int) -> None:
        super().__init__(f"{stage_name} exceeded {max_iterations} iterations without finishing")
        self.stage_name = stage_name
        self.max_iterations = max_iterations
