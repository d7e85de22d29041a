"""circuit-json-to-dsn: convert circuit JSON boards into Specctra DSN designs.

The converter reads a flat list of circuit JSON records (boards, components,
pads, holes, ports, traces and nets) and writes a Specctra DSN document that
autorouters such as Freerouting accept.

Public API
----------
- :func:`load_circuit_json` - Load circuit JSON records from a JSON/YAML file
- :func:`convert_circuit_json` - Convert records to DSN text
- :func:`write_dsn` - Convert records and write a ``.dsn`` file
- :class:`CircuitJsonToDsnConverter` - Stage-by-stage pipeline driver

Example
-------
>>> from circuit_dsn import load_circuit_json, convert_circuit_json
>>> records = load_circuit_json(Path("board.json"))
>>> dsn_text = convert_circuit_json(records)
"""

from __future__ import annotations

__version__ = "0.3.0"

from .api import ConversionResult, convert_circuit_json, load_circuit_json, write_dsn
from .converter import CircuitJsonToDsnConverter, ConverterContext, ConverterStage
from .errors import ConfigurationError, ConversionError, OrderingError, RunawayIterationError

__all__ = [
    "__version__",
    # Core API functions
    "load_circuit_json",
    "convert_circuit_json",
    "write_dsn",
    "ConversionResult",
    # Pipeline
    "CircuitJsonToDsnConverter",
    "ConverterContext",
    "ConverterStage",
    # Errors
    "ConversionError",
    "ConfigurationError",
    "OrderingError",
    "RunawayIterationError",
]
