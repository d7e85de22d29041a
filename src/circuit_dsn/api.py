"""Public API for loading circuit JSON and writing DSN files."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import ConverterConfig
from .converter import CircuitJsonToDsnConverter
from .dsn.model import DsnDocument
from .errors import ConfigurationError
from .hashing import sha256_text
from .records.models import CircuitRecord

logger = logging.getLogger(__name__)

CircuitJson = Iterable[Mapping[str, Any] | CircuitRecord]


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of :func:`write_dsn`.

    Attributes:
        path: Written ``.dsn`` file.
        sha256: Hash of the written text.
        counts: Number of layers, images, padstacks, placed components and nets.
    """

    path: Path
    sha256: str
    counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"path": str(self.path), "sha256": self.sha256, "counts": dict(self.counts)}


def load_circuit_json(path: Path) -> list[dict[str, Any]]:
    """Load circuit JSON records from a JSON or YAML file.

    Args:
        path: File containing a list of circuit JSON objects.

    Returns:
        The records as plain dictionaries.

    Raises:
        ConfigurationError: If the file does not hold a list of objects.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        payload = yaml.safe_load(text)
    else:
        payload = json.loads(text)
    if not isinstance(payload, list):
        raise ConfigurationError(f"Circuit JSON file must contain a list, got {type(payload).__name__}")
    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            raise ConfigurationError(f"Circuit JSON element {index} must be an object")
    return payload


def build_document(records: CircuitJson, *, config: ConverterConfig | None = None) -> DsnDocument:
    converter = CircuitJsonToDsnConverter(records, config=config)
    converter.run_until_finished()
    return converter.get_output()


def convert_circuit_json(records: CircuitJson, *, config: ConverterConfig | None = None) -> str:
    """Convert circuit JSON records to DSN text."""
    return build_document(records, config=config).to_string()


def document_counts(document: DsnDocument) -> dict[str, int]:
    structure, library = document.structure, document.library
    return {
        "layers": len(structure.layers) if structure else 0,
        "images": len(library.images) if library else 0,
        "padstacks": len(library.padstacks) if library else 0,
        "components": sum(len(c.places) for c in document.placement.components) if document.placement else 0,
        "nets": len(document.network.nets) if document.network else 0,
    }


def write_dsn(records: CircuitJson, out_path: Path, *, config: ConverterConfig | None = None) -> ConversionResult:
    """Convert records and write the DSN text to ``out_path``.

    Parent directories are created as needed.
    """
    document = build_document(records, config=config)
    text = document.to_string()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")
    result = ConversionResult(path=out_path, sha256=sha256_text(text), counts=document_counts(document))
    logger.info("Wrote %s (sha256 %s)", out_path, result.sha256[:12])
    return result
