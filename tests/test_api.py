"""Tests for the file-level conversion API."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from circuit_dsn import ConversionResult, convert_circuit_json, load_circuit_json, write_dsn
from circuit_dsn.config import ConverterConfig
from circuit_dsn.errors import ConfigurationError
from circuit_dsn.hashing import sha256_file, sha256_text


class TestLoadCircuitJson:
    def test_loads_json(self, tmp_path: Path, two_resistor_circuit: list[dict[str, Any]]) -> None:
        path = tmp_path / "circuit.json"
        path.write_text(json.dumps(two_resistor_circuit), encoding="utf-8")
        assert load_circuit_json(path) == two_resistor_circuit

    def test_loads_yaml(self, tmp_path: Path, two_resistor_circuit: list[dict[str, Any]]) -> None:
        path = tmp_path / "circuit.yaml"
        path.write_text(yaml.safe_dump(two_resistor_circuit), encoding="utf-8")
        assert load_circuit_json(path) == two_resistor_circuit

    def test_rejects_non_list(self, tmp_path: Path) -> None:
        path = tmp_path / "circuit.json"
        path.write_text('{"type": "pcb_board"}', encoding="utf-8")
        with pytest.raises(ConfigurationError, match="must contain a list, got dict"):
            load_circuit_json(path)

    def test_rejects_non_object_element(self, tmp_path: Path) -> None:
        path = tmp_path / "circuit.json"
        path.write_text('[{"type": "pcb_board"}, 3]', encoding="utf-8")
        with pytest.raises(ConfigurationError, match="element 1 must be an object"):
            load_circuit_json(path)


class TestConvertCircuitJson:
    def test_returns_dsn_text(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        text = convert_circuit_json(two_resistor_circuit)
        assert text.startswith("(pcb circuit-design\n")
        assert text.rstrip().endswith(")")

    def test_design_name_from_config(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        text = convert_circuit_json(two_resistor_circuit, config=ConverterConfig(design_name="blinky"))
        assert text.startswith("(pcb blinky\n")

    def test_net_name_with_double_quote_rejected(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        for record in two_resistor_circuit:
            if record.get("source_net_id") == "source_net_0":
                record["name"] = 'G"ND'
        with pytest.raises(ConfigurationError, match="double quotes"):
            convert_circuit_json(two_resistor_circuit)

    def test_is_deterministic(self, two_resistor_circuit: list[dict[str, Any]]) -> None:
        assert convert_circuit_json(two_resistor_circuit) == convert_circuit_json(two_resistor_circuit)


class TestWriteDsn:
    def test_writes_file_and_hash(self, tmp_path: Path, two_resistor_circuit: list[dict[str, Any]]) -> None:
        out_path = tmp_path / "nested" / "board.dsn"
        result = write_dsn(two_resistor_circuit, out_path)

        assert isinstance(result, ConversionResult)
        assert out_path.exists()
        text = out_path.read_text(encoding="utf-8")
        assert text == convert_circuit_json(two_resistor_circuit)
        assert result.sha256 == sha256_text(text)
        assert result.sha256 == sha256_file(out_path)

    def test_counts(self, tmp_path: Path, two_resistor_circuit: list[dict[str, Any]]) -> None:
        result = write_dsn(two_resistor_circuit, tmp_path / "board.dsn")
        assert result.counts == {
            "layers": 2,
            "images": 1,
            "padstacks": 2,
            "components": 2,
            "nets": 2,
        }

    def test_to_dict(self, tmp_path: Path, two_resistor_circuit: list[dict[str, Any]]) -> None:
        out_path = tmp_path / "board.dsn"
        payload = write_dsn(two_resistor_circuit, out_path).to_dict()
        assert payload["path"] == str(out_path)
        assert set(payload) == {"path", "sha256", "counts"}
