from __future__ import annotations

import orjson
import pytest

from pdfstamp.services.config.configuration_loader import (
    ConfigurationLoader,
    parse_configuration,
    parse_rules,
    read_config,
    serialize_configuration,
)
from pdfstamp.services.overlay.rules import FontSpec, TaggedValue, ValueKind
from pdfstamp.utils.exceptions import ConfigurationError


def _operation(**overrides):
    payload = {"page_number": 0, "font": ["F1", 10], "anchor": [1.5, 2], "value": "3.00"}
    payload.update(overrides)
    return payload


def test_default_configuration():
    configuration = read_config()

    assert configuration.input_file_path is None
    assert configuration.output_file_path == "PIT-8C-modified.pdf"
    assert configuration.rules is None

    first, second = configuration.operations
    assert first.anchor == (462.82, 55.92)
    assert first.value == "120.99"
    assert first.font == FontSpec("F1", 10)
    assert first.tagged_value == TaggedValue(ValueKind.MONEY, "180.99")
    assert second.anchor == (43.32, 347.81)
    assert second.value == "41.0"
    assert second.tagged_value is None


def test_default_rules():
    rules = ConfigurationLoader().load_rules()

    assert [(rule.predicate, rule.static_value) for rule in rules] == [
        ("11", "127.00"),
        ("12", "128.00"),
        ("23", None),
    ]
    assert {rule.page_number for rule in rules} == {0}
    assert {rule.font for rule in rules} == {FontSpec("F1", 10)}


def test_loader_reads_custom_files(tmp_path):
    configuration_path = tmp_path / "config.json"
    configuration_path.write_bytes(orjson.dumps({"output_file_path": "x.pdf", "input_file_path": "in.pdf"}))
    rules_path = tmp_path / "rules.json"
    rules_path.write_bytes(orjson.dumps([{"font": ["F2", 9], "predicate": "Total", "value_kind": "TEXT"}]))

    loader = ConfigurationLoader(configuration_path=configuration_path, rules_path=rules_path)

    assert loader.load_configuration().input_file_path == "in.pdf"
    rule = loader.load_rules()[0]
    assert rule.predicate == "Total"
    assert rule.value_kind is ValueKind.TEXT
    assert rule.static_value is None


def test_invalid_json_is_a_configuration_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError):
        ConfigurationLoader(configuration_path=path).load_configuration()


def test_missing_file_propagates_os_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigurationLoader(rules_path=tmp_path / "absent.json").load_rules()


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {},
        {"output_file_path": ""},
        {"output_file_path": "out.pdf", "operations": {"page_number": 0}},
        {"output_file_path": "out.pdf", "operations": [_operation(anchor=[1])]},
        {"output_file_path": "out.pdf", "operations": [_operation(anchor=[True, 2])]},
        {"output_file_path": "out.pdf", "operations": [_operation(font=["F1"])]},
        {"output_file_path": "out.pdf", "operations": [_operation(font=["", 10])]},
        {"output_file_path": "out.pdf", "operations": [_operation(font=["F1", "big"])]},
        {"output_file_path": "out.pdf", "operations": [_operation(page_number=-1)]},
        {"output_file_path": "out.pdf", "operations": [_operation(value=12)]},
        {"output_file_path": "out.pdf", "operations": [_operation(value_kind="date")]},
        {"output_file_path": "out.pdf", "operations": [_operation(tagged_value="money")]},
        {"output_file_path": "out.pdf", "rules": {"predicate": "11"}},
        {"output_file_path": "out.pdf", "rules": [{"font": ["F1", 10]}]},
    ],
)
def test_invalid_configuration_is_rejected(payload):
    with pytest.raises(ConfigurationError):
        parse_configuration(payload)


def test_operation_defaults():
    configuration = parse_configuration(
        {"output_file_path": "out.pdf", "operations": [{"font": {"name": "F2", "size": 8.5}, "anchor": [1, 2]}]}
    )

    placement = configuration.operations[0]
    assert placement.page_number == 0
    assert placement.font == FontSpec("F2", 8.5)
    assert placement.anchor == (1.0, 2.0)
    assert placement.value is None
    assert placement.value_kind is ValueKind.MONEY


def test_serialized_configuration_parses_back():
    configuration = read_config()
    configuration.rules = parse_rules([{"font": ["F1", 10], "predicate": "11", "static_value": "1.00"}])

    payload = serialize_configuration(configuration)

    assert payload["operations"][0]["tagged_value"] == {"kind": "money", "value": "180.99"}
    assert payload["rules"][0]["value_kind"] == "money"
    assert parse_configuration(orjson.loads(orjson.dumps(payload))) == configuration


def test_serialized_configuration_omits_unset_rules():
    assert "rules" not in serialize_configuration(read_config())
