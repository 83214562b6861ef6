from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import orjson

from ...utils.exceptions import ConfigurationError
from ..overlay.rules import FontSpec, Placement, Rule, TaggedValue, ValueKind


DATA_DIR = Path(__file__).resolve().parents[2] / "data"
DEFAULT_CONFIGURATION_PATH = DATA_DIR / "default_configuration.json"
DEFAULT_RULES_PATH = DATA_DIR / "default_rules.json"


@dataclass
class WriterConfiguration:
    output_file_path: str
    input_file_path: Optional[str] = None
    operations: List[Placement] = field(default_factory=list)
    # None means "use the configured default rule set"
    rules: Optional[List[Rule]] = None


class ConfigurationLoader:
    """Read writer configurations and rule sets from JSON files."""

    def __init__(
        self,
        configuration_path: Path | None = None,
        rules_path: Path | None = None,
    ) -> None:
        self.configuration_path = Path(configuration_path) if configuration_path else DEFAULT_CONFIGURATION_PATH
        self.rules_path = Path(rules_path) if rules_path else DEFAULT_RULES_PATH

    def load_configuration(self) -> WriterConfiguration:
        return parse_configuration(_read_json(self.configuration_path))

    def load_rules(self) -> List[Rule]:
        return parse_rules(_read_json(self.rules_path))


def _read_json(path: Path) -> Any:
    try:
        return orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        raise ConfigurationError(f"{path} is not valid JSON: {exc}") from exc


def _require(payload: Dict[str, Any], key: str, context: str) -> Any:
    if key not in payload or payload[key] is None:
        raise ConfigurationError(f"{context}: '{key}' is required")
    return payload[key]


def _parse_font(raw: Any, context: str) -> FontSpec:
    if isinstance(raw, dict):
        raw = [raw.get("name"), raw.get("size")]
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ConfigurationError(f"{context}: 'font' must be [name, size]")
    name, size = raw
    if not isinstance(name, str) or not name:
        raise ConfigurationError(f"{context}: font name must be a non-empty string")
    if isinstance(size, bool) or not isinstance(size, (int, float)):
        raise ConfigurationError(f"{context}: font size must be numeric")
    return FontSpec(name=name, size=size)


def _parse_value_kind(raw: Any, context: str) -> ValueKind:
    if raw is None:
        return ValueKind.MONEY
    try:
        return ValueKind(str(raw).lower())
    except ValueError as exc:
        allowed = ", ".join(kind.value for kind in ValueKind)
        raise ConfigurationError(f"{context}: unknown value kind {raw!r} (expected one of {allowed})") from exc


def _parse_optional_str(raw: Any, key: str, context: str) -> Optional[str]:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ConfigurationError(f"{context}: '{key}' must be a string")
    return raw


def _parse_page_number(raw: Any, context: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise ConfigurationError(f"{context}: 'page_number' must be a non-negative integer")
    return raw


def parse_rule(payload: Dict[str, Any], index: int = 0) -> Rule:
    context = f"rules[{index}]"
    if not isinstance(payload, dict):
        raise ConfigurationError(f"{context}: expected an object")
    predicate = _require(payload, "predicate", context)
    if not isinstance(predicate, str):
        raise ConfigurationError(f"{context}: 'predicate' must be a string")
    return Rule(
        page_number=_parse_page_number(payload.get("page_number", 0), context),
        font=_parse_font(_require(payload, "font", context), context),
        predicate=predicate,
        value_kind=_parse_value_kind(payload.get("value_kind"), context),
        static_value=_parse_optional_str(payload.get("static_value"), "static_value", context),
    )


def parse_rules(payload: Any) -> List[Rule]:
    if not isinstance(payload, list):
        raise ConfigurationError("rules must be a list")
    return [parse_rule(entry, index) for index, entry in enumerate(payload)]


def parse_placement(payload: Dict[str, Any], index: int = 0) -> Placement:
    context = f"operations[{index}]"
    if not isinstance(payload, dict):
        raise ConfigurationError(f"{context}: expected an object")

    anchor = _require(payload, "anchor", context)
    if (
        not isinstance(anchor, (list, tuple))
        or len(anchor) != 2
        or any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in anchor)
    ):
        raise ConfigurationError(f"{context}: 'anchor' must be [x, y]")

    tagged_value = None
    raw_tagged = payload.get("tagged_value")
    if raw_tagged is not None:
        if not isinstance(raw_tagged, dict):
            raise ConfigurationError(f"{context}: 'tagged_value' must be an object")
        tagged_value = TaggedValue(
            kind=_parse_value_kind(_require(raw_tagged, "kind", context), context),
            value=str(_require(raw_tagged, "value", context)),
        )

    return Placement(
        page_number=_parse_page_number(payload.get("page_number", 0), context),
        font=_parse_font(_require(payload, "font", context), context),
        anchor=(float(anchor[0]), float(anchor[1])),
        value=_parse_optional_str(payload.get("value"), "value", context),
        value_kind=_parse_value_kind(payload.get("value_kind"), context),
        tagged_value=tagged_value,
    )


def parse_configuration(payload: Any) -> WriterConfiguration:
    if not isinstance(payload, dict):
        raise ConfigurationError("configuration must be an object")

    output_file_path = _require(payload, "output_file_path", "configuration")
    if not isinstance(output_file_path, str) or not output_file_path:
        raise ConfigurationError("configuration: 'output_file_path' must be a non-empty string")

    operations = payload.get("operations") or []
    if not isinstance(operations, list):
        raise ConfigurationError("configuration: 'operations' must be a list")

    raw_rules = payload.get("rules")
    return WriterConfiguration(
        input_file_path=_parse_optional_str(payload.get("input_file_path"), "input_file_path", "configuration"),
        output_file_path=output_file_path,
        operations=[parse_placement(entry, index) for index, entry in enumerate(operations)],
        rules=parse_rules(raw_rules) if raw_rules is not None else None,
    )


def serialize_font(font: FontSpec) -> List[Any]:
    return [font.name, font.size]


def serialize_placement(placement: Placement) -> Dict[str, Any]:
    return {
        "page_number": placement.page_number,
        "font": serialize_font(placement.font),
        "anchor": list(placement.anchor),
        "value": placement.value,
        "value_kind": placement.value_kind.value,
        "tagged_value": (
            {"kind": placement.tagged_value.kind.value, "value": placement.tagged_value.value}
            if placement.tagged_value
            else None
        ),
    }


def serialize_rule(rule: Rule) -> Dict[str, Any]:
    return {
        "page_number": rule.page_number,
        "font": serialize_font(rule.font),
        "predicate": rule.predicate,
        "static_value": rule.static_value,
        "value_kind": rule.value_kind.value,
    }


def serialize_configuration(configuration: WriterConfiguration) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "input_file_path": configuration.input_file_path,
        "output_file_path": configuration.output_file_path,
        "operations": [serialize_placement(entry) for entry in configuration.operations],
    }
    if configuration.rules is not None:
        payload["rules"] = [serialize_rule(rule) for rule in configuration.rules]
    return payload


def read_config(configuration_path: Path | None = None) -> WriterConfiguration:
    """Return the default writer configuration."""
    return ConfigurationLoader(configuration_path=configuration_path).load_configuration()
