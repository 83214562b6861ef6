from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple


PLACEHOLDER_VALUE = "Placeholder"


class ValueKind(str, Enum):
    MONEY = "money"
    TEXT = "text"
    SLOTTED = "slotted"


@dataclass(frozen=True)
class FontSpec:
    name: str
    size: float

    @property
    def resource_name(self) -> str:
        return self.name if self.name.startswith("/") else f"/{self.name}"


@dataclass(frozen=True)
class TaggedValue:
    """A value tagged with the kind of field it fills."""

    kind: ValueKind
    value: str


@dataclass(frozen=True)
class Rule:
    page_number: int
    font: FontSpec
    predicate: str
    value_kind: ValueKind = ValueKind.MONEY
    static_value: Optional[str] = None


@dataclass(frozen=True)
class Placement:
    page_number: int
    font: FontSpec
    anchor: Tuple[float, float]
    value: Optional[str]
    value_kind: ValueKind = ValueKind.MONEY
    tagged_value: Optional[TaggedValue] = None

    @classmethod
    def from_rule(cls, rule: Rule, anchor: Tuple[float, float]) -> "Placement":
        return cls(
            page_number=rule.page_number,
            font=rule.font,
            anchor=anchor,
            value=rule.static_value if rule.static_value is not None else PLACEHOLDER_VALUE,
            value_kind=rule.value_kind,
        )


def rules_for_page(rules: Iterable[Rule], page_number: int) -> List[Rule]:
    return [rule for rule in rules if rule.page_number == page_number]


def referenced_pages(rules: Iterable[Rule]) -> List[int]:
    """Page numbers named by ``rules``, in first-seen order."""
    pages: List[int] = []
    for rule in rules:
        if rule.page_number not in pages:
            pages.append(rule.page_number)
    return pages
