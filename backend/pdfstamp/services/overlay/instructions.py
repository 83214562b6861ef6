from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence, Tuple

from PyPDF2.generic import ContentStream


Operation = Tuple[Sequence[Any], bytes]

RECTANGLE = "re"
SELECT_FONT = "Tf"
MOVE_TO = "Td"
BEGIN_TEXT = "BT"
END_TEXT = "ET"
SHOW_TEXT = "Tj"
SHOW_TEXT_OPERATORS = frozenset({"Tj", "TJ", "'", '"'})
# PyPDF2 keeps inline image settings and data as one dict operand
INLINE_IMAGE = "INLINE IMAGE"


@dataclass(frozen=True)
class Instruction:
    """One content-stream operator with its operands."""

    operator: str
    operands: Tuple[Any, ...] = ()

    @classmethod
    def from_operation(cls, operation: Operation) -> "Instruction":
        operands, operator = operation
        name = operator.decode("latin-1") if isinstance(operator, bytes) else str(operator)
        if name == INLINE_IMAGE:
            return cls(operator=name, operands=(operands,))
        return cls(operator=name, operands=tuple(operands))

    def to_operation(self) -> Operation:
        if self.operator == INLINE_IMAGE:
            return self.operands[0], self.operator.encode("latin-1")
        return list(self.operands), self.operator.encode("latin-1")


def instructions_from_content(content: ContentStream | None) -> List[Instruction]:
    if content is None:
        return []
    return [Instruction.from_operation(operation) for operation in content.operations]


def operations_from_instructions(instructions: Iterable[Instruction]) -> List[Operation]:
    return [instruction.to_operation() for instruction in instructions]


def encode_instructions(instructions: Iterable[Instruction]) -> bytes:
    """Serialize instructions to content-stream bytes."""
    content = ContentStream(None, None)
    content.operations = operations_from_instructions(instructions)
    return content.get_data()
