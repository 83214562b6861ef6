from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Iterable, List, Optional, Sequence

from PyPDF2.generic import ByteStringObject, NameObject, TextStringObject

from ...utils.exceptions import ContentScanError, MalformedRectangleError
from ...utils.logging import get_logger
from .font_encodings import FontEncodings, decode_text, font_key
from .instructions import RECTANGLE, SELECT_FONT, SHOW_TEXT_OPERATORS, Instruction
from .rules import Placement, Rule


logger = get_logger(__name__)

TextDecoder = Callable[[Optional[str], bytes], str]


@dataclass
class ScanState:
    current_encoding: Optional[str] = None
    pending_rectangle: Optional[List[float]] = None
    pending_text: Optional[str] = None


def _is_number(operand: Any) -> bool:
    return isinstance(operand, (int, float, Decimal)) and not isinstance(operand, bool)


class ContentScanner:
    """Find rule markers drawn right after a rectangle in a page's operators.

    Form templates typically draw a box (``re``) and then the field label inside
    it. The scanner remembers the most recent rectangle and the most recent
    non-empty text run; whenever both are present the text is compared against
    every rule predicate and each matching rule yields a placement anchored at
    the rectangle origin. The text is consumed by that check, the rectangle is
    not, so one box can anchor several later labels.
    """

    def __init__(
        self,
        rules: Iterable[Rule],
        encodings: FontEncodings | None = None,
        decoder: TextDecoder = decode_text,
    ) -> None:
        self.rules: List[Rule] = list(rules)
        self.encodings: FontEncodings = dict(encodings or {})
        self.decoder = decoder

    def scan(self, instructions: Sequence[Instruction]) -> List[Placement]:
        state = ScanState()
        placements: List[Placement] = []

        for instruction in instructions:
            operator = instruction.operator
            if operator == RECTANGLE:
                state.pending_rectangle = [float(op) for op in instruction.operands if _is_number(op)]
            elif operator == SELECT_FONT:
                if not instruction.operands:
                    raise ContentScanError("Tf operator without a font name operand")
                state.current_encoding = self.encodings.get(font_key(instruction.operands[0]))
            elif operator in SHOW_TEXT_OPERATORS:
                text = self.collect_text(instruction.operands, state.current_encoding)
                if text:
                    state.pending_text = text

            if state.pending_rectangle is not None and state.pending_text is not None:
                placements.extend(self._match(state.pending_rectangle, state.pending_text))
                state.pending_text = None

        return placements

    def collect_text(self, operands: Iterable[Any], encoding: Optional[str]) -> str:
        """Concatenate every string payload in ``operands``, flattening arrays."""
        fragments: List[str] = []
        for operand in operands:
            if isinstance(operand, (list, tuple)):
                fragments.append(self.collect_text(operand, encoding))
            elif isinstance(operand, ByteStringObject):
                fragments.append(self.decoder(encoding, bytes(operand)))
            elif isinstance(operand, TextStringObject) and (
                operand.autodetect_pdfdocencoding or operand.autodetect_utf16
            ):
                # parsed literal: re-decode its source bytes with the font encoding
                fragments.append(self.decoder(encoding, operand.get_original_bytes()))
            elif isinstance(operand, bytes):
                fragments.append(self.decoder(encoding, operand))
            elif isinstance(operand, str) and not isinstance(operand, NameObject):
                fragments.append(operand)
        return "".join(fragments)

    def _match(self, rectangle: List[float], text: str) -> List[Placement]:
        matched = [rule for rule in self.rules if rule.predicate == text]
        if not matched:
            return []
        if len(rectangle) < 2:
            raise MalformedRectangleError(rectangle)

        anchor = (rectangle[0], rectangle[1])
        logger.debug("marker matched", marker=text, anchor=anchor, rules=len(matched))
        return [Placement.from_rule(rule, anchor) for rule in matched]


def scan_content(
    instructions: Sequence[Instruction],
    encodings: FontEncodings | None,
    rules: Iterable[Rule],
) -> List[Placement]:
    return ContentScanner(rules, encodings).scan(instructions)
