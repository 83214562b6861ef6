from __future__ import annotations

from typing import List, Tuple

from PyPDF2.generic import FloatObject, NameObject, NumberObject, TextStringObject

from ...utils.exceptions import MissingPlacementValueError
from .instructions import BEGIN_TEXT, END_TEXT, MOVE_TO, SELECT_FONT, SHOW_TEXT, Instruction
from .rules import FontSpec, Placement


# The anchor is calibrated for a three digit whole part; each extra digit moves
# the whole part left by one pitch so numbers stay right-aligned.
CALIBRATED_WHOLE_DIGITS = 3
DIGIT_PITCH = 5
FRACTION_OFFSET = 30
DEFAULT_FRACTION = "00"


def split_value(value: str) -> Tuple[str, str | None]:
    parts = value.split(".", 1)
    whole = parts[0]
    fraction = parts[1] if len(parts) > 1 else None
    return whole, fraction


def whole_part_x(anchor_x: float, whole: str) -> float:
    # offset counts encoded bytes, not characters
    return anchor_x - (len(whole.encode("utf-8")) - CALIBRATED_WHOLE_DIGITS) * DIGIT_PITCH


def _font_operands(font: FontSpec) -> list:
    size = font.size
    size_operand = NumberObject(int(size)) if float(size).is_integer() else FloatObject(size)
    return [NameObject(font.resource_name), size_operand]


def _text_block(font: FontSpec, x: float, y: float, text: str) -> List[Instruction]:
    return [
        Instruction(BEGIN_TEXT),
        Instruction(SELECT_FONT, tuple(_font_operands(font))),
        Instruction(MOVE_TO, (FloatObject(x), FloatObject(y))),
        Instruction(SHOW_TEXT, (TextStringObject(text),)),
        Instruction(END_TEXT),
    ]


def generate_overlay_instructions(placement: Placement) -> List[Instruction]:
    """Draw the placement value as a whole part and a fraction part.

    ``"127.50"`` anchored at ``(x, y)`` draws ``127`` at ``x`` and ``50`` at
    ``x + 30``; a value without a fraction draws ``00`` in the fraction slot.
    Every value kind takes this path.
    """
    if placement.value is None:
        raise MissingPlacementValueError(placement)

    anchor_x, anchor_y = placement.anchor
    whole, fraction = split_value(placement.value)

    instructions = _text_block(placement.font, whole_part_x(anchor_x, whole), anchor_y, whole)
    instructions.extend(
        _text_block(
            placement.font,
            anchor_x + FRACTION_OFFSET,
            anchor_y,
            fraction if fraction is not None else DEFAULT_FRACTION,
        )
    )
    return instructions
