from __future__ import annotations

from .content_scanner import ContentScanner, scan_content
from .font_encodings import build_font_encodings, decode_text
from .instructions import Instruction, encode_instructions
from .overlay_generator import generate_overlay_instructions
from .rules import FontSpec, Placement, Rule, TaggedValue, ValueKind

__all__ = [
    "ContentScanner",
    "FontSpec",
    "Instruction",
    "Placement",
    "Rule",
    "TaggedValue",
    "ValueKind",
    "build_font_encodings",
    "decode_text",
    "encode_instructions",
    "generate_overlay_instructions",
    "scan_content",
]
