from __future__ import annotations

from typing import Any, Dict, List, Optional

from PyPDF2._codecs import _mac_encoding, _pdfdoc_encoding, _std_encoding, _win_encoding
from PyPDF2.generic import DictionaryObject, NameObject


FontEncodings = Dict[str, Optional[str]]

DEFAULT_FONT_ENCODING = "StandardEncoding"

# Single-byte simple-font encodings, one glyph per code
_CHARSETS: Dict[str, List[str]] = {
    "StandardEncoding": _std_encoding,
    "WinAnsiEncoding": _win_encoding,
    "MacRomanEncoding": _mac_encoding,
    "PDFDocEncoding": _pdfdoc_encoding,
}

# Two-byte CID encodings
_CODECS = {
    "Identity-H": "utf-16-be",
    "Identity-V": "utf-16-be",
}


def font_key(name: Any) -> str:
    """Normalize a font resource name so ``/F1`` and ``F1`` look up alike."""
    return str(name).lstrip("/")


def read_font_encoding(font: Any) -> str:
    """Return the encoding name of a font dictionary.

    Only a name-valued ``/Encoding`` is honoured; dictionaries with
    ``/Differences`` and missing entries fall back to StandardEncoding.
    """
    font = font.get_object() if hasattr(font, "get_object") else font
    if not isinstance(font, DictionaryObject):
        return DEFAULT_FONT_ENCODING
    encoding = font.get(NameObject("/Encoding"))
    if isinstance(encoding, NameObject):
        return font_key(encoding)
    return DEFAULT_FONT_ENCODING


def build_font_encodings(page: Any) -> FontEncodings:
    """Map every font resource on ``page`` to its encoding name."""
    resources = page.get(NameObject("/Resources"))
    if resources is None:
        return {}
    resources = resources.get_object() if hasattr(resources, "get_object") else resources

    fonts = resources.get(NameObject("/Font"))
    if fonts is None:
        return {}
    fonts = fonts.get_object() if hasattr(fonts, "get_object") else fonts

    return {font_key(name): read_font_encoding(font) for name, font in fonts.items()}


def decode_text(encoding: Optional[str], raw: bytes) -> str:
    """Decode the raw bytes of a string operand drawn with ``encoding``.

    Simple-font encodings map each byte through PyPDF2's glyph tables; unknown
    or absent encodings decode as UTF-8, replacing invalid bytes.
    """
    if encoding in _CHARSETS:
        charset = _CHARSETS[encoding]
        return "".join(charset[byte] for byte in raw)
    codec = _CODECS.get(encoding) if encoding else None
    if codec is None:
        return raw.decode("utf-8", errors="replace")
    return raw.decode(codec, errors="replace")
