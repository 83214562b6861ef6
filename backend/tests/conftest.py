from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest
from PyPDF2.generic import FloatObject, NameObject, NumberObject, TextStringObject

from pdfstamp.services.documents.document_store import DocumentStore, font_resources
from pdfstamp.services.overlay.instructions import Instruction


def form_box(x: float, y: float, label: str, font: str = "F1") -> list[Instruction]:
    """A ruled box followed by its label, the way form templates draw fields."""
    return [
        Instruction("re", (FloatObject(x), FloatObject(y), NumberObject(50), NumberObject(12))),
        Instruction("S"),
        Instruction("BT"),
        Instruction("Tf", (NameObject(f"/{font}"), NumberObject(8))),
        Instruction("Td", (FloatObject(x + 2), FloatObject(y + 2))),
        Instruction("Tj", (TextStringObject(label),)),
        Instruction("ET"),
    ]


@pytest.fixture
def write_form_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Write a one-page form with a box per ``(x, y, label)`` and return its path."""

    def _write(boxes: Iterable[tuple[float, float, str]], name: str = "form.pdf") -> Path:
        store = DocumentStore.create("1.4")
        resources = font_resources(store, {"F1": "Helvetica"})
        instructions: list[Instruction] = []
        for x, y, label in boxes:
            instructions.extend(form_box(x, y, label))
        store.add_page(595, 842, resources, instructions)
        return store.save(tmp_path / name)

    return _write
