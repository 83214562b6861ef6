from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from PyPDF2 import PageObject, PdfReader, PdfWriter
from PyPDF2.generic import (
    ArrayObject,
    ContentStream,
    DictionaryObject,
    IndirectObject,
    NameObject,
    PdfObject,
)

from ...utils.exceptions import PageNotFoundError
from ...utils.logging import get_logger
from ..overlay.font_encodings import FontEncodings, build_font_encodings, decode_text
from ..overlay.instructions import (
    Instruction,
    instructions_from_content,
    operations_from_instructions,
)


logger = get_logger(__name__)

DEFAULT_PDF_VERSION = "1.5"


class DocumentStore:
    """PyPDF2 document handle exposing the page operations stamping needs.

    A store is either opened from an existing file (pages are copied into a
    writer so they can be edited in place) or created empty. Nothing touches
    disk until :meth:`save`.
    """

    def __init__(self, writer: PdfWriter, source: Optional[Path] = None) -> None:
        self.writer = writer
        self.source = source

    @classmethod
    def open(cls, path: Path | str) -> "DocumentStore":
        source = Path(path)
        reader = PdfReader(str(source))
        writer = PdfWriter()
        for page in reader.pages:
            writer.add_page(page)
        logger.info("document loaded", path=str(source), pages=len(reader.pages))
        return cls(writer, source=source)

    @classmethod
    def create(cls, version: str = DEFAULT_PDF_VERSION) -> "DocumentStore":
        store = cls(PdfWriter())
        store.set_version(version)
        return store

    @property
    def version(self) -> str:
        return self.writer.pdf_header.decode("latin-1").replace("%PDF-", "", 1)

    def set_version(self, version: str) -> None:
        self.writer.pdf_header = f"%PDF-{version}".encode("latin-1")

    @property
    def page_count(self) -> int:
        return len(self.writer.pages)

    def iter_pages(self) -> Iterable[PageObject]:
        for index in range(self.page_count):
            yield self.writer.pages[index]

    def get_page(self, index: int) -> PageObject:
        count = self.page_count
        if index < 0 or index >= count:
            raise PageNotFoundError(index, count)
        return self.writer.pages[index]

    def get_page_content(self, page: PageObject) -> Optional[ContentStream]:
        contents = page.get_contents()
        if contents is None:
            return None
        if isinstance(contents, ContentStream):
            return contents
        return ContentStream(contents, self.writer)

    def get_page_instructions(self, page: PageObject) -> List[Instruction]:
        return instructions_from_content(self.get_page_content(page))

    def get_page_encodings(self, page: PageObject) -> FontEncodings:
        return build_font_encodings(page)

    @staticmethod
    def decode_text(encoding: Optional[str], raw: bytes) -> str:
        return decode_text(encoding, raw)

    def append_page_instructions(self, page: PageObject, instructions: Iterable[Instruction]) -> None:
        """Append ``instructions`` after the page's existing content."""
        content = self.get_page_content(page)
        if content is None:
            content = ContentStream(None, self.writer)
        content.operations = list(content.operations) + operations_from_instructions(instructions)
        page[NameObject("/Contents")] = content

    def add_object(self, obj: PdfObject) -> IndirectObject:
        return self.writer._add_object(obj)

    def add_page(
        self,
        width: float,
        height: float,
        resources: DictionaryObject | IndirectObject,
        instructions: Iterable[Instruction] = (),
    ) -> PageObject:
        # add_blank_page hands back the page it cloned from, not the one the writer keeps
        self.writer.add_blank_page(width=width, height=height)
        page = self.get_page(self.page_count - 1)
        page[NameObject("/Resources")] = resources
        content = ContentStream(None, self.writer)
        content.operations = operations_from_instructions(instructions)
        page[NameObject("/Contents")] = content
        return page

    def compress(self) -> None:
        for page in self.iter_pages():
            page.compress_content_streams()

    def save(self, path: Path | str) -> Path:
        """Write the document to ``path``, replacing any existing file."""
        destination = Path(path)
        with destination.open("wb") as handle:
            self.writer.write(handle)
        logger.info("document saved", path=str(destination), pages=self.page_count)
        return destination


def font_resources(store: DocumentStore, fonts: dict[str, str]) -> IndirectObject:
    """Register a ``/Font`` resource dictionary mapping names to base fonts."""
    font_table = DictionaryObject()
    for name, base_font in fonts.items():
        font = DictionaryObject()
        font[NameObject("/Type")] = NameObject("/Font")
        font[NameObject("/Subtype")] = NameObject("/TrueType")
        font[NameObject("/BaseFont")] = NameObject(f"/{base_font}")
        font_table[NameObject(f"/{name}")] = store.add_object(font)

    resources = DictionaryObject()
    resources[NameObject("/Font")] = font_table
    resources[NameObject("/ProcSet")] = ArrayObject([NameObject("/PDF"), NameObject("/Text")])
    return store.add_object(resources)
