from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from PyPDF2.errors import PdfReadError

from ...utils.exceptions import ConfigurationError, StorageErrorCode, classify_storage_error
from ...utils.logging import get_logger
from ..config.configuration_loader import ConfigurationLoader, WriterConfiguration
from ..documents.document_store import DEFAULT_PDF_VERSION, DocumentStore, font_resources
from ..overlay.content_scanner import ContentScanner
from ..overlay.overlay_generator import generate_overlay_instructions
from ..overlay.rules import Placement, referenced_pages, rules_for_page


logger = get_logger(__name__)


@dataclass
class StampOutcome:
    output_path: Path
    placements: List[Placement] = field(default_factory=list)
    pages: List[int] = field(default_factory=list)


@dataclass
class StampResult:
    """Tagged result handed across the process boundary."""

    status: str
    reason: Optional[StorageErrorCode] = None
    outcome: Optional[StampOutcome] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def success(cls, outcome: StampOutcome) -> "StampResult":
        return cls(status="ok", outcome=outcome)

    @classmethod
    def failure(cls, reason: StorageErrorCode) -> "StampResult":
        return cls(status="error", reason=reason)

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"status": self.status}
        if self.reason is not None:
            payload["reason"] = self.reason.value
        if self.outcome is not None:
            payload["output_file_path"] = str(self.outcome.output_path)
            payload["placements"] = len(self.outcome.placements)
            payload["pages"] = list(self.outcome.pages)
        return payload


class StampOrchestrator:
    """Run the modify and create flows against the PyPDF2 document store."""

    PAGE_SIZE = (595, 842)
    CREATE_FONTS = {"F1": "Helvetica", "F2": "Helvetica", "F3": "Courier"}

    def __init__(
        self,
        pdf_version: str = DEFAULT_PDF_VERSION,
        document_root: Path | None = None,
        loader: ConfigurationLoader | None = None,
    ) -> None:
        self.pdf_version = pdf_version
        self.document_root = Path(document_root) if document_root else None
        self.loader = loader or ConfigurationLoader()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "StampOrchestrator":
        loader = ConfigurationLoader(
            configuration_path=config.get("CONFIGURATION_PATH"),
            rules_path=config.get("RULES_PATH"),
        )
        return cls(
            pdf_version=config.get("PDF_VERSION", DEFAULT_PDF_VERSION),
            document_root=config.get("OUTPUT_ROOT"),
            loader=loader,
        )

    def resolve_path(self, path: str | Path) -> Path:
        """Resolve a configured path; with a document root it must stay inside it."""
        candidate = Path(path)
        if self.document_root is None:
            return candidate
        if candidate.is_absolute():
            raise ConfigurationError(f"Path {str(path)!r} must be relative to the document root")

        root = self.document_root.resolve()
        resolved = (root / candidate).resolve()
        if root not in resolved.parents:
            raise ConfigurationError(f"Path {str(path)!r} escapes the document root")
        return self.document_root / candidate

    def resolve_output_path(self, path: str | Path) -> Path:
        destination = self.resolve_path(path)
        if self.document_root is not None:
            self.document_root.mkdir(parents=True, exist_ok=True)
        return destination

    def modify(self, configuration: WriterConfiguration) -> StampOutcome:
        if not configuration.input_file_path:
            raise ConfigurationError("modify requires 'input_file_path'")

        rules = configuration.rules if configuration.rules is not None else self.loader.load_rules()
        source = self.resolve_path(configuration.input_file_path)
        destination = self.resolve_output_path(configuration.output_file_path)

        store = DocumentStore.open(source)
        store.set_version(self.pdf_version)

        placements: List[Placement] = []
        pages = referenced_pages(rules)
        for page_number in pages:
            page = store.get_page(page_number)
            scanner = ContentScanner(
                rules_for_page(rules, page_number),
                store.get_page_encodings(page),
                decoder=store.decode_text,
            )
            page_placements = scanner.scan(store.get_page_instructions(page))
            logger.info("page scanned", page=page_number, placements=len(page_placements))

            for placement in page_placements:
                store.append_page_instructions(page, generate_overlay_instructions(placement))
            placements.extend(page_placements)

        store.save(destination)
        return StampOutcome(output_path=destination, placements=placements, pages=pages)

    def create(self, configuration: WriterConfiguration) -> StampOutcome:
        destination = self.resolve_output_path(configuration.output_file_path)

        instructions = []
        for placement in configuration.operations:
            instructions.extend(generate_overlay_instructions(placement))

        store = DocumentStore.create(self.pdf_version)
        resources = font_resources(store, self.CREATE_FONTS)
        width, height = self.PAGE_SIZE
        store.add_page(width, height, resources, instructions)
        store.compress()
        store.save(destination)

        logger.info("document created", path=str(destination), placements=len(configuration.operations))
        return StampOutcome(output_path=destination, placements=list(configuration.operations), pages=[0])


def run_stamp(action: Callable[[], StampOutcome]) -> StampResult:
    """Run a flow, turning storage failures into a tagged result."""
    try:
        outcome = action()
    except (OSError, PdfReadError) as exc:
        reason = classify_storage_error(exc)
        logger.warning("storage failure", reason=reason.value, error=str(exc))
        return StampResult.failure(reason)
    return StampResult.success(outcome)


def modify_document(
    configuration: WriterConfiguration,
    orchestrator: StampOrchestrator | None = None,
) -> StampResult:
    orchestrator = orchestrator or StampOrchestrator()
    return run_stamp(lambda: orchestrator.modify(configuration))


def create_document(
    configuration: WriterConfiguration | None = None,
    orchestrator: StampOrchestrator | None = None,
) -> StampResult:
    """Create a document; without a configuration the default one is used."""
    orchestrator = orchestrator or StampOrchestrator()

    def action() -> StampOutcome:
        active = configuration or orchestrator.loader.load_configuration()
        return orchestrator.create(active)

    return run_stamp(action)

