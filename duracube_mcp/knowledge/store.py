"""Knowledge store - lazy, load-once access to the knowledge documents.

Each document is read from ``knowledge_dir`` on first access, validated
against its shape and cached for the lifetime of the store. There is no
reload or write path. Failures are not cached: a document that failed to
load is read again on the next access.
"""

import json
import threading
from pathlib import Path
from typing import NoReturn

from loguru import logger
from pydantic import BaseModel, ValidationError

from duracube_mcp.config.settings import settings
from duracube_mcp.errors import DocumentLoadError, format_validation_error
from duracube_mcp.knowledge.documents import (
    FinanceExtractionGuide,
    FormatSpec,
    KnowledgeDocument,
    LearningSet,
    PrincipleSet,
    SectionMappingGuide,
)

DOCUMENT_FILES: dict[str, tuple[str, type[BaseModel]]] = {
    "principles": ("principles.json", PrincipleSet),
    "learnings": ("learnings.json", LearningSet),
    "format": ("format.json", FormatSpec),
    "finance_extraction": ("finance-extraction.json", FinanceExtractionGuide),
    "section_mapping": ("section-mapping.json", SectionMappingGuide),
}


def _raise_load_error(document: str, message: str) -> NoReturn:
    """Log and raise DocumentLoadError."""
    logger.error(f"Knowledge document '{document}' failed to load: {message}")
    raise DocumentLoadError(document, message) from None


class KnowledgeStore:
    """Process-lifetime cache of the knowledge documents."""

    def __init__(self, knowledge_dir: Path | str):
        self.knowledge_dir = Path(knowledge_dir)
        self._documents: dict[str, KnowledgeDocument] = {}
        self._lock = threading.Lock()

    def load(self, name: str) -> KnowledgeDocument:
        """Return the cached document, reading it on first access.

        Args:
            name: Document key from DOCUMENT_FILES

        Returns:
            The validated, frozen document model

        Raises:
            DocumentLoadError: If the document is unknown, missing, unreadable,
                not valid JSON or not in the expected shape
        """
        document = self._documents.get(name)
        if document is not None:
            return document

        with self._lock:
            document = self._documents.get(name)
            if document is None:
                document = self._read(name)
                self._documents[name] = document
        return document

    def _read(self, name: str) -> KnowledgeDocument:
        if name not in DOCUMENT_FILES:
            _raise_load_error(name, f"Unknown knowledge document: {name}")

        filename, model = DOCUMENT_FILES[name]
        path = self.knowledge_dir / filename

        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            _raise_load_error(name, f"Knowledge document not found: {path}")
        except (OSError, UnicodeDecodeError) as e:
            _raise_load_error(name, f"Failed to read knowledge document {path}: {e!s}")

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            _raise_load_error(name, f"Knowledge document {filename} is not valid JSON: {e!s}")

        try:
            document = model.model_validate(data)
        except ValidationError as e:
            _raise_load_error(name, f"Knowledge document {filename} does not match the expected shape: {format_validation_error(e)}")

        logger.info(f"Loaded knowledge document '{name}' from {path} ({len(raw)} bytes)")
        return document

    def preload(self) -> None:
        """Load every document now instead of on first use."""
        for name in DOCUMENT_FILES:
            self.load(name)

    def loaded_documents(self) -> list[str]:
        return [name for name in DOCUMENT_FILES if name in self._documents]

    def principles(self) -> PrincipleSet:
        return self.load("principles")

    def learnings(self) -> LearningSet:
        return self.load("learnings")

    def output_format(self) -> FormatSpec:
        return self.load("format")

    def finance_extraction(self) -> FinanceExtractionGuide:
        return self.load("finance_extraction")

    def section_mapping(self) -> SectionMappingGuide:
        return self.load("section_mapping")


_store: KnowledgeStore | None = None
_store_lock = threading.Lock()


def get_knowledge_store() -> KnowledgeStore:
    """Get or create the process-wide store over ``settings.knowledge_dir``."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = KnowledgeStore(settings.knowledge_dir)
    return _store
