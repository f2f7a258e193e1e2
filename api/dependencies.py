from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request

from reading_room.auth import AccessGate
from reading_room.config import ServerSettings
from reading_room.document import DocumentStore, Indexer, NoopIndexer, WhooshElementIndex, load_document
from reading_room.presence import PositionRegistry

logger = logging.getLogger(__name__)


@dataclass
class ReaderState:
    """
    Everything the routes share. The document and index are read-only; the
    registry is the single piece of mutable state and guards itself.
    """

    document: DocumentStore
    registry: PositionRegistry
    gate: AccessGate
    indexer: Indexer


def build_indexer(document: DocumentStore, enable_search: bool = True) -> Indexer:
    if not enable_search:
        return NoopIndexer()
    indexer = WhooshElementIndex()
    indexer.index_elements(document.get_elements())
    return indexer


def build_state(settings: ServerSettings) -> ReaderState:
    if settings.epub_path is None:
        raise RuntimeError("No EPUB configured. Pass a path on the command line or set READING_ROOM_EPUB.")
    document = load_document(settings.epub_path)
    gate = AccessGate.from_password(settings.password)
    if gate.requires_password:
        logger.info("Password protection enabled")
    return ReaderState(
        document=document,
        registry=PositionRegistry(),
        gate=gate,
        indexer=build_indexer(document, settings.enable_search),
    )


def get_state(request: Request) -> ReaderState:
    state: Optional[ReaderState] = getattr(request.app.state, "reader", None)
    if state is None:
        raise HTTPException(status_code=503, detail="Document not loaded")
    return state


def require_access(state: ReaderState, password_hash: Optional[str]) -> None:
    if not state.gate.allows(password_hash):
        raise HTTPException(status_code=401, detail="Invalid or missing password")
