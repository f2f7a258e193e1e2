from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional

import ebooklib
from bs4 import UnicodeDammit
from ebooklib import epub

from ..errors import PackageDecodeError
from .models import Chapter, DecodedPackage, DocumentMetadata, Resource

logger = logging.getLogger(__name__)


class ContainerReader:
    """
    Abstract package decoder. Implementations open a packaged book and hand
    back raw chapter markup plus binary resources without interpreting them.
    """

    def read(self, path: Path) -> DecodedPackage:
        raise NotImplementedError


IMAGE_SUFFIXES = {".bmp", ".gif", ".jpeg", ".jpg", ".png", ".svg", ".tif", ".tiff", ".webp"}


class _LenientEpubReader(epub.EpubReader):
    """
    `ebooklib` loads every manifest item eagerly and fails the whole book on
    one missing archive member. Missing images come back empty instead, so
    the normalizer can drop just those images.
    """

    def read_file(self, name):
        try:
            return super().read_file(name)
        except KeyError:
            if PurePosixPath(name).suffix.lower() not in IMAGE_SUFFIXES:
                raise
            logger.warning("Image %s is listed in the manifest but missing from the archive", name)
            return b""


class EpubContainerReader(ContainerReader):
    """
    EPUB decoder backed by `ebooklib`.

    Chapters follow the spine order; only spine items that are XHTML documents
    are kept. Every manifest item with an image media type is exposed as a
    resource, whether or not a chapter references it.
    """

    def read(self, path: Path) -> DecodedPackage:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"EPUB not found: {path}")
        try:
            reader = _LenientEpubReader(str(path), options={"ignore_ncx": True})
            book = reader.load()
            reader.process()
        except Exception as exc:  # noqa: BLE001
            raise PackageDecodeError(f"Failed to open EPUB file {path}: {exc}") from exc

        metadata = DocumentMetadata(
            title=self._first_metadata(book, "title"),
            language=self._first_metadata(book, "language"),
            author=self._first_metadata(book, "creator"),
        )
        chapters = self._read_chapters(book)
        if not chapters:
            raise PackageDecodeError(f"No readable chapters in EPUB file {path}")
        resources = self._read_resources(book)
        logger.info("Decoded %s: %d chapters, %d image resources", path.name, len(chapters), len(resources))
        return DecodedPackage(metadata=metadata, chapters=chapters, resources=resources)

    def _first_metadata(self, book: epub.EpubBook, name: str) -> Optional[str]:
        entries = book.get_metadata("DC", name)
        for value, _attrs in entries:
            if value and value.strip():
                return value.strip()
        return None

    def _read_chapters(self, book: epub.EpubBook) -> List[Chapter]:
        chapters: List[Chapter] = []
        for spine_entry in book.spine:
            item_id = spine_entry[0] if isinstance(spine_entry, tuple) else spine_entry
            item = book.get_item_with_id(item_id)
            if item is None:
                logger.warning("Spine references unknown item %s", item_id)
                continue
            if item.get_type() != ebooklib.ITEM_DOCUMENT:
                continue
            markup = self._decode_markup(item.get_content(), item.get_name())
            if markup is None:
                continue
            chapters.append(Chapter(href=item.get_name(), markup=markup))
        return chapters

    def _read_resources(self, book: epub.EpubBook) -> Dict[str, Resource]:
        resources: Dict[str, Resource] = {}
        for item in book.get_items():
            media_type = getattr(item, "media_type", "") or ""
            if not media_type.startswith("image/"):
                continue
            data = item.get_content()
            resources[item.get_name()] = Resource(
                href=item.get_name(),
                media_type=media_type,
                data=bytes(data) if data else None,
            )
        return resources

    def _decode_markup(self, raw: bytes, name: str) -> Optional[str]:
        if not raw:
            logger.warning("Chapter %s is empty, skipping", name)
            return None
        if isinstance(raw, str):
            return raw
        # EPUB content documents must be UTF-8 or UTF-16.
        dammit = UnicodeDammit(raw, ["utf-8", "utf-16"])
        if dammit.unicode_markup is None:
            logger.warning("Could not determine encoding of chapter %s, skipping", name)
            return None
        return dammit.unicode_markup
