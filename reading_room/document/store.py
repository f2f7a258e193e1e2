from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from ..errors import ImageNotFoundError
from .container import ContainerReader, EpubContainerReader
from .models import ContentElement, DocumentMetadata, ImageBlob, NormalizedDocument
from .normalizer import ElementNormalizer

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Immutable, process-lifetime snapshot of the loaded book.

    Built once before any request is served and never mutated afterwards, so
    readers on any number of threads share it without locking.
    """

    def __init__(
        self,
        metadata: DocumentMetadata,
        elements: Iterable[ContentElement],
        images: Mapping[str, ImageBlob],
    ):
        self._metadata = metadata
        self._elements: Tuple[ContentElement, ...] = tuple(elements)
        self._images: Mapping[str, ImageBlob] = MappingProxyType(dict(images))

    @classmethod
    def from_normalized(cls, document: NormalizedDocument) -> "DocumentStore":
        return cls(document.metadata, document.elements, document.images)

    def get_metadata(self) -> DocumentMetadata:
        return self._metadata

    def get_elements(self) -> Tuple[ContentElement, ...]:
        return self._elements

    def get_image(self, image_id: str) -> ImageBlob:
        if not self.has_image(image_id):
            raise ImageNotFoundError(image_id)
        return self._images[image_id]

    def has_image(self, image_id: str) -> bool:
        return image_id in self._images

    @property
    def element_count(self) -> int:
        return len(self._elements)

    @property
    def image_count(self) -> int:
        return len(self._images)


def load_document(
    path: Path,
    reader: Optional[ContainerReader] = None,
    normalizer: Optional[ElementNormalizer] = None,
) -> DocumentStore:
    """
    Decode and normalize the book at `path`. Any failure here is fatal for
    the server; callers should let it propagate.
    """
    reader = reader or EpubContainerReader()
    normalizer = normalizer or ElementNormalizer()

    logger.info("Loading EPUB from: %s", path)
    package = reader.read(Path(path))
    store = DocumentStore.from_normalized(normalizer.normalize(package))
    logger.info("Loaded document with %d elements", store.element_count)
    logger.info("Loaded %d images", store.image_count)
    return store
