"""
Document subsystem exports.
"""

from .container import ContainerReader, EpubContainerReader
from .indexing import Indexer, NoopIndexer, WhooshElementIndex
from .models import (
    Chapter,
    ContentElement,
    DecodedPackage,
    DocumentMetadata,
    HeadingElement,
    ImageBlob,
    ImageElement,
    NormalizedDocument,
    Resource,
    TextElement,
)
from .normalizer import ElementNormalizer
from .store import DocumentStore, load_document

__all__ = [
    "Chapter",
    "ContainerReader",
    "ContentElement",
    "DecodedPackage",
    "DocumentMetadata",
    "DocumentStore",
    "ElementNormalizer",
    "EpubContainerReader",
    "HeadingElement",
    "ImageBlob",
    "ImageElement",
    "Indexer",
    "NoopIndexer",
    "NormalizedDocument",
    "Resource",
    "TextElement",
    "WhooshElementIndex",
    "load_document",
]
