from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class DocumentMetadata:
    title: Optional[str] = None
    language: Optional[str] = None
    author: Optional[str] = None


@dataclass(frozen=True)
class TextElement:
    content: str

    kind = "text"


@dataclass(frozen=True)
class HeadingElement:
    content: str
    level: int

    kind = "heading"


@dataclass(frozen=True)
class ImageElement:
    # Logical id only; the bytes live in the store's image table.
    id: str

    kind = "image"


ContentElement = Union[TextElement, HeadingElement, ImageElement]


@dataclass(frozen=True)
class ImageBlob:
    data: bytes
    media_type: str = "application/octet-stream"


@dataclass
class Chapter:
    href: str
    markup: str


@dataclass
class Resource:
    href: str
    media_type: str
    data: Optional[bytes] = None


@dataclass
class DecodedPackage:
    """
    Output of the container decoder: chapter markup in reading order plus
    every image resource declared by the package, keyed by href.
    """

    metadata: DocumentMetadata
    chapters: List[Chapter] = field(default_factory=list)
    resources: Dict[str, Resource] = field(default_factory=dict)


@dataclass
class NormalizedDocument:
    metadata: DocumentMetadata
    elements: List[ContentElement] = field(default_factory=list)
    images: Dict[str, ImageBlob] = field(default_factory=dict)
