from __future__ import annotations

import logging
import posixpath
import re
import warnings
from typing import Callable, Dict, List, Optional, Set
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup, NavigableString, Tag, XMLParsedAsHTMLWarning
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

from .models import (
    ContentElement,
    DecodedPackage,
    HeadingElement,
    ImageBlob,
    ImageElement,
    NormalizedDocument,
    TextElement,
)

logger = logging.getLogger(__name__)

# EPUB chapters are XHTML but are parsed with the lenient HTML tree builder.
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
IMAGE_TAGS = {"img", "image", "svg:image"}
SKIP_TAGS = {"head", "script", "style", "template", "title", "noscript"}
BLOCK_TAGS = {
    "address",
    "article",
    "aside",
    "blockquote",
    "body",
    "caption",
    "dd",
    "details",
    "div",
    "dl",
    "dt",
    "figcaption",
    "figure",
    "footer",
    "header",
    "hr",
    "li",
    "main",
    "nav",
    "ol",
    "p",
    "section",
    "summary",
    "table",
    "tbody",
    "td",
    "tfoot",
    "th",
    "thead",
    "tr",
    "ul",
}

# HTML collapses ASCII whitespace only; NBSP and ideographic spaces are content.
_HTML_WHITESPACE = re.compile(r"[ \t\n\r\f]+")
_HTML_WHITESPACE_CHARS = " \t\n\r\f"


def collapse_whitespace(text: str) -> str:
    return _HTML_WHITESPACE.sub(" ", text).strip(_HTML_WHITESPACE_CHARS)


def is_content_string(node) -> bool:
    """
    Text nodes that carry readable content. Ruby annotations (<rt>, <rp>)
    have their own string classes in bs4 and are included.
    """
    if not isinstance(node, NavigableString):
        return False
    return not isinstance(node, (Comment, Declaration, Doctype, ProcessingInstruction))


def content_text(tag: Tag) -> str:
    parts = []
    for node in tag.descendants:
        if isinstance(node, Tag) and (node.name or "").lower() == "br":
            parts.append("\n")
            continue
        if not is_content_string(node):
            continue
        if node.find_parent(lambda parent: (parent.name or "").lower() in SKIP_TAGS):
            continue
        parts.append(str(node))
    return "".join(parts)


class _ChapterWalker:
    """
    Depth-first walk over one chapter body. Inline text accumulates into a
    run that is flushed into a TextElement at every block boundary.
    """

    def __init__(
        self,
        href: str,
        emit: Callable[[ContentElement], None],
        resolve_image: Callable[[str, str], Optional[str]],
    ):
        self.href = href
        self._emit = emit
        self._resolve_image = resolve_image
        self._run: List[str] = []

    def walk(self, node: Tag) -> None:
        self._walk_children(node)
        self.flush()

    def _walk_children(self, node: Tag) -> None:
        for child in node.children:
            if isinstance(child, Tag):
                self._visit(child)
            elif is_content_string(child):
                self._run.append(_HTML_WHITESPACE.sub(" ", str(child)))
            # comments, doctypes and processing instructions carry no content

    def _visit(self, tag: Tag) -> None:
        name = (tag.name or "").lower()
        if name in SKIP_TAGS:
            return
        if name in HEADING_TAGS:
            self.flush()
            text = collapse_whitespace(content_text(tag))
            if text:
                self._emit(HeadingElement(content=text, level=int(name[1])))
            for image in tag.find_all(self._is_image_tag):
                self._emit_image(image)
            return
        if name in IMAGE_TAGS:
            self.flush()
            self._emit_image(tag)
            return
        if name == "br":
            self._run.append("\n")
            return
        if name == "pre":
            self.flush()
            text = content_text(tag).strip("\n")
            if text.strip():
                self._emit(TextElement(content=text))
            return

        is_block = name in BLOCK_TAGS
        if is_block:
            self.flush()
        self._walk_children(tag)
        if is_block:
            self.flush()

    def flush(self) -> None:
        if not self._run:
            return
        raw = "".join(self._run)
        self._run = []
        lines = [line.strip(_HTML_WHITESPACE_CHARS) for line in raw.split("\n")]
        content = "\n".join(line for line in lines if line.strip())
        if content:
            self._emit(TextElement(content=content))

    def _emit_image(self, tag: Tag) -> None:
        src = tag.get("src") or tag.get("xlink:href") or tag.get("href")
        if not src:
            logger.debug("Image tag without source in %s", self.href)
            return
        image_id = self._resolve_image(self.href, src)
        if image_id is not None:
            self._emit(ImageElement(id=image_id))

    @staticmethod
    def _is_image_tag(tag: Tag) -> bool:
        return (tag.name or "").lower() in IMAGE_TAGS


class ElementNormalizer:
    """
    Turns a decoded package into the render-ready element sequence.

    Elements are appended in reading order and never reordered, so the
    position of an element in the output is its stable index. Each image
    resource is extracted once and gets a generated id (img_001, img_002,
    ...) that is shared by its ImageElement and the image table entry.
    Unreadable images are logged and left out; the rest of the book loads.
    """

    def __init__(self, parser: str = "lxml", image_id_prefix: str = "img_"):
        self.parser = parser
        self.image_id_prefix = image_id_prefix

    def normalize(self, package: DecodedPackage) -> NormalizedDocument:
        elements: List[ContentElement] = []
        images: Dict[str, ImageBlob] = {}
        ids_by_href: Dict[str, str] = {}
        unreadable: Set[str] = set()

        def resolve_image(chapter_href: str, src: str) -> Optional[str]:
            href = self.resolve_href(chapter_href, src)
            if href is None:
                logger.warning("Skipping external image %s in %s", src, chapter_href)
                return None
            if href in ids_by_href:
                return ids_by_href[href]
            if href in unreadable:
                return None
            resource = package.resources.get(href)
            if resource is None or not resource.data:
                logger.warning("Skipping unreadable image %s referenced from %s", href, chapter_href)
                unreadable.add(href)
                return None
            image_id = f"{self.image_id_prefix}{len(images) + 1:03d}"
            images[image_id] = ImageBlob(data=resource.data, media_type=resource.media_type)
            ids_by_href[href] = image_id
            return image_id

        for chapter in package.chapters:
            soup = BeautifulSoup(chapter.markup, self.parser)
            body = soup.body if isinstance(soup.body, Tag) else soup
            before = len(elements)
            _ChapterWalker(chapter.href, elements.append, resolve_image).walk(body)
            logger.debug("Chapter %s produced %d elements", chapter.href, len(elements) - before)

        return NormalizedDocument(metadata=package.metadata, elements=elements, images=images)

    @staticmethod
    def resolve_href(chapter_href: str, src: str) -> Optional[str]:
        """
        Resolve an image reference against the chapter that contains it.
        Returns None for references that point outside the package.
        """
        parts = urlsplit(src.strip())
        if parts.scheme or parts.netloc:
            return None
        path = unquote(parts.path)
        if not path:
            return None
        if path.startswith("/"):
            return posixpath.normpath(path.lstrip("/"))
        return posixpath.normpath(posixpath.join(posixpath.dirname(chapter_href), path))
