from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence, Tuple

import pytest
from ebooklib import epub

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR-fake-image"

SCENARIO_BODY = (
    "<h1>Chapter 1</h1>"
    "<p>It was a bright cold day in April, and the clocks were striking thirteen.</p>"
    '<p><img src="images/figure.png" alt="A figure"/></p>'
)


def build_epub(
    path: Path,
    chapters: Sequence[Tuple[str, str]],
    images: Iterable[Tuple[str, str, str, bytes]] = (),
    title: str = "Test Book",
    language: str = "en",
    author: str = "Ada Lovelace",
) -> Path:
    book = epub.EpubBook()
    book.set_identifier("test-book-id")
    book.set_title(title)
    book.set_language(language)
    book.add_author(author)

    items = []
    for number, (file_name, body) in enumerate(chapters, start=1):
        chapter = epub.EpubHtml(title=f"Chapter {number}", file_name=file_name, lang=language)
        chapter.content = f"<html><body>{body}</body></html>"
        book.add_item(chapter)
        items.append(chapter)

    for uid, file_name, media_type, data in images:
        book.add_item(epub.EpubImage(uid=uid, file_name=file_name, media_type=media_type, content=data))

    book.toc = tuple(items)
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = items
    epub.write_epub(str(path), book)
    return path


@pytest.fixture
def scenario_epub(tmp_path) -> Path:
    return build_epub(
        tmp_path / "scenario.epub",
        chapters=[("chap1.xhtml", SCENARIO_BODY)],
        images=[("figure", "images/figure.png", "image/png", PNG_BYTES)],
    )
