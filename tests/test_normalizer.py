import logging

from reading_room.document import (
    Chapter,
    DecodedPackage,
    DocumentMetadata,
    ElementNormalizer,
    HeadingElement,
    ImageElement,
    Resource,
    TextElement,
)

from conftest import PNG_BYTES


def _package(*bodies, resources=None):
    chapters = [
        Chapter(href=f"text/ch{number}.xhtml", markup=f"<html><head><title>t</title></head><body>{body}</body></html>")
        for number, body in enumerate(bodies, start=1)
    ]
    return DecodedPackage(
        metadata=DocumentMetadata(title="Book", language="en", author="Someone"),
        chapters=chapters,
        resources=resources or {},
    )


def _png(href):
    return Resource(href=href, media_type="image/png", data=PNG_BYTES)


def test_heading_paragraph_image_in_order():
    package = _package(
        '<h1>Chapter 1</h1><p>First paragraph.</p><p><img src="../images/a.png"/></p>',
        resources={"images/a.png": _png("images/a.png")},
    )
    document = ElementNormalizer().normalize(package)

    assert document.elements == [
        HeadingElement(content="Chapter 1", level=1),
        TextElement(content="First paragraph."),
        ImageElement(id="img_001"),
    ]
    assert document.images["img_001"].data == PNG_BYTES
    assert document.images["img_001"].media_type == "image/png"
    assert document.metadata.title == "Book"


def test_heading_levels_pass_through():
    package = _package("".join(f"<h{level}>Level {level}</h{level}>" for level in range(1, 7)))
    elements = ElementNormalizer().normalize(package).elements
    assert [(e.content, e.level) for e in elements] == [(f"Level {level}", level) for level in range(1, 7)]


def test_whitespace_only_nodes_are_dropped():
    package = _package("<p>   </p><div>\n\t</div><p>&#160;</p><p></p><section><p>kept</p>\n\n</section>")
    elements = ElementNormalizer().normalize(package).elements
    assert elements == [TextElement(content="kept")]


def test_inline_markup_stays_in_one_text_element():
    package = _package("<p>Some <em>emphasised</em>\n   and <a href='#x'>linked</a> text.</p>")
    elements = ElementNormalizer().normalize(package).elements
    assert elements == [TextElement(content="Some emphasised and linked text.")]


def test_line_breaks_and_preformatted_text():
    package = _package("<p>line one<br/>line two</p><pre>  code\n    indented</pre>")
    elements = ElementNormalizer().normalize(package).elements
    assert elements == [
        TextElement(content="line one\nline two"),
        TextElement(content="  code\n    indented"),
    ]


def test_multi_script_text_is_preserved():
    text = "日本語の文章　全角スペース — Ελληνικά, العربية, 🙂"
    package = _package(f"<p>{text}</p>")
    elements = ElementNormalizer().normalize(package).elements
    assert elements == [TextElement(content=text)]
    assert elements[0].content.encode("utf-8") == text.encode("utf-8")


def test_script_and_style_are_ignored():
    package = _package("<style>p { color: red }</style><script>alert(1)</script><p>visible</p>")
    elements = ElementNormalizer().normalize(package).elements
    assert elements == [TextElement(content="visible")]


def test_image_inside_paragraph_splits_text():
    package = _package(
        '<p>before <img src="../images/a.png"/> after</p>',
        resources={"images/a.png": _png("images/a.png")},
    )
    elements = ElementNormalizer().normalize(package).elements
    assert elements == [
        TextElement(content="before"),
        ImageElement(id="img_001"),
        TextElement(content="after"),
    ]


def test_repeated_image_reuses_id_and_new_images_get_next_id():
    package = _package(
        '<img src="../images/a.png"/><img src="../images/b.png"/>',
        '<img src="../images/a.png"/>',
        resources={"images/a.png": _png("images/a.png"), "images/b.png": _png("images/b.png")},
    )
    document = ElementNormalizer().normalize(package)
    assert document.elements == [ImageElement("img_001"), ImageElement("img_002"), ImageElement("img_001")]
    assert sorted(document.images) == ["img_001", "img_002"]


def test_svg_image_reference():
    package = _package(
        '<svg><image xlink:href="../images/cover.png" width="10" height="10"/></svg>',
        resources={"images/cover.png": _png("images/cover.png")},
    )
    elements = ElementNormalizer().normalize(package).elements
    assert elements == [ImageElement(id="img_001")]


def test_unreadable_image_is_skipped_and_load_continues(caplog):
    package = _package(
        '<p>before</p><img src="../images/missing.png"/><img src="../images/empty.png"/>'
        '<img src="http://example.com/remote.png"/><p>after</p>',
        resources={"images/empty.png": Resource(href="images/empty.png", media_type="image/png", data=None)},
    )
    with caplog.at_level(logging.WARNING, logger="reading_room.document.normalizer"):
        document = ElementNormalizer().normalize(package)

    assert document.elements == [TextElement(content="before"), TextElement(content="after")]
    assert document.images == {}
    assert "images/missing.png" in caplog.text


def test_chapters_are_concatenated_in_order():
    package = _package("<h2>One</h2>", "<h2>Two</h2>")
    elements = ElementNormalizer().normalize(package).elements
    assert [e.content for e in elements] == ["One", "Two"]


def test_resolve_href():
    assert ElementNormalizer.resolve_href("text/ch1.xhtml", "../images/a.png") == "images/a.png"
    assert ElementNormalizer.resolve_href("ch1.xhtml", "images/a%20b.png#frag") == "images/a b.png"
    assert ElementNormalizer.resolve_href("text/ch1.xhtml", "/images/a.png") == "images/a.png"
    assert ElementNormalizer.resolve_href("ch1.xhtml", "data:image/png;base64,AAAA") is None
    assert ElementNormalizer.resolve_href("ch1.xhtml", "https://example.com/a.png") is None


def test_ruby_annotations_stay_inline():
    package = _package(
        "<h2><ruby>第一<rt>だいいち</rt></ruby>章</h2>"
        "<p><ruby>漢字<rp>(</rp><rt>かんじ</rt><rp>)</rp></ruby>です</p>"
    )
    elements = ElementNormalizer().normalize(package).elements
    assert elements == [
        HeadingElement(content="第一だいいち章", level=2),
        TextElement(content="漢字(かんじ)です"),
    ]


def test_comments_inside_text_are_dropped():
    package = _package("<p>before<!-- editor note -->after</p>")
    assert ElementNormalizer().normalize(package).elements == [TextElement(content="beforeafter")]
