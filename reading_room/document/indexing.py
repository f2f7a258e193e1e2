from __future__ import annotations

from typing import Dict, Iterable, List, Protocol

from whoosh.fields import ID, NUMERIC, TEXT, Schema
from whoosh.filedb.filestore import RamStorage
from whoosh.qparser import QueryParser

from .models import ContentElement, HeadingElement, TextElement


class Indexer(Protocol):
    def index_elements(self, elements: Iterable[ContentElement]) -> None:
        ...

    def search(self, query_str: str, limit: int = 10) -> List[Dict]:
        ...


class NoopIndexer:
    """
    Used when search is switched off. Keeps the app wired without building
    a Whoosh index.
    """

    def index_elements(self, elements: Iterable[ContentElement]) -> None:
        return None

    def search(self, query_str: str, limit: int = 10) -> List[Dict]:
        return []


class WhooshElementIndex:
    """
    In-memory Whoosh index over the text-bearing elements of the book. Built
    once at load time; hits point back at element indices so a reader can
    jump straight to the passage.
    """

    def __init__(self):
        self.schema = Schema(
            element_index=NUMERIC(stored=True, sortable=True, unique=True),
            kind=ID(stored=True),
            text=TEXT(stored=True),
        )
        self.ix = RamStorage().create_index(self.schema)

    def index_elements(self, elements: Iterable[ContentElement]) -> None:
        writer = self.ix.writer()
        for index, element in enumerate(elements):
            if not isinstance(element, (TextElement, HeadingElement)):
                continue
            writer.add_document(element_index=index, kind=element.kind, text=element.content)
        writer.commit()

    def search(self, query_str: str, limit: int = 10) -> List[Dict]:
        """
        Return a list of plain dicts so callers are safe after the searcher closes.
        """
        qp = QueryParser("text", schema=self.schema)
        q = qp.parse(query_str)
        with self.ix.searcher() as searcher:
            results = searcher.search(q, limit=limit)
            hits = []
            for hit in results:
                fields = hit.fields()
                hits.append(
                    {
                        "element_index": int(fields.get("element_index")),
                        "kind": fields.get("kind"),
                        "text": fields.get("text"),
                    }
                )
            return hits
