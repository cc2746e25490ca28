"""
PMC article access for pmcsent.

An :class:`Article` wraps the parsed JATS tree of one PubMed Central
article and exposes its bibliographic fields, its figure, table,
reference and author listings, and the sentences of its abstract and
full text. Every accessor is total: lookup failures are logged and the
accessor's documented default is returned.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from lxml import etree

from ..models.article import (
    NO_DAY_DEFAULT,
    NO_MONTH_DEFAULT,
    NO_YEAR_DEFAULT,
    ArticleAbstract,
    ArticleFullText,
    Author,
    Figure,
    PublicationDate,
    Reference,
    Table,
)
from ..utils.exceptions import FileFormatError, log_exception
from ..utils.validators import InputValidator
from .retrieval import fetch_article_xml
from .tree import element_children, node_kind, strip_namespaces, text_content
from .walker import StructuralWalker


log = logging.getLogger(__name__)

T = TypeVar("T")

TITLE_XPATH = "//title-group/article-title"
JOURNAL_XPATH = "//journal-title"
AUTHORS_XPATH = "//contrib-group/contrib[@contrib-type='author']"
ABSTRACT_XPATH = "//abstract"
PUBLICATION_DATE_DAY_XPATH = "//pub-date/day"
PUBLICATION_DATE_MONTH_XPATH = "//pub-date/month"
PUBLICATION_DATE_YEAR_XPATH = "//pub-date/year"
PMC_ID_XPATH = "//article-id[@pub-id-type='pmc']"
PUBMED_ID_XPATH = "//article-id[@pub-id-type='pmid']"
VOLUME_XPATH = "//volume"
FIRST_PAGE_XPATH = "//fpage"
LAST_PAGE_XPATH = "//lpage"
REFERENCES_XPATH = "//ref-list/ref"
FULL_TEXT_XPATH = "//body"
FIGURE_XPATH = "//fig"
TABLE_XPATH = "//table-wrap"

NO_TITLE_DEFAULT = "No Title Found"
NO_JOURNAL_NAME_DEFAULT = "No Journal Name Found"
NO_PMC_ID_DEFAULT = "No PMC ID Found"
NO_PUBMED_ID_DEFAULT = "No Pubmed ID Found"
NO_VOLUME_DEFAULT = "No Volume Found"
NO_FIRST_PAGE_DEFAULT = "No First Page Found"
NO_LAST_PAGE_DEFAULT = "No Last Page Found"

XLINK_HREF = "{http://www.w3.org/1999/xlink}href"


def _xml_parser() -> etree.XMLParser:
    # PMC files declare an external DTD; never fetch it
    return etree.XMLParser(load_dtd=False, no_network=True, resolve_entities=False,
                           recover=True, huge_tree=True)


class Article:
    """
    A parsed PubMed Central article.

    Attributes:
        root: Root element of the article tree
        source: Where the article came from (path or PMC id), for logging
    """

    def __init__(self, root, walker: Optional[StructuralWalker] = None, source: str = "") -> None:
        """
        Initialize an article from an already parsed tree.

        Args:
            root: lxml root element
            walker: Walker used for sentence extraction; a default spaCy
                backed walker is built on first use when omitted
            source: Description of the origin of the article
        """
        self.root = root
        self.source = source
        self._walker = walker

    @classmethod
    def from_string(cls, xml: Union[str, bytes], walker: Optional[StructuralWalker] = None,
                    source: str = "<string>") -> "Article":
        """
        Parse an article from XML text.

        Raises:
            FileFormatError: If no XML tree can be recovered
        """
        data = xml.encode("utf-8") if isinstance(xml, str) else xml
        try:
            root = etree.fromstring(data, _xml_parser())
        except etree.XMLSyntaxError as e:
            raise FileFormatError(f"Article is not valid XML: {e}", source, "xml")
        if root is None:
            raise FileFormatError("Article is not valid XML", source, "xml")

        strip_namespaces(root)
        return cls(root, walker=walker, source=source)

    @classmethod
    def from_file(cls, path: Union[str, Path], walker: Optional[StructuralWalker] = None,
                  extensions: Optional[List[str]] = None) -> "Article":
        """
        Parse an article from a .xml or .nxml file.

        Raises:
            ValidationError: If the file is missing or has an unsupported extension
            FileFormatError: If the file is not XML
        """
        path = InputValidator.validate_article_file(path, extensions)
        log.info(f"Loading article: {path}")
        return cls.from_string(path.read_bytes(), walker=walker, source=str(path))

    @classmethod
    def from_pmc_id(cls, pmc_id: Union[str, int], delay: float = 0.0, timeout: float = 30,
                    walker: Optional[StructuralWalker] = None, **kwargs: Any) -> "Article":
        """
        Fetch and parse an article from PubMed Central.

        Raises:
            ValidationError: If the identifier is malformed
            NetworkError: If retrieval fails
            FileFormatError: If the response is not XML
        """
        xml = fetch_article_xml(pmc_id, delay=delay, timeout=timeout, **kwargs)
        return cls.from_string(xml, walker=walker, source=f"PMC{InputValidator.validate_pmc_id(pmc_id)}")

    @property
    def walker(self) -> StructuralWalker:
        if self._walker is None:
            from .nlp import SentenceAnalyzer, load_pipeline
            from .segmenter import SentenceSegmenter

            nlp = load_pipeline()
            self._walker = StructuralWalker(SentenceSegmenter(nlp), analyzer=SentenceAnalyzer(nlp))
        return self._walker

    def _guarded(self, what: str, default: T, func: Callable[[], T]) -> T:
        try:
            return func()
        except Exception as e:
            log_exception(log, e, f"Failed to read {what} of {self.source or 'article'}")
            return default

    def _first_text(self, xpath: str, default: str) -> str:
        def _lookup() -> str:
            nodes = self.root.xpath(xpath)
            if not nodes:
                return default
            return text_content(nodes[0]).strip()

        return self._guarded(xpath, default, _lookup)

    @property
    def title(self) -> str:
        return self._first_text(TITLE_XPATH, NO_TITLE_DEFAULT)

    @property
    def journal(self) -> str:
        return self._first_text(JOURNAL_XPATH, NO_JOURNAL_NAME_DEFAULT)

    @property
    def pmc_id(self) -> str:
        return self._first_text(PMC_ID_XPATH, NO_PMC_ID_DEFAULT)

    @property
    def pubmed_id(self) -> str:
        return self._first_text(PUBMED_ID_XPATH, NO_PUBMED_ID_DEFAULT)

    @property
    def volume(self) -> str:
        return self._first_text(VOLUME_XPATH, NO_VOLUME_DEFAULT)

    @property
    def first_page(self) -> str:
        return self._first_text(FIRST_PAGE_XPATH, NO_FIRST_PAGE_DEFAULT)

    @property
    def last_page(self) -> str:
        return self._first_text(LAST_PAGE_XPATH, NO_LAST_PAGE_DEFAULT)

    @property
    def publication_date(self) -> PublicationDate:
        return PublicationDate(
            day=self._first_text(PUBLICATION_DATE_DAY_XPATH, NO_DAY_DEFAULT),
            month=self._first_text(PUBLICATION_DATE_MONTH_XPATH, NO_MONTH_DEFAULT),
            year=self._first_text(PUBLICATION_DATE_YEAR_XPATH, NO_YEAR_DEFAULT),
        )

    @property
    def abstract_text(self) -> str:
        """Flat text of the first abstract, without sentence structure."""
        return self._guarded("abstract text", "", lambda: self._flat_text(ABSTRACT_XPATH))

    @property
    def full_text_text(self) -> str:
        """
        Flat text of the body. No distinction is made between headings,
        paragraphs, figures and tables.
        """
        return self._guarded("full text", "", lambda: self._flat_text(FULL_TEXT_XPATH))

    def _flat_text(self, xpath: str) -> str:
        nodes = self.root.xpath(xpath)
        return text_content(nodes[0]) if nodes else ""

    def get_metadata(self) -> Dict[str, Any]:
        """Bibliographic fields as a dictionary."""
        return {
            "title": self.title,
            "journal": self.journal,
            "volume": self.volume,
            "first_page": self.first_page,
            "last_page": self.last_page,
            "pmc_id": self.pmc_id,
            "pubmed_id": self.pubmed_id,
            "publication_date": self.publication_date.to_dict(),
        }

    def get_authors(self) -> List[Author]:
        """Authors in document order, matched on child element names."""
        return self._guarded("authors", [], self._read_authors)

    def _read_authors(self) -> List[Author]:
        authors = []
        for contrib in self.root.xpath(AUTHORS_XPATH):
            author = Author()
            for child in element_children(contrib):
                kind = node_kind(child)
                if kind == "name":
                    for part in element_children(child):
                        part_kind = node_kind(part)
                        if part_kind == "given-names":
                            author.first_name = text_content(part)
                        elif part_kind == "surname":
                            author.last_name = text_content(part)
                elif kind == "email":
                    author.email = text_content(child)
            authors.append(author)
        return authors

    def get_figures(self) -> List[Figure]:
        """All figures of the document, wherever they appear."""
        return self._guarded("figures", [], self._read_figures)

    def _read_figures(self) -> List[Figure]:
        figures = []
        for node in self.root.xpath(FIGURE_XPATH):
            figure = Figure(id=node.get("id", ""))
            for child in element_children(node):
                kind = node_kind(child)
                if kind == "caption":
                    figure.caption = text_content(child)
                elif kind == "label":
                    figure.label = text_content(child)
                elif kind == "graphic":
                    figure.graphic_location = child.get(XLINK_HREF, "")
            figures.append(figure)
        return figures

    def get_tables(self) -> List[Table]:
        """All tables of the document. Table content is not extracted."""
        return self._guarded("tables", [], self._read_tables)

    def _read_tables(self) -> List[Table]:
        tables = []
        for node in self.root.xpath(TABLE_XPATH):
            table = Table(id=node.get("id", ""))
            for child in element_children(node):
                kind = node_kind(child)
                if kind == "caption":
                    table.caption = text_content(child)
                elif kind == "label":
                    table.label = text_content(child)
            tables.append(table)
        return tables

    def get_references(self) -> List[Reference]:
        """Bibliography entries cited by the article."""
        return self._guarded("references", [], lambda: [
            Reference(id=node.get("id", ""), text=text_content(node))
            for node in self.root.xpath(REFERENCES_XPATH)
        ])

    def get_abstract(self) -> ArticleAbstract:
        """
        Sentences of the abstract.

        Only the first abstract element is used; later ones are usually
        editor summaries.
        """
        def _extract() -> ArticleAbstract:
            nodes = self.root.xpath(ABSTRACT_XPATH)
            if not nodes:
                return ArticleAbstract()
            return ArticleAbstract(self.walker.walk(nodes[0]))

        return self._guarded("abstract", ArticleAbstract(), _extract)

    def get_full_text(self) -> ArticleFullText:
        """Sentences of the body, with section, subsection and references."""
        def _extract() -> ArticleFullText:
            return ArticleFullText(self.walker.walk_many(self.root.xpath(FULL_TEXT_XPATH)))

        return self._guarded("full text sentences", ArticleFullText(), _extract)
