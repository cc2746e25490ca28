"""
Article models for pmcsent.

This module defines the flat entities enumerated from a PMC article
(authors, figures, tables, references, publication date) and the
containers holding the sentences of its abstract and full text.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .sentence import ArticleSentence


NO_DAY_DEFAULT = "No Publication Day Found"
NO_MONTH_DEFAULT = "No Publication Month Found"
NO_YEAR_DEFAULT = "No Publication Year Found"


@dataclass
class Author:
    """
    An author of the article.

    Attributes:
        first_name: Given names
        last_name: Surname
        email: Contact email, empty when absent
    """
    first_name: str = ""
    last_name: str = ""
    email: str = ""

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def to_dict(self) -> Dict[str, Any]:
        return {"first_name": self.first_name, "last_name": self.last_name, "email": self.email}


@dataclass
class PublicationDate:
    """Publication date parts as they appear in the article."""
    day: str = NO_DAY_DEFAULT
    month: str = NO_MONTH_DEFAULT
    year: str = NO_YEAR_DEFAULT

    def to_dict(self) -> Dict[str, Any]:
        return {"day": self.day, "month": self.month, "year": self.year}


@dataclass
class Figure:
    """
    A figure of the article.

    Attributes:
        id: Element id referenced by figure cross-references
        label: Display label, e.g. "Figure 1"
        caption: Caption text
        graphic_location: Location of the graphic (xlink:href)
    """
    id: str = ""
    label: str = ""
    caption: str = ""
    graphic_location: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "caption": self.caption,
            "graphic_location": self.graphic_location,
        }


@dataclass
class Table:
    """
    A table of the article. Only the label and caption are kept,
    not the table content.
    """
    id: str = ""
    label: str = ""
    caption: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "caption": self.caption}


@dataclass
class Reference:
    """A bibliography entry with its id and full text."""
    id: str = ""
    text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text}


@dataclass
class SentenceCollection:
    """
    Ordered sentences of one extraction scope.

    Attributes:
        sentences: Sentences in document order
    """
    sentences: List[ArticleSentence] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.sentences)

    def __iter__(self):
        return iter(self.sentences)

    @property
    def sections(self) -> List[str]:
        """Unique section titles in order of first appearance."""
        seen: Dict[str, None] = {}
        for sentence in self.sentences:
            seen.setdefault(sentence.section, None)
        return list(seen)

    def get_sentences_by_section(self, section: str) -> List[ArticleSentence]:
        """Get all sentences from a specific section."""
        return [s for s in self.sentences if s.section == section]

    def get_section_stats(self) -> Dict[str, int]:
        """Get sentence count statistics per section."""
        return dict(Counter(s.section for s in self.sentences))

    def get_sentences_citing(self, reference_id: str) -> List[ArticleSentence]:
        """Get the sentences that cite a given bibliography entry."""
        return [s for s in self.sentences if reference_id in s.referred_citation_ids]

    def to_dict(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in self.sentences]


class ArticleAbstract(SentenceCollection):
    """Sentences of the first abstract of an article."""


class ArticleFullText(SentenceCollection):
    """Sentences of the body of an article."""


@dataclass
class ArticleExtraction:
    """
    Everything extracted from one article.

    Attributes:
        metadata: Bibliographic fields (title, journal, ids, pages, date)
        authors: Article authors
        abstract: Abstract sentences
        full_text: Body sentences
        figures: Figures of the whole document
        tables: Tables of the whole document
        references: Bibliography entries
    """
    metadata: Dict[str, Any]
    authors: List[Author] = field(default_factory=list)
    abstract: ArticleAbstract = field(default_factory=ArticleAbstract)
    full_text: ArticleFullText = field(default_factory=ArticleFullText)
    figures: List[Figure] = field(default_factory=list)
    tables: List[Table] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "metadata": dict(self.metadata),
            "authors": [a.to_dict() for a in self.authors],
            "abstract": self.abstract.to_dict(),
            "full_text": self.full_text.to_dict(),
            "figures": [f.to_dict() for f in self.figures],
            "tables": [t.to_dict() for t in self.tables],
            "references": [r.to_dict() for r in self.references],
        }
