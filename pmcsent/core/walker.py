"""
Structural walker turning an article tree into sentence records.

The walker recurses an abstract or body element and emits one
ArticleSentence per segmented sentence, in document order. Section and
subsection titles are threaded down the recursion as an immutable state
value: a title updates the state seen by its later siblings and their
descendants, never the state of the enclosing container. Only two
titles are captured along a path (the first becomes the section, the
second the subsection); deeper titles are ignored.

The per-scope sentence counter is the length of the accumulator list,
so every call to :meth:`StructuralWalker.walk` starts again at 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from ..models.sentence import NO_SECTION, NO_SUBSECTION, ArticleSentence
from ..utils.exceptions import log_exception
from .nlp import SentenceAnalyzer
from .references import CITATION_PLACEHOLDER, ELIDED_KINDS, encode_paragraph, extract_references
from .scoring import DemographicScorer
from .tree import element_children, node_kind, text_content


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _WalkState:
    section: str
    subsection: str
    no_section: str
    no_subsection: str

    def with_title(self, title: str) -> "_WalkState":
        if self.section == self.no_section:
            return replace(self, section=title)
        if self.subsection == self.no_subsection:
            return replace(self, subsection=title)
        return self


class StructuralWalker:
    """
    Recursive sentence extractor for abstract and body trees.

    Attributes:
        segmenter: Object with a ``split(annotated) -> List[str]`` method
        analyzer: Optional analyzer bound to every emitted sentence
        scorer: Optional scorer bound to every emitted sentence
        citation_placeholder: Token replacing citations in redacted text
        no_section: Sentinel section title
        no_subsection: Sentinel subsection title
    """

    def __init__(self, segmenter, analyzer: Optional[SentenceAnalyzer] = None,
                 scorer: Optional[DemographicScorer] = None,
                 citation_placeholder: str = CITATION_PLACEHOLDER,
                 no_section: str = NO_SECTION, no_subsection: str = NO_SUBSECTION) -> None:
        self.segmenter = segmenter
        self.analyzer = analyzer
        self.scorer = scorer
        self.citation_placeholder = citation_placeholder
        self.no_section = no_section
        self.no_subsection = no_subsection

    def walk(self, root) -> List[ArticleSentence]:
        """
        Extract the sentences under one root element.

        Args:
            root: Abstract or body element

        Returns:
            Sentences in document order, indexed from 0
        """
        return self.walk_many([root])

    def walk_many(self, roots: Iterable) -> List[ArticleSentence]:
        """
        Extract the sentences under several roots sharing one index scope.

        Args:
            roots: Elements walked in order

        Returns:
            Sentences in document order, indexed from 0
        """
        sentences: List[ArticleSentence] = []
        state = _WalkState(self.no_section, self.no_subsection, self.no_section, self.no_subsection)
        for root in roots:
            try:
                self._visit(root, state, sentences)
            except Exception as e:
                log_exception(log, e, "Sentence extraction aborted for element")
        return sentences

    def _visit(self, node, state: _WalkState, out: List[ArticleSentence]) -> _WalkState:
        """Visit a node and return the state its later siblings inherit."""
        kind = node_kind(node)

        if kind == "title":
            return state.with_title(text_content(node).strip())

        if kind == "p":
            self._emit_paragraph(node, state, out)
        elif kind and kind not in ELIDED_KINDS:
            # sec, abstract, body and any other container
            child_state = state
            for child in element_children(node):
                child_state = self._visit(child, child_state, out)
        return state

    def _emit_paragraph(self, paragraph, state: _WalkState, out: List[ArticleSentence]) -> None:
        try:
            pieces = self.segmenter.split(encode_paragraph(paragraph))
        except Exception as e:
            log_exception(log, e, "Paragraph segmentation failed")
            return

        total = len(pieces)
        for index, piece in enumerate(pieces):
            refs = extract_references(piece, self.citation_placeholder)
            out.append(ArticleSentence(
                text=refs.text,
                citation_replaced_text=refs.citation_replaced_text,
                index_in_paragraph=index,
                total_in_paragraph=total,
                index_in_document=len(out),
                section=state.section,
                subsection=state.subsection,
                referred_figure_ids=refs.figure_ids,
                referred_table_ids=refs.table_ids,
                referred_citation_ids=refs.citation_ids,
                analyzer=self.analyzer,
                scorer=self.scorer,
            ))
