"""
Sentence models for pmcsent.

This module defines the sentence record produced by the structural
walker and the per-sentence NLP analysis it lazily attaches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property, lru_cache
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.nlp import SentenceAnalyzer
    from ..core.scoring import DemographicScorer


NO_SECTION = "No Section"
NO_SUBSECTION = "No Sub-section"


@lru_cache(maxsize=1)
def _default_scorer() -> "DemographicScorer":
    from ..core.scoring import DemographicScorer
    return DemographicScorer()


@dataclass(frozen=True)
class SentenceAnalysis:
    """
    Token-level NLP features of one sentence.

    All sequences are parallel and indexed by token position.

    Attributes:
        tokens: Token texts
        lemmas: Token lemmas
        dependency_labels: Incoming dependency relation per token, or None
        pos_tags: Coarse part-of-speech tags
        ner_tags: Named entity type per token ("O" outside entities)
    """
    tokens: List[str] = field(default_factory=list)
    lemmas: List[str] = field(default_factory=list)
    dependency_labels: List[Optional[str]] = field(default_factory=list)
    pos_tags: List[str] = field(default_factory=list)
    ner_tags: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate that all token sequences line up."""
        lengths = {len(self.tokens), len(self.lemmas), len(self.dependency_labels),
                   len(self.pos_tags), len(self.ner_tags)}
        if len(lengths) > 1:
            raise ValueError("Token sequences of a sentence analysis must have equal length")

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class ArticleSentence:
    """
    Represents a sentence of a PMC article.

    Records are frozen once built by the structural walker. NLP features
    (lemmas, dependency labels, numeral-modifier indices) are computed on
    first access through the bound analyzer and cached for the lifetime of
    the record; recomputation is idempotent.

    Attributes:
        text: Display text with reference markers removed
        citation_replaced_text: Text with every citation replaced by a placeholder
        index_in_paragraph: Zero-based position inside the containing paragraph
        total_in_paragraph: Number of sentences of the containing paragraph
        index_in_document: Zero-based position inside the abstract or full text
        section: Section title, or "No Section"
        subsection: Subsection title, or "No Sub-section"
        referred_figure_ids: Figure ids referenced by the sentence, in order
        referred_table_ids: Table ids referenced by the sentence, in order
        referred_citation_ids: Bibliography ids referenced by the sentence, in order
    """
    text: str
    citation_replaced_text: str = ""
    index_in_paragraph: int = 0
    total_in_paragraph: int = 0
    index_in_document: int = 0
    section: str = NO_SECTION
    subsection: str = NO_SUBSECTION
    referred_figure_ids: Tuple[str, ...] = ()
    referred_table_ids: Tuple[str, ...] = ()
    referred_citation_ids: Tuple[str, ...] = ()
    analyzer: Optional["SentenceAnalyzer"] = field(default=None, repr=False, compare=False)
    scorer: Optional["DemographicScorer"] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate sentence data after initialization."""
        if self.index_in_paragraph < 0:
            raise ValueError("Paragraph index must be non-negative")
        if self.index_in_document < 0:
            raise ValueError("Document index must be non-negative")
        if self.total_in_paragraph < 0:
            raise ValueError("Paragraph sentence count must be non-negative")
        for name in ("referred_figure_ids", "referred_table_ids", "referred_citation_ids"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @property
    def refers_figure(self) -> bool:
        return bool(self.referred_figure_ids)

    @property
    def refers_table(self) -> bool:
        return bool(self.referred_table_ids)

    @property
    def refers_citation(self) -> bool:
        return bool(self.referred_citation_ids)

    @cached_property
    def analysis(self) -> SentenceAnalysis:
        """NLP analysis of the display text, empty when no analyzer is bound."""
        if self.analyzer is None:
            return SentenceAnalysis()
        return self.analyzer.analyze(self.text)

    @property
    def lemmas(self) -> List[str]:
        return self.analysis.lemmas

    @property
    def dependency_labels(self) -> List[Optional[str]]:
        return self.analysis.dependency_labels

    @property
    def ner_tags(self) -> List[str]:
        return self.analysis.ner_tags

    @cached_property
    def nummod_indices(self) -> List[int]:
        """Token positions of informative numeral modifiers."""
        return self._scorer().candidate_indices(self.lemmas, self.dependency_labels)

    @property
    def nummod_count(self) -> int:
        return len(self.nummod_indices)

    def has_anchors(self) -> bool:
        """Check whether any lemma is a demographic anchor."""
        return self._scorer().has_anchors(self.lemmas)

    def demographic_score(self) -> int:
        """Score the sentence under the fixed-weight policy."""
        return self._scorer().score(self.lemmas, self.dependency_labels,
                                    self.section, self.subsection)

    def demographic_score_with_counts(self, numeral_counts: Dict[str, int]) -> float:
        """
        Score the sentence under the corpus-frequency-weighted policy.

        Args:
            numeral_counts: Cluster-wide occurrence count per numeral lemma

        Returns:
            Weighted demographic score
        """
        return self._scorer().score_with_counts(self.lemmas, self.dependency_labels,
                                                numeral_counts)

    def _scorer(self) -> "DemographicScorer":
        return self.scorer or _default_scorer()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "text": self.text,
            "citation_replaced_text": self.citation_replaced_text,
            "index_in_paragraph": self.index_in_paragraph,
            "total_in_paragraph": self.total_in_paragraph,
            "index_in_document": self.index_in_document,
            "section": self.section,
            "subsection": self.subsection,
            "referred_figure_ids": list(self.referred_figure_ids),
            "referred_table_ids": list(self.referred_table_ids),
            "referred_citation_ids": list(self.referred_citation_ids),
            "refers_figure": self.refers_figure,
            "refers_table": self.refers_table,
            "refers_citation": self.refers_citation,
        }
