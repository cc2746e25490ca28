"""
Scoring models for pmcsent.

This module defines the keyword tables used by the demographic scorer
and the data structure holding a scored sentence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Mapping, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .sentence import ArticleSentence


NUMMOD_RELATION = "nummod"
DEMOGRAPHICS_MARKER = "emographics"
SECTION_BONUS = 5
CORPUS_DIVISOR = 10.0

FIXED_POLICY = "fixed"
WEIGHTED_POLICY = "weighted"


@dataclass(frozen=True)
class KeywordRule:
    """
    Weighting rule for one anchor lemma.

    Attributes:
        base: Points added for each counted occurrence
        cap: Number of occurrences per sentence that are counted
    """
    base: int
    cap: int

    def __post_init__(self) -> None:
        """Validate rule values."""
        if self.base < 0:
            raise ValueError("Keyword base weight must be non-negative")
        if self.cap < 0:
            raise ValueError("Keyword cap must be non-negative")


DEFAULT_KEYWORD_RULES: Dict[str, KeywordRule] = {
    "patient": KeywordRule(5, 1),
    "year": KeywordRule(5, 2),
    "male": KeywordRule(5, 1),
    "female": KeywordRule(5, 1),
    "subject": KeywordRule(5, 1),
    "individual": KeywordRule(5, 1),
}

# Numerals too generic to be informative on their own
DEFAULT_EXCLUSIONS: FrozenSet[str] = frozenset({"±", "1", "®", "one"})

DEFAULT_ANCHORS: FrozenSet[str] = frozenset({
    "patient", "age", "aged", "male", "female", "subject", "individual",
})


def rules_from_table(table: Mapping[str, Sequence[int]]) -> Dict[str, KeywordRule]:
    """
    Build keyword rules from a ``lemma -> [base, cap]`` table.

    Args:
        table: Keyword table as stored in configuration

    Returns:
        Mapping of lemma to KeywordRule
    """
    return {lemma: KeywordRule(int(entry[0]), int(entry[1])) for lemma, entry in table.items()}


@dataclass
class SentenceScore:
    """
    Demographic score of a single sentence.

    Attributes:
        sentence: The scored sentence
        score: Demographic score (int for the fixed policy, float when weighted)
        policy: Either "fixed" or "weighted"
    """
    sentence: "ArticleSentence"
    score: float
    policy: str = FIXED_POLICY

    def __post_init__(self) -> None:
        """Validate score data."""
        if not isinstance(self.score, (int, float)):
            raise ValueError("score must be a number")
        if self.score < 0:
            raise ValueError("score must be non-negative")
        if self.policy not in (FIXED_POLICY, WEIGHTED_POLICY):
            raise ValueError(f"Unknown scoring policy: {self.policy}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "index_in_document": self.sentence.index_in_document,
            "section": self.sentence.section,
            "subsection": self.sentence.subsection,
            "text": self.sentence.text,
            "score": round(self.score, 3),
            "policy": self.policy,
        }
