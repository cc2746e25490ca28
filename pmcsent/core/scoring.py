"""
Demographic relevance scoring for pmcsent.

This module scores sentences for how likely they are to describe a
study population. The signal is a numeral attached to a noun by the
numeral-modifier dependency relation ("enrolled 45 patients"). Each
such construction scores a point, or the configured base weight when
the quantified noun is a demographic keyword. Repetitions of a keyword
within a sentence are capped.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from ..models.scoring import (
    CORPUS_DIVISOR,
    DEFAULT_ANCHORS,
    DEFAULT_EXCLUSIONS,
    DEFAULT_KEYWORD_RULES,
    DEMOGRAPHICS_MARKER,
    FIXED_POLICY,
    NUMMOD_RELATION,
    SECTION_BONUS,
    WEIGHTED_POLICY,
    KeywordRule,
    SentenceScore,
    rules_from_table,
)
from ..models.sentence import ArticleSentence
from ..utils.config import Config


log = logging.getLogger(__name__)


class DemographicScorer:
    """
    Scoring engine for demographic relevance.

    Two policies are provided:
    - fixed weights (:meth:`score`), with a flat bonus for sentences in a
      Demographics section
    - corpus-frequency weights (:meth:`score_with_counts`), where every
      contribution is scaled by how common the numeral is in a cluster

    Attributes:
        keyword_rules: Anchor lemma -> (base weight, occurrence cap)
        exclusions: Numeral lemmas ignored as candidates
        anchors: Lemmas used by the anchor pre-filter
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        """
        Initialize the scorer.

        Args:
            config: Optional configuration object
        """
        self.config = config
        self.keyword_rules: Dict[str, KeywordRule] = dict(DEFAULT_KEYWORD_RULES)
        self.exclusions: FrozenSet[str] = DEFAULT_EXCLUSIONS
        self.anchors: FrozenSet[str] = DEFAULT_ANCHORS
        self.numeral_relation = NUMMOD_RELATION
        self.section_marker = DEMOGRAPHICS_MARKER
        self.section_bonus = SECTION_BONUS
        self.corpus_divisor = CORPUS_DIVISOR

        if self.config is not None:
            self._apply_config(self.config)

        log.debug("Demographic scorer initialized")

    def _apply_config(self, config: Config) -> None:
        scoring = config.get_scoring_config()
        self.keyword_rules = rules_from_table(config.get_keyword_weights())
        self.exclusions = frozenset(scoring.get("exclusions", self.exclusions))
        self.anchors = frozenset(scoring.get("anchors", self.anchors))
        self.numeral_relation = scoring.get("numeral_relation", self.numeral_relation)
        self.section_marker = scoring.get("section_marker", self.section_marker)
        self.section_bonus = scoring.get("section_bonus", self.section_bonus)
        self.corpus_divisor = float(scoring.get("corpus_divisor", self.corpus_divisor))

    def candidate_indices(self, lemmas: Sequence[str],
                          dependency_labels: Sequence[Optional[str]]) -> List[int]:
        """
        Find informative numeral modifiers.

        A position qualifies when its incoming relation is the numeral
        modifier, its lemma is not an excluded numeral and a token
        follows it.

        Args:
            lemmas: Lemma per token
            dependency_labels: Incoming relation per token, None when absent

        Returns:
            Qualifying token positions, in order
        """
        last = len(lemmas) - 1
        return [
            index for index, label in enumerate(dependency_labels)
            if label is not None
            and label == self.numeral_relation
            and index < last
            and lemmas[index] not in self.exclusions
        ]

    def has_anchors(self, lemmas: Iterable[str]) -> bool:
        """Cheap pre-filter: does any lemma name a demographic anchor?"""
        return any(lemma in self.anchors for lemma in lemmas)

    def in_demographics_section(self, section: str, subsection: str) -> bool:
        return self.section_marker in section or self.section_marker in subsection

    def score(self, lemmas: Sequence[str], dependency_labels: Sequence[Optional[str]],
              section: str = "", subsection: str = "") -> int:
        """
        Score a sentence under the fixed-weight policy.

        Args:
            lemmas: Lemma per token
            dependency_labels: Incoming relation per token
            section: Section title of the sentence
            subsection: Subsection title of the sentence

        Returns:
            Non-negative demographic score
        """
        score = 0
        if self.in_demographics_section(section, subsection):
            score += self.section_bonus

        seen: Dict[str, int] = {}
        for index in self.candidate_indices(lemmas, dependency_labels):
            anchor = lemmas[index + 1]
            rule = self.keyword_rules.get(anchor)
            if rule is None:
                score += 1
                continue
            # read before increment
            count = seen.get(anchor, 0)
            if count < rule.cap:
                score += rule.base
            seen[anchor] = count + 1

        return score

    def score_with_counts(self, lemmas: Sequence[str], dependency_labels: Sequence[Optional[str]],
                          numeral_counts: Mapping[str, int]) -> float:
        """
        Score a sentence under the corpus-frequency-weighted policy.

        Every contribution is multiplied by ``1 + count / divisor`` where
        count is the cluster-wide frequency of the numeral lemma. No
        section bonus applies.

        Args:
            lemmas: Lemma per token
            dependency_labels: Incoming relation per token
            numeral_counts: Cluster-wide count per numeral lemma

        Returns:
            Non-negative weighted score
        """
        score = 0.0
        seen: Dict[str, int] = {}
        for index in self.candidate_indices(lemmas, dependency_labels):
            multiplier = 1 + numeral_counts.get(lemmas[index], 0) / self.corpus_divisor
            anchor = lemmas[index + 1]
            rule = self.keyword_rules.get(anchor)
            if rule is None:
                score += multiplier
                continue
            count = seen.get(anchor, 0)
            if count < rule.cap:
                score += multiplier * rule.base
            seen[anchor] = count + 1

        return score

    def build_numeral_counts(self, sentences: Iterable[ArticleSentence]) -> Dict[str, int]:
        """
        Count numeral lemmas at candidate positions across a cluster of
        sentences, as input for the weighted policy.

        Args:
            sentences: Sentences with a bound analyzer

        Returns:
            Mapping of numeral lemma to occurrence count
        """
        counts: Counter = Counter()
        for sentence in sentences:
            lemmas = sentence.lemmas
            for index in self.candidate_indices(lemmas, sentence.dependency_labels):
                counts[lemmas[index]] += 1
        return dict(counts)

    def rank(self, sentences: Iterable[ArticleSentence],
             numeral_counts: Optional[Mapping[str, int]] = None,
             top_k: Optional[int] = None) -> List[SentenceScore]:
        """
        Rank sentences by demographic score.

        Only sentences passing the anchor pre-filter, or sitting in a
        Demographics section, are scored. Sentences scoring zero are left
        out. Ties keep document order.

        Args:
            sentences: Candidate sentences
            numeral_counts: Use the weighted policy with these counts
            top_k: Optional maximum number of results

        Returns:
            SentenceScore list sorted by descending score
        """
        results: List[SentenceScore] = []
        for sentence in sentences:
            if not (self.has_anchors(sentence.lemmas)
                    or self.in_demographics_section(sentence.section, sentence.subsection)):
                continue

            if numeral_counts is None:
                value = self.score(sentence.lemmas, sentence.dependency_labels,
                                   sentence.section, sentence.subsection)
                policy = FIXED_POLICY
            else:
                value = self.score_with_counts(sentence.lemmas, sentence.dependency_labels,
                                               numeral_counts)
                policy = WEIGHTED_POLICY

            if value > 0:
                results.append(SentenceScore(sentence, value, policy))

        results.sort(key=lambda s: s.score, reverse=True)
        if top_k is not None:
            results = results[:top_k]

        log.info(f"Ranked {len(results)} demographic sentences")
        return results


def build_numeral_counts(sentences: Iterable[ArticleSentence],
                         scorer: Optional[DemographicScorer] = None) -> Dict[str, int]:
    """Module-level shortcut for :meth:`DemographicScorer.build_numeral_counts`."""
    return (scorer or DemographicScorer()).build_numeral_counts(sentences)
