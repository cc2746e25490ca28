"""
spaCy adapter for pmcsent.

Provides pipeline loading with a blank-model fallback and the
per-sentence analyzer producing lemmas, dependency labels, POS and NER
tags for the demographic scorer.
"""

from __future__ import annotations

import logging
from functools import lru_cache

import spacy
from spacy.language import Language

from ..models.sentence import SentenceAnalysis
from ..utils.exceptions import DependencyError


log = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def load_pipeline(model_name: str = "en_core_web_sm", fallback_to_blank: bool = True) -> Language:
    """
    Load a spaCy pipeline able to split sentences.

    Args:
        model_name: Installed spaCy model to load
        fallback_to_blank: Use ``spacy.blank("en")`` if the model is missing

    Returns:
        spaCy Language object

    Raises:
        DependencyError: If the model is missing and fallback is disabled
    """
    try:
        nlp = spacy.load(model_name)
        log.info(f"Loaded spaCy {model_name}")
    except OSError as e:
        if not fallback_to_blank:
            raise DependencyError(f"spaCy model is not installed: {e}", model_name)
        log.warning(f"spaCy model {model_name} not available; using blank English pipeline")
        nlp = spacy.blank("en")

    if "parser" not in nlp.pipe_names and "senter" not in nlp.pipe_names:
        nlp.add_pipe("sentencizer")
    return nlp


class SentenceAnalyzer:
    """
    Token-level analysis of sentence text.

    With a blank pipeline there is no lemmatizer or parser: lemmas fall
    back to the lower-cased token text and every dependency label is
    absent.
    """

    def __init__(self, nlp: Language) -> None:
        self.nlp = nlp

    def analyze(self, text: str) -> SentenceAnalysis:
        """
        Analyze one sentence.

        Args:
            text: Display text of the sentence

        Returns:
            SentenceAnalysis with parallel token sequences
        """
        if not text or not text.strip():
            return SentenceAnalysis()

        doc = self.nlp(text)
        return SentenceAnalysis(
            tokens=[tok.text for tok in doc],
            lemmas=[tok.lemma_ or tok.lower_ for tok in doc],
            dependency_labels=[tok.dep_ or None for tok in doc],
            pos_tags=[tok.pos_ for tok in doc],
            ner_tags=[tok.ent_type_ or "O" for tok in doc],
        )
