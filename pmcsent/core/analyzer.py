"""
Main analyzer class for pmcsent.

This module provides the ArticleAnalyzer class that orchestrates the
pipeline from loading an article to ranking its demographic sentences
and writing reports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..models.article import ArticleExtraction
from ..models.scoring import SentenceScore
from ..utils.config import Config
from ..utils.exceptions import PMCSentError, ProcessingError
from ..utils.validators import InputValidator
from .article import Article
from .nlp import SentenceAnalyzer, load_pipeline
from .retrieval import EFETCH_URL
from .scoring import DemographicScorer
from .segmenter import SentenceSegmenter
from .walker import StructuralWalker


log = logging.getLogger(__name__)


class ArticleAnalyzer:
    """
    High-level interface for extracting and scoring PMC articles.

    Attributes:
        config: Application configuration
        walker: Sentence extraction engine
        scorer: Demographic scoring engine
    """

    def __init__(self, config: Optional[Config] = None, nlp=None) -> None:
        """
        Initialize the analyzer.

        Args:
            config: Optional configuration object. If not provided,
                   default configuration will be used.
            nlp: Optional preloaded spaCy pipeline, overriding the
                 configured model
        """
        self.config = config or Config()

        if nlp is None:
            nlp_config = self.config.get_nlp_model_config()
            nlp = load_pipeline(nlp_config.get("spacy_model", "en_core_web_sm"),
                                nlp_config.get("fallback_to_blank_spacy", True))
        self.nlp = nlp

        extraction = self.config.get_extraction_config()
        self.scorer = DemographicScorer(self.config)
        self.walker = StructuralWalker(
            SentenceSegmenter(nlp),
            analyzer=SentenceAnalyzer(nlp),
            scorer=self.scorer,
            citation_placeholder=extraction.get("citation_placeholder", "citation"),
            no_section=extraction.get("no_section", "No Section"),
            no_subsection=extraction.get("no_subsection", "No Sub-section"),
        )

        log.info("Article analyzer initialized")

    def load_article(self, path: Union[str, Path]) -> Article:
        """
        Load an article from a local XML file.

        Raises:
            ValidationError: If the path is invalid
            FileFormatError: If the file is not XML
        """
        extensions = self.config.get_extraction_config().get("supported_extensions")
        return Article.from_file(path, walker=self.walker, extensions=extensions)

    def fetch_article(self, pmc_id: Union[str, int], delay: Optional[float] = None) -> Article:
        """
        Fetch an article from PubMed Central.

        Args:
            pmc_id: PMC identifier
            delay: Seconds to wait before connecting; defaults to configuration

        Raises:
            ValidationError: If the identifier is malformed
            NetworkError: If retrieval fails
        """
        retrieval = self.config.get_retrieval_config()
        return Article.from_pmc_id(
            pmc_id,
            delay=retrieval.get("delay_seconds", 0.0) if delay is None else delay,
            timeout=retrieval.get("timeout_seconds", 30),
            walker=self.walker,
            base_url=retrieval.get("efetch_url", EFETCH_URL),
        )

    def extract(self, article: Article) -> ArticleExtraction:
        """
        Extract metadata, sentences and entity listings from an article.

        Each part degrades independently: a failing accessor yields its
        default without affecting the others.
        """
        extraction = ArticleExtraction(
            metadata=article.get_metadata(),
            authors=article.get_authors(),
            abstract=article.get_abstract(),
            full_text=article.get_full_text(),
            figures=article.get_figures(),
            tables=article.get_tables(),
            references=article.get_references(),
        )
        log.info(f"Extracted {len(extraction.abstract)} abstract and "
                 f"{len(extraction.full_text)} full text sentences from {article.source or 'article'}")
        return extraction

    def cluster_numeral_counts(self, extractions: Sequence[ArticleExtraction]) -> Dict[str, int]:
        """Numeral lemma counts over the full text of a cluster of articles."""
        return self.scorer.build_numeral_counts(
            s for extraction in extractions for s in extraction.full_text
        )

    def score_demographics(self, extractions: Sequence[ArticleExtraction], weighted: bool = False,
                           top_k: Optional[int] = None) -> List[SentenceScore]:
        """
        Rank the full text sentences of a cluster of articles.

        Args:
            extractions: Extracted articles forming the cluster
            weighted: Use the corpus-frequency-weighted policy, with numeral
                      counts built over the whole cluster
            top_k: Optional maximum number of results

        Returns:
            SentenceScore list sorted by descending score

        Raises:
            ProcessingError: If scoring fails
        """
        try:
            sentences = [s for extraction in extractions for s in extraction.full_text]
            counts = self.cluster_numeral_counts(extractions) if weighted else None
            return self.scorer.rank(sentences, numeral_counts=counts, top_k=top_k)
        except PMCSentError:
            raise
        except Exception as e:
            raise ProcessingError("Failed to score demographics", "score_demographics", str(e))

    def generate_report(self, extraction: ArticleExtraction, ranking: List[SentenceScore],
                        output_dir: Union[str, Path], stem: str = "article") -> Dict[str, str]:
        """
        Write the extraction and its demographic ranking as JSON.

        Args:
            extraction: Extracted article
            ranking: Demographic ranking of the article's sentences
            output_dir: Directory to save reports
            stem: File name prefix

        Returns:
            Dictionary mapping report types to file paths
        """
        output_dir = InputValidator.validate_directory_path(output_dir, must_exist=False,
                                                            create_if_missing=True)
        reports = {}

        sentences_file = output_dir / f"{stem}_sentences.json"
        self._save_json(sentences_file, extraction.to_dict())
        reports["sentences"] = str(sentences_file)

        demographics_file = output_dir / f"{stem}_demographics.json"
        self._save_json(demographics_file, [score.to_dict() for score in ranking])
        reports["demographics"] = str(demographics_file)

        log.info(f"Reports generated in {output_dir}")
        return reports

    def _save_json(self, file_path: Path, data: Any) -> None:
        """Save data to JSON file."""
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
