"""
pmcsent - sentence-level extraction and demographic scoring for PMC articles.

This package turns PubMed Central JATS articles into ordered sentence
records carrying section, position and cross-reference metadata, and
scores sentences for how likely they are to describe a study population.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"

from .core.analyzer import ArticleAnalyzer
from .core.article import Article
from .core.scoring import DemographicScorer
from .models.sentence import ArticleSentence
from .models.scoring import SentenceScore

__all__ = [
    "ArticleAnalyzer",
    "Article",
    "DemographicScorer",
    "ArticleSentence",
    "SentenceScore",
]
