"""
Core package for pmcsent.

This module provides article access, sentence extraction, sentence
segmentation and demographic scoring.
"""

from .analyzer import ArticleAnalyzer
from .article import Article
from .scoring import DemographicScorer
from .segmenter import SentenceSegmenter
from .walker import StructuralWalker

__all__ = [
    "ArticleAnalyzer",
    "Article",
    "DemographicScorer",
    "SentenceSegmenter",
    "StructuralWalker",
]
