"""
Data models for pmcsent.

This package contains the sentence record, the article entities and
the scoring structures used throughout pmcsent.
"""

from .sentence import ArticleSentence, SentenceAnalysis
from .article import (
    ArticleAbstract,
    ArticleExtraction,
    ArticleFullText,
    Author,
    Figure,
    PublicationDate,
    Reference,
    Table,
)
from .scoring import KeywordRule, SentenceScore

__all__ = [
    "ArticleSentence",
    "SentenceAnalysis",
    "ArticleAbstract",
    "ArticleExtraction",
    "ArticleFullText",
    "Author",
    "Figure",
    "PublicationDate",
    "Reference",
    "Table",
    "KeywordRule",
    "SentenceScore",
]
