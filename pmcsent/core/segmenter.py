"""
Sentence segmentation of annotated paragraphs.

Boundaries come from spaCy, computed over the display projection of the
paragraph (markers replaced by their display text) so that markup does
not confuse the tokenizer. Boundaries are then mapped back onto the
annotated string; any boundary that would fall inside a marker is
dropped, which keeps every marker whole within one sentence.
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Tuple

from spacy.language import Language

from .references import iter_markers


log = logging.getLogger(__name__)


class _Segment(NamedTuple):
    display_start: int
    display_end: int
    start: int
    end: int
    is_marker: bool


def _project(annotated: str) -> Tuple[str, List[_Segment]]:
    """Build the display text and the offset map back to the annotated string."""
    segments: List[_Segment] = []
    parts: List[str] = []
    pos = 0
    display_pos = 0

    for marker in iter_markers(annotated):
        if marker.start > pos:
            plain = annotated[pos:marker.start]
            segments.append(_Segment(display_pos, display_pos + len(plain), pos, marker.start, False))
            parts.append(plain)
            display_pos += len(plain)

        inner = annotated[marker.inner_start:marker.inner_end]
        segments.append(_Segment(display_pos, display_pos + len(inner), marker.start, marker.end, True))
        parts.append(inner)
        display_pos += len(inner)
        pos = marker.end

    if pos < len(annotated):
        plain = annotated[pos:]
        segments.append(_Segment(display_pos, display_pos + len(plain), pos, len(annotated), False))
        parts.append(plain)

    return "".join(parts), segments


def _to_annotated_offset(display_offset: int, segments: List[_Segment], length: int) -> Optional[int]:
    """Map a display offset to the annotated string; None inside a marker."""
    for seg in segments:
        if seg.is_marker:
            if display_offset == seg.display_start:
                return seg.start
            if seg.display_start < display_offset < seg.display_end:
                return None
        elif seg.display_start <= display_offset <= seg.display_end:
            return seg.start + (display_offset - seg.display_start)
    return length


class SentenceSegmenter:
    """
    Splits annotated paragraph strings into annotated sentence strings.

    Attributes:
        nlp: spaCy pipeline with a sentence boundary component
    """

    def __init__(self, nlp: Language) -> None:
        self.nlp = nlp

    def split(self, annotated: str) -> List[str]:
        """
        Split an annotated paragraph into sentences.

        Args:
            annotated: Paragraph text in the marker grammar

        Returns:
            Ordered, whitespace-stripped, non-empty sentence strings
        """
        if not annotated or not annotated.strip():
            return []

        display, segments = _project(annotated)
        doc = self.nlp(display)

        cuts: List[int] = []
        for sent in list(doc.sents)[1:]:
            offset = _to_annotated_offset(sent.start_char, segments, len(annotated))
            if offset is None:
                log.debug(f"Dropped sentence boundary inside a reference at {sent.start_char}")
                continue
            cuts.append(offset)

        sentences: List[str] = []
        previous = 0
        for cut in cuts + [len(annotated)]:
            piece = annotated[previous:cut].strip()
            if piece:
                sentences.append(piece)
            previous = cut
        return sentences
