"""
Inline cross-reference encoding and extraction.

A paragraph's mixed content is flattened into one annotated string in
which every cross-reference becomes a marker of the exact shape::

    <xref ref-type="TYPE" rid="ID">DISPLAY</xref>

Figures and tables nested in the paragraph are dropped. The annotated
string is what gets segmented into sentences; each sentence is then run
through :func:`extract_references` to recover its display text, its
citation-redacted text and the ids it refers to.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Tuple

from .tree import node_kind, text_content


FIGURE_REF_TYPE = "fig"
TABLE_REF_TYPE = "table"
CITATION_REF_TYPE = "bibr"
CITATION_PLACEHOLDER = "citation"

ELIDED_KINDS = frozenset({"fig", "table-wrap"})

MARKER_RE = re.compile(r'<xref\b([^>]*)>(.*?)</xref>', re.DOTALL)
MARKER_TAG_RE = re.compile(r'</?xref\b[^>]*>')
REF_TYPE_ATTR_RE = re.compile(r'\bref-type="([^"]*)"')
RID_ATTR_RE = re.compile(r'\brid="([^"]*)"')


def format_marker(ref_type: str, rid: str, display: str) -> str:
    """Serialize one cross-reference in the marker grammar."""
    return f'<xref ref-type="{ref_type}" rid="{rid}">{display}</xref>'


def encode_paragraph(paragraph) -> str:
    """
    Encode the content of a paragraph element as an annotated string.

    Args:
        paragraph: lxml element of kind ``p``

    Returns:
        Paragraph text with cross-references encoded as markers
    """
    return _encode_children(paragraph)


def _encode_children(node) -> str:
    parts = [node.text or ""] if isinstance(node.tag, str) else []
    for child in node:
        parts.append(_encode_node(child))
        # the tail is paragraph text following the child, kept even for elided blocks
        parts.append(child.tail or "")
    return "".join(parts)


def _encode_node(node) -> str:
    kind = node_kind(node)
    if not kind:
        return ""
    if kind == "xref":
        return format_marker(node.get("ref-type", ""), node.get("rid", ""), text_content(node))
    if kind in ELIDED_KINDS:
        return ""
    return _encode_children(node)


class MarkerSpan(NamedTuple):
    """Location of one marker inside an annotated string."""
    start: int
    end: int
    inner_start: int
    inner_end: int
    ref_type: str
    rid: str


def _attribute(pattern: re.Pattern, attributes: str) -> str:
    match = pattern.search(attributes)
    return match.group(1) if match else ""


def iter_markers(annotated: str) -> Iterator[MarkerSpan]:
    """
    Scan an annotated string for markers.

    Missing or malformed ``ref-type`` / ``rid`` attributes yield empty
    strings.
    """
    for match in MARKER_RE.finditer(annotated):
        attributes = match.group(1)
        yield MarkerSpan(
            start=match.start(),
            end=match.end(),
            inner_start=match.start(2),
            inner_end=match.end(2),
            ref_type=_attribute(REF_TYPE_ATTR_RE, attributes),
            rid=_attribute(RID_ATTR_RE, attributes),
        )


def strip_markers(annotated: str) -> str:
    """Remove marker tags, keeping the referenced display text."""
    return MARKER_TAG_RE.sub("", annotated)


def redact_citations(annotated: str, placeholder: str = CITATION_PLACEHOLDER) -> str:
    """
    Replace every citation marker, display text included, with a single
    placeholder token and strip all other markers to their display text.
    """
    def _replace(match: re.Match) -> str:
        ref_type = _attribute(REF_TYPE_ATTR_RE, match.group(1))
        if ref_type.lower() == CITATION_REF_TYPE:
            return placeholder
        return match.group(2)

    return strip_markers(MARKER_RE.sub(_replace, annotated))


@dataclass(frozen=True)
class ReferenceExtraction:
    """
    What a single annotated sentence yields.

    Attributes:
        text: Display text
        citation_replaced_text: Display text with citations redacted
        figure_ids: Referenced figure ids, in order of appearance
        table_ids: Referenced table ids, in order of appearance
        citation_ids: Referenced bibliography ids, in order of appearance
    """
    text: str
    citation_replaced_text: str
    figure_ids: Tuple[str, ...] = ()
    table_ids: Tuple[str, ...] = ()
    citation_ids: Tuple[str, ...] = ()

    @property
    def refers_figure(self) -> bool:
        return bool(self.figure_ids)

    @property
    def refers_table(self) -> bool:
        return bool(self.table_ids)

    @property
    def refers_citation(self) -> bool:
        return bool(self.citation_ids)


def extract_references(annotated: str, placeholder: str = CITATION_PLACEHOLDER) -> ReferenceExtraction:
    """
    Derive display text, redacted text and referenced ids from one
    annotated sentence. The result depends on the input string only.

    Args:
        annotated: Sentence text in the marker grammar
        placeholder: Token substituted for each citation

    Returns:
        ReferenceExtraction for the sentence
    """
    figures: List[str] = []
    tables: List[str] = []
    citations: List[str] = []

    for marker in iter_markers(annotated):
        ref_type = marker.ref_type.lower()
        if ref_type == FIGURE_REF_TYPE:
            figures.append(marker.rid)
        elif ref_type == TABLE_REF_TYPE:
            tables.append(marker.rid)
        elif ref_type == CITATION_REF_TYPE:
            citations.append(marker.rid)

    return ReferenceExtraction(
        text=strip_markers(annotated),
        citation_replaced_text=redact_citations(annotated, placeholder),
        figure_ids=tuple(figures),
        table_ids=tuple(tables),
        citation_ids=tuple(citations),
    )
