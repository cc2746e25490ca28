"""
Test suite for inline reference encoding and extraction.
"""

import pytest
from lxml import etree

from pmcsent.core.references import (
    encode_paragraph,
    extract_references,
    format_marker,
    iter_markers,
    redact_citations,
    strip_markers,
)


def paragraph(xml: str):
    return etree.fromstring(xml)


class TestEncodeParagraph:
    """Test cases for the reference encoder."""

    def test_plain_text(self):
        """Plain text is kept verbatim."""
        p = paragraph("<p>Obesity is common in adults.</p>")
        assert encode_paragraph(p) == "Obesity is common in adults."

    def test_xref_becomes_marker(self):
        """Cross-references are encoded with type, id and display text."""
        p = paragraph('<p>As shown before <xref ref-type="bibr" rid="B1">[1]</xref>.</p>')
        assert encode_paragraph(p) == 'As shown before <xref ref-type="bibr" rid="B1">[1]</xref>.'

    def test_xref_missing_attributes(self):
        """Absent attributes are encoded as empty strings."""
        p = paragraph("<p>See <xref>above</xref>.</p>")
        assert encode_paragraph(p) == 'See <xref ref-type="" rid="">above</xref>.'

    def test_xref_nested_markup_is_flattened(self):
        """The display text is the full text content of the xref."""
        p = paragraph('<p>See <xref ref-type="fig" rid="F1">Figure <bold>1A</bold></xref>.</p>')
        assert encode_paragraph(p) == 'See <xref ref-type="fig" rid="F1">Figure 1A</xref>.'

    def test_figure_and_table_are_elided(self):
        """Figures and tables inside a paragraph vanish with their text; tails stay."""
        p = paragraph(
            "<p>Before.<fig id='F1'><caption><p>Caption text.</p></caption></fig> Middle."
            "<table-wrap id='T1'><label>Table 1</label></table-wrap> After.</p>"
        )
        encoded = encode_paragraph(p)
        assert encoded == "Before. Middle. After."
        assert "Caption" not in encoded
        assert "Table 1" not in encoded

    def test_other_elements_are_recursed(self):
        """Inline formatting is unwrapped and its xrefs still encoded."""
        p = paragraph(
            '<p>Text in <italic>italic with <xref ref-type="table" rid="T2">Table 2</xref></italic> end.</p>'
        )
        assert encode_paragraph(p) == (
            'Text in italic with <xref ref-type="table" rid="T2">Table 2</xref> end.'
        )

    def test_comments_are_skipped(self):
        """Comments contribute nothing but their tail."""
        p = paragraph("<p>Before<!-- hidden --> after.</p>")
        assert encode_paragraph(p) == "Before after."

    def test_empty_paragraph(self):
        """An empty paragraph encodes to the empty string."""
        assert encode_paragraph(paragraph("<p/>")) == ""


class TestMarkers:
    """Test cases for marker scanning helpers."""

    def test_format_marker_grammar(self):
        """Attribute order and quoting are fixed."""
        assert format_marker("fig", "F1", "Figure 1") == '<xref ref-type="fig" rid="F1">Figure 1</xref>'

    def test_iter_markers(self):
        """Markers are found in order with their attributes."""
        text = ('A <xref ref-type="fig" rid="F1">Fig 1</xref> and '
                '<xref ref-type="bibr" rid="B3">3</xref>.')
        markers = list(iter_markers(text))
        assert [(m.ref_type, m.rid) for m in markers] == [("fig", "F1"), ("bibr", "B3")]
        assert text[markers[0].inner_start:markers[0].inner_end] == "Fig 1"

    def test_iter_markers_malformed_attributes(self):
        """Missing attributes default to empty strings."""
        markers = list(iter_markers('x <xref rid=F1>Fig</xref> y'))
        assert len(markers) == 1
        assert markers[0].ref_type == ""
        assert markers[0].rid == ""

    def test_strip_markers(self):
        """Tags are removed, display text is kept."""
        text = 'Shown in <xref ref-type="fig" rid="F1">Figure 1</xref> and text.'
        assert strip_markers(text) == "Shown in Figure 1 and text."

    def test_redact_citations(self):
        """Citations are replaced whole; other markers keep their text."""
        text = ('Rates rose <xref ref-type="bibr" rid="B1">Smith 2010</xref> '
                '(<xref ref-type="table" rid="T1">Table 1</xref>).')
        assert redact_citations(text) == "Rates rose citation (Table 1)."

    def test_redact_citations_custom_placeholder(self):
        text = 'Known <xref ref-type="bibr" rid="B1">[1]</xref>.'
        assert redact_citations(text, "[CIT]") == "Known [CIT]."


class TestExtractReferences:
    """Test cases for the reference extractor."""

    SENTENCE = ('We enrolled 45 patients (<xref ref-type="table" rid="T1">Table 1</xref>, '
                '<xref ref-type="fig" rid="F1">Figure 1</xref>) as before '
                '<xref ref-type="bibr" rid="B1">[1]</xref><xref ref-type="bibr" rid="B2">[2]</xref>.')

    def test_display_text(self):
        refs = extract_references(self.SENTENCE)
        assert refs.text == "We enrolled 45 patients (Table 1, Figure 1) as before [1][2]."

    def test_citation_redacted_text(self):
        """Each citation marker becomes exactly one placeholder."""
        refs = extract_references(self.SENTENCE)
        assert refs.citation_replaced_text == (
            "We enrolled 45 patients (Table 1, Figure 1) as before citationcitation."
        )
        assert "[1]" not in refs.citation_replaced_text
        assert "[2]" not in refs.citation_replaced_text
        assert refs.citation_replaced_text.count("citation") == 2

    def test_single_citation_one_placeholder(self):
        refs = extract_references('Obesity is common <xref ref-type="bibr" rid="B1">Smith et al</xref>.')
        assert refs.citation_replaced_text == "Obesity is common citation."
        assert refs.citation_replaced_text.count("citation") == 1

    def test_ids(self):
        refs = extract_references(self.SENTENCE)
        assert refs.figure_ids == ("F1",)
        assert refs.table_ids == ("T1",)
        assert refs.citation_ids == ("B1", "B2")
        assert refs.refers_figure
        assert refs.refers_table
        assert refs.refers_citation

    def test_duplicate_ids_are_kept(self):
        text = ('<xref ref-type="fig" rid="F1">Fig 1A</xref> and '
                '<xref ref-type="fig" rid="F1">Fig 1B</xref>')
        assert extract_references(text).figure_ids == ("F1", "F1")

    def test_no_markers(self):
        refs = extract_references("Plain sentence.")
        assert refs.text == "Plain sentence."
        assert refs.citation_replaced_text == "Plain sentence."
        assert not refs.refers_figure
        assert not refs.refers_table
        assert not refs.refers_citation

    def test_unknown_type_is_stripped_but_not_collected(self):
        refs = extract_references('See <xref ref-type="supplementary-material" rid="S1">S1</xref>.')
        assert refs.text == "See S1."
        assert refs.figure_ids == refs.table_ids == refs.citation_ids == ()

    def test_idempotent(self):
        """Repeated extraction of the same string gives the same result."""
        assert extract_references(self.SENTENCE) == extract_references(self.SENTENCE)

    @pytest.mark.parametrize("text", [
        "Obesity is common in adults.",
        "Values were 3.5 ± 0.2 (n = 12); see methods!",
        "",
    ])
    def test_plain_text_round_trip(self, text):
        """Plain text survives encoding and extraction unchanged."""
        p = etree.Element("p")
        p.text = text
        assert extract_references(encode_paragraph(p)).text == text
