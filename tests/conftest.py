"""
Test suite initialization for pmcsent.

This module provides the main test configuration and fixtures
for the pmcsent test suite. No spaCy model download and no network
access is needed: the NLP side uses a blank English pipeline or a
rule-based fake analyzer.
"""

import re
import pytest
import tempfile
import logging
from pathlib import Path

import spacy

from pmcsent.core.segmenter import SentenceSegmenter
from pmcsent.core.walker import StructuralWalker
from pmcsent.models.sentence import SentenceAnalysis
from pmcsent.utils.config import Config


# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='[TEST] %(levelname)s - %(name)s - %(message)s'
)


SAMPLE_ARTICLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE article PUBLIC "-//NLM//DTD JATS (Z39.96) Journal Archiving and Interchange DTD v1.0 20120330//EN" "JATS-archivearticle1.dtd">
<article xmlns:xlink="http://www.w3.org/1999/xlink" article-type="research-article">
  <front>
    <journal-meta>
      <journal-title-group><journal-title>Journal of Test Medicine</journal-title></journal-title-group>
    </journal-meta>
    <article-meta>
      <article-id pub-id-type="pmid">26000001</article-id>
      <article-id pub-id-type="pmc">4736352</article-id>
      <title-group><article-title>Obesity in a Test Cohort</article-title></title-group>
      <contrib-group>
        <contrib contrib-type="author">
          <name><surname>Doe</surname><given-names>Jane</given-names></name>
          <email>jane@example.org</email>
        </contrib>
        <contrib contrib-type="author">
          <name><surname>Roe</surname><given-names>Richard</given-names></name>
        </contrib>
      </contrib-group>
      <pub-date pub-type="epub"><day>12</day><month>3</month><year>2016</year></pub-date>
      <volume>7</volume>
      <fpage>101</fpage>
      <lpage>110</lpage>
      <abstract>
        <sec><title>Background</title><p>Obesity affects 30 patients in our clinic. We studied them.</p></sec>
        <sec><title>Results</title><p>Outcomes improved <xref ref-type="bibr" rid="B2">[2]</xref>.</p></sec>
      </abstract>
      <abstract abstract-type="summary"><p>Editor summary sentence.</p></abstract>
    </article-meta>
  </front>
  <body>
    <sec id="s1">
      <title>Introduction</title>
      <p>Obesity is common <xref ref-type="bibr" rid="B1">[1]</xref>. It is rising worldwide.</p>
      <p>Cases were confirmed by imaging.<fig id="F2"><label>Figure 2</label><caption><p>Imaging protocol.</p></caption></fig> Follow-up was complete.</p>
    </sec>
    <sec id="s2">
      <title>Methods</title>
      <p>We describe the cohort below.</p>
      <sec id="s2a">
        <title>Demographics</title>
        <p>We enrolled 45 patients (<xref ref-type="table" rid="T1">Table 1</xref>). Ages are shown in <xref ref-type="fig" rid="F1">Figure 1</xref>.</p>
        <sec id="s2a1">
          <title>Recruitment</title>
          <p>Recruitment ran for 2 years.</p>
        </sec>
      </sec>
      <fig id="F1">
        <label>Figure 1</label>
        <caption><p>Age distribution of the cohort.</p></caption>
        <graphic xlink:href="fig1.jpg"/>
      </fig>
      <table-wrap id="T1">
        <label>Table 1</label>
        <caption><p>Baseline characteristics.</p></caption>
        <table><tr><td>Age</td></tr></table>
      </table-wrap>
    </sec>
  </body>
  <back>
    <ref-list>
      <title>References</title>
      <ref id="B1"><mixed-citation>Smith J. Obesity trends. 2010.</mixed-citation></ref>
      <ref id="B2"><mixed-citation>Lee K. Outcomes. 2012.</mixed-citation></ref>
    </ref-list>
  </back>
</article>
"""


class RegexSegmenter:
    """Splits on whitespace after terminal punctuation."""

    SPLIT_RE = re.compile(r'(?<=[.!?])\s+(?=[A-Z<])')

    def split(self, annotated):
        return [piece.strip() for piece in self.SPLIT_RE.split(annotated) if piece.strip()]


class FakeAnalyzer:
    """
    Rule-based stand-in for the spaCy analyzer.

    Plurals of the demographic keywords are lemmatized and every
    number is labeled as a numeral modifier.
    """

    TOKEN_RE = re.compile(r"\w+(?:[-.]\w+)*|[^\w\s]")
    LEMMAS = {
        "patients": "patient",
        "years": "year",
        "subjects": "subject",
        "males": "male",
        "females": "female",
        "individuals": "individual",
        "enrolled": "enroll",
    }

    def __init__(self):
        self.calls = 0

    def analyze(self, text):
        self.calls += 1
        tokens = self.TOKEN_RE.findall(text)
        lemmas = [self.LEMMAS.get(tok.lower(), tok.lower()) for tok in tokens]
        labels = ["nummod" if tok.isdigit() else None for tok in tokens]
        return SentenceAnalysis(
            tokens=tokens,
            lemmas=lemmas,
            dependency_labels=labels,
            pos_tags=["NUM" if tok.isdigit() else "X" for tok in tokens],
            ner_tags=["O"] * len(tokens),
        )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir):
    """Create a configuration that ignores any user configuration file."""
    return Config(temp_dir / "pmcsent_config.json")


@pytest.fixture
def blank_nlp():
    """Blank English spaCy pipeline with a rule-based sentencizer."""
    nlp = spacy.blank("en")
    nlp.add_pipe("sentencizer")
    return nlp


@pytest.fixture
def segmenter(blank_nlp):
    """spaCy backed sentence segmenter."""
    return SentenceSegmenter(blank_nlp)


@pytest.fixture
def regex_segmenter():
    """Segmenter stub independent of spaCy."""
    return RegexSegmenter()


@pytest.fixture
def fake_analyzer():
    """Rule-based sentence analyzer."""
    return FakeAnalyzer()


@pytest.fixture
def walker(segmenter, fake_analyzer):
    """Walker over the blank pipeline with the fake analyzer bound."""
    return StructuralWalker(segmenter, analyzer=fake_analyzer)


@pytest.fixture
def sample_article_xml():
    """Sample JATS article."""
    return SAMPLE_ARTICLE_XML


@pytest.fixture
def create_test_file(temp_dir):
    """Factory fixture to create test files."""
    def _create_file(filename: str, content: str) -> Path:
        file_path = temp_dir / filename
        file_path.write_text(content.strip(), encoding="utf-8")
        return file_path

    return _create_file


@pytest.fixture
def sample_article_file(create_test_file, sample_article_xml):
    """Create a sample .nxml article file."""
    return create_test_file("PMC4736352.nxml", sample_article_xml)
