"""
Test suite for pmcsent utilities.

This module contains tests for validators, configuration and exceptions.
"""

import json
import logging
import pytest
import tempfile
from pathlib import Path

from pmcsent.utils.config import Config, Settings
from pmcsent.utils.validators import InputValidator
from pmcsent.utils.exceptions import (
    ConfigurationError,
    DependencyError,
    FileFormatError,
    NetworkError,
    PMCSentError,
    ProcessingError,
    ValidationError,
    get_error_context,
    log_exception,
)


class TestInputValidator:
    """Test cases for InputValidator."""

    def test_validate_file_path_success(self):
        """Test successful file path validation."""
        with tempfile.NamedTemporaryFile(suffix='.nxml', delete=False) as tmp:
            tmp_path = Path(tmp.name)

        try:
            validated_path = InputValidator.validate_file_path(str(tmp_path))
            assert isinstance(validated_path, Path)
            assert validated_path == tmp_path
        finally:
            tmp_path.unlink()

    def test_validate_file_path_nonexistent(self):
        with pytest.raises(ValidationError, match="File does not exist"):
            InputValidator.validate_file_path("nonexistent_file.nxml")

    def test_validate_file_path_directory(self, temp_dir):
        with pytest.raises(ValidationError, match="Path is not a file"):
            InputValidator.validate_file_path(temp_dir)

    def test_validate_article_file_extension(self, create_test_file):
        path = create_test_file("article.pdf", "not xml")
        with pytest.raises(ValidationError, match="File must have one of these extensions"):
            InputValidator.validate_article_file(path)

    def test_validate_article_file_accepts_xml_and_nxml(self, create_test_file):
        assert InputValidator.validate_article_file(create_test_file("a.xml", "<a/>")).suffix == ".xml"
        assert InputValidator.validate_article_file(create_test_file("b.NXML", "<a/>")).suffix == ".NXML"

    def test_validate_directory_create(self, temp_dir):
        new_dir = temp_dir / "nested" / "out"
        validated = InputValidator.validate_directory_path(new_dir, must_exist=False, create_if_missing=True)
        assert validated.is_dir()

    def test_validate_directory_missing(self, temp_dir):
        with pytest.raises(ValidationError, match="Directory does not exist"):
            InputValidator.validate_directory_path(temp_dir / "missing")

    def test_validate_directory_is_file(self, create_test_file):
        path = create_test_file("file.xml", "<a/>")
        with pytest.raises(ValidationError, match="Path is not a directory"):
            InputValidator.validate_directory_path(path)

    @pytest.mark.parametrize("pmc_id, expected", [
        ("PMC4736352", "4736352"),
        ("pmc4736352", "4736352"),
        ("4736352", "4736352"),
        (" PMC12 ", "12"),
        (4736352, "4736352"),
    ])
    def test_validate_pmc_id(self, pmc_id, expected):
        assert InputValidator.validate_pmc_id(pmc_id) == expected

    @pytest.mark.parametrize("pmc_id", ["", "PMC", "PMC12a", "PMID123", None, True])
    def test_validate_pmc_id_invalid(self, pmc_id):
        with pytest.raises(ValidationError):
            InputValidator.validate_pmc_id(pmc_id)
        assert not InputValidator.is_valid_pmc_id(pmc_id)

    def test_validate_keyword_weights(self):
        validated = InputValidator.validate_keyword_weights({"patient": [5, 1], "year": (5, 2)})
        assert validated == {"patient": (5, 1), "year": (5, 2)}

    @pytest.mark.parametrize("weights", [
        [("patient", 5, 1)],
        {"": [5, 1]},
        {"patient": [5]},
        {"patient": [5, -1]},
        {"patient": [5.5, 1]},
        {"patient": [True, 1]},
        {"patient": "5,1"},
    ])
    def test_validate_keyword_weights_invalid(self, weights):
        with pytest.raises(ValidationError):
            InputValidator.validate_keyword_weights(weights)


class TestConfig:
    """Test cases for Config."""

    def test_default_settings(self):
        settings = Settings()
        assert settings.scoring["keyword_weights"]["patient"] == [5, 1]
        assert settings.scoring["keyword_weights"]["year"] == [5, 2]
        assert settings.scoring["section_marker"] == "emographics"
        assert settings.extraction["no_section"] == "No Section"
        assert settings.nlp_models["spacy_model"] == "en_core_web_sm"

    def test_missing_file_uses_defaults(self, sample_config):
        assert sample_config.get_scoring_config()["section_bonus"] == 5
        assert sample_config.get_keyword_weights()["female"] == (5, 1)

    def test_load_from_file(self, temp_dir):
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps({
            "scoring": {"section_bonus": 3},
            "retrieval": {"delay_seconds": 0.5},
        }))
        config = Config(config_file)
        assert config.get_scoring_config()["section_bonus"] == 3
        assert config.get_scoring_config()["numeral_relation"] == "nummod"
        assert config.get_retrieval_config()["delay_seconds"] == 0.5

    def test_partial_keyword_override_keeps_defaults(self, temp_dir):
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps({
            "scoring": {"keyword_weights": {"patient": [4, 3], "cohort": [2, 1]}},
        }))
        weights = Config(config_file).get_keyword_weights()

        assert weights["patient"] == (4, 3)
        assert weights["cohort"] == (2, 1)
        assert weights["year"] == (5, 2)
        for lemma in ("male", "female", "subject", "individual"):
            assert weights[lemma] == (5, 1)

    def test_null_entry_removes_default_keyword(self, temp_dir):
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps({"scoring": {"keyword_weights": {"subject": None}}}))
        weights = Config(config_file).get_keyword_weights()
        assert "subject" not in weights
        assert weights["patient"] == (5, 1)

    def test_invalid_file_falls_back_to_defaults(self, temp_dir):
        config_file = temp_dir / "config.json"
        config_file.write_text("{ not json")
        config = Config(str(config_file))
        assert config.get_scoring_config()["section_bonus"] == 5

    @pytest.mark.parametrize("content", [
        [1, 2],
        {"scoring": "none"},
        {"scoring": {"keyword_weights": {"patient": [-1, 1]}}},
        {"scoring": {"corpus_divisor": 0}},
        {"scoring": {"section_bonus": True}},
        {"retrieval": {"delay_seconds": -1}},
    ])
    def test_unusable_file_falls_back_to_defaults(self, temp_dir, caplog, content):
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps(content))
        with caplog.at_level(logging.WARNING, logger="pmcsent.utils.config"):
            config = Config(config_file)

        assert config.get_keyword_weights()["patient"] == (5, 1)
        assert config.get_scoring_config()["corpus_divisor"] == 10.0
        assert config.get_retrieval_config()["delay_seconds"] == 0.0
        assert any("Failed to load configuration" in r.getMessage() for r in caplog.records)

    def test_update_raises_configuration_error(self, sample_config):
        with pytest.raises(ConfigurationError) as excinfo:
            sample_config._update_settings_from_dict({"output": ["top_k"]})
        assert excinfo.value.config_key == "output"

        with pytest.raises(ConfigurationError, match="Invalid keyword table"):
            sample_config._update_settings_from_dict({"scoring": {"keyword_weights": {"year": [5]}}})

    def test_getters_return_copies(self, sample_config):
        sample_config.get_output_config()["top_k"] = 99
        assert sample_config.get_output_config()["top_k"] == 10

    def test_config_summary(self, sample_config):
        summary = sample_config.get_config_summary()
        assert "pmcsent Configuration Summary" in summary
        assert "Scoring:" in summary
        assert "Nlp Models:" in summary


class TestExceptions:
    """Test cases for exception classes."""

    def test_base_exception(self):
        assert str(PMCSentError("Failed")) == "Failed"
        assert str(PMCSentError("Failed", "why")) == "Failed (why)"

    def test_validation_error(self):
        error = ValidationError("Invalid PMC ID format", "pmc_id", "abc")
        assert error.field == "pmc_id"
        assert str(error) == "Invalid PMC ID format (field: pmc_id, value: abc)"

    def test_processing_error(self):
        error = ProcessingError("Failed", "score_demographics", "boom")
        assert str(error) == "Failed (operation: score_demographics, error: boom)"

    def test_file_format_error(self):
        error = FileFormatError("Not XML", "a.nxml", "xml")
        assert error.file_path == "a.nxml"
        assert "expected: xml" in str(error)

    def test_network_error(self):
        error = NetworkError("Fetch failed", "http://x", 503, "unavailable")
        assert error.status_code == 503
        assert "status: 503" in str(error)

    def test_other_errors(self):
        assert ConfigurationError("Bad", "scoring").config_key == "scoring"
        assert DependencyError("Missing", "en_core_web_sm").dependency_name == "en_core_web_sm"

    def test_get_error_context(self):
        assert get_error_context(ValueError("bad value")) == "ValueError: bad value"
        assert get_error_context(PMCSentError("Failed")) == "Failed"

    @pytest.mark.parametrize("exception, level", [
        (ValidationError("x"), logging.WARNING),
        (ConfigurationError("x"), logging.WARNING),
        (ProcessingError("x"), logging.ERROR),
        (NetworkError("x"), logging.ERROR),
        (DependencyError("x"), logging.CRITICAL),
        (RuntimeError("x"), logging.ERROR),
    ])
    def test_log_exception_levels(self, caplog, exception, level):
        logger = logging.getLogger("pmcsent.tests")
        with caplog.at_level(logging.DEBUG, logger="pmcsent.tests"):
            log_exception(logger, exception, "While testing")
        assert caplog.records[-1].levelno == level
        assert caplog.records[-1].getMessage().startswith("While testing - ")
