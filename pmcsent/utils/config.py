"""
Configuration management for pmcsent.

This module provides the settings used by the extraction pipeline,
the demographic scorer and the remote retrieval path, with optional
overrides loaded from a JSON file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import ConfigurationError, ValidationError, log_exception
from .validators import InputValidator


log = logging.getLogger(__name__)


@dataclass
class Settings:
    """
    Application settings and configuration parameters.

    Attributes:
        scoring: Demographic scorer tables and constants
        nlp_models: spaCy pipeline selection
        extraction: Sentence extraction defaults
        retrieval: Remote article retrieval settings
        output: Output format and location settings
    """
    scoring: Dict[str, Any] = field(default_factory=lambda: {
        "keyword_weights": {
            "patient": [5, 1],
            "year": [5, 2],
            "male": [5, 1],
            "female": [5, 1],
            "subject": [5, 1],
            "individual": [5, 1],
        },
        "exclusions": ["±", "1", "®", "one"],
        "anchors": ["patient", "age", "aged", "male", "female", "subject", "individual"],
        "numeral_relation": "nummod",
        "section_marker": "emographics",
        "section_bonus": 5,
        "corpus_divisor": 10.0,
    })

    nlp_models: Dict[str, Any] = field(default_factory=lambda: {
        "spacy_model": "en_core_web_sm",
        "fallback_to_blank_spacy": True,
    })

    extraction: Dict[str, Any] = field(default_factory=lambda: {
        "citation_placeholder": "citation",
        "no_section": "No Section",
        "no_subsection": "No Sub-section",
        "supported_extensions": [".xml", ".nxml"],
    })

    retrieval: Dict[str, Any] = field(default_factory=lambda: {
        "efetch_url": "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi",
        "delay_seconds": 0.0,
        "timeout_seconds": 30,
    })

    output: Dict[str, Any] = field(default_factory=lambda: {
        "default_output_dir": "pmcsent_results",
        "top_k": 10,
    })


class Config:
    """
    Configuration manager for pmcsent.

    Starts from the default settings and merges a JSON file on top.
    Each section of the file is merged key by key into the matching
    default section, and dict-valued keys such as ``keyword_weights``
    are merged entry by entry. An entry set to ``null`` removes that
    default entry.
    """

    DEFAULT_CONFIG_FILE = "pmcsent_config.json"
    USER_CONFIG_DIR = Path.home() / ".config" / "pmcsent"

    SECTIONS = ("scoring", "nlp_models", "extraction", "retrieval", "output")

    def __init__(self, config_file: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file
        """
        self.settings = Settings()
        self.config_file = Path(config_file or self.USER_CONFIG_DIR / self.DEFAULT_CONFIG_FILE)
        self._load_configuration()

    def _load_configuration(self) -> None:
        """Load configuration from file if it exists."""
        if not self.config_file.exists():
            log.info("Using default configuration")
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
            self._update_settings_from_dict(config_data)
            log.info(f"Configuration loaded from {self.config_file}")
        except (OSError, ValueError, ConfigurationError) as e:
            log_exception(log, e, f"Failed to load configuration from {self.config_file}")
            log.info("Using default configuration")
            self.settings = Settings()

    def _update_settings_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """
        Merge a parsed configuration file into the settings.

        Raises:
            ConfigurationError: If a section is not an object or a merged
                value cannot be applied
        """
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration root must be a JSON object")

        for section in self.SECTIONS:
            if section not in config_dict:
                continue
            overrides = config_dict[section]
            if not isinstance(overrides, dict):
                raise ConfigurationError("Configuration section must be a JSON object", section)
            _merge_section(getattr(self.settings, section), overrides)

        self._check_settings()

    def _check_settings(self) -> None:
        """Raise ConfigurationError for values the pipeline cannot use."""
        try:
            InputValidator.validate_keyword_weights(self.settings.scoring.get("keyword_weights"))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid keyword table: {e}", "scoring.keyword_weights")

        for section, key, allow_zero in (
            ("scoring", "section_bonus", True),
            ("scoring", "corpus_divisor", False),
            ("retrieval", "delay_seconds", True),
        ):
            value = getattr(self.settings, section).get(key)
            number_ok = isinstance(value, (int, float)) and not isinstance(value, bool)
            if not number_ok or value < 0 or (value == 0 and not allow_zero):
                raise ConfigurationError("Invalid numeric setting", f"{section}.{key}", str(value))

    def get_scoring_config(self) -> Dict[str, Any]:
        """Get demographic scoring configuration."""
        return self.settings.scoring.copy()

    def get_keyword_weights(self) -> Dict[str, Tuple[int, int]]:
        """Get the keyword table as lemma -> (base, cap)."""
        return {lemma: tuple(entry) for lemma, entry in self.settings.scoring["keyword_weights"].items()}

    def get_nlp_model_config(self) -> Dict[str, Any]:
        """Get NLP model configuration."""
        return self.settings.nlp_models.copy()

    def get_extraction_config(self) -> Dict[str, Any]:
        """Get sentence extraction configuration."""
        return self.settings.extraction.copy()

    def get_retrieval_config(self) -> Dict[str, Any]:
        """Get remote retrieval configuration."""
        return self.settings.retrieval.copy()

    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration."""
        return self.settings.output.copy()

    def get_config_summary(self) -> str:
        """
        Get a summary of current configuration.

        Returns:
            Formatted configuration summary
        """
        summary = []
        summary.append("=== pmcsent Configuration Summary ===")
        summary.append(f"Config file: {self.config_file}")

        for section in self.SECTIONS:
            summary.append("")
            summary.append(f"{section.replace('_', ' ').title()}:")
            for key, value in getattr(self.settings, section).items():
                summary.append(f"  {key}: {value}")

        return "\n".join(summary)


def _merge_section(target: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    """Merge ``overrides`` into ``target``, one level deep for dict values."""
    for key, value in overrides.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged = dict(current)
            merged.update(value)
            target[key] = {k: v for k, v in merged.items() if v is not None}
        else:
            target[key] = value
