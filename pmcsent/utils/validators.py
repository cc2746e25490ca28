"""
Input validation utilities for pmcsent.

This module provides validation for article files, output directories,
PMC identifiers and the keyword tables used by the demographic scorer.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..utils.exceptions import ValidationError


log = logging.getLogger(__name__)


class InputValidator:
    """
    Input validation utilities for pmcsent.

    Provides validation methods for:
    - Article file paths and formats
    - Output directory paths
    - PubMed Central identifiers
    - Demographic keyword tables
    """

    PMC_ID_PATTERN = re.compile(r'^(?:PMC)?(\d{1,12})$', re.IGNORECASE)

    SUPPORTED_ARTICLE_FORMATS = ['.xml', '.nxml']

    @classmethod
    def validate_file_path(cls, file_path: Union[str, Path], must_exist: bool = True,
                          extensions: Optional[List[str]] = None) -> Path:
        """
        Validate a file path.

        Args:
            file_path: Path to validate
            must_exist: Whether the file must exist
            extensions: List of allowed extensions (with dots)

        Returns:
            Validated Path object

        Raises:
            ValidationError: If path is invalid
        """
        try:
            if isinstance(file_path, str):
                file_path = Path(file_path)

            if not isinstance(file_path, Path):
                raise ValidationError("File path must be a string or Path object")

            if not file_path.is_absolute():
                file_path = file_path.resolve()

            if must_exist:
                if not file_path.exists():
                    raise ValidationError(f"File does not exist: {file_path}")

                if not file_path.is_file():
                    raise ValidationError(f"Path is not a file: {file_path}")

            if extensions:
                if file_path.suffix.lower() not in [ext.lower() for ext in extensions]:
                    valid_exts = ', '.join(extensions)
                    raise ValidationError(f"File must have one of these extensions: {valid_exts}")

            return file_path

        except ValidationError:
            raise
        except Exception as e:
            raise ValidationError(f"Invalid file path: {e}")

    @classmethod
    def validate_directory_path(cls, dir_path: Union[str, Path], must_exist: bool = True,
                               create_if_missing: bool = False) -> Path:
        """
        Validate a directory path.

        Args:
            dir_path: Path to validate
            must_exist: Whether the directory must exist
            create_if_missing: Whether to create the directory if it doesn't exist

        Returns:
            Validated Path object

        Raises:
            ValidationError: If path is invalid
        """
        try:
            if isinstance(dir_path, str):
                dir_path = Path(dir_path)

            if not isinstance(dir_path, Path):
                raise ValidationError("Directory path must be a string or Path object")

            if not dir_path.is_absolute():
                dir_path = dir_path.resolve()

            if not dir_path.exists():
                if create_if_missing:
                    try:
                        dir_path.mkdir(parents=True, exist_ok=True)
                        log.info(f"Created directory: {dir_path}")
                    except Exception as e:
                        raise ValidationError(f"Failed to create directory: {e}")
                elif must_exist:
                    raise ValidationError(f"Directory does not exist: {dir_path}")
            else:
                if not dir_path.is_dir():
                    raise ValidationError(f"Path is not a directory: {dir_path}")

            return dir_path

        except ValidationError:
            raise
        except Exception as e:
            raise ValidationError(f"Invalid directory path: {e}")

    @classmethod
    def validate_article_file(cls, file_path: Union[str, Path],
                              extensions: Optional[List[str]] = None) -> Path:
        """
        Validate an article file path (.xml or .nxml by default).

        Args:
            file_path: Path to the article file
            extensions: Optional override for accepted extensions

        Returns:
            Validated Path object

        Raises:
            ValidationError: If file is invalid
        """
        return cls.validate_file_path(file_path, must_exist=True,
                                     extensions=extensions or cls.SUPPORTED_ARTICLE_FORMATS)

    @classmethod
    def validate_pmc_id(cls, pmc_id: Union[str, int]) -> str:
        """
        Validate a PubMed Central identifier.

        Both ``PMC4736352`` and ``4736352`` are accepted.

        Args:
            pmc_id: Identifier to validate

        Returns:
            The numeric part of the identifier

        Raises:
            ValidationError: If the identifier is malformed
        """
        if isinstance(pmc_id, int) and not isinstance(pmc_id, bool):
            pmc_id = str(pmc_id)

        if not pmc_id or not isinstance(pmc_id, str):
            raise ValidationError("PMC ID must be a non-empty string", "pmc_id")

        match = cls.PMC_ID_PATTERN.match(pmc_id.strip())
        if not match:
            raise ValidationError("Invalid PMC ID format", "pmc_id", pmc_id)

        return match.group(1)

    @classmethod
    def validate_keyword_weights(cls, weights: Dict[str, Sequence[int]]) -> Dict[str, Tuple[int, int]]:
        """
        Validate a demographic keyword table.

        Each entry maps an anchor lemma to a ``(base, cap)`` pair of
        non-negative integers.

        Args:
            weights: Mapping of lemma to (base weight, occurrence cap)

        Returns:
            Normalized mapping of lemma to (base, cap) tuples

        Raises:
            ValidationError: If any entry is invalid
        """
        if not isinstance(weights, dict):
            raise ValidationError("Keyword weights must be a dictionary")

        validated: Dict[str, Tuple[int, int]] = {}
        for lemma, entry in weights.items():
            if not isinstance(lemma, str) or not lemma.strip():
                raise ValidationError("Keyword lemma must be a non-empty string", "lemma", str(lemma))

            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise ValidationError("Keyword entry must be a [base, cap] pair", lemma, str(entry))

            base, cap = entry
            for name, value in (("base", base), ("cap", cap)):
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValidationError(f"Keyword {name} must be an integer", lemma, str(value))
                if value < 0:
                    raise ValidationError(f"Keyword {name} must be non-negative", lemma, str(value))

            validated[lemma] = (base, cap)

        return validated

    @classmethod
    def is_valid_pmc_id(cls, pmc_id: Union[str, int]) -> bool:
        """
        Check if a PMC identifier is valid without raising.

        Args:
            pmc_id: Identifier to check

        Returns:
            True if the identifier is valid
        """
        try:
            cls.validate_pmc_id(pmc_id)
            return True
        except ValidationError:
            return False
