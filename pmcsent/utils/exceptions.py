"""
Exception classes for pmcsent.

Loading, validation, configuration and retrieval raise the classes
below. The extraction and scoring algorithms never raise; they degrade
to documented defaults instead.
"""

from __future__ import annotations

import logging


def _details(**parts) -> str:
    """Render the non-empty keyword parts as ``name: value, ...``."""
    return ", ".join(f"{name}: {value}" for name, value in parts.items() if value)


class PMCSentError(Exception):
    """
    Base exception class for pmcsent.

    The string form is ``message`` or ``message (details)``.
    """

    def __init__(self, message: str = "", details: str = "") -> None:
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ValidationError(PMCSentError):
    """A file path, PMC id or keyword table failed validation."""

    def __init__(self, message: str = "Validation failed", field: str = "", value: str = "") -> None:
        super().__init__(message, _details(field=field, value=value))
        self.field = field
        self.value = value


class ProcessingError(PMCSentError):
    """A batch operation over extracted articles failed."""

    def __init__(self, message: str = "Processing failed", operation: str = "",
                 original_error: str = "") -> None:
        super().__init__(message, _details(operation=operation, error=original_error))
        self.operation = operation
        self.original_error = original_error


class FileFormatError(PMCSentError):
    """An article could not be parsed as XML."""

    def __init__(self, message: str = "File format error", file_path: str = "",
                 expected_format: str = "") -> None:
        super().__init__(message, _details(file=file_path, expected=expected_format))
        self.file_path = file_path
        self.expected_format = expected_format


class ConfigurationError(PMCSentError):
    """A configuration file holds a section or value that cannot be applied."""

    def __init__(self, message: str = "Configuration error", config_key: str = "",
                 config_value: str = "") -> None:
        super().__init__(message, _details(key=config_key, value=config_value))
        self.config_key = config_key
        self.config_value = config_value


class NetworkError(PMCSentError):
    """
    Retrieving an article from PubMed Central failed.

    ``status_code`` is 0 when no HTTP response was received.
    """

    def __init__(self, message: str = "Network error", url: str = "",
                 status_code: int = 0, response_text: str = "") -> None:
        response = f"{response_text[:100]}..." if response_text else ""
        super().__init__(message, _details(url=url, status=status_code, response=response))
        self.url = url
        self.status_code = status_code
        self.response_text = response_text


class DependencyError(PMCSentError):
    """A required spaCy model is not installed."""

    def __init__(self, message: str = "Dependency error", dependency_name: str = "") -> None:
        super().__init__(message, _details(dependency=dependency_name))
        self.dependency_name = dependency_name


def get_error_context(exception: Exception) -> str:
    """Format an exception for a log line."""
    if isinstance(exception, PMCSentError):
        return str(exception)
    return f"{type(exception).__name__}: {exception}"


def log_exception(logger: logging.Logger, exception: Exception, context: str = "") -> None:
    """
    Log an exception at a level chosen by its class.

    Validation and configuration problems are warnings, dependency
    problems are critical and everything else is an error.

    Args:
        logger: Logger instance
        exception: Exception to log
        context: Prefix describing what was being attempted
    """
    message = get_error_context(exception)
    if context:
        message = f"{context} - {message}"

    if isinstance(exception, (ValidationError, ConfigurationError)):
        logger.warning(message)
    elif isinstance(exception, DependencyError):
        logger.critical(message)
    else:
        logger.error(message)
