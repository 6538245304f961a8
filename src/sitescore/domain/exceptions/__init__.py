"""Custom exceptions for the sitescore package."""

# Base exceptions
from .base import (
    SiteScoreError,
    ConfigurationError,
)

# Processing exceptions
from .processing import (
    ProcessingError,
    BatchProcessingError,
)

# Validation exceptions
from .validation import (
    ValidationError,
    ScoreRangeError,
    CriterionValidationError,
    ParameterValidationError,
    FileValidationError,
    InputFileNotFoundError,
    InvalidFileFormatError,
)

__all__ = [
    # Base
    "SiteScoreError",
    "ConfigurationError",

    # Processing
    "ProcessingError",
    "BatchProcessingError",

    # Validation
    "ValidationError",
    "ScoreRangeError",
    "CriterionValidationError",
    "ParameterValidationError",
    "FileValidationError",
    "InputFileNotFoundError",
    "InvalidFileFormatError",
]
