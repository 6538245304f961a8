"""Input validation exceptions."""

from typing import Optional, List, Any
from .base import SiteScoreError

class ValidationError(SiteScoreError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if field_name:
            self.add_context('field_name', field_name)
        if field_value is not None:
            self.add_context('field_value', str(field_value))

    def _get_default_error_code(self) -> str:
        return "VALIDATION_ERROR"


class ScoreRangeError(ValidationError):
    """Raised when a submitted score falls outside the accepted range."""

    def __init__(
        self,
        criterion_id: Any,
        score: Any,
        *,
        min_score: float = 0,
        max_score: float = 100,
        **kwargs
    ):
        message = (
            f"Invalid score for criterion {criterion_id}: "
            f"must be between {_fmt(min_score)} and {_fmt(max_score)}"
        )
        super().__init__(message, field_name="score", field_value=score, **kwargs)
        self.add_context('criterion_id', criterion_id)
        self.add_context('min_score', min_score)
        self.add_context('max_score', max_score)

    def _get_default_error_code(self) -> str:
        return "SCORE_OUT_OF_RANGE"


class CriterionValidationError(ValidationError):
    """Raised when a criterion definition is malformed."""

    def __init__(self, message: str, *, criterion_id: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        if criterion_id is not None:
            self.add_context('criterion_id', criterion_id)

    def _get_default_error_code(self) -> str:
        return "INVALID_CRITERION"


class ParameterValidationError(ValidationError):
    """Raised when an API argument is unusable."""
    def __init__(
        self,
        parameter_name: str,
        parameter_value: Any,
        expected_type: Optional[str] = None,
        **kwargs
    ):
        message = f"Invalid value for '{parameter_name}': {parameter_value!r}"
        if expected_type:
            message += f" (expected {expected_type})"
        super().__init__(message, field_name=parameter_name, field_value=parameter_value, **kwargs)
        if expected_type:
            self.add_context('expected_type', expected_type)
        self.add_suggestion(f"Pass a valid '{parameter_name}'")

    def _get_default_error_code(self) -> str:
        return "PARAMETER_VALIDATION_FAILED"


class FileValidationError(ValidationError):
    """Raised when an input document cannot be used."""

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        validation_type: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if file_path:
            self.add_context('file_path', file_path)
        if validation_type:
            self.add_context('validation_type', validation_type)

    def _get_default_error_code(self) -> str:
        return "FILE_VALIDATION_FAILED"


class InputFileNotFoundError(FileValidationError):
    """Raised when a required file doesn't exist."""
    def __init__(self, file_path: str, **kwargs):
        message = f"File not found: {file_path}"
        super().__init__(message, file_path=file_path, validation_type="existence_check", **kwargs)
        self.add_suggestion("Check if the file path is correct and accessible")

    def _get_default_error_code(self) -> str:
        return "FILE_NOT_FOUND"


class InvalidFileFormatError(FileValidationError):
    """Raised when file format is invalid."""
    def __init__(
        self,
        file_path: str,
        expected_formats: List[str],
        actual_format: Optional[str] = None,
        **kwargs
    ):
        formats_str = ", ".join(expected_formats)
        message = f"Invalid file format for {file_path}. Expected: {formats_str}"
        super().__init__(message, file_path=file_path, validation_type="format_check", **kwargs)
        self.add_context('expected_formats', expected_formats)
        if actual_format:
            self.add_context('actual_format', actual_format)
        self.add_suggestion(f"Ensure file has one of these extensions: {formats_str}")

    def _get_default_error_code(self) -> str:
        return "INVALID_FILE_FORMAT"


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
