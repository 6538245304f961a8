from typing import Optional, Dict, Any, List
from abc import ABC

class SiteScoreError(Exception, ABC):
    """Base exception for all sitescore errors."""

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._get_default_error_code()
        self.context: Dict[str, Any] = context or {}
        self.suggestions: List[str] = suggestions or []

    def _get_default_error_code(self) -> str:
        return "SITESCORE_ERROR"

    def add_context(self, key: str, value: Any) -> "SiteScoreError":
        if key:
            self.context[key] = value
        return self

    def add_suggestion(self, suggestion: str) -> "SiteScoreError":
        if suggestion:
            self.suggestions.append(suggestion)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": dict(self.context),
            "suggestions": list(self.suggestions),
        }

    def __str__(self) -> str:
        base = self.message or ""
        if self.suggestions:
            return f"{base} -- Suggestions: {'; '.join(self.suggestions)}"
        return base


class ConfigurationError(SiteScoreError):
    def __init__(self, message: str, *, config_field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_field = config_field
        if config_field:
            self.add_context('config_field', config_field)

    def _get_default_error_code(self) -> str:
        return "CONFIGURATION_ERROR"

    def __str__(self) -> str:
        base = self.message or ""
        if self.config_field:
            base = f"[{self.config_field}] {base}"
        if self.suggestions:
            return f"{base} -- Suggestions: {'; '.join(self.suggestions)}"
        return base
