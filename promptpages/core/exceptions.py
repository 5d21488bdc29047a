"""
Prompt Pages Core Exceptions - Custom exception hierarchy.

Conflicts and validation problems are usually reported as values
(outcomes and violation lists) so the editor can show them inline; the
exception types below carry the same information when they are raised.
"""

from typing import Any, Dict, List, Optional


class PromptPagesException(Exception):
    """
    Base exception for all prompt page errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or "PROMPT_PAGES_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary representation."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConflictError(PromptPagesException):
    """
    Raised (or returned in an outcome) when enabling a feature whose
    exclusivity group already has an enabled member.

    Example:
        ConflictError(feature_key="note", conflicting_key="sentiment", group="arrival_popup")
    """

    def __init__(
        self,
        feature_key: str,
        conflicting_key: str,
        group: str,
        message: Optional[str] = None,
    ):
        self.feature_key = feature_key
        self.conflicting_key = conflicting_key
        self.group = group

        super().__init__(
            message=message
            or f"Cannot enable '{feature_key}' while '{conflicting_key}' is enabled; disable it first.",
            code="FEATURE_CONFLICT",
            details={
                "feature_key": feature_key,
                "conflicting_key": conflicting_key,
                "group": group,
            },
        )


class ValidationError(PromptPagesException):
    """
    Raised when input fails structural validation.

    Attributes:
        violations: Ordered list of human-readable violations
    """

    def __init__(
        self,
        violations: List[str],
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.violations = list(violations)
        merged = {"violations": self.violations}
        merged.update(details or {})
        super().__init__(
            message="; ".join(self.violations) or "Validation failed",
            code=code or "VALIDATION_ERROR",
            details=merged,
        )


class EmptyQuestionError(ValidationError):
    """Raised when a custom kickstarter question is blank."""

    def __init__(self):
        super().__init__(["Please enter a question."], code="EMPTY_QUESTION")


class QuestionLengthError(ValidationError):
    """
    Raised when a custom kickstarter question exceeds the length ceiling.

    Example:
        raise QuestionLengthError(length=90, max_length=89)
    """

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(
            [f"Question must be {max_length} characters or less (got {length})."],
            code="QUESTION_TOO_LONG",
            details={"length": length, "max_length": max_length},
        )


class CapacityError(PromptPagesException):
    """
    Raised when a selection would exceed its cap.

    Example:
        raise CapacityError(cap=50, current=50)
    """

    def __init__(self, cap: int, current: int):
        self.cap = cap
        self.current = current
        super().__init__(
            message=f"You can select up to {cap} kickstarters.",
            code="SELECTION_CAP_EXCEEDED",
            details={"cap": cap, "current": current},
        )


class PersistenceError(PromptPagesException):
    """
    Raised when saving or loading a page configuration fails.

    The in-memory configuration is never modified by a failed save, so
    the caller can retry by submitting again.
    """

    def __init__(
        self,
        page_id: str,
        operation: str,
        reason: str,
        retry_possible: bool = True,
    ):
        self.page_id = page_id
        self.operation = operation
        self.reason = reason
        self.retry_possible = retry_possible

        super().__init__(
            message="An error occurred while saving. Please try again."
            if operation == "save"
            else f"Failed to {operation} page '{page_id}': {reason}",
            code="PERSISTENCE_ERROR",
            details={
                "page_id": page_id,
                "operation": operation,
                "reason": reason,
                "retry_possible": retry_possible,
            },
        )


class GenerationInputError(PromptPagesException):
    """
    Describes an embed option that was replaced by a safe fallback.

    The widget generator records these as warnings instead of raising them.
    """

    def __init__(self, option: str, value: Any, fallback: Any):
        self.option = option
        self.value = value
        self.fallback = fallback
        super().__init__(
            message=f"Unsupported {option} {value!r}; using {fallback!r}",
            code="GENERATION_INPUT_FALLBACK",
            details={"option": option, "value": value, "fallback": fallback},
        )


class ConfigurationError(PromptPagesException):
    """
    Raised when there is a configuration error.

    Example:
        raise ConfigurationError(
            setting="PROMPTPAGES_OPENAI_API_KEY",
            reason="API key is required when using the OpenAI review generator"
        )
    """

    def __init__(
        self,
        setting: str,
        reason: str,
        suggestion: Optional[str] = None,
    ):
        self.setting = setting
        self.reason = reason
        self.suggestion = suggestion

        message = f"Configuration error for '{setting}': {reason}"
        if suggestion:
            message += f". Suggestion: {suggestion}"

        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details={
                "setting": setting,
                "reason": reason,
                "suggestion": suggestion,
            },
        )


class FeatureNotFoundError(PromptPagesException):
    """Raised when a feature key is not registered."""

    def __init__(self, feature_key: str, available: Optional[List[str]] = None):
        self.feature_key = feature_key
        self.available = available or []

        message = f"Feature '{feature_key}' not found"
        if self.available:
            message += f". Available: {', '.join(self.available)}"

        super().__init__(
            message=message,
            code="FEATURE_NOT_FOUND",
            details={"feature_key": feature_key, "available": self.available},
        )


class UnknownFieldError(PromptPagesException):
    """Raised when a patch names a field the feature does not own."""

    def __init__(self, feature_key: str, fields: List[str]):
        self.feature_key = feature_key
        self.fields = list(fields)
        super().__init__(
            message=f"Feature '{feature_key}' has no field(s): {', '.join(self.fields)}",
            code="UNKNOWN_FIELD",
            details={"feature_key": feature_key, "fields": self.fields},
        )


class FeatureOperationError(PromptPagesException):
    """Raised when a feature does not support the requested operation."""

    def __init__(self, feature_key: str, operation: str, reason: str):
        self.feature_key = feature_key
        self.operation = operation
        super().__init__(
            message=f"Cannot {operation} '{feature_key}': {reason}",
            code="FEATURE_OPERATION_UNSUPPORTED",
            details={"feature_key": feature_key, "operation": operation, "reason": reason},
        )


class FeatureDisabledError(PromptPagesException):
    """Raised when invoking a capability whose feature flag is off."""

    def __init__(self, feature_key: str, capability: str):
        self.feature_key = feature_key
        self.capability = capability
        super().__init__(
            message=f"{capability} is not enabled for this page.",
            code="FEATURE_DISABLED",
            details={"feature_key": feature_key, "capability": capability},
        )


class CatalogItemNotFoundError(PromptPagesException):
    """Raised when a kickstarter id is not in the catalog."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(
            message=f"Kickstarter '{item_id}' not found",
            code="CATALOG_ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class ImmutableItemError(PromptPagesException):
    """Raised when trying to change or delete a default kickstarter."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(
            message=f"Kickstarter '{item_id}' is a default and cannot be changed",
            code="IMMUTABLE_ITEM",
            details={"item_id": item_id},
        )


class OperationInProgressError(PromptPagesException):
    """Raised when an operation is started while the same one is still pending."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            message=f"'{operation}' is already in progress",
            code="OPERATION_IN_PROGRESS",
            details={"operation": operation},
        )


class GenerationError(PromptPagesException):
    """
    Raised when the AI review generator fails.

    Example:
        raise GenerationError(provider="openai", reason="Connection timeout")
    """

    def __init__(self, provider: str, reason: str, retry_possible: bool = True):
        self.provider = provider
        self.reason = reason
        self.retry_possible = retry_possible
        super().__init__(
            message=f"Review generation with '{provider}' failed: {reason}",
            code="GENERATION_ERROR",
            details={"provider": provider, "reason": reason, "retry_possible": retry_possible},
        )


class ProviderNotFoundError(PromptPagesException):
    """Raised when a requested review generator is not registered."""

    def __init__(self, provider_key: str, available_providers: Optional[List[str]] = None):
        self.provider_key = provider_key
        self.available_providers = available_providers or []

        message = f"Review generator '{provider_key}' not found"
        if self.available_providers:
            message += f". Available: {', '.join(self.available_providers)}"

        super().__init__(
            message=message,
            code="PROVIDER_NOT_FOUND",
            details={
                "provider_key": provider_key,
                "available_providers": self.available_providers,
            },
        )
