"""
Prompt Pages Core - Infrastructure primitives and base classes.

Provides base classes, registries, configuration, and the exception
hierarchy shared by every other subpackage.
"""

from promptpages.core.base import (
    PromptPagesComponent,
    Registry,
    ComponentStatus,
    HealthCheckResult,
    utc_now,
)
from promptpages.core.config import (
    MAX_QUESTION_LENGTH,
    SELECTION_CAP,
    PromptPagesSettings,
    get_settings,
    setup_logging,
)
from promptpages.core.exceptions import (
    PromptPagesException,
    ConflictError,
    ValidationError,
    CapacityError,
    PersistenceError,
    GenerationInputError,
    ConfigurationError,
)

__all__ = [
    "PromptPagesComponent",
    "Registry",
    "ComponentStatus",
    "HealthCheckResult",
    "utc_now",
    "MAX_QUESTION_LENGTH",
    "SELECTION_CAP",
    "PromptPagesSettings",
    "get_settings",
    "setup_logging",
    "PromptPagesException",
    "ConflictError",
    "ValidationError",
    "CapacityError",
    "PersistenceError",
    "GenerationInputError",
    "ConfigurationError",
]
