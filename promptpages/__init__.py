"""
Prompt Pages - Feature composition and embeddable review widgets.

Composes the features of a review prompt page under one configuration,
generates copy-paste emoji sentiment widgets for websites and email,
and manages the kickstarter questions shown while customers write.

Usage:
    from promptpages import __version__
    from promptpages.composition import CompositionEngine, SubmitMode
    from promptpages.embed import EmbedGenerator, EmbedOptions, EmbedTarget
    from promptpages.kickstarters import KickstarterCatalog, KickstarterSelection
"""

__version__ = "0.1.0"
__author__ = "Prompt Reviews Team"

from promptpages.core.base import PromptPagesComponent, Registry, ComponentStatus, HealthCheckResult
from promptpages.core.config import PromptPagesSettings
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
    "__version__",
    "__author__",
    # Core
    "PromptPagesComponent",
    "Registry",
    "ComponentStatus",
    "HealthCheckResult",
    "PromptPagesSettings",
    # Exceptions
    "PromptPagesException",
    "ConflictError",
    "ValidationError",
    "CapacityError",
    "PersistenceError",
    "GenerationInputError",
    "ConfigurationError",
]
