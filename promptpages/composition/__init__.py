"""
Prompt Pages Composition - The engine that owns a page while it is edited.
"""

from promptpages.composition.engine import (
    CompositionEngine,
    SubmitMode,
    SubmitResult,
    SubmitStatus,
    UpdateOutcome,
    UpdateStatus,
)

__all__ = [
    "CompositionEngine",
    "SubmitMode",
    "SubmitResult",
    "SubmitStatus",
    "UpdateOutcome",
    "UpdateStatus",
]
