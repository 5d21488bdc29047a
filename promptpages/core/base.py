"""
Prompt Pages Core Base - Component base classes and registries.

Provides the foundational patterns shared by storage backends and AI
providers:
- PromptPagesComponent: Base class with lifecycle management
- Registry: Generic registry pattern for component registration
- ComponentStatus: Enum for component health states
- HealthCheckResult: Structured health check responses
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class ComponentStatus(Enum):
    """Health status of a component."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class HealthCheckResult:
    """Result of a component health check."""

    status: ComponentStatus
    component_name: str
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "status": self.status.value,
            "component": self.component_name,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class PromptPagesComponent(ABC):
    """
    Base class for pluggable collaborators (storage backends, AI providers).

    Provides lifecycle management (initialize, shutdown) and health checking.

    Example:
        class RedisPageStorage(PromptPagesComponent):
            @property
            def name(self) -> str:
                return "redis"

            async def initialize(self) -> None:
                await self._connect()
                await super().initialize()
    """

    _initialized: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name identifier for this component."""
        ...

    async def initialize(self) -> None:
        """
        Initialize the component.

        Override to set up connections or other resources.
        """
        self._initialized = True

    async def shutdown(self) -> None:
        """Shutdown the component and release its resources."""
        self._initialized = False

    async def health_check(self) -> HealthCheckResult:
        """
        Perform a health check on this component.

        Returns:
            HealthCheckResult with component status
        """
        return HealthCheckResult(
            status=ComponentStatus.HEALTHY if self._initialized else ComponentStatus.UNKNOWN,
            component_name=self.name,
            message="Component initialized" if self._initialized else "Component not initialized",
        )

    @property
    def is_initialized(self) -> bool:
        """Check if component has been initialized."""
        return self._initialized


class Registry(Generic[T]):
    """
    Generic keyed registry with an optional default entry.

    Example:
        registry: Registry[ReviewGenerator] = Registry("review_generators")
        registry.register("local_stub", LocalStubReviewGenerator())
        generator = registry.get_default()

    Type Parameters:
        T: The type of components stored in this registry
    """

    def __init__(self, name: str = "unnamed"):
        """
        Initialize a new registry.

        Args:
            name: Human-readable name for this registry (for logging/debugging)
        """
        self._name = name
        self._components: Dict[str, T] = {}
        self._default_key: Optional[str] = None

    @property
    def name(self) -> str:
        """Registry name."""
        return self._name

    def register(self, key: str, component: T, set_as_default: bool = False) -> None:
        """
        Register a component with the given key.

        Args:
            key: Unique identifier for the component
            component: The component instance to register
            set_as_default: If True, set this as the default component
        """
        self._components[key] = component
        if set_as_default or self._default_key is None:
            self._default_key = key

    def unregister(self, key: str) -> Optional[T]:
        """Remove and return a component, or None if it was not registered."""
        component = self._components.pop(key, None)
        if self._default_key == key:
            self._default_key = next(iter(self._components), None)
        return component

    def get(self, key: str) -> Optional[T]:
        """Get a component by key."""
        return self._components.get(key)

    def get_default(self) -> Optional[T]:
        """Get the default component, or None if nothing is registered."""
        if self._default_key is None:
            return None
        return self._components.get(self._default_key)

    def set_default(self, key: str) -> None:
        """
        Set the default component.

        Raises:
            KeyError: If component not found
        """
        if key not in self._components:
            raise KeyError(f"Cannot set default: '{key}' not in registry '{self._name}'")
        self._default_key = key

    def list_keys(self) -> list[str]:
        """Get list of all registered component keys."""
        return list(self._components.keys())

    def clear(self) -> None:
        """Remove every component (for testing)."""
        self._components.clear()
        self._default_key = None

    def __contains__(self, key: str) -> bool:
        return key in self._components

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self):
        return iter(self._components)
