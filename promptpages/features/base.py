"""
Feature Module Base.

A feature module owns one slice of the page configuration. Modules are
stateless descriptors: they know their defaults, how to merge a patch
into their slice, whether a patch turns them on, and how to validate
their slice. Mutations are always applied by the composition engine;
``bind`` returns a handle whose callbacks route through it.
"""

import copy
import dataclasses
from abc import ABC
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Type
from urllib.parse import urlparse

from promptpages.core.config import MAX_QUESTION_LENGTH, SELECTION_CAP
from promptpages.core.exceptions import FeatureOperationError, UnknownFieldError
from promptpages.features.models import FeatureKey, PageConfiguration, section_from_dict

if TYPE_CHECKING:
    from promptpages.kickstarters.catalog import KickstarterCatalog

# Features of which at most one may be on: both open a popup on arrival.
ARRIVAL_POPUP_GROUP = "arrival_popup"


def is_http_url(value: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    parsed = urlparse((value or "").strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass
class ValidationContext:
    """
    Collaborators and limits available to feature validation.

    Attributes:
        catalog: Loaded kickstarter catalog, if any
        selection_cap: Maximum number of selected kickstarters
        max_question_length: Maximum custom kickstarter length
    """

    catalog: Optional["KickstarterCatalog"] = None
    selection_cap: int = SELECTION_CAP
    max_question_length: int = MAX_QUESTION_LENGTH


class FeatureModule(ABC):
    """
    Base class for the prompt page features.

    Subclasses set the class attributes and override ``validate`` (and
    the enable hooks where "enabled" is not a single boolean field).

    Attributes:
        key: Feature key, also the attribute name on PageConfiguration
        title: Display title
        description: One-line description shown in the editor
        section_type: Dataclass holding this feature's slice
        exclusivity_group: Name of the group this feature belongs to, if any
        togglable: Whether enable/disable make sense for this feature
    """

    key: FeatureKey
    title: str = ""
    description: str = ""
    section_type: Type[Any]
    exclusivity_group: Optional[str] = None
    togglable: bool = True

    def section(self, config: PageConfiguration) -> Any:
        """Return this feature's slice of ``config``."""
        return getattr(config, self.key.value)

    def default_section(self) -> Any:
        return self.section_type()

    def is_enabled(self, section: Any) -> bool:
        return bool(getattr(section, "enabled", False))

    def enable_patch(self) -> Dict[str, Any]:
        return {"enabled": True}

    def disable_patch(self) -> Dict[str, Any]:
        return {"enabled": False}

    def merge(self, section: Any, patch: Mapping[str, Any]) -> Any:
        """
        Return a new slice with ``patch`` applied on top of ``section``.

        Raises:
            UnknownFieldError: If the patch names fields this feature does not own
        """
        known = {f.name for f in dataclasses.fields(self.section_type)}
        unknown = sorted(set(patch) - known)
        if unknown:
            raise UnknownFieldError(self.key.value, unknown)
        return dataclasses.replace(section, **copy.deepcopy(dict(patch)))

    def would_enable(self, section: Any, patch: Any) -> bool:
        """True when applying ``patch`` turns this feature from off to on."""
        return not self.is_enabled(section) and self.is_enabled(self.merge(section, patch))

    def hydrate(self, data: Any) -> Any:
        """Build this feature's slice from persisted data, keeping defaults for gaps."""
        return section_from_dict(self.section_type, data)

    def serialize(self, section: Any) -> Any:
        return section.to_dict()

    def validate(self, config: PageConfiguration, context: ValidationContext) -> List[str]:
        """Return human-readable violations for this feature (empty when valid)."""
        return []

    def bind(self, engine: Any) -> "FeatureHandle":
        """Return a handle whose callbacks mutate ``engine``."""
        return FeatureHandle(self, engine)

    def describe(self) -> Dict[str, Any]:
        """Metadata for listings."""
        return {
            "key": self.key.value,
            "title": self.title,
            "description": self.description,
            "exclusivity_group": self.exclusivity_group,
            "togglable": self.togglable,
        }


class FeatureHandle:
    """
    Callbacks for one feature, bound to a composition engine.

    Every method returns the engine's ``UpdateOutcome``.
    """

    def __init__(self, module: FeatureModule, engine: Any):
        self.module = module
        self.engine = engine

    @property
    def key(self) -> FeatureKey:
        return self.module.key

    @property
    def section(self) -> Any:
        """Snapshot of the feature's current slice."""
        return self.module.section(self.engine.configuration)

    @property
    def is_enabled(self) -> bool:
        return self.module.is_enabled(self.section)

    @property
    def inherited(self) -> bool:
        """True while the section comes unchanged from the business defaults."""
        return self.engine.is_inherited(self.key)

    def inherit(self):
        return self.engine.inherit(self.key)

    def _require_togglable(self, operation: str) -> None:
        if not self.module.togglable:
            raise FeatureOperationError(self.key.value, operation, "feature has no on/off state")

    def enable(self):
        self._require_togglable("enable")
        return self.engine.update(self.key, self.module.enable_patch())

    def disable(self):
        self._require_togglable("disable")
        return self.engine.update(self.key, self.module.disable_patch())

    def toggle(self):
        return self.disable() if self.is_enabled else self.enable()

    def set(self, field_name: str, value: Any):
        return self.engine.update(self.key, {field_name: value})

    def update(self, **fields: Any):
        return self.engine.update(self.key, fields)
