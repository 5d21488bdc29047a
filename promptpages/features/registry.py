"""
Feature Registry.

Holds the ordered set of feature modules a composition engine hosts and
the exclusivity groups among them. Registration order is significant:
it is the order features are validated in and the tie-breaker when a
persisted record enables several members of one group.
"""

from collections import OrderedDict
from typing import Any, Dict, List, Optional, Union

from promptpages.core.exceptions import FeatureNotFoundError
from promptpages.features.base import FeatureModule
from promptpages.features.models import FeatureKey, PageConfiguration


class FeatureRegistry:
    """
    Registry of feature modules keyed by FeatureKey.

    Example:
        registry = FeatureRegistry()
        registry.register(NoteFeature())
        registry.register(SentimentFeature())
        registry.group_members("arrival_popup")  # [NoteFeature, SentimentFeature]
    """

    def __init__(self):
        self._modules: "OrderedDict[FeatureKey, FeatureModule]" = OrderedDict()

    def register(self, module: FeatureModule) -> None:
        """
        Register a feature module.

        Raises:
            ValueError: If the feature key is already registered
        """
        if module.key in self._modules:
            raise ValueError(f"Feature '{module.key.value}' is already registered")
        self._modules[module.key] = module

    def get(self, key: Union[FeatureKey, str]) -> Optional[FeatureModule]:
        try:
            return self._modules.get(FeatureKey(key))
        except ValueError:
            return None

    def get_or_raise(self, key: Union[FeatureKey, str]) -> FeatureModule:
        """
        Get a feature module, raising if not found.

        Raises:
            FeatureNotFoundError: If the key is unknown or not registered
        """
        module = self.get(key)
        if module is None:
            raw = key.value if isinstance(key, FeatureKey) else str(key)
            raise FeatureNotFoundError(raw, [k.value for k in self._modules])
        return module

    def list_all(self) -> List[FeatureModule]:
        return list(self._modules.values())

    def groups(self) -> Dict[str, List[FeatureModule]]:
        """Exclusivity groups mapped to their members in registration order."""
        result: Dict[str, List[FeatureModule]] = {}
        for module in self._modules.values():
            if module.exclusivity_group:
                result.setdefault(module.exclusivity_group, []).append(module)
        return result

    def group_members(self, group: str) -> List[FeatureModule]:
        return self.groups().get(group, [])

    def enabled_rival(
        self,
        module: FeatureModule,
        config: PageConfiguration,
    ) -> Optional[FeatureModule]:
        """First other enabled member of ``module``'s exclusivity group, if any."""
        if not module.exclusivity_group:
            return None
        for member in self.group_members(module.exclusivity_group):
            if member.key != module.key and member.is_enabled(member.section(config)):
                return member
        return None

    def describe(self) -> Dict[str, Any]:
        """Metadata for listings."""
        return {
            "features": [m.describe() for m in self._modules.values()],
            "exclusivity_groups": {
                group: [m.key.value for m in members]
                for group, members in self.groups().items()
            },
        }

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self):
        return iter(self._modules.values())


def default_registry() -> FeatureRegistry:
    """Create a registry holding the seven built-in features."""
    from promptpages.features.definitions import register_all_features

    registry = FeatureRegistry()
    register_all_features(registry)
    return registry
