"""
Review platform list feature.

The page lists the sites a customer can post their review on. Unlike
the other features there is no on/off switch: the list itself is the
configuration, replaced as a whole on every update.
"""

import dataclasses
from typing import Any, Callable, List, Mapping, Optional, Sequence

from promptpages.core.base import utc_now
from promptpages.core.exceptions import FeatureOperationError, UnknownFieldError
from promptpages.features.base import FeatureHandle, FeatureModule, ValidationContext, is_http_url
from promptpages.features.models import FeatureKey, PageConfiguration, ReviewPlatform

PLATFORM_OPTIONS = (
    "Google Business Profile",
    "Yelp",
    "Facebook",
    "TripAdvisor",
    "G2",
    "BBB",
    "Thumbtack",
    "Clutch",
    "Capterra",
    "Angi",
    "Houzz",
    "HomeAdvisor",
    "Trustpilot",
    "Other",
)

OTHER_PLATFORM = "Other"


def _coerce_platform(value: Any) -> ReviewPlatform:
    if isinstance(value, ReviewPlatform):
        return dataclasses.replace(value)
    if isinstance(value, Mapping):
        return ReviewPlatform.from_dict(dict(value))
    raise TypeError(f"Expected ReviewPlatform or mapping, got {type(value).__name__}")


class PlatformListFeature(FeatureModule):
    key = FeatureKey.PLATFORMS
    title = "Review platforms"
    description = "Where customers are sent to post their review."
    section_type = ReviewPlatform
    togglable = False

    def default_section(self) -> List[ReviewPlatform]:
        return []

    def is_enabled(self, section: Sequence[ReviewPlatform]) -> bool:
        return bool(section)

    def merge(self, section: Any, patch: Any) -> List[ReviewPlatform]:
        """
        Replace the platform list.

        Raises:
            FeatureOperationError: If the patch is a field mapping instead of a list
        """
        if isinstance(patch, Mapping) or isinstance(patch, (str, bytes)):
            raise FeatureOperationError(
                self.key.value, "update", "pass the complete list of platforms"
            )
        return [_coerce_platform(item) for item in patch]

    def hydrate(self, data: Any) -> List[ReviewPlatform]:
        return [ReviewPlatform.from_dict(item) for item in data or []]

    def serialize(self, section: Sequence[ReviewPlatform]) -> List[dict]:
        return [platform.to_dict() for platform in section]

    def validate(self, config: PageConfiguration, context: ValidationContext) -> List[str]:
        violations = []
        for position, platform in enumerate(config.platforms, start=1):
            label = f"Platform {position}"
            if not platform.name.strip():
                violations.append(f"{label} needs a platform name.")
            elif platform.name == OTHER_PLATFORM and not (platform.custom_name or "").strip():
                violations.append(f"{label} is 'Other' but has no custom name.")
            if not platform.url.strip():
                violations.append(f"{label} needs a review URL.")
            elif not is_http_url(platform.url):
                violations.append(f"{label} review URL must be an http(s) URL.")
            if platform.target_word_count <= 0:
                violations.append(f"{label} word count must be positive.")
        return violations

    def bind(self, engine: Any) -> "PlatformsHandle":
        return PlatformsHandle(self, engine)


class PlatformsHandle(FeatureHandle):
    """List operations on the page's review platforms."""

    @property
    def platforms(self) -> List[ReviewPlatform]:
        return list(self.section)

    def _clock(self) -> Callable[[], Any]:
        return getattr(self.engine, "clock", None) or utc_now

    def _replace(self, platforms: List[ReviewPlatform]):
        return self.engine.update(self.key, platforms)

    def add_platform(
        self,
        name: str,
        url: str = "",
        target_word_count: int = 200,
        custom_name: Optional[str] = None,
    ):
        platform = ReviewPlatform(
            name=name,
            url=url,
            target_word_count=target_word_count,
            custom_name=custom_name,
        )
        return self._replace(self.platforms + [platform])

    def remove_platform(self, index: int):
        platforms = self.platforms
        del platforms[index]
        return self._replace(platforms)

    def update_platform(self, index: int, **fields: Any):
        """
        Change fields of the platform at ``index``.

        Raises:
            UnknownFieldError: If a field is not a platform field
            IndexError: If there is no platform at ``index``
        """
        known = {f.name for f in dataclasses.fields(ReviewPlatform)}
        unknown = sorted(set(fields) - known)
        if unknown:
            raise UnknownFieldError(self.key.value, unknown)
        platforms = self.platforms
        platforms[index] = dataclasses.replace(platforms[index], **fields)
        return self._replace(platforms)

    def mark_verified(self, index: int, verified: bool = True):
        """Record that the review on platform ``index`` was (or was not) posted."""
        verified_at = self._clock()() if verified else None
        return self.update_platform(index, verified=verified, verified_at=verified_at)
