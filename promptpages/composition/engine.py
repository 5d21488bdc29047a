"""
Feature Composition Engine.

Single owner of a page's configuration during an edit session. Feature
handles route every mutation through ``update``, which enforces the
exclusivity groups; ``submit`` validates and writes the whole record.
"""

import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set, Tuple, Union

from promptpages.ai.base import GenerationContext, ReviewGenerator
from promptpages.core.base import utc_now
from promptpages.core.config import PromptPagesSettings, get_settings
from promptpages.core.exceptions import (
    ConflictError,
    FeatureDisabledError,
    OperationInProgressError,
    PersistenceError,
    ProviderNotFoundError,
    UnknownFieldError,
)
from promptpages.features.base import FeatureHandle, ValidationContext
from promptpages.features.models import PAGE_KEY, FeatureKey, PageConfiguration, ReviewPlatform
from promptpages.features.registry import FeatureRegistry, default_registry
from promptpages.kickstarters.catalog import KickstarterCatalog
from promptpages.kickstarters.selection import render
from promptpages.storage.base import PageRecord, PageStorageProtocol
from promptpages.storage.memory import InMemoryPageStorage

logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[Union[FeatureKey, str], ...], PageConfiguration], None]
PostPublish = Callable[[str, PageRecord], Union[Awaitable[None], None]]

PAGE_FIELDS = ("slug", "is_active")


class UpdateStatus(str, Enum):
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    CONFLICT = "conflict"


@dataclass
class UpdateOutcome:
    """Result of one ``update`` call."""

    feature_key: FeatureKey
    status: UpdateStatus
    conflict: Optional[ConflictError] = None

    @property
    def applied(self) -> bool:
        return self.status == UpdateStatus.APPLIED

    @property
    def rejected(self) -> bool:
        return self.status == UpdateStatus.CONFLICT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature_key": self.feature_key.value,
            "status": self.status.value,
            "conflict": self.conflict.to_dict() if self.conflict else None,
        }


class SubmitMode(str, Enum):
    SAVE = "save"
    PUBLISH = "publish"


class SubmitStatus(str, Enum):
    SAVED = "saved"
    PUBLISHED = "published"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass
class SubmitResult:
    """
    Result of a submit.

    Attributes:
        mode: Save or publish
        status: What happened
        violations: Validation problems (INVALID only)
        error: Retryable persistence error (FAILED only)
        record: The record that was written (SAVED/PUBLISHED only)
        post_publish_error: Failure raised by the post-publish hook, if any
    """

    mode: SubmitMode
    status: SubmitStatus
    violations: List[str] = field(default_factory=list)
    error: Optional[PersistenceError] = None
    record: Optional[PageRecord] = None
    post_publish_error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.status in (SubmitStatus.SAVED, SubmitStatus.PUBLISHED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "status": self.status.value,
            "violations": list(self.violations),
            "error": self.error.to_dict() if self.error else None,
        }


class CompositionEngine:
    """
    Hosts the feature modules of one page against a single configuration.

    Example:
        engine = CompositionEngine("page-1", storage=storage, catalog=catalog)
        await engine.load()
        engine.feature("sentiment").enable()
        outcome = engine.feature("note").enable()   # CONFLICT, note stays off
        result = await engine.submit(SubmitMode.PUBLISH)
    """

    def __init__(
        self,
        page_id: str,
        registry: Optional[FeatureRegistry] = None,
        storage: Optional[PageStorageProtocol] = None,
        catalog: Optional[KickstarterCatalog] = None,
        review_generator: Optional[ReviewGenerator] = None,
        post_publish: Optional[PostPublish] = None,
        settings: Optional[PromptPagesSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
        business_name: Optional[str] = None,
        business_defaults: Optional[PageRecord] = None,
    ):
        """
        Initialize the engine with a default configuration.

        Args:
            page_id: Storage key of the page
            registry: Feature modules to host (the seven built-ins by default)
            storage: Persistence collaborator (in-memory by default)
            catalog: Kickstarter catalog used for validation and selection
            review_generator: AI collaborator (registry default when omitted)
            post_publish: Called with (page_id, record) after a successful publish
            settings: Settings override
            clock: Source of timestamps
            business_name: Name substituted into kickstarter prompts
            business_defaults: Business-level sections a page inherits
                until it sets its own (same shape as a stored record)
        """
        self.page_id = page_id
        self.settings = settings or get_settings()
        self.registry = registry or default_registry()
        self.storage = storage or InMemoryPageStorage()
        self.catalog = catalog
        self.post_publish = post_publish
        self.clock = clock or utc_now
        self.business_name = business_name
        self._review_generator = review_generator
        self.business_defaults: PageRecord = dict(business_defaults or {})

        self._config, self._inherited = self._compose({})
        self._hydrated = False
        self._edited = False
        self._submitting = False
        self._generating = False
        self._listeners: List[Listener] = []

    # -- state ---------------------------------------------------------------

    @property
    def configuration(self) -> PageConfiguration:
        """Deep snapshot of the live configuration."""
        return self._config.copy()

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    @property
    def edited(self) -> bool:
        return self._edited

    @property
    def submitting(self) -> bool:
        return self._submitting

    @property
    def selection_cap(self) -> int:
        return self.settings.kickstarter_selection_cap

    @property
    def max_question_length(self) -> int:
        if self.catalog is not None:
            return self.catalog.max_length
        return self.settings.kickstarter_max_length

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register ``listener(changed_keys, configuration)``.

        Returns a callable that unsubscribes it.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, keys: Tuple[Union[FeatureKey, str], ...]) -> None:
        snapshot = self.configuration
        for listener in list(self._listeners):
            listener(keys, snapshot)

    # -- hydration -----------------------------------------------------------

    def hydrate(self, persisted: Optional[PageRecord]) -> bool:
        """
        Replace the configuration with ``persisted`` merged over defaults.

        Each section is merged field by field: fields the record lacks keep
        their defaults, and sections it lacks come from ``business_defaults``.
        Ignored (returns False) once an update has been applied, so late
        data never overwrites edits.
        """
        if self._edited:
            logger.warning(f"Ignoring hydration of page {self.page_id}: it already has edits")
            return False

        self._config, self._inherited = self._compose(persisted or {})
        self._hydrated = True
        logger.info(f"Hydrated page {self.page_id}")
        self._notify((PAGE_KEY,) + tuple(module.key for module in self.registry))
        return True

    def _compose(self, persisted: PageRecord) -> Tuple[PageConfiguration, Set[FeatureKey]]:
        """Build a configuration from ``persisted`` layered over the business defaults."""
        config = PageConfiguration.from_dict(
            {name: persisted.get(name) for name in ("slug", "is_active", "created_at", "updated_at")
             if name in persisted}
        )
        inherited = set()
        for module in self.registry:
            name = module.key.value
            own = persisted.get(name)
            business = self.business_defaults.get(name)
            if own is None and business is not None:
                inherited.add(module.key)
                data = business
            elif isinstance(own, Mapping) and isinstance(business, Mapping):
                data = {**business, **own}
            else:
                data = own
            setattr(config, name, module.hydrate(data))

        self._normalize_groups(config)
        return config, inherited

    def is_inherited(self, feature_key: Union[FeatureKey, str]) -> bool:
        """True while a section still comes unchanged from the business defaults."""
        return self.registry.get_or_raise(feature_key).key in self._inherited

    @property
    def inherited_keys(self) -> List[FeatureKey]:
        return [module.key for module in self.registry if module.key in self._inherited]

    def inherit(self, feature_key: Union[FeatureKey, str]) -> UpdateOutcome:
        """
        Drop the page's own section and go back to the business default.

        Subject to the same exclusivity check as ``update``.

        Raises:
            KeyError: If the business defaults have no such section
        """
        module = self.registry.get_or_raise(feature_key)
        business = self.business_defaults.get(module.key.value)
        if business is None:
            raise KeyError(f"No business default for '{module.key.value}'")
        if module.key in self._inherited:
            return UpdateOutcome(module.key, UpdateStatus.UNCHANGED)

        section = module.hydrate(business)
        outcome = self._apply(module, section)
        if outcome.status != UpdateStatus.CONFLICT:
            self._inherited.add(module.key)
            self._edited = True
        return outcome

    def _normalize_groups(self, config: PageConfiguration) -> None:
        for group, members in self.registry.groups().items():
            enabled = [m for m in members if m.is_enabled(m.section(config))]
            for extra in enabled[1:]:
                logger.warning(
                    f"Page {self.page_id} enables both '{enabled[0].key.value}' and "
                    f"'{extra.key.value}' in group '{group}'; disabling '{extra.key.value}'"
                )
                setattr(config, extra.key.value, extra.merge(extra.section(config), extra.disable_patch()))

    async def load(self) -> bool:
        """
        Load the page from storage and hydrate it.

        Returns False when the page has never been saved or hydration was ignored.

        Raises:
            PersistenceError: If storage fails
        """
        try:
            record = await self.storage.load(self.page_id)
        except Exception as e:
            logger.error(f"Failed to load page {self.page_id}: {e}")
            raise PersistenceError(self.page_id, "load", str(e)) from e
        if record is None:
            logger.info(f"Page {self.page_id} not found in storage; keeping defaults")
            return False
        return self.hydrate(record)

    # -- mutation ------------------------------------------------------------

    def feature(self, key: Union[FeatureKey, str]) -> FeatureHandle:
        """Bound handle for one feature."""
        return self.registry.get_or_raise(key).bind(self)

    def features(self) -> List[FeatureHandle]:
        return [module.bind(self) for module in self.registry]

    def update(self, feature_key: Union[FeatureKey, str], patch: Any) -> UpdateOutcome:
        """
        Apply ``patch`` to one feature's section.

        A patch that would switch on a feature while another member of its
        exclusivity group is on is rejected as a whole and returned as a
        CONFLICT outcome.

        Raises:
            FeatureNotFoundError: If the key is unknown
            UnknownFieldError: If the patch names fields the feature lacks
        """
        module = self.registry.get_or_raise(feature_key)
        section = module.section(self._config)
        merged = module.merge(section, patch)

        outcome = self._apply(module, merged, enabling=module.would_enable(section, patch))
        if outcome.applied:
            self._inherited.discard(module.key)
        return outcome

    def _apply(self, module: Any, new_section: Any, enabling: Optional[bool] = None) -> UpdateOutcome:
        section = module.section(self._config)
        if enabling is None:
            enabling = not module.is_enabled(section) and module.is_enabled(new_section)

        if enabling:
            rival = self.registry.enabled_rival(module, self._config)
            if rival is not None:
                conflict = ConflictError(
                    feature_key=module.key.value,
                    conflicting_key=rival.key.value,
                    group=module.exclusivity_group,
                    message=f"Turn off {rival.title} before enabling {module.title}.",
                )
                logger.warning(f"Rejected update of {module.key.value} on page {self.page_id}: {conflict.message}")
                return UpdateOutcome(module.key, UpdateStatus.CONFLICT, conflict)

        if new_section == section:
            return UpdateOutcome(module.key, UpdateStatus.UNCHANGED)

        setattr(self._config, module.key.value, new_section)
        self._edited = True
        self._notify((module.key,))
        return UpdateOutcome(module.key, UpdateStatus.APPLIED)

    def update_page(self, **fields: Any) -> bool:
        """
        Change page bookkeeping fields (``slug``, ``is_active``).

        Raises:
            UnknownFieldError: For any other field
        """
        unknown = sorted(set(fields) - set(PAGE_FIELDS))
        if unknown:
            raise UnknownFieldError("page", unknown)
        changed = False
        for name, value in fields.items():
            if getattr(self._config, name) != value:
                setattr(self._config, name, value)
                changed = True
        if changed:
            self._edited = True
            self._notify((PAGE_KEY,))
        return changed

    # -- validation and submit -----------------------------------------------

    def validation_context(self) -> ValidationContext:
        return ValidationContext(
            catalog=self.catalog,
            selection_cap=self.selection_cap,
            max_question_length=self.max_question_length,
        )

    def validate(self) -> List[str]:
        """Ordered violations: group conflicts first, then each feature in registry order."""
        violations = []
        for members in self.registry.groups().values():
            enabled = [m for m in members if m.is_enabled(m.section(self._config))]
            if len(enabled) > 1:
                titles = " and ".join(m.title for m in enabled)
                violations.append(f"{titles} cannot both be enabled.")

        context = self.validation_context()
        for module in self.registry:
            violations.extend(module.validate(self._config, context))
        return violations

    async def submit(self, mode: SubmitMode = SubmitMode.SAVE) -> SubmitResult:
        """
        Validate and persist the whole configuration.

        Invalid pages are not written. A failed write returns a FAILED
        result carrying a retryable PersistenceError and leaves the
        in-memory configuration as it was.

        Raises:
            OperationInProgressError: If a submit is already pending
        """
        mode = SubmitMode(mode)
        if self._submitting:
            raise OperationInProgressError("submit")
        self._submitting = True
        try:
            violations = self.validate()
            if violations:
                logger.info(f"Page {self.page_id} not submitted: {len(violations)} violation(s)")
                return SubmitResult(mode, SubmitStatus.INVALID, violations=violations)

            now = self.clock()
            candidate = self._config.copy()
            candidate.created_at = candidate.created_at or now
            candidate.updated_at = now
            record = candidate.to_dict()
            for key in self._inherited:
                record.pop(key.value, None)

            try:
                await self.storage.save(self.page_id, record)
            except Exception as e:
                logger.error(f"Failed to save page {self.page_id}: {e}")
                error = PersistenceError(self.page_id, "save", str(e))
                return SubmitResult(mode, SubmitStatus.FAILED, error=error)

            self._config.created_at = candidate.created_at
            self._config.updated_at = candidate.updated_at
            status = SubmitStatus.PUBLISHED if mode == SubmitMode.PUBLISH else SubmitStatus.SAVED
            logger.info(f"Page {self.page_id} {status.value}")

            result = SubmitResult(mode, status, record=record)
            if mode != SubmitMode.PUBLISH:
                return result

            if self.post_publish is not None:
                try:
                    outcome = self.post_publish(self.page_id, record)
                    if inspect.isawaitable(outcome):
                        await outcome
                except Exception as e:
                    logger.error(f"Post-publish hook failed for page {self.page_id}: {e}")
                    result.post_publish_error = e
            return result
        finally:
            self._submitting = False

    # -- AI assistance -------------------------------------------------------

    @property
    def review_generator(self) -> ReviewGenerator:
        if self._review_generator is None:
            from promptpages.ai import get_review_generator

            try:
                self._review_generator = get_review_generator(self.settings.default_review_generator)
            except ProviderNotFoundError as e:
                logger.warning(f"{e.message}; using the default review generator")
                self._review_generator = get_review_generator()
        return self._review_generator

    def _kickstarter_prompts(self) -> List[str]:
        section = self._config.kickstarters
        if not section.enabled or self.catalog is None:
            return []
        prompts = []
        for item_id in section.selected_ids:
            item = self.catalog.get(item_id)
            if item is not None:
                prompts.append(render(item, self.business_name))
        return prompts

    async def generate_review(self, platform_index: int) -> str:
        """
        Draft a review for one platform and store it on that platform.

        The platform is found again by name and URL once the draft is
        ready. If it was removed meanwhile the draft is returned but not
        stored.

        Raises:
            FeatureDisabledError: If AI generation is off for this page
            IndexError: If there is no platform at ``platform_index``
            OperationInProgressError: If a generation is already pending
            GenerationError: If the generator fails
        """
        if not self._config.ai_assist.generation_enabled:
            raise FeatureDisabledError(FeatureKey.AI_ASSIST.value, "AI review generation")
        platform = self._config.platforms[platform_index]
        context = GenerationContext(
            page_slug=self._config.slug,
            platform_name=platform.display_name,
            target_word_count=platform.target_word_count,
            business_name=self.business_name,
            prompts=self._kickstarter_prompts(),
            existing_text=platform.review_text,
        )

        text = await self._guarded_generation(self.review_generator.generate(context))
        index = self._locate_platform(platform, platform_index)
        if index is None:
            logger.warning(f"Platform {platform.display_name} left page {self.page_id} during generation; draft not stored")
            return text
        self.feature(FeatureKey.PLATFORMS).update_platform(index, review_text=text)
        return text

    def _locate_platform(self, platform: ReviewPlatform, hint: int) -> Optional[int]:
        identity = (platform.name, platform.custom_name, platform.url)
        platforms = self._config.platforms
        candidates = [hint] + [i for i in range(len(platforms)) if i != hint]
        for i in candidates:
            if i < len(platforms) and (platforms[i].name, platforms[i].custom_name, platforms[i].url) == identity:
                return i
        return None

    async def fix_grammar(self, text: str) -> str:
        """
        Correct spelling and grammar of a draft.

        Raises:
            FeatureDisabledError: If grammar fixing is off for this page
        """
        if not self._config.ai_assist.grammar_fix_enabled:
            raise FeatureDisabledError(FeatureKey.AI_ASSIST.value, "Grammar fixing")
        return await self._guarded_generation(self.review_generator.fix_grammar(text))

    async def _guarded_generation(self, call: Awaitable[str]) -> str:
        if self._generating:
            if inspect.iscoroutine(call):
                call.close()
            raise OperationInProgressError("generate")
        self._generating = True
        try:
            return await call
        finally:
            self._generating = False
