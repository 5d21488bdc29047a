"""
Kickstarter Models.

Kickstarters (aka prompts) are short questions shown while a customer
writes a review. Defaults are seeded once and never change; accounts can
add custom questions of their own.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

BUSINESS_NAME_PLACEHOLDER = "[Business Name]"


class KickstarterCategory(str, Enum):
    """Closed set of kickstarter categories."""

    PROCESS = "PROCESS"
    EXPERIENCE = "EXPERIENCE"
    OUTCOMES = "OUTCOMES"
    PEOPLE = "PEOPLE"

    @property
    def label(self) -> str:
        return self.value.title()


@dataclass(frozen=True)
class Kickstarter:
    """
    One selectable question.

    Attributes:
        id: Unique identifier
        question: Question template, may contain BUSINESS_NAME_PLACEHOLDER
        category: Category the question is filed under
        is_default: True for seeded questions, which are immutable
        account_id: Owning account for custom questions
    """

    id: str
    question: str
    category: KickstarterCategory
    is_default: bool = False
    account_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "category": self.category.value,
            "is_default": self.is_default,
            "account_id": self.account_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Kickstarter":
        return cls(
            id=str(data["id"]),
            question=data["question"],
            category=KickstarterCategory(data["category"]),
            is_default=bool(data.get("is_default", False)),
            account_id=data.get("account_id"),
        )


def _default(item_id: str, category: KickstarterCategory, question: str) -> Kickstarter:
    return Kickstarter(id=item_id, question=question, category=category, is_default=True)


_P = KickstarterCategory.PROCESS
_E = KickstarterCategory.EXPERIENCE
_O = KickstarterCategory.OUTCOMES
_PP = KickstarterCategory.PEOPLE

DEFAULT_KICKSTARTERS = (
    _default("process-01", _P, "What made the experience with [Business Name] feel simple or stress-free?"),
    _default("process-02", _P, "How easy was it to get started with [Business Name]?"),
    _default("process-03", _P, "What stood out about how [Business Name] communicated with you along the way?"),
    _default("process-04", _P, "How did [Business Name] keep things on schedule?"),
    _default("process-05", _P, "Was there a moment when [Business Name] made a complicated step feel easy? What happened?"),
    _default("experience-01", _E, "What's one word you'd use to describe [Business Name]—and why?"),
    _default("experience-02", _E, "How did [Business Name] meet—or exceed—your expectations?"),
    _default("experience-03", _E, "What surprised you most about working with [Business Name]?"),
    _default("experience-04", _E, "How would you describe [Business Name] to a friend?"),
    _default("experience-05", _E, "What did [Business Name] do that you haven't experienced elsewhere?"),
    _default("outcomes-01", _O, "What result are you most happy with?"),
    _default("outcomes-02", _O, "What changed for you after working with [Business Name]?"),
    _default("outcomes-03", _O, "What problem did [Business Name] solve for you?"),
    _default("outcomes-04", _O, "Would you recommend [Business Name]? What would you tell someone who is on the fence?"),
    _default("people-01", _PP, "Is there someone at [Business Name] you'd like to thank by name?"),
    _default("people-02", _PP, "Who on the team made the biggest difference for you?"),
    _default("people-03", _PP, "How did the team at [Business Name] make you feel?"),
    _default("people-04", _PP, "What did you appreciate most about the people you worked with?"),
)

# Shown in the editor preview while nothing is selected.
PREVIEW_SAMPLES = (
    "What made the experience with [Business Name] feel simple or stress-free?",
    "What's one word you'd use to describe [Business Name]—and why?",
    "How did [Business Name] meet—or exceed—your expectations?",
    "Is there someone at [Business Name] you'd like to thank by name?",
)

# Seconds each preview sample stays on screen.
PREVIEW_ROTATION_SECONDS = 10
