"""
Falling animation feature.

Icons rain down when the page loads. The icon catalog below is the
closed set of keys a page may pick.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from promptpages.features.base import FeatureModule, ValidationContext
from promptpages.features.models import FallingAnimationConfig, FeatureKey, PageConfiguration

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class FallingIcon:
    """An icon that can be used for the falling animation."""

    key: str
    label: str
    category: str


FALLING_ICONS = (
    # General
    FallingIcon("star", "Stars", "General"),
    FallingIcon("heart", "Hearts", "General"),
    FallingIcon("smile", "Smiles", "General"),
    FallingIcon("bolt", "Lightning", "General"),
    FallingIcon("gem", "Diamond/Gem", "General"),
    FallingIcon("thumbsup", "Thumbs Up", "General"),
    # Nature & Weather
    FallingIcon("rainbow", "Rainbow", "Nature & Weather"),
    FallingIcon("sun", "Sun", "Nature & Weather"),
    FallingIcon("moon", "Moon", "Nature & Weather"),
    FallingIcon("cloud", "Cloud", "Nature & Weather"),
    FallingIcon("fire", "Fire", "Nature & Weather"),
    FallingIcon("tree", "Tree", "Nature & Weather"),
    FallingIcon("leaf", "Leaf", "Nature & Weather"),
    FallingIcon("snowflake", "Snowflake", "Nature & Weather"),
    FallingIcon("seedling", "Seedling", "Nature & Weather"),
    FallingIcon("flower", "Flower", "Nature & Weather"),
    # Food & Beverages
    FallingIcon("coffee", "Coffee", "Food & Beverages"),
    FallingIcon("gift", "Gift", "Food & Beverages"),
    FallingIcon("wine", "Wine", "Food & Beverages"),
    FallingIcon("pizza", "Pizza", "Food & Beverages"),
    FallingIcon("icecream", "Ice Cream", "Food & Beverages"),
    FallingIcon("cake", "Birthday Cake", "Food & Beverages"),
    FallingIcon("cheers", "Cheers", "Food & Beverages"),
    # Activities & Sports
    FallingIcon("trophy", "Trophy", "Activities & Sports"),
    FallingIcon("medal", "Medal", "Activities & Sports"),
    FallingIcon("crown", "Crown", "Activities & Sports"),
    FallingIcon("bicycle", "Bicycle", "Activities & Sports"),
    # Tools & Objects
    FallingIcon("key", "Key", "Tools & Objects"),
    FallingIcon("lightbulb", "Lightbulb", "Tools & Objects"),
    FallingIcon("magic", "Magic", "Tools & Objects"),
    FallingIcon("rocket", "Rocket", "Tools & Objects"),
    # Transportation
    FallingIcon("plane", "Plane", "Transportation"),
    FallingIcon("car", "Car", "Transportation"),
    # Symbols & Peace
    FallingIcon("peace", "Peace", "Symbols & Peace"),
    FallingIcon("globe", "Globe", "Symbols & Peace"),
    # Entertainment & Media
    FallingIcon("music", "Music", "Entertainment & Media"),
    FallingIcon("camera", "Camera", "Entertainment & Media"),
    FallingIcon("book", "Book", "Entertainment & Media"),
    FallingIcon("palette", "Palette", "Entertainment & Media"),
    # Education & Learning
    FallingIcon("graduationcap", "Graduation Cap", "Education & Learning"),
)

FALLING_ICONS_BY_KEY: Dict[str, FallingIcon] = {icon.key: icon for icon in FALLING_ICONS}


def get_falling_icon(key: str) -> Optional[FallingIcon]:
    return FALLING_ICONS_BY_KEY.get(key)


def icons_by_category() -> Dict[str, List[FallingIcon]]:
    """Icons grouped by category, in catalog order."""
    grouped: Dict[str, List[FallingIcon]] = {}
    for icon in FALLING_ICONS:
        grouped.setdefault(icon.category, []).append(icon)
    return grouped


class FallingAnimationFeature(FeatureModule):
    key = FeatureKey.FALLING_ANIMATION
    title = "Falling star animation"
    description = "Rain stars (or another icon) down the page when it loads."
    section_type = FallingAnimationConfig

    def validate(self, config: PageConfiguration, context: ValidationContext) -> List[str]:
        falling = config.falling_animation
        violations = []
        if falling.icon_key not in FALLING_ICONS_BY_KEY:
            violations.append(f"Unknown falling animation icon '{falling.icon_key}'.")
        if not HEX_COLOR_RE.match(falling.color_hex or ""):
            violations.append(f"Falling animation colour '{falling.color_hex}' is not a hex colour.")
        return violations
