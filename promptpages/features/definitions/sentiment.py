"""
Emoji sentiment feature.

Visitors first pick one of five emojis; happy visitors continue to the
review platforms and unhappy ones are asked for private feedback. The
same five labels drive the embeddable widget.
"""

from typing import List

from promptpages.features.base import ARRIVAL_POPUP_GROUP, FeatureModule, ValidationContext
from promptpages.features.models import FeatureKey, PageConfiguration, SentimentConfig

SENTIMENT_LABELS = ("Excellent", "Satisfied", "Neutral", "Unsatisfied", "Frustrated")


class SentimentFeature(FeatureModule):
    key = FeatureKey.SENTIMENT
    title = "Emoji sentiment flow"
    description = "Ask how the experience was before inviting a public review."
    section_type = SentimentConfig
    exclusivity_group = ARRIVAL_POPUP_GROUP

    def validate(self, config: PageConfiguration, context: ValidationContext) -> List[str]:
        sentiment = config.sentiment
        if not sentiment.enabled:
            return []
        violations = []
        if not sentiment.question.strip():
            violations.append("Emoji sentiment flow needs a question.")
        if not sentiment.feedback_prompt.strip():
            violations.append("Emoji sentiment flow needs a feedback message.")
        return violations
