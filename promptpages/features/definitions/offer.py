"""Special offer feature."""

from typing import List

from promptpages.features.base import FeatureModule, ValidationContext, is_http_url
from promptpages.features.models import FeatureKey, OfferConfig, PageConfiguration


class OfferFeature(FeatureModule):
    key = FeatureKey.OFFER
    title = "Special offer"
    description = "Reward customers with an offer after they leave a review."
    section_type = OfferConfig

    def validate(self, config: PageConfiguration, context: ValidationContext) -> List[str]:
        offer = config.offer
        if not offer.enabled:
            return []
        violations = []
        if not offer.title.strip():
            violations.append("Special offer needs a title.")
        if offer.url and not is_http_url(offer.url):
            violations.append("Special offer link must be an http(s) URL.")
        elif not offer.url:
            violations.append("Special offer needs a link.")
        return violations
