"""
Failure categories raised by the deck/card store and surfaced by actions
"""
from typing import Dict, List, Optional

FORM_ERROR_KEY = "_form"


class FlashdeckError(Exception):
    """Base class for failures at the CRUD boundary"""


class NotFoundOrForbidden(FlashdeckError):
    """The resource does not exist or is not owned by the acting user.

    Both cases carry the same message so callers cannot tell the two apart.
    """

    resource = "Resource"

    def __init__(self, resource_id: Optional[int] = None):
        self.resource_id = resource_id
        super().__init__(f"{self.resource} not found or access denied")


class DeckNotFoundOrForbidden(NotFoundOrForbidden):
    resource = "Deck"


class CardNotFoundOrForbidden(NotFoundOrForbidden):
    resource = "Card"


class ValidationFailed(FlashdeckError):
    """Field-level validation failure; maps field name to messages"""

    def __init__(self, field_errors: Dict[str, List[str]]):
        self.field_errors = field_errors
        super().__init__("; ".join(f"{k}: {', '.join(v)}" for k, v in field_errors.items()))


class Unexpected(FlashdeckError):
    """Store or network failure with no user-actionable cause"""


class FeatureNotAvailable(FlashdeckError):
    """The acting user's plan does not include a feature"""

    def __init__(self, feature: str):
        self.feature = feature
        super().__init__(f"Feature '{feature}' is not available on your plan")


class GenerationError(FlashdeckError):
    """The text-generation collaborator failed or returned nothing usable"""
