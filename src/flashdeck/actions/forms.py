"""
Form validation and form state shared by deck and card actions
"""
from typing import Callable, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from sqlalchemy.orm import Session

from flashdeck.services.errors import (
    FORM_ERROR_KEY, FeatureNotAvailable, GenerationError, NotFoundOrForbidden, Unexpected, ValidationFailed,
)

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000
CARD_SIDE_MAX_LENGTH = 1000


class FormCategory:
    VALIDATION = "validation"
    NOT_FOUND = "not_found_or_forbidden"
    FEATURE = "feature_not_available"
    GENERATION = "generation_failed"
    UNEXPECTED = "unexpected"


class FormState(BaseModel):
    success: bool = False
    errors: Dict[str, List[str]] = Field(default_factory=dict)
    category: Optional[str] = None
    deck_id: Optional[int] = None
    card_id: Optional[int] = None
    total_generated: Optional[int] = None

    @classmethod
    def ok(cls, **kwargs) -> "FormState":
        return cls(success=True, **kwargs)

    @classmethod
    def invalid(cls, field_errors: Dict[str, List[str]]) -> "FormState":
        return cls(errors=field_errors, category=FormCategory.VALIDATION)

    @classmethod
    def failed(cls, message: str, category: str) -> "FormState":
        return cls(errors={FORM_ERROR_KEY: [message]}, category=category)


# ============= INPUT SCHEMAS =============

def _required_text(value, label: str, max_length: int) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValueError(f"{label} is required")
    if len(text) > max_length:
        raise ValueError(f"{label} must be {max_length} characters or less")
    return text


class DeckInput(BaseModel):
    model_config = ConfigDict(validate_default=True)

    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator('title', mode='before')
    @classmethod
    def validate_title(cls, v):
        return _required_text(v, "Title", TITLE_MAX_LENGTH)

    @field_validator('description', mode='before')
    @classmethod
    def validate_description(cls, v):
        if v is None:
            return None
        text = str(v).strip()
        if len(text) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less")
        return text or None


class CardInput(BaseModel):
    model_config = ConfigDict(validate_default=True)

    front: Optional[str] = None
    back: Optional[str] = None

    @field_validator('front', mode='before')
    @classmethod
    def validate_front(cls, v):
        return _required_text(v, "Front text", CARD_SIDE_MAX_LENGTH)

    @field_validator('back', mode='before')
    @classmethod
    def validate_back(cls, v):
        return _required_text(v, "Back text", CARD_SIDE_MAX_LENGTH)


def field_errors(error: ValidationError) -> Dict[str, List[str]]:
    """Flatten a pydantic ValidationError into {field: [messages]}"""
    errors: Dict[str, List[str]] = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item.get("loc") else FORM_ERROR_KEY
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, []).append(message)
    return errors


def parse_input(schema, **data):
    try:
        return schema(**data)
    except ValidationError as e:
        raise ValidationFailed(field_errors(e)) from e


def require_positive_id(value, field: str, label: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = 0
    if parsed <= 0:
        raise ValidationFailed({field: [f"Invalid {label} ID"]})
    return parsed


# ============= ACTION BOUNDARY =============

def handle_failure(db: Session, error: Exception, action: str, not_found_message: str) -> FormState:
    """Map a failure raised inside an action to a form state"""
    if isinstance(error, ValidationFailed):
        return FormState.invalid(error.field_errors)
    if isinstance(error, NotFoundOrForbidden):
        logger.warning(f"{action}: {error}")
        return FormState.failed(not_found_message, FormCategory.NOT_FOUND)
    if isinstance(error, FeatureNotAvailable):
        return FormState.failed(str(error), FormCategory.FEATURE)
    if isinstance(error, GenerationError):
        return FormState.failed(str(error), FormCategory.GENERATION)

    db.rollback()
    if isinstance(error, Unexpected):
        logger.opt(exception=error).error(f"Store failure during {action}: {error}")
    else:
        logger.opt(exception=error).error(f"Error during {action}: {error}")
    return FormState.failed(f"Failed to {action}. Please try again.", FormCategory.UNEXPECTED)


def run_action(db: Session, action: str, not_found_message: str, fn: Callable[[], FormState]) -> FormState:
    try:
        return fn()
    except Exception as e:
        return handle_failure(db, e, action, not_found_message)
