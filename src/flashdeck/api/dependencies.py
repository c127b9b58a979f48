"""
Shared dependencies for API routes
"""
from fastapi import Depends
from fastapi.responses import JSONResponse
from typing import Annotated
from sqlalchemy.orm import Session

from flashdeck.actions.forms import FormCategory, FormState
from flashdeck.api.auth import get_current_active_user
from flashdeck.llm.generator import FlashcardGenerator
from flashdeck.models.database import get_db
from flashdeck.models.database_models import User
from flashdeck.study.registry import SessionRegistry, study_sessions

_generator = FlashcardGenerator()


def get_generator() -> FlashcardGenerator:
    return _generator


def get_study_sessions() -> SessionRegistry:
    return study_sessions


# Dependency shortcuts
CurrentUser = Annotated[User, Depends(get_current_active_user)]
DBSession = Annotated[Session, Depends(get_db)]
CardGenerator = Annotated[FlashcardGenerator, Depends(get_generator)]
StudySessions = Annotated[SessionRegistry, Depends(get_study_sessions)]


FORM_STATUS_CODES = {
    FormCategory.VALIDATION: 422,
    FormCategory.NOT_FOUND: 404,
    FormCategory.FEATURE: 403,
    FormCategory.GENERATION: 502,
    FormCategory.UNEXPECTED: 500,
}


def form_response(state: FormState, success_status: int = 200) -> JSONResponse:
    """Render an action's FormState with a status code matching its category"""
    status_code = success_status if state.success else FORM_STATUS_CODES.get(state.category, 400)
    return JSONResponse(status_code=status_code, content=state.model_dump(exclude_none=True))
