"""
Study session routes
Start a session over a deck's cards, drive it, and finish it. Session state
lives in memory only; nothing is written back to the deck.
"""
import enum

from fastapi import APIRouter, HTTPException

from flashdeck.api.dependencies import CurrentUser, DBSession, StudySessions
from flashdeck.models.database_service import get_cards_by_deck_id, get_deck_if_owner
from flashdeck.models.flashcard_models import StudyCard
from flashdeck.services.errors import NotFoundOrForbidden
from flashdeck.study.session import InputSignal, StudySession

router = APIRouter(prefix="/api", tags=["Study"])


class StudyAction(str, enum.Enum):
    REVEAL = "reveal"
    HIDE = "hide"
    FLIP = "flip"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    NEXT = "next"
    PREVIOUS = "previous"
    RESET = "reset"


def apply_action(session: StudySession, action: StudyAction) -> bool:
    if action == StudyAction.RESET:
        session.reset()
        return True
    handlers = {
        StudyAction.REVEAL: session.reveal,
        StudyAction.HIDE: session.hide,
        StudyAction.FLIP: session.flip,
        StudyAction.CORRECT: session.mark_correct,
        StudyAction.INCORRECT: session.mark_incorrect,
        StudyAction.NEXT: lambda: session.handle(InputSignal.NEXT),
        StudyAction.PREVIOUS: lambda: session.handle(InputSignal.PREVIOUS),
    }
    return handlers[action]()


def _get_session(registry, session_id: str, user_id: int) -> StudySession:
    session = registry.get(session_id, user_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Study session not found")
    return session


@router.post("/decks/{deck_id}/study", status_code=201)
async def start_study_session(deck_id: int, current_user: CurrentUser, db: DBSession, registry: StudySessions):
    """Start a study session over the deck's cards in store order"""
    try:
        deck = get_deck_if_owner(db, deck_id, current_user.id)
        cards = get_cards_by_deck_id(db, deck_id, current_user.id)
    except NotFoundOrForbidden:
        raise HTTPException(status_code=404, detail="Deck not found")

    if not cards:
        raise HTTPException(status_code=400, detail="Add cards to this deck before studying it")

    snapshot = [StudyCard(id=c.id, front=c.front, back=c.back, order=c.order) for c in cards]
    session_id, session = registry.start(current_user.id, deck.id, deck.title, snapshot)
    return {"session_id": session_id, **session.snapshot()}


@router.get("/study/{session_id}")
async def get_study_session(session_id: str, current_user: CurrentUser, registry: StudySessions):
    """Current state of a study session"""
    session = _get_session(registry, session_id, current_user.id)
    return {"session_id": session_id, **session.snapshot()}


@router.post("/study/{session_id}/keys/{signal}")
async def send_study_signal(session_id: str, signal: InputSignal, current_user: CurrentUser,
                            registry: StudySessions):
    """Directional/toggle input; next and toggle are ignored while a revealed card awaits judgment"""
    session = _get_session(registry, session_id, current_user.id)
    accepted = session.handle(signal)
    return {"session_id": session_id, "accepted": accepted, **session.snapshot()}


@router.post("/study/{session_id}/{action}")
async def apply_study_action(session_id: str, action: StudyAction, current_user: CurrentUser,
                             registry: StudySessions):
    """Apply one session operation; `accepted` is false when its guard rejected it"""
    session = _get_session(registry, session_id, current_user.id)
    accepted = apply_action(session, action)
    return {"session_id": session_id, "accepted": accepted, **session.snapshot()}


@router.delete("/study/{session_id}")
async def finish_study_session(session_id: str, current_user: CurrentUser, registry: StudySessions):
    """Finish a session, discarding its state, and point back to the deck"""
    session = registry.finish(session_id, current_user.id)
    if session is None:
        raise HTTPException(status_code=404, detail="Study session not found")
    return {"deck_id": session.deck_id, "redirect": f"/api/decks/{session.deck_id}"}
