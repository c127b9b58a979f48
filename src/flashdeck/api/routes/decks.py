"""
Deck management routes
Handles deck CRUD; every deck lookup is scoped to the current user
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Optional

from flashdeck.actions.decks import create_deck_action, delete_deck_action, update_deck_action
from flashdeck.api.dependencies import CurrentUser, DBSession, form_response
from flashdeck.api.routes.cards import serialize_card
from flashdeck.models.database_service import get_cards_by_deck_id, get_deck_if_owner, get_decks_with_card_counts
from flashdeck.services.errors import NotFoundOrForbidden
from flashdeck.services.plans import AI_FLASHCARD_GENERATION, has_feature

router = APIRouter(prefix="/api/decks", tags=["Decks"])


class DeckRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


def serialize_deck(deck, card_count: int) -> dict:
    return {
        "id": deck.id,
        "title": deck.title,
        "description": deck.description,
        "card_count": card_count,
        "created_at": deck.created_at.isoformat() if deck.created_at else None,
        "updated_at": deck.updated_at.isoformat() if deck.updated_at else None,
    }


@router.get("")
async def get_decks(current_user: CurrentUser, db: DBSession):
    """Get all decks for the current user, newest first, with card counts"""
    return [serialize_deck(deck, count) for deck, count in get_decks_with_card_counts(db, current_user.id)]


@router.post("")
async def create_deck(payload: DeckRequest, current_user: CurrentUser, db: DBSession):
    """Create a new deck"""
    state = create_deck_action(db, current_user.id, payload.title, payload.description)
    return form_response(state, success_status=201)


@router.get("/{deck_id}")
async def get_deck(deck_id: int, current_user: CurrentUser, db: DBSession):
    """Get a deck with its cards in study order"""
    try:
        deck = get_deck_if_owner(db, deck_id, current_user.id)
        cards = get_cards_by_deck_id(db, deck_id, current_user.id)
    except NotFoundOrForbidden:
        raise HTTPException(status_code=404, detail="Deck not found")

    body = serialize_deck(deck, len(cards))
    body["cards"] = [serialize_card(card) for card in cards]
    body["can_generate"] = has_feature(current_user, AI_FLASHCARD_GENERATION) and bool(deck.description)
    return body


@router.put("/{deck_id}")
async def update_deck(deck_id: int, payload: DeckRequest, current_user: CurrentUser, db: DBSession):
    """Update a deck's title and description"""
    return form_response(update_deck_action(db, current_user.id, deck_id, payload.title, payload.description))


@router.delete("/{deck_id}")
async def delete_deck(deck_id: int, current_user: CurrentUser, db: DBSession):
    """Delete a deck and all of its cards"""
    return form_response(delete_deck_action(db, current_user.id, deck_id))
