"""
Card management routes
Handles card CRUD within a deck and AI generation of new cards
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional

from flashdeck.actions.cards import (
    clear_cards_action, create_card_action, delete_card_action, generate_cards_action, reorder_cards_action,
    update_card_action,
)
from flashdeck.api.dependencies import CardGenerator, CurrentUser, DBSession, form_response
from flashdeck.llm.generator import DEFAULT_CARD_COUNT
from flashdeck.models.database_service import get_cards_by_deck_id
from flashdeck.services.errors import NotFoundOrForbidden

router = APIRouter(prefix="/api", tags=["Cards"])


class CardRequest(BaseModel):
    front: Optional[str] = None
    back: Optional[str] = None


class CardOrder(BaseModel):
    card_id: int
    order: int


class ReorderRequest(BaseModel):
    cards: List[CardOrder]


class GenerateRequest(BaseModel):
    count: int = Field(default=DEFAULT_CARD_COUNT)


def serialize_card(card) -> dict:
    return {
        "id": card.id,
        "deck_id": card.deck_id,
        "front": card.front,
        "back": card.back,
        "order": card.order,
        "created_at": card.created_at.isoformat() if card.created_at else None,
        "updated_at": card.updated_at.isoformat() if card.updated_at else None,
    }


@router.get("/decks/{deck_id}/cards")
async def get_deck_cards(deck_id: int, current_user: CurrentUser, db: DBSession):
    """Get a deck's cards in study order"""
    try:
        cards = get_cards_by_deck_id(db, deck_id, current_user.id)
    except NotFoundOrForbidden:
        raise HTTPException(status_code=404, detail="Deck not found")
    return [serialize_card(card) for card in cards]


@router.post("/decks/{deck_id}/cards")
async def add_card(deck_id: int, payload: CardRequest, current_user: CurrentUser, db: DBSession):
    """Add a card to the end of a deck"""
    state = create_card_action(db, current_user.id, deck_id, payload.front, payload.back)
    return form_response(state, success_status=201)


@router.put("/decks/{deck_id}/cards/order")
async def reorder_deck_cards(deck_id: int, payload: ReorderRequest, current_user: CurrentUser, db: DBSession):
    """Set explicit order values for cards in a deck"""
    orders = [(item.card_id, item.order) for item in payload.cards]
    return form_response(reorder_cards_action(db, current_user.id, deck_id, orders))


@router.delete("/decks/{deck_id}/cards")
async def clear_deck_cards(deck_id: int, current_user: CurrentUser, db: DBSession):
    """Delete every card in a deck, keeping the deck"""
    return form_response(clear_cards_action(db, current_user.id, deck_id))


@router.post("/decks/{deck_id}/generate")
async def generate_cards(deck_id: int, current_user: CurrentUser, db: DBSession, generator: CardGenerator,
                         payload: Optional[GenerateRequest] = None):
    """Generate cards with AI from the deck's title and description"""
    count = payload.count if payload else DEFAULT_CARD_COUNT
    state = await generate_cards_action(db, current_user, deck_id, generator, count=count)
    return form_response(state, success_status=201)


@router.put("/cards/{card_id}")
async def update_card(card_id: int, payload: CardRequest, current_user: CurrentUser, db: DBSession):
    """Update a card's front and back"""
    return form_response(update_card_action(db, current_user.id, card_id, payload.front, payload.back))


@router.delete("/cards/{card_id}")
async def delete_card(card_id: int, current_user: CurrentUser, db: DBSession):
    """Delete a card"""
    return form_response(delete_card_action(db, current_user.id, card_id))
