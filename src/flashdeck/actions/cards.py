"""
Card actions, including AI generation into an existing deck
"""
from typing import Optional, Sequence, Tuple

from loguru import logger
from sqlalchemy.orm import Session

from flashdeck.actions.forms import (
    CardInput, FormState, handle_failure, parse_input, require_positive_id, run_action,
)
from flashdeck.llm.generator import DEFAULT_CARD_COUNT, MAX_CARD_COUNT, FlashcardGenerator
from flashdeck.models import database_service as store
from flashdeck.models.database_models import User
from flashdeck.services.errors import ValidationFailed
from flashdeck.services.ownership import require_deck_owner
from flashdeck.services.plans import AI_FLASHCARD_GENERATION, require_feature

DECK_NOT_FOUND_FOR_CARDS = "Deck not found or you don't have permission to add cards to this deck."
CARD_NOT_FOUND = "Card not found or you don't have permission to change this card."


def create_card_action(db: Session, user_id: int, deck_id, front: Optional[str],
                       back: Optional[str]) -> FormState:
    def perform() -> FormState:
        valid_id = require_positive_id(deck_id, "deck_id", "deck")
        data = parse_input(CardInput, front=front, back=back)
        card = store.create_card(db, valid_id, user_id, data.front, data.back)
        return FormState.ok(deck_id=valid_id, card_id=card.id)

    return run_action(db, "create card", DECK_NOT_FOUND_FOR_CARDS, perform)


def update_card_action(db: Session, user_id: int, card_id, front: Optional[str],
                       back: Optional[str]) -> FormState:
    def perform() -> FormState:
        valid_id = require_positive_id(card_id, "card_id", "card")
        data = parse_input(CardInput, front=front, back=back)
        card = store.update_card(db, valid_id, user_id, front=data.front, back=data.back)
        return FormState.ok(deck_id=card.deck_id, card_id=card.id)

    return run_action(db, "update card", CARD_NOT_FOUND, perform)


def delete_card_action(db: Session, user_id: int, card_id) -> FormState:
    def perform() -> FormState:
        valid_id = require_positive_id(card_id, "card_id", "card")
        card = store.delete_card(db, valid_id, user_id)
        return FormState.ok(deck_id=card.deck_id, card_id=valid_id)

    return run_action(db, "delete card", CARD_NOT_FOUND, perform)


def reorder_cards_action(db: Session, user_id: int, deck_id,
                         card_orders: Sequence[Tuple[int, int]]) -> FormState:
    def perform() -> FormState:
        valid_id = require_positive_id(deck_id, "deck_id", "deck")
        if any(order < 0 for _, order in card_orders):
            raise ValidationFailed({"order": ["Order values must be zero or greater"]})
        store.reorder_cards(db, valid_id, user_id, card_orders)
        return FormState.ok(deck_id=valid_id)

    return run_action(db, "reorder cards", DECK_NOT_FOUND_FOR_CARDS, perform)


def clear_cards_action(db: Session, user_id: int, deck_id) -> FormState:
    """Delete every card in a deck, keeping the deck"""
    def perform() -> FormState:
        valid_id = require_positive_id(deck_id, "deck_id", "deck")
        store.delete_cards_from_deck(db, valid_id, user_id)
        return FormState.ok(deck_id=valid_id)

    return run_action(db, "delete cards", DECK_NOT_FOUND_FOR_CARDS, perform)


async def generate_cards_action(db: Session, user: User, deck_id, generator: FlashcardGenerator,
                                count: int = DEFAULT_CARD_COUNT) -> FormState:
    """Generate cards from the deck's title and description and append them"""
    try:
        valid_id = require_positive_id(deck_id, "deck_id", "deck")
        if count < 1 or count > MAX_CARD_COUNT:
            raise ValidationFailed({"count": [f"Count must be between 1 and {MAX_CARD_COUNT}"]})
        require_feature(user, AI_FLASHCARD_GENERATION)

        deck = require_deck_owner(db, valid_id, user.id)
        if not deck.description:
            raise ValidationFailed({"description": ["Add a deck description to enable AI generation"]})

        topic = f"{deck.title}: {deck.description}"
        existing_fronts = [card.front for card in deck.cards]
        generated = await generator.generate(topic, count, existing_fronts=existing_fronts)

        created = store.create_cards_bulk(db, valid_id, user.id, [(c.front, c.back) for c in generated])
        logger.info(f"AI generation added {len(created)} cards to deck {valid_id}")
        return FormState.ok(deck_id=valid_id, total_generated=len(created))
    except Exception as e:
        return handle_failure(db, e, "generate flashcards", DECK_NOT_FOUND_FOR_CARDS)
