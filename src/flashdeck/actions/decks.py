"""
Deck actions
Validate input, write through the store and report a FormState. Failures never
propagate past these functions.
"""
from typing import Optional

from sqlalchemy.orm import Session

from flashdeck.actions.forms import DeckInput, FormState, parse_input, require_positive_id, run_action
from flashdeck.models import database_service as store


def create_deck_action(db: Session, user_id: int, title: Optional[str],
                       description: Optional[str] = None) -> FormState:
    def perform() -> FormState:
        data = parse_input(DeckInput, title=title, description=description)
        deck = store.create_deck(db, user_id, data.title, data.description)
        return FormState.ok(deck_id=deck.id)

    return run_action(db, "create deck", "Failed to create deck. Please try again.", perform)


def update_deck_action(db: Session, user_id: int, deck_id, title: Optional[str],
                       description: Optional[str] = None) -> FormState:
    def perform() -> FormState:
        valid_id = require_positive_id(deck_id, "deck_id", "deck")
        data = parse_input(DeckInput, title=title, description=description)
        deck = store.update_deck(
            db, valid_id, user_id,
            title=data.title,
            description=data.description,
            clear_description=data.description is None,
        )
        return FormState.ok(deck_id=deck.id)

    return run_action(
        db, "update deck",
        "Deck not found or you don't have permission to edit this deck.",
        perform,
    )


def delete_deck_action(db: Session, user_id: int, deck_id) -> FormState:
    def perform() -> FormState:
        valid_id = require_positive_id(deck_id, "deck_id", "deck")
        store.delete_deck(db, valid_id, user_id)
        return FormState.ok(deck_id=valid_id)

    return run_action(
        db, "delete deck",
        "Deck not found or you don't have permission to delete this deck.",
        perform,
    )
