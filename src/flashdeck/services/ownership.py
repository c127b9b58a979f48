"""
Deck ownership checks
Every deck or card read and mutation goes through require_deck_owner or
require_card_owner before touching the store.
"""
from sqlalchemy.orm import Session

from flashdeck.models.database_models import Card, Deck
from flashdeck.services.errors import CardNotFoundOrForbidden, DeckNotFoundOrForbidden


def require_deck_owner(db: Session, deck_id: int, user_id: int) -> Deck:
    """Return the deck if user_id owns it, otherwise raise DeckNotFoundOrForbidden"""
    deck = db.query(Deck).filter(Deck.id == deck_id, Deck.user_id == user_id).first()
    if deck is None:
        raise DeckNotFoundOrForbidden(deck_id)
    return deck


def require_card_owner(db: Session, card_id: int, user_id: int) -> Card:
    """Return the card if user_id owns the deck it belongs to"""
    card = (
        db.query(Card)
        .join(Deck, Card.deck_id == Deck.id)
        .filter(Card.id == card_id, Deck.user_id == user_id)
        .first()
    )
    if card is None:
        raise CardNotFoundOrForbidden(card_id)
    return card
