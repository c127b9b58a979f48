"""
Sample data for local development
"""
from typing import Tuple

from loguru import logger
from sqlalchemy.orm import Session

from flashdeck.models.database_models import Deck, User
from flashdeck.models.database_service import create_cards_bulk, create_deck, create_user, get_user_by_email

SAMPLE_EMAIL = "sample@flashdeck.local"
SAMPLE_CARDS = [
    ("Hello", "Hola"),
    ("Goodbye", "Adiós"),
    ("Thank you", "Gracias"),
]


def seed_sample_data(db: Session, hashed_password: str) -> Tuple[User, Deck]:
    """Create a sample user with one vocabulary deck of three cards"""
    user = get_user_by_email(db, SAMPLE_EMAIL)
    if user is None:
        user = create_user(db, SAMPLE_EMAIL, hashed_password, "Sample User")

    deck = create_deck(db, user.id, "Sample Vocabulary Deck", "A sample deck for testing purposes")
    cards = create_cards_bulk(db, deck.id, user.id, SAMPLE_CARDS)
    logger.info(f"Seeded deck {deck.id} with {len(cards)} cards for {user.email}")
    return user, deck
