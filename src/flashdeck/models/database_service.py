"""
Database service functions for CRUD operations
Deck and card functions take the acting user's id and verify ownership first.
"""
from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from typing import Iterable, List, Optional, Sequence, Tuple
from loguru import logger
from .database_models import User, UserPlan, Deck, Card
from flashdeck.services.errors import Unexpected
from flashdeck.services.ownership import require_deck_owner, require_card_owner

# User operations
def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def create_user(db: Session, email: str, hashed_password: str, full_name: str, plan: UserPlan = UserPlan.FREE) -> User:
    user = User(
        email=email,
        hashed_password=hashed_password,
        full_name=full_name,
        plan=plan
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User created: {user.email} (ID: {user.id})")
    return user

def set_user_plan(db: Session, user_id: int, plan: UserPlan) -> Optional[User]:
    user = get_user_by_id(db, user_id)
    if user:
        user.plan = plan
        db.commit()
        db.refresh(user)
        logger.info(f"User {user.id} moved to plan {plan.value}")
    return user

# Deck operations
def get_decks_with_card_counts(db: Session, user_id: int) -> List[Tuple[Deck, int]]:
    """User's decks, newest first, each paired with its card count"""
    rows = (
        db.query(Deck, func.count(Card.id))
        .outerjoin(Card, Card.deck_id == Deck.id)
        .filter(Deck.user_id == user_id)
        .group_by(Deck.id)
        .order_by(Deck.created_at.desc(), Deck.id.desc())
        .all()
    )
    return [(deck, count) for deck, count in rows]

def get_deck_if_owner(db: Session, deck_id: int, user_id: int) -> Deck:
    return require_deck_owner(db, deck_id, user_id)

def create_deck(db: Session, user_id: int, title: str, description: Optional[str] = None) -> Deck:
    deck = Deck(title=title, description=description, user_id=user_id)
    db.add(deck)
    db.commit()
    db.refresh(deck)
    logger.info(f"Deck created: {deck.title} (ID: {deck.id}) for user {user_id}")
    return deck

def update_deck(db: Session, deck_id: int, user_id: int, title: Optional[str] = None,
                description: Optional[str] = None, clear_description: bool = False) -> Deck:
    deck = require_deck_owner(db, deck_id, user_id)
    if title is not None:
        deck.title = title
    if description is not None or clear_description:
        deck.description = description
    db.commit()
    db.refresh(deck)
    logger.info(f"Deck updated: {deck.id}")
    return deck

def delete_deck(db: Session, deck_id: int, user_id: int) -> Deck:
    deck = require_deck_owner(db, deck_id, user_id)
    db.delete(deck)
    db.commit()
    logger.info(f"Deck deleted: {deck_id} (cards removed with it)")
    return deck

# Card operations
def get_cards_by_deck_id(db: Session, deck_id: int, user_id: int) -> List[Card]:
    require_deck_owner(db, deck_id, user_id)
    return (
        db.query(Card)
        .filter(Card.deck_id == deck_id)
        .order_by(Card.order.asc(), Card.id.asc())
        .all()
    )

def get_card_if_owner(db: Session, card_id: int, user_id: int) -> Card:
    return require_card_owner(db, card_id, user_id)

def get_max_card_order(db: Session, deck_id: int) -> int:
    """Highest order value in the deck, -1 when the deck is empty"""
    max_order = db.query(func.max(Card.order)).filter(Card.deck_id == deck_id).scalar()
    return -1 if max_order is None else max_order

def create_card(db: Session, deck_id: int, user_id: int, front: str, back: str,
                order: Optional[int] = None) -> Card:
    require_deck_owner(db, deck_id, user_id)
    if order is None:
        order = get_max_card_order(db, deck_id) + 1
    card = Card(deck_id=deck_id, front=front, back=back, order=order)
    db.add(card)
    db.commit()
    db.refresh(card)
    logger.info(f"Card created: {card.id} in deck {deck_id} (order {card.order})")
    return card

def create_cards_bulk(db: Session, deck_id: int, user_id: int,
                      pairs: Iterable[Tuple[str, str]]) -> List[Card]:
    """Append front/back pairs after the deck's current maximum order in one commit"""
    require_deck_owner(db, deck_id, user_id)
    next_order = get_max_card_order(db, deck_id) + 1
    cards = []
    for offset, (front, back) in enumerate(pairs):
        cards.append(Card(deck_id=deck_id, front=front, back=back, order=next_order + offset))
    try:
        db.add_all(cards)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise Unexpected(f"Could not append cards to deck {deck_id}") from e
    for card in cards:
        db.refresh(card)
    logger.info(f"{len(cards)} cards appended to deck {deck_id}")
    return cards

def update_card(db: Session, card_id: int, user_id: int, front: Optional[str] = None,
                back: Optional[str] = None, order: Optional[int] = None) -> Card:
    card = require_card_owner(db, card_id, user_id)
    if front is not None:
        card.front = front
    if back is not None:
        card.back = back
    if order is not None:
        card.order = order
    db.commit()
    db.refresh(card)
    logger.info(f"Card updated: {card.id}")
    return card

def delete_card(db: Session, card_id: int, user_id: int) -> Card:
    card = require_card_owner(db, card_id, user_id)
    db.delete(card)
    db.commit()
    logger.info(f"Card deleted: {card_id}")
    return card

def reorder_cards(db: Session, deck_id: int, user_id: int,
                  card_orders: Sequence[Tuple[int, int]]) -> List[Card]:
    """Apply (card_id, order) pairs in one transaction; ids outside the deck are skipped"""
    require_deck_owner(db, deck_id, user_id)
    wanted = dict(card_orders)
    cards = db.query(Card).filter(Card.deck_id == deck_id, Card.id.in_(wanted.keys())).all()
    try:
        for card in cards:
            card.order = wanted[card.id]
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise Unexpected(f"Could not reorder cards in deck {deck_id}") from e
    for card in cards:
        db.refresh(card)
    logger.info(f"Reordered {len(cards)} cards in deck {deck_id}")
    return sorted(cards, key=lambda c: (c.order, c.id))

def delete_cards_from_deck(db: Session, deck_id: int, user_id: int) -> int:
    require_deck_owner(db, deck_id, user_id)
    try:
        deleted = db.query(Card).filter(Card.deck_id == deck_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise Unexpected(f"Could not delete cards from deck {deck_id}") from e
    logger.info(f"Deleted {deleted} cards from deck {deck_id}")
    return deleted
