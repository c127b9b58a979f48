"""
Study session engine
Drives a single-user review loop over a deck's cards: flip, judge, and a
retry tail for cards judged incorrect during the session.
"""
import enum
from typing import Dict, List, Optional, Sequence, Set

from flashdeck.models.flashcard_models import StudyCard


class InputSignal(str, enum.Enum):
    PREVIOUS = "previous"
    NEXT = "next"
    TOGGLE = "toggle"


# Key codes bound to input signals for keyboard-driven clients
KEY_BINDINGS: Dict[str, InputSignal] = {
    "ArrowLeft": InputSignal.PREVIOUS,
    "ArrowRight": InputSignal.NEXT,
    "Space": InputSignal.TOGGLE,
}


class StudySession:
    """
    In-memory state machine for one pass over a deck.

    The session visits every original card in order, then continues into a
    retry tail holding each card judged incorrect, once, in the order they
    were first missed. Nothing here is persisted.
    """

    def __init__(self, cards: Sequence[StudyCard], deck_title: str = "", deck_id: Optional[int] = None):
        if not cards:
            raise ValueError("A study session needs at least one card")
        self.deck_id = deck_id
        self.deck_title = deck_title
        self.original_cards: List[StudyCard] = list(cards)
        self._original_ids = {card.id for card in self.original_cards}
        self.reset()

    def reset(self) -> None:
        """Discard all progress and start over from the first card."""
        self.position = 0
        self.revealed = False
        self.answered = False
        self.studied: Set[int] = set()
        self.retry_queue: List[StudyCard] = []

    # ----- derived state -----

    @property
    def study_queue(self) -> List[StudyCard]:
        return self.original_cards + self.retry_queue

    @property
    def current_card(self) -> StudyCard:
        return self.study_queue[self.position]

    @property
    def total_cards(self) -> int:
        return len(self.original_cards) + len(self.retry_queue)

    @property
    def is_last_card(self) -> bool:
        return self.position == self.total_cards - 1

    @property
    def is_complete(self) -> bool:
        return self.is_last_card and self.answered

    @property
    def is_reviewing_retries(self) -> bool:
        return bool(self.retry_queue) and self.position >= len(self.original_cards)

    @property
    def remaining_count(self) -> int:
        return len(self.original_cards) - len(self.studied)

    @property
    def progress(self) -> int:
        return round((self.position + 1) / self.total_cards * 100)

    @property
    def has_studied_current(self) -> bool:
        return self.current_card.id in self.studied

    @property
    def awaiting_judgment(self) -> bool:
        # A revealed card must be judged before the session moves on
        return self.revealed and not self.answered

    # ----- face -----

    def reveal(self) -> bool:
        if self.awaiting_judgment:
            return False
        self.revealed = True
        return True

    def hide(self) -> bool:
        if self.awaiting_judgment:
            return False
        self.revealed = False
        return True

    def flip(self) -> bool:
        if self.awaiting_judgment:
            return False
        self.revealed = not self.revealed
        return True

    # ----- judgment -----

    def mark_correct(self) -> bool:
        if not self._can_judge():
            return False
        card = self.current_card
        if card.id in self._original_ids:
            self.studied.add(card.id)
        self.answered = True
        self.advance()
        return True

    def mark_incorrect(self) -> bool:
        if not self._can_judge():
            return False
        card = self.current_card
        if self._should_retry(card):
            self.retry_queue.append(card)
        self.answered = True
        self.advance()
        return True

    def _can_judge(self) -> bool:
        return self.revealed and not self.is_complete

    def _should_retry(self, card: StudyCard) -> bool:
        # A one-card deck has nothing to retry behind itself
        if len(self.original_cards) < 2:
            return False
        if card.id not in self._original_ids:
            return False
        return all(queued.id != card.id for queued in self.retry_queue)

    # ----- navigation -----

    def advance(self) -> bool:
        if self.position >= self.total_cards - 1:
            return False
        self.position += 1
        self.revealed = False
        self.answered = False
        return True

    def retreat(self) -> bool:
        if self.position <= 0:
            return False
        self.position -= 1
        self.revealed = False
        self.answered = False
        return True

    def handle(self, signal: InputSignal) -> bool:
        """Apply a directional or toggle input, honouring the judgment lock."""
        if signal == InputSignal.PREVIOUS:
            return self.retreat()
        if signal == InputSignal.NEXT:
            if self.awaiting_judgment:
                return False
            return self.advance()
        if signal == InputSignal.TOGGLE:
            return self.flip()
        return False

    def handle_key(self, key_code: str) -> bool:
        signal = KEY_BINDINGS.get(key_code)
        if signal is None:
            return False
        return self.handle(signal)

    def snapshot(self) -> dict:
        card = self.current_card
        return {
            "deck_id": self.deck_id,
            "deck_title": self.deck_title,
            "position": self.position,
            "total_cards": self.total_cards,
            "original_count": len(self.original_cards),
            "card": {
                "id": card.id,
                "front": card.front,
                "back": card.back if self.revealed else None,
            },
            "revealed": self.revealed,
            "answered": self.answered,
            "studied_ids": sorted(self.studied),
            "retry_ids": [c.id for c in self.retry_queue],
            "remaining_count": self.remaining_count,
            "progress": self.progress,
            "is_last_card": self.is_last_card,
            "is_complete": self.is_complete,
            "is_reviewing_retries": self.is_reviewing_retries,
            "has_studied_current": self.has_studied_current,
        }
