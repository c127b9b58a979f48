"""
In-process registry of live study sessions
Sessions are keyed by a random id and belong to one user. A session is
dropped on finish, when the same user starts another one on the same deck,
or after sitting idle longer than the registry's TTL. Nothing is written to
the database.
"""
import time
import uuid
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from flashdeck.models.flashcard_models import StudyCard
from flashdeck.study.session import StudySession

# Idle sessions older than this are discarded
DEFAULT_SESSION_TTL_SECONDS = 2 * 60 * 60


class _Entry:
    __slots__ = ("user_id", "session", "last_seen")

    def __init__(self, user_id: int, session: StudySession, last_seen: float):
        self.user_id = user_id
        self.session = session
        self.last_seen = last_seen


class SessionRegistry:
    def __init__(self, ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, _Entry] = {}

    def start(self, user_id: int, deck_id: int, deck_title: str, cards: Sequence[StudyCard]) -> Tuple[str, StudySession]:
        self._prune()
        self._drop(
            sid for sid, entry in self._sessions.items()
            if entry.user_id == user_id and entry.session.deck_id == deck_id
        )

        session = StudySession(cards, deck_title=deck_title, deck_id=deck_id)
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = _Entry(user_id, session, self._clock())
        logger.info(f"Study session {session_id} started on deck {deck_id} with {len(cards)} cards")
        return session_id, session

    def get(self, session_id: str, user_id: int) -> Optional[StudySession]:
        self._prune()
        entry = self._sessions.get(session_id)
        if entry is None or entry.user_id != user_id:
            return None
        entry.last_seen = self._clock()
        return entry.session

    def finish(self, session_id: str, user_id: int) -> Optional[StudySession]:
        session = self.get(session_id, user_id)
        if session is not None:
            del self._sessions[session_id]
            logger.info(f"Study session {session_id} finished")
        return session

    def _prune(self) -> None:
        cutoff = self._clock() - self.ttl_seconds
        self._drop(sid for sid, entry in self._sessions.items() if entry.last_seen < cutoff)

    def _drop(self, session_ids) -> None:
        stale: List[str] = list(session_ids)
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.debug(f"Discarded {len(stale)} study sessions")

    def __len__(self) -> int:
        return len(self._sessions)


study_sessions = SessionRegistry()
