"""
Pytest Configuration and Fixtures.

Tests run against an in-memory SQLite database; the FastAPI app gets its
database session, generator and study-session registry through dependency
overrides.
"""
import os
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add src to path and keep local config/env files out of the test run
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["FLASHDECK_CONFIG"] = str(PROJECT_ROOT / "tests" / "no-such-config.yaml")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from flashdeck.models.database import create_tables  # noqa: E402
from flashdeck.models.database_models import UserPlan  # noqa: E402
from flashdeck.models.database_service import create_user  # noqa: E402
from flashdeck.models.flashcard_models import GeneratedCard, GeneratedCardSet, StudyCard  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return create_user(db, "ana@example.com", "not-a-real-hash", "Ana Learner")


@pytest.fixture
def other_user(db):
    return create_user(db, "bo@example.com", "not-a-real-hash", "Bo Other")


@pytest.fixture
def pro_user(db):
    return create_user(db, "pro@example.com", "not-a-real-hash", "Pat Pro", UserPlan.PRO)


@pytest.fixture
def abc_cards():
    return [
        StudyCard(id=1, front="A", back="a", order=0),
        StudyCard(id=2, front="B", back="b", order=1),
        StudyCard(id=3, front="C", back="c", order=2),
    ]


class FakeAgent:
    """Stands in for a pydantic-ai Agent: records prompts, returns canned output"""

    def __init__(self, cards=None, error=None):
        self.cards = cards if cards is not None else []
        self.error = error
        self.prompts = []

    async def run(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(output=GeneratedCardSet(cards=self.cards))


def make_generated(*pairs):
    return [GeneratedCard(front=front, back=back) for front, back in pairs]


@pytest.fixture
def fake_agent():
    return FakeAgent(cards=make_generated(("Dog", "Anjing"), ("Cat", "Kucing"), ("Bird", "Burung")))
