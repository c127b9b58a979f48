import pytest
from fastapi.testclient import TestClient

from conftest import FakeAgent, make_generated

from flashdeck.api.auth import create_access_token, get_password_hash
from flashdeck.api.dependencies import get_generator, get_study_sessions
from flashdeck.api.main import app
from flashdeck.llm.generator import FlashcardGenerator
from flashdeck.models import database_service as store
from flashdeck.models.database import get_db
from flashdeck.models.database_models import UserPlan
from flashdeck.study.registry import SessionRegistry


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def client(db, registry, fake_agent):
    def override_get_db():
        yield db

    generator = FlashcardGenerator(agent=fake_agent)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generator] = lambda: generator
    app.dependency_overrides[get_study_sessions] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def headers_for(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}


@pytest.fixture
def auth(user):
    return headers_for(user)


@pytest.fixture
def deck(db, user):
    deck = store.create_deck(db, user.id, "Indonesian", "Everyday words")
    store.create_cards_bulk(db, deck.id, user.id, [("Dog", "Anjing"), ("Cat", "Kucing"), ("Bird", "Burung")])
    return deck


# ============= AUTH =============

def test_register_login_and_me(client):
    response = client.post("/api/auth/register", json={
        "email": "New@Example.com", "password": "secret1", "full_name": " New Person ",
    })
    assert response.status_code == 201
    assert response.json()["plan"] == "free"
    assert response.json()["email"] == "new@example.com"

    response = client.post("/api/auth/login", json={"email": "new@example.com", "password": "secret1"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["full_name"] == "New Person"
    assert me.json()["features"] == []


def test_register_duplicate_email(client, db):
    store.create_user(db, "taken@example.com", get_password_hash("secret1"), "Taken")

    response = client.post("/api/auth/register", json={
        "email": "taken@example.com", "password": "secret1", "full_name": "Again",
    })
    assert response.status_code == 400


def test_login_with_wrong_password(client, db):
    store.create_user(db, "ana2@example.com", get_password_hash("right-password"), "Ana")

    response = client.post("/api/auth/login", json={"email": "ana2@example.com", "password": "wrong"})
    assert response.status_code == 401


def test_requests_without_token_are_rejected(client):
    assert client.get("/api/decks").status_code in (401, 403)


def test_invalid_token_is_rejected(client):
    response = client.get("/api/decks", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401


# ============= DECKS & CARDS =============

def test_deck_crud(client, auth):
    created = client.post("/api/decks", json={"title": "Spanish", "description": "Basics"}, headers=auth)
    assert created.status_code == 201
    deck_id = created.json()["deck_id"]

    listing = client.get("/api/decks", headers=auth).json()
    assert [(d["id"], d["card_count"]) for d in listing] == [(deck_id, 0)]

    updated = client.put(f"/api/decks/{deck_id}", json={"title": "Español"}, headers=auth)
    assert updated.status_code == 200
    detail = client.get(f"/api/decks/{deck_id}", headers=auth).json()
    assert detail["title"] == "Español"
    assert detail["description"] is None
    assert detail["can_generate"] is False

    assert client.delete(f"/api/decks/{deck_id}", headers=auth).status_code == 200
    assert client.get(f"/api/decks/{deck_id}", headers=auth).status_code == 404


def test_create_deck_validation_errors(client, auth):
    response = client.post("/api/decks", json={"title": ""}, headers=auth)

    assert response.status_code == 422
    assert response.json()["errors"] == {"title": ["Title is required"]}


def test_foreign_deck_looks_missing(client, other_user, deck):
    other = headers_for(other_user)

    assert client.get(f"/api/decks/{deck.id}", headers=other).status_code == 404
    response = client.put(f"/api/decks/{deck.id}", json={"title": "Mine"}, headers=other)
    assert response.status_code == 404
    assert response.json()["errors"]["_form"] == [
        "Deck not found or you don't have permission to edit this deck."
    ]


def test_card_routes(client, auth, deck):
    added = client.post(f"/api/decks/{deck.id}/cards", json={"front": "Fish", "back": "Ikan"}, headers=auth)
    assert added.status_code == 201
    card_id = added.json()["card_id"]

    cards = client.get(f"/api/decks/{deck.id}/cards", headers=auth).json()
    assert [c["front"] for c in cards] == ["Dog", "Cat", "Bird", "Fish"]
    assert cards[-1]["order"] == 3

    assert client.put(f"/api/cards/{card_id}", json={"front": "Fish", "back": "Iwak"}, headers=auth).status_code == 200
    bad = client.put(f"/api/cards/{card_id}", json={"front": "", "back": "x"}, headers=auth)
    assert bad.status_code == 422
    assert bad.json()["errors"] == {"front": ["Front text is required"]}

    assert client.delete(f"/api/cards/{card_id}", headers=auth).status_code == 200
    assert client.delete(f"/api/cards/{card_id}", headers=auth).status_code == 404


def test_reorder_and_clear_cards(client, auth, deck):
    cards = client.get(f"/api/decks/{deck.id}/cards", headers=auth).json()
    orders = [{"card_id": c["id"], "order": 10 - i} for i, c in enumerate(cards)]

    assert client.put(f"/api/decks/{deck.id}/cards/order", json={"cards": orders}, headers=auth).status_code == 200
    reordered = client.get(f"/api/decks/{deck.id}/cards", headers=auth).json()
    assert [c["front"] for c in reordered] == ["Bird", "Cat", "Dog"]

    assert client.delete(f"/api/decks/{deck.id}/cards", headers=auth).status_code == 200
    assert client.get(f"/api/decks/{deck.id}/cards", headers=auth).json() == []


def test_generate_requires_pro_plan(client, auth, deck):
    response = client.post(f"/api/decks/{deck.id}/generate", json={"count": 2}, headers=auth)

    assert response.status_code == 403


def test_generate_for_pro_user(client, db, user, auth, deck):
    store.set_user_plan(db, user.id, UserPlan.PRO)
    agent = FakeAgent(cards=make_generated(("Dog", "Asu"), ("Fish", "Ikan"), ("Horse", "Kuda")))
    app.dependency_overrides[get_generator] = lambda: FlashcardGenerator(agent=agent)

    response = client.post(f"/api/decks/{deck.id}/generate", json={"count": 2}, headers=auth)

    assert response.status_code == 201
    assert response.json()["total_generated"] == 2
    cards = client.get(f"/api/decks/{deck.id}/cards", headers=auth).json()
    assert [(c["front"], c["order"]) for c in cards][3:] == [("Fish", 3), ("Horse", 4)]


def test_generate_with_nothing_new_reports_failure(client, db, user, auth, deck):
    store.set_user_plan(db, user.id, UserPlan.PRO)

    response = client.post(f"/api/decks/{deck.id}/generate", json={"count": 3}, headers=auth)

    assert response.status_code == 502
    assert response.json()["errors"]["_form"] == ["The generator returned no usable flashcards"]


# ============= STUDY =============

def test_study_session_flow(client, auth, deck, registry):
    started = client.post(f"/api/decks/{deck.id}/study", headers=auth)
    assert started.status_code == 201
    session_id = started.json()["session_id"]
    assert started.json()["card"]["front"] == "Dog"
    assert started.json()["card"]["back"] is None

    def act(action):
        return client.post(f"/api/study/{session_id}/{action}", headers=auth).json()

    assert act("correct")["accepted"] is False
    assert act("reveal")["card"]["back"] == "Anjing"
    state = act("correct")
    assert state["position"] == 1

    act("reveal")
    state = act("incorrect")
    assert state["total_cards"] == 4
    assert state["card"]["front"] == "Bird"

    act("reveal")
    state = act("correct")
    assert state["is_reviewing_retries"] is True
    assert state["card"]["front"] == "Cat"

    act("reveal")
    state = act("correct")
    assert state["is_complete"] is True
    assert state["remaining_count"] == 0

    finished = client.delete(f"/api/study/{session_id}", headers=auth)
    assert finished.json()["deck_id"] == deck.id
    assert len(registry) == 0
    assert client.get(f"/api/study/{session_id}", headers=auth).status_code == 404


def test_study_key_signals(client, auth, deck):
    session_id = client.post(f"/api/decks/{deck.id}/study", headers=auth).json()["session_id"]

    toggled = client.post(f"/api/study/{session_id}/keys/toggle", headers=auth).json()
    assert toggled["revealed"] is True
    blocked = client.post(f"/api/study/{session_id}/keys/next", headers=auth).json()
    assert blocked["accepted"] is False
    assert blocked["position"] == 0

    assert client.post(f"/api/study/{session_id}/keys/sideways", headers=auth).status_code == 422


def test_next_action_waits_for_judgment(client, auth, deck):
    session_id = client.post(f"/api/decks/{deck.id}/study", headers=auth).json()["session_id"]

    client.post(f"/api/study/{session_id}/reveal", headers=auth)
    blocked = client.post(f"/api/study/{session_id}/next", headers=auth).json()
    assert blocked["accepted"] is False
    assert blocked["position"] == 0

    client.post(f"/api/study/{session_id}/correct", headers=auth)
    state = client.post(f"/api/study/{session_id}/previous", headers=auth).json()
    assert state["accepted"] is True
    assert state["position"] == 0
    skipped = client.post(f"/api/study/{session_id}/next", headers=auth).json()
    assert skipped["accepted"] is True
    assert skipped["position"] == 1


def test_restarting_a_deck_replaces_the_old_session(client, auth, deck, registry):
    first = client.post(f"/api/decks/{deck.id}/study", headers=auth).json()["session_id"]
    second = client.post(f"/api/decks/{deck.id}/study", headers=auth).json()["session_id"]

    assert len(registry) == 1
    assert client.get(f"/api/study/{first}", headers=auth).status_code == 404
    assert client.get(f"/api/study/{second}", headers=auth).status_code == 200


def test_clear_cards_of_foreign_deck(client, other_user, deck):
    response = client.delete(f"/api/decks/{deck.id}/cards", headers=headers_for(other_user))

    assert response.status_code == 404
    assert response.json()["errors"]["_form"] == [
        "Deck not found or you don't have permission to add cards to this deck."
    ]


def test_study_requires_cards(client, db, user, auth):
    empty = store.create_deck(db, user.id, "Empty")

    assert client.post(f"/api/decks/{empty.id}/study", headers=auth).status_code == 400


def test_study_session_is_private(client, auth, other_user, deck):
    session_id = client.post(f"/api/decks/{deck.id}/study", headers=auth).json()["session_id"]
    other = headers_for(other_user)

    assert client.get(f"/api/study/{session_id}", headers=other).status_code == 404
    assert client.delete(f"/api/study/{session_id}", headers=other).status_code == 404
    assert client.post(f"/api/decks/{deck.id}/study", headers=other).status_code == 404


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
