from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from main import create_app
from repositories.session_file import SessionFileRepository
from schemas.base import utcnow
from schemas.journal import JournalEntry, JournalFile
from schemas.plant import Plant
from services.ai_service import AIService
from services.seed_data import seed_store
from services.store import build_store, memory_store, session_store, sql_store


@pytest.fixture(params=["memory", "session", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        return memory_store()
    if request.param == "session":
        return session_store(str(tmp_path / "session"))
    return sql_store(f"sqlite:///{tmp_path / 'repo.db'}")


def _plant(name, **fields):
    now = utcnow()
    values = dict(
        name=name,
        watering_frequency=7,
        last_watered=now - timedelta(days=2),
        fertilizing_frequency=30,
        last_fertilized=now - timedelta(days=10),
        grooming_frequency=30,
        last_groomed=now - timedelta(days=20),
    )
    values.update(fields)
    return Plant(**values)


def test_put_assigns_ids_and_list_is_newest_first(store):
    a = store.plants.put(_plant("Aloe"))
    b = store.plants.put(_plant("Begonia"))

    assert a.id is not None and b.id > a.id
    assert [p.name for p in store.plants.list()] == ["Begonia", "Aloe"]
    assert store.plants.count() == 2


def test_get_round_trips_fields(store):
    original = _plant("Calathea", notes="Hates tap water", fertilizer_details="Half strength", light="Low")
    saved = store.plants.put(original)

    loaded = store.plants.get(saved.id)
    assert loaded == saved
    assert loaded.last_watered.tzinfo is not None


def test_put_with_id_overwrites(store):
    saved = store.plants.put(_plant("Dracaena"))
    store.plants.put(saved.model_copy(update={"health": "attention"}))

    assert store.plants.get(saved.id).health == "attention"
    assert store.plants.count() == 1


def test_delete(store):
    saved = store.plants.put(_plant("Echeveria"))

    assert store.plants.delete(saved.id) is True
    assert store.plants.get(saved.id) is None
    assert store.plants.delete(saved.id) is False


def test_get_unknown_id(store):
    assert store.plants.get(12345) is None


def test_journal_attachment_round_trip(store):
    with_file = store.journal.put(
        JournalEntry(
            title="Bloom",
            content="",
            date=utcnow(),
            file=JournalFile(name="bloom.jpg", type="image", url="/uploads/journal/x_bloom.jpg"),
        )
    )
    without_file = store.journal.put(JournalEntry(title="Note", content="plain", date=utcnow()))

    assert store.journal.get(with_file.id).file == with_file.file
    assert store.journal.get(without_file.id).file is None


def test_find_one(store):
    store.plants.put(_plant("Ficus", location="Office"))
    store.plants.put(_plant("Fern", location="Bathroom"))

    assert store.plants.find_one(location="Bathroom").name == "Fern"
    assert store.plants.find_one(location="Garage") is None


def test_seeding_is_idempotent(store):
    seed_store(store, demo=True)
    seed_store(store, demo=True)

    assert store.plants.count() == 3
    assert store.journal.count() == 2
    assert store.articles.count() == 3


def test_articles_seeded_without_demo_data(store):
    seed_store(store, demo=False)

    assert store.articles.count() == 3
    assert store.plants.count() == 0
    assert store.journal.count() == 0


def test_session_files_survive_a_new_instance(tmp_path):
    directory = str(tmp_path / "session")
    first = SessionFileRepository(Plant, directory, "plants")
    saved = first.put(_plant("Hoya"))

    second = SessionFileRepository(Plant, directory, "plants")
    assert second.get(saved.id) == saved
    assert (tmp_path / "session" / "plantpal.plants.json").exists()


def test_unknown_backend(settings):
    with pytest.raises(RuntimeError):
        build_store(settings.model_copy(update={"store_backend": "redis"}))


@pytest.mark.parametrize("backend", ["session", "sql"])
def test_app_runs_on_persistent_backends(settings, fake_openai, backend):
    app = create_app(
        settings=settings.model_copy(update={"store_backend": backend}),
        ai_service=AIService(None, client=fake_openai),
    )
    client = TestClient(app)

    token = client.post(
        "/auth/signup", json={"fullname": "Ada", "email": "ada@example.com", "password": "secret"}
    ).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    created = client.post("/plants", data={"name": "Pilea", "sunlight": "Low light"}, headers=headers).json()
    assert created["light"] == "Low"

    watered = client.post(f"/plants/{created['id']}/activity", json={"activity": "water"}, headers=headers)
    assert watered.status_code == 200

    names = [p["name"] for p in client.get("/plants", headers=headers).json()]
    assert names[0] == "Pilea"
    assert len(names) == 4
