import json
import os
import tempfile
from datetime import timedelta
from types import SimpleNamespace

import pytest

# main.py は import 時に app を作るので、その前に副作用の出ない設定にしておく
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="plantpal-uploads-"))
os.environ.setdefault("STORE_BACKEND", "memory")

from fastapi.testclient import TestClient  # noqa: E402

from config import Settings  # noqa: E402
from main import create_app  # noqa: E402
from schemas.base import utcnow  # noqa: E402
from schemas.plant import Plant  # noqa: E402
from services.ai_service import AIService  # noqa: E402


class FakeOpenAI:
    """openai.OpenAI の chat.completions.create だけ真似る"""

    def __init__(self, reply="Water when the top inch of soil is dry.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def reply_json(self, payload):
        self.reply = json.dumps(payload)

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        store_backend="memory",
        upload_dir=str(tmp_path / "uploads"),
        session_store_dir=str(tmp_path / "session"),
        database_url=f"sqlite:///{tmp_path / 'plantpal.db'}",
        seed_demo_data=True,
    )


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def app(settings, fake_openai):
    return create_app(settings=settings, ai_service=AIService(None, client=fake_openai))


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def token(client):
    resp = client.post(
        "/auth/signup",
        json={"fullname": "Ada Gardener", "email": "ada@example.com", "password": "secret"},
    )
    assert resp.status_code == 201
    return resp.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_plant():
    """頻度と「何日前に実施したか」だけ指定して Plant を作る"""

    def _make(plant_id=1, name="Pothos", watered_days_ago=0, fertilized_days_ago=0, groomed_days_ago=0, **fields):
        now = utcnow()
        values = dict(
            id=plant_id,
            name=name,
            scientific_name=fields.pop("scientific_name", "Epipremnum aureum"),
            light=fields.pop("light", "Medium"),
            health=fields.pop("health", "healthy"),
            location=fields.pop("location", "Kitchen"),
            watering_frequency=fields.pop("watering_frequency", 7),
            last_watered=now - timedelta(days=watered_days_ago),
            fertilizing_frequency=fields.pop("fertilizing_frequency", 30),
            last_fertilized=now - timedelta(days=fertilized_days_ago),
            grooming_frequency=fields.pop("grooming_frequency", 30),
            last_groomed=now - timedelta(days=groomed_days_ago),
        )
        values.update(fields)
        return Plant(**values)

    return _make
