"""ApiClient / AuthSession / DashboardState を実際の ASGI アプリに繋いで通しで動かす"""
import httpx
import pytest

from client.api import ApiClient, ApiError, UploadFile
from client.dashboard import DashboardState
from client.session import AuthSession, AuthState, TokenStorage
from client.views import PlantQuery, SortOrder
from schemas.plant import PlantDraft

pytestmark = pytest.mark.anyio


@pytest.fixture
async def api(app):
    client = ApiClient(http=httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver"))
    yield client
    await client.aclose()


@pytest.fixture
def storage(tmp_path):
    return TokenStorage(str(tmp_path / "client" / "session.json"))


async def test_sign_up_persists_token_and_restores(api, storage):
    session = AuthSession(api, storage)

    assert await session.sign_up("Ada Gardener", "ada@example.com", "secret") is True
    assert session.state == AuthState.AUTHENTICATED

    restored = AuthSession(api, storage)
    assert restored.restore() is True
    assert restored.token == session.token

    restored.logout()
    assert storage.load() is None
    assert restored.state == AuthState.ANONYMOUS


async def test_failed_sign_in_surfaces_server_message(api, storage):
    session = AuthSession(api, storage)

    assert await session.sign_in("ghost@example.com", "nope") is False
    assert session.error == "Invalid email or password."
    assert session.state == AuthState.ANONYMOUS
    assert storage.load() is None


async def test_sign_in_requires_fields_before_calling_server(api, storage):
    session = AuthSession(api, storage)

    assert await session.sign_in("", "secret") is False
    assert session.error == "Email and password are required."


async def test_restore_ignores_corrupt_storage(tmp_path, api):
    path = tmp_path / "session.json"
    path.write_text("{not json")

    assert AuthSession(api, TokenStorage(str(path))).restore() is False


async def test_dashboard_round_trip(api, storage):
    session = AuthSession(api, storage)
    await session.sign_up("Ada Gardener", "ada@example.com", "secret")

    dashboard = DashboardState(api, session.token)
    assert await dashboard.load() is True
    assert [p.name for p in dashboard.plants] == ["Monstera Deliciosa", "Snake Plant", "Fiddle Leaf Fig"]
    assert len(dashboard.articles) == 3

    added = await dashboard.add_plant(
        PlantDraft(name="Pothos", sunlight="Bright Light", location="Kitchen"),
        photo=UploadFile("pothos.jpg", b"jpeg-bytes", "image/jpeg"),
    )
    assert added.light == "Bright"
    assert added.image.startswith("/uploads/plants/")
    assert dashboard.plants[0].id == added.id

    fig = next(p for p in dashboard.plants if p.name == "Fiddle Leaf Fig")
    assert await dashboard.log_activity(fig.id, "water") is True
    assert dashboard.summary().needs_water == 0

    assert await dashboard.update_plant(added.model_copy(update={"health": "attention"})) is True
    assert await dashboard.delete_plant(fig.id) is True

    reloaded = DashboardState(api, session.token)
    await reloaded.load()
    names = [p.name for p in reloaded.visible_plants(PlantQuery(sort_by=SortOrder.NAME_DESC))]
    assert names == ["Snake Plant", "Pothos", "Monstera Deliciosa"]
    assert next(p for p in reloaded.plants if p.id == added.id).health == "attention"

    entry = await dashboard.add_journal_entry(
        "Soil test", "pH 6.5", file=UploadFile("results.pdf", b"%PDF", "application/pdf")
    )
    assert entry.file.type == "document"
    assert await dashboard.delete_journal_entry(entry.id) is True


async def test_deleting_a_missing_plant_rolls_back(api, storage):
    session = AuthSession(api, storage)
    await session.sign_up("Ada Gardener", "ada@example.com", "secret")
    dashboard = DashboardState(api, session.token)
    await dashboard.load()

    ghost = dashboard.plants[0].model_copy(update={"id": 9999})
    dashboard.plants = [ghost] + dashboard.plants
    before = list(dashboard.plants)

    assert await dashboard.delete_plant(9999) is False
    assert dashboard.plants == before


async def test_api_errors_carry_status(api):
    with pytest.raises(ApiError) as exc:
        await api.get_plants("bogus")
    assert exc.value.status_code == 401
    assert exc.value.message == "Invalid or expired token"


async def test_ai_proxy_through_client(api, storage, fake_openai):
    session = AuthSession(api, storage)
    await session.sign_up("Ada Gardener", "ada@example.com", "secret")
    dashboard = DashboardState(api, session.token)

    fake_openai.reply_json({"name": "Golden Pothos", "match": 0.9})
    result = await dashboard.identify_plant(UploadFile("leaf.png", b"png", "image/png"))
    assert result.match == 90

    fake_openai.reply = "Keep the soil lightly moist."
    assert await dashboard.ask_assistant("Any tips?") == "Keep the soil lightly moist."
