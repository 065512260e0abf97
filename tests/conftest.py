import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from api.features.chat.repository import SqliteConversationStore
from core.settings import AppSettings, DatabaseSettings, OpenAISettings, Settings
from infra.resources import DatabaseResource
from tests.fakes import FakeCompletionClient


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "chat.db"


@pytest.fixture
def settings(db_path) -> Settings:
    return Settings(
        APP=AppSettings(ENVIRONMENT="local", LOG_LEVEL="WARNING"),
        DATABASE=DatabaseSettings(
            STORE_BACKEND="sqlite", SQLITE_PATH=str(db_path), DATABASE_URL=""
        ),
        OPENAI=OpenAISettings(OPENAI_API_KEY="test-key"),
    )


@pytest.fixture
def fake_llm() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
async def database(settings):
    resource = DatabaseResource(str(settings.DATABASE.DATABASE_URL))
    await resource.init()
    yield resource
    await resource.shutdown()


@pytest.fixture
async def store(database) -> SqliteConversationStore:
    s = SqliteConversationStore(database)
    await s.initialize()
    return s


@pytest.fixture
def app(settings, fake_llm):
    from api.main import create_fastapi_app

    application = create_fastapi_app(settings)
    application.container.infrastructure.completion_client.override(
        providers.Object(fake_llm)
    )
    yield application
    application.container.infrastructure.completion_client.reset_override()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
