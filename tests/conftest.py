import pytest
from fastapi.testclient import TestClient
from fakes import FakeFreshdesk

from formrelay.api.forms_controller import get_freshdesk_client
from formrelay.config import Settings
from formrelay.main import create_app


@pytest.fixture
def fake():
    return FakeFreshdesk()


@pytest.fixture
def settings():
    return Settings(
        freshdesk_domain="acme",
        freshdesk_api_key="secret-key",
        rate_limit_max_requests=1000,
    )


@pytest.fixture
def app(settings, fake):
    app = create_app(settings)
    app.dependency_overrides[get_freshdesk_client] = lambda: fake
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
