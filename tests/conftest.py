from decimal import Decimal

import httpx
import pytest

from social_transport.config import Settings
from social_transport.container import Services
from social_transport.main import create_app

TEST_SECRET = "test-signing-key-for-the-social-transport-suite-0123456789"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret=TEST_SECRET,
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        log_dir=tmp_path / "logs",
        log_to_file=False,
        log_level="WARNING",
    )


@pytest.fixture
def services(settings):
    services = Services.build(settings)
    services.bootstrap()
    yield services
    services.close()


@pytest.fixture
async def api_client(settings, services):
    # ASGITransport does not run the lifespan; the services fixture bootstraps instead
    app = create_app(settings, services=services)
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://socialtransport",
    ) as client:
        yield client


def make_account(services: Services, username: str, password: str = "secret123"):
    """Register and approve an account, returning it."""
    request = services.access_requests.submit_registration(
        username=username,
        email=f"{username}@example.com",
        full_name=username.capitalize(),
        password=password,
    )
    return services.access_requests.approve(request.id)


@pytest.fixture
def refs(services):
    """One person, driver and destination to hang transports on."""
    person = services.persons.create(name="Maria Rossi", city="Torino", province="TO")
    driver = services.drivers.create(name="Luca Bianchi", license_number="TO1234567")
    destination = services.destinations.create(
        name="Ospedale Molinette",
        address="Corso Bramante 88, Torino",
        cost=Decimal("12.50"),
    )
    return person, driver, destination


async def login(client: httpx.AsyncClient, username: str, password: str) -> dict:
    resp = await client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
