"""Service-level fixtures: fake backend, storage service, HTTP client."""

import pytest
from httpx import ASGITransport, AsyncClient

from sandwich.core.domain_types import View
from sandwich.main import app
from sandwich.services.storage_service import StorageService, get_storage
from tests.image_helpers import make_jpeg
from tests.services.fake_storage import FakeStorage

PLATE_SIZE = (40, 40)
PLATE_RGB = (200, 200, 200)


@pytest.fixture
def backend():
    fake = FakeStorage()
    for view in View:
        fake.add_plate(view, make_jpeg(*PLATE_SIZE, PLATE_RGB))
    return fake


@pytest.fixture
def storage(backend):
    return StorageService(backend, cache_capacity=16)


@pytest.fixture
async def client(storage):
    """httpx client against the app, with the storage dependency overridden."""
    app.dependency_overrides[get_storage] = lambda: storage
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
