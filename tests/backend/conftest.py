import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.core import db as db_module
from app.core.security import hash_password
from app.main import app
from app.models.user import User
from app.services.storage_base import AssetStorage, StorageError, StoredAsset, IMAGE
from app.services.storage_factory import get_storage


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


class FakeStorage(AssetStorage):
    """
    In-memory stand-in for Cloudinary.
    Records every call; individual resource kinds can be told to fail.
    """

    def __init__(self):
        self.objects: dict[str, dict] = {}
        self.calls: list[tuple] = []
        self.fail_uploads: set[str] = set()
        self.fail_deletes = False

    @property
    def name(self) -> str:
        return "Fake storage"

    async def upload(self, data, *, folder, resource_type, public_id=None, overwrite=False):
        self.calls.append(("upload", resource_type, folder))
        if resource_type in self.fail_uploads:
            raise StorageError(f"{resource_type} upload refused")
        object_id = f"{folder}/{public_id or uuid.uuid4().hex[:10]}"
        if object_id in self.objects and not overwrite:
            raise StorageError(f"{object_id} already exists")
        ext = "jpg" if resource_type == IMAGE else "mp4"
        self.objects[object_id] = {"resource_type": resource_type, "data": data}
        return StoredAsset(
            url=f"https://res.cloudinary.com/demo/{resource_type}/upload/v1700000000/{object_id}.{ext}",
            public_id=object_id,
            resource_type=resource_type,
            bytes=len(data),
            format=ext,
        )

    async def delete(self, public_id, *, resource_type=IMAGE):
        self.calls.append(("delete", resource_type, public_id))
        if self.fail_deletes:
            raise StorageError("delete refused")
        self.objects.pop(public_id, None)


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """Fresh database without the HTTP layer (service-level tests)."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest_asyncio.fixture
async def client(db, fake_storage):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB
    and the in-memory storage in place of Cloudinary.
    """
    app.dependency_overrides[get_storage] = lambda: fake_storage
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(role: str = "consumer", password: str = "UserPass!23") -> tuple[User, str]:
        suffix = uuid.uuid4().hex[:6]
        user = await User.create(
            username=f"user_{suffix}",
            email=f"{suffix}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(username: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/auth/login",
            json={"username": username, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def creator_headers(create_user, auth_header_factory):
    user, password = await create_user(role="creator")
    return await auth_header_factory(user.username, password)


@pytest_asyncio.fixture
async def consumer_headers(create_user, auth_header_factory):
    user, password = await create_user(role="consumer")
    return await auth_header_factory(user.username, password)
