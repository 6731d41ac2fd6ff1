import pytest
import pytest_asyncio

from app.config import settings
from app.models.user import User


pytestmark = pytest.mark.asyncio


def picture(content: bytes = b"\x89PNG\r\n"):
    return {"profilePic": ("me.png", content, "image/png")}


@pytest_asyncio.fixture
async def account(create_user, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.username, password)
    return user, headers


async def test_upload_sets_profile_pic(client, account, fake_storage):
    user, headers = account
    resp = await client.post("/api/profile-pic/upload", files=picture(), headers=headers)
    assert resp.status_code == 200, resp.text
    url = resp.json()["profilePic"]
    assert url.endswith(f"/{user.id}/profile/profilePic.jpg")

    stored = await User.get(id=user.id)
    assert stored.profile_pic == url
    assert (await client.get("/api/auth/current", headers=headers)).json()["profilePic"] == url
    assert list(fake_storage.objects) == [f"{settings.storage_namespace}/{user.id}/profile/profilePic"]


async def test_replacing_deletes_previous_picture(client, account, fake_storage):
    user, headers = account
    await client.post("/api/profile-pic/upload", files=picture(b"one"), headers=headers)
    resp = await client.post("/api/profile-pic/upload", files=picture(b"two"), headers=headers)
    assert resp.status_code == 200

    public_id = f"{settings.storage_namespace}/{user.id}/profile/profilePic"
    assert ("delete", "image", public_id) in fake_storage.calls
    assert fake_storage.objects[public_id]["data"] == b"two"


async def test_failed_cleanup_does_not_block_replacement(client, account, fake_storage):
    _, headers = account
    await client.post("/api/profile-pic/upload", files=picture(b"one"), headers=headers)
    fake_storage.fail_deletes = True

    resp = await client.post("/api/profile-pic/upload", files=picture(b"two"), headers=headers)
    assert resp.status_code == 200
    assert "profilePic" in resp.json()


async def test_upload_without_file(client, account):
    _, headers = account
    resp = await client.post("/api/profile-pic/upload", headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "ValidationError", "message": "No file uploaded"}


async def test_upload_failure_is_server_error(client, account, fake_storage):
    user, headers = account
    fake_storage.fail_uploads.add("image")
    resp = await client.post("/api/profile-pic/upload", files=picture(), headers=headers)
    assert resp.status_code == 500
    assert resp.json() == {"error": "ServerError", "message": "Upload failed"}
    assert (await User.get(id=user.id)).profile_pic is None


async def test_delete_clears_profile_pic(client, account, fake_storage):
    user, headers = account
    await client.post("/api/profile-pic/upload", files=picture(), headers=headers)

    resp = await client.delete("/api/profile-pic/delete", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Profile picture deleted"}
    assert (await User.get(id=user.id)).profile_pic is None
    assert fake_storage.objects == {}


async def test_delete_without_picture(client, account):
    _, headers = account
    resp = await client.delete("/api/profile-pic/delete", headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "ValidationError", "message": "No profile picture to delete"}


async def test_delete_failure_keeps_picture(client, account, fake_storage):
    user, headers = account
    url = (await client.post("/api/profile-pic/upload", files=picture(), headers=headers)).json()["profilePic"]
    fake_storage.fail_deletes = True

    resp = await client.delete("/api/profile-pic/delete", headers=headers)
    assert resp.status_code == 500
    assert resp.json()["error"] == "ServerError"
    assert (await User.get(id=user.id)).profile_pic == url


async def test_profile_pic_requires_auth(client):
    assert (await client.post("/api/profile-pic/upload", files=picture())).status_code == 401
    assert (await client.delete("/api/profile-pic/delete")).status_code == 401
