import pytest

from projectboard.core.exceptions import ValidationFailed
from projectboard.db.mongodb import USERS_COLLECTION, ensure_indexes
from projectboard.models.users import UserCreate
from projectboard.services import users as user_service


class LaggingCollection:
    """Collection whose lookups miss, like a concurrent request that has not seen the insert yet."""

    def __init__(self, collection):
        self.collection = collection

    async def find_one(self, *args, **kwargs):
        if "username" in (args[0] if args else {}):
            return None
        return await self.collection.find_one(*args, **kwargs)

    def __getattr__(self, name):
        return getattr(self.collection, name)


class LaggingDatabase:

    def __init__(self, database):
        self.database = database

    def __getitem__(self, name):
        return LaggingCollection(self.database[name])


@pytest.mark.asyncio
async def test_signin_returns_public_user(client, user, credentials):
    response = await client.post("/auth/signin", json=credentials)
    assert response.status_code == 200
    body = response.json()
    assert body["_id"] == str(user.id)
    assert body["displayName"] == "Full Name"
    assert "password" not in body


@pytest.mark.asyncio
async def test_signin_with_wrong_password(client, user):
    response = await client.post("/auth/signin", json={"username": "username", "password": "wrong"})
    assert response.status_code == 400
    assert response.json()["message"] == "Unknown user or invalid password"
    assert (await client.get("/users/me")).json() is None


@pytest.mark.asyncio
async def test_signup_signs_in(client):
    response = await client.post("/auth/signup", json={
        "firstName": "New",
        "lastName": "Person",
        "email": "new.person@projectboard.io",
        "username": "newperson",
        "password": "secret123",
    })
    assert response.status_code == 200
    me = (await client.get("/users/me")).json()
    assert me["username"] == "newperson"
    assert me["displayName"] == "New Person"


@pytest.mark.asyncio
async def test_signup_rejects_taken_username(client, user):
    response = await client.post("/auth/signup", json={
        "email": "someone@projectboard.io",
        "username": "username",
        "password": "secret123",
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Username already exists"


@pytest.mark.asyncio
async def test_signup_rejects_short_password(client):
    response = await client.post("/auth/signup", json={
        "email": "someone@projectboard.io",
        "username": "someone",
        "password": "123",
    })
    assert response.status_code == 400
    assert "password" in response.json()["message"]


@pytest.mark.asyncio
async def test_signout_clears_session(client, signed_in):
    assert (await client.get("/users/me")).json()["_id"] == str(signed_in.id)
    response = await client.get("/auth/signout")
    assert response.status_code == 200
    assert (await client.get("/users/me")).json() is None


@pytest.mark.asyncio
async def test_signin_with_corrupted_hash(client, database, user, credentials):
    await database[USERS_COLLECTION].update_one(
        {"username": "username"}, {"$set": {"password": "pbkdf2_sha256$abc$AAAA$AAAA"}}
    )
    response = await client.post("/auth/signin", json=credentials)
    assert response.status_code == 400
    assert response.json()["message"] == "Unknown user or invalid password"


@pytest.mark.asyncio
async def test_signup_taken_username_with_unique_index(client, database, user):
    await ensure_indexes(database)
    response = await client.post("/auth/signup", json={
        "email": "twin@projectboard.io",
        "username": "username",
        "password": "secret123",
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Username already exists"
    assert await database[USERS_COLLECTION].count_documents({"username": "username"}) == 1


@pytest.mark.asyncio
async def test_unique_index_rejects_signup_that_missed_the_lookup(database, user):
    await ensure_indexes(database)
    twin = UserCreate(email="twin@projectboard.io", username="username", password="secret123")

    with pytest.raises(ValidationFailed) as excinfo:
        await user_service.create_user(twin, LaggingDatabase(database))
    assert excinfo.value.message == "Username already exists"
    assert await database[USERS_COLLECTION].count_documents({"username": "username"}) == 1
