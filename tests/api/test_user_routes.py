"""User routes end-to-end: HTTP -> validation -> SQLite repository -> HTML.

Invariants:
    - GET /users?page=0 -> 400 "invalid page"
    - POST /users with a malformed email -> 400 "invalid email format", values echoed
    - POST /users/{id}/delete on an unknown id -> 404 "user not found"
    - Successful writes redirect with 303
"""

import pytest

from userbook.core.domain_types import User


@pytest.fixture
async def seed_user(repository):
    return await repository.create_user(
        User(name="Mahir", email="mahir@test.com", age=24),
    )


# ─── list ───────────────────────────────────────────────────────

async def test_list_renders_users(client, seed_user):
    res = await client.get("/users")
    assert res.status_code == 200
    assert "mahir@test.com" in res.text
    assert "Page 1" in res.text


async def test_list_empty_page_beyond_end(client, seed_user):
    res = await client.get("/users?page=50&limit=10")
    assert res.status_code == 200
    assert "mahir@test.com" not in res.text
    assert "Page 50" in res.text


async def test_list_largest_page_is_empty_not_an_error(client, seed_user):
    res = await client.get("/users?page=9223372036854775807&limit=100")
    assert res.status_code == 200
    assert "mahir@test.com" not in res.text
    assert "No users on this page." in res.text


async def test_list_huge_page_with_default_limit(client, seed_user):
    res = await client.get("/users?page=1000000000000000000&limit=10")
    assert res.status_code == 200
    assert "No users on this page." in res.text


async def test_list_invalid_page(client):
    res = await client.get("/users?page=0")
    assert res.status_code == 400
    assert "invalid page" in res.text


async def test_list_non_integer_limit(client):
    res = await client.get("/users?limit=abc")
    assert res.status_code == 400
    assert "invalid limit" in res.text


async def test_list_invalid_limit_keeps_requested_page(client):
    res = await client.get("/users?page=3&limit=-5")
    assert res.status_code == 400
    assert "invalid limit" in res.text
    assert "Page 3" in res.text
    assert "limit=10" in res.text


async def test_list_large_limit_is_clamped_not_rejected(client):
    res = await client.get("/users?limit=1000")
    assert res.status_code == 200
    assert "limit=100" in res.text


async def test_index_redirects_to_list(client):
    res = await client.get("/")
    assert res.status_code == 303
    assert res.headers["location"] == "/users"


# ─── create ─────────────────────────────────────────────────────

async def test_create_redirects_to_first_page(client, repository):
    res = await client.post(
        "/users", data={"name": "A", "email": "a@test.com", "age": "20"},
    )
    assert res.status_code == 303
    assert res.headers["location"] == "/users?page=1&limit=10"

    users = await repository.list_users(10, 0)
    assert [(u.name, u.email, u.age) for u in users] == [("A", "a@test.com", 20)]


async def test_create_invalid_email_echoes_form(client, repository):
    res = await client.post(
        "/users", data={"name": "Mahir", "email": "not-an-email", "age": "24"},
    )
    assert res.status_code == 400
    assert "invalid email format" in res.text
    assert 'value="not-an-email"' in res.text
    assert 'value="Mahir"' in res.text
    assert await repository.list_users(10, 0) == []


async def test_create_missing_fields(client):
    res = await client.post("/users", data={"age": "24"})
    assert res.status_code == 400
    assert "name and email are required" in res.text


async def test_create_non_positive_age(client):
    res = await client.post(
        "/users", data={"name": "A", "email": "a@test.com", "age": "0"},
    )
    assert res.status_code == 400
    assert "age must be greater than 0" in res.text


async def test_create_duplicate_email(client, seed_user, repository):
    res = await client.post(
        "/users", data={"name": "Other", "email": seed_user.email, "age": "30"},
    )
    assert res.status_code == 400
    assert "email already exists" in res.text
    assert len(await repository.list_users(10, 0)) == 1


# ─── get ────────────────────────────────────────────────────────

async def test_get_renders_edit_form(client, seed_user):
    res = await client.get(f"/users/{seed_user.id}")
    assert res.status_code == 200
    assert 'value="Mahir"' in res.text
    assert 'value="24"' in res.text


async def test_get_unknown_user(client):
    res = await client.get("/users/999")
    assert res.status_code == 404
    assert "user not found" in res.text


async def test_get_invalid_id(client):
    res = await client.get("/users/abc")
    assert res.status_code == 400
    assert "invalid id" in res.text


# ─── update ─────────────────────────────────────────────────────

async def test_update_redirects_and_persists(client, seed_user, repository):
    res = await client.post(
        f"/users/{seed_user.id}",
        data={"name": "Renamed", "email": "new@test.com", "age": "25"},
    )
    assert res.status_code == 303
    assert res.headers["location"] == "/users"

    user = await repository.get_user(seed_user.id)
    assert (user.name, user.email, user.age) == ("Renamed", "new@test.com", 25)


async def test_update_validation_error_echoes_submitted_values(client, seed_user):
    res = await client.post(
        f"/users/{seed_user.id}",
        data={"name": "Renamed", "email": "new@test.com", "age": "old"},
    )
    assert res.status_code == 400
    assert "age must be a number" in res.text
    assert 'value="old"' in res.text
    assert 'value="Renamed"' in res.text


async def test_update_unknown_user(client):
    res = await client.post(
        "/users/123", data={"name": "X", "email": "x@test.com", "age": "10"},
    )
    assert res.status_code == 404
    assert "user not found" in res.text


async def test_update_to_taken_email(client, seed_user, repository):
    other = await repository.create_user(
        User(name="Other", email="other@test.com", age=40),
    )
    res = await client.post(
        f"/users/{other.id}",
        data={"name": "Other", "email": seed_user.email, "age": "40"},
    )
    assert res.status_code == 400
    assert "email already exists" in res.text


# ─── delete ─────────────────────────────────────────────────────

async def test_delete_redirects_and_removes(client, seed_user, repository):
    res = await client.post(f"/users/{seed_user.id}/delete")
    assert res.status_code == 303
    assert res.headers["location"] == "/users"
    assert await repository.list_users(10, 0) == []


async def test_delete_unknown_user(client):
    res = await client.post("/users/123/delete")
    assert res.status_code == 404
    assert "user not found" in res.text


async def test_delete_invalid_id(client):
    res = await client.post("/users/abc/delete")
    assert res.status_code == 400
    assert "invalid id" in res.text
