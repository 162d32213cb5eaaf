from datetime import timedelta

from app.api.dependencies import get_token_service
from conftest import signup

ENTRY = {"title": "First day", "body": "Started a diary today."}


def create_entry(client, headers, **overrides):
    return client.post("/api/v1/entries", json={**ENTRY, **overrides}, headers=headers)


def test_entries_without_token_is_403(client):
    assert client.get("/api/v1/entries").status_code == 403
    assert client.post("/api/v1/entries").status_code == 403
    assert client.get("/api/v1/entries/1").status_code == 403


def test_entries_with_invalid_token_is_401(client):
    headers = {"Authorization": "Bearer invalidToken"}

    assert client.get("/api/v1/entries", headers=headers).status_code == 401
    assert client.post("/api/v1/entries", headers=headers).status_code == 401
    response = client.get("/api/v1/entries/1", headers=headers)
    assert response.status_code == 401
    assert "error" in response.json()
    assert response.headers["www-authenticate"] == "Bearer"


def test_entries_with_expired_token_is_401(client):
    token = get_token_service().issue(1, expires_delta=timedelta(seconds=-5))

    response = client.get("/api/v1/entries", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_non_bearer_authorization_is_401(client, auth_headers):
    token = auth_headers["Authorization"].split(" ", 1)[1]

    response = client.get("/api/v1/entries", headers={"Authorization": f"Basic {token}"})

    assert response.status_code == 401


def test_new_user_without_entries_gets_404(client, auth_headers):
    response = client.get("/api/v1/entries", headers=auth_headers)

    assert response.status_code == 404
    assert "error" in response.json()


def test_list_entries_store_failure_is_500(client, token_for, broken_db):
    response = client.get("/api/v1/entries", headers={"Authorization": f"Bearer {token_for(1)}"})

    assert response.status_code == 500


def test_create_entry_then_list(client, auth_headers):
    response = create_entry(client, auth_headers)

    assert response.status_code == 201
    created = response.json()["result"]
    assert created["id"] > 0
    assert created["title"] == ENTRY["title"]
    assert created["body"] == ENTRY["body"]

    listed = client.get("/api/v1/entries", headers=auth_headers)
    assert listed.status_code == 200
    assert [e["id"] for e in listed.json()["entries"]] == [created["id"]]


def test_create_entry_requires_title_and_body(client, auth_headers):
    response = create_entry(client, auth_headers, title="", body="  ")

    assert response.status_code == 422
    assert {f["field"] for f in response.json()["fields"]} == {"title", "body"}


def test_create_entry_store_failure_is_500(client, token_for, broken_db):
    response = client.post(
        "/api/v1/entries",
        json=ENTRY,
        headers={"Authorization": f"Bearer {token_for(1)}"},
    )

    assert response.status_code == 500
    broken_db.rollback.assert_called()


def test_get_entry_by_id(client, auth_headers):
    created = create_entry(client, auth_headers).json()["result"]

    response = client.get(f"/api/v1/entries/{created['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["entry"] == created


def test_get_entry_is_repeatable(client, auth_headers):
    created = create_entry(client, auth_headers).json()["result"]
    url = f"/api/v1/entries/{created['id']}"

    first = client.get(url, headers=auth_headers).json()
    second = client.get(url, headers=auth_headers).json()

    assert first == second


def test_get_missing_entry_is_404(client, auth_headers):
    created = create_entry(client, auth_headers).json()["result"]

    response = client.get(f"/api/v1/entries/{created['id'] + 1}", headers=auth_headers)

    assert response.status_code == 404


def test_get_non_numeric_id_is_422(client, auth_headers):
    response = client.get("/api/v1/entries/eee}", headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["fields"][0]["field"] == "entry_id"


def test_get_non_positive_id_is_422(client, auth_headers):
    assert client.get("/api/v1/entries/0", headers=auth_headers).status_code == 422


def test_get_entry_store_failure_is_500(client, token_for, broken_db):
    response = client.get("/api/v1/entries/1", headers={"Authorization": f"Bearer {token_for(1)}"})

    assert response.status_code == 500


def test_other_users_entry_is_hidden(client, auth_headers):
    created = create_entry(client, auth_headers).json()["result"]
    other = signup(client, email="grace@example.com").json()["token"]
    other_headers = {"Authorization": f"Bearer {other}"}

    assert client.get(f"/api/v1/entries/{created['id']}", headers=other_headers).status_code == 404
    assert client.get("/api/v1/entries", headers=other_headers).status_code == 404
    assert client.put(
        f"/api/v1/entries/{created['id']}", json={"title": "Mine now"}, headers=other_headers
    ).status_code == 404
    assert client.delete(f"/api/v1/entries/{created['id']}", headers=other_headers).status_code == 404

    # Owner still sees it unchanged
    response = client.get(f"/api/v1/entries/{created['id']}", headers=auth_headers)
    assert response.json()["entry"]["title"] == ENTRY["title"]


def test_update_entry(client, auth_headers):
    created = create_entry(client, auth_headers).json()["result"]

    response = client.put(
        f"/api/v1/entries/{created['id']}",
        json={"body": "Rewritten."},
        headers=auth_headers,
    )

    assert response.status_code == 200
    updated = response.json()["result"]
    assert updated["title"] == ENTRY["title"]
    assert updated["body"] == "Rewritten."


def test_update_entry_without_changes_is_422(client, auth_headers):
    created = create_entry(client, auth_headers).json()["result"]

    response = client.put(f"/api/v1/entries/{created['id']}", json={}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["fields"][0]["field"] == "payload"


def test_delete_entry(client, auth_headers):
    created = create_entry(client, auth_headers).json()["result"]
    url = f"/api/v1/entries/{created['id']}"

    response = client.delete(url, headers=auth_headers)

    assert response.status_code == 200
    assert "message" in response.json()
    assert client.get(url, headers=auth_headers).status_code == 404
