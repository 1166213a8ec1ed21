from conftest import OTHER_KEY, OWNER_KEY

AUTH = {"X-Access-Key": OWNER_KEY}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "storage": "memory"}


def test_create_form_scenario(client):
    response = client.post("/api/forms", json={"schema": [{"name": "email", "required": True}]}, headers=AUTH)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Form created successfully"
    assert body["id"]
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["content-type"] == "application/json"


def test_get_unknown_form_scenario(client):
    response = client.get("/api/forms/does-not-exist", headers=AUTH)
    assert response.status_code == 404
    assert response.json()["error"]


def test_update_with_duplicate_names_scenario(client):
    form_id = client.post("/api/forms", json={"schema": [{"name": "email"}]}, headers=AUTH).json()["id"]
    response = client.put(
        f"/api/forms/{form_id}",
        json={"schema": [{"name": "email"}, {"name": "email"}]},
        headers=AUTH,
    )
    assert response.status_code == 400
    assert "unique" in response.json()["error"]


def test_delete_twice_scenario(client):
    form_id = client.post("/api/forms", json={"schema": [{"name": "email"}]}, headers=AUTH).json()["id"]
    first = client.delete(f"/api/forms/{form_id}", headers=AUTH)
    second = client.delete(f"/api/forms/{form_id}", headers=AUTH)
    assert first.status_code == second.status_code == 200
    assert second.json() == {"message": "Form deleted successfully"}
    assert client.get(f"/api/forms/{form_id}", headers=AUTH).status_code == 404


def test_preflight_on_every_route(client):
    for path in ["/api/forms", "/api/forms/abc", "/api/forms/abc/submissions"]:
        response = client.options(path)
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization, X-Api-Key, X-Access-Key"


def test_list_is_scoped_and_paginated(client):
    ids = [
        client.post("/api/forms", json={"schema": [{"name": f"f{i}"}]}, headers=AUTH).json()["id"]
        for i in range(3)
    ]
    client.post("/api/forms", json={"schema": [{"name": "other"}]}, headers={"X-Access-Key": OTHER_KEY})

    page = client.get("/api/forms", params={"limit": 2}, headers=AUTH).json()
    assert [f["id"] for f in page["forms"]] == ids[::-1][:2]
    rest = client.get("/api/forms", params={"limit": 2, "cursor": page["next_cursor"]}, headers=AUTH).json()
    assert [f["id"] for f in rest["forms"]] == [ids[0]]
    assert rest["next_cursor"] is None


def test_public_submission_and_owner_listing(client):
    form_id = client.post(
        "/api/forms",
        json={"schema": [{"name": "email", "type": "email", "required": True}]},
        headers=AUTH,
    ).json()["id"]

    response = client.post(f"/api/forms/{form_id}/submissions", json={"values": {"email": "ada@example.com"}})
    assert response.status_code == 200
    assert response.json()["message"] == "Form submitted successfully"

    bad = client.post(f"/api/forms/{form_id}/submissions", json={"values": {"email": "nope"}})
    assert bad.status_code == 400

    listing = client.get(f"/api/forms/{form_id}/submissions", headers=AUTH)
    assert listing.status_code == 200
    assert [s["values"] for s in listing.json()["submissions"]] == [{"email": "ada@example.com"}]


def test_invalid_json_body_gets_json_error(client):
    response = client.post("/api/forms", content=b"{oops", headers={**AUTH, "Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be valid JSON"}


def test_missing_credentials_is_401(client):
    response = client.get("/api/forms")
    assert response.status_code == 401
    assert response.json()["error"]


def test_unsupported_method_is_405(client):
    response = client.patch("/api/forms/abc", json={}, headers=AUTH)
    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}


def test_unknown_path_still_gets_envelope(client):
    response = client.get("/api/billing")
    assert response.status_code == 404
    assert response.json()["error"]
    assert response.headers["access-control-allow-origin"] == "*"
