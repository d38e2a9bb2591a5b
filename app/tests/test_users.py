import uuid

from app import crud
from app.security import verify_password


def _register(client, **overrides):
    payload = {
        "email": "jane@example.com",
        "username": "jane",
        "password": "password123",
        "fullName": "Jane Doe",
        "phoneNumber": "+961 1 234 567",
    }
    payload.update(overrides)
    return client.post("/users", json=payload)


def test_register_user(client, db_session):
    r = _register(client)
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["email"] == "jane@example.com"
    assert data["fullName"] == "Jane Doe"
    assert data["role"] == "user"
    assert "password" not in data

    stored = crud.get_user(db_session, uuid.UUID(data["id"]))
    assert stored.password != "password123"
    assert verify_password("password123", stored.password)


def test_register_duplicates_conflict(client):
    assert _register(client).status_code == 201
    assert _register(client, username="other").status_code == 409
    assert _register(client, email="other@example.com").status_code == 409


def test_register_validation(client):
    assert _register(client, email="not-an-email").status_code == 422
    assert _register(client, password="short").status_code == 422


def test_register_unknown_level_is_422(client):
    assert _register(client, levelId=4242).status_code == 422


def test_get_user(client, member_user):
    r = client.get(f"/users/{member_user.id}")
    assert r.status_code == 200
    assert r.json()["username"] == "member"
    assert client.get(f"/users/{uuid.uuid4()}").status_code == 404
    assert client.get("/users/42").status_code == 400


def test_list_users_is_admin_only(client, member_user, admin_headers, member_headers):
    assert client.get("/users", headers=member_headers).status_code == 401
    r = client.get("/users", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["pagination"]["totalCount"] == 2


def test_update_self(client, member_user, member_headers, category, level):
    body = {"fullName": "Member One", "levelId": level.id, "categoryId": category.id, "tags": "python"}
    r = client.put(f"/users/{member_user.id}", json=body, headers=member_headers)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["fullName"] == "Member One"
    assert data["levelId"] == level.id
    assert data["updatedAt"] is not None


def test_update_other_user_is_401(client, make_user, member_headers):
    other = make_user("other")
    r = client.put(f"/users/{other.id}", json={"fullName": "Nope"}, headers=member_headers)
    assert r.status_code == 401


def test_admin_updates_any_user(client, member_user, admin_headers):
    r = client.put(f"/users/{member_user.id}", json={"fullName": "Set By Admin"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["fullName"] == "Set By Admin"


def test_reset_password_needs_current_password(client, db_session, member_user, member_headers):
    url = f"/users/{member_user.id}/password"
    bad = client.put(url, json={"currentPassword": "wrong-one", "newPassword": "newpassword1"}, headers=member_headers)
    assert bad.status_code == 401

    ok = client.put(url, json={"currentPassword": "password123", "newPassword": "newpassword1"}, headers=member_headers)
    assert ok.status_code == 200
    assert ok.json() == {"message": "Password updated successfully"}
    db_session.expire_all()
    assert verify_password("newpassword1", crud.get_password_hash(db_session, member_user.id))


def test_admin_resets_password_without_current(client, db_session, member_user, admin_headers):
    r = client.put(f"/users/{member_user.id}/password", json={"newPassword": "resetbyadmin"}, headers=admin_headers)
    assert r.status_code == 200
    db_session.expire_all()
    assert verify_password("resetbyadmin", crud.get_password_hash(db_session, member_user.id))


def test_delete_user(client, make_user, headers_for):
    user = make_user("leaving")
    user_id = user.id
    headers = headers_for(user)
    r = client.delete(f"/users/{user_id}", headers=headers)
    assert r.status_code == 200
    assert r.json()["message"] == "User deleted successfully"
    assert r.json()["user"]["username"] == "leaving"
    assert client.get(f"/users/{user_id}").status_code == 404


def test_saved_jobs_listing(client, make_job, member_user, member_headers, admin_headers):
    job = make_job()
    client.post(f"/jobs/{job.id}/save", headers=member_headers)

    r = client.get(f"/users/{member_user.id}/saved-jobs", headers=member_headers)
    assert r.status_code == 200
    assert [j["id"] for j in r.json()] == [str(job.id)]

    assert client.get(f"/users/{member_user.id}/saved-jobs", headers=admin_headers).status_code == 200
    assert client.get(f"/users/{member_user.id}/saved-jobs").status_code == 401


def test_register_out_of_range_level_is_422(client, db_session):
    assert _register(client, levelId=10**20).status_code == 422
    assert _register(client, categoryId=2**31).status_code == 422
    assert crud.get_user_by_username(db_session, "jane") is None


def test_update_only_touches_supplied_fields(client, member_user, member_headers, category, level):
    url = f"/users/{member_user.id}"
    full = {"fullName": "Member One", "levelId": level.id, "categoryId": category.id, "tags": "python"}
    assert client.put(url, json=full, headers=member_headers).status_code == 200

    r = client.put(url, json={"fullName": "Renamed"}, headers=member_headers)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["fullName"] == "Renamed"
    assert data["tags"] == "python"
    assert data["levelId"] == level.id
    assert data["categoryId"] == category.id

    cleared = client.put(url, json={"tags": None}, headers=member_headers).json()
    assert cleared["tags"] is None
    assert cleared["fullName"] == "Renamed"


def test_update_unknown_category_is_422(client, member_user, member_headers):
    r = client.put(f"/users/{member_user.id}", json={"categoryId": 4242}, headers=member_headers)
    assert r.status_code == 422
    assert r.json()["detail"] == "Unknown job category"
