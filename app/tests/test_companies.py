import uuid


def test_create_company_is_admin_only(client, admin_headers, member_headers):
    assert client.post("/companies", json={"name": "Initech"}, headers=member_headers).status_code == 401
    r = client.post("/companies", json={"name": "Initech"}, headers=admin_headers)
    assert r.status_code == 201, r.text
    assert r.json()["name"] == "Initech"


def test_get_and_list_companies(client, company):
    r = client.get(f"/companies/{company.id}")
    assert r.status_code == 200
    assert r.json()["name"] == "Acme Robotics"

    listed = client.get("/companies").json()
    assert [c["name"] for c in listed["data"]] == ["Acme Robotics"]
    assert listed["pagination"]["totalCount"] == 1

    assert client.get(f"/companies/{uuid.uuid4()}").status_code == 404
    assert client.get("/companies/acme").status_code == 400
