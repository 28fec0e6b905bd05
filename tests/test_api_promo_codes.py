def test_list_promo_codes(client):
    r = client.get("/api/promoCodes")
    assert r.status_code == 200
    body = r.json()
    assert [p["code"] for p in body] == ["Switch2Electric", "IAQBundle", "FastTrack", "FullSystem"]
    assert body[0] == {
        "id": 1,
        "code": "Switch2Electric",
        "amount": 500,
        "description": "Rebate for switching to electric heat pump",
        "isActive": True,
    }


def test_lookup_by_query_is_case_insensitive(client):
    for typed in ("fullsystem", "FullSystem", "Full System"):
        r = client.get("/api/promoCodes", params={"code": typed})
        assert r.status_code == 200
        assert r.json() == {"rebate": 1000, "code": "FullSystem"}


def test_lookup_unknown_code(client):
    r = client.get("/api/promoCodes", params={"code": "NOPE"})
    assert r.status_code == 404
    assert r.json() == {"message": "Invalid or inactive promo code"}


def test_lookup_by_path(client):
    r = client.get("/api/promoCodes/iaqbundle")
    assert r.status_code == 200
    assert r.json() == {
        "id": 2,
        "code": "IAQBundle",
        "rebate": 750,
        "description": "Indoor Air Quality package discount",
        "status": "Active",
    }
    assert client.get("/api/promoCodes/missing").status_code == 404


def test_create_promo_code(client):
    r = client.post("/api/promoCodes", json={"code": "Spring25", "amount": 250})
    assert r.status_code == 201
    assert r.json() == {
        "id": 5,
        "code": "Spring25",
        "amount": 250,
        "description": "",
        "isActive": True,
    }
    assert client.get("/api/promoCodes", params={"code": "spring25"}).json()["rebate"] == 250


def test_create_over_cap(client):
    r = client.post("/api/promoCodes", json={"code": "Huge", "amount": 1500})
    assert r.status_code == 400
    assert r.json() == {"message": "Rebate capped at $1000"}


def test_create_invalid_body(client):
    r = client.post("/api/promoCodes", json={"code": "NoAmount"})
    assert r.status_code == 400
    assert "message" in r.json()


def test_create_duplicate(client):
    r = client.post("/api/promoCodes", json={"code": "fasttrack", "amount": 100})
    assert r.status_code == 409
    assert r.json() == {"message": "Promo code already exists"}


def test_update_promo_code(client):
    r = client.put("/api/promoCodes/3", json={"amount": 600, "description": "Faster"})
    assert r.status_code == 200
    assert r.json()["amount"] == 600
    assert r.json()["description"] == "Faster"
    assert r.json()["code"] == "FastTrack"


def test_update_deactivates_code(client):
    r = client.put("/api/promoCodes/4", json={"isActive": False})
    assert r.status_code == 200
    assert client.get("/api/promoCodes", params={"code": "FullSystem"}).status_code == 404


def test_update_errors(client):
    assert client.put("/api/promoCodes/abc", json={"amount": 1}).status_code == 400
    assert client.put("/api/promoCodes/99", json={"amount": 1}).status_code == 404
    r = client.put("/api/promoCodes/1", json={"amount": 2000})
    assert r.status_code == 400
    assert r.json() == {"message": "Rebate capped at $1000"}
    assert client.put("/api/promoCodes/1", json={"code": "FullSystem"}).status_code == 409


def test_delete_promo_code(client):
    r = client.delete("/api/promoCodes/1")
    assert r.status_code == 204
    assert client.delete("/api/promoCodes/1").status_code == 404
    assert client.delete("/api/promoCodes/xyz").status_code == 400
    assert [p["id"] for p in client.get("/api/promoCodes").json()] == [2, 3, 4]
