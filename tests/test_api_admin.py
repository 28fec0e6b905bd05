def test_admin_page_lists_codes(client):
    r = client.get("/admin/promo-codes")
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert "FullSystem" in r.text
    assert "Switch2Electric" in r.text


def test_admin_create_redirects(client, promo_repo):
    r = client.post(
        "/admin/promo-codes",
        data={"code": "Winter", "amount": "300", "description": "Cold snap", "isActive": "true"},
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/promo-codes"
    assert promo_repo.get_by_code("winter").amount == 300


def test_admin_create_over_cap(client):
    r = client.post(
        "/admin/promo-codes",
        data={"code": "Huge", "amount": "5000"},
        follow_redirects=False,
    )
    assert r.status_code == 400


def test_admin_update_toggle_delete(client, promo_repo):
    r = client.post(
        "/admin/promo-codes/1/update",
        data={"amount": "450", "description": "Heat pump rebate"},
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert promo_repo.get(1).amount == 450

    client.post("/admin/promo-codes/1/toggle", follow_redirects=False)
    assert promo_repo.get(1).isActive is False

    client.post("/admin/promo-codes/1/delete", follow_redirects=False)
    assert promo_repo.get(1) is None
    assert client.post("/admin/promo-codes/1/toggle", follow_redirects=False).status_code == 404
