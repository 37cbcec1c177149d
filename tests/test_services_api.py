def test_provider_creates_and_lists_services(provider, customer):
    resp = provider.post("/services", json={
        "name": "Haircut", "description": "Wash and cut", "duration": "60", "price": "45.5",
    })
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["duration"] == 60
    assert created["price"] == 45.5

    listed = customer.get("/services").get_json()
    assert [s["name"] for s in listed] == ["Haircut"]
    assert listed[0]["provider"]["name"] == "provider"

    assert customer.get(f"/services/{created['id']}").status_code == 200


def test_customers_cannot_create_services(customer):
    resp = customer.post("/services", json={"name": "Haircut", "duration": 60, "price": 10})
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Forbidden"}


def test_anonymous_cannot_create_services(app):
    resp = app.test_client().post("/services", json={"name": "Haircut", "duration": 60, "price": 10})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Authentication required"}


def test_service_validation(provider):
    assert provider.post("/services", json={"duration": 60, "price": 10}).status_code == 400
    assert provider.post("/services", json={"name": "X", "duration": 0, "price": 10}).status_code == 400
    assert provider.post("/services", json={"name": "X", "duration": "abc", "price": 10}).status_code == 400
    assert provider.post("/services", json={"name": "X", "duration": 30, "price": -1}).status_code == 400
    assert provider.post("/services", json={"name": "X", "duration": 30, "price": "free"}).status_code == 400


def test_update_and_delete_own_service(provider, haircut):
    path = f"/services/{haircut['id']}"
    resp = provider.put(path, json={"name": "Long haircut", "duration": 90, "price": 60})
    assert resp.status_code == 200
    assert resp.get_json()["duration"] == 90

    assert provider.delete(path).status_code == 204
    assert provider.get(path).status_code == 404
    assert provider.get("/services").get_json() == []


def test_other_provider_cannot_touch_service(app, haircut):
    from tests.conftest import ApiClient

    rival = ApiClient(app.test_client())
    rival.register("rival@example.com", role="PROVIDER")
    rival.login("rival@example.com")

    path = f"/services/{haircut['id']}"
    assert rival.put(path, json={"name": "Mine", "duration": 30, "price": 1}).status_code == 403
    assert rival.delete(path).status_code == 403
