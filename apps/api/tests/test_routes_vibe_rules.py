HOME = "Home"


def _post(client, **fields):
    payload = {"household_name": HOME, "allowed_vibes": ["Mid"], **fields}
    return client.post("/vibe-time-rules", json=payload)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_valid_vibes(client):
    resp = client.get("/vibe-time-rules/vibes")
    assert resp.status_code == 200
    assert resp.json() == {"vibes": ["Down", "Down/Mid", "Mid"]}


def test_create_and_list_rules(client):
    resp = _post(client, start_hour=19, end_hour=0, allowed_vibes=["Down/Mid"], name=" Evening ")
    assert resp.status_code == 201
    created = resp.json()
    assert created["id"] > 0
    assert created["name"] == "Evening"
    assert created["rule_type"] == "base"
    assert created["days"] is None

    _post(client, start_hour=7, end_hour=19)
    _post(client, start_hour=9, end_hour=12, rule_type="override", days=[6, 0, 6], allowed_vibes=["Down"])

    resp = client.get("/vibe-time-rules", params={"household_name": HOME})
    assert resp.status_code == 200
    rules = resp.json()
    assert [r["start_hour"] for r in rules] == [7, 9, 19]
    assert rules[1]["days"] == [0, 6]


def test_list_is_scoped_to_household(client):
    _post(client, start_hour=7, end_hour=19)
    resp = client.get("/vibe-time-rules", params={"household_name": "Cabin"})
    assert resp.json() == []


def test_list_requires_household(client):
    assert client.get("/vibe-time-rules").status_code == 422


def test_structural_error_is_400_with_field(client):
    resp = _post(client, start_hour=25, end_hour=3)
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["error"] == "invalid_range"
    assert detail["field"] == "start_hour"

    resp = _post(client, start_hour=1, end_hour=3, allowed_vibes=["Loud"])
    assert resp.json()["detail"]["error"] == "no_valid_vibes"

    resp = _post(client, start_hour=1, end_hour=3, rule_type="override")
    assert resp.json()["detail"]["error"] == "invalid_days"


def test_overlap_is_409_with_conflict_details(client):
    first = _post(client, start_hour=9, end_hour=17, name="Work").json()

    resp = _post(client, start_hour=16, end_hour=20)
    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["error"] == "overlap_conflict"
    assert detail["conflict"]["id"] == first["id"]
    assert detail["conflict"]["name"] == "Work"

    assert _post(client, start_hour=17, end_hour=20).status_code == 201


def test_update_rule(client):
    rule = _post(client, start_hour=9, end_hour=17).json()

    resp = client.put(
        f"/vibe-time-rules/{rule['id']}",
        json={"household_name": HOME, "start_hour": 10, "end_hour": 18, "allowed_vibes": ["Down", "Mid"]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == rule["id"]
    assert (body["start_hour"], body["end_hour"]) == (10, 18)
    assert body["allowed_vibes"] == ["Down", "Mid"]


def test_update_missing_rule_is_404(client):
    resp = client.put(
        "/vibe-time-rules/4242",
        json={"household_name": HOME, "start_hour": 10, "end_hour": 18, "allowed_vibes": ["Mid"]},
    )
    assert resp.status_code == 404


def test_delete_rule(client):
    rule = _post(client, start_hour=9, end_hour=17).json()

    resp = client.delete(f"/vibe-time-rules/{rule['id']}", params={"household_name": HOME})
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "id": rule["id"]}

    resp = client.delete(f"/vibe-time-rules/{rule['id']}", params={"household_name": HOME})
    assert resp.status_code == 404


def test_delete_rejects_non_positive_id(client):
    resp = client.delete("/vibe-time-rules/0", params={"household_name": HOME})
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "invalid_rule_id"
