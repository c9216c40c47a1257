from speaker_api.models.playlist_vibe import PlaylistVibe


def test_playlist_vibes_drop_unknown_tags(client):
    resp = client.put("/playlist-vibes", json={"p1": "Mid", "p2": "Loud", "p3": "Down/Mid", "p4": None})
    assert resp.status_code == 200
    assert resp.json() == {"p1": "Mid", "p3": "Down/Mid"}

    assert client.get("/playlist-vibes").json() == {"p1": "Mid", "p3": "Down/Mid"}


def test_playlist_vibes_put_replaces_everything(client):
    client.put("/playlist-vibes", json={"p1": "Mid", "p2": "Down"})
    client.put("/playlist-vibes", json={"p3": "Down"})
    assert client.get("/playlist-vibes").json() == {"p3": "Down"}


def test_hidden_favorites_toggle(client):
    assert client.get("/hidden-favorites").json() == {"favorite_ids": []}

    resp = client.put("/hidden-favorites/f2", json={"hidden": True})
    assert resp.status_code == 200
    assert resp.json() == {"favorite_id": "f2", "hidden": True}
    client.put("/hidden-favorites/f1", json={"hidden": True})
    # hiding twice is harmless
    client.put("/hidden-favorites/f1", json={"hidden": True})
    assert client.get("/hidden-favorites").json() == {"favorite_ids": ["f1", "f2"]}

    client.put("/hidden-favorites/f2", json={"hidden": False})
    assert client.get("/hidden-favorites").json() == {"favorite_ids": ["f1"]}


def test_hidden_favorite_blank_id_is_400(client):
    resp = client.put("/hidden-favorites/%20", json={"hidden": True})
    assert resp.status_code == 400


def test_volumes_are_clamped_and_cleaned(client):
    resp = client.put(
        "/settings/volumes",
        json={"kitchen": 150, "den": -3, "office": 42.6, "porch": "loud", "attic": None, "garage": "30"},
    )
    assert resp.status_code == 200
    expected = {"kitchen": 100, "den": 0, "office": 43, "garage": 30}
    assert resp.json() == expected
    assert client.get("/settings/volumes").json() == expected


def test_playlist_vibes_storage_failure_is_503(client, engine):
    PlaylistVibe.__table__.drop(engine)

    assert client.get("/playlist-vibes").status_code == 503
    assert client.put("/playlist-vibes", json={"p1": "Mid"}).status_code == 503
