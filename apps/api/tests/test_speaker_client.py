import pytest
import requests

from speaker_api.services.speaker_client import SpeakerApiError, SpeakerCloudClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        result = self.responses[url]
        if isinstance(result, Exception):
            raise result
        return result


BASE = "https://speaker.example/api/v1"


def _client(responses):
    session = FakeSession(responses)
    return SpeakerCloudClient(BASE + "/", "tok", timeout=3, session=session), session


def test_list_favorites_for_given_household():
    client, session = _client({
        f"{BASE}/households/HH_1/favorites": FakeResponse(payload={
            "items": [
                {"id": "7", "name": "Jazz", "imageUrl": "https://img.example/7.png"},
                {"name": "no id"},
                {"id": 8, "name": None},
            ]
        }),
    })

    items = client.list_favorites("HH_1")
    assert [i.id for i in items] == ["7", "8"]
    assert items[0].imageUrl == "https://img.example/7.png"
    assert items[1].name == ""
    assert session.calls[0]["headers"] == {"Authorization": "Bearer tok"}
    assert session.calls[0]["timeout"] == 3


def test_first_household_used_when_none_given():
    client, session = _client({
        f"{BASE}/households": FakeResponse(payload={"households": [{"id": "HH_A"}, {"id": "HH_B"}]}),
        f"{BASE}/households/HH_A/favorites": FakeResponse(payload={"items": [{"id": "1", "name": "x"}]}),
    })
    assert [i.id for i in client.list_favorites()] == ["1"]
    assert [c["url"] for c in session.calls] == [f"{BASE}/households", f"{BASE}/households/HH_A/favorites"]


def test_no_households_is_an_error():
    client, _ = _client({f"{BASE}/households": FakeResponse(payload={"households": []})})
    with pytest.raises(SpeakerApiError) as exc:
        client.list_favorites()
    assert exc.value.status == 404


def test_non_200_raises():
    client, _ = _client({f"{BASE}/households/HH_1/favorites": FakeResponse(status_code=401)})
    with pytest.raises(SpeakerApiError) as exc:
        client.list_favorites("HH_1")
    assert exc.value.status == 401


def test_transport_error_raises():
    client, _ = _client({f"{BASE}/households/HH_1/favorites": requests.ConnectionError("down")})
    with pytest.raises(SpeakerApiError):
        client.list_favorites("HH_1")


def test_invalid_json_raises():
    client, _ = _client({f"{BASE}/households/HH_1/favorites": FakeResponse(bad_json=True)})
    with pytest.raises(SpeakerApiError):
        client.list_favorites("HH_1")


def test_own_session_is_closed_on_exit(monkeypatch):
    closed = []
    monkeypatch.setattr(requests.Session, "close", lambda self: closed.append(self))

    with SpeakerCloudClient(BASE, "tok") as client:
        assert closed == []
    assert closed == [client.session]


def test_supplied_session_is_left_open():
    session = FakeSession({})
    session.close = lambda: pytest.fail("caller's session was closed")
    with SpeakerCloudClient(BASE, "tok", session=session):
        pass
