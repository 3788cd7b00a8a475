"""Tests for the FastAPI REST endpoints."""
from __future__ import annotations


def _create(client) -> dict:
    resp = client.post("/sessions")
    assert resp.status_code == 201, resp.json()
    return resp.json()


def _press(client, session_id: str, *keys: str):
    return client.post(f"/sessions/{session_id}/keys", json={"keys": list(keys)})


# ---------------------------------------------------------------------------
# POST /sessions
# ---------------------------------------------------------------------------

class TestCreateEndpoint:

    def test_create_returns_201(self, client):
        assert client.post("/sessions").status_code == 201

    def test_create_returns_initial_display(self, client):
        data = _create(client)
        assert data["display"] == "0"
        assert data["pending_operator"] is None
        assert data["state"]["buffer"] == "0"
        assert data["state"]["accumulator"] is None
        assert data["state"]["phase"] == "idle"
        assert data["keys_handled"] == 0


# ---------------------------------------------------------------------------
# POST /sessions/{id}/keys
# ---------------------------------------------------------------------------

class TestKeysEndpoint:

    def test_chaining_without_precedence(self, client):
        session = _create(client)
        resp = _press(client, session["id"], "2", "+", "3", "×", "4", "=")
        assert resp.status_code == 200
        assert resp.json()["display"] == "20"

    def test_repeat_equals_across_requests(self, client):
        session = _create(client)
        assert _press(client, session["id"], "2", "+", "3", "=").json()["display"] == "5"
        assert _press(client, session["id"], "=").json()["display"] == "8"

    def test_pending_operator_glyph(self, client):
        session = _create(client)
        data = _press(client, session["id"], "7", "−").json()
        assert data["pending_operator"] == "−"
        assert data["state"]["operator"] == "-"

    def test_divide_by_zero(self, client):
        session = _create(client)
        data = _press(client, session["id"], "5", "÷", "0", "=", "7").json()
        assert data["display"] == "Error"
        data = _press(client, session["id"], "AC", "7").json()
        assert data["display"] == "7"

    def test_negative_zero_entry(self, client):
        session = _create(client)
        data = _press(client, session["id"], "+/-").json()
        assert data["display"] == "0"
        assert data["state"]["buffer"] == "-0"
        assert _press(client, session["id"], "5").json()["display"] == "-5"

    def test_unknown_key_returns_422(self, client):
        session = _create(client)
        resp = _press(client, session["id"], "1", "sin")
        assert resp.status_code == 422
        assert "sin" in resp.json()["detail"]

    def test_unknown_key_leaves_session_untouched(self, client):
        session = _create(client)
        _press(client, session["id"], "1", "sin")
        data = client.get(f"/sessions/{session['id']}").json()
        assert data["display"] == "0"
        assert data["keys_handled"] == 0

    def test_empty_batch_rejected(self, client):
        session = _create(client)
        assert _press(client, session["id"]).status_code == 422

    def test_missing_session_404(self, client):
        assert _press(client, "nope", "1").status_code == 404


# ---------------------------------------------------------------------------
# POST /sessions/{id}/keyboard
# ---------------------------------------------------------------------------

class TestKeyboardEndpoint:

    def _type(self, client, session_id: str, *keys: str) -> dict:
        data = {}
        for key in keys:
            resp = client.post(f"/sessions/{session_id}/keyboard", json={"key": key})
            assert resp.status_code == 200, resp.json()
            data = resp.json()
        return data

    def test_enter_evaluates(self, client):
        session = _create(client)
        data = self._type(client, session["id"], "6", "*", "7", "Enter")
        assert data["display"] == "42"

    def test_escape_clears(self, client):
        session = _create(client)
        data = self._type(client, session["id"], "6", "/", "Escape")
        assert data["display"] == "0"
        assert data["pending_operator"] is None

    def test_backspace(self, client):
        session = _create(client)
        assert self._type(client, session["id"], "1", "2", "Backspace")["display"] == "1"

    def test_unmapped_key_ignored(self, client):
        session = _create(client)
        data = self._type(client, session["id"], "3", "Shift")
        assert data["display"] == "3"
        assert data["keys_handled"] == 1

    def test_blank_key_rejected(self, client):
        session = _create(client)
        resp = client.post(f"/sessions/{session['id']}/keyboard", json={"key": "  "})
        assert resp.status_code == 422

    def test_missing_session_404(self, client):
        resp = client.post("/sessions/nope/keyboard", json={"key": "1"})
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# GET / DELETE
# ---------------------------------------------------------------------------

class TestReadAndDelete:

    def test_get_session(self, client):
        session = _create(client)
        resp = client.get(f"/sessions/{session['id']}")
        assert resp.status_code == 200
        assert resp.json()["id"] == session["id"]

    def test_get_missing_404(self, client):
        resp = client.get("/sessions/nope")
        assert resp.status_code == 404
        assert "nope" in resp.json()["detail"]

    def test_list_sessions(self, client):
        _create(client)
        _create(client)
        data = client.get("/sessions").json()
        assert data["total"] == 2
        assert len(data["items"]) == 2

    def test_list_limit_validated(self, client):
        assert client.get("/sessions", params={"limit": 0}).status_code == 422

    def test_delete_session(self, client):
        session = _create(client)
        _press(client, session["id"], "9")
        resp = client.delete(f"/sessions/{session['id']}")
        assert resp.status_code == 200
        assert resp.json()["display"] == "9"
        assert client.get(f"/sessions/{session['id']}").status_code == 404

    def test_delete_missing_404(self, client):
        assert client.delete("/sessions/nope").status_code == 404
