import pytest

AUTH = {"Authorization": "Bearer token-123"}


def test_list_sets_relays_and_disables_cache(test_client, backend):
    sets = [{"id": "s1", "title": "Biology"}, {"id": "s2", "title": "Chemistry"}]
    backend.respond_with(200, json=sets)

    r = test_client.get("/api/flashcards/sets?t=1700000000000", headers=AUTH)

    assert r.status_code == 200
    assert r.json() == sets
    assert r.headers["cache-control"] == "no-store"

    sent = backend.last
    assert sent.method == "GET"
    assert sent.url.path == "/api/flashcards/sets"
    # le paramètre de cache-busting reste côté proxy
    assert sent.url.query == b""
    assert sent.headers["authorization"] == "Bearer token-123"


def test_list_sets_backend_error(test_client, backend):
    backend.respond_with(401, json={"detail": "Not authenticated"})

    r = test_client.get("/api/flashcards/sets")

    assert r.status_code == 401
    assert r.json() == {"error": "Not authenticated"}
    assert r.headers["cache-control"] == "no-store"


def test_list_sets_network_error(test_client, backend):
    backend.raise_error()

    r = test_client.get("/api/flashcards/sets")

    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("POST", "/api/flashcards/sets/create", {"title": "Biology"}),
        ("DELETE", "/api/flashcards/sets/s1", None),
        ("GET", "/api/flashcards/sets/s1/cards", None),
        ("POST", "/api/flashcards/generate", {"note_ids": ["n1"], "num_cards": 5}),
        ("POST", "/api/flashcards/review", {"flashcard_id": "c1", "was_correct": True}),
        ("GET", "/api/flashcards/suggest", None),
        ("POST", "/api/flashcards/suggest", None),
        ("POST", "/api/flashcards/chat", {"message": "Make cards about mitosis"}),
    ],
)
def test_pass_through_endpoints(test_client, backend, method, path, body):
    backend.respond_with(200, json={"ok": True})

    kwargs = {"headers": AUTH}
    if body is not None:
        kwargs["json"] = body
    r = test_client.request(method, path, **kwargs)

    assert r.status_code == 200, r.text
    assert r.json() == {"ok": True}
    assert backend.last.method == method
    assert backend.last.url.path == path
    assert backend.last.headers["authorization"] == "Bearer token-123"
    if body is not None:
        assert backend.last_json() == body
    else:
        assert backend.last.content == b""


@pytest.mark.parametrize(
    "method, path, body, fallback",
    [
        ("POST", "/api/flashcards/sets/create", {"title": "x"}, "Failed to create flashcard set"),
        ("DELETE", "/api/flashcards/sets/s1", None, "Failed to delete flashcard set"),
        ("GET", "/api/flashcards/sets/s1/cards", None, "Failed to fetch flashcards"),
        ("POST", "/api/flashcards/generate", {}, "Failed to generate flashcards"),
        ("POST", "/api/flashcards/review", {}, "Failed to record review"),
        ("GET", "/api/flashcards/suggest", None, "Failed to fetch suggestions"),
        ("POST", "/api/flashcards/suggest", None, "Failed to generate suggestions"),
        ("POST", "/api/flashcards/chat", {}, "Chat request failed"),
    ],
)
def test_pass_through_fallback_messages(test_client, backend, method, path, body, fallback):
    backend.respond_with(503, text="Service Unavailable")

    kwargs = {}
    if body is not None:
        kwargs["json"] = body
    r = test_client.request(method, path, **kwargs)

    assert r.status_code == 503
    assert r.json() == {"error": fallback}


def test_delete_set_no_content(test_client, backend):
    backend.respond_with(204)

    r = test_client.delete("/api/flashcards/sets/s1")

    assert r.status_code == 200
    assert r.json() == {"success": True}
