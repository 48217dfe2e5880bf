import pytest
from markov.engine import Engine
from markov_web.web import app as flask_app

FOX = "The quick brown fox jumps over the lazy dog"


@pytest.fixture
def client():
    import markov_web.web as webmod
    eng = Engine().open("memory://")
    webmod._engine = eng
    try:
        yield flask_app.test_client()
    finally:
        webmod._engine = None
        eng.shutdown()


@pytest.mark.e2e
def test_ingest_then_generate(client):
    rv = client.post("/api/ingest", json={"text": FOX, "order": 3, "author": "test"})
    assert rv.status_code == 200
    assert rv.get_json() == {"lines": 1, "words": 9, "observations": 6}

    rv = client.get("/api/generate?w=The")
    assert rv.status_code == 200
    assert rv.get_json() == {"text": FOX}


@pytest.mark.e2e
def test_generate_unknown_word_is_404(client):
    client.post("/api/ingest", json={"text": FOX, "order": 3, "author": "test"})
    rv = client.get("/api/generate?w=unicorn")
    assert rv.status_code == 404
    assert "error" in rv.get_json()


@pytest.mark.e2e
def test_prefixes_and_stats(client):
    client.post("/api/ingest", json={"text": FOX, "order": 3, "author": "test"})
    rows = client.get("/api/prefixes?w=fox").get_json()
    assert [r["tuple"] for r in rows] == ["quick brown fox", "brown fox jumps", "fox jumps over"]
    for key in ("id", "tuple", "order", "author"):
        assert key in rows[0]
    assert client.get("/api/prefixes?w=").get_json() == []
    assert client.get("/api/stats").get_json() == {"prefixes": 6, "suffixes": 6}


@pytest.mark.e2e
def test_ingest_validation(client):
    assert client.post("/api/ingest", json={}).status_code == 400
    assert client.post("/api/ingest", json={"text": "a b", "order": 0}).status_code == 400
    rv = client.post("/api/ingest", json={"text": "alice hi there\nbob", "order": 1})
    assert rv.status_code == 400
    assert rv.get_json()["line_no"] == 2


@pytest.mark.e2e
def test_health_and_home(client):
    assert client.get("/health").get_json() == {"ok": True}
    rv = client.get("/")
    assert rv.status_code == 200
    assert b"<title>Markov" in rv.data
