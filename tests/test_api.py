import pytest
from fastapi.testclient import TestClient

from pricematch.main import app
from pricematch.resolver import resolver
from pricematch.scraping.pacing import PacingController

from conftest import FakeSession, RecordingSleep

PAGE = (
    '<body><div class="product-item"><h2>Metformina 850mg 30 tabletas</h2>'
    '<span class="price">$ 58.00</span><a href="/p/metformina">ver</a></div></body>'
)


@pytest.fixture
def session():
    return FakeSession({"farmaciasguadalajara": PAGE})


@pytest.fixture
def client(monkeypatch, fast_extractor, session):
    monkeypatch.setattr(resolver, "session", session)
    monkeypatch.setattr(resolver, "extractor", fast_extractor)
    monkeypatch.setattr(
        resolver, "pacing", PacingController(base_ms=0, jitter_ms=0, sleep=RecordingSleep()),
    )
    with TestClient(app) as c:
        yield c


def test_status(client):
    r = client.get("/status")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["version"] == "1.0"
    assert set(body["competitors"]) == {"benavides", "guadalajara", "similares"}


def test_resolve_found(client):
    r = client.post("/api/resolve", json={
        "product": {"name": "Metformina 850mg tabletas"},
        "competitor": "guadalajara",
    })
    assert r.status_code == 200
    assert r.json() == {
        "found": True,
        "matched_name": "Metformina 850mg 30 tabletas",
        "price": 58.0,
        "url": "https://www.farmaciasguadalajara.com/p/metformina",
        "match_score": 1.0,
    }


def test_resolve_unsupported_competitor(client):
    r = client.post("/api/resolve", json={
        "product": {"name": "Metformina"}, "competitor": "sanpablo",
    })
    assert r.status_code == 200
    assert r.json()["found"] is False
    assert r.json()["reason"] == "unsupported_competitor"


@pytest.mark.parametrize("payload", [
    {"competitor": "guadalajara"},
    {"product": {"name": "Metformina"}},
    {},
])
def test_resolve_missing_params(client, payload):
    r = client.post("/api/resolve", json=payload)
    assert r.status_code == 400
    assert "Missing parameters" in r.json()["error"]


def test_resolve_malformed_product_is_500(client):
    r = client.post("/api/resolve", json={
        "product": {"nombre": "Metformina"}, "competitor": "guadalajara",
    })
    assert r.status_code == 500
    assert r.json()["found"] is False


def test_lifespan_stops_browser_once_on_shutdown(monkeypatch, session):
    monkeypatch.setattr(resolver, "session", session)
    with TestClient(app) as c:
        assert c.get("/status").status_code == 200
        assert session.stopped == 0
    assert session.stopped == 1
