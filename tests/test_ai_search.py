# tests/test_ai_search.py
import pytest

from luxejewel.api.routers.search import get_ai_search_service
from luxejewel.domain.errors import ProviderError
from luxejewel.main import app
from luxejewel.services.ai_providers import VisionResult
from luxejewel.services.ai_search_service import AISearchError, AISearchService


class FakeEmbedder:
    def __init__(self, vector=None, errors=()):
        self.vector = vector or [1.0, 0.0, 0.0]
        self.errors = list(errors)
        self.calls = []

    def embed(self, text):
        self.calls.append(text)
        if self.errors:
            raise self.errors.pop(0)
        return self.vector


class FakeProvider:
    def __init__(self, name, results, api_key="key", models=("m1",), retry_on_quota=False):
        self.name = name
        self.api_key = api_key
        self.models = models
        self.retry_on_quota = retry_on_quota
        self.results = list(results)
        self.calls = []

    def describe(self, model_id, image_b64):
        self.calls.append((model_id, image_b64))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def embedded(db, catalog):
    vectors = {
        "sapphire-halo-ring": [1.0, 0.0, 0.0],
        "geometric-floral-silver-ring": [0.7, 0.7, 0.0],
        "gold-chain-necklace": [0.95, 0.3, 0.0],
        "pearl-drop-earrings": [0.0, 0.0, 1.0],
    }
    for slug, vector in vectors.items():
        catalog[slug].embedding = vector
    db.commit()
    return catalog


def service(db, providers=(), embedder=None):
    return AISearchService(db, providers=providers, embedder=embedder or FakeEmbedder(), retry_delay=0)


def test_requires_image_or_query(db):
    from luxejewel.domain.errors import ValidationError

    with pytest.raises(ValidationError):
        service(db).search()


def test_text_search_uses_embedding(db, embedded):
    embedder = FakeEmbedder([1.0, 0.0, 0.0])
    result = service(db, embedder=embedder).search(query="blue sapphire ring")

    assert embedder.calls == ["blue sapphire ring"]
    slugs = [r["slug"] for r in result["results"]]
    # threshold 0.5: the earrings (similarity 0) are left out
    assert slugs == ["sapphire-halo-ring", "gold-chain-necklace", "geometric-floral-silver-ring"]
    assert result["count"] == 3
    assert result["results"][0]["similarity"] == 1.0


def test_text_search_falls_back_to_keywords(db, embedded):
    embedder = FakeEmbedder(errors=[ProviderError("GOOGLE_API_KEY is not configured")])
    result = service(db, embedder=embedder).search(query="pearl")

    assert result["is_fallback"] is True
    assert "capacity" in result["message"]
    assert [r["slug"] for r in result["results"]] == ["pearl-drop-earrings"]


def test_text_search_retries_quota_errors(db, embedded):
    embedder = FakeEmbedder(errors=[ProviderError("Quota exceeded", status=429), ProviderError("429 Too Many Requests")])
    result = service(db, embedder=embedder).search(query="ring")

    assert len(embedder.calls) == 3
    assert "is_fallback" not in result


def test_image_search_walks_the_provider_chain(db, embedded):
    no_key = FakeProvider("Groq", [], api_key="")
    failing = FakeProvider("Cerebras", [ProviderError("bad json"), ProviderError("HTTP 500")], models=("a", "b"))
    working = FakeProvider("OpenRouter", [VisionResult(category="Rings", description="platinum sapphire ring")])

    embedder = FakeEmbedder([1.0, 0.0, 0.0])
    svc = service(db, providers=[no_key, failing, working], embedder=embedder)
    result = svc.search(image="data:image/jpeg;base64,QUJD")

    assert no_key.calls == []
    assert [c[0] for c in failing.calls] == ["a", "b"]
    assert working.calls == [("m1", "QUJD")]
    assert embedder.calls == ["platinum sapphire ring"]

    assert result["category"] == "Rings"
    # detected category restricts matches to rings
    assert [r["slug"] for r in result["results"]] == ["sapphire-halo-ring", "geometric-floral-silver-ring"]


def test_image_search_unknown_category_is_not_a_filter(db, embedded):
    provider = FakeProvider("Gemini", [VisionResult(category="tiaras", description="gold piece")])
    result = service(db, providers=[provider], embedder=FakeEmbedder([1.0, 0.0, 0.0])).search(image="QUJD")

    assert result["category"] == "tiaras"
    assert "gold-chain-necklace" in [r["slug"] for r in result["results"]]


def test_quota_retry_only_for_flagged_providers(db, embedded):
    plain = FakeProvider("Groq", [ProviderError("quota exceeded", status=429)])
    gemini = FakeProvider(
        "Gemini",
        [ProviderError("RESOURCE_EXHAUSTED: quota", status=429), VisionResult(category="rings", description="ring")],
        retry_on_quota=True,
    )
    service(db, providers=[plain, gemini]).search(image="QUJD")

    assert len(plain.calls) == 1
    assert len(gemini.calls) == 2


def test_all_providers_failing(db, embedded):
    provider = FakeProvider("Groq", [ProviderError("down")])
    with pytest.raises(AISearchError) as exc:
        service(db, providers=[provider]).search(image="QUJD")

    assert str(exc.value) == "AI search failed"
    assert exc.value.details == "All AI vision models failed"


def test_image_embedding_failure_is_an_error(db, embedded):
    provider = FakeProvider("Groq", [VisionResult(category="rings", description="ring")])
    embedder = FakeEmbedder(errors=[ProviderError("boom")])
    with pytest.raises(AISearchError):
        service(db, providers=[provider], embedder=embedder).search(image="QUJD")


@pytest.fixture
def ai_client(client, db):
    state = {}

    def override():
        return service(db, providers=state.get("providers", []), embedder=state.get("embedder"))

    app.dependency_overrides[get_ai_search_service] = override
    return client, state


def test_ai_route(ai_client, embedded):
    client, state = ai_client
    state["embedder"] = FakeEmbedder([1.0, 0.0, 0.0])

    r = client.post("/api/search/ai", json={"query": "sapphire"})
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 3
    assert body["is_fallback"] is False
    assert body["results"][0]["slug"] == "sapphire-halo-ring"


def test_ai_route_errors(ai_client, embedded):
    client, state = ai_client

    assert client.post("/api/search/ai", json={}).status_code == 400

    state["providers"] = [FakeProvider("Groq", [ProviderError("down")])]
    r = client.post("/api/search/ai", json={"image": "QUJD"})
    assert r.status_code == 500
    assert r.json()["detail"] == {"error": "AI search failed", "details": "All AI vision models failed"}
