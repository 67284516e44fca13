"""Tests for the HTTP endpoints."""

from unittest.mock import MagicMock

import pytest

from omninews import config
from omninews.services import generator

GENERATE_PATH = "/functions/v1/generate-article"


# ── public reads ──────────────────────────────────────────────

class TestReadEndpoints:
    def test_list_with_filters(self, client, make_article):
        make_article(category="tech", title="Gadget")
        make_article(category="tech", title="Draft", is_published=False)
        make_article(category="viral", title="Joget")

        resp = client.get("/api/articles", params={"category": "tech", "is_published": "true"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 1
        assert body["articles"][0]["title"] == "Gadget"

    def test_list_rejects_unknown_category(self, client):
        assert client.get("/api/articles", params={"category": "olahraga"}).status_code == 422

    def test_categories(self, client):
        resp = client.get("/api/articles/categories")
        assert resp.status_code == 200
        assert resp.json() == [
            {"value": "nasional", "label": "Nasional"},
            {"value": "tech", "label": "Tech"},
            {"value": "lifestyle", "label": "Lifestyle"},
            {"value": "viral", "label": "Viral"},
            {"value": "social", "label": "Social"},
        ]

    def test_rest_preflight_handled_by_middleware(self, client):
        resp = client.options("/api/articles", headers={
            "Origin": "https://admin.omninews.id",
            "Access-Control-Request-Method": "POST",
        })
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_get_article(self, client, make_article):
        article = make_article(title="Detail")
        resp = client.get(f"/api/articles/{article.id}")
        assert resp.status_code == 200
        assert resp.json()["title"] == "Detail"
        assert resp.json()["view_count"] == 0

    def test_get_missing(self, client):
        assert client.get("/api/articles/tidak-ada").status_code == 404

    def test_feed(self, client, make_article):
        hero = make_article(age_minutes=30, is_breaking=True, title="Breaking")
        make_article(age_minutes=1, title="Terbaru", view_count=10)
        body = client.get("/api/articles/feed").json()
        assert body["hero"]["id"] == hero.id
        assert [a["title"] for a in body["articles"]] == ["Terbaru"]
        assert body["trending"][0]["title"] == "Terbaru"

    def test_trending(self, client, make_article):
        make_article(title="A", view_count=1)
        make_article(title="B", view_count=2)
        body = client.get("/api/articles/trending", params={"limit": 1}).json()
        assert [a["title"] for a in body["articles"]] == ["B"]


# ── admin writes ──────────────────────────────────────────────

class TestWriteEndpoints:
    def test_create_requires_auth(self, client):
        resp = client.post("/api/articles", json={"title": "T", "content": "C"})
        assert resp.status_code == 401

    def test_wrong_password(self, client):
        resp = client.post("/api/articles", json={"title": "T", "content": "C"}, auth=("editor", "salah"))
        assert resp.status_code == 401

    def test_writes_refused_without_configured_admin(self, client, admin_auth, monkeypatch):
        monkeypatch.setattr(config, "ADMIN_USER", None)
        resp = client.post("/api/articles", json={"title": "T", "content": "C"}, auth=admin_auth)
        assert resp.status_code == 401

    def test_create(self, client, admin_auth):
        resp = client.post("/api/articles", auth=admin_auth, json={
            "title": "Viral! Kucing Jadi Kasir",
            "content": "Paragraf satu.\n\nParagraf dua.",
            "source_url": "https://www.tiktok.com/@kucing/video/1",
            "thumbnail_url": "   ",
            "category": "viral",
            "is_published": True,
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["id"]
        assert body["thumbnail_url"] is None
        assert body["excerpt"] == "Paragraf satu.\n\nParagraf dua."
        assert body["is_breaking"] is False

    def test_create_validation(self, client, admin_auth):
        resp = client.post("/api/articles", auth=admin_auth, json={"title": "", "content": "C"})
        assert resp.status_code == 422

    def test_update(self, client, admin_auth, make_article):
        article = make_article(title="Lama")
        resp = client.patch(f"/api/articles/{article.id}", auth=admin_auth, json={"title": "Baru", "is_breaking": True})
        assert resp.status_code == 200
        assert resp.json()["title"] == "Baru"
        assert resp.json()["is_breaking"] is True
        assert resp.json()["content"] == article.content

    def test_update_missing(self, client, admin_auth):
        resp = client.patch("/api/articles/tidak-ada", auth=admin_auth, json={"title": "T"})
        assert resp.status_code == 404

    def test_toggle_publish(self, client, admin_auth, make_article):
        article = make_article(is_published=True)
        resp = client.post(f"/api/articles/{article.id}/toggle-publish", auth=admin_auth)
        assert resp.status_code == 200
        assert resp.json()["is_published"] is False

    def test_delete(self, client, admin_auth, make_article):
        article = make_article()
        assert client.delete(f"/api/articles/{article.id}", auth=admin_auth).status_code == 200
        assert client.get(f"/api/articles/{article.id}").status_code == 404
        assert client.delete(f"/api/articles/{article.id}", auth=admin_auth).status_code == 404


# ── generate-article function ─────────────────────────────────

def _reply(content, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = ""
    response.json.return_value = {"choices": [{"message": {"content": content}}]}
    return response


@pytest.fixture
def upstream(monkeypatch):
    fake = MagicMock()
    monkeypatch.setattr(generator, "get_http_session", lambda: fake)
    monkeypatch.setattr(generator.time, "sleep", lambda _seconds: None)
    monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-key")
    return fake


class TestGenerateEndpoint:
    def test_preflight(self, client):
        resp = client.options(GENERATE_PATH)
        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "apikey" in resp.headers["access-control-allow-headers"]
        assert "authorization" in resp.headers["access-control-allow-headers"]

    def test_browser_preflight(self, client):
        resp = client.options(GENERATE_PATH, headers={
            "Origin": "https://admin.omninews.id",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        })
        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["access-control-allow-headers"] == "authorization, x-client-info, apikey, content-type"

    def test_cross_origin_post_keeps_wildcard_origin(self, client, upstream):
        upstream.post.return_value = _reply('{"title": "T", "content": "C", "category": "tech"}')
        resp = client.post(
            GENERATE_PATH,
            json={"sourceUrl": "https://www.tiktok.com/@a/video/1"},
            headers={"Origin": "https://admin.omninews.id"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_success(self, client, upstream):
        upstream.post.return_value = _reply(
            'Here is the result: {"title":"T","content":"A\\n\\nB\\n\\nC","category":"tech"} Thanks.'
        )
        resp = client.post(GENERATE_PATH, json={"sourceUrl": "https://www.tiktok.com/@a/video/1"})
        assert resp.status_code == 200
        assert resp.json() == {"title": "T", "content": "A\n\nB\n\nC", "category": "tech", "thumbnailUrl": ""}
        assert resp.headers["access-control-allow-origin"] == "*"

    @pytest.mark.parametrize("status_code, fragment", [
        (429, "Rate limit"),
        (402, "credits"),
    ])
    def test_classified_upstream_errors(self, client, upstream, status_code, fragment):
        upstream.post.return_value = _reply(None, status_code=status_code)
        resp = client.post(GENERATE_PATH, json={"sourceUrl": "https://www.instagram.com/reel/x"})
        assert resp.status_code == status_code
        assert fragment in resp.json()["error"]

    def test_generic_upstream_error(self, client, upstream):
        upstream.post.return_value = _reply(None, status_code=500)
        resp = client.post(GENERATE_PATH, json={"sourceUrl": "https://www.instagram.com/reel/x"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "AI gateway error"}

    def test_unparsable_reply(self, client, upstream):
        upstream.post.return_value = _reply("tanpa json")
        resp = client.post(GENERATE_PATH, json={"sourceUrl": "https://www.tiktok.com/@a/video/1"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Could not parse AI response"}

    def test_missing_source_url(self, client, upstream):
        resp = client.post(GENERATE_PATH, json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Source URL is required"}
        assert upstream.post.call_count == 0

    @pytest.mark.parametrize("kwargs", [
        {},
        {"content": b"bukan json", "headers": {"Content-Type": "application/json"}},
        {"json": ["https://www.tiktok.com/@a/video/1"]},
        {"json": {"sourceUrl": 123}},
        {"content": b"null", "headers": {"Content-Type": "application/json"}},
    ])
    def test_unusable_body_is_missing_source_url(self, client, upstream, kwargs):
        resp = client.post(GENERATE_PATH, **kwargs)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Source URL is required"}
        assert resp.headers["access-control-allow-origin"] == "*"
        assert upstream.post.call_count == 0

    def test_missing_api_key(self, client, upstream, monkeypatch):
        monkeypatch.delenv("AI_GATEWAY_API_KEY")
        resp = client.post(GENERATE_PATH, json={"sourceUrl": "https://www.tiktok.com/@a/video/1"})
        assert resp.status_code == 500
        assert "AI_GATEWAY_API_KEY" in resp.json()["error"]
        assert upstream.post.call_count == 0


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
