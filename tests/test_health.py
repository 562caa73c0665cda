from __future__ import annotations

from quizforge.config import settings


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"name": settings.app_name, "api": "/api", "docs": "/docs"}


def test_health_and_security_headers(client):
    response = client.get("/health")
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


def test_ready_needs_supabase_config(client, monkeypatch):
    monkeypatch.setattr(settings, "supabase_url", "")
    assert client.get("/ready").status_code == 503

    monkeypatch.setattr(settings, "supabase_url", "https://project.supabase.test")
    monkeypatch.setattr(settings, "supabase_key", "anon-key")
    assert client.get("/ready").json() == {"status": "ready"}
