from __future__ import annotations

from quizforge.config import settings


def test_get_profile_merges_profile_row(client, fake_supabase, teacher, headers):
    fake_supabase.seed("profiles", id=teacher[0].id, full_name="Ada L.", institution="Uni")
    response = client.get("/api/user/profile", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Ada L."
    assert body["institution"] == "Uni"
    assert body["role"] == "teacher"


def test_update_profile(client, fake_supabase, teacher, headers):
    response = client.patch(
        "/api/user/profile",
        json={"name": "Ada Lovelace", "department": "Maths"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Ada Lovelace"
    assert response.json()["department"] == "Maths"
    assert fake_supabase.auth.users[teacher[0].id].user_metadata["full_name"] == "Ada Lovelace"
    profile = fake_supabase.rows("profiles")[0]
    assert profile["id"] == teacher[0].id
    assert profile["full_name"] == "Ada Lovelace"


def test_update_profile_rejects_short_name(client, headers):
    response = client.patch("/api/user/profile", json={"name": "A"}, headers=headers)
    assert response.status_code == 422


def test_change_password(client, fake_supabase, teacher, headers):
    wrong = client.post(
        "/api/user/password",
        json={"current_password": "nope", "new_password": "another1"},
        headers=headers,
    )
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Current password is incorrect"

    ok = client.post(
        "/api/user/password",
        json={"current_password": "secret123", "new_password": "another1"},
        headers=headers,
    )
    assert ok.status_code == 200
    assert fake_supabase.auth.passwords[teacher[0].id] == "another1"


def test_notifications_merge_with_defaults(client, headers):
    response = client.patch("/api/user/notifications", json={"system_updates": True}, headers=headers)
    assert response.status_code == 200
    notifications = response.json()["notifications"]
    assert notifications["system_updates"] is True
    assert notifications["email_notifications"] is True


def test_appearance_defaults_on_load(client, headers):
    response = client.get("/api/user/appearance", headers=headers)
    assert response.status_code == 200
    assert response.json() == {
        "theme": settings.default_theme,
        "font_size": "medium",
        "high_contrast": False,
        "storage_key": "quizforge_theme",
    }


def test_appearance_update_is_persisted(client, headers):
    response = client.patch("/api/user/appearance", json={"theme": "light"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["theme"] == "light"

    again = client.get("/api/user/appearance", headers=headers)
    assert again.json()["theme"] == "light"
    assert again.json()["font_size"] == "medium"


def test_appearance_rejects_unknown_theme(client, headers):
    response = client.patch("/api/user/appearance", json={"theme": "neon"}, headers=headers)
    assert response.status_code == 422


def test_avatar_upload(client, fake_supabase, teacher, headers):
    response = client.post(
        "/api/user/avatar",
        files={"file": ("me.png", b"\x89PNG fake", "image/png")},
        headers=headers,
    )
    assert response.status_code == 200
    url = response.json()["avatar"]
    assert url.startswith("https://storage.test/avatars/")
    assert url.endswith(".png")
    stored = list(fake_supabase.storage.objects["avatars"])
    assert stored[0].startswith(f"{teacher[0].id}/")
    assert fake_supabase.rows("profiles")[0]["avatar_url"] == url


def test_avatar_rejects_non_image(client, headers):
    response = client.post(
        "/api/user/avatar",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert response.status_code == 400
