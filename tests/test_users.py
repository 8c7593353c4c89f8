"""Tests for user profiles, uploads and account deletion."""

from vibeshare.config import settings
from vibeshare.db.models import Notification, Playlist, PlaylistLike, User

API = settings.API_PREFIX

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_public_profile_hides_email(client, register):
    ana = register("ana")
    by_name = client.get(f"{API}/users/ana")
    assert by_name.status_code == 200
    user = by_name.json()["data"]["user"]
    assert user["id"] == ana["id"]
    assert "email" not in user
    assert user["playlistCount"] == 0

    by_id = client.get(f"{API}/users/id/{ana['id']}")
    assert by_id.json()["data"]["user"]["username"] == "ana"


def test_unknown_user_is_404(client):
    assert client.get(f"{API}/users/nobody").status_code == 404
    assert client.get(f"{API}/users/id/999").status_code == 404


def test_list_users_with_search(client, register):
    register("ana")
    register("bob")
    cid = register("cid")
    client.put(f"{API}/users/{cid['id']}", json={"bio": "Friend of ANA"}, headers=cid["headers"])

    response = client.get(f"{API}/users", params={"search": "an"})
    assert response.status_code == 200
    names = {u["username"] for u in response.json()["data"]["users"]}
    assert names == {"ana", "cid"}


def test_list_users_caps_limit(client, register):
    register("ana")
    response = client.get(f"{API}/users", params={"limit": 500})
    assert response.json()["data"]["pagination"]["limit"] == 50


def test_update_own_profile(client, register):
    ana = register("ana")
    response = client.put(
        f"{API}/users/{ana['id']}",
        json={"bio": "hello", "socialLinks": {"instagram": "https://instagram.com/ana"}},
        headers=ana["headers"],
    )
    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["bio"] == "hello"
    assert user["socialLinks"] == {"instagram": "https://instagram.com/ana"}
    assert user["email"] == "ana@example.com"


def test_update_rejects_unknown_social_platform(client, register):
    ana = register("ana")
    response = client.put(
        f"{API}/users/{ana['id']}",
        json={"socialLinks": {"myspace": "https://myspace.com/ana"}},
        headers=ana["headers"],
    )
    assert response.status_code == 400


def test_update_rejects_bad_social_url(client, register):
    ana = register("ana")
    response = client.put(
        f"{API}/users/{ana['id']}",
        json={"socialLinks": {"twitter": "not a url"}},
        headers=ana["headers"],
    )
    assert response.status_code == 400


def test_update_other_profile_is_forbidden(client, register):
    ana = register("ana")
    bob = register("bob")
    response = client.put(f"{API}/users/{ana['id']}", json={"bio": "hacked"}, headers=bob["headers"])
    assert response.status_code == 403


def test_update_username_conflict(client, register):
    ana = register("ana")
    register("bob")
    response = client.put(f"{API}/users/{ana['id']}", json={"username": "bob"}, headers=ana["headers"])
    assert response.status_code == 409


def test_update_rejects_foreign_avatar_url(client, register):
    ana = register("ana")
    response = client.put(
        f"{API}/users/{ana['id']}",
        json={"avatarUrl": "https://evil.example/pic.png"},
        headers=ana["headers"],
    )
    assert response.status_code == 400


def test_upload_profile_picture(client, register, storage):
    ana = register("ana")
    response = client.post(
        f"{API}/users/upload-profile-picture",
        files={"profilePicture": ("me.png", PNG_BYTES, "image/png")},
        headers=ana["headers"],
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["imageUrl"].startswith(f"{settings.MEDIA_URL}/avatars/")
    assert data["user"]["avatarUrl"] == data["imageUrl"]

    # Replacing the picture removes the old file
    second = client.post(
        f"{API}/users/upload-profile-picture",
        files={"profilePicture": ("me2.png", PNG_BYTES, "image/png")},
        headers=ana["headers"],
    )
    assert second.status_code == 200
    assert not storage.delete(data["imageUrl"])


def test_upload_rejects_non_images(client, register):
    ana = register("ana")
    response = client.post(
        f"{API}/users/upload-profile-picture",
        files={"profilePicture": ("notes.txt", b"hello", "text/plain")},
        headers=ana["headers"],
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Only image files are allowed"


def test_upload_rejects_large_files(client, register, storage):
    ana = register("ana")
    storage.max_bytes = 10
    response = client.post(
        f"{API}/users/upload-profile-picture",
        files={"profilePicture": ("big.png", PNG_BYTES, "image/png")},
        headers=ana["headers"],
    )
    assert response.status_code == 400


def test_user_playlists_hide_private_from_others(client, register, create_playlist):
    ana = register("ana")
    bob = register("bob")
    create_playlist(ana, "Public")
    create_playlist(ana, "Secret", isPublic=False)

    own = client.get(f"{API}/users/{ana['id']}/playlists", headers=ana["headers"])
    assert {p["title"] for p in own.json()["data"]["playlists"]} == {"Public", "Secret"}

    other = client.get(f"{API}/users/{ana['id']}/playlists", headers=bob["headers"])
    assert [p["title"] for p in other.json()["data"]["playlists"]] == ["Public"]

    assert client.get(f"{API}/users/999/playlists").status_code == 404


def test_delete_account_cascades(client, register, create_playlist, add_song, db):
    ana = register("ana")
    bob = register("bob")
    ana_list = create_playlist(ana, "Ana mix")
    bob_list = create_playlist(bob, "Bob mix")
    add_song(ana, ana_list["id"], "one")
    client.post(f"{API}/playlists/{bob_list['id']}/like", headers=ana["headers"])
    client.post(f"{API}/playlists/{ana_list['id']}/like", headers=bob["headers"])

    assert client.delete(f"{API}/users/{ana['id']}", headers=bob["headers"]).status_code == 403
    response = client.delete(f"{API}/users/{ana['id']}", headers=ana["headers"])
    assert response.status_code == 200

    assert db.get(User, ana["id"]) is None
    assert db.query(Playlist).filter_by(user_id=ana["id"]).count() == 0
    assert db.query(PlaylistLike).count() == 0
    assert db.query(Notification).count() == 0
    assert db.get(Playlist, bob_list["id"]).likes_count == 0
    assert client.get(f"{API}/auth/me", headers=ana["headers"]).status_code == 401
