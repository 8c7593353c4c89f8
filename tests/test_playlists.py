"""Tests for playlist CRUD, visibility, likes, saves and thumbnails."""

from vibeshare.config import settings
from vibeshare.db.models import Notification, PlaylistLike, SavedPlaylist, Song

API = settings.API_PREFIX

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_create_playlist_defaults(client, register):
    ana = register("ana")
    response = client.post(
        f"{API}/playlists",
        json={"title": "Road trip", "tags": [" rock ", "indie", "rock", ""]},
        headers=ana["headers"],
    )
    assert response.status_code == 201
    playlist = response.json()["data"]["playlist"]
    assert playlist["isPublic"] is True
    assert playlist["likesCount"] == 0
    assert playlist["songCount"] == 0
    assert playlist["tags"] == ["rock", "indie"]
    assert playlist["coverGradient"] == "from-purple-800 to-pink-900"
    assert playlist["username"] == "ana"

    me = client.get(f"{API}/users/ana").json()["data"]["user"]
    assert me["playlistCount"] == 1


def test_create_requires_auth(client):
    assert client.post(f"{API}/playlists", json={"title": "x"}).status_code == 401


def test_create_rejects_more_than_five_tags(client, register):
    ana = register("ana")
    response = client.post(
        f"{API}/playlists",
        json={"title": "Too many", "tags": ["a", "b", "c", "d", "e", "f"]},
        headers=ana["headers"],
    )
    assert response.status_code == 400


def test_private_playlist_is_404_for_others(client, register, create_playlist):
    ana = register("ana")
    bob = register("bob")
    secret = create_playlist(ana, "Secret", isPublic=False)

    assert client.get(f"{API}/playlists/{secret['id']}", headers=ana["headers"]).status_code == 200
    assert client.get(f"{API}/playlists/{secret['id']}", headers=bob["headers"]).status_code == 404
    assert client.get(f"{API}/playlists/{secret['id']}").status_code == 404
    assert client.post(f"{API}/playlists/{secret['id']}/like", headers=bob["headers"]).status_code == 404

    client.put(f"{API}/playlists/{secret['id']}", json={"isPublic": True}, headers=ana["headers"])
    assert client.get(f"{API}/playlists/{secret['id']}").status_code == 200


def test_update_is_owner_only(client, register, create_playlist):
    ana = register("ana")
    bob = register("bob")
    playlist = create_playlist(ana, "Mine", description="old")

    forbidden = client.put(f"{API}/playlists/{playlist['id']}", json={"title": "Theirs"}, headers=bob["headers"])
    assert forbidden.status_code == 403

    response = client.put(
        f"{API}/playlists/{playlist['id']}",
        json={"title": "Renamed", "tags": ["chill"]},
        headers=ana["headers"],
    )
    assert response.status_code == 200
    updated = response.json()["data"]["playlist"]
    assert updated["title"] == "Renamed"
    assert updated["tags"] == ["chill"]
    assert updated["description"] == "old"


def test_update_keeps_reordered_tags(client, register, create_playlist):
    ana = register("ana")
    playlist = create_playlist(ana, "Tags", tags=["a", "b", "c"])
    response = client.put(
        f"{API}/playlists/{playlist['id']}",
        json={"tags": ["c", "a", "d"]},
        headers=ana["headers"],
    )
    assert response.status_code == 200
    assert response.json()["data"]["playlist"]["tags"] == ["c", "a", "d"]


def test_missing_playlist_is_404(client):
    response = client.get(f"{API}/playlists/12345")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Playlist not found"}


def test_like_unlike_counts(client, register, create_playlist):
    ana = register("ana")
    bob = register("bob")
    playlist = create_playlist(ana)
    url = f"{API}/playlists/{playlist['id']}/like"

    first = client.post(url, headers=bob["headers"])
    assert first.status_code == 200
    assert first.json()["data"]["likesCount"] == 1

    assert client.post(url, headers=bob["headers"]).status_code == 409

    unlike = client.delete(url, headers=bob["headers"])
    assert unlike.status_code == 200
    assert unlike.json()["data"]["likesCount"] == 0

    assert client.delete(url, headers=bob["headers"]).status_code == 404
    detail = client.get(f"{API}/playlists/{playlist['id']}").json()["data"]["playlist"]
    assert detail["likesCount"] == 0


def test_personalization_flags(client, register, create_playlist):
    ana = register("ana")
    bob = register("bob")
    playlist = create_playlist(ana)
    client.post(f"{API}/playlists/{playlist['id']}/like", headers=bob["headers"])
    client.post(f"{API}/playlists/{playlist['id']}/save", headers=bob["headers"])

    as_bob = client.get(f"{API}/playlists", headers=bob["headers"]).json()["data"]["playlists"][0]
    assert as_bob["isLiked"] is True
    assert as_bob["isSaved"] is True

    anonymous = client.get(f"{API}/playlists").json()["data"]["playlists"][0]
    assert anonymous["isLiked"] is False
    assert anonymous["isSaved"] is False


def test_save_unsave_and_saved_listing(client, register, create_playlist):
    ana = register("ana")
    bob = register("bob")
    first = create_playlist(ana, "First")
    second = create_playlist(ana, "Second")

    assert client.post(f"{API}/playlists/{first['id']}/save", headers=bob["headers"]).status_code == 200
    assert client.post(f"{API}/playlists/{second['id']}/save", headers=bob["headers"]).status_code == 200
    assert client.post(f"{API}/playlists/{first['id']}/save", headers=bob["headers"]).status_code == 409

    saved = client.get(f"{API}/playlists/saved", headers=bob["headers"]).json()["data"]
    assert [p["title"] for p in saved["playlists"]] == ["Second", "First"]
    assert all(p["isSaved"] for p in saved["playlists"])

    assert client.delete(f"{API}/playlists/{first['id']}/save", headers=bob["headers"]).status_code == 200
    assert client.delete(f"{API}/playlists/{first['id']}/save", headers=bob["headers"]).status_code == 404
    assert client.get(f"{API}/playlists/saved").status_code == 401


def test_saved_listing_hides_playlists_made_private(client, register, create_playlist):
    ana = register("ana")
    bob = register("bob")
    playlist = create_playlist(ana, "Soon private")
    client.post(f"{API}/playlists/{playlist['id']}/save", headers=bob["headers"])
    client.put(f"{API}/playlists/{playlist['id']}", json={"isPublic": False}, headers=ana["headers"])

    saved = client.get(f"{API}/playlists/saved", headers=bob["headers"]).json()["data"]
    assert saved["playlists"] == []


def test_list_sort_and_filters(client, register, create_playlist):
    ana = register("ana")
    bob = register("bob")
    older = create_playlist(ana, "Older", tags=["chill"])
    newer = create_playlist(bob, "Newer", tags=["rock"])
    create_playlist(ana, "Hidden", isPublic=False, tags=["chill"])
    client.post(f"{API}/playlists/{older['id']}/like", headers=bob["headers"])

    recent = client.get(f"{API}/playlists").json()["data"]["playlists"]
    assert [p["title"] for p in recent] == ["Newer", "Older"]

    popular = client.get(f"{API}/playlists", params={"sort": "popular"}).json()["data"]["playlists"]
    assert [p["title"] for p in popular] == ["Older", "Newer"]

    by_tag = client.get(f"{API}/playlists", params={"tag": "chill"}).json()["data"]["playlists"]
    assert [p["title"] for p in by_tag] == ["Older"]

    by_user = client.get(f"{API}/playlists", params={"user": bob["id"]}).json()["data"]["playlists"]
    assert [p["id"] for p in by_user] == [newer["id"]]


def test_list_pagination_caps_limit(client, register, create_playlist):
    ana = register("ana")
    for i in range(3):
        create_playlist(ana, f"P{i}")
    data = client.get(f"{API}/playlists", params={"limit": 1000, "page": 1}).json()["data"]
    assert data["pagination"] == {"page": 1, "limit": 50, "total": 3, "pages": 1}

    page_two = client.get(f"{API}/playlists", params={"limit": 2, "page": 2}).json()["data"]
    assert len(page_two["playlists"]) == 1
    assert page_two["pagination"]["pages"] == 2


def test_delete_playlist_cascades(client, register, create_playlist, add_song, db):
    ana = register("ana")
    bob = register("bob")
    playlist = create_playlist(ana)
    song = add_song(ana, playlist["id"], "one")
    client.post(f"{API}/playlists/{playlist['id']}/like", headers=bob["headers"])
    client.post(f"{API}/playlists/{playlist['id']}/save", headers=bob["headers"])
    client.post(f"{API}/songs/{song['id']}/save", headers=bob["headers"])

    assert client.delete(f"{API}/playlists/{playlist['id']}", headers=bob["headers"]).status_code == 403
    assert client.delete(f"{API}/playlists/{playlist['id']}", headers=ana["headers"]).status_code == 200

    assert client.get(f"{API}/playlists/{playlist['id']}").status_code == 404
    assert db.query(Song).count() == 0
    assert db.query(PlaylistLike).count() == 0
    assert db.query(SavedPlaylist).count() == 0
    assert db.query(Notification).count() == 0
    assert client.get(f"{API}/users/ana").json()["data"]["user"]["playlistCount"] == 0


def test_thumbnail_upload_and_remove(client, register, create_playlist, storage):
    ana = register("ana")
    bob = register("bob")
    playlist = create_playlist(ana)
    url = f"{API}/playlists/{playlist['id']}/thumbnail"
    files = {"thumbnail": ("cover.png", PNG_BYTES, "image/png")}

    assert client.post(url, files=files, headers=bob["headers"]).status_code == 403

    response = client.post(url, files=files, headers=ana["headers"])
    assert response.status_code == 200
    image_url = response.json()["data"]["imageUrl"]
    assert response.json()["data"]["playlist"]["thumbnailUrl"] == image_url

    removed = client.delete(url, headers=ana["headers"])
    assert removed.status_code == 200
    assert removed.json()["data"]["playlist"]["thumbnailUrl"] is None
    # File is already gone
    assert storage.delete(image_url) is False
