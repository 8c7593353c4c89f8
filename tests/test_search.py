"""Tests for universal and per-type search, suggestions, trending and recent searches."""

import pytest

from vibeshare.config import settings
from vibeshare.core.cache import NullCache, get_search_cache
from vibeshare.main import app

API = settings.API_PREFIX


@pytest.fixture
def catalog(client, register, create_playlist):
    ana = register("ana")
    bob = register("bobby")
    client.put(f"{API}/users/{bob['id']}", json={"bio": "lofi enthusiast"}, headers=bob["headers"])
    lofi = create_playlist(ana, "Lofi nights", tags=["lofi", "chill"])
    study = create_playlist(ana, "Study", description="lofi beats to study to", tags=["lofi-beats"])
    create_playlist(bob, "Hidden lofi", isPublic=False, tags=["lofi"])
    create_playlist(bob, "Rock", tags=["rock"])
    client.post(f"{API}/playlists/{study['id']}/like", headers=bob["headers"])
    return {"ana": ana, "bob": bob, "lofi": lofi, "study": study}


@pytest.mark.parametrize("type_", ["all", "users", "playlists", "tags"])
def test_universal_search_rejects_short_query(client, type_):
    response = client.get(f"{API}/search", params={"q": "l", "type": type_})
    assert response.status_code == 400
    assert response.json()["error"] == "Query must be at least 2 characters"


def test_per_type_searches_reject_short_query(client):
    for path in ("users", "playlists", "tags"):
        assert client.get(f"{API}/search/{path}", params={"q": "x"}).status_code == 400
    assert client.get(f"{API}/search/users").status_code == 400


def test_universal_search_rejects_unknown_type(client):
    assert client.get(f"{API}/search", params={"q": "lofi", "type": "songs"}).status_code == 400


def test_universal_search_all(client, catalog):
    data = client.get(f"{API}/search", params={"q": "LOFI"}).json()["data"]

    assert [u["username"] for u in data["users"]] == ["bobby"]
    # Most liked first, private playlists never match
    assert [p["title"] for p in data["playlists"]] == ["Study", "Lofi nights"]
    assert data["tags"] == [
        {"name": "lofi", "playlistCount": 1},
        {"name": "lofi-beats", "playlistCount": 1},
    ]
    assert data["meta"] == {"query": "LOFI", "totalUsers": 1, "totalPlaylists": 2, "totalTags": 2}


def test_universal_search_single_type(client, catalog):
    data = client.get(f"{API}/search", params={"q": "rock", "type": "playlists"}).json()["data"]
    assert [p["title"] for p in data["playlists"]] == ["Rock"]
    assert data["users"] == []
    assert data["tags"] == []


def test_universal_search_caps_limit(client, register):
    for i in range(25):
        register(f"user{i:02d}")
    data = client.get(f"{API}/search", params={"q": "user", "type": "users", "limit": 100}).json()["data"]
    assert len(data["users"]) == 20
    assert data["meta"]["totalUsers"] == 25


def test_universal_search_is_cached(client, catalog, create_playlist):
    params = {"q": "lofi", "type": "playlists"}
    first = client.get(f"{API}/search", params=params).json()["data"]
    create_playlist(catalog["ana"], "More lofi")
    second = client.get(f"{API}/search", params=params).json()["data"]
    assert second == first

    # A different key misses the cache
    third = client.get(f"{API}/search", params={**params, "limit": 5}).json()["data"]
    assert len(third["playlists"]) == 3


def test_universal_search_without_cache(client, catalog, create_playlist):
    app.dependency_overrides[get_search_cache] = NullCache
    params = {"q": "lofi", "type": "playlists"}
    client.get(f"{API}/search", params=params)
    create_playlist(catalog["ana"], "More lofi")
    data = client.get(f"{API}/search", params=params).json()["data"]
    assert len(data["playlists"]) == 3


def test_search_users_meta(client, register):
    for name in ("anna", "annie", "bob"):
        register(name)
    data = client.get(f"{API}/search/users", params={"q": "an", "limit": 1}).json()["data"]
    assert len(data["users"]) == 1
    assert data["meta"] == {"total": 2, "limit": 1, "offset": 0, "hasMore": True, "sort": None}


def test_search_playlists_sorting(client, catalog):
    recent = client.get(f"{API}/search/playlists", params={"q": "lofi", "sort": "recent"}).json()["data"]
    assert [p["title"] for p in recent["playlists"]] == ["Study", "Lofi nights"]
    assert recent["meta"]["sort"] == "recent"

    popular = client.get(f"{API}/search/playlists", params={"q": "lo", "sort": "popular"}).json()["data"]
    assert popular["playlists"][0]["title"] == "Study"

    default = client.get(f"{API}/search/playlists", params={"q": "lofi"}).json()["data"]
    assert default["meta"]["sort"] == "relevant"
    assert [p["title"] for p in default["playlists"]] == ["Study", "Lofi nights"]


def test_search_playlists_flags_for_viewer(client, catalog):
    headers = catalog["bob"]["headers"]
    data = client.get(f"{API}/search/playlists", params={"q": "study"}, headers=headers).json()["data"]
    assert data["playlists"][0]["isLiked"] is True


def test_search_tags_prefix(client, catalog):
    data = client.get(f"{API}/search/tags", params={"q": "lo"}).json()["data"]
    assert [t["name"] for t in data["tags"]] == ["lofi", "lofi-beats"]
    none = client.get(f"{API}/search/tags", params={"q": "fi"}).json()["data"]
    assert none["tags"] == []


def test_suggestions(client, catalog):
    data = client.get(f"{API}/search/suggestions", params={"q": "lo"}).json()["data"]
    kinds = [(s["type"], s["text"]) for s in data["suggestions"]]
    assert ("playlist", "Lofi nights") in kinds
    assert ("tag", "lofi") in kinds
    assert all(kind != "user" for kind, _ in kinds)

    users = client.get(f"{API}/search/suggestions", params={"q": "bo"}).json()["data"]["suggestions"]
    assert users[0] == {"type": "user", "text": "bobby", "id": catalog["bob"]["id"], "count": None}

    empty = client.get(f"{API}/search/suggestions").json()["data"]
    assert empty["suggestions"] == []


def test_trending_seed_list(client):
    data = client.get(f"{API}/search/trending", params={"limit": 3}).json()["data"]
    assert [t["query"] for t in data["trending"]] == ["lofi", "workout", "chill"]


def test_trending_from_history(client, register):
    ana = register("ana")
    bob = register("bob")
    for user in (ana, bob):
        client.get(f"{API}/search", params={"q": "jazz"}, headers=user["headers"])
    client.get(f"{API}/search", params={"q": "metal"}, headers=ana["headers"])

    trending = client.get(f"{API}/search/trending").json()["data"]["trending"]
    assert trending[0] == {"query": "jazz", "searchCount": 2}
    assert trending[1] == {"query": "metal", "searchCount": 1}


def test_recent_searches(client, register):
    ana = register("ana")
    headers = ana["headers"]
    for q in ("jazz", "metal", "jazz"):
        client.get(f"{API}/search", params={"q": q}, headers=headers)

    recent = client.get(f"{API}/search/recent", headers=headers).json()["data"]["recentSearches"]
    assert [r["query"] for r in recent] == ["jazz", "metal"]

    remove = client.delete(f"{API}/search/recent/{recent[1]['id']}", headers=headers)
    assert remove.status_code == 200
    assert client.delete(f"{API}/search/recent/{recent[1]['id']}", headers=headers).status_code == 404

    assert client.delete(f"{API}/search/recent", headers=headers).status_code == 200
    assert client.get(f"{API}/search/recent", headers=headers).json()["data"]["recentSearches"] == []


def test_recent_searches_require_auth(client):
    assert client.get(f"{API}/search/recent").status_code == 401
    assert client.delete(f"{API}/search/recent").status_code == 401


def test_other_users_recent_search_is_404(client, register):
    ana = register("ana")
    bob = register("bob")
    client.get(f"{API}/search", params={"q": "jazz"}, headers=ana["headers"])
    entry = client.get(f"{API}/search/recent", headers=ana["headers"]).json()["data"]["recentSearches"][0]
    assert client.delete(f"{API}/search/recent/{entry['id']}", headers=bob["headers"]).status_code == 404
