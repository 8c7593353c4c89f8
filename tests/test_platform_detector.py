"""Tests for platform detection and thumbnail resolution."""

import asyncio

import pytest

from vibeshare.services.platform_detector import detect_platform, extract_youtube_id, thumbnail_for
from vibeshare.services.thumbnail_fetcher import fetch_thumbnail, resolve_song_source


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://youtu.be/abc123", "YouTube"),
        ("https://www.YouTube.com/watch?v=abc123", "YouTube"),
        ("https://open.spotify.com/track/42", "Spotify"),
        ("https://soundcloud.com/artist/track", "SoundCloud"),
        ("https://music.apple.com/us/album/x", "Apple Music"),
        ("https://www.deezer.com/track/1", "Deezer"),
        ("https://tidal.com/browse/track/1", "Tidal"),
        ("https://example.com/x", "Unknown"),
    ],
)
def test_detect_platform(url, expected):
    assert detect_platform(url) == expected


def test_detect_platform_empty_is_none():
    assert detect_platform("") is None
    assert detect_platform(None) is None


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/watch?v=abc123&t=10",
        "https://youtu.be/abc123",
        "https://www.youtube.com/embed/abc123",
        "https://www.youtube.com/v/abc123?version=3",
    ],
)
def test_extract_youtube_id(url):
    assert extract_youtube_id(url) == "abc123"


def test_youtube_thumbnail_is_deterministic():
    assert thumbnail_for("https://youtu.be/abc123") == "https://img.youtube.com/vi/abc123/mqdefault.jpg"


def test_other_platforms_have_no_thumbnail():
    assert thumbnail_for("https://open.spotify.com/track/42") is None
    assert thumbnail_for("https://example.com/x") is None


class SlowClient:
    enabled = True
    timeout = 0.01

    async def get_video_details(self, video_id):
        await asyncio.sleep(1)
        return {"thumbnail": "https://never.example/slow.jpg"}


class BrokenClient:
    enabled = True
    timeout = 1

    async def get_video_details(self, video_id):
        raise RuntimeError("quota exceeded")


class RichClient:
    enabled = True
    timeout = 1

    async def get_video_details(self, video_id):
        return {"thumbnail": f"https://i.ytimg.com/vi/{video_id}/mqdefault_hq.jpg"}


def test_enrichment_timeout_falls_back():
    thumbnail = asyncio.run(fetch_thumbnail("https://youtu.be/abc123", client=SlowClient()))
    assert thumbnail == "https://img.youtube.com/vi/abc123/mqdefault.jpg"


def test_enrichment_failure_falls_back():
    thumbnail = asyncio.run(fetch_thumbnail("https://youtu.be/abc123", client=BrokenClient()))
    assert thumbnail == "https://img.youtube.com/vi/abc123/mqdefault.jpg"


def test_enrichment_result_is_used():
    thumbnail = asyncio.run(fetch_thumbnail("https://youtu.be/abc123", client=RichClient()))
    assert thumbnail == "https://i.ytimg.com/vi/abc123/mqdefault_hq.jpg"


def test_non_youtube_never_calls_api():
    assert asyncio.run(fetch_thumbnail("https://open.spotify.com/track/1", client=BrokenClient())) is None


def test_resolve_song_source_keeps_given_platform():
    platform, thumbnail = asyncio.run(resolve_song_source("https://example.com/song", "Bandcamp"))
    assert platform == "Bandcamp"
    assert thumbnail is None
