# ============================================================================
# FILE: vibeshare/services/platform_detector.py
# Map a song URL to its streaming platform and a thumbnail
# ============================================================================
import re
from typing import Optional

UNKNOWN_PLATFORM = "Unknown"
YOUTUBE = "YouTube"

# Checked in order, first host fragment found wins
PLATFORM_HOSTS = (
    (("youtube.com", "youtu.be"), YOUTUBE),
    (("spotify.com",), "Spotify"),
    (("soundcloud.com",), "SoundCloud"),
    (("music.apple.com",), "Apple Music"),
    (("deezer.com",), "Deezer"),
    (("tidal.com",), "Tidal"),
)

YOUTUBE_ID_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\n?#]+)"),
    re.compile(r"youtube\.com/embed/([^&\n?#]+)"),
    re.compile(r"youtube\.com/v/([^&\n?#]+)"),
)

def detect_platform(url: Optional[str]) -> Optional[str]:
    """Return the platform label, "Unknown", or None for an empty URL"""
    if not url:
        return None
    
    url_lower = url.lower()
    for hosts, label in PLATFORM_HOSTS:
        if any(host in url_lower for host in hosts):
            return label
    return UNKNOWN_PLATFORM

def extract_youtube_id(url: str) -> Optional[str]:
    for pattern in YOUTUBE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None

def get_youtube_thumbnail(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/mqdefault.jpg"

def thumbnail_for(url: Optional[str], platform: Optional[str] = None) -> Optional[str]:
    """
    Deterministic thumbnail for a song URL.
    Only YouTube links get one; other platforms are resolved client-side.
    """
    if not url:
        return None
    if (platform or detect_platform(url)) != YOUTUBE:
        return None
    video_id = extract_youtube_id(url)
    return get_youtube_thumbnail(video_id) if video_id else None
