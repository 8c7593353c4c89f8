# ============================================================================
# FILE: vibeshare/services/thumbnail_fetcher.py
# Resolve platform + thumbnail for new songs, optionally enriched via YouTube API
# ============================================================================
import asyncio
from typing import Optional, Tuple
from vibeshare.core.youtube_client import youtube_client
from vibeshare.services.platform_detector import (
    detect_platform,
    extract_youtube_id,
    thumbnail_for,
)
import logging

logger = logging.getLogger(__name__)

async def fetch_thumbnail(url: str, platform: Optional[str] = None, client=None) -> Optional[str]:
    """
    Thumbnail for a song link. The API lookup is bounded by the client's
    timeout and any failure falls back to the deterministic thumbnail.
    """
    fallback = thumbnail_for(url, platform)
    if fallback is None:
        return None
    
    client = client or youtube_client
    if not client.enabled:
        return fallback
    
    video_id = extract_youtube_id(url)
    try:
        details = await asyncio.wait_for(client.get_video_details(video_id), timeout=client.timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Thumbnail enrichment timed out for {video_id}")
        return fallback
    except Exception as e:
        logger.warning(f"Thumbnail enrichment failed for {video_id}: {e}")
        return fallback
    
    if details and details.get("thumbnail"):
        return details["thumbnail"]
    return fallback

async def resolve_song_source(url: str, platform: Optional[str] = None) -> Tuple[str, Optional[str]]:
    """Return (platform, thumbnail) for a song URL, detecting the platform if not given"""
    platform = platform or detect_platform(url)
    thumbnail = await fetch_thumbnail(url, platform)
    return platform, thumbnail
