# ============================================================================
# FILE: vibeshare/core/youtube_client.py
# YouTube Data API v3 client used to enrich song thumbnails
# ============================================================================
from typing import Dict, Optional
import httpx
from vibeshare.config import settings
import logging

logger = logging.getLogger(__name__)

YOUTUBE_VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"


class YouTubeClient:
    """
    Minimal YouTube Data API v3 client for video metadata.
    Every call is bounded by YOUTUBE_API_TIMEOUT_SECONDS and returns None on
    any failure, so callers can always fall back.
    """
    
    def __init__(self, api_key: str = None, timeout: float = None):
        self.api_key = api_key if api_key is not None else settings.YOUTUBE_API_KEY
        self.timeout = timeout or settings.YOUTUBE_API_TIMEOUT_SECONDS
        if not self.api_key:
            logger.info("YouTube API key not configured, enrichment disabled")
    
    @property
    def enabled(self) -> bool:
        return bool(self.api_key)
    
    async def get_video_details(self, video_id: str) -> Optional[Dict]:
        """
        Get title, channel and thumbnail for a video
        
        Args:
            video_id: YouTube video ID
            
        Returns:
            Dict with video details or None if unavailable
        """
        if not self.enabled:
            return None
        
        params = {"part": "snippet", "id": video_id, "key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(YOUTUBE_VIDEOS_URL, params=params)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"YouTube API lookup failed for {video_id}: {str(e)[:100]}")
            return None
        
        items = data.get("items") or []
        if not items:
            logger.info(f"No video found for ID: {video_id}")
            return None
        
        snippet = items[0].get("snippet", {})
        thumbnails = snippet.get("thumbnails", {})
        thumbnail = (thumbnails.get("medium") or thumbnails.get("default") or {}).get("url")
        return {
            "title": snippet.get("title"),
            "description": snippet.get("description"),
            "channel_title": snippet.get("channelTitle"),
            "thumbnail": thumbnail,
        }

# Singleton instance
youtube_client = YouTubeClient()
