# ============================================================================
# FILE: vibeshare/core/storage.py
# Image object storage (local filesystem served under MEDIA_URL)
# ============================================================================
import os
import uuid
from typing import Optional
from vibeshare.config import settings
from vibeshare.core.exceptions import ValidationError
import logging

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

class ImageStorage:
    """Stores uploaded images in folders below MEDIA_ROOT"""
    
    def __init__(self, root: str = None, base_url: str = None, max_bytes: int = None):
        self.root = root or settings.MEDIA_ROOT
        self.base_url = (base_url or settings.MEDIA_URL).rstrip("/")
        self.max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES
    
    def validate(self, content_type: Optional[str], data: bytes) -> None:
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError("Only image files are allowed")
        if not data:
            raise ValidationError("No file uploaded")
        if len(data) > self.max_bytes:
            raise ValidationError(f"File too large (max {self.max_bytes // (1024 * 1024)}MB)")
    
    def save(self, folder: str, content_type: str, data: bytes) -> str:
        """Validate and store an image, returning its public URL"""
        self.validate(content_type, data)
        
        extension = IMAGE_EXTENSIONS.get(content_type, ".img")
        name = f"{uuid.uuid4().hex}{extension}"
        directory = os.path.join(self.root, folder)
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, name), "wb") as f:
            f.write(data)
        
        url = f"{self.base_url}/{folder}/{name}"
        logger.info(f"Stored image {url} ({len(data)} bytes)")
        return url
    
    def owns(self, url: Optional[str]) -> bool:
        """True when the URL points at an object this storage wrote"""
        return bool(url) and url.startswith(self.base_url + "/")
    
    def delete(self, url: Optional[str]) -> bool:
        """Best-effort removal; failures are logged, never raised"""
        if not self.owns(url):
            return False
        relative = url[len(self.base_url) + 1:]
        path = os.path.normpath(os.path.join(self.root, relative))
        if not path.startswith(os.path.normpath(self.root) + os.sep):
            logger.warning(f"Refusing to delete outside media root: {url}")
            return False
        try:
            os.remove(path)
            logger.info(f"Deleted image {url}")
            return True
        except OSError as e:
            logger.warning(f"Failed to delete image {url}: {e}")
            return False

# Singleton instance
image_storage = ImageStorage()

def get_image_storage() -> ImageStorage:
    return image_storage
