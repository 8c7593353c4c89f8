# ============================================================================
# FILE: vibeshare/__main__.py
# ============================================================================
import uvicorn
from vibeshare.config import settings

if __name__ == "__main__":
    uvicorn.run("vibeshare.main:app", host="0.0.0.0", port=settings.PORT)
