# ============================================================================
# FILE: vibeshare/core/logging.py
# ============================================================================
import logging
import sys
from vibeshare.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

def setup_logging(level: str = None) -> None:
    """Configure root logging once for the whole process"""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    
    # Avoid duplicate handlers on reload
    for handler in list(root.handlers):
        if getattr(handler, "_vibeshare", False):
            root.removeHandler(handler)
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler._vibeshare = True
    root.addHandler(handler)
    
    # SQL echo is controlled by DEBUG, keep the driver quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.DEBUG else logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
