"""VibeShare: social playlist sharing backend."""

__version__ = "1.0.0"
