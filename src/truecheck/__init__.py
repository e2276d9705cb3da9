"""TrueCheck[AI] — media upload and deepfake verification service."""

__version__ = "1.0.0"
