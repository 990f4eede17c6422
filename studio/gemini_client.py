"""
Gemini API client initialization and configuration.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

from google import genai

from .config import DEFAULT_VIDEO_KEEP, VIDEO_POLL_INTERVAL_SECONDS

DEFAULT_MODELS = {
    "text": "gemini-3-flash-preview",
    "image": "gemini-2.5-flash-image",
    "code": "gemini-3-pro-preview",
    "video": "veo-3.1-fast-generate-preview",
}

MODEL_ENV_VARS = {
    "text": "GEMINI_TEXT_MODEL",
    "image": "GEMINI_IMAGE_MODEL",
    "code": "GEMINI_CODE_MODEL",
    "video": "VEO_MODEL",
}


def get_api_key() -> Optional[str]:
    # Prefer official GEMINI_API_KEY; fallback to GOOGLE_GENAI_API_KEY and API_KEY for compatibility.
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_GENAI_API_KEY") or os.getenv("API_KEY")


def get_genai_client() -> Optional["genai.Client"]:
    """
    Initialize and return a fresh Gemini API client.

    Returns:
        genai.Client instance or None if API key not available
    """
    api_key = get_api_key()
    if not api_key:
        return None
    return genai.Client(api_key=api_key)


def get_model_name(family: str) -> str:
    """
    Get the model name for a model family ("text", "image", "code", "video").

    Returns:
        Model name from the environment, or the family default
    """
    return os.getenv(MODEL_ENV_VARS[family], DEFAULT_MODELS[family])


def get_poll_interval() -> float:
    value = os.getenv("STUDIO_POLL_INTERVAL")
    if not value:
        return VIDEO_POLL_INTERVAL_SECONDS
    try:
        return float(value)
    except ValueError:
        return VIDEO_POLL_INTERVAL_SECONDS


def get_video_dir() -> Path:
    """Directory downloaded videos are written to."""
    configured = os.getenv("STUDIO_VIDEO_DIR")
    if configured:
        return Path(configured)
    return Path.home() / ".manifest_studio" / "videos"


def get_video_keep() -> int:
    """How many downloaded videos to keep on disk; older files are pruned."""
    value = os.getenv("STUDIO_VIDEO_KEEP")
    if not value:
        return DEFAULT_VIDEO_KEEP
    try:
        return max(1, int(value))
    except ValueError:
        return DEFAULT_VIDEO_KEEP
