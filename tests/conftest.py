"""Pytest configuration and shared fakes for studio tests."""
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

# Ensure the studio package is importable without installation
repo_root = Path(__file__).resolve().parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


def make_response(parts=None, text=None):
    """Shape of a google-genai GenerateContentResponse as far as the gateway reads it."""
    content = SimpleNamespace(parts=parts or [])
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(content=content)])


def inline_part(data, mime_type="image/png"):
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def text_part(text):
    return SimpleNamespace(text=text, inline_data=None)


def make_operation(done, uri=None, error=None):
    response = None
    if uri is not None:
        response = SimpleNamespace(generated_videos=[SimpleNamespace(video=SimpleNamespace(uri=uri))])
    return SimpleNamespace(done=done, response=response, error=error)


@pytest.fixture
def fake_client():
    return MagicMock()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture(autouse=True)
def clean_model_env(monkeypatch):
    for var in ("GEMINI_TEXT_MODEL", "GEMINI_IMAGE_MODEL", "GEMINI_CODE_MODEL", "VEO_MODEL", "STUDIO_POLL_INTERVAL", "STUDIO_VIDEO_KEEP"):
        monkeypatch.delenv(var, raising=False)
