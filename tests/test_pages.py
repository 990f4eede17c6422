"""Streamlit page tests: unexpected SDK errors are shown to the user, not raised."""
from pathlib import Path
from unittest.mock import patch

import pytest
from google.genai import errors as genai_errors
from streamlit.testing.v1 import AppTest

from studio.errors import ConfigurationError

REPO_ROOT = Path(__file__).resolve().parent.parent
CHAT_PAGE = REPO_ROOT / "pages" / "3_💬_Chat.py"
BUILDERS_PAGE = REPO_ROOT / "app.py"


def _sdk_error():
    return genai_errors.ClientError(
        400,
        {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}},
    )


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("STUDIO_PROJECTS_PATH", str(tmp_path / "projects.json"))


def _markdown_text(at):
    return " ".join(m.value for m in at.markdown)


class TestChatPage:
    def test_sdk_error_becomes_reply(self):
        at = AppTest.from_file(str(CHAT_PAGE), default_timeout=30)
        at.run()
        with patch("studio.generation_gateway.GenerationGateway.generate_text", side_effect=_sdk_error()):
            at.chat_input[0].set_value("hi").run()
        assert not at.exception
        assert "Could not connect to the AI model" in _markdown_text(at)
        assert "API key not valid" in _markdown_text(at)

    def test_studio_error_becomes_reply(self):
        at = AppTest.from_file(str(CHAT_PAGE), default_timeout=30)
        at.run()
        with patch(
            "studio.generation_gateway.GenerationGateway.generate_text",
            side_effect=ConfigurationError("Gemini API key not configured"),
        ):
            at.chat_input[0].set_value("hi").run()
        assert not at.exception
        assert "Gemini API key not configured" in _markdown_text(at)

    def test_reply_is_rendered(self):
        at = AppTest.from_file(str(CHAT_PAGE), default_timeout=30)
        at.run()
        with patch("studio.generation_gateway.GenerationGateway.generate_text", return_value="Hello there"):
            at.chat_input[0].set_value("hi").run()
        assert not at.exception
        assert "Hello there" in _markdown_text(at)


class TestBuildersPage:
    def _fill_form(self, at):
        next(w for w in at.text_input if w.label == "Project Title").set_value("Coffee Shop")
        next(w for w in at.text_area if w.label == "Description").set_value("A landing page")

    def test_sdk_error_shown_as_error(self):
        at = AppTest.from_file(str(BUILDERS_PAGE), default_timeout=30)
        at.run()
        self._fill_form(at)
        with patch("studio.generation_gateway.GenerationGateway.generate_code", side_effect=_sdk_error()):
            at.button[0].click().run()
        assert not at.exception
        assert any("Manifestation failed" in e.value for e in at.error)

    def test_missing_fields_warns(self):
        at = AppTest.from_file(str(BUILDERS_PAGE), default_timeout=30)
        at.run()
        with patch("studio.generation_gateway.GenerationGateway.generate_code") as generate_code:
            at.button[0].click().run()
        generate_code.assert_not_called()
        assert at.warning
