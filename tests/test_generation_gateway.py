"""Tests for the generation gateway (text, image, code and dispatch)."""
import base64

import pytest

from conftest import inline_part, make_response, text_part
from studio.config import (
    BACKGROUND_REMOVAL_INSTRUCTION,
    CODE_SYSTEM_INSTRUCTIONS,
    DEFAULT_SYSTEM_INSTRUCTION,
    FACE_SWAP_INSTRUCTION,
    ArtifactKind,
    AspectRatio,
    CodeTarget,
    GenerationRequest,
    ProjectData,
    ReferenceImage,
    TaskKind,
)
from studio.errors import ConfigurationError, NoArtifactError, PreconditionError
from studio.generation_gateway import GenerationGateway, build_project_prompt


def _gateway(client):
    return GenerationGateway(client_factory=lambda: client)


# --- generate_text ---

class TestGenerateText:
    def test_returns_response_text(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text="hello")
        assert _gateway(fake_client).generate_text("hi") == "hello"

    def test_missing_text_returns_empty(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text=None)
        assert _gateway(fake_client).generate_text("hi") == ""

    def test_default_system_instruction(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text="x")
        _gateway(fake_client).generate_text("hi")
        kwargs = fake_client.models.generate_content.call_args.kwargs
        assert kwargs["config"].system_instruction == DEFAULT_SYSTEM_INSTRUCTION
        assert kwargs["model"] == "gemini-3-flash-preview"

    def test_custom_system_instruction(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text="x")
        _gateway(fake_client).generate_text("hi", "Be brief.")
        kwargs = fake_client.models.generate_content.call_args.kwargs
        assert kwargs["config"].system_instruction == "Be brief."

    def test_joins_text_parts(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(
            parts=[text_part("Hello, "), text_part("world")], text=None
        )
        assert _gateway(fake_client).generate_text("hi") == "Hello, world"

    def test_skips_thought_parts(self, fake_client):
        from types import SimpleNamespace
        thought = SimpleNamespace(text="thinking...", inline_data=None, thought=True)
        fake_client.models.generate_content.return_value = make_response(parts=[thought, text_part("answer")])
        assert _gateway(fake_client).generate_text("hi") == "answer"

    def test_transport_error_propagates(self, fake_client):
        fake_client.models.generate_content.side_effect = ConnectionError("down")
        with pytest.raises(ConnectionError):
            _gateway(fake_client).generate_text("hi")
        assert fake_client.models.generate_content.call_count == 1

    def test_missing_api_key(self):
        gateway = GenerationGateway(client_factory=lambda: None)
        with pytest.raises(ConfigurationError):
            gateway.generate_text("hi")

    def test_fresh_client_per_call(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text="x")
        created = []

        def factory():
            created.append(1)
            return fake_client

        gateway = GenerationGateway(client_factory=factory)
        gateway.generate_text("a")
        gateway.generate_text("b")
        assert len(created) == 2


# --- generate_image ---

class TestGenerateImage:
    def test_red_circle_scenario(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(
            parts=[inline_part(base64.b64decode("AAAA"))]
        )
        artifact = _gateway(fake_client).generate_image("a red circle", "1:1")
        assert artifact.payload == "data:image/png;base64,AAAA"
        assert artifact.kind is ArtifactKind.IMAGE

    def test_aspect_ratio_sent_in_config(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[inline_part(b"img")])
        _gateway(fake_client).generate_image("wide", AspectRatio.WIDE)
        kwargs = fake_client.models.generate_content.call_args.kwargs
        assert kwargs["config"].image_config.aspect_ratio == "16:9"
        assert kwargs["model"] == "gemini-2.5-flash-image"

    def test_skips_text_parts(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(
            parts=[text_part("here you go"), inline_part(b"first"), inline_part(b"second")]
        )
        artifact = _gateway(fake_client).generate_image("x")
        assert artifact.payload == "data:image/png;base64," + base64.b64encode(b"first").decode()

    def test_string_payload_is_kept(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[inline_part("AAAA")])
        artifact = _gateway(fake_client).generate_image("x")
        assert artifact.payload == "data:image/png;base64,AAAA"

    def test_no_image_raises(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[text_part("I can't draw that")])
        with pytest.raises(NoArtifactError, match="No image data"):
            _gateway(fake_client).generate_image("x")

    def test_no_candidates_raises(self, fake_client):
        from types import SimpleNamespace
        fake_client.models.generate_content.return_value = SimpleNamespace(text=None, candidates=None)
        with pytest.raises(NoArtifactError):
            _gateway(fake_client).generate_image("x")

    def test_invalid_aspect_ratio(self, fake_client):
        with pytest.raises(PreconditionError):
            _gateway(fake_client).generate_image("x", "4:3")
        fake_client.models.generate_content.assert_not_called()


# --- edit_image / remove_background / swap_faces ---

class TestImageEditing:
    def test_edit_sends_image_then_instruction(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[inline_part(b"out")])
        source = ReferenceImage(data=b"src", mime_type="image/jpeg")
        _gateway(fake_client).edit_image(source, "make it blue")
        contents = fake_client.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].inline_data.data == b"src"
        assert contents[0].inline_data.mime_type == "image/jpeg"
        assert contents[1].text == "make it blue"

    def test_edit_accepts_data_uri(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[inline_part(b"out")])
        uri = "data:image/webp;base64," + base64.b64encode(b"src").decode()
        _gateway(fake_client).edit_image(uri, "x")
        contents = fake_client.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].inline_data.data == b"src"
        assert contents[0].inline_data.mime_type == "image/webp"

    def test_edit_without_image_rejected(self, fake_client):
        with pytest.raises(PreconditionError):
            _gateway(fake_client).edit_image(None, "x")
        fake_client.models.generate_content.assert_not_called()

    def test_edit_no_image_raises(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[])
        with pytest.raises(NoArtifactError, match="No image data"):
            _gateway(fake_client).edit_image(ReferenceImage(b"src"), "x")

    def test_remove_background_uses_fixed_instruction(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[inline_part(b"out")])
        _gateway(fake_client).remove_background(ReferenceImage(b"src"))
        contents = fake_client.models.generate_content.call_args.kwargs["contents"]
        assert contents[1].text == BACKGROUND_REMOVAL_INSTRUCTION

    def test_swap_faces_order(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[inline_part(b"out")])
        _gateway(fake_client).swap_faces(ReferenceImage(b"face"), ReferenceImage(b"body"))
        contents = fake_client.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].inline_data.data == b"face"
        assert contents[1].inline_data.data == b"body"
        assert contents[2].text == FACE_SWAP_INSTRUCTION

    def test_swap_faces_needs_both_images(self, fake_client):
        with pytest.raises(PreconditionError):
            _gateway(fake_client).swap_faces(ReferenceImage(b"face"), None)
        fake_client.models.generate_content.assert_not_called()


# --- generate_code ---

class TestGenerateCode:
    def test_strips_html_fences(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text="```html\n<div>x</div>\n```")
        assert _gateway(fake_client).generate_code("p", "website") == "<div>x</div>"

    def test_uppercase_fence(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text="```HTML\n<p>a</p>```")
        assert _gateway(fake_client).generate_code("p", CodeTarget.MOBILE) == "<p>a</p>"

    def test_plain_html_untouched(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text="  <html></html>\n")
        assert _gateway(fake_client).generate_code("p", "webapp") == "<html></html>"

    @pytest.mark.parametrize("target", list(CodeTarget))
    def test_system_instruction_per_target(self, fake_client, target):
        fake_client.models.generate_content.return_value = make_response(text="<p></p>")
        _gateway(fake_client).generate_code("p", target)
        kwargs = fake_client.models.generate_content.call_args.kwargs
        assert kwargs["config"].system_instruction == CODE_SYSTEM_INSTRUCTIONS[target]
        assert kwargs["model"] == "gemini-3-pro-preview"

    def test_invalid_target(self, fake_client):
        with pytest.raises(PreconditionError):
            _gateway(fake_client).generate_code("p", "desktop")
        fake_client.models.generate_content.assert_not_called()

    def test_model_override_from_env(self, fake_client, monkeypatch):
        monkeypatch.setenv("GEMINI_CODE_MODEL", "gemini-custom")
        fake_client.models.generate_content.return_value = make_response(text="<p></p>")
        _gateway(fake_client).generate_code("p", "agent")
        assert fake_client.models.generate_content.call_args.kwargs["model"] == "gemini-custom"


# --- build_project_prompt ---

def test_build_project_prompt():
    project = ProjectData(title="Cafe", feature="Website Builder", category="Business & SaaS", description="Menu")
    assert build_project_prompt(project) == (
        "Project Type: Website Builder. Category: Business & SaaS. Title: Cafe. Description: Menu"
    )


# --- generate (dispatch) ---

class TestDispatch:
    def test_text_request(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text="answer")
        artifact = _gateway(fake_client).generate(GenerationRequest(kind=TaskKind.TEXT, prompt="q"))
        assert artifact.kind is ArtifactKind.TEXT
        assert artifact.payload == "answer"

    def test_image_request(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[inline_part(b"i")])
        artifact = _gateway(fake_client).generate(GenerationRequest(kind=TaskKind.IMAGE, prompt="q"))
        assert artifact.kind is ArtifactKind.IMAGE

    def test_image_edit_request(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[inline_part(b"i")])
        request = GenerationRequest(
            kind=TaskKind.IMAGE_EDIT,
            prompt="add a hat",
            reference_images=[ReferenceImage(b"src")],
        )
        artifact = _gateway(fake_client).generate(request)
        assert artifact.kind is ArtifactKind.IMAGE
        contents = fake_client.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].inline_data.data == b"src"
        assert contents[1].text == "add a hat"

    def test_face_swap_request(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(parts=[inline_part(b"i")])
        request = GenerationRequest(
            kind=TaskKind.FACE_SWAP,
            reference_images=[ReferenceImage(b"a"), ReferenceImage(b"b")],
        )
        assert _gateway(fake_client).generate(request).kind is ArtifactKind.IMAGE

    def test_code_request_is_html_text(self, fake_client):
        fake_client.models.generate_content.return_value = make_response(text="```html<b>x</b>```")
        request = GenerationRequest(kind=TaskKind.CODE, prompt="q", code_target=CodeTarget.AGENT)
        artifact = _gateway(fake_client).generate(request)
        assert artifact.kind is ArtifactKind.TEXT
        assert artifact.mime_type == "text/html"
        assert artifact.payload == "<b>x</b>"

    def test_wrong_image_count_rejected_before_network(self, fake_client):
        request = GenerationRequest(kind=TaskKind.FACE_SWAP, reference_images=[ReferenceImage(b"a")])
        with pytest.raises(PreconditionError):
            _gateway(fake_client).generate(request)
        fake_client.models.generate_content.assert_not_called()
