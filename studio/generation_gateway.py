"""
Generation Gateway - one call (or one poll loop, for video) per studio task.

Every operation builds a fresh Gemini client so the most recently configured
API key is always used, sends a single request, and normalizes the response
into text or a ``GeneratedArtifact``.
"""

from __future__ import annotations
import uuid
from pathlib import Path
from typing import Callable, Optional, Union

import requests
from google.genai import types as genai_types

from .config import (
    BACKGROUND_REMOVAL_INSTRUCTION,
    CODE_SYSTEM_INSTRUCTIONS,
    DEFAULT_ANIMATE_PROMPT,
    DEFAULT_SYSTEM_INSTRUCTION,
    ENTITY_NOT_FOUND_MARKER,
    FACE_SWAP_INSTRUCTION,
    VIDEO_ASPECT_RATIO,
    VIDEO_NUMBER_OF_VIDEOS,
    VIDEO_RESOLUTION,
    ArtifactKind,
    AspectRatio,
    CodeTarget,
    GeneratedArtifact,
    GenerationRequest,
    ProjectData,
    ReferenceImage,
    TaskKind,
)
from .content_parts import first_inline_image, joined_text, parts_from_response
from .credentials import CredentialSelector
from .errors import (
    ConfigurationError,
    CredentialError,
    DownloadError,
    GenerationError,
    NoArtifactError,
    PreconditionError,
    StaleCredentialError,
)
from .gemini_client import get_api_key, get_genai_client, get_model_name, get_poll_interval, get_video_dir, get_video_keep
from .polling import PollPolicy, poll_until_done
from .utils import get_logger, strip_code_fences, to_data_uri

logger = get_logger("generation_gateway")

ImageInput = Union[ReferenceImage, str]

DOWNLOAD_TIMEOUT = 120


def build_project_prompt(project: ProjectData) -> str:
    """Prompt text for a builder form submission."""
    return (
        f"Project Type: {project.feature}. Category: {project.category}. "
        f"Title: {project.title}. Description: {project.description}"
    )


def is_entity_not_found(exc: Exception) -> bool:
    """True when a polling error means the job is unknown to the selected key."""
    return getattr(exc, "code", None) == 404 or ENTITY_NOT_FOUND_MARKER in str(exc)


def _as_reference(image: Optional[ImageInput], label: str) -> ReferenceImage:
    if image is None or image == "":
        raise PreconditionError(f"{label} is required")
    if isinstance(image, ReferenceImage):
        return image
    return ReferenceImage.from_data_uri(image)


def _image_part(image: ReferenceImage):
    return genai_types.Part.from_bytes(data=image.data, mime_type=image.mime_type)


def _response_text(response) -> str:
    """Concatenated text parts of the first candidate, falling back to ``response.text``."""
    return joined_text(parts_from_response(response)) or getattr(response, "text", None) or ""


class GenerationGateway:
    """Stateless facade over the Gemini and Veo models."""

    def __init__(
        self,
        client_factory: Callable = get_genai_client,
        credentials: Optional[CredentialSelector] = None,
        poll_policy: Optional[PollPolicy] = None,
        session: Optional[requests.Session] = None,
        video_dir: Optional[Path] = None,
        video_keep: Optional[int] = None,
        api_key_getter: Callable[[], Optional[str]] = get_api_key,
    ):
        self.client_factory = client_factory
        self.credentials = credentials
        self.poll_policy = poll_policy
        self.session = session
        self.video_dir = Path(video_dir) if video_dir else None
        self.video_keep = video_keep
        self.api_key_getter = api_key_getter

    def _client(self):
        client = self.client_factory()
        if client is None:
            raise ConfigurationError("Gemini API key not configured (set GEMINI_API_KEY)")
        return client

    # ---------- Text ----------
    def generate_text(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        client = self._client()
        response = client.models.generate_content(
            model=get_model_name("text"),
            contents=prompt,
            config=genai_types.GenerateContentConfig(
                system_instruction=system_instruction or DEFAULT_SYSTEM_INSTRUCTION,
            ),
        )
        text = _response_text(response)
        logger.info(f"Text response received ({len(text)} chars)")
        return text

    # ---------- Images ----------
    def generate_image(self, prompt: str, aspect_ratio: Union[AspectRatio, str] = AspectRatio.SQUARE) -> GeneratedArtifact:
        try:
            ratio = AspectRatio(aspect_ratio).value
        except ValueError:
            raise PreconditionError(f"Unsupported aspect ratio: {aspect_ratio}")
        client = self._client()
        response = client.models.generate_content(
            model=get_model_name("image"),
            contents=[genai_types.Part.from_text(text=prompt)],
            config=genai_types.GenerateContentConfig(
                image_config=genai_types.ImageConfig(aspect_ratio=ratio),
            ),
        )
        return self._image_artifact(response, "No image data generated")

    def edit_image(self, source_image: ImageInput, instruction: str) -> GeneratedArtifact:
        source = _as_reference(source_image, "Source image")
        client = self._client()
        response = client.models.generate_content(
            model=get_model_name("image"),
            contents=[_image_part(source), genai_types.Part.from_text(text=instruction)],
        )
        return self._image_artifact(response, "No image data generated during edit")

    def remove_background(self, source_image: ImageInput) -> GeneratedArtifact:
        return self.edit_image(source_image, BACKGROUND_REMOVAL_INSTRUCTION)

    def swap_faces(self, face_image: ImageInput, target_image: ImageInput) -> GeneratedArtifact:
        """Put the face from ``face_image`` onto the person in ``target_image``."""
        face = _as_reference(face_image, "Face image")
        target = _as_reference(target_image, "Target image")
        client = self._client()
        response = client.models.generate_content(
            model=get_model_name("image"),
            contents=[
                _image_part(face),
                _image_part(target),
                genai_types.Part.from_text(text=FACE_SWAP_INSTRUCTION),
            ],
        )
        return self._image_artifact(response, "No image data generated during face swap")

    def _image_artifact(self, response, error_message: str) -> GeneratedArtifact:
        image = first_inline_image(parts_from_response(response))
        if image is None:
            logger.warning(error_message)
            raise NoArtifactError(error_message)
        return GeneratedArtifact(
            kind=ArtifactKind.IMAGE,
            payload=to_data_uri(image.data, "image/png"),
            mime_type="image/png",
        )

    # ---------- Video ----------
    def _ensure_credential(self) -> None:
        if self.credentials is None:
            return
        if self.credentials.has_credential():
            return
        self.credentials.request_credential()
        if not self.credentials.has_credential():
            raise CredentialError("Select an API key to generate videos.")

    def generate_video(
        self,
        prompt: str,
        source_image: Optional[ImageInput] = None,
        poll_policy: Optional[PollPolicy] = None,
    ) -> GeneratedArtifact:
        """
        Submit a Veo job, poll it to completion, and download the result.

        Returns:
            Video artifact whose payload is the path of the downloaded file

        Raises:
            CredentialError: no API key could be selected
            StaleCredentialError: the job vanished while polling (key expired or reselected)
            NoArtifactError: the finished job has no download link
            DownloadError: the video download returned a non-success status
        """
        self._ensure_credential()
        source = _as_reference(source_image, "Start image") if source_image else None
        policy = poll_policy or self.poll_policy or PollPolicy(interval=get_poll_interval())

        client = self._client()
        request = {
            "model": get_model_name("video"),
            "prompt": prompt,
            "config": genai_types.GenerateVideosConfig(
                number_of_videos=VIDEO_NUMBER_OF_VIDEOS,
                resolution=VIDEO_RESOLUTION,
                aspect_ratio=VIDEO_ASPECT_RATIO,
            ),
        }
        if source is not None:
            request["image"] = genai_types.Image(image_bytes=source.data, mime_type=source.mime_type)

        operation = client.models.generate_videos(**request)
        logger.info(f"Video job submitted ({'image' if source else 'text'} prompt)")

        operation = poll_until_done(
            operation,
            fetch=lambda op: client.operations.get(op),
            is_done=lambda op: bool(getattr(op, "done", False)),
            policy=policy,
            on_error=self._raise_if_stale,
        )

        error = getattr(operation, "error", None)
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise GenerationError(f"Video generation failed: {message}")

        uri = self._download_uri(operation)
        if not uri:
            raise NoArtifactError("Video generation failed: No download link provided.")

        path = self._save_video(self._download(uri))
        logger.info(f"Video saved to {path}")
        return GeneratedArtifact(kind=ArtifactKind.VIDEO, payload=str(path), mime_type="video/mp4")

    @staticmethod
    def _raise_if_stale(exc: Exception) -> None:
        if is_entity_not_found(exc):
            raise StaleCredentialError(
                "Video generation operation lost. Please try selecting your API key again."
            ) from exc

    @staticmethod
    def _download_uri(operation) -> Optional[str]:
        response = getattr(operation, "response", None)
        videos = getattr(response, "generated_videos", None) or []
        if not videos:
            return None
        video = getattr(videos[0], "video", None)
        return getattr(video, "uri", None)

    def _download(self, uri: str) -> bytes:
        api_key = self.api_key_getter()
        params = {"key": api_key} if api_key else None
        http = self.session or requests
        resp = http.get(uri, params=params, timeout=DOWNLOAD_TIMEOUT)
        if not resp.ok:
            raise DownloadError(f"Failed to download video file: {resp.reason}", resp.status_code)
        return resp.content

    def _save_video(self, data: bytes) -> Path:
        video_dir = self.video_dir or get_video_dir()
        video_dir.mkdir(parents=True, exist_ok=True)
        path = video_dir / f"video-{uuid.uuid4().hex}.mp4"
        path.write_bytes(data)
        self._prune_videos(video_dir, keep=path)
        return path

    def _prune_videos(self, video_dir: Path, keep: Path) -> None:
        """Delete the oldest downloads so at most ``video_keep`` files remain, never ``keep``."""
        limit = self.video_keep or get_video_keep()
        older = sorted(
            (p for p in video_dir.glob("video-*.mp4") if p != keep),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        for stale in older[max(limit - 1, 0):]:
            stale.unlink(missing_ok=True)
            logger.info(f"Pruned old video {stale.name}")

    # ---------- Code ----------
    def generate_code(self, prompt: str, target: Union[CodeTarget, str]) -> str:
        try:
            target = CodeTarget(target)
        except ValueError:
            raise PreconditionError(f"Invalid builder type selected: {target}")
        client = self._client()
        response = client.models.generate_content(
            model=get_model_name("code"),
            contents=prompt,
            config=genai_types.GenerateContentConfig(
                system_instruction=CODE_SYSTEM_INSTRUCTIONS[target],
            ),
        )
        code = strip_code_fences(_response_text(response))
        logger.info(f"Generated {target.value} code ({len(code)} chars)")
        return code

    # ---------- Dispatch ----------
    def generate(self, request: GenerationRequest) -> GeneratedArtifact:
        """Validate ``request`` and run the operation its kind names."""
        request.validate()
        kind = TaskKind(request.kind)
        refs = request.reference_images

        if kind is TaskKind.TEXT:
            text = self.generate_text(request.prompt, request.system_instruction)
            return GeneratedArtifact(kind=ArtifactKind.TEXT, payload=text)
        if kind is TaskKind.IMAGE:
            return self.generate_image(request.prompt, request.aspect_ratio or AspectRatio.SQUARE)
        if kind is TaskKind.IMAGE_EDIT:
            return self.edit_image(refs[0], request.prompt)
        if kind is TaskKind.FACE_SWAP:
            return self.swap_faces(refs[0], refs[1])
        if kind is TaskKind.VIDEO:
            return self.generate_video(request.prompt)
        if kind is TaskKind.VIDEO_FROM_IMAGE:
            return self.generate_video(request.prompt or DEFAULT_ANIMATE_PROMPT, refs[0])
        code = self.generate_code(request.prompt, request.code_target)
        return GeneratedArtifact(kind=ArtifactKind.TEXT, payload=code, mime_type="text/html")
