"""
Configuration, constants, and data models for Manifest AI Studio.
"""

from __future__ import annotations
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import PreconditionError
from .utils import parse_data_uri


# ---------- Enums ----------
class TaskKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    IMAGE_EDIT = "image-edit"
    FACE_SWAP = "face-swap"
    VIDEO = "video"
    VIDEO_FROM_IMAGE = "video-from-image"
    CODE = "code"


class ArtifactKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    WIDE = "16:9"
    TALL = "9:16"


class CodeTarget(str, Enum):
    WEBSITE = "website"
    WEBAPP = "webapp"
    MOBILE = "mobile"
    AGENT = "agent"


# Number of reference images each task kind accepts
REFERENCE_IMAGE_COUNTS = {
    TaskKind.TEXT: 0,
    TaskKind.IMAGE: 0,
    TaskKind.IMAGE_EDIT: 1,
    TaskKind.FACE_SWAP: 2,
    TaskKind.VIDEO: 0,
    TaskKind.VIDEO_FROM_IMAGE: 1,
    TaskKind.CODE: 0,
}


# ---------- Data Models ----------
@dataclass(frozen=True)
class ReferenceImage:
    """An encoded input image passed alongside a prompt."""
    data: bytes
    mime_type: str = "image/png"

    @classmethod
    def from_data_uri(cls, value: str) -> "ReferenceImage":
        data, mime = parse_data_uri(value)
        return cls(data=data, mime_type=mime)


@dataclass
class GenerationRequest:
    """One user task for the generation gateway."""
    kind: TaskKind
    prompt: str = ""
    reference_images: List[ReferenceImage] = field(default_factory=list)
    aspect_ratio: Optional[AspectRatio] = None
    code_target: Optional[CodeTarget] = None
    system_instruction: Optional[str] = None

    def validate(self) -> None:
        kind = TaskKind(self.kind)
        expected = REFERENCE_IMAGE_COUNTS[kind]
        if len(self.reference_images) != expected:
            raise PreconditionError(
                f"{kind.value} requires exactly {expected} reference image(s), "
                f"got {len(self.reference_images)}"
            )
        if kind is TaskKind.CODE and self.code_target is None:
            raise PreconditionError("code generation requires a code target")


@dataclass(frozen=True)
class GeneratedArtifact:
    """A single generated output. Image payloads are data URIs, video payloads are local file paths."""
    kind: ArtifactKind
    payload: str
    mime_type: str = "text/plain"


@dataclass(frozen=True)
class PublishRequest:
    credential: str
    repository_name: str
    file_content: str


@dataclass(frozen=True)
class PublishResult:
    repository_url: str
    full_name: str


@dataclass
class ProjectData:
    """A saved builder project."""
    title: str
    feature: str
    category: str
    description: str
    code: Optional[str] = None
    id: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ProjectData":
        return cls(
            title=data.get("title", ""),
            feature=data.get("feature", ""),
            category=data.get("category", ""),
            description=data.get("description", ""),
            code=data.get("code"),
            id=data.get("id"),
            created_at=float(data.get("created_at") or 0.0),
        )


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" or "model"
    text: str


# ---------- Fixed generation settings ----------
VIDEO_NUMBER_OF_VIDEOS = 1
VIDEO_RESOLUTION = "720p"
VIDEO_ASPECT_RATIO = AspectRatio.WIDE.value
VIDEO_POLL_INTERVAL_SECONDS = 10.0
DEFAULT_VIDEO_KEEP = 20

ENTITY_NOT_FOUND_MARKER = "Requested entity was not found"

GITHUB_API_URL = "https://api.github.com"
GITHUB_WEB_URL = "https://github.com"
GITHUB_FILE_PATH = "index.html"
GITHUB_COMMIT_MESSAGE = "Manifest Project Update"
GITHUB_REPO_DESCRIPTION = "Manifested by Smart AI Agent Factory"


# ---------- Prompts ----------
DEFAULT_SYSTEM_INSTRUCTION = "You are a helpful assistant for Manifest AI Studio."

FACE_SWAP_INSTRUCTION = (
    "Swap the face from the first image onto the person in the second image. "
    "Keep the second image's background and body."
)

BACKGROUND_REMOVAL_INSTRUCTION = "Remove the background completely and make it transparent."

DEFAULT_ANIMATE_PROMPT = "Animate this scene naturally."

CODE_SYSTEM_INSTRUCTIONS = {
    CodeTarget.WEBSITE: (
        "You are a senior frontend developer. Create a STUNNING, modern, single-file "
        "HTML/Tailwind CSS website. Must include navigation, hero, features, testimonials, "
        "and footer. Use high-quality placeholder images from Unsplash. Return ONLY raw "
        "HTML code without any markdown blocks."
    ),
    CodeTarget.WEBAPP: (
        "You are a senior fullstack developer. Create a fully functional Single Page "
        "Application (SPA) in a single HTML file using Tailwind CSS and Alpine.js or Vue.js "
        "(CDN). The UI must be highly interactive with state management. Return ONLY raw "
        "HTML code."
    ),
    CodeTarget.MOBILE: (
        "You are a senior mobile UI developer. Create a high-fidelity mobile app prototype "
        "in a single HTML file. Use Tailwind CSS and simulate mobile gestures and "
        "transitions. The UI should look like a native iOS/Android app. Return ONLY raw "
        "HTML code."
    ),
    CodeTarget.AGENT: (
        "You are a principal AI architect. Create a comprehensive 'Smart AI Agent' "
        "dashboard. The agent should have a name, personality, and a functional chat "
        "interface using Tailwind CSS. Include a 'Core Logic' visualization and an "
        "interactive configuration panel. Return ONLY raw HTML code."
    ),
}

# Builder page label -> code target
BUILDER_TARGETS = {
    "Website Builder": CodeTarget.WEBSITE,
    "Web App Builder": CodeTarget.WEBAPP,
    "Mobile App Builder": CodeTarget.MOBILE,
    "AI Agent Creator": CodeTarget.AGENT,
}

CATEGORIES = [
    "Business & SaaS",
    "E-Commerce",
    "Portfolio & Creative",
    "Educational",
    "Social & Community",
    "Utility Tools",
]
