"""
Manifest AI Studio - Core Components

This package contains the core modules for Manifest AI Studio:
- config: Configuration, constants, and data models
- errors: Studio error types
- utils: Helper functions and logging
- gemini_client: Gemini API client initialization
- generation_gateway: Text, image, video and code generation
- github_publisher: GitHub repository publishing
- project_store: Saved builder projects
"""

# Lazy imports keep Streamlit hot-reload from importing the SDK on every page
__all__ = [
    # Config
    "TaskKind",
    "ArtifactKind",
    "AspectRatio",
    "CodeTarget",
    "ReferenceImage",
    "GenerationRequest",
    "GeneratedArtifact",
    "PublishRequest",
    "PublishResult",
    "ProjectData",
    "ChatMessage",
    "BUILDER_TARGETS",
    "CATEGORIES",
    # Errors
    "StudioError",
    # Utils
    "get_logger",
    "load_image_bytes",
    # Gemini Client
    "get_genai_client",
    "get_model_name",
    # Gateway
    "GenerationGateway",
    "build_project_prompt",
    "PollPolicy",
    "EnvironmentCredentialSelector",
    # Publishing / storage
    "publish_to_github",
    "JsonProjectStore",
]

_CONFIG_NAMES = (
    "TaskKind", "ArtifactKind", "AspectRatio", "CodeTarget", "ReferenceImage",
    "GenerationRequest", "GeneratedArtifact", "PublishRequest", "PublishResult",
    "ProjectData", "ChatMessage", "BUILDER_TARGETS", "CATEGORIES",
)


def __getattr__(name):
    """Lazy import to avoid circular dependencies and streamlit hot-reload issues."""
    if name in __all__:
        if name in _CONFIG_NAMES:
            from . import config
            return getattr(config, name)
        elif name == "StudioError":
            from .errors import StudioError
            return StudioError
        elif name in ("get_logger", "load_image_bytes"):
            from . import utils
            return getattr(utils, name)
        elif name in ("get_genai_client", "get_model_name"):
            from . import gemini_client
            return getattr(gemini_client, name)
        elif name in ("GenerationGateway", "build_project_prompt"):
            from . import generation_gateway
            return getattr(generation_gateway, name)
        elif name == "PollPolicy":
            from .polling import PollPolicy
            return PollPolicy
        elif name == "EnvironmentCredentialSelector":
            from .credentials import EnvironmentCredentialSelector
            return EnvironmentCredentialSelector
        elif name == "publish_to_github":
            from .github_publisher import publish_to_github
            return publish_to_github
        elif name == "JsonProjectStore":
            from .project_store import JsonProjectStore
            return JsonProjectStore
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
