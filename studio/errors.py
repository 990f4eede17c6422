"""
Error types raised by the studio core.

Pages catch ``StudioError`` and surface the message to the user; nothing in
the core retries or recovers.
"""

from __future__ import annotations


class StudioError(Exception):
    """Base class for every studio failure."""


class ConfigurationError(StudioError):
    """Missing API key or other required setting."""


class PreconditionError(StudioError, ValueError):
    """Caller input rejected before any network call."""


class GenerationError(StudioError):
    """The generative service reported a failure."""


class NoArtifactError(GenerationError):
    """The service answered without the expected image or video."""


class CredentialError(StudioError):
    """No usable API key was selected."""


class StaleCredentialError(CredentialError):
    """The selected key no longer resolves the running video job."""


class PollTimeoutError(GenerationError):
    """A bounded poll policy ran out of attempts."""


class DownloadError(StudioError):
    """Fetching generated bytes returned a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PublishError(StudioError):
    """A GitHub step failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
