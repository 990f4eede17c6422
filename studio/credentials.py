"""
API key selection used before video generation.

Veo requires a key selected by the user; the gateway only asks through this
interface so a page or a test can decide how selection happens.
"""

from __future__ import annotations
from typing import Optional, Protocol

from dotenv import load_dotenv

from .gemini_client import get_api_key
from .utils import get_logger

logger = get_logger("credentials")


class CredentialSelector(Protocol):
    def has_credential(self) -> bool:
        ...

    def request_credential(self) -> None:
        ...


class EnvironmentCredentialSelector:
    """Reads the key from the environment; a request re-reads the .env file."""

    def __init__(self, dotenv_path: Optional[str] = None):
        self.dotenv_path = dotenv_path

    def has_credential(self) -> bool:
        return bool(get_api_key())

    def request_credential(self) -> None:
        logger.info("No API key selected, reloading environment")
        load_dotenv(self.dotenv_path, override=True)


class StaticCredentialSelector:
    """Fixed answer; ``grant_on_request`` flips it to available when asked."""

    def __init__(self, available: bool = True, grant_on_request: bool = True):
        self.available = available
        self.grant_on_request = grant_on_request
        self.requests = 0

    def has_credential(self) -> bool:
        return self.available

    def request_credential(self) -> None:
        self.requests += 1
        if self.grant_on_request:
            self.available = True
