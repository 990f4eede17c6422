"""
GitHub publisher - create a public repository and commit index.html into it.
"""

from __future__ import annotations
import os
from typing import Optional

import requests

from .config import (
    GITHUB_API_URL,
    GITHUB_COMMIT_MESSAGE,
    GITHUB_FILE_PATH,
    GITHUB_REPO_DESCRIPTION,
    GITHUB_WEB_URL,
    PublishRequest,
    PublishResult,
)
from .errors import PreconditionError, PublishError
from .utils import encode_text_base64, get_logger

logger = get_logger("github_publisher")

REQUEST_TIMEOUT = 30


def _headers(token: str) -> dict:
    return {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github.v3+json",
        "Content-Type": "application/json",
    }


def _error_message(resp, default: str) -> str:
    try:
        data = resp.json()
    except ValueError:
        return default
    if isinstance(data, dict) and data.get("message"):
        return data["message"]
    return default


def publish_to_github(
    token: str,
    repo_name: str,
    content: str,
    session: Optional[requests.Session] = None,
    api_url: Optional[str] = None,
) -> PublishResult:
    """
    Create ``repo_name`` under the token's account and write ``content`` to index.html.

    The repository is public and auto-initialized so the file commit has a
    branch to land on. A repository created before a failed file write is
    left in place.

    Returns:
        PublishResult with the browsable repository URL

    Raises:
        PreconditionError: token or repository name missing
        PublishError: either GitHub call failed
    """
    if not token or not token.strip():
        raise PreconditionError("GitHub token is required")
    if not repo_name or not repo_name.strip():
        raise PreconditionError("Repository name is required")

    http = session or requests
    base_url = (api_url or os.getenv("GITHUB_API_URL") or GITHUB_API_URL).rstrip("/")
    headers = _headers(token)

    try:
        # Step 1: Create repository
        logger.info(f"Creating repository {repo_name}")
        repo_resp = http.post(
            f"{base_url}/user/repos",
            headers=headers,
            json={
                "name": repo_name,
                "private": False,
                "auto_init": True,
                "description": GITHUB_REPO_DESCRIPTION,
            },
            timeout=REQUEST_TIMEOUT,
        )
        if not repo_resp.ok:
            raise PublishError(
                _error_message(repo_resp, "Repository creation failed"),
                repo_resp.status_code,
            )
        full_name = repo_resp.json().get("full_name")
        if not full_name:
            raise PublishError("Repository creation returned no full_name", repo_resp.status_code)

        # Step 2: Push content
        logger.info(f"Pushing {GITHUB_FILE_PATH} to {full_name}")
        push_resp = http.put(
            f"{base_url}/repos/{full_name}/contents/{GITHUB_FILE_PATH}",
            headers=headers,
            json={
                "message": GITHUB_COMMIT_MESSAGE,
                "content": encode_text_base64(content),
            },
            timeout=REQUEST_TIMEOUT,
        )
        if not push_resp.ok:
            raise PublishError(_error_message(push_resp, "Push failed"), push_resp.status_code)
    except requests.exceptions.RequestException as exc:
        logger.error(f"GitHub API error: {exc}")
        raise PublishError(f"GitHub API error: {exc}") from exc

    url = f"{GITHUB_WEB_URL}/{full_name}"
    logger.info(f"Published to {url}")
    return PublishResult(repository_url=url, full_name=full_name)


def publish(request: PublishRequest, session: Optional[requests.Session] = None) -> PublishResult:
    return publish_to_github(
        request.credential,
        request.repository_name,
        request.file_content,
        session=session,
    )
