"""
Utility functions for Manifest AI Studio.
"""

from __future__ import annotations
import base64
import io
import logging
import os
import re
from typing import Tuple
from PIL import Image

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_FENCE_RE = re.compile(r"```(?:html)?", re.IGNORECASE)


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a namespaced studio logger.

    Args:
        name: Short component name (e.g. "generation_gateway")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(f"studio.{name}")
    root = logging.getLogger("studio")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root.addHandler(handler)
        root.setLevel(os.getenv("STUDIO_LOG_LEVEL", "INFO").upper())
    return logger


def load_image_bytes(file) -> Tuple[bytes, str]:
    """
    Load and convert uploaded file to PNG bytes.

    Args:
        file: Streamlit UploadedFile object (or any binary file-like)

    Returns:
        Tuple of (image_bytes, mime_type)
    """
    image = Image.open(file).convert("RGB")
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue(), "image/png"


def parse_data_uri(value: str, default_mime: str = "image/png") -> Tuple[bytes, str]:
    """
    Split a ``data:<mime>;base64,<payload>`` string into raw bytes and mime type.

    Bare base64 strings (no ``data:`` header) are accepted and get ``default_mime``.
    """
    mime = default_mime
    payload = value
    if value.startswith("data:") and "," in value:
        header, payload = value.split(",", 1)
        mime = header[5:].split(";", 1)[0] or default_mime
    return base64.b64decode(payload), mime


def to_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code-fence markers (```html / ```) and trim whitespace.

    Args:
        text: Raw model output, possibly wrapped in fences

    Returns:
        Text with every fence marker removed
    """
    if not text:
        return ""
    return _FENCE_RE.sub("", text).strip()


def encode_text_base64(text: str) -> str:
    """Base64-encode text as UTF-8 so non-Latin characters survive the round trip."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")
