"""
Tagged view over the content parts of a Gemini response.
"""

from __future__ import annotations
import base64
from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class InlineDataPart:
    data: bytes
    mime_type: str = "application/octet-stream"

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/") or self.mime_type == "application/octet-stream"


ContentPart = Union[TextPart, InlineDataPart]


def _convert_part(part) -> Optional[ContentPart]:
    inline = getattr(part, "inline_data", None)
    if inline is not None and getattr(inline, "data", None):
        data = inline.data
        if isinstance(data, str):
            data = base64.b64decode(data)
        return InlineDataPart(data=data, mime_type=getattr(inline, "mime_type", None) or "application/octet-stream")
    text = getattr(part, "text", None)
    if text and not getattr(part, "thought", None):
        return TextPart(text=text)
    return None


def parts_from_response(response) -> List[ContentPart]:
    """Convert the first candidate's parts, in order. Unknown part types are dropped."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    raw_parts = getattr(content, "parts", None) or []
    parts = []
    for raw in raw_parts:
        converted = _convert_part(raw)
        if converted is not None:
            parts.append(converted)
    return parts


def first_inline_image(parts: List[ContentPart]) -> Optional[InlineDataPart]:
    for part in parts:
        if isinstance(part, InlineDataPart) and part.is_image:
            return part
    return None


def joined_text(parts: List[ContentPart]) -> str:
    return "".join(p.text for p in parts if isinstance(p, TextPart))
