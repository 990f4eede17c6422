#!/usr/bin/env python3
"""
Check that the configured Gemini key answers a text and an image request.
"""

from __future__ import annotations

import sys
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from studio.errors import StudioError  # noqa: E402
from studio.generation_gateway import GenerationGateway  # noqa: E402


def _fail(msg: str) -> int:
    print(f"ERROR: {msg}", file=sys.stderr)
    return 1


def main(argv: list[str]) -> int:
    load_dotenv()
    prompt = argv[1] if len(argv) > 1 else "a red circle"
    gateway = GenerationGateway()

    try:
        text = gateway.generate_text("Reply with the single word: ready")
    except StudioError as exc:
        return _fail(f"Text generation failed: {exc}")
    print(f"OK: text model replied {text.strip()!r}")

    try:
        artifact = gateway.generate_image(prompt, "1:1")
    except StudioError as exc:
        return _fail(f"Image generation failed: {exc}")
    print(f"OK: image model returned {len(artifact.payload)} chars of data URI")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
