from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from .errors import CoverImageError
from .presets import DEFAULT_THEME


IMAGEN_MODEL = "imagen-4.0-generate-001"
IMAGEN_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    f"{IMAGEN_MODEL}:predict"
)
API_KEY_ENV = "GEMINI_API_KEY"
REQUEST_TIMEOUT = 120
THEME_STYLE_HINTS: Dict[str, str] = {
    "minimal": "minimalist, clean, modern design, white space, subtle colors",
    "elegant": "elegant, sophisticated, warm tones, classic aesthetic, literary feel",
    "warm": "warm, cozy, soft lighting, pastel colors, inviting atmosphere",
    "dark": "dark mode aesthetic, moody, high contrast, neon accents, modern",
}


@dataclass(frozen=True)
class CoverImage:
    base64: str
    mime_type: str
    prompt: str


def build_cover_prompt(title: str, content: str, theme: str) -> str:
    style = THEME_STYLE_HINTS.get(theme, THEME_STYLE_HINTS[DEFAULT_THEME])
    preview = " ".join(content[:300].split())
    return (
        f'Create an artistic illustration for an article titled "{title}".\n'
        f"Style: {style}.\n"
        f"The article begins: {preview}\n"
        "The image should be visually appealing as a cover image for social media, "
        "abstract and artistic rather than literal, "
        "suitable for Xiaohongshu (Chinese lifestyle platform).\n"
        "No text or words in the image.\n"
        "High quality, professional design."
    )


def _request_prediction(prompt: str, ratio: str, api_key: str) -> Dict:
    response = requests.post(
        IMAGEN_ENDPOINT,
        params={"key": api_key},
        json={
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": ratio,
                "safetyFilterLevel": "BLOCK_LOW_AND_ABOVE",
                "personGeneration": "DONT_ALLOW",
            },
        },
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


def generate_cover_image(
    title: str,
    content: str,
    theme: str,
    ratio: str = "3:4",
    api_key: Optional[str] = None,
    debug: bool = False,
    strict: bool = False,
) -> Optional[CoverImage]:
    """Ask the Imagen API for a banner image.

    Returns ``None`` when no API key is configured or the request fails, so
    the first page falls back to a plain text title. With ``strict`` those
    cases raise :class:`CoverImageError` instead.
    """
    key = api_key or os.environ.get(API_KEY_ENV)
    if not key:
        message = f"{API_KEY_ENV} not set; skipping cover image generation."
        if strict:
            raise CoverImageError(message)
        if debug:
            print(f"[DEBUG] {message}")
        return None

    prompt = build_cover_prompt(title, content, theme)
    try:
        data = _request_prediction(prompt, ratio, key)
    except (requests.RequestException, ValueError) as exc:
        if strict:
            raise CoverImageError(f"Cover image request failed: {exc}") from exc
        if debug:
            print(f"[DEBUG] Cover image request failed: {exc}")
        return None

    predictions = data.get("predictions") or []
    if not predictions or not predictions[0].get("bytesBase64Encoded"):
        if strict:
            raise CoverImageError("Cover image response contained no image.")
        if debug:
            print("[DEBUG] Cover image response contained no image.")
        return None

    prediction = predictions[0]
    return CoverImage(
        base64=prediction["bytesBase64Encoded"],
        mime_type=prediction.get("mimeType") or "image/png",
        prompt=prompt,
    )
