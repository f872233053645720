"""
Shared fixtures: fake Gemini responses and clients, no network access.
"""

import asyncio
from types import SimpleNamespace
from typing import Any, List

import pytest

from config import API_KEY_ENV_VARS
from neogen.models import GeneratedImage

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"


def text_part(text: str) -> SimpleNamespace:
    return SimpleNamespace(text=text, inline_data=None)


def image_part(data: Any = PNG_BYTES, mime_type: str = "image/png") -> SimpleNamespace:
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def make_response(*parts) -> SimpleNamespace:
    """Build a GenerateContentResponse-shaped object with one candidate."""
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


class FakeModels:
    """Stands in for client.aio.models, recording every request."""

    def __init__(self, outcome: Any):
        self.outcome = outcome
        self.calls: List[dict] = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


class FakeClientFactory:
    """Client factory handing out a new fake client per call."""

    def __init__(self, outcome: Any):
        self.models = FakeModels(outcome)
        self.created = 0

    def __call__(self):
        self.created += 1
        return SimpleNamespace(aio=SimpleNamespace(models=self.models))


class ScriptedImageGenerator:
    """
    Image generator whose calls follow a script.

    Each entry is (delay_seconds, outcome); an exception outcome is raised,
    anything else is returned as the generated image.
    """

    def __init__(self, script):
        self.script = list(script)
        self.calls = []

    async def generate_one(self, prompt, persona_instruction, aspect_ratio):
        index = len(self.calls)
        self.calls.append((prompt, persona_instruction, aspect_ratio))
        delay, outcome = self.script[index]
        await asyncio.sleep(delay)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def make_image(prompt: str = "a cat", aspect_ratio: str = "1:1") -> GeneratedImage:
    return GeneratedImage.from_image_data(PNG_BYTES, prompt=prompt, aspect_ratio=aspect_ratio)


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def no_api_key(monkeypatch):
    """Blank out every API key variable; the originals are restored afterwards."""
    for name in API_KEY_ENV_VARS:
        monkeypatch.setenv(name, "")


@pytest.fixture
def api_key(monkeypatch, no_api_key):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return "test-key"
