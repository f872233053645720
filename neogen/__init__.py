"""
neogen
Batch image generation on top of the Gemini image models.

This package provides:
- Single image generation with a persona prepended to the prompt
- Concurrent batch generation with per-item progress and partial-failure tolerance
- An API key gate for interactive and non-interactive hosts
"""

__version__ = "0.1.0"
__license__ = "MIT"

import logging

from neogen.batch_generator import BatchGenerator, generate_batch
from neogen.credentials import CredentialGate, EnvKeySelector, get_api_key
from neogen.exceptions import (
    CredentialError,
    ImageGenerationError,
    NoImageDataError,
    ProviderCallError,
)
from neogen.image_generator import ImageGenerator, generate_one
from neogen.models import GeneratedImage, GenerationRequest

__all__ = [
    "BatchGenerator",
    "generate_batch",
    "ImageGenerator",
    "generate_one",
    "GeneratedImage",
    "GenerationRequest",
    "CredentialGate",
    "EnvKeySelector",
    "get_api_key",
    "ImageGenerationError",
    "ProviderCallError",
    "NoImageDataError",
    "CredentialError",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
