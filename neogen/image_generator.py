import logging
from typing import Any, Callable, Optional

from google import genai
from google.genai import types

from config import ASPECT_RATIOS, IMAGE_GENERATION, IMAGE_SIZE, MODEL_ID
from neogen.credentials import get_api_key
from neogen.exceptions import CredentialError, NoImageDataError, ProviderCallError
from neogen.models import GeneratedImage

logger = logging.getLogger(__name__)

FALLBACK_ERROR_MESSAGE = "Failed to generate image"
NO_IMAGE_DATA_MESSAGE = "No image data found in response"
INVALID_KEY_MARKER = "Requested entity was not found"


def default_client_factory() -> genai.Client:
    """Build a Gemini client with whatever API key is selected right now."""
    return genai.Client(api_key=get_api_key())


def build_instruction(prompt: str, persona_instruction: str) -> str:
    """
    Combine persona and user prompt into a single instruction.

    Image models only partly honour the system instruction channel, so the
    persona is prepended to the prompt text itself.
    """
    if persona_instruction:
        return f"{persona_instruction}\n\nUser Request: {prompt}"
    return prompt


def extract_image_data(response: Any) -> Any:
    """
    Return the inline data of the first image part in a provider response.

    Args:
        response: GenerateContentResponse-like object

    Returns:
        Raw image bytes (or base64 text, depending on the SDK transport)

    Raises:
        NoImageDataError: if no part carries inline image data
    """
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        for part in parts:
            inline_data = getattr(part, "inline_data", None)
            if inline_data is not None and inline_data.data:
                return inline_data.data
            if getattr(part, "text", None):
                logger.debug(f"Ignoring text part: {part.text[:100]}")

    raise NoImageDataError(NO_IMAGE_DATA_MESSAGE)


class ImageGenerator:
    """Generates single images through the Gemini image models."""

    def __init__(self, client_factory: Optional[Callable[[], Any]] = None,
                 model: str = MODEL_ID, image_size: str = IMAGE_SIZE):
        self.client_factory = client_factory or default_client_factory
        self.model = model
        self.image_size = image_size

    def _build_config(self, aspect_ratio: str) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_modalities=IMAGE_GENERATION["response_modalities"],
            image_config=types.ImageConfig(
                aspect_ratio=aspect_ratio,
                image_size=self.image_size,
            ),
        )

    async def generate_one(self, prompt: str, persona_instruction: str,
                           aspect_ratio: str) -> GeneratedImage:
        """
        Generate one image for a prompt.

        Args:
            prompt: User prompt, used as given
            persona_instruction: Style/persona text prepended to the prompt, may be empty
            aspect_ratio: One of the supported ratio tokens, e.g. "1:1"

        Returns:
            GeneratedImage carrying the requested aspect ratio

        Raises:
            ValueError: unsupported aspect ratio
            NoImageDataError: the response held no image part
            ProviderCallError: the provider call failed
        """
        if aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio: {aspect_ratio}")

        instruction = build_instruction(prompt, persona_instruction)

        try:
            # A new client per call so a freshly selected key is always in effect
            client = self.client_factory()
            logger.debug(f"Requesting {self.model} image ({aspect_ratio}, {self.image_size})")
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=instruction,
                config=self._build_config(aspect_ratio),
            )
            data = extract_image_data(response)

        except NoImageDataError as e:
            logger.error(f"Generation error: {str(e)}")
            raise
        except Exception as e:
            message = str(e) or FALLBACK_ERROR_MESSAGE
            logger.error(f"Generation error: {message}")
            if INVALID_KEY_MARKER in message:
                raise CredentialError(f"API key invalid or expired: {message}") from e
            raise ProviderCallError(message) from e

        return GeneratedImage.from_image_data(data, prompt=prompt, aspect_ratio=aspect_ratio)


async def generate_one(prompt: str, persona_instruction: str, aspect_ratio: str) -> GeneratedImage:
    """Generate one image with the default client configuration."""
    return await ImageGenerator().generate_one(prompt, persona_instruction, aspect_ratio)
