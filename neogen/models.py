import base64
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any

from config import ASPECT_RATIOS

DATA_URI_PREFIX = "data:image/png;base64,"


def generate_id() -> str:
    """Return a fresh opaque identifier for a generated image."""
    return uuid.uuid4().hex


@dataclass
class GenerationRequest:
    """Data class for one user-initiated batch request."""
    prompt: str
    persona_instruction: str = ""
    aspect_ratio: str = "1:1"
    count: int = 1

    def validate(self) -> None:
        """
        Check the request before it is handed to the batch generator.

        Raises:
            ValueError: if the aspect ratio is not a supported token or the
                count is not a non-negative integer
        """
        if self.aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(
                f"Unsupported aspect ratio {self.aspect_ratio!r}, "
                f"expected one of {', '.join(ASPECT_RATIOS)}"
            )
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 0:
            raise ValueError(f"Image count must be a non-negative integer, got {self.count!r}")


@dataclass(frozen=True)
class GeneratedImage:
    """A single successfully generated image."""
    base64: str
    prompt: str
    aspect_ratio: str
    id: str = field(default_factory=generate_id)
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_image_data(cls, data: bytes, prompt: str, aspect_ratio: str) -> 'GeneratedImage':
        """Wrap raw image bytes (or an already encoded base64 string) in a PNG data URI."""
        if isinstance(data, (bytes, bytearray)):
            encoded = base64.b64encode(data).decode("ascii")
        else:
            encoded = str(data)
        return cls(base64=f"{DATA_URI_PREFIX}{encoded}", prompt=prompt, aspect_ratio=aspect_ratio)

    @property
    def image_bytes(self) -> bytes:
        _, _, payload = self.base64.partition(",")
        return base64.b64decode(payload)

    @property
    def download_name(self) -> str:
        # Items of one batch can settle within the same millisecond
        return f"neogen-{int(self.timestamp.timestamp() * 1000)}-{self.id[:8]}.png"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "prompt": self.prompt,
            "aspect_ratio": self.aspect_ratio,
            "timestamp": self.timestamp.isoformat(),
            "base64": self.base64,
        }
