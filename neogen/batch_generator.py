import asyncio
import logging
from typing import Callable, List, Optional

from config import BATCH_SIZE
from neogen.image_generator import ImageGenerator
from neogen.models import GeneratedImage

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class BatchGenerator:
    """Handles concurrent generation of several images for one prompt."""

    def __init__(self, image_generator: Optional[ImageGenerator] = None,
                 max_batch_size: int = BATCH_SIZE["max"]):
        self.image_generator = image_generator or ImageGenerator()
        self.max_batch_size = max_batch_size

    def _get_batch_size(self, requested_size: int) -> int:
        """
        Determine batch size within configured limits.

        Args:
            requested_size: Number of images the caller asked for

        Returns:
            int: 0 for non-positive requests, otherwise at most max_batch_size
        """
        if requested_size <= 0:
            return 0
        if requested_size > self.max_batch_size:
            logger.warning(f"Requested {requested_size} images, "
                           f"limiting batch to {self.max_batch_size}")
            return self.max_batch_size
        return requested_size

    async def generate_batch(self, prompt: str, persona_instruction: str, count: int,
                             aspect_ratio: str,
                             on_progress: Optional[ProgressCallback] = None) -> List[GeneratedImage]:
        """
        Generate `count` images concurrently and keep the ones that succeed.

        Every item settles exactly once; each settlement, success or failure,
        advances the progress counter by one and reports it. Failed items are
        logged and left out of the result.

        Args:
            prompt: User prompt shared by every item
            persona_instruction: Persona text shared by every item, may be empty
            count: Number of images to request
            aspect_ratio: Ratio token requested for every item
            on_progress: Optional callback receiving the number of settled items

        Returns:
            Successful images in the order they settled, possibly empty
        """
        size = self._get_batch_size(count)
        if size == 0:
            return []

        results: List[GeneratedImage] = []
        completed = 0

        def settle() -> None:
            nonlocal completed
            completed += 1
            if on_progress is None:
                return
            try:
                on_progress(completed)
            except Exception as e:
                logger.error(f"Progress callback failed at {completed}/{size}: {str(e)}",
                             exc_info=True)

        async def run_item(index: int) -> None:
            try:
                image = await self.image_generator.generate_one(
                    prompt, persona_instruction, aspect_ratio
                )
            except Exception as e:
                logger.error(f"Individual image generation failed ({index + 1}/{size}): {str(e)}",
                             exc_info=True)
                settle()
                return

            results.append(image)
            settle()

        logger.info(f"Generating {size} images ({aspect_ratio})")
        await asyncio.gather(*(run_item(i) for i in range(size)))

        if len(results) < size:
            logger.warning(f"{size - len(results)} of {size} images failed")
        else:
            logger.info(f"Generated {len(results)} images")
        return results


async def generate_batch(prompt: str, persona_instruction: str, count: int, aspect_ratio: str,
                         on_progress: Optional[ProgressCallback] = None) -> List[GeneratedImage]:
    """Generate a batch with the default generator configuration."""
    return await BatchGenerator().generate_batch(
        prompt, persona_instruction, count, aspect_ratio, on_progress
    )
