import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import aiofiles
import click
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from config import (
    ASPECT_RATIOS,
    BATCH_SIZE,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_BATCH_SIZE,
    DEFAULT_PERSONA,
    LOG_CONSOLE,
)
from neogen.batch_generator import BatchGenerator
from neogen.credentials import CredentialGate, EnvKeySelector
from neogen.exceptions import CredentialError
from neogen.models import GeneratedImage, GenerationRequest

console = LOG_CONSOLE
logger = logging.getLogger(__name__)


def ensure_credential(gate: CredentialGate) -> None:
    """Make sure an API key is selected, prompting once if it is not."""
    if gate.has_usable_credential():
        return
    gate.prompt_for_credential()
    if not gate.has_usable_credential():
        raise CredentialError("No API key selected. Set GEMINI_API_KEY or enter one when asked.")


async def save_images(images: List[GeneratedImage], output_dir: Path) -> List[Path]:
    """Write each image to output_dir under its download name."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for image in images:
        path = output_dir / image.download_name
        async with aiofiles.open(path, "wb") as f:
            await f.write(image.image_bytes)
        logger.info(f"Saved image to {path}")
        paths.append(path)
    return paths


async def run_generation(request: GenerationRequest,
                         batch_generator: Optional[BatchGenerator] = None) -> List[GeneratedImage]:
    """Run one batch with a progress bar on the console."""
    batch_generator = batch_generator or BatchGenerator()
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console
    )

    with progress:
        task = progress.add_task("Generating images", total=request.count)
        return await batch_generator.generate_batch(
            request.prompt,
            request.persona_instruction,
            request.count,
            request.aspect_ratio,
            lambda completed: progress.update(task, completed=completed),
        )


def render_results(images: List[GeneratedImage], requested: int,
                   saved: Optional[List[Path]] = None) -> None:
    table = Table(title=f"Generated {len(images)} of {requested} images")
    table.add_column("ID")
    table.add_column("Aspect ratio")
    table.add_column("Created")
    table.add_column("File")
    for i, image in enumerate(images):
        table.add_row(
            image.id,
            image.aspect_ratio,
            image.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            str(saved[i]) if saved else "-",
        )
    console.print(table)


@click.command()
@click.argument("prompt")
@click.option("--persona", "-p", default=DEFAULT_PERSONA, show_default=True,
              help="Style/persona instruction prepended to the prompt.")
@click.option("--count", "-n", default=DEFAULT_BATCH_SIZE, show_default=True,
              type=click.IntRange(BATCH_SIZE["min"], BATCH_SIZE["max"]),
              help="Number of images to generate.")
@click.option("--aspect-ratio", "-a", default=DEFAULT_ASPECT_RATIO, show_default=True,
              type=click.Choice(ASPECT_RATIOS), help="Aspect ratio of every image.")
@click.option("--output-dir", "-o", type=click.Path(file_okay=False, path_type=Path),
              help="Directory to download the generated images to.")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON on stdout.")
def main_cli(prompt: str, persona: str, count: int, aspect_ratio: str,
             output_dir: Optional[Path], as_json: bool):
    """Generate a batch of images for PROMPT."""
    if not prompt.strip():
        raise click.BadParameter("Prompt must not be empty.", param_hint="PROMPT")

    request = GenerationRequest(prompt=prompt, persona_instruction=persona,
                                aspect_ratio=aspect_ratio, count=count)
    try:
        request.validate()
    except ValueError as e:
        raise click.BadParameter(str(e))

    try:
        ensure_credential(CredentialGate(EnvKeySelector(console)))
    except CredentialError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    images = asyncio.run(run_generation(request))

    saved = None
    if output_dir is not None and images:
        saved = asyncio.run(save_images(images, output_dir))

    if as_json:
        click.echo(json.dumps([image.to_dict() for image in images], indent=2))
    else:
        render_results(images, request.count, saved)

    if not images:
        console.print("[red]No images were generated. See the log for details.[/red]")
        sys.exit(1)


if __name__ == '__main__':
    main_cli()
