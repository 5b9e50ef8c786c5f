"""Save dithered results as PNG."""

from __future__ import annotations

from pathlib import Path

from dither_studio.core.buffer import PixelBuffer
from dither_studio.core.geometry import magnify


def save_output(buffer: PixelBuffer, output_path: Path, display_zoom: int = 100) -> Path:
    """Write ``buffer`` to ``output_path`` as PNG.

    The image is magnified by whole pixel blocks for ``display_zoom``, the
    same way the preview draws it.
    """
    output_path = Path(output_path)
    if output_path.suffix.lower() != ".png":
        output_path = output_path.with_suffix(".png")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    magnify(buffer, display_zoom).to_image().save(output_path, "PNG", optimize=True)
    return output_path
