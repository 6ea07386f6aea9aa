"""Compositing Engine: stacks RGBA layers over a base plate and encodes JPEG.

Invariants:
    - The canvas is never resized; mismatched layers are resized to the canvas (Lanczos)
    - Layers are drawn strictly in the given order, each exactly once, at (0, 0)
    - A layer that fails to decode aborts composition (DecodeError with its index)
    - Output is always JPEG; encoder failure raises EncodeError

Design Decisions:
    - Pillow Image.alpha_composite for standard "over" blending
    - Image.open is lazy, so decode forces load() to surface corrupt data here
"""

import io
import logging
import struct
import time

from PIL import Image, UnidentifiedImageError

from sandwich.core.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "JPEG"
DEFAULT_QUALITY = 90

_DECODE_ERRORS = (
    UnidentifiedImageError, OSError, ValueError, SyntaxError, EOFError,
    struct.error, Image.DecompressionBombError,
)


def decode_image(data: bytes, layer_index: int | None = None) -> Image.Image:
    """Decode bytes to an RGBA image. layer_index=None means the base plate."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except _DECODE_ERRORS as e:
        raise DecodeError(str(e) or type(e).__name__, layer_index=layer_index)
    return image.convert("RGBA")


class Compositor:
    """Mutable canvas for one composite. Build, add layers in order, finalize once."""

    def __init__(self, base_data: bytes, quality: int = DEFAULT_QUALITY):
        self.canvas = decode_image(base_data)
        self.quality = quality
        self.layers_added = 0
        logger.debug(f"Loaded base image: {self.canvas.width}x{self.canvas.height}")

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.canvas.size

    def add_layer(self, layer_data: bytes, index: int | None = None) -> None:
        """Decode, fit to canvas, and alpha-composite one layer on top."""
        layer_index = self.layers_added if index is None else index
        layer = decode_image(layer_data, layer_index=layer_index)
        if layer.size != self.canvas.size:
            logger.debug(
                f"Resizing layer {layer_index} from "
                f"{layer.width}x{layer.height} to {self.canvas.width}x{self.canvas.height}",
            )
            layer = layer.resize(self.canvas.size, Image.Resampling.LANCZOS)
        self.canvas = Image.alpha_composite(self.canvas, layer)
        self.layers_added += 1

    def finalize(self) -> bytes:
        """Encode the canvas as JPEG."""
        buffer = io.BytesIO()
        try:
            self.canvas.convert("RGB").save(
                buffer, OUTPUT_FORMAT, quality=self.quality,
            )
        except (OSError, ValueError) as e:
            raise EncodeError(str(e) or type(e).__name__)
        return buffer.getvalue()


def compose_layers(
    base_data: bytes, layers: list[bytes], quality: int = DEFAULT_QUALITY,
) -> bytes:
    """Composite layers over the base in order and return JPEG bytes."""
    start = time.perf_counter()
    compositor = Compositor(base_data, quality=quality)
    for index, layer_data in enumerate(layers):
        compositor.add_layer(layer_data, index=index)
    result = compositor.finalize()
    duration_ms = int((time.perf_counter() - start) * 1000)
    logger.info(
        f"Composite created: {len(result)} bytes from {len(layers)} layers",
        extra={"duration_ms": duration_ms},
    )
    return result
