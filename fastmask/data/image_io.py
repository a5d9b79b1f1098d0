"""
Image decoding and encoding
"""
import logging
from typing import Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

__all__ = [
    "ImageLoadError",
    "ImageSaveError",
    "load_image",
    "save_image",
    "image_size",
]

_logger = logging.getLogger(__name__)

# modes whose pixels are plain channel values and can be masked as they are
KEEP_MODES = {"RGBA", "RGB", "LA", "L", "I", "I;16", "F"}
# palette and bilevel images may carry transparency, so they go to RGBA
TO_RGBA_MODES = {"P", "PA", "1"}


class ImageLoadError(OSError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to load image {path}: {reason}")
        self.path = path


class ImageSaveError(OSError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to save image {path}: {reason}")
        self.path = path


def load_image(path: str) -> Image.Image:
    """Decode an image file fully into memory, normalising its mode for masking."""
    try:
        with Image.open(path) as img:
            img.load()
            if img.mode in KEEP_MODES:
                image = img.copy()
            elif img.mode in TO_RGBA_MODES:
                image = img.convert("RGBA")
            else:
                image = img.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageLoadError(path, str(e)) from e

    if image.mode != img.mode:
        _logger.debug(f"Converted {path} from mode {img.mode} to {image.mode}.")
    return image


def save_image(image: Union[Image.Image, np.ndarray], path: str) -> None:
    """Encode ``image`` to ``path``, the format is chosen from the file extension."""
    if isinstance(image, np.ndarray):
        image = Image.fromarray(image)
    try:
        image.save(path)
    except (OSError, ValueError, KeyError) as e:
        raise ImageSaveError(path, str(e)) from e


def image_size(image: Union[Image.Image, np.ndarray]) -> Tuple[int, int]:
    """Return ``(width, height)``."""
    if isinstance(image, np.ndarray):
        return image.shape[1], image.shape[0]
    return image.size
