import logging
import math
import numbers
from fractions import Fraction
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image

from ..constants import DEFAULT_PATCH_SIZE, DEFAULT_RATIO, MASK_VALUE
from ..image_io import image_size
from .sampling import sample_without_replacement

__all__ = ["PatchMaskGenerator"]

_logger = logging.getLogger(__name__)

# palette indices are not colors, zeroing them is not a black mask
_UNMASKABLE_MODES = {"P", "PA"}


class PatchMaskGenerator:
    """Black out a random subset of the whole square patches of an image.

    The image is tiled with ``patch_size x patch_size`` patches from its top-left
    corner. Trailing strips narrower than a patch are never touched. Of the
    ``num_patches`` whole patches, ``min(num_patches, floor(num_patches * ratio))``
    are chosen uniformly without replacement and every pixel inside them is set
    to zero on all channels (fully transparent black for RGBA).

    Args:
        ratio: Fraction of whole patches to mask. Values outside ``[0, 1]`` are
            clamped. Default: 0.2.
        patch_size: Side length of a patch in pixels, a positive integer. Default: 16.
        seed: If given, calls without an explicit ``rng`` draw their generators
            from a seed sequence derived from it, making runs reproducible.
            Default: None.
    """

    def __init__(self, ratio: float = DEFAULT_RATIO, patch_size: int = DEFAULT_PATCH_SIZE, seed: Optional[int] = None):
        if isinstance(patch_size, bool) or not isinstance(patch_size, numbers.Integral) or patch_size <= 0:
            raise ValueError(f"patch_size must be a positive integer, but got {patch_size!r}.")
        ratio = float(ratio)
        if math.isnan(ratio):
            raise ValueError("ratio must be a number in [0, 1], but got nan.")
        if ratio < 0.0 or ratio > 1.0:
            clamped = min(max(ratio, 0.0), 1.0)
            _logger.warning(f"Mask ratio {ratio} is out of [0, 1] and is clamped to {clamped}.")
            ratio = clamped

        self.ratio = ratio
        # the shortest decimal of the float, so 100 * 0.29 floors to 29 and not 28
        self._ratio_exact = Fraction(repr(ratio))
        self.patch_size = int(patch_size)
        self.seed = seed
        self._seed_seq = np.random.SeedSequence(seed) if seed is not None else None

    def __repr__(self):
        return f"{self.__class__.__name__}(ratio={self.ratio}, patch_size={self.patch_size}, seed={self.seed})"

    def grid_shape(self, width: int, height: int) -> Tuple[int, int]:
        """Number of whole patches along each axis, as ``(patches_per_col, patches_per_row)``."""
        return height // self.patch_size, width // self.patch_size

    def mask_count(self, num_patches: int) -> int:
        num_patches = int(num_patches)
        return min(num_patches, math.floor(num_patches * self._ratio_exact))

    def _get_rng(self, rng: Optional[np.random.Generator] = None) -> np.random.Generator:
        if rng is not None:
            return rng
        if self._seed_seq is not None:
            return np.random.default_rng(self._seed_seq.spawn(1)[0])
        return np.random.default_rng()

    def select_patches(self, num_patches: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Linear (row-major) indices of the patches to mask."""
        return sample_without_replacement(num_patches, self.mask_count(num_patches), self._get_rng(rng))

    @staticmethod
    def patch_coords(indices: np.ndarray, patches_per_row: int) -> Tuple[np.ndarray, np.ndarray]:
        """Map linear patch indices to ``(rows, cols)`` with a single divmod over all of them."""
        return np.divmod(np.asarray(indices, dtype=np.int64), patches_per_row)

    def generate(self, width: int, height: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Patch-level mask of shape ``(patches_per_col, patches_per_row)``, 1 where a patch is masked."""
        patches_per_col, patches_per_row = self.grid_shape(width, height)
        mask = np.zeros((patches_per_col, patches_per_row), dtype=np.int32)
        num_patches = patches_per_col * patches_per_row
        if num_patches == 0:
            return mask

        rows, cols = self.patch_coords(self.select_patches(num_patches, rng), patches_per_row)
        mask[rows, cols] = 1
        return mask

    def _mask_array(self, image: np.ndarray, mask: np.ndarray) -> np.ndarray:
        tiled_h = mask.shape[0] * self.patch_size
        tiled_w = mask.shape[1] * self.patch_size
        pixel_mask = mask.repeat(self.patch_size, axis=0).repeat(self.patch_size, axis=1).astype(bool)
        image[:tiled_h, :tiled_w][pixel_mask] = MASK_VALUE
        return image

    def _mask_pil(self, image: Image.Image, mask: np.ndarray) -> Image.Image:
        image = image.copy()
        bands = len(image.getbands())
        fill = MASK_VALUE if bands == 1 else (MASK_VALUE,) * bands
        p = self.patch_size
        for row, col in zip(*np.nonzero(mask)):
            left, top = int(col) * p, int(row) * p
            image.paste(fill, (left, top, left + p, top + p))
        return image

    def transform(
        self, image: Union[Image.Image, np.ndarray], rng: Optional[np.random.Generator] = None
    ) -> Union[Image.Image, np.ndarray]:
        """Mask the image.

        ``numpy.ndarray`` inputs of shape ``(H, W)`` or ``(H, W, C)`` are written
        in place and returned. A PIL image is masked on a copy with the same
        mode and size, which is returned. Images smaller than one patch come
        back unmodified.
        """
        if isinstance(image, Image.Image):
            if image.mode in _UNMASKABLE_MODES:
                raise ValueError(f"Cannot mask an image of mode {image.mode}, convert it to RGBA first.")
        elif isinstance(image, np.ndarray):
            if image.ndim not in (2, 3):
                raise ValueError(f"Expect an array of shape (H, W) or (H, W, C), but got shape {image.shape}.")
            if not image.flags.writeable:
                raise ValueError("Cannot mask a read-only array in place, pass a writeable copy.")
        else:
            raise TypeError(f"Expect a PIL.Image.Image or numpy.ndarray, but got {type(image)}.")

        width, height = image_size(image)
        mask = self.generate(width, height, rng)
        _logger.debug(
            f"Image {width}x{height}, patch grid {mask.shape[1]}x{mask.shape[0]}, "
            f"masking {int(mask.sum())} of {mask.size} patches."
        )
        if not mask.any():
            return image

        if isinstance(image, Image.Image):
            return self._mask_pil(image, mask)
        return self._mask_array(image, mask)

    __call__ = transform
