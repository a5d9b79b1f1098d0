"""
Batch masking of image files and folders
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from ..data.constants import DEFAULT_PATCH_SIZE, DEFAULT_RATIO
from ..data.image_io import load_image, save_image
from ..data.mask_generator import PatchMaskGenerator
from ..utils.path import is_supported_image_format, list_files, output_path_for
from ..utils.random import spawn_generators

__all__ = [
    "BatchProcessingError",
    "BatchResult",
    "process_image",
    "process_folder",
]

_logger = logging.getLogger(__name__)


class BatchProcessingError(RuntimeError):
    """Raised when a file fails and the run is not allowed to continue past errors."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Failed to process {path}: {cause}")
        self.path = path


@dataclass
class BatchResult:
    processed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.processed) + len(self.skipped) + len(self.failed)


def process_image(
    input_file: str,
    input_root: str,
    output_root: str,
    generator: PatchMaskGenerator,
    rng: Optional[np.random.Generator] = None,
) -> Optional[str]:
    """Mask one file and write it as PNG under ``output_root``, mirroring its place under ``input_root``.

    Returns:
        The written path, or None if the file is not a supported image.
    """
    if not is_supported_image_format(input_file):
        return None

    output_file = output_path_for(input_file, input_root, output_root)
    # other workers may be creating the same folder
    os.makedirs(os.path.dirname(output_file), exist_ok=True)

    image = load_image(input_file)
    masked = generator.transform(image, rng=rng)
    save_image(masked, output_file)
    return output_file


def _find_output_collisions(files: List[str], input_root: str, output_root: str) -> Dict[str, str]:
    """Map each supported file to the earlier file that would be written to the same output path."""
    owners = {}
    collisions = {}
    for file in files:
        if not is_supported_image_format(file):
            continue
        output_file = os.path.normcase(output_path_for(file, input_root, output_root))
        if output_file in owners:
            collisions[file] = owners[output_file]
        else:
            owners[output_file] = file
    return collisions


def process_folder(
    input_path: str,
    output_dir: str,
    ratio: float = DEFAULT_RATIO,
    patch_size: int = DEFAULT_PATCH_SIZE,
    recursive: bool = False,
    num_workers: Optional[int] = None,
    continue_on_error: bool = False,
    seed: Optional[int] = None,
    show_progress: bool = True,
) -> BatchResult:
    """Mask a single image file or every image in a folder.

    Files are dispatched to a thread pool, one file per task. Unsupported files
    are skipped. By default the first failing file stops the run and raises
    ``BatchProcessingError``; with ``continue_on_error`` failures are logged and
    collected in the returned ``BatchResult`` instead. The same policy applies to
    single files, flat folders and recursive folders. Files that would be written
    to the same output path, such as ``a.png`` and ``a.jpg``, are failures too: all
    but the first in sorted order fail before any file is dispatched.

    Args:
        input_path: An image file or a folder of images.
        output_dir: Root folder of the masked images. Created if absent.
        ratio: Fraction of whole patches to mask. Default: 0.2.
        patch_size: Side length of a patch in pixels. Default: 16.
        recursive: Also walk the subfolders of ``input_path``. Default: False.
        num_workers: Number of worker threads. None lets the executor decide.
        continue_on_error: Keep going when a file fails. Default: False.
        seed: Seed for reproducible masks. Default: None.
        show_progress: Show a progress bar. Default: True.
    """
    generator = PatchMaskGenerator(ratio=ratio, patch_size=patch_size)

    if os.path.isfile(input_path):
        input_root = os.path.dirname(input_path)
        files = [input_path]
    elif os.path.isdir(input_path):
        input_root = input_path
        files = list_files(input_path, recursive=recursive)
    else:
        raise FileNotFoundError(f"Invalid input path provided: {input_path}")

    # inputs differing only by extension share an output path and must not be written concurrently
    collisions = _find_output_collisions(files, input_root, output_dir)
    if collisions and not continue_on_error:
        file, owner = next(iter(collisions.items()))
        raise BatchProcessingError(file, FileExistsError(f"its output path is also the output of {owner}"))

    os.makedirs(output_dir, exist_ok=True)
    _logger.info(
        f"Masking {len(files)} file(s) from {input_path} into {output_dir} "
        f"with ratio={generator.ratio}, patch_size={generator.patch_size}."
    )

    result = BatchResult()
    rngs = spawn_generators(seed, len(files))
    with ThreadPoolExecutor(max_workers=num_workers) as executor, tqdm(
        total=len(files), disable=not show_progress, unit="img"
    ) as pbar:
        for file, owner in collisions.items():
            message = f"its output path is also the output of {owner}"
            _logger.error(f"Failed to process {file}: {message}")
            result.failed.append((file, message))
            pbar.update(1)

        futures = {
            executor.submit(process_image, file, input_root, output_dir, generator, rng): file
            for file, rng in zip(files, rngs)
            if file not in collisions
        }
        for future in as_completed(futures):
            file = futures[future]
            pbar.update(1)
            try:
                output_file = future.result()
            except Exception as e:
                if not continue_on_error:
                    for pending in futures:
                        pending.cancel()
                    raise BatchProcessingError(file, e) from e
                _logger.error(f"Failed to process {file}: {e}")
                result.failed.append((file, str(e)))
                continue
            if output_file is None:
                _logger.debug(f"Skipped {file}, unsupported format.")
                result.skipped.append(file)
            else:
                result.processed.append(output_file)

    _logger.info(
        f"Done. {len(result.processed)} masked, {len(result.skipped)} skipped, {len(result.failed)} failed."
    )
    return result
