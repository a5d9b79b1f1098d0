"""Input discovery and output path mapping"""
import os
import pathlib
from typing import List

from ..data.constants import OUTPUT_EXTENSION, SUPPORTED_IMAGE_EXTENSIONS

__all__ = [
    "is_supported_image_format",
    "list_files",
    "output_path_for",
]


def is_supported_image_format(file_path: str) -> bool:
    """Whether the extension of ``file_path`` is a supported image format, ignoring case."""
    suffix = pathlib.Path(file_path).suffix
    if not suffix:
        return False
    return suffix[1:].lower() in SUPPORTED_IMAGE_EXTENSIONS


def list_files(input_dir: str, recursive: bool = False) -> List[str]:
    """List the regular files in ``input_dir``, descending into subfolders if ``recursive``."""
    if recursive:
        files = []
        for dirpath, _, filenames in os.walk(input_dir):
            for filename in filenames:
                path = os.path.join(dirpath, filename)
                if os.path.isfile(path):
                    files.append(path)
    else:
        with os.scandir(input_dir) as it:
            files = [entry.path for entry in it if entry.is_file()]
    return sorted(files)


def output_path_for(input_file: str, input_root: str, output_root: str, ext: str = OUTPUT_EXTENSION) -> str:
    """Mirror ``input_file`` from ``input_root`` into ``output_root`` and switch its extension to ``ext``.

    A file that does not lie under ``input_root`` keeps only its file name.
    """
    input_path = pathlib.Path(input_file)
    try:
        relative_path = input_path.relative_to(input_root)
    except ValueError:
        relative_path = pathlib.Path(input_path.name)
    return str((pathlib.Path(output_root) / relative_path).with_suffix(ext))
