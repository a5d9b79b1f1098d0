""" Patch masking pipeline

Example:
    $ python mask.py --input=/path/to/images --output=/path/to/masked --ratio=0.2 --patch_size=16 --recursive
"""
import logging
import os
import sys

from fastmask.engine import BatchProcessingError, process_folder
from fastmask.utils import set_logger

from config import parse_args, save_args  # isort: skip

logger = logging.getLogger("fastmask.mask")


def main(argv=None):
    args = parse_args(argv)
    set_logger(name="fastmask", output_dir=args.log_dir, color=args.log_color)

    if args.log_dir is not None:
        save_args(args, os.path.join(args.log_dir, "args.yaml"))

    try:
        result = process_folder(
            args.input,
            args.output,
            ratio=args.ratio,
            patch_size=args.patch_size,
            recursive=args.recursive,
            num_workers=args.num_workers,
            continue_on_error=args.continue_on_error,
            seed=args.seed,
            show_progress=args.progress,
        )
    except (FileNotFoundError, BatchProcessingError, ValueError) as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 1

    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
