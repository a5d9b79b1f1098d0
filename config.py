import argparse
import logging
import math
import os

import yaml

from fastmask.data.constants import DEFAULT_PATCH_SIZE, DEFAULT_RATIO

logger = logging.getLogger(__name__)


def str2bool(v):
    if isinstance(v, bool):
        return v
    if v.lower() in ("yes", "true", "1"):
        return True
    elif v.lower() in ("no", "false", "0"):
        return False
    else:
        raise argparse.ArgumentTypeError("Boolean value expected.")


def positive_int(v):
    if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
        raise argparse.ArgumentTypeError(f"Positive integer expected, got {v}.")
    value = int(v)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"Positive integer expected, got {v}.")
    return value


# fmt: off
def create_parser():
    # The first arg parser parses out only the --config argument, this argument is used to
    # load a yaml file containing key-values that override the defaults for the main parser below
    parser_config = argparse.ArgumentParser(description='Masking Config', add_help=False)
    parser_config.add_argument('-c', '--config', type=str, default='',
                               help='YAML config file specifying default arguments (default="")')

    # The main parser. It inherits the --config argument for better help information.
    parser = argparse.ArgumentParser(description='Random patch masking of images', parents=[parser_config])

    # Input/output parameters
    group = parser.add_argument_group('Input/output parameters')
    group.add_argument('-i', '--input', type=str, default=None,
                       help='Image file or folder containing images (required)')
    group.add_argument('-o', '--output', type=str, default=None,
                       help='Output folder for the masked images (required)')
    group.add_argument('-n', '--recursive', type=str2bool, nargs='?', const=True, default=False,
                       help='Also process images in nested folders (default=False)')

    # Mask parameters
    group = parser.add_argument_group('Mask parameters')
    group.add_argument('-r', '--ratio', type=float, default=DEFAULT_RATIO,
                       help=f'Fraction of whole patches to mask, clamped to [0, 1] (default={DEFAULT_RATIO})')
    group.add_argument('-p', '--patch_size', '--patch-size', type=positive_int, default=DEFAULT_PATCH_SIZE,
                       help=f'Side length of a square patch in pixels (default={DEFAULT_PATCH_SIZE})')
    group.add_argument('--seed', type=int, default=None,
                       help='Seed for reproducible masks. None means a different mask every run (default=None)')

    # System parameters
    group = parser.add_argument_group('System parameters')
    group.add_argument('--num_workers', type=int, default=None,
                       help='Number of worker threads. None lets the executor decide (default=None)')
    group.add_argument('--continue_on_error', type=str2bool, nargs='?', const=True, default=False,
                       help='Log and skip files that fail instead of aborting the run (default=False)')
    group.add_argument('--progress', type=str2bool, nargs='?', const=True, default=True,
                       help='Show a progress bar (default=True)')
    group.add_argument('--log_dir', type=str, default=None,
                       help='Folder to also write the log file into (default=None)')
    group.add_argument('--log_color', type=str2bool, nargs='?', const=True, default=False,
                       help="Color the console log, needs 'rich' or 'termcolor' (default=False)")

    return parser_config, parser


# fmt: on


def _check_cfgs_in_parser(cfgs: dict, parser: argparse.ArgumentParser):
    actions_dest = [action.dest for action in parser._actions]
    defaults_key = parser._defaults.keys()
    for k in cfgs.keys():
        if k not in actions_dest and k not in defaults_key:
            raise KeyError(f"{k} does not exist in ArgumentParser!")


def parse_args(args=None):
    parser_config, parser = create_parser()
    # Do we have a config file to parse?
    args_config, remaining = parser_config.parse_known_args(args)
    if args_config.config:
        with open(args_config.config, "r") as f:
            cfg = yaml.safe_load(f) or {}
            _check_cfgs_in_parser(cfg, parser)
            parser.set_defaults(**cfg)
            parser.set_defaults(config=args_config.config)

    # The main arg parser parses the rest of the args, the usual
    # defaults will have been overridden if config file specified.
    args = parser.parse_args(remaining)
    # input and output may come from the yaml file, so they are checked here instead of by argparse
    missing = [f"--{k}" for k in ("input", "output") if getattr(args, k) is None]
    if missing:
        parser.error(f"the following arguments are required: {', '.join(missing)}")
    # values from the yaml file skip the argparse type checks
    try:
        args.patch_size = positive_int(args.patch_size)
    except (TypeError, ValueError, argparse.ArgumentTypeError):
        parser.error(f"argument -p/--patch_size: positive integer expected, got {args.patch_size!r}")
    try:
        args.ratio = float(args.ratio)
    except (TypeError, ValueError):
        parser.error(f"argument -r/--ratio: number expected, got {args.ratio!r}")
    if math.isnan(args.ratio):
        parser.error("argument -r/--ratio: number expected, got nan")
    return args


def save_args(args: argparse.Namespace, filepath: str) -> None:
    """Save ``args`` to a YAML file.
    Args:
        args (Namespace): The parsed arguments to be saved.
        filepath (str): A filepath ends with ``.yaml``.
    """
    assert isinstance(args, argparse.Namespace)
    assert filepath.endswith(".yaml")
    os.makedirs(os.path.dirname(os.path.abspath(filepath)), exist_ok=True)
    with open(filepath, "w") as f:
        yaml.safe_dump(args.__dict__, f)
    logger.info(f"Args is saved to {filepath}.")
