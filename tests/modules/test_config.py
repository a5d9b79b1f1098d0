import sys

sys.path.append(".")

import pytest
import yaml

from config import _check_cfgs_in_parser, create_parser, parse_args, save_args


def test_checker_valid():
    cfgs = yaml.safe_load(
        """
        ratio: 0.5
        patch_size: 8
        """
    )
    _, parser = create_parser()
    _check_cfgs_in_parser(cfgs, parser)


def test_checker_invalid():
    cfgs = yaml.safe_load(
        """
        ratio: 0.5
        valid: False
        """
    )
    _, parser = create_parser()
    with pytest.raises(KeyError) as exc_info:
        _check_cfgs_in_parser(cfgs, parser)
    assert exc_info.type is KeyError
    assert exc_info.value.args[0] == "valid does not exist in ArgumentParser!"


def test_parse_args_defaults():
    args = parse_args(["-i", "in", "-o", "out"])
    assert args.input == "in"
    assert args.output == "out"
    assert args.ratio == 0.2
    assert args.patch_size == 16
    assert args.recursive is False
    assert args.continue_on_error is False


@pytest.mark.parametrize("ratio", [0.0, 0.75])
@pytest.mark.parametrize("patch_size", [4, 32])
def test_parse_args_without_yaml(ratio, patch_size):
    args = parse_args(["--input=in", "--output=out", f"--ratio={ratio}", f"--patch-size={patch_size}", "-n"])
    assert args.ratio == ratio
    assert args.patch_size == patch_size
    assert args.recursive is True


@pytest.mark.parametrize("argv", [["-o", "out"], ["-i", "in"], ["-i", "in", "-o", "out", "-p", "0"]])
def test_parse_args_invalid(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_parse_args_with_yaml(tmp_path):
    cfg_yaml = tmp_path / "mask.yaml"
    cfg_yaml.write_text("input: images\noutput: masked\nratio: 0.4\nrecursive: true\n")
    args = parse_args([f"--config={cfg_yaml}", "--ratio=0.6"])
    assert args.input == "images"
    assert args.output == "masked"
    assert args.recursive is True
    assert args.ratio == 0.6  # command line wins over the yaml file
    assert args.config == str(cfg_yaml)


def test_parse_args_with_invalid_yaml(tmp_path):
    cfg_yaml = tmp_path / "mask.yaml"
    cfg_yaml.write_text("input: images\nmode: 1\n")
    with pytest.raises(KeyError):
        parse_args([f"--config={cfg_yaml}"])


def test_save_args(tmp_path):
    args = parse_args(["-i", "in", "-o", "out", "--seed", "3"])
    filepath = str(tmp_path / "logs" / "args.yaml")
    save_args(args, filepath)
    with open(filepath) as f:
        saved = yaml.safe_load(f)
    assert saved["seed"] == 3
    assert saved["input"] == "in"


@pytest.mark.parametrize("cfg_text", ["patch_size: 0\n", "patch_size: -4\n", "patch_size: 2.5\n", "ratio: abc\n"])
def test_parse_args_yaml_values_checked(tmp_path, capsys, cfg_text):
    cfg_yaml = tmp_path / "mask.yaml"
    cfg_yaml.write_text("input: images\noutput: masked\n" + cfg_text)
    with pytest.raises(SystemExit) as exc_info:
        parse_args([f"--config={cfg_yaml}"])
    assert exc_info.value.code == 2
    assert cfg_text.split(":")[0] in capsys.readouterr().err


def test_parse_args_yaml_patch_size_int_like(tmp_path):
    cfg_yaml = tmp_path / "mask.yaml"
    cfg_yaml.write_text("input: images\noutput: masked\npatch_size: 8.0\n")
    args = parse_args([f"--config={cfg_yaml}"])
    assert args.patch_size == 8
    assert isinstance(args.patch_size, int)


def test_parse_args_ratio_nan(capsys):
    with pytest.raises(SystemExit) as exc_info:
        parse_args(["-i", "in", "-o", "out", "-r", "nan"])
    assert exc_info.value.code == 2
    assert "ratio" in capsys.readouterr().err
