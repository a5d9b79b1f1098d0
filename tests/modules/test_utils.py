"""Test utils"""
import sys
sys.path.append('.')

import logging
import os

import pytest

from fastmask.utils import (
    is_supported_image_format,
    list_files,
    output_path_for,
    set_logger,
    spawn_generators,
)


@pytest.mark.parametrize('path, expected', [
    ('a.png', True),
    ('dir/b.JPG', True),
    ('c.Tiff', True),
    ('d.webp', True),
    ('e.txt', False),
    ('f.png.bak', False),
    ('noext', False),
])
def test_is_supported_image_format(path, expected):
    assert is_supported_image_format(path) == expected


def _make_tree(root):
    (root / 'sub' / 'deep').mkdir(parents=True)
    for rel in ['a.png', 'b.txt', 'sub/c.jpg', 'sub/deep/d.bmp']:
        (root / rel).write_bytes(b'')


def test_list_files(tmp_path):
    _make_tree(tmp_path)
    flat = list_files(str(tmp_path))
    assert [os.path.relpath(p, tmp_path) for p in flat] == ['a.png', 'b.txt']

    nested = list_files(str(tmp_path), recursive=True)
    rel = sorted(os.path.relpath(p, tmp_path) for p in nested)
    assert rel == sorted(['a.png', 'b.txt', os.path.join('sub', 'c.jpg'), os.path.join('sub', 'deep', 'd.bmp')])


def test_output_path_for():
    out = output_path_for(os.path.join('in', 'sub', 'cat.JPG'), 'in', 'out')
    assert out == os.path.join('out', 'sub', 'cat.png')
    # a file outside the input root keeps its name only
    out = output_path_for(os.path.join('elsewhere', 'dog.bmp'), 'in', 'out')
    assert out == os.path.join('out', 'dog.png')


def test_spawn_generators_independent_and_seeded():
    a = spawn_generators(3, 4)
    b = spawn_generators(3, 4)
    draws_a = [g.integers(0, 2 ** 31, size=4).tolist() for g in a]
    draws_b = [g.integers(0, 2 ** 31, size=4).tolist() for g in b]
    assert draws_a == draws_b
    assert len({tuple(d) for d in draws_a}) == 4


def test_set_logger(tmp_path):
    logger = set_logger(name='fastmask.test_logger', output_dir=str(tmp_path), log_level=logging.DEBUG)
    assert set_logger(name='fastmask.test_logger') is logger
    assert not logger.propagate

    logger.info('hello')
    for handler in logger.handlers:
        handler.flush()
    with open(tmp_path / 'fastmask.log') as f:
        assert 'hello' in f.read()


def test_colorful_formatter():
    pytest.importorskip('termcolor')
    from fastmask.utils.logger import _ColorfulFormatter

    formatter = _ColorfulFormatter(fmt='%(levelname)s - %(message)s')
    record = logging.LogRecord('fastmask', logging.WARNING, __file__, 1, 'careful', None, None)
    text = formatter.format(record)
    assert 'careful' in text
    assert '\x1b[' in text
    # other handlers still see the plain level name
    assert record.levelname == 'WARNING'
