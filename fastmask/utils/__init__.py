"""Utility Tools"""
from . import logger, path, random
from .logger import *
from .path import *
from .random import *

__all__ = []
__all__.extend(logger.__all__)
__all__.extend(path.__all__)
__all__.extend(random.__all__)
