"""fastmask init"""
from . import data, engine, utils
from .data import *
from .engine import *
from .utils import *
from .version import __version__

__all__ = []
__all__.extend(data.__all__)
__all__.extend(engine.__all__)
__all__.extend(utils.__all__)
