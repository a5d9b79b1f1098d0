"""Engine Tools"""
from . import batch
from .batch import *

__all__ = []
__all__.extend(batch.__all__)
