"""Patch mask generation"""
from . import patch_mask, sampling
from .patch_mask import *
from .sampling import *

__all__ = []
__all__.extend(patch_mask.__all__)
__all__.extend(sampling.__all__)
