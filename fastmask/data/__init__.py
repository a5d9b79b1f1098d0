"""
Data processing
"""
from . import image_io, mask_generator
from .constants import *
from .image_io import *
from .mask_generator import *

__all__ = []
__all__.extend(image_io.__all__)
__all__.extend(mask_generator.__all__)
