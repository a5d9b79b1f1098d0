"""
Constant parameters of patch masking
"""

DEFAULT_RATIO = 0.2
DEFAULT_PATCH_SIZE = 16

# every channel zero, so RGBA images become fully transparent black
MASK_VALUE = 0

SUPPORTED_IMAGE_EXTENSIONS = (
    "avif", "bmp", "dds", "farbfeld", "gif", "hdr", "ico", "jpeg",
    "jpg", "png", "pnm", "qoi", "tga", "tif", "tiff", "webp",
)  # fmt: skip

OUTPUT_EXTENSION = ".png"
